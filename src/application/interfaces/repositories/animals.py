from __future__ import annotations

from typing import Protocol
from uuid import UUID

from src.domain.models.animal import Animal


class AnimalRepository(Protocol):
    async def add(self, animal: Animal) -> Animal: ...

    async def get(self, farm_id: UUID, animal_id: UUID) -> Animal | None: ...

    async def delete(self, farm_id: UUID, animal_id: UUID) -> bool: ...


class AnimalRegistry(Protocol):
    """Animal store used by the birth flow; every call is committed on its own."""

    async def get(self, farm_id: UUID, animal_id: UUID) -> Animal | None: ...

    async def create(self, animal: Animal) -> UUID: ...

    async def retract(self, farm_id: UUID, animal_ids: list[UUID]) -> list[UUID]: ...
