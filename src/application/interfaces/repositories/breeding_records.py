from __future__ import annotations

from datetime import datetime
from typing import Protocol
from uuid import UUID

from src.domain.models.breeding_record import BreedingRecord


class BreedingRecordsRepository(Protocol):
    async def add(self, record: BreedingRecord) -> BreedingRecord: ...

    async def update(self, record: BreedingRecord) -> BreedingRecord: ...

    async def get(self, farm_id: UUID, record_id: UUID) -> BreedingRecord | None: ...

    async def list(self, farm_id: UUID) -> list[BreedingRecord]: ...

    async def count_by_breeding_day(
        self,
        farm_id: UUID,
        day_start: datetime,
        day_end: datetime,
    ) -> int: ...

    async def delete(self, farm_id: UUID, record_id: UUID) -> None: ...
