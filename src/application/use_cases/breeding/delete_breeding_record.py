from __future__ import annotations

from uuid import UUID

from src.application.interfaces.unit_of_work import UnitOfWork


async def execute(uow: UnitOfWork, farm_id: UUID, record_id: UUID) -> None:
    # A missing target is reported by the repository as NotFound
    await uow.breeding_records.delete(farm_id, record_id)
