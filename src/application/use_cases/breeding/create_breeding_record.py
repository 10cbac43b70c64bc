from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime, timedelta, timezone
from uuid import UUID

from src.application.errors import ValidationError
from src.application.interfaces.unit_of_work import UnitOfWork
from src.domain.models.breeding_record import BreedingRecord, FemaleBreedingInfo
from src.utils.datetime_tz import local_date, local_day_start


@dataclass(slots=True)
class CreateBreedingRecordInput:
    male_id: UUID
    female_breeding_info: list[FemaleBreedingInfo] = field(default_factory=list)
    breeding_date: datetime | None = None
    notes: str | None = None


def format_breeding_id(day: date, sequence: int) -> str:
    """Human readable id: dd-mm-yy-NN."""
    return f"{day:%d-%m-%y}-{sequence:02d}"


async def execute(
    uow: UnitOfWork,
    farm_id: UUID | None,
    actor_user_id: UUID | None,
    payload: CreateBreedingRecordInput,
    *,
    now: datetime | None = None,
) -> BreedingRecord:
    if actor_user_id is None:
        raise ValidationError("User not authenticated")
    if farm_id is None:
        raise ValidationError("Select a farm first")
    if not payload.female_breeding_info:
        raise ValidationError("A breeding record needs at least one female")

    # Without a breeding date the id is still based on today
    id_day = local_day_start(payload.breeding_date or now or datetime.now(timezone.utc))
    same_day = await uow.breeding_records.count_by_breeding_day(
        farm_id, id_day, id_day + timedelta(days=1)
    )
    breeding_id = format_breeding_id(local_date(id_day), same_day + 1)

    record = BreedingRecord.create(
        farm_id=farm_id,
        farmer_id=actor_user_id,
        breeding_id=breeding_id,
        male_id=payload.male_id,
        female_breeding_info=payload.female_breeding_info,
        breeding_date=payload.breeding_date,
        notes=payload.notes,
    )
    problems = record.invariant_violations()
    if problems:
        raise ValidationError("Invalid breeding record", details={"errors": problems})

    return await uow.breeding_records.add(record)
