from __future__ import annotations

import copy
from dataclasses import dataclass, field
from typing import Any

from src.application.errors import ValidationError
from src.application.interfaces.unit_of_work import UnitOfWork
from src.domain.models.breeding_record import BreedingRecord
from src.utils.datetime_tz import local_day_start

UPDATABLE_FIELDS = frozenset(
    {
        "breeding_id",
        "male_id",
        "breeding_date",
        "female_breeding_info",
        "notes",
        "comments",
    }
)


@dataclass(slots=True)
class RecordUpdate:
    """Partial update; only the keys present in `values` are merged."""

    values: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def of(cls, **values: Any) -> RecordUpdate:
        unknown = set(values) - UPDATABLE_FIELDS
        if unknown:
            raise ValidationError(f"Unknown breeding record fields: {', '.join(sorted(unknown))}")
        return cls(values=values)

    def has(self, field_name: str) -> bool:
        return field_name in self.values


def apply_update(record: BreedingRecord, update: RecordUpdate) -> BreedingRecord:
    """Return a copy of `record` with the update merged and its dates normalized."""
    merged = copy.deepcopy(record)
    values = update.values

    if update.has("breeding_id"):
        merged.breeding_id = values["breeding_id"] or ""
    if update.has("male_id"):
        if values["male_id"] is None:
            raise ValidationError("A breeding record needs a male")
        merged.male_id = values["male_id"]
    if update.has("notes"):
        merged.notes = values["notes"] or ""
    if update.has("breeding_date"):
        breeding_date = values["breeding_date"]
        merged.breeding_date = local_day_start(breeding_date) if breeding_date else None
    if update.has("female_breeding_info") and values["female_breeding_info"] is not None:
        merged.female_breeding_info = [info.normalized() for info in values["female_breeding_info"]]
    if update.has("comments"):
        merged.comments = list(values["comments"] or [])

    problems = merged.invariant_violations()
    if problems:
        raise ValidationError("Invalid breeding record", details={"errors": problems})
    merged.bump_version()
    return merged


async def execute(
    uow: UnitOfWork,
    record: BreedingRecord,
    update: RecordUpdate,
) -> BreedingRecord:
    merged = apply_update(record, update)
    return await uow.breeding_records.update(merged)
