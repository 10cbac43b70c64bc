from __future__ import annotations

from uuid import UUID

from src.application.use_cases.breeding.update_breeding_record import RecordUpdate
from src.domain.models.breeding_record import BreedingRecord


def build_update(record: BreedingRecord, animal_id: UUID) -> RecordUpdate | None:
    """Update that drops `animal_id` from the record, or None when the record must go.

    Removing the male, or the last female, deletes the whole record.
    """
    if record.male_id == animal_id:
        return None
    remaining = [info for info in record.female_breeding_info if info.female_id != animal_id]
    if not remaining:
        return None
    return RecordUpdate.of(female_breeding_info=remaining)
