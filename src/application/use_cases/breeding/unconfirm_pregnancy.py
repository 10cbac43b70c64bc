from __future__ import annotations

from dataclasses import replace
from uuid import UUID

from src.application.errors import NotFound
from src.application.use_cases.breeding.update_breeding_record import RecordUpdate
from src.domain.models.breeding_record import BreedingRecord


def build_update(record: BreedingRecord, female_id: UUID) -> RecordUpdate:
    """Clear the confirmation and expected birth of one female, nothing else."""
    if record.find_female(female_id) is None:
        raise NotFound(f"Female {female_id} is not part of breeding {record.breeding_id}")
    females = [
        replace(info, pregnancy_confirmed_date=None, expected_birth_date=None)
        if info.female_id == female_id
        else info
        for info in record.female_breeding_info
    ]
    return RecordUpdate.of(female_breeding_info=females)
