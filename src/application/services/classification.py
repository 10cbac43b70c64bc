from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable

from src.domain.models.breeding_record import BreedingRecord


@dataclass(slots=True)
class BreedingClassification:
    needs_pregnancy_confirmation: list[BreedingRecord] = field(default_factory=list)
    needs_birth_confirmation: list[BreedingRecord] = field(default_factory=list)
    finished: list[BreedingRecord] = field(default_factory=list)


def _most_recent_first(records: list[BreedingRecord]) -> list[BreedingRecord]:
    dated = [r for r in records if r.breeding_date is not None]
    undated = [r for r in records if r.breeding_date is None]
    dated.sort(key=lambda r: r.breeding_date, reverse=True)
    return dated + undated


def classify(records: Iterable[BreedingRecord]) -> BreedingClassification:
    """Put each record in exactly one bucket.

    A record with any female that is neither confirmed nor born needs a
    pregnancy confirmation, even if another female is waiting for birth.
    """
    pregnancy: list[BreedingRecord] = []
    birth: list[BreedingRecord] = []
    finished: list[BreedingRecord] = []

    for record in records:
        pending_confirmation = False
        pending_birth = False
        for info in record.female_breeding_info:
            if info.actual_birth_date is not None:
                continue
            if info.pregnancy_confirmed_date is not None:
                pending_birth = True
            else:
                pending_confirmation = True
        if pending_confirmation:
            pregnancy.append(record)
        elif pending_birth:
            birth.append(record)
        else:
            finished.append(record)

    return BreedingClassification(
        needs_pregnancy_confirmation=_most_recent_first(pregnancy),
        needs_birth_confirmation=_most_recent_first(birth),
        finished=_most_recent_first(finished),
    )
