from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Iterable
from uuid import UUID

from src.application.services.birth_window import BirthsWindow
from src.domain.models.breeding_record import BreedingRecord, FemaleBreedingInfo


@dataclass(frozen=True, slots=True)
class BreedingStats:
    total_breedings: int
    active_pregnancies: int
    upcoming_births: int
    total_offspring: int


@dataclass(frozen=True, slots=True)
class RecentBirth:
    record: BreedingRecord
    info: FemaleBreedingInfo


def records_by_animal(records: Iterable[BreedingRecord], animal_id: UUID) -> list[BreedingRecord]:
    return [r for r in records if r.involves(animal_id)]


def active_pregnancies(records: Iterable[BreedingRecord]) -> list[BreedingRecord]:
    return [r for r in records if any(info.is_pregnant for info in r.female_breeding_info)]


def compute_stats(records: list[BreedingRecord], window: BirthsWindow) -> BreedingStats:
    return BreedingStats(
        total_breedings=len(records),
        active_pregnancies=sum(
            1 for r in records for info in r.female_breeding_info if info.is_pregnant
        ),
        upcoming_births=len(window.upcoming),
        total_offspring=sum(len(info.offspring) for r in records for info in r.female_breeding_info),
    )


def recent_births(
    records: Iterable[BreedingRecord],
    days: int,
    *,
    now: datetime | None = None,
) -> list[RecentBirth]:
    """Finished females with offspring born within the last `days` days, newest first."""
    cutoff = (now or datetime.now(timezone.utc)) - timedelta(days=days)
    births = [
        RecentBirth(record=r, info=info)
        for r in records
        for info in r.female_breeding_info
        if info.actual_birth_date is not None and info.offspring and info.actual_birth_date >= cutoff
    ]
    births.sort(key=lambda b: b.info.actual_birth_date, reverse=True)
    return births
