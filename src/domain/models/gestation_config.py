from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, timedelta
from typing import TYPE_CHECKING, TypeVar

from src.domain.value_objects.species import Species
from src.utils.datetime_tz import local_date, local_today

if TYPE_CHECKING:
    from src.domain.models.breeding_record import BreedingRecord

D = TypeVar("D", date, datetime)


@dataclass(frozen=True, slots=True)
class GestationConfig:
    species: Species
    gestation_days: int
    average_litter_size: float
    min_breeding_age: int  # months
    breeding_cycle_days: int
    weaning_days: int
    description: str
    breeding_season_start: int | None = None  # month 1-12
    breeding_season_end: int | None = None
    max_breeding_age: int | None = None  # months


GESTATION_CONFIGS: dict[Species, GestationConfig] = {
    Species.SHEEP: GestationConfig(
        species=Species.SHEEP,
        gestation_days=147,
        breeding_season_start=4,
        breeding_season_end=7,
        average_litter_size=1.5,
        min_breeding_age=8,
        max_breeding_age=96,
        breeding_cycle_days=17,
        weaning_days=60,
        description="Sheep: ~5 month gestation, season from April to July",
    ),
    Species.GOAT: GestationConfig(
        species=Species.GOAT,
        gestation_days=150,
        breeding_season_start=8,
        breeding_season_end=1,  # wraps into January
        average_litter_size=2,
        min_breeding_age=7,
        max_breeding_age=84,
        breeding_cycle_days=21,
        weaning_days=60,
        description="Goats: ~5 month gestation, season from August to January",
    ),
    Species.COW: GestationConfig(
        species=Species.COW,
        gestation_days=283,
        breeding_season_start=1,
        breeding_season_end=12,
        average_litter_size=1,
        min_breeding_age=15,
        max_breeding_age=180,
        breeding_cycle_days=21,
        weaning_days=120,
        description="Cows: ~9.3 month gestation, breeds all year",
    ),
    Species.PIG: GestationConfig(
        species=Species.PIG,
        gestation_days=114,
        breeding_season_start=1,
        breeding_season_end=12,
        average_litter_size=8,
        min_breeding_age=6,
        max_breeding_age=60,
        breeding_cycle_days=21,
        weaning_days=28,
        description="Pigs: ~3.8 month gestation, large litters",
    ),
    Species.CHICKEN: GestationConfig(
        species=Species.CHICKEN,
        gestation_days=21,  # egg incubation
        breeding_season_start=1,
        breeding_season_end=12,
        average_litter_size=8,
        min_breeding_age=5,
        max_breeding_age=36,
        breeding_cycle_days=1,
        weaning_days=0,
        description="Chickens: ~21 day incubation, laying all year",
    ),
    Species.DOG: GestationConfig(
        species=Species.DOG,
        gestation_days=63,
        breeding_season_start=1,
        breeding_season_end=12,
        average_litter_size=5.5,
        min_breeding_age=12,
        max_breeding_age=84,
        breeding_cycle_days=180,
        weaning_days=56,
        description="Dogs: ~63 day gestation, two heat cycles per year",
    ),
    Species.CAT: GestationConfig(
        species=Species.CAT,
        gestation_days=64,
        breeding_season_start=2,
        breeding_season_end=9,
        average_litter_size=4,
        min_breeding_age=6,
        max_breeding_age=84,
        breeding_cycle_days=14,
        weaning_days=56,
        description="Cats: ~64 day gestation, season mostly spring and summer",
    ),
    Species.HORSE: GestationConfig(
        species=Species.HORSE,
        gestation_days=340,
        breeding_season_start=3,
        breeding_season_end=8,
        average_litter_size=1,
        min_breeding_age=36,
        max_breeding_age=180,
        breeding_cycle_days=21,
        weaning_days=180,
        description="Horses: ~340 day gestation, season mostly spring and summer",
    ),
    Species.OTHER: GestationConfig(
        species=Species.OTHER,
        gestation_days=120,
        breeding_season_start=1,
        breeding_season_end=12,
        average_litter_size=2,
        min_breeding_age=12,
        max_breeding_age=96,
        breeding_cycle_days=21,
        weaning_days=60,
        description="Generic configuration for other species",
    ),
}


def get_gestation_config(species: Species | str) -> GestationConfig:
    try:
        return GESTATION_CONFIGS[Species(species)]
    except ValueError as exc:
        raise ValueError(f"Unknown species: {species}") from exc


def expected_birth_date(breeding_date: D, species: Species | str) -> D:
    return breeding_date + timedelta(days=get_gestation_config(species).gestation_days)


def next_expected_birth_date(
    record: BreedingRecord,
    species: Species | str,
    *,
    now: datetime | None = None,
) -> datetime | None:
    """Earliest expected birth among confirmed females that is not in the past.

    Stored expected dates win; otherwise the confirmation date plus gestation
    is used. Falls back to breeding date plus gestation.
    """
    today = local_today(now)
    candidates: list[datetime] = []
    for info in record.female_breeding_info:
        if info.pregnancy_confirmed_date is None:
            continue
        if info.expected_birth_date is not None:
            candidates.append(info.expected_birth_date)
            continue
        candidates.append(expected_birth_date(info.pregnancy_confirmed_date, species))

    upcoming = [d for d in candidates if local_date(d) >= today]
    if upcoming:
        return min(upcoming)
    if record.breeding_date is None:
        return None
    return expected_birth_date(record.breeding_date, species)


def is_in_breeding_season(value: date | datetime, species: Species | str) -> bool:
    config = get_gestation_config(species)
    start, end = config.breeding_season_start, config.breeding_season_end
    if not start or not end:
        return True
    month = local_date(value).month
    if start > end:
        return month >= start or month <= end
    return start <= month <= end


def breeding_advice(
    breeding_date: date | datetime,
    species: Species | str,
    female_age_months: int | None = None,
) -> list[str]:
    config = get_gestation_config(species)
    advice: list[str] = []

    if not is_in_breeding_season(breeding_date, species):
        advice.append(f"Outside the optimal breeding season for {config.species.value}")

    if female_age_months:
        if female_age_months < config.min_breeding_age:
            advice.append(
                f"Female may be too young ({female_age_months} months, "
                f"minimum {config.min_breeding_age} months)"
            )
        if config.max_breeding_age and female_age_months > config.max_breeding_age:
            advice.append(
                f"Female may be too old ({female_age_months} months, "
                f"maximum {config.max_breeding_age} months)"
            )

    advice.append(config.description)
    advice.append(f"Average expected litter size: {config.average_litter_size}")
    return advice


def weaning_days(species: Species | str, override: int | None = None) -> int:
    if override is not None and override > 0:
        return override
    return get_gestation_config(species).weaning_days
