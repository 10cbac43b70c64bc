from __future__ import annotations

from collections.abc import Mapping
from dataclasses import replace
from datetime import datetime
from uuid import UUID

from src.application.errors import NotFound, ValidationError
from src.application.use_cases.breeding.update_breeding_record import RecordUpdate
from src.domain.models.breeding_record import BreedingRecord
from src.domain.models.gestation_config import expected_birth_date
from src.domain.value_objects.species import Species
from src.utils.datetime_tz import local_date, local_day_start

SpeciesLookup = Species | str | Mapping[UUID, Species | str]


def _species_for(species: SpeciesLookup, female_id: UUID) -> Species | str:
    if isinstance(species, Mapping):
        if female_id not in species:
            raise ValidationError(f"Species of female {female_id} is unknown")
        return species[female_id]
    return species


def build_update(
    record: BreedingRecord,
    female_ids: list[UUID],
    confirmed_date: datetime,
    species: SpeciesLookup,
) -> RecordUpdate:
    """Confirm the given females on one date.

    Each confirmed female expects her birth `gestation_days` of her species
    after the confirmation date. `species` is either one species for every
    female or a mapping from female id to species.
    """
    wanted = list(dict.fromkeys(female_ids))
    if not wanted:
        raise ValidationError("Select at least one female to confirm")
    for female_id in wanted:
        info = record.find_female(female_id)
        if info is None:
            raise NotFound(f"Female {female_id} is not part of breeding {record.breeding_id}")
        if info.actual_birth_date is not None:
            raise ValidationError(f"Female {female_id} already gave birth")

    confirmed = local_day_start(confirmed_date)
    if record.breeding_date is not None and local_date(confirmed) < local_date(record.breeding_date):
        raise ValidationError("Pregnancy cannot be confirmed before the breeding date")

    females = []
    for info in record.female_breeding_info:
        if info.female_id not in wanted:
            females.append(info)
            continue
        try:
            expected = expected_birth_date(confirmed, _species_for(species, info.female_id))
        except ValueError as exc:
            raise ValidationError(str(exc)) from exc
        females.append(
            replace(info, pregnancy_confirmed_date=confirmed, expected_birth_date=expected)
        )
    return RecordUpdate.of(female_breeding_info=females)
