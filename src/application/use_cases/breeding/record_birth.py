from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from datetime import datetime
from decimal import Decimal
from uuid import UUID

from src.application.errors import NotFound, PartialBatchFailure, ValidationError
from src.application.interfaces.repositories.animals import AnimalRegistry
from src.application.use_cases.breeding.update_breeding_record import RecordUpdate
from src.domain.models.animal import Animal
from src.domain.models.breeding_record import BreedingRecord
from src.domain.value_objects.animal_status import AnimalStage, AnimalStatus

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class OffspringSpec:
    animal_number: str
    gender: str | None = None
    weight: Decimal | None = None
    color: str | None = None
    status: str = AnimalStatus.HEALTHY.value
    health_notes: str | None = None


def _offspring_notes(spec: OffspringSpec) -> str:
    notes = f"Color: {spec.color or 'not specified'}. Status: {spec.status}"
    if spec.health_notes:
        notes += f". Health issues: {spec.health_notes}"
    return notes


async def create_offspring(
    registry: AnimalRegistry,
    record: BreedingRecord,
    female_id: UUID,
    actual_date: datetime,
    offspring: list[OffspringSpec],
) -> list[UUID]:
    """Create one newborn per OffspringSpec, in order, and return their ids.

    Creations are committed one by one. If creation `k` fails the ids of
    offspring 1..k-1 travel on the raised PartialBatchFailure; nothing is
    linked to the breeding record.
    """
    info = record.find_female(female_id)
    if info is None:
        raise NotFound(f"Female {female_id} is not part of breeding {record.breeding_id}")
    if info.actual_birth_date is not None:
        raise ValidationError(
            f"Birth already recorded for female {female_id} in breeding {record.breeding_id}"
        )
    if any(not spec.animal_number.strip() for spec in offspring):
        raise ValidationError("Every offspring needs an animal number")

    mother = await registry.get(record.farm_id, female_id)
    if mother is None:
        raise NotFound(f"Mother {female_id} not found")
    if await registry.get(record.farm_id, record.male_id) is None:
        raise NotFound(f"Father {record.male_id} not found")

    created: list[UUID] = []
    for index, spec in enumerate(offspring, start=1):
        animal = Animal.create(
            farm_id=record.farm_id,
            animal_number=spec.animal_number.strip(),
            species=mother.species,
            stage=AnimalStage.NEWBORN.value,
            gender=spec.gender,
            weight=spec.weight,
            color=spec.color,
            status=spec.status,
            health_notes=spec.health_notes,
            birth_date=actual_date,
            mother_id=female_id,
            father_id=record.male_id,
            notes=_offspring_notes(spec),
        )
        try:
            created.append(await registry.create(animal))
        except Exception as exc:
            logger.error(
                "Offspring %d/%d failed for breeding %s: %s (already created: %s)",
                index,
                len(offspring),
                record.breeding_id,
                exc,
                created,
                exc_info=True,
            )
            raise PartialBatchFailure(
                f"Offspring {index} of {len(offspring)} could not be created",
                created_ids=created,
            ) from exc
    return created


def build_update(
    record: BreedingRecord,
    female_id: UUID,
    actual_date: datetime,
    offspring_ids: list[UUID],
) -> RecordUpdate:
    info = record.find_female(female_id)
    if info is None:
        raise NotFound(f"Female {female_id} is not part of breeding {record.breeding_id}")
    if info.actual_birth_date is not None:
        raise ValidationError(
            f"Birth already recorded for female {female_id} in breeding {record.breeding_id}"
        )
    females = [
        replace(item, actual_birth_date=actual_date, offspring=[*item.offspring, *offspring_ids])
        if item.female_id == female_id
        else item
        for item in record.female_breeding_info
    ]
    return RecordUpdate.of(female_breeding_info=females)
