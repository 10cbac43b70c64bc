from __future__ import annotations

import logging
from collections.abc import Collection
from uuid import UUID

from src.application.errors import ValidationError
from src.application.interfaces.repositories.animals import AnimalRegistry
from src.domain.value_objects.animal_status import AnimalStage

logger = logging.getLogger(__name__)


async def execute(
    registry: AnimalRegistry,
    farm_id: UUID,
    animal_ids: list[UUID],
    linked_ids: Collection[UUID] = (),
) -> list[UUID]:
    """Compensate a failed birth by removing offspring that were left unlinked.

    Only newborns that no breeding record lists as offspring can be retracted.
    Nothing is removed when any id is refused; unknown ids are skipped.
    """
    if not animal_ids:
        return []
    refused: list[str] = []
    for animal_id in animal_ids:
        if animal_id in linked_ids:
            refused.append(str(animal_id))
            continue
        animal = await registry.get(farm_id, animal_id)
        if animal is not None and animal.stage != AnimalStage.NEWBORN.value:
            refused.append(str(animal_id))
    if refused:
        raise ValidationError(
            "Only unlinked newborn offspring can be retracted",
            details={"refused_ids": refused},
        )
    removed = await registry.retract(farm_id, animal_ids)
    logger.info("Retracted %d of %d orphaned offspring", len(removed), len(animal_ids))
    return removed
