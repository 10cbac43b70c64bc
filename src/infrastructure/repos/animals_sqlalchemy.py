from __future__ import annotations

import logging
from collections.abc import Callable
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from src.application.errors import PersistenceError, ValidationError
from src.application.interfaces.repositories.animals import AnimalRegistry, AnimalRepository
from src.application.interfaces.unit_of_work import UnitOfWork
from src.domain.models.animal import Animal
from src.infrastructure.db.orm.animal import AnimalORM
from src.infrastructure.repos.breeding_records_sqlalchemy import persistence_errors
from src.utils.datetime_tz import to_utc, utc_to_local

logger = logging.getLogger(__name__)

ANIMAL_NUMBER_CONSTRAINT = "ux_animals_farm_number"


def _is_duplicate_number(exc: IntegrityError) -> bool:
    # Postgres names the constraint, SQLite names the columns
    reason = str(exc.orig)
    return ANIMAL_NUMBER_CONSTRAINT in reason or "animals.animal_number" in reason


class AnimalsSQLAlchemyRepository(AnimalRepository):
    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    def _to_domain(self, orm: AnimalORM) -> Animal:
        return Animal(
            id=orm.id,
            farm_id=orm.farm_id,
            animal_number=orm.animal_number,
            species=orm.species,
            stage=orm.stage,
            gender=orm.gender,
            weight=orm.weight,
            color=orm.color,
            status=orm.status,
            health_notes=orm.health_notes,
            birth_date=utc_to_local(orm.birth_date),
            mother_id=orm.mother_id,
            father_id=orm.father_id,
            notes=orm.notes,
            created_at=utc_to_local(orm.created_at),
            updated_at=utc_to_local(orm.updated_at),
            version=orm.version,
        )

    async def add(self, animal: Animal) -> Animal:
        orm = AnimalORM(
            id=animal.id,
            farm_id=animal.farm_id,
            animal_number=animal.animal_number,
            species=animal.species,
            stage=animal.stage,
            gender=animal.gender,
            weight=animal.weight,
            color=animal.color,
            status=animal.status,
            health_notes=animal.health_notes,
            birth_date=to_utc(animal.birth_date) if animal.birth_date else None,
            mother_id=animal.mother_id,
            father_id=animal.father_id,
            notes=animal.notes,
            created_at=animal.created_at,
            updated_at=animal.updated_at,
            version=animal.version,
        )
        self.session.add(orm)
        try:
            await self.session.flush()
        except IntegrityError as exc:
            if _is_duplicate_number(exc):
                raise ValidationError(
                    f"Animal number {animal.animal_number} already exists on this farm"
                ) from exc
            raise PersistenceError(
                f"Could not create animal {animal.animal_number}", details={"reason": str(exc.orig)}
            ) from exc
        return self._to_domain(orm)

    async def get(self, farm_id: UUID, animal_id: UUID) -> Animal | None:
        stmt = (
            select(AnimalORM)
            .where(AnimalORM.farm_id == farm_id)
            .where(AnimalORM.id == animal_id)
        )
        with persistence_errors("load animal"):
            result = await self.session.execute(stmt)
            orm = result.scalar_one_or_none()
        return self._to_domain(orm) if orm else None

    async def delete(self, farm_id: UUID, animal_id: UUID) -> bool:
        with persistence_errors("delete animal"):
            stmt = (
                select(AnimalORM)
                .where(AnimalORM.farm_id == farm_id)
                .where(AnimalORM.id == animal_id)
            )
            result = await self.session.execute(stmt)
            orm = result.scalar_one_or_none()
            if not orm:
                return False
            await self.session.delete(orm)
            await self.session.flush()
        return True


class SQLAlchemyAnimalRegistry(AnimalRegistry):
    """Animal registry where every call runs in, and commits, its own unit of work."""

    def __init__(self, uow_factory: Callable[[], UnitOfWork]) -> None:
        self._uow_factory = uow_factory

    async def get(self, farm_id: UUID, animal_id: UUID) -> Animal | None:
        async with self._uow_factory() as uow:
            return await uow.animals.get(farm_id, animal_id)

    async def create(self, animal: Animal) -> UUID:
        async with self._uow_factory() as uow:
            created = await uow.animals.add(animal)
            await uow.commit()
        logger.info("Animal %s created with id %s", created.animal_number, created.id)
        return created.id

    async def retract(self, farm_id: UUID, animal_ids: list[UUID]) -> list[UUID]:
        removed: list[UUID] = []
        async with self._uow_factory() as uow:
            for animal_id in animal_ids:
                if await uow.animals.delete(farm_id, animal_id):
                    removed.append(animal_id)
            await uow.commit()
        return removed
