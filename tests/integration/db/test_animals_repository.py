from __future__ import annotations

from uuid import uuid4

import pytest
from sqlalchemy import event

from src.application.errors import PersistenceError, ValidationError
from src.domain.models.animal import Animal
from src.infrastructure.db.base import Base
from src.infrastructure.db.session import create_engine, create_session_factory
from src.infrastructure.repos.animals_sqlalchemy import AnimalsSQLAlchemyRepository


@pytest.fixture()
async def session_factory(test_settings):
    engine = create_engine(test_settings.database_url)

    # Enforce foreign keys the way Postgres does
    @event.listens_for(engine.sync_engine, "connect")
    def _enable_foreign_keys(dbapi_connection, connection_record):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield create_session_factory(engine)
    await engine.dispose()


async def add_animal(session_factory, animal: Animal) -> Animal:
    async with session_factory() as session:
        created = await AnimalsSQLAlchemyRepository(session).add(animal)
        await session.commit()
    return created


async def test_duplicate_animal_number_is_a_validation_error(session_factory):
    farm = uuid4()
    await add_animal(
        session_factory, Animal.create(farm_id=farm, animal_number="T-1", species="cow")
    )

    with pytest.raises(ValidationError, match="already exists"):
        await add_animal(
            session_factory, Animal.create(farm_id=farm, animal_number="T-1", species="cow")
        )


async def test_unknown_parent_is_not_reported_as_duplicate(session_factory):
    farm = uuid4()
    mother = await add_animal(
        session_factory, Animal.create(farm_id=farm, animal_number="T-2", species="cow")
    )
    calf = Animal.create(
        farm_id=farm,
        animal_number="T-2-A",
        species="cow",
        stage="newborn",
        mother_id=mother.id,
        father_id=uuid4(),
    )

    with pytest.raises(PersistenceError) as exc_info:
        await add_animal(session_factory, calf)

    assert "already exists" not in exc_info.value.message
