from __future__ import annotations

import copy
from datetime import datetime, timezone
from uuid import UUID, uuid4

import pytest

from src.application.errors import NotFound
from src.application.services.breeding_manager import BreedingManager
from src.domain.models.animal import Animal
from src.domain.models.breeding_record import BreedingRecord

# 10:00 on 2026-03-10 in America/Guayaquil
NOW = datetime(2026, 3, 10, 15, 0, tzinfo=timezone.utc)


class InMemoryBreedingRecords:
    def __init__(self) -> None:
        self.items: dict[UUID, BreedingRecord] = {}
        self.fail_with: Exception | None = None
        self.update_calls = 0

    async def add(self, record: BreedingRecord) -> BreedingRecord:
        self.items[record.id] = copy.deepcopy(record)
        return copy.deepcopy(record)

    async def update(self, record: BreedingRecord) -> BreedingRecord:
        self.update_calls += 1
        if self.fail_with is not None:
            raise self.fail_with
        if record.id not in self.items:
            raise NotFound(f"Breeding record {record.id} not found")
        self.items[record.id] = copy.deepcopy(record)
        return copy.deepcopy(record)

    async def get(self, farm_id, record_id):
        record = self.items.get(record_id)
        if record is None or record.farm_id != farm_id:
            return None
        return copy.deepcopy(record)

    async def list(self, farm_id):
        return [copy.deepcopy(r) for r in self.items.values() if r.farm_id == farm_id]

    async def count_by_breeding_day(self, farm_id, day_start, day_end):
        return sum(
            1
            for r in self.items.values()
            if r.farm_id == farm_id and r.breeding_date and day_start <= r.breeding_date < day_end
        )

    async def delete(self, farm_id, record_id):
        if self.fail_with is not None:
            raise self.fail_with
        record = self.items.get(record_id)
        if record is None or record.farm_id != farm_id:
            raise NotFound(f"Breeding record {record_id} not found")
        del self.items[record_id]


class FakeUnitOfWork:
    def __init__(self, breeding_records: InMemoryBreedingRecords) -> None:
        self.breeding_records = breeding_records
        self.animals = None
        self.commits = 0

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        return None

    async def commit(self) -> None:
        self.commits += 1

    async def rollback(self) -> None:
        return None


class StubAnimalRegistry:
    def __init__(self) -> None:
        self.animals: dict[UUID, Animal] = {}
        self.created: list[Animal] = []
        self.retracted: list[UUID] = []
        self.fail_on: int | None = None

    def seed(self, farm_id: UUID, species: str = "sheep", gender: str = "female") -> Animal:
        animal = Animal.create(
            farm_id=farm_id,
            animal_number=f"A-{len(self.animals) + 1}",
            species=species,
            gender=gender,
        )
        self.animals[animal.id] = animal
        return animal

    async def get(self, farm_id, animal_id):
        animal = self.animals.get(animal_id)
        return animal if animal is not None and animal.farm_id == farm_id else None

    async def create(self, animal: Animal) -> UUID:
        if self.fail_on is not None and len(self.created) + 1 == self.fail_on:
            raise RuntimeError("animal registry unavailable")
        self.created.append(animal)
        self.animals[animal.id] = animal
        return animal.id

    async def retract(self, farm_id, animal_ids):
        removed = [i for i in animal_ids if self.animals.pop(i, None) is not None]
        self.retracted.extend(removed)
        return removed


@pytest.fixture()
def farm() -> UUID:
    return uuid4()


@pytest.fixture()
def farmer() -> UUID:
    return uuid4()


@pytest.fixture()
def store() -> InMemoryBreedingRecords:
    return InMemoryBreedingRecords()


@pytest.fixture()
def registry() -> StubAnimalRegistry:
    return StubAnimalRegistry()


@pytest.fixture()
def uow_factory(store):
    return lambda: FakeUnitOfWork(store)


@pytest.fixture()
def manager(uow_factory, registry, farm) -> BreedingManager:
    return BreedingManager(uow_factory, registry, farm, clock=lambda: NOW)
