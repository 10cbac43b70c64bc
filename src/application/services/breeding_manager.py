from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import datetime, timezone
from uuid import UUID

from src.application.errors import NotFound, ValidationError
from src.application.interfaces.repositories.animals import AnimalRegistry
from src.application.interfaces.unit_of_work import UnitOfWork
from src.application.services.birth_window import (
    BirthsWindow,
    BirthsWindowSummary,
    BirthWindowCache,
    signature,
)
from src.application.services.breeding_views import (
    BreedingStats,
    RecentBirth,
    active_pregnancies,
    compute_stats,
    recent_births,
    records_by_animal,
)
from src.application.services.classification import BreedingClassification, classify
from src.application.use_cases.breeding import (
    add_comment,
    confirm_pregnancy,
    create_breeding_record,
    delete_breeding_record,
    record_birth,
    remove_from_breeding,
    retract_offspring,
    unconfirm_pregnancy,
    update_breeding_record,
    update_comment_urgency,
)
from src.application.use_cases.breeding.record_birth import OffspringSpec
from src.application.use_cases.breeding.update_breeding_record import RecordUpdate
from src.domain.models.breeding_record import BreedingRecord, FemaleBreedingInfo
from src.domain.models.comment import Comment
from src.domain.value_objects.urgency import Urgency
from src.utils.datetime_tz import local_today

logger = logging.getLogger(__name__)

Listener = Callable[[list[BreedingRecord]], None]


def _sort_key(record: BreedingRecord) -> tuple[bool, float]:
    # Most recent breeding first, undated last
    if record.breeding_date is None:
        return (True, 0.0)
    return (False, -record.breeding_date.timestamp())


class BreedingManager:
    """Working set of one farm's breeding records plus the commands that change it.

    Every command applies its change locally, awaits the store, then replaces
    the local entry with the stored one. A failed write puts the previous
    entry back and re-raises.
    """

    def __init__(
        self,
        uow_factory: Callable[[], UnitOfWork],
        animal_registry: AnimalRegistry,
        farm_id: UUID | None,
        *,
        clock: Callable[[], datetime] | None = None,
        default_window_days: int = 7,
        recent_births_days: int = 120,
    ) -> None:
        self._uow_factory = uow_factory
        self._animal_registry = animal_registry
        self.farm_id = farm_id
        self._clock = clock or (lambda: datetime.now(timezone.utc))
        self.default_window_days = default_window_days
        self.recent_births_days = recent_births_days
        self._records: list[BreedingRecord] = []
        self._revision = 0
        self._signature = ""
        self._listeners: list[Listener] = []
        self._cache = BirthWindowCache()
        self.loaded = False

    # ------------------------------------------------------------------ state

    @property
    def records(self) -> list[BreedingRecord]:
        return list(self._records)

    @property
    def revision(self) -> int:
        return self._revision

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Call `listener` with the new record list after every change."""
        self._listeners.append(listener)
        listener(self.records)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _changed(self, *, content: bool = True) -> None:
        if content:
            self._revision += 1
        snapshot = self.records
        for listener in list(self._listeners):
            listener(snapshot)

    def _index(self, record_id: UUID) -> int | None:
        for index, record in enumerate(self._records):
            if record.id == record_id:
                return index
        return None

    def _find(self, record_id: UUID) -> BreedingRecord | None:
        index = self._index(record_id)
        return self._records[index] if index is not None else None

    def _put(self, record: BreedingRecord) -> None:
        index = self._index(record.id)
        if index is None:
            self._records.append(record)
        else:
            self._records[index] = record
        self._records.sort(key=_sort_key)

    def _drop(self, record_id: UUID) -> None:
        self._records = [r for r in self._records if r.id != record_id]

    def _require_farm(self) -> UUID:
        if self.farm_id is None:
            raise ValidationError("Select a farm first")
        return self.farm_id

    def _today(self):
        return local_today(self._clock())

    async def load(self) -> list[BreedingRecord]:
        farm_id = self._require_farm()
        try:
            async with self._uow_factory() as uow:
                records = await uow.breeding_records.list(farm_id)
        except Exception as exc:
            logger.error(
                "Error loading breeding records for farm %s: %s", farm_id, exc, exc_info=True
            )
            raise
        records.sort(key=_sort_key)
        fresh = signature(records)
        content_changed = fresh != self._signature or not self.loaded
        self._records = records
        self._signature = fresh
        self.loaded = True
        self._changed(content=content_changed)
        return self.records

    async def _get_or_fetch(self, record_id: UUID) -> BreedingRecord:
        record = self._find(record_id)
        if record is not None:
            return record
        farm_id = self._require_farm()
        async with self._uow_factory() as uow:
            record = await uow.breeding_records.get(farm_id, record_id)
        if record is None:
            raise NotFound(f"Breeding record {record_id} not found")
        return record

    # --------------------------------------------------------------- commands

    async def create_record(
        self,
        actor_user_id: UUID | None,
        male_id: UUID,
        female_breeding_info: list[FemaleBreedingInfo],
        breeding_date: datetime | None = None,
        notes: str | None = None,
    ) -> BreedingRecord:
        payload = create_breeding_record.CreateBreedingRecordInput(
            male_id=male_id,
            female_breeding_info=female_breeding_info,
            breeding_date=breeding_date,
            notes=notes,
        )
        try:
            async with self._uow_factory() as uow:
                created = await create_breeding_record.execute(
                    uow, self.farm_id, actor_user_id, payload, now=self._clock()
                )
                await uow.commit()
        except Exception as exc:
            logger.error("Error creating breeding record: %s", exc, exc_info=True)
            raise
        self._put(created)
        self._changed()
        logger.info("Breeding %s created for farm %s", created.breeding_id, created.farm_id)
        return created

    async def update_record(self, record_id: UUID, update: RecordUpdate) -> BreedingRecord:
        try:
            current = await self._get_or_fetch(record_id)
            previous = self._find(record_id)
            self._put(update_breeding_record.apply_update(current, update))
            self._changed()
            try:
                async with self._uow_factory() as uow:
                    persisted = await update_breeding_record.execute(uow, current, update)
                    await uow.commit()
            except Exception:
                if previous is not None:
                    self._put(previous)
                else:
                    self._drop(record_id)
                self._changed()
                raise
        except Exception as exc:
            logger.error("Error updating breeding record %s: %s", record_id, exc, exc_info=True)
            raise
        self._put(persisted)
        self._changed()
        return persisted

    async def delete_record(self, record_id: UUID) -> None:
        try:
            farm_id = self._require_farm()
            previous = self._find(record_id)
            if previous is not None:
                self._drop(record_id)
                self._changed()
            try:
                async with self._uow_factory() as uow:
                    await delete_breeding_record.execute(uow, farm_id, record_id)
                    await uow.commit()
            except Exception:
                if previous is not None:
                    self._put(previous)
                    self._changed()
                raise
        except Exception as exc:
            logger.error("Error deleting breeding record %s: %s", record_id, exc, exc_info=True)
            raise
        logger.info("Breeding record %s deleted", record_id)

    async def confirm_pregnancy(
        self,
        record: BreedingRecord,
        female_ids: list[UUID],
        confirmed_date: datetime | None = None,
    ) -> BreedingRecord:
        """Confirm several females at once; defaults to confirming today."""
        farm_id = self._require_farm()
        current = self._find(record.id) or record
        species: dict[UUID, str] = {}
        male = None
        for female_id in female_ids:
            animal = await self._animal_registry.get(farm_id, female_id)
            if animal is None:
                # Unregistered females take the sire's species
                if male is None:
                    male = await self._animal_registry.get(farm_id, current.male_id)
                animal = male
            if animal is None:
                raise NotFound(f"Animal {female_id} not found")
            species[female_id] = animal.species
        update = confirm_pregnancy.build_update(
            current, female_ids, confirmed_date or self._clock(), species
        )
        updated = await self.update_record(record.id, update)
        logger.info(
            "Pregnancy confirmed for %d female(s) in breeding %s",
            len(female_ids),
            updated.breeding_id,
        )
        return updated

    async def unconfirm_pregnancy(self, record: BreedingRecord, female_id: UUID) -> BreedingRecord:
        current = self._find(record.id) or record
        return await self.update_record(
            record.id, unconfirm_pregnancy.build_update(current, female_id)
        )

    async def remove_from_breeding(
        self, record: BreedingRecord, animal_id: UUID
    ) -> BreedingRecord | None:
        """Returns the updated record, or None when the record was deleted."""
        current = self._find(record.id) or record
        update = remove_from_breeding.build_update(current, animal_id)
        if update is None:
            await self.delete_record(record.id)
            return None
        return await self.update_record(record.id, update)

    async def record_birth(
        self,
        record: BreedingRecord,
        female_id: UUID,
        actual_date: datetime,
        offspring: list[OffspringSpec],
    ) -> BreedingRecord:
        current = self._find(record.id) or record
        try:
            offspring_ids = await record_birth.create_offspring(
                self._animal_registry, current, female_id, actual_date, offspring
            )
        except Exception as exc:
            logger.error("Error recording birth for breeding %s: %s", current.breeding_id, exc)
            raise
        latest = self._find(record.id) or current
        updated = await self.update_record(
            record.id, record_birth.build_update(latest, female_id, actual_date, offspring_ids)
        )
        logger.info(
            "Birth recorded for female %s in breeding %s with %d offspring",
            female_id,
            updated.breeding_id,
            len(offspring_ids),
        )
        return updated

    async def retract_offspring(self, animal_ids: list[UUID]) -> list[UUID]:
        farm_id = self._require_farm()
        try:
            async with self._uow_factory() as uow:
                stored = await uow.breeding_records.list(farm_id)
            linked = {
                offspring_id
                for r in stored
                for info in r.female_breeding_info
                for offspring_id in info.offspring
            }
            return await retract_offspring.execute(
                self._animal_registry, farm_id, animal_ids, linked
            )
        except Exception as exc:
            logger.error("Error retracting offspring %s: %s", animal_ids, exc, exc_info=True)
            raise

    async def add_comment(
        self,
        record_id: UUID,
        actor_user_id: UUID | None,
        content: str,
        urgency: str | Urgency | None = None,
    ) -> Comment:
        record = self._find(record_id)
        if record is None:
            raise NotFound(f"Breeding record {record_id} not found")
        comment, update = add_comment.build_update(record, actor_user_id, content, urgency)
        await self.update_record(record_id, update)
        return comment

    async def update_comment_urgency(
        self,
        record_id: UUID,
        comment_id: UUID,
        level: str | Urgency,
    ) -> BreedingRecord:
        record = self._find(record_id)
        if record is None:
            raise NotFound(f"Breeding record {record_id} not found")
        return await self.update_record(
            record_id, update_comment_urgency.build_update(record, comment_id, level)
        )

    # ---------------------------------------------------------------- queries

    def classify(self, records: list[BreedingRecord] | None = None) -> BreedingClassification:
        return classify(self._records if records is None else records)

    def get_record(self, record_id: UUID) -> BreedingRecord | None:
        return self._find(record_id)

    def get_records_by_animal(self, animal_id: UUID) -> list[BreedingRecord]:
        return records_by_animal(self._records, animal_id)

    def get_active_pregnancies(self) -> list[BreedingRecord]:
        return active_pregnancies(self._records)

    def get_births_window(self, days: int | None = None) -> BirthsWindow:
        days = self.default_window_days if days is None else days
        return self._cache.window(self._records, days, self._today(), self._revision)

    def get_births_window_summary(self, days: int | None = None) -> BirthsWindowSummary:
        days = self.default_window_days if days is None else days
        return self._cache.summary(self._records, days, self._today(), self._revision)

    def get_stats(self) -> BreedingStats:
        return compute_stats(self._records, self.get_births_window(7))

    def get_recent_births(self, days: int | None = None) -> list[RecentBirth]:
        days = self.recent_births_days if days is None else days
        return recent_births(self._records, days, now=self._clock())


class BreedingManagers:
    """One lazily loaded manager per farm, shared across requests in this process."""

    def __init__(
        self,
        uow_factory: Callable[[], UnitOfWork],
        animal_registry: AnimalRegistry,
        *,
        default_window_days: int = 7,
        recent_births_days: int = 120,
    ) -> None:
        self._uow_factory = uow_factory
        self._animal_registry = animal_registry
        self._default_window_days = default_window_days
        self._recent_births_days = recent_births_days
        self._managers: dict[UUID, BreedingManager] = {}

    async def get(self, farm_id: UUID) -> BreedingManager:
        manager = self._managers.get(farm_id)
        if manager is None:
            manager = BreedingManager(
                self._uow_factory,
                self._animal_registry,
                farm_id,
                default_window_days=self._default_window_days,
                recent_births_days=self._recent_births_days,
            )
            self._managers[farm_id] = manager
        if not manager.loaded:
            await manager.load()
        return manager
