from __future__ import annotations

from datetime import datetime
from uuid import uuid4

import pytest

from src.application.errors import (
    NotFound,
    PartialBatchFailure,
    PersistenceError,
    ValidationError,
)
from src.application.services.breeding_manager import BreedingManager, BreedingManagers
from src.application.use_cases.breeding.record_birth import OffspringSpec
from src.application.use_cases.breeding.update_breeding_record import RecordUpdate
from src.domain.models.breeding_record import BreedingRecord, FemaleBreedingInfo
from src.utils.datetime_tz import local_tz


def local(year: int, month: int, day: int, hour: int = 0) -> datetime:
    return datetime(year, month, day, hour, tzinfo=local_tz())


def seed_record(
    store, farm, *females: FemaleBreedingInfo, breeding_date=None, male_id=None
) -> BreedingRecord:
    record = BreedingRecord.create(
        farm_id=farm,
        farmer_id=uuid4(),
        breeding_id="01-01-26-01",
        male_id=male_id or uuid4(),
        female_breeding_info=list(females) or [FemaleBreedingInfo(female_id=uuid4())],
        breeding_date=breeding_date or local(2026, 1, 1),
    )
    store.items[record.id] = record
    return record


async def test_create_record_assigns_daily_sequence(manager, farmer):
    seen: list[int] = []
    manager.subscribe(lambda records: seen.append(len(records)))

    first = await manager.create_record(
        farmer,
        uuid4(),
        [FemaleBreedingInfo(female_id=uuid4())],
        breeding_date=local(2026, 3, 10, 9),
    )
    second = await manager.create_record(
        farmer,
        uuid4(),
        [FemaleBreedingInfo(female_id=uuid4())],
        breeding_date=local(2026, 3, 10, 18),
    )

    assert (first.breeding_id, second.breeding_id) == ("10-03-26-01", "10-03-26-02")
    assert {r.id for r in manager.records} == {first.id, second.id}
    assert seen == [0, 1, 2]


async def test_create_record_without_farm_is_rejected(store, registry, farmer, uow_factory):
    orphan = BreedingManager(uow_factory, registry, None)

    with pytest.raises(ValidationError):
        await orphan.create_record(farmer, uuid4(), [FemaleBreedingInfo(female_id=uuid4())])
    with pytest.raises(ValidationError):
        await orphan.delete_record(uuid4())
    assert store.items == {}


async def test_reload_with_identical_content_keeps_revision(manager, store, farm):
    record = seed_record(
        store,
        farm,
        FemaleBreedingInfo(
            female_id=uuid4(),
            pregnancy_confirmed_date=local(2026, 2, 1),
            expected_birth_date=local(2026, 3, 12),
        ),
    )
    await manager.load()
    revision = manager.revision
    window = manager.get_births_window()

    await manager.load()
    assert manager.revision == revision
    assert manager.get_births_window() is window

    store.items[record.id].female_breeding_info[0].expected_birth_date = local(2026, 3, 14)
    await manager.load()
    assert manager.revision == revision + 1
    assert manager.get_births_window().upcoming[0].days_diff == 4


async def test_update_failure_restores_previous_entry(manager, store, farm):
    record = seed_record(store, farm)
    record.notes = "original"
    await manager.load()
    before = manager.get_record(record.id)
    notes_seen: list[str] = []
    manager.subscribe(
        lambda records: notes_seen.extend(r.notes for r in records if r.id == record.id)
    )
    store.fail_with = PersistenceError("store unavailable")

    with pytest.raises(PersistenceError):
        await manager.update_record(record.id, RecordUpdate.of(notes="changed"))

    assert manager.get_record(record.id) is before
    assert notes_seen == ["original", "changed", "original"]
    assert store.items[record.id].notes == "original"


async def test_update_replaces_entry_with_stored_result(manager, store, farm):
    record = seed_record(store, farm)
    await manager.load()

    updated = await manager.update_record(record.id, RecordUpdate.of(notes="moved"))

    assert manager.get_record(record.id) == updated
    assert updated.version == record.version + 1
    assert store.items[record.id].notes == "moved"


async def test_invalid_update_leaves_working_set_untouched(manager, store, farm):
    record = seed_record(store, farm)
    await manager.load()
    revision = manager.revision

    with pytest.raises(ValidationError):
        await manager.update_record(record.id, RecordUpdate.of(male_id=None))

    assert manager.revision == revision
    assert store.update_calls == 0


async def test_update_unknown_record_is_not_found(manager):
    await manager.load()

    with pytest.raises(NotFound):
        await manager.update_record(uuid4(), RecordUpdate.of(notes="x"))


async def test_delete_failure_restores_record(manager, store, farm):
    record = seed_record(store, farm)
    await manager.load()
    store.fail_with = PersistenceError("store unavailable")

    with pytest.raises(PersistenceError):
        await manager.delete_record(record.id)

    assert manager.get_record(record.id) is not None


async def test_delete_removes_record(manager, store, farm):
    record = seed_record(store, farm)
    await manager.load()

    await manager.delete_record(record.id)

    assert manager.get_record(record.id) is None
    assert record.id not in store.items


async def test_unconfirm_pregnancy_persists_cleared_dates(manager, store, farm):
    female_id = uuid4()
    record = seed_record(
        store,
        farm,
        FemaleBreedingInfo(
            female_id=female_id,
            pregnancy_confirmed_date=local(2026, 2, 1),
            expected_birth_date=local(2026, 5, 28),
        ),
    )
    await manager.load()

    await manager.unconfirm_pregnancy(manager.get_record(record.id), female_id)

    stored = store.items[record.id].find_female(female_id)
    assert stored.pregnancy_confirmed_date is None
    assert stored.expected_birth_date is None


async def test_remove_male_deletes_whole_record(manager, store, farm):
    record = seed_record(store, farm)
    await manager.load()

    assert await manager.remove_from_breeding(record, record.male_id) is None
    assert record.id not in store.items
    assert manager.records == []


async def test_remove_one_female_keeps_record(manager, store, farm):
    leaving, staying = uuid4(), uuid4()
    record = seed_record(
        store, farm, FemaleBreedingInfo(female_id=leaving), FemaleBreedingInfo(female_id=staying)
    )
    await manager.load()

    updated = await manager.remove_from_breeding(record, leaving)

    assert [i.female_id for i in updated.female_breeding_info] == [staying]


async def test_record_birth_links_offspring(manager, store, registry, farm):
    mother = registry.seed(farm)
    father = registry.seed(farm, gender="male")
    record = seed_record(
        store,
        farm,
        FemaleBreedingInfo(female_id=mother.id, pregnancy_confirmed_date=local(2026, 2, 1)),
        male_id=father.id,
    )
    await manager.load()

    updated = await manager.record_birth(
        record,
        mother.id,
        local(2026, 3, 9, 6),
        [OffspringSpec(animal_number="L-1"), OffspringSpec(animal_number="L-2")],
    )

    info = updated.find_female(mother.id)
    assert info.actual_birth_date == local(2026, 3, 9)
    assert info.offspring == [a.id for a in registry.created]
    assert store.items[record.id].find_female(mother.id).offspring == info.offspring
    assert manager.classify().finished == [updated]


async def test_record_birth_partial_failure_leaves_record_unlinked(manager, store, registry, farm):
    mother = registry.seed(farm)
    father = registry.seed(farm, gender="male")
    record = seed_record(
        store,
        farm,
        FemaleBreedingInfo(female_id=mother.id, pregnancy_confirmed_date=local(2026, 2, 1)),
        male_id=father.id,
    )
    await manager.load()
    registry.fail_on = 2

    with pytest.raises(PartialBatchFailure) as exc_info:
        await manager.record_birth(
            record,
            mother.id,
            local(2026, 3, 9),
            [OffspringSpec(animal_number=f"L-{n}") for n in range(1, 4)],
        )

    orphan_ids = exc_info.value.created_ids
    assert orphan_ids == [registry.created[0].id]
    assert store.update_calls == 0
    stored = store.items[record.id].find_female(mother.id)
    assert stored.actual_birth_date is None
    assert stored.offspring == []

    assert await manager.retract_offspring(orphan_ids) == orphan_ids
    assert registry.retracted == orphan_ids


async def test_comments_through_manager(manager, store, farm, farmer):
    record = seed_record(store, farm)
    await manager.load()

    comment = await manager.add_comment(record.id, farmer, "Limping", "high")
    updated = await manager.update_comment_urgency(record.id, comment.id, "low")

    assert updated.comments[0].id == comment.id
    assert updated.comments[0].urgency == "low"
    assert store.items[record.id].comments[0].urgency == "low"
    with pytest.raises(NotFound):
        await manager.add_comment(uuid4(), farmer, "nobody home")
    with pytest.raises(ValidationError):
        await manager.update_comment_urgency(record.id, comment.id, "panic")


async def test_window_cache_follows_updates(manager, store, farm):
    female_id = uuid4()
    record = seed_record(
        store,
        farm,
        FemaleBreedingInfo(
            female_id=female_id,
            pregnancy_confirmed_date=local(2026, 2, 1),
            expected_birth_date=local(2026, 3, 7),
        ),
    )
    await manager.load()
    window = manager.get_births_window()
    summary = manager.get_births_window_summary()
    assert manager.get_births_window() is window
    assert manager.get_births_window_summary() is summary
    assert [e.days_diff for e in window.past_due] == [-3]

    moved = [
        FemaleBreedingInfo(
            female_id=female_id,
            pregnancy_confirmed_date=local(2026, 2, 1),
            expected_birth_date=local(2026, 3, 15),
        )
    ]
    await manager.update_record(record.id, RecordUpdate.of(female_breeding_info=moved))

    refreshed = manager.get_births_window()
    assert refreshed is not window
    assert refreshed.past_due == []
    assert [e.days_diff for e in refreshed.upcoming] == [5]
    assert manager.get_births_window_summary().upcoming_count == 1


async def test_stats_and_queries(manager, store, farm):
    pregnant_id, born_id, open_id = uuid4(), uuid4(), uuid4()
    first = seed_record(
        store,
        farm,
        FemaleBreedingInfo(
            female_id=pregnant_id,
            pregnancy_confirmed_date=local(2026, 2, 1),
            expected_birth_date=local(2026, 3, 14),
        ),
        FemaleBreedingInfo(
            female_id=born_id,
            pregnancy_confirmed_date=local(2026, 1, 20),
            actual_birth_date=local(2026, 3, 1),
            offspring=[uuid4(), uuid4()],
        ),
    )
    second = seed_record(
        store, farm, FemaleBreedingInfo(female_id=open_id), breeding_date=local(2026, 2, 1)
    )
    await manager.load()

    stats = manager.get_stats()

    assert stats.total_breedings == 2
    assert stats.active_pregnancies == 1
    assert stats.upcoming_births == 1
    assert stats.total_offspring == 2
    assert manager.get_active_pregnancies() == [manager.get_record(first.id)]
    assert manager.get_records_by_animal(open_id) == [manager.get_record(second.id)]
    assert manager.get_records_by_animal(first.male_id) == [manager.get_record(first.id)]


async def test_recent_births_newest_first_within_range(manager, store, farm):
    def born(day: datetime) -> FemaleBreedingInfo:
        return FemaleBreedingInfo(
            female_id=uuid4(),
            pregnancy_confirmed_date=local(2025, 5, 1),
            actual_birth_date=day,
            offspring=[uuid4()],
        )

    seed_record(store, farm, born(local(2026, 3, 1)), breeding_date=local(2025, 10, 1))
    seed_record(store, farm, born(local(2026, 3, 5)), breeding_date=local(2025, 10, 2))
    seed_record(store, farm, born(local(2025, 9, 1)), breeding_date=local(2025, 4, 1))
    await manager.load()

    births = manager.get_recent_births()

    assert [b.info.actual_birth_date for b in births] == [local(2026, 3, 5), local(2026, 3, 1)]
    assert len(manager.get_recent_births(365)) == 3


async def test_managers_load_each_farm_once(store, registry, farm, uow_factory):
    seed_record(store, farm)
    managers = BreedingManagers(uow_factory, registry)

    first = await managers.get(farm)
    store.items.clear()
    second = await managers.get(farm)

    assert second is first
    assert len(second.records) == 1
    assert (await managers.get(uuid4())).records == []


async def test_confirm_pregnancy_uses_registered_species(manager, store, registry, farm):
    doe = registry.seed(farm, species="goat")
    buck = registry.seed(farm, species="goat", gender="male")
    stray = uuid4()
    record = seed_record(
        store,
        farm,
        FemaleBreedingInfo(female_id=doe.id),
        FemaleBreedingInfo(female_id=stray),
        male_id=buck.id,
    )
    await manager.load()

    updated = await manager.confirm_pregnancy(record, [doe.id, stray], local(2026, 2, 1, 9))

    for female_id in (doe.id, stray):
        info = updated.find_female(female_id)
        assert info.pregnancy_confirmed_date == local(2026, 2, 1)
        assert info.expected_birth_date == local(2026, 7, 1)
    assert store.items[record.id].find_female(doe.id).expected_birth_date == local(2026, 7, 1)
    assert manager.get_active_pregnancies() == [updated]


async def test_confirm_pregnancy_defaults_to_today(manager, store, registry, farm):
    ewe = registry.seed(farm)
    record = seed_record(store, farm, FemaleBreedingInfo(female_id=ewe.id))
    await manager.load()

    updated = await manager.confirm_pregnancy(record, [ewe.id])

    assert updated.find_female(ewe.id).pregnancy_confirmed_date == local(2026, 3, 10)
    assert updated.find_female(ewe.id).expected_birth_date == local(2026, 8, 4)


async def test_confirm_pregnancy_unknown_animals_are_not_found(manager, store, farm):
    female_id = uuid4()
    record = seed_record(store, farm, FemaleBreedingInfo(female_id=female_id))
    await manager.load()

    with pytest.raises(NotFound):
        await manager.confirm_pregnancy(record, [female_id], local(2026, 2, 1))
    assert store.update_calls == 0


async def test_retract_refuses_mothers_and_linked_offspring(manager, store, registry, farm):
    mother = registry.seed(farm)
    father = registry.seed(farm, gender="male")
    record = seed_record(store, farm, FemaleBreedingInfo(female_id=mother.id), male_id=father.id)
    await manager.load()
    updated = await manager.record_birth(
        record, mother.id, local(2026, 3, 9), [OffspringSpec(animal_number="N-1")]
    )
    linked = updated.find_female(mother.id).offspring[0]

    with pytest.raises(ValidationError):
        await manager.retract_offspring([mother.id])
    with pytest.raises(ValidationError):
        await manager.retract_offspring([linked])

    assert registry.retracted == []
    assert {mother.id, linked} <= set(registry.animals)
