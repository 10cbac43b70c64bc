from __future__ import annotations

from datetime import datetime
from uuid import uuid4

from src.application.services.classification import classify
from src.domain.models.breeding_record import BreedingRecord, FemaleBreedingInfo
from src.utils.datetime_tz import local_tz


def local(year: int, month: int, day: int) -> datetime:
    return datetime(year, month, day, tzinfo=local_tz())


def make_record(females, breeding_date=None) -> BreedingRecord:
    return BreedingRecord.create(
        farm_id=uuid4(),
        farmer_id=uuid4(),
        breeding_id="x",
        male_id=uuid4(),
        female_breeding_info=females,
        breeding_date=breeding_date,
    )


def unconfirmed() -> FemaleBreedingInfo:
    return FemaleBreedingInfo(female_id=uuid4())


def pregnant() -> FemaleBreedingInfo:
    return FemaleBreedingInfo(female_id=uuid4(), pregnancy_confirmed_date=local(2026, 2, 1))


def born() -> FemaleBreedingInfo:
    return FemaleBreedingInfo(
        female_id=uuid4(),
        pregnancy_confirmed_date=local(2026, 2, 1),
        actual_birth_date=local(2026, 3, 1),
        offspring=[uuid4()],
    )


def test_unconfirmed_female_wins_over_pending_birth():
    mixed = make_record([unconfirmed(), pregnant()], local(2026, 1, 1))

    groups = classify([mixed])

    assert groups.needs_pregnancy_confirmation == [mixed]
    assert groups.needs_birth_confirmation == []
    assert groups.finished == []


def test_each_record_lands_in_exactly_one_bucket():
    waiting = make_record([unconfirmed(), born()], local(2026, 1, 1))
    expecting = make_record([pregnant(), born()], local(2026, 1, 2))
    done = make_record([born(), born()], local(2026, 1, 3))

    groups = classify([waiting, expecting, done])

    assert groups.needs_pregnancy_confirmation == [waiting]
    assert groups.needs_birth_confirmation == [expecting]
    assert groups.finished == [done]


def test_buckets_are_most_recent_first_with_undated_last():
    older = make_record([unconfirmed()], local(2026, 1, 1))
    undated = make_record([unconfirmed()])
    newer = make_record([unconfirmed()], local(2026, 2, 1))

    groups = classify([older, undated, newer])

    assert groups.needs_pregnancy_confirmation == [newer, older, undated]
