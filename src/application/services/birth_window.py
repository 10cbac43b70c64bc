from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from typing import Hashable, Iterable

from src.domain.models.breeding_record import BreedingRecord, FemaleBreedingInfo
from src.utils.datetime_tz import local_date, to_epoch_ms


@dataclass(frozen=True, slots=True)
class BirthWindowEntry:
    record: BreedingRecord
    info: FemaleBreedingInfo
    days_diff: int


@dataclass(frozen=True, slots=True)
class BirthsWindow:
    past_due: list[BirthWindowEntry]
    upcoming: list[BirthWindowEntry]
    days: int


@dataclass(frozen=True, slots=True)
class BirthsWindowSummary:
    past_due_count: int
    upcoming_count: int
    window_days: int


def signature(records: Iterable[BreedingRecord]) -> str:
    """Content fingerprint over ids and the date fields the window depends on."""
    parts = []
    for record in records:
        females = "|".join(
            ":".join(
                (
                    str(info.female_id),
                    str(to_epoch_ms(info.expected_birth_date)),
                    str(to_epoch_ms(info.actual_birth_date)),
                    str(to_epoch_ms(info.pregnancy_confirmed_date)),
                )
            )
            for info in record.female_breeding_info
        )
        parts.append(f"{record.id}#{females}")
    return ";".join(parts)


def build_births_window(
    records: Iterable[BreedingRecord],
    days: int,
    today: date,
) -> BirthsWindow:
    past_due: list[BirthWindowEntry] = []
    upcoming: list[BirthWindowEntry] = []

    for record in records:
        for info in record.female_breeding_info:
            if info.expected_birth_date is None or info.actual_birth_date is not None:
                continue
            diff = (local_date(info.expected_birth_date) - today).days
            if diff < 0 and -diff <= days:
                past_due.append(BirthWindowEntry(record=record, info=info, days_diff=diff))
            elif 0 <= diff <= days:
                upcoming.append(BirthWindowEntry(record=record, info=info, days_diff=diff))

    # Most overdue first, soonest first
    past_due.sort(key=lambda e: e.days_diff)
    upcoming.sort(key=lambda e: e.days_diff)
    return BirthsWindow(past_due=past_due, upcoming=upcoming, days=days)


def summarize(window: BirthsWindow) -> BirthsWindowSummary:
    return BirthsWindowSummary(
        past_due_count=len(window.past_due),
        upcoming_count=len(window.upcoming),
        window_days=window.days,
    )


@dataclass(slots=True)
class _Entry:
    key: Hashable
    value: object


@dataclass(slots=True)
class BirthWindowCache:
    """Per-`days` cache of windows and summaries.

    Entries are valid while the caller's revision key is unchanged; a hit
    returns the very same object that was computed before.
    """

    _windows: dict[int, _Entry] = field(default_factory=dict)
    _summaries: dict[int, _Entry] = field(default_factory=dict)

    def window(
        self,
        records: list[BreedingRecord],
        days: int,
        today: date,
        revision: Hashable,
    ) -> BirthsWindow:
        cached = self._windows.get(days)
        if cached is not None and cached.key == revision:
            return cached.value  # type: ignore[return-value]
        value = build_births_window(records, days, today)
        self._windows[days] = _Entry(key=revision, value=value)
        return value

    def summary(
        self,
        records: list[BreedingRecord],
        days: int,
        today: date,
        revision: Hashable,
    ) -> BirthsWindowSummary:
        cached = self._summaries.get(days)
        if cached is not None and cached.key == revision:
            return cached.value  # type: ignore[return-value]
        value = summarize(self.window(records, days, today, revision))
        self._summaries[days] = _Entry(key=revision, value=value)
        return value

    def clear(self) -> None:
        self._windows.clear()
        self._summaries.clear()
