from __future__ import annotations

from datetime import date, datetime, time, timezone

from zoneinfo import ZoneInfo

# Default application timezone aligned with frontend
DEFAULT_TIMEZONE_NAME = "America/Guayaquil"
DEFAULT_TZ = ZoneInfo(DEFAULT_TIMEZONE_NAME)

_local_tz: ZoneInfo = DEFAULT_TZ


def configure_local_tz(name: str) -> None:
    """Switch the calendar used by the local-day helpers (e.g. from settings)."""
    global _local_tz
    _local_tz = ZoneInfo(name)


def local_tz() -> ZoneInfo:
    return _local_tz


def assume_local_tz(dt: datetime) -> datetime:
    """Assume the given naive datetime is in the local timezone.

    If `dt` is naive, attach the local timezone without shifting time.
    If `dt` is aware, return as-is.
    """
    if dt.tzinfo is None:
        return dt.replace(tzinfo=_local_tz)
    return dt


def to_utc(dt: datetime) -> datetime:
    """Convert a datetime to UTC, assuming the local timezone for naive values."""
    return assume_local_tz(dt).astimezone(timezone.utc)


def local_date(value: date | datetime) -> date:
    """Calendar day of `value` as seen in the local timezone."""
    if isinstance(value, datetime):
        return assume_local_tz(value).astimezone(_local_tz).date()
    return value


def local_day_start(value: date | datetime) -> datetime:
    """Midnight (local timezone) of the calendar day containing `value`."""
    return datetime.combine(local_date(value), time(0, 0), tzinfo=_local_tz)


def local_today(now: datetime | None = None) -> date:
    return local_date(now or datetime.now(timezone.utc))


def to_epoch_ms(value: datetime | None) -> int:
    """Epoch milliseconds for `value`; 0 when absent."""
    if value is None:
        return 0
    return int(assume_local_tz(value).timestamp() * 1000)


def from_epoch_ms(value: int | float | None) -> datetime | None:
    """Inverse of `to_epoch_ms`, returned in the local timezone."""
    if not value:
        return None
    return datetime.fromtimestamp(value / 1000, tz=timezone.utc).astimezone(_local_tz)


def utc_to_local(value: datetime | None) -> datetime | None:
    """Stored timestamp to local time; naive values are taken as UTC."""
    if value is None:
        return None
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.astimezone(_local_tz)
