"""Time-of-day, date and half-open range helpers shared by the engine."""

from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import UTC, date, datetime, time, timedelta
from typing import Any
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from courtslot.core.errors import InvalidDateError, InvalidRangeError, InvalidTimezoneError

MINUTES_PER_DAY = 24 * 60
END_OF_DAY = "24:00"

# Day numbering is 0 = Sunday through 6 = Saturday.
WEEKDAY_NUMBERS = frozenset({1, 2, 3, 4, 5})
WEEKEND_NUMBERS = frozenset({0, 6})
ALL_DAY_NUMBERS = WEEKDAY_NUMBERS | WEEKEND_NUMBERS

_TIME_PATTERN = re.compile(r"^([01]?[0-9]|2[0-3]):([0-5][0-9])$")
_DATE_PATTERN = re.compile(r"^\d{4}-\d{2}-\d{2}$")


def is_valid_time_format(value: Any) -> bool:
    """Return True for ``H:MM`` / ``HH:MM`` strings between 00:00 and 23:59."""
    return isinstance(value, str) and _TIME_PATTERN.match(value) is not None


def normalize_time(value: str | time, *, allow_end_of_day: bool = False) -> str:
    """Return ``value`` as a zero-padded ``HH:MM`` string.

    ``allow_end_of_day`` additionally accepts ``24:00`` for range ends.
    """
    if allow_end_of_day and value == END_OF_DAY:
        return END_OF_DAY
    if isinstance(value, time):
        return f"{value.hour:02d}:{value.minute:02d}"
    if not is_valid_time_format(value):
        raise InvalidRangeError(f"Invalid time {value!r}; expected HH:MM")
    hours, minutes = value.split(":")
    return f"{int(hours):02d}:{minutes}"


def time_to_minutes(value: str | time) -> int:
    if value == END_OF_DAY:
        return MINUTES_PER_DAY
    hours, minutes = normalize_time(value).split(":")
    return int(hours) * 60 + int(minutes)


def minutes_to_time(minutes: int) -> str:
    """Render minutes since midnight; 1440 renders as ``24:00``."""
    if not 0 <= minutes <= MINUTES_PER_DAY:
        raise InvalidRangeError(f"Minute offset {minutes} is outside a single day")
    return f"{minutes // 60:02d}:{minutes % 60:02d}"


def validate_time_range(start: str | time, end: str | time) -> tuple[str, str]:
    """Normalize a same-day ``[start, end)`` pair, rejecting empty or inverted ones."""
    start_value = normalize_time(start)
    end_value = normalize_time(end, allow_end_of_day=True)
    if time_to_minutes(start_value) >= time_to_minutes(end_value):
        raise InvalidRangeError("Start time must be before end time")
    return start_value, end_value


def ranges_overlap(a_start: Any, a_end: Any, b_start: Any, b_end: Any) -> bool:
    """Half-open overlap test: touching ranges do not overlap."""
    return a_start < b_end and b_start < a_end


def range_contains(
    outer_start: Any, outer_end: Any, inner_start: Any, inner_end: Any
) -> bool:
    return outer_start <= inner_start and inner_end <= outer_end


def parse_date(value: str | date) -> date:
    """Parse a strict ``YYYY-MM-DD`` string."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if not isinstance(value, str) or not _DATE_PATTERN.match(value):
        raise InvalidDateError(f"Invalid date {value!r}; expected YYYY-MM-DD")
    try:
        return date.fromisoformat(value)
    except ValueError as exc:
        raise InvalidDateError(f"Invalid date {value!r}") from exc


def day_of_week(value: date) -> int:
    return value.isoweekday() % 7


def is_weekend(day_number: int) -> bool:
    return day_number in WEEKEND_NUMBERS


def iter_dates(start: date, days: int) -> list[date]:
    return [start + timedelta(days=offset) for offset in range(days)]


def coerce_utc(dt: datetime) -> datetime:
    if dt.tzinfo is None:
        return dt.replace(tzinfo=UTC)
    return dt.astimezone(UTC)


def get_zone(name: str) -> ZoneInfo:
    try:
        return ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError) as exc:
        raise InvalidTimezoneError(
            f"Unknown timezone {name!r}", detail={"timezone": name}
        ) from exc


def local_datetime(day: date, minutes: int, tz: ZoneInfo) -> datetime:
    """Return the UTC instant for ``minutes`` past local midnight of ``day``."""
    local_midnight = datetime.combine(day, time.min, tzinfo=tz)
    return (local_midnight + timedelta(minutes=minutes)).astimezone(UTC)


def local_day_bounds(day: date, tz: ZoneInfo) -> tuple[datetime, datetime]:
    return local_datetime(day, 0, tz), local_datetime(day + timedelta(days=1), 0, tz)


@dataclass(frozen=True)
class LocalRange:
    """A UTC range projected onto one local calendar date."""

    day: date
    start_minute: int
    end_minute: int
    duration_minutes: int

    @property
    def day_of_week(self) -> int:
        return day_of_week(self.day)


def split_local_range(start_at: datetime, end_at: datetime, tz: ZoneInfo) -> LocalRange:
    """Project ``[start_at, end_at)`` onto a single local date.

    An end exactly at the following local midnight is treated as minute 1440 of
    the start date. Anything crossing into another date raises
    :class:`InvalidRangeError`.
    """
    start_utc = coerce_utc(start_at)
    end_utc = coerce_utc(end_at)
    if start_utc >= end_utc:
        raise InvalidRangeError("Range end must be after range start")

    local_start = start_utc.astimezone(tz)
    local_end = end_utc.astimezone(tz)
    day = local_start.date()
    start_minute = local_start.hour * 60 + local_start.minute
    if local_end.date() == day:
        end_minute = local_end.hour * 60 + local_end.minute
    elif local_end.date() == day + timedelta(days=1) and local_end.time() == time.min:
        end_minute = MINUTES_PER_DAY
    else:
        raise InvalidRangeError("Range must fall within a single calendar date")

    duration = int((end_utc - start_utc).total_seconds() // 60)
    if duration <= 0 or end_minute <= start_minute:
        raise InvalidRangeError("Range must span at least one minute")
    return LocalRange(
        day=day,
        start_minute=start_minute,
        end_minute=end_minute,
        duration_minutes=duration,
    )


__all__ = [
    "ALL_DAY_NUMBERS",
    "END_OF_DAY",
    "LocalRange",
    "MINUTES_PER_DAY",
    "WEEKDAY_NUMBERS",
    "WEEKEND_NUMBERS",
    "coerce_utc",
    "day_of_week",
    "get_zone",
    "is_valid_time_format",
    "is_weekend",
    "iter_dates",
    "local_datetime",
    "local_day_bounds",
    "minutes_to_time",
    "normalize_time",
    "parse_date",
    "range_contains",
    "ranges_overlap",
    "split_local_range",
    "time_to_minutes",
    "validate_time_range",
]
