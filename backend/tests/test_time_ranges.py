"""Unit tests for time-of-day and date helpers."""

from __future__ import annotations

from datetime import UTC, date, datetime
from zoneinfo import ZoneInfo

import pytest

from courtslot.core.errors import InvalidDateError, InvalidRangeError, InvalidTimezoneError
from courtslot.core.time_ranges import (
    day_of_week,
    get_zone,
    local_datetime,
    minutes_to_time,
    normalize_time,
    parse_date,
    ranges_overlap,
    split_local_range,
    time_to_minutes,
    validate_time_range,
)


def test_normalize_time_pads_hours() -> None:
    assert normalize_time("8:05") == "08:05"
    assert normalize_time("23:59") == "23:59"


@pytest.mark.parametrize("value", ["24:00", "24:30", "7:5", "12:60", "noon", ""])
def test_normalize_time_rejects_malformed_values(value: str) -> None:
    with pytest.raises(InvalidRangeError):
        normalize_time(value)


def test_end_of_day_only_allowed_as_range_end() -> None:
    assert validate_time_range("22:00", "24:00") == ("22:00", "24:00")
    assert time_to_minutes("24:00") == 1440
    assert minutes_to_time(1440) == "24:00"
    with pytest.raises(InvalidRangeError):
        validate_time_range("24:00", "24:00")


@pytest.mark.parametrize(("start", "end"), [("10:00", "10:00"), ("11:00", "10:00")])
def test_validate_time_range_rejects_empty_and_inverted(start: str, end: str) -> None:
    with pytest.raises(InvalidRangeError):
        validate_time_range(start, end)


def test_touching_ranges_do_not_overlap() -> None:
    assert not ranges_overlap(600, 660, 660, 720)
    assert ranges_overlap(600, 661, 660, 720)
    assert ranges_overlap(630, 690, 600, 660)


@pytest.mark.parametrize("value", ["2030-02-30", "2030-1-7", "07/01/2030", "", "tomorrow"])
def test_parse_date_is_strict(value: str) -> None:
    with pytest.raises(InvalidDateError):
        parse_date(value)


def test_parse_date_accepts_iso_strings_and_dates() -> None:
    assert parse_date("2030-01-07") == date(2030, 1, 7)
    assert parse_date(date(2030, 1, 7)) == date(2030, 1, 7)


def test_day_of_week_counts_from_sunday() -> None:
    assert day_of_week(date(2030, 1, 6)) == 0
    assert day_of_week(date(2030, 1, 7)) == 1
    assert day_of_week(date(2030, 1, 12)) == 6


def test_split_local_range_uses_club_timezone() -> None:
    madrid = ZoneInfo("Europe/Madrid")
    local = split_local_range(
        datetime(2030, 1, 7, 9, tzinfo=UTC), datetime(2030, 1, 7, 10, 30, tzinfo=UTC), madrid
    )
    assert local.day == date(2030, 1, 7)
    assert local.start_minute == 600
    assert local.end_minute == 690
    assert local.duration_minutes == 90
    assert local.day_of_week == 1


def test_split_local_range_allows_end_at_next_midnight() -> None:
    local = split_local_range(
        datetime(2030, 1, 7, 23, tzinfo=UTC), datetime(2030, 1, 8, tzinfo=UTC), ZoneInfo("UTC")
    )
    assert local.end_minute == 1440
    assert local.duration_minutes == 60


def test_split_local_range_rejects_multi_day_and_inverted_ranges() -> None:
    utc = ZoneInfo("UTC")
    with pytest.raises(InvalidRangeError):
        split_local_range(
            datetime(2030, 1, 7, 23, tzinfo=UTC), datetime(2030, 1, 8, 1, tzinfo=UTC), utc
        )
    with pytest.raises(InvalidRangeError):
        split_local_range(
            datetime(2030, 1, 7, 11, tzinfo=UTC), datetime(2030, 1, 7, 10, tzinfo=UTC), utc
        )


def test_local_datetime_converts_to_utc() -> None:
    madrid = ZoneInfo("Europe/Madrid")
    assert local_datetime(date(2030, 7, 1), 600, madrid) == datetime(2030, 7, 1, 8, tzinfo=UTC)


def test_get_zone_accepts_iana_names() -> None:
    assert get_zone("Europe/Madrid") == ZoneInfo("Europe/Madrid")


@pytest.mark.parametrize("name", ["Mars/Olympus_Mons", "", "../etc/passwd"])
def test_get_zone_rejects_unknown_names(name: str) -> None:
    with pytest.raises(InvalidTimezoneError) as exc_info:
        get_zone(name)
    assert exc_info.value.status_code == 400
