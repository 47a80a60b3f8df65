"""Tests for local calendar-day helpers."""

from __future__ import annotations

from datetime import date, datetime, time, timezone

import pytest

from pathwise.services.dates import (
    clamp,
    date_key,
    day_range,
    days_between,
    end_of_day,
    local_date,
    ratio_percent,
    round_half_up,
    start_of_day,
    weekday_abbreviation,
)


def test_start_and_end_of_day_bound_the_calendar_day():
    moment = datetime(2024, 3, 10, 15, 42, 7)

    assert start_of_day(moment) == datetime(2024, 3, 10, 0, 0, 0, 0)
    assert end_of_day(moment) == datetime(2024, 3, 10, 23, 59, 59, 999999)
    assert end_of_day(date(2024, 3, 10)).time() == time.max


def test_date_key_ignores_time_of_day():
    assert date_key(datetime(2024, 1, 5, 0, 0)) == "2024-01-05"
    assert date_key(datetime(2024, 1, 5, 23, 59, 59)) == "2024-01-05"
    assert date_key(date(2024, 1, 5)) == "2024-01-05"


def test_aware_datetimes_use_the_local_zone():
    aware = datetime(2024, 6, 1, 12, 0, tzinfo=timezone.utc)

    assert local_date(aware) == aware.astimezone().date()


def test_days_between_uses_calendar_days():
    assert days_between(datetime(2024, 1, 1, 23, 0), datetime(2024, 1, 2, 1, 0)) == 1
    assert days_between(date(2024, 1, 10), date(2024, 1, 1)) == -9
    assert days_between(date(2024, 2, 28), date(2024, 3, 1)) == 2


def test_day_range_is_inclusive():
    days = day_range(date(2024, 12, 30), date(2025, 1, 2))

    assert [d.isoformat() for d in days] == [
        "2024-12-30",
        "2024-12-31",
        "2025-01-01",
        "2025-01-02",
    ]
    assert day_range(date(2024, 1, 2), date(2024, 1, 1)) == []


@pytest.mark.parametrize(
    "value,expected",
    [(2.5, 3), (0.5, 1), (1.49, 1), (66.66666, 67), (-2.5, -2), (0, 0)],
)
def test_round_half_up(value, expected):
    assert round_half_up(value) == expected


def test_ratio_percent_guards_division_and_clamps():
    assert ratio_percent(3, 0) == 0
    assert ratio_percent(3, -1) == 0
    assert ratio_percent(10, 5) == 100
    assert ratio_percent(1, 8) == 13
    assert clamp(-4, 0, 100) == 0


def test_weekday_abbreviation():
    assert weekday_abbreviation(date(2024, 1, 1)) == "Mon"
    assert weekday_abbreviation(date(2024, 1, 7)) == "Sun"
