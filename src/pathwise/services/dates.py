"""Local calendar-day helpers shared by the metric engine.

Every metric in Pathwise is keyed by the *local* calendar day. Naive
datetimes are treated as local time already; aware datetimes are converted
to the local zone before their date is taken, so a late-evening completion
never slides into the next day through a UTC conversion.
"""

from __future__ import annotations

import math
from datetime import date, datetime, time, timedelta
from typing import Union

DateLike = Union[date, datetime]

WEEKDAY_ABBREVIATIONS = ("Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun")


def local_date(value: DateLike) -> date:
    """Return the local calendar day for a date or datetime."""

    if isinstance(value, datetime):
        if value.tzinfo is not None:
            value = value.astimezone()
        return value.date()
    return value


def start_of_day(value: DateLike) -> datetime:
    """Return 00:00:00.000000 of the value's local calendar day (naive local)."""

    return datetime.combine(local_date(value), time.min)


def end_of_day(value: DateLike) -> datetime:
    """Return 23:59:59.999999 of the value's local calendar day (naive local)."""

    return datetime.combine(local_date(value), time.max)


def date_key(value: DateLike) -> str:
    """Canonical ``YYYY-MM-DD`` key for day bucketing."""

    return local_date(value).isoformat()


def days_between(start: DateLike, end: DateLike) -> int:
    """Whole calendar days from ``start`` to ``end`` (negative when end is earlier)."""

    return (local_date(end) - local_date(start)).days


def day_range(start: DateLike, end: DateLike) -> list[date]:
    """Inclusive list of calendar days from ``start`` to ``end``."""

    first = local_date(start)
    span = days_between(first, end)
    return [first + timedelta(days=offset) for offset in range(span + 1)]


def weekday_abbreviation(value: DateLike) -> str:
    """English three-letter weekday name (``Mon`` .. ``Sun``)."""

    return WEEKDAY_ABBREVIATIONS[local_date(value).weekday()]


def round_half_up(value: float) -> int:
    """Round halves towards positive infinity (2.5 -> 3, -2.5 -> -2)."""

    return int(math.floor(value + 0.5))


def clamp(value: float, lower: float, upper: float) -> float:
    return max(lower, min(upper, value))


def ratio_percent(actual: float, expected: float) -> int:
    """Return ``actual/expected`` as a whole percentage clamped to [0, 100].

    A non-positive ``expected`` yields 0 instead of a division error.
    """

    if expected <= 0:
        return 0
    return round_half_up(clamp(actual / expected, 0.0, 1.0) * 100)


__all__ = [
    "DateLike",
    "clamp",
    "date_key",
    "day_range",
    "days_between",
    "end_of_day",
    "local_date",
    "ratio_percent",
    "round_half_up",
    "start_of_day",
    "weekday_abbreviation",
]
