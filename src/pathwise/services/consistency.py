"""Rolling-window consistency score and the yearly completion heatmap."""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass
from datetime import date, datetime, timedelta
from typing import Iterable

from .dates import date_key, day_range, days_between, local_date, ratio_percent
from .progress import HabitSnapshot, habit_expected_count

CONSISTENCY_WINDOW_DAYS = 30
HEATMAP_DAYS = 365
LOW_COMPLETION_LIMIT = 5


@dataclass(slots=True)
class HabitCompletionRate:
    habit_id: int
    title: str
    completion_rate: int


@dataclass(slots=True)
class ConsistencyResult:
    score: int
    total_expected: float
    total_actual: int
    habit_rates: list[HabitCompletionRate]

    def lowest(self, limit: int = LOW_COMPLETION_LIMIT) -> list[HabitCompletionRate]:
        """Habits with the lowest completion rate; ties keep their input order."""

        return sorted(self.habit_rates, key=lambda r: r.completion_rate)[:limit]


@dataclass(slots=True)
class HeatmapCell:
    date: str
    count: int


def window_start(today: date, days: int) -> date:
    """First day of a trailing window of ``days`` days ending on ``today``."""

    return today - timedelta(days=days - 1)


def consistency_score(
    habits: Iterable[HabitSnapshot],
    *,
    today: date | None = None,
    window_days: int = CONSISTENCY_WINDOW_DAYS,
) -> ConsistencyResult:
    """Aggregate actual vs expected completions over the trailing window.

    Each habit only owes completions from the later of its creation day and
    the window start; only completions inside the window count as actual.
    """

    today = today or date.today()
    start = window_start(today, window_days)

    total_expected = 0.0
    total_actual = 0
    rates: list[HabitCompletionRate] = []

    for habit in habits:
        frequency = habit.frequency_per_week or 0
        if frequency <= 0:
            continue

        active_start = max(local_date(habit.created_at), start)
        active_days = days_between(active_start, today) + 1
        if active_days <= 0:
            continue

        expected = habit_expected_count(active_days, frequency)
        if expected <= 0:
            continue

        actual = sum(1 for day in habit.completed_days if start <= local_date(day) <= today)
        total_expected += expected
        total_actual += actual
        rates.append(
            HabitCompletionRate(
                habit_id=habit.id,
                title=habit.title,
                completion_rate=ratio_percent(actual, expected),
            )
        )

    return ConsistencyResult(
        score=ratio_percent(total_actual, total_expected),
        total_expected=total_expected,
        total_actual=total_actual,
        habit_rates=rates,
    )


def build_heatmap(
    activity_days: Iterable[date],
    task_completions: Iterable[datetime],
    *,
    today: date | None = None,
    days: int = HEATMAP_DAYS,
) -> list[HeatmapCell]:
    """Per-day completion counts for the trailing ``days`` days, zero-filled.

    ``activity_days`` holds one entry per completed habit activity and
    ``task_completions`` one ``completed_at`` per completed task; both
    sources are summed per local day.
    """

    today = today or date.today()
    start = window_start(today, days)

    counts: Counter[str] = Counter()
    for day in activity_days:
        counts[date_key(day)] += 1
    for completed_at in task_completions:
        if completed_at is None:
            continue
        counts[date_key(completed_at)] += 1

    cells: list[HeatmapCell] = []
    for day in day_range(start, today):
        key = date_key(day)
        cells.append(HeatmapCell(date=key, count=counts.get(key, 0)))
    return cells


__all__ = [
    "CONSISTENCY_WINDOW_DAYS",
    "ConsistencyResult",
    "HEATMAP_DAYS",
    "HabitCompletionRate",
    "HeatmapCell",
    "LOW_COMPLETION_LIMIT",
    "build_heatmap",
    "consistency_score",
    "window_start",
]
