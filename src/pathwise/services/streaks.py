"""Streak calculations for habits and tasks.

Two deliberately different definitions live here:

* the *current* streak walks backwards from today over a set of completed
  days (per habit from its activity log, or user-wide from completed tasks);
* the *longest* streak is user-wide and sweeps every distinct day on which
  the user completed a task.
"""

from __future__ import annotations

from datetime import date, timedelta
from typing import Iterable

from ..models.habit import HabitActivity
from ..models.task import Task
from .dates import local_date

MAX_STREAK_DAYS = 365


def is_scheduled_day(day: date) -> bool:
    """Every calendar day counts as scheduled; habits carry no weekday mask."""

    return True


def walk_back_streak(
    completed_days: set[date], *, today: date, max_days: int = MAX_STREAK_DAYS
) -> int:
    """Count consecutive completed days walking back from ``today``.

    An uncompleted *today* is skipped rather than ending the streak; the
    first uncompleted past day stops the walk. At most ``max_days`` days are
    inspected, which also caps the result.
    """

    streak = 0
    cursor = today
    for _ in range(max_days):
        if not is_scheduled_day(cursor):
            cursor -= timedelta(days=1)
            continue
        if cursor in completed_days:
            streak += 1
        elif cursor != today:
            break
        cursor -= timedelta(days=1)
    return streak


def completed_activity_days(activities: Iterable[HabitActivity]) -> set[date]:
    return {local_date(a.occurred_on) for a in activities if a.completed}


def completed_task_days(tasks: Iterable[Task]) -> set[date]:
    return {
        local_date(t.completed_at)
        for t in tasks
        if t.is_completed and t.completed_at is not None
    }


def streak_from_days(
    completed_days: Iterable[date],
    *,
    today: date | None = None,
    frequency_per_week: int = 7,
) -> int:
    """Current habit streak from the days its activity log marks completed."""

    if not frequency_per_week or frequency_per_week < 1:
        return 0
    days = {local_date(d) for d in completed_days}
    if not days:
        return 0
    return walk_back_streak(days, today=today or date.today())


def current_habit_streak(
    activities: Iterable[HabitActivity],
    *,
    today: date | None = None,
    frequency_per_week: int = 7,
) -> int:
    """Return a habit's current streak from its activity log."""

    return streak_from_days(
        completed_activity_days(activities), today=today, frequency_per_week=frequency_per_week
    )


def current_task_streak(tasks: Iterable[Task], *, today: date | None = None) -> int:
    """Return the user-wide streak of days with at least one completed task."""

    days = completed_task_days(tasks)
    if not days:
        return 0
    return walk_back_streak(days, today=today or date.today())


def longest_task_streak(tasks: Iterable[Task]) -> int:
    """Return the longest run of consecutive days with a completed task."""

    days = sorted(completed_task_days(tasks))
    longest = 0
    run = 0
    last_day: date | None = None
    for day in days:
        if last_day is not None and day == last_day + timedelta(days=1):
            run += 1
        else:
            run = 1
        longest = max(longest, run)
        last_day = day
    return longest


__all__ = [
    "MAX_STREAK_DAYS",
    "completed_activity_days",
    "completed_task_days",
    "current_habit_streak",
    "current_task_streak",
    "is_scheduled_day",
    "longest_task_streak",
    "streak_from_days",
    "walk_back_streak",
]
