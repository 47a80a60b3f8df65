"""Daily, weekly and monthly task reports.

Each report is built from one batch of task rows (fetched for the whole
period) bucketed per local calendar day in memory. A day's relevant tasks
are those created or due on it, counted once per task id; a day's completed
tasks are those whose ``completed_at`` falls on it.
"""

from __future__ import annotations

from calendar import monthrange
from dataclasses import dataclass
from datetime import date, timedelta
from typing import Iterable, Optional

from ..models.task import Task, TaskStatus
from .dates import date_key, day_range, local_date, round_half_up, weekday_abbreviation

DEFAULT_DAILY_GOAL = 5
WEEK_DAYS = 7


@dataclass(slots=True)
class DayTotals:
    date: str
    total_tasks: int
    completed_tasks: int
    completion_rate: int


@dataclass(slots=True)
class DailyReport:
    date: str
    total_tasks: int
    completed_tasks: int
    completion_rate: int
    energy_level: int
    streak: int


@dataclass(slots=True)
class WeekDay:
    date: str
    day_name: str
    total_tasks: int
    completed_tasks: int
    completion_rate: int


@dataclass(slots=True)
class WeeklyReport:
    week_data: list[WeekDay]
    streak: int
    total_completed: int
    average_completion: int


@dataclass(slots=True)
class MonthDay:
    date: str
    completed_tasks: int
    completion_rate: int


@dataclass(slots=True)
class MonthlyReport:
    year: int
    month: int
    heatmap_data: list[MonthDay]
    total_completed: int
    average_daily: int


def resolve_daily_goal(daily_goal: Optional[int], default: int = DEFAULT_DAILY_GOAL) -> int:
    """Unset or non-positive goals fall back to the default."""

    if not daily_goal or daily_goal <= 0:
        return default
    return daily_goal


def _completed_on(task: Task, day: date) -> bool:
    return (
        task.status == TaskStatus.COMPLETED
        and task.completed_at is not None
        and local_date(task.completed_at) == day
    )


def _relevant_on(task: Task, day: date) -> bool:
    if task.created_at is not None and local_date(task.created_at) == day:
        return True
    return task.due_date is not None and local_date(task.due_date) == day


def summarize_day(tasks: Iterable[Task], day: date) -> DayTotals:
    """Totals for one day: created-or-due tasks vs tasks completed that day."""

    relevant_ids: set[object] = set()
    completed = 0
    for task in tasks:
        if _relevant_on(task, day):
            # Rows without an id yet are distinct by identity.
            relevant_ids.add(task.id if task.id is not None else id(task))
        if _completed_on(task, day):
            completed += 1

    total = len(relevant_ids)
    rate = round_half_up(completed / total * 100) if total > 0 else 0
    return DayTotals(
        date=date_key(day),
        total_tasks=total,
        completed_tasks=completed,
        completion_rate=rate,
    )


def build_daily_report(
    tasks: Iterable[Task],
    *,
    day: date,
    daily_goal: Optional[int],
    streak: int,
) -> DailyReport:
    """Daily report; ``streak`` is the user-wide current task streak."""

    totals = summarize_day(list(tasks), day)
    goal = resolve_daily_goal(daily_goal)
    energy = round_half_up(min(totals.completed_tasks / goal * 100, 100))
    return DailyReport(
        date=totals.date,
        total_tasks=totals.total_tasks,
        completed_tasks=totals.completed_tasks,
        completion_rate=totals.completion_rate,
        energy_level=energy,
        streak=streak,
    )


def week_window(today: date) -> tuple[date, date]:
    """Trailing seven-day window ending today (oldest day first)."""

    return today - timedelta(days=WEEK_DAYS - 1), today


def build_weekly_report(tasks: Iterable[Task], *, today: date, streak: int) -> WeeklyReport:
    rows = list(tasks)
    start, end = week_window(today)

    week_data: list[WeekDay] = []
    for day in day_range(start, end):
        totals = summarize_day(rows, day)
        week_data.append(
            WeekDay(
                date=totals.date,
                day_name=weekday_abbreviation(day),
                total_tasks=totals.total_tasks,
                completed_tasks=totals.completed_tasks,
                completion_rate=totals.completion_rate,
            )
        )

    return WeeklyReport(
        week_data=week_data,
        streak=streak,
        total_completed=sum(d.completed_tasks for d in week_data),
        average_completion=round_half_up(sum(d.completion_rate for d in week_data) / WEEK_DAYS),
    )


def month_bounds(year: int, month: int) -> tuple[date, date]:
    """First and last day of a month given with a 0-indexed ``month``."""

    if not 0 <= month <= 11:
        raise ValueError(f"month must be between 0 and 11, got {month}")
    last_day = monthrange(year, month + 1)[1]
    return date(year, month + 1, 1), date(year, month + 1, last_day)


def build_monthly_report(tasks: Iterable[Task], *, year: int, month: int) -> MonthlyReport:
    """Per-day completion counts for every day of a month (``month`` is 0-indexed)."""

    rows = list(tasks)
    first, last = month_bounds(year, month)

    heatmap_data: list[MonthDay] = []
    for day in day_range(first, last):
        totals = summarize_day(rows, day)
        heatmap_data.append(
            MonthDay(
                date=totals.date,
                completed_tasks=totals.completed_tasks,
                completion_rate=totals.completion_rate,
            )
        )

    total_completed = sum(d.completed_tasks for d in heatmap_data)
    return MonthlyReport(
        year=year,
        month=month,
        heatmap_data=heatmap_data,
        total_completed=total_completed,
        average_daily=round_half_up(total_completed / len(heatmap_data)),
    )


__all__ = [
    "DEFAULT_DAILY_GOAL",
    "DailyReport",
    "DayTotals",
    "MonthDay",
    "MonthlyReport",
    "WeekDay",
    "WeeklyReport",
    "build_daily_report",
    "build_monthly_report",
    "build_weekly_report",
    "month_bounds",
    "resolve_daily_goal",
    "summarize_day",
    "week_window",
]
