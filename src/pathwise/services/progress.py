"""Progress roll-up from habits to milestones to visions."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Iterable, Optional

from .dates import clamp, date_key, days_between, local_date, ratio_percent, round_half_up


@dataclass(slots=True)
class HabitSnapshot:
    """Read-only view of a habit and the days its activity log marks completed."""

    id: int
    title: str
    frequency_per_week: int
    created_at: datetime
    completed_days: list[date] = field(default_factory=list)

    @property
    def completed_count(self) -> int:
        return len(self.completed_days)


@dataclass(slots=True)
class MilestoneSnapshot:
    id: int
    title: str
    status: str
    created_at: datetime
    target_date: Optional[datetime]
    habits: list[HabitSnapshot] = field(default_factory=list)


@dataclass(slots=True)
class VisionSnapshot:
    id: int
    title: str
    created_at: datetime
    updated_at: datetime
    target_date: Optional[datetime]
    milestones: list[MilestoneSnapshot] = field(default_factory=list)


@dataclass(slots=True)
class TrendPoint:
    date: str
    current: Optional[int]
    ideal: int


@dataclass(slots=True)
class VisionTrend:
    vision_id: int
    title: str
    start_date: str
    target_date: str
    current_progress: int
    ideal_progress_today: int
    line: list[TrendPoint]


@dataclass(slots=True)
class RoadmapHabit:
    id: int
    title: str


@dataclass(slots=True)
class RoadmapItem:
    id: int
    title: str
    target_date: str
    status: str
    progress: int
    habits: list[RoadmapHabit]


def habit_expected_count(total_days: int, frequency_per_week: int) -> float:
    """Expected completions for a habit over ``total_days`` calendar days."""

    return total_days * (frequency_per_week / 7)


def milestone_progress(milestone: MilestoneSnapshot) -> int:
    """Progress over the milestone lifecycle ``created_at`` -> ``target_date``.

    Completed activities are counted over the habit's whole log, not only
    inside the lifecycle window.
    """

    if not milestone.habits or milestone.target_date is None:
        return 0

    total_days = days_between(milestone.created_at, milestone.target_date) + 1
    if total_days <= 0:
        return 0

    expected = 0.0
    actual = 0
    for habit in milestone.habits:
        frequency = habit.frequency_per_week or 0
        if frequency <= 0:
            continue
        expected += habit_expected_count(total_days, frequency)
        actual += habit.completed_count

    return ratio_percent(actual, expected)


def vision_progress(vision: VisionSnapshot) -> int:
    """Unweighted mean of the milestones' rounded progress values."""

    if not vision.milestones:
        return 0
    progresses = [milestone_progress(m) for m in vision.milestones]
    mean = sum(progresses) / len(progresses)
    return int(clamp(round_half_up(mean), 0, 100))


def average_vision_progress(visions: Iterable[VisionSnapshot]) -> int:
    """Mean progress across a user's visions, for the overview headline."""

    progresses = [vision_progress(v) for v in visions]
    if not progresses:
        return 0
    return int(clamp(round_half_up(sum(progresses) / len(progresses)), 0, 100))


def _clamp_day(day: date, lower: date, upper: date) -> date:
    if day < lower:
        return lower
    if day > upper:
        return upper
    return day


def vision_trend(vision: VisionSnapshot, *, today: date | None = None) -> Optional[VisionTrend]:
    """Three-point ideal-vs-actual line for charting; None without a target date."""

    if vision.target_date is None:
        return None

    start = local_date(vision.created_at)
    target = local_date(vision.target_date)
    total_days = days_between(start, target)
    current = vision_progress(vision)

    clamped_today = _clamp_day(today or date.today(), start, target)

    ideal_today = 0
    if total_days > 0:
        elapsed = days_between(start, clamped_today)
        ideal_today = int(clamp(round_half_up(elapsed / total_days * 100), 0, 100))

    line = [
        TrendPoint(date=date_key(start), current=0, ideal=0),
        TrendPoint(date=date_key(clamped_today), current=current, ideal=ideal_today),
        TrendPoint(date=date_key(target), current=None, ideal=100),
    ]
    return VisionTrend(
        vision_id=vision.id,
        title=vision.title,
        start_date=date_key(start),
        target_date=date_key(target),
        current_progress=current,
        ideal_progress_today=ideal_today,
        line=line,
    )


def build_roadmap(vision: VisionSnapshot) -> list[RoadmapItem]:
    """Dated milestones of a vision, earliest target first."""

    dated = [m for m in vision.milestones if m.target_date is not None]
    dated.sort(key=lambda m: m.target_date)  # type: ignore[arg-type, return-value]
    return [
        RoadmapItem(
            id=m.id,
            title=m.title,
            target_date=date_key(m.target_date),  # type: ignore[arg-type]
            status=str(getattr(m.status, "value", m.status)),
            progress=milestone_progress(m),
            habits=[RoadmapHabit(id=h.id, title=h.title) for h in m.habits],
        )
        for m in dated
    ]


__all__ = [
    "HabitSnapshot",
    "MilestoneSnapshot",
    "RoadmapHabit",
    "RoadmapItem",
    "TrendPoint",
    "VisionSnapshot",
    "VisionTrend",
    "average_vision_progress",
    "build_roadmap",
    "habit_expected_count",
    "milestone_progress",
    "vision_progress",
    "vision_trend",
]
