"""Analytics facade: streaks, reports and the overview assembled from repositories."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import TYPE_CHECKING, Optional

from ..logging_config import get_logger
from .consistency import (
    CONSISTENCY_WINDOW_DAYS,
    HEATMAP_DAYS,
    LOW_COMPLETION_LIMIT,
    HabitCompletionRate,
    HeatmapCell,
    build_heatmap,
    consistency_score,
    window_start,
)
from .dates import end_of_day, start_of_day
from .progress import RoadmapItem, VisionTrend, average_vision_progress, build_roadmap, vision_trend
from .reports import (
    DEFAULT_DAILY_GOAL,
    DailyReport,
    MonthlyReport,
    WeeklyReport,
    build_daily_report,
    build_monthly_report,
    build_weekly_report,
    month_bounds,
    resolve_daily_goal,
    week_window,
)
from .streaks import current_task_streak, longest_task_streak, streak_from_days

if TYPE_CHECKING:  # pragma: no cover
    from ..domain.repositories import (
        GoalRepository,
        HabitRepository,
        SettingsRepository,
        TaskRepository,
    )

logger = get_logger("services.analytics")


@dataclass(slots=True)
class StreakSummary:
    current: int
    longest: int


@dataclass(slots=True)
class VisionOption:
    id: int
    title: str
    created_at: datetime
    updated_at: datetime
    target_date: Optional[datetime]


@dataclass(slots=True)
class Overview:
    total_vision_progress: int
    consistency_score: int
    best_streak: int
    total_tasks_completed: int
    heatmap: list[HeatmapCell]
    vision_trend: Optional[VisionTrend]
    visions: list[VisionOption]
    selected_vision_id: Optional[int]
    roadmap: list[RoadmapItem] = field(default_factory=list)
    low_completion_habits: list[HabitCompletionRate] = field(default_factory=list)


class AnalyticsService:
    """Read-only analytics for one user at a time."""

    def __init__(
        self,
        *,
        task_repo: TaskRepository,
        habit_repo: HabitRepository,
        goal_repo: GoalRepository,
        settings_repo: SettingsRepository,
        default_daily_goal: int = DEFAULT_DAILY_GOAL,
    ):
        self.task_repo = task_repo
        self.habit_repo = habit_repo
        self.goal_repo = goal_repo
        self.settings_repo = settings_repo
        self.default_daily_goal = default_daily_goal

    def current_streak(self, user_id: int, *, today: date | None = None) -> int:
        return current_task_streak(self.task_repo.list_completed(user_id=user_id), today=today)

    def streaks(self, user_id: int, *, today: date | None = None) -> StreakSummary:
        completed = self.task_repo.list_completed(user_id=user_id)
        return StreakSummary(
            current=current_task_streak(completed, today=today),
            longest=longest_task_streak(completed),
        )

    def daily_goal(self, user_id: int) -> int:
        stored = self.settings_repo.get_daily_goal(user_id=user_id)
        return resolve_daily_goal(stored, default=self.default_daily_goal)

    # Reports --------------------------------------------------------------
    def daily_report(self, user_id: int, *, day: date | None = None) -> DailyReport:
        day = day or date.today()
        tasks = self.task_repo.list_for_period(start_of_day(day), end_of_day(day), user_id=user_id)
        return build_daily_report(
            tasks,
            day=day,
            daily_goal=self.daily_goal(user_id),
            streak=self.current_streak(user_id, today=date.today()),
        )

    def weekly_report(self, user_id: int, *, today: date | None = None) -> WeeklyReport:
        today = today or date.today()
        start, end = week_window(today)
        tasks = self.task_repo.list_for_period(start_of_day(start), end_of_day(end), user_id=user_id)
        return build_weekly_report(tasks, today=today, streak=self.current_streak(user_id, today=today))

    def monthly_report(
        self, user_id: int, *, year: int | None = None, month: int | None = None
    ) -> MonthlyReport:
        """Month report; ``month`` is 0-indexed and both default to the current month."""

        today = date.today()
        year = today.year if year is None else year
        month = today.month - 1 if month is None else month
        first, last = month_bounds(year, month)
        tasks = self.task_repo.list_for_period(start_of_day(first), end_of_day(last), user_id=user_id)
        return build_monthly_report(tasks, year=year, month=month)

    # Overview -------------------------------------------------------------
    def overview(
        self, user_id: int, *, vision_id: int | None = None, today: date | None = None
    ) -> Overview:
        today = today or date.today()

        visions = self.goal_repo.list_snapshots(user_id=user_id)
        options = [
            VisionOption(
                id=v.id,
                title=v.title,
                created_at=v.created_at,
                updated_at=v.updated_at,
                target_date=v.target_date,
            )
            for v in visions
        ]

        heatmap_start = window_start(today, HEATMAP_DAYS)
        habits = self.habit_repo.snapshots_for_user(user_id=user_id, since=heatmap_start)
        consistency = consistency_score(habits, today=today, window_days=CONSISTENCY_WINDOW_DAYS)

        # The streak walk never looks back further than the heatmap window.
        best_streak = max(
            (
                streak_from_days(h.completed_days, today=today, frequency_per_week=h.frequency_per_week)
                for h in habits
            ),
            default=0,
        )

        completed_tasks = self.task_repo.list_completed(
            user_id=user_id, start=start_of_day(heatmap_start), end=end_of_day(today)
        )
        heatmap = build_heatmap(
            [day for h in habits for day in h.completed_days],
            [t.completed_at for t in completed_tasks],  # type: ignore[misc]
            today=today,
            days=HEATMAP_DAYS,
        )

        if vision_id is not None:
            selected = self.goal_repo.get_snapshot(vision_id, user_id=user_id)
        else:
            selected = self.goal_repo.latest_snapshot(user_id=user_id)

        trend = vision_trend(selected, today=today) if selected else None
        roadmap = build_roadmap(selected) if selected and selected.target_date else []

        logger.debug(
            "Overview computed",
            extra={"user_id": user_id, "visions": len(visions), "habits": len(habits)},
        )
        return Overview(
            total_vision_progress=average_vision_progress(visions),
            consistency_score=consistency.score,
            best_streak=best_streak,
            total_tasks_completed=self.task_repo.count_completed(user_id=user_id),
            heatmap=heatmap,
            vision_trend=trend,
            visions=options,
            selected_vision_id=selected.id if selected else None,
            roadmap=roadmap,
            low_completion_habits=consistency.lowest(LOW_COMPLETION_LIMIT),
        )


__all__ = ["AnalyticsService", "Overview", "StreakSummary", "VisionOption"]
