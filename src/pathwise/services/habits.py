"""Habit lifecycle: completion toggles, cache resyncs and frequency changes.

``Habit.streak`` and ``Habit.completed_today`` are caches. Every operation
here that touches the activity log recomputes the streak from that log and
writes it back, so the cache always matches a from-scratch computation.
"""

from __future__ import annotations

from datetime import date, datetime, timedelta
from typing import TYPE_CHECKING, Optional

from ..errors import HabitCompletionBlocked, NotFoundError
from ..logging_config import get_logger
from ..models.habit import Habit
from ..models.task import TaskStatus
from .dates import date_key, end_of_day, local_date, start_of_day
from .streaks import current_habit_streak

if TYPE_CHECKING:  # pragma: no cover
    from ..domain.repositories import CompletionRepository, HabitRepository, TaskRepository

logger = get_logger("services.habits")

MIN_FREQUENCY = 1
MAX_FREQUENCY = 7


def is_completed_today(habit: Habit, today: date) -> bool:
    """Read the ``completed_today`` cache, ignoring a flag left over from another day."""

    if not habit.completed_today or habit.last_completed_at is None:
        return False
    return local_date(habit.last_completed_at) == today


def validate_frequency(frequency_per_week: int) -> int:
    if not MIN_FREQUENCY <= frequency_per_week <= MAX_FREQUENCY:
        raise ValueError(
            f"frequency_per_week must be between {MIN_FREQUENCY} and {MAX_FREQUENCY}, "
            f"got {frequency_per_week}"
        )
    return frequency_per_week


class HabitService:
    """Mutating habit operations on top of the habit, task and completion repositories."""

    def __init__(
        self,
        habit_repo: HabitRepository,
        task_repo: TaskRepository,
        completion_repo: CompletionRepository,
    ):
        self.habit_repo = habit_repo
        self.task_repo = task_repo
        self.completion_repo = completion_repo

    def _require(self, habit_id: int, user_id: int) -> Habit:
        habit = self.habit_repo.get_by_id(habit_id, user_id=user_id)
        if habit is None:
            raise NotFoundError("Habit", habit_id)
        return habit

    def create_habit(
        self,
        *,
        user_id: int,
        title: str,
        frequency_per_week: int = MAX_FREQUENCY,
        milestone_id: Optional[int] = None,
    ) -> Habit:
        habit = Habit(
            title=title.strip(),
            frequency_per_week=validate_frequency(frequency_per_week),
            milestone_id=milestone_id,
            user_id=user_id,
        )
        created = self.habit_repo.create(habit, user_id=user_id)
        logger.info("Habit created", extra={"habit_id": created.id, "user_id": user_id})
        return created

    # Streak cache ---------------------------------------------------------
    def compute_streak(self, habit: Habit, *, today: date | None = None) -> int:
        activities = self.habit_repo.list_activities(habit.id, completed_only=True)  # type: ignore[arg-type]
        return current_habit_streak(
            activities, today=today, frequency_per_week=habit.frequency_per_week
        )

    def resync_habit_streak(self, habit_id: int, *, today: date | None = None) -> int:
        """Rebuild one habit's cached streak from its activity log."""

        habit = self.habit_repo.get_by_id(habit_id)
        if habit is None:
            raise NotFoundError("Habit", habit_id)
        streak = self.compute_streak(habit, today=today)
        self.habit_repo.set_streak(habit_id, streak)
        logger.debug("Habit streak resynced", extra={"habit_id": habit_id, "streak": streak})
        return streak

    def resync_all_habit_streaks(self, *, today: date | None = None) -> dict[int, int]:
        """Rebuild every habit's cached streak; returns ``{habit_id: streak}``."""

        results: dict[int, int] = {}
        for habit in self.habit_repo.list_all():
            streak = self.compute_streak(habit, today=today)
            self.habit_repo.set_streak(habit.id, streak)  # type: ignore[arg-type]
            results[habit.id] = streak  # type: ignore[index]
        logger.info("Resynced habit streaks", extra={"habits": len(results)})
        return results

    def reset_stale_completed_today(self, *, today: date | None = None) -> int:
        """Clear ``completed_today`` flags that were set on an earlier day."""

        today = today or date.today()
        cleared = 0
        for habit in self.habit_repo.list_all():
            if habit.completed_today and not is_completed_today(habit, today):
                habit.completed_today = False
                self.habit_repo.update(habit)
                cleared += 1
        if cleared:
            logger.info("Cleared stale completed_today flags", extra={"habits": cleared})
        return cleared

    # Completion ------------------------------------------------------------
    def _todays_tasks_done(self, habit_id: int, now: datetime) -> bool:
        tasks = self.task_repo.list_for_habit(
            habit_id, created_from=start_of_day(now), created_to=end_of_day(now)
        )
        # No tasks today leaves the habit free to be completed by hand.
        return all(task.status == TaskStatus.COMPLETED for task in tasks)

    def can_manually_complete(self, habit_id: int, user_id: int, *, now: datetime | None = None) -> bool:
        self._require(habit_id, user_id)
        return self._todays_tasks_done(habit_id, now or datetime.now())

    def _mark_completed(self, habit: Habit, now: datetime) -> Habit:
        habit.completed_today = True
        habit.last_completed_at = now
        self.habit_repo.upsert_activity(habit.id, now.date(), completed=True)  # type: ignore[arg-type]
        self.completion_repo.record(habit_id=habit.id, completed_at=now)
        habit.streak = self.compute_streak(habit, today=now.date())
        return self.habit_repo.update(habit)

    def _mark_uncompleted(self, habit: Habit, now: datetime) -> Habit:
        # Every completed task linked to the habit goes back to pending.
        for task in self.task_repo.list_for_habit(habit.id):  # type: ignore[arg-type]
            if task.status == TaskStatus.COMPLETED:
                task.status = TaskStatus.PENDING
                task.completed_at = None
                self.task_repo.update(task)

        habit.completed_today = False
        habit.last_completed_at = now
        self.habit_repo.upsert_activity(habit.id, now.date(), completed=False)  # type: ignore[arg-type]
        self.completion_repo.prune_for_habit(habit.id, start_of_day(now), end_of_day(now))  # type: ignore[arg-type]
        habit.streak = self.compute_streak(habit, today=now.date())
        return self.habit_repo.update(habit)

    def toggle_completed_today(self, habit_id: int, user_id: int, *, now: datetime | None = None) -> Habit:
        """Flip today's completion for a habit and recompute its streak.

        Completing by hand is refused while any task linked to the habit and
        created today is still open.
        """

        now = now or datetime.now()
        habit = self._require(habit_id, user_id)

        if is_completed_today(habit, now.date()):
            updated = self._mark_uncompleted(habit, now)
            logger.info("Habit uncompleted", extra={"habit_id": habit_id, "streak": updated.streak})
            return updated

        if not self._todays_tasks_done(habit_id, now):
            raise HabitCompletionBlocked(
                "Cannot manually complete habit with open tasks. Complete all tasks instead."
            )
        updated = self._mark_completed(habit, now)
        logger.info("Habit completed", extra={"habit_id": habit_id, "streak": updated.streak})
        return updated

    def check_and_auto_complete(self, habit_id: int, *, now: datetime | None = None) -> bool:
        """Complete the habit once all of today's linked tasks are done."""

        now = now or datetime.now()
        habit = self.habit_repo.get_by_id(habit_id)
        if habit is None:
            return False
        if is_completed_today(habit, now.date()) or not self._todays_tasks_done(habit_id, now):
            return False
        self._mark_completed(habit, now)
        logger.info("Habit auto-completed", extra={"habit_id": habit_id})
        return True

    # Settings ------------------------------------------------------------
    def change_frequency(self, habit_id: int, user_id: int, frequency_per_week: int) -> Habit:
        """Set a new weekly frequency; the old activity history no longer applies and is cleared."""

        habit = self._require(habit_id, user_id)
        habit.frequency_per_week = validate_frequency(frequency_per_week)
        removed = self.habit_repo.delete_activities(habit_id)
        habit.streak = 0
        habit.completed_today = False
        habit.last_completed_at = None
        updated = self.habit_repo.update(habit)
        logger.info(
            "Habit frequency changed",
            extra={"habit_id": habit_id, "frequency_per_week": frequency_per_week, "cleared": removed},
        )
        return updated

    def toggle_active(self, habit_id: int, user_id: int) -> Habit:
        habit = self._require(habit_id, user_id)
        habit.is_active = not habit.is_active
        updated = self.habit_repo.update(habit)
        logger.info(
            "Habit active flag toggled",
            extra={"habit_id": habit_id, "is_active": updated.is_active},
        )
        return updated

    def delete_habit(self, habit_id: int, user_id: int) -> int:
        """Delete a habit with its activity log; its tasks are kept as standalone tasks."""

        detached = self.habit_repo.delete(habit_id, user_id=user_id)
        if detached is None:
            raise NotFoundError("Habit", habit_id)
        logger.info("Habit deleted", extra={"habit_id": habit_id, "detached_tasks": detached})
        return detached

    # Read helpers -----------------------------------------------------------
    def habit_activity_window(
        self, habit_id: int, user_id: int, *, days: int = 30, today: date | None = None
    ) -> list[dict[str, object]]:
        """Zero-filled ``[{date, completed}]`` for the trailing ``days`` days."""

        if days <= 0:
            raise ValueError("days must be positive")
        self._require(habit_id, user_id)
        today = today or date.today()
        start = today - timedelta(days=days - 1)
        rows = self.habit_repo.list_activities(habit_id, start_date=start, end_date=today)
        by_day = {row.occurred_on: row.completed for row in rows}
        return [
            {"date": date_key(start + timedelta(days=offset)),
             "completed": by_day.get(start + timedelta(days=offset), False)}
            for offset in range(days)
        ]

    def best_cached_streak(self, user_id: int) -> int:
        return max((h.streak or 0 for h in self.habit_repo.list_for_user(user_id=user_id)), default=0)

    def completed_today_count(self, user_id: int, *, today: date | None = None) -> int:
        today = today or date.today()
        habits = self.habit_repo.list_for_user(user_id=user_id, include_inactive=False)
        return sum(1 for h in habits if is_completed_today(h, today))

    def total_active_habits(self, user_id: int) -> int:
        return len(self.habit_repo.list_for_user(user_id=user_id, include_inactive=False))


__all__ = ["HabitService", "is_completed_today", "validate_frequency"]
