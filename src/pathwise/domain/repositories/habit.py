"""Habit repository protocol."""

from __future__ import annotations

from datetime import date
from typing import Optional, Protocol

from ...models.habit import Habit, HabitActivity
from ...services.progress import HabitSnapshot


class HabitRepository(Protocol):
    """Repository for habits and their per-day activity log."""

    def get_by_id(self, habit_id: int, *, user_id: Optional[int] = None) -> Optional[Habit]:
        """Retrieve a habit, optionally scoped to its owner."""
        ...

    def list_for_user(self, *, user_id: int, include_inactive: bool = True) -> list[Habit]:
        """List habits owned by the user."""
        ...

    def list_all(self) -> list[Habit]:
        """List every habit regardless of owner (maintenance jobs)."""
        ...

    def create(self, habit: Habit, *, user_id: int) -> Habit:
        ...

    def update(self, habit: Habit) -> Habit:
        ...

    def set_streak(self, habit_id: int, streak: int) -> None:
        """Write the recomputed streak cache back."""
        ...

    def delete(self, habit_id: int, *, user_id: int) -> Optional[int]:
        """Delete an owned habit and its log, detaching its tasks.

        Returns the number of detached tasks, or ``None`` if nothing matched.
        """
        ...

    def list_activities(
        self,
        habit_id: int,
        *,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        completed_only: bool = False,
    ) -> list[HabitActivity]:
        """Activity rows for a habit, oldest first."""
        ...

    def upsert_activity(self, habit_id: int, occurred_on: date, *, completed: bool) -> HabitActivity:
        """Insert or update the single activity row for a habit and day."""
        ...

    def delete_activities(self, habit_id: int) -> int:
        """Delete a habit's whole activity log; returns rows removed."""
        ...

    def snapshots_for_user(
        self, *, user_id: int, since: Optional[date] = None
    ) -> list[HabitSnapshot]:
        """Habits of a user with completed activity days (from ``since`` when given)."""
        ...
