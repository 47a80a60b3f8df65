"""SQLModel implementation of Habit repository."""

from __future__ import annotations

from collections import defaultdict
from datetime import date
from typing import Callable, Optional

from sqlmodel import Session, col, select

from ...models.completion import Completion
from ...models.habit import Habit, HabitActivity
from ...models.task import Task
from ...services.progress import HabitSnapshot


class SQLModelHabitRepository:
    """SQLModel-based habit repository implementation."""

    def __init__(self, session_factory: Callable[[], Session]):
        """Initialize with a session factory."""
        self.session_factory = session_factory

    def get_by_id(self, habit_id: int, *, user_id: Optional[int] = None) -> Optional[Habit]:
        """Retrieve a habit by ID, scoped to its owner when ``user_id`` is given."""
        with self.session_factory() as session:
            statement = select(Habit).where(Habit.id == habit_id)
            if user_id is not None:
                statement = statement.where(Habit.user_id == user_id)
            obj = session.exec(statement).first()
            if obj:
                session.expunge(obj)
            return obj

    def list_for_user(self, *, user_id: int, include_inactive: bool = True) -> list[Habit]:
        """List habits owned by the user, newest first."""
        with self.session_factory() as session:
            statement = (
                select(Habit)
                .where(Habit.user_id == user_id)
                .order_by(col(Habit.created_at).desc())
            )
            if not include_inactive:
                statement = statement.where(Habit.is_active == True)  # noqa: E712
            rows = list(session.exec(statement).all())
            session.expunge_all()
            return rows

    def list_all(self) -> list[Habit]:
        with self.session_factory() as session:
            rows = list(session.exec(select(Habit).order_by(col(Habit.id))).all())
            session.expunge_all()
            return rows

    def create(self, habit: Habit, *, user_id: int) -> Habit:
        """Create a new habit."""
        with self.session_factory() as session:
            habit.user_id = user_id
            session.add(habit)
            session.commit()
            session.refresh(habit)
            session.expunge(habit)
            return habit

    def update(self, habit: Habit) -> Habit:
        """Persist changes to an existing habit."""
        with self.session_factory() as session:
            merged = session.merge(habit)
            session.commit()
            session.refresh(merged)
            session.expunge(merged)
            return merged

    def set_streak(self, habit_id: int, streak: int) -> None:
        with self.session_factory() as session:
            habit = session.get(Habit, habit_id)
            if habit is None:
                return
            habit.streak = streak
            session.add(habit)
            session.commit()

    def delete(self, habit_id: int, *, user_id: int) -> Optional[int]:
        """Delete a habit and its activity log; linked tasks become standalone.

        Returns the number of detached tasks, or ``None`` when the habit is
        not the user's.
        """
        with self.session_factory() as session:
            habit = session.exec(
                select(Habit).where(Habit.id == habit_id).where(Habit.user_id == user_id)
            ).first()
            if habit is None:
                return None

            tasks = session.exec(select(Task).where(Task.habit_id == habit_id)).all()
            for task in tasks:
                task.habit_id = None
                session.add(task)
            for row in session.exec(select(Completion).where(Completion.habit_id == habit_id)).all():
                session.delete(row)
            session.delete(habit)
            session.commit()
            return len(tasks)

    # Activity log operations
    def list_activities(
        self,
        habit_id: int,
        *,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        completed_only: bool = False,
    ) -> list[HabitActivity]:
        """Get activity rows for a habit, oldest first."""
        with self.session_factory() as session:
            statement = select(HabitActivity).where(HabitActivity.habit_id == habit_id)
            if start_date is not None:
                statement = statement.where(HabitActivity.occurred_on >= start_date)
            if end_date is not None:
                statement = statement.where(HabitActivity.occurred_on <= end_date)
            if completed_only:
                statement = statement.where(HabitActivity.completed == True)  # noqa: E712
            statement = statement.order_by(col(HabitActivity.occurred_on))
            rows = list(session.exec(statement).all())
            session.expunge_all()
            return rows

    def upsert_activity(self, habit_id: int, occurred_on: date, *, completed: bool) -> HabitActivity:
        """Insert or update the activity row for a habit and day."""
        with self.session_factory() as session:
            existing = session.exec(
                select(HabitActivity)
                .where(HabitActivity.habit_id == habit_id)
                .where(HabitActivity.occurred_on == occurred_on)
            ).first()

            if existing:
                existing.completed = completed
                row = existing
            else:
                row = HabitActivity(habit_id=habit_id, occurred_on=occurred_on, completed=completed)
            session.add(row)
            session.commit()
            session.refresh(row)
            session.expunge(row)
            return row

    def delete_activities(self, habit_id: int) -> int:
        """Delete the whole activity log of a habit."""
        with self.session_factory() as session:
            rows = session.exec(
                select(HabitActivity).where(HabitActivity.habit_id == habit_id)
            ).all()
            for row in rows:
                session.delete(row)
            session.commit()
            return len(rows)

    def snapshots_for_user(
        self, *, user_id: int, since: Optional[date] = None
    ) -> list[HabitSnapshot]:
        """Habits of a user with their completed activity days."""
        with self.session_factory() as session:
            habits = list(
                session.exec(
                    select(Habit).where(Habit.user_id == user_id).order_by(col(Habit.created_at))
                ).all()
            )
            habit_ids = [h.id for h in habits if h.id is not None]

            days_by_habit: dict[int, list[date]] = defaultdict(list)
            if habit_ids:
                statement = (
                    select(HabitActivity)
                    .where(col(HabitActivity.habit_id).in_(habit_ids))
                    .where(HabitActivity.completed == True)  # noqa: E712
                )
                if since is not None:
                    statement = statement.where(HabitActivity.occurred_on >= since)
                for activity in session.exec(statement).all():
                    days_by_habit[activity.habit_id].append(activity.occurred_on)

            return [
                HabitSnapshot(
                    id=h.id,  # type: ignore[arg-type]
                    title=h.title,
                    frequency_per_week=h.frequency_per_week,
                    created_at=h.created_at,
                    completed_days=sorted(days_by_habit.get(h.id, [])),  # type: ignore[arg-type]
                )
                for h in habits
            ]
