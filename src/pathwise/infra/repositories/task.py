"""SQLModel implementation of Task repository."""

from __future__ import annotations

from datetime import datetime
from typing import Callable, Optional, Sequence

from sqlalchemy import and_, func, or_
from sqlmodel import Session, col, select

from ...models.task import Task, TaskStatus

TASK_SORT_FIELDS = ("due_date", "created_at", "completed_at", "title")


class SQLModelTaskRepository:
    """SQLModel-based task repository implementation."""

    def __init__(self, session_factory: Callable[[], Session]):
        """Initialize with a session factory."""
        self.session_factory = session_factory

    def get_by_id(self, task_id: int, *, user_id: int) -> Optional[Task]:
        """Retrieve a task by ID."""
        with self.session_factory() as session:
            obj = session.exec(
                select(Task).where(Task.id == task_id).where(Task.user_id == user_id)
            ).first()
            if obj:
                session.expunge(obj)
            return obj

    def create(self, task: Task, *, user_id: int) -> Task:
        with self.session_factory() as session:
            task.user_id = user_id
            session.add(task)
            session.commit()
            session.refresh(task)
            session.expunge(task)
            return task

    def update(self, task: Task) -> Task:
        with self.session_factory() as session:
            merged = session.merge(task)
            session.commit()
            session.refresh(merged)
            session.expunge(merged)
            return merged

    def list_for_period(self, start: datetime, end: datetime, *, user_id: int) -> list[Task]:
        """Tasks created, due or completed within [start, end]."""
        with self.session_factory() as session:
            statement = (
                select(Task)
                .where(Task.user_id == user_id)
                .where(
                    or_(
                        and_(col(Task.created_at) >= start, col(Task.created_at) <= end),
                        and_(col(Task.due_date) >= start, col(Task.due_date) <= end),
                        and_(col(Task.completed_at) >= start, col(Task.completed_at) <= end),
                    )
                )
                .order_by(col(Task.created_at))
            )
            rows = list(session.exec(statement).all())
            session.expunge_all()
            return rows

    def list_completed(
        self,
        *,
        user_id: int,
        start: Optional[datetime] = None,
        end: Optional[datetime] = None,
    ) -> list[Task]:
        """Completed tasks ordered by completion time."""
        with self.session_factory() as session:
            statement = (
                select(Task)
                .where(Task.user_id == user_id)
                .where(Task.status == TaskStatus.COMPLETED)
                .where(col(Task.completed_at).is_not(None))
            )
            if start is not None:
                statement = statement.where(col(Task.completed_at) >= start)
            if end is not None:
                statement = statement.where(col(Task.completed_at) <= end)
            statement = statement.order_by(col(Task.completed_at))
            rows = list(session.exec(statement).all())
            session.expunge_all()
            return rows

    def count_completed(self, *, user_id: int) -> int:
        with self.session_factory() as session:
            statement = (
                select(func.count())
                .select_from(Task)
                .where(Task.user_id == user_id)
                .where(Task.status == TaskStatus.COMPLETED)
            )
            return int(session.exec(statement).one())

    def list_for_habit(
        self,
        habit_id: int,
        *,
        created_from: Optional[datetime] = None,
        created_to: Optional[datetime] = None,
    ) -> list[Task]:
        with self.session_factory() as session:
            statement = select(Task).where(Task.habit_id == habit_id)
            if created_from is not None:
                statement = statement.where(col(Task.created_at) >= created_from)
            if created_to is not None:
                statement = statement.where(col(Task.created_at) <= created_to)
            rows = list(session.exec(statement.order_by(col(Task.created_at))).all())
            session.expunge_all()
            return rows

    def search(
        self,
        *,
        user_id: int,
        statuses: Optional[Sequence[TaskStatus]] = None,
        created_or_due_from: Optional[datetime] = None,
        created_or_due_to: Optional[datetime] = None,
        created_or_due_before: Optional[datetime] = None,
        due_from: Optional[datetime] = None,
        due_to: Optional[datetime] = None,
        due_before: Optional[datetime] = None,
        habit_id: Optional[int] = None,
        milestone_id: Optional[int] = None,
        order_by: str = "created_at",
        descending: bool = True,
    ) -> list[Task]:
        """Search tasks with optional filters; rows without the sort column come last."""
        if order_by not in TASK_SORT_FIELDS:
            raise ValueError(f"Cannot sort tasks by {order_by!r}")
        with self.session_factory() as session:
            statement = select(Task).where(Task.user_id == user_id)
            if statuses:
                statement = statement.where(col(Task.status).in_(list(statuses)))
            if created_or_due_from is not None and created_or_due_to is not None:
                statement = statement.where(
                    or_(
                        and_(
                            col(Task.created_at) >= created_or_due_from,
                            col(Task.created_at) <= created_or_due_to,
                        ),
                        and_(
                            col(Task.due_date) >= created_or_due_from,
                            col(Task.due_date) <= created_or_due_to,
                        ),
                    )
                )
            if created_or_due_before is not None:
                statement = statement.where(
                    or_(
                        col(Task.created_at) < created_or_due_before,
                        col(Task.due_date) < created_or_due_before,
                    )
                )
            if due_from is not None:
                statement = statement.where(col(Task.due_date) >= due_from)
            if due_to is not None:
                statement = statement.where(col(Task.due_date) <= due_to)
            if due_before is not None:
                statement = statement.where(col(Task.due_date) < due_before)
            if habit_id is not None:
                statement = statement.where(Task.habit_id == habit_id)
            if milestone_id is not None:
                statement = statement.where(Task.milestone_id == milestone_id)

            column = col(getattr(Task, order_by))
            statement = statement.order_by(
                column.is_(None),
                column.desc() if descending else column.asc(),
                col(Task.id).desc() if descending else col(Task.id).asc(),
            )
            rows = list(session.exec(statement).all())
            session.expunge_all()
            return rows
