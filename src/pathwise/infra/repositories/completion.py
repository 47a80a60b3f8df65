"""SQLModel implementation of the completion audit log."""

from __future__ import annotations

from datetime import datetime
from typing import Callable, Optional

from sqlmodel import Session, col, select

from ...models.completion import Completion


class SQLModelCompletionRepository:
    """Append-only writes plus pruning when a completion is taken back."""

    def __init__(self, session_factory: Callable[[], Session]):
        self.session_factory = session_factory

    def record(
        self,
        *,
        completed_at: datetime,
        habit_id: Optional[int] = None,
        task_id: Optional[int] = None,
    ) -> Completion:
        if habit_id is None and task_id is None:
            raise ValueError("A completion needs a habit_id or a task_id")
        with self.session_factory() as session:
            row = Completion(habit_id=habit_id, task_id=task_id, completed_at=completed_at)
            session.add(row)
            session.commit()
            session.refresh(row)
            session.expunge(row)
            return row

    def _delete_rows(self, statement) -> int:
        with self.session_factory() as session:
            rows = session.exec(statement).all()
            for row in rows:
                session.delete(row)
            session.commit()
            return len(rows)

    def prune_for_habit(self, habit_id: int, start: datetime, end: datetime) -> int:
        return self._delete_rows(
            select(Completion)
            .where(Completion.habit_id == habit_id)
            .where(col(Completion.completed_at) >= start)
            .where(col(Completion.completed_at) <= end)
        )

    def prune_for_task(self, task_id: int) -> int:
        return self._delete_rows(select(Completion).where(Completion.task_id == task_id))

    def list_for_habit(self, habit_id: int) -> list[Completion]:
        with self.session_factory() as session:
            rows = list(
                session.exec(
                    select(Completion)
                    .where(Completion.habit_id == habit_id)
                    .order_by(col(Completion.completed_at))
                ).all()
            )
            session.expunge_all()
            return rows

    def list_for_task(self, task_id: int) -> list[Completion]:
        with self.session_factory() as session:
            rows = list(
                session.exec(select(Completion).where(Completion.task_id == task_id)).all()
            )
            session.expunge_all()
            return rows
