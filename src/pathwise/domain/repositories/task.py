"""Task repository protocol."""

from __future__ import annotations

from datetime import datetime
from typing import Optional, Protocol, Sequence

from ...models.task import Task, TaskStatus


class TaskRepository(Protocol):
    """Repository for task rows and the time-range queries reports need."""

    def get_by_id(self, task_id: int, *, user_id: int) -> Optional[Task]:
        ...

    def create(self, task: Task, *, user_id: int) -> Task:
        ...

    def update(self, task: Task) -> Task:
        ...

    def list_for_period(self, start: datetime, end: datetime, *, user_id: int) -> list[Task]:
        """Tasks created, due or completed within [start, end]."""
        ...

    def list_completed(
        self,
        *,
        user_id: int,
        start: Optional[datetime] = None,
        end: Optional[datetime] = None,
    ) -> list[Task]:
        """Completed tasks ordered by ``completed_at`` ascending."""
        ...

    def count_completed(self, *, user_id: int) -> int:
        ...

    def list_for_habit(
        self,
        habit_id: int,
        *,
        created_from: Optional[datetime] = None,
        created_to: Optional[datetime] = None,
    ) -> list[Task]:
        """Tasks linked to a habit, optionally by creation time."""
        ...

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
        """Tasks matching every given filter, sorted by ``order_by``."""
        ...
