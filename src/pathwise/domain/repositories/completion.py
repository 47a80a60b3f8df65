"""Completion audit log repository protocol."""

from __future__ import annotations

from datetime import datetime
from typing import Optional, Protocol

from ...models.completion import Completion


class CompletionRepository(Protocol):
    def record(
        self,
        *,
        completed_at: datetime,
        habit_id: Optional[int] = None,
        task_id: Optional[int] = None,
    ) -> Completion:
        ...

    def prune_for_habit(self, habit_id: int, start: datetime, end: datetime) -> int:
        """Remove a habit's completion rows within [start, end]."""
        ...

    def prune_for_task(self, task_id: int) -> int:
        ...

    def list_for_habit(self, habit_id: int) -> list[Completion]:
        ...
