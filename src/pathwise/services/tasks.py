"""Task status changes, the habit bookkeeping they trigger, and task list views."""

from __future__ import annotations

from datetime import date, datetime, timedelta
from enum import Enum
from typing import TYPE_CHECKING, Optional

from ..errors import NotFoundError
from ..logging_config import get_logger
from ..models.task import Task, TaskStatus
from .dates import end_of_day, start_of_day
from .habits import HabitService

if TYPE_CHECKING:  # pragma: no cover
    from ..domain.repositories import CompletionRepository, TaskRepository

logger = get_logger("services.tasks")

_STATUS_ORDER = {status: index for index, status in enumerate(TaskStatus)}


class TimeFilter(str, Enum):
    ALL = "ALL"
    PAST = "PAST"
    TODAY = "TODAY"
    FUTURE = "FUTURE"


class TaskService:
    def __init__(
        self,
        task_repo: TaskRepository,
        completion_repo: CompletionRepository,
        habit_service: HabitService,
    ):
        self.task_repo = task_repo
        self.completion_repo = completion_repo
        self.habit_service = habit_service

    def _require(self, task_id: int, user_id: int) -> Task:
        task = self.task_repo.get_by_id(task_id, user_id=user_id)
        if task is None:
            raise NotFoundError("Task", task_id)
        return task

    def create_task(
        self,
        *,
        user_id: int,
        title: str,
        habit_id: Optional[int] = None,
        milestone_id: Optional[int] = None,
        due_date: Optional[datetime] = None,
    ) -> Task:
        task = Task(
            title=title.strip(),
            habit_id=habit_id,
            milestone_id=milestone_id,
            due_date=due_date,
            user_id=user_id,
        )
        created = self.task_repo.create(task, user_id=user_id)
        logger.info("Task created", extra={"task_id": created.id, "habit_id": habit_id})
        return created

    def complete_task(self, task_id: int, user_id: int, *, now: datetime | None = None) -> Task:
        return self.update_task_status(task_id, user_id, TaskStatus.COMPLETED, now=now)

    def update_task_status(
        self,
        task_id: int,
        user_id: int,
        status: TaskStatus | str,
        *,
        now: datetime | None = None,
    ) -> Task:
        """Move a task to ``status``, keeping ``completed_at`` and the audit log in step.

        Completing a task that belongs to a habit may complete the habit for
        today; reopening one rebuilds the habit's streak cache.
        """

        now = now or datetime.now()
        status = TaskStatus(status)
        task = self._require(task_id, user_id)
        was_completed = task.status == TaskStatus.COMPLETED

        if status == TaskStatus.COMPLETED and was_completed:
            return task

        task.status = status
        if status == TaskStatus.COMPLETED:
            task.completed_at = now
            task = self.task_repo.update(task)
            self.completion_repo.record(task_id=task.id, completed_at=now)
            if task.habit_id is not None:
                self.habit_service.check_and_auto_complete(task.habit_id, now=now)
                self.habit_service.resync_habit_streak(task.habit_id, today=now.date())
        else:
            task.completed_at = None
            task = self.task_repo.update(task)
            if was_completed:
                self.completion_repo.prune_for_task(task.id)  # type: ignore[arg-type]
                if task.habit_id is not None:
                    self.habit_service.resync_habit_streak(task.habit_id, today=now.date())

        logger.info(
            "Task status changed",
            extra={"task_id": task_id, "status": status.value, "habit_id": task.habit_id},
        )
        return task

    # Read views -----------------------------------------------------------
    def today_tasks(self, user_id: int, *, today: date | None = None) -> list[Task]:
        """Tasks created, due or completed today; open statuses first, newest first within each."""

        today = today or date.today()
        tasks = self.task_repo.list_for_period(
            start_of_day(today), end_of_day(today), user_id=user_id
        )
        tasks.sort(key=lambda t: t.created_at, reverse=True)
        tasks.sort(key=lambda t: _STATUS_ORDER[TaskStatus(t.status)])
        return tasks

    def pending_tasks(self, user_id: int) -> list[Task]:
        """Pending and skipped tasks, newest first."""

        return self.task_repo.search(
            user_id=user_id, statuses=[TaskStatus.PENDING, TaskStatus.SKIPPED]
        )

    def overdue_tasks(self, user_id: int, *, today: date | None = None) -> list[Task]:
        """Pending tasks due before the end of today, most overdue first."""

        today = today or date.today()
        return self.task_repo.search(
            user_id=user_id,
            statuses=[TaskStatus.PENDING],
            due_before=end_of_day(today),
            order_by="due_date",
            descending=False,
        )

    def future_tasks(self, user_id: int, *, today: date | None = None) -> list[Task]:
        """Tasks due from tomorrow on, soonest first."""

        today = today or date.today()
        return self.task_repo.search(
            user_id=user_id,
            due_from=start_of_day(today + timedelta(days=1)),
            order_by="due_date",
            descending=False,
        )

    def filter_tasks(
        self,
        user_id: int,
        *,
        status: TaskStatus | str | None = None,
        time: TimeFilter | str = TimeFilter.ALL,
        due_from: Optional[datetime] = None,
        due_to: Optional[datetime] = None,
        habit_id: Optional[int] = None,
        milestone_id: Optional[int] = None,
        order_by: str = "created_at",
        descending: bool = True,
        today: date | None = None,
    ) -> list[Task]:
        """Combine a status filter, a time bucket and a due-date range.

        ``time`` is relative to ``today``: TODAY matches tasks created or due
        today, PAST those created or due before today, FUTURE those due from
        tomorrow. A due-date range, when both ends are given, replaces the
        TODAY and PAST buckets.
        """

        today = today or date.today()
        time = TimeFilter(time)
        criteria: dict[str, object] = {}
        if status is not None:
            criteria["statuses"] = [TaskStatus(status)]

        if due_from is not None and due_to is not None:
            criteria["due_from"] = due_from
            criteria["due_to"] = due_to
            if time == TimeFilter.FUTURE:
                criteria["due_from"] = max(due_from, start_of_day(today + timedelta(days=1)))
        elif time == TimeFilter.TODAY:
            criteria["created_or_due_from"] = start_of_day(today)
            criteria["created_or_due_to"] = end_of_day(today)
        elif time == TimeFilter.PAST:
            criteria["created_or_due_before"] = start_of_day(today)
        elif time == TimeFilter.FUTURE:
            criteria["due_from"] = start_of_day(today + timedelta(days=1))

        return self.task_repo.search(
            user_id=user_id,
            habit_id=habit_id,
            milestone_id=milestone_id,
            order_by=order_by,
            descending=descending,
            **criteria,  # type: ignore[arg-type]
        )


__all__ = ["TaskService", "TimeFilter"]
