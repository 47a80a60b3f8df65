"""Task data structures."""

from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import TYPE_CHECKING, ClassVar, Optional

from sqlalchemy import DateTime
from sqlalchemy.orm import relationship
from sqlmodel import Field, Relationship, SQLModel

if TYPE_CHECKING:  # pragma: no cover
    from .user import User


class TaskStatus(str, Enum):
    PENDING = "PENDING"
    IN_PROGRESS = "IN_PROGRESS"
    COMPLETED = "COMPLETED"
    SKIPPED = "SKIPPED"


class Task(SQLModel, table=True):
    """A one-off actionable item, optionally linked to a habit or milestone.

    ``completed_at`` is set if and only if ``status`` is COMPLETED; the task
    service keeps the two in step.
    """

    __tablename__: ClassVar[str] = "task"

    id: Optional[int] = Field(default=None, primary_key=True)
    user_id: int = Field(foreign_key="user.id", nullable=False, index=True)
    habit_id: Optional[int] = Field(default=None, foreign_key="habit.id", index=True)
    milestone_id: Optional[int] = Field(default=None, foreign_key="milestone.id", index=True)
    title: str = Field(nullable=False, max_length=200)
    status: TaskStatus = Field(default=TaskStatus.PENDING, nullable=False, index=True)
    created_at: datetime = Field(
        default_factory=datetime.now, nullable=False, index=True, sa_type=DateTime()
    )
    due_date: Optional[datetime] = Field(default=None, index=True, sa_type=DateTime())
    completed_at: Optional[datetime] = Field(default=None, index=True, sa_type=DateTime())

    user: "User" = Relationship(sa_relationship=relationship("User", back_populates="tasks"))

    @property
    def is_completed(self) -> bool:
        return self.status == TaskStatus.COMPLETED and self.completed_at is not None
