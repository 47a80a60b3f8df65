"""Append-only audit trail of completion events."""

from __future__ import annotations

from datetime import datetime
from typing import ClassVar, Optional

from sqlalchemy import DateTime
from sqlmodel import Field, SQLModel


class Completion(SQLModel, table=True):
    """A habit or task completion event; not read by the metric engine."""

    __tablename__: ClassVar[str] = "completion"

    id: Optional[int] = Field(default=None, primary_key=True)
    habit_id: Optional[int] = Field(default=None, foreign_key="habit.id", index=True)
    task_id: Optional[int] = Field(default=None, foreign_key="task.id", index=True)
    completed_at: datetime = Field(
        default_factory=datetime.now, nullable=False, index=True, sa_type=DateTime()
    )
