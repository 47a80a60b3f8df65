"""Discipline journal entries."""

from __future__ import annotations

from datetime import datetime
from typing import ClassVar, Optional

from sqlalchemy import DateTime
from sqlmodel import Field, SQLModel


class Journal(SQLModel, table=True):
    """A user's explanation for a broken run of days, with its rule-based analysis."""

    __tablename__: ClassVar[str] = "journal"

    id: Optional[int] = Field(default=None, primary_key=True)
    user_id: int = Field(foreign_key="user.id", nullable=False, index=True)
    reason: str = Field(nullable=False, max_length=2000)
    analysis: str = Field(default="{}", nullable=False)
    streak_count: int = Field(default=0, nullable=False)
    created_at: datetime = Field(
        default_factory=datetime.now, nullable=False, index=True, sa_type=DateTime()
    )
