"""Vision and milestone data structures."""

from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import TYPE_CHECKING, ClassVar, Optional

from sqlalchemy import DateTime
from sqlalchemy.orm import relationship
from sqlmodel import Field, Relationship, SQLModel

if TYPE_CHECKING:  # pragma: no cover
    from .habit import Habit
    from .user import User


class MilestoneStatus(str, Enum):
    PLANNED = "PLANNED"
    IN_PROGRESS = "IN_PROGRESS"
    COMPLETED = "COMPLETED"


class Vision(SQLModel, table=True):
    """Top-level long-term goal owned by a user."""

    __tablename__: ClassVar[str] = "vision"

    id: Optional[int] = Field(default=None, primary_key=True)
    user_id: int = Field(foreign_key="user.id", nullable=False, index=True)
    title: str = Field(nullable=False, max_length=120)
    description: str = Field(default="", max_length=500)
    created_at: datetime = Field(default_factory=datetime.now, nullable=False, sa_type=DateTime())
    updated_at: datetime = Field(
        default_factory=datetime.now, nullable=False, index=True, sa_type=DateTime()
    )
    target_date: Optional[datetime] = Field(default=None, sa_type=DateTime())

    milestones: list["Milestone"] = Relationship(
        back_populates="vision",
        sa_relationship=relationship(
            "Milestone", back_populates="vision", cascade="all, delete-orphan"
        ),
    )
    user: "User" = Relationship(sa_relationship=relationship("User", back_populates="visions"))


class Milestone(SQLModel, table=True):
    """A dated sub-goal under a vision."""

    __tablename__: ClassVar[str] = "milestone"

    id: Optional[int] = Field(default=None, primary_key=True)
    vision_id: int = Field(foreign_key="vision.id", nullable=False, index=True)
    title: str = Field(nullable=False, max_length=120)
    status: MilestoneStatus = Field(default=MilestoneStatus.PLANNED, nullable=False)
    created_at: datetime = Field(default_factory=datetime.now, nullable=False, sa_type=DateTime())
    target_date: Optional[datetime] = Field(default=None, sa_type=DateTime())

    vision: "Vision" = Relationship(
        back_populates="milestones",
        sa_relationship=relationship("Vision", back_populates="milestones"),
    )
    habits: list["Habit"] = Relationship(
        back_populates="milestone",
        sa_relationship=relationship("Habit", back_populates="milestone"),
    )
