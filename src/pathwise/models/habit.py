"""Habits tracking data structures."""

from __future__ import annotations

from datetime import date, datetime
from typing import TYPE_CHECKING, ClassVar, Optional

from sqlalchemy import DateTime
from sqlalchemy.orm import relationship
from sqlmodel import Field, Relationship, SQLModel

if TYPE_CHECKING:  # pragma: no cover
    from .goal import Milestone
    from .user import User


class Habit(SQLModel, table=True):
    """A recurring activity with a weekly frequency target."""

    __tablename__: ClassVar[str] = "habit"

    id: Optional[int] = Field(default=None, primary_key=True)
    user_id: int = Field(foreign_key="user.id", nullable=False, index=True)
    milestone_id: Optional[int] = Field(default=None, foreign_key="milestone.id", index=True)
    title: str = Field(nullable=False, max_length=80)
    frequency_per_week: int = Field(default=7, nullable=False, ge=1, le=7)
    is_active: bool = Field(default=True, nullable=False)
    created_at: datetime = Field(default_factory=datetime.now, nullable=False, sa_type=DateTime())

    # Caches rebuilt from HabitActivity; never the source of truth.
    streak: int = Field(default=0, nullable=False)
    completed_today: bool = Field(default=False, nullable=False)
    last_completed_at: Optional[datetime] = Field(default=None, sa_type=DateTime())

    activities: list["HabitActivity"] = Relationship(
        back_populates="habit",
        sa_relationship=relationship(
            "HabitActivity", back_populates="habit", cascade="all, delete-orphan"
        ),
    )
    milestone: Optional["Milestone"] = Relationship(
        back_populates="habits",
        sa_relationship=relationship("Milestone", back_populates="habits"),
    )
    user: "User" = Relationship(sa_relationship=relationship("User", back_populates="habits"))


class HabitActivity(SQLModel, table=True):
    """One calendar day's completion record for a habit."""

    __tablename__: ClassVar[str] = "habit_activity"

    habit_id: int = Field(foreign_key="habit.id", primary_key=True)
    occurred_on: date = Field(primary_key=True, index=True)
    completed: bool = Field(default=False, nullable=False)

    habit: "Habit" = Relationship(
        back_populates="activities",
        sa_relationship=relationship("Habit", back_populates="activities"),
    )
