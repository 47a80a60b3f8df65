"""User model scoping every tracked entity."""

from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING, ClassVar, Optional

from sqlalchemy import DateTime
from sqlalchemy.orm import relationship
from sqlmodel import Field, Relationship, SQLModel

if TYPE_CHECKING:  # pragma: no cover
    from .goal import Vision
    from .habit import Habit
    from .task import Task


class User(SQLModel, table=True):
    """Application user owning visions, habits and tasks."""

    __tablename__: ClassVar[str] = "user"

    id: Optional[int] = Field(default=None, primary_key=True)
    username: str = Field(nullable=False, unique=True, index=True, max_length=64)
    created_at: datetime = Field(default_factory=datetime.now, nullable=False, sa_type=DateTime())

    visions: list["Vision"] = Relationship(
        back_populates="user",
        sa_relationship=relationship("Vision", back_populates="user"),
    )
    habits: list["Habit"] = Relationship(
        back_populates="user",
        sa_relationship=relationship("Habit", back_populates="user"),
    )
    tasks: list["Task"] = Relationship(
        back_populates="user",
        sa_relationship=relationship("Task", back_populates="user"),
    )
