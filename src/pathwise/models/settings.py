"""Per-user settings stored in the database."""

from __future__ import annotations

from typing import ClassVar, Optional

from sqlmodel import Field, SQLModel


class UserSettings(SQLModel, table=True):
    """Pass-through settings read by the report builder."""

    __tablename__: ClassVar[str] = "user_settings"

    user_id: int = Field(foreign_key="user.id", primary_key=True)
    daily_goal: Optional[int] = Field(default=None, description="Tasks per day for a full energy bar")
