"""Settings repository for per-user preferences."""

from __future__ import annotations

from typing import Callable, Optional

from sqlmodel import Session

from ...models.settings import UserSettings


class SQLModelSettingsRepository:
    """SQLModel-based settings repository."""

    def __init__(self, session_factory: Callable[[], Session]):
        self.session_factory = session_factory

    def get_daily_goal(self, *, user_id: int) -> Optional[int]:
        with self.session_factory() as session:
            settings = session.get(UserSettings, user_id)
            return settings.daily_goal if settings else None

    def set_daily_goal(self, daily_goal: Optional[int], *, user_id: int) -> None:
        with self.session_factory() as session:
            settings = session.get(UserSettings, user_id)
            if settings:
                settings.daily_goal = daily_goal
            else:
                settings = UserSettings(user_id=user_id, daily_goal=daily_goal)
            session.add(settings)
            session.commit()


__all__ = ["SQLModelSettingsRepository"]
