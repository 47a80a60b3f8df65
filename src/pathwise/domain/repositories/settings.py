"""User settings repository protocol."""

from __future__ import annotations

from typing import Optional, Protocol


class SettingsRepository(Protocol):
    def get_daily_goal(self, *, user_id: int) -> Optional[int]:
        """Stored daily goal, or None when the user never set one."""
        ...

    def set_daily_goal(self, daily_goal: Optional[int], *, user_id: int) -> None:
        ...
