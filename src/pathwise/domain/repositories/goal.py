"""Vision/milestone repository protocol."""

from __future__ import annotations

from typing import Optional, Protocol

from ...models.goal import Milestone, Vision
from ...services.progress import VisionSnapshot


class GoalRepository(Protocol):
    """Read visions with their nested milestones, habits and completed activity."""

    def create_vision(self, vision: Vision, *, user_id: int) -> Vision:
        ...

    def create_milestone(self, milestone: Milestone) -> Milestone:
        ...

    def list_snapshots(self, *, user_id: int) -> list[VisionSnapshot]:
        ...

    def get_snapshot(self, vision_id: int, *, user_id: int) -> Optional[VisionSnapshot]:
        ...

    def latest_snapshot(self, *, user_id: int) -> Optional[VisionSnapshot]:
        """The most recently updated vision of the user."""
        ...
