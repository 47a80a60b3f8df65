"""Exceptions raised by Pathwise services."""

from __future__ import annotations


class NotFoundError(LookupError):
    """Raised when an entity does not exist or is not owned by the requesting user."""

    def __init__(self, entity: str, entity_id: object) -> None:
        super().__init__(f"{entity} not found: {entity_id}")
        self.entity = entity
        self.entity_id = entity_id


class HabitCompletionBlocked(ValueError):
    """Raised when a habit is completed manually while today's tasks are still open."""


__all__ = ["HabitCompletionBlocked", "NotFoundError"]
