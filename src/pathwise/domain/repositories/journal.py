"""Journal repository protocol."""

from __future__ import annotations

from typing import Protocol

from ...models.journal import Journal


class JournalRepository(Protocol):
    def create(self, journal: Journal) -> Journal:
        ...

    def recent(self, *, user_id: int, limit: int = 10) -> list[Journal]:
        """Newest entries first."""
        ...
