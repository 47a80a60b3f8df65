"""SQLModel implementation of the journal repository."""

from __future__ import annotations

from typing import Callable

from sqlmodel import Session, col, select

from ...models.journal import Journal


class SQLModelJournalRepository:
    def __init__(self, session_factory: Callable[[], Session]):
        self.session_factory = session_factory

    def create(self, journal: Journal) -> Journal:
        with self.session_factory() as session:
            session.add(journal)
            session.commit()
            session.refresh(journal)
            session.expunge(journal)
            return journal

    def recent(self, *, user_id: int, limit: int = 10) -> list[Journal]:
        with self.session_factory() as session:
            rows = list(
                session.exec(
                    select(Journal)
                    .where(Journal.user_id == user_id)
                    .order_by(col(Journal.created_at).desc(), col(Journal.id).desc())
                    .limit(limit)
                ).all()
            )
            session.expunge_all()
            return rows
