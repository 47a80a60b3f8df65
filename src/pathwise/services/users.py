"""User lookup for the local, passwordless profiles the CLI works with."""

from __future__ import annotations

from sqlmodel import select

from ..infra.database import SessionFactory
from ..logging_config import get_logger
from ..models.user import User

logger = get_logger("services.users")

LOCAL_USERNAME = "local"


def ensure_user(session_factory: SessionFactory, username: str = LOCAL_USERNAME) -> User:
    """Create or return the profile with ``username``."""

    with session_factory() as session:
        user = session.exec(select(User).where(User.username == username)).first()
        if user:
            session.expunge(user)
            return user
        user = User(username=username)
        session.add(user)
        session.commit()
        session.refresh(user)
        session.expunge(user)
        logger.info("User created", extra={"username": username, "user_id": user.id})
        return user


__all__ = ["LOCAL_USERNAME", "ensure_user"]
