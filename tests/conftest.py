"""Pytest configuration and shared fixtures for Pathwise tests.

This module provides database fixtures and test data factories for testing
the metric engine, repositories and services without touching a real
application database.
"""

from __future__ import annotations

import tempfile
from datetime import date, datetime
from pathlib import Path
from typing import Iterable

import pytest

# Import all models to ensure they're registered with SQLModel metadata
from pathwise.models import (
    Habit,
    HabitActivity,
    Milestone,
    MilestoneStatus,
    Task,
    TaskStatus,
    User,
    Vision,
)
from sqlmodel import Session, SQLModel, create_engine, select

# =============================================================================
# Database Fixtures
# =============================================================================


@pytest.fixture(scope="function")
def db_engine():
    """Create an isolated SQLite database file for each test.

    Yields:
        Engine: SQLModel engine connected to test database
    """
    with tempfile.NamedTemporaryFile(suffix=".db", delete=False) as f:
        db_path = Path(f.name)

    engine = create_engine(f"sqlite:///{db_path}", echo=False)
    SQLModel.metadata.create_all(engine)

    yield engine

    engine.dispose()
    db_path.unlink(missing_ok=True)


@pytest.fixture(scope="function")
def db_session(db_engine):
    """Database session used by the factories to seed rows."""
    session = Session(db_engine, expire_on_commit=False)
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()


@pytest.fixture(scope="function")
def session_factory(db_engine):
    """Session factory matching what the repositories expect.

    The factory carries the bootstrapped default user as ``factory.user``.
    """

    def factory():
        return Session(db_engine, expire_on_commit=False)

    with factory() as session:
        existing = session.exec(select(User).where(User.username == "tester")).first()
        if existing is None:
            existing = User(username="tester")
            session.add(existing)
            session.commit()
            session.refresh(existing)
        session.expunge(existing)
        factory.user = existing  # type: ignore[attr-defined]

    return factory


# =============================================================================
# Test Data Factories
# =============================================================================


@pytest.fixture
def user(session_factory) -> User:
    """Default user for scoping data."""

    return session_factory.user


@pytest.fixture
def other_user(db_session) -> User:
    u = User(username="someone-else")
    db_session.add(u)
    db_session.commit()
    db_session.refresh(u)
    return u


@pytest.fixture
def vision_factory(db_session, user):
    """Factory for creating test visions."""

    def _create_vision(
        title: str = "Run a marathon",
        created_at: datetime | None = None,
        updated_at: datetime | None = None,
        target_date: datetime | None = None,
        owner: User | None = None,
    ) -> Vision:
        owner = owner or user
        created = created_at or datetime.now()
        vision = Vision(
            user_id=owner.id,
            title=title,
            created_at=created,
            updated_at=updated_at or created,
            target_date=target_date,
        )
        db_session.add(vision)
        db_session.commit()
        db_session.refresh(vision)
        return vision

    return _create_vision


@pytest.fixture
def milestone_factory(db_session):
    """Factory for creating milestones under a vision."""

    def _create_milestone(
        vision: Vision,
        title: str = "Half marathon",
        created_at: datetime | None = None,
        target_date: datetime | None = None,
        status: MilestoneStatus = MilestoneStatus.PLANNED,
    ) -> Milestone:
        milestone = Milestone(
            vision_id=vision.id,
            title=title,
            created_at=created_at or datetime.now(),
            target_date=target_date,
            status=status,
        )
        db_session.add(milestone)
        db_session.commit()
        db_session.refresh(milestone)
        return milestone

    return _create_milestone


@pytest.fixture
def habit_factory(db_session, user):
    """Factory for creating test habits.

    Returns:
        Callable: Function that creates and persists Habit instances
    """

    def _create_habit(
        title: str = "Morning run",
        frequency_per_week: int = 7,
        milestone: Milestone | None = None,
        created_at: datetime | None = None,
        is_active: bool = True,
        owner: User | None = None,
    ) -> Habit:
        owner = owner or user
        habit = Habit(
            user_id=owner.id,
            milestone_id=milestone.id if milestone else None,
            title=title,
            frequency_per_week=frequency_per_week,
            created_at=created_at or datetime.now(),
            is_active=is_active,
        )
        db_session.add(habit)
        db_session.commit()
        db_session.refresh(habit)
        return habit

    return _create_habit


@pytest.fixture
def activity_factory(db_session):
    """Factory writing one HabitActivity row per given day."""

    def _create_activities(
        habit: Habit, days: Iterable[date], completed: bool = True
    ) -> list[HabitActivity]:
        rows = [
            HabitActivity(habit_id=habit.id, occurred_on=day, completed=completed) for day in days
        ]
        db_session.add_all(rows)
        db_session.commit()
        return rows

    return _create_activities


@pytest.fixture
def task_factory(db_session, user):
    """Factory for creating test tasks.

    A COMPLETED task without an explicit ``completed_at`` is completed at
    its creation time.
    """

    def _create_task(
        title: str = "Task",
        status: TaskStatus = TaskStatus.PENDING,
        created_at: datetime | None = None,
        due_date: datetime | None = None,
        completed_at: datetime | None = None,
        habit: Habit | None = None,
        owner: User | None = None,
    ) -> Task:
        owner = owner or user
        created = created_at or datetime.now()
        if status == TaskStatus.COMPLETED and completed_at is None:
            completed_at = created
        task = Task(
            user_id=owner.id,
            habit_id=habit.id if habit else None,
            title=title,
            status=status,
            created_at=created,
            due_date=due_date,
            completed_at=completed_at,
        )
        db_session.add(task)
        db_session.commit()
        db_session.refresh(task)
        return task

    return _create_task
