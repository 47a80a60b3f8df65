"""Application context for dependency injection."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from sqlalchemy.engine import Engine

from .config import BaseConfig
from .infra.database import SessionFactory, create_db_engine, create_session_factory, init_database
from .infra.repositories import (
    SQLModelCompletionRepository,
    SQLModelGoalRepository,
    SQLModelHabitRepository,
    SQLModelJournalRepository,
    SQLModelSettingsRepository,
    SQLModelTaskRepository,
)
from .services.analytics import AnalyticsService
from .services.habits import HabitService
from .services.tasks import TaskService


@dataclass
class AppContext:
    """Configuration, repositories and services wired against one engine."""

    config: BaseConfig
    engine: Engine
    session_factory: SessionFactory

    # Repositories
    task_repo: SQLModelTaskRepository
    habit_repo: SQLModelHabitRepository
    goal_repo: SQLModelGoalRepository
    settings_repo: SQLModelSettingsRepository
    completion_repo: SQLModelCompletionRepository
    journal_repo: SQLModelJournalRepository

    # Services
    habit_service: HabitService
    task_service: TaskService
    analytics: AnalyticsService


def create_app_context(config: Optional[BaseConfig] = None) -> AppContext:
    """Create the engine, ensure the schema and build repositories and services."""

    if config is None:
        config = BaseConfig()

    engine = create_db_engine(config)
    init_database(engine)
    session_factory = create_session_factory(engine)

    task_repo = SQLModelTaskRepository(session_factory)
    habit_repo = SQLModelHabitRepository(session_factory)
    goal_repo = SQLModelGoalRepository(session_factory)
    settings_repo = SQLModelSettingsRepository(session_factory)
    completion_repo = SQLModelCompletionRepository(session_factory)
    journal_repo = SQLModelJournalRepository(session_factory)

    habit_service = HabitService(habit_repo, task_repo, completion_repo)
    task_service = TaskService(task_repo, completion_repo, habit_service)
    analytics = AnalyticsService(
        task_repo=task_repo,
        habit_repo=habit_repo,
        goal_repo=goal_repo,
        settings_repo=settings_repo,
        default_daily_goal=config.DAILY_GOAL,
    )

    return AppContext(
        config=config,
        engine=engine,
        session_factory=session_factory,
        task_repo=task_repo,
        habit_repo=habit_repo,
        goal_repo=goal_repo,
        settings_repo=settings_repo,
        completion_repo=completion_repo,
        journal_repo=journal_repo,
        habit_service=habit_service,
        task_service=task_service,
        analytics=analytics,
    )


__all__ = ["AppContext", "create_app_context"]
