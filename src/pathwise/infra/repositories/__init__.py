"""Concrete repository implementations using SQLModel."""

from .completion import SQLModelCompletionRepository
from .goal import SQLModelGoalRepository
from .habit import SQLModelHabitRepository
from .journal import SQLModelJournalRepository
from .settings import SQLModelSettingsRepository
from .task import SQLModelTaskRepository

__all__ = [
    "SQLModelCompletionRepository",
    "SQLModelGoalRepository",
    "SQLModelHabitRepository",
    "SQLModelJournalRepository",
    "SQLModelSettingsRepository",
    "SQLModelTaskRepository",
]
