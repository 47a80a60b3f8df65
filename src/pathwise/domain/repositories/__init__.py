"""Repository protocol definitions for domain layer."""

from .completion import CompletionRepository
from .goal import GoalRepository
from .habit import HabitRepository
from .journal import JournalRepository
from .settings import SettingsRepository
from .task import TaskRepository

__all__ = [
    "CompletionRepository",
    "GoalRepository",
    "HabitRepository",
    "JournalRepository",
    "SettingsRepository",
    "TaskRepository",
]
