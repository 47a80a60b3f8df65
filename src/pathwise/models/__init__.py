"""SQLModel table exports."""

from .completion import Completion
from .goal import Milestone, MilestoneStatus, Vision
from .habit import Habit, HabitActivity
from .journal import Journal
from .settings import UserSettings
from .task import Task, TaskStatus
from .user import User

__all__ = [
    "Completion",
    "Habit",
    "HabitActivity",
    "Journal",
    "Milestone",
    "MilestoneStatus",
    "Task",
    "TaskStatus",
    "User",
    "UserSettings",
    "Vision",
]
