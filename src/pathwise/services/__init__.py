"""Service module exports."""

from . import (
    analytics,
    consistency,
    dates,
    discipline,
    habits,
    progress,
    reports,
    streaks,
    tasks,
    users,
)

__all__ = [
    "analytics",
    "consistency",
    "dates",
    "discipline",
    "habits",
    "progress",
    "reports",
    "streaks",
    "tasks",
    "users",
]
