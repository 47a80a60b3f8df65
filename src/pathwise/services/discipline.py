"""Journal discipline check and the rule-based journal analysis."""

from __future__ import annotations

import json
from dataclasses import asdict, dataclass, field
from datetime import date, timedelta
from typing import TYPE_CHECKING, Iterable

from ..logging_config import get_logger
from ..models.journal import Journal
from ..models.task import Task
from .dates import start_of_day
from .streaks import completed_task_days, current_task_streak

if TYPE_CHECKING:  # pragma: no cover
    from ..domain.repositories import JournalRepository, TaskRepository

logger = get_logger("services.discipline")

LOOKBACK_DAYS = 3
HISTORY_LIMIT = 10

# (keywords, pattern, suggestion); substring match on the lower-cased text.
JOURNAL_RULES: tuple[tuple[tuple[str, ...], str, str], ...] = (
    (
        ("busy", "work", "time"),
        "Time management issues detected",
        "Try time-blocking your day or waking up 30 minutes earlier",
    ),
    (
        ("tired", "sleep", "energy"),
        "Energy management could be improved",
        "Focus on sleep quality and morning routines",
    ),
    (
        ("motivation", "want", "feel"),
        "Motivation fluctuations detected",
        'Connect your goals to deeper "why" and use visual reminders',
    ),
    (
        ("distraction", "phone", "social"),
        "Distractions are interfering",
        "Create a distraction-free environment during focus time",
    ),
)

GENERIC_SUGGESTIONS = (
    "Start with smaller, more achievable daily goals",
    "Track your progress visually to maintain motivation",
    "Build a support system or accountability partner",
)


@dataclass(slots=True)
class JournalCheck:
    required: bool
    broken_days: int


@dataclass(slots=True)
class JournalAnalysis:
    patterns: list[str] = field(default_factory=list)
    suggestions: list[str] = field(default_factory=list)


@dataclass(slots=True)
class JournalSubmission:
    journal: Journal
    analysis: JournalAnalysis


def check_journal_required(
    completed_tasks: Iterable[Task],
    *,
    today: date | None = None,
    lookback_days: int = LOOKBACK_DAYS,
) -> JournalCheck:
    """Count the days before today (today excluded) with no completed task.

    A journal entry is required only once every day in the lookback is broken.
    """

    today = today or date.today()
    done = completed_task_days(completed_tasks)
    broken = sum(
        1 for offset in range(1, lookback_days + 1) if today - timedelta(days=offset) not in done
    )
    return JournalCheck(required=broken >= lookback_days, broken_days=broken)


def analyze_journal(reasons: Iterable[str]) -> JournalAnalysis:
    """Match journal reasons against the fixed cause table."""

    text = " ".join(reasons).lower()
    analysis = JournalAnalysis()
    for keywords, pattern, suggestion in JOURNAL_RULES:
        if any(keyword in text for keyword in keywords):
            analysis.patterns.append(pattern)
            analysis.suggestions.append(suggestion)

    if not analysis.suggestions:
        analysis.suggestions.extend(GENERIC_SUGGESTIONS)
    return analysis


def journal_required_for_user(
    *, user_id: int, task_repo: TaskRepository, today: date | None = None
) -> JournalCheck:
    today = today or date.today()
    completed = task_repo.list_completed(
        user_id=user_id,
        start=start_of_day(today - timedelta(days=LOOKBACK_DAYS)),
    )
    return check_journal_required(completed, today=today)


def submit_journal(
    *,
    user_id: int,
    reason: str,
    journal_repo: JournalRepository,
    task_repo: TaskRepository,
    today: date | None = None,
) -> JournalSubmission:
    """Store a journal entry analysed together with the user's recent entries."""

    reason = reason.strip()
    if not reason:
        raise ValueError("Journal reason cannot be empty")

    today = today or date.today()
    reasons = [j.reason for j in journal_repo.recent(user_id=user_id, limit=HISTORY_LIMIT)]
    reasons.append(reason)
    analysis = analyze_journal(reasons)

    streak = current_task_streak(task_repo.list_completed(user_id=user_id), today=today)
    journal = journal_repo.create(
        Journal(
            user_id=user_id,
            reason=reason,
            analysis=json.dumps(asdict(analysis)),
            streak_count=streak,
        )
    )
    logger.info(
        "Journal submitted",
        extra={"user_id": user_id, "patterns": len(analysis.patterns), "streak": streak},
    )
    return JournalSubmission(journal=journal, analysis=analysis)


def journal_history(
    *, user_id: int, journal_repo: JournalRepository, limit: int = HISTORY_LIMIT
) -> list[Journal]:
    return journal_repo.recent(user_id=user_id, limit=limit)


__all__ = [
    "GENERIC_SUGGESTIONS",
    "JOURNAL_RULES",
    "JournalAnalysis",
    "JournalCheck",
    "JournalSubmission",
    "LOOKBACK_DAYS",
    "analyze_journal",
    "check_journal_required",
    "journal_history",
    "journal_required_for_user",
    "submit_journal",
]
