"""Command line entry point printing analytics as JSON."""

from __future__ import annotations

import json
from dataclasses import asdict
from datetime import date
from typing import Any, Optional

import click

from .config import BaseConfig, DevConfig
from .context import AppContext, create_app_context
from .logging_config import setup_logging
from .services import discipline
from .services.users import LOCAL_USERNAME, ensure_user


def _echo_json(payload: Any) -> None:
    if hasattr(payload, "__dataclass_fields__"):
        payload = asdict(payload)
    click.echo(json.dumps(payload, default=str, indent=2))


def _user_id(app: AppContext, username: str) -> int:
    return ensure_user(app.session_factory, username).id  # type: ignore[return-value]


@click.group()
@click.option("--dev", is_flag=True, default=False, help="Use the development configuration.")
@click.option("--user", "username", default=LOCAL_USERNAME, show_default=True, help="Profile to report on.")
@click.pass_context
def main(ctx: click.Context, dev: bool, username: str) -> None:
    """Pathwise progress and streak reports."""

    config = DevConfig() if dev else BaseConfig()
    setup_logging(config)
    ctx.obj = {"app": create_app_context(config), "username": username}


@main.command("init-db")
@click.pass_obj
def init_db(obj: dict) -> None:
    """Create tables and the selected profile."""

    app: AppContext = obj["app"]
    user = ensure_user(app.session_factory, obj["username"])
    click.echo(f"Database ready at {app.config.DATABASE_URL} (user {user.username})")


@main.command("streaks")
@click.pass_obj
def streaks(obj: dict) -> None:
    """Current and longest task streak."""

    app: AppContext = obj["app"]
    _echo_json(app.analytics.streaks(_user_id(app, obj["username"])))


@main.group("report")
def report() -> None:
    """Daily, weekly and monthly task reports."""


@report.command("daily")
@click.option("--date", "day", type=click.DateTime(formats=["%Y-%m-%d"]), default=None)
@click.pass_obj
def report_daily(obj: dict, day) -> None:
    app: AppContext = obj["app"]
    target = day.date() if day else None
    _echo_json(app.analytics.daily_report(_user_id(app, obj["username"]), day=target))


@report.command("weekly")
@click.pass_obj
def report_weekly(obj: dict) -> None:
    app: AppContext = obj["app"]
    _echo_json(app.analytics.weekly_report(_user_id(app, obj["username"])))


@report.command("monthly")
@click.option("--year", type=int, default=None)
@click.option("--month", type=click.IntRange(0, 11), default=None, help="0 = January.")
@click.pass_obj
def report_monthly(obj: dict, year: Optional[int], month: Optional[int]) -> None:
    app: AppContext = obj["app"]
    _echo_json(app.analytics.monthly_report(_user_id(app, obj["username"]), year=year, month=month))


@main.command("overview")
@click.option("--vision", "vision_id", type=int, default=None, help="Vision to chart; latest by default.")
@click.pass_obj
def overview(obj: dict, vision_id: Optional[int]) -> None:
    """Vision progress, consistency, heatmap and roadmap."""

    app: AppContext = obj["app"]
    _echo_json(app.analytics.overview(_user_id(app, obj["username"]), vision_id=vision_id))


@main.command("tasks")
@click.argument("view", type=click.Choice(["today", "pending", "overdue", "future"]), default="today")
@click.pass_obj
def tasks(obj: dict, view: str) -> None:
    """List today's, pending, overdue or upcoming tasks."""

    app: AppContext = obj["app"]
    user_id = _user_id(app, obj["username"])
    views = {
        "today": app.task_service.today_tasks,
        "pending": app.task_service.pending_tasks,
        "overdue": app.task_service.overdue_tasks,
        "future": app.task_service.future_tasks,
    }
    _echo_json([task.model_dump() for task in views[view](user_id)])


@main.command("journal-check")
@click.pass_obj
def journal_check(obj: dict) -> None:
    """Report whether a journal entry is due after missed days."""

    app: AppContext = obj["app"]
    _echo_json(
        discipline.journal_required_for_user(
            user_id=_user_id(app, obj["username"]), task_repo=app.task_repo, today=date.today()
        )
    )


@main.command("journal")
@click.argument("reason")
@click.pass_obj
def journal(obj: dict, reason: str) -> None:
    """Record why days were missed and print the analysis."""

    app: AppContext = obj["app"]
    try:
        submission = discipline.submit_journal(
            user_id=_user_id(app, obj["username"]),
            reason=reason,
            journal_repo=app.journal_repo,
            task_repo=app.task_repo,
        )
    except ValueError as exc:
        raise click.BadParameter(str(exc), param_hint="REASON") from exc
    _echo_json({"journal_id": submission.journal.id, "analysis": asdict(submission.analysis)})


@main.command("resync-streaks")
@click.pass_obj
def resync_streaks(obj: dict) -> None:
    """Rebuild cached habit streaks and clear stale completion flags."""

    app: AppContext = obj["app"]
    cleared = app.habit_service.reset_stale_completed_today()
    streaks_by_habit = app.habit_service.resync_all_habit_streaks()
    _echo_json({"streaks": streaks_by_habit, "cleared_completed_today": cleared})


if __name__ == "__main__":  # pragma: no cover
    main()
