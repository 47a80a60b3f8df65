"""Tests for the click command line."""

from __future__ import annotations

import json
import logging

import pytest
from click.testing import CliRunner

from pathwise.cli import main


@pytest.fixture
def runner(tmp_path, monkeypatch):
    monkeypatch.setenv("PATHWISE_DATA_DIR", str(tmp_path))
    monkeypatch.setenv("PATHWISE_DATABASE_URL", f"sqlite:///{tmp_path / 'cli.db'}")
    # keeps INFO records off the console so stdout stays pure JSON
    monkeypatch.setenv("PATHWISE_DEV_MODE", "0")
    yield CliRunner()
    pathwise_logger = logging.getLogger("pathwise")
    for handler in list(pathwise_logger.handlers):
        handler.close()
        pathwise_logger.removeHandler(handler)


def _json(result):
    assert result.exit_code == 0, result.output
    return json.loads(result.output)


def test_init_db(runner):
    result = runner.invoke(main, ["init-db"])

    assert result.exit_code == 0
    assert "user local" in result.output


def test_streaks_for_new_user(runner):
    assert _json(runner.invoke(main, ["--user", "ana", "streaks"])) == {"current": 0, "longest": 0}


def test_monthly_report(runner):
    data = _json(runner.invoke(main, ["report", "monthly", "--year", "2024", "--month", "0"]))

    assert data["month"] == 0
    assert len(data["heatmap_data"]) == 31


def test_monthly_report_rejects_month_12(runner):
    result = runner.invoke(main, ["report", "monthly", "--month", "12"])

    assert result.exit_code != 0


def test_daily_and_weekly_reports(runner):
    daily = _json(runner.invoke(main, ["report", "daily", "--date", "2024-02-29"]))
    weekly = _json(runner.invoke(main, ["report", "weekly"]))

    assert daily["date"] == "2024-02-29"
    assert daily["energy_level"] == 0
    assert len(weekly["week_data"]) == 7


def test_overview(runner):
    data = _json(runner.invoke(main, ["overview"]))

    assert len(data["heatmap"]) == 365
    assert data["selected_vision_id"] is None


def test_journal_commands(runner):
    check = _json(runner.invoke(main, ["journal-check"]))
    submitted = _json(runner.invoke(main, ["journal", "Too much phone time"]))
    empty = runner.invoke(main, ["journal", "  "])

    assert check == {"required": True, "broken_days": 3}
    assert submitted["analysis"]["patterns"] == [
        "Time management issues detected",
        "Distractions are interfering",
    ]
    assert empty.exit_code != 0


def test_resync_streaks(runner):
    data = _json(runner.invoke(main, ["resync-streaks"]))

    assert data == {"streaks": {}, "cleared_completed_today": 0}


def test_task_views_for_new_user(runner):
    for view in ("today", "pending", "overdue", "future"):
        assert _json(runner.invoke(main, ["tasks", view])) == []

    assert runner.invoke(main, ["tasks", "someday"]).exit_code != 0
