"""Tests for configuration loading and structured logging."""

from __future__ import annotations

import json
import logging

import pytest

from pathwise.config import BaseConfig, DevConfig
from pathwise.infra.database import bootstrap_database, session_scope
from pathwise.logging_config import JSONFormatter, get_logger, setup_logging
from pathwise.models import User
from sqlmodel import select


@pytest.fixture
def config(tmp_path, monkeypatch) -> BaseConfig:
    monkeypatch.setenv("PATHWISE_DATA_DIR", str(tmp_path))
    monkeypatch.delenv("PATHWISE_DATABASE_URL", raising=False)
    monkeypatch.delenv("PATHWISE_DEFAULT_DAILY_GOAL", raising=False)
    return BaseConfig()


def test_defaults_point_into_data_dir(config, tmp_path):
    assert config.DATA_DIR == tmp_path.resolve()
    assert config.DATABASE_URL.endswith("pathwise.db")
    assert config.DAILY_GOAL == 5
    assert config.sqlalchemy_engine_options() == {"connect_args": {"check_same_thread": False}}


def test_daily_goal_from_env(monkeypatch, tmp_path):
    monkeypatch.setenv("PATHWISE_DATA_DIR", str(tmp_path))
    monkeypatch.setenv("PATHWISE_DEFAULT_DAILY_GOAL", "8")
    assert BaseConfig().DAILY_GOAL == 8

    monkeypatch.setenv("PATHWISE_DEFAULT_DAILY_GOAL", "zero")
    with pytest.raises(ValueError):
        BaseConfig()


def test_dev_mode_flag(monkeypatch, tmp_path):
    monkeypatch.setenv("PATHWISE_DATA_DIR", str(tmp_path))
    monkeypatch.setenv("PATHWISE_DEV_MODE", "off")
    assert BaseConfig().DEV_MODE is False


def test_dev_config_forces_dev_mode(monkeypatch, tmp_path):
    monkeypatch.setenv("PATHWISE_DATA_DIR", str(tmp_path))
    monkeypatch.setenv("PATHWISE_DEV_MODE", "0")

    assert BaseConfig().DEV_MODE is False
    assert DevConfig().DEV_MODE is True


def test_json_formatter_nests_extra_fields():
    record = logging.LogRecord(
        name="pathwise.test",
        level=logging.INFO,
        pathname="test.py",
        lineno=7,
        msg="Habit completed",
        args=(),
        exc_info=None,
    )
    record.habit_id = 3

    data = json.loads(JSONFormatter().format(record))

    assert data["level"] == "INFO"
    assert data["message"] == "Habit completed"
    assert data["extra"] == {"habit_id": 3}


def test_json_formatter_ignores_asctime():
    record = logging.LogRecord(
        name="pathwise.test",
        level=logging.INFO,
        pathname="test.py",
        lineno=7,
        msg="Report built",
        args=(),
        exc_info=None,
    )
    record.asctime = "2024-07-10 18:00:00,000"

    data = json.loads(JSONFormatter().format(record))

    assert "extra" not in data


def test_setup_logging_writes_json_file(config):
    logger = setup_logging(config)
    get_logger("services.test").info("Streak resynced", extra={"habits": 2})
    for handler in logger.handlers:
        handler.flush()

    lines = (config.DATA_DIR / "logs" / "pathwise.log").read_text(encoding="utf-8").splitlines()
    entries = [json.loads(line) for line in lines]

    assert entries[-1]["logger"] == "pathwise.services.test"
    assert entries[-1]["extra"] == {"habits": 2}
    for handler in list(logger.handlers):
        handler.close()
        logger.removeHandler(handler)


def test_get_logger_namespaces():
    assert get_logger("cli").name == "pathwise.cli"
    assert get_logger("pathwise.cli").name == "pathwise.cli"


def test_bootstrap_and_session_scope(config):
    engine, factory = bootstrap_database(config)

    with factory() as session:
        session.add(User(username="scoped"))

    with session_scope(engine) as session:
        assert session.get(User, 1).username == "scoped"

    with pytest.raises(RuntimeError):
        with factory() as session:
            session.add(User(username="rolled-back"))
            raise RuntimeError("boom")

    with session_scope(engine) as session:
        assert len(session.exec(select(User)).all()) == 1
    engine.dispose()
