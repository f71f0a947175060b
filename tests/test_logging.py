"""Tests for structured logging functionality."""

from __future__ import annotations

import json
import logging
import logging.handlers
import sys

import pytest

from habitledger.config import BaseConfig
from habitledger.logging_config import JSONFormatter, get_logger, setup_logging


@pytest.fixture
def config(tmp_path, monkeypatch) -> BaseConfig:
    monkeypatch.setenv("HABITLEDGER_DATA_DIR", str(tmp_path))
    monkeypatch.setenv("HABITLEDGER_DEV_MODE", "true")
    return BaseConfig()


def _record(msg: str = "Test message", *, exc_info=None, level: int = logging.INFO):
    record = logging.LogRecord(
        name="test.logger",
        level=level,
        pathname="test.py",
        lineno=42,
        msg=msg,
        args=(),
        exc_info=exc_info,
    )
    record.module = "test_module"
    record.funcName = "test_function"
    return record


def test_json_formatter():
    """JSONFormatter emits the standard fields as a JSON object."""
    log_data = json.loads(JSONFormatter().format(_record()))

    assert log_data["level"] == "INFO"
    assert log_data["logger"] == "test.logger"
    assert log_data["message"] == "Test message"
    assert log_data["module"] == "test_module"
    assert log_data["function"] == "test_function"
    assert log_data["line"] == 42
    assert "timestamp" in log_data
    assert "extra" not in log_data


def test_json_formatter_with_exception():
    try:
        raise ValueError("Test error")
    except ValueError:
        exc_info = sys.exc_info()

    log_data = json.loads(JSONFormatter().format(_record("Error occurred", exc_info=exc_info)))

    assert log_data["exception"]["type"] == "ValueError"
    assert "Test error" in log_data["exception"]["message"]
    assert "Traceback" in log_data["exception"]["traceback"]


def test_json_formatter_includes_extra_fields():
    record = _record("Habit completed")
    record.habit_id = 7
    record.completed_date = "2024-03-15"

    log_data = json.loads(JSONFormatter().format(record))

    assert log_data["extra"] == {"habit_id": 7, "completed_date": "2024-03-15"}


def test_json_formatter_ignores_console_timestamp():
    """A console handler formatting first leaves ``asctime`` on the record."""
    record = _record("Habit completed")
    logging.Formatter("[%(asctime)s] %(message)s").format(record)
    record.habit_id = 7

    log_data = json.loads(JSONFormatter().format(record))

    assert log_data["extra"] == {"habit_id": 7}


def test_setup_logging(config, tmp_path):
    """Logging setup creates a rotating JSON log file under the data dir."""
    logger = setup_logging(config)

    assert logger.name == "habitledger"
    assert logger.level == logging.INFO
    assert len(logger.handlers) == 2  # Console + File

    log_file = tmp_path / "logs" / "habitledger.log"
    assert log_file.exists()

    get_logger("services").warning("Test warning message", extra={"habit_id": 3})
    for handler in logger.handlers:
        handler.flush()

    lines = [line for line in log_file.read_text().splitlines() if line.strip()]
    entries = [json.loads(line) for line in lines]
    assert entries[0]["message"] == "Logging initialized"
    assert entries[-1]["logger"] == "habitledger.services"
    assert entries[-1]["extra"] == {"habit_id": 3}


def test_setup_logging_twice_does_not_duplicate_handlers(config):
    setup_logging(config)
    logger = setup_logging(config)

    assert len(logger.handlers) == 2


def test_get_logger():
    """get_logger nests names under the package logger exactly once."""
    assert get_logger("module1").name == "habitledger.module1"
    assert get_logger("module2").name == "habitledger.module2"
    assert get_logger("habitledger.services.habits").name == "habitledger.services.habits"
    assert get_logger("habitledger").name == "habitledger"


@pytest.mark.parametrize("dev_mode", [True, False])
def test_logging_levels_by_mode(config, dev_mode):
    """Console logging level adjusts based on dev mode."""
    config.DEV_MODE = dev_mode

    logger = setup_logging(config)

    console_handler = next(
        handler
        for handler in logger.handlers
        if isinstance(handler, logging.StreamHandler)
        and not isinstance(handler, logging.handlers.RotatingFileHandler)
    )
    expected_level = logging.INFO if dev_mode else logging.WARNING
    assert console_handler.level == expected_level


def test_rejected_requests_are_logged(app, client, tmp_path):
    from conftest import auth

    client.get("/habits/404", headers=auth())
    for handler in logging.getLogger("habitledger").handlers:
        handler.flush()

    entries = [
        json.loads(line)
        for line in (tmp_path / "logs" / "habitledger.log").read_text().splitlines()
        if line.strip()
    ]
    rejected = [entry for entry in entries if entry["message"] == "Habit request rejected"]
    assert rejected[-1]["extra"]["code"] == "not_found"
    assert rejected[-1]["extra"]["path"] == "/habits/404"
