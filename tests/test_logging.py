"""Tests for structured logging functionality."""

from __future__ import annotations

import json
import logging
import sys

import pytest

from dailytracker.config import TestConfig
from dailytracker.logging_config import JSONFormatter, get_logger, setup_logging


def _record(**kwargs) -> logging.LogRecord:
    record = logging.LogRecord(
        name="test.logger",
        level=kwargs.pop("level", logging.INFO),
        pathname="test.py",
        lineno=42,
        msg=kwargs.pop("msg", "Test message"),
        args=(),
        exc_info=kwargs.pop("exc_info", None),
    )
    record.module = "test_module"
    record.funcName = "test_function"
    for key, value in kwargs.items():
        setattr(record, key, value)
    return record


@pytest.fixture(autouse=True)
def _reset_package_logger():
    yield
    logger = logging.getLogger("dailytracker")
    for handler in list(logger.handlers):
        handler.close()
    logger.handlers.clear()


def test_json_formatter():
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

    log_data = json.loads(JSONFormatter().format(_record(level=logging.ERROR, exc_info=exc_info)))

    assert log_data["exception"]["type"] == "ValueError"
    assert "Test error" in log_data["exception"]["message"]
    assert log_data["exception"]["traceback"] is not None


def test_json_formatter_includes_extra_fields():
    log_data = json.loads(JSONFormatter().format(_record(habit_id="h1", streak=3)))

    assert log_data["extra"] == {"habit_id": "h1", "streak": 3}


def test_setup_logging(tmp_path):
    config = TestConfig(tmp_path)
    config.DEV_MODE = True

    logger = setup_logging(config)

    assert logger.name == "dailytracker"
    assert logger.level == logging.DEBUG
    assert len(logger.handlers) == 2  # Console + File

    log_file = tmp_path / "logs" / "dailytracker.log"
    assert log_file.exists()

    get_logger("services.habits").info("Habit status updated", extra={"habit_id": "h1"})
    for handler in logger.handlers:
        handler.flush()

    lines = [json.loads(line) for line in log_file.read_text().strip().split("\n") if line.strip()]
    assert lines[0]["message"] == "Logging initialized"
    assert lines[-1]["logger"] == "dailytracker.services.habits"
    assert lines[-1]["extra"]["habit_id"] == "h1"


def test_setup_logging_production_level(tmp_path):
    logger = setup_logging(TestConfig(tmp_path))

    assert logger.level == logging.INFO


def test_get_logger():
    assert get_logger("test_module").name == "dailytracker.test_module"
    assert get_logger("dailytracker.cli").name == "dailytracker.cli"
