"""Tests for logging configuration and formatters."""

import json
import logging

import pytest

from job_alerts.logging import ComponentLoggerAdapter, get_logger
from job_alerts.logging.config import (
    SERVICE_NAME,
    ContextualFilter,
    JSONFormatter,
    KeyValueFormatter,
    configure_logging,
)
from job_alerts.logging.context import log_context


def _record(message="Test message", level=logging.INFO, **extra):
    record = logging.getLogger("test").makeRecord(
        "test", level, "test.py", 1, message, (), None
    )
    for key, value in extra.items():
        setattr(record, key, value)
    return record


@pytest.fixture
def restore_root_logger():
    """Put the root logger back the way pytest configured it."""
    root = logging.getLogger()
    handlers = list(root.handlers)
    level = root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)


def test_json_formatter_basic():
    """Test JSONFormatter produces valid JSON with mandatory fields."""
    data = json.loads(JSONFormatter().format(_record()))

    assert data["level"] == "INFO"
    assert data["logger"] == "test"
    assert data["message"] == "Test message"
    assert data["timestamp"].endswith("Z")


def test_json_formatter_includes_extra_fields():
    """Test that extra fields become top-level keys."""
    data = json.loads(
        JSONFormatter().format(_record(event="alert.process.completed", match_count=3))
    )

    assert data["event"] == "alert.process.completed"
    assert data["match_count"] == 3


def test_json_formatter_redacts_secrets():
    data = json.loads(JSONFormatter().format(_record(smtp_pass="hunter2", token="abc")))

    assert data["smtp_pass"] == "***"
    assert data["token"] == "***"


def test_json_formatter_stringifies_unknown_types():
    data = json.loads(JSONFormatter().format(_record(path=object())))
    assert isinstance(data["path"], str)


def test_json_formatter_includes_exception():
    try:
        raise ValueError("boom")
    except ValueError:
        import sys

        record = logging.getLogger("test").makeRecord(
            "test", logging.ERROR, "test.py", 1, "failed", (), sys.exc_info()
        )

    data = json.loads(JSONFormatter().format(record))
    assert "ValueError: boom" in data["exc_info"]


def test_key_value_formatter():
    """Test KeyValueFormatter renders sorted key=value pairs."""
    formatter = KeyValueFormatter("[%(levelname)s] %(name)s: %(message)s")
    line = formatter.format(
        _record(event="dispatch.run.completed", reason="no matches", skipped=False, error=None)
    )

    assert line.startswith("[INFO] test: Test message ")
    assert 'reason="no matches"' in line
    assert "skipped=false" in line
    assert "error=null" in line
    assert line.index("error=") < line.index("event=") < line.index("reason=")


def test_key_value_formatter_omits_service_fields():
    formatter = KeyValueFormatter("%(message)s")
    line = formatter.format(_record(service=SERVICE_NAME, environment="local"))
    assert line == "Test message"


def test_contextual_filter_adds_service_and_context():
    record = _record()
    with log_context(run_id="run-1", alert_id="a-1"):
        assert ContextualFilter(environment="test").filter(record) is True

    assert record.service == SERVICE_NAME
    assert record.environment == "test"
    assert record.run_id == "run-1"
    assert record.alert_id == "a-1"


def test_contextual_filter_explicit_extra_wins():
    record = _record(alert_id="explicit")
    with log_context(alert_id="from-context"):
        ContextualFilter().filter(record)

    assert record.alert_id == "explicit"


def test_configure_logging_installs_single_handler(restore_root_logger):
    configure_logging(level="DEBUG", format_type="json", environment="test")

    root = logging.getLogger()
    assert root.level == logging.DEBUG
    assert len(root.handlers) == 1
    assert isinstance(root.handlers[0].formatter, JSONFormatter)
    assert logging.getLogger("apscheduler").level == logging.WARNING


def test_configure_logging_key_value(restore_root_logger):
    configure_logging(level="info", format_type="key-value")
    assert isinstance(logging.getLogger().handlers[0].formatter, KeyValueFormatter)


def test_configure_logging_rejects_bad_values(restore_root_logger):
    with pytest.raises(ValueError, match="Invalid log level"):
        configure_logging(level="LOUD")
    with pytest.raises(ValueError, match="Invalid log format"):
        configure_logging(format_type="xml")


def test_get_logger_with_component(caplog):
    logger = get_logger("job_alerts.test", component="matching")
    assert isinstance(logger, ComponentLoggerAdapter)

    with caplog.at_level(logging.INFO, logger="job_alerts.test"):
        logger.info("hello", extra={"event": "test.event"})
        logger.info("override", extra={"component": "other"})

    first, second = caplog.records
    assert first.component == "matching"
    assert first.event == "test.event"
    assert second.component == "other"


def test_get_logger_without_component():
    assert isinstance(get_logger("job_alerts.plain"), logging.Logger)
