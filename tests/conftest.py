"""Shared fixtures."""

import pytest

from job_alerts.config.environment import EnvironmentConfig
from job_alerts.logging.context import clear_log_context
from job_alerts.persistence import close_database, get_session, init_database

from tests.helpers.factories import REFERENCE_NOW


@pytest.fixture
def database(tmp_path):
    """Initialise a throwaway SQLite database file for one test."""
    init_database(f"sqlite:///{tmp_path / 'job_alerts.db'}")
    yield get_session
    close_database()


@pytest.fixture
def reference_now():
    return REFERENCE_NOW


@pytest.fixture
def mock_env_vars(monkeypatch):
    """Set the environment variables the service requires."""
    monkeypatch.setenv("SMTP_HOST", "smtp.test.com")
    monkeypatch.setenv("SMTP_PORT", "587")
    monkeypatch.setenv("SMTP_USER", "alerts@test.com")
    monkeypatch.setenv("SMTP_PASS", "testpass123")
    for name in ("SMTP_SENDER_NAME", "LOG_LEVEL", "DATABASE_URL", "FRONTEND_URL"):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def env_config():
    return EnvironmentConfig(
        smtp_host="smtp.test.com",
        smtp_port=587,
        smtp_user="alerts@test.com",
        smtp_pass="testpass123",
        frontend_url="https://jobs.example.com",
    )


@pytest.fixture(autouse=True)
def _reset_log_context():
    clear_log_context()
    yield
    clear_log_context()
