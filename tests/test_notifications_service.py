"""Unit tests for AlertNotificationService.

Tests:
- Skipping results with errors or without matches
- Digest message construction
- Truncation to max_matches_per_email
- Retry with exponential backoff and the delay cap
- Invalid recipients and template failures
"""

from unittest.mock import Mock

import pytest

from job_alerts.config.models import EmailConfig
from job_alerts.notifications.models import NotificationTemplateError, SMTPDeliveryError
from job_alerts.notifications.service import AlertNotificationService
from job_alerts.notifications.smtp_client import SMTPClient
from job_alerts.notifications.templates import TemplateRenderer

from tests.helpers.factories import make_job, make_match, make_result


@pytest.fixture
def smtp_client():
    return Mock(spec=SMTPClient)


@pytest.fixture
def sleeps():
    return []


@pytest.fixture
def service(smtp_client, sleeps):
    return AlertNotificationService(smtp_client=smtp_client, sleep=sleeps.append)


class TestSkipping:
    def test_result_with_error_skipped(self, service, smtp_client, env_config):
        result = make_result(matches=[], error="Job alert not found or inactive")

        outcome = service.send_alert_digest(result, env_config, EmailConfig())

        assert outcome.status == "skipped"
        assert outcome.attempts == 0
        smtp_client.send.assert_not_called()

    def test_result_without_matches_skipped(self, service, smtp_client, env_config):
        outcome = service.send_alert_digest(make_result(matches=[]), env_config, EmailConfig())

        assert outcome.status == "skipped"
        assert not outcome.is_success()
        smtp_client.send.assert_not_called()


class TestDelivery:
    """Tests for successful delivery."""

    def test_sends_digest(self, service, smtp_client, env_config):
        job = make_job(title="React Developer")
        result = make_result(matches=[make_match(job), make_match()])

        outcome = service.send_alert_digest(result, env_config, EmailConfig())

        assert outcome.is_success()
        assert outcome.attempts == 1
        assert outcome.match_count == 2
        assert outcome.recipient == "grace@example.com"

        message, sent_env, use_tls = smtp_client.send.call_args[0]
        assert message["To"] == "grace@example.com"
        assert message["From"] == "Job Portal Alerts <alerts@test.com>"
        assert message["Subject"] == '2 New Jobs Matching Your Alert "Remote React"'
        assert sent_env is env_config
        assert use_tls is True

        html = message.get_body(preferencelist=("html",)).get_content()
        text = message.get_body(preferencelist=("plain",)).get_content()
        assert f"https://jobs.example.com/jobs/{job.id}" in html
        assert "React Developer" in text

    def test_digest_limited_to_max_matches_per_email(self, service, smtp_client, env_config):
        result = make_result(matches=[make_match(score=90 - i) for i in range(5)])

        outcome = service.send_alert_digest(
            result, env_config, EmailConfig(max_matches_per_email=2)
        )

        assert outcome.match_count == 2
        message = smtp_client.send.call_args[0][0]
        assert message["Subject"].startswith("2 New Jobs")


class TestRetry:
    """Tests for retry and backoff."""

    def test_retries_then_succeeds(self, service, smtp_client, sleeps, env_config):
        smtp_client.send.side_effect = [
            SMTPDeliveryError("temporary"),
            SMTPDeliveryError("temporary"),
            None,
        ]
        config = EmailConfig(max_retries=3, retry_initial_delay=5, retry_backoff_multiplier=2.0)

        outcome = service.send_alert_digest(make_result(), env_config, config)

        assert outcome.status == "sent"
        assert outcome.attempts == 3
        assert sleeps == [5, 10]

    def test_gives_up_after_max_retries(self, service, smtp_client, sleeps, env_config):
        smtp_client.send.side_effect = SMTPDeliveryError("mailbox unavailable")
        config = EmailConfig(max_retries=2, retry_initial_delay=5, retry_backoff_multiplier=2.0)

        outcome = service.send_alert_digest(make_result(), env_config, config)

        assert outcome.status == "failed"
        assert outcome.attempts == 3
        assert outcome.error == "mailbox unavailable"
        assert smtp_client.send.call_count == 3
        assert sleeps == [5, 10]

    def test_delay_capped_at_sixty_seconds(self, service, smtp_client, sleeps, env_config):
        smtp_client.send.side_effect = SMTPDeliveryError("down")
        config = EmailConfig(max_retries=3, retry_initial_delay=30, retry_backoff_multiplier=4.0)

        service.send_alert_digest(make_result(), env_config, config)

        assert sleeps == [30, 60, 60]

    def test_no_retries(self, service, smtp_client, sleeps, env_config):
        smtp_client.send.side_effect = SMTPDeliveryError("down")

        outcome = service.send_alert_digest(make_result(), env_config, EmailConfig(max_retries=0))

        assert outcome.attempts == 1
        assert sleeps == []


class TestBuildFailures:
    def test_invalid_recipient(self, service, smtp_client, env_config):
        result = make_result(user_email="not-an-address")

        outcome = service.send_alert_digest(result, env_config, EmailConfig())

        assert outcome.status == "failed"
        assert outcome.attempts == 0
        assert "Invalid recipient" in outcome.error
        smtp_client.send.assert_not_called()

    def test_template_error(self, smtp_client, env_config):
        renderer = Mock(spec=TemplateRenderer)
        renderer.render.side_effect = NotificationTemplateError("broken template")
        service = AlertNotificationService(
            template_renderer=renderer, smtp_client=smtp_client, sleep=lambda _: None
        )

        outcome = service.send_alert_digest(make_result(), env_config, EmailConfig())

        assert outcome.status == "failed"
        assert outcome.error == "broken template"
        smtp_client.send.assert_not_called()
