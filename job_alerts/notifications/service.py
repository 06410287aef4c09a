"""Alert digest delivery.

AlertNotificationService turns one AlertProcessResult into a digest e-mail:
it builds the template context, renders the templates, validates the
recipient and delivers through SMTP with retry and exponential backoff.

The service never touches alert counters. The caller records a delivery
only when the returned NotificationResult reports success.
"""

import logging
import time
from email.message import EmailMessage
from typing import Callable, Optional

from job_alerts.config.environment import EnvironmentConfig
from job_alerts.config.models import EmailConfig
from job_alerts.logging import get_logger, log_context
from job_alerts.matching.models import AlertProcessResult

from .models import NotificationResult, NotificationTemplateError, SMTPDeliveryError
from .payloads import build_digest_context
from .smtp_client import SMTPClient, build_sender_address, validate_recipient
from .templates import TemplateRenderer

logger = get_logger(__name__, component="notification")

MAX_RETRY_DELAY_SECONDS = 60.0


class AlertNotificationService:
    """Sends alert digest e-mails."""

    def __init__(
        self,
        template_renderer: Optional[TemplateRenderer] = None,
        smtp_client: Optional[SMTPClient] = None,
        sleep: Callable[[float], None] = time.sleep,
        logger_instance: Optional[logging.Logger] = None,
    ):
        """Initialize the service.

        Args:
            template_renderer: Renderer (default: package templates)
            smtp_client: SMTP client (default: smtplib-backed)
            sleep: Called with the backoff delay between attempts
            logger_instance: Logger (default: module logger)
        """
        self.template_renderer = template_renderer or TemplateRenderer()
        self.smtp_client = smtp_client or SMTPClient()
        self.sleep = sleep
        self.logger = logger_instance or logger

    def send_alert_digest(
        self,
        result: AlertProcessResult,
        env_config: EnvironmentConfig,
        email_config: EmailConfig,
    ) -> NotificationResult:
        """Send the top matches of one alert result to its owner.

        Results with an error or without matches are skipped.

        Returns:
            NotificationResult with status "sent", "skipped" or "failed"
        """
        matches = result.matches[: email_config.max_matches_per_email]

        def outcome(status: str, attempts: int = 0, error: Optional[str] = None):
            return NotificationResult(
                alert_id=result.alert_id,
                recipient=result.user_email,
                match_count=len(matches),
                attempts=attempts,
                status=status,
                error=error,
            )

        with log_context(alert_id=result.alert_id, user_id=result.user_id):
            if result.error or not matches:
                self.logger.info(
                    "Skipping digest: nothing to send",
                    extra={
                        "event": "notification.skip",
                        "reason": "error" if result.error else "no_matches",
                    },
                )
                return outcome("skipped")

            try:
                recipient = validate_recipient(result.user_email)
                context = build_digest_context(
                    alert_id=result.alert_id,
                    alert_name=result.alert_name or "My Job Alert",
                    user_name=result.user_name,
                    matches=matches,
                    frontend_url=env_config.frontend_url,
                )
                rendered = self.template_renderer.render(context)
            except (ValueError, NotificationTemplateError) as e:
                self.logger.error(
                    f"Failed to build digest: {e}",
                    extra={"event": "notification.build.failed", "error_type": type(e).__name__},
                )
                return outcome("failed", error=str(e))

            message = EmailMessage()
            message["Subject"] = rendered["subject"]
            message["From"] = build_sender_address(env_config)
            message["To"] = recipient
            message.set_content(rendered["text_body"])
            message.add_alternative(rendered["html_body"], subtype="html")

            return self._deliver(message, env_config, email_config, outcome)

    def _deliver(self, message, env_config, email_config, outcome) -> NotificationResult:
        max_attempts = email_config.max_retries + 1
        last_error = None

        for attempt in range(1, max_attempts + 1):
            if attempt > 1:
                delay = min(
                    email_config.retry_initial_delay
                    * email_config.retry_backoff_multiplier ** (attempt - 2),
                    MAX_RETRY_DELAY_SECONDS,
                )
                self.logger.warning(
                    f"Retrying digest delivery (attempt {attempt}/{max_attempts}) in {delay:.1f}s",
                    extra={"event": "notification.send.retry", "attempt": attempt},
                )
                self.sleep(delay)

            try:
                self.smtp_client.send(message, env_config, email_config.use_tls)
            except SMTPDeliveryError as e:
                last_error = str(e)
                self.logger.warning(
                    f"Digest delivery failed (attempt {attempt}/{max_attempts}): {e}",
                    extra={
                        "event": "notification.send.failure",
                        "attempt": attempt,
                        "retry_remaining": attempt < max_attempts,
                    },
                )
                continue

            self.logger.info(
                f"Digest sent to {message['To']}",
                extra={"event": "notification.send.success", "attempt": attempt},
            )
            return outcome("sent", attempts=attempt)

        self.logger.error(
            f"Digest delivery gave up after {max_attempts} attempts",
            extra={"event": "notification.send.exhausted", "attempts": max_attempts},
        )
        return outcome("failed", attempts=max_attempts, error=last_error)
