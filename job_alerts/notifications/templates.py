"""Jinja2 rendering of alert digest e-mails."""

import logging
from typing import Any, Dict

from jinja2 import Environment, PackageLoader, StrictUndefined, TemplateError, select_autoescape

from .models import NotificationTemplateError

logger = logging.getLogger(__name__)


class TemplateRenderer:
    """Renders the digest subject, HTML body and text body.

    Templates live in job_alerts/notifications/email_templates. Undefined
    variables raise instead of rendering as empty strings. Only the HTML
    body is autoescaped.
    """

    def __init__(
        self,
        template_dir: str = "email_templates",
        subject_template: str = "job_alert_subject.j2",
        html_template: str = "job_alert_body.html.j2",
        text_template: str = "job_alert_body.txt.j2",
    ):
        self.subject_template_name = subject_template
        self.html_template_name = html_template
        self.text_template_name = text_template

        self.env = Environment(
            loader=PackageLoader("job_alerts.notifications", template_dir),
            autoescape=select_autoescape(enabled_extensions=("html", "html.j2"), default=False),
            undefined=StrictUndefined,
            trim_blocks=True,
            lstrip_blocks=True,
        )

    def render(self, context: Dict[str, Any]) -> Dict[str, str]:
        """Render all three templates.

        Returns:
            Dict with "subject" (single line), "html_body" and "text_body"

        Raises:
            NotificationTemplateError: If any template fails to render
        """
        try:
            subject = self.env.get_template(self.subject_template_name).render(context)
            html_body = self.env.get_template(self.html_template_name).render(context)
            text_body = self.env.get_template(self.text_template_name).render(context)
        except TemplateError as e:
            logger.error(f"Template rendering failed: {e}", exc_info=True)
            raise NotificationTemplateError(f"Template rendering failed: {e}") from e

        logger.debug(f"Rendered digest for alert {context.get('alert_id', 'unknown')}")
        return {
            "subject": " ".join(subject.split()),
            "html_body": html_body,
            "text_body": text_body,
        }
