"""Alert digest e-mails: rendering, SMTP delivery and retry."""

from .models import (
    NotificationError,
    NotificationResult,
    NotificationTemplateError,
    SMTPDeliveryError,
)
from .payloads import build_digest_context, build_match_payload, truncate_description
from .service import AlertNotificationService
from .smtp_client import SMTPClient, build_sender_address, validate_recipient
from .templates import TemplateRenderer

__all__ = [
    "AlertNotificationService",
    "NotificationResult",
    "NotificationError",
    "NotificationTemplateError",
    "SMTPDeliveryError",
    "TemplateRenderer",
    "SMTPClient",
    "build_digest_context",
    "build_match_payload",
    "truncate_description",
    "build_sender_address",
    "validate_recipient",
]
