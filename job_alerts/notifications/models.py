"""Result types and exceptions for alert digest delivery."""

from dataclasses import dataclass
from typing import Optional


class NotificationError(Exception):
    """Base exception for notification-related errors."""

    pass


class NotificationTemplateError(NotificationError):
    """Raised when a digest template cannot be rendered."""

    pass


class SMTPDeliveryError(NotificationError):
    """Raised when a single SMTP delivery attempt fails."""

    pass


@dataclass
class NotificationResult:
    """Outcome of sending one alert digest.

    Attributes:
        alert_id: Alert the digest belongs to
        recipient: Address the digest was sent (or meant) to
        match_count: Number of matches included in the digest
        attempts: Number of SMTP attempts made
        status: "sent", "skipped" or "failed"
        error: Error message when status is "failed"
    """

    alert_id: str
    recipient: Optional[str]
    match_count: int
    attempts: int
    status: str
    error: Optional[str] = None

    def is_success(self) -> bool:
        return self.status == "sent"
