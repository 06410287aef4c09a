"""Data models for dispatch run tracking and reporting."""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Optional


@dataclass
class AlertRunStats:
    """
    Outcome of one alert within a dispatch run.

    Attributes:
        alert_id: Alert identifier
        alert_name: Alert name, when the alert could be loaded
        user_email: Recipient address, when the user could be loaded
        match_count: Matches the engine returned
        sent_count: Matches included in the delivered digest (0 if not sent)
        notification_status: "sent", "skipped", "failed" or None if not attempted
        error: Processing, delivery or counter-update error, if any
        duration_seconds: Time spent on this alert's dispatch
    """

    alert_id: str
    alert_name: Optional[str] = None
    user_email: Optional[str] = None
    match_count: int = 0
    sent_count: int = 0
    notification_status: Optional[str] = None
    error: Optional[str] = None
    duration_seconds: float = 0.0

    @property
    def had_error(self) -> bool:
        return self.error is not None


@dataclass
class DispatchRunResult:
    """
    Aggregate results of one dispatch run.

    Attributes:
        run_started_at: UTC timestamp when the run began
        run_finished_at: UTC timestamp when the run completed
        alert_stats: Per-alert outcomes
        skipped: True when the run did not start because another was in progress
        fatal_error: Set when the run could not enumerate alerts at all
    """

    run_started_at: datetime
    run_finished_at: datetime
    alert_stats: List[AlertRunStats] = field(default_factory=list)
    skipped: bool = False
    fatal_error: Optional[str] = None

    @property
    def total_duration_seconds(self) -> float:
        return (self.run_finished_at - self.run_started_at).total_seconds()

    @property
    def total_alerts(self) -> int:
        return len(self.alert_stats)

    @property
    def alerts_with_matches(self) -> int:
        return sum(1 for s in self.alert_stats if s.match_count > 0)

    @property
    def alerts_with_errors(self) -> int:
        return sum(1 for s in self.alert_stats if s.had_error)

    @property
    def total_matches(self) -> int:
        return sum(s.match_count for s in self.alert_stats)

    @property
    def emails_sent(self) -> int:
        return sum(1 for s in self.alert_stats if s.notification_status == "sent")

    @property
    def emails_failed(self) -> int:
        return sum(1 for s in self.alert_stats if s.notification_status == "failed")

    @property
    def had_errors(self) -> bool:
        return self.fatal_error is not None or self.alerts_with_errors > 0

    def summary(self) -> Dict[str, Any]:
        return {
            "totalAlerts": self.total_alerts,
            "alertsWithMatches": self.alerts_with_matches,
            "alertsWithErrors": self.alerts_with_errors,
            "totalMatches": self.total_matches,
            "emailsSent": self.emails_sent,
            "emailsFailed": self.emails_failed,
            "skipped": self.skipped,
        }
