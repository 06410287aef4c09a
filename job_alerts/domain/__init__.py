"""Domain records shared by the engine, persistence, and notifications."""

from .models import (
    SUCCESSFUL_STATUSES,
    AlertFrequency,
    ApplicationStatus,
    HistoricalApplication,
    JobAlert,
    JobRecord,
    JobType,
    SearchHistoryEntry,
    UserProfile,
)

__all__ = [
    "UserProfile",
    "SearchHistoryEntry",
    "JobAlert",
    "JobRecord",
    "HistoricalApplication",
    "JobType",
    "AlertFrequency",
    "ApplicationStatus",
    "SUCCESSFUL_STATUSES",
]
