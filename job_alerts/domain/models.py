"""Core domain records for users, jobs, alerts, and applications.

This module defines the immutable records the matching engine reads:
- UserProfile: skills, saved keywords, and search history of an applicant
- JobAlert: an applicant's alert preferences and delivery counters
- JobRecord: an open (or closed) job posting
- HistoricalApplication: a past application and its outcome

Every record is a frozen pydantic model. Optional collections default to an
empty list so callers never need to guard against None.
"""

from datetime import datetime
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from job_alerts.utils.timestamps import ensure_utc


class JobType(str, Enum):
    """Employment types a job can be posted with."""

    FULL_TIME = "Full-time"
    PART_TIME = "Part-time"
    CONTRACT = "Contract"
    INTERNSHIP = "Internship"


class AlertFrequency(str, Enum):
    """How often an alert digest is sent."""

    DAILY = "daily"
    WEEKLY = "weekly"


class ApplicationStatus(str, Enum):
    """Outcome of a job application."""

    APPLIED = "Applied"
    REVIEWED = "Reviewed"
    ACCEPTED = "Accepted"
    REJECTED = "Rejected"


# Outcomes that count as a positive signal for learning
SUCCESSFUL_STATUSES = (ApplicationStatus.ACCEPTED, ApplicationStatus.REVIEWED)


def _clean_string_list(values: Optional[List[str]]) -> List[str]:
    """Strip entries and drop blanks, preserving order."""
    if not values:
        return []
    if not isinstance(values, (list, tuple, set)):
        raise ValueError(f"expected a list of strings, got {type(values).__name__}")
    cleaned = []
    for value in values:
        if value is None:
            continue
        stripped = str(value).strip()
        if stripped:
            cleaned.append(stripped)
    return cleaned


def _utc_or_none(v: Optional[datetime]) -> Optional[datetime]:
    return ensure_utc(v) if v is not None else None


class SearchHistoryEntry(BaseModel):
    """A single search the user ran, e.g. ``react`` or ``title:developer``."""

    model_config = ConfigDict(frozen=True)

    term: str = Field(..., description="Search term as typed (may be field-prefixed)")
    timestamp: Optional[datetime] = Field(None, description="When the search ran (UTC)")

    @field_validator("timestamp")
    @classmethod
    def ensure_utc(cls, v: Optional[datetime]) -> Optional[datetime]:
        """Ensure datetime is timezone-aware and in UTC."""
        return _utc_or_none(v)


class UserProfile(BaseModel):
    """An applicant's profile as seen by the matching engine.

    The engine never mutates a profile. It is re-read on every alert run so
    that profile edits are reflected in the next evaluation.
    """

    model_config = ConfigDict(
        frozen=True,
        json_schema_extra={
            "example": {
                "id": "u-1",
                "name": "Ada Lovelace",
                "email": "ada@example.com",
                "skills": ["python", "react"],
                "saved_keywords": ["frontend developer"],
                "search_history": [{"term": "title:engineer", "timestamp": "2025-11-01T10:00:00Z"}],
            }
        },
    )

    id: str = Field(..., description="User identifier")
    name: str = Field("", description="Display name")
    email: str = Field(..., description="Address alert digests are sent to")
    skills: List[str] = Field(default_factory=list, description="Declared skills")
    saved_keywords: List[str] = Field(
        default_factory=list, description="Keywords saved on the profile (highest priority)"
    )
    search_history: List[SearchHistoryEntry] = Field(
        default_factory=list, description="Searches in chronological order"
    )

    @field_validator("skills", "saved_keywords", mode="before")
    @classmethod
    def clean_lists(cls, v: Optional[List[str]]) -> List[str]:
        """Strip entries and drop blanks."""
        return _clean_string_list(v)

    @field_validator("search_history", mode="before")
    @classmethod
    def default_history(cls, v):
        return v or []


class JobAlert(BaseModel):
    """A user's job alert: manual preferences plus delivery counters."""

    model_config = ConfigDict(
        frozen=True,
        json_schema_extra={
            "example": {
                "id": "a-1",
                "user_id": "u-1",
                "name": "Remote React roles",
                "keywords": ["react"],
                "locations": ["Remote"],
                "job_types": ["Full-time", "Internship"],
                "frequency": "weekly",
                "is_active": True,
                "matches_found": 12,
                "notification_count": 3,
                "last_sent": "2025-11-03T09:00:00Z",
            }
        },
    )

    id: str = Field(..., description="Alert identifier")
    user_id: str = Field(..., description="Owning user identifier")
    name: str = Field("My Job Alert", description="Alert name shown in e-mails")
    keywords: List[str] = Field(default_factory=list, description="Manual keyword override")
    locations: List[str] = Field(default_factory=list, description="Preferred locations")
    job_types: List[JobType] = Field(default_factory=list, description="Preferred job types")
    frequency: AlertFrequency = Field(AlertFrequency.WEEKLY, description="Digest frequency")
    is_active: bool = Field(True, description="Inactive alerts are never processed")
    matches_found: int = Field(0, ge=0, description="Total matches sent so far")
    notification_count: int = Field(0, ge=0, description="Number of digests sent")
    last_sent: Optional[datetime] = Field(None, description="When the last digest went out")
    created_at: Optional[datetime] = Field(None, description="Creation time (UTC)")

    @field_validator("name")
    @classmethod
    def strip_name(cls, v: str) -> str:
        stripped = v.strip()
        if not stripped:
            raise ValueError("Alert name cannot be empty or whitespace-only")
        return stripped

    @field_validator("keywords", "locations", mode="before")
    @classmethod
    def clean_lists(cls, v: Optional[List[str]]) -> List[str]:
        """Strip entries and drop blanks."""
        return _clean_string_list(v)

    @field_validator("job_types", mode="before")
    @classmethod
    def dedupe_job_types(cls, v):
        """Collapse repeated job types, keeping first occurrence."""
        if not v:
            return []
        return list(dict.fromkeys(v))

    @field_validator("last_sent", "created_at")
    @classmethod
    def ensure_utc(cls, v: Optional[datetime]) -> Optional[datetime]:
        """Ensure datetime is timezone-aware and in UTC."""
        return _utc_or_none(v)


class JobRecord(BaseModel):
    """A job posting from the portal's corpus."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(..., description="Job identifier")
    title: str = Field(..., description="Job title")
    description: str = Field("", description="Full job description")
    company: str = Field("", description="Company name")
    location: Optional[str] = Field(None, description="Job location")
    job_type: Optional[str] = Field(None, description="Employment type as posted")
    skills: List[str] = Field(default_factory=list, description="Required skills")
    salary: Optional[str] = Field(None, description="Salary text as posted")
    is_active: bool = Field(True, description="Only active jobs are matched")
    created_at: Optional[datetime] = Field(None, description="When the job was posted (UTC)")

    @field_validator("skills", mode="before")
    @classmethod
    def clean_skills(cls, v: Optional[List[str]]) -> List[str]:
        """Strip entries and drop blanks."""
        return _clean_string_list(v)

    @field_validator("location")
    @classmethod
    def strip_location(cls, v: Optional[str]) -> Optional[str]:
        """Strip whitespace from location; blank becomes None."""
        if v is None:
            return None
        stripped = v.strip()
        return stripped if stripped else None

    @field_validator("job_type", mode="before")
    @classmethod
    def plain_job_type(cls, v):
        """Store the posted type as text; blank becomes None.

        Jobs come from outside the alert system, so any type is accepted.
        Only alert preferences are restricted to JobType.
        """
        if isinstance(v, JobType):
            return v.value
        if v is None:
            return None
        stripped = str(v).strip()
        return stripped if stripped else None

    @field_validator("description", "company", mode="before")
    @classmethod
    def default_text(cls, v: Optional[str]) -> str:
        return v or ""

    @field_validator("created_at")
    @classmethod
    def ensure_utc(cls, v: Optional[datetime]) -> Optional[datetime]:
        """Ensure datetime is timezone-aware and in UTC."""
        return _utc_or_none(v)


class HistoricalApplication(BaseModel):
    """A past application, joined to its job when the job still exists."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(..., description="Application identifier")
    applicant_id: str = Field(..., description="Applicant user identifier")
    job_id: str = Field(..., description="Referenced job identifier")
    status: ApplicationStatus = Field(ApplicationStatus.APPLIED, description="Outcome status")
    job: Optional[JobRecord] = Field(None, description="Joined job record, if found")
    created_at: Optional[datetime] = Field(None, description="When the application was made")

    @field_validator("created_at")
    @classmethod
    def ensure_utc(cls, v: Optional[datetime]) -> Optional[datetime]:
        """Ensure datetime is timezone-aware and in UTC."""
        return _utc_or_none(v)
