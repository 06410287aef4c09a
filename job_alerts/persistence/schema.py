"""ORM models for users, jobs, alerts and applications.

List-valued fields are stored in JSON columns. Timestamps are stored as ISO
8601 strings with a ``Z`` suffix. Each model converts to and from its frozen
domain counterpart so that ORM objects never leave the persistence package.
"""

import logging

from sqlalchemy import Boolean, Column, ForeignKey, Index, Integer, JSON, String, Text, inspect
from sqlalchemy.engine import Engine
from sqlalchemy.orm import declarative_base

from job_alerts.domain.models import (
    HistoricalApplication,
    JobAlert,
    JobRecord,
    SearchHistoryEntry,
    UserProfile,
)
from job_alerts.utils.timestamps import format_timestamp, parse_timestamp, utc_now

logger = logging.getLogger(__name__)

Base = declarative_base()


class UserModel(Base):
    """ORM model for the users table."""

    __tablename__ = "users"

    id = Column(String(64), primary_key=True, nullable=False)
    name = Column(String(255), nullable=False, default="")
    email = Column(String(320), nullable=False)
    skills = Column(JSON, nullable=False, default=list)
    saved_keywords = Column(JSON, nullable=False, default=list)
    # [{"term": str, "timestamp": iso-string | null}, ...] oldest first
    search_history = Column(JSON, nullable=False, default=list)
    created_at = Column(String(50), nullable=False)

    __table_args__ = (Index("idx_users_email", "email"),)

    def to_domain(self) -> UserProfile:
        return UserProfile(
            id=self.id,
            name=self.name or "",
            email=self.email,
            skills=list(self.skills or []),
            saved_keywords=list(self.saved_keywords or []),
            search_history=[
                SearchHistoryEntry(
                    term=entry.get("term", ""),
                    timestamp=parse_timestamp(entry.get("timestamp")),
                )
                for entry in (self.search_history or [])
                if isinstance(entry, dict)
            ],
        )

    @classmethod
    def from_domain(cls, user: UserProfile) -> "UserModel":
        model = cls(id=user.id, created_at=format_timestamp(utc_now()))
        model.apply(user)
        return model

    def apply(self, user: UserProfile) -> None:
        """Copy mutable profile fields from a domain record."""
        self.name = user.name
        self.email = user.email
        self.skills = list(user.skills)
        self.saved_keywords = list(user.saved_keywords)
        self.search_history = [
            {"term": entry.term, "timestamp": format_timestamp(entry.timestamp)}
            for entry in user.search_history
        ]


class JobModel(Base):
    """ORM model for the jobs table."""

    __tablename__ = "jobs"

    id = Column(String(64), primary_key=True, nullable=False)
    title = Column(Text, nullable=False)
    description = Column(Text, nullable=False, default="")
    company = Column(String(255), nullable=False, default="")
    location = Column(String(255), nullable=True)
    job_type = Column(String(32), nullable=True)
    skills = Column(JSON, nullable=False, default=list)
    salary = Column(String(255), nullable=True)
    is_active = Column(Boolean, nullable=False, default=True)
    created_at = Column(String(50), nullable=True)

    __table_args__ = (
        Index("idx_jobs_active", "is_active"),
        Index("idx_jobs_created_at", "created_at"),
    )

    def to_domain(self) -> JobRecord:
        return JobRecord(
            id=self.id,
            title=self.title,
            description=self.description or "",
            company=self.company or "",
            location=self.location,
            job_type=self.job_type,
            skills=list(self.skills or []),
            salary=self.salary,
            is_active=bool(self.is_active),
            created_at=parse_timestamp(self.created_at),
        )

    @classmethod
    def from_domain(cls, job: JobRecord) -> "JobModel":
        model = cls(id=job.id)
        model.apply(job)
        return model

    def apply(self, job: JobRecord) -> None:
        self.title = job.title
        self.description = job.description
        self.company = job.company
        self.location = job.location
        self.job_type = job.job_type
        self.skills = list(job.skills)
        self.salary = job.salary
        self.is_active = job.is_active
        self.created_at = format_timestamp(job.created_at)


class JobAlertModel(Base):
    """ORM model for the job_alerts table."""

    __tablename__ = "job_alerts"

    id = Column(String(64), primary_key=True, nullable=False)
    user_id = Column(String(64), ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    name = Column(String(255), nullable=False, default="My Job Alert")
    keywords = Column(JSON, nullable=False, default=list)
    locations = Column(JSON, nullable=False, default=list)
    job_types = Column(JSON, nullable=False, default=list)
    frequency = Column(String(16), nullable=False, default="weekly")
    is_active = Column(Boolean, nullable=False, default=True)
    matches_found = Column(Integer, nullable=False, default=0)
    notification_count = Column(Integer, nullable=False, default=0)
    last_sent = Column(String(50), nullable=True)
    created_at = Column(String(50), nullable=False)

    __table_args__ = (
        Index("idx_job_alerts_user", "user_id"),
        Index("idx_job_alerts_active", "is_active"),
    )

    def to_domain(self) -> JobAlert:
        return JobAlert(
            id=self.id,
            user_id=self.user_id,
            name=self.name,
            keywords=list(self.keywords or []),
            locations=list(self.locations or []),
            job_types=list(self.job_types or []),
            frequency=self.frequency,
            is_active=bool(self.is_active),
            matches_found=self.matches_found or 0,
            notification_count=self.notification_count or 0,
            last_sent=parse_timestamp(self.last_sent),
            created_at=parse_timestamp(self.created_at),
        )

    @classmethod
    def from_domain(cls, alert: JobAlert) -> "JobAlertModel":
        return cls(
            id=alert.id,
            user_id=alert.user_id,
            name=alert.name,
            keywords=list(alert.keywords),
            locations=list(alert.locations),
            job_types=[job_type.value for job_type in alert.job_types],
            frequency=alert.frequency.value,
            is_active=alert.is_active,
            matches_found=alert.matches_found,
            notification_count=alert.notification_count,
            last_sent=format_timestamp(alert.last_sent),
            created_at=format_timestamp(alert.created_at or utc_now()),
        )


class ApplicationModel(Base):
    """ORM model for the applications table.

    job_id carries no foreign key: applications outlive deleted jobs.
    """

    __tablename__ = "applications"

    id = Column(String(64), primary_key=True, nullable=False)
    applicant_id = Column(
        String(64), ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    )
    job_id = Column(String(64), nullable=False)
    status = Column(String(16), nullable=False, default="Applied")
    created_at = Column(String(50), nullable=False)

    __table_args__ = (Index("idx_applications_applicant_status", "applicant_id", "status"),)

    def to_domain(self, job: JobModel | None = None) -> HistoricalApplication:
        return HistoricalApplication(
            id=self.id,
            applicant_id=self.applicant_id,
            job_id=self.job_id,
            status=self.status,
            job=job.to_domain() if job is not None else None,
            created_at=parse_timestamp(self.created_at),
        )

    @classmethod
    def from_domain(cls, application: HistoricalApplication) -> "ApplicationModel":
        return cls(
            id=application.id,
            applicant_id=application.applicant_id,
            job_id=application.job_id,
            status=application.status.value,
            created_at=format_timestamp(application.created_at or utc_now()),
        )


def create_schema(engine: Engine) -> None:
    """Create missing tables and indexes. Idempotent."""
    logger.info("Creating database schema if not exists")
    try:
        Base.metadata.create_all(engine, checkfirst=True)
        tables = inspect(engine).get_table_names()
        logger.info(f"Database schema ready. Tables: {', '.join(tables)}")
    except Exception as e:
        logger.error(f"Failed to create database schema: {e}", exc_info=True)
        raise
