"""Repositories for users, jobs, alerts and applications.

Repositories wrap one SQLAlchemy session and return frozen domain records,
never ORM objects. Lookups return None when nothing matches. Writes raise
RecordNotFoundError when their target does not exist.
"""

import logging
from datetime import datetime
from typing import List, Optional, Sequence

from pydantic import ValidationError
from sqlalchemy import select, update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from job_alerts.domain.models import (
    ApplicationStatus,
    HistoricalApplication,
    JobAlert,
    JobRecord,
    UserProfile,
)
from job_alerts.utils.timestamps import format_timestamp, utc_now

from .exceptions import DataIntegrityError, PersistenceError, RecordNotFoundError
from .schema import ApplicationModel, JobAlertModel, JobModel, UserModel

logger = logging.getLogger(__name__)


class _Repository:
    """Shared session holder and guarded single-row UPDATE."""

    def __init__(self, session: Session):
        self.session = session

    def _update(self, model, record_id: str, label: str, **values) -> None:
        try:
            result = self.session.execute(
                update(model).where(model.id == record_id).values(**values)
            )
            self.session.flush()
        except SQLAlchemyError as e:
            logger.error(f"Error updating {label} {record_id}: {e}", exc_info=True)
            raise PersistenceError(f"Failed to update {label}: {e}") from e

        if result.rowcount == 0:
            raise RecordNotFoundError(f"{label.capitalize()} with id {record_id} not found")


class UserRepository(_Repository):
    """Repository for user profiles."""

    def get_by_id(self, user_id: str) -> Optional[UserProfile]:
        """Retrieve a user profile by id.

        Returns:
            UserProfile if found, None otherwise

        Raises:
            PersistenceError: If database error occurs
        """
        try:
            user_model = self.session.get(UserModel, user_id)
            return user_model.to_domain() if user_model is not None else None
        except SQLAlchemyError as e:
            logger.error(f"Error retrieving user {user_id}: {e}", exc_info=True)
            raise PersistenceError(f"Failed to retrieve user: {e}") from e

    def upsert(self, user: UserProfile) -> UserProfile:
        """Insert a new profile or overwrite an existing one.

        Raises:
            DataIntegrityError: On constraint violation
            PersistenceError: If database error occurs
        """
        try:
            existing = self.session.get(UserModel, user.id)
            if existing is not None:
                existing.apply(user)
                self.session.flush()
                return existing.to_domain()

            user_model = UserModel.from_domain(user)
            self.session.add(user_model)
            self.session.flush()
            return user_model.to_domain()
        except IntegrityError as e:
            logger.error(f"Integrity error upserting user {user.id}: {e}", exc_info=True)
            raise DataIntegrityError(f"Failed to upsert user due to constraint violation: {e}") from e
        except SQLAlchemyError as e:
            logger.error(f"Error upserting user {user.id}: {e}", exc_info=True)
            raise PersistenceError(f"Failed to upsert user: {e}") from e


class JobRepository(_Repository):
    """Repository for job postings."""

    def get_by_id(self, job_id: str) -> Optional[JobRecord]:
        try:
            job_model = self.session.get(JobModel, job_id)
            return job_model.to_domain() if job_model is not None else None
        except SQLAlchemyError as e:
            logger.error(f"Error retrieving job {job_id}: {e}", exc_info=True)
            raise PersistenceError(f"Failed to retrieve job: {e}") from e

    def get_active(self) -> List[JobRecord]:
        """Return every active job, newest first.

        Jobs without a creation timestamp sort last. The order only matters
        as the tie-break input to the (stable) ranking step. Rows that no
        longer validate as a JobRecord are logged and skipped.

        Raises:
            PersistenceError: If database error occurs
        """
        try:
            stmt = (
                select(JobModel)
                .where(JobModel.is_active.is_(True))
                .order_by(JobModel.created_at.desc().nulls_last(), JobModel.id)
            )
            jobs = []
            for job_model in self.session.execute(stmt).scalars():
                try:
                    jobs.append(job_model.to_domain())
                except ValidationError as e:
                    logger.warning(f"Skipping job {job_model.id} with invalid data: {e}")
            return jobs
        except SQLAlchemyError as e:
            logger.error(f"Error retrieving active jobs: {e}", exc_info=True)
            raise PersistenceError(f"Failed to retrieve active jobs: {e}") from e

    def upsert(self, job: JobRecord) -> JobRecord:
        """Insert a new job or overwrite an existing one.

        Raises:
            DataIntegrityError: On constraint violation
            PersistenceError: If database error occurs
        """
        try:
            existing = self.session.get(JobModel, job.id)
            if existing is not None:
                existing.apply(job)
                self.session.flush()
                return existing.to_domain()

            job_model = JobModel.from_domain(job)
            self.session.add(job_model)
            self.session.flush()
            return job_model.to_domain()
        except IntegrityError as e:
            logger.error(f"Integrity error upserting job {job.id}: {e}", exc_info=True)
            raise DataIntegrityError(f"Failed to upsert job due to constraint violation: {e}") from e
        except SQLAlchemyError as e:
            logger.error(f"Error upserting job {job.id}: {e}", exc_info=True)
            raise PersistenceError(f"Failed to upsert job: {e}") from e

    def bulk_upsert(self, jobs: List[JobRecord]) -> List[JobRecord]:
        return [self.upsert(job) for job in jobs]

    def set_active(self, job_id: str, is_active: bool) -> None:
        """Open or close a job posting.

        Raises:
            RecordNotFoundError: If job_id doesn't exist
            PersistenceError: If database error occurs
        """
        self._update(JobModel, job_id, "job", is_active=is_active)


class AlertRepository(_Repository):
    """Repository for job alerts and their delivery counters."""

    def get_by_id(self, alert_id: str) -> Optional[JobAlert]:
        """Retrieve an alert by id regardless of its active flag."""
        try:
            alert_model = self.session.get(JobAlertModel, alert_id)
            return alert_model.to_domain() if alert_model is not None else None
        except SQLAlchemyError as e:
            logger.error(f"Error retrieving alert {alert_id}: {e}", exc_info=True)
            raise PersistenceError(f"Failed to retrieve alert: {e}") from e

    def get_active(self) -> List[JobAlert]:
        """Return every active alert, oldest first.

        Raises:
            PersistenceError: If database error occurs
        """
        try:
            stmt = (
                select(JobAlertModel)
                .where(JobAlertModel.is_active.is_(True))
                .order_by(JobAlertModel.created_at.asc(), JobAlertModel.id)
            )
            return [model.to_domain() for model in self.session.execute(stmt).scalars()]
        except SQLAlchemyError as e:
            logger.error(f"Error retrieving active alerts: {e}", exc_info=True)
            raise PersistenceError(f"Failed to retrieve active alerts: {e}") from e

    def get_for_user(self, user_id: str) -> List[JobAlert]:
        """Return all alerts owned by a user, newest first."""
        try:
            stmt = (
                select(JobAlertModel)
                .where(JobAlertModel.user_id == user_id)
                .order_by(JobAlertModel.created_at.desc())
            )
            return [model.to_domain() for model in self.session.execute(stmt).scalars()]
        except SQLAlchemyError as e:
            logger.error(f"Error retrieving alerts for user {user_id}: {e}", exc_info=True)
            raise PersistenceError(f"Failed to retrieve alerts: {e}") from e

    def create(self, alert: JobAlert) -> JobAlert:
        """Insert a new alert.

        Raises:
            DataIntegrityError: If the id already exists or the owner is unknown
            PersistenceError: If database error occurs
        """
        try:
            alert_model = JobAlertModel.from_domain(alert)
            self.session.add(alert_model)
            self.session.flush()
            return alert_model.to_domain()
        except IntegrityError as e:
            logger.error(f"Integrity error creating alert {alert.id}: {e}", exc_info=True)
            raise DataIntegrityError(f"Failed to create alert due to constraint violation: {e}") from e
        except SQLAlchemyError as e:
            logger.error(f"Error creating alert {alert.id}: {e}", exc_info=True)
            raise PersistenceError(f"Failed to create alert: {e}") from e

    def set_active(self, alert_id: str, is_active: bool) -> None:
        """Toggle an alert on or off.

        Raises:
            RecordNotFoundError: If alert_id doesn't exist
        """
        self._update(JobAlertModel, alert_id, "alert", is_active=is_active)

    def delete(self, alert_id: str) -> bool:
        """Delete an alert. Returns False if it did not exist."""
        try:
            alert_model = self.session.get(JobAlertModel, alert_id)
            if alert_model is None:
                return False
            self.session.delete(alert_model)
            self.session.flush()
            return True
        except SQLAlchemyError as e:
            logger.error(f"Error deleting alert {alert_id}: {e}", exc_info=True)
            raise PersistenceError(f"Failed to delete alert: {e}") from e

    def record_notification(
        self, alert_id: str, match_count: int, sent_at: Optional[datetime] = None
    ) -> JobAlert:
        """Record a delivered digest on the alert.

        Sets last_sent, adds match_count to matches_found and increments
        notification_count by one. The increments are done in SQL so two
        writers never lose an update.

        Raises:
            RecordNotFoundError: If alert_id doesn't exist
            PersistenceError: If database error occurs
        """
        if match_count < 0:
            raise ValueError(f"match_count cannot be negative, got {match_count}")

        self._update(
            JobAlertModel,
            alert_id,
            "alert",
            last_sent=format_timestamp(sent_at or utc_now()),
            matches_found=JobAlertModel.matches_found + match_count,
            notification_count=JobAlertModel.notification_count + 1,
        )

        # Reload so the SQL-side increments are visible
        self.session.expire_all()
        return self.get_by_id(alert_id)


class ApplicationRepository(_Repository):
    """Repository for past job applications."""

    def add(self, application: HistoricalApplication) -> HistoricalApplication:
        """Insert an application.

        Raises:
            DataIntegrityError: If the id already exists or the applicant is unknown
        """
        try:
            model = ApplicationModel.from_domain(application)
            self.session.add(model)
            self.session.flush()
            return model.to_domain(self.session.get(JobModel, model.job_id))
        except IntegrityError as e:
            logger.error(f"Integrity error adding application {application.id}: {e}", exc_info=True)
            raise DataIntegrityError(
                f"Failed to add application due to constraint violation: {e}"
            ) from e
        except SQLAlchemyError as e:
            logger.error(f"Error adding application {application.id}: {e}", exc_info=True)
            raise PersistenceError(f"Failed to add application: {e}") from e

    def get_by_applicant(
        self,
        applicant_id: str,
        statuses: Optional[Sequence[ApplicationStatus]] = None,
    ) -> List[HistoricalApplication]:
        """Return an applicant's applications with their jobs joined.

        Applications whose job no longer exists come back with ``job=None``.

        Args:
            applicant_id: User id of the applicant
            statuses: Restrict to these outcomes (all outcomes when None)

        Raises:
            PersistenceError: If database error occurs
        """
        try:
            stmt = (
                select(ApplicationModel, JobModel)
                .outerjoin(JobModel, JobModel.id == ApplicationModel.job_id)
                .where(ApplicationModel.applicant_id == applicant_id)
                .order_by(ApplicationModel.created_at.asc(), ApplicationModel.id)
            )
            if statuses is not None:
                stmt = stmt.where(
                    ApplicationModel.status.in_([ApplicationStatus(s).value for s in statuses])
                )
            return [
                application.to_domain(job)
                for application, job in self.session.execute(stmt).all()
            ]
        except SQLAlchemyError as e:
            logger.error(
                f"Error retrieving applications for applicant {applicant_id}: {e}", exc_info=True
            )
            raise PersistenceError(f"Failed to retrieve applications: {e}") from e
