"""Alert processor: evaluates alerts against the active job corpus.

For one alert the processor:
1. Loads the alert (must exist and be active)
2. Re-reads the owning user's profile (never cached)
3. Learns extra keywords and skills from successful applications
4. Merges keywords and skills from every source
5. Scores every active job, then filters, sorts and truncates

Failures never escape: they are returned as an AlertProcessResult with an
empty match list and an error message.
"""

import logging
from contextlib import AbstractContextManager
from datetime import datetime
from typing import Callable, List, Optional, Sequence

from sqlalchemy.orm import Session

from job_alerts.config.models import MatchingConfig
from job_alerts.domain.models import JobAlert, JobRecord, UserProfile
from job_alerts.logging import get_logger, log_context
from job_alerts.persistence.database import get_session
from job_alerts.persistence.repositories import AlertRepository, JobRepository, UserRepository
from job_alerts.utils.timestamps import utc_now

from .aggregator import rank_matches, score_job
from .exceptions import AlertNotFoundError, MatchingError, UserNotFoundError
from .learning import LearnedSignals, LearningExtractor
from .models import AlertProcessResult, MatchResult
from .signals import merge_keywords, merge_skills

logger = get_logger(__name__, component="matching")

SessionFactory = Callable[[], AbstractContextManager[Session]]


class AlertProcessor:
    """Evaluates job alerts.

    Holds no per-alert state between calls. Every call reads the alert, the
    user and the job corpus afresh.
    """

    def __init__(
        self,
        config: Optional[MatchingConfig] = None,
        session_factory: SessionFactory = get_session,
        learning_extractor: Optional[LearningExtractor] = None,
        clock: Callable[[], datetime] = utc_now,
        logger_instance: Optional[logging.Logger] = None,
    ):
        """Initialize AlertProcessor.

        Args:
            config: Weights and limits (defaults to MatchingConfig())
            session_factory: Context manager factory yielding a Session
            learning_extractor: Defaults to one sharing session_factory
            clock: Source of "now" for recency scoring
            logger_instance: Optional logger (defaults to module logger)
        """
        self.config = config or MatchingConfig()
        self.session_factory = session_factory
        self.learning_extractor = learning_extractor or LearningExtractor(session_factory)
        self.clock = clock
        self.logger = logger_instance or logger

    def process_alert(self, alert_id: str, only_new: bool = False) -> AlertProcessResult:
        """Evaluate one alert against every active job.

        Args:
            alert_id: Alert to evaluate
            only_new: Accepted for API compatibility. Every run evaluates the
                full corpus so profile edits are reflected immediately.

        Returns:
            AlertProcessResult; on failure matches is empty and error is set
        """
        if only_new:
            self.logger.debug(
                "only_new is ignored; evaluating the full job corpus",
                extra={"event": "alert.process.only_new_ignored", "alert_id": alert_id},
            )

        result = AlertProcessResult(alert_id=alert_id)

        with log_context(alert_id=alert_id):
            try:
                alert, user, jobs = self._load(alert_id)
                result.alert_name = alert.name
                result.user_id = user.id
                result.user_email = user.email
                result.user_name = user.name
                result.user_skill_count = len(user.skills)
                result.user_keyword_count = len(user.saved_keywords)
                result.user_search_count = len(user.search_history)

                learned = self.learning_extractor.learn(user.id)
                result.matches = self.find_matches(alert, user, jobs, learned)
            except MatchingError as e:
                self.logger.info(
                    f"Alert skipped: {e}",
                    extra={"event": "alert.process.skipped", "reason": str(e)},
                )
                result.matches = []
                result.error = str(e)
                return result
            except Exception as e:
                self.logger.error(
                    f"Error processing alert {alert_id}: {e}",
                    extra={"event": "alert.process.failed", "error_type": type(e).__name__},
                    exc_info=True,
                )
                result.matches = []
                result.error = str(e) or type(e).__name__
                return result

            self.logger.info(
                f"Processed alert '{result.alert_name}': {result.match_count} matches",
                extra={
                    "event": "alert.process.completed",
                    "user_id": result.user_id,
                    "match_count": result.match_count,
                    "job_count": len(jobs),
                    "user_skills": result.user_skill_count,
                    "user_keywords": result.user_keyword_count,
                    "user_searches": result.user_search_count,
                },
            )
        return result

    def process_all_active_alerts(self) -> List[AlertProcessResult]:
        """Evaluate every active alert.

        One failing alert never stops the others: its result carries the
        error and processing moves on.

        Raises:
            PersistenceError: Only if the list of active alerts cannot be read
        """
        with self.session_factory() as session:
            alert_ids = [alert.id for alert in AlertRepository(session).get_active()]

        self.logger.info(
            f"Processing {len(alert_ids)} active alerts",
            extra={"event": "alert.batch.started", "alert_count": len(alert_ids)},
        )

        results = []
        for alert_id in alert_ids:
            try:
                results.append(self.process_alert(alert_id))
            except Exception as e:
                self.logger.error(
                    f"Unexpected error processing alert {alert_id}: {e}",
                    extra={"event": "alert.batch.alert_failed", "alert_id": alert_id},
                    exc_info=True,
                )
                results.append(AlertProcessResult(alert_id=alert_id, error=str(e)))

        self.logger.info(
            "Finished processing active alerts",
            extra={
                "event": "alert.batch.completed",
                "alert_count": len(results),
                "error_count": sum(1 for r in results if not r.succeeded),
            },
        )
        return results

    def find_matches(
        self,
        alert: JobAlert,
        user: UserProfile,
        jobs: Sequence[JobRecord],
        learned: Optional[LearnedSignals] = None,
    ) -> List[MatchResult]:
        """Score jobs for an alert and return the ranked, truncated matches."""
        learned = learned or LearnedSignals()
        keywords = merge_keywords(
            user, alert, learned, history_window=self.config.search_history_window
        )
        skills = merge_skills(user, learned)
        now = self.clock()

        self.logger.debug(
            "Effective matching signals",
            extra={
                "event": "alert.signals.built",
                "profile_keywords": len(user.saved_keywords),
                "alert_keywords": len(alert.keywords),
                "learned_keywords": len(learned.keywords),
                "total_keywords": len(keywords),
                "user_skills": len(user.skills),
                "learned_skills": len(learned.skills),
                "total_skills": len(skills),
            },
        )

        scored = (
            score_job(job, alert, keywords, skills, self.config.weights, now=now)
            for job in jobs
        )
        return rank_matches(
            scored,
            min_score=self.config.min_score,
            max_results=self.config.max_results,
        )

    def _load(self, alert_id: str):
        with self.session_factory() as session:
            alert = AlertRepository(session).get_by_id(alert_id)
            if alert is None or not alert.is_active:
                raise AlertNotFoundError(alert_id)

            user = UserRepository(session).get_by_id(alert.user_id)
            if user is None:
                raise UserNotFoundError(alert.user_id)

            jobs = JobRepository(session).get_active()
        return alert, user, jobs
