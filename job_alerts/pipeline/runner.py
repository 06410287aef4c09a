"""Dispatch pipeline: evaluate every active alert and e-mail the digests."""

import threading
import time
from contextlib import AbstractContextManager
from typing import Callable, List
from uuid import uuid4

from sqlalchemy.orm import Session

from job_alerts.config.environment import EnvironmentConfig
from job_alerts.config.models import AppConfig
from job_alerts.logging import get_logger, log_context
from job_alerts.matching.engine import AlertProcessor
from job_alerts.matching.models import AlertProcessResult
from job_alerts.notifications.service import AlertNotificationService
from job_alerts.persistence.database import get_session
from job_alerts.persistence.repositories import AlertRepository
from job_alerts.utils.timestamps import utc_now

from .models import AlertRunStats, DispatchRunResult

logger = get_logger(__name__, component="pipeline")


class AlertDispatchPipeline:
    """
    Runs one dispatch over all active alerts.

    For each alert result with at least one match, a digest is sent to the
    alert's owner. Delivery counters (last_sent, matches_found,
    notification_count) are recorded only after the digest was sent.

    Runs never overlap: a run that starts while another holds the lock
    returns immediately with ``skipped=True``.
    """

    def __init__(
        self,
        app_config: AppConfig,
        env_config: EnvironmentConfig,
        alert_processor: AlertProcessor,
        notification_service: AlertNotificationService,
        session_factory: Callable[[], AbstractContextManager[Session]] = get_session,
    ):
        self.app_config = app_config
        self.env_config = env_config
        self.alert_processor = alert_processor
        self.notification_service = notification_service
        self.session_factory = session_factory
        self._lock = threading.Lock()

    def run_once(self) -> DispatchRunResult:
        """
        Execute one dispatch run.

        Returns:
            DispatchRunResult with per-alert stats. Per-alert failures are
            recorded in the stats and never raised.
        """
        run_started_at = utc_now()
        run_id = uuid4().hex

        if not self._lock.acquire(blocking=False):
            with log_context(run_id=run_id):
                logger.warning(
                    "Dispatch run skipped: previous run still in progress",
                    extra={"event": "dispatch.run.skipped", "reason": "lock_held"},
                )
            return DispatchRunResult(
                run_started_at=run_started_at, run_finished_at=utc_now(), skipped=True
            )

        try:
            with log_context(run_id=run_id):
                logger.info("Dispatch run started", extra={"event": "dispatch.run.started"})

                try:
                    results = self.alert_processor.process_all_active_alerts()
                except Exception as e:
                    logger.error(
                        f"Dispatch run aborted: could not evaluate alerts: {e}",
                        extra={"event": "dispatch.run.failed", "error_type": type(e).__name__},
                        exc_info=True,
                    )
                    return DispatchRunResult(
                        run_started_at=run_started_at,
                        run_finished_at=utc_now(),
                        fatal_error=str(e),
                    )

                alert_stats: List[AlertRunStats] = [self._dispatch(r) for r in results]

                result = DispatchRunResult(
                    run_started_at=run_started_at,
                    run_finished_at=utc_now(),
                    alert_stats=alert_stats,
                )
                logger.info(
                    "Dispatch run completed",
                    extra={
                        "event": "dispatch.run.completed",
                        "duration_ms": int(result.total_duration_seconds * 1000),
                        **result.summary(),
                    },
                )
                return result
        finally:
            self._lock.release()

    def _dispatch(self, result: AlertProcessResult) -> AlertRunStats:
        started = time.monotonic()
        stats = AlertRunStats(
            alert_id=result.alert_id,
            alert_name=result.alert_name,
            user_email=result.user_email,
            match_count=result.match_count,
            error=result.error,
        )

        with log_context(alert_id=result.alert_id, user_id=result.user_id):
            try:
                if result.error:
                    logger.warning(
                        f"Alert '{result.alert_name or result.alert_id}' failed: {result.error}",
                        extra={"event": "dispatch.alert.error", **result.to_summary()},
                    )
                elif not result.matches:
                    logger.info(
                        f"No matches for alert '{result.alert_name}'",
                        extra={
                            "event": "dispatch.alert.no_matches",
                            **result.to_summary(),
                            "user_skills": result.user_skill_count,
                            "user_keywords": result.user_keyword_count,
                            "user_searches": result.user_search_count,
                        },
                    )
                else:
                    self._notify(result, stats)
            except Exception as e:
                stats.error = str(e)
                logger.error(
                    f"Unexpected error dispatching alert {result.alert_id}: {e}",
                    extra={"event": "dispatch.alert.failed", "error_type": type(e).__name__},
                    exc_info=True,
                )
            finally:
                stats.duration_seconds = time.monotonic() - started

        return stats

    def _notify(self, result: AlertProcessResult, stats: AlertRunStats) -> None:
        notification = self.notification_service.send_alert_digest(
            result, self.env_config, self.app_config.email
        )
        stats.notification_status = notification.status

        if not notification.is_success():
            stats.error = notification.error or f"Digest {notification.status}"
            return

        stats.sent_count = notification.match_count
        with self.session_factory() as session:
            AlertRepository(session).record_notification(
                result.alert_id, notification.match_count, sent_at=utc_now()
            )

        top = result.matches[0]
        logger.info(
            f"Digest for alert '{result.alert_name}' delivered",
            extra={
                "event": "dispatch.alert.sent",
                "sent_count": notification.match_count,
                "top_match_title": top.job.title,
                "top_match_score": top.score,
            },
        )
