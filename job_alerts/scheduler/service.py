"""Scheduler service for periodic alert dispatch."""

import threading
from datetime import datetime
from typing import Callable, Optional

from apscheduler.schedulers.background import BackgroundScheduler
from apscheduler.triggers.cron import CronTrigger
from apscheduler.triggers.interval import IntervalTrigger

from job_alerts.config.models import ScheduleConfig, ScheduleFrequency
from job_alerts.logging import get_logger

logger = get_logger(__name__, component="scheduler")

DISPATCH_JOB_ID = "alert-dispatch"
TEST_JOB_ID = "alert-dispatch-test"

# Cron fields per frequency: weekly on Monday 09:00, daily at 08:00
CRON_SCHEDULES = {
    ScheduleFrequency.WEEKLY.value: {"day_of_week": "mon", "hour": 9, "minute": 0},
    ScheduleFrequency.DAILY.value: {"hour": 8, "minute": 0},
}

# A delayed weekly or daily run still fires if it is at most an hour late
MISFIRE_GRACE_SECONDS = 3600


def build_cron_trigger(frequency: str, timezone: str = "UTC") -> CronTrigger:
    """Return the cron trigger for a schedule frequency.

    Raises:
        ValueError: If frequency is not "daily" or "weekly"
    """
    key = frequency.value if isinstance(frequency, ScheduleFrequency) else str(frequency)
    try:
        fields = CRON_SCHEDULES[key]
    except KeyError:
        raise ValueError(f"Unsupported schedule frequency: {frequency}")
    return CronTrigger(timezone=timezone, **fields)


class SchedulerService:
    """
    Wraps APScheduler to run the dispatch pipeline on a cron schedule.

    The main job runs weekly or daily. When test_interval_minutes is set, a
    second job also runs the pipeline every N minutes. Both jobs call the same
    callable, whose own lock keeps runs from overlapping.
    """

    def __init__(
        self,
        pipeline_callable: Callable[[], object],
        schedule: ScheduleConfig,
        shutdown_event: Optional[threading.Event] = None,
    ):
        """
        Initialize the scheduler service.

        Args:
            pipeline_callable: Function to call on each run (e.g. pipeline.run_once)
            schedule: Schedule configuration
            shutdown_event: Optional event set on shutdown
        """
        self.pipeline_callable = pipeline_callable
        self.schedule = schedule
        self.shutdown_event = shutdown_event

        self.scheduler = BackgroundScheduler(
            job_defaults={
                "max_instances": 1,
                "coalesce": True,
                "misfire_grace_time": MISFIRE_GRACE_SECONDS,
            },
            timezone=schedule.timezone,
        )

    def start(self) -> None:
        """Register the dispatch jobs and start the scheduler thread."""
        self.scheduler.add_job(
            func=self.pipeline_callable,
            trigger=build_cron_trigger(self.schedule.frequency, self.schedule.timezone),
            id=DISPATCH_JOB_ID,
            name=f"Job alert dispatch ({self.schedule.frequency})",
            replace_existing=True,
        )

        if self.schedule.test_interval_minutes:
            self.scheduler.add_job(
                func=self.pipeline_callable,
                trigger=IntervalTrigger(
                    minutes=self.schedule.test_interval_minutes,
                    timezone=self.schedule.timezone,
                ),
                id=TEST_JOB_ID,
                name="Job alert dispatch (test interval)",
                replace_existing=True,
            )
            logger.warning(
                f"Test dispatch enabled every {self.schedule.test_interval_minutes} minutes",
                extra={
                    "event": "scheduler.test_interval.enabled",
                    "interval_minutes": self.schedule.test_interval_minutes,
                },
            )

        self.scheduler.start()

        next_run = self.get_next_run_time()
        logger.info(
            f"Scheduler started ({self.schedule.frequency}, {self.schedule.timezone})",
            extra={
                "event": "scheduler.started",
                "frequency": self.schedule.frequency,
                "timezone": self.schedule.timezone,
                "next_run_time": next_run.isoformat() if next_run else None,
            },
        )

        if self.schedule.run_on_startup:
            self.trigger_now()

    def shutdown(self, wait: bool = False) -> None:
        """
        Stop the scheduler.

        Args:
            wait: If True, wait for a running dispatch to finish
        """
        logger.info(
            "Shutting down scheduler",
            extra={"event": "scheduler.stopping", "wait_for_jobs": wait},
        )

        if self.scheduler.running:
            self.scheduler.shutdown(wait=wait)

        if self.shutdown_event:
            self.shutdown_event.set()

        logger.info("Scheduler shutdown complete", extra={"event": "scheduler.stopped"})

    def trigger_now(self):
        """Run the pipeline once, synchronously, in the calling thread."""
        logger.info("Triggering immediate dispatch run", extra={"event": "scheduler.trigger_now"})
        return self.pipeline_callable()

    def is_running(self) -> bool:
        return self.scheduler.running

    def get_next_run_time(self) -> Optional[datetime]:
        """Earliest next run time across the registered jobs, or None."""
        run_times = [
            job.next_run_time
            for job in (self.scheduler.get_job(DISPATCH_JOB_ID), self.scheduler.get_job(TEST_JOB_ID))
            if job is not None and job.next_run_time is not None
        ]
        return min(run_times) if run_times else None
