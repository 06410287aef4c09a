"""Unit tests for the scheduler service.

Tests the SchedulerService including:
- Cron triggers for weekly and daily schedules
- Job registration with overlap protection
- Optional test interval job
- Run on startup and trigger now
- Start/shutdown lifecycle
"""

import threading
from datetime import datetime, timezone
from unittest.mock import Mock

import pytest

from job_alerts.config.models import ScheduleConfig
from job_alerts.scheduler import SchedulerService, build_cron_trigger
from job_alerts.scheduler.service import DISPATCH_JOB_ID, TEST_JOB_ID

# A Wednesday
WEDNESDAY = datetime(2025, 11, 12, 10, 0, tzinfo=timezone.utc)


@pytest.fixture
def started():
    """Start a scheduler and always shut it down afterwards."""
    services = []

    def start(callable_, **schedule):
        service = SchedulerService(
            pipeline_callable=callable_,
            schedule=ScheduleConfig(**schedule),
            shutdown_event=threading.Event(),
        )
        services.append(service)
        service.start()
        return service

    yield start

    for service in services:
        if service.is_running():
            service.shutdown(wait=False)


class TestBuildCronTrigger:
    """Tests for build_cron_trigger()."""

    def test_weekly_fires_monday_nine(self):
        trigger = build_cron_trigger("weekly", "UTC")
        fire = trigger.get_next_fire_time(None, WEDNESDAY)
        assert fire == datetime(2025, 11, 17, 9, 0, tzinfo=timezone.utc)

    def test_daily_fires_at_eight(self):
        trigger = build_cron_trigger("daily", "UTC")
        fire = trigger.get_next_fire_time(None, WEDNESDAY)
        assert fire == datetime(2025, 11, 13, 8, 0, tzinfo=timezone.utc)

    def test_unknown_frequency(self):
        with pytest.raises(ValueError, match="Unsupported schedule frequency"):
            build_cron_trigger("hourly")


class TestSchedulerService:
    """Test suite for SchedulerService."""

    def test_not_running_before_start(self):
        service = SchedulerService(pipeline_callable=Mock(), schedule=ScheduleConfig())
        assert not service.is_running()
        assert service.get_next_run_time() is None

    def test_start_registers_dispatch_job(self, started):
        service = started(Mock(), frequency="daily")

        assert service.is_running()
        job = service.scheduler.get_job(DISPATCH_JOB_ID)
        assert job is not None
        assert job.max_instances == 1
        assert job.coalesce is True
        assert service.scheduler.get_job(TEST_JOB_ID) is None
        assert service.get_next_run_time() is not None

    def test_test_interval_job(self, started):
        service = started(Mock(), test_interval_minutes=15)

        assert service.scheduler.get_job(TEST_JOB_ID) is not None
        assert service.get_next_run_time() is not None

    def test_run_on_startup_triggers_immediately(self, started):
        pipeline = Mock()
        started(pipeline, run_on_startup=True)
        pipeline.assert_called_once_with()

    def test_no_run_on_startup_by_default(self, started):
        pipeline = Mock()
        started(pipeline)
        pipeline.assert_not_called()

    def test_trigger_now_returns_pipeline_result(self):
        pipeline = Mock(return_value="run-result")
        service = SchedulerService(pipeline_callable=pipeline, schedule=ScheduleConfig())

        assert service.trigger_now() == "run-result"
        pipeline.assert_called_once_with()

    def test_shutdown_sets_event(self, started):
        service = started(Mock())

        service.shutdown(wait=False)

        assert not service.is_running()
        assert service.shutdown_event.is_set()

    def test_shutdown_when_not_started(self):
        event = threading.Event()
        service = SchedulerService(Mock(), ScheduleConfig(), shutdown_event=event)

        service.shutdown()

        assert event.is_set()
