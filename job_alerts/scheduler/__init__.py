"""Scheduling for the alert dispatch pipeline."""

from .service import SchedulerService, build_cron_trigger

__all__ = ["SchedulerService", "build_cron_trigger"]
