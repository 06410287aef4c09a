"""Command-line entry point for the smart job alert service."""

from dotenv import load_dotenv
load_dotenv()

import argparse
import json
import os
import signal
import sys
import threading
import time
from pathlib import Path
from typing import Any, Dict, Optional, Tuple

from job_alerts.config.environment import EnvironmentConfig
from job_alerts.config.exceptions import ConfigurationError
from job_alerts.config.loader import load_config
from job_alerts.config.models import AppConfig
from job_alerts.logging import get_logger
from job_alerts.logging.config import configure_logging
from job_alerts.matching.engine import AlertProcessor
from job_alerts.matching.models import AlertProcessResult
from job_alerts.notifications.payloads import truncate_description
from job_alerts.notifications.service import AlertNotificationService
from job_alerts.persistence.database import close_database, init_database
from job_alerts.pipeline import AlertDispatchPipeline
from job_alerts.scheduler import SchedulerService

logger = get_logger(__name__, component="cli")


def load_runtime_config(
    config_path: Optional[Path], log_level_override: Optional[str]
) -> Tuple[AppConfig, EnvironmentConfig]:
    """
    Load configuration and resolve the effective log level.

    Log level priority: CLI > LOG_LEVEL environment variable > config file.

    Raises:
        ConfigurationError: If configuration is invalid
    """
    app_config, env_config = load_config(config_path)

    if log_level_override:
        env_config.log_level = log_level_override
    elif not env_config.log_level:
        env_config.log_level = app_config.logging.level or "INFO"

    return app_config, env_config


def build_alert_report(result: AlertProcessResult) -> Dict[str, Any]:
    """Render a single-alert evaluation the way the alert API reports it."""
    if result.error:
        return {"alertId": result.alert_id, "error": result.error, "matches": []}

    return {
        "alertId": result.alert_id,
        "alertName": result.alert_name,
        "matchCount": result.match_count,
        "matches": [
            {
                "job": {
                    "id": match.job.id,
                    "title": match.job.title,
                    "company": match.job.company,
                    "location": match.job.location,
                    "jobType": match.job.job_type,
                    "salary": match.job.salary,
                    "description": truncate_description(match.job.description),
                },
                "matchScore": match.score,
                "reasons": match.reasons,
            }
            for match in result.matches
        ],
    }


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Smart Job Alerts - match open jobs to user alerts and e-mail digests"
    )
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="Path to configuration file (default: config.yaml or config/config.yaml)",
    )
    mode = parser.add_mutually_exclusive_group()
    mode.add_argument(
        "--manual-run",
        action="store_true",
        help="Run a single dispatch immediately and exit",
    )
    mode.add_argument(
        "--alert-id",
        default=None,
        help="Evaluate one alert, print its matches as JSON and exit (no e-mail is sent)",
    )
    parser.add_argument(
        "--log-level",
        default=None,
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        help="Log level (overrides config and environment)",
    )
    return parser


def main(argv=None) -> int:
    """
    Main entry point.

    Returns:
        Exit code (0 for success, non-zero for failure)
    """
    start_time = time.time()
    args = build_parser().parse_args(argv)

    try:
        app_config, env_config = load_runtime_config(args.config, args.log_level)

        configure_logging(
            level=env_config.log_level,
            format_type=app_config.logging.format,
            environment=os.environ.get("ENVIRONMENT", "local"),
        )

        logger.info(
            "Smart job alerts starting",
            extra={
                "event": "service.starting",
                "config_path": str(args.config) if args.config else None,
                "log_level": env_config.log_level,
                "manual_run": args.manual_run,
                "alert_id": args.alert_id,
            },
        )

        init_database(env_config.database_url)

        processor = AlertProcessor(config=app_config.matching)

        if args.alert_id:
            result = processor.process_alert(args.alert_id)
            print(json.dumps(build_alert_report(result), indent=2, ensure_ascii=False))
            close_database()
            return 1 if result.error else 0

        pipeline = AlertDispatchPipeline(
            app_config=app_config,
            env_config=env_config,
            alert_processor=processor,
            notification_service=AlertNotificationService(),
        )

        if args.manual_run:
            logger.info("Executing manual dispatch", extra={"event": "service.manual_run.starting"})
            result = pipeline.run_once()
            logger.info(
                "Manual dispatch completed: "
                f"{result.total_alerts} alerts, {result.alerts_with_matches} with matches, "
                f"{result.emails_sent} e-mails sent",
                extra={
                    "event": "service.manual_run.completed",
                    "duration_seconds": result.total_duration_seconds,
                    "had_errors": result.had_errors,
                    **result.summary(),
                },
            )
            close_database()
            return 1 if result.had_errors else 0

        shutdown_event = threading.Event()
        scheduler_service = SchedulerService(
            pipeline_callable=pipeline.run_once,
            schedule=app_config.schedule,
            shutdown_event=shutdown_event,
        )

        def signal_handler(signum, frame):
            logger.info(
                f"Received signal {signum}, shutting down",
                extra={"event": "service.signal_received", "signal": signum},
            )
            scheduler_service.shutdown(wait=False)

        signal.signal(signal.SIGINT, signal_handler)
        signal.signal(signal.SIGTERM, signal_handler)

        scheduler_service.start()
        logger.info(
            "Scheduler started. Press Ctrl+C to stop",
            extra={"event": "service.daemon_mode.started"},
        )

        try:
            shutdown_event.wait()
        except KeyboardInterrupt:
            scheduler_service.shutdown(wait=False)
        finally:
            close_database()

        logger.info(
            "Smart job alerts stopped",
            extra={"event": "service.stopping", "uptime_seconds": round(time.time() - start_time, 2)},
        )
        return 0

    except ConfigurationError as e:
        print(f"Configuration Error: {e}", file=sys.stderr)
        return 1
    except KeyboardInterrupt:
        print("\nShutdown requested by user", file=sys.stderr)
        return 0
    except Exception as e:
        print(f"Fatal error: {e}", file=sys.stderr)
        logger.critical(
            "Fatal error during startup",
            extra={"event": "service.startup.failed", "error_type": type(e).__name__},
            exc_info=True,
        )
        return 1


if __name__ == "__main__":
    sys.exit(main())
