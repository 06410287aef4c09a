"""Soft checks on raw configuration that produce warnings, not errors."""

import warnings
from typing import Any, Dict, List

SHORT_TEST_INTERVAL_MINUTES = 5
LARGE_MAX_RESULTS = 25
LARGE_DAILY_DIGEST = 20


def check_for_warnings(config_dict: Dict[str, Any]) -> List[str]:
    """
    Check configuration for potential issues and return warning messages.

    Args:
        config_dict: Raw configuration dictionary

    Returns:
        List of warning messages
    """
    warning_messages = []

    schedule = config_dict.get("schedule") or {}
    matching = config_dict.get("matching") or {}
    email = config_dict.get("email") or {}

    if isinstance(schedule, dict):
        interval = schedule.get("test_interval_minutes")
        if isinstance(interval, int) and 0 < interval < SHORT_TEST_INTERVAL_MINUTES:
            warning_messages.append(
                f"Short test_interval_minutes ({interval}) will e-mail users every few minutes; "
                "use only against a test database"
            )

    if isinstance(matching, dict):
        max_results = matching.get("max_results")
        if isinstance(max_results, int) and max_results > LARGE_MAX_RESULTS:
            warning_messages.append(
                f"Large matching.max_results ({max_results}) produces long digests"
            )

        min_score = matching.get("min_score")
        if isinstance(min_score, int) and min_score == 0:
            warning_messages.append(
                "matching.min_score is 0; every active job will be a candidate match"
            )

    if isinstance(schedule, dict) and isinstance(email, dict):
        frequency = str(schedule.get("frequency", "weekly")).lower()
        digest_size = email.get("max_matches_per_email")
        if frequency == "daily" and isinstance(digest_size, int) and digest_size > LARGE_DAILY_DIGEST:
            warning_messages.append(
                f"Daily schedule with {digest_size} matches per e-mail may overwhelm recipients"
            )

    return warning_messages


def emit_warnings(warning_messages: List[str]) -> None:
    """Emit each message through the warnings module as a UserWarning."""
    for message in warning_messages:
        warnings.warn(message, UserWarning, stacklevel=2)
