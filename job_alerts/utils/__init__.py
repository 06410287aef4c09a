"""Shared helpers for time handling."""

from .timestamps import (
    age_in_days,
    ensure_utc,
    format_timestamp,
    parse_timestamp,
    utc_now,
)

__all__ = [
    "utc_now",
    "ensure_utc",
    "age_in_days",
    "format_timestamp",
    "parse_timestamp",
]
