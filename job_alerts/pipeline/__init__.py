"""Dispatch pipeline for scheduled alert digests."""

from .models import AlertRunStats, DispatchRunResult
from .runner import AlertDispatchPipeline

__all__ = ["AlertDispatchPipeline", "AlertRunStats", "DispatchRunResult"]
