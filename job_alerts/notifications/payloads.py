"""Template context for alert digest e-mails."""

from datetime import datetime
from typing import Any, Dict, List, Optional, Sequence

from job_alerts.matching.models import MatchResult
from job_alerts.utils.timestamps import utc_now

DESCRIPTION_PREVIEW_LENGTH = 200


def truncate_description(text: Optional[str], limit: int = DESCRIPTION_PREVIEW_LENGTH) -> str:
    """First ``limit`` characters, with "..." appended when text was cut."""
    text = text or ""
    if len(text) <= limit:
        return text
    return text[:limit] + "..."


def job_url(frontend_url: str, job_id: str) -> str:
    return f"{frontend_url.rstrip('/')}/jobs/{job_id}"


def unsubscribe_url(frontend_url: str, alert_id: str) -> str:
    return f"{frontend_url.rstrip('/')}/job-alerts/{alert_id}/unsubscribe"


def build_match_payload(match: MatchResult, frontend_url: str) -> Dict[str, Any]:
    """Flatten one match into the fields the digest templates show."""
    job = match.job
    return {
        "job_id": job.id,
        "title": job.title,
        "company": job.company or "Unknown company",
        "location": job.location or "Not specified",
        "job_type": job.job_type or "Not specified",
        "salary": job.salary,
        "description": truncate_description(job.description),
        "score": match.score,
        "reasons": list(match.reasons),
        "url": job_url(frontend_url, job.id),
    }


def build_digest_context(
    alert_id: str,
    alert_name: str,
    user_name: Optional[str],
    matches: Sequence[MatchResult],
    frontend_url: str,
    generated_at: Optional[datetime] = None,
) -> Dict[str, Any]:
    """Build the context shared by the subject, HTML and text templates."""
    jobs: List[Dict[str, Any]] = [build_match_payload(m, frontend_url) for m in matches]
    generated_at = generated_at or utc_now()
    return {
        "alert_id": alert_id,
        "alert_name": alert_name,
        "user_name": user_name or "there",
        "job_count": len(jobs),
        "jobs": jobs,
        "browse_url": f"{frontend_url.rstrip('/')}/jobs",
        "unsubscribe_url": unsubscribe_url(frontend_url, alert_id),
        "year": generated_at.year,
    }
