"""Combine component scores into a match percentage, explain it, and rank."""

import math
from datetime import datetime
from typing import Iterable, List, Optional, Sequence

from job_alerts.config.models import ScoringWeights
from job_alerts.domain.models import JobAlert, JobRecord

from .models import ComponentScores, MatchResult
from .scorers import job_type_score, keyword_score, location_score, recency_score, skill_score

REASON_KEYWORDS = "Matches your keyword preferences"
REASON_SKILLS = "Aligns with your skills"
REASON_LOCATION = "Matches your location preference"
REASON_JOB_TYPE = "Matches your preferred job type"
REASON_RECENT = "Recently posted"
REASON_FALLBACK = "General match based on your profile"

REASON_THRESHOLD = 0.5
RECENT_THRESHOLD = 0.7


def aggregate_score(scores: ComponentScores, weights: ScoringWeights) -> int:
    """Weighted sum of the components as a percentage, rounded half up."""
    total = (
        scores.keyword * weights.keyword
        + scores.skill * weights.skill
        + scores.location * weights.location
        + scores.job_type * weights.job_type
        + scores.recency * weights.recency
    )
    return int(math.floor(total * 100 + 0.5))


def build_reasons(scores: ComponentScores) -> List[str]:
    """Explain a match. Always returns at least one reason."""
    reasons = []
    if scores.keyword > REASON_THRESHOLD:
        reasons.append(REASON_KEYWORDS)
    if scores.skill > REASON_THRESHOLD:
        reasons.append(REASON_SKILLS)
    if scores.location > REASON_THRESHOLD:
        reasons.append(REASON_LOCATION)
    if scores.job_type == 1.0:
        reasons.append(REASON_JOB_TYPE)
    if scores.recency > RECENT_THRESHOLD:
        reasons.append(REASON_RECENT)
    return reasons or [REASON_FALLBACK]


def score_job(
    job: JobRecord,
    alert: JobAlert,
    keywords: Sequence[str],
    skills: Sequence[str],
    weights: ScoringWeights,
    now: Optional[datetime] = None,
) -> MatchResult:
    scores = ComponentScores(
        keyword=keyword_score(keywords, job),
        skill=skill_score(skills, job.skills),
        location=location_score(alert.locations, job.location),
        job_type=job_type_score(alert.job_types, job.job_type),
        recency=recency_score(job.created_at, now=now),
    )
    return MatchResult(
        job=job,
        score=aggregate_score(scores, weights),
        component_scores=scores,
        reasons=build_reasons(scores),
    )


def rank_matches(
    matches: Iterable[MatchResult], min_score: int = 10, max_results: int = 10
) -> List[MatchResult]:
    """Drop matches below min_score, sort by score descending, keep the top max_results.

    The sort is stable, so equal scores keep their input order.
    """
    kept = [match for match in matches if match.score >= min_score]
    kept.sort(key=lambda match: match.score, reverse=True)
    return kept[:max_results]
