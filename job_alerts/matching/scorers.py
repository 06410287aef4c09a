"""Field scorers.

Each scorer maps one user preference (or job attribute) to a score in
[0.0, 1.0]. Scorers are pure functions: they never read the clock or the
database except through their arguments.

A scorer whose preference is absent returns a neutral 0.5, with one
exception: the keyword scorer returns 0.0 when no keywords are supplied.
"""

from datetime import datetime
from typing import Iterable, List, Optional, Sequence

from job_alerts.domain.models import JobRecord, JobType
from job_alerts.utils.timestamps import age_in_days

from .normalizer import normalize, split_skill_words, split_words

NEUTRAL_SCORE = 0.5

# Keyword field weights: (exact substring, full partial overlap)
TITLE_EXACT, TITLE_PARTIAL = 1.0, 0.8
DESCRIPTION_EXACT, DESCRIPTION_PARTIAL = 0.6, 0.4
SKILLS_HIT = 0.5
COMPANY_HIT = 0.3
KEYWORD_COVERAGE_THRESHOLD = 0.7
KEYWORD_COVERAGE_BONUS = 1.1

MIN_TOKEN_LENGTH = 2

PARTIAL_SKILL_WEIGHT = 0.8
SKILL_MATCH_FLOOR = 0.3
EMPTY_USER_SKILLS_SCORE = 0.2
SKILL_COVERAGE_THRESHOLD = 0.5
SKILL_COVERAGE_BONUS = 1.15

LOCATION_EXACT = 1.0
LOCATION_PARTIAL = 0.7

# (max age in days, score), checked in order
RECENCY_STEPS = ((7, 1.0), (30, 0.7), (90, 0.4))
RECENCY_FLOOR = 0.1


def _field_hit(keyword: str, words: List[str], text: str, exact: float, partial: float) -> float:
    if keyword in text:
        return exact
    if not words:
        return 0.0
    found = sum(1 for word in words if word in text)
    return (found / len(words)) * partial


def keyword_score(keywords: Sequence[str], job: JobRecord) -> float:
    """Score how well the job text covers the keywords.

    Every keyword is checked against the title, description, joined skills
    and company. Its contribution is the sum of the field hits, capped at 1.0.
    The result is the mean contribution over all supplied keywords, including
    ones shorter than two characters (which never match). When at least 70%
    of the keywords hit something, the mean gets a 10% bonus.

    Returns:
        0.0 when keywords is empty, otherwise a score in [0.0, 1.0]
    """
    if not keywords:
        return 0.0

    title = normalize(job.title)
    description = normalize(job.description)
    skills_text = normalize(" ".join(job.skills))
    company = normalize(job.company)

    total = 0.0
    matched = 0

    for raw_keyword in keywords:
        keyword = normalize(raw_keyword)
        if len(keyword) < MIN_TOKEN_LENGTH:
            continue

        words = split_words(keyword, min_length=MIN_TOKEN_LENGTH)
        contribution = (
            _field_hit(keyword, words, title, TITLE_EXACT, TITLE_PARTIAL)
            + _field_hit(keyword, words, description, DESCRIPTION_EXACT, DESCRIPTION_PARTIAL)
            + (SKILLS_HIT if keyword in skills_text else 0.0)
            + (COMPANY_HIT if keyword in company else 0.0)
        )

        if contribution > 0:
            matched += 1
            total += min(1.0, contribution)

    base = total / len(keywords)
    if matched / len(keywords) >= KEYWORD_COVERAGE_THRESHOLD:
        base *= KEYWORD_COVERAGE_BONUS
    return min(1.0, base)


def _is_partial_skill_match(user_skill: str, job_skill: str) -> bool:
    if len(user_skill) >= MIN_TOKEN_LENGTH and len(job_skill) >= MIN_TOKEN_LENGTH:
        if user_skill in job_skill or job_skill in user_skill:
            return True

    job_words = set(split_skill_words(job_skill))
    return any(
        len(word) >= MIN_TOKEN_LENGTH and word in job_words
        for word in split_skill_words(user_skill)
    )


def skill_score(user_skills: Sequence[str], job_skills: Sequence[str]) -> float:
    """Score the overlap between the user's skills and the job's skills.

    Each user skill counts once, either as an exact match (normalized
    equality) or as a partial match worth 0.8 (containment either way, or a
    shared word such as "react" in "react.js"). The weighted count is divided
    by the larger of the two list sizes. Any match lifts the score to at
    least 0.3, and covering half or more of the user's skills adds 15%.

    Returns:
        0.5 when the job lists no skills, 0.2 when the user lists none
    """
    if not job_skills:
        return NEUTRAL_SCORE
    if not user_skills:
        return EMPTY_USER_SKILLS_SCORE

    users = [normalize(skill) for skill in user_skills]
    jobs = [normalize(skill) for skill in job_skills]
    job_set = set(jobs)

    exact = 0
    partial = 0
    for user_skill in users:
        if user_skill in job_set:
            exact += 1
        elif any(_is_partial_skill_match(user_skill, job_skill) for job_skill in jobs):
            partial += 1

    weighted = exact + PARTIAL_SKILL_WEIGHT * partial
    score = min(1.0, weighted / max(len(users), len(jobs)))

    if exact or partial:
        score = max(SKILL_MATCH_FLOOR, score)

    if weighted / len(users) >= SKILL_COVERAGE_THRESHOLD:
        score = min(1.0, score * SKILL_COVERAGE_BONUS)

    return score


def location_score(preferred_locations: Sequence[str], job_location: Optional[str]) -> float:
    """1.0 on an exact match, 0.7 on containment either way, else 0.0.

    Preferences are checked in order and the first one that matches at all
    decides the score.
    """
    if not preferred_locations:
        return NEUTRAL_SCORE

    location = normalize(job_location)
    if not location:
        return 0.0

    for preferred in preferred_locations:
        wanted = normalize(preferred)
        if location == wanted:
            return LOCATION_EXACT
        if wanted in location or location in wanted:
            return LOCATION_PARTIAL

    return 0.0


def job_type_score(preferred_types: Iterable[JobType], job_type: Optional[str]) -> float:
    # Job types outside JobType never match
    preferred = {JobType(preferred_type).value for preferred_type in preferred_types}
    if not preferred:
        return NEUTRAL_SCORE
    return 1.0 if job_type in preferred else 0.0


def recency_score(created_at: Optional[datetime], now: Optional[datetime] = None) -> float:
    """Step-decay freshness: 1.0 up to a week, 0.7 to a month, 0.4 to 90 days, then 0.1."""
    if created_at is None:
        return NEUTRAL_SCORE

    age = age_in_days(created_at, now=now)
    for max_days, score in RECENCY_STEPS:
        if age <= max_days:
            return score
    return RECENCY_FLOOR
