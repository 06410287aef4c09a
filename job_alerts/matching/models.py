"""Data models produced by the matching engine.

Results are created fresh on every run and never persisted by the engine.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from job_alerts.domain.models import JobRecord


@dataclass(frozen=True)
class ComponentScores:
    """Per-component scores, each in [0.0, 1.0]."""

    keyword: float
    skill: float
    location: float
    job_type: float
    recency: float

    def as_dict(self) -> Dict[str, float]:
        return {
            "keyword": self.keyword,
            "skill": self.skill,
            "location": self.location,
            "job_type": self.job_type,
            "recency": self.recency,
        }


@dataclass(frozen=True)
class MatchResult:
    """A scored job for one alert.

    Attributes:
        job: The matched job posting
        score: Aggregate match percentage in [0, 100]
        component_scores: The five component scores the aggregate was built from
        reasons: Human-readable reasons, never empty
    """

    job: JobRecord
    score: int
    component_scores: ComponentScores
    reasons: List[str]


@dataclass
class AlertProcessResult:
    """Outcome of evaluating one alert.

    On failure, matches is empty and error holds the message. Identity
    fields are filled in as far as processing got before failing.
    """

    alert_id: str
    matches: List[MatchResult] = field(default_factory=list)
    error: Optional[str] = None
    alert_name: Optional[str] = None
    user_id: Optional[str] = None
    user_email: Optional[str] = None
    user_name: Optional[str] = None
    user_skill_count: int = 0
    user_keyword_count: int = 0
    user_search_count: int = 0

    @property
    def succeeded(self) -> bool:
        return self.error is None

    @property
    def match_count(self) -> int:
        return len(self.matches)

    def to_summary(self) -> Dict[str, Any]:
        """Compact dict for logging."""
        return {
            "alert_id": self.alert_id,
            "alert_name": self.alert_name,
            "user_id": self.user_id,
            "match_count": self.match_count,
            "top_score": self.matches[0].score if self.matches else None,
            "error": self.error,
        }
