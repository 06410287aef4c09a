"""Job alert matching engine."""

from .aggregator import aggregate_score, build_reasons, rank_matches, score_job
from .engine import AlertProcessor
from .exceptions import AlertNotFoundError, MatchingError, UserNotFoundError
from .learning import LearnedSignals, LearningExtractor, extract_signals
from .models import AlertProcessResult, ComponentScores, MatchResult
from .normalizer import normalize
from .scorers import job_type_score, keyword_score, location_score, recency_score, skill_score
from .signals import merge_keywords, merge_skills, search_history_keywords

__all__ = [
    "AlertProcessor",
    "AlertProcessResult",
    "MatchResult",
    "ComponentScores",
    "LearnedSignals",
    "LearningExtractor",
    "extract_signals",
    "merge_keywords",
    "merge_skills",
    "search_history_keywords",
    "normalize",
    "keyword_score",
    "skill_score",
    "location_score",
    "job_type_score",
    "recency_score",
    "aggregate_score",
    "build_reasons",
    "score_job",
    "rank_matches",
    "MatchingError",
    "AlertNotFoundError",
    "UserNotFoundError",
]
