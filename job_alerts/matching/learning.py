"""Learn extra keywords and skills from a user's successful applications."""

import logging
from contextlib import AbstractContextManager
from dataclasses import dataclass, field
from typing import Callable, List, Optional, Sequence

from sqlalchemy.orm import Session

from job_alerts.domain.models import SUCCESSFUL_STATUSES, HistoricalApplication
from job_alerts.logging import get_logger
from job_alerts.persistence.repositories import ApplicationRepository

from .normalizer import normalize, unique_normalized

logger = get_logger(__name__, component="matching")

# Title words must be longer than this to count as a keyword
MIN_TITLE_WORD_LENGTH = 3


@dataclass(frozen=True)
class LearnedSignals:
    """Keywords and skills learned from past applications, in first-seen order."""

    keywords: List[str] = field(default_factory=list)
    skills: List[str] = field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return not self.keywords and not self.skills


def extract_signals(applications: Sequence[HistoricalApplication]) -> LearnedSignals:
    """Derive signals from applications that were accepted or reviewed.

    Title words longer than three characters become keywords. The job's
    declared skills become skills. Applications whose job is gone are skipped.
    """
    keywords = []
    skills = []

    for application in applications:
        if application.status not in SUCCESSFUL_STATUSES or application.job is None:
            continue
        keywords.extend(
            word
            for word in normalize(application.job.title).split()
            if len(word) > MIN_TITLE_WORD_LENGTH
        )
        skills.extend(application.job.skills)

    return LearnedSignals(keywords=unique_normalized(keywords), skills=unique_normalized(skills))


class LearningExtractor:
    """Loads a user's successful applications and extracts LearnedSignals.

    Learning is an enhancement: when the lookup fails the extractor logs a
    warning and returns empty signals so matching can continue.
    """

    def __init__(
        self,
        session_factory: Callable[[], AbstractContextManager[Session]],
        logger_instance: Optional[logging.Logger] = None,
    ):
        self.session_factory = session_factory
        self.logger = logger_instance or logger

    def learn(self, user_id: str) -> LearnedSignals:
        try:
            with self.session_factory() as session:
                applications = ApplicationRepository(session).get_by_applicant(
                    user_id, statuses=SUCCESSFUL_STATUSES
                )
            signals = extract_signals(applications)
        except Exception as e:
            self.logger.warning(
                f"Could not learn from applications of user {user_id}: {e}",
                extra={
                    "event": "learning.failed",
                    "user_id": user_id,
                    "error_type": type(e).__name__,
                },
            )
            return LearnedSignals()

        self.logger.debug(
            "Learned signals from applications",
            extra={
                "event": "learning.completed",
                "user_id": user_id,
                "application_count": len(applications),
                "learned_keywords": len(signals.keywords),
                "learned_skills": len(signals.skills),
            },
        )
        return signals
