"""Build the effective keyword and skill lists for one alert run.

Keyword sources are merged in priority order, first occurrence wins:

1. keywords saved on the user's profile
2. keywords typed into the alert
3. keywords learned from successful applications
4. terms from the most recent searches

Order matters: it is the order keywords are scored in, and the order they
are reported in.
"""

from typing import Iterable, List, Sequence

from job_alerts.domain.models import JobAlert, SearchHistoryEntry, UserProfile

from .learning import LearnedSignals
from .normalizer import normalize, unique_normalized

FIELD_SEPARATOR = ":"


def search_history_keywords(history: Sequence[SearchHistoryEntry], window: int = 20) -> List[str]:
    """Extract keywords from the last ``window`` searches.

    A field-prefixed search such as ``title:developer`` yields ``developer``
    followed by ``title:developer``. Terms with more than one colon or an
    empty value yield nothing.

    Example:
        >>> search_history_keywords([SearchHistoryEntry(term="Title:Dev"), SearchHistoryEntry(term="react")])
        ['dev', 'title:dev', 'react']
    """
    recent = history[-window:] if window > 0 else []
    keywords = []

    for entry in recent:
        term = normalize(entry.term)
        if not term:
            continue

        if FIELD_SEPARATOR in term:
            parts = term.split(FIELD_SEPARATOR)
            if len(parts) == 2 and parts[1]:
                keywords.append(parts[1].strip())
                keywords.append(term)
        else:
            keywords.append(term)

    return unique_normalized(keywords)


def merge_keywords(
    user: UserProfile,
    alert: JobAlert,
    learned: LearnedSignals,
    history_window: int = 20,
) -> List[str]:
    """Merge every keyword source into one normalized, de-duplicated list."""
    return unique_normalized(
        _chain(
            user.saved_keywords,
            alert.keywords,
            learned.keywords,
            search_history_keywords(user.search_history, window=history_window),
        )
    )


def merge_skills(user: UserProfile, learned: LearnedSignals) -> List[str]:
    """Profile skills followed by learned skills, normalized and de-duplicated."""
    return unique_normalized(_chain(user.skills, learned.skills))


def _chain(*sources: Iterable[str]) -> Iterable[str]:
    for source in sources:
        yield from source
