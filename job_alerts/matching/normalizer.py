"""Token normalization shared by every scorer."""

import re
from typing import Any, Iterable, List

# Separators used when comparing skills word by word ("react.js" vs "react js")
_SKILL_SEPARATORS = re.compile(r"[\s\-_.]+")
_WHITESPACE = re.compile(r"\s+")


def normalize(token: Any) -> str:
    """Lower-case and trim a token. None becomes an empty string.

    Example:
        >>> normalize("  React ")
        'react'
        >>> normalize(None)
        ''
    """
    if token is None:
        return ""
    return str(token).strip().lower()


def split_words(text: str, min_length: int = 1) -> List[str]:
    """Split on whitespace, keeping words of at least min_length characters."""
    return [word for word in _WHITESPACE.split(text) if len(word) >= min_length]


def split_skill_words(skill: str) -> List[str]:
    """Split a skill name on whitespace, hyphen, underscore and dot."""
    return [word for word in _SKILL_SEPARATORS.split(skill) if word]


def unique_normalized(values: Iterable[Any]) -> List[str]:
    """Normalize values and drop blanks and repeats, keeping first-seen order."""
    seen = {}
    for value in values:
        token = normalize(value)
        if token and token not in seen:
            seen[token] = None
    return list(seen)
