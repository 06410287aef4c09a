"""Unit tests for token normalization."""

from job_alerts.matching.normalizer import (
    normalize,
    split_skill_words,
    split_words,
    unique_normalized,
)


class TestNormalize:
    def test_lowercases_and_strips(self):
        assert normalize("  React Native ") == "react native"

    def test_none_is_empty(self):
        assert normalize(None) == ""

    def test_non_string_is_stringified(self):
        assert normalize(42) == "42"


class TestSplitting:
    """Tests for word splitting helpers."""

    def test_split_words_min_length(self):
        assert split_words("a react developer", min_length=2) == ["react", "developer"]

    def test_split_words_collapses_whitespace(self):
        assert split_words("react   developer") == ["react", "developer"]

    def test_split_skill_words_on_separators(self):
        assert split_skill_words("react.js") == ["react", "js"]
        assert split_skill_words("spring-boot_2") == ["spring", "boot", "2"]
        assert split_skill_words("machine learning") == ["machine", "learning"]

    def test_split_skill_words_drops_empty_parts(self):
        assert split_skill_words(".net") == ["net"]


class TestUniqueNormalized:
    def test_first_occurrence_wins(self):
        assert unique_normalized(["React", "python", " react ", "Python", "go"]) == [
            "react",
            "python",
            "go",
        ]

    def test_blanks_and_none_dropped(self):
        assert unique_normalized(["", None, "  ", "sql"]) == ["sql"]
