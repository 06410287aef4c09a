"""Unit tests for keyword and skill merging.

Tests:
- Search history term extraction (plain and field-prefixed)
- History window
- Priority order and de-duplication across keyword sources
- Skill merging
"""

from job_alerts.matching.learning import LearnedSignals
from job_alerts.matching.signals import merge_keywords, merge_skills, search_history_keywords

from tests.helpers.factories import make_alert, make_user


def _history(*terms):
    return make_user(search_history=list(terms)).search_history


class TestSearchHistoryKeywords:
    """Tests for search_history_keywords()."""

    def test_plain_terms_normalized(self):
        assert search_history_keywords(_history("React", "  Node  ")) == ["react", "node"]

    def test_field_prefixed_term_yields_value_then_term(self):
        assert search_history_keywords(_history("Title:Developer")) == [
            "developer",
            "title:developer",
        ]

    def test_malformed_prefixed_terms_ignored(self):
        assert search_history_keywords(_history("a:b:c", "title:", "go")) == ["go"]

    def test_blank_terms_ignored(self):
        assert search_history_keywords(_history("   ", "sql")) == ["sql"]

    def test_only_most_recent_window_used(self):
        history = _history(*[f"term{i}" for i in range(25)])
        keywords = search_history_keywords(history, window=20)
        assert keywords[0] == "term5"
        assert keywords[-1] == "term24"
        assert len(keywords) == 20

    def test_zero_window_yields_nothing(self):
        assert search_history_keywords(_history("react"), window=0) == []

    def test_duplicates_collapsed(self):
        assert search_history_keywords(_history("react", "React", "skill:react")) == [
            "react",
            "skill:react",
        ]


class TestMergeKeywords:
    """Tests for merge_keywords()."""

    def test_priority_order_first_occurrence_wins(self):
        user = make_user(saved_keywords=["Frontend"], search_history=["react", "vue"])
        alert = make_alert(user.id, keywords=["react", "frontend"])
        learned = LearnedSignals(keywords=["engineer", "react"])

        assert merge_keywords(user, alert, learned) == ["frontend", "react", "engineer", "vue"]

    def test_alert_keywords_are_normalized(self):
        user = make_user()
        alert = make_alert(user.id, keywords=["  Machine Learning "])
        assert merge_keywords(user, alert, LearnedSignals()) == ["machine learning"]

    def test_history_window_forwarded(self):
        user = make_user(search_history=["old", "new"])
        alert = make_alert(user.id)
        assert merge_keywords(user, alert, LearnedSignals(), history_window=1) == ["new"]

    def test_all_sources_empty(self):
        user = make_user()
        assert merge_keywords(user, make_alert(user.id), LearnedSignals()) == []


class TestMergeSkills:
    def test_profile_first_then_learned(self):
        user = make_user(skills=["Python", "SQL"])
        learned = LearnedSignals(skills=["sql", "docker"])
        assert merge_skills(user, learned) == ["python", "sql", "docker"]
