"""Unit tests for the field scorers.

Tests each scorer's:
- Absent-preference default (0.0 for keywords, neutral 0.5 elsewhere)
- Exact, partial and missing matches
- Bonuses, floors and caps
- Boundary values
"""

from datetime import timedelta

import pytest

from job_alerts.domain.models import JobType
from job_alerts.matching.scorers import (
    job_type_score,
    keyword_score,
    location_score,
    recency_score,
    skill_score,
)

from tests.helpers.factories import REFERENCE_NOW, make_job


class TestKeywordScore:
    """Tests for keyword_score()."""

    def test_no_keywords_scores_zero(self):
        job = make_job(title="React Developer", skills=["React"])
        assert keyword_score([], job) == 0.0

    def test_exact_title_match(self):
        job = make_job(title="Senior React Developer")
        assert keyword_score(["React Developer"], job) == 1.0

    def test_no_match(self):
        job = make_job(title="React Developer")
        assert keyword_score(["python"], job) == 0.0

    def test_partial_title_match_gets_coverage_bonus(self):
        job = make_job(title="React Developer")
        # one of two words in the title: 0.5 * 0.8, then the 10% bonus
        assert keyword_score(["react engineer"], job) == pytest.approx(0.44)

    def test_description_match(self):
        job = make_job(title="Platform Engineer", description="We run Kubernetes clusters")
        assert keyword_score(["kubernetes"], job) == pytest.approx(0.66)

    def test_skills_match(self):
        job = make_job(title="Platform Engineer", skills=["Docker"])
        assert keyword_score(["docker"], job) == pytest.approx(0.55)

    def test_company_match(self):
        job = make_job(title="Platform Engineer", company="Acme Corp")
        assert keyword_score(["acme"], job) == pytest.approx(0.33)

    def test_contribution_capped_per_keyword(self):
        job = make_job(
            title="React Developer", description="React all day", skills=["React"]
        )
        assert keyword_score(["react"], job) == 1.0

    def test_short_keywords_count_in_denominator(self):
        job = make_job(title="React Developer")
        # "a" never matches but still halves the mean; 1 of 2 is below the bonus threshold
        assert keyword_score(["a", "react"], job) == pytest.approx(0.5)

    def test_bonus_requires_seventy_percent_coverage(self):
        job = make_job(title="React Developer", description="")
        score = keyword_score(["react", "developer", "rust"], job)
        # 2 of 3 hit (66%): no bonus
        assert score == pytest.approx(2 / 3)

    def test_adding_exact_title_keyword_increases_score(self):
        job = make_job(title="Backend Python Engineer", description="APIs and queues")
        without = keyword_score(["golang", "rust"], job)
        with_title = keyword_score(["golang", "rust", "python engineer"], job)
        assert with_title > without

    def test_case_insensitive(self):
        job = make_job(title="REACT DEVELOPER")
        assert keyword_score(["React"], job) == 1.0

    def test_score_never_exceeds_one(self):
        job = make_job(
            title="Python Django Engineer",
            description="Python Django Postgres",
            skills=["Python", "Django", "Postgres"],
            company="Python Shop",
        )
        assert keyword_score(["python", "django", "postgres"], job) == 1.0


class TestSkillScore:
    """Tests for skill_score()."""

    def test_job_without_skills_is_neutral(self):
        assert skill_score(["python"], []) == 0.5
        assert skill_score([], []) == 0.5

    def test_user_without_skills(self):
        assert skill_score([], ["Python"]) == 0.2

    def test_exact_matches_with_bonus(self):
        score = skill_score(["python", "react"], ["Python", "React", "SQL"])
        assert score == pytest.approx(2 / 3 * 1.15)

    def test_partial_match_weighted(self):
        # "react" is contained in "react.js": 0.8, then the coverage bonus
        assert skill_score(["react"], ["react.js"]) == pytest.approx(0.92)

    def test_shared_word_is_partial(self):
        assert skill_score(["spring boot"], ["Spring"]) == pytest.approx(0.92)

    def test_floor_applies_to_any_match(self):
        job_skills = [f"skill{i}" for i in range(9)] + ["Python"]
        # 1/10 raised to the 0.3 floor, then the bonus (1 of 1 user skills)
        assert skill_score(["python"], job_skills) == pytest.approx(0.3 * 1.15)

    def test_no_overlap(self):
        assert skill_score(["go"], ["java"]) == 0.0

    def test_single_character_skill_never_partially_matches(self):
        assert skill_score(["c"], ["objective-c"]) == 0.0

    def test_each_user_skill_counted_once(self):
        score = skill_score(["react"], ["React", "react native", "react.js"])
        # exact once; extra job skills only grow the denominator
        assert score == pytest.approx(min(1.0, 1 / 3 * 1.15))

    def test_javascript_example(self):
        score = skill_score(["javascript", "react"], ["JavaScript", "Node.js"])
        assert score >= 0.3
        assert score == pytest.approx(0.5 * 1.15)

    def test_capped_at_one(self):
        assert skill_score(["python"], ["python"]) == 1.0


class TestLocationScore:
    """Tests for location_score()."""

    def test_no_preference_is_neutral(self):
        assert location_score([], "Remote") == 0.5

    def test_job_without_location(self):
        assert location_score(["Remote"], None) == 0.0

    def test_exact_match_case_insensitive(self):
        assert location_score(["remote"], "Remote") == 1.0

    def test_containment_either_way(self):
        assert location_score(["New York"], "New York, NY") == 0.7
        assert location_score(["Berlin, Germany"], "Berlin") == 0.7

    def test_first_matching_preference_decides(self):
        assert location_score(["York", "New York, NY"], "New York, NY") == 0.7

    def test_later_preference_used_when_earlier_misses(self):
        assert location_score(["Paris", "Remote"], "Remote") == 1.0

    def test_no_match(self):
        assert location_score(["Paris"], "Berlin") == 0.0


class TestJobTypeScore:
    def test_no_preference_is_neutral(self):
        assert job_type_score([], "Contract") == 0.5

    def test_match(self):
        assert job_type_score([JobType.FULL_TIME, JobType.INTERNSHIP], "Internship") == 1.0

    def test_mismatch(self):
        assert job_type_score([JobType.FULL_TIME], "Contract") == 0.0

    def test_job_without_type(self):
        assert job_type_score([JobType.FULL_TIME], None) == 0.0

    def test_unlisted_type_never_matches(self):
        assert job_type_score([JobType.FULL_TIME], "Remote") == 0.0
        assert job_type_score([], "Remote") == 0.5


class TestRecencyScore:
    """Tests for recency_score() step boundaries."""

    @pytest.mark.parametrize(
        "age_days,expected",
        [
            (0, 1.0),
            (7, 1.0),
            (8, 0.7),
            (30, 0.7),
            (31, 0.4),
            (90, 0.4),
            (91, 0.1),
            (365, 0.1),
        ],
    )
    def test_steps(self, age_days, expected):
        created_at = REFERENCE_NOW - timedelta(days=age_days)
        assert recency_score(created_at, now=REFERENCE_NOW) == expected

    def test_missing_timestamp_is_neutral(self):
        assert recency_score(None, now=REFERENCE_NOW) == 0.5

    def test_future_timestamp_counts_as_fresh(self):
        assert recency_score(REFERENCE_NOW + timedelta(days=3), now=REFERENCE_NOW) == 1.0
