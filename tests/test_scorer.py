# -*- coding: utf-8 -*-
"""
Tests for the CSDDD assessment scorer.

Covers the two-category end-to-end scenario, critical-violation
dominance, the no-critical-violation grade A rule, weighting of partial
answers, fail-fast validation and scoring idempotence.
"""

from decimal import Decimal

import pytest

from supplychain_esg.assessment.catalog import default_catalog
from supplychain_esg.assessment.models import (
    UNKNOWN_CATEGORY,
    Answer,
    AnswerValue,
    Grade,
    RiskLevel,
    ScoreBand,
    ViolationGrade,
)
from supplychain_esg.assessment.normalizer import normalize_all
from supplychain_esg.assessment.scorer import AssessmentScorer, percent, score
from supplychain_esg.exceptions import ErrorKind, ValidationError


class TestPercent:
    """Tests for the half-up percentage helper."""

    @pytest.mark.parametrize("part,whole,expected", [
        ("1", "2", 50),
        ("2", "3", 67),
        ("1", "3", 33),
        ("1", "8", 13),  # 12.5 rounds half-up
        ("0", "4", 0),
        ("4", "4", 100),
        ("3", "0", 0),
    ])
    def test_percent(self, part, whole, expected):
        assert percent(Decimal(part), Decimal(whole)) == expected


class TestEndToEnd:
    """Two categories, ``2.1`` critical grade C, answers 1.1/1.2/2.2 yes."""

    @pytest.fixture
    def result(self, small_catalog, e2e_raw_answers):
        answers = normalize_all(e2e_raw_answers, small_catalog)
        return score(answers, small_catalog)

    def test_category_one(self, result):
        category = result.category("Human Rights")

        assert category.basic_compliance_rate == 100
        assert category.grade is Grade.A
        assert category.grade_score == 100
        assert category.critical_violations == []

    def test_category_two(self, result):
        category = result.category("Safety")

        assert category.basic_compliance_rate == 50
        assert category.grade is Grade.C
        assert category.grade_score == 60
        assert category.critical_violations == ["2.1"]
        assert (category.yes_count, category.no_count, category.partial_count) == (1, 1, 0)

    def test_overall(self, result):
        assert result.critical_violation_count == 1
        assert result.no_answer_count == 1
        assert result.final_grade is Grade.C
        assert result.actual_score == 3.0
        assert result.total_possible_score == 4.0
        assert result.score == 75
        assert result.score_band is ScoreBand.FAIR
        assert result.risk_level is RiskLevel.MEDIUM
        assert result.completion_rate == 100

    def test_critical_violation_details(self, result):
        (detail,) = result.critical_violations

        assert detail.question_id == "2.1"
        assert detail.category == "Safety"
        assert detail.grade is ViolationGrade.C
        assert detail.reason == "critical 2.1"

    def test_categories_follow_catalog_order(self, result):
        assert [c.category for c in result.categories] == ["Human Rights", "Safety"]


class TestGradeRules:
    """Critical violations override the score; none means grade A."""

    def test_critical_d_dominates_category_and_final_grade(self, weighted_catalog):
        answers = normalize_all(
            {"1.1": "no", "1.2": "yes", "1.3": "yes", "1.4": "yes"}, weighted_catalog,
        )

        result = score(answers, weighted_catalog)

        labor = result.category("Labor")
        assert labor.grade is Grade.D
        assert labor.grade_score == 40
        assert labor.basic_compliance_rate == 75
        assert result.final_grade is Grade.D
        assert result.risk_level is RiskLevel.HIGH

    def test_no_critical_violation_means_grade_a(self, weighted_catalog):
        answers = normalize_all(
            {"1.1": "yes", "1.2": "no", "1.3": "no", "1.4": "no", "2.3": "no"},
            weighted_catalog,
        )

        result = score(answers, weighted_catalog)

        assert result.score < 100
        assert result.no_answer_count == 4
        assert result.critical_violation_count == 0
        assert result.final_grade is Grade.A
        assert all(c.grade_score == 100 for c in result.categories)

    def test_worst_grade_wins_within_category(self, weighted_catalog):
        answers = normalize_all({"2.1": "no", "2.2": "no", "2.3": "yes"}, weighted_catalog)

        result = score(answers, weighted_catalog)

        environment = result.category("Environment")
        assert environment.grade is Grade.C
        assert environment.critical_violations == ["2.1", "2.2"]
        assert result.final_grade is Grade.C

    def test_b_or_c_is_scored_as_c(self, weighted_catalog):
        answers = normalize_all({"2.2": "no"}, weighted_catalog)

        result = score(answers, weighted_catalog)

        assert result.critical_violations[0].grade is ViolationGrade.B_OR_C
        assert result.final_grade is Grade.C

    def test_grade_b(self, weighted_catalog):
        answers = normalize_all({"2.1": "no", "1.2": "yes"}, weighted_catalog)

        result = score(answers, weighted_catalog)

        assert result.final_grade is Grade.B
        assert result.category("Environment").grade_score == 80

    def test_critical_question_answered_partial_is_not_a_violation(self, weighted_catalog):
        answers = normalize_all({"1.1": "partial"}, weighted_catalog)

        result = score(answers, weighted_catalog)

        assert result.critical_violation_count == 0
        assert result.final_grade is Grade.A


class TestWeighting:
    """Overall score is weight-based over the submitted answers."""

    def test_weights_applied(self, weighted_catalog):
        answers = normalize_all({"1.1": "yes", "1.2": "no", "1.3": "no"}, weighted_catalog)

        result = score(answers, weighted_catalog)

        assert result.actual_score == 2.0
        assert result.total_possible_score == 4.0
        assert result.score == 50

    def test_partial_counts_toward_possible_only(self, weighted_catalog):
        answers = normalize_all({"1.1": "partial", "1.2": "yes"}, weighted_catalog)

        result = score(answers, weighted_catalog)

        assert result.actual_score == 1.0
        assert result.total_possible_score == 3.0
        assert result.score == 33
        assert result.category("Labor").partial_count == 1

    def test_unknown_answers_use_weight_one(self, small_catalog):
        answers = [
            Answer(question_id="1.1", answer=AnswerValue.YES, category="Human Rights"),
            Answer(question_id="9.1", answer=AnswerValue.NO),
        ]

        result = score(answers, small_catalog)

        assert result.total_possible_score == 2.0
        assert result.score == 50
        assert result.categories[-1].category == UNKNOWN_CATEGORY
        assert result.categories[-1].no_count == 1
        assert result.final_grade is Grade.A

    def test_completion_rate_counts_catalog_questions_only(self, small_catalog):
        answers = [
            Answer(question_id="1.1", answer=AnswerValue.YES),
            Answer(question_id="9.1", answer=AnswerValue.YES),
        ]

        result = score(answers, small_catalog)

        assert result.completion_rate == 25

    def test_unanswered_category_reports_zero_rate(self, small_catalog):
        answers = normalize_all({"1.1": "yes"}, small_catalog)

        result = score(answers, small_catalog)

        safety = result.category("Safety")
        assert safety.answered == 0
        assert safety.basic_compliance_rate == 0
        assert safety.grade is Grade.A


class TestValidation:
    """Structural problems fail fast."""

    def test_empty_answers(self, small_catalog):
        with pytest.raises(ValidationError) as exc_info:
            score([], small_catalog)

        assert exc_info.value.kind is ErrorKind.VALIDATION

    def test_duplicate_question_id(self, small_catalog):
        answers = [
            Answer(question_id="1.1", answer=AnswerValue.YES),
            Answer(question_id="1.1", answer=AnswerValue.NO),
        ]

        with pytest.raises(ValidationError) as exc_info:
            score(answers, small_catalog)

        assert exc_info.value.context["invalid_fields"] == {"1.1": "appears 2 times"}


class TestDeterminism:
    """Scoring is idempotent."""

    def test_same_answers_same_result(self, small_catalog, e2e_raw_answers):
        answers = normalize_all(e2e_raw_answers, small_catalog)
        scorer = AssessmentScorer(small_catalog)

        first = scorer.score(answers)
        second = scorer.score(answers)

        assert first == second
        assert first.model_dump() == second.model_dump()
        assert len(first.provenance_hash) == 64
        assert first.provenance_hash == second.provenance_hash

    def test_different_answers_different_hash(self, small_catalog):
        first = score(normalize_all({"1.1": "yes"}, small_catalog), small_catalog)
        second = score(normalize_all({"1.1": "no"}, small_catalog), small_catalog)

        assert first.provenance_hash != second.provenance_hash

    def test_packaged_catalog_all_yes(self):
        catalog = default_catalog()
        answers = normalize_all({q.id: "yes" for q in catalog}, catalog)

        result = score(answers)

        assert result.score == 100
        assert result.final_grade is Grade.A
        assert result.score_band is ScoreBand.EXCELLENT
        assert result.completion_rate == 100
        assert len(result.categories) == 5
