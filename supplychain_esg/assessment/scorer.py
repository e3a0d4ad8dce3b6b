# -*- coding: utf-8 -*-
"""
CSDDD Assessment Scorer

Computes per-category compliance metrics and the overall score and grade
of a self-assessment.

Scoring rules:
    - Basic compliance rate per category: yes / answered x 100 (half-up
      integer; 0 when the category has no answers).
    - Grade-based category score: the worst critical-violation grade among
      the category's ``no`` answers, mapped A 100, B 80, C 60, D 40.
      Non-critical ``no`` answers do not affect it.
    - Overall score: sum of weights of ``yes`` answers over sum of weights
      of all answered questions, x 100, half-up integer. ``partial``
      answers count toward the possible score but earn nothing.
    - Final grade: worst critical-violation grade over all answers, ``A``
      when there is none. It is a hard override independent of the score.

The scorer fails fast on an empty submission or a duplicated question id:
a partial score would be meaningless. The result contains no timestamps,
so scoring the same answers twice gives identical results.
"""

from __future__ import annotations

import logging
import time
from collections import Counter, OrderedDict
from decimal import ROUND_HALF_UP, Decimal
from typing import Dict, List, Optional, Sequence

from supplychain_esg import metrics
from supplychain_esg.assessment.catalog import QuestionCatalog, default_catalog
from supplychain_esg.assessment.models import (
    UNKNOWN_CATEGORY,
    Answer,
    AnswerValue,
    CategoryResult,
    CriticalViolationDetail,
    Grade,
    Question,
    ScoreBand,
    SelfAssessmentResult,
)
from supplychain_esg.exceptions import ValidationError
from supplychain_esg.provenance import compute_provenance_hash

logger = logging.getLogger(__name__)

_HUNDRED = Decimal("100")
_ONE = Decimal("1")


def percent(part: Decimal, whole: Decimal) -> int:
    """Return ``part / whole x 100`` rounded half-up, or 0 when ``whole`` is 0."""
    if whole == 0:
        return 0
    return int((part / whole * _HUNDRED).quantize(_ONE, rounding=ROUND_HALF_UP))


class AssessmentScorer:
    """Scores self-assessment answers against a question catalog.

    Example:
        >>> scorer = AssessmentScorer(default_catalog())
        >>> result = scorer.score(answers)
        >>> result.final_grade, result.score
    """

    def __init__(self, catalog: Optional[QuestionCatalog] = None):
        self.catalog = catalog if catalog is not None else default_catalog()
        logger.info("AssessmentScorer initialized with %r", self.catalog)

    def score(self, answers: Sequence[Answer]) -> SelfAssessmentResult:
        """Score one submission.

        Args:
            answers: Normalised answers in submission order.

        Returns:
            SelfAssessmentResult with per-category metrics and provenance hash.

        Raises:
            ValidationError: If ``answers`` is empty or a question id repeats.
        """
        start = time.perf_counter()
        self._validate(answers)

        by_category: Dict[str, List[Answer]] = OrderedDict(
            (category, []) for category in self.catalog.categories
        )
        resolved: List[tuple] = []
        for answer in answers:
            question = self.catalog.get(answer.question_id)
            category = question.category if question is not None else UNKNOWN_CATEGORY
            weight = Decimal(str(question.weight)) if question is not None else _ONE
            by_category.setdefault(category, []).append(answer)
            resolved.append((answer, question, weight))

        actual = Decimal("0")
        possible = Decimal("0")
        no_count = 0
        critical_details: List[CriticalViolationDetail] = []
        for answer, question, weight in resolved:
            possible += weight
            if answer.answer is AnswerValue.YES:
                actual += weight
            elif answer.answer is AnswerValue.NO:
                no_count += 1
                if question is not None and question.is_critical:
                    critical_details.append(self._violation_detail(question))

        categories = [
            self._score_category(category, items)
            for category, items in by_category.items()
        ]
        final_grade = Grade.worst(
            *(d.grade.effective_grade for d in critical_details)
        )
        score = percent(actual, possible)

        answered_in_catalog = sum(
            1 for _, question, _ in resolved if question is not None
        )
        completion_rate = percent(
            Decimal(answered_in_catalog), Decimal(len(self.catalog)),
        )

        payload = {
            "final_grade": final_grade,
            "score": score,
            "actual_score": float(actual),
            "total_possible_score": float(possible),
            "critical_violation_count": len(critical_details),
            "no_answer_count": no_count,
            "answers": list(answers),
            "categories": categories,
            "completion_rate": completion_rate,
            "risk_level": final_grade.risk_level,
            "score_band": ScoreBand.for_score(score),
            "critical_violations": critical_details,
        }
        result = SelfAssessmentResult(
            **payload, provenance_hash=compute_provenance_hash(payload),
        )

        for detail in critical_details:
            metrics.record_critical_violation(detail.grade.effective_grade.value)
        metrics.record_assessment(final_grade.value, score)
        metrics.record_processing_duration("score", time.perf_counter() - start)
        logger.info(
            "Scored %d answers: score=%d, final_grade=%s, critical=%d, no=%d",
            len(answers), score, final_grade.value, len(critical_details), no_count,
        )
        return result

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    @staticmethod
    def _validate(answers: Sequence[Answer]) -> None:
        if not answers:
            raise ValidationError("at least one answer is required to score an assessment")
        counts = Counter(answer.question_id for answer in answers)
        duplicates = {qid: f"appears {n} times" for qid, n in counts.items() if n > 1}
        if duplicates:
            raise ValidationError(
                "duplicate question id in submission",
                invalid_fields=duplicates,
            )

    def _score_category(self, category: str, answers: List[Answer]) -> CategoryResult:
        counts = Counter(answer.answer for answer in answers)
        worst = Grade.A
        violated: List[str] = []
        for answer in answers:
            if answer.answer is not AnswerValue.NO:
                continue
            question = self.catalog.get(answer.question_id)
            if question is None or not question.is_critical:
                continue
            violated.append(answer.question_id)
            worst = Grade.worst(worst, question.critical_violation.grade.effective_grade)

        return CategoryResult(
            category=category,
            answered=len(answers),
            yes_count=counts[AnswerValue.YES],
            no_count=counts[AnswerValue.NO],
            partial_count=counts[AnswerValue.PARTIAL],
            basic_compliance_rate=percent(
                Decimal(counts[AnswerValue.YES]), Decimal(len(answers)),
            ),
            grade=worst,
            grade_score=worst.points,
            critical_violations=violated,
        )

    @staticmethod
    def _violation_detail(question: Question) -> CriticalViolationDetail:
        return CriticalViolationDetail(
            question_id=question.id,
            category=question.category,
            text=question.text,
            grade=question.critical_violation.grade,
            reason=question.critical_violation.reason,
        )


def score(
    answers: Sequence[Answer],
    catalog: Optional[QuestionCatalog] = None,
) -> SelfAssessmentResult:
    """Score ``answers`` against ``catalog`` (packaged questionnaire if None)."""
    return AssessmentScorer(catalog).score(answers)


__all__ = ["AssessmentScorer", "percent", "score"]
