# -*- coding: utf-8 -*-
"""
CSDDD Self-Assessment Data Models

Pydantic v2 data models for the CSDDD (Corporate Sustainability Due
Diligence Directive) self-assessment pipeline. Every model is frozen:
the question catalog is read-only reference data, and a scoring pass
always produces a fresh result instead of mutating an earlier one.

Models:
    - Enumerations: AnswerValue, Grade, ViolationGrade, RiskLevel, ScoreBand
    - Catalog models: CriticalViolation, Question
    - Answer models: Answer, BooleanAnswer, ExtendedBooleanAnswer, AnswerStats
    - Result models: CategoryResult, CriticalViolationDetail,
        SelfAssessmentResult
    - Report models: ViolationRow, CategoryViolationPages, AssessmentReport
"""

from __future__ import annotations

from enum import Enum
from typing import Dict, List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator

UNKNOWN_CATEGORY = "UNKNOWN"


# =============================================================================
# Enumerations
# =============================================================================


class AnswerValue(str, Enum):
    """Canonical three-state answer."""

    YES = "yes"
    NO = "no"
    PARTIAL = "partial"


class Grade(str, Enum):
    """Compliance letter grade, A best and D worst."""

    A = "A"
    B = "B"
    C = "C"
    D = "D"

    @property
    def severity(self) -> int:
        return _GRADE_SEVERITY[self]

    @property
    def points(self) -> int:
        """Grade-based category score."""
        return _GRADE_POINTS[self]

    @property
    def risk_level(self) -> RiskLevel:
        return _GRADE_RISK[self]

    @classmethod
    def worst(cls, *grades: Grade) -> Grade:
        """Return the most severe of ``grades`` (``A`` when none given)."""
        result = cls.A
        for grade in grades:
            if grade.severity > result.severity:
                result = grade
        return result


class ViolationGrade(str, Enum):
    """Grade a critical violation forces when its question is answered ``no``.

    ``B/C`` appears in the questionnaire for items whose severity depends on
    the circumstances; it is scored as the stricter ``C``.
    """

    B = "B"
    C = "C"
    D = "D"
    B_OR_C = "B/C"

    @property
    def effective_grade(self) -> Grade:
        if self is ViolationGrade.B_OR_C:
            return Grade.C
        return Grade(self.value)


class RiskLevel(str, Enum):
    """Supplier risk level derived from the final grade."""

    VERY_LOW = "very_low"
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class ScoreBand(str, Enum):
    """Display band for the normalised score."""

    EXCELLENT = "excellent"
    GOOD = "good"
    FAIR = "fair"
    POOR = "poor"

    @classmethod
    def for_score(cls, score: int) -> ScoreBand:
        if score >= 90:
            return cls.EXCELLENT
        if score >= 80:
            return cls.GOOD
        if score >= 70:
            return cls.FAIR
        return cls.POOR


_GRADE_SEVERITY: Dict[Grade, int] = {Grade.A: 0, Grade.B: 1, Grade.C: 2, Grade.D: 3}
_GRADE_POINTS: Dict[Grade, int] = {Grade.A: 100, Grade.B: 80, Grade.C: 60, Grade.D: 40}
_GRADE_RISK: Dict[Grade, RiskLevel] = {
    Grade.A: RiskLevel.VERY_LOW,
    Grade.B: RiskLevel.LOW,
    Grade.C: RiskLevel.MEDIUM,
    Grade.D: RiskLevel.HIGH,
}


# =============================================================================
# Catalog Models
# =============================================================================


class CriticalViolation(BaseModel):
    """Grade ceiling applied when the owning question is answered ``no``.

    Attributes:
        grade: Grade forced by the violation.
        reason: Why a negative answer is critical (shown in reports).
    """

    model_config = ConfigDict(frozen=True)

    grade: ViolationGrade
    reason: str = ""


class Question(BaseModel):
    """One item of the self-assessment questionnaire.

    Attributes:
        id: Stable identifier ``<categoryNumber>.<index>``.
        category: Display name of the question's category.
        text: Prompt shown to the respondent.
        weight: Contribution to the total possible score.
        critical_violation: Present when a ``no`` answer is a critical
            violation.
    """

    model_config = ConfigDict(frozen=True)

    id: str = Field(..., min_length=1)
    category: str = Field(..., min_length=1)
    text: str = ""
    weight: float = Field(..., gt=0)
    critical_violation: Optional[CriticalViolation] = None

    @field_validator("id", "category")
    @classmethod
    def strip_text(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("must not be blank")
        return v

    @property
    def category_number(self) -> str:
        return self.id.split(".", 1)[0]

    @property
    def is_critical(self) -> bool:
        return self.critical_violation is not None


# =============================================================================
# Answer Models
# =============================================================================


class Answer(BaseModel):
    """A normalised answer enriched with catalog metadata.

    ``category`` and ``weight`` are resolved from the catalog when the
    answer is normalised; ids absent from the catalog land in the
    ``UNKNOWN`` category with weight 1.
    """

    model_config = ConfigDict(frozen=True)

    question_id: str
    answer: AnswerValue
    category: str = UNKNOWN_CATEGORY
    weight: float = Field(default=1.0, gt=0)
    critical: bool = False
    critical_grade: Optional[ViolationGrade] = None

    @property
    def is_critical_violation(self) -> bool:
        return self.critical and self.answer is AnswerValue.NO


class BooleanAnswer(BaseModel):
    """Legacy yes/no answer representation."""

    model_config = ConfigDict(frozen=True)

    question_id: str
    answer: bool


class ExtendedBooleanAnswer(BaseModel):
    """Legacy answer representation where ``partial`` sits beside booleans."""

    model_config = ConfigDict(frozen=True)

    question_id: str
    answer: Union[bool, Literal["partial"]]


class AnswerStats(BaseModel):
    """Answer distribution of one submission."""

    model_config = ConfigDict(frozen=True)

    total: int = 0
    yes_count: int = 0
    no_count: int = 0
    partial_count: int = 0
    yes_percentage: float = 0.0
    no_percentage: float = 0.0
    partial_percentage: float = 0.0


# =============================================================================
# Result Models
# =============================================================================


class CriticalViolationDetail(BaseModel):
    """A critical question that was answered ``no``."""

    model_config = ConfigDict(frozen=True)

    question_id: str
    category: str
    text: str = ""
    grade: ViolationGrade
    reason: str = ""


class CategoryResult(BaseModel):
    """Per-category compliance metrics.

    Attributes:
        category: Category display name.
        answered: Number of answers in the category.
        yes_count: ``yes`` answers.
        no_count: ``no`` answers.
        partial_count: ``partial`` answers.
        basic_compliance_rate: yes / answered x 100, half-up integer.
        grade: Worst critical-violation grade in the category.
        grade_score: Points for ``grade`` (A 100, B 80, C 60, D 40).
        critical_violations: Ids of violated critical questions.
    """

    model_config = ConfigDict(frozen=True)

    category: str
    answered: int = 0
    yes_count: int = 0
    no_count: int = 0
    partial_count: int = 0
    basic_compliance_rate: int = 0
    grade: Grade = Grade.A
    grade_score: int = 100
    critical_violations: List[str] = Field(default_factory=list)


class SelfAssessmentResult(BaseModel):
    """Outcome of one scoring pass.

    The result holds no timestamps so that scoring the same answers twice
    yields equal results and equal provenance hashes.
    """

    model_config = ConfigDict(frozen=True)

    final_grade: Grade
    score: int = Field(..., ge=0, le=100)
    actual_score: float = Field(..., ge=0)
    total_possible_score: float = Field(..., ge=0)
    critical_violation_count: int = Field(..., ge=0)
    no_answer_count: int = Field(..., ge=0)
    answers: List[Answer]
    categories: List[CategoryResult]
    completion_rate: int = Field(default=0, ge=0, le=100)
    risk_level: RiskLevel
    score_band: ScoreBand
    critical_violations: List[CriticalViolationDetail] = Field(default_factory=list)
    provenance_hash: str = ""

    def category(self, name: str) -> Optional[CategoryResult]:
        """Return the metrics for category ``name`` if it was reported."""
        for item in self.categories:
            if item.category == name:
                return item
        return None


# =============================================================================
# Report Models
# =============================================================================


class ViolationRow(BaseModel):
    """One row of a violation table."""

    model_config = ConfigDict(frozen=True)

    question_id: str
    text: str = ""
    critical: bool = False
    grade: Optional[ViolationGrade] = None
    reason: str = ""


class CategoryViolationPages(BaseModel):
    """Paginated ``no`` answers of one category."""

    model_config = ConfigDict(frozen=True)

    category_number: str
    category: str
    violation_count: int
    pages: List[List[ViolationRow]]


class AssessmentReport(BaseModel):
    """Presentation model of an assessment, ready for export."""

    model_config = ConfigDict(frozen=True)

    company_name: str = ""
    final_grade: Grade
    risk_level: RiskLevel
    score: int
    score_band: ScoreBand
    actual_score: float
    total_possible_score: float
    total_violations: int
    critical_violation_count: int
    completion_rate: int = 0
    category_summaries: List[CategoryResult] = Field(default_factory=list)
    category_pages: List[CategoryViolationPages] = Field(default_factory=list)
    critical_pages: List[List[CriticalViolationDetail]] = Field(default_factory=list)
    provenance_hash: str = ""


__all__ = [
    "UNKNOWN_CATEGORY",
    "AnswerValue",
    "Grade",
    "ViolationGrade",
    "RiskLevel",
    "ScoreBand",
    "CriticalViolation",
    "Question",
    "Answer",
    "BooleanAnswer",
    "ExtendedBooleanAnswer",
    "AnswerStats",
    "CriticalViolationDetail",
    "CategoryResult",
    "SelfAssessmentResult",
    "ViolationRow",
    "CategoryViolationPages",
    "AssessmentReport",
]
