# -*- coding: utf-8 -*-
"""
CSDDD self-assessment pipeline: answer normalisation, question catalog,
scoring and report aggregation.
"""

from supplychain_esg.assessment.catalog import (
    QuestionCatalog,
    default_catalog,
    load_catalog,
)
from supplychain_esg.assessment.models import (
    Answer,
    AnswerValue,
    AssessmentReport,
    CategoryResult,
    Grade,
    Question,
    SelfAssessmentResult,
    ViolationGrade,
)
from supplychain_esg.assessment.normalizer import normalize, normalize_all
from supplychain_esg.assessment.report import (
    ReportAggregator,
    aggregate_violations,
    chunk,
)
from supplychain_esg.assessment.scorer import AssessmentScorer, score

__all__ = [
    "QuestionCatalog",
    "default_catalog",
    "load_catalog",
    "Answer",
    "AnswerValue",
    "AssessmentReport",
    "CategoryResult",
    "Grade",
    "Question",
    "SelfAssessmentResult",
    "ViolationGrade",
    "normalize",
    "normalize_all",
    "ReportAggregator",
    "aggregate_violations",
    "chunk",
    "AssessmentScorer",
    "score",
]
