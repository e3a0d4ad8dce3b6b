# -*- coding: utf-8 -*-
"""
Assessment Report Aggregator

Reshapes an already-computed SelfAssessmentResult into the paginated view
model used for exported reports. No scoring happens here.
"""

from __future__ import annotations

import logging
import time
from collections import OrderedDict
from typing import Dict, List, Optional, Sequence, TypeVar

from supplychain_esg import metrics
from supplychain_esg.assessment.catalog import QuestionCatalog, default_catalog
from supplychain_esg.assessment.models import (
    Answer,
    AnswerValue,
    AssessmentReport,
    CategoryViolationPages,
    SelfAssessmentResult,
    ViolationRow,
)
from supplychain_esg.config import SupplyChainESGConfig, get_config
from supplychain_esg.exceptions import ValidationError
from supplychain_esg.provenance import compute_provenance_hash

logger = logging.getLogger(__name__)

T = TypeVar("T")


def chunk(items: Sequence[T], page_size: int) -> List[List[T]]:
    """Split ``items`` into consecutive pages of ``page_size``.

    The last page may be shorter. Concatenating the pages gives back
    ``items``.

    Raises:
        ValidationError: If ``page_size`` is not an integer >= 1.
    """
    if isinstance(page_size, bool) or not isinstance(page_size, int) or page_size < 1:
        raise ValidationError(
            f"page size must be an integer >= 1, got {page_size!r}",
            invalid_fields={"page_size": repr(page_size)},
        )
    items = list(items)
    return [items[i:i + page_size] for i in range(0, len(items), page_size)]


def category_prefix(question_id: str) -> str:
    """Text before the first ``.`` of a question id."""
    return question_id.split(".", 1)[0]


def aggregate_violations(
    answers: Sequence[Answer],
    catalog: Optional[QuestionCatalog] = None,
) -> Dict[str, List[Answer]]:
    """Group ``no`` answers by question-id prefix, in first-seen order.

    Grouping uses the id prefix only, so ``catalog`` does not change the
    result; ReportAggregator uses it for the group labels.
    """
    groups: Dict[str, List[Answer]] = OrderedDict()
    for answer in answers:
        if answer.answer is AnswerValue.NO:
            groups.setdefault(category_prefix(answer.question_id), []).append(answer)
    return groups


class ReportAggregator:
    """Builds AssessmentReport view models.

    Page sizes come from configuration (10 rows per category violation
    table page and 8 critical violations per page by default).
    """

    def __init__(
        self,
        catalog: Optional[QuestionCatalog] = None,
        config: Optional[SupplyChainESGConfig] = None,
    ):
        self.catalog = catalog if catalog is not None else default_catalog()
        self.config = config or get_config()
        logger.info(
            "ReportAggregator initialized: violation_page=%d, critical_page=%d",
            self.config.report_violation_page_size,
            self.config.report_critical_page_size,
        )

    def category_label(self, category_number: str) -> str:
        return self.catalog.category_name(category_number) or f"Category {category_number}"

    def _row(self, answer: Answer) -> ViolationRow:
        question = self.catalog.get(answer.question_id)
        if question is None or question.critical_violation is None:
            return ViolationRow(
                question_id=answer.question_id,
                text=question.text if question is not None else "",
            )
        return ViolationRow(
            question_id=answer.question_id,
            text=question.text,
            critical=True,
            grade=question.critical_violation.grade,
            reason=question.critical_violation.reason,
        )

    def build_report(
        self,
        result: SelfAssessmentResult,
        company_name: str = "",
    ) -> AssessmentReport:
        """Build the report view model for ``result``.

        Args:
            result: Output of a scoring pass.
            company_name: Name printed on the report.

        Returns:
            AssessmentReport with roll-ups and paginated violation tables.
        """
        start = time.perf_counter()
        groups = aggregate_violations(result.answers, self.catalog)

        category_pages = [
            CategoryViolationPages(
                category_number=number,
                category=self.category_label(number),
                violation_count=len(items),
                pages=chunk(
                    [self._row(a) for a in items],
                    self.config.report_violation_page_size,
                ),
            )
            for number, items in groups.items()
        ]
        critical_pages = chunk(
            result.critical_violations, self.config.report_critical_page_size,
        )

        payload = {
            "company_name": company_name,
            "final_grade": result.final_grade,
            "risk_level": result.risk_level,
            "score": result.score,
            "score_band": result.score_band,
            "actual_score": result.actual_score,
            "total_possible_score": result.total_possible_score,
            "total_violations": result.no_answer_count,
            "critical_violation_count": result.critical_violation_count,
            "completion_rate": result.completion_rate,
            "category_summaries": result.categories,
            "category_pages": category_pages,
            "critical_pages": critical_pages,
        }
        report = AssessmentReport(
            **payload, provenance_hash=compute_provenance_hash(payload),
        )

        metrics.record_processing_duration("report", time.perf_counter() - start)
        logger.info(
            "Built report for %r: %d violations in %d categories, %d critical page(s)",
            company_name, report.total_violations, len(category_pages), len(critical_pages),
        )
        return report


__all__ = [
    "chunk",
    "category_prefix",
    "aggregate_violations",
    "ReportAggregator",
]
