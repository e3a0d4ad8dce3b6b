# -*- coding: utf-8 -*-
"""
Supply-Chain ESG Service Setup

Provides the ``SupplyChainESGService`` facade, which wires configuration,
reference data (question catalog, emission-factor table) and the engines
(scorer, calculator, report aggregator, cascading selectors) behind one
entry point.

Usage:
    >>> from supplychain_esg.setup import SupplyChainESGService
    >>> service = SupplyChainESGService()
    >>> result = service.submit_self_assessment({"1.1": "yes", "1.2": "No"})
    >>> report = service.build_report(result, company_name="Acme")
    >>> service.calculate_emission("1000", "2.5").total_emission
    Decimal('2500.000000')
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Mapping, Optional

from supplychain_esg.assessment.catalog import QuestionCatalog, default_catalog, load_catalog
from supplychain_esg.assessment.models import AssessmentReport, SelfAssessmentResult
from supplychain_esg.assessment.normalizer import normalize_all
from supplychain_esg.assessment.report import ReportAggregator
from supplychain_esg.assessment.scorer import AssessmentScorer
from supplychain_esg.config import SupplyChainESGConfig, get_config
from supplychain_esg.emissions.calculator import EmissionCalculationResult, EmissionCalculator
from supplychain_esg.emissions.categories import default_filter_profile
from supplychain_esg.emissions.factor_table import EmissionFactorTable, load_factor_table
from supplychain_esg.emissions.models import (
    EmissionFactorEntry,
    FilterProfile,
    ScopeType,
    SelectionPath,
)
from supplychain_esg.emissions.resolver import resolve
from supplychain_esg.emissions.selector import CascadingSelector

logger = logging.getLogger(__name__)


class SupplyChainESGService:
    """Unified facade over the supply-chain ESG core.

    Attributes:
        config: SupplyChainESGConfig instance.
        catalog: Question catalog used for normalisation, scoring and reports.
        factor_table: Emission-factor table used for resolution.

    Example:
        >>> service = SupplyChainESGService()
        >>> selector = service.selector_for(ScopeType.SCOPE1, 1)
        >>> selector.category_options()
        ['Fuel']
    """

    def __init__(
        self,
        config: Optional[SupplyChainESGConfig] = None,
        catalog: Optional[QuestionCatalog] = None,
        factor_table: Optional[EmissionFactorTable] = None,
    ) -> None:
        """Initialize the service facade.

        Args:
            config: Optional configuration. Uses global config if None.
            catalog: Question catalog; loaded from ``config`` if None.
            factor_table: Emission-factor table; loaded from ``config`` if None.
        """
        self.config = config or get_config()
        logging.getLogger("supplychain_esg").setLevel(self.config.log_level.upper())

        if catalog is None:
            catalog = (
                load_catalog(self.config.question_catalog_path)
                if self.config.question_catalog_path
                else default_catalog()
            )
        if factor_table is None:
            factor_table = load_factor_table(self.config.factor_table_path or None)

        self.catalog = catalog
        self.factor_table = factor_table
        self.scorer = AssessmentScorer(catalog)
        self.calculator = EmissionCalculator(self.config)
        self.report_aggregator = ReportAggregator(catalog, self.config)

        self._stats: Dict[str, int] = {
            "assessments_scored": 0,
            "reports_built": 0,
            "calculations": 0,
            "calculations_rejected": 0,
            "factor_lookups": 0,
            "factor_misses": 0,
        }
        logger.info(
            "SupplyChainESGService created: %d questions, %d emission factors",
            len(self.catalog), len(self.factor_table),
        )

    # ------------------------------------------------------------------
    # Self-assessment
    # ------------------------------------------------------------------

    def submit_self_assessment(self, raw_answers: Mapping[str, Any]) -> SelfAssessmentResult:
        """Normalise and score a raw ``question id -> answer`` mapping.

        Raises:
            ValidationError: If the mapping is malformed or ids repeat.
            AnswerBatchError: If any answer is invalid.
            EmptyResultError: If the mapping is empty.
        """
        answers = normalize_all(raw_answers, self.catalog, self.config)
        result = self.scorer.score(answers)
        self._stats["assessments_scored"] += 1
        return result

    def build_report(
        self, result: SelfAssessmentResult, company_name: str = "",
    ) -> AssessmentReport:
        report = self.report_aggregator.build_report(result, company_name)
        self._stats["reports_built"] += 1
        return report

    # ------------------------------------------------------------------
    # Emissions
    # ------------------------------------------------------------------

    def calculate_emission(
        self, activity_amount: Any, emission_factor: Any,
    ) -> EmissionCalculationResult:
        result = self.calculator.calculate(activity_amount, emission_factor)
        self._stats["calculations"] += 1
        if not result.is_valid:
            self._stats["calculations_rejected"] += 1
        return result

    def resolve_factor(
        self,
        category: str,
        separate: str,
        raw_material: str,
        profile: Optional[FilterProfile] = None,
    ) -> Optional[EmissionFactorEntry]:
        """Resolve a selection path; None when no row matches."""
        path = SelectionPath(category=category, separate=separate, raw_material=raw_material)
        entry = resolve(path, self.factor_table, profile)
        self._stats["factor_lookups"] += 1
        if entry is None:
            self._stats["factor_misses"] += 1
        return entry

    def selector(self, profile: Optional[FilterProfile] = None) -> CascadingSelector:
        """A cascading selector over the factor table."""
        return CascadingSelector(self.factor_table, profile, self.calculator)

    def selector_for(self, scope: ScopeType, category_number: int) -> CascadingSelector:
        """A selector using the category's default filter profile."""
        return self.selector(default_filter_profile(scope, category_number))

    # ------------------------------------------------------------------
    # Introspection
    # ------------------------------------------------------------------

    def get_statistics(self) -> Dict[str, int]:
        return dict(self._stats)

    def health_check(self) -> Dict[str, Any]:
        """Perform a health check on the service.

        Returns:
            Health status dict.
        """
        return {
            "status": "healthy",
            "service": "supplychain-esg",
            "questions": len(self.catalog),
            "categories": len(self.catalog.categories),
            "emission_factors": len(self.factor_table),
            "factor_table_hash": self.factor_table.source_hash,
            **self._stats,
        }


__all__ = ["SupplyChainESGService"]
