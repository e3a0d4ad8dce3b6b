# -*- coding: utf-8 -*-
"""Tests for the SupplyChainESGService facade."""

from decimal import Decimal

import pytest

from supplychain_esg import SupplyChainESGService, __version__
from supplychain_esg.assessment.models import Grade
from supplychain_esg.config import SupplyChainESGConfig
from supplychain_esg.emissions.models import ScopeType, SelectorState
from supplychain_esg.exceptions import AnswerBatchError, DataLoadError, EmptyResultError


@pytest.fixture
def service(small_catalog, factor_table):
    return SupplyChainESGService(
        config=SupplyChainESGConfig(),
        catalog=small_catalog,
        factor_table=factor_table,
    )


class TestSelfAssessment:
    """Submission and reporting through the facade."""

    def test_submit_and_report(self, service, e2e_raw_answers):
        result = service.submit_self_assessment(e2e_raw_answers)
        report = service.build_report(result, company_name="Acme")

        assert result.final_grade is Grade.C
        assert result.critical_violation_count == 1
        assert report.company_name == "Acme"
        assert report.total_violations == 1
        assert service.get_statistics()["assessments_scored"] == 1
        assert service.get_statistics()["reports_built"] == 1

    def test_invalid_submission(self, service):
        with pytest.raises(AnswerBatchError):
            service.submit_self_assessment({"1.1": "maybe"})
        with pytest.raises(EmptyResultError):
            service.submit_self_assessment({})

        assert service.get_statistics()["assessments_scored"] == 0


class TestEmissions:
    """Calculation, resolution and selectors through the facade."""

    def test_calculate_emission(self, service):
        assert service.calculate_emission(1000, 2.5).total_emission == Decimal("2500.000000")
        assert not service.calculate_emission("1.2345", "1").is_valid

        stats = service.get_statistics()
        assert stats["calculations"] == 2
        assert stats["calculations_rejected"] == 1

    def test_resolve_factor(self, service):
        assert service.resolve_factor("Fuel", "Energy", "Diesel").unit == "L"
        assert service.resolve_factor("Fuel", "Energy", "diesel") is None

        stats = service.get_statistics()
        assert stats["factor_lookups"] == 2
        assert stats["factor_misses"] == 1

    def test_selector_for_category(self, service):
        selector = service.selector_for(ScopeType.SCOPE1, 2)

        assert selector.category_options() == ["Fuel"]
        state = selector.select_raw_material(
            selector.select_separate(selector.select_category(SelectorState(), "Fuel"), "Gas fuel"),
            "LNG",
        )
        assert selector.emission(selector.set_quantity(state, "2")) == Decimal("5.500000")


class TestConstruction:
    """Reference data loading and health."""

    def test_defaults(self):
        service = SupplyChainESGService()

        assert len(service.catalog) == 40
        assert len(service.factor_table) == 27

    def test_paths_from_config(self, tmp_path):
        path = tmp_path / "factors.csv"
        path.write_text("category,separate,raw_material,unit,kg_co2eq\nA,B,C,kg,1\n", encoding="utf-8")

        service = SupplyChainESGService(SupplyChainESGConfig(factor_table_path=str(path)))

        assert len(service.factor_table) == 1

    def test_missing_catalog_path(self, tmp_path):
        config = SupplyChainESGConfig(question_catalog_path=str(tmp_path / "missing.yaml"))

        with pytest.raises(DataLoadError):
            SupplyChainESGService(config)

    def test_health_check(self, service):
        health = service.health_check()

        assert health["status"] == "healthy"
        assert health["questions"] == 4
        assert health["categories"] == 2
        assert health["emission_factors"] == 27
        assert len(health["factor_table_hash"]) == 64

    def test_version(self):
        assert __version__ == "0.3.0"
