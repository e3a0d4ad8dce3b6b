# -*- coding: utf-8 -*-
"""
Tests for the emission calculator.

Covers exact fixed-precision arithmetic, digit bounds of both inputs
and of the total, rejection kinds, provenance determinism, record
building and emission roll-ups.
"""

from decimal import Decimal

import pytest

from supplychain_esg.config import SupplyChainESGConfig
from supplychain_esg.emissions.calculator import (
    CalculationStatus,
    EmissionCalculator,
    build_emission_record,
    calculate,
    fraction_digits,
    is_scientific,
    parse_decimal,
    summarize_emissions,
    validate_activity_amount,
    validate_emission_factor,
)
from supplychain_esg.emissions.models import InputType, ScopeType
from supplychain_esg.exceptions import ErrorKind, InvalidValueError


class TestCalculate:
    """Successful calculations."""

    def test_no_float_drift(self):
        result = calculate(1000, 2.5)

        assert result.is_valid
        assert result.status is CalculationStatus.SUCCESS
        assert result.total_emission == Decimal("2500.000000")
        assert str(result.total_emission) == "2500.000000"
        assert result.as_number() == 2500.0

    @pytest.mark.parametrize("activity,factor,expected", [
        ("0.1", "0.2", "0.020000"),
        ("3", "0.1", "0.300000"),
        ("100", "2.58E+00", "258.000000"),
        ("0", "1430", "0.000000"),
        ("999999999999.999", "0", "0.000000"),
        (Decimal("12.5"), Decimal("0.459"), "5.737500"),
    ])
    def test_exact_products(self, activity, factor, expected):
        assert str(calculate(activity, factor).total_emission) == expected

    def test_rounds_half_up(self):
        assert calculate("0.1", "0.000005").total_emission == Decimal("0.000001")
        assert calculate("0.1", "0.000004").total_emission == Decimal("0.000000")

    def test_accepts_trimmed_strings(self):
        assert calculate(" 10 ", "2").total_emission == Decimal("20.000000")

    def test_largest_total_within_bound(self):
        result = calculate("999999999999.999", "999")

        assert result.is_valid
        assert result.total_emission == Decimal("998999999999999.001000")

    def test_calculation_steps(self):
        result = calculate("2", "3")

        assert [s["step"] for s in result.calculation_steps] == [1, 2, 3, 4]
        assert result.calculation_steps[2]["exact_product"] == "6"

    @pytest.mark.parametrize("factor,expected", [
        ("1.00E-06", "0.001000"),
        ("1.000000E+00", "1000.000000"),
        ("2.50E-03", "2.500000"),
    ])
    def test_scientific_factor_counts_significant_digits(self, factor, expected):
        result = calculate("1000", factor)

        assert result.is_valid
        assert result.total_emission == Decimal(expected)

    def test_table_factor_skips_factor_bounds(self):
        assert not calculate("1000000", "1.23E-07").is_valid

        result = calculate("1000000", "1.23E-07", check_factor_bounds=False)

        assert result.is_valid
        assert result.total_emission == Decimal("0.123000")
        assert result.calculation_steps[1]["max_emission_factor"] is None


class TestRejections:
    """Invalid inputs are returned as rejected results, never raised."""

    @pytest.mark.parametrize("activity,factor", [
        (999999999999.999, 999999999.999999),
        ("999999999999.999", "999999999.999999"),
        ("999999999999.999", "1000.5"),
    ])
    def test_total_exceeds_cap(self, activity, factor):
        result = calculate(activity, factor)

        assert not result.is_valid
        assert result.status is CalculationStatus.REJECTED
        assert result.error_kind is ErrorKind.INVALID_VALUE
        assert result.total_emission == Decimal("0")
        assert result.as_number() == 0.0
        assert "total emission exceeds" in result.errors[0]

    @pytest.mark.parametrize("activity,factor", [
        ("1000000000000", "1"),        # 13 integer digits
        ("1.2345", "1"),               # 4 fractional digits
        ("1", "1000000000"),           # 10 integer digits
        ("1", "0.0000001"),            # 7 fractional digits
        ("-1", "1"),
        ("1", "-0.5"),
        ("abc", "1"),
        ("", "1"),
        ("NaN", "1"),
        ("1", "Infinity"),
    ])
    def test_invalid_values(self, activity, factor):
        result = calculate(activity, factor)

        assert not result.is_valid
        assert result.error_kind is ErrorKind.INVALID_VALUE
        assert result.errors

    @pytest.mark.parametrize("activity,factor", [
        (None, "1"),
        ("1", True),
        ([1], "1"),
    ])
    def test_wrong_types(self, activity, factor):
        result = calculate(activity, factor)

        assert result.error_kind is ErrorKind.TYPE

    def test_reports_both_input_errors(self):
        result = calculate("abc", "-1")

        assert len(result.errors) == 2

    def test_bounds_follow_config(self):
        config = SupplyChainESGConfig(activity_max_integer_digits=2, total_max_integer_digits=3)

        assert not calculate("100", "1", config).is_valid
        assert calculate("99", "10", config).is_valid
        assert not calculate("99", "11", config).is_valid

    def test_total_bound_checked_before_rounding(self):
        config = SupplyChainESGConfig(total_max_integer_digits=1, result_decimal_places=0)

        assert calculate("9", "1", config).total_emission == Decimal("9")
        # 9.4 rounds to 9 but the unrounded product is over the cap
        result = calculate("9.4", "1", config)
        assert not result.is_valid
        assert "total emission exceeds" in result.errors[0]

    def test_table_factor_keeps_quantity_and_total_bounds(self):
        assert not calculate("1.2345", "1.23E-05", check_factor_bounds=False).is_valid
        assert not calculate("999999999999.999", "1000.5", check_factor_bounds=False).is_valid


class TestProvenance:
    """Results carry a deterministic provenance hash."""

    def test_deterministic(self):
        calculator = EmissionCalculator()

        first = calculator.calculate("1000", "2.5")
        second = calculator.calculate("1000", "2.5")
        third = calculator.calculate("1000", "2.6")

        assert len(first.provenance_hash) == 64
        assert first.provenance_hash == second.provenance_hash
        assert first.provenance_hash != third.provenance_hash

    def test_to_dict(self):
        data = calculate("1000", "abc").to_dict()

        assert data["status"] == "rejected"
        assert data["error_kind"] == "invalid_value"
        assert data["total_emission"] == "0.000000"
        assert data["emission_factor"] is None


class TestFieldValidation:
    """Per-field helpers used for inline feedback."""

    def test_parse_decimal(self):
        assert parse_decimal("2.50", "x") == (Decimal("2.50"), None, None)
        assert parse_decimal(False, "x")[1] is ErrorKind.TYPE
        assert parse_decimal("-0.1", "x")[1] is ErrorKind.INVALID_VALUE

    @pytest.mark.parametrize("value,digits", [("2.50", 2), ("100", 0), ("1E+3", 0), ("1.5E-3", 4)])
    def test_fraction_digits(self, value, digits):
        assert fraction_digits(Decimal(value)) == digits

    @pytest.mark.parametrize("value,digits", [("1.00E-06", 6), ("1.2300E-05", 7), ("2.500E+02", 0)])
    def test_fraction_digits_scientific(self, value, digits):
        assert fraction_digits(Decimal(value), scientific=True) == digits

    def test_is_scientific(self):
        assert is_scientific("1.00E-06")
        assert is_scientific(1e-07)
        assert not is_scientific("0.000001")
        assert not is_scientific(True)

    def test_validate_activity_amount(self):
        assert validate_activity_amount("999999999999.999") is None
        assert "decimal places" in validate_activity_amount("1.2345")
        assert "at most" in validate_activity_amount("1000000000000")
        assert validate_activity_amount("x") is not None

    def test_validate_emission_factor(self):
        assert validate_emission_factor(2.5) is None
        assert "decimal places" in validate_emission_factor("0.0000001")
        assert "decimal places" in validate_emission_factor("0.0000010")
        assert validate_emission_factor("1.00E-06") is None
        assert "decimal places" in validate_emission_factor("1.23E-07")


class TestRecords:
    """Emission records and roll-ups."""

    def test_build_record(self):
        record = build_emission_record(
            ScopeType.SCOPE2, 1, "1500", "0.459", 2025, 1,
            major_category=" Electricity ", subcategory="Power",
            raw_material="Grid electricity", unit="kWh",
        )

        assert record.total_emission == Decimal("688.500000")
        assert record.input_type is InputType.MANUAL
        assert record.major_category == "Electricity"

    def test_invalid_category_number(self):
        with pytest.raises(InvalidValueError):
            build_emission_record(ScopeType.SCOPE2, 3, "1", "1", 2025, 1)

    def test_rejected_calculation(self):
        with pytest.raises(InvalidValueError) as exc_info:
            build_emission_record(ScopeType.SCOPE1, 1, "1.2345", "1", 2025, 1)

        assert exc_info.value.context["error_kind"] == "invalid_value"

    @pytest.mark.parametrize("year,month", [(2025, 0), (2025, 13), (1800, 1)])
    def test_invalid_period(self, year, month):
        with pytest.raises(InvalidValueError):
            build_emission_record(ScopeType.SCOPE1, 1, "1", "1", year, month)

    def test_summarize(self):
        records = [
            build_emission_record(ScopeType.SCOPE1, 1, "100", "2.58", 2025, 2),
            build_emission_record(ScopeType.SCOPE1, 1, "10", "2.17", 2025, 1),
            build_emission_record(ScopeType.SCOPE1, 9, "1", "1430", 2025, 1),
            build_emission_record(ScopeType.SCOPE2, 1, "1000", "0.459", 2025, 1),
        ]

        summary = summarize_emissions(records)

        assert summary.record_count == 4
        assert summary.total == Decimal("2168.700000")
        assert summary.by_scope == {
            ScopeType.SCOPE1: Decimal("1709.700000"),
            ScopeType.SCOPE2: Decimal("459.000000"),
            ScopeType.SCOPE3: Decimal("0"),
        }
        assert summary.by_category[ScopeType.SCOPE1] == {
            1: Decimal("279.700000"),
            9: Decimal("1430.000000"),
        }
        assert summary.by_category[ScopeType.SCOPE3] == {}
        assert list(summary.by_month) == ["2025-01", "2025-02"]
        assert summary.by_month["2025-02"] == Decimal("258.000000")

    def test_summarize_empty(self):
        summary = summarize_emissions([])

        assert summary.total == Decimal("0")
        assert summary.record_count == 0
        assert set(summary.by_scope) == set(ScopeType)
