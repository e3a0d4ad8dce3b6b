# -*- coding: utf-8 -*-
"""
Emission Calculator

Bounded, fixed-precision emission arithmetic:

    total_emission = activity_amount x emission_factor

- Inputs are converted with ``Decimal(str(x))``; floats never take part in
  the multiplication, so ``calculate(1000, 2.5)`` is exactly
  ``Decimal("2500.000000")``.
- The activity amount allows 12 integer and 3 fractional digits, the
  emission factor 9 integer and 6 fractional digits, and the total 15
  integer digits (limits come from SupplyChainESGConfig).
- The product is computed exactly and rounded half-up to 6 places.
- Invalid inputs and oversized totals are returned as a rejected result,
  never raised: each calculation drives one field's inline feedback.
"""

from __future__ import annotations

import logging
import time
from collections import OrderedDict
from dataclasses import dataclass, field
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation, localcontext
from enum import Enum
from typing import Any, Dict, Iterable, List, Optional, Tuple

from pydantic import ValidationError as PydanticValidationError

from supplychain_esg import metrics
from supplychain_esg.config import SupplyChainESGConfig, get_config
from supplychain_esg.emissions.categories import get_category
from supplychain_esg.emissions.models import (
    EmissionRecord,
    EmissionSummary,
    InputType,
    ScopeType,
)
from supplychain_esg.exceptions import ErrorKind, InvalidValueError
from supplychain_esg.provenance import compute_provenance_hash

logger = logging.getLogger(__name__)

_ZERO = Decimal("0")

# Enough significant digits for the exact product of the largest inputs.
_PRODUCT_PRECISION = 60


class CalculationStatus(str, Enum):
    """Calculation result status"""
    SUCCESS = "success"
    REJECTED = "rejected"


@dataclass
class EmissionCalculationResult:
    """
    Outcome of one emission calculation.

    A rejected result has ``total_emission`` of zero and carries the
    rejection ``error_kind`` and messages; callers must branch on
    ``is_valid`` rather than use the zero as a real emission.
    """
    activity_amount: Optional[Decimal]
    emission_factor: Optional[Decimal]
    total_emission: Decimal = _ZERO
    status: CalculationStatus = CalculationStatus.SUCCESS
    error_kind: Optional[ErrorKind] = None
    errors: List[str] = field(default_factory=list)
    calculation_steps: List[Dict[str, Any]] = field(default_factory=list)
    provenance_hash: Optional[str] = None

    def __post_init__(self):
        if self.provenance_hash is None:
            self.provenance_hash = self._calculate_provenance_hash()

    def _calculate_provenance_hash(self) -> str:
        return compute_provenance_hash({
            'activity_amount': self.activity_amount,
            'emission_factor': self.emission_factor,
            'total_emission': self.total_emission,
            'status': self.status,
            'error_kind': self.error_kind,
            'errors': self.errors,
            'calculation_steps': self.calculation_steps,
        })

    @property
    def is_valid(self) -> bool:
        return self.status is CalculationStatus.SUCCESS

    def as_number(self) -> float:
        """Total as a float for display; 0.0 when rejected."""
        return float(self.total_emission) if self.is_valid else 0.0

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for serialization"""
        return {
            'activity_amount': str(self.activity_amount) if self.activity_amount is not None else None,
            'emission_factor': str(self.emission_factor) if self.emission_factor is not None else None,
            'total_emission': str(self.total_emission),
            'status': self.status.value,
            'error_kind': self.error_kind.value if self.error_kind else None,
            'errors': self.errors,
            'calculation_steps': self.calculation_steps,
            'provenance_hash': self.provenance_hash,
        }


# ---------------------------------------------------------------------------
# Input parsing and field validation
# ---------------------------------------------------------------------------


def parse_decimal(value: Any, label: str) -> Tuple[Optional[Decimal], Optional[ErrorKind], Optional[str]]:
    """Convert a raw numeric input into a finite, non-negative Decimal.

    Returns:
        ``(value, None, None)`` on success, else ``(None, kind, message)``.
    """
    if isinstance(value, bool) or not isinstance(value, (str, int, float, Decimal)):
        return None, ErrorKind.TYPE, (
            f"{label} must be a number or numeric string, got {type(value).__name__}"
        )

    text = value.strip() if isinstance(value, str) else str(value)
    if not text:
        return None, ErrorKind.INVALID_VALUE, f"{label} is required"
    try:
        parsed = Decimal(text)
    except InvalidOperation:
        return None, ErrorKind.INVALID_VALUE, f"{label} is not a number: {value!r}"
    if not parsed.is_finite():
        return None, ErrorKind.INVALID_VALUE, f"{label} must be finite"
    if parsed < 0:
        return None, ErrorKind.INVALID_VALUE, f"{label} must not be negative"
    return parsed, None, None


def fraction_digits(value: Decimal, scientific: bool = False) -> int:
    """Number of fractional digits.

    Plain decimals count as written (``2.50`` has 2). Scientific notation
    counts significant digits only (``1.00E-06`` has 6).
    """
    if scientific:
        value = value.normalize()
    exponent = value.as_tuple().exponent
    return -exponent if isinstance(exponent, int) and exponent < 0 else 0


def is_scientific(raw: Any) -> bool:
    """True if ``raw`` is written with an exponent (``1.23E-05``)."""
    return not isinstance(raw, bool) and "e" in str(raw).lower()


def _bounds_error(
    value: Decimal,
    label: str,
    maximum: Decimal,
    max_fraction_digits: int,
    scientific: bool = False,
) -> Optional[str]:
    if value > maximum:
        return f"{label} must be at most {maximum:,}"
    if fraction_digits(value, scientific) > max_fraction_digits:
        return f"{label} allows at most {max_fraction_digits} decimal places"
    return None


def validate_activity_amount(
    value: Any, config: Optional[SupplyChainESGConfig] = None,
) -> Optional[str]:
    """Check an activity amount on its own; return an error message or None."""
    config = config or get_config()
    parsed, _, message = parse_decimal(value, "activity amount")
    if parsed is None:
        return message
    return _bounds_error(
        parsed, "activity amount",
        config.max_activity_amount, config.activity_max_fraction_digits,
        is_scientific(value),
    )


def validate_emission_factor(
    value: Any, config: Optional[SupplyChainESGConfig] = None,
) -> Optional[str]:
    """Check an emission factor on its own; return an error message or None."""
    config = config or get_config()
    parsed, _, message = parse_decimal(value, "emission factor")
    if parsed is None:
        return message
    return _bounds_error(
        parsed, "emission factor",
        config.max_emission_factor, config.factor_max_fraction_digits,
        is_scientific(value),
    )


# ---------------------------------------------------------------------------
# Calculator
# ---------------------------------------------------------------------------


class EmissionCalculator:
    """
    Fixed-precision emission calculator.

    Deterministic: the same inputs always give the same result and the
    same provenance hash. No I/O.
    """

    def __init__(self, config: Optional[SupplyChainESGConfig] = None):
        self.config = config or get_config()
        self._quantum = Decimal(1).scaleb(-self.config.result_decimal_places)
        logger.info(
            "EmissionCalculator initialized: max_activity=%s, max_factor=%s, max_total=%s",
            self.config.max_activity_amount,
            self.config.max_emission_factor,
            self.config.max_total_emission,
        )

    def _reject(
        self,
        kind: ErrorKind,
        errors: List[str],
        steps: List[Dict[str, Any]],
        activity: Optional[Decimal] = None,
        factor: Optional[Decimal] = None,
    ) -> EmissionCalculationResult:
        logger.warning("Emission calculation rejected (%s): %s", kind.value, "; ".join(errors))
        metrics.record_calculation(CalculationStatus.REJECTED.value)
        return EmissionCalculationResult(
            activity_amount=activity,
            emission_factor=factor,
            total_emission=_ZERO.quantize(self._quantum),
            status=CalculationStatus.REJECTED,
            error_kind=kind,
            errors=errors,
            calculation_steps=steps,
        )

    def calculate(
        self,
        activity_amount: Any,
        emission_factor: Any,
        check_factor_bounds: bool = True,
    ) -> EmissionCalculationResult:
        """
        Multiply an activity amount by an emission factor.

        Calculation Steps:
        1. Parse both inputs
        2. Check digit bounds of both inputs
        3. Multiply exactly and check the total bound
        4. Round half-up to the configured decimal places

        Args:
            activity_amount: Quantity (str, int, float or Decimal)
            emission_factor: kg CO2eq per unit (str, int, float or Decimal)
            check_factor_bounds: Apply the digit bounds to the factor.
                False for factors taken from the emission-factor table,
                which only need to be non-negative.

        Returns:
            EmissionCalculationResult; rejected results are returned, not raised
        """
        start = time.perf_counter()
        cfg = self.config
        steps: List[Dict[str, Any]] = []

        # Step 1: Parse
        activity, kind_a, error_a = parse_decimal(activity_amount, "activity amount")
        factor, kind_f, error_f = parse_decimal(emission_factor, "emission factor")
        steps.append({
            'step': 1,
            'description': 'Parse inputs',
            'activity_amount': str(activity) if activity is not None else repr(activity_amount),
            'emission_factor': str(factor) if factor is not None else repr(emission_factor),
        })
        parse_errors = [e for e in (error_a, error_f) if e]
        if parse_errors:
            kind = ErrorKind.TYPE if ErrorKind.TYPE in (kind_a, kind_f) else ErrorKind.INVALID_VALUE
            return self._reject(kind, parse_errors, steps, activity, factor)

        # Step 2: Bounds
        bound_errors = [
            e for e in (
                _bounds_error(
                    activity, "activity amount",
                    cfg.max_activity_amount, cfg.activity_max_fraction_digits,
                    is_scientific(activity_amount),
                ),
                _bounds_error(
                    factor, "emission factor",
                    cfg.max_emission_factor, cfg.factor_max_fraction_digits,
                    is_scientific(emission_factor),
                ) if check_factor_bounds else None,
            ) if e
        ]
        steps.append({
            'step': 2,
            'description': 'Check input bounds',
            'max_activity_amount': str(cfg.max_activity_amount),
            'max_emission_factor': (
                str(cfg.max_emission_factor) if check_factor_bounds else None
            ),
        })
        if bound_errors:
            return self._reject(ErrorKind.INVALID_VALUE, bound_errors, steps, activity, factor)

        # Step 3: Exact product
        with localcontext() as ctx:
            ctx.prec = _PRODUCT_PRECISION
            product = activity * factor
            total = product.quantize(self._quantum, rounding=ROUND_HALF_UP)

        steps.append({
            'step': 3,
            'description': 'Calculate emissions',
            'formula': 'total_emission = activity_amount × emission_factor',
            'exact_product': str(product),
        })
        # Bound applies to the unrounded product; a product that only
        # rounds down to the maximum is still rejected.
        if product > cfg.max_total_emission:
            return self._reject(
                ErrorKind.INVALID_VALUE,
                [f"total emission exceeds the maximum of {cfg.max_total_emission:,}"],
                steps, activity, factor,
            )

        # Step 4: Round
        steps.append({
            'step': 4,
            'description': f'Round half-up to {cfg.result_decimal_places} decimal places',
            'total_emission': str(total),
        })

        metrics.record_calculation(CalculationStatus.SUCCESS.value)
        metrics.record_processing_duration("calculate", time.perf_counter() - start)
        logger.debug("Calculated %s × %s = %s", activity, factor, total)
        return EmissionCalculationResult(
            activity_amount=activity,
            emission_factor=factor,
            total_emission=total,
            calculation_steps=steps,
        )


def calculate(
    activity_amount: Any,
    emission_factor: Any,
    config: Optional[SupplyChainESGConfig] = None,
    check_factor_bounds: bool = True,
) -> EmissionCalculationResult:
    """Convenience wrapper around ``EmissionCalculator(config).calculate``."""
    return EmissionCalculator(config).calculate(
        activity_amount, emission_factor, check_factor_bounds,
    )


# ---------------------------------------------------------------------------
# Records and roll-ups
# ---------------------------------------------------------------------------


def build_emission_record(
    scope_type: ScopeType,
    category_number: int,
    activity_amount: Any,
    emission_factor: Any,
    reporting_year: int,
    reporting_month: int,
    input_type: InputType = InputType.MANUAL,
    major_category: str = "",
    subcategory: str = "",
    raw_material: str = "",
    unit: str = "",
    calculator: Optional[EmissionCalculator] = None,
    check_factor_bounds: bool = True,
    **extra: Any,
) -> EmissionRecord:
    """Build a validated EmissionRecord.

    ``total_emission`` is always recomputed through the calculator.
    Pass ``check_factor_bounds=False`` for factors taken from the table.

    Raises:
        InvalidValueError: If the category number is outside the scope's
            range or the calculation is rejected.
    """
    scope_type = ScopeType(scope_type)
    get_category(scope_type, category_number)

    result = (calculator or EmissionCalculator()).calculate(
        activity_amount, emission_factor, check_factor_bounds,
    )
    if not result.is_valid:
        raise InvalidValueError(
            "emission record rejected: " + "; ".join(result.errors),
            context={"errors": result.errors, "error_kind": result.error_kind.value},
        )

    try:
        return EmissionRecord(
            scope_type=scope_type,
            category_number=category_number,
            input_type=input_type,
            major_category=major_category,
            subcategory=subcategory,
            raw_material=raw_material,
            activity_amount=result.activity_amount,
            unit=unit,
            emission_factor=result.emission_factor,
            total_emission=result.total_emission,
            reporting_year=reporting_year,
            reporting_month=reporting_month,
            **extra,
        )
    except PydanticValidationError as e:
        raise InvalidValueError(
            f"emission record rejected: {e.error_count()} invalid field(s)",
            context={"errors": [err["msg"] for err in e.errors()]},
        ) from e


def summarize_emissions(records: Iterable[EmissionRecord]) -> EmissionSummary:
    """Total emissions per scope, per scope category and per reporting month."""
    by_scope: Dict[ScopeType, Decimal] = OrderedDict((scope, _ZERO) for scope in ScopeType)
    by_category: Dict[ScopeType, Dict[int, Decimal]] = OrderedDict(
        (scope, {}) for scope in ScopeType
    )
    by_month: Dict[str, Decimal] = {}
    total = _ZERO
    count = 0

    for record in records:
        count += 1
        total += record.total_emission
        by_scope[record.scope_type] += record.total_emission
        categories = by_category[record.scope_type]
        categories[record.category_number] = (
            categories.get(record.category_number, _ZERO) + record.total_emission
        )
        period = f"{record.reporting_year:04d}-{record.reporting_month:02d}"
        by_month[period] = by_month.get(period, _ZERO) + record.total_emission

    return EmissionSummary(
        total=total,
        by_scope=dict(by_scope),
        by_category={scope: dict(sorted(c.items())) for scope, c in by_category.items()},
        by_month=dict(sorted(by_month.items())),
        record_count=count,
    )


__all__ = [
    "CalculationStatus",
    "EmissionCalculationResult",
    "EmissionCalculator",
    "calculate",
    "parse_decimal",
    "fraction_digits",
    "is_scientific",
    "validate_activity_amount",
    "validate_emission_factor",
    "build_emission_record",
    "summarize_emissions",
]
