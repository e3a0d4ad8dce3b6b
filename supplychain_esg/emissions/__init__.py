# -*- coding: utf-8 -*-
"""
Scope 1/2/3 emission pipeline: emission-factor table, cascading
resolution with declarative filters, bounded calculation and roll-ups.
"""

from supplychain_esg.emissions.calculator import (
    CalculationStatus,
    EmissionCalculationResult,
    EmissionCalculator,
    build_emission_record,
    calculate,
    summarize_emissions,
    validate_activity_amount,
    validate_emission_factor,
)
from supplychain_esg.emissions.categories import (
    ScopeCategory,
    default_filter_profile,
    get_category,
    scope_categories,
)
from supplychain_esg.emissions.factor_table import (
    EmissionFactorTable,
    load_factor_table,
    parse_factor_table,
)
from supplychain_esg.emissions.models import (
    EmissionFactorEntry,
    EmissionRecord,
    EmissionSummary,
    FilterProfile,
    FilterRule,
    InputType,
    ScopeType,
    SelectionPath,
    SelectorState,
)
from supplychain_esg.emissions.resolver import apply_filters, resolve, resolve_or_raise
from supplychain_esg.emissions.selector import CascadingSelector

__all__ = [
    "CalculationStatus",
    "EmissionCalculationResult",
    "EmissionCalculator",
    "build_emission_record",
    "calculate",
    "summarize_emissions",
    "validate_activity_amount",
    "validate_emission_factor",
    "ScopeCategory",
    "default_filter_profile",
    "get_category",
    "scope_categories",
    "EmissionFactorTable",
    "load_factor_table",
    "parse_factor_table",
    "EmissionFactorEntry",
    "EmissionRecord",
    "EmissionSummary",
    "FilterProfile",
    "FilterRule",
    "InputType",
    "ScopeType",
    "SelectionPath",
    "SelectorState",
    "apply_filters",
    "resolve",
    "resolve_or_raise",
    "CascadingSelector",
]
