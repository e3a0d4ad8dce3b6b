# -*- coding: utf-8 -*-
"""
Scope 1/2/3 Emission Data Models

Pydantic v2 models for the emission-factor table, the cascading selector
and emission records. Amounts are ``Decimal`` throughout; floats never
enter the calculation path.

Models:
    - Enumerations: ScopeType, InputType
    - Reference data: EmissionFactorEntry, SelectionPath
    - Filtering: FilterRule, FilterProfile
    - Selector: SelectorState
    - Records: EmissionRecord, EmissionSummary
"""

from __future__ import annotations

from decimal import Decimal
from enum import Enum
from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


# =============================================================================
# Enumerations
# =============================================================================


class ScopeType(str, Enum):
    """Greenhouse-gas accounting scope."""

    SCOPE1 = "SCOPE1"
    SCOPE2 = "SCOPE2"
    SCOPE3 = "SCOPE3"


class InputType(str, Enum):
    """How an emission record was entered.

    MANUAL records carry a user-typed factor; LCA records take the factor
    from the emission-factor table.
    """

    MANUAL = "MANUAL"
    LCA = "LCA"


# =============================================================================
# Reference data
# =============================================================================


class EmissionFactorEntry(BaseModel):
    """One row of the emission-factor table.

    Attributes:
        category: Top-level key (major category).
        separate: Second-level key (subcategory).
        raw_material: Third-level key (raw material or energy source).
        unit: Unit the activity amount is measured in.
        kg_co2eq: Emission factor in kg CO2-equivalent per unit.
        physical_state: Optional auxiliary tag (e.g. ``liquid``, ``gas``).
        scope_tag: Optional auxiliary scope classification tag.
    """

    model_config = ConfigDict(frozen=True)

    category: str = Field(..., min_length=1)
    separate: str = Field(..., min_length=1)
    raw_material: str = Field(..., min_length=1)
    unit: str = ""
    kg_co2eq: Decimal = Field(..., ge=0)
    physical_state: str = ""
    scope_tag: str = ""

    @property
    def path(self) -> SelectionPath:
        return SelectionPath(
            category=self.category,
            separate=self.separate,
            raw_material=self.raw_material,
        )


class SelectionPath(BaseModel):
    """Three-level lookup key ``category -> separate -> raw_material``."""

    model_config = ConfigDict(frozen=True)

    category: str = ""
    separate: str = ""
    raw_material: str = ""

    @property
    def is_complete(self) -> bool:
        return bool(self.category and self.separate and self.raw_material)


# =============================================================================
# Filtering
# =============================================================================


class FilterRule(BaseModel):
    """Declarative include/exclude rule over one tag dimension.

    Exactly one of ``include`` or ``exclude`` must be given. ``include``
    keeps values containing any token; ``exclude`` keeps values containing
    none of them.
    """

    model_config = ConfigDict(frozen=True)

    include: Optional[List[str]] = None
    exclude: Optional[List[str]] = None

    @model_validator(mode="after")
    def validate_exactly_one(self) -> FilterRule:
        if (self.include is None) == (self.exclude is None):
            raise ValueError("a filter rule needs exactly one of include or exclude")
        return self

    def keeps(self, value: str) -> bool:
        if self.include is not None:
            return any(token in value for token in self.include)
        return not any(token in value for token in self.exclude or ())


class FilterProfile(BaseModel):
    """Optional filter rules for the three auxiliary dimensions."""

    model_config = ConfigDict(frozen=True)

    separate: Optional[FilterRule] = None
    scope_tag: Optional[FilterRule] = None
    physical_state: Optional[FilterRule] = None

    @property
    def is_empty(self) -> bool:
        return self.separate is None and self.scope_tag is None and self.physical_state is None


# =============================================================================
# Selector
# =============================================================================


class SelectorState(BaseModel):
    """State of one cascading-selector row.

    ``quantity`` is kept as typed text; it is only parsed when the row's
    emission is computed.
    """

    model_config = ConfigDict(frozen=True)

    category: str = ""
    separate: str = ""
    raw_material: str = ""
    unit: str = ""
    kg_co2eq: Optional[Decimal] = None
    quantity: str = ""
    product_name: str = ""
    product_code: str = ""

    @property
    def path(self) -> SelectionPath:
        return SelectionPath(
            category=self.category,
            separate=self.separate,
            raw_material=self.raw_material,
        )


# =============================================================================
# Records
# =============================================================================


class EmissionRecord(BaseModel):
    """A validated emission entry ready to hand to persistence.

    ``total_emission`` is always the calculator's result for
    ``activity_amount x emission_factor``; build records through
    ``build_emission_record`` rather than directly.
    """

    model_config = ConfigDict(frozen=True)

    scope_type: ScopeType
    category_number: int = Field(..., ge=1)
    input_type: InputType = InputType.MANUAL
    major_category: str = ""
    subcategory: str = ""
    raw_material: str = ""
    activity_amount: Decimal = Field(..., ge=0)
    unit: str = ""
    emission_factor: Decimal = Field(..., ge=0)
    total_emission: Decimal = Field(..., ge=0)
    reporting_year: int = Field(..., ge=1900, le=9999)
    reporting_month: int = Field(..., ge=1, le=12)
    material_name: str = ""
    internal_material_code: str = ""
    upstream_material_code: str = ""
    factory_enabled: bool = False

    @field_validator("major_category", "subcategory", "raw_material", "unit")
    @classmethod
    def strip_text(cls, v: str) -> str:
        return v.strip()


class EmissionSummary(BaseModel):
    """Roll-up of emission records.

    Attributes:
        total: Grand total across all records.
        by_scope: Total per scope (every scope present, zero when empty).
        by_category: Total per scope and category number.
        by_month: Total per ``YYYY-MM`` reporting period.
        record_count: Number of records summarised.
    """

    model_config = ConfigDict(frozen=True)

    total: Decimal = Decimal("0")
    by_scope: Dict[ScopeType, Decimal] = Field(default_factory=dict)
    by_category: Dict[ScopeType, Dict[int, Decimal]] = Field(default_factory=dict)
    by_month: Dict[str, Decimal] = Field(default_factory=dict)
    record_count: int = 0


__all__ = [
    "ScopeType",
    "InputType",
    "EmissionFactorEntry",
    "SelectionPath",
    "FilterRule",
    "FilterProfile",
    "SelectorState",
    "EmissionRecord",
    "EmissionSummary",
]
