# -*- coding: utf-8 -*-
"""
Cascading emission-factor selector.

Drives one ``category -> separate -> raw_material`` input row. Option
lists come from the (optionally filtered) emission-factor table and every
state transition returns a new SelectorState:

- selecting a category clears separate, raw material, unit and factor
  (the typed quantity is kept);
- selecting a separate clears raw material, unit and factor;
- selecting a raw material resolves unit and factor, or clears them when
  the path has no row.
"""

from __future__ import annotations

import logging
from decimal import Decimal
from typing import List, Optional

from supplychain_esg.emissions.calculator import EmissionCalculator, build_emission_record
from supplychain_esg.emissions.factor_table import EmissionFactorTable
from supplychain_esg.emissions.models import (
    EmissionFactorEntry,
    EmissionRecord,
    FilterProfile,
    InputType,
    ScopeType,
    SelectorState,
)
from supplychain_esg.emissions.resolver import apply_filters, resolve
from supplychain_esg.exceptions import InvalidValueError

logger = logging.getLogger(__name__)

_ZERO = Decimal("0")


def _unique(values) -> List[str]:
    return list(dict.fromkeys(v for v in values if v))


class CascadingSelector:
    """Option lists and state transitions for one selector row.

    Example:
        >>> selector = CascadingSelector(load_factor_table())
        >>> state = selector.select_category(SelectorState(), "Fuel")
        >>> state = selector.select_separate(state, "Energy")
        >>> state = selector.select_raw_material(state, "Diesel")
        >>> state = selector.set_quantity(state, "100")
        >>> selector.emission(state)
        Decimal('258.000000')
    """

    def __init__(
        self,
        table: EmissionFactorTable,
        profile: Optional[FilterProfile] = None,
        calculator: Optional[EmissionCalculator] = None,
    ):
        self.table = table
        self.profile = profile
        self.calculator = calculator or EmissionCalculator()
        self._entries: List[EmissionFactorEntry] = apply_filters(table, profile)
        logger.debug(
            "CascadingSelector ready: %d of %d rows after filters",
            len(self._entries), len(table),
        )

    # ------------------------------------------------------------------
    # Option lists
    # ------------------------------------------------------------------

    def category_options(self) -> List[str]:
        return _unique(e.category for e in self._entries)

    def separate_options(self, category: str) -> List[str]:
        return _unique(e.separate for e in self._entries if e.category == category)

    def raw_material_options(self, category: str, separate: str) -> List[str]:
        return _unique(
            e.raw_material for e in self._entries
            if e.category == category and e.separate == separate
        )

    # ------------------------------------------------------------------
    # State transitions
    # ------------------------------------------------------------------

    def select_category(self, state: SelectorState, category: str) -> SelectorState:
        return state.model_copy(update={
            "category": category,
            "separate": "",
            "raw_material": "",
            "unit": "",
            "kg_co2eq": None,
        })

    def select_separate(self, state: SelectorState, separate: str) -> SelectorState:
        return state.model_copy(update={
            "separate": separate,
            "raw_material": "",
            "unit": "",
            "kg_co2eq": None,
        })

    def select_raw_material(self, state: SelectorState, raw_material: str) -> SelectorState:
        return self._resolved(state.model_copy(update={"raw_material": raw_material}))

    def set_quantity(self, state: SelectorState, quantity: str) -> SelectorState:
        return state.model_copy(update={"quantity": quantity})

    def set_product(self, state: SelectorState, product_name: str = "", product_code: str = "") -> SelectorState:
        """Attach optional product information to the row."""
        return state.model_copy(update={
            "product_name": product_name.strip(),
            "product_code": product_code.strip(),
        })

    def restore(self, state: SelectorState) -> SelectorState:
        """Re-resolve unit and factor for a state loaded from storage."""
        return self._resolved(state)

    def _resolved(self, state: SelectorState) -> SelectorState:
        entry = resolve(state.path, self._entries) if state.path.is_complete else None
        if entry is None:
            return state.model_copy(update={"unit": "", "kg_co2eq": None})
        return state.model_copy(update={"unit": entry.unit, "kg_co2eq": entry.kg_co2eq})

    # ------------------------------------------------------------------
    # Emission
    # ------------------------------------------------------------------

    def emission(self, state: SelectorState) -> Decimal:
        """Emission of the row; 0 for an incomplete selection or invalid quantity."""
        if not state.path.is_complete or state.kg_co2eq is None or not state.quantity.strip():
            return _ZERO
        result = self.calculator.calculate(
            state.quantity, state.kg_co2eq, check_factor_bounds=False,
        )
        return result.total_emission if result.is_valid else _ZERO

    def to_record(
        self,
        state: SelectorState,
        scope_type: ScopeType,
        category_number: int,
        reporting_year: int,
        reporting_month: int,
    ) -> EmissionRecord:
        """Build an LCA emission record from a completed row.

        Raises:
            InvalidValueError: If the selection is incomplete or the
                quantity is rejected.
        """
        if not state.path.is_complete or state.kg_co2eq is None:
            raise InvalidValueError(
                "selection is incomplete; choose category, separate and raw material",
                field="raw_material",
                value=state.raw_material,
            )
        return build_emission_record(
            scope_type=scope_type,
            category_number=category_number,
            activity_amount=state.quantity,
            emission_factor=state.kg_co2eq,
            reporting_year=reporting_year,
            reporting_month=reporting_month,
            input_type=InputType.LCA,
            major_category=state.category,
            subcategory=state.separate,
            raw_material=state.raw_material,
            unit=state.unit,
            calculator=self.calculator,
            check_factor_bounds=False,
            material_name=state.product_name,
            internal_material_code=state.product_code,
        )


__all__ = ["CascadingSelector"]
