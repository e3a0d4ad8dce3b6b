# -*- coding: utf-8 -*-
"""
Scope category registry.

Scope 1 has ten categories in four groups, Scope 2 has two and Scope 3
follows the fifteen GHG Protocol categories. Scope 1/2 categories carry
a default FilterProfile that narrows the emission-factor table to the
rows offered for that category.
"""

from __future__ import annotations

from typing import Dict, List, Optional, Tuple

from pydantic import BaseModel, ConfigDict

from supplychain_esg.emissions.models import FilterProfile, FilterRule, ScopeType
from supplychain_esg.exceptions import InvalidValueError


class ScopeCategory(BaseModel):
    """One category of a scope."""

    model_config = ConfigDict(frozen=True)

    scope: ScopeType
    number: int
    name: str
    group: str = ""
    filter_profile: Optional[FilterProfile] = None


_S1 = FilterRule(include=["S1"])
_S2 = FilterRule(include=["S2"])

_SCOPE1: Tuple[ScopeCategory, ...] = (
    ScopeCategory(
        scope=ScopeType.SCOPE1, number=1, name="Liquid fuel", group="Stationary combustion",
        filter_profile=FilterProfile(
            separate=FilterRule(include=["Energy"]),
            scope_tag=_S1,
            physical_state=FilterRule(include=["liquid"]),
        ),
    ),
    ScopeCategory(
        scope=ScopeType.SCOPE1, number=2, name="Gas fuel", group="Stationary combustion",
        filter_profile=FilterProfile(
            separate=FilterRule(exclude=["Energy"]),
            scope_tag=_S1,
            physical_state=FilterRule(include=["gas"]),
        ),
    ),
    ScopeCategory(
        scope=ScopeType.SCOPE1, number=3, name="Solid fuel", group="Stationary combustion",
        filter_profile=FilterProfile(
            separate=FilterRule(
                include=["Energy", "Land transport", "Air transport", "Marine transport"],
            ),
            scope_tag=_S1,
            physical_state=FilterRule(include=["solid"]),
        ),
    ),
    ScopeCategory(
        scope=ScopeType.SCOPE1, number=4, name="Vehicles", group="Mobile combustion",
        filter_profile=FilterProfile(scope_tag=_S1),
    ),
    ScopeCategory(
        scope=ScopeType.SCOPE1, number=5, name="Aircraft", group="Mobile combustion",
        filter_profile=FilterProfile(scope_tag=_S1),
    ),
    ScopeCategory(
        scope=ScopeType.SCOPE1, number=6, name="Ships", group="Mobile combustion",
        filter_profile=FilterProfile(scope_tag=_S1),
    ),
    ScopeCategory(
        scope=ScopeType.SCOPE1, number=7, name="Manufacturing process", group="Process emissions",
        filter_profile=FilterProfile(scope_tag=_S1),
    ),
    ScopeCategory(
        scope=ScopeType.SCOPE1, number=8, name="Wastewater treatment", group="Process emissions",
        filter_profile=FilterProfile(scope_tag=_S1),
    ),
    ScopeCategory(
        scope=ScopeType.SCOPE1, number=9, name="Refrigerant leakage", group="Fugitive emissions",
        filter_profile=FilterProfile(scope_tag=_S1),
    ),
    ScopeCategory(
        scope=ScopeType.SCOPE1, number=10, name="Fire extinguisher discharge", group="Fugitive emissions",
        filter_profile=FilterProfile(scope_tag=_S1),
    ),
)

_SCOPE2: Tuple[ScopeCategory, ...] = (
    ScopeCategory(
        scope=ScopeType.SCOPE2, number=1, name="Electricity", group="Purchased electricity",
        filter_profile=FilterProfile(scope_tag=_S2),
    ),
    ScopeCategory(
        scope=ScopeType.SCOPE2, number=2, name="Steam", group="Purchased steam",
        filter_profile=FilterProfile(scope_tag=_S2),
    ),
)

_SCOPE3_NAMES = (
    "Purchased goods and services",
    "Capital goods",
    "Fuel- and energy-related activities",
    "Upstream transportation and distribution",
    "Waste generated in operations",
    "Business-site activities",
    "Employee commuting",
    "Business travel",
    "Downstream transportation and distribution",
    "End-of-life treatment of packaging",
    "Use of sold products",
    "End-of-life treatment of sold products",
    "Leased assets",
    "Franchises",
    "Investments",
)

_SCOPE3: Tuple[ScopeCategory, ...] = tuple(
    ScopeCategory(scope=ScopeType.SCOPE3, number=i, name=name)
    for i, name in enumerate(_SCOPE3_NAMES, start=1)
)

_REGISTRY: Dict[ScopeType, Tuple[ScopeCategory, ...]] = {
    ScopeType.SCOPE1: _SCOPE1,
    ScopeType.SCOPE2: _SCOPE2,
    ScopeType.SCOPE3: _SCOPE3,
}


def scope_categories(scope: ScopeType) -> List[ScopeCategory]:
    """Categories of ``scope`` in number order."""
    return list(_REGISTRY[ScopeType(scope)])


def category_range(scope: ScopeType) -> Tuple[int, int]:
    """Inclusive ``(first, last)`` category number for ``scope``."""
    categories = _REGISTRY[ScopeType(scope)]
    return categories[0].number, categories[-1].number


def is_valid_category_number(scope: ScopeType, number: int) -> bool:
    first, last = category_range(scope)
    return isinstance(number, int) and not isinstance(number, bool) and first <= number <= last


def get_category(scope: ScopeType, number: int) -> ScopeCategory:
    """Look up a category.

    Raises:
        InvalidValueError: If ``number`` is outside the scope's range.
    """
    if not is_valid_category_number(scope, number):
        first, last = category_range(scope)
        raise InvalidValueError(
            f"{ScopeType(scope).value} category number must be between {first} and {last}",
            field="category_number",
            value=number,
        )
    return _REGISTRY[ScopeType(scope)][number - 1]


def default_filter_profile(scope: ScopeType, number: int) -> Optional[FilterProfile]:
    """Default filters for a category, or None when it has none."""
    return get_category(scope, number).filter_profile


__all__ = [
    "ScopeCategory",
    "scope_categories",
    "category_range",
    "is_valid_category_number",
    "get_category",
    "default_filter_profile",
]
