# -*- coding: utf-8 -*-
"""
Emission-Factor Resolver

Resolves a ``category -> separate -> raw_material`` selection path to an
emission-factor row. Matching is exact and case-sensitive on all three
keys with no fallback. A miss is an expected outcome (the user may be
mid-selection) and is reported as ``None``; ``resolve_or_raise`` exists
for callers that want an exception instead.

Category-specific filter profiles can narrow the table by auxiliary tags
before the lookup (see ``FilterProfile``).
"""

from __future__ import annotations

import logging
from typing import Iterable, List, Optional, Union

from supplychain_esg import metrics
from supplychain_esg.emissions.factor_table import EmissionFactorTable
from supplychain_esg.emissions.models import (
    EmissionFactorEntry,
    FilterProfile,
    SelectionPath,
)
from supplychain_esg.exceptions import FactorNotFoundError

logger = logging.getLogger(__name__)

FactorSource = Union[EmissionFactorTable, Iterable[EmissionFactorEntry]]


def apply_filters(
    entries: Iterable[EmissionFactorEntry],
    profile: Optional[FilterProfile],
) -> List[EmissionFactorEntry]:
    """Keep the rows that pass every rule of ``profile``.

    A missing profile, or a missing rule for a dimension, means no
    filtering on that dimension.
    """
    entries = list(entries)
    if profile is None or profile.is_empty:
        return entries

    kept = []
    for entry in entries:
        if profile.separate is not None and not profile.separate.keeps(entry.separate):
            continue
        if profile.scope_tag is not None and not profile.scope_tag.keeps(entry.scope_tag):
            continue
        if (
            profile.physical_state is not None
            and not profile.physical_state.keeps(entry.physical_state)
        ):
            continue
        kept.append(entry)
    return kept


def resolve(
    path: SelectionPath,
    table: FactorSource,
    profile: Optional[FilterProfile] = None,
) -> Optional[EmissionFactorEntry]:
    """Return the first row matching ``path``, or None.

    Args:
        path: Selection path; all three keys must match exactly.
        table: Emission-factor table or any iterable of entries.
        profile: Optional filters applied before the lookup.
    """
    entry: Optional[EmissionFactorEntry] = None
    if profile is None and isinstance(table, EmissionFactorTable):
        entry = table.find(path)
    else:
        for candidate in apply_filters(table, profile):
            if (
                candidate.category == path.category
                and candidate.separate == path.separate
                and candidate.raw_material == path.raw_material
            ):
                entry = candidate
                break

    metrics.record_factor_resolution("found" if entry is not None else "not_found")
    if entry is None:
        logger.debug(
            "No emission factor for %s / %s / %s",
            path.category, path.separate, path.raw_material,
        )
    return entry


def resolve_or_raise(
    path: SelectionPath,
    table: FactorSource,
    profile: Optional[FilterProfile] = None,
) -> EmissionFactorEntry:
    """Like ``resolve`` but raise FactorNotFoundError on a miss."""
    entry = resolve(path, table, profile)
    if entry is None:
        raise FactorNotFoundError(
            f"no emission factor for {path.category} / {path.separate} / {path.raw_material}",
            category=path.category,
            separate=path.separate,
            raw_material=path.raw_material,
        )
    return entry


__all__ = ["apply_filters", "resolve", "resolve_or_raise"]
