# -*- coding: utf-8 -*-
"""
Emission-Factor Table Loader

Parses the emission-factor reference CSV into an immutable
``EmissionFactorTable``. The table is loaded once and treated as
read-only for the rest of the session.

Supports:
    - English headers (``category, separate, raw_material, unit, kg_co2eq,
      physical_state, scope_tag``) and the Korean headers of the source
      spreadsheet (``대분류, 구분, 원료/에너지, 단위, 탄소발자국``)
    - UTF-8 with or without BOM
    - Repair of malformed mantissas such as ``1.23.E-03``
    - SHA-256 hash of the source text for provenance

Rows missing any of the three lookup keys are skipped. Unparsable factors
load as 0 with a warning; negative factors are skipped with a warning.

Example:
    >>> from supplychain_esg.emissions.factor_table import load_factor_table
    >>> table = load_factor_table("emission_factors.csv")
    >>> print(len(table), table.categories())
"""

from __future__ import annotations

import csv
import hashlib
import io
import logging
import re
import time
from decimal import Decimal, InvalidOperation
from pathlib import Path
from typing import Dict, Iterable, Iterator, List, Optional, Tuple, Union

from supplychain_esg import metrics
from supplychain_esg.emissions.models import EmissionFactorEntry, SelectionPath
from supplychain_esg.exceptions import DataLoadError

logger = logging.getLogger(__name__)

DEFAULT_FACTOR_TABLE_PATH = Path(__file__).parent.parent / "data" / "emission_factors.csv"

# ---------------------------------------------------------------------------
# Header aliases
# ---------------------------------------------------------------------------

_HEADER_ALIASES: Dict[str, str] = {
    # English
    "category": "category",
    "major_category": "category",
    "separate": "separate",
    "subcategory": "separate",
    "raw_material": "raw_material",
    "rawmaterial": "raw_material",
    "material": "raw_material",
    "unit": "unit",
    "kg_co2eq": "kg_co2eq",
    "kgco2eq": "kg_co2eq",
    "emission_factor": "kg_co2eq",
    "physical_state": "physical_state",
    "state": "physical_state",
    "scope_tag": "scope_tag",
    "scope": "scope_tag",
    # Source spreadsheet
    "대분류": "category",
    "구분": "separate",
    "원료/에너지": "raw_material",
    "단위": "unit",
    "탄소발자국": "kg_co2eq",
    "물리적 상태": "physical_state",
    "스코프": "scope_tag",
}

_REQUIRED_KEYS = ("category", "separate", "raw_material")

# "1.23.E-03" -> "1.23E-03"
_MALFORMED_MANTISSA = re.compile(r"(\.\d+)\.(?=[Ee])")

_ZERO = Decimal("0")


def canonical_header(header: str) -> Optional[str]:
    """Map a CSV header to its canonical field name, or None if unknown."""
    key = header.strip().lstrip("\ufeff").strip().lower()
    return _HEADER_ALIASES.get(key)


def parse_factor(raw: Optional[str]) -> Optional[Decimal]:
    """Parse an emission-factor cell.

    Returns:
        The parsed value, or None when the cell cannot be parsed as a
        finite number.
    """
    if raw is None:
        return None
    text = _MALFORMED_MANTISSA.sub(r"\1", raw.strip(), count=1)
    if not text:
        return None
    try:
        value = Decimal(text)
    except InvalidOperation:
        return None
    if not value.is_finite():
        return None
    return value


# ---------------------------------------------------------------------------
# Table
# ---------------------------------------------------------------------------


class EmissionFactorTable:
    """Immutable, ordered collection of emission-factor rows.

    Lookups by selection path return the first row in file order, so a
    duplicated path never changes which factor is used.
    """

    def __init__(self, entries: Iterable[EmissionFactorEntry], source: str = "", source_hash: str = ""):
        self._entries: Tuple[EmissionFactorEntry, ...] = tuple(entries)
        self.source = source
        self.source_hash = source_hash
        self._index: Dict[Tuple[str, str, str], EmissionFactorEntry] = {}
        for entry in self._entries:
            self._index.setdefault(
                (entry.category, entry.separate, entry.raw_material), entry,
            )

    @property
    def entries(self) -> Tuple[EmissionFactorEntry, ...]:
        return self._entries

    def __iter__(self) -> Iterator[EmissionFactorEntry]:
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def find(self, path: SelectionPath) -> Optional[EmissionFactorEntry]:
        return self._index.get((path.category, path.separate, path.raw_material))

    def categories(self) -> List[str]:
        return _unique(e.category for e in self._entries)

    def __repr__(self) -> str:
        return f"EmissionFactorTable(rows={len(self._entries)}, source={self.source!r})"


def _unique(values: Iterable[str]) -> List[str]:
    """Distinct non-empty values in first-seen order."""
    seen: Dict[str, None] = {}
    for value in values:
        if value and value not in seen:
            seen[value] = None
    return list(seen)


# ---------------------------------------------------------------------------
# Loading
# ---------------------------------------------------------------------------


def parse_factor_table(text: str, source: str = "<text>") -> EmissionFactorTable:
    """Parse emission-factor CSV text.

    Args:
        text: CSV content with a header row.
        source: Label used in log messages and on the table.

    Returns:
        EmissionFactorTable of the valid rows in file order.

    Raises:
        DataLoadError: If the header lacks one of the three lookup keys or
            the CSV is malformed.
    """
    start = time.perf_counter()
    text = text.lstrip("\ufeff")
    reader = csv.reader(io.StringIO(text))

    try:
        header = next(reader, None)
        if header is None:
            raise DataLoadError("emission-factor table is empty", source=source)

        columns: Dict[str, int] = {}
        for position, name in enumerate(header):
            field = canonical_header(name)
            if field is not None and field not in columns:
                columns[field] = position
        missing = [key for key in _REQUIRED_KEYS if key not in columns]
        if missing:
            raise DataLoadError(
                f"emission-factor table header is missing {', '.join(missing)}",
                source=source,
            )

        entries: List[EmissionFactorEntry] = []
        skipped = 0
        for line_number, row in enumerate(reader, start=2):
            values = {
                field: row[position].strip() if position < len(row) else ""
                for field, position in columns.items()
            }
            if not all(values[key] for key in _REQUIRED_KEYS):
                skipped += 1
                continue

            raw_factor = values.get("kg_co2eq", "")
            factor = parse_factor(raw_factor)
            if factor is None:
                logger.warning(
                    "%s line %d: unparsable factor %r for %s/%s/%s, using 0",
                    source, line_number, raw_factor,
                    values["category"], values["separate"], values["raw_material"],
                )
                factor = _ZERO
            elif factor < 0:
                logger.warning(
                    "%s line %d: negative factor %s for %s/%s/%s, row skipped",
                    source, line_number, factor,
                    values["category"], values["separate"], values["raw_material"],
                )
                skipped += 1
                continue

            entries.append(
                EmissionFactorEntry(
                    category=values["category"],
                    separate=values["separate"],
                    raw_material=values["raw_material"],
                    unit=values.get("unit", ""),
                    kg_co2eq=factor,
                    physical_state=values.get("physical_state", ""),
                    scope_tag=values.get("scope_tag", ""),
                )
            )
    except csv.Error as e:
        raise DataLoadError(
            f"malformed emission-factor CSV: {e}", source=source, cause=e,
        ) from e

    table = EmissionFactorTable(
        entries,
        source=source,
        source_hash=hashlib.sha256(text.encode("utf-8")).hexdigest(),
    )
    metrics.record_processing_duration("load", time.perf_counter() - start)
    logger.info(
        "Loaded %d emission factors from %s (%d rows skipped)",
        len(table), source, skipped,
    )
    return table


def load_factor_table(source: Union[str, Path, None] = None) -> EmissionFactorTable:
    """Load the emission-factor table from a path or CSV text.

    A ``str`` containing a line break is treated as CSV text; any other
    ``str`` or ``Path`` is read as a UTF-8 file (BOM tolerated). With no
    argument the packaged sample table is loaded.

    Raises:
        DataLoadError: If the file cannot be read or parsed.
    """
    if source is None:
        source = DEFAULT_FACTOR_TABLE_PATH
    if isinstance(source, str) and ("\n" in source or "\r" in source):
        return parse_factor_table(source)

    path = Path(source)
    try:
        with open(path, "r", encoding="utf-8-sig", newline="") as f:
            text = f.read()
    except OSError as e:
        raise DataLoadError(
            f"cannot read emission-factor table: {path}", source=str(path), cause=e,
        ) from e
    except UnicodeDecodeError as e:
        raise DataLoadError(
            f"emission-factor table is not UTF-8: {path}", source=str(path), cause=e,
        ) from e
    return parse_factor_table(text, source=str(path))


__all__ = [
    "DEFAULT_FACTOR_TABLE_PATH",
    "EmissionFactorTable",
    "canonical_header",
    "parse_factor",
    "parse_factor_table",
    "load_factor_table",
]
