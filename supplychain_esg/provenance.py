# -*- coding: utf-8 -*-
"""
Provenance hashing for supply-chain ESG results.

Every scoring and calculation result carries a SHA-256 hash of its
content so an exported report can later be checked against the inputs
that produced it. Hashes are deterministic: the payload is serialized as
canonical JSON (sorted keys, compact separators) with ``Decimal`` values
rendered as strings, so ``Decimal("2500.000000")`` and ``2500.0`` never
collide.

Example:
    >>> from supplychain_esg.provenance import compute_provenance_hash
    >>> compute_provenance_hash({"b": 1, "a": 2}) == compute_provenance_hash({"a": 2, "b": 1})
    True
"""

from __future__ import annotations

import hashlib
import json
from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from typing import Any


def _json_default(value: Any) -> Any:
    if isinstance(value, Decimal):
        return str(value)
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    if hasattr(value, "model_dump"):
        return value.model_dump(mode="json")
    raise TypeError(f"Object of type {type(value).__name__} is not JSON serializable")


def canonical_json(data: Any) -> str:
    """Serialize ``data`` to the canonical JSON form used for hashing."""
    return json.dumps(
        data, sort_keys=True, separators=(",", ":"), default=_json_default,
    )


def compute_provenance_hash(data: Any) -> str:
    """Compute the SHA-256 hex digest of ``data``'s canonical JSON form.

    Args:
        data: Any JSON-serializable structure; ``Decimal``, ``Enum``,
            datetimes and pydantic models are accepted.

    Returns:
        64-character lowercase hex digest.
    """
    return hashlib.sha256(canonical_json(data).encode("utf-8")).hexdigest()


__all__ = ["canonical_json", "compute_provenance_hash"]
