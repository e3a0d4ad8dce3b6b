# -*- coding: utf-8 -*-
"""
Supply-Chain ESG Configuration

Centralized configuration for the supply-chain ESG core covering:
- Reference data locations (question catalog YAML, emission-factor CSV)
- Emission calculation bounds (integer/fractional digit limits)
- Result precision
- Report pagination sizes
- Self-assessment strictness (unknown question ids)
- Logging

All settings can be overridden via environment variables with the
``SUPPLYCHAIN_ESG_`` prefix (e.g. ``SUPPLYCHAIN_ESG_ACTIVITY_MAX_INTEGER_DIGITS``).

Example:
    >>> from supplychain_esg.config import get_config
    >>> cfg = get_config()
    >>> print(cfg.activity_max_integer_digits, cfg.report_violation_page_size)
"""

from __future__ import annotations

import logging
import os
import threading
from dataclasses import dataclass
from decimal import Decimal
from typing import Any, Optional

from supplychain_esg.exceptions import ConfigurationError

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Environment variable prefix
# ---------------------------------------------------------------------------

_ENV_PREFIX = "SUPPLYCHAIN_ESG_"

_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


# ---------------------------------------------------------------------------
# SupplyChainESGConfig
# ---------------------------------------------------------------------------


@dataclass
class SupplyChainESGConfig:
    """Complete configuration for the supply-chain ESG core.

    Attributes:
        question_catalog_path: YAML questionnaire to load; empty means the
            packaged CSDDD questionnaire.
        factor_table_path: Emission-factor CSV to load; empty means the
            packaged sample table.
        activity_max_integer_digits: Integer digits allowed in an activity amount.
        activity_max_fraction_digits: Fractional digits allowed in an activity amount.
        factor_max_integer_digits: Integer digits allowed in an emission factor.
        factor_max_fraction_digits: Fractional digits allowed in an emission factor.
        total_max_integer_digits: Integer digits allowed in a total emission.
        result_decimal_places: Places the total emission is rounded to.
        report_violation_page_size: Rows per category violation table page.
        report_critical_page_size: Rows per critical-violation report page.
        reject_unknown_questions: Fail normalisation for ids absent from the
            catalog instead of bucketing them under ``UNKNOWN``.
        log_level: Logging level applied to the ``supplychain_esg`` logger.
    """

    # -- Reference data ------------------------------------------------------
    question_catalog_path: str = ""
    factor_table_path: str = ""

    # -- Calculation bounds --------------------------------------------------
    activity_max_integer_digits: int = 12
    activity_max_fraction_digits: int = 3
    factor_max_integer_digits: int = 9
    factor_max_fraction_digits: int = 6
    total_max_integer_digits: int = 15
    result_decimal_places: int = 6

    # -- Report pagination ---------------------------------------------------
    report_violation_page_size: int = 10
    report_critical_page_size: int = 8

    # -- Self-assessment -----------------------------------------------------
    reject_unknown_questions: bool = False

    # -- Logging -------------------------------------------------------------
    log_level: str = "INFO"

    def __post_init__(self) -> None:
        for name in (
            "activity_max_integer_digits",
            "activity_max_fraction_digits",
            "factor_max_integer_digits",
            "factor_max_fraction_digits",
            "total_max_integer_digits",
            "result_decimal_places",
        ):
            if getattr(self, name) < 0:
                raise ConfigurationError(
                    f"{name} must be >= 0",
                    context={"field": name, "value": getattr(self, name)},
                )
        for name in ("report_violation_page_size", "report_critical_page_size"):
            if getattr(self, name) < 1:
                raise ConfigurationError(
                    f"{name} must be >= 1",
                    context={"field": name, "value": getattr(self, name)},
                )
        if self.log_level.upper() not in _LOG_LEVELS:
            raise ConfigurationError(
                f"log_level must be one of {', '.join(_LOG_LEVELS)}",
                context={"field": "log_level", "value": self.log_level},
            )

    # ------------------------------------------------------------------
    # Derived bounds
    # ------------------------------------------------------------------

    @staticmethod
    def _bound(integer_digits: int, fraction_digits: int) -> Decimal:
        """Largest value expressible with the given digit counts."""
        integer_part = "9" * integer_digits or "0"
        if fraction_digits == 0:
            return Decimal(integer_part)
        return Decimal(f"{integer_part}.{'9' * fraction_digits}")

    @property
    def max_activity_amount(self) -> Decimal:
        return self._bound(
            self.activity_max_integer_digits, self.activity_max_fraction_digits,
        )

    @property
    def max_emission_factor(self) -> Decimal:
        return self._bound(
            self.factor_max_integer_digits, self.factor_max_fraction_digits,
        )

    @property
    def max_total_emission(self) -> Decimal:
        return self._bound(
            self.total_max_integer_digits, self.result_decimal_places,
        )

    # ------------------------------------------------------------------
    # Factory helpers
    # ------------------------------------------------------------------

    @classmethod
    def from_env(cls) -> SupplyChainESGConfig:
        """Build a SupplyChainESGConfig from environment variables.

        Every field can be overridden via ``SUPPLYCHAIN_ESG_<FIELD_UPPER>``.
        Boolean values accept ``true/1/yes`` (case-insensitive).
        Integer values are parsed via ``int()``.

        Returns:
            Populated SupplyChainESGConfig instance.
        """
        prefix = _ENV_PREFIX

        def _env(name: str, default: Any = None) -> Optional[str]:
            return os.environ.get(f"{prefix}{name}", default)

        def _bool(name: str, default: bool) -> bool:
            val = _env(name)
            if val is None:
                return default
            return val.lower() in ("true", "1", "yes")

        def _int(name: str, default: int) -> int:
            val = _env(name)
            if val is None:
                return default
            try:
                return int(val)
            except ValueError:
                logger.warning(
                    "Invalid integer for %s%s=%s, using default %d",
                    prefix, name, val, default,
                )
                return default

        def _str(name: str, default: str) -> str:
            val = _env(name)
            if val is None:
                return default
            return val

        def _level(name: str, default: str) -> str:
            val = _str(name, default)
            if val.upper() not in _LOG_LEVELS:
                logger.warning(
                    "Invalid log level for %s%s=%s, using default %s",
                    prefix, name, val, default,
                )
                return default
            return val

        config = cls(
            # Reference data
            question_catalog_path=_str(
                "QUESTION_CATALOG_PATH", cls.question_catalog_path,
            ),
            factor_table_path=_str(
                "FACTOR_TABLE_PATH", cls.factor_table_path,
            ),
            # Calculation bounds
            activity_max_integer_digits=_int(
                "ACTIVITY_MAX_INTEGER_DIGITS", cls.activity_max_integer_digits,
            ),
            activity_max_fraction_digits=_int(
                "ACTIVITY_MAX_FRACTION_DIGITS", cls.activity_max_fraction_digits,
            ),
            factor_max_integer_digits=_int(
                "FACTOR_MAX_INTEGER_DIGITS", cls.factor_max_integer_digits,
            ),
            factor_max_fraction_digits=_int(
                "FACTOR_MAX_FRACTION_DIGITS", cls.factor_max_fraction_digits,
            ),
            total_max_integer_digits=_int(
                "TOTAL_MAX_INTEGER_DIGITS", cls.total_max_integer_digits,
            ),
            result_decimal_places=_int(
                "RESULT_DECIMAL_PLACES", cls.result_decimal_places,
            ),
            # Report pagination
            report_violation_page_size=_int(
                "REPORT_VIOLATION_PAGE_SIZE", cls.report_violation_page_size,
            ),
            report_critical_page_size=_int(
                "REPORT_CRITICAL_PAGE_SIZE", cls.report_critical_page_size,
            ),
            # Self-assessment
            reject_unknown_questions=_bool(
                "REJECT_UNKNOWN_QUESTIONS", cls.reject_unknown_questions,
            ),
            # Logging
            log_level=_level("LOG_LEVEL", cls.log_level),
        )

        logger.info(
            "SupplyChainESGConfig loaded: activity=%d.%d, factor=%d.%d, "
            "total=%d.%d, pages=%d/%d, reject_unknown=%s",
            config.activity_max_integer_digits,
            config.activity_max_fraction_digits,
            config.factor_max_integer_digits,
            config.factor_max_fraction_digits,
            config.total_max_integer_digits,
            config.result_decimal_places,
            config.report_violation_page_size,
            config.report_critical_page_size,
            config.reject_unknown_questions,
        )
        return config


# ---------------------------------------------------------------------------
# Thread-safe singleton accessor
# ---------------------------------------------------------------------------

_config_instance: Optional[SupplyChainESGConfig] = None
_config_lock = threading.Lock()


def get_config() -> SupplyChainESGConfig:
    """Return the singleton SupplyChainESGConfig, creating from env if needed.

    Returns:
        SupplyChainESGConfig singleton instance.
    """
    global _config_instance
    if _config_instance is None:
        with _config_lock:
            if _config_instance is None:
                _config_instance = SupplyChainESGConfig.from_env()
    return _config_instance


def set_config(config: SupplyChainESGConfig) -> None:
    """Replace the singleton SupplyChainESGConfig (useful for testing).

    Args:
        config: New configuration to install.
    """
    global _config_instance
    with _config_lock:
        _config_instance = config
    logger.info("SupplyChainESGConfig replaced programmatically")


def reset_config() -> None:
    """Reset the singleton (primarily for test teardown)."""
    global _config_instance
    with _config_lock:
        _config_instance = None


__all__ = [
    "SupplyChainESGConfig",
    "get_config",
    "set_config",
    "reset_config",
]
