"""
Supply-Chain ESG Core
=====================

Domain logic of a supplier ESG dashboard, free of any UI or transport:

- CSDDD self-assessment: answer normalisation, question catalog,
  category-weighted scoring with critical-violation grade override, and
  paginated violation reports.
- Scope 1/2/3 emissions: CSV emission-factor table, cascading
  category -> separate -> raw material resolution with declarative
  filters, bounded fixed-precision calculation and roll-ups.

Everything is synchronous, deterministic and in-memory; persistence and
HTTP submission belong to the caller.
"""

__version__ = "0.3.0"

from supplychain_esg.config import SupplyChainESGConfig, get_config, reset_config, set_config
from supplychain_esg.exceptions import (
    AnswerBatchError,
    AnswerTypeError,
    ConfigurationError,
    DataLoadError,
    EmptyResultError,
    ErrorKind,
    FactorNotFoundError,
    InvalidAnswerError,
    InvalidValueError,
    SupplyChainESGException,
    ValidationError,
)
from supplychain_esg.setup import SupplyChainESGService

__all__ = [
    "__version__",
    "SupplyChainESGConfig",
    "get_config",
    "set_config",
    "reset_config",
    "AnswerBatchError",
    "AnswerTypeError",
    "ConfigurationError",
    "DataLoadError",
    "EmptyResultError",
    "ErrorKind",
    "FactorNotFoundError",
    "InvalidAnswerError",
    "InvalidValueError",
    "SupplyChainESGException",
    "ValidationError",
    "SupplyChainESGService",
]
