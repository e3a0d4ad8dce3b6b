"""Supply-Chain ESG Exception Hierarchy.

Every error raised by the library derives from ``SupplyChainESGException``
and carries rich context for logging and for the inline feedback a caller
shows next to the offending field.

Exception Hierarchy:
    SupplyChainESGException (base)
    ├── AnswerTypeError            kind=TYPE
    ├── InvalidValueError          kind=INVALID_VALUE
    │   └── InvalidAnswerError
    ├── ValidationError            kind=VALIDATION
    │   └── AnswerBatchError
    ├── EmptyResultError           kind=EMPTY_RESULT
    ├── FactorNotFoundError        kind=NOT_FOUND
    ├── ConfigurationError         kind=VALIDATION
    └── DataLoadError              kind=VALIDATION

All exceptions include:
- error_code: Unique error identifier (e.g. "ESG_ANSWER_BATCH_ERROR")
- kind: ErrorKind taxonomy member
- context: Dictionary with error-specific details
- timestamp: When the error occurred

Example:
    >>> from supplychain_esg.exceptions import InvalidAnswerError
    >>> raise InvalidAnswerError(
    ...     message='invalid answer "maybe"; allowed values: yes, no, partial',
    ...     raw_value="maybe",
    ... )
"""

import json
import re
from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Optional


class ErrorKind(str, Enum):
    """Error taxonomy shared by every exception and rejection value."""

    TYPE = "type"
    INVALID_VALUE = "invalid_value"
    VALIDATION = "validation"
    EMPTY_RESULT = "empty_result"
    NOT_FOUND = "not_found"


# ==============================================================================
# Base Exception
# ==============================================================================

class SupplyChainESGException(Exception):
    """Base exception for all supply-chain ESG errors.

    Attributes:
        message: Human-readable error message
        error_code: Unique error identifier
        kind: ErrorKind of the failure
        context: Dictionary with error-specific details
        timestamp: When the error occurred
    """

    ERROR_PREFIX = "ESG"
    KIND = ErrorKind.VALIDATION

    def __init__(
        self,
        message: str,
        error_code: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        """Initialize exception with rich context.

        Args:
            message: Human-readable error message
            error_code: Unique error identifier (auto-generated if not provided)
            context: Dictionary with error-specific details
        """
        super().__init__(message)
        self.message = message
        self.error_code = error_code or self._generate_error_code()
        self.kind = self.KIND
        self.context = context or {}
        self.timestamp = datetime.now()

    def _generate_error_code(self) -> str:
        """Generate error code from the class name.

        Returns:
            Error code like "ESG_INVALID_ANSWER_ERROR"
        """
        error_type = re.sub(r'(?<!^)(?=[A-Z])', '_', self.__class__.__name__).upper()
        return f"{self.ERROR_PREFIX}_{error_type}"

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary for serialization."""
        return {
            "error_type": self.__class__.__name__,
            "error_code": self.error_code,
            "kind": self.kind.value,
            "message": self.message,
            "context": self.context,
            "timestamp": self.timestamp.isoformat(),
        }

    def to_json(self) -> str:
        """Convert exception to JSON string."""
        return json.dumps(self.to_dict(), indent=2, default=str)

    def __str__(self) -> str:
        return f"[{self.error_code}] - {self.message}"

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}("
            f"message='{self.message}', "
            f"error_code='{self.error_code}', "
            f"kind='{self.kind.value}')"
        )


# ==============================================================================
# Value Exceptions
# ==============================================================================

class AnswerTypeError(SupplyChainESGException):
    """A value of the wrong primitive type was supplied.

    Example:
        >>> raise AnswerTypeError("answer must be a string", actual_type="int")
    """

    KIND = ErrorKind.TYPE

    def __init__(
        self,
        message: str,
        context: Optional[Dict[str, Any]] = None,
        actual_type: Optional[str] = None,
    ):
        context = context or {}
        if actual_type:
            context["actual_type"] = actual_type
        super().__init__(message, context=context)


class InvalidValueError(SupplyChainESGException):
    """A value has the right type but lies outside the allowed set or range."""

    KIND = ErrorKind.INVALID_VALUE

    def __init__(
        self,
        message: str,
        context: Optional[Dict[str, Any]] = None,
        field: Optional[str] = None,
        value: Any = None,
    ):
        context = context or {}
        if field:
            context["field"] = field
        if value is not None:
            context["value"] = str(value)
        super().__init__(message, context=context)


class InvalidAnswerError(InvalidValueError):
    """An answer string is not one of the canonical answer values."""

    def __init__(
        self,
        message: str,
        raw_value: Any = None,
        allowed: Optional[List[str]] = None,
    ):
        context: Dict[str, Any] = {}
        if allowed:
            context["allowed"] = list(allowed)
        super().__init__(message, context=context, field="answer", value=raw_value)


# ==============================================================================
# Structural Exceptions
# ==============================================================================

class ValidationError(SupplyChainESGException):
    """A batch operation's structural precondition was violated.

    Example:
        >>> raise ValidationError(
        ...     "duplicate question id in submission",
        ...     invalid_fields={"1.1": "appears 2 times"},
        ... )
    """

    KIND = ErrorKind.VALIDATION

    def __init__(
        self,
        message: str,
        context: Optional[Dict[str, Any]] = None,
        invalid_fields: Optional[Dict[str, str]] = None,
    ):
        if invalid_fields:
            context = context or {}
            context["invalid_fields"] = invalid_fields
        super().__init__(message, context=context)


class AnswerBatchError(ValidationError):
    """Several answers in one batch failed; all problems are reported together."""

    def __init__(self, message: str, errors: List[str]):
        self.errors = list(errors)
        super().__init__(
            f"{message}:\n" + "\n".join(self.errors),
            context={"errors": self.errors, "error_count": len(self.errors)},
        )


class EmptyResultError(SupplyChainESGException):
    """An operation expected to produce output produced none."""

    KIND = ErrorKind.EMPTY_RESULT


class FactorNotFoundError(SupplyChainESGException):
    """No emission-factor row matched a selection path.

    Resolution normally returns ``None`` for this case; the exception exists
    for callers that explicitly ask for a raising lookup.
    """

    KIND = ErrorKind.NOT_FOUND

    def __init__(
        self,
        message: str,
        category: str = "",
        separate: str = "",
        raw_material: str = "",
    ):
        super().__init__(
            message,
            context={
                "category": category,
                "separate": separate,
                "raw_material": raw_material,
            },
        )


class ConfigurationError(SupplyChainESGException):
    """Library configuration is invalid."""

    pass


class DataLoadError(SupplyChainESGException):
    """A reference data source (catalog YAML, factor CSV) could not be loaded."""

    def __init__(
        self,
        message: str,
        source: Optional[str] = None,
        cause: Optional[Exception] = None,
    ):
        context: Dict[str, Any] = {}
        if source:
            context["source"] = source
        if cause:
            context["cause"] = str(cause)
            context["cause_type"] = type(cause).__name__
        super().__init__(message, context=context)


# ==============================================================================
# Exception Utilities
# ==============================================================================

def format_exception_chain(exc: Exception) -> str:
    """Format exception chain for logging/display.

    Args:
        exc: Exception to format

    Returns:
        Formatted string with full exception chain
    """
    lines = []
    current: Optional[BaseException] = exc

    while current is not None:
        if isinstance(current, SupplyChainESGException):
            lines.append(str(current))
            lines.append(f"  Context: {current.context}")
        else:
            lines.append(f"{type(current).__name__}: {current}")
        current = getattr(current, "__cause__", None)

    return "\n".join(lines)


__all__ = [
    "ErrorKind",
    "SupplyChainESGException",
    "AnswerTypeError",
    "InvalidValueError",
    "InvalidAnswerError",
    "ValidationError",
    "AnswerBatchError",
    "EmptyResultError",
    "FactorNotFoundError",
    "ConfigurationError",
    "DataLoadError",
    "format_exception_chain",
]
