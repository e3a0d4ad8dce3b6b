"""Tests for the supply-chain ESG exception hierarchy.

Test suite covering:
- Base exception functionality
- Error kind taxonomy of each subclass
- Rich error context
- Exception serialization
- Exception utilities
"""

import json
from datetime import datetime

import pytest

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
    format_exception_chain,
)


# ==============================================================================
# Base Exception Tests
# ==============================================================================

class TestSupplyChainESGException:
    """Tests for base SupplyChainESGException."""

    def test_create_basic_exception(self):
        """Can create basic exception with message."""
        exc = SupplyChainESGException("Something went wrong")

        assert exc.message == "Something went wrong"
        assert exc.error_code.startswith("ESG_")
        assert exc.kind is ErrorKind.VALIDATION
        assert exc.context == {}
        assert isinstance(exc.timestamp, datetime)

    def test_explicit_error_code(self):
        """Explicit error code overrides the generated one."""
        exc = SupplyChainESGException("Test error", error_code="ESG_TEST_001", context={"k": 1})

        assert exc.error_code == "ESG_TEST_001"
        assert exc.context == {"k": 1}

    def test_str_and_repr(self):
        """String forms include code and message."""
        exc = EmptyResultError("nothing produced")

        assert str(exc) == "[ESG_EMPTY_RESULT_ERROR] - nothing produced"
        assert "EmptyResultError" in repr(exc)
        assert "empty_result" in repr(exc)

    def test_to_dict_and_json(self):
        """Exceptions serialize to dict and JSON."""
        exc = InvalidValueError("bad", field="quantity", value=-1)

        data = exc.to_dict()
        assert data["error_type"] == "InvalidValueError"
        assert data["kind"] == "invalid_value"
        assert data["context"] == {"field": "quantity", "value": "-1"}
        assert json.loads(exc.to_json())["message"] == "bad"


# ==============================================================================
# Subclass Tests
# ==============================================================================

class TestErrorKinds:
    """Each exception maps onto the error taxonomy."""

    @pytest.mark.parametrize("exc,kind", [
        (AnswerTypeError("x"), ErrorKind.TYPE),
        (InvalidValueError("x"), ErrorKind.INVALID_VALUE),
        (InvalidAnswerError("x"), ErrorKind.INVALID_VALUE),
        (ValidationError("x"), ErrorKind.VALIDATION),
        (AnswerBatchError("x", ["a"]), ErrorKind.VALIDATION),
        (EmptyResultError("x"), ErrorKind.EMPTY_RESULT),
        (FactorNotFoundError("x"), ErrorKind.NOT_FOUND),
        (ConfigurationError("x"), ErrorKind.VALIDATION),
        (DataLoadError("x"), ErrorKind.VALIDATION),
    ])
    def test_kind(self, exc, kind):
        assert exc.kind is kind
        assert isinstance(exc, SupplyChainESGException)

    def test_invalid_answer_is_invalid_value(self):
        exc = InvalidAnswerError("invalid answer", raw_value="maybe", allowed=["yes", "no"])

        assert isinstance(exc, InvalidValueError)
        assert exc.context == {"allowed": ["yes", "no"], "field": "answer", "value": "maybe"}

    def test_answer_type_error_context(self):
        assert AnswerTypeError("x", actual_type="int").context == {"actual_type": "int"}

    def test_answer_batch_error_lists_every_error(self):
        exc = AnswerBatchError("answer conversion failed", ["first", "second"])

        assert isinstance(exc, ValidationError)
        assert exc.errors == ["first", "second"]
        assert exc.message == "answer conversion failed:\nfirst\nsecond"
        assert exc.context["error_count"] == 2

    def test_validation_error_invalid_fields(self):
        exc = ValidationError("bad", invalid_fields={"1.1": "duplicate"})

        assert exc.context == {"invalid_fields": {"1.1": "duplicate"}}

    def test_data_load_error_cause(self):
        exc = DataLoadError("load failed", source="f.csv", cause=OSError("denied"))

        assert exc.context == {"source": "f.csv", "cause": "denied", "cause_type": "OSError"}

    def test_error_codes(self):
        assert AnswerBatchError("x", []).error_code == "ESG_ANSWER_BATCH_ERROR"
        assert FactorNotFoundError("x").error_code == "ESG_FACTOR_NOT_FOUND_ERROR"


# ==============================================================================
# Utility Tests
# ==============================================================================

class TestFormatExceptionChain:
    """Tests for format_exception_chain."""

    def test_chain(self):
        try:
            try:
                raise OSError("disk")
            except OSError as e:
                raise DataLoadError("load failed", source="f.csv", cause=e) from e
        except DataLoadError as exc:
            text = format_exception_chain(exc)

        lines = text.splitlines()
        assert lines[0] == "[ESG_DATA_LOAD_ERROR] - load failed"
        assert lines[1].startswith("  Context:")
        assert lines[2] == "OSError: disk"
