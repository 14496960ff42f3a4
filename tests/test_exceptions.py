"""Tests for the dreamcatcher exception hierarchy."""

import pytest

from dreamcatcher.exceptions import (
    ConfigurationError,
    ContractViolation,
    DreamcatcherError,
)


class TestExceptionTypes:
    """Tests for exception types."""

    def test_base_error(self):
        """Test base error with message and context."""
        error = DreamcatcherError("Base error", {"key": "value"})

        assert str(error) == "Base error"
        assert error.context == {"key": "value"}
        assert error.details is error.context

        assert DreamcatcherError("Simple error").context == {}

    def test_details_take_precedence(self):
        """Test that details win over context."""
        error = DreamcatcherError("x", context={"a": 1}, details={"b": 2})

        assert error.context == {"b": 2}

    def test_configuration_error(self):
        """Test ConfigurationError is a DreamcatcherError."""
        error = ConfigurationError("Bad machine", context={"state": "Z"})

        assert isinstance(error, DreamcatcherError)
        assert error.context["state"] == "Z"

    def test_contract_violation(self):
        """Test ContractViolation with from/to states."""
        error = ContractViolation(
            from_state="A",
            to_state="B",
            message="returned int",
            details={"function": "broken"},
        )

        assert isinstance(error, DreamcatcherError)
        assert "Transition from 'A' to 'B' violated its contract: returned int" in str(error)
        assert error.from_state == "A"
        assert error.to_state == "B"
        assert error.details["function"] == "broken"

    def test_catch_all(self):
        """Test catching every library error through the base class."""
        with pytest.raises(DreamcatcherError):
            raise ContractViolation("A", "B", "oops")

