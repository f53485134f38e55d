"""
Unit Tests for Core Exceptions

Tests the exception hierarchy, messages and detail handling.
"""

import pytest

from src.core.exceptions import (
    ContextCancelledError,
    ContextDeadlineExceededError,
    ContextError,
    EmptyCommandError,
    EngineError,
    EngineIOError,
    HostProbeError,
    HTTPStatusMismatchError,
    InternalError,
    InvalidCommandFormatError,
    InvalidParamError,
    NotFoundError,
    NotInitializedError,
    NotSupportedError,
    PermissionDeniedError,
    ProbeConnectionError,
    UnknownEngineCodeError,
    UnknownProberTypeError,
)


@pytest.mark.unit
class TestHostProbeError:
    """Test the base exception class."""

    def test_base_error_creation(self):
        """Test that HostProbeError can be created."""
        error = HostProbeError("Test message")
        assert str(error) == "Test message"

    def test_base_error_with_details(self):
        """Test HostProbeError with additional details."""
        details = {"key": "value", "code": 123}
        error = HostProbeError("Test message", details=details)

        assert error.details == details
        assert error.message == "Test message"

    def test_details_are_copied(self):
        """Test that caller-owned details are not aliased."""
        details = {"key": "value"}
        error = HostProbeError("Test", details=details)
        details["key"] = "changed"
        assert error.details["key"] == "value"

    def test_base_error_default_values(self):
        """Test default values for HostProbeError."""
        error = HostProbeError("Test")
        assert error.details == {}

    def test_to_dict(self):
        """Test dictionary conversion for logging."""
        error = NotFoundError(details={"interface": "eth7"})
        assert error.to_dict() == {
            "error_type": "NotFoundError",
            "message": "resource not found",
            "details": {"interface": "eth7"},
        }

    def test_with_suggestion_and_context_chain(self):
        """Test that with_suggestion / with_context return self."""
        error = HostProbeError("Test").with_suggestion("retry later").with_context(pid=42)
        assert error.details == {"suggestion": "retry later", "pid": 42}

    def test_from_exception_records_original(self):
        """Test wrapping another exception."""
        original = ConnectionRefusedError("refused")
        error = ProbeConnectionError.from_exception(original, "connection failed: refused", address="x:1")

        assert isinstance(error, ProbeConnectionError)
        assert str(error) == "connection failed: refused"
        assert error.details["original_error"] == "ConnectionRefusedError"
        assert error.details["address"] == "x:1"

    def test_repr_includes_details(self):
        """Test repr output."""
        error = HostProbeError("boom", details={"a": 1})
        assert repr(error) == "HostProbeError(message='boom', details={'a': 1})"


@pytest.mark.unit
class TestEngineErrors:
    """Test engine error classes and codes."""

    @pytest.mark.parametrize(
        "error_class, code",
        [
            (NotSupportedError, 1),
            (PermissionDeniedError, 2),
            (NotFoundError, 3),
            (InvalidParamError, 4),
            (EngineIOError, 5),
            (InternalError, 99),
        ],
    )
    def test_codes(self, error_class, code):
        """Test that each engine error carries its result code."""
        error = error_class()
        assert error.code == code
        assert isinstance(error, EngineError)
        assert str(error)

    def test_not_initialized_message(self):
        """Test the NotInitializedError default message."""
        assert str(NotInitializedError()) == "probe library not initialized"

    def test_unknown_code_keeps_code_and_message(self):
        """Test that unknown codes are carried verbatim."""
        error = UnknownEngineCodeError(42, "weird")
        assert str(error) == "probe error (code 42): weird"
        assert error.code == 42
        assert error.engine_message == "weird"


@pytest.mark.unit
class TestProbeErrors:
    """Test prober error classes."""

    def test_unknown_prober_type(self):
        """Test UnknownProberTypeError message and kind."""
        error = UnknownProberTypeError("bogus", available=["tcp"])
        assert str(error) == "unknown prober type: bogus"
        assert error.kind == "bogus"
        assert error.details["available"] == ["tcp"]

    def test_http_status_mismatch(self):
        """Test HTTPStatusMismatchError message."""
        error = HTTPStatusMismatchError(404, 200)
        assert str(error) == "unexpected status code: 404 (expected 200)"
        assert (error.actual, error.expected) == (404, 200)

    def test_http_mismatch_distinct_from_transport(self):
        """Test that a status mismatch is not a connection error."""
        assert not isinstance(HTTPStatusMismatchError(500, 200), ProbeConnectionError)

    def test_command_errors(self):
        """Test exec validation errors."""
        assert str(EmptyCommandError()) == "empty command"
        error = InvalidCommandFormatError("ls -la")
        assert "invalid command format" in str(error)
        assert error.command == "ls -la"


@pytest.mark.unit
class TestContextErrors:
    """Test context termination errors."""

    def test_messages(self):
        """Test cancellation and deadline messages."""
        assert str(ContextCancelledError()) == "context canceled"
        assert str(ContextDeadlineExceededError()) == "context deadline exceeded"

    def test_hierarchy(self):
        """Test that both inherit from ContextError."""
        assert isinstance(ContextCancelledError(), ContextError)
        assert isinstance(ContextDeadlineExceededError(), HostProbeError)
