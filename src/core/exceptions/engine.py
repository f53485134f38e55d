"""
Metrics Engine Exceptions

Exceptions for the metrics engine boundary. Each engine result code maps
to exactly one class here; the mapping lives in
``src.metrics.errors.result_to_error``.

Result codes:
    0   OK (no error)
    1   NotSupportedError
    2   PermissionDeniedError
    3   NotFoundError
    4   InvalidParamError
    5   EngineIOError
    99  InternalError
    *   UnknownEngineCodeError (code and message preserved verbatim)

NotInitializedError is raised by this layer only; the engine never
reports it.

Author: System Architect
Date: 2025-12-08
"""

from typing import Any

from src.core.exceptions.base import HostProbeError


class EngineError(HostProbeError):
    """
    Base exception for metrics engine errors.

    Attributes:
        code: Engine result code associated with the error class
    """

    code: int = -1
    default_message: str = "engine error"

    def __init__(self, message: str | None = None, details: dict[str, Any] | None = None):
        super().__init__(message or self.default_message, details=details)


class NotSupportedError(EngineError):
    """Raised when the operation is not supported on this platform."""

    code = 1
    default_message = "operation not supported on this platform"


class PermissionDeniedError(EngineError):
    """Raised when the engine lacks privileges for the requested data."""

    code = 2
    default_message = "permission denied"


class NotFoundError(EngineError):
    """Raised when the requested resource (pid, interface, device) does not exist."""

    code = 3
    default_message = "resource not found"


class InvalidParamError(EngineError):
    """Raised when the engine rejects a parameter."""

    code = 4
    default_message = "invalid parameter"


class EngineIOError(EngineError):
    """Raised when reading the underlying OS source fails."""

    code = 5
    default_message = "I/O error"


class InternalError(EngineError):
    """Raised when the engine reports an internal failure."""

    code = 99
    default_message = "internal error"


class NotInitializedError(EngineError):
    """Raised when a collection is attempted before the engine is initialized."""

    default_message = "probe library not initialized"


class UnknownEngineCodeError(EngineError):
    """
    Raised for engine result codes outside the known set.

    The raw code and the engine message are kept verbatim so the caller
    can report them.

    Example:
        >>> err = UnknownEngineCodeError(42, "weird")
        >>> str(err)
        'probe error (code 42): weird'
    """

    def __init__(self, code: int, engine_message: str = ""):
        self.code = code
        self.engine_message = engine_message
        super().__init__(
            f"probe error (code {code}): {engine_message}",
            details={"code": code, "engine_message": engine_message},
        )
