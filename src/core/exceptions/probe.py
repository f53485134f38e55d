"""
Prober Exceptions

Exceptions stored in ``ProbeResult.error`` by the protocol probers, plus
the factory error raised for unknown prober kinds.

Author: System Architect
Date: 2025-12-08
"""

from src.core.exceptions.base import HostProbeError


class ProberError(HostProbeError):
    """Base exception for all prober failures."""
    pass


class UnknownProberTypeError(ProberError):
    """
    Raised when the factory is asked for a prober kind it does not know.

    Attributes:
        kind: The requested kind
    """

    def __init__(self, kind: str, available: list[str] | None = None):
        self.kind = kind
        super().__init__(
            f"unknown prober type: {kind}",
            details={"kind": kind, "available": available or []},
        )


class ProbeConnectionError(ProberError):
    """Raised when resolving, dialing, reading or writing a target fails."""
    pass


class HTTPStatusMismatchError(ProberError):
    """
    Raised when an HTTP target answers with an unexpected status code.

    Distinct from ProbeConnectionError: the transport worked, the
    application answered wrongly.
    """

    def __init__(self, actual: int, expected: int):
        self.actual = actual
        self.expected = expected
        super().__init__(
            f"unexpected status code: {actual} (expected {expected})",
            details={"actual": actual, "expected": expected},
        )


class EmptyCommandError(ProberError):
    """Raised when an exec target has no command."""

    def __init__(self, message: str = "empty command", details=None):
        super().__init__(message, details=details)


class InvalidCommandFormatError(ProberError):
    """
    Raised when a command string contains whitespace but no argument list.

    Such commands are rejected instead of being split, because shell
    quoting rules cannot be reproduced reliably.
    """

    def __init__(self, command: str):
        self.command = command
        super().__init__(
            "invalid command format: command contains spaces but no args provided; "
            "use the args field for arguments",
            details={"command": command},
        )


class ExecCommandError(ProberError):
    """Raised when an exec command cannot be started or exits non-zero."""
    pass


class GRPCNotServingError(ProberError):
    """Raised when a gRPC health check reports NOT_SERVING."""

    def __init__(self, service: str = ""):
        super().__init__("service not serving", details={"service": service})


class GRPCServiceUnknownError(ProberError):
    """Raised when the gRPC health service does not know the requested service."""

    def __init__(self, service: str = ""):
        super().__init__("service unknown", details={"service": service})


class GRPCUnknownStatusError(ProberError):
    """Raised when the gRPC health check returns an unexpected status."""

    def __init__(self, status: str):
        self.status = status
        super().__init__(f"unknown health status: {status}", details={"status": status})
