"""
Call Context Exceptions

Errors reported when a CallContext is cancelled or its deadline has passed.
Every prober and collector checks the context before doing any work and
returns (or raises) one of these.

Author: System Architect
Date: 2025-12-08
"""

from src.core.exceptions.base import HostProbeError


class ContextError(HostProbeError):
    """Base exception for call context termination."""
    pass


class ContextCancelledError(ContextError):
    """Raised when the call context was cancelled by its owner."""

    def __init__(self, message: str = "context canceled", details=None):
        super().__init__(message, details=details)


class ContextDeadlineExceededError(ContextError):
    """Raised when the call context deadline has passed."""

    def __init__(self, message: str = "context deadline exceeded", details=None):
        super().__init__(message, details=details)
