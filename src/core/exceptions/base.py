"""
Base Exception Class

This module contains ONLY the base exception class that all other exceptions inherit from.
All specialized exceptions are in their respective themed modules.

Author: System Architect
Date: 2025-12-08
"""

from typing import Any


class HostProbeError(Exception):
    """
    Base exception for all host probe errors.

    All custom exceptions inherit from this class to enable:
    - Consistent error handling
    - Structured error logging
    - Rich context for debugging

    Attributes:
        message: Error message
        details: Additional error details (dict)

    Example:
        raise NotFoundError(
            "interface not found",
            details={"interface": "eth7"}
        )
    """

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        self.message = message
        self.details = (details or {}).copy()  # Create a copy to prevent external modification
        super().__init__(self.message)

    def to_dict(self) -> dict[str, Any]:
        """
        Convert exception to dictionary for logging.

        Returns:
            Dict with error_type, message and details
        """
        return {
            "error_type": self.__class__.__name__,
            "message": self.message,
            "details": self.details,
        }

    def with_suggestion(self, suggestion: str) -> "HostProbeError":
        """
        Add a suggestion to help users fix the error.

        Returns:
            Self (for method chaining)
        """
        self.details["suggestion"] = suggestion
        return self

    def with_context(self, **context) -> "HostProbeError":
        """
        Add additional context to the error details.

        Returns:
            Self (for method chaining)
        """
        self.details.update(context)
        return self

    def __repr__(self) -> str:
        """
        Return detailed string representation for debugging.

        Example:
            >>> error = NotFoundError("interface not found", details={"interface": "eth7"})
            >>> repr(error)
            "NotFoundError(message='interface not found', details={'interface': 'eth7'})"
        """
        details_str = f", details={self.details}" if self.details else ""
        return f"{self.__class__.__name__}(message='{self.message}'{details_str})"

    @classmethod
    def from_exception(
        cls,
        exc: Exception,
        message: str | None = None,
        **details
    ) -> "HostProbeError":
        """
        Create an error from another exception.

        Useful for wrapping socket, subprocess and library exceptions with
        additional context.

        Example:
            >>> try:
            ...     sock.connect(addr)
            ... except OSError as e:
            ...     raise ProbeConnectionError.from_exception(
            ...         e, f"connection failed: {e}", address="10.0.0.1:80"
            ...     )
        """
        error_message = message or str(exc)
        error_details = {
            "original_error": exc.__class__.__name__,
            "original_message": str(exc),
            **details
        }
        return cls(error_message, details=error_details)


# Configuration exception (kept here as it's fundamental)
class ConfigurationError(HostProbeError):
    """Raised when configuration is invalid or missing."""
    pass
