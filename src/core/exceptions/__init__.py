"""
Exception Module

Structured exception hierarchy for the host probe layer.
All exceptions are organized by theme for better maintainability and debuggability.

Module Structure:
-----------------
- **base.py**: HostProbeError base class + ConfigurationError
- **context.py**: Call context cancellation / deadline errors
- **engine.py**: Metrics engine sentinel errors and the unknown-code wrapper
- **probe.py**: Protocol prober and factory errors

Usage:
------
```python
# Import specific exceptions
from src.core.exceptions import NotInitializedError, UnknownProberTypeError

# Or import by category
from src.core.exceptions.engine import EngineError, NotFoundError
```

Author: System Architect
Date: 2025-12-08
"""

# Base exception
from src.core.exceptions.base import ConfigurationError, HostProbeError

# Context exceptions
from src.core.exceptions.context import (
    ContextCancelledError,
    ContextDeadlineExceededError,
    ContextError,
)

# Engine exceptions
from src.core.exceptions.engine import (
    EngineError,
    EngineIOError,
    InternalError,
    InvalidParamError,
    NotFoundError,
    NotInitializedError,
    NotSupportedError,
    PermissionDeniedError,
    UnknownEngineCodeError,
)

# Prober exceptions
from src.core.exceptions.probe import (
    EmptyCommandError,
    ExecCommandError,
    GRPCNotServingError,
    GRPCServiceUnknownError,
    GRPCUnknownStatusError,
    HTTPStatusMismatchError,
    InvalidCommandFormatError,
    ProbeConnectionError,
    ProberError,
    UnknownProberTypeError,
)

__all__ = [
    # Base
    "HostProbeError",
    "ConfigurationError",
    # Context
    "ContextError",
    "ContextCancelledError",
    "ContextDeadlineExceededError",
    # Engine
    "EngineError",
    "NotSupportedError",
    "PermissionDeniedError",
    "NotFoundError",
    "InvalidParamError",
    "EngineIOError",
    "InternalError",
    "NotInitializedError",
    "UnknownEngineCodeError",
    # Prober
    "ProberError",
    "UnknownProberTypeError",
    "ProbeConnectionError",
    "HTTPStatusMismatchError",
    "EmptyCommandError",
    "InvalidCommandFormatError",
    "ExecCommandError",
    "GRPCNotServingError",
    "GRPCServiceUnknownError",
    "GRPCUnknownStatusError",
]
