"""
Core Module

Foundational components: configuration, logging, exceptions, the call
context and the abstract interfaces.
"""

from .context import CallContext
from .exceptions import (
    ConfigurationError,
    ContextCancelledError,
    ContextDeadlineExceededError,
    EngineError,
    HostProbeError,
    NotInitializedError,
    ProberError,
    UnknownProberTypeError,
)
from .logging import (
    clear_trace_id,
    get_logger,
    get_trace_id,
    log_stage,
    set_trace_id,
    setup_logging,
)

__all__ = [
    "CallContext",
    "setup_logging",
    "get_logger",
    "set_trace_id",
    "get_trace_id",
    "clear_trace_id",
    "log_stage",
    "HostProbeError",
    "ConfigurationError",
    "ContextCancelledError",
    "ContextDeadlineExceededError",
    "EngineError",
    "NotInitializedError",
    "ProberError",
    "UnknownProberTypeError",
]
