from .logger import (
    clear_trace_id,
    get_logger,
    get_trace_id,
    log_stage,
    set_trace_id,
    setup_logging,
)

__all__ = [
    "clear_trace_id",
    "get_logger",
    "get_trace_id",
    "log_stage",
    "set_trace_id",
    "setup_logging",
]
