"""
System Constants and Enumerations

This module defines the constants shared by the probers, the metrics
collectors and the engine implementation.

Architectural Decision: Centralized constants for maintainability
- Single source of truth for magic numbers
- Type-safe enums for log stages
- Easy to update and track changes

Author: System Architect
Date: 2025-12-05
"""

from enum import Enum

# ============================================================================
# Stage Identifiers (for structured logging)
# ============================================================================


class Stage(str, Enum):
    """
    Processing stages used as the ``stage`` field of every log entry.

    Format: {PREFIX}.{SEQUENCE}_{DESCRIPTIVE_NAME}
    - H: health check probers
    - M: metrics engine, collectors and detectors

    Examples:
        logger.debug("Probe finished", stage=Stage.PROBE_RESULT)
        logger.info("Engine initialized", stage=Stage.ENGINE_INIT)
    """

    # Health checks
    PROBER_CREATE = "H.0_PROBER_CREATE"
    PROBE_RESULT = "H.1_PROBE_RESULT"
    PROBE_FALLBACK = "H.2_PROBE_FALLBACK"

    # Metrics engine
    ENGINE_INIT = "M.0_ENGINE_INIT"
    ENGINE_SHUTDOWN = "M.1_ENGINE_SHUTDOWN"
    COLLECT = "M.2_COLLECT"
    DETECT = "M.3_DETECT"


# ============================================================================
# Prober Kinds
# ============================================================================


class ProberKind(str, Enum):
    """String discriminators accepted by the prober factory."""

    TCP = "tcp"
    UDP = "udp"
    HTTP = "http"
    GRPC = "grpc"
    EXEC = "exec"
    ICMP = "icmp"


class ICMPMode(str, Enum):
    """
    ICMP probing strategy.

    AUTO: try a native ICMP echo, fall back to TCP when the socket cannot be opened
    NATIVE: native ICMP echo only; a missing ICMP socket fails the probe
    FALLBACK: always use a TCP connect probe
    """

    AUTO = "auto"
    NATIVE = "native"
    FALLBACK = "fallback"


# ============================================================================
# Prober Defaults
# ============================================================================

DEFAULT_TIMEOUT = 5.0  # seconds
DEFAULT_UDP_PAYLOAD = b"PING"
UDP_BUFFER_SIZE = 1024
DEFAULT_HTTP_METHOD = "GET"
DEFAULT_HTTP_STATUS = 200
DEFAULT_ICMP_FALLBACK_PORT = 80
MAX_PORT = 65535
MAX_EXEC_OUTPUT = 4096  # bytes
TRUNCATION_MARKER = "... (truncated)"

# ============================================================================
# Metrics
# ============================================================================

FULL_PERCENT = 100.0
SECTOR_SIZE = 512  # bytes per /proc/diskstats sector
QUOTA_UNLIMITED = 2**64 - 1  # sentinel for "no limit"
PID_NOT_FOUND = -1
