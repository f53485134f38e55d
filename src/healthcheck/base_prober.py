#!/usr/bin/env python3
"""
Base Prober Abstract Class

This module defines the abstract base class for all protocol probers.
Concrete implementations (TCP, UDP, HTTP, gRPC, Exec, ICMP) inherit from
this class.

Architectural Decision: Abstract base class for consistent patterns
- Common ``probe()`` entry point for all protocols
- Context check before any socket or process is touched
- Latency measured around the whole attempt, failures included
- Uniform structured logging of outcomes

Subclasses implement ``_probe_internal()`` and never deal with timing or
context pre-checks themselves.

Author: Senior Solution Architect
Date: 2025-12-05
"""

import time
from abc import ABC, abstractmethod

from src.core.config.constants import DEFAULT_TIMEOUT, Stage
from src.core.context import CallContext
from src.core.logging.logger import get_logger
from src.healthcheck.types import ProbeResult, Target

logger = get_logger(__name__)

# Floor for measured latency so a result never reports zero elapsed time.
_MIN_LATENCY = 1e-9


class BaseProber(ABC):
    """
    Abstract base class for protocol probers.

    STAGE-H: Prober base class

    Subclasses must implement:
    - kind: class attribute naming the protocol ("tcp", "udp", ...)
    - _probe_internal(): one bounded check returning (output, error)

    Usage:
        class TCPProber(BaseProber):
            kind = "tcp"

            async def _probe_internal(self, ctx, target):
                ...
                return f"connected to {target.address}", None
    """

    kind: str = ""

    def __init__(self, timeout: float = DEFAULT_TIMEOUT):
        self._timeout = timeout

    @property
    def timeout(self) -> float:
        return self._timeout

    def type(self) -> str:
        """Return the prober kind."""
        return self.kind

    async def probe(self, ctx: CallContext, target: Target) -> ProbeResult:
        """
        Perform one liveness check.

        STAGE-H.1: Probe execution

        A cancelled or expired context short-circuits before any network
        or process work and yields a failed result carrying the context
        error.

        Args:
            ctx: Call context (cancellation and deadline)
            target: What to probe

        Returns:
            ProbeResult: success flag, latency, output and error
        """
        start = time.perf_counter()

        if (err := ctx.err()) is not None:
            return ProbeResult.failure(self._elapsed(start), err)

        output, error = await self._probe_internal(ctx, target)
        latency = self._elapsed(start)

        logger.debug(
            "Probe finished",
            stage=Stage.PROBE_RESULT,
            prober=self.kind,
            address=target.address or target.command,
            success=error is None,
            latency_ms=round(latency * 1000, 3),
        )

        if error is not None:
            return ProbeResult.failure(latency, error, output)
        return ProbeResult.ok(latency, output)

    @abstractmethod
    async def _probe_internal(
        self, ctx: CallContext, target: Target
    ) -> tuple[str, Exception | None]:
        """
        Protocol-specific check.

        Returns:
            (output, error): error is None on success
        """
        ...

    @staticmethod
    def _elapsed(start: float) -> float:
        return max(time.perf_counter() - start, _MIN_LATENCY)

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(timeout={self._timeout})"
