"""
Prober Protocol

Structural interface shared by the six protocol probers (TCP, UDP, HTTP,
gRPC, Exec, ICMP). Anything with ``type()`` and an awaitable
``probe(ctx, target)`` returning a ProbeResult satisfies it.

Author: System Architect
Date: 2025-12-08
"""

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from src.core.context import CallContext
    from src.healthcheck.types import ProbeResult, Target


@runtime_checkable
class Prober(Protocol):
    """
    One bounded liveness check over a specific protocol.

    Usage:
        async def check(prober: Prober, target: Target) -> bool:
            result = await prober.probe(CallContext.background(), target)
            return result.success
    """

    def type(self) -> str:
        """Return the prober kind ("tcp", "udp", ...)."""
        ...

    async def probe(self, ctx: "CallContext", target: "Target") -> "ProbeResult":
        """
        Perform one check against ``target``.

        Never raises for probe failures; the outcome, including the error,
        is carried by the returned ProbeResult.
        """
        ...
