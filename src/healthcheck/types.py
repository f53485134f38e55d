"""
Health Check Data Types

Target: protocol-agnostic description of what to probe.
ProbeResult: uniform outcome of one probe attempt.

Each prober reads only the Target fields relevant to its protocol; the
others are ignored and never validated.

Author: Senior Solution Architect
Date: 2025-12-05
"""

from dataclasses import dataclass, field


@dataclass
class Target:
    """
    Protocol-agnostic probe target.

    Attributes:
        network: Network kind ("tcp", "udp", "tcp4", ...). UDP defaults to "udp"
        address: host:port (or host for ICMP, URL for HTTP)
        path: HTTP path appended to the address
        service: gRPC service name (empty = overall server health)
        method: HTTP method (default GET)
        status_code: Expected HTTP status (default 200)
        command: Executable for exec probes
        args: Explicit argument list for exec probes
    """
    network: str = ""
    address: str = ""
    path: str = ""
    service: str = ""
    method: str = ""
    status_code: int = 0
    command: str = ""
    args: list[str] = field(default_factory=list)


@dataclass
class ProbeResult:
    """
    Outcome of one probe.

    Invariant: ``success`` is True exactly when ``error`` is None.
    ``latency`` (seconds) is always the measured duration of the attempt,
    including failed attempts.
    """
    success: bool
    latency: float
    output: str = ""
    error: Exception | None = None

    @classmethod
    def ok(cls, latency: float, output: str = "") -> "ProbeResult":
        return cls(success=True, latency=latency, output=output, error=None)

    @classmethod
    def failure(cls, latency: float, error: Exception, output: str = "") -> "ProbeResult":
        return cls(success=False, latency=latency, output=output, error=error)
