"""
Health Check Probers Module

Protocol probers behind one uniform contract: ``await prober.probe(ctx, target)``
returns a ProbeResult. Probers are created through ProberFactory or the
per-kind constructors.
"""

from .base_prober import BaseProber
from .exec_prober import ExecProber
from .factory import (
    ProberFactory,
    get_prober_factory,
    new_exec_prober,
    new_grpc_prober,
    new_http_prober,
    new_icmp_prober,
    new_tcp_prober,
    new_udp_prober,
)
from .grpc_prober import GRPCProber
from .http_prober import HTTPProber
from .icmp_prober import ICMPProber
from .tcp_prober import TCPProber
from .types import ProbeResult, Target
from .udp_prober import UDPProber

__all__ = [
    "BaseProber",
    "ProbeResult",
    "Target",
    "ProberFactory",
    "get_prober_factory",
    "TCPProber",
    "UDPProber",
    "HTTPProber",
    "GRPCProber",
    "ExecProber",
    "ICMPProber",
    "new_tcp_prober",
    "new_udp_prober",
    "new_http_prober",
    "new_grpc_prober",
    "new_exec_prober",
    "new_icmp_prober",
]
