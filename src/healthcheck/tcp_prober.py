"""
TCP Prober

Liveness = a TCP connection can be established within the timeout. The
connection is closed immediately after it is opened.

Author: Senior Solution Architect
Date: 2025-12-05
"""

import asyncio
from contextlib import suppress

from src.core.config.constants import DEFAULT_TIMEOUT, ProberKind
from src.core.context import CallContext
from src.core.exceptions import ProbeConnectionError
from src.healthcheck.base_prober import BaseProber
from src.healthcheck.netutil import family_for, split_host_port
from src.healthcheck.types import Target


async def tcp_connect(address: str, timeout: float | None, network: str = "tcp") -> None:
    """
    Open and close one TCP connection to ``address``.

    Raises:
        ValueError: Malformed address
        OSError / asyncio.TimeoutError: Dial failure
    """
    host, port = split_host_port(address)
    _, writer = await asyncio.wait_for(
        asyncio.open_connection(host, port, family=family_for(network)),
        timeout=timeout,
    )
    writer.close()
    with suppress(OSError):
        await writer.wait_closed()


class TCPProber(BaseProber):
    """
    TCP connect prober.

    Usage:
        prober = TCPProber(timeout=2.0)
        result = await prober.probe(ctx, Target(address="127.0.0.1:5432"))
    """

    kind = ProberKind.TCP.value

    def __init__(self, timeout: float = DEFAULT_TIMEOUT):
        super().__init__(timeout)

    async def _probe_internal(self, ctx: CallContext, target: Target):
        try:
            await tcp_connect(
                target.address, ctx.bound_timeout(self.timeout), target.network or "tcp"
            )
        except asyncio.TimeoutError as e:
            return "", ProbeConnectionError.from_exception(
                e, "connection failed: i/o timeout", address=target.address
            )
        except (OSError, ValueError) as e:
            return "", ProbeConnectionError.from_exception(
                e, f"connection failed: {e}", address=target.address
            )
        return f"connected to {target.address}", None
