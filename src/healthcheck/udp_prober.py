"""
UDP Prober

Connectionless liveness check: resolve, dial, write one datagram, then
wait once for a reply.

UDP gives no delivery guarantee, so a read timeout is reported as
success ("sent ... no response within timeout"): silence does not prove
the service is down. Only resolution, dial, write and non-timeout read
errors are failures.

The exchange runs on a worker thread with a blocking socket. Once the
read has started it is bounded by the socket deadline only; cancelling
the context does not interrupt it.

Author: Senior Solution Architect
Date: 2025-12-05
"""

import asyncio
import socket

from src.core.config.constants import (
    DEFAULT_TIMEOUT,
    DEFAULT_UDP_PAYLOAD,
    UDP_BUFFER_SIZE,
    ProberKind,
)
from src.core.context import CallContext
from src.core.exceptions import ProbeConnectionError
from src.healthcheck.base_prober import BaseProber
from src.healthcheck.netutil import family_for, split_host_port
from src.healthcheck.types import Target


class UDPProber(BaseProber):
    """
    UDP datagram prober.

    Attributes:
        payload: Bytes sent to the target (copied at construction)

    Usage:
        prober = UDPProber(timeout=1.0)
        prober = UDPProber.with_payload(1.0, b"\\x00\\x01")
    """

    kind = ProberKind.UDP.value

    def __init__(
        self,
        timeout: float = DEFAULT_TIMEOUT,
        payload: bytes = DEFAULT_UDP_PAYLOAD,
        buffer_size: int = UDP_BUFFER_SIZE,
    ):
        super().__init__(timeout)
        self._payload = bytes(payload)
        self._buffer_size = buffer_size

    @classmethod
    def with_payload(cls, timeout: float, payload: bytes) -> "UDPProber":
        return cls(timeout, payload=payload)

    @property
    def payload(self) -> bytes:
        return self._payload

    def _io_timeout(self, ctx: CallContext) -> float:
        if self.timeout > 0:
            return self.timeout
        remaining = ctx.remaining()
        if remaining is not None:
            return remaining
        return DEFAULT_TIMEOUT

    async def _probe_internal(self, ctx: CallContext, target: Target):
        network = target.network or "udp"
        return await asyncio.to_thread(
            self._exchange, target.address, network, self._io_timeout(ctx)
        )

    def _exchange(self, address: str, network: str, io_timeout: float):
        try:
            host, port = split_host_port(address)
            infos = socket.getaddrinfo(host, port, family_for(network), socket.SOCK_DGRAM)
        except (OSError, ValueError) as e:
            return "", ProbeConnectionError.from_exception(
                e, f"failed to resolve address: {e}", address=address
            )

        family, socktype, proto, _, sockaddr = infos[0]
        try:
            sock = socket.socket(family, socktype, proto)
        except OSError as e:
            return "", ProbeConnectionError.from_exception(
                e, f"failed to dial: {e}", address=address
            )

        with sock:
            try:
                sock.connect(sockaddr)
            except OSError as e:
                return "", ProbeConnectionError.from_exception(
                    e, f"failed to dial: {e}", address=address
                )

            sock.settimeout(max(io_timeout, 0.001))

            try:
                sock.send(self._payload)
            except OSError as e:
                return "", ProbeConnectionError.from_exception(
                    e, f"failed to write: {e}", address=address
                )

            try:
                data = sock.recv(self._buffer_size)
            except socket.timeout:
                return f"sent to {address} (no response within timeout)", None
            except OSError as e:
                return "", ProbeConnectionError.from_exception(
                    e, f"failed to read response: {e}", address=address
                )

        return f"received {len(data)} bytes from {address}", None
