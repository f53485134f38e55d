"""
ICMP Prober (with TCP fallback)

Sends one ICMP echo request and waits for the matching reply. Opening an
ICMP socket needs either CAP_NET_RAW (raw socket) or membership in
``net.ipv4.ping_group_range`` (datagram "ping" socket). When neither is
available the prober transparently falls back to a TCP connect probe on a
configurable port; the caller sees the same ProbeResult contract.

Modes:
    auto      native echo, TCP fallback when no ICMP socket can be opened
    native    native echo only; no ICMP socket is a probe failure
    fallback  TCP connect only

Author: Senior Solution Architect
Date: 2025-12-05
"""

import asyncio
import os
import socket
import struct
import time

from src.core.config.constants import (
    DEFAULT_ICMP_FALLBACK_PORT,
    DEFAULT_TIMEOUT,
    MAX_PORT,
    ICMPMode,
    ProberKind,
    Stage,
)
from src.core.context import CallContext
from src.core.exceptions import ProbeConnectionError
from src.core.logging.logger import get_logger
from src.healthcheck.base_prober import BaseProber
from src.healthcheck.netutil import join_host_port, strip_port
from src.healthcheck.tcp_prober import tcp_connect
from src.healthcheck.types import Target

logger = get_logger(__name__)

ICMP_ECHO_REQUEST = 8
ICMP_ECHO_REPLY = 0
ICMPV6_ECHO_REQUEST = 128
ICMPV6_ECHO_REPLY = 129

_ECHO_PAYLOAD = b"host-probe-echo"


class ICMPUnavailableError(OSError):
    """No ICMP socket could be opened with the current privileges."""


def icmp_checksum(data: bytes) -> int:
    """RFC 1071 internet checksum."""
    if len(data) % 2:
        data += b"\x00"
    total = sum(struct.unpack(f"!{len(data) // 2}H", data))
    total = (total >> 16) + (total & 0xFFFF)
    total += total >> 16
    return ~total & 0xFFFF


def build_echo_request(identifier: int, sequence: int, v6: bool = False) -> bytes:
    icmp_type = ICMPV6_ECHO_REQUEST if v6 else ICMP_ECHO_REQUEST
    header = struct.pack("!BBHHH", icmp_type, 0, 0, identifier, sequence)
    if v6:
        # The kernel fills in the ICMPv6 checksum (it covers a pseudo-header).
        return header + _ECHO_PAYLOAD
    checksum = icmp_checksum(header + _ECHO_PAYLOAD)
    return struct.pack("!BBHHH", icmp_type, 0, checksum, identifier, sequence) + _ECHO_PAYLOAD


def _open_icmp_socket(family: int) -> socket.socket:
    proto = socket.IPPROTO_ICMPV6 if family == socket.AF_INET6 else socket.IPPROTO_ICMP
    last_error: OSError | None = None
    for socktype in (socket.SOCK_DGRAM, socket.SOCK_RAW):
        try:
            return socket.socket(family, socktype, proto)
        except OSError as e:
            last_error = e
    raise ICMPUnavailableError(f"cannot open ICMP socket: {last_error}")


def native_ping(host: str, timeout: float) -> float:
    """
    Send one echo request and block until the reply or ``timeout``.

    Returns:
        Round-trip time in seconds

    Raises:
        ICMPUnavailableError: No ICMP socket available
        OSError: Resolution, send or receive failure (socket.timeout included)
    """
    family, _, _, _, sockaddr = socket.getaddrinfo(host, None, proto=socket.IPPROTO_IP)[0]
    v6 = family == socket.AF_INET6
    sock = _open_icmp_socket(family)
    with sock:
        sequence = 1
        identifier = os.getpid() & 0xFFFF
        sock.settimeout(timeout)
        deadline = time.monotonic() + timeout
        start = time.perf_counter()
        sock.sendto(build_echo_request(identifier, sequence, v6), sockaddr)

        reply_type = ICMPV6_ECHO_REPLY if v6 else ICMP_ECHO_REPLY
        raw = sock.type == socket.SOCK_RAW
        while True:
            remaining = deadline - time.monotonic()
            if remaining <= 0:
                raise socket.timeout("timed out")
            sock.settimeout(remaining)
            packet, _ = sock.recvfrom(1024)
            # IPv4 raw sockets deliver the IP header as well.
            offset = (packet[0] & 0x0F) * 4 if raw and not v6 else 0
            if len(packet) < offset + 8:
                continue
            icmp_type, _, _, _, reply_seq = struct.unpack("!BBHHH", packet[offset:offset + 8])
            if icmp_type == reply_type and reply_seq == sequence:
                return time.perf_counter() - start


class ICMPProber(BaseProber):
    """
    ICMP echo prober with TCP fallback.

    Target fields used: address (a port, if present, is ignored).

    Usage:
        prober = ICMPProber(timeout=1.0)
        prober = ICMPProber.with_tcp_fallback(1.0, port=443)
        prober = ICMPProber.with_mode(1.0, ICMPMode.FALLBACK)
    """

    kind = ProberKind.ICMP.value

    def __init__(
        self,
        timeout: float = DEFAULT_TIMEOUT,
        mode: ICMPMode | str = ICMPMode.AUTO,
        fallback_port: int = DEFAULT_ICMP_FALLBACK_PORT,
    ):
        super().__init__(timeout if timeout > 0 else DEFAULT_TIMEOUT)
        self._mode = ICMPMode(mode)
        self._fallback_port = (
            fallback_port if 0 < fallback_port <= MAX_PORT else DEFAULT_ICMP_FALLBACK_PORT
        )

    @classmethod
    def with_tcp_fallback(cls, timeout: float, port: int) -> "ICMPProber":
        return cls(timeout, mode=ICMPMode.FALLBACK, fallback_port=port)

    @classmethod
    def with_mode(cls, timeout: float, mode: ICMPMode | str) -> "ICMPProber":
        return cls(timeout, mode=mode)

    @property
    def mode(self) -> ICMPMode:
        return self._mode

    @property
    def fallback_port(self) -> int:
        return self._fallback_port

    async def _probe_internal(self, ctx: CallContext, target: Target):
        host = strip_port(target.address)
        timeout = ctx.bound_timeout(self.timeout)

        if self._mode != ICMPMode.FALLBACK:
            try:
                rtt = await asyncio.to_thread(native_ping, host, timeout)
            except ICMPUnavailableError as e:
                if self._mode == ICMPMode.NATIVE:
                    return "", ProbeConnectionError.from_exception(e, f"ping failed: {e}", host=host)
                logger.debug(
                    "ICMP socket unavailable, using TCP fallback",
                    stage=Stage.PROBE_FALLBACK,
                    host=host,
                    port=self._fallback_port,
                    reason=str(e),
                )
            except OSError as e:
                message = f"ping failed: {str(e) or 'timed out'}"
                return "", ProbeConnectionError.from_exception(e, message, host=host)
            else:
                return f"ping {host}: latency={rtt * 1000:.3f}ms", None

        return await self._tcp_ping(host, timeout)

    async def _tcp_ping(self, host: str, timeout: float):
        start = time.perf_counter()
        try:
            await tcp_connect(join_host_port(host, self._fallback_port), timeout)
        except asyncio.TimeoutError as e:
            return "", ProbeConnectionError.from_exception(
                e, "ping failed: i/o timeout", host=host, port=self._fallback_port
            )
        except (OSError, ValueError) as e:
            return "", ProbeConnectionError.from_exception(
                e, f"ping failed: {e}", host=host, port=self._fallback_port
            )
        rtt = time.perf_counter() - start
        return f"ping {host}: latency={rtt * 1000:.3f}ms (tcp fallback)", None
