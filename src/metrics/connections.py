"""
Connection Table Records

Socket states, address families and the point-in-time rows returned by
the connection collector.

Enumerations are backed by lookup tables with a fixed fallback string,
so stringifying an out-of-range value (for example a state code read
from a newer kernel) never fails.

Author: System Architect
Date: 2025-12-08
"""

from dataclasses import dataclass, fields
from enum import IntEnum


class SocketState(IntEnum):
    """TCP socket state as reported by the kernel connection table."""

    UNKNOWN = 0
    ESTABLISHED = 1
    SYN_SENT = 2
    SYN_RECV = 3
    FIN_WAIT1 = 4
    FIN_WAIT2 = 5
    TIME_WAIT = 6
    CLOSE = 7
    CLOSE_WAIT = 8
    LAST_ACK = 9
    LISTEN = 10
    CLOSING = 11

    @classmethod
    def name_for(cls, value: int) -> str:
        """String for any integer; "UNKNOWN" outside the known set."""
        return SOCKET_STATE_NAMES.get(value, "UNKNOWN")

    def __str__(self) -> str:
        return SocketState.name_for(int(self))


SOCKET_STATE_NAMES: dict[int, str] = {
    SocketState.UNKNOWN: "UNKNOWN",
    SocketState.ESTABLISHED: "ESTABLISHED",
    SocketState.SYN_SENT: "SYN_SENT",
    SocketState.SYN_RECV: "SYN_RECV",
    SocketState.FIN_WAIT1: "FIN_WAIT1",
    SocketState.FIN_WAIT2: "FIN_WAIT2",
    SocketState.TIME_WAIT: "TIME_WAIT",
    SocketState.CLOSE: "CLOSE",
    SocketState.CLOSE_WAIT: "CLOSE_WAIT",
    SocketState.LAST_ACK: "LAST_ACK",
    SocketState.LISTEN: "LISTEN",
    SocketState.CLOSING: "CLOSING",
}


class AddressFamily(IntEnum):
    IPV4 = 4
    IPV6 = 6

    @classmethod
    def name_for(cls, value: int) -> str:
        """"IPv4", "IPv6", or "Unknown" for anything else."""
        return ADDRESS_FAMILY_NAMES.get(value, "Unknown")

    def __str__(self) -> str:
        return AddressFamily.name_for(int(self))


ADDRESS_FAMILY_NAMES: dict[int, str] = {
    AddressFamily.IPV4: "IPv4",
    AddressFamily.IPV6: "IPv6",
}


@dataclass
class TcpConnection:
    """
    One TCP connection table row.

    Attributes:
        family: AddressFamily value (4 or 6)
        state: SocketState value
        pid: Owning process, -1 when unknown
        rx_queue / tx_queue: Receive / transmit queue depth in bytes
    """
    family: int
    local_addr: str
    local_port: int
    remote_addr: str
    remote_port: int
    state: int
    pid: int
    process_name: str
    inode: int
    rx_queue: int
    tx_queue: int

    @property
    def state_name(self) -> str:
        return SocketState.name_for(self.state)

    @property
    def family_name(self) -> str:
        return AddressFamily.name_for(self.family)


@dataclass
class UdpConnection:
    """One UDP socket table row (same shape as a TCP row)."""
    family: int
    local_addr: str
    local_port: int
    remote_addr: str
    remote_port: int
    state: int
    pid: int
    process_name: str
    inode: int
    rx_queue: int
    tx_queue: int

    @property
    def state_name(self) -> str:
        return SocketState.name_for(self.state)

    @property
    def family_name(self) -> str:
        return AddressFamily.name_for(self.family)


@dataclass
class UnixSocket:
    path: str
    socket_type: str
    state: int
    pid: int
    process_name: str
    inode: int

    @property
    def state_name(self) -> str:
        return SocketState.name_for(self.state)


@dataclass
class TcpStats:
    """
    Count of TCP sockets per state.

    ``total()`` equals the number of rows returned by the TCP listing
    taken from the same connection table.
    """
    established: int = 0
    syn_sent: int = 0
    syn_recv: int = 0
    fin_wait1: int = 0
    fin_wait2: int = 0
    time_wait: int = 0
    close: int = 0
    close_wait: int = 0
    last_ack: int = 0
    listen: int = 0
    closing: int = 0

    def total(self) -> int:
        return sum(getattr(self, f.name) for f in fields(self))
