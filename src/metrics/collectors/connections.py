"""
Connection Collector

TCP / UDP / Unix socket tables and aggregated TCP state counts.
"""

from src.core.config.constants import PID_NOT_FOUND
from src.core.context import CallContext
from src.metrics.builders import (
    build_tcp_connection,
    build_tcp_stats,
    build_udp_connection,
    build_unix_socket,
)
from src.metrics.collectors.base import BaseCollector
from src.metrics.connections import (
    SocketState,
    TcpConnection,
    TcpStats,
    UdpConnection,
    UnixSocket,
)


class ConnectionCollector(BaseCollector):
    """
    Connection-table collector.

    Every listing call returns fresh caller-owned rows; the engine list is
    released before the method returns.
    """

    def collect_tcp(self, ctx: CallContext) -> list[TcpConnection]:
        return self._call_list(ctx, self._engine.collect_tcp_connections, build_tcp_connection)

    def collect_udp(self, ctx: CallContext) -> list[UdpConnection]:
        return self._call_list(ctx, self._engine.collect_udp_connections, build_udp_connection)

    def collect_unix(self, ctx: CallContext) -> list[UnixSocket]:
        return self._call_list(ctx, self._engine.collect_unix_sockets, build_unix_socket)

    def collect_tcp_stats(self, ctx: CallContext) -> TcpStats:
        return self._call(ctx, self._engine.collect_tcp_stats, build_tcp_stats)

    def find_process_by_port(self, ctx: CallContext, port: int, tcp: bool = True) -> int:
        """
        PID owning a local port, or -1 when no owner is visible.

        Listening sockets are preferred over established ones for TCP.
        """
        rows = self.collect_tcp(ctx) if tcp else self.collect_udp(ctx)
        owners = [r for r in rows if r.local_port == port and r.pid > 0]
        if tcp:
            owners.sort(key=lambda r: r.state != SocketState.LISTEN)
        return owners[0].pid if owners else PID_NOT_FOUND

    def collect_listening_ports(self, ctx: CallContext) -> list[TcpConnection]:
        return [c for c in self.collect_tcp(ctx) if c.state == SocketState.LISTEN]

    def collect_established_connections(self, ctx: CallContext) -> list[TcpConnection]:
        return [c for c in self.collect_tcp(ctx) if c.state == SocketState.ESTABLISHED]

    def collect_process_connections(
        self, ctx: CallContext, pid: int
    ) -> tuple[list[TcpConnection], list[UdpConnection]]:
        tcp = [c for c in self.collect_tcp(ctx) if c.pid == pid]
        udp = [c for c in self.collect_udp(ctx) if c.pid == pid]
        return tcp, udp
