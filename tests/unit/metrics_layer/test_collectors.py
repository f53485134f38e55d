"""
Unit Tests for Metrics Collectors

Tests the guard sequence, list ownership (free_list called exactly once,
never on failure), copy-out semantics and the derived queries built on
top of the connection and disk listings.
"""

import pytest

from src.core.config.constants import PID_NOT_FOUND
from src.core.exceptions import (
    ContextCancelledError,
    NotFoundError,
    NotSupportedError,
    PermissionDeniedError,
)
from src.core.interfaces.engine import (
    EngineResult,
    RawAllMetrics,
    RawCPUData,
    RawDiskIOData,
    RawDiskUsageData,
    RawList,
    RawMemoryData,
    RawNetInterfaceData,
    RawNetStatsData,
    RawPartitionData,
    RawPressure,
    RawPressureMetrics,
    RawProcessData,
    RawSocketConnection,
)
from src.metrics import MetricsCollector, SocketState


def _tcp_row(port, state, pid, remote_port=0):
    return RawSocketConnection(
        family=4,
        local_addr="127.0.0.1",
        local_port=port,
        remote_addr="0.0.0.0",
        remote_port=remote_port,
        state=int(state),
        pid=pid,
        process_name=f"proc{pid}",
    )


@pytest.fixture
def collector(initialized_lifecycle):
    return MetricsCollector(initialized_lifecycle)


def _returning(mock_engine, method, items):
    """Make ``method`` return a fresh RawList of ``items`` and remember it."""
    lists = []

    def fetch():
        raw = RawList.of(items)
        lists.append(raw)
        return EngineResult.ok(), raw

    getattr(mock_engine, method).side_effect = fetch
    return lists


@pytest.mark.unit
class TestCPUCollector:
    """Test CPU collection."""

    def test_collect_system(self, collector, mock_engine, background_ctx):
        """Test usage derivation through the collector."""
        mock_engine.collect_cpu.return_value = (EngineResult.ok(), RawCPUData(idle_percent=90.0, cores=8))

        cpu = collector.cpu.collect_system(background_ctx)

        assert cpu.usage_percent == 10.0
        assert cpu.cores == 8

    def test_collect_process(self, collector, mock_engine, background_ctx):
        """Test that the pid is passed through."""
        mock_engine.collect_process.return_value = (
            EngineResult.ok(),
            RawProcessData(pid=42, cpu_percent=12.5),
        )

        result = collector.cpu.collect_process(background_ctx, 42)

        mock_engine.collect_process.assert_called_once_with(42)
        assert result.pid == 42
        assert result.usage_percent == 12.5

    def test_engine_error_propagates(self, collector, mock_engine, background_ctx):
        """Test that an engine failure raises the mapped error."""
        mock_engine.collect_process.return_value = (
            EngineResult.failure(3, "no such process"),
            RawProcessData(),
        )

        with pytest.raises(NotFoundError):
            collector.cpu.collect_process(background_ctx, 999999)

    def test_all_processes_not_supported(self, collector, mock_engine, background_ctx):
        """Test that per-process enumeration is not supported."""
        with pytest.raises(NotSupportedError):
            collector.cpu.collect_all_processes(background_ctx)
        with pytest.raises(NotSupportedError):
            collector.memory.collect_all_processes(background_ctx)

    def test_all_processes_checks_context(self, collector, cancelled_ctx):
        """Test that a cancelled context is reported before NotSupported."""
        with pytest.raises(ContextCancelledError):
            collector.cpu.collect_all_processes(cancelled_ctx)

    def test_cancelled_context_skips_engine(self, collector, mock_engine, cancelled_ctx):
        """Test that a done context never reaches the engine."""
        with pytest.raises(ContextCancelledError):
            collector.cpu.collect_system(cancelled_ctx)
        mock_engine.collect_cpu.assert_not_called()


@pytest.mark.unit
class TestPressure:
    """Test pressure availability handling."""

    def test_unavailable_is_not_supported(self, collector, mock_engine, background_ctx):
        """Test that missing PSI raises NotSupportedError for each resource."""
        mock_engine.collect_pressure.return_value = (EngineResult.ok(), RawPressureMetrics(available=False))

        for collect in (
            collector.cpu.collect_pressure,
            collector.memory.collect_pressure,
            collector.io.collect_pressure,
        ):
            with pytest.raises(NotSupportedError):
                collect(background_ctx)

    def test_available(self, collector, mock_engine, background_ctx):
        """Test that available pressure is returned per resource."""
        mock_engine.collect_pressure.return_value = (
            EngineResult.ok(),
            RawPressureMetrics(
                available=True,
                cpu=RawPressure(some_avg10=1.0),
                memory=RawPressure(full_avg60=2.0),
                io=RawPressure(some_total_us=3),
            ),
        )

        assert collector.cpu.collect_pressure(background_ctx).some_avg10 == 1.0
        assert collector.memory.collect_pressure(background_ctx).full_avg60 == 2.0
        assert collector.io.collect_pressure(background_ctx).some_total == 3


@pytest.mark.unit
class TestMemoryCollector:
    """Test memory collection."""

    def test_collect_system(self, collector, mock_engine, background_ctx):
        """Test derived memory fields."""
        mock_engine.collect_memory.return_value = (
            EngineResult.ok(),
            RawMemoryData(total_bytes=200, available_bytes=50, used_bytes=150),
        )

        memory = collector.memory.collect_system(background_ctx)

        assert memory.free == 50
        assert memory.usage_percent == 75.0


@pytest.mark.unit
class TestListOwnership:
    """Test free_list discipline on list-returning calls."""

    def test_free_called_once(self, collector, mock_engine, background_ctx):
        """Test that a successful listing is released exactly once."""
        lists = _returning(
            mock_engine, "list_partitions", [RawPartitionData(device="/dev/sda1", mount_point="/")]
        )

        partitions = collector.disk.list_partitions(background_ctx)

        assert [p.mount_point for p in partitions] == ["/"]
        mock_engine.free_list.assert_called_once_with(lists[0])

    def test_no_free_on_failure(self, collector, mock_engine, background_ctx):
        """Test that a failed listing is not released."""
        mock_engine.collect_tcp_connections.side_effect = lambda: (
            EngineResult.failure(2, "denied"),
            RawList(),
        )

        with pytest.raises(PermissionDeniedError):
            collector.connections.collect_tcp(background_ctx)

        mock_engine.free_list.assert_not_called()

    def test_count_bounds_items(self, collector, mock_engine, background_ctx):
        """Test that only ``count`` entries are copied."""
        raw = RawList(items=[RawNetStatsData(interface="eth0"), RawNetStatsData(interface="stale")], count=1)
        mock_engine.collect_net_stats.side_effect = lambda: (EngineResult.ok(), raw)

        stats = collector.network.collect_all_stats(background_ctx)

        assert [s.interface for s in stats] == ["eth0"]

    def test_results_survive_engine_mutation(self, collector, mock_engine, background_ctx):
        """Test that returned rows do not alias engine storage."""
        row = RawNetInterfaceData(name="eth0", mtu=1500, is_up=True)
        _returning(mock_engine, "list_net_interfaces", [row])

        interfaces = collector.network.list_interfaces(background_ctx)
        row.name = "mutated"
        row.mtu = 0

        assert interfaces[0].name == "eth0"
        assert interfaces[0].mtu == 1500
        assert interfaces[0].flags == ["up"]


@pytest.mark.unit
class TestDiskCollector:
    """Test disk queries."""

    def test_collect_all_usage_skips_failures(self, collector, mock_engine, background_ctx):
        """Test that unreadable partitions are skipped."""
        _returning(
            mock_engine,
            "list_partitions",
            [RawPartitionData(mount_point="/"), RawPartitionData(mount_point="/secret")],
        )

        def usage(path):
            if path == "/secret":
                return EngineResult.failure(2), RawDiskUsageData()
            return EngineResult.ok(), RawDiskUsageData(path=path, total_bytes=100)

        mock_engine.collect_disk_usage.side_effect = usage

        usages = collector.disk.collect_all_usage(background_ctx)

        assert [u.path for u in usages] == ["/"]

    def test_device_io_in_bytes(self, collector, mock_engine, background_ctx):
        """Test device lookup and sector conversion."""
        _returning(
            mock_engine,
            "collect_disk_io",
            [RawDiskIOData(device="sda", sectors_read=10), RawDiskIOData(device="sdb")],
        )

        stats = collector.disk.collect_device_io(background_ctx, "sda")

        assert stats.read_bytes == 5120

    def test_unknown_device(self, collector, mock_engine, background_ctx):
        """Test NotFoundError for a missing device."""
        with pytest.raises(NotFoundError):
            collector.disk.collect_device_io(background_ctx, "nvme9n9")


@pytest.mark.unit
class TestNetworkCollector:
    """Test per-interface lookup."""

    def test_collect_stats(self, collector, mock_engine, background_ctx):
        """Test that the matching interface is returned."""
        _returning(
            mock_engine,
            "collect_net_stats",
            [RawNetStatsData(interface="lo", rx_bytes=1), RawNetStatsData(interface="eth0", rx_bytes=2)],
        )

        assert collector.network.collect_stats(background_ctx, "eth0").bytes_recv == 2

    def test_unknown_interface(self, collector, background_ctx):
        """Test NotFoundError for a missing interface."""
        with pytest.raises(NotFoundError):
            collector.network.collect_stats(background_ctx, "nope0")


@pytest.mark.unit
class TestConnectionCollector:
    """Test connection queries."""

    def test_find_process_by_port_prefers_listener(self, collector, mock_engine, background_ctx):
        """Test that the listening owner wins over an established row."""
        _returning(
            mock_engine,
            "collect_tcp_connections",
            [
                _tcp_row(8080, SocketState.ESTABLISHED, 200, remote_port=5555),
                _tcp_row(8080, SocketState.LISTEN, 100),
            ],
        )

        assert collector.connections.find_process_by_port(background_ctx, 8080) == 100

    def test_find_process_by_port_missing(self, collector, background_ctx):
        """Test the -1 result when no row owns the port."""
        assert collector.connections.find_process_by_port(background_ctx, 9) == PID_NOT_FOUND

    def test_find_process_by_udp_port(self, collector, mock_engine, background_ctx):
        """Test the UDP table lookup."""
        _returning(mock_engine, "collect_udp_connections", [_tcp_row(53, SocketState.CLOSE, 77)])

        assert collector.connections.find_process_by_port(background_ctx, 53, tcp=False) == 77

    def test_state_filters(self, collector, mock_engine, background_ctx):
        """Test listening and established filters."""
        _returning(
            mock_engine,
            "collect_tcp_connections",
            [
                _tcp_row(22, SocketState.LISTEN, 1),
                _tcp_row(40000, SocketState.ESTABLISHED, 2, remote_port=22),
                _tcp_row(40001, SocketState.TIME_WAIT, -1, remote_port=22),
            ],
        )

        listening = collector.connections.collect_listening_ports(background_ctx)
        established = collector.connections.collect_established_connections(background_ctx)

        assert [c.local_port for c in listening] == [22]
        assert [c.local_port for c in established] == [40000]
        assert all(c.state == SocketState.LISTEN for c in listening)

    def test_process_connections(self, collector, mock_engine, background_ctx):
        """Test filtering both tables by pid."""
        _returning(
            mock_engine,
            "collect_tcp_connections",
            [_tcp_row(22, SocketState.LISTEN, 1), _tcp_row(80, SocketState.LISTEN, 2)],
        )
        _returning(mock_engine, "collect_udp_connections", [_tcp_row(53, SocketState.CLOSE, 2)])

        tcp, udp = collector.connections.collect_process_connections(background_ctx, 2)

        assert [c.local_port for c in tcp] == [80]
        assert [c.local_port for c in udp] == [53]

    def test_unix_sockets_empty(self, collector, background_ctx):
        """Test that an empty table gives an empty list."""
        assert collector.connections.collect_unix(background_ctx) == []


@pytest.mark.unit
class TestMetricsCollectorFacade:
    """Test the aggregate facade."""

    def test_collect_all(self, collector, mock_engine, background_ctx):
        """Test the aggregate snapshot without pressure."""
        mock_engine.collect_all.return_value = (
            EngineResult.ok(),
            RawAllMetrics(cpu=RawCPUData(idle_percent=60.0)),
        )

        snapshot = collector.collect_all(background_ctx)

        assert snapshot.cpu.usage_percent == 40.0
        assert snapshot.pressure is None

    def test_shared_engine(self, collector, mock_engine):
        """Test that sub-collectors share the facade engine."""
        assert collector.cpu.engine is mock_engine
        assert collector.connections.engine is mock_engine

    def test_platform_passthrough(self, collector):
        """Test platform and quota support passthrough."""
        assert collector.platform() == "linux"
        assert collector.quota_supported() is True
