"""
Raw-to-Domain Builders

Pure functions that turn engine snapshots into public records.

Derivation rules:
- CPU usage% = 100 - idle%, clamped at 0
- memory free = available; swap free = swap total - swap used
- memory usage% = used / total * 100 (0 when total is 0)
- disk I/O bytes = sectors * 512
- partition / disk / network rows: 1:1 field copy
- aggregate pressure: None when the engine marks it unavailable

None of these functions raises on well-typed input, and empty input
lists produce empty output lists.
"""

from datetime import datetime, timezone

from src.core.config.constants import FULL_PERCENT, SECTOR_SIZE
from src.core.interfaces.engine import (
    RawAllMetrics,
    RawAvailableRuntime,
    RawContainerInfo,
    RawCPUData,
    RawDiskIOData,
    RawDiskUsageData,
    RawIOStatsData,
    RawLoadData,
    RawMemoryData,
    RawNetInterfaceData,
    RawNetStatsData,
    RawPartitionData,
    RawPressure,
    RawPressureMetrics,
    RawProcessData,
    RawQuotaLimits,
    RawQuotaUsage,
    RawSocketConnection,
    RawTcpStats,
    RawUnixSocket,
)
from src.metrics.connections import TcpConnection, TcpStats, UdpConnection, UnixSocket
from src.metrics.quota import ContainerInfo, QuotaLimits, QuotaUsage
from src.metrics.runtime import AvailableRuntime
from src.metrics.types import (
    AllPressure,
    AllSystemMetrics,
    CPUPressure,
    DiskIOInfo,
    DiskIOStats,
    DiskUsageInfo,
    IOStatsSummary,
    LoadAverage,
    NetInterface,
    NetInterfaceInfo,
    NetStats,
    NetStatsInfo,
    PartitionInfo,
    Pressure,
    ProcessCPU,
    ProcessMemory,
    SystemCPU,
    SystemMemory,
    utc_now,
)

# ============================================================================
# CPU / memory / load / process
# ============================================================================


def build_cpu_metrics(raw: RawCPUData) -> SystemCPU:
    return SystemCPU(
        usage_percent=max(FULL_PERCENT - raw.idle_percent, 0.0),
        cores=raw.cores,
        frequency_mhz=raw.frequency_mhz,
    )


def build_memory_metrics(raw: RawMemoryData) -> SystemMemory:
    usage_percent = 0.0
    if raw.total_bytes > 0:
        usage_percent = raw.used_bytes / raw.total_bytes * FULL_PERCENT
    return SystemMemory(
        total=raw.total_bytes,
        available=raw.available_bytes,
        used=raw.used_bytes,
        free=raw.available_bytes,
        cached=raw.cached_bytes,
        buffers=raw.buffers_bytes,
        swap_total=raw.swap_total_bytes,
        swap_used=raw.swap_used_bytes,
        swap_free=max(raw.swap_total_bytes - raw.swap_used_bytes, 0),
        usage_percent=usage_percent,
    )


def build_load_metrics(raw: RawLoadData) -> LoadAverage:
    return LoadAverage(
        load1=raw.load_1min,
        load5=raw.load_5min,
        load15=raw.load_15min,
        running_processes=raw.running_processes,
        total_processes=raw.total_processes,
        last_pid=raw.last_pid,
    )


def build_process_cpu(raw: RawProcessData) -> ProcessCPU:
    return ProcessCPU(pid=raw.pid, usage_percent=raw.cpu_percent)


def build_process_memory(raw: RawProcessData) -> ProcessMemory:
    return ProcessMemory(
        pid=raw.pid,
        rss=raw.memory_rss_bytes,
        vms=raw.memory_vms_bytes,
        usage_percent=raw.memory_percent,
    )


def build_io_stats(raw: RawIOStatsData) -> IOStatsSummary:
    return IOStatsSummary(
        read_ops=raw.read_ops,
        read_bytes=raw.read_bytes,
        write_ops=raw.write_ops,
        write_bytes=raw.write_bytes,
    )


# ============================================================================
# Pressure
# ============================================================================


def build_cpu_pressure(raw: RawPressure) -> CPUPressure:
    return CPUPressure(
        some_avg10=raw.some_avg10,
        some_avg60=raw.some_avg60,
        some_avg300=raw.some_avg300,
        some_total=raw.some_total_us,
    )


def build_pressure(raw: RawPressure) -> Pressure:
    return Pressure(
        some_avg10=raw.some_avg10,
        some_avg60=raw.some_avg60,
        some_avg300=raw.some_avg300,
        some_total=raw.some_total_us,
        full_avg10=raw.full_avg10,
        full_avg60=raw.full_avg60,
        full_avg300=raw.full_avg300,
        full_total=raw.full_total_us,
    )


def build_pressure_metrics(raw: RawPressureMetrics) -> AllPressure:
    return AllPressure(
        cpu=build_cpu_pressure(raw.cpu),
        memory=build_pressure(raw.memory),
        io=build_pressure(raw.io),
    )


# ============================================================================
# Disk / network lists
# ============================================================================


def build_partition(raw: RawPartitionData) -> PartitionInfo:
    return PartitionInfo(
        device=raw.device, mount_point=raw.mount_point, fs_type=raw.fs_type, options=raw.options
    )


def build_partitions(raw: list[RawPartitionData]) -> list[PartitionInfo]:
    return [build_partition(p) for p in raw]


def build_disk_usage(raw: RawDiskUsageData) -> DiskUsageInfo:
    return DiskUsageInfo(
        path=raw.path,
        total_bytes=raw.total_bytes,
        used_bytes=raw.used_bytes,
        free_bytes=raw.free_bytes,
        used_percent=raw.used_percent,
        inodes_total=raw.inodes_total,
        inodes_used=raw.inodes_used,
        inodes_free=raw.inodes_free,
    )


def build_disk_usages(raw: list[RawDiskUsageData]) -> list[DiskUsageInfo]:
    return [build_disk_usage(u) for u in raw]


def build_disk_io(raw: list[RawDiskIOData]) -> list[DiskIOInfo]:
    return [
        DiskIOInfo(
            device=d.device,
            reads_completed=d.reads_completed,
            sectors_read=d.sectors_read,
            read_time_ms=d.read_time_ms,
            writes_completed=d.writes_completed,
            sectors_written=d.sectors_written,
            write_time_ms=d.write_time_ms,
            io_in_progress=d.io_in_progress,
            io_time_ms=d.io_time_ms,
            weighted_io_time_ms=d.weighted_io_time_ms,
        )
        for d in raw
    ]


def build_disk_io_stats(raw: RawDiskIOData) -> DiskIOStats:
    return DiskIOStats(
        device=raw.device,
        reads_completed=raw.reads_completed,
        read_bytes=raw.sectors_read * SECTOR_SIZE,
        read_time_ms=raw.read_time_ms,
        writes_completed=raw.writes_completed,
        write_bytes=raw.sectors_written * SECTOR_SIZE,
        write_time_ms=raw.write_time_ms,
        io_in_progress=raw.io_in_progress,
        io_time_ms=raw.io_time_ms,
        weighted_io_time_ms=raw.weighted_io_time_ms,
    )


def build_net_interfaces(raw: list[RawNetInterfaceData]) -> list[NetInterfaceInfo]:
    return [
        NetInterfaceInfo(
            name=i.name,
            mac_address=i.mac_address,
            mtu=i.mtu,
            is_up=i.is_up,
            is_loopback=i.is_loopback,
        )
        for i in raw
    ]


def build_net_interface(raw: RawNetInterfaceData) -> NetInterface:
    flags = []
    if raw.is_up:
        flags.append("up")
    if raw.is_loopback:
        flags.append("loopback")
    return NetInterface(name=raw.name, hardware_addr=raw.mac_address, mtu=raw.mtu, flags=flags)


def build_net_stats(raw: list[RawNetStatsData]) -> list[NetStatsInfo]:
    return [
        NetStatsInfo(
            interface=s.interface,
            rx_bytes=s.rx_bytes,
            rx_packets=s.rx_packets,
            rx_errors=s.rx_errors,
            rx_drops=s.rx_drops,
            tx_bytes=s.tx_bytes,
            tx_packets=s.tx_packets,
            tx_errors=s.tx_errors,
            tx_drops=s.tx_drops,
        )
        for s in raw
    ]


def build_net_stat(raw: RawNetStatsData) -> NetStats:
    return NetStats(
        interface=raw.interface,
        bytes_sent=raw.tx_bytes,
        bytes_recv=raw.rx_bytes,
        packets_sent=raw.tx_packets,
        packets_recv=raw.rx_packets,
        errors_in=raw.rx_errors,
        errors_out=raw.tx_errors,
        drops_in=raw.rx_drops,
        drops_out=raw.tx_drops,
    )


# ============================================================================
# Connections
# ============================================================================


def build_tcp_connection(raw: RawSocketConnection) -> TcpConnection:
    return TcpConnection(
        family=raw.family,
        local_addr=raw.local_addr,
        local_port=raw.local_port,
        remote_addr=raw.remote_addr,
        remote_port=raw.remote_port,
        state=raw.state,
        pid=raw.pid,
        process_name=raw.process_name,
        inode=raw.inode,
        rx_queue=raw.rx_queue,
        tx_queue=raw.tx_queue,
    )


def build_udp_connection(raw: RawSocketConnection) -> UdpConnection:
    return UdpConnection(
        family=raw.family,
        local_addr=raw.local_addr,
        local_port=raw.local_port,
        remote_addr=raw.remote_addr,
        remote_port=raw.remote_port,
        state=raw.state,
        pid=raw.pid,
        process_name=raw.process_name,
        inode=raw.inode,
        rx_queue=raw.rx_queue,
        tx_queue=raw.tx_queue,
    )


def build_unix_socket(raw: RawUnixSocket) -> UnixSocket:
    return UnixSocket(
        path=raw.path,
        socket_type=raw.socket_type,
        state=raw.state,
        pid=raw.pid,
        process_name=raw.process_name,
        inode=raw.inode,
    )


def build_tcp_stats(raw: RawTcpStats) -> TcpStats:
    return TcpStats(
        established=raw.established,
        syn_sent=raw.syn_sent,
        syn_recv=raw.syn_recv,
        fin_wait1=raw.fin_wait1,
        fin_wait2=raw.fin_wait2,
        time_wait=raw.time_wait,
        close=raw.close,
        close_wait=raw.close_wait,
        last_ack=raw.last_ack,
        listen=raw.listen,
        closing=raw.closing,
    )


# ============================================================================
# Quota / container / runtime
# ============================================================================


def build_quota_limits(raw: RawQuotaLimits) -> QuotaLimits:
    return QuotaLimits(
        flags=raw.flags,
        cpu_quota_us=raw.cpu_quota_us,
        cpu_period_us=raw.cpu_period_us,
        memory_limit_bytes=raw.memory_limit_bytes,
        pids_limit=raw.pids_limit,
        nofile_limit=raw.nofile_limit,
        cpu_time_limit_secs=raw.cpu_time_limit_secs,
        data_limit_bytes=raw.data_limit_bytes,
        io_read_bps=raw.io_read_bps,
        io_write_bps=raw.io_write_bps,
    )


def build_quota_usage(raw: RawQuotaUsage) -> QuotaUsage:
    return QuotaUsage(
        memory_bytes=raw.memory_bytes,
        memory_limit_bytes=raw.memory_limit_bytes,
        pids_current=raw.pids_current,
        pids_limit=raw.pids_limit,
        cpu_percent=raw.cpu_percent,
        cpu_limit_percent=raw.cpu_limit_percent,
    )


def build_container_info(raw: RawContainerInfo) -> ContainerInfo:
    return ContainerInfo(
        is_containerized=raw.is_containerized,
        runtime=raw.runtime,
        container_id=raw.container_id,
    )


def build_available_runtime(raw: RawAvailableRuntime) -> AvailableRuntime:
    return AvailableRuntime(
        runtime=raw.runtime,
        socket_path=raw.socket_path,
        version=raw.version,
        is_running=raw.is_running,
    )


# ============================================================================
# Aggregate
# ============================================================================


def build_all_metrics(raw: RawAllMetrics) -> AllSystemMetrics:
    """
    Compose every family into one snapshot.

    The snapshot timestamp comes from the engine (``timestamp_ns``); when
    the engine leaves it at zero the build time is used instead.
    """
    if raw.timestamp_ns > 0:
        timestamp = datetime.fromtimestamp(raw.timestamp_ns / 1e9, tz=timezone.utc)
    else:
        timestamp = utc_now()

    return AllSystemMetrics(
        cpu=build_cpu_metrics(raw.cpu),
        memory=build_memory_metrics(raw.memory),
        load=build_load_metrics(raw.load),
        io_stats=build_io_stats(raw.io_stats),
        timestamp=timestamp,
        pressure=build_pressure_metrics(raw.pressure) if raw.pressure.available else None,
        partitions=build_partitions(raw.partitions),
        disk_usage=build_disk_usages(raw.disk_usage),
        disk_io=build_disk_io(raw.disk_io),
        net_interfaces=build_net_interfaces(raw.net_interfaces),
        net_stats=build_net_stats(raw.net_stats),
    )
