"""
Public Metrics Records

Caller-owned snapshots produced by the collectors and the raw-to-domain
builders. Every record is created fresh per call and never aliases
engine-owned storage.

Author: System Architect
Date: 2025-12-08
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


# ============================================================================
# CPU / memory / load
# ============================================================================


@dataclass
class SystemCPU:
    usage_percent: float
    cores: int = 0
    frequency_mhz: int = 0
    timestamp: datetime = field(default_factory=utc_now)


@dataclass
class ProcessCPU:
    pid: int
    usage_percent: float
    timestamp: datetime = field(default_factory=utc_now)


@dataclass
class SystemMemory:
    total: int
    available: int
    used: int
    free: int = 0
    cached: int = 0
    buffers: int = 0
    swap_total: int = 0
    swap_used: int = 0
    swap_free: int = 0
    usage_percent: float = 0.0
    timestamp: datetime = field(default_factory=utc_now)


@dataclass
class ProcessMemory:
    pid: int
    rss: int
    vms: int
    usage_percent: float
    timestamp: datetime = field(default_factory=utc_now)


@dataclass
class LoadAverage:
    load1: float
    load5: float
    load15: float
    running_processes: int = 0
    total_processes: int = 0
    last_pid: int = 0
    timestamp: datetime = field(default_factory=utc_now)


# ============================================================================
# Pressure (PSI)
# ============================================================================


@dataclass
class CPUPressure:
    some_avg10: float = 0.0
    some_avg60: float = 0.0
    some_avg300: float = 0.0
    some_total: int = 0
    timestamp: datetime = field(default_factory=utc_now)


@dataclass
class Pressure:
    """Memory / IO pressure: both ``some`` and ``full`` stall lines."""
    some_avg10: float = 0.0
    some_avg60: float = 0.0
    some_avg300: float = 0.0
    some_total: int = 0
    full_avg10: float = 0.0
    full_avg60: float = 0.0
    full_avg300: float = 0.0
    full_total: int = 0
    timestamp: datetime = field(default_factory=utc_now)


MemoryPressure = Pressure
IOPressure = Pressure


@dataclass
class AllPressure:
    cpu: CPUPressure
    memory: Pressure
    io: Pressure


# ============================================================================
# I/O
# ============================================================================


@dataclass
class IOStatsSummary:
    read_ops: int = 0
    read_bytes: int = 0
    write_ops: int = 0
    write_bytes: int = 0
    timestamp: datetime = field(default_factory=utc_now)


# ============================================================================
# Disk
# ============================================================================


@dataclass
class PartitionInfo:
    device: str
    mount_point: str
    fs_type: str
    options: str = ""


@dataclass
class DiskUsageInfo:
    path: str
    total_bytes: int
    used_bytes: int
    free_bytes: int
    used_percent: float
    inodes_total: int = 0
    inodes_used: int = 0
    inodes_free: int = 0


@dataclass
class DiskIOInfo:
    """Raw per-device counters (sector units) as carried in the aggregate snapshot."""
    device: str
    reads_completed: int = 0
    sectors_read: int = 0
    read_time_ms: int = 0
    writes_completed: int = 0
    sectors_written: int = 0
    write_time_ms: int = 0
    io_in_progress: int = 0
    io_time_ms: int = 0
    weighted_io_time_ms: int = 0


@dataclass
class DiskIOStats:
    """Per-device I/O counters with sector counts converted to bytes."""
    device: str
    reads_completed: int = 0
    read_bytes: int = 0
    read_time_ms: int = 0
    writes_completed: int = 0
    write_bytes: int = 0
    write_time_ms: int = 0
    io_in_progress: int = 0
    io_time_ms: int = 0
    weighted_io_time_ms: int = 0
    timestamp: datetime = field(default_factory=utc_now)


# ============================================================================
# Network
# ============================================================================


@dataclass
class NetInterfaceInfo:
    name: str
    mac_address: str = ""
    mtu: int = 0
    is_up: bool = False
    is_loopback: bool = False


@dataclass
class NetStatsInfo:
    interface: str
    rx_bytes: int = 0
    rx_packets: int = 0
    rx_errors: int = 0
    rx_drops: int = 0
    tx_bytes: int = 0
    tx_packets: int = 0
    tx_errors: int = 0
    tx_drops: int = 0


@dataclass
class NetInterface:
    name: str
    hardware_addr: str = ""
    mtu: int = 0
    flags: list[str] = field(default_factory=list)


@dataclass
class NetStats:
    interface: str
    bytes_sent: int = 0
    bytes_recv: int = 0
    packets_sent: int = 0
    packets_recv: int = 0
    errors_in: int = 0
    errors_out: int = 0
    drops_in: int = 0
    drops_out: int = 0
    timestamp: datetime = field(default_factory=utc_now)


# ============================================================================
# Aggregate
# ============================================================================


@dataclass
class AllSystemMetrics:
    """
    One timestamped snapshot of every metrics family.

    ``pressure`` is None when the host does not expose PSI, which is
    different from a zero-valued pressure record.
    """
    cpu: SystemCPU
    memory: SystemMemory
    load: LoadAverage
    io_stats: IOStatsSummary
    timestamp: datetime
    pressure: AllPressure | None = None
    partitions: list[PartitionInfo] = field(default_factory=list)
    disk_usage: list[DiskUsageInfo] = field(default_factory=list)
    disk_io: list[DiskIOInfo] = field(default_factory=list)
    net_interfaces: list[NetInterfaceInfo] = field(default_factory=list)
    net_stats: list[NetStatsInfo] = field(default_factory=list)
