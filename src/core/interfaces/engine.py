"""
Metrics Engine Protocol

This module defines the boundary between the metrics layer and the engine
that samples the operating system. The engine is an external collaborator:
the metrics layer only relies on the call contract declared here.

Contract:
- ``init()`` / ``shutdown()`` manage the engine handle.
- Every ``collect_*`` / ``read_*`` / ``detect_*`` call returns a pair
  ``(EngineResult, snapshot)``. The snapshot is only meaningful when
  ``EngineResult.success`` is true.
- List-shaped snapshots are returned as ``RawList`` objects owned by the
  engine; the caller copies what it needs and hands the list back through
  ``free_list()`` before returning.
- The engine never raises for data-collection failures; they are reported
  through ``(success, code, message)``.

Architectural Decision: Protocol-based abstraction
- The production engine (PsutilEngine) and test doubles are interchangeable
- The metrics layer can be tested without touching the host

Author: System Architect
Date: 2025-12-08
"""

from dataclasses import dataclass, field
from enum import IntEnum
from typing import Generic, Protocol, TypeVar, runtime_checkable

T = TypeVar("T")


class ResultCode(IntEnum):
    """Result codes reported by the engine."""

    OK = 0
    NOT_SUPPORTED = 1
    PERMISSION_DENIED = 2
    NOT_FOUND = 3
    INVALID_PARAM = 4
    IO_ERROR = 5
    INTERNAL = 99


@dataclass(frozen=True)
class EngineResult:
    """
    Outcome of one engine call.

    Attributes:
        success: True if the snapshot is valid
        code: ResultCode value (or any other integer for unrecognized failures)
        message: Optional engine-provided detail
    """
    success: bool
    code: int = ResultCode.OK
    message: str = ""

    @classmethod
    def ok(cls) -> "EngineResult":
        return cls(success=True)

    @classmethod
    def failure(cls, code: int, message: str = "") -> "EngineResult":
        return cls(success=False, code=int(code), message=message)


@dataclass
class RawList(Generic[T]):
    """
    Engine-owned list of records.

    ``count`` is the number of valid entries reported by the engine; the
    caller sizes its own result from it. ``freed`` flips to True once the
    list has been handed back to the engine.
    """
    items: list[T] = field(default_factory=list)
    count: int = 0
    freed: bool = False

    @classmethod
    def of(cls, items: list[T]) -> "RawList[T]":
        return cls(items=list(items), count=len(items))


# ============================================================================
# Raw snapshot records
# ============================================================================


@dataclass
class RawCPUData:
    idle_percent: float = 0.0
    cores: int = 0
    frequency_mhz: int = 0


@dataclass
class RawMemoryData:
    total_bytes: int = 0
    available_bytes: int = 0
    used_bytes: int = 0
    cached_bytes: int = 0
    buffers_bytes: int = 0
    swap_total_bytes: int = 0
    swap_used_bytes: int = 0


@dataclass
class RawLoadData:
    load_1min: float = 0.0
    load_5min: float = 0.0
    load_15min: float = 0.0
    running_processes: int = 0
    total_processes: int = 0
    last_pid: int = 0


@dataclass
class RawProcessData:
    pid: int = 0
    cpu_percent: float = 0.0
    memory_rss_bytes: int = 0
    memory_vms_bytes: int = 0
    memory_percent: float = 0.0
    num_threads: int = 0
    num_fds: int = 0
    state: str = ""


@dataclass
class RawPressure:
    """One PSI resource line pair (``some`` and ``full``)."""
    some_avg10: float = 0.0
    some_avg60: float = 0.0
    some_avg300: float = 0.0
    some_total_us: int = 0
    full_avg10: float = 0.0
    full_avg60: float = 0.0
    full_avg300: float = 0.0
    full_total_us: int = 0


@dataclass
class RawPressureMetrics:
    available: bool = False
    cpu: RawPressure = field(default_factory=RawPressure)
    memory: RawPressure = field(default_factory=RawPressure)
    io: RawPressure = field(default_factory=RawPressure)


@dataclass
class RawIOStatsData:
    read_ops: int = 0
    read_bytes: int = 0
    write_ops: int = 0
    write_bytes: int = 0


@dataclass
class RawPartitionData:
    device: str = ""
    mount_point: str = ""
    fs_type: str = ""
    options: str = ""


@dataclass
class RawDiskUsageData:
    path: str = ""
    total_bytes: int = 0
    used_bytes: int = 0
    free_bytes: int = 0
    used_percent: float = 0.0
    inodes_total: int = 0
    inodes_used: int = 0
    inodes_free: int = 0


@dataclass
class RawDiskIOData:
    device: str = ""
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
class RawNetInterfaceData:
    name: str = ""
    mac_address: str = ""
    mtu: int = 0
    is_up: bool = False
    is_loopback: bool = False


@dataclass
class RawNetStatsData:
    interface: str = ""
    rx_bytes: int = 0
    rx_packets: int = 0
    rx_errors: int = 0
    rx_drops: int = 0
    tx_bytes: int = 0
    tx_packets: int = 0
    tx_errors: int = 0
    tx_drops: int = 0


@dataclass
class RawSocketConnection:
    """TCP or UDP socket row. ``family`` is 4 or 6, ``state`` a SocketState value."""
    family: int = 0
    local_addr: str = ""
    local_port: int = 0
    remote_addr: str = ""
    remote_port: int = 0
    state: int = 0
    pid: int = -1
    process_name: str = ""
    inode: int = 0
    rx_queue: int = 0
    tx_queue: int = 0


@dataclass
class RawUnixSocket:
    path: str = ""
    socket_type: str = ""
    state: int = 0
    pid: int = -1
    process_name: str = ""
    inode: int = 0


@dataclass
class RawTcpStats:
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


@dataclass
class RawQuotaLimits:
    flags: int = 0
    cpu_quota_us: int = 0
    cpu_period_us: int = 0
    memory_limit_bytes: int = 0
    pids_limit: int = 0
    nofile_limit: int = 0
    cpu_time_limit_secs: int = 0
    data_limit_bytes: int = 0
    io_read_bps: int = 0
    io_write_bps: int = 0


@dataclass
class RawQuotaUsage:
    memory_bytes: int = 0
    memory_limit_bytes: int = 0
    pids_current: int = 0
    pids_limit: int = 0
    cpu_percent: float = 0.0
    cpu_limit_percent: float = 0.0


@dataclass
class RawContainerInfo:
    is_containerized: bool = False
    runtime: int = 0
    container_id: str = ""


@dataclass
class RawAvailableRuntime:
    runtime: int = 0
    socket_path: str = ""
    version: str = ""
    is_running: bool = False


@dataclass
class RawRuntimeInfo:
    is_containerized: bool = False
    container_runtime: int = 0
    orchestrator: int = 0
    container_id: str = ""
    workload_id: str = ""
    workload_name: str = ""
    namespace: str = ""
    available_runtimes: RawList[RawAvailableRuntime] = field(default_factory=RawList)


@dataclass
class RawAllMetrics:
    cpu: RawCPUData = field(default_factory=RawCPUData)
    memory: RawMemoryData = field(default_factory=RawMemoryData)
    load: RawLoadData = field(default_factory=RawLoadData)
    io_stats: RawIOStatsData = field(default_factory=RawIOStatsData)
    pressure: RawPressureMetrics = field(default_factory=RawPressureMetrics)
    partitions: list[RawPartitionData] = field(default_factory=list)
    disk_usage: list[RawDiskUsageData] = field(default_factory=list)
    disk_io: list[RawDiskIOData] = field(default_factory=list)
    net_interfaces: list[RawNetInterfaceData] = field(default_factory=list)
    net_stats: list[RawNetStatsData] = field(default_factory=list)
    timestamp_ns: int = 0


# ============================================================================
# Engine protocol
# ============================================================================


@runtime_checkable
class MetricsEngine(Protocol):
    """
    Protocol implemented by metrics engines.

    Implementations:
    - PsutilEngine: production engine backed by psutil, procfs and cgroupfs
    - MagicMock(spec=MetricsEngine): unit tests

    Implementations are expected to be thread-safe for concurrent read-only
    queries once ``init()`` has succeeded.
    """

    def init(self) -> EngineResult: ...

    def shutdown(self) -> None: ...

    def free_list(self, raw: RawList) -> None:
        """Release an engine-owned list returned by a collection call."""
        ...

    def platform(self) -> str: ...

    def quota_supported(self) -> bool: ...

    # CPU / memory / load / process
    def collect_cpu(self) -> tuple[EngineResult, RawCPUData]: ...

    def collect_memory(self) -> tuple[EngineResult, RawMemoryData]: ...

    def collect_load(self) -> tuple[EngineResult, RawLoadData]: ...

    def collect_process(self, pid: int) -> tuple[EngineResult, RawProcessData]: ...

    def collect_pressure(self) -> tuple[EngineResult, RawPressureMetrics]: ...

    def collect_io_stats(self) -> tuple[EngineResult, RawIOStatsData]: ...

    # Disk
    def list_partitions(self) -> tuple[EngineResult, RawList[RawPartitionData]]: ...

    def collect_disk_usage(self, path: str) -> tuple[EngineResult, RawDiskUsageData]: ...

    def collect_disk_io(self) -> tuple[EngineResult, RawList[RawDiskIOData]]: ...

    # Network
    def list_net_interfaces(self) -> tuple[EngineResult, RawList[RawNetInterfaceData]]: ...

    def collect_net_stats(self) -> tuple[EngineResult, RawList[RawNetStatsData]]: ...

    # Connections
    def collect_tcp_connections(self) -> tuple[EngineResult, RawList[RawSocketConnection]]: ...

    def collect_udp_connections(self) -> tuple[EngineResult, RawList[RawSocketConnection]]: ...

    def collect_unix_sockets(self) -> tuple[EngineResult, RawList[RawUnixSocket]]: ...

    def collect_tcp_stats(self) -> tuple[EngineResult, RawTcpStats]: ...

    # Quota / container / runtime
    def read_quota_limits(self, pid: int) -> tuple[EngineResult, RawQuotaLimits]: ...

    def read_quota_usage(self, pid: int) -> tuple[EngineResult, RawQuotaUsage]: ...

    def detect_container(self) -> tuple[EngineResult, RawContainerInfo]: ...

    def detect_runtime(self) -> tuple[EngineResult, RawRuntimeInfo]: ...

    def is_containerized(self) -> bool: ...

    def get_runtime_name(self) -> str: ...

    # Aggregate
    def collect_all(self) -> tuple[EngineResult, RawAllMetrics]: ...
