"""
psutil Metrics Engine

Concrete MetricsEngine backed by psutil, with procfs / cgroupfs readers
for what psutil does not expose (PSI, sector counters, socket inodes,
quota ceilings) and runtime-socket inspection for container detection.

Error Contract:
- No method raises. Every failure becomes an EngineResult code:
    psutil.AccessDenied / PermissionError → PERMISSION_DENIED
    psutil.NoSuchProcess / FileNotFoundError → NOT_FOUND
    NotImplementedError / AttributeError (missing platform API) → NOT_SUPPORTED
    ValueError → INVALID_PARAM
    OSError → IO_ERROR
    anything else → INTERNAL
- Lists are returned as RawList and must be handed back via free_list().

Author: System Architect
Date: 2025-12-08
"""

import os
import socket
import sys
import threading
import time
from collections.abc import Callable
from typing import Any, TypeVar

import psutil

from src.core.config.constants import Stage
from src.core.config.settings import EngineSettings, get_settings
from src.core.interfaces.engine import (
    EngineResult,
    RawAllMetrics,
    RawContainerInfo,
    RawCPUData,
    RawDiskIOData,
    RawDiskUsageData,
    RawIOStatsData,
    RawList,
    RawLoadData,
    RawMemoryData,
    RawNetInterfaceData,
    RawNetStatsData,
    RawPartitionData,
    RawPressureMetrics,
    RawProcessData,
    RawQuotaLimits,
    RawQuotaUsage,
    RawRuntimeInfo,
    RawSocketConnection,
    RawTcpStats,
    RawUnixSocket,
    ResultCode,
)
from src.core.logging.logger import get_logger
from src.infrastructure.engine import procfs
from src.infrastructure.engine.cgroup import CgroupReader
from src.infrastructure.engine.container import RuntimeInspector
from src.metrics.connections import AddressFamily, SocketState

logger = get_logger(__name__)

T = TypeVar("T")

PSUTIL_STATES: dict[str, SocketState] = {
    psutil.CONN_ESTABLISHED: SocketState.ESTABLISHED,
    psutil.CONN_SYN_SENT: SocketState.SYN_SENT,
    psutil.CONN_SYN_RECV: SocketState.SYN_RECV,
    psutil.CONN_FIN_WAIT1: SocketState.FIN_WAIT1,
    psutil.CONN_FIN_WAIT2: SocketState.FIN_WAIT2,
    psutil.CONN_TIME_WAIT: SocketState.TIME_WAIT,
    psutil.CONN_CLOSE: SocketState.CLOSE,
    psutil.CONN_CLOSE_WAIT: SocketState.CLOSE_WAIT,
    psutil.CONN_LAST_ACK: SocketState.LAST_ACK,
    psutil.CONN_LISTEN: SocketState.LISTEN,
    psutil.CONN_CLOSING: SocketState.CLOSING,
}

TCP_STATS_FIELDS: dict[SocketState, str] = {
    SocketState.ESTABLISHED: "established",
    SocketState.SYN_SENT: "syn_sent",
    SocketState.SYN_RECV: "syn_recv",
    SocketState.FIN_WAIT1: "fin_wait1",
    SocketState.FIN_WAIT2: "fin_wait2",
    SocketState.TIME_WAIT: "time_wait",
    SocketState.CLOSE: "close",
    SocketState.CLOSE_WAIT: "close_wait",
    SocketState.LAST_ACK: "last_ack",
    SocketState.LISTEN: "listen",
    SocketState.CLOSING: "closing",
}

UNIX_SOCKET_TYPES: dict[int, str] = {
    socket.SOCK_STREAM: "stream",
    socket.SOCK_DGRAM: "dgram",
    socket.SOCK_SEQPACKET: "seqpacket",
}


def _failure_for(exc: BaseException) -> EngineResult:
    """Map an exception raised while sampling onto a result code."""
    message = str(exc) or type(exc).__name__
    if isinstance(exc, (psutil.AccessDenied, PermissionError)):
        return EngineResult.failure(ResultCode.PERMISSION_DENIED, message)
    if isinstance(exc, (psutil.NoSuchProcess, FileNotFoundError)):
        return EngineResult.failure(ResultCode.NOT_FOUND, message)
    if isinstance(exc, (NotImplementedError, AttributeError)):
        return EngineResult.failure(ResultCode.NOT_SUPPORTED, message)
    if isinstance(exc, ValueError):
        return EngineResult.failure(ResultCode.INVALID_PARAM, message)
    if isinstance(exc, OSError):
        return EngineResult.failure(ResultCode.IO_ERROR, message)
    return EngineResult.failure(ResultCode.INTERNAL, message)


class PsutilEngine:
    """
    Production metrics engine.

    Thread-safe for concurrent read-only queries: psutil calls are
    independent, and the only shared state (the process-name cache used
    while building connection rows) is rebuilt per call.
    """

    def __init__(self, settings: EngineSettings | None = None):
        settings = settings or get_settings().engine
        self._proc_root = settings.ENGINE_PROC_ROOT
        self._cpu_interval = settings.ENGINE_CPU_SAMPLE_INTERVAL
        self._cgroups = CgroupReader(settings.ENGINE_PROC_ROOT, settings.ENGINE_CGROUP_ROOT)
        self._inspector = RuntimeInspector(
            proc_root=settings.ENGINE_PROC_ROOT,
            socket_timeout=settings.ENGINE_RUNTIME_SOCKET_TIMEOUT,
        )
        self._lock = threading.Lock()
        self._outstanding = 0

    # ========================================================================
    # Plumbing
    # ========================================================================

    def _sample(self, operation: str, fn: Callable[[], T], empty: T) -> tuple[EngineResult, T]:
        try:
            return EngineResult.ok(), fn()
        except Exception as e:
            result = _failure_for(e)
            logger.debug(
                "Engine sample failed",
                stage=Stage.COLLECT,
                operation=operation,
                code=result.code,
                error=result.message,
            )
            return result, empty

    def _sample_list(self, operation: str, fn: Callable[[], list[Any]]) -> tuple[EngineResult, RawList]:
        result, items = self._sample(operation, fn, [])
        if not result.success:
            return result, RawList()
        with self._lock:
            self._outstanding += 1
        return result, RawList.of(items)

    @property
    def outstanding_lists(self) -> int:
        """Lists handed out and not yet freed."""
        with self._lock:
            return self._outstanding

    # ========================================================================
    # Lifecycle
    # ========================================================================

    def init(self) -> EngineResult:
        def prime() -> None:
            # cpu_percent(None) measures against the previous call; prime it
            psutil.cpu_percent(interval=None)
            psutil.boot_time()

        result, _ = self._sample("init", prime, None)
        return result

    def shutdown(self) -> None:
        with self._lock:
            self._outstanding = 0

    def free_list(self, raw: RawList) -> None:
        if raw.freed:
            return
        raw.items = []
        raw.count = 0
        raw.freed = True
        with self._lock:
            self._outstanding = max(self._outstanding - 1, 0)

    def platform(self) -> str:
        return sys.platform

    def quota_supported(self) -> bool:
        return sys.platform.startswith("linux") and self._cgroups.is_available()

    # ========================================================================
    # CPU / memory / load / process
    # ========================================================================

    def collect_cpu(self) -> tuple[EngineResult, RawCPUData]:
        def sample() -> RawCPUData:
            times = psutil.cpu_times_percent(interval=self._cpu_interval or None)
            freq = psutil.cpu_freq()
            return RawCPUData(
                idle_percent=times.idle,
                cores=psutil.cpu_count() or 0,
                frequency_mhz=int(freq.current) if freq else 0,
            )

        return self._sample("cpu", sample, RawCPUData())

    def collect_memory(self) -> tuple[EngineResult, RawMemoryData]:
        def sample() -> RawMemoryData:
            vm = psutil.virtual_memory()
            swap = psutil.swap_memory()
            return RawMemoryData(
                total_bytes=vm.total,
                available_bytes=vm.available,
                used_bytes=vm.used,
                cached_bytes=getattr(vm, "cached", 0),
                buffers_bytes=getattr(vm, "buffers", 0),
                swap_total_bytes=swap.total,
                swap_used_bytes=swap.used,
            )

        return self._sample("memory", sample, RawMemoryData())

    def collect_load(self) -> tuple[EngineResult, RawLoadData]:
        def sample() -> RawLoadData:
            if os.path.exists(os.path.join(self._proc_root, "loadavg")):
                load1, load5, load15, running, total, last_pid = procfs.read_loadavg(self._proc_root)
                return RawLoadData(load1, load5, load15, running, total, last_pid)

            load1, load5, load15 = psutil.getloadavg()
            pids = psutil.pids()
            return RawLoadData(
                load_1min=load1,
                load_5min=load5,
                load_15min=load15,
                total_processes=len(pids),
                last_pid=max(pids, default=0),
            )

        return self._sample("load", sample, RawLoadData())

    def collect_process(self, pid: int) -> tuple[EngineResult, RawProcessData]:
        def sample() -> RawProcessData:
            if pid < 0:
                raise ValueError(f"invalid pid: {pid}")
            proc = psutil.Process(pid or os.getpid())
            with proc.oneshot():
                memory = proc.memory_info()
                num_fds = proc.num_fds() if hasattr(proc, "num_fds") else 0
                snapshot = RawProcessData(
                    pid=proc.pid,
                    memory_rss_bytes=memory.rss,
                    memory_vms_bytes=memory.vms,
                    memory_percent=proc.memory_percent(),
                    num_threads=proc.num_threads(),
                    num_fds=num_fds,
                    state=proc.status(),
                )
            snapshot.cpu_percent = proc.cpu_percent(interval=self._cpu_interval or None)
            return snapshot

        return self._sample("process", sample, RawProcessData())

    def collect_pressure(self) -> tuple[EngineResult, RawPressureMetrics]:
        return self._sample("pressure", lambda: procfs.read_pressure(self._proc_root), RawPressureMetrics())

    def collect_io_stats(self) -> tuple[EngineResult, RawIOStatsData]:
        def sample() -> RawIOStatsData:
            counters = psutil.disk_io_counters(perdisk=False)
            if counters is None:
                return RawIOStatsData()
            return RawIOStatsData(
                read_ops=counters.read_count,
                read_bytes=counters.read_bytes,
                write_ops=counters.write_count,
                write_bytes=counters.write_bytes,
            )

        return self._sample("io_stats", sample, RawIOStatsData())

    # ========================================================================
    # Disk
    # ========================================================================

    def _partitions(self) -> list[RawPartitionData]:
        return [
            RawPartitionData(device=p.device, mount_point=p.mountpoint, fs_type=p.fstype, options=p.opts)
            for p in psutil.disk_partitions(all=False)
        ]

    def list_partitions(self) -> tuple[EngineResult, RawList[RawPartitionData]]:
        return self._sample_list("partitions", self._partitions)

    def _disk_usage(self, path: str) -> RawDiskUsageData:
        if not path:
            raise ValueError("empty path")
        usage = psutil.disk_usage(path)
        inodes_total = inodes_free = 0
        if hasattr(os, "statvfs"):
            stat = os.statvfs(path)
            inodes_total, inodes_free = stat.f_files, stat.f_ffree
        return RawDiskUsageData(
            path=path,
            total_bytes=usage.total,
            used_bytes=usage.used,
            free_bytes=usage.free,
            used_percent=usage.percent,
            inodes_total=inodes_total,
            inodes_used=inodes_total - inodes_free,
            inodes_free=inodes_free,
        )

    def collect_disk_usage(self, path: str) -> tuple[EngineResult, RawDiskUsageData]:
        return self._sample("disk_usage", lambda: self._disk_usage(path), RawDiskUsageData(path=path))

    def _disk_io(self) -> list[RawDiskIOData]:
        if os.path.exists(os.path.join(self._proc_root, "diskstats")):
            return procfs.read_diskstats(self._proc_root)

        sector = 512
        return [
            RawDiskIOData(
                device=name,
                reads_completed=c.read_count,
                sectors_read=c.read_bytes // sector,
                read_time_ms=c.read_time,
                writes_completed=c.write_count,
                sectors_written=c.write_bytes // sector,
                write_time_ms=c.write_time,
                io_time_ms=getattr(c, "busy_time", 0),
            )
            for name, c in (psutil.disk_io_counters(perdisk=True) or {}).items()
        ]

    def collect_disk_io(self) -> tuple[EngineResult, RawList[RawDiskIOData]]:
        return self._sample_list("disk_io", self._disk_io)

    # ========================================================================
    # Network
    # ========================================================================

    def _net_interfaces(self) -> list[RawNetInterfaceData]:
        addrs = psutil.net_if_addrs()
        interfaces = []
        for name, stats in psutil.net_if_stats().items():
            mac = next((a.address for a in addrs.get(name, []) if a.family == psutil.AF_LINK), "")
            flags = getattr(stats, "flags", "")
            interfaces.append(
                RawNetInterfaceData(
                    name=name,
                    mac_address=mac,
                    mtu=stats.mtu,
                    is_up=stats.isup,
                    is_loopback="loopback" in flags or name in ("lo", "lo0"),
                )
            )
        return interfaces

    def list_net_interfaces(self) -> tuple[EngineResult, RawList[RawNetInterfaceData]]:
        return self._sample_list("net_interfaces", self._net_interfaces)

    def _net_stats(self) -> list[RawNetStatsData]:
        return [
            RawNetStatsData(
                interface=name,
                rx_bytes=c.bytes_recv,
                rx_packets=c.packets_recv,
                rx_errors=c.errin,
                rx_drops=c.dropin,
                tx_bytes=c.bytes_sent,
                tx_packets=c.packets_sent,
                tx_errors=c.errout,
                tx_drops=c.dropout,
            )
            for name, c in psutil.net_io_counters(pernic=True).items()
        ]

    def collect_net_stats(self) -> tuple[EngineResult, RawList[RawNetStatsData]]:
        return self._sample_list("net_stats", self._net_stats)

    # ========================================================================
    # Connections
    # ========================================================================

    @staticmethod
    def _process_names() -> Callable[[int | None], str]:
        cache: dict[int, str] = {}

        def lookup(pid: int | None) -> str:
            if not pid:
                return ""
            if pid not in cache:
                try:
                    cache[pid] = psutil.Process(pid).name()
                except (psutil.NoSuchProcess, psutil.AccessDenied):
                    cache[pid] = ""
            return cache[pid]

        return lookup

    def _inet_connections(self, kind: str) -> list[RawSocketConnection]:
        extras = procfs.read_socket_tables(self._proc_root, kind)
        name_of = self._process_names()
        rows = []
        for conn in psutil.net_connections(kind=kind):
            local_addr, local_port = conn.laddr if conn.laddr else ("", 0)
            remote_addr, remote_port = conn.raddr if conn.raddr else ("", 0)
            inode, rx_queue, tx_queue = extras.get(
                (local_addr, local_port, remote_addr or _any_addr(conn.family), remote_port), (0, 0, 0)
            )
            rows.append(
                RawSocketConnection(
                    family=AddressFamily.IPV6 if conn.family == socket.AF_INET6 else AddressFamily.IPV4,
                    local_addr=local_addr,
                    local_port=local_port,
                    remote_addr=remote_addr,
                    remote_port=remote_port,
                    state=PSUTIL_STATES.get(conn.status, SocketState.UNKNOWN),
                    pid=conn.pid if conn.pid is not None else -1,
                    process_name=name_of(conn.pid),
                    inode=inode,
                    rx_queue=rx_queue,
                    tx_queue=tx_queue,
                )
            )
        return rows

    def collect_tcp_connections(self) -> tuple[EngineResult, RawList[RawSocketConnection]]:
        return self._sample_list("tcp_connections", lambda: self._inet_connections("tcp"))

    def collect_udp_connections(self) -> tuple[EngineResult, RawList[RawSocketConnection]]:
        return self._sample_list("udp_connections", lambda: self._inet_connections("udp"))

    def _unix_sockets(self) -> list[RawUnixSocket]:
        name_of = self._process_names()
        return [
            RawUnixSocket(
                path=conn.laddr or "",
                socket_type=UNIX_SOCKET_TYPES.get(conn.type, "unknown"),
                state=PSUTIL_STATES.get(conn.status, SocketState.UNKNOWN),
                pid=conn.pid if conn.pid is not None else -1,
                process_name=name_of(conn.pid),
            )
            for conn in psutil.net_connections(kind="unix")
        ]

    def collect_unix_sockets(self) -> tuple[EngineResult, RawList[RawUnixSocket]]:
        return self._sample_list("unix_sockets", self._unix_sockets)

    def _tcp_stats(self) -> RawTcpStats:
        """
        Count TCP sockets per state.

        Only the eleven kernel TCP states have a counter. Rows psutil reports
        in any other status (NONE, DELETE_TCB, IDLE, BOUND) are listed by
        collect_tcp_connections as UNKNOWN and are left out of these counts,
        so total() equals the number of listed rows with a known state.
        """
        stats = RawTcpStats()
        for conn in psutil.net_connections(kind="tcp"):
            state = PSUTIL_STATES.get(conn.status)
            if state is not None:
                field_name = TCP_STATS_FIELDS[state]
                setattr(stats, field_name, getattr(stats, field_name) + 1)
        return stats

    def collect_tcp_stats(self) -> tuple[EngineResult, RawTcpStats]:
        return self._sample("tcp_stats", self._tcp_stats, RawTcpStats())

    # ========================================================================
    # Quota / container / runtime
    # ========================================================================

    def _require_quota(self) -> None:
        if not self.quota_supported():
            raise NotImplementedError(f"resource quotas not supported on {sys.platform}")

    def read_quota_limits(self, pid: int) -> tuple[EngineResult, RawQuotaLimits]:
        def sample() -> RawQuotaLimits:
            self._require_quota()
            if pid < 0:
                raise ValueError(f"invalid pid: {pid}")
            return self._cgroups.read_limits(pid)

        return self._sample("quota_limits", sample, RawQuotaLimits())

    def read_quota_usage(self, pid: int) -> tuple[EngineResult, RawQuotaUsage]:
        def sample() -> RawQuotaUsage:
            self._require_quota()
            if pid < 0:
                raise ValueError(f"invalid pid: {pid}")
            cpu_percent = psutil.Process(pid or os.getpid()).cpu_percent(interval=self._cpu_interval or None)
            return self._cgroups.read_usage(pid, cpu_percent)

        return self._sample("quota_usage", sample, RawQuotaUsage())

    def detect_container(self) -> tuple[EngineResult, RawContainerInfo]:
        return self._sample("container", self._inspector.detect_container, RawContainerInfo())

    def detect_runtime(self) -> tuple[EngineResult, RawRuntimeInfo]:
        result, info = self._sample("runtime", self._inspector.detect_runtime, RawRuntimeInfo())
        if result.success:
            with self._lock:
                self._outstanding += 1
        return result, info

    def is_containerized(self) -> bool:
        return self._inspector.is_containerized()

    def get_runtime_name(self) -> str:
        return self._inspector.runtime_name()

    # ========================================================================
    # Aggregate
    # ========================================================================

    def collect_all(self) -> tuple[EngineResult, RawAllMetrics]:
        """
        Every family in one pass.

        Only CPU and memory are mandatory; the other families degrade to
        empty values when the host cannot provide them.
        """
        snapshot = RawAllMetrics(timestamp_ns=time.time_ns())

        result, snapshot.cpu = self.collect_cpu()
        if not result.success:
            return result, RawAllMetrics()
        result, snapshot.memory = self.collect_memory()
        if not result.success:
            return result, RawAllMetrics()

        for attr, collect in (
            ("load", self.collect_load),
            ("io_stats", self.collect_io_stats),
            ("pressure", self.collect_pressure),
        ):
            result, value = collect()
            if result.success:
                setattr(snapshot, attr, value)

        for attr, operation, fn in (
            ("partitions", "partitions", self._partitions),
            ("disk_io", "disk_io", self._disk_io),
            ("net_interfaces", "net_interfaces", self._net_interfaces),
            ("net_stats", "net_stats", self._net_stats),
        ):
            _, items = self._sample(operation, fn, [])
            setattr(snapshot, attr, items)

        for partition in snapshot.partitions:
            result, usage = self.collect_disk_usage(partition.mount_point)
            if result.success:
                snapshot.disk_usage.append(usage)

        return EngineResult.ok(), snapshot


def _any_addr(family: int) -> str:
    """Wildcard remote address as spelled in the kernel socket tables."""
    return "::" if family == socket.AF_INET6 else "0.0.0.0"
