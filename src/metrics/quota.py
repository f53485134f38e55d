"""
Resource Quota Records

QuotaLimits / QuotaUsage describe the cgroup and rlimit ceilings that
apply to a process, and ContainerInfo the containment it runs in.

Each QuotaLimits field is meaningful only if its QuotaFlag bit is set.
An unset flag, a zero value and the QUOTA_UNLIMITED sentinel all mean
"no limit"; every ``has_*_limit()`` predicate treats the three the same.

Author: System Architect
Date: 2025-12-08
"""

from dataclasses import dataclass
from enum import IntEnum, IntFlag

from src.core.config.constants import FULL_PERCENT, QUOTA_UNLIMITED


class QuotaFlag(IntFlag):
    """Which QuotaLimits fields carry a value."""

    NONE = 0
    CPU = 1 << 0
    MEMORY = 1 << 1
    PIDS = 1 << 2
    NOFILE = 1 << 3
    CPU_TIME = 1 << 4
    DATA = 1 << 5
    IO_READ = 1 << 6
    IO_WRITE = 1 << 7


def _is_limited(value: int) -> bool:
    return 0 < value != QUOTA_UNLIMITED


@dataclass
class QuotaLimits:
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

    def _has(self, flag: QuotaFlag, value: int) -> bool:
        return bool(self.flags & flag) and _is_limited(value)

    def has_cpu_limit(self) -> bool:
        return self._has(QuotaFlag.CPU, self.cpu_quota_us)

    def has_memory_limit(self) -> bool:
        return self._has(QuotaFlag.MEMORY, self.memory_limit_bytes)

    def has_pids_limit(self) -> bool:
        return self._has(QuotaFlag.PIDS, self.pids_limit)

    def has_nofile_limit(self) -> bool:
        return self._has(QuotaFlag.NOFILE, self.nofile_limit)

    def has_cpu_time_limit(self) -> bool:
        return self._has(QuotaFlag.CPU_TIME, self.cpu_time_limit_secs)

    def has_data_limit(self) -> bool:
        return self._has(QuotaFlag.DATA, self.data_limit_bytes)

    def has_io_read_limit(self) -> bool:
        return self._has(QuotaFlag.IO_READ, self.io_read_bps)

    def has_io_write_limit(self) -> bool:
        return self._has(QuotaFlag.IO_WRITE, self.io_write_bps)

    def cpu_limit_percent(self) -> float:
        """CPU ceiling as a percentage of one core (150.0 = 1.5 cores); 0 when unlimited."""
        if not self.has_cpu_limit() or self.cpu_period_us == 0:
            return 0.0
        return self.cpu_quota_us / self.cpu_period_us * FULL_PERCENT


@dataclass
class QuotaUsage:
    memory_bytes: int = 0
    memory_limit_bytes: int = 0
    pids_current: int = 0
    pids_limit: int = 0
    cpu_percent: float = 0.0
    cpu_limit_percent: float = 0.0

    def memory_usage_percent(self) -> float:
        """Memory usage relative to the limit; 0 when there is no limit."""
        if not _is_limited(self.memory_limit_bytes):
            return 0.0
        return self.memory_bytes / self.memory_limit_bytes * FULL_PERCENT


class ContainerRuntime(IntEnum):
    """Isolation mechanism reported by the lightweight container check."""

    NONE = 0
    DOCKER = 1
    PODMAN = 2
    LXC = 3
    KUBERNETES = 4
    JAIL = 5
    UNKNOWN = 255

    @classmethod
    def name_for(cls, value: int) -> str:
        return CONTAINER_RUNTIME_NAMES.get(value, "unknown")

    def __str__(self) -> str:
        return ContainerRuntime.name_for(int(self))


CONTAINER_RUNTIME_NAMES: dict[int, str] = {
    ContainerRuntime.NONE: "none",
    ContainerRuntime.DOCKER: "docker",
    ContainerRuntime.PODMAN: "podman",
    ContainerRuntime.LXC: "lxc",
    ContainerRuntime.KUBERNETES: "kubernetes",
    ContainerRuntime.JAIL: "jail",
    ContainerRuntime.UNKNOWN: "unknown",
}


@dataclass
class ContainerInfo:
    is_containerized: bool = False
    runtime: int = ContainerRuntime.NONE
    container_id: str = ""

    @property
    def runtime_name(self) -> str:
        return ContainerRuntime.name_for(self.runtime)
