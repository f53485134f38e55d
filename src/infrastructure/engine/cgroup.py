"""
cgroup / rlimit Quota Reader

Resolves the resource ceilings that apply to one process:

- cgroup v2 (unified): cpu.max, memory.max, pids.max, io.max,
  memory.current, pids.current
- cgroup v1: cpu.cfs_quota_us / cpu.cfs_period_us,
  memory.limit_in_bytes, pids.max, memory.usage_in_bytes, pids.current
- process rlimits: RLIMIT_NOFILE, RLIMIT_CPU, RLIMIT_DATA

A limit that is present but unbounded ("max", -1, RLIM_INFINITY) is
reported with its flag set and the QUOTA_UNLIMITED sentinel as value.
"""

import os
import resource
from pathlib import Path

from src.core.config.constants import QUOTA_UNLIMITED
from src.core.interfaces.engine import RawQuotaLimits, RawQuotaUsage
from src.metrics.quota import QuotaFlag

# cgroup v1 reports "no memory limit" as a page-aligned LONG_MAX
V1_UNLIMITED_THRESHOLD = 1 << 62


def _read(path: Path) -> str | None:
    if not path.exists():
        return None
    return path.read_text().strip()


def _parse_limit(value: str) -> int:
    if value == "max":
        return QUOTA_UNLIMITED
    number = int(value)
    if number < 0 or number >= V1_UNLIMITED_THRESHOLD:
        return QUOTA_UNLIMITED
    return number


class CgroupReader:
    """
    Quota reader bound to one procfs root and one cgroupfs root.
    """

    def __init__(self, proc_root: str = "/proc", cgroup_root: str = "/sys/fs/cgroup"):
        self._proc_root = Path(proc_root)
        self._cgroup_root = Path(cgroup_root)

    def is_unified(self) -> bool:
        return (self._cgroup_root / "cgroup.controllers").exists()

    def is_available(self) -> bool:
        return self._cgroup_root.is_dir()

    def cgroup_paths(self, pid: int) -> dict[str, str]:
        """
        Controller → cgroup path for a process.

        The unified hierarchy is keyed by the empty string.
        """
        target = "self" if pid == 0 else str(pid)
        paths = {}
        for line in (self._proc_root / target / "cgroup").read_text().splitlines():
            parts = line.split(":", 2)
            if len(parts) != 3:
                continue
            _, controllers, path = parts
            if not controllers:
                paths[""] = path
                continue
            for controller in controllers.split(","):
                paths[controller] = path
        return paths

    def _v2_dir(self, paths: dict[str, str]) -> Path:
        return self._cgroup_root / paths.get("", "/").lstrip("/")

    def _v1_dir(self, paths: dict[str, str], controller: str, mount: str) -> Path:
        return self._cgroup_root / mount / paths.get(controller, "/").lstrip("/")

    # ------------------------------------------------------------------
    # Limits
    # ------------------------------------------------------------------

    def read_limits(self, pid: int) -> RawQuotaLimits:
        """
        Raises:
            FileNotFoundError: If the process does not exist
            PermissionError: If its cgroup membership is not readable
        """
        limits = RawQuotaLimits()
        paths = self.cgroup_paths(pid)

        if self.is_unified():
            self._read_v2_limits(self._v2_dir(paths), limits)
        else:
            self._read_v1_limits(paths, limits)

        self._read_rlimits(pid, limits)
        return limits

    def _read_v2_limits(self, cgroup_dir: Path, limits: RawQuotaLimits) -> None:
        if (cpu_max := _read(cgroup_dir / "cpu.max")) is not None:
            quota, _, period = cpu_max.partition(" ")
            limits.cpu_quota_us = _parse_limit(quota)
            limits.cpu_period_us = int(period or 100000)
            limits.flags |= QuotaFlag.CPU

        if (memory_max := _read(cgroup_dir / "memory.max")) is not None:
            limits.memory_limit_bytes = _parse_limit(memory_max)
            limits.flags |= QuotaFlag.MEMORY

        if (pids_max := _read(cgroup_dir / "pids.max")) is not None:
            limits.pids_limit = _parse_limit(pids_max)
            limits.flags |= QuotaFlag.PIDS

        if (io_max := _read(cgroup_dir / "io.max")) is not None and io_max:
            read_bps, write_bps = self._parse_io_max(io_max)
            limits.io_read_bps = read_bps
            limits.io_write_bps = write_bps
            limits.flags |= QuotaFlag.IO_READ | QuotaFlag.IO_WRITE

    @staticmethod
    def _parse_io_max(content: str) -> tuple[int, int]:
        """
        Strictest rbps / wbps across devices.

        Format: ``8:0 rbps=1048576 wbps=max riops=max wiops=max``
        """
        read_bps = write_bps = QUOTA_UNLIMITED
        for line in content.splitlines():
            for item in line.split()[1:]:
                key, _, value = item.partition("=")
                if key == "rbps":
                    read_bps = min(read_bps, _parse_limit(value))
                elif key == "wbps":
                    write_bps = min(write_bps, _parse_limit(value))
        return read_bps, write_bps

    def _read_v1_limits(self, paths: dict[str, str], limits: RawQuotaLimits) -> None:
        cpu_dir = self._v1_cpu_dir(paths)
        quota = _read(cpu_dir / "cpu.cfs_quota_us")
        period = _read(cpu_dir / "cpu.cfs_period_us")
        if quota is not None and period is not None:
            limits.cpu_quota_us = _parse_limit(quota)
            limits.cpu_period_us = int(period)
            limits.flags |= QuotaFlag.CPU

        memory_dir = self._v1_dir(paths, "memory", "memory")
        if (memory_limit := _read(memory_dir / "memory.limit_in_bytes")) is not None:
            limits.memory_limit_bytes = _parse_limit(memory_limit)
            limits.flags |= QuotaFlag.MEMORY

        pids_dir = self._v1_dir(paths, "pids", "pids")
        if (pids_max := _read(pids_dir / "pids.max")) is not None:
            limits.pids_limit = _parse_limit(pids_max)
            limits.flags |= QuotaFlag.PIDS

    def _v1_cpu_dir(self, paths: dict[str, str]) -> Path:
        for mount in ("cpu,cpuacct", "cpu"):
            candidate = self._v1_dir(paths, "cpu", mount)
            if candidate.exists():
                return candidate
        return self._v1_dir(paths, "cpu", "cpu")

    @staticmethod
    def _read_rlimits(pid: int, limits: RawQuotaLimits) -> None:
        for name, flag, attr in (
            ("RLIMIT_NOFILE", QuotaFlag.NOFILE, "nofile_limit"),
            ("RLIMIT_CPU", QuotaFlag.CPU_TIME, "cpu_time_limit_secs"),
            ("RLIMIT_DATA", QuotaFlag.DATA, "data_limit_bytes"),
        ):
            which = getattr(resource, name)
            if pid in (0, os.getpid()):
                soft, _ = resource.getrlimit(which)
            else:
                soft, _ = resource.prlimit(pid, which)
            setattr(limits, attr, QUOTA_UNLIMITED if soft == resource.RLIM_INFINITY else soft)
            limits.flags |= flag

    # ------------------------------------------------------------------
    # Usage
    # ------------------------------------------------------------------

    def read_usage(self, pid: int, cpu_percent: float) -> RawQuotaUsage:
        """
        Current memory / pid usage next to the matching limits.

        ``cpu_percent`` is sampled by the caller (psutil) since cgroupfs
        only exposes cumulative CPU time.
        """
        limits = self.read_limits(pid)
        paths = self.cgroup_paths(pid)
        usage = RawQuotaUsage(
            memory_limit_bytes=limits.memory_limit_bytes,
            pids_limit=limits.pids_limit,
            cpu_percent=cpu_percent,
        )

        if limits.flags & QuotaFlag.CPU and 0 < limits.cpu_quota_us != QUOTA_UNLIMITED and limits.cpu_period_us:
            usage.cpu_limit_percent = limits.cpu_quota_us / limits.cpu_period_us * 100.0

        if self.is_unified():
            cgroup_dir = self._v2_dir(paths)
            memory_current = _read(cgroup_dir / "memory.current")
            pids_current = _read(cgroup_dir / "pids.current")
        else:
            memory_current = _read(self._v1_dir(paths, "memory", "memory") / "memory.usage_in_bytes")
            pids_current = _read(self._v1_dir(paths, "pids", "pids") / "pids.current")

        if memory_current is not None:
            usage.memory_bytes = int(memory_current)
        if pids_current is not None:
            usage.pids_current = int(pids_current)
        return usage
