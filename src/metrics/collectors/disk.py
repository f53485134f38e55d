"""
Disk Collector

Partitions, filesystem usage and per-device block I/O.
"""

from src.core.context import CallContext
from src.core.exceptions.base import HostProbeError
from src.core.exceptions.engine import NotFoundError
from src.metrics.builders import build_disk_io_stats, build_disk_usage, build_partition
from src.metrics.collectors.base import BaseCollector
from src.metrics.types import DiskIOStats, DiskUsageInfo, PartitionInfo


class DiskCollector(BaseCollector):

    def list_partitions(self, ctx: CallContext) -> list[PartitionInfo]:
        return self._call_list(ctx, self._engine.list_partitions, build_partition)

    def collect_usage(self, ctx: CallContext, path: str) -> DiskUsageInfo:
        return self._call(ctx, lambda: self._engine.collect_disk_usage(path), build_disk_usage)

    def collect_all_usage(self, ctx: CallContext) -> list[DiskUsageInfo]:
        """
        Usage for every mounted partition.

        Partitions whose usage cannot be read (permission, stale mount) are
        skipped; only the partition listing itself can fail the call.
        """
        usages = []
        for partition in self.list_partitions(ctx):
            try:
                usages.append(self.collect_usage(ctx, partition.mount_point))
            except HostProbeError:
                continue
        return usages

    def collect_io(self, ctx: CallContext) -> list[DiskIOStats]:
        """Per-device counters, sector counts converted to bytes (512-byte sectors)."""
        return self._call_list(ctx, self._engine.collect_disk_io, build_disk_io_stats)

    def collect_device_io(self, ctx: CallContext, device: str) -> DiskIOStats:
        """
        Raises:
            NotFoundError: If no block device has that name
        """
        for stats in self.collect_io(ctx):
            if stats.device == device:
                return stats
        raise NotFoundError(details={"device": device})
