"""
Memory Collector
"""

from src.core.context import CallContext
from src.core.exceptions.engine import NotSupportedError
from src.metrics.builders import build_memory_metrics, build_pressure, build_process_memory
from src.metrics.collectors.base import BaseCollector
from src.metrics.types import MemoryPressure, ProcessMemory, SystemMemory


class MemoryCollector(BaseCollector):

    def collect_system(self, ctx: CallContext) -> SystemMemory:
        """
        System memory snapshot.

        free = available, swap_free = swap_total - swap_used,
        usage% = used / total * 100 (0 when total is 0).
        """
        return self._call(ctx, self._engine.collect_memory, build_memory_metrics)

    def collect_process(self, ctx: CallContext, pid: int) -> ProcessMemory:
        return self._call(ctx, lambda: self._engine.collect_process(pid), build_process_memory)

    def collect_all_processes(self, ctx: CallContext) -> list[ProcessMemory]:
        if (err := ctx.err()) is not None:
            raise err
        raise NotSupportedError(details={"operation": "memory.collect_all_processes"})

    def collect_pressure(self, ctx: CallContext) -> MemoryPressure:
        return self._call_pressure(ctx, lambda raw: build_pressure(raw.memory))
