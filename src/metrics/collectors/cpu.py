"""
CPU Collector

System CPU usage, per-process CPU, load average and CPU pressure.
"""

from src.core.context import CallContext
from src.core.exceptions.engine import NotSupportedError
from src.metrics.builders import (
    build_cpu_metrics,
    build_cpu_pressure,
    build_load_metrics,
    build_process_cpu,
)
from src.metrics.collectors.base import BaseCollector
from src.metrics.types import CPUPressure, LoadAverage, ProcessCPU, SystemCPU


class CPUCollector(BaseCollector):

    def collect_system(self, ctx: CallContext) -> SystemCPU:
        """usage% = 100 - idle%, clamped at 0."""
        return self._call(ctx, self._engine.collect_cpu, build_cpu_metrics)

    def collect_process(self, ctx: CallContext, pid: int) -> ProcessCPU:
        return self._call(ctx, lambda: self._engine.collect_process(pid), build_process_cpu)

    def collect_all_processes(self, ctx: CallContext) -> list[ProcessCPU]:
        """
        Per-process enumeration is not offered by the engine.

        Raises:
            ContextError: If ctx is already done
            NotSupportedError: Always, otherwise
        """
        if (err := ctx.err()) is not None:
            raise err
        raise NotSupportedError(details={"operation": "cpu.collect_all_processes"})

    def collect_load_average(self, ctx: CallContext) -> LoadAverage:
        return self._call(ctx, self._engine.collect_load, build_load_metrics)

    def collect_pressure(self, ctx: CallContext) -> CPUPressure:
        return self._call_pressure(ctx, lambda raw: build_cpu_pressure(raw.cpu))
