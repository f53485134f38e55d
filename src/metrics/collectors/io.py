"""
I/O Collector

System-wide read/write counters and I/O pressure.
"""

from src.core.context import CallContext
from src.metrics.builders import build_io_stats, build_pressure
from src.metrics.collectors.base import BaseCollector
from src.metrics.types import IOPressure, IOStatsSummary


class IOCollector(BaseCollector):

    def collect_stats(self, ctx: CallContext) -> IOStatsSummary:
        return self._call(ctx, self._engine.collect_io_stats, build_io_stats)

    def collect_pressure(self, ctx: CallContext) -> IOPressure:
        return self._call_pressure(ctx, lambda raw: build_pressure(raw.io))
