"""
Metrics Collector Facade

One entry point bundling the six sub-collectors over a shared lifecycle.

Usage:
    lifecycle = get_engine_lifecycle()
    lifecycle.init()
    collector = MetricsCollector(lifecycle)

    cpu = collector.cpu.collect_system(CallContext.background())
    snapshot = collector.collect_all(CallContext.with_timeout(2.0))

Author: System Architect
Date: 2025-12-08
"""

from src.core.config.constants import Stage
from src.core.context import CallContext
from src.core.interfaces.engine import MetricsEngine
from src.core.logging.logger import get_logger
from src.metrics.builders import build_all_metrics
from src.metrics.collectors.base import BaseCollector
from src.metrics.collectors.connections import ConnectionCollector
from src.metrics.collectors.cpu import CPUCollector
from src.metrics.collectors.disk import DiskCollector
from src.metrics.collectors.io import IOCollector
from src.metrics.collectors.memory import MemoryCollector
from src.metrics.collectors.network import NetworkCollector
from src.metrics.lifecycle import EngineLifecycle
from src.metrics.types import AllSystemMetrics

logger = get_logger(__name__)


class MetricsCollector(BaseCollector):
    """
    Facade over the CPU, memory, disk, network, I/O and connection collectors.

    Each sub-collector is also usable on its own; the facade only shares
    the lifecycle and engine between them.
    """

    def __init__(self, lifecycle: EngineLifecycle, engine: MetricsEngine | None = None):
        super().__init__(lifecycle, engine)
        self.cpu = CPUCollector(lifecycle, self._engine)
        self.memory = MemoryCollector(lifecycle, self._engine)
        self.disk = DiskCollector(lifecycle, self._engine)
        self.network = NetworkCollector(lifecycle, self._engine)
        self.io = IOCollector(lifecycle, self._engine)
        self.connections = ConnectionCollector(lifecycle, self._engine)

    def collect_all(self, ctx: CallContext) -> AllSystemMetrics:
        """
        One timestamped snapshot of every family.

        STAGE-M.2: Aggregate collection

        Pressure is None on hosts without PSI. Families the engine cannot
        read come back empty instead of failing the snapshot.
        """
        metrics = self._call(ctx, self._engine.collect_all, build_all_metrics)
        logger.debug(
            "Collected aggregate metrics",
            stage=Stage.COLLECT,
            partitions=len(metrics.partitions),
            interfaces=len(metrics.net_interfaces),
            pressure=metrics.pressure is not None,
        )
        return metrics

    def platform(self) -> str:
        return self._engine.platform()

    def quota_supported(self) -> bool:
        return self._engine.quota_supported()
