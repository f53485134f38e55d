"""
Quota, Container and Runtime Detectors

Same guard contract as the collectors: context check, initialization
check, engine call, result translation, copy-out.

pid 0 means the current process for the quota readers.

Author: System Architect
Date: 2025-12-08
"""

from src.core.config.constants import Stage
from src.core.context import CallContext
from src.core.interfaces.engine import RawRuntimeInfo
from src.core.logging.logger import get_logger
from src.metrics.builders import (
    build_available_runtime,
    build_container_info,
    build_quota_limits,
    build_quota_usage,
)
from src.metrics.collectors.base import BaseCollector
from src.metrics.errors import raise_for_result
from src.metrics.quota import ContainerInfo, QuotaLimits, QuotaUsage
from src.metrics.runtime import RuntimeInfo

logger = get_logger(__name__)


class QuotaDetector(BaseCollector):
    """cgroup (v1/v2) and rlimit ceilings for a process."""

    def read_quota_limits(self, ctx: CallContext, pid: int = 0) -> QuotaLimits:
        return self._call(ctx, lambda: self._engine.read_quota_limits(pid), build_quota_limits)

    def read_quota_usage(self, ctx: CallContext, pid: int = 0) -> QuotaUsage:
        return self._call(ctx, lambda: self._engine.read_quota_usage(pid), build_quota_usage)


class ContainerDetector(BaseCollector):

    def detect_container(self, ctx: CallContext) -> ContainerInfo:
        return self._call(ctx, self._engine.detect_container, build_container_info)

    def is_containerized(self) -> bool:
        """Fast path: marker files and cgroup only, no runtime enumeration."""
        return self._engine.is_containerized()

    def get_runtime_name(self) -> str:
        """Active runtime name, ``"none"`` outside a container."""
        return self._engine.get_runtime_name()


class RuntimeDetector(BaseCollector):
    """
    Full runtime / orchestrator detection.

    Besides the active runtime, lists every runtime discoverable on the
    host through its control socket, with liveness and version.
    """

    def detect_runtime(self, ctx: CallContext) -> RuntimeInfo:
        """
        STAGE-M.3: Runtime detection

        Raises:
            ContextError: If ctx is already done
            NotInitializedError: If the engine is not initialized
            EngineError: If the engine reports a failure
        """
        self._lifecycle.validate(ctx)
        result, raw = self._engine.detect_runtime()
        raise_for_result(result)

        info = self._copy_runtime_info(raw)
        logger.debug(
            "Runtime detected",
            stage=Stage.DETECT,
            runtime=info.runtime_name,
            orchestrator=info.orchestrator_name,
            available=len(info.available_runtimes),
        )
        return info

    def _copy_runtime_info(self, raw: RawRuntimeInfo) -> RuntimeInfo:
        runtimes = raw.available_runtimes
        try:
            available = [build_available_runtime(r) for r in runtimes.items[: runtimes.count]]
        finally:
            self._engine.free_list(runtimes)

        return RuntimeInfo(
            is_containerized=raw.is_containerized,
            container_runtime=raw.container_runtime,
            orchestrator=raw.orchestrator,
            container_id=raw.container_id,
            workload_id=raw.workload_id,
            workload_name=raw.workload_name,
            namespace=raw.namespace,
            available_runtimes=available,
        )
