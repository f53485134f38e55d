#!/usr/bin/env python3
"""
Engine Lifecycle Manager

Owns the metrics engine handle and its initialized flag, the only
process-wide mutable state of the metrics layer.

Contract:
- ``init()`` is idempotent: a second call while initialized is a no-op.
- ``shutdown()`` is safe when not initialized.
- ``is_initialized()`` reports the current state.
- All three serialize on one lock, held only for the check/transition
  itself, so no caller observes a half-initialized engine.

Collectors and detectors receive the lifecycle object by injection and
call ``ensure_initialized()`` before every engine call.

Author: System Architect
Date: 2025-12-08
"""

import threading

from src.core.config.constants import Stage
from src.core.context import CallContext
from src.core.exceptions.engine import NotInitializedError
from src.core.interfaces.engine import MetricsEngine
from src.core.logging.logger import get_logger
from src.metrics.errors import raise_for_result

logger = get_logger(__name__)


class EngineLifecycle:
    """
    Mutex-guarded init/shutdown around one MetricsEngine.

    Usage:
        lifecycle = EngineLifecycle(PsutilEngine())
        lifecycle.init()
        collector = MetricsCollector(lifecycle)
        ...
        lifecycle.shutdown()
    """

    def __init__(self, engine: MetricsEngine):
        self._engine = engine
        self._lock = threading.Lock()
        self._initialized = False

    @property
    def engine(self) -> MetricsEngine:
        return self._engine

    def init(self) -> None:
        """
        Initialize the engine.

        STAGE-M.0: Engine initialization

        Raises:
            EngineError: If the engine reports a failure (state stays uninitialized)
        """
        with self._lock:
            if self._initialized:
                return
            raise_for_result(self._engine.init())
            self._initialized = True

        logger.info("Metrics engine initialized", stage=Stage.ENGINE_INIT)

    def shutdown(self) -> None:
        """
        Release the engine.

        STAGE-M.1: Engine shutdown
        """
        with self._lock:
            if not self._initialized:
                return
            self._engine.shutdown()
            self._initialized = False

        logger.info("Metrics engine shut down", stage=Stage.ENGINE_SHUTDOWN)

    def is_initialized(self) -> bool:
        with self._lock:
            return self._initialized

    def ensure_initialized(self) -> None:
        """
        Raises:
            NotInitializedError: If init() has not succeeded
        """
        if not self.is_initialized():
            raise NotInitializedError()

    def validate(self, ctx: CallContext) -> None:
        """
        Context check followed by the initialization check.

        Raises:
            ContextError: If ctx is cancelled or past its deadline
            NotInitializedError: If the engine is not initialized
        """
        if (err := ctx.err()) is not None:
            raise err
        self.ensure_initialized()


# Global lifecycle instance (singleton pattern)
_lifecycle: EngineLifecycle | None = None
_lifecycle_lock = threading.Lock()


def get_engine_lifecycle() -> EngineLifecycle:
    """
    Get the process-wide lifecycle bound to the default PsutilEngine.

    The lifecycle is created lazily and NOT initialized; call ``init()``.
    """
    global _lifecycle

    with _lifecycle_lock:
        if _lifecycle is None:
            from src.infrastructure.engine.psutil_engine import PsutilEngine

            _lifecycle = EngineLifecycle(PsutilEngine())
        return _lifecycle
