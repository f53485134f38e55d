"""
Base Collector

Shared guard sequence for every metrics sub-collector:

1. context check (cancelled / deadline exceeded)
2. engine initialization check
3. engine call
4. result translation
5. copy into caller-owned records, then release engine-owned lists

Steps 1 and 2 always run before the engine is touched, so a rejected call
has no side effects on the engine.

Author: System Architect
Date: 2025-12-08
"""

from collections.abc import Callable
from typing import Any, TypeVar

from src.core.context import CallContext
from src.core.exceptions.engine import NotSupportedError
from src.core.interfaces.engine import EngineResult, MetricsEngine, RawList, RawPressureMetrics
from src.metrics.errors import raise_for_result
from src.metrics.lifecycle import EngineLifecycle

T = TypeVar("T")
R = TypeVar("R")


class BaseCollector:
    """
    Common plumbing for engine-backed collectors.

    Subclasses only describe WHICH engine call to make and HOW to build
    the public record; the guard sequence lives here.
    """

    def __init__(self, lifecycle: EngineLifecycle, engine: MetricsEngine | None = None):
        self._lifecycle = lifecycle
        self._engine = engine if engine is not None else lifecycle.engine

    @property
    def engine(self) -> MetricsEngine:
        return self._engine

    def _call(
        self,
        ctx: CallContext,
        fetch: Callable[[], tuple[EngineResult, T]],
        build: Callable[[T], R],
    ) -> R:
        """Run a scalar engine call and build its record."""
        self._lifecycle.validate(ctx)
        result, raw = fetch()
        raise_for_result(result)
        return build(raw)

    def _call_list(
        self,
        ctx: CallContext,
        fetch: Callable[[], tuple[EngineResult, RawList[Any]]],
        build: Callable[[Any], R],
    ) -> list[R]:
        """
        Run a list-returning engine call.

        The engine list is released only after a successful result, and
        always after the items have been copied out.
        """
        self._lifecycle.validate(ctx)
        result, raw = fetch()
        raise_for_result(result)
        try:
            return [build(item) for item in raw.items[: raw.count]]
        finally:
            self._engine.free_list(raw)

    def _call_pressure(self, ctx: CallContext, build: Callable[[RawPressureMetrics], R]) -> R:
        """
        Pressure is optional per host: an unavailable snapshot is reported
        as NotSupportedError rather than a zero-valued record.
        """
        self._lifecycle.validate(ctx)
        result, raw = self._engine.collect_pressure()
        raise_for_result(result)
        if not raw.available:
            raise NotSupportedError(details={"reason": "pressure stall information unavailable"})
        return build(raw)
