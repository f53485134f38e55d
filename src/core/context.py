#!/usr/bin/env python3
"""
Call Context

Cancellation and deadline carrier passed to every prober and collector.

A context is created from ``CallContext.background()`` and narrowed with
``with_timeout()`` / ``with_cancel()``. Children observe the cancellation
of their parents and can only shorten, never extend, a parent deadline.
The state lives in a ``threading.Event`` plus a monotonic deadline, so one
context can be shared between threads (synchronous collectors) and event
loops (asynchronous probers).

Usage:
    ctx = CallContext.background().with_timeout(2.0)
    result = await prober.probe(ctx, target)

    if (err := ctx.err()) is not None:
        ...

Author: System Architect
Date: 2025-12-08
"""

import asyncio
import threading
import time

from src.core.exceptions.context import (
    ContextCancelledError,
    ContextDeadlineExceededError,
    ContextError,
)


class CallContext:
    """
    Cancellation and deadline scope for a single call.

    Attributes:
        deadline: Absolute ``time.monotonic()`` deadline, or None
    """

    def __init__(self, parent: "CallContext | None" = None, deadline: float | None = None):
        self._parent = parent
        self._cancelled = threading.Event()

        parent_deadline = parent.deadline if parent is not None else None
        if parent_deadline is None:
            self._deadline = deadline
        elif deadline is None:
            self._deadline = parent_deadline
        else:
            self._deadline = min(parent_deadline, deadline)

    @classmethod
    def background(cls) -> "CallContext":
        """Root context: never cancelled, no deadline."""
        return cls()

    def with_cancel(self) -> "CallContext":
        """Child context that can be cancelled independently."""
        return CallContext(self)

    def with_timeout(self, seconds: float) -> "CallContext":
        """Child context whose deadline is ``seconds`` from now (bounded by this one)."""
        return CallContext(self, time.monotonic() + seconds)

    def with_deadline(self, deadline: float) -> "CallContext":
        return CallContext(self, deadline)

    @property
    def deadline(self) -> float | None:
        return self._deadline

    def cancel(self) -> None:
        self._cancelled.set()

    def _is_cancelled(self) -> bool:
        ctx: CallContext | None = self
        while ctx is not None:
            if ctx._cancelled.is_set():
                return True
            ctx = ctx._parent
        return False

    def err(self) -> ContextError | None:
        """
        Return the termination error, or None while the context is live.

        Cancellation is reported in preference to an expired deadline.
        """
        if self._is_cancelled():
            return ContextCancelledError()
        if self._deadline is not None and time.monotonic() >= self._deadline:
            return ContextDeadlineExceededError()
        return None

    def done(self) -> bool:
        return self.err() is not None

    def remaining(self) -> float | None:
        """Seconds left before the deadline (0 when passed), or None without deadline."""
        if self._deadline is None:
            return None
        return max(0.0, self._deadline - time.monotonic())

    def bound_timeout(self, timeout: float) -> float | None:
        """
        Combine a per-call timeout with the context deadline.

        A non-positive timeout means "no timeout of my own": the result is
        the time remaining on the context, or None if it has no deadline.
        """
        remaining = self.remaining()
        if timeout <= 0:
            return remaining
        if remaining is None:
            return timeout
        return min(timeout, remaining)

    async def wait(self, poll_interval: float = 0.01) -> None:
        """Return once the context is cancelled or its deadline has passed."""
        while not self.done():
            remaining = self.remaining()
            delay = poll_interval if remaining is None else min(poll_interval, remaining)
            await asyncio.sleep(delay)

    def __repr__(self) -> str:
        return f"CallContext(deadline={self._deadline}, cancelled={self._is_cancelled()})"
