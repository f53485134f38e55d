"""
Unit Tests for CallContext

Tests cancellation propagation, deadlines and timeout bounding.
"""

import asyncio
import time

import pytest

from src.core.context import CallContext
from src.core.exceptions import ContextCancelledError, ContextDeadlineExceededError


@pytest.mark.unit
class TestBackgroundContext:
    """Test the root context."""

    def test_background_is_live(self):
        """Test that a background context never reports an error."""
        ctx = CallContext.background()
        assert ctx.err() is None
        assert not ctx.done()
        assert ctx.deadline is None
        assert ctx.remaining() is None


@pytest.mark.unit
class TestCancellation:
    """Test cancel() and propagation."""

    def test_cancel_sets_error(self):
        """Test that cancel() produces ContextCancelledError."""
        ctx = CallContext.background().with_cancel()
        ctx.cancel()
        assert isinstance(ctx.err(), ContextCancelledError)
        assert ctx.done()

    def test_cancel_propagates_to_children(self):
        """Test that cancelling a parent cancels its children."""
        parent = CallContext.background().with_cancel()
        child = parent.with_timeout(10)
        parent.cancel()
        assert isinstance(child.err(), ContextCancelledError)

    def test_cancel_does_not_propagate_to_parent(self):
        """Test that cancelling a child leaves the parent live."""
        parent = CallContext.background().with_cancel()
        child = parent.with_cancel()
        child.cancel()
        assert parent.err() is None

    def test_cancellation_reported_before_deadline(self):
        """Test that cancellation wins over an expired deadline."""
        ctx = CallContext.background().with_deadline(time.monotonic() - 1)
        ctx.cancel()
        assert isinstance(ctx.err(), ContextCancelledError)


@pytest.mark.unit
class TestDeadlines:
    """Test deadlines and remaining time."""

    def test_expired_deadline(self):
        """Test that a past deadline reports ContextDeadlineExceededError."""
        ctx = CallContext.background().with_deadline(time.monotonic() - 0.1)
        assert isinstance(ctx.err(), ContextDeadlineExceededError)
        assert ctx.remaining() == 0.0

    def test_child_deadline_bounded_by_parent(self):
        """Test that a child cannot outlive its parent's deadline."""
        parent = CallContext.background().with_timeout(1)
        child = parent.with_timeout(100)
        assert child.deadline == parent.deadline

    def test_child_deadline_can_be_shorter(self):
        """Test that a child deadline tighter than the parent's is kept."""
        parent = CallContext.background().with_timeout(100)
        child = parent.with_timeout(1)
        assert child.deadline < parent.deadline

    def test_bound_timeout_without_deadline(self):
        """Test bound_timeout with no deadline."""
        ctx = CallContext.background()
        assert ctx.bound_timeout(3.0) == 3.0
        assert ctx.bound_timeout(0) is None

    def test_bound_timeout_with_deadline(self):
        """Test that bound_timeout returns the smaller of timeout and remaining."""
        ctx = CallContext.background().with_timeout(0.5)
        assert ctx.bound_timeout(10.0) <= 0.5
        assert ctx.bound_timeout(0.1) == 0.1
        assert 0 < ctx.bound_timeout(0) <= 0.5


@pytest.mark.unit
class TestWait:
    """Test the async wait helper."""

    @pytest.mark.asyncio
    async def test_wait_returns_on_cancel(self):
        """Test that wait() returns once the context is cancelled."""
        ctx = CallContext.background().with_cancel()
        asyncio.get_running_loop().call_later(0.05, ctx.cancel)
        await asyncio.wait_for(ctx.wait(), timeout=2)
        assert ctx.done()

    @pytest.mark.asyncio
    async def test_wait_returns_on_deadline(self):
        """Test that wait() returns once the deadline passes."""
        ctx = CallContext.background().with_timeout(0.05)
        await asyncio.wait_for(ctx.wait(), timeout=2)
        assert isinstance(ctx.err(), ContextDeadlineExceededError)
