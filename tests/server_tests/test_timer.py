"""Tests for round timers."""

# Add project root to path for imports BEFORE other imports
import sys
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parent.parent.parent
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

import asyncio
import time

import pytest

from memory_game.game.timer import AsyncioScheduler, RoundTimers, SystemClock


class NeverCancelScheduler:
    """Scheduler whose handles ignore cancel(), to exercise the generation guard."""

    class Handle:
        def cancel(self) -> None:
            pass

    def __init__(self):
        self.callbacks = []

    def call_later(self, delay_seconds, callback):
        self.callbacks.append(callback)
        return self.Handle()


# =============================================================================
# RoundTimers Tests
# =============================================================================


class TestRoundTimers:
    """Tests for RoundTimers with a manual scheduler."""

    @pytest.fixture
    def timers(self, scheduler):
        return RoundTimers(scheduler)

    def test_initial_state(self, timers):
        """Test nothing is pending before scheduling."""
        assert timers.generation == 0
        assert timers.pending == []

    def test_schedule_once_fires(self, timers, scheduler):
        """Test a one-shot fires once at its delay."""
        calls = []
        timers.schedule_once("preview", 750, lambda: calls.append(scheduler.now_ms))

        scheduler.advance(0.7)
        assert calls == []

        scheduler.advance(1)
        assert len(calls) == 1
        assert timers.pending == []

    def test_schedule_once_replaces_same_name(self, timers, scheduler):
        """Test rescheduling a name cancels the earlier timer."""
        calls = []
        timers.schedule_once("clear", 100, lambda: calls.append("first"))
        timers.schedule_once("clear", 200, lambda: calls.append("second"))

        scheduler.advance(1)
        assert calls == ["second"]

    def test_schedule_every_repeats(self, timers, scheduler):
        """Test a recurring timer fires each interval."""
        ticks = []
        timers.schedule_every("countdown", 1000, lambda: ticks.append(scheduler.now_ms))

        scheduler.advance(3.5)
        assert len(ticks) == 3
        assert timers.is_scheduled("countdown")

    def test_recurring_callback_can_cancel_itself(self, timers, scheduler):
        """Test cancelling from inside a tick stops further ticks."""
        ticks = []

        def tick():
            ticks.append(1)
            if len(ticks) == 2:
                timers.cancel_all()

        timers.schedule_every("countdown", 1000, tick)
        scheduler.advance(10)

        assert len(ticks) == 2
        assert timers.pending == []

    def test_cancel(self, timers, scheduler):
        """Test cancelling one timer leaves the others."""
        calls = []
        timers.schedule_once("a", 100, lambda: calls.append("a"))
        timers.schedule_once("b", 100, lambda: calls.append("b"))

        timers.cancel("a")
        timers.cancel("missing")
        scheduler.advance(1)

        assert calls == ["b"]

    def test_reset_cancels_and_bumps_generation(self, timers, scheduler):
        """Test reset drops every pending timer."""
        calls = []
        timers.schedule_once("preview", 100, lambda: calls.append("preview"))
        timers.schedule_every("countdown", 100, lambda: calls.append("tick"))

        assert timers.reset() == 1
        scheduler.advance(1)

        assert calls == []
        assert timers.pending == []

    def test_stale_callbacks_are_noops(self):
        """Test callbacks from an older generation do nothing even if they fire."""
        scheduler = NeverCancelScheduler()
        timers = RoundTimers(scheduler)
        calls = []
        timers.schedule_once("clear", 100, lambda: calls.append("once"))
        timers.schedule_every("countdown", 100, lambda: calls.append("tick"))

        timers.reset()
        for callback in list(scheduler.callbacks):
            callback()

        assert calls == []


# =============================================================================
# AsyncioScheduler Tests
# =============================================================================


class TestAsyncioScheduler:
    """Tests for the event loop scheduler."""

    def test_call_later_without_loop_raises(self):
        """Test scheduling outside a loop fails up front."""
        with pytest.raises(RuntimeError):
            AsyncioScheduler().call_later(0.01, lambda: None)

    @pytest.mark.asyncio
    async def test_call_later_fires(self):
        """Test a callback fires after its delay."""
        fired = []
        start = time.time()
        AsyncioScheduler().call_later(0.05, lambda: fired.append(time.time()))

        await asyncio.sleep(0.15)

        assert len(fired) == 1
        assert fired[0] - start >= 0.05

    @pytest.mark.asyncio
    async def test_cancel_prevents_callback(self):
        """Test cancelling the task stops the callback."""
        fired = []
        task = AsyncioScheduler().call_later(0.05, lambda: fired.append(1))
        task.cancel()

        await asyncio.sleep(0.1)
        assert fired == []

    @pytest.mark.asyncio
    async def test_failing_callback_is_contained(self):
        """Test an exception in a callback does not escape the task."""

        def boom():
            raise RuntimeError("boom")

        task = AsyncioScheduler().call_later(0.01, boom)
        await asyncio.sleep(0.05)

        assert task.done()
        assert task.exception() is None

    @pytest.mark.asyncio
    async def test_round_timers_on_event_loop(self):
        """Test recurring timers tick on the real loop and stop on reset."""
        timers = RoundTimers()
        ticks = []
        timers.schedule_every("countdown", 50, lambda: ticks.append(1))

        await asyncio.sleep(0.18)
        timers.reset()
        count = len(ticks)
        await asyncio.sleep(0.1)

        assert count >= 2
        assert len(ticks) == count


class TestSystemClock:
    def test_now_is_monotonic_milliseconds(self, monkeypatch):
        """Test durations ignore wall-clock jumps."""
        clock = SystemClock()
        before = time.monotonic() * 1000
        first = clock.now()

        monkeypatch.setattr(time, "time", lambda: 0.0)
        second = clock.now()
        after = time.monotonic() * 1000

        assert before <= first <= second <= after

    def test_timestamp_is_wall_clock(self):
        before = time.time() * 1000
        stamp = SystemClock().timestamp()
        after = time.time() * 1000
        assert before <= stamp <= after
