"""Round timers and clocks."""

import asyncio
import logging
import time
from typing import Callable, Optional, Protocol

logger = logging.getLogger(__name__)

PREVIEW = "preview"
COUNTDOWN = "countdown"
MISMATCH_CLEAR = "mismatch_clear"


class Clock(Protocol):
    def now(self) -> float:
        """Milliseconds on a clock that never jumps, for measuring durations."""
        ...

    def timestamp(self) -> float:
        """Wall-clock milliseconds since the epoch, for display."""
        ...


class SystemClock:
    """Monotonic time for durations, wall time for timestamps."""

    def now(self) -> float:
        return time.monotonic() * 1000

    def timestamp(self) -> float:
        return time.time() * 1000


class Cancellable(Protocol):
    def cancel(self) -> object: ...


class Scheduler(Protocol):
    def call_later(self, delay_seconds: float, callback: Callable[[], None]) -> Cancellable: ...


class AsyncioScheduler:
    """Runs each callback from its own sleeping task on the running loop."""

    def call_later(self, delay_seconds: float, callback: Callable[[], None]) -> asyncio.Task:
        # Raises RuntimeError before the coroutine exists when no loop is running
        loop = asyncio.get_running_loop()
        return loop.create_task(self._wait_and_fire(delay_seconds, callback))

    async def _wait_and_fire(self, delay_seconds: float, callback: Callable[[], None]) -> None:
        """Wait then call callback."""
        try:
            await asyncio.sleep(delay_seconds)
            callback()
        except asyncio.CancelledError:
            pass
        except Exception:
            logger.exception("Timer callback failed")


class RoundTimers:
    """
    Named timers for one round engine.

    Every callback captures the generation current when it was scheduled
    and does nothing once reset() has moved to a newer one.
    """

    def __init__(self, scheduler: Optional[Scheduler] = None):
        self.scheduler = scheduler or AsyncioScheduler()
        self.generation = 0
        self._handles: dict[str, Cancellable] = {}

    def reset(self) -> int:
        """Cancel every pending timer and start a new generation."""
        self.cancel_all()
        self.generation += 1
        return self.generation

    def schedule_once(self, name: str, delay_ms: int, callback: Callable[[], None]) -> None:
        """Call callback once after delay_ms, replacing any timer with this name."""
        generation = self.generation
        self.cancel(name)

        def fire() -> None:
            if generation != self.generation:
                return
            self._handles.pop(name, None)
            callback()

        self._handles[name] = self.scheduler.call_later(delay_ms / 1000, fire)

    def schedule_every(self, name: str, interval_ms: int, callback: Callable[[], None]) -> None:
        """Call callback every interval_ms until cancelled."""
        generation = self.generation
        self.cancel(name)

        def fire() -> None:
            if generation != self.generation:
                return
            # Re-arm first so the callback can cancel the next tick
            self._handles[name] = self.scheduler.call_later(interval_ms / 1000, fire)
            callback()

        self._handles[name] = self.scheduler.call_later(interval_ms / 1000, fire)

    def cancel(self, name: str) -> None:
        handle = self._handles.pop(name, None)
        if handle is not None:
            handle.cancel()

    def cancel_all(self) -> None:
        for handle in self._handles.values():
            handle.cancel()
        self._handles.clear()

    def is_scheduled(self, name: str) -> bool:
        """Whether a timer with this name is waiting. For inspection only."""
        return name in self._handles

    @property
    def pending(self) -> list[str]:
        """Names of timers waiting to fire, sorted. For inspection only."""
        return sorted(self._handles)
