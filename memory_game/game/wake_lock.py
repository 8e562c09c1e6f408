"""Screen wake lock bookkeeping."""

import logging
from typing import Callable, Optional, Protocol

logger = logging.getLogger(__name__)


class WakeLockHolder(Protocol):
    def acquire(self) -> None: ...

    def release(self) -> None: ...


class ClientWakeLock:
    """Tracks whether the client should hold its screen wake lock."""

    def __init__(self, sink: Optional[Callable[[bool], None]] = None):
        self.sink = sink
        self.held = False

    def acquire(self) -> None:
        if self.held:
            return
        self.held = True
        self._forward()

    def release(self) -> None:
        if not self.held:
            return
        self.held = False
        self._forward()

    def _forward(self) -> None:
        if self.sink is None:
            return
        try:
            self.sink(self.held)
        except Exception as e:
            logger.warning("Failed to %s wake lock: %s", "request" if self.held else "release", e)
