"""Root conftest for path setup and shared fixtures.

This file is loaded first by pytest and ensures the project root
is on sys.path before any test modules are imported.
"""

import sys
from pathlib import Path

# Add project root to path IMMEDIATELY
PROJECT_ROOT = Path(__file__).resolve().parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

import json
from typing import Callable, Optional

import pytest

from memory_game.game.engine import RoundEngine
from memory_game.game.scoring import HighScoreBoard
from memory_game.models.game import RoundConfig, SoundEvent


# =============================================================================
# Deterministic Time
# =============================================================================


class ManualTimer:
    """Handle returned by ManualScheduler."""

    def __init__(self, due_ms: int, seq: int, callback: Callable[[], None]):
        self.due_ms = due_ms
        self.seq = seq
        self.callback = callback
        self.cancelled = False
        self.fired = False

    def cancel(self) -> None:
        self.cancelled = True


class ManualScheduler:
    """Scheduler and clock driven by advance() instead of the event loop."""

    def __init__(self, start_ms: int = 1_000_000):
        self.now_ms = start_ms
        self.timers: list[ManualTimer] = []
        self._seq = 0

    def now(self) -> float:
        return float(self.now_ms)

    def timestamp(self) -> float:
        return float(self.now_ms)

    def call_later(self, delay_seconds: float, callback: Callable[[], None]) -> ManualTimer:
        self._seq += 1
        timer = ManualTimer(self.now_ms + round(delay_seconds * 1000), self._seq, callback)
        self.timers.append(timer)
        return timer

    def advance(self, seconds: float) -> None:
        """Move time forward, firing due timers in order."""
        target = self.now_ms + round(seconds * 1000)
        while True:
            due = [t for t in self.timers if t.due_ms <= target and not t.cancelled and not t.fired]
            if not due:
                break
            timer = min(due, key=lambda t: (t.due_ms, t.seq))
            self.now_ms = timer.due_ms
            timer.fired = True
            timer.callback()
        self.now_ms = target

    @property
    def live_timers(self) -> list[ManualTimer]:
        return [t for t in self.timers if not t.cancelled and not t.fired]


# =============================================================================
# Collaborator Doubles
# =============================================================================


class FixedDeck:
    """Deck generator that always deals the same cards."""

    def __init__(self, cards: list[str]):
        self.cards = cards

    def generate(self, cards_amount: int) -> list[str]:
        return list(self.cards)


class RecordingAudio:
    """Audio notifier that remembers what it was asked to play."""

    def __init__(self):
        self.events: list[SoundEvent] = []

    def notify(self, event: SoundEvent) -> None:
        self.events.append(event)


class RecordingWakeLock:
    """Wake lock that counts acquire/release calls."""

    def __init__(self):
        self.held = False
        self.acquired = 0
        self.released = 0

    def acquire(self) -> None:
        self.acquired += 1
        self.held = True

    def release(self) -> None:
        self.released += 1
        self.held = False


@pytest.fixture
def scheduler() -> ManualScheduler:
    return ManualScheduler()


@pytest.fixture
def audio() -> RecordingAudio:
    return RecordingAudio()


@pytest.fixture
def wake_lock() -> RecordingWakeLock:
    return RecordingWakeLock()


@pytest.fixture
def small_config() -> RoundConfig:
    """Four-card round with the default scoring constants."""
    return RoundConfig(
        cards_amount=4,
        match_base_score=10,
        consecutive_match_bonus=5,
        time_bonus_factor=5,
        preview_duration_ms=750,
        round_duration_seconds=10,
        mismatch_delay_ms=1000,
    )


@pytest.fixture
def fruit_deck() -> FixedDeck:
    return FixedDeck(["🍓", "🍉", "🍓", "🍉"])


@pytest.fixture
def engine_factory(scheduler, audio, wake_lock, fruit_deck):
    """Build engines wired to the deterministic doubles."""

    def factory(
        config: RoundConfig,
        deck=None,
        high_scores: Optional[HighScoreBoard] = None,
    ) -> RoundEngine:
        return RoundEngine(
            config,
            deck_generator=deck or fruit_deck,
            audio=audio,
            wake_lock=wake_lock,
            clock=scheduler,
            scheduler=scheduler,
            high_scores=high_scores,
        )

    return factory


@pytest.fixture
def engine(engine_factory, small_config) -> RoundEngine:
    return engine_factory(small_config)


# =============================================================================
# Mock WebSocket Fixture
# =============================================================================


class MockWebSocket:
    """Mock WebSocket for testing."""

    def __init__(self):
        self.accepted = False
        self.closed = False
        self.sent_messages: list[str] = []
        self._should_fail = False

    async def accept(self) -> None:
        """Accept the connection."""
        self.accepted = True

    async def close(self) -> None:
        """Close the connection."""
        self.closed = True

    async def send_text(self, message: str) -> None:
        """Send a text message."""
        if self._should_fail:
            raise ConnectionError("Connection closed")
        self.sent_messages.append(message)

    def set_should_fail(self, should_fail: bool) -> None:
        """Set whether send should fail."""
        self._should_fail = should_fail

    def get_sent_events(self) -> list[dict]:
        """Parse sent messages as JSON events."""
        return [json.loads(msg) for msg in self.sent_messages]

    def event_types(self) -> list[str]:
        return [event["type"] for event in self.get_sent_events()]


@pytest.fixture
def mock_websocket() -> MockWebSocket:
    """Create a mock WebSocket."""
    return MockWebSocket()


@pytest.fixture
def mock_websocket_factory():
    """Factory to create multiple mock WebSockets."""

    def factory() -> MockWebSocket:
        return MockWebSocket()

    return factory


@pytest.fixture
def make_deck():
    """Factory for fixed decks."""
    return FixedDeck
