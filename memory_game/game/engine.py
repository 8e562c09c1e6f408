"""Round state machine for the memory game."""

import logging
import random
from typing import Callable, Optional

from ..models.game import (
    Outcome,
    Phase,
    RoundConfig,
    RoundState,
    RoundSummary,
    SoundEvent,
)
from .audio import AudioNotifier, SoundBoard
from .deck import PairDeckGenerator
from .scoring import HighScoreBoard, ScoringPolicy
from .symbols import FOOD_EMOJI
from .timer import (
    COUNTDOWN,
    MISMATCH_CLEAR,
    PREVIEW,
    Clock,
    RoundTimers,
    Scheduler,
    SystemClock,
)
from .wake_lock import ClientWakeLock, WakeLockHolder

logger = logging.getLogger(__name__)

StateListener = Callable[[RoundState], None]

COUNTDOWN_INTERVAL_MS = 1000


class RoundEngine:
    """
    Owns one player's round: the deck, what is face up, score and countdown.

    Phases run idle -> previewing -> active -> ended, and start_round() may be
    called from any phase to begin again. Input outside the active phase is
    ignored rather than rejected.
    """

    def __init__(
        self,
        config: RoundConfig,
        deck_generator: Optional[PairDeckGenerator] = None,
        audio: Optional[AudioNotifier] = None,
        wake_lock: Optional[WakeLockHolder] = None,
        clock: Optional[Clock] = None,
        scheduler: Optional[Scheduler] = None,
        high_scores: Optional[HighScoreBoard] = None,
        rng: Optional[random.Random] = None,
    ):
        self.config = config
        self.scoring = ScoringPolicy(config)
        self.deck_generator = deck_generator or PairDeckGenerator(FOOD_EMOJI, rng)
        self.audio = audio or SoundBoard()
        self.wake_lock = wake_lock or ClientWakeLock()
        self.clock = clock or SystemClock()
        self.timers = RoundTimers(scheduler)
        self.high_scores = high_scores or HighScoreBoard()

        self._listeners: list[StateListener] = []

        self.phase = Phase.IDLE
        self.deck: list[str] = []
        self.revealed: list[int] = []
        self.matched: set[int] = set()
        self.discovered_symbols: list[str] = []
        self.score = 0
        self.consecutive_matches = 0
        self.streak_index: Optional[int] = None
        self.time_left_seconds = config.round_duration_seconds
        self.is_won = False
        self.started_at: Optional[float] = None
        self._started_ms = 0.0
        self.summary: Optional[RoundSummary] = None

    # ------------------------------------------------------------------
    # Public operations
    # ------------------------------------------------------------------

    def start_round(self) -> None:
        """
        Deal a new deck and begin the preview.

        Raises:
            InvalidConfiguration: If no deck can be built; the engine is left as it was
            RuntimeError: If the preview timer can't be scheduled (no running
                event loop); the round is abandoned and the engine is idle
        """
        deck = self.deck_generator.generate(self.config.cards_amount)

        self.timers.reset()
        self.deck = deck
        self.revealed = []
        self.matched = set()
        self.discovered_symbols = []
        self.score = 0
        self.consecutive_matches = 0
        self.streak_index = None
        self.time_left_seconds = self.config.round_duration_seconds
        self.is_won = False
        self._started_ms = self.clock.now()
        self.started_at = self.clock.timestamp()
        self.summary = None
        self.phase = Phase.PREVIEWING

        try:
            self.timers.schedule_once(PREVIEW, self.config.preview_duration_ms, self._end_preview)
        except Exception:
            logger.exception("Could not schedule the preview, abandoning round")
            self.abort_round()
            raise
        logger.debug("Round %d started with %d cards", self.timers.generation, len(deck))

        self._notify(SoundEvent.NEW_ROUND)
        self._acquire_wake_lock()
        self._emit()

    def reveal_card(self, index: int) -> None:
        """Turn a card face up. Invalid reveals are silently ignored."""
        if self.phase != Phase.ACTIVE:
            return
        if len(self.revealed) >= 2:
            return
        if not 0 <= index < len(self.deck):
            return
        if index in self.revealed or index in self.matched:
            return

        self.revealed.append(index)
        self._notify(SoundEvent.CARD_REVEALED)

        if len(self.revealed) == 2:
            first, second = self.revealed
            if self.deck[first] == self.deck[second]:
                self._resolve_match(first, second)
            else:
                self._resolve_mismatch()

        self._emit()

    def abort_round(self) -> None:
        """Stop the current round without scoring it (player left)."""
        self.timers.reset()
        self._release_wake_lock()
        if self.phase in (Phase.PREVIEWING, Phase.ACTIVE):
            logger.debug("Round aborted during %s", self.phase.value)
            self.phase = Phase.IDLE
            self._emit()

    def close(self) -> None:
        """Abort any round and drop all listeners."""
        self.abort_round()
        self._listeners.clear()

    def on_state_change(self, listener: StateListener) -> Callable[[], None]:
        """Register a listener. Returns a function that unregisters it."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def get_snapshot(self) -> RoundState:
        """Build a read-only snapshot of the round."""
        show_all = self.phase == Phase.PREVIEWING
        cards = [
            symbol if show_all or i in self.matched or i in self.revealed else None
            for i, symbol in enumerate(self.deck)
        ]
        return RoundState(
            phase=self.phase,
            cards_amount=self.config.cards_amount,
            cards=cards,
            revealed=list(self.revealed),
            matched=sorted(self.matched),
            discovered_symbols=list(self.discovered_symbols),
            score=self.score,
            consecutive_matches=self.consecutive_matches,
            streak_index=self.streak_index,
            time_left_seconds=self.time_left_seconds,
            is_active=self.is_active,
            is_won=self.is_won,
            started_at=self.started_at,
            high_score=self.high_scores.best,
            summary=self.summary,
        )

    @property
    def is_active(self) -> bool:
        return self.phase == Phase.ACTIVE

    @property
    def high_score(self) -> int:
        return self.high_scores.best

    def __enter__(self) -> "RoundEngine":
        return self

    def __exit__(self, *exc) -> None:
        self.close()

    # ------------------------------------------------------------------
    # Transitions
    # ------------------------------------------------------------------

    def _end_preview(self) -> None:
        if self.phase != Phase.PREVIEWING:
            return
        self.phase = Phase.ACTIVE
        if self.time_left_seconds <= 0:
            self._end_round(timed_out=True)
        else:
            self.timers.schedule_every(COUNTDOWN, COUNTDOWN_INTERVAL_MS, self._tick)
        self._emit()

    def _tick(self) -> None:
        if self.phase != Phase.ACTIVE:
            return
        if self.time_left_seconds > 0:
            self.time_left_seconds -= 1
        if self.time_left_seconds <= 0:
            self._end_round(timed_out=True)
        self._emit()

    def _resolve_match(self, first: int, second: int) -> None:
        symbol = self.deck[first]
        self.matched.update((first, second))
        if symbol not in self.discovered_symbols:
            self.discovered_symbols.append(symbol)

        streak_running = self.consecutive_matches > 0
        self.score += self.scoring.match_score(self.consecutive_matches)
        self.consecutive_matches += 1
        self.streak_index = second
        self.revealed = []

        self._notify(SoundEvent.MATCH_FOUND)
        if streak_running:
            self._notify(SoundEvent.STREAK)

        if len(self.matched) == len(self.deck):
            elapsed_ms = self.clock.now() - self._started_ms
            self.score += self.scoring.completion_bonus(elapsed_ms)
            self.is_won = True
            self._end_round(timed_out=False)

    def _resolve_mismatch(self) -> None:
        self.consecutive_matches = 0
        self.timers.schedule_once(MISMATCH_CLEAR, self.config.mismatch_delay_ms, self._clear_revealed)

    def _clear_revealed(self) -> None:
        if self.phase != Phase.ACTIVE:
            return
        self.revealed = []
        self._emit()

    def _end_round(self, timed_out: bool) -> None:
        self.timers.cancel_all()
        self.phase = Phase.ENDED
        self.revealed = []

        if timed_out:
            self.score += self.scoring.timeout_bonus(self.time_left_seconds)
        self.high_scores.submit(self.score)

        found_any = bool(self.discovered_symbols)
        self.summary = RoundSummary(
            final_score=self.score,
            high_score=self.high_scores.best,
            is_won=self.is_won,
            discovered_symbols=list(self.discovered_symbols),
            outcome=Outcome.CONGRATULATIONS if found_any else Outcome.CONSOLATION,
        )
        logger.info(
            "Round ended (%s): score=%d high_score=%d",
            "timeout" if timed_out else "cleared",
            self.score,
            self.high_scores.best,
        )

        self._notify(SoundEvent.ROUND_WON if found_any else SoundEvent.ROUND_LOST)
        self._release_wake_lock()

    # ------------------------------------------------------------------
    # Collaborator boundary
    # ------------------------------------------------------------------

    def _emit(self) -> None:
        if not self._listeners:
            return
        snapshot = self.get_snapshot()
        for listener in list(self._listeners):
            try:
                listener(snapshot)
            except Exception:
                logger.exception("State listener failed")

    def _notify(self, event: SoundEvent) -> None:
        try:
            self.audio.notify(event)
        except Exception:
            logger.exception("Audio notifier failed for %s", event.value)

    def _acquire_wake_lock(self) -> None:
        try:
            self.wake_lock.acquire()
        except Exception as e:
            logger.warning("Failed to request wake lock: %s", e)

    def _release_wake_lock(self) -> None:
        try:
            self.wake_lock.release()
        except Exception as e:
            logger.warning("Failed to release wake lock: %s", e)
