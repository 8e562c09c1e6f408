"""Round state models."""

from enum import Enum
from typing import Optional
from urllib.parse import quote

from pydantic import BaseModel


class Phase(str, Enum):
    """Round lifecycle phase."""

    IDLE = "idle"
    PREVIEWING = "previewing"
    ACTIVE = "active"
    ENDED = "ended"


class SoundEvent(str, Enum):
    """Sounds the client may play."""

    CARD_REVEALED = "card_revealed"
    MATCH_FOUND = "match_found"
    STREAK = "streak"
    ROUND_WON = "round_won"
    ROUND_LOST = "round_lost"
    NEW_ROUND = "new_round"


class Outcome(str, Enum):
    """End-of-round message picked for the player."""

    CONGRATULATIONS = "congratulations"
    CONSOLATION = "consolation"


class RoundConfig(BaseModel):
    """Round configuration."""

    cards_amount: int = 12
    match_base_score: int = 10
    consecutive_match_bonus: int = 5
    time_bonus_factor: int = 5
    preview_duration_ms: int = 750
    round_duration_seconds: int = 60
    mismatch_delay_ms: int = 1000
    completion_window_seconds: Optional[int] = None  # None -> round_duration_seconds


class RoundSummary(BaseModel):
    """Result of a finished round."""

    final_score: int
    high_score: int
    is_won: bool
    discovered_symbols: list[str]
    outcome: Outcome

    def display_text(self) -> str:
        """Text shown in the end-of-round dialog."""
        if self.discovered_symbols:
            return "You found the following emojis:\n" + " ".join(self.discovered_symbols)
        return "You found no emojis 😔"

    def share_text(self, play_url: str) -> str:
        """Text posted when the player shares the result."""
        return (
            "I found the following emojis: \n"
            + " ".join(self.discovered_symbols)
            + f"\n\nPlay now: {play_url}"
        )

    def twitter_url(self, play_url: str) -> str:
        """Tweet intent URL for the share text."""
        return "https://twitter.com/intent/tweet?text=" + quote(self.share_text(play_url), safe="")


class RoundState(BaseModel):
    """Read-only snapshot of a round for the client."""

    phase: Phase = Phase.IDLE
    cards_amount: int
    cards: list[Optional[str]] = []  # None while face down
    revealed: list[int] = []
    matched: list[int] = []
    discovered_symbols: list[str] = []
    score: int = 0
    consecutive_matches: int = 0
    streak_index: Optional[int] = None
    time_left_seconds: int
    is_active: bool = False
    is_won: bool = False
    started_at: Optional[float] = None  # ms
    high_score: int = 0
    summary: Optional[RoundSummary] = None
