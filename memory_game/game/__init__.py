"""Game engine components."""

from .deck import InvalidConfiguration, PairDeckGenerator
from .engine import RoundEngine
from .scoring import HighScoreBoard, ScoringPolicy
from .session import GameSession, GameSessionManager
from .timer import RoundTimers

__all__ = [
    "InvalidConfiguration",
    "PairDeckGenerator",
    "RoundEngine",
    "HighScoreBoard",
    "ScoringPolicy",
    "GameSession",
    "GameSessionManager",
    "RoundTimers",
]
