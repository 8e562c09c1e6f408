"""Match and time bonus scoring."""

from ..models.game import RoundConfig


class ScoringPolicy:
    """Pure scoring rules for a round configuration."""

    def __init__(self, config: RoundConfig):
        self.match_base_score = config.match_base_score
        self.consecutive_match_bonus = config.consecutive_match_bonus
        self.time_bonus_factor = config.time_bonus_factor
        self.completion_window_seconds = (
            config.completion_window_seconds
            if config.completion_window_seconds is not None
            else config.round_duration_seconds
        )

    def match_score(self, consecutive_matches: int) -> int:
        """Points for a match given the streak length before it."""
        return self.match_base_score + consecutive_matches * self.consecutive_match_bonus

    def timeout_bonus(self, time_left_seconds: int) -> int:
        """Bonus for the seconds still on the clock when time runs out."""
        return max(0, time_left_seconds) * self.time_bonus_factor

    def completion_bonus(self, elapsed_ms: float) -> int:
        """Bonus for clearing the board, from whole seconds left in the window."""
        seconds_left = (self.completion_window_seconds * 1000 - elapsed_ms) // 1000
        return max(0, int(seconds_left) * self.time_bonus_factor)


class HighScoreBoard:
    """Best final score seen by this process."""

    def __init__(self, best: int = 0):
        self.best = best

    def submit(self, final_score: int) -> bool:
        """Record a final score. Returns True if it set a new best."""
        if final_score > self.best:
            self.best = final_score
            return True
        return False
