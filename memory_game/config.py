"""Server configuration."""

from typing import Optional

from pydantic_settings import BaseSettings, SettingsConfigDict

from .models.game import RoundConfig


class Settings(BaseSettings):
    """Application settings."""

    model_config = SettingsConfigDict(env_prefix="MEMORY_")

    # Server
    host: str = "0.0.0.0"
    port: int = 8000
    debug: bool = True
    log_level: str = "INFO"
    max_sessions: int = 100

    # Round defaults
    cards_amount: int = 12
    match_base_score: int = 10
    consecutive_match_bonus: int = 5
    time_bonus_factor: int = 5
    preview_duration_ms: int = 750
    round_duration_seconds: int = 60
    mismatch_delay_ms: int = 1000
    completion_window_seconds: Optional[int] = None

    # Sharing
    share_url: str = "https://memorygame.chandrxn.me"

    def round_config(self, **overrides) -> RoundConfig:
        """Build a round config from the defaults, applying non-None overrides."""
        values = {
            "cards_amount": self.cards_amount,
            "match_base_score": self.match_base_score,
            "consecutive_match_bonus": self.consecutive_match_bonus,
            "time_bonus_factor": self.time_bonus_factor,
            "preview_duration_ms": self.preview_duration_ms,
            "round_duration_seconds": self.round_duration_seconds,
            "mismatch_delay_ms": self.mismatch_delay_ms,
            "completion_window_seconds": self.completion_window_seconds,
        }
        values.update({k: v for k, v in overrides.items() if v is not None})
        return RoundConfig(**values)


settings = Settings()
