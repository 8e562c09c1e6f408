"""API request/response models."""

from typing import Optional
from pydantic import BaseModel

from .game import RoundState, RoundSummary


class SessionConfigRequest(BaseModel):
    """Request to create a new game session. Unset fields use server defaults."""

    cards_amount: Optional[int] = None
    match_base_score: Optional[int] = None
    consecutive_match_bonus: Optional[int] = None
    time_bonus_factor: Optional[int] = None
    preview_duration_ms: Optional[int] = None
    round_duration_seconds: Optional[int] = None
    mismatch_delay_ms: Optional[int] = None
    completion_window_seconds: Optional[int] = None


class SessionResponse(BaseModel):
    """Response after creating a session."""

    session_id: str
    websocket_url: str
    cards_amount: int
    round_duration_seconds: int


class SessionStatusResponse(BaseModel):
    """Current session status."""

    session_id: str
    connections: int
    muted: bool
    state: RoundState


class SummaryResponse(BaseModel):
    """End-of-round summary with shareable text."""

    summary: RoundSummary
    display_text: str
    share_text: str
    twitter_url: str


class MuteResponse(BaseModel):
    """Mute flag after toggling."""

    muted: bool


class HealthResponse(BaseModel):
    """Health check response."""

    status: str
    active_sessions: int
    high_score: int
