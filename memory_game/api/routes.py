"""REST API routes."""

from typing import Optional

from fastapi import APIRouter, HTTPException

from ..config import settings
from ..models.api import (
    SessionConfigRequest,
    SessionResponse,
    SessionStatusResponse,
    SummaryResponse,
    MuteResponse,
    HealthResponse,
)
from ..models.game import RoundState
from ..game import GameSession, GameSessionManager, InvalidConfiguration

router = APIRouter()

# Global session manager (will be initialized in main.py)
session_manager: Optional[GameSessionManager] = None


def init_dependencies(sm: Optional[GameSessionManager]):
    """Initialize route dependencies."""
    global session_manager
    session_manager = sm


def _require_manager() -> GameSessionManager:
    if session_manager is None:
        raise HTTPException(status_code=500, detail="Server not initialized")
    return session_manager


async def _require_session(session_id: str) -> GameSession:
    session = await _require_manager().get_session(session_id)
    if session is None:
        raise HTTPException(status_code=404, detail="Session not found")
    return session


@router.post("/sessions", response_model=SessionResponse)
async def create_session(request: SessionConfigRequest):
    """Create a new game session."""
    manager = _require_manager()
    if manager.active_session_count >= settings.max_sessions:
        raise HTTPException(status_code=503, detail="Too many active sessions")

    config = settings.round_config(**request.model_dump())
    session = await manager.create_session(config)

    return SessionResponse(
        session_id=session.session_id,
        websocket_url=f"/ws/{session.session_id}",
        cards_amount=config.cards_amount,
        round_duration_seconds=config.round_duration_seconds,
    )


@router.get("/sessions/{session_id}", response_model=SessionStatusResponse)
async def get_session(session_id: str):
    """Get current session status."""
    session = await _require_session(session_id)

    return SessionStatusResponse(
        session_id=session.session_id,
        connections=session.ws_manager.connection_count,
        muted=session.sound_board.muted,
        state=session.snapshot(),
    )


@router.post("/sessions/{session_id}/round", response_model=RoundState)
async def start_round(session_id: str):
    """Start (or restart) a round."""
    session = await _require_session(session_id)

    try:
        return session.start_round()
    except InvalidConfiguration as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.delete("/sessions/{session_id}/round", response_model=RoundState)
async def end_round(session_id: str):
    """Abandon the current round without scoring it."""
    session = await _require_session(session_id)
    return session.end_round()


@router.post("/sessions/{session_id}/cards/{index}/reveal", response_model=RoundState)
async def reveal_card(session_id: str, index: int):
    """Reveal a card. Reveals that are not allowed right now change nothing."""
    session = await _require_session(session_id)
    return session.reveal_card(index)


@router.post("/sessions/{session_id}/mute", response_model=MuteResponse)
async def toggle_mute(session_id: str):
    """Toggle sound for a session."""
    session = await _require_session(session_id)
    return MuteResponse(muted=session.toggle_mute())


@router.get("/sessions/{session_id}/summary", response_model=SummaryResponse)
async def get_summary(session_id: str):
    """Summary of the last finished round, with text for sharing."""
    session = await _require_session(session_id)

    summary = session.engine.summary
    if summary is None:
        raise HTTPException(status_code=409, detail="No finished round")

    return SummaryResponse(
        summary=summary,
        display_text=summary.display_text(),
        share_text=summary.share_text(settings.share_url),
        twitter_url=summary.twitter_url(settings.share_url),
    )


@router.delete("/sessions/{session_id}")
async def delete_session(session_id: str):
    """End and cleanup a session."""
    await _require_session(session_id)
    await session_manager.remove_session(session_id)
    return {"status": "deleted"}


@router.get("/health", response_model=HealthResponse)
async def health_check():
    """Health check endpoint."""
    active_sessions = session_manager.active_session_count if session_manager else 0
    high_score = session_manager.high_scores.best if session_manager else 0

    return HealthResponse(
        status="healthy",
        active_sessions=active_sessions,
        high_score=high_score,
    )
