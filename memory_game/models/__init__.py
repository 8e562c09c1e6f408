"""Pydantic models for round state and events."""

from .game import (
    Phase,
    SoundEvent,
    Outcome,
    RoundConfig,
    RoundSummary,
    RoundState,
)
from .events import (
    # Server to client
    ConnectionAckEvent,
    RoundStateEvent,
    SoundPlayEvent,
    WakeLockEvent,
    MuteStateEvent,
    ErrorEvent,
    PongEvent,
    # Client to server
    StartRoundMessage,
    RevealCardMessage,
    ToggleMuteMessage,
    EndRoundMessage,
    PingMessage,
    ClientMessage,
    client_message_adapter,
)
from .api import (
    SessionConfigRequest,
    SessionResponse,
    SessionStatusResponse,
    SummaryResponse,
    MuteResponse,
    HealthResponse,
)

__all__ = [
    # Round models
    "Phase",
    "SoundEvent",
    "Outcome",
    "RoundConfig",
    "RoundSummary",
    "RoundState",
    # Events
    "ConnectionAckEvent",
    "RoundStateEvent",
    "SoundPlayEvent",
    "WakeLockEvent",
    "MuteStateEvent",
    "ErrorEvent",
    "PongEvent",
    "StartRoundMessage",
    "RevealCardMessage",
    "ToggleMuteMessage",
    "EndRoundMessage",
    "PingMessage",
    "ClientMessage",
    "client_message_adapter",
    # API
    "SessionConfigRequest",
    "SessionResponse",
    "SessionStatusResponse",
    "SummaryResponse",
    "MuteResponse",
    "HealthResponse",
]
