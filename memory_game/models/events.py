"""WebSocket event models."""

import time
from typing import Annotated, Literal, Union
from pydantic import BaseModel, Field, TypeAdapter

from .game import RoundState, SoundEvent


# =============================================================================
# Server to Client Events
# =============================================================================


class ConnectionAckEvent(BaseModel):
    """Connection acknowledged."""

    type: Literal["connection_ack"] = "connection_ack"
    session_id: str


class RoundStateEvent(BaseModel):
    """Full round state snapshot."""

    type: Literal["round_state"] = "round_state"
    state: RoundState
    timestamp: float = Field(default_factory=time.time)


class SoundPlayEvent(BaseModel):
    """Ask the client to play a sound."""

    type: Literal["sound"] = "sound"
    sound: SoundEvent


class WakeLockEvent(BaseModel):
    """Ask the client to request or release its screen wake lock."""

    type: Literal["wake_lock"] = "wake_lock"
    held: bool


class MuteStateEvent(BaseModel):
    """Mute flag changed."""

    type: Literal["mute_state"] = "mute_state"
    muted: bool


class ErrorEvent(BaseModel):
    """Error notification."""

    type: Literal["error"] = "error"
    code: str
    message: str


class PongEvent(BaseModel):
    """Reply to a keep-alive ping."""

    type: Literal["pong"] = "pong"


# =============================================================================
# Client to Server Messages
# =============================================================================


class StartRoundMessage(BaseModel):
    """Request a new round."""

    type: Literal["start_round"] = "start_round"


class RevealCardMessage(BaseModel):
    """Player clicked a card."""

    type: Literal["reveal_card"] = "reveal_card"
    index: int


class ToggleMuteMessage(BaseModel):
    """Mute or unmute sounds."""

    type: Literal["toggle_mute"] = "toggle_mute"


class EndRoundMessage(BaseModel):
    """Player left the round."""

    type: Literal["end_round"] = "end_round"


class PingMessage(BaseModel):
    """Keep-alive ping."""

    type: Literal["ping"] = "ping"


ClientMessage = Annotated[
    Union[
        StartRoundMessage,
        RevealCardMessage,
        ToggleMuteMessage,
        EndRoundMessage,
        PingMessage,
    ],
    Field(discriminator="type"),
]

client_message_adapter = TypeAdapter(ClientMessage)
