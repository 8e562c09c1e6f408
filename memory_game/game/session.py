"""Game session management."""

import asyncio
import logging
import uuid
from typing import Optional

from pydantic import BaseModel

from ..models.game import RoundConfig, RoundState, SoundEvent
from ..models.events import (
    ConnectionAckEvent,
    RoundStateEvent,
    SoundPlayEvent,
    WakeLockEvent,
    MuteStateEvent,
)
from ..websocket_manager import WebSocketManager
from .audio import SoundBoard
from .engine import RoundEngine
from .scoring import HighScoreBoard
from .wake_lock import ClientWakeLock

logger = logging.getLogger(__name__)


class GameSession:
    """One player's game: a round engine wired to the browser tabs watching it."""

    def __init__(
        self,
        session_id: str,
        config: RoundConfig,
        high_scores: Optional[HighScoreBoard] = None,
    ):
        self.session_id = session_id
        self.config = config

        # Components
        self.ws_manager = WebSocketManager()
        self.sound_board = SoundBoard(sink=self._send_sound)
        self.wake_lock = ClientWakeLock(sink=self._send_wake_lock)
        self.engine = RoundEngine(
            config,
            audio=self.sound_board,
            wake_lock=self.wake_lock,
            high_scores=high_scores,
        )
        self._unsubscribe = self.engine.on_state_change(self._send_state)

        # Outgoing events are chained so clients see them in order
        self._last_send: Optional[asyncio.Task] = None
        self._pending: set[asyncio.Task] = set()

    async def broadcast(self, event: BaseModel) -> None:
        """Broadcast event to all connected clients."""
        await self.ws_manager.broadcast(event)

    async def on_client_connect(self, websocket) -> None:
        """Handle new client connection."""
        await self.ws_manager.connect(websocket)

        greeting = [
            ConnectionAckEvent(session_id=self.session_id),
            MuteStateEvent(muted=self.sound_board.muted),
        ]
        if self.wake_lock.held:
            greeting.append(WakeLockEvent(held=True))
        greeting.append(RoundStateEvent(state=self.snapshot()))
        await self.ws_manager.send_events(websocket, greeting)

    async def on_client_disconnect(self, websocket) -> None:
        """Handle client disconnection. The round stops once nobody is watching."""
        await self.ws_manager.disconnect(websocket)
        if self.ws_manager.connection_count == 0:
            self.engine.abort_round()

    def start_round(self) -> RoundState:
        """Start a new round. Raises InvalidConfiguration for an unusable config."""
        self.engine.start_round()
        return self.snapshot()

    def reveal_card(self, index: int) -> RoundState:
        self.engine.reveal_card(index)
        return self.snapshot()

    def end_round(self) -> RoundState:
        self.engine.abort_round()
        return self.snapshot()

    def toggle_mute(self) -> bool:
        muted = self.sound_board.toggle_mute()
        self._dispatch(MuteStateEvent(muted=muted))
        return muted

    def snapshot(self) -> RoundState:
        return self.engine.get_snapshot()

    async def cleanup(self) -> None:
        """Cleanup session resources."""
        self._unsubscribe()
        self.engine.close()
        for task in list(self._pending):
            task.cancel()
        await self.ws_manager.close_all()

    async def drain(self) -> None:
        """Wait until every queued event has been sent. For tests and inspection."""
        if self._last_send is not None:
            await asyncio.wait({self._last_send})

    # Engine collaborator sinks

    def _send_state(self, state: RoundState) -> None:
        self._dispatch(RoundStateEvent(state=state))

    def _send_sound(self, sound: SoundEvent) -> None:
        self._dispatch(SoundPlayEvent(sound=sound))

    def _send_wake_lock(self, held: bool) -> None:
        self._dispatch(WakeLockEvent(held=held))

    def _dispatch(self, event: BaseModel) -> None:
        """Queue event for broadcast without blocking the caller."""
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            logger.debug("No running loop, dropping %s event", type(event).__name__)
            return

        task = loop.create_task(self._send_after(self._last_send, event))
        self._last_send = task
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)

    async def _send_after(self, previous: Optional[asyncio.Task], event: BaseModel) -> None:
        if previous is not None and not previous.done():
            await asyncio.wait({previous})
        try:
            await self.broadcast(event)
        except Exception:
            logger.exception("Failed to broadcast %s", type(event).__name__)


class GameSessionManager:
    """Manages all active game sessions."""

    def __init__(self, high_scores: Optional[HighScoreBoard] = None):
        self._sessions: dict[str, GameSession] = {}
        self._lock = asyncio.Lock()
        self.high_scores = high_scores or HighScoreBoard()

    async def create_session(self, config: RoundConfig) -> GameSession:
        """Create a new game session."""
        async with self._lock:
            session_id = str(uuid.uuid4())[:8]
            session = GameSession(session_id, config, high_scores=self.high_scores)
            self._sessions[session_id] = session
            logger.info("Created session %s", session_id)
            return session

    async def get_session(self, session_id: str) -> Optional[GameSession]:
        """Get a session by ID."""
        return self._sessions.get(session_id)

    async def remove_session(self, session_id: str) -> None:
        """Remove and cleanup a session."""
        async with self._lock:
            if session_id in self._sessions:
                await self._sessions[session_id].cleanup()
                del self._sessions[session_id]
                logger.info("Removed session %s", session_id)

    @property
    def active_session_count(self) -> int:
        """Number of active sessions."""
        return len(self._sessions)

    async def cleanup_all(self) -> None:
        """Cleanup all sessions."""
        async with self._lock:
            for session in self._sessions.values():
                await session.cleanup()
            self._sessions.clear()
