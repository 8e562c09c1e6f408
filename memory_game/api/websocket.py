"""WebSocket endpoint handler."""

import logging
from typing import Optional

from fastapi import WebSocket, WebSocketDisconnect
from pydantic import ValidationError

from ..game import GameSession, GameSessionManager, InvalidConfiguration
from ..models.events import (
    ClientMessage,
    EndRoundMessage,
    ErrorEvent,
    PingMessage,
    PongEvent,
    RevealCardMessage,
    StartRoundMessage,
    ToggleMuteMessage,
    client_message_adapter,
)

logger = logging.getLogger(__name__)


async def websocket_endpoint(
    websocket: WebSocket,
    session_id: str,
    session_manager: Optional[GameSessionManager],
):
    """Attach a browser tab to a session and relay its clicks to the round."""
    session = None
    if session_manager is not None:
        session = await session_manager.get_session(session_id)
    if session is None:
        logger.info("Refusing socket for unknown session %s", session_id)
        await websocket.close(code=4004, reason="Session not found")
        return

    await session.on_client_connect(websocket)
    logger.info("Client joined session %s", session_id)

    try:
        while True:
            frame = await websocket.receive()
            if frame["type"] == "websocket.disconnect":
                raise WebSocketDisconnect(frame.get("code", 1000), frame.get("reason"))

            data = frame.get("text")
            if data is None:
                await session.ws_manager.send_event(
                    websocket,
                    ErrorEvent(code="invalid_message", message="Binary frames are not supported"),
                )
                continue

            try:
                message = client_message_adapter.validate_json(data)
            except ValidationError as e:
                code = "invalid_json" if _is_json_error(e) else "invalid_message"
                await session.ws_manager.send_event(
                    websocket,
                    ErrorEvent(code=code, message=_first_error(e)),
                )
                continue

            await _handle_message(websocket, session, message)

    except WebSocketDisconnect:
        logger.info("Client left session %s", session_id)
    finally:
        await session.on_client_disconnect(websocket)


async def _handle_message(
    websocket: WebSocket,
    session: GameSession,
    message: ClientMessage,
) -> None:
    if isinstance(message, RevealCardMessage):
        session.reveal_card(message.index)

    elif isinstance(message, StartRoundMessage):
        try:
            session.start_round()
        except InvalidConfiguration as e:
            await session.ws_manager.send_event(
                websocket,
                ErrorEvent(code="invalid_configuration", message=str(e)),
            )

    elif isinstance(message, ToggleMuteMessage):
        session.toggle_mute()

    elif isinstance(message, EndRoundMessage):
        session.end_round()

    elif isinstance(message, PingMessage):
        await session.ws_manager.send_event(websocket, PongEvent())


def _is_json_error(error: ValidationError) -> bool:
    return any(item["type"] == "json_invalid" for item in error.errors())


def _first_error(error: ValidationError) -> str:
    item = error.errors()[0]
    return item["msg"]
