"""FastAPI application entry point."""

import logging
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Optional

from fastapi import FastAPI, WebSocket
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles

from .api.routes import init_dependencies, router as api_router
from .api.websocket import websocket_endpoint
from .config import settings
from .game import GameSessionManager

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"

# Built frontend, served from the same origin when present
FRONTEND_DIR = Path(__file__).parent.parent / "web" / "dist"

session_manager: Optional[GameSessionManager] = None


def configure_logging(level: Optional[str] = None) -> None:
    logging.basicConfig(
        level=getattr(logging, (level or settings.log_level).upper(), logging.INFO),
        format=LOG_FORMAT,
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    global session_manager

    configure_logging()
    session_manager = GameSessionManager()
    init_dependencies(session_manager)
    logger.info(
        "Memory game ready: %d cards, %ds rounds, up to %d sessions",
        settings.cards_amount,
        settings.round_duration_seconds,
        settings.max_sessions,
    )

    yield

    logger.info("Shutting down %d session(s)", session_manager.active_session_count)
    await session_manager.cleanup_all()
    init_dependencies(None)


def create_app() -> FastAPI:
    """Build the app: REST API under /api, the game socket under /ws."""
    app = FastAPI(
        title="Memory Game API",
        description="Emoji memory matching game",
        version="1.0.0",
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(api_router, prefix="/api")

    @app.websocket("/ws/{session_id}")
    async def game_socket(websocket: WebSocket, session_id: str):
        await websocket_endpoint(websocket, session_id, session_manager)

    if FRONTEND_DIR.exists():
        app.mount("/", StaticFiles(directory=str(FRONTEND_DIR), html=True), name="frontend")

    return app


app = create_app()


def main():
    """Run the server with uvicorn."""
    import uvicorn

    uvicorn.run(
        "memory_game.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    main()
