"""
Poke Flip API Server

FastAPI application with Socket.IO for real-time board updates.
"""

import logging
from contextlib import asynccontextmanager
from typing import Optional
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from pydantic import ValidationError
import socketio

from pokeflip import __version__

from .routes import game_router
from .session import session_manager, GameSession
from .models import FlipResultResponse, WSError, WSJoinGame, WSFlipCard

logger = logging.getLogger(__name__)


# =============================================================================
# Socket.IO Setup
# =============================================================================

# Create Socket.IO server
sio = socketio.AsyncServer(
    async_mode='asgi',
    cors_allowed_origins='*',
    logger=False,
    engineio_logger=False
)


def game_room(game_id: str) -> str:
    return f"game_{game_id}"


def attach_broadcast(session: GameSession) -> None:
    """Push the board to the game's room after every engine event."""
    async def on_state_change(state: dict):
        await sio.emit('game_state', state, room=game_room(session.id))

    session.on_state_change = on_state_change


async def send_error(sid: str, message: str, code: Optional[str] = None) -> None:
    error = WSError(message=message, code=code)
    await sio.emit(error.event, error.model_dump(), to=sid)


@sio.event
async def connect(sid, environ):
    """Handle client connection."""
    logger.debug("Client connected: %s", sid)
    await sio.emit('connected', {'sid': sid}, to=sid)


@sio.event
async def disconnect(sid):
    """Handle client disconnection."""
    logger.debug("Client disconnected: %s", sid)

    session = session_manager.get_session_by_socket(sid)
    if session:
        session.disconnect_socket(sid)


@sio.event
async def join_game(sid, data):
    """
    Join a game room.

    Expected data: { game_id: string }
    """
    try:
        request = WSJoinGame.model_validate(data or {})
    except ValidationError:
        await send_error(sid, 'game_id required', code='invalid_request')
        return

    session = session_manager.get_session(request.game_id)
    if not session:
        await send_error(sid, 'Game not found', code='not_found')
        return

    session.connect_socket(sid)
    await sio.enter_room(sid, game_room(session.id))
    if session.on_state_change is None:
        attach_broadcast(session)

    await sio.emit('game_state', session.get_client_state().model_dump(), to=sid)


@sio.event
async def leave_game(sid, data):
    """
    Leave a game room.

    Expected data: { game_id: string }
    """
    game_id = data.get('game_id') if isinstance(data, dict) else None
    if not game_id:
        return

    await sio.leave_room(sid, game_room(game_id))
    session = session_manager.get_session(game_id)
    if session:
        session.disconnect_socket(sid)


@sio.event
async def flip_card(sid, data):
    """
    Flip a card via WebSocket.

    Expected data: { game_id: string, card_id: int }
    The updated board is pushed to the room by the session broadcast.
    """
    try:
        request = WSFlipCard.model_validate(data or {})
    except ValidationError:
        await send_error(sid, 'game_id and card_id required', code='invalid_request')
        return

    session = session_manager.get_session(request.game_id)
    if not session:
        await send_error(sid, 'Game not found', code='not_found')
        return

    success, message = session.flip_card(request.card_id)
    if not success:
        result = FlipResultResponse(success=False, message=message)
        await sio.emit('action_error', result.model_dump(), to=sid)


# =============================================================================
# FastAPI Application
# =============================================================================

@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager."""
    # Startup
    logging.basicConfig(
        level=session_manager.config.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s"
    )
    logger.info("Poke Flip API Server starting...")
    yield
    # Shutdown
    for game_id in list(session_manager.sessions):
        await session_manager.remove_session(game_id)
    logger.info("Poke Flip API Server shutting down...")


# Create FastAPI app
app = FastAPI(
    title="Poke Flip API",
    description="Memory-matching card game with real-time updates",
    version=__version__,
    lifespan=lifespan
)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],  # In production, restrict to your frontend URL
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Mount routers
app.include_router(game_router, prefix="/api")


# Health check endpoint
@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {"status": "healthy", "service": "pokeflip-api"}


@app.get("/")
async def root():
    """Root endpoint with API info."""
    return {
        "name": "Poke Flip API",
        "version": __version__,
        "docs": "/docs",
        "health": "/health"
    }


# Mount Socket.IO
socket_app = socketio.ASGIApp(sio, app)


# For running with uvicorn directly
def create_app():
    """Create the ASGI application (FastAPI with Socket.IO mounted)."""
    return socket_app


# Main entry point
if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "pokeflip.server.main:create_app",
        factory=True,
        host="0.0.0.0",
        port=8000,
        reload=True
    )
