"""
Game Routes

Endpoints for creating games, reading the board, and flipping cards.
"""

from fastapi import APIRouter, HTTPException

from ..session import session_manager, GameSession
from ..models import (
    CreateGameResponse, GameStateResponse,
    FlipCardRequest, FlipResultResponse
)

router = APIRouter(prefix="/game", tags=["game"])


def get_session_or_404(game_id: str) -> GameSession:
    session = session_manager.get_session(game_id)
    if not session:
        raise HTTPException(status_code=404, detail=f"Game '{game_id}' not found")
    return session


@router.post("/create", response_model=CreateGameResponse)
async def create_game() -> CreateGameResponse:
    """
    Create a new game and deal its first round.

    If the creature catalog is unavailable the game starts with an empty
    board; POST /reload to try again.
    """
    session = await session_manager.create_session()
    await session.start()

    return CreateGameResponse(
        game_id=session.id,
        state=session.get_client_state()
    )


@router.get("/{game_id}", response_model=GameStateResponse)
async def get_game_state(game_id: str) -> GameStateResponse:
    """
    Get the current board.
    """
    return get_session_or_404(game_id).get_client_state()


@router.post("/{game_id}/flip", response_model=FlipResultResponse)
async def flip_card(game_id: str, request: FlipCardRequest) -> FlipResultResponse:
    """
    Flip a card face up or back down.

    Pairs are judged shortly afterwards; poll the board or listen on the
    socket for the outcome. Flipping an unknown or matched card is not an
    error, it just reports success=False.
    """
    session = get_session_or_404(game_id)
    success, message = session.flip_card(request.card_id)

    return FlipResultResponse(
        success=success,
        message=message,
        state=session.get_client_state()
    )


@router.post("/{game_id}/reload", response_model=GameStateResponse)
async def reload_game(game_id: str) -> GameStateResponse:
    """
    Deal a fresh round, discarding the current board.
    """
    session = get_session_or_404(game_id)
    await session.reload()
    return session.get_client_state()


@router.delete("/{game_id}")
async def delete_game(game_id: str) -> dict:
    """
    End a game.
    """
    get_session_or_404(game_id)
    await session_manager.remove_session(game_id)
    return {"status": "removed", "game_id": game_id}
