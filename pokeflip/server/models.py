"""
Pydantic Models for the Poke Flip API

Data transfer objects for the REST API and WebSocket communication.
"""

from pydantic import BaseModel, Field
from typing import Optional


# =============================================================================
# Request Models
# =============================================================================

class FlipCardRequest(BaseModel):
    """Request to flip a card."""
    card_id: int = Field(description="Card position in the current round")


# =============================================================================
# Response Models
# =============================================================================

class CardData(BaseModel):
    """Card data for API responses."""
    id: int
    name: str
    sprite_url: str
    flipped: bool = False
    disabled: bool = False


class GameStateResponse(BaseModel):
    """Complete board state for a game."""
    game_id: str
    generation: int = 0
    loading: bool = False
    complete: bool = False
    matched_pairs: int = 0
    total_pairs: int = 0
    cards: list[CardData] = Field(default_factory=list)


class CreateGameResponse(BaseModel):
    """Response after creating a game."""
    game_id: str
    status: str = "created"
    state: GameStateResponse


class FlipResultResponse(BaseModel):
    """Response after a flip request."""
    success: bool
    message: str = ""
    state: Optional[GameStateResponse] = None


# =============================================================================
# WebSocket Event Models
# =============================================================================

class WSJoinGame(BaseModel):
    """WebSocket event to join a game room."""
    game_id: str


class WSFlipCard(BaseModel):
    """WebSocket event to flip a card."""
    game_id: str
    card_id: int


class WSError(BaseModel):
    """WebSocket error event."""
    event: str = "error"
    message: str
    code: Optional[str] = None
