"""
Game Session Management

Manages active game sessions, socket connections, and board serialization.
"""

import asyncio
from dataclasses import dataclass, field
from typing import Optional, Callable, Any
from uuid import uuid4
import logging

from pokeflip.catalog import CatalogProvider, PokeAPICatalog
from pokeflip.config import GameConfig
from pokeflip.engine import Game, Event, EventType, Card

from .models import GameStateResponse, CardData

logger = logging.getLogger(__name__)


def generate_id() -> str:
    """Generate a short unique ID."""
    return str(uuid4())[:8]


def card_to_data(card: Card) -> CardData:
    """Convert an engine Card to CardData."""
    return CardData(
        id=card.id,
        name=card.name,
        sprite_url=card.creature.sprite_url,
        flipped=card.flipped,
        disabled=card.disabled,
    )


@dataclass
class GameSession:
    """
    Manages a single game session.

    Wraps the engine Game and provides:
    - Socket tracking
    - State serialization for clients
    - Push of board updates after every engine event
    """
    id: str
    game: Game

    sockets: set[str] = field(default_factory=set)

    # Called with the serialized board after every engine event
    on_state_change: Optional[Callable[[dict], Any]] = None

    _unsubscribe: Optional[Callable[[], None]] = None

    def __post_init__(self):
        """Subscribe to engine events."""
        self._unsubscribe = self.game.subscribe(self._on_game_event)

    async def _on_game_event(self, event: Event) -> None:
        if event.type == EventType.ROUND_COMPLETED:
            logger.info("Game %s cleared round %s", self.id, event.generation)

        if self.on_state_change is None:
            return

        result = self.on_state_change(self.get_client_state().model_dump())
        if asyncio.iscoroutine(result):
            await result

    async def start(self) -> None:
        """Deal the first round."""
        await self.game.start()

    def connect_socket(self, socket_id: str) -> None:
        self.sockets.add(socket_id)

    def disconnect_socket(self, socket_id: str) -> bool:
        """Disconnect a socket. Returns True if it was connected."""
        if socket_id in self.sockets:
            self.sockets.discard(socket_id)
            return True
        return False

    def flip_card(self, card_id: int) -> tuple[bool, str]:
        """Forward a flip to the engine."""
        if self.game.is_loading:
            return False, "Round is loading"
        if self.game.flip_card(card_id):
            return True, ""
        return False, f"Card {card_id} cannot be flipped"

    async def reload(self) -> None:
        """Throw away the current board and deal a new one."""
        await self.game.refetch()

    def get_client_state(self) -> GameStateResponse:
        """Serialize the board for clients."""
        cards = self.game.cards
        return GameStateResponse(
            game_id=self.id,
            generation=self.game.generation,
            loading=self.game.is_loading,
            complete=self.game.is_complete,
            matched_pairs=self.game.matched_pairs,
            total_pairs=len(cards) // 2,
            cards=[card_to_data(card) for card in cards],
        )

    def close(self) -> None:
        if self._unsubscribe:
            self._unsubscribe()
            self._unsubscribe = None
        self.game.close()


class SessionManager:
    """
    Manages all active game sessions.
    """

    def __init__(
        self,
        config: Optional[GameConfig] = None,
        catalog_factory: Optional[Callable[[GameConfig], CatalogProvider]] = None
    ):
        self.config = config or GameConfig.from_env()
        self.catalog_factory = catalog_factory or PokeAPICatalog
        self.sessions: dict[str, GameSession] = {}
        self._lock = asyncio.Lock()

    async def create_session(self) -> GameSession:
        """Create a new game session. The first round is not dealt yet."""
        async with self._lock:
            session_id = generate_id()
            game = Game(self.catalog_factory(self.config), config=self.config)
            session = GameSession(id=session_id, game=game)
            self.sessions[session_id] = session

        logger.info("Created game %s", session_id)
        return session

    def get_session(self, session_id: str) -> Optional[GameSession]:
        """Get a session by ID."""
        return self.sessions.get(session_id)

    async def remove_session(self, session_id: str) -> None:
        """Remove a session and stop its timers."""
        async with self._lock:
            session = self.sessions.pop(session_id, None)

        if session:
            session.close()
            logger.info("Removed game %s", session_id)

    def get_session_by_socket(self, socket_id: str) -> Optional[GameSession]:
        """Find the session a socket is connected to."""
        for session in self.sessions.values():
            if socket_id in session.sockets:
                return session
        return None


# Global session manager instance
session_manager = SessionManager()
