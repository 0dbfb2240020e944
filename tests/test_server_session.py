"""
Session Tests

GameSession serialization, flip forwarding, and state push.
"""

import asyncio

from pokeflip.catalog import StaticCatalog
from pokeflip.config import GameConfig
from pokeflip.engine import Creature, Game
from pokeflip.engine.types import PLACEHOLDER_SPRITE_URL
from pokeflip.server.session import GameSession, SessionManager


A = Creature("pidgey", "https://pokeapi.co/api/v2/pokemon/16/")
B = Creature("rattata", "https://pokeapi.co/api/v2/pokemon/19/")
BROKEN = Creature("glitch", "not-a-reference")

FAST = GameConfig(resolution_delay_ms=10, reload_delay_ms=30)


def make_session(layout) -> GameSession:
    game = Game(StaticCatalog(layout, shuffle=False), config=FAST)
    return GameSession(id="test", game=game)


def test_client_state_serializes_board():

    async def _run():
        session = make_session([A, BROKEN, A, BROKEN])

        loading = session.get_client_state()
        assert loading.loading is True
        assert loading.cards == []

        await session.start()
        state = session.get_client_state()

        assert state.game_id == "test"
        assert state.generation == 1
        assert state.loading is False
        assert state.complete is False
        assert state.total_pairs == 2
        assert state.matched_pairs == 0
        assert [card.id for card in state.cards] == [0, 1, 2, 3]
        assert state.cards[0].name == "pidgey"
        assert state.cards[0].sprite_url.endswith("/16.svg")
        assert state.cards[1].sprite_url == PLACEHOLDER_SPRITE_URL
        session.close()

    asyncio.run(_run())


def test_flip_reports_unknown_cards():

    async def _run():
        session = make_session([A, A])

        assert session.flip_card(0) == (False, "Round is loading")

        await session.start()
        assert session.flip_card(0) == (True, "")
        success, message = session.flip_card(9)
        assert success is False
        assert "9" in message
        session.close()

    asyncio.run(_run())


def test_state_is_pushed_after_every_event():
    """The session hands a fresh board to on_state_change on each engine event."""

    async def _run():
        session = make_session([A, B, A, B])
        pushed = []

        async def on_state_change(state):
            pushed.append(state)

        session.on_state_change = on_state_change
        await session.start()

        session.flip_card(0)
        session.flip_card(2)
        await asyncio.sleep(0.05)

        assert pushed, "expected state pushes"
        last = pushed[-1]
        assert last["matched_pairs"] == 1
        assert last["cards"][0]["disabled"] is True
        assert last["cards"][2]["flipped"] is True
        session.close()

    asyncio.run(_run())


def test_sync_state_callback_is_supported():

    async def _run():
        session = make_session([A, A])
        pushed = []
        session.on_state_change = pushed.append

        await session.start()
        await asyncio.sleep(0.01)

        assert pushed[-1]["generation"] == 1
        session.close()

    asyncio.run(_run())


def test_socket_tracking():
    session = make_session([A, A])
    session.connect_socket("sid-1")

    assert session.disconnect_socket("sid-1") is True
    assert session.disconnect_socket("sid-1") is False


def test_session_manager_lifecycle():

    async def _run():
        manager = SessionManager(
            config=FAST,
            catalog_factory=lambda config: StaticCatalog([A, B], shuffle=False)
        )

        session = await manager.create_session()
        assert manager.get_session(session.id) is session
        assert session.game.config is FAST

        session.connect_socket("sid-9")
        assert manager.get_session_by_socket("sid-9") is session
        assert manager.get_session_by_socket("other") is None

        await session.start()
        session.flip_card(0)
        session.flip_card(1)

        await manager.remove_session(session.id)
        assert manager.get_session(session.id) is None

        # Timers were cancelled with the session
        await asyncio.sleep(0.05)
        assert session.game.round.get_card(0).flipped

        # Removing twice is harmless
        await manager.remove_session(session.id)

    asyncio.run(_run())
