"""
Poke Flip Engine

Core systems:
- Types: creatures, cards, rounds, events
- Game: the match engine (flip, pair resolution, round reload)
"""

from .types import (
    Creature, Card, Round,
    Event, EventType,
    sprite_id_from_url,
    SPRITE_URL_TEMPLATE, PLACEHOLDER_SPRITE_URL,
)

from .game import Game, GameListener

__all__ = [
    'Creature', 'Card', 'Round',
    'Event', 'EventType',
    'sprite_id_from_url',
    'SPRITE_URL_TEMPLATE', 'PLACEHOLDER_SPRITE_URL',
    'Game', 'GameListener',
]
