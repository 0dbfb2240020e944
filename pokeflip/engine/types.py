"""
Poke Flip Core Types

Creatures, cards, rounds, and the events the match engine emits.
"""

from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Optional


SPRITE_URL_TEMPLATE = (
    "https://raw.githubusercontent.com/PokeAPI/sprites/master/"
    "sprites/pokemon/other/dream-world/{id}.svg"
)
PLACEHOLDER_SPRITE_URL = "/images/poke_ball.png"


# =============================================================================
# Creatures
# =============================================================================

def sprite_id_from_url(url: object) -> Optional[int]:
    """
    Extract the numeric creature id from a reference URL.

    The id is the second-to-last slash-delimited segment, so
    "https://pokeapi.co/api/v2/pokemon/25/" gives 25. Returns None for
    anything that doesn't have that shape, including non-string input.
    """
    if not isinstance(url, str):
        return None

    segments = url.split("/")
    if len(segments) < 2:
        return None

    segment = segments[-2].strip()
    if not segment.isdecimal():
        return None
    return int(segment)


@dataclass(frozen=True)
class Creature:
    """A creature a card can reveal. `name` is the matching key."""
    name: str
    url: str = ""

    @property
    def sprite_id(self) -> Optional[int]:
        return sprite_id_from_url(self.url)

    @property
    def sprite_url(self) -> str:
        """Image URL for the card face, or the card-back image if the reference is malformed."""
        sprite_id = self.sprite_id
        if sprite_id is None:
            return PLACEHOLDER_SPRITE_URL
        return SPRITE_URL_TEMPLATE.format(id=sprite_id)


# =============================================================================
# Cards and Rounds
# =============================================================================

@dataclass(eq=False)
class Card:
    """
    One tile on the board.

    Cards compare by identity: two cards of the same creature are distinct
    objects, and a card from a discarded round is never the same as one
    from the live round.
    """
    id: int
    creature: Creature
    flipped: bool = False
    disabled: bool = False  # matched; always flipped

    @property
    def name(self) -> str:
        return self.creature.name

    def matches(self, other: 'Card') -> bool:
        return self.creature.name == other.creature.name

    def flip(self) -> None:
        self.flipped = not self.flipped

    def disable(self) -> None:
        self.flipped = True
        self.disabled = True


@dataclass
class Round:
    """One deal of cards, indexed 0..n-1 by card id."""
    cards: list[Card] = field(default_factory=list)
    generation: int = 0

    @classmethod
    def from_creatures(cls, creatures: list[Creature], generation: int = 0) -> 'Round':
        """Deal one face-down card per creature, in list order."""
        return cls(
            cards=[Card(id=idx, creature=creature) for idx, creature in enumerate(creatures)],
            generation=generation,
        )

    def __len__(self) -> int:
        return len(self.cards)

    def get_card(self, card_id: int) -> Optional[Card]:
        if 0 <= card_id < len(self.cards) and self.cards[card_id].id == card_id:
            return self.cards[card_id]
        for card in self.cards:
            if card.id == card_id:
                return card
        return None

    def pending_cards(self) -> list[Card]:
        """Cards that are face up but not yet matched."""
        return [card for card in self.cards if card.flipped and not card.disabled]

    def disabled_cards(self) -> list[Card]:
        return [card for card in self.cards if card.disabled]

    @property
    def is_complete(self) -> bool:
        """Every card is matched. An empty round never completes."""
        return bool(self.cards) and all(card.disabled for card in self.cards)


# =============================================================================
# Events
# =============================================================================

class EventType(Enum):
    # Round lifecycle
    ROUND_LOADING = auto()
    ROUND_LOADED = auto()
    ROUND_COMPLETED = auto()

    # Card state
    CARD_FLIPPED = auto()
    PAIR_SCHEDULED = auto()
    CARDS_MATCHED = auto()
    CARDS_REVERTED = auto()


@dataclass
class Event:
    type: EventType
    payload: dict = field(default_factory=dict)
    generation: Optional[int] = None  # round the event belongs to
