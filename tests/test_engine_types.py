"""
Engine Type Tests

Creatures, sprite references, and round construction.
"""

from pokeflip.engine import (
    Creature, Card, Round,
    sprite_id_from_url, PLACEHOLDER_SPRITE_URL
)


PIKACHU = Creature("pikachu", "https://pokeapi.co/api/v2/pokemon/25/")
MEW = Creature("mew", "https://pokeapi.co/api/v2/pokemon/151/")


def test_sprite_id_uses_second_to_last_segment():
    """Reference URLs end in a slash, so the id is the second-to-last segment."""
    assert sprite_id_from_url("https://pokeapi.co/api/v2/pokemon/25/") == 25
    assert sprite_id_from_url("https://pokeapi.co/api/v2/pokemon/151/") == 151
    assert sprite_id_from_url("pokemon/7/") == 7


def test_sprite_id_rejects_malformed_references():
    """Anything without a numeric second-to-last segment has no id."""
    assert sprite_id_from_url("") is None
    assert sprite_id_from_url("25") is None
    assert sprite_id_from_url("https://pokeapi.co/api/v2/pokemon/25") is None
    assert sprite_id_from_url("https://pokeapi.co/api/v2/pokemon/pikachu/") is None
    assert sprite_id_from_url("https://pokeapi.co/api/v2/pokemon/-3/") is None
    assert sprite_id_from_url("https://pokeapi.co/api/v2/pokemon/²/") is None
    assert sprite_id_from_url(151) is None
    assert sprite_id_from_url(None) is None


def test_sprite_url_interpolates_id():
    """Sprite URLs point at the dream-world artwork for the creature id."""
    assert PIKACHU.sprite_url.endswith("/sprites/pokemon/other/dream-world/25.svg")
    assert MEW.sprite_url.endswith("/dream-world/151.svg")


def test_malformed_reference_falls_back_to_placeholder():
    """A broken upstream reference shows the card back instead of crashing."""
    missingno = Creature("missingno", "https://pokeapi.co/api/v2/pokemon/??/")
    assert missingno.sprite_id is None
    assert missingno.sprite_url == PLACEHOLDER_SPRITE_URL

    superscript = Creature("missingno", "https://pokeapi.co/api/v2/pokemon/²/")
    assert superscript.sprite_url == PLACEHOLDER_SPRITE_URL


def test_placeholder_lookup_does_not_log(caplog):
    """Rendering a broken reference over and over stays quiet."""
    missingno = Creature("missingno", "not-a-url")
    with caplog.at_level("DEBUG"):
        for _ in range(3):
            assert missingno.sprite_url == PLACEHOLDER_SPRITE_URL
    assert caplog.records == []


def test_round_from_creatures_deals_face_down_cards_by_index():
    """Card ids are list positions and every card starts face down."""
    round_ = Round.from_creatures([PIKACHU, MEW, PIKACHU, MEW], generation=3)

    assert round_.generation == 3
    assert len(round_) == 4
    assert [card.id for card in round_.cards] == [0, 1, 2, 3]
    assert [card.name for card in round_.cards] == ["pikachu", "mew", "pikachu", "mew"]
    assert all(not card.flipped and not card.disabled for card in round_.cards)


def test_round_construction_is_deterministic():
    """The same creature list always deals the same board."""
    creatures = [PIKACHU, MEW, MEW, PIKACHU]
    first = Round.from_creatures(creatures)
    second = Round.from_creatures(creatures)

    def layout(round_):
        return [(c.id, c.creature, c.flipped, c.disabled) for c in round_.cards]

    assert layout(first) == layout(second)
    # Same layout, distinct card objects
    assert first.cards[0] is not second.cards[0]


def test_get_card_returns_none_for_unknown_ids():
    round_ = Round.from_creatures([PIKACHU, PIKACHU])
    assert round_.get_card(1).name == "pikachu"
    assert round_.get_card(2) is None
    assert round_.get_card(-1) is None


def test_cards_match_by_name_only():
    """Matching is creature-name equality, regardless of the reference URL."""
    a = Card(id=0, creature=Creature("eevee", "https://pokeapi.co/api/v2/pokemon/133/"))
    b = Card(id=1, creature=Creature("eevee", "somewhere/else/"))
    c = Card(id=2, creature=PIKACHU)

    assert a.matches(b)
    assert not a.matches(c)


def test_disable_keeps_card_face_up():
    card = Card(id=0, creature=PIKACHU)
    card.disable()
    assert card.disabled and card.flipped


def test_empty_round_is_never_complete():
    assert Round().is_complete is False
    assert Round.from_creatures([]).is_complete is False


def test_round_complete_when_every_card_matched():
    """Face-up cards alone don't complete a round; they must be matched."""
    round_ = Round.from_creatures([PIKACHU, MEW])
    for card in round_.cards:
        card.flip()
    assert not round_.is_complete

    for card in round_.cards:
        card.disable()
    assert round_.is_complete
