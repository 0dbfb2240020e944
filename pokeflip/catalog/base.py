"""
Catalog Provider Base Classes

Abstract interface for the source of creatures dealt into a round.
"""

from abc import ABC, abstractmethod
from typing import Optional
import random

from pokeflip.engine.types import Creature


def duplicate_and_shuffle(creatures: list[Creature], rng: Optional[random.Random] = None) -> list[Creature]:
    """Return each creature twice, in uniformly random order."""
    pairs = list(creatures) + list(creatures)
    (rng or random).shuffle(pairs)
    return pairs


class CatalogProvider(ABC):
    """
    Abstract base class for creature catalogs.

    Implementations must never raise from fetch_shuffled_pairs: an upstream
    failure is reported as an empty list.
    """

    @abstractmethod
    async def fetch_shuffled_pairs(self) -> list[Creature]:
        """
        Fetch a page of creatures, doubled and shuffled.

        Returns:
            Even-length list with every distinct creature exactly twice,
            or [] if the upstream source failed.
        """
        pass


class StaticCatalog(CatalogProvider):
    """
    Catalog over a fixed list of creatures.

    With shuffle=False the list is returned as given (no doubling), which
    lets tests lay out an exact board.
    """

    def __init__(
        self,
        creatures: list[Creature],
        shuffle: bool = True,
        rng: Optional[random.Random] = None
    ):
        self.creatures = list(creatures)
        self.shuffle = shuffle
        self.rng = rng
        self.fetch_count = 0

    async def fetch_shuffled_pairs(self) -> list[Creature]:
        self.fetch_count += 1
        if not self.shuffle:
            return list(self.creatures)
        return duplicate_and_shuffle(self.creatures, self.rng)
