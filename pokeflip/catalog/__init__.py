"""
Creature Catalogs

Sources of shuffled creature pairs for the match engine.
"""

from .base import CatalogProvider, StaticCatalog, duplicate_and_shuffle
from .pokeapi import PokeAPICatalog, parse_creature_page

__all__ = [
    'CatalogProvider',
    'StaticCatalog',
    'duplicate_and_shuffle',
    'PokeAPICatalog',
    'parse_creature_page',
]
