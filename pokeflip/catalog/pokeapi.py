"""
PokeAPI Catalog

Fetches a random page of creatures from the PokeAPI list endpoint:

    GET {api_url}/pokemon?limit={page_size}&offset={offset}

    {"count": 1302, "next": "...", "previous": null,
     "results": [{"name": "bulbasaur", "url": "https://pokeapi.co/api/v2/pokemon/1/"}, ...]}

Any failure degrades to an empty page.
"""

import asyncio
import logging
import random
from typing import Any, Optional

import aiohttp

from pokeflip.config import GameConfig
from pokeflip.engine.types import Creature, sprite_id_from_url

from .base import CatalogProvider, duplicate_and_shuffle


logger = logging.getLogger(__name__)


def parse_creature_page(data: Any) -> list[Creature]:
    """
    Parse a list-endpoint body into creatures.

    Entries whose url has no numeric id are kept (they show the card-back
    image) and logged once here.

    Raises:
        ValueError: if the body doesn't have a results list of named entries
    """
    if not isinstance(data, dict):
        raise ValueError(f"expected a JSON object, got {type(data).__name__}")

    results = data.get("results")
    if not isinstance(results, list):
        raise ValueError("response has no 'results' list")

    creatures = []
    for item in results:
        if not isinstance(item, dict):
            raise ValueError(f"malformed result entry: {item!r}")

        name = item.get("name")
        url = item.get("url") or ""
        if not isinstance(name, str) or not name or not isinstance(url, str):
            raise ValueError(f"malformed result entry: {item!r}")

        if sprite_id_from_url(url) is None:
            logger.warning("Malformed reference for %r: %r", name, url)
        creatures.append(Creature(name=name, url=url))
    return creatures


class PokeAPICatalog(CatalogProvider):
    """Creature catalog backed by the PokeAPI."""

    def __init__(
        self,
        config: Optional[GameConfig] = None,
        rng: Optional[random.Random] = None
    ):
        """
        Initialize the catalog.

        Args:
            config: Endpoint, page size, offset range and timeout
            rng: Random source for the page offset and the shuffle
        """
        self.config = config or GameConfig()
        self.rng = rng or random.Random()

    def random_offset(self) -> int:
        if self.config.max_offset <= 0:
            return 0
        return self.rng.randrange(self.config.max_offset)

    def page_url(self, offset: int) -> str:
        base = self.config.api_url.rstrip('/')
        return f"{base}/pokemon?limit={self.config.page_size}&offset={offset}"

    async def fetch_page(self, offset: int) -> list[Creature]:
        """
        Fetch one page of distinct creatures.

        Raises:
            aiohttp.ClientError: on transport errors or a non-200 status
            asyncio.TimeoutError: if the request exceeds the timeout
            ValueError: if the body isn't a creature list
        """
        timeout = aiohttp.ClientTimeout(total=self.config.request_timeout)

        async with aiohttp.ClientSession(timeout=timeout) as session:
            async with session.get(self.page_url(offset)) as resp:
                resp.raise_for_status()
                data = await resp.json(content_type=None)

        return parse_creature_page(data)

    async def fetch_shuffled_pairs(self) -> list[Creature]:
        offset = self.random_offset()
        try:
            creatures = await self.fetch_page(offset)
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            logger.error("PokeAPI request failed (offset=%d): %s", offset, e)
            return []
        except ValueError as e:
            logger.error("PokeAPI returned an unusable page (offset=%d): %s", offset, e)
            return []

        logger.debug("Fetched %d creatures from PokeAPI (offset=%d)", len(creatures), offset)
        return duplicate_and_shuffle(creatures, self.rng)
