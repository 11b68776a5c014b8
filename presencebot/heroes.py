"""
Hero ID to name mapping backed by the OpenDota hero catalog.

The catalog is fetched the first time a name is needed and then kept for
the lifetime of the process. A failed fetch is not cached, so the next
caller tries again.
"""

from __future__ import annotations

from typing import Dict

from cachetools import Cache

from .api import OpenDotaClient
from .config import logger
from .http import ApiError

HERO_CACHE_KEY = "heroes"


class HeroCatalog:
    def __init__(self, client: OpenDotaClient) -> None:
        self._client = client
        # No TTL: hero ids practically never change while the bot runs
        self._cache: Cache = Cache(maxsize=1)

    @property
    def loaded(self) -> bool:
        return HERO_CACHE_KEY in self._cache

    async def get(self) -> Dict[int, str]:
        """Return the hero mapping, fetching it on first use.

        Raises ``ApiError`` when the catalog cannot be fetched; callers treat
        that as a transient failure and retry on their next tick.
        """
        if HERO_CACHE_KEY in self._cache:
            logger.debug("Hero cache hit")
            return self._cache[HERO_CACHE_KEY]

        logger.debug("Hero cache miss, calling API")
        heroes = await self._client.get_heroes()
        if not heroes:
            raise ApiError(f"{self._client.base_url}/heroes", "hero catalog is empty")
        self._cache[HERO_CACHE_KEY] = heroes
        logger.info(f"✅ Loaded {len(heroes)} heroes from OpenDota")
        return heroes
