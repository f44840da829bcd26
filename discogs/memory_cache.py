"""In-process TTL cache for resolved artist images."""

import logging
import math
import time
from collections.abc import Callable

from cachetools import TTLCache  # type: ignore[import-untyped]

from discogs.models import ArtistWithImage

logger = logging.getLogger(__name__)

# 7 days in seconds
ARTIST_CACHE_TTL = 7 * 24 * 60 * 60


class ArtistImageCache:
    """Artist image lookups keyed by lower-cased artist name.

    Entries stay live while ``timer() - inserted_at < ttl`` and are then
    treated as absent. The cache has no size bound; expired entries are
    dropped lazily by the underlying TTLCache.
    """

    def __init__(
        self,
        ttl: float = ARTIST_CACHE_TTL,
        timer: Callable[[], float] = time.monotonic,
    ):
        self.ttl = ttl
        self._cache: TTLCache = TTLCache(maxsize=math.inf, ttl=ttl, timer=timer)

    @staticmethod
    def make_key(name: str) -> str:
        return name.lower()

    def get(self, name: str) -> ArtistWithImage | None:
        """Return the live entry for an artist name, if any."""
        return self._cache.get(self.make_key(name))

    def set(self, name: str, artist: ArtistWithImage) -> None:
        """Store an artist under its lower-cased name, replacing any prior entry."""
        key = self.make_key(name)
        self._cache[key] = artist
        logger.debug(f"Cached artist image for '{key}'")

    def clear(self) -> None:
        self._cache.clear()

    def __contains__(self, name: str) -> bool:
        return self.make_key(name) in self._cache

    def __len__(self) -> int:
        return len(self._cache)
