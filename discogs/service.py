"""Discogs API service for artist identity, images and biographies."""

from __future__ import annotations

import logging
import random
import time
from collections.abc import Sequence
from typing import Any

import httpx

from core.exceptions import ConfigurationError
from core.ratelimit import FixedDelayRateLimiter, RateLimiter, get_request_limiter
from core.results import Found, LookupResult, NotFound, UpstreamError, unwrap
from core.sentry import add_catalog_breadcrumb
from core.telemetry import (
    record_api_time,
    record_catalog_api_call,
    record_memory_cache_hit,
    record_memory_cache_miss,
)
from discogs.memory_cache import ArtistImageCache
from discogs.models import ArtistDetail, ArtistProfile, ArtistSearchResult, ArtistWithImage

logger = logging.getLogger(__name__)

DISCOGS_API_BASE = "https://api.discogs.com"
DEFAULT_USER_AGENT = "SoundCheckd/1.0 +https://soundcheckd.co"

FEATURED_ARTIST_NAMES = [
    "Taylor Swift",
    "The Weeknd",
    "Beyoncé",
    "Coldplay",
    "Bad Bunny",
    "Drake",
    "Billie Eilish",
    "Ed Sheeran",
    "Kendrick Lamar",
    "Dua Lipa",
    "Harry Styles",
    "Post Malone",
]


def placeholder_artist(name: str) -> ArtistWithImage:
    """Stand-in for an artist the catalog could not resolve."""
    return ArtistWithImage(id=0, name=name, image_url=None, thumbnail_url=None)


class DiscogsService:
    """Service for Discogs artist lookups.

    Only :meth:`get_artist_with_image` reads or writes the image cache.
    Follow-up requests inside one operation wait on ``rate_limiter`` first;
    every request additionally passes the shared per-minute ceiling.
    """

    def __init__(
        self,
        consumer_key: str | None,
        consumer_secret: str | None,
        cache: ArtistImageCache | None = None,
        rate_limiter: RateLimiter | None = None,
        user_agent: str = DEFAULT_USER_AGENT,
        featured_artists: Sequence[str] = FEATURED_ARTIST_NAMES,
        rng: random.Random | None = None,
        timeout: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        """Initialize the service.

        Args:
            consumer_key: Discogs consumer key (checked at first use)
            consumer_secret: Discogs consumer secret (checked at first use)
            cache: Artist image cache; a private one is created if omitted
            rate_limiter: Delay awaited before follow-up requests
            user_agent: Descriptive client identifier required by Discogs
            featured_artists: Curated names for the homepage selection
            rng: Random source for the featured selection
            timeout: HTTP timeout in seconds
            transport: Optional httpx transport (tests use a MockTransport)
        """
        self.consumer_key = consumer_key
        self.consumer_secret = consumer_secret
        self.cache = cache if cache is not None else ArtistImageCache()
        self.rate_limiter = rate_limiter if rate_limiter is not None else FixedDelayRateLimiter()
        self.user_agent = user_agent
        self.featured_artists = list(featured_artists)
        self._rng = rng or random.Random()
        self.timeout = timeout
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    def _auth_headers(self) -> dict[str, str]:
        """Build the Discogs authorization header.

        Raises:
            ConfigurationError: If the consumer key or secret is missing
        """
        if not self.consumer_key or not self.consumer_secret:
            raise ConfigurationError(
                "Discogs API credentials not configured. "
                "Set DISCOGS_CONSUMER_KEY and DISCOGS_CONSUMER_SECRET."
            )
        return {
            "Authorization": f"Discogs key={self.consumer_key}, secret={self.consumer_secret}"
        }

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create the HTTP client."""
        if self._client is None:
            self._client = httpx.AsyncClient(
                base_url=DISCOGS_API_BASE,
                headers={
                    "User-Agent": self.user_agent,
                    "Accept": "application/json",
                },
                timeout=self.timeout,
                transport=self._transport,
            )
        return self._client

    async def close(self):
        """Close the HTTP client."""
        if self._client:
            await self._client.aclose()
            self._client = None

    async def check_api(self) -> bool:
        """Check Discogs API connectivity."""
        try:
            client = await self._get_client()
            resp = await client.get("/")
            return bool(resp.status_code == 200)
        except httpx.HTTPError:
            return False

    async def _get_json(
        self, operation: str, path: str, params: dict[str, Any] | None = None
    ) -> LookupResult[Any]:
        """GET a Discogs endpoint and classify the outcome.

        Args:
            operation: Operation name for logs and breadcrumbs
            path: API path (e.g., "/database/search")
            params: Optional query parameters

        Returns:
            Found with the decoded JSON body, NotFound on 404, UpstreamError otherwise

        Raises:
            ConfigurationError: If credentials are missing (before any I/O)
        """
        headers = self._auth_headers()
        client = await self._get_client()

        add_catalog_breadcrumb("discogs", operation, {"path": path, "params": params or {}})
        start = time.perf_counter()
        try:
            async with get_request_limiter("discogs"):
                response = await client.get(path, params=params, headers=headers)
        except httpx.HTTPError as e:
            logger.error(f"Discogs {operation} request failed: {e}")
            add_catalog_breadcrumb("discogs", operation, {"error": str(e)}, level="error")
            return UpstreamError(f"Discogs request failed: {e}")

        record_api_time((time.perf_counter() - start) * 1000)
        record_catalog_api_call("discogs")

        remaining = response.headers.get("X-Discogs-Ratelimit-Remaining")
        if remaining:
            logger.debug(f"Discogs rate limit remaining: {remaining}")

        if response.status_code == 404:
            logger.info(f"Discogs {operation}: not found ({path})")
            return NotFound(f"Discogs returned 404 for {path}")

        if not 200 <= response.status_code < 300:
            logger.error(f"Discogs {operation} failed: {response.status_code}")
            add_catalog_breadcrumb(
                "discogs", operation, {"status": response.status_code}, level="warning"
            )
            return UpstreamError(
                f"Discogs returned {response.status_code} for {path}",
                status_code=response.status_code,
            )

        try:
            return Found(response.json())
        except ValueError as e:
            logger.error(f"Discogs {operation} returned malformed JSON: {e}")
            return UpstreamError(f"Malformed Discogs response: {e}", status_code=response.status_code)

    async def _search(
        self, name: str, per_page: int, operation: str
    ) -> LookupResult[list[ArtistSearchResult]]:
        result = await self._get_json(
            operation,
            "/database/search",
            params={"q": name, "type": "artist", "per_page": per_page},
        )
        if not isinstance(result, Found):
            return result

        try:
            items = [ArtistSearchResult.from_api(item) for item in result.value.get("results", [])]
        except (AttributeError, KeyError, TypeError, ValueError) as e:
            logger.error(f"Unexpected Discogs search payload for '{name}': {e}")
            return UpstreamError(f"Malformed Discogs search result: {e}")

        return Found(items)

    async def search_artist(self, name: str) -> LookupResult[ArtistSearchResult]:
        """Find the top-ranked Discogs artist for a name.

        Args:
            name: Free-text artist name

        Returns:
            Found with the best match, NotFound when the search is empty
        """
        result = await self._search(name, per_page=1, operation="search_artist")
        if not isinstance(result, Found):
            return result
        if not result.value:
            logger.info(f"No Discogs artist found for '{name}'")
            return NotFound(f"No Discogs artist matches '{name}'")
        return Found(result.value[0])

    async def search_artists(self, name: str, limit: int = 10) -> list[ArtistSearchResult]:
        """Search Discogs artists for interactive search UIs.

        Returns:
            Up to ``limit`` matches, or an empty list on any failure
        """
        result = await self._search(name, per_page=limit, operation="search_artists")
        if isinstance(result, Found):
            return result.value
        return []

    async def get_artist_by_id(self, artist_id: int) -> LookupResult[ArtistDetail]:
        """Fetch the full artist record (images, profile, urls, members)."""
        result = await self._get_json("get_artist_by_id", f"/artists/{artist_id}")
        if not isinstance(result, Found):
            return result

        try:
            return Found(ArtistDetail.from_api(result.value))
        except (AttributeError, TypeError, ValueError) as e:
            logger.error(f"Unexpected Discogs artist payload for {artist_id}: {e}")
            return UpstreamError(f"Malformed Discogs artist {artist_id}: {e}")

    async def get_artist_with_image(self, name: str) -> LookupResult[ArtistWithImage]:
        """Resolve an artist name to its identity and display images.

        1. Serve a live cache entry for the lower-cased name
        2. Otherwise search Discogs (misses are not cached)
        3. Use the search result's cover image when it has one
        4. Otherwise wait for the rate limiter and take the primary image
           from the full artist record
        5. Cache the value and return it

        Args:
            name: Free-text artist name

        Returns:
            Found with the artist, or the search's NotFound/UpstreamError
        """
        self._auth_headers()

        cached = self.cache.get(name)
        if cached is not None:
            logger.debug(f"Artist image cache hit for '{name}'")
            record_memory_cache_hit()
            return Found(cached.model_copy(update={"cached": True}))

        record_memory_cache_miss()
        search = await self.search_artist(name)
        if not isinstance(search, Found):
            return search

        match = search.value
        artist = ArtistWithImage(
            id=match.id,
            name=match.title,
            image_url=match.cover_image_url,
            thumbnail_url=match.thumbnail_url,
        )

        if artist.image_url is None:
            await self.rate_limiter.await_slot()
            detail = unwrap(await self.get_artist_by_id(match.id))
            image = detail.primary_image() if detail else None
            if image is not None:
                artist = artist.model_copy(
                    update={
                        "image_url": image.uri or None,
                        "thumbnail_url": image.uri150 or None,
                    }
                )

        self.cache.set(name, artist)
        return Found(artist.model_copy())

    async def get_artist_profile(self, name: str) -> LookupResult[ArtistProfile]:
        """Resolve an artist name to the full profile shown on the artist page.

        Always fetches the artist record; the image cache is not involved.
        If only the detail fetch fails, the profile is built from the
        search hit with no biography, urls or members.
        """
        search = await self.search_artist(name)
        if not isinstance(search, Found):
            return search

        match = search.value
        await self.rate_limiter.await_slot()
        detail = unwrap(await self.get_artist_by_id(match.id))

        if detail is None:
            logger.warning(f"Discogs detail unavailable for '{name}' ({match.id})")
            return Found(
                ArtistProfile(
                    id=match.id,
                    name=match.title,
                    image_url=match.cover_image_url,
                    thumbnail_url=match.thumbnail_url,
                )
            )

        image_url = match.cover_image_url
        thumbnail_url = match.thumbnail_url
        image = detail.primary_image()
        if image is not None:
            image_url = image.uri or None
            thumbnail_url = image.uri150 or None

        return Found(
            ArtistProfile(
                id=detail.id,
                name=detail.name,
                image_url=image_url,
                thumbnail_url=thumbnail_url,
                profile=detail.profile or None,
                urls=detail.urls,
                members=detail.members,
            )
        )

    async def get_multiple_artists_with_images(self, names: Sequence[str]) -> list[ArtistWithImage]:
        """Resolve several names in order, one after another.

        Unresolved names become placeholders, so the output always has
        one entry per input name.
        """
        self._auth_headers()

        artists: list[ArtistWithImage] = []
        for index, name in enumerate(names):
            if index > 0:
                await self.rate_limiter.await_slot()

            result = await self.get_artist_with_image(name)
            if isinstance(result, Found):
                artists.append(result.value)
            else:
                logger.info(f"Using placeholder for '{name}': {result}")
                artists.append(placeholder_artist(name))

        return artists

    async def get_featured_artists(self, count: int = 6) -> list[ArtistWithImage]:
        """Pick ``count`` distinct curated artists at random and resolve them."""
        self._auth_headers()

        count = max(0, min(count, len(self.featured_artists)))
        selected = self._rng.sample(self.featured_artists, count)
        logger.info(f"Featured artists selected: {selected}")
        return await self.get_multiple_artists_with_images(selected)
