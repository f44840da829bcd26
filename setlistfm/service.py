"""Setlist.fm API service for concert and setlist lookups."""

from __future__ import annotations

import logging
import time
from collections.abc import Callable
from enum import StrEnum
from typing import Any, TypeVar

import httpx
from pydantic import ValidationError

from core.exceptions import ConfigurationError
from core.ratelimit import get_request_limiter
from core.results import Found, LookupResult, NotFound, UpstreamError
from core.sentry import add_catalog_breadcrumb
from core.telemetry import record_api_time, record_catalog_api_call
from setlistfm.models import SETLISTFM_PAGE_SIZE, PagedResult, Setlist, SetlistArtist

logger = logging.getLogger(__name__)

SETLISTFM_API_BASE = "https://api.setlist.fm/rest/1.0"

T = TypeVar("T")


class SetlistSearchBy(StrEnum):
    """Free-text setlist search kinds and their query parameters."""

    ARTIST = "artist"
    VENUE = "venue"
    CITY = "city"

    @property
    def query_param(self) -> str:
        return f"{self.value}Name"


class SetlistFmService:
    """Service for Setlist.fm lookups.

    Nothing is cached here: every call is a live request. Results are
    returned as parsed models; display shaping lives in
    ``setlistfm.formatting`` and empty-page substitution is left to callers.
    """

    def __init__(
        self,
        api_key: str | None,
        timeout: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        """Initialize the service.

        Args:
            api_key: Setlist.fm API key (checked at first use)
            timeout: HTTP timeout in seconds
            transport: Optional httpx transport (tests use a MockTransport)
        """
        self.api_key = api_key
        self.timeout = timeout
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    def _auth_headers(self) -> dict[str, str]:
        """Build the Setlist.fm API key header.

        Raises:
            ConfigurationError: If the API key is missing
        """
        if not self.api_key:
            raise ConfigurationError(
                "Setlist.fm API key not configured. Set SETLISTFM_API_KEY."
            )
        return {"x-api-key": self.api_key}

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create the HTTP client."""
        if self._client is None:
            self._client = httpx.AsyncClient(
                base_url=SETLISTFM_API_BASE,
                headers={"Accept": "application/json"},
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
        """Check Setlist.fm API connectivity with an authenticated request."""
        try:
            client = await self._get_client()
            resp = await client.get("/search/countries", headers=self._auth_headers())
            return bool(resp.status_code == 200)
        except (httpx.HTTPError, ConfigurationError):
            return False

    async def _get_json(
        self, operation: str, path: str, params: dict[str, Any] | None = None
    ) -> LookupResult[Any]:
        """GET a Setlist.fm endpoint and classify the outcome.

        Setlist.fm answers 404 for searches without matches, so NotFound
        covers both unknown ids and empty searches.

        Raises:
            ConfigurationError: If the API key is missing (before any I/O)
        """
        headers = self._auth_headers()
        client = await self._get_client()

        add_catalog_breadcrumb("setlistfm", operation, {"path": path, "params": params or {}})
        start = time.perf_counter()
        try:
            async with get_request_limiter("setlistfm"):
                response = await client.get(path, params=params, headers=headers)
        except httpx.HTTPError as e:
            logger.error(f"Setlist.fm {operation} request failed: {e}")
            add_catalog_breadcrumb("setlistfm", operation, {"error": str(e)}, level="error")
            return UpstreamError(f"Setlist.fm request failed: {e}")

        record_api_time((time.perf_counter() - start) * 1000)
        record_catalog_api_call("setlistfm")

        if response.status_code == 404:
            logger.info(f"Setlist.fm {operation}: no results ({path})")
            return NotFound(f"Setlist.fm returned 404 for {path}")

        if not 200 <= response.status_code < 300:
            logger.error(f"Setlist.fm {operation} failed: {response.status_code}")
            add_catalog_breadcrumb(
                "setlistfm", operation, {"status": response.status_code}, level="warning"
            )
            return UpstreamError(
                f"Setlist.fm returned {response.status_code} for {path}",
                status_code=response.status_code,
            )

        try:
            return Found(response.json())
        except ValueError as e:
            logger.error(f"Setlist.fm {operation} returned malformed JSON: {e}")
            return UpstreamError(
                f"Malformed Setlist.fm response: {e}", status_code=response.status_code
            )

    def _parse_page(
        self,
        data: Any,
        key: str,
        parse_item: Callable[[Any], T],
        requested_page: int,
    ) -> LookupResult[PagedResult[T]]:
        """Turn a Setlist.fm list response into a PagedResult."""
        try:
            items = [parse_item(item) for item in data.get(key) or []]
            return Found(
                PagedResult(
                    items=items,
                    total=data.get("total", len(items)),
                    page=data.get("page", requested_page),
                    items_per_page=data.get("itemsPerPage", SETLISTFM_PAGE_SIZE),
                )
            )
        except (AttributeError, TypeError, ValidationError) as e:
            logger.error(f"Unexpected Setlist.fm '{key}' payload: {e}")
            return UpstreamError(f"Malformed Setlist.fm {key} page: {e}")

    async def search_artists(
        self, query: str, page: int = 1
    ) -> LookupResult[PagedResult[SetlistArtist]]:
        """Search Setlist.fm artists by name, sorted by relevance."""
        result = await self._get_json(
            "search_artists",
            "/search/artists",
            params={"artistName": query, "p": page, "sort": "relevance"},
        )
        if not isinstance(result, Found):
            return result
        return self._parse_page(result.value, "artist", SetlistArtist.model_validate, page)

    async def get_artist_setlists(
        self, mbid: str, page: int = 1
    ) -> LookupResult[PagedResult[Setlist]]:
        """Fetch one page of an artist's setlists by MusicBrainz id."""
        result = await self._get_json(
            "get_artist_setlists", f"/artist/{mbid}/setlists", params={"p": page}
        )
        if not isinstance(result, Found):
            return result
        return self._parse_page(result.value, "setlist", Setlist.model_validate, page)

    async def search_setlists(
        self, by: SetlistSearchBy, name: str, page: int = 1
    ) -> LookupResult[PagedResult[Setlist]]:
        """Free-text setlist search by artist, venue or city name."""
        by = SetlistSearchBy(by)
        result = await self._get_json(
            f"search_setlists_by_{by.value}",
            "/search/setlists",
            params={by.query_param: name, "p": page},
        )
        if not isinstance(result, Found):
            return result
        return self._parse_page(result.value, "setlist", Setlist.model_validate, page)

    async def search_setlists_by_artist(
        self, artist_name: str, page: int = 1
    ) -> LookupResult[PagedResult[Setlist]]:
        return await self.search_setlists(SetlistSearchBy.ARTIST, artist_name, page)

    async def search_setlists_by_venue(
        self, venue_name: str, page: int = 1
    ) -> LookupResult[PagedResult[Setlist]]:
        return await self.search_setlists(SetlistSearchBy.VENUE, venue_name, page)

    async def search_setlists_by_city(
        self, city_name: str, page: int = 1
    ) -> LookupResult[PagedResult[Setlist]]:
        return await self.search_setlists(SetlistSearchBy.CITY, city_name, page)

    async def get_setlist_by_id(self, setlist_id: str) -> LookupResult[Setlist]:
        """Fetch a single setlist."""
        result = await self._get_json("get_setlist_by_id", f"/setlist/{setlist_id}")
        if not isinstance(result, Found):
            return result

        try:
            return Found(Setlist.model_validate(result.value))
        except ValidationError as e:
            logger.error(f"Unexpected Setlist.fm setlist payload for {setlist_id}: {e}")
            return UpstreamError(f"Malformed Setlist.fm setlist {setlist_id}: {e}")
