"""Integration test fixtures.

Provides real DiscogsService and SetlistFmService instances whose HTTP
clients talk to in-process fake catalogs through ``httpx.MockTransport``.
"""

import httpx
import pytest
import pytest_asyncio

from config.settings import Settings
from core.ratelimit import NoDelayRateLimiter, reset_rate_limiting
from discogs.memory_cache import ArtistImageCache
from discogs.service import DiscogsService
from setlistfm.service import SetlistFmService
from tests.conftest import FakeClock
from tests.factories import (
    make_discogs_artist_payload,
    make_discogs_search_item,
    make_discogs_search_payload,
    make_setlist_page_payload,
    make_setlist_payload,
)

# ---------------------------------------------------------------------------
# Seed data -- the fake catalogs' contents
# ---------------------------------------------------------------------------

DISCOGS_ARTISTS = {
    "nirvana": make_discogs_search_item(id=125246, title="Nirvana"),
    # No usable cover image in search; the detail record has one
    "pixies": make_discogs_search_item(
        id=72, title="Pixies", cover_image="https://s.discogs.com/images/spacer.gif"
    ),
    "nirvana (2)": make_discogs_search_item(id=307, title="Nirvana (2)"),
}

NIRVANA_MBID = "5b11f4ce-a62d-471e-81fc-a69a8278c7da"


class FakeCatalog:
    """Records requests and answers them like the real catalog would."""

    def __init__(self, handler):
        self._handler = handler
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return self._handler(request)

    def paths(self) -> list[str]:
        return [r.url.path for r in self.requests]


def _discogs_handler(request: httpx.Request) -> httpx.Response:
    path = request.url.path
    if path == "/":
        return httpx.Response(200, json={"hello": "Welcome to the Discogs API."})
    if path == "/database/search":
        match = DISCOGS_ARTISTS.get(request.url.params["q"].lower())
        return httpx.Response(200, json=make_discogs_search_payload(*([match] if match else [])))
    if path.startswith("/artists/"):
        artist_id = int(path.rsplit("/", 1)[1])
        for item in DISCOGS_ARTISTS.values():
            if item["id"] == artist_id:
                return httpx.Response(
                    200, json=make_discogs_artist_payload(id=artist_id, name=item["title"])
                )
        return httpx.Response(404, json={"message": "Artist not found."})
    return httpx.Response(404, json={"message": "Not found."})


def _setlistfm_handler(request: httpx.Request) -> httpx.Response:
    path = request.url.path.removeprefix("/rest/1.0")
    params = request.url.params
    if path == "/search/countries":
        return httpx.Response(200, json={"country": []})
    if path == "/search/artists":
        if params["artistName"].lower() != "nirvana":
            return httpx.Response(404, json={"code": 404, "message": "not found"})
        return httpx.Response(
            200,
            json={
                "type": "artists",
                "itemsPerPage": 30,
                "page": 1,
                "total": 1,
                "artist": [{"mbid": NIRVANA_MBID, "name": "Nirvana", "sortName": "Nirvana"}],
            },
        )
    if path == f"/artist/{NIRVANA_MBID}/setlists":
        page = int(params.get("p", 1))
        return httpx.Response(
            200,
            json=make_setlist_page_payload(
                [make_setlist_payload(id=f"set-{page}-{i}") for i in range(5)],
                total=45,
                page=page,
            ),
        )
    if path == "/search/setlists":
        if params.get("cityName") == "New York" or params.get("artistName") == "Nirvana":
            return httpx.Response(
                200, json=make_setlist_page_payload([make_setlist_payload()], page=1)
            )
        return httpx.Response(404, json={"code": 404, "message": "not found"})
    if path == "/setlist/63de4613":
        return httpx.Response(200, json=make_setlist_payload())
    if path.startswith("/setlist/"):
        return httpx.Response(404, json={"code": 404, "message": "not found"})
    return httpx.Response(500, json={"code": 500, "message": "unexpected"})


@pytest.fixture
def discogs_catalog():
    return FakeCatalog(_discogs_handler)


@pytest.fixture
def setlistfm_catalog():
    return FakeCatalog(_setlistfm_handler)


@pytest.fixture
def fake_clock():
    return FakeClock()


@pytest.fixture
def test_settings():
    """Settings with fake credentials, telemetry disabled."""
    return Settings(
        discogs_consumer_key="test-key",
        discogs_consumer_secret="test-secret",
        setlistfm_api_key="test-api-key",
        sentry_dsn=None,
        posthog_api_key=None,
        enable_telemetry=False,
    )


@pytest_asyncio.fixture
async def discogs(discogs_catalog, fake_clock):
    """Real DiscogsService backed by the fake Discogs catalog."""
    service = DiscogsService(
        "test-key",
        "test-secret",
        cache=ArtistImageCache(timer=fake_clock),
        rate_limiter=NoDelayRateLimiter(),
        transport=httpx.MockTransport(discogs_catalog),
    )
    yield service
    await service.close()


@pytest_asyncio.fixture
async def setlistfm(setlistfm_catalog):
    """Real SetlistFmService backed by the fake Setlist.fm catalog."""
    service = SetlistFmService(
        api_key="test-api-key", transport=httpx.MockTransport(setlistfm_catalog)
    )
    yield service
    await service.close()


@pytest_asyncio.fixture
async def app_client(discogs, setlistfm, test_settings):
    """httpx AsyncClient against the app with fake-catalog-backed services."""
    from httpx import ASGITransport, AsyncClient

    from config.settings import get_settings
    from core.dependencies import get_discogs_service, get_posthog_client, get_setlistfm_service
    from main import app

    app.dependency_overrides[get_discogs_service] = lambda: discogs
    app.dependency_overrides[get_setlistfm_service] = lambda: setlistfm
    app.dependency_overrides[get_posthog_client] = lambda: None
    app.dependency_overrides[get_settings] = lambda: test_settings

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        yield client

    app.dependency_overrides.clear()
    reset_rate_limiting()
