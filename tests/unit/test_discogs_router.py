"""Unit tests for discogs/router.py."""

from unittest.mock import AsyncMock, patch

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from core.dependencies import get_discogs_service, get_posthog_client
from core.exceptions import ConfigurationError
from core.results import Found, NotFound, UpstreamError
from discogs.models import ArtistDetail, ArtistProfile, ArtistSearchResult
from discogs.service import FEATURED_ARTIST_NAMES, DiscogsService, placeholder_artist
from tests.factories import make_artist_with_image
from tests.unit.conftest import override_deps


@pytest.fixture
def mock_service():
    return AsyncMock(spec=DiscogsService)


@pytest_asyncio.fixture
async def client(mock_service, mock_posthog_client):
    from main import app

    with override_deps(
        app,
        {get_discogs_service: mock_service, get_posthog_client: mock_posthog_client},
    ):
        async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as c:
            yield c


class TestSearchArtists:
    @pytest.mark.asyncio
    async def test_returns_results(self, client, mock_service):
        mock_service.search_artists.return_value = [
            ArtistSearchResult(id=1, title="Nirvana", name="Nirvana")
        ]

        resp = await client.get("/api/v1/discogs/artists/search", params={"q": "nirv", "limit": 5})

        assert resp.status_code == 200
        assert resp.json()[0]["id"] == 1
        mock_service.search_artists.assert_awaited_once_with("nirv", limit=5)

    @pytest.mark.asyncio
    async def test_requires_query(self, client):
        resp = await client.get("/api/v1/discogs/artists/search")
        assert resp.status_code == 422


class TestFeaturedArtists:
    @pytest.mark.asyncio
    async def test_success(self, client, mock_service, mock_posthog_client):
        mock_service.get_featured_artists.return_value = [
            make_artist_with_image(id=i, name=name)
            for i, name in enumerate(FEATURED_ARTIST_NAMES[:3])
        ]

        resp = await client.get("/api/v1/discogs/artists/featured", params={"count": 3})

        body = resp.json()
        assert resp.status_code == 200
        assert body["success"] is True
        assert body["count"] == 3
        assert body["error"] is None
        mock_service.get_featured_artists.assert_awaited_once_with(3)
        mock_posthog_client.capture.assert_called()

    @pytest.mark.asyncio
    @pytest.mark.parametrize("requested,expected", [(0, 1), (-5, 1), (100, 12)])
    async def test_count_clamped(self, client, mock_service, requested, expected):
        mock_service.get_featured_artists.return_value = []
        await client.get("/api/v1/discogs/artists/featured", params={"count": requested})
        mock_service.get_featured_artists.assert_awaited_once_with(expected)

    @pytest.mark.asyncio
    async def test_missing_credentials_fallback(self, client, mock_service):
        mock_service.get_featured_artists.side_effect = ConfigurationError("no creds")

        with patch("discogs.router.capture_exception") as mock_capture:
            resp = await client.get("/api/v1/discogs/artists/featured")

        body = resp.json()
        assert resp.status_code == 200
        assert body["success"] is False
        assert body["error"] == "Failed to fetch artist images"
        assert body["count"] == 6
        assert [a["name"] for a in body["data"]] == FEATURED_ARTIST_NAMES[:6]
        assert [a["id"] for a in body["data"]] == list(range(6))
        assert all(a["image_url"] is None for a in body["data"])
        mock_capture.assert_called_once()


class TestArtistImage:
    @pytest.mark.asyncio
    async def test_found(self, client, mock_service):
        mock_service.get_artist_with_image.return_value = Found(make_artist_with_image())

        resp = await client.get("/api/v1/discogs/artists/image", params={"name": "Nirvana"})

        assert resp.status_code == 200
        assert resp.json()["image_url"] == "https://i.discogs.com/cover.jpg"

    @pytest.mark.asyncio
    async def test_not_found(self, client, mock_service):
        mock_service.get_artist_with_image.return_value = NotFound()
        resp = await client.get("/api/v1/discogs/artists/image", params={"name": "zzzz"})
        assert resp.status_code == 404

    @pytest.mark.asyncio
    async def test_upstream_error(self, client, mock_service):
        mock_service.get_artist_with_image.return_value = UpstreamError("boom", status_code=500)
        resp = await client.get("/api/v1/discogs/artists/image", params={"name": "Nirvana"})
        assert resp.status_code == 502

    @pytest.mark.asyncio
    async def test_missing_credentials_is_503(self, client, mock_service):
        mock_service.get_artist_with_image.side_effect = ConfigurationError("no creds")
        resp = await client.get("/api/v1/discogs/artists/image", params={"name": "Nirvana"})
        assert resp.status_code == 503
        assert resp.json()["detail"] == "no creds"


class TestArtistImages:
    @pytest.mark.asyncio
    async def test_batch(self, client, mock_service, mock_posthog_client):
        mock_service.get_multiple_artists_with_images.return_value = [
            make_artist_with_image(name="Nirvana"),
            placeholder_artist("Unknown"),
        ]

        resp = await client.post(
            "/api/v1/discogs/artists/images", json={"names": ["Nirvana", "Unknown"]}
        )

        assert resp.status_code == 200
        assert [a["name"] for a in resp.json()] == ["Nirvana", "Unknown"]
        mock_service.get_multiple_artists_with_images.assert_awaited_once_with(
            ["Nirvana", "Unknown"]
        )
        events = [c.kwargs["event"] for c in mock_posthog_client.capture.call_args_list]
        assert "catalog_request_completed" in events


class TestArtistProfile:
    @pytest.mark.asyncio
    async def test_profile_markup_cleaned(self, client, mock_service):
        mock_service.get_artist_profile.return_value = Found(
            ArtistProfile(id=7, name="Nirvana", profile="Formed by [a=Kurt Cobain].")
        )

        resp = await client.get("/api/v1/discogs/artists/profile", params={"name": "Nirvana"})

        assert resp.status_code == 200
        assert resp.json()["profile"] == "Formed by Kurt Cobain."

    @pytest.mark.asyncio
    async def test_empty_profile_is_null(self, client, mock_service):
        mock_service.get_artist_profile.return_value = Found(ArtistProfile(id=7, name="Nirvana"))
        resp = await client.get("/api/v1/discogs/artists/profile", params={"name": "Nirvana"})
        assert resp.json()["profile"] is None

    @pytest.mark.asyncio
    async def test_not_found(self, client, mock_service):
        mock_service.get_artist_profile.return_value = NotFound()
        resp = await client.get("/api/v1/discogs/artists/profile", params={"name": "zzzz"})
        assert resp.status_code == 404


class TestArtistById:
    @pytest.mark.asyncio
    async def test_found(self, client, mock_service):
        mock_service.get_artist_by_id.return_value = Found(ArtistDetail(id=125246, name="Nirvana"))

        resp = await client.get("/api/v1/discogs/artists/125246")

        assert resp.status_code == 200
        assert resp.json()["name"] == "Nirvana"
        mock_service.get_artist_by_id.assert_awaited_once_with(125246)

    @pytest.mark.asyncio
    async def test_not_found(self, client, mock_service):
        mock_service.get_artist_by_id.return_value = NotFound()
        resp = await client.get("/api/v1/discogs/artists/1")
        assert resp.status_code == 404

    @pytest.mark.asyncio
    async def test_non_numeric_id(self, client):
        resp = await client.get("/api/v1/discogs/artists/abc")
        assert resp.status_code == 422
