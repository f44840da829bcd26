"""Shared test fixtures for pytest."""

import random
from unittest.mock import AsyncMock

import pytest

from core.ratelimit import NoDelayRateLimiter
from discogs.memory_cache import ArtistImageCache
from discogs.service import DiscogsService
from setlistfm.service import SetlistFmService


class FakeClock:
    """Controllable monotonic clock for cache expiry tests."""

    def __init__(self, start: float = 1_000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class RecordingRateLimiter:
    """Rate limiter that counts slot requests instead of sleeping."""

    def __init__(self):
        self.calls = 0

    async def await_slot(self) -> None:
        self.calls += 1


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def artist_cache(clock):
    return ArtistImageCache(timer=clock)


@pytest.fixture
def rate_limiter():
    return RecordingRateLimiter()


@pytest.fixture
def discogs_service(artist_cache, rate_limiter):
    """Discogs service with a fake clock cache and no real delays."""
    return DiscogsService(
        "test-key",
        "test-secret",
        cache=artist_cache,
        rate_limiter=rate_limiter,
        rng=random.Random(42),
    )


@pytest.fixture
def unconfigured_discogs_service(artist_cache):
    return DiscogsService(None, None, cache=artist_cache, rate_limiter=NoDelayRateLimiter())


@pytest.fixture
def setlistfm_service():
    return SetlistFmService(api_key="test-api-key")


@pytest.fixture
def mock_http_client():
    """AsyncMock standing in for httpx.AsyncClient; set ``get`` per test."""
    client = AsyncMock()
    client.get = AsyncMock()
    return client
