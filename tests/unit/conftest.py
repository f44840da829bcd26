"""Unit test fixtures."""

from contextlib import contextmanager
from unittest.mock import Mock

import pytest

import core.dependencies as dependencies
from config.settings import Settings
from core.ratelimit import reset_rate_limiting


@contextmanager
def override_deps(app, overrides):
    """Set FastAPI dependency overrides and clear them on exit.

    Args:
        app: The FastAPI application.
        overrides: A dict mapping dependency functions to their replacement values.
    """

    def _make_override(val):
        return lambda: val

    for dep_fn, provider in overrides.items():
        app.dependency_overrides[dep_fn] = _make_override(provider)
    try:
        yield app
    finally:
        app.dependency_overrides.clear()


@pytest.fixture
def mock_settings(monkeypatch):
    """Settings with safe test defaults (no real credentials/DSNs)."""
    monkeypatch.setenv("DISCOGS_CONSUMER_KEY", "")
    monkeypatch.setenv("DISCOGS_CONSUMER_SECRET", "")
    monkeypatch.setenv("SETLISTFM_API_KEY", "")
    monkeypatch.setenv("SENTRY_DSN", "")
    monkeypatch.setenv("POSTHOG_API_KEY", "")
    monkeypatch.setenv("ENABLE_TELEMETRY", "false")
    return Settings(
        discogs_consumer_key=None,
        discogs_consumer_secret=None,
        setlistfm_api_key=None,
        sentry_dsn=None,
        posthog_api_key=None,
        enable_telemetry=False,
    )


@pytest.fixture
def configured_settings():
    """Settings with fake catalog credentials."""
    return Settings(
        discogs_consumer_key="test-key",
        discogs_consumer_secret="test-secret",
        setlistfm_api_key="test-api-key",
        sentry_dsn=None,
        posthog_api_key=None,
        enable_telemetry=False,
    )


@pytest.fixture
def mock_posthog_client():
    """Mock PostHog client."""
    client = Mock()
    client.capture = Mock()
    client.flush = Mock()
    client.shutdown = Mock()
    return client


@pytest.fixture(autouse=True)
def reset_state():
    """Reset rate limiting, module-level services and ContextVars between tests."""
    from core.telemetry import _cache_stats_var

    cache_stats_token = _cache_stats_var.set(None)
    yield
    reset_rate_limiting()
    dependencies._artist_image_cache = None
    dependencies._discogs_service = None
    dependencies._setlistfm_service = None
    dependencies._posthog_client = None
    _cache_stats_var.reset(cache_stats_token)
