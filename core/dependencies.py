"""FastAPI dependency injection providers."""

import logging

from fastapi import Depends
from posthog import Posthog

from config.settings import Settings, get_settings
from core.ratelimit import FixedDelayRateLimiter
from discogs.memory_cache import ArtistImageCache
from discogs.service import DiscogsService
from setlistfm.service import SetlistFmService

logger = logging.getLogger(__name__)

# Module-level instances for lifecycle management
_artist_image_cache: ArtistImageCache | None = None
_discogs_service: DiscogsService | None = None
_setlistfm_service: SetlistFmService | None = None
_posthog_client: Posthog | None = None


def get_artist_image_cache(settings: Settings = Depends(get_settings)) -> ArtistImageCache:
    """Get the process-wide artist image cache."""
    global _artist_image_cache

    if _artist_image_cache is None:
        _artist_image_cache = ArtistImageCache(ttl=settings.artist_cache_ttl)
        logger.info(f"Artist image cache created (ttl: {settings.artist_cache_ttl}s)")

    return _artist_image_cache


async def get_discogs_service(settings: Settings = Depends(get_settings)) -> DiscogsService:
    """Get the Discogs service instance.

    The service is created even without credentials; its operations raise
    ConfigurationError at first use.

    Args:
        settings: Application settings

    Returns:
        DiscogsService wired to the shared artist image cache
    """
    global _discogs_service

    if _discogs_service is None:
        if not settings.discogs_configured:
            logger.warning("DISCOGS_CONSUMER_KEY/SECRET not set - Discogs lookups will fail")

        _discogs_service = DiscogsService(
            settings.discogs_consumer_key,
            settings.discogs_consumer_secret,
            cache=get_artist_image_cache(settings),
            rate_limiter=FixedDelayRateLimiter(settings.catalog_request_delay),
            user_agent=settings.discogs_user_agent,
            timeout=settings.http_timeout,
        )
        logger.info("Discogs service initialized")

    return _discogs_service


async def close_discogs_service() -> None:
    """Close the Discogs service and its HTTP client."""
    global _discogs_service
    if _discogs_service:
        await _discogs_service.close()
        _discogs_service = None


async def get_setlistfm_service(settings: Settings = Depends(get_settings)) -> SetlistFmService:
    """Get the Setlist.fm service instance.

    Args:
        settings: Application settings

    Returns:
        SetlistFmService (raises ConfigurationError at first use without a key)
    """
    global _setlistfm_service

    if _setlistfm_service is None:
        if not settings.setlistfm_configured:
            logger.warning("SETLISTFM_API_KEY not set - Setlist.fm lookups will fail")

        _setlistfm_service = SetlistFmService(
            settings.setlistfm_api_key, timeout=settings.http_timeout
        )
        logger.info("Setlist.fm service initialized")

    return _setlistfm_service


async def close_setlistfm_service() -> None:
    """Close the Setlist.fm service and its HTTP client."""
    global _setlistfm_service
    if _setlistfm_service:
        await _setlistfm_service.close()
        _setlistfm_service = None


def get_posthog_client(settings: Settings = Depends(get_settings)) -> Posthog | None:
    """Get PostHog client instance.

    Args:
        settings: Application settings

    Returns:
        Optional[Posthog]: PostHog client if configured and enabled, None otherwise
    """
    global _posthog_client

    if not settings.enable_telemetry:
        logger.debug("Telemetry disabled")
        return None

    if not settings.posthog_api_key:
        logger.debug("POSTHOG_API_KEY not set - telemetry disabled")
        return None

    if _posthog_client is None:
        _posthog_client = Posthog(
            project_api_key=settings.posthog_api_key,
            host=settings.posthog_host,
        )
        logger.info(f"PostHog client initialized (host: {settings.posthog_host})")

    return _posthog_client


def flush_posthog() -> None:
    """Flush any buffered PostHog events."""
    if _posthog_client:
        _posthog_client.flush()


def shutdown_posthog() -> None:
    """Shutdown PostHog client gracefully."""
    global _posthog_client
    if _posthog_client:
        _posthog_client.shutdown()
        _posthog_client = None
        logger.info("PostHog client shutdown")
