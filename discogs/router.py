"""FastAPI router for Discogs artist endpoints."""

import logging

from fastapi import APIRouter, Depends, Query
from posthog import Posthog

from core.dependencies import get_discogs_service, get_posthog_client
from core.exceptions import CatalogServiceError
from core.sentry import capture_exception
from core.telemetry import RequestTelemetry, init_cache_stats
from discogs.markup import clean_profile
from discogs.models import (
    ArtistDetail,
    ArtistImagesRequest,
    ArtistProfile,
    ArtistSearchResult,
    ArtistWithImage,
    FeaturedArtistsResponse,
)
from discogs.service import FEATURED_ARTIST_NAMES, DiscogsService, placeholder_artist
from routers.results import require_found

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/discogs", tags=["discogs"])

FALLBACK_FEATURED_COUNT = 6


def _fallback_featured() -> list[ArtistWithImage]:
    return [
        placeholder_artist(name).model_copy(update={"id": index})
        for index, name in enumerate(FEATURED_ARTIST_NAMES[:FALLBACK_FEATURED_COUNT])
    ]


@router.get(
    "/artists/search",
    response_model=list[ArtistSearchResult],
    summary="Search Discogs artists by name",
)
async def search_artists(
    q: str = Query(..., min_length=1, description="Artist name to search for"),
    limit: int = Query(10, ge=1, le=50, description="Maximum number of results"),
    service: DiscogsService = Depends(get_discogs_service),
) -> list[ArtistSearchResult]:
    """Search Discogs artists; catalog failures yield an empty list."""
    return await service.search_artists(q, limit=limit)


@router.get(
    "/artists/featured",
    response_model=FeaturedArtistsResponse,
    summary="Featured artists for the homepage",
)
async def get_featured_artists(
    count: int = Query(6, description="Number of artists (clamped to 1..12)"),
    service: DiscogsService = Depends(get_discogs_service),
    posthog_client: Posthog | None = Depends(get_posthog_client),
) -> FeaturedArtistsResponse:
    """Random curated artists with images, or placeholders if Discogs is unusable."""
    count = min(max(1, count), len(FEATURED_ARTIST_NAMES))

    init_cache_stats()
    telemetry = RequestTelemetry()

    try:
        with telemetry.track_step("featured_artists"):
            artists = await service.get_featured_artists(count)
    except CatalogServiceError as e:
        logger.error(f"Error fetching featured artists: {e}")
        capture_exception(e, {"operation": "featured_artists", "count": count})
        fallback = _fallback_featured()
        return FeaturedArtistsResponse(
            success=False,
            error="Failed to fetch artist images",
            data=fallback,
            count=len(fallback),
        )

    if posthog_client:
        telemetry.send_to_posthog(posthog_client, {"requested": count})

    return FeaturedArtistsResponse(data=artists, count=len(artists))


@router.get(
    "/artists/image",
    response_model=ArtistWithImage,
    summary="Resolve an artist name to its images",
    responses={
        404: {"description": "No Discogs artist matches the name"},
        502: {"description": "Discogs unavailable"},
        503: {"description": "Discogs credentials not configured"},
    },
)
async def get_artist_image(
    name: str = Query(..., min_length=1, description="Artist name"),
    service: DiscogsService = Depends(get_discogs_service),
) -> ArtistWithImage:
    result = await service.get_artist_with_image(name)
    return require_found(result, f"Artist '{name}' not found")


@router.post(
    "/artists/images",
    response_model=list[ArtistWithImage],
    summary="Resolve several artist names to their images",
)
async def get_artist_images(
    request: ArtistImagesRequest,
    service: DiscogsService = Depends(get_discogs_service),
    posthog_client: Posthog | None = Depends(get_posthog_client),
) -> list[ArtistWithImage]:
    """One entry per requested name; unresolved names come back as placeholders."""
    init_cache_stats()
    telemetry = RequestTelemetry()

    with telemetry.track_step("artist_images"):
        artists = await service.get_multiple_artists_with_images(request.names)

    if posthog_client:
        telemetry.send_to_posthog(posthog_client, {"requested": len(request.names)})

    return artists


@router.get(
    "/artists/profile",
    response_model=ArtistProfile,
    summary="Get an artist's profile, images and members",
    responses={
        404: {"description": "No Discogs artist matches the name"},
        502: {"description": "Discogs unavailable"},
        503: {"description": "Discogs credentials not configured"},
    },
)
async def get_artist_profile(
    name: str = Query(..., min_length=1, description="Artist name"),
    service: DiscogsService = Depends(get_discogs_service),
) -> ArtistProfile:
    """Artist profile with Discogs markup stripped from the biography."""
    profile = require_found(
        await service.get_artist_profile(name), f"Artist '{name}' not found"
    )
    return profile.model_copy(update={"profile": clean_profile(profile.profile) or None})


@router.get(
    "/artists/{artist_id}",
    response_model=ArtistDetail,
    summary="Get the full Discogs artist record",
    responses={
        404: {"description": "Artist not found"},
        502: {"description": "Discogs unavailable"},
        503: {"description": "Discogs credentials not configured"},
    },
)
async def get_artist(
    artist_id: int,
    service: DiscogsService = Depends(get_discogs_service),
) -> ArtistDetail:
    return require_found(
        await service.get_artist_by_id(artist_id), f"Artist {artist_id} not found"
    )
