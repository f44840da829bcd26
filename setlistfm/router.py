"""FastAPI router for Setlist.fm artist and setlist endpoints.

Catalog misses and failures on list endpoints are returned as an empty
page (``total == 0`` at the requested page) rather than as errors.
"""

import logging

from fastapi import APIRouter, Depends, Query

from core.dependencies import get_setlistfm_service
from core.results import Found
from routers.results import require_found
from setlistfm.formatting import format_event_date, format_setlist_for_display
from setlistfm.models import (
    ArtistSearchResponse,
    ArtistSetlistsResponse,
    PagedResult,
    Setlist,
    SetlistArtist,
    SetlistDetailResponse,
    SetlistSearchResponse,
)
from setlistfm.service import SetlistFmService, SetlistSearchBy

logger = logging.getLogger(__name__)

router = APIRouter(tags=["setlists"])


@router.get(
    "/artists/search",
    response_model=ArtistSearchResponse,
    summary="Search artists on Setlist.fm",
)
async def search_artists(
    q: str = Query(..., min_length=1, description="Artist name to search for"),
    page: int = Query(1, ge=1, description="1-based page number"),
    service: SetlistFmService = Depends(get_setlistfm_service),
) -> ArtistSearchResponse:
    """Artists with their MBIDs for linking to artist pages."""
    result = await service.search_artists(q, page)
    artists: PagedResult[SetlistArtist] = (
        result.value if isinstance(result, Found) else PagedResult.empty(page)
    )
    return ArtistSearchResponse(
        artist=artists.items,
        total=artists.total,
        page=artists.page,
        items_per_page=artists.items_per_page,
    )


@router.get(
    "/artist/{mbid}/setlists",
    response_model=ArtistSetlistsResponse,
    summary="Get an artist's concert history",
)
async def get_artist_setlists(
    mbid: str,
    page: int = Query(1, ge=1, description="1-based page number"),
    service: SetlistFmService = Depends(get_setlistfm_service),
) -> ArtistSetlistsResponse:
    result = await service.get_artist_setlists(mbid, page)
    setlists = _page_or_empty(result, page)
    return ArtistSetlistsResponse(
        setlists=[format_setlist_for_display(s) for s in setlists.items],
        total=setlists.total,
        page=setlists.page,
        items_per_page=setlists.items_per_page,
        total_pages=setlists.total_pages,
    )


@router.get(
    "/setlists/search",
    response_model=SetlistSearchResponse,
    summary="Search setlists by artist, venue or city name",
)
async def search_setlists(
    q: str = Query(..., min_length=1, description="Name to search for"),
    page: int = Query(1, ge=1, description="1-based page number"),
    by: SetlistSearchBy = Query(SetlistSearchBy.ARTIST, description="Field to search"),
    service: SetlistFmService = Depends(get_setlistfm_service),
) -> SetlistSearchResponse:
    result = await service.search_setlists(by, q, page)
    setlists = _page_or_empty(result, page)
    return SetlistSearchResponse(
        setlists=[format_setlist_for_display(s) for s in setlists.items],
        total=setlists.total,
        page=setlists.page,
        items_per_page=setlists.items_per_page,
    )


@router.get(
    "/setlists/{setlist_id}",
    response_model=SetlistDetailResponse,
    summary="Get a single setlist",
    responses={
        404: {"description": "Setlist not found"},
        502: {"description": "Setlist.fm unavailable"},
        503: {"description": "Setlist.fm API key not configured"},
    },
)
async def get_setlist(
    setlist_id: str,
    service: SetlistFmService = Depends(get_setlistfm_service),
) -> SetlistDetailResponse:
    setlist = require_found(
        await service.get_setlist_by_id(setlist_id), f"Setlist {setlist_id} not found"
    )
    display = format_setlist_for_display(setlist)
    return SetlistDetailResponse(
        **display.model_dump(), formatted_date=format_event_date(display.date)
    )


def _page_or_empty(result, page: int) -> PagedResult[Setlist]:
    if isinstance(result, Found):
        return result.value
    logger.info(f"No setlists for page {page}: {result}")
    return PagedResult.empty(page)
