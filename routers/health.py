"""Health check router with real catalog connectivity checks."""

import asyncio
import logging

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from config.settings import Settings, get_settings
from core.dependencies import get_discogs_service, get_setlistfm_service
from discogs.service import DiscogsService
from setlistfm.service import SetlistFmService

logger = logging.getLogger(__name__)

router = APIRouter(tags=["health"])

CHECK_TIMEOUT = 3.0
CORE_SERVICES = {"setlistfm_api"}


async def _check_discogs_api(service: DiscogsService, configured: bool) -> str:
    """Ping the Discogs API via the service's own client."""
    if not configured:
        return "unavailable"
    return "ok" if await service.check_api() else "error"


async def _check_setlistfm_api(service: SetlistFmService, configured: bool) -> str:
    """Ping the Setlist.fm API via the service's own client."""
    if not configured:
        return "unavailable"
    return "ok" if await service.check_api() else "error"


async def _run_check(coro) -> str:
    """Run a single health check with a timeout."""
    try:
        return await asyncio.wait_for(coro, timeout=CHECK_TIMEOUT)
    except TimeoutError:
        return "timeout"


@router.get(
    "/health",
    summary="Health check",
    responses={
        200: {"description": "Service is healthy or degraded"},
        503: {"description": "Service is unhealthy (Setlist.fm unusable)"},
    },
)
async def health_check(
    settings: Settings = Depends(get_settings),
    discogs_service: DiscogsService = Depends(get_discogs_service),
    setlistfm_service: SetlistFmService = Depends(get_setlistfm_service),
):
    """Health check with connectivity checks for both catalogs."""
    results = await asyncio.gather(
        _run_check(_check_setlistfm_api(setlistfm_service, settings.setlistfm_configured)),
        _run_check(_check_discogs_api(discogs_service, settings.discogs_configured)),
    )

    services = {
        "setlistfm_api": results[0],
        "discogs_api": results[1],
    }

    core_ok = all(services[s] == "ok" for s in CORE_SERVICES)
    all_ok = all(v == "ok" for v in services.values())

    if all_ok:
        status = "healthy"
    elif core_ok:
        status = "degraded"
    else:
        status = "unhealthy"

    body = {
        "status": status,
        "version": settings.app_version,
        "services": services,
    }

    status_code = 200 if status in ("healthy", "degraded") else 503
    return JSONResponse(content=body, status_code=status_code)
