"""Main application entry point for the SoundCheckd catalog service."""

import logging
from contextlib import asynccontextmanager
from pathlib import Path

from dotenv import load_dotenv
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from config.settings import get_settings
from core.dependencies import (
    close_discogs_service,
    close_setlistfm_service,
    flush_posthog,
    shutdown_posthog,
)
from core.exceptions import ConfigurationError
from core.logging import setup_logging
from core.sentry import init_sentry
from discogs.router import router as discogs_router
from routers.health import router as health_router
from setlistfm.router import router as setlistfm_router

load_dotenv()

settings = get_settings()

init_sentry(
    dsn=settings.sentry_dsn,
    environment="production" if settings.log_level != "DEBUG" else "development",
    release=settings.app_version,
)

log_file = None
if settings.log_level != "DEBUG":
    log_dir = Path("/app/logs") if Path("/app/logs").exists() else Path("logs")
    log_file = log_dir / "soundcheckd-catalog.log"
setup_logging(level=settings.log_level, log_file=log_file)

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Manage application lifespan with proper startup and shutdown."""
    logger.info(f"Starting {settings.app_name} v{settings.app_version}")
    logger.info(f"Log level: {settings.log_level}")
    logger.info(f"Discogs: {'configured' if settings.discogs_configured else 'not configured'}")
    logger.info(
        f"Setlist.fm: {'configured' if settings.setlistfm_configured else 'not configured'}"
    )

    yield

    logger.info("Shutting down application")
    shutdown_posthog()
    await close_discogs_service()
    await close_setlistfm_service()
    logger.info("All services shut down")


app = FastAPI(
    title=settings.app_name,
    description="Artist and concert catalog lookups backed by Discogs and Setlist.fm",
    version=settings.app_version,
    lifespan=lifespan,
)


@app.exception_handler(ConfigurationError)
async def configuration_error_handler(request: Request, exc: ConfigurationError):
    """Missing catalog credentials make the endpoint unavailable."""
    logger.error(f"Configuration error on {request.url.path}: {exc.message}")
    return JSONResponse(status_code=503, content={"detail": exc.message})


@app.middleware("http")
async def posthog_flush_middleware(request: Request, call_next):
    """Flush PostHog events after each request to prevent data loss."""
    response = await call_next(request)
    flush_posthog()
    return response


app.include_router(health_router, prefix="", tags=["health"])
app.include_router(setlistfm_router, prefix="/api/v1", tags=["setlists"])
app.include_router(discogs_router, prefix="/api/v1", tags=["discogs"])

if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        app,
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
    )
