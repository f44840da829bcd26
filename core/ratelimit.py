"""Rate limiting utilities for catalog API requests.

Implements:
- Fixed inter-request delay for follow-up calls within one logical operation
- Token bucket ceiling per catalog for requests per minute
- Reset function for testing
"""

import asyncio
import logging
from collections.abc import Awaitable, Callable
from typing import Protocol

from aiolimiter import AsyncLimiter

logger = logging.getLogger(__name__)

DEFAULT_REQUEST_DELAY = 1.1


class RateLimiter(Protocol):
    """Something a catalog client awaits before a follow-up request."""

    async def await_slot(self) -> None: ...


class FixedDelayRateLimiter:
    """Wait a fixed delay on every slot request.

    The delay only holds up the operation that awaits it; concurrent
    requests each run their own delays.
    """

    def __init__(
        self,
        delay: float = DEFAULT_REQUEST_DELAY,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ):
        self.delay = delay
        self._sleep = sleep

    async def await_slot(self) -> None:
        logger.debug(f"Rate limit delay: {self.delay}s")
        await self._sleep(self.delay)


class NoDelayRateLimiter:
    """Rate limiter that never waits."""

    async def await_slot(self) -> None:
        return None


# Lazily-initialized request ceilings, stored per (event loop, catalog)
_request_limiters: dict[tuple[asyncio.AbstractEventLoop, str], AsyncLimiter] = {}


def _limit_for(catalog: str) -> int:
    from config.settings import get_settings

    settings = get_settings()
    if catalog == "discogs":
        return settings.discogs_rate_limit
    if catalog == "setlistfm":
        return settings.setlistfm_rate_limit
    raise ValueError(f"Unknown catalog: {catalog}")


def get_request_limiter(catalog: str) -> AsyncLimiter:
    """Get or create the requests-per-minute limiter for a catalog.

    Args:
        catalog: "discogs" or "setlistfm"

    Returns:
        AsyncLimiter shared by every request to that catalog on the current loop
    """
    try:
        loop = asyncio.get_running_loop()
    except RuntimeError:
        return AsyncLimiter(_limit_for(catalog), 60)

    key = (loop, catalog)
    if key not in _request_limiters:
        limit = _limit_for(catalog)
        _request_limiters[key] = AsyncLimiter(limit, 60)
        logger.debug(f"Created {catalog} rate limiter: {limit} req/min")
    return _request_limiters[key]


def reset_rate_limiting() -> None:
    """Reset rate limiting state for testing."""
    _request_limiters.clear()
    logger.debug("Reset rate limiting state")
