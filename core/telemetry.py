"""Telemetry module for tracking catalog request performance with PostHog."""

import logging
import time
from contextlib import contextmanager
from contextvars import ContextVar
from dataclasses import dataclass, field
from typing import Any

from posthog import Posthog

logger = logging.getLogger(__name__)

DISTINCT_ID = "soundcheckd-catalog-service"

CATALOGS = ("discogs", "setlistfm")


@dataclass
class StepResult:
    """Result of a tracked step."""

    duration_ms: float
    success: bool = True
    error_type: str | None = None


@dataclass
class RequestTelemetry:
    """Tracks performance metrics for a single API request."""

    steps: dict[str, StepResult] = field(default_factory=dict)
    start_time: float = field(default_factory=time.perf_counter)

    @contextmanager
    def track_step(self, step_name: str):
        """Context manager to time a step.

        Args:
            step_name: Name of the step being tracked
        """
        step_start = time.perf_counter()
        error_type = None

        try:
            yield
        except Exception as e:
            error_type = type(e).__name__
            raise
        finally:
            self.steps[step_name] = StepResult(
                duration_ms=(time.perf_counter() - step_start) * 1000,
                success=error_type is None,
                error_type=error_type,
            )

    def get_total_duration_ms(self) -> float:
        """Get total elapsed time since telemetry was created."""
        return (time.perf_counter() - self.start_time) * 1000

    def get_step_timings(self) -> dict[str, float]:
        """Get timing for each step in milliseconds."""
        return {f"{name}_ms": step.duration_ms for name, step in self.steps.items()}

    def send_to_posthog(
        self,
        posthog_client: Posthog,
        extra_properties: dict[str, Any] | None = None,
    ) -> None:
        """Send step events and a summary event to PostHog.

        Args:
            posthog_client: PostHog client instance
            extra_properties: Additional properties to include in the summary event
        """
        extra_properties = extra_properties or {}

        for step_name, step_result in self.steps.items():
            posthog_client.capture(
                distinct_id=DISTINCT_ID,
                event=f"catalog_{step_name}",
                properties={
                    "step": step_name,
                    "duration_ms": round(step_result.duration_ms, 2),
                    "success": step_result.success,
                    "error_type": step_result.error_type,
                },
            )

        posthog_client.capture(
            distinct_id=DISTINCT_ID,
            event="catalog_request_completed",
            properties={
                "total_duration_ms": round(self.get_total_duration_ms(), 2),
                "steps": self.get_step_timings(),
                "cache": get_cache_stats() or _empty_stats(),
                **extra_properties,
            },
        )

        logger.debug(
            f"Sent telemetry: {len(self.steps)} steps, total {self.get_total_duration_ms():.1f}ms"
        )


# ---------------------------------------------------------------------------
# Per-request cache and API stats via ContextVar
# ---------------------------------------------------------------------------

_cache_stats_var: ContextVar[dict | None] = ContextVar("cache_stats", default=None)


def _empty_stats() -> dict:
    return {
        "memory_hits": 0,
        "memory_misses": 0,
        "api_calls": 0,
        "discogs_calls": 0,
        "setlistfm_calls": 0,
        "api_time_ms": 0.0,
    }


def init_cache_stats() -> None:
    """Initialize stats for the current request context."""
    _cache_stats_var.set(_empty_stats())


def record_memory_cache_hit() -> None:
    """Record an artist image cache hit in the current request context."""
    stats = _cache_stats_var.get()
    if stats is not None:
        stats["memory_hits"] += 1


def record_memory_cache_miss() -> None:
    """Record an artist image cache miss in the current request context."""
    stats = _cache_stats_var.get()
    if stats is not None:
        stats["memory_misses"] += 1


def record_catalog_api_call(catalog: str) -> None:
    """Record an outbound catalog API call in the current request context."""
    stats = _cache_stats_var.get()
    if stats is None:
        return
    if catalog not in CATALOGS:
        logger.warning(f"Unknown catalog for API call tracking: {catalog}")
        return
    stats["api_calls"] += 1
    stats[f"{catalog}_calls"] += 1


def record_api_time(ms: float) -> None:
    """Accumulate catalog API call time in the current request context."""
    stats = _cache_stats_var.get()
    if stats is not None:
        stats["api_time_ms"] += ms


def get_cache_stats() -> dict | None:
    """Get stats for the current request context, or None if not initialized."""
    return _cache_stats_var.get()
