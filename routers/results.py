"""Conversion of catalog lookup results into HTTP responses."""

from typing import TypeVar

from fastapi import HTTPException

from core.results import Found, LookupResult, NotFound

T = TypeVar("T")


def require_found(result: LookupResult[T], not_found_detail: str) -> T:
    """Return the found value or raise 404 (NotFound) / 502 (UpstreamError)."""
    if isinstance(result, Found):
        return result.value
    if isinstance(result, NotFound):
        raise HTTPException(status_code=404, detail=not_found_detail)
    raise HTTPException(status_code=502, detail=f"Catalog unavailable: {result.detail}")
