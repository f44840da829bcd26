"""Tagged lookup results returned by the catalog clients.

Every catalog operation reports its outcome as one of three variants
instead of raising:

- ``Found(value)``: the catalog returned a usable record.
- ``NotFound``: the catalog answered 404 or reported no match.
- ``UpstreamError``: any other non-2xx status, a transport failure or a
  response that could not be parsed.

Callers that only care about the value can use :func:`unwrap`.
"""

from dataclasses import dataclass
from typing import Generic, TypeVar

T = TypeVar("T")


@dataclass(frozen=True)
class Found(Generic[T]):
    """A successful lookup carrying its value."""

    value: T


@dataclass(frozen=True)
class NotFound:
    """The catalog has no matching record."""

    detail: str | None = None


@dataclass(frozen=True)
class UpstreamError:
    """The catalog could not be reached or answered with an error."""

    detail: str
    status_code: int | None = None


LookupResult = Found[T] | NotFound | UpstreamError


def unwrap(result: "LookupResult[T]") -> T | None:
    """Return the found value, or None for NotFound and UpstreamError."""
    if isinstance(result, Found):
        return result.value
    return None
