"""Pydantic models for Setlist.fm responses and display records."""

import math
from typing import Generic, TypeVar

from pydantic import BaseModel, ConfigDict, Field

T = TypeVar("T")

# Setlist.fm pages are fixed at 20 items
SETLISTFM_PAGE_SIZE = 20


class SetlistFmModel(BaseModel):
    """Base for models parsed from Setlist.fm's camelCase JSON."""

    model_config = ConfigDict(populate_by_name=True)


class SetlistArtist(SetlistFmModel):
    """An artist as identified by Setlist.fm (MusicBrainz id)."""

    mbid: str
    name: str
    sort_name: str | None = Field(None, alias="sortName")
    disambiguation: str | None = None
    url: str | None = None


class Country(SetlistFmModel):
    code: str
    name: str


class City(SetlistFmModel):
    id: str | None = None
    name: str
    state: str | None = None
    state_code: str | None = Field(None, alias="stateCode")
    country: Country


class Venue(SetlistFmModel):
    id: str | None = None
    name: str
    city: City


class Song(SetlistFmModel):
    name: str = ""
    info: str | None = None
    cover: SetlistArtist | None = None
    tape: bool = False


class SetlistSet(SetlistFmModel):
    """One performance set; ``encore`` is set for encores."""

    name: str | None = None
    encore: int | None = None
    song: list[Song] = []


class SetlistSets(SetlistFmModel):
    set: list[SetlistSet] = []


class Tour(SetlistFmModel):
    name: str


class Setlist(SetlistFmModel):
    """A single concert with its venue and song list.

    ``event_date`` keeps the catalog's ``DD-MM-YYYY`` format.
    """

    id: str
    event_date: str = Field(alias="eventDate")
    last_updated: str | None = Field(None, alias="lastUpdated")
    artist: SetlistArtist
    venue: Venue
    tour: Tour | None = None
    sets: SetlistSets | None = None
    url: str | None = None


class PagedResult(BaseModel, Generic[T]):
    """One page of catalog records plus pagination metadata."""

    items: list[T] = []
    total: int = 0
    page: int = 1
    items_per_page: int = SETLISTFM_PAGE_SIZE

    @property
    def total_pages(self) -> int:
        if self.items_per_page <= 0:
            return 0
        return math.ceil(self.total / self.items_per_page)

    @classmethod
    def empty(cls, page: int = 1) -> "PagedResult[T]":
        """The shape callers substitute for a missing or failed page."""
        return cls(items=[], total=0, page=page, items_per_page=SETLISTFM_PAGE_SIZE)


class SetlistDisplay(BaseModel):
    """Flat setlist record for list and detail views."""

    id: str
    artist: str
    artist_mbid: str
    venue: str
    city: str
    state: str | None = None
    country: str
    country_code: str
    date: str
    tour: str | None = None
    url: str | None = None
    song_count: int = 0


class SetlistDetailResponse(SetlistDisplay):
    """Display record with a human-readable date."""

    formatted_date: str


class ArtistSearchResponse(BaseModel):
    """Setlist.fm artist search results."""

    artist: list[SetlistArtist] = []
    total: int = 0
    page: int = 1
    items_per_page: int = SETLISTFM_PAGE_SIZE


class SetlistSearchResponse(BaseModel):
    """A page of setlists for display."""

    setlists: list[SetlistDisplay] = []
    total: int = 0
    page: int = 1
    items_per_page: int = SETLISTFM_PAGE_SIZE


class ArtistSetlistsResponse(SetlistSearchResponse):
    """A page of an artist's setlists including the page count."""

    total_pages: int = 0
