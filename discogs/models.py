"""Pydantic models for Discogs artist lookups."""

import re
from typing import Any

from pydantic import BaseModel

# Discogs disambiguates homonymous artists with a numeric suffix: "Nirvana (2)"
_NUMBERING_RE = re.compile(r"^(?P<name>.*?)\s*\((?P<number>\d+)\)$")


def usable_image_url(url: str | None) -> str | None:
    """Return the URL unless it is empty or the Discogs spacer placeholder."""
    if not url or "spacer.gif" in url:
        return None
    return url


def split_numbering(title: str) -> tuple[str, str | None]:
    """Split a Discogs artist title into name and numbering suffix."""
    match = _NUMBERING_RE.match(title.strip())
    if match is None:
        return title.strip(), None
    return match.group("name"), match.group("number")


class DiscogsImage(BaseModel):
    """An image attached to a Discogs artist."""

    type: str = "secondary"
    uri: str = ""
    uri150: str = ""
    resource_url: str | None = None
    width: int | None = None
    height: int | None = None


class ArtistMember(BaseModel):
    """A band member listed on a Discogs artist."""

    id: int
    name: str
    active: bool = False


class ArtistSearchResult(BaseModel):
    """A single artist hit from the Discogs database search."""

    id: int
    title: str
    name: str
    disambiguation: str | None = None
    thumbnail_url: str | None = None
    cover_image_url: str | None = None
    resource_url: str | None = None

    @classmethod
    def from_api(cls, item: dict[str, Any]) -> "ArtistSearchResult":
        title = item.get("title") or ""
        name, number = split_numbering(title)
        return cls(
            id=item["id"],
            title=title,
            name=name,
            disambiguation=number,
            thumbnail_url=usable_image_url(item.get("thumb")),
            cover_image_url=usable_image_url(item.get("cover_image")),
            resource_url=item.get("resource_url"),
        )


class ArtistDetail(BaseModel):
    """Full artist record from ``/artists/{id}``."""

    id: int
    name: str
    profile: str | None = None
    realname: str | None = None
    images: list[DiscogsImage] = []
    urls: list[str] = []
    members: list[ArtistMember] = []
    resource_url: str | None = None
    uri: str | None = None

    @classmethod
    def from_api(cls, data: dict[str, Any]) -> "ArtistDetail":
        # Discogs sends null as often as it omits a field
        cleaned = {k: v for k, v in data.items() if v is not None}
        return cls.model_validate(cleaned)

    def primary_image(self) -> DiscogsImage | None:
        """First image flagged primary, falling back to the first image."""
        for image in self.images:
            if image.type == "primary":
                return image
        return self.images[0] if self.images else None


class ArtistWithImage(BaseModel):
    """Artist identity with display images."""

    id: int
    name: str
    image_url: str | None = None
    thumbnail_url: str | None = None
    cached: bool = False


class ArtistProfile(BaseModel):
    """Artist identity, images and biography for the artist page."""

    id: int
    name: str
    image_url: str | None = None
    thumbnail_url: str | None = None
    profile: str | None = None
    urls: list[str] = []
    members: list[ArtistMember] = []


class ArtistImagesRequest(BaseModel):
    """Request body for batch artist image lookups."""

    names: list[str]


class FeaturedArtistsResponse(BaseModel):
    """Featured artists for the homepage."""

    success: bool = True
    data: list[ArtistWithImage] = []
    count: int = 0
    error: str | None = None
