"""Pure transforms from Setlist.fm records to display shapes."""

from datetime import date, datetime

from setlistfm.models import Setlist, SetlistDisplay

# Setlist.fm dates are day-first, e.g. "05-06-2024" is 5 June 2024
EVENT_DATE_FORMAT = "%d-%m-%Y"


def count_songs(setlist: Setlist) -> int:
    """Total songs across every set, encores included."""
    if setlist.sets is None:
        return 0
    return sum(len(performance_set.song) for performance_set in setlist.sets.set)


def format_setlist_for_display(setlist: Setlist) -> SetlistDisplay:
    """Flatten a setlist's nested venue/city/country/tour into a display record."""
    city = setlist.venue.city
    return SetlistDisplay(
        id=setlist.id,
        artist=setlist.artist.name,
        artist_mbid=setlist.artist.mbid,
        venue=setlist.venue.name,
        city=city.name,
        state=city.state,
        country=city.country.name,
        country_code=city.country.code,
        date=setlist.event_date,
        tour=setlist.tour.name if setlist.tour else None,
        url=setlist.url,
        song_count=count_songs(setlist),
    )


def parse_event_date(value: str) -> date:
    """Parse a ``DD-MM-YYYY`` event date.

    Raises:
        ValueError: If the value is not a valid day-first date
    """
    return datetime.strptime(value, EVENT_DATE_FORMAT).date()


def format_event_date(value: str) -> str:
    """Render an event date as e.g. "June 5, 2024"; invalid dates pass through."""
    try:
        parsed = parse_event_date(value)
    except ValueError:
        return value
    return f"{parsed:%B} {parsed.day}, {parsed.year}"
