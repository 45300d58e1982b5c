# Project: weather-now
# Owner: GreenUnicorn
# Built with: Claude (Anthropic)
"""
models.py — Value types shared by the search, resolution and forecast code.

All types are frozen dataclasses: a new selection or a new result always
replaces the old object rather than mutating it.
"""

from dataclasses import dataclass, field, fields
from datetime import datetime
from enum import Enum
from typing import Any

from weather_now.coords import format_coordinate_pair


class Source(Enum):
    """Where a PlaceCandidate came from. Never shown to the user."""

    NAME_SEARCH = "name-search"
    REVERSE_PRECISE = "reverse-precise"
    REVERSE_COARSE = "reverse-coarse"
    COORDINATE_FALLBACK = "coordinate-fallback"


@dataclass(frozen=True)
class Address:
    """The subset of a Nominatim ``address`` object we read.

    Providers omit most fields for most places; a missing field is simply
    an empty string.
    """

    village: str = ""
    hamlet: str = ""
    locality: str = ""
    suburb: str = ""
    neighbourhood: str = ""
    city: str = ""
    town: str = ""
    municipality: str = ""
    taluka: str = ""
    subdistrict: str = ""
    county: str = ""
    district: str = ""
    state_district: str = ""
    state: str = ""
    region: str = ""
    country: str = ""
    country_code: str = ""

    @classmethod
    def from_payload(cls, payload: dict[str, Any] | None) -> "Address":
        """Build an Address from a raw dict, ignoring unknown keys."""
        if not payload or not isinstance(payload, dict):
            return cls()
        known = {f.name for f in fields(cls)}
        values = {
            key: str(value).strip()
            for key, value in payload.items()
            if key in known and value is not None
        }
        return cls(**values)


def make_place_id(latitude: float, longitude: float) -> str:
    """Stable key for a place, derived from its coordinates."""
    return f"{latitude:.4f},{longitude:.4f}"


def render_label(name: str, admin1: str, country: str) -> str:
    """Join the non-empty parts of a place label with ', '."""
    return ", ".join(part for part in (name, admin1, country) if part)


@dataclass(frozen=True)
class PlaceCandidate:
    id: str
    name: str
    latitude: float
    longitude: float
    country: str = ""
    admin1: str = ""
    timezone: str = "auto"
    source: Source = Source.NAME_SEARCH
    feature_code: str | None = None
    feature: str | None = None
    population: int | None = None
    country_code: str | None = None

    @property
    def label(self) -> str:
        """Human-facing label: 'Name, Admin1, Country' without empty parts."""
        return render_label(self.name, self.admin1, self.country)

    @classmethod
    def coordinate_fallback(cls, latitude: float, longitude: float) -> "PlaceCandidate":
        """The terminal candidate used when no provider returned a usable place."""
        return cls(
            id=make_place_id(latitude, longitude),
            name=format_coordinate_pair(latitude, longitude),
            latitude=latitude,
            longitude=longitude,
            country="",
            admin1="",
            timezone="auto",
            source=Source.COORDINATE_FALLBACK,
        )


@dataclass(frozen=True)
class ScoredCandidate:
    """A candidate with its rank for one resolution request."""

    candidate: PlaceCandidate
    score: float
    order: int


@dataclass(frozen=True)
class ResolvedPlace:
    """The place the user has selected.

    Forecast fetches and the local clock hang off this object. Selecting
    something else creates a new ResolvedPlace.
    """

    place: PlaceCandidate
    selected_at: datetime = field(default_factory=datetime.now)

    @classmethod
    def select(cls, candidate: PlaceCandidate) -> "ResolvedPlace":
        return cls(place=candidate)

    @property
    def label(self) -> str:
        return self.place.label or self.place.name
