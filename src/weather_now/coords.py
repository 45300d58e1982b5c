# Project: weather-now
# Owner: GreenUnicorn
# Built with: Claude (Anthropic)
"""
coords.py — Coordinate type and free-text coordinate parsing.

Two notations are understood:

  decimal  "18.5246, 73.8786"         (each part optionally signed)
  DMS      "16°11'07.0\"N 74°27'43.8\"E"

Parsing never raises: anything unrecognised returns None so the caller can
fall back to a name search.
"""

import math
import re
from dataclasses import dataclass

DECIMAL_PATTERN = re.compile(
    r"^\s*([+-]?\d{1,3}(?:\.\d+)?)\s*,\s*([+-]?\d{1,3}(?:\.\d+)?)\s*$"
)
# Separators are any run of non-digits, so °, ', " and spaces are all fine.
# The trailing separator is lazy so it cannot swallow the hemisphere letter.
DMS_PATTERN = re.compile(
    r"^(\d{1,3})\D+(\d{1,2})\D+(\d{1,2}(?:\.\d+)?)\D*?([NSEW])?$",
    re.IGNORECASE,
)


@dataclass(frozen=True)
class Coordinate:
    """A validated latitude/longitude pair in decimal degrees."""

    latitude: float
    longitude: float

    def __post_init__(self) -> None:
        if not (math.isfinite(self.latitude) and math.isfinite(self.longitude)):
            raise ValueError(f"Coordinates must be finite: {self.latitude}, {self.longitude}")
        if not -90 <= self.latitude <= 90:
            raise ValueError(f"Latitude out of range [-90, 90]: {self.latitude}")
        if not -180 <= self.longitude <= 180:
            raise ValueError(f"Longitude out of range [-180, 180]: {self.longitude}")

    def __str__(self) -> str:
        return format_coordinate_pair(self.latitude, self.longitude)


def format_coordinate_pair(latitude: float, longitude: float, places: int = 4) -> str:
    """Render a pair as 'lat, lon' with a fixed number of decimals."""
    return f"{latitude:.{places}f}, {longitude:.{places}f}"


def parse_dms_part(part: str, is_latitude: bool) -> float | None:
    """Convert one degrees-minutes-seconds token to decimal degrees.

    Args:
        part: A token such as '16°11'07.0"N'.
        is_latitude: Whether the token is the latitude half of the pair.
            Without a hemisphere letter, latitude degrees above 90 and
            longitude degrees above 180 are rejected.

    Returns:
        Decimal degrees (negative for S/W), or None if the token does not
        parse.
    """
    m = DMS_PATTERN.match(str(part).strip())
    if not m:
        return None

    degrees = float(m.group(1))
    minutes = float(m.group(2))
    seconds = float(m.group(3))
    hemisphere = (m.group(4) or "").upper()

    value = degrees + minutes / 60 + seconds / 3600
    if hemisphere in ("S", "W"):
        value = -value
    if not hemisphere:
        if is_latitude and degrees > 90:
            return None
        if not is_latitude and degrees > 180:
            return None
    return value


def parse_coordinates(text: str) -> Coordinate | None:
    """Parse free-form text into a Coordinate.

    Args:
        text: User input, e.g. '18.52, 73.87' or '16°11'07.0"N 74°27'43.8"E'.

    Returns:
        The parsed Coordinate, or None when the text is not a coordinate pair
        (callers then treat it as a place name).
    """
    if text is None:
        return None
    t = str(text).strip()

    m = DECIMAL_PATTERN.match(t)
    if m:
        lat, lon = float(m.group(1)), float(m.group(2))
        if math.isfinite(lat) and math.isfinite(lon):
            return _make_coordinate(lat, lon)

    parts = t.split()
    if len(parts) == 2:
        lat = parse_dms_part(parts[0], is_latitude=True)
        lon = parse_dms_part(parts[1], is_latitude=False)
        if lat is not None and lon is not None:
            return _make_coordinate(lat, lon)

    return None


def _make_coordinate(latitude: float, longitude: float) -> Coordinate | None:
    try:
        return Coordinate(latitude, longitude)
    except ValueError:
        return None
