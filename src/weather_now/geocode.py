# Project: weather-now
# Owner: GreenUnicorn
# Built with: Claude (Anthropic)
"""
geocode.py — Search for places by name using Open-Meteo Geocoding API.

Free, no API key required.
API docs: https://open-meteo.com/en/docs/geocoding-api
"""

import logging

from weather_now.models import PlaceCandidate, Source, make_place_id
from weather_now.utils import DEFAULT_TIMEOUT_SECONDS, get_json

GEOCODING_URL = "https://geocoding-api.open-meteo.com/v1/search"

logger = logging.getLogger(__name__)


def search_places(
    query: str,
    count: int = 5,
    language: str = "en",
    timeout: float = DEFAULT_TIMEOUT_SECONDS,
) -> list[PlaceCandidate]:
    """Look up places matching a free-text name.

    Args:
        query: Human-readable place name, e.g. 'Tokyo' or 'Kolhapur'.
        count: Maximum number of results to request.
        language: Language for place names in the response.
        timeout: Request timeout in seconds.

    Returns:
        PlaceCandidates in the provider's ranking order. An empty or
        whitespace-only query returns [] without a request.

    Raises:
        ProviderError: If the API call fails; status_code carries the HTTP
            status when there was one.
    """
    if not query or not query.strip():
        return []

    params = {
        "name": query.strip(),
        "count": count,
        "language": language,
        "format": "json",
    }
    data = get_json(GEOCODING_URL, params=params, timeout=timeout, label=f"Geocoding API for '{query.strip()}'")

    results = (data or {}).get("results") or []
    logger.debug("Name search %r returned %d result(s)", query, len(results))
    # rows without a name would render as an empty label
    return [_candidate_from_result(r) for r in results if (r.get("name") or "").strip()]


def _candidate_from_result(result: dict) -> PlaceCandidate:
    """Map one geocoding result row to a PlaceCandidate."""
    latitude = result["latitude"]
    longitude = result["longitude"]
    return PlaceCandidate(
        id=make_place_id(latitude, longitude),
        name=result["name"].strip(),
        latitude=latitude,
        longitude=longitude,
        country=result.get("country") or "",
        admin1=result.get("admin1") or "",
        timezone=result.get("timezone") or "auto",
        source=Source.NAME_SEARCH,
        feature_code=result.get("feature_code"),
        population=result.get("population"),
        country_code=result.get("country_code"),
    )
