# Project: weather-now
# Owner: GreenUnicorn
# Built with: Claude (Anthropic)
"""
reverse.py — Resolve a coordinate pair to the best-matching named place.

Nominatim is queried at two zoom levels (20 = most detailed address,
16 = street/suburb level). Each answer becomes one candidate; candidates are
deduplicated, scored by distance and place type, and the best one wins.
When every query fails, the formatted coordinate pair is used as the name,
so resolution always produces a usable place.

Free, no API key required, but Nominatim asks for a descriptive User-Agent.
API docs: https://nominatim.org/release-docs/latest/api/Reverse/
"""

import logging
import math
from collections.abc import Callable, Iterable
from concurrent.futures import ThreadPoolExecutor, wait
from typing import Any

from weather_now.coords import Coordinate
from weather_now.models import Address, PlaceCandidate, Source, make_place_id
from weather_now.naming import build_place_name, derive_admin1
from weather_now.scoring import (
    DEFAULT_MAJOR_CITIES,
    dedupe_by_coordinates,
    rank_candidates,
    select_alternatives,
)
from weather_now.utils import DEFAULT_TIMEOUT_SECONDS, ProviderError, get_json

NOMINATIM_REVERSE_URL = "https://nominatim.openstreetmap.org/reverse"
DEFAULT_USER_AGENT = "weathernow-app/1.0"

PRECISE_ZOOM = 20
COARSE_ZOOM = 16
DEFAULT_NEARBY_COUNT = 10

# Issue order matters: on a coordinate tie the earlier tier is kept.
ZOOM_TIERS: tuple[tuple[int, Source], ...] = (
    (PRECISE_ZOOM, Source.REVERSE_PRECISE),
    (COARSE_ZOOM, Source.REVERSE_COARSE),
)

module_logger = logging.getLogger(__name__)

JsonFetcher = Callable[..., Any]


def build_reverse_params(latitude: float, longitude: float, zoom: int, language: str = "en") -> dict:
    """Query parameters for one Nominatim reverse request.

    Raises:
        ValueError: If either coordinate is not a finite number.
    """
    for value in (latitude, longitude):
        if isinstance(value, bool) or not isinstance(value, (int, float)) or not math.isfinite(value):
            raise ValueError(f"Latitude and longitude must be finite numbers, got {value!r}")
    return {
        "format": "jsonv2",
        "lat": str(latitude),
        "lon": str(longitude),
        "accept-language": language,
        "zoom": str(zoom),
        "addressdetails": "1",
    }


def candidate_from_payload(
    payload: dict,
    latitude: float,
    longitude: float,
    source: Source,
) -> PlaceCandidate:
    """Convert one Nominatim jsonv2 response into a PlaceCandidate.

    The candidate is stamped with the queried coordinates, not the centroid
    of the object Nominatim matched, so the forecast is fetched for the
    point the user asked about.
    """
    address = Address.from_payload(payload.get("address"))
    return PlaceCandidate(
        id=make_place_id(latitude, longitude),
        name=build_place_name(address),
        latitude=latitude,
        longitude=longitude,
        country=address.country,
        admin1=derive_admin1(address),
        timezone="auto",
        source=source,
        feature=payload.get("addresstype") or payload.get("type") or None,
        country_code=address.country_code or None,
    )


class ReverseResolver:
    """Reverse-geocoding engine.

    Args:
        language: Preferred response language (``accept-language``).
        user_agent: Client identifier sent to Nominatim.
        timeout: Per-request timeout in seconds.
        major_cities: City names whose matches are suppressed in India.
        logger: Where resolution diagnostics go; defaults to this module's
            logger.
        fetch_json: Callable with the signature of ``utils.get_json``.
    """

    def __init__(
        self,
        language: str = "en",
        user_agent: str = DEFAULT_USER_AGENT,
        timeout: float = DEFAULT_TIMEOUT_SECONDS,
        major_cities: Iterable[str] = DEFAULT_MAJOR_CITIES,
        logger: logging.Logger | None = None,
        fetch_json: JsonFetcher | None = None,
    ):
        self.language = language
        self.user_agent = user_agent
        self.timeout = timeout
        self.major_cities = tuple(major_cities)
        self.logger = logger or module_logger
        self._fetch_json = fetch_json

    def reverse_lookup(self, latitude: float, longitude: float, zoom: int) -> dict:
        """Issue one reverse request and return the raw payload.

        Raises:
            ValueError: If the coordinates are not finite numbers.
            ProviderError: If the request fails or the provider reports an error.
        """
        params = build_reverse_params(latitude, longitude, zoom, self.language)
        fetch = self._fetch_json or get_json
        data = fetch(
            NOMINATIM_REVERSE_URL,
            params=params,
            headers={"User-Agent": self.user_agent},
            timeout=self.timeout,
            label=f"Nominatim reverse (zoom {zoom})",
        )
        if not isinstance(data, dict):
            raise ProviderError("Nominatim returned an unexpected payload", url=NOMINATIM_REVERSE_URL)
        # Nominatim answers 200 with {"error": "Unable to geocode"} over open water
        if "error" in data:
            raise ProviderError(f"Nominatim error: {data['error']}", url=NOMINATIM_REVERSE_URL)
        return data

    def _query_tier(
        self, latitude: float, longitude: float, zoom: int, source: Source
    ) -> list[PlaceCandidate]:
        """One provider query; failures contribute zero candidates."""
        try:
            payload = self.reverse_lookup(latitude, longitude, zoom)
        except ProviderError as e:
            self.logger.warning("Reverse geocoding at zoom %s failed: %s", zoom, e)
            return []

        candidate = candidate_from_payload(payload, latitude, longitude, source)
        if not candidate.name:
            self.logger.debug("Discarding zoom %s result with no usable name: %s", zoom, payload.get("address"))
            return []
        self.logger.debug("Zoom %s candidate: %r (%s)", zoom, candidate.name, candidate.feature)
        return [candidate]

    def collect_candidates(self, latitude: float, longitude: float) -> list[PlaceCandidate]:
        """Run every zoom tier concurrently and return candidates in issue order."""
        with ThreadPoolExecutor(max_workers=len(ZOOM_TIERS)) as pool:
            futures = [
                pool.submit(self._query_tier, latitude, longitude, zoom, source)
                for zoom, source in ZOOM_TIERS
            ]
            wait(futures)
        candidates = []
        for future in futures:
            candidates.extend(future.result())
        return candidates

    def resolve(self, latitude: float, longitude: float) -> PlaceCandidate:
        """Resolve a coordinate pair to the single best place.

        Never fails because of the providers: with no usable answer the
        coordinate fallback is returned.

        Raises:
            ValueError: If the coordinates are not finite numbers or are out
                of range.
        """
        build_reverse_params(latitude, longitude, PRECISE_ZOOM, self.language)
        target = Coordinate(latitude, longitude)

        candidates = self.collect_candidates(latitude, longitude)
        if not candidates:
            self.logger.info("No reverse geocoding result for %s; using coordinates", target)
            candidates = [PlaceCandidate.coordinate_fallback(latitude, longitude)]

        unique = dedupe_by_coordinates(candidates)
        ranked = rank_candidates(unique, target, self.major_cities)
        for scored in ranked[:3]:
            self.logger.debug(
                "Candidate %r score=%.1f source=%s",
                scored.candidate.name, scored.score, scored.candidate.source.value,
            )
        best = ranked[0].candidate
        self.logger.info("Resolved %s to %r", target, best.label)
        return best

    def nearby(
        self,
        latitude: float,
        longitude: float,
        count: int = DEFAULT_NEARBY_COUNT,
        exclude_label: str | None = None,
    ) -> list[PlaceCandidate]:
        """Distinct alternative places around a coordinate pair.

        Args:
            latitude: Latitude in decimal degrees.
            longitude: Longitude in decimal degrees.
            count: Maximum number of alternatives.
            exclude_label: Label of the currently selected place; a candidate
                rendering to the same label is left out.

        Returns:
            Up to `count` candidates with distinct, non-empty labels.
        """
        candidates = self._query_tier(latitude, longitude, COARSE_ZOOM, Source.REVERSE_COARSE)
        return select_alternatives(candidates, count, exclude_label)

    def resolve_with_nearby(
        self,
        latitude: float,
        longitude: float,
        count: int = DEFAULT_NEARBY_COUNT,
    ) -> tuple[PlaceCandidate, list[PlaceCandidate]]:
        """Resolve the best place and gather alternatives in parallel.

        Returns:
            (best place, alternatives excluding the best place's label)
        """
        build_reverse_params(latitude, longitude, COARSE_ZOOM, self.language)
        with ThreadPoolExecutor(max_workers=2) as pool:
            best_future = pool.submit(self.resolve, latitude, longitude)
            # fetch one extra so excluding the selection still leaves `count`
            nearby_future = pool.submit(self.nearby, latitude, longitude, count + 1)
            wait([best_future, nearby_future])
        best = best_future.result()
        return best, select_alternatives(nearby_future.result(), count, best.label)
