# Project: weather-now
# Owner: GreenUnicorn
# Built with: Claude (Anthropic)
"""
scoring.py — Rank and deduplicate place candidates for a target coordinate.

The score is

    -distance_km * 1_000_000 + type_score * 1_000 + population * 0.1

so proximity dominates: a closer candidate always beats a farther one, and
place type and population only separate candidates at (almost) the same
distance.
"""

import re
from collections.abc import Iterable

from weather_now.coords import Coordinate
from weather_now.distance import haversine_km
from weather_now.models import PlaceCandidate, ScoredCandidate
from weather_now.naming import is_india

DISTANCE_WEIGHT = 1_000_000
TYPE_WEIGHT = 1_000
POPULATION_WEIGHT = 0.1

# GeoNames populated-place feature codes
PREFERRED_FEATURE_CODES = frozenset({
    "PPLA", "PPLA2", "PPLA3", "PPLA4", "PPLC", "PPL", "PPLG", "PPLL", "PPLS",
})

DEFAULT_MAJOR_CITIES: tuple[str, ...] = (
    "Pune", "Mumbai", "Delhi", "Bangalore", "Chennai", "Kolkata",
)
MAJOR_CITY_POPULATION = 1_000_000

SETTLEMENT_RE = re.compile(r"village|hamlet|locality", re.IGNORECASE)
METRO_RE = re.compile(r"city|metropolitan", re.IGNORECASE)
PLACE_RE = re.compile(r"city|town|village", re.IGNORECASE)


def _mentions_major_city(name: str, major_cities: Iterable[str]) -> bool:
    lowered = name.lower()
    return any(city.lower() in lowered for city in major_cities if city)


def type_score(
    candidate: PlaceCandidate,
    major_cities: Iterable[str] = DEFAULT_MAJOR_CITIES,
) -> int:
    """Place-type preference for a candidate.

    Indian villages and hamlets are lifted above everything else, and large
    Indian cities are pushed down so a device in a village near Pune is not
    labelled "Pune".

    Args:
        candidate: The candidate to classify.
        major_cities: City names that count as "large" regardless of the
            population the provider reports.

    Returns:
        An integer between 0 and 4.
    """
    score = 3 if (candidate.feature_code or "") in PREFERRED_FEATURE_CODES else 0
    feature = candidate.feature or ""
    name = candidate.name or ""
    population = candidate.population or 0

    if is_india(candidate.country, candidate.country_code):
        if SETTLEMENT_RE.search(feature) or SETTLEMENT_RE.search(name):
            score = max(score, 4)
        if METRO_RE.search(feature) and (
            population > MAJOR_CITY_POPULATION or _mentions_major_city(name, major_cities)
        ):
            score = min(score, 1)
    elif PLACE_RE.search(feature):
        score = max(score, 2)
    return score


def score_candidate(
    candidate: PlaceCandidate,
    target: Coordinate,
    major_cities: Iterable[str] = DEFAULT_MAJOR_CITIES,
) -> float:
    """Rank a candidate against the coordinate being resolved (higher is better)."""
    distance_km = haversine_km(
        target.latitude, target.longitude, candidate.latitude, candidate.longitude
    )
    population = candidate.population or 0
    return (
        -distance_km * DISTANCE_WEIGHT
        + type_score(candidate, major_cities) * TYPE_WEIGHT
        + population * POPULATION_WEIGHT
    )


def coordinate_key(candidate: PlaceCandidate) -> tuple[float, float]:
    return (round(candidate.latitude, 4), round(candidate.longitude, 4))


def dedupe_by_coordinates(candidates: Iterable[PlaceCandidate]) -> list[PlaceCandidate]:
    """Keep the first candidate for each 4-decimal coordinate key."""
    seen: set[tuple[float, float]] = set()
    unique = []
    for candidate in candidates:
        key = coordinate_key(candidate)
        if key not in seen:
            seen.add(key)
            unique.append(candidate)
    return unique


def dedupe_by_label(candidates: Iterable[PlaceCandidate]) -> list[PlaceCandidate]:
    """Keep the first candidate for each rendered label; drop empty labels."""
    seen: set[str] = set()
    unique = []
    for candidate in candidates:
        label = candidate.label
        if label and label not in seen:
            seen.add(label)
            unique.append(candidate)
    return unique


def select_alternatives(
    candidates: Iterable[PlaceCandidate],
    count: int,
    exclude_label: str | None = None,
) -> list[PlaceCandidate]:
    """Distinct labels in input order, minus `exclude_label`, at most `count`."""
    unique = dedupe_by_label(candidates)
    if exclude_label:
        unique = [c for c in unique if c.label != exclude_label]
    return unique[:max(count, 0)]


def rank_candidates(
    candidates: Iterable[PlaceCandidate],
    target: Coordinate,
    major_cities: Iterable[str] = DEFAULT_MAJOR_CITIES,
) -> list[ScoredCandidate]:
    """Score candidates and sort best-first; equal scores keep input order."""
    major_cities = tuple(major_cities)
    scored = [
        ScoredCandidate(candidate=c, score=score_candidate(c, target, major_cities), order=i)
        for i, c in enumerate(candidates)
    ]
    # sorted() is stable, so ties stay in issue order
    return sorted(scored, key=lambda s: s.score, reverse=True)
