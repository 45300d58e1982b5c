# Project: weather-now
# Owner: GreenUnicorn
# Built with: Claude (Anthropic)
"""
distance.py — Great-circle distance between two points.
"""

import math

EARTH_RADIUS_KM = 6371.0


def haversine_km(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """Haversine distance in kilometres between two points given in degrees.

    NaN inputs propagate to a NaN result.
    """
    dlat = math.radians(lat2 - lat1)
    dlon = math.radians(lon2 - lon1)
    s1 = math.sin(dlat / 2) ** 2
    s2 = math.cos(math.radians(lat1)) * math.cos(math.radians(lat2)) * math.sin(dlon / 2) ** 2
    a = s1 + s2
    if a > 1.0:  # rounding at antipodes
        a = 1.0
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))
    return EARTH_RADIUS_KM * c
