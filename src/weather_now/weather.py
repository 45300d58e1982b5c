# Project: weather-now
# Owner: GreenUnicorn
# Built with: Claude (Anthropic)
"""
weather.py — Fetch current conditions and hourly temperatures from Open-Meteo.

Open-Meteo is free and requires no API key. The selected unit is applied
server-side; wind speed is always requested in km/h.

API docs: https://open-meteo.com/en/docs
"""

import logging

from weather_now.models import PlaceCandidate
from weather_now.utils import DEFAULT_TIMEOUT_SECONDS, get_json

OPEN_METEO_URL = "https://api.open-meteo.com/v1/forecast"

CURRENT_VARIABLES = [
    "temperature_2m",
    "apparent_temperature",
    "is_day",
    "precipitation",
    "wind_speed_10m",
    "wind_direction_10m",
    "relative_humidity_2m",
    "weather_code",
]
HOURLY_VARIABLES = ["temperature_2m"]

UNITS = ("celsius", "fahrenheit")

WEATHER_CODE_DESCRIPTIONS: dict[int, str] = {
    0: "Clear sky",
    1: "Mainly clear",
    2: "Partly cloudy",
    3: "Overcast",
    45: "Fog",
    48: "Depositing rime fog",
    51: "Light drizzle",
    53: "Moderate drizzle",
    55: "Dense drizzle",
    56: "Light freezing drizzle",
    57: "Dense freezing drizzle",
    61: "Slight rain",
    63: "Moderate rain",
    65: "Heavy rain",
    66: "Light freezing rain",
    67: "Heavy freezing rain",
    71: "Slight snow fall",
    73: "Moderate snow fall",
    75: "Heavy snow fall",
    77: "Snow grains",
    80: "Slight rain showers",
    81: "Moderate rain showers",
    82: "Violent rain showers",
    85: "Slight snow showers",
    86: "Heavy snow showers",
    95: "Thunderstorm",
    96: "Thunderstorm with slight hail",
    99: "Thunderstorm with heavy hail",
}
UNKNOWN_CONDITIONS = "Unknown conditions"

logger = logging.getLogger(__name__)


def describe_weather_code(code: int | None) -> str:
    """Return a human-readable description of an Open-Meteo weather code."""
    if code is None:
        return UNKNOWN_CONDITIONS
    try:
        return WEATHER_CODE_DESCRIPTIONS.get(int(code), UNKNOWN_CONDITIONS)
    except (TypeError, ValueError):
        return UNKNOWN_CONDITIONS


def degrees_to_compass(degrees: float) -> str:
    """Convert a wind bearing in degrees to a 16-point compass label.

    Args:
        degrees: Wind direction in degrees (0–360, where 0 = North).

    Returns:
        Compass label such as 'N', 'NNE', 'NW', etc.
    """
    compass = [
        "N", "NNE", "NE", "ENE",
        "E", "ESE", "SE", "SSE",
        "S", "SSW", "SW", "WSW",
        "W", "WNW", "NW", "NNW",
    ]
    # Each segment is 360/16 = 22.5 degrees wide
    index = round(degrees / 22.5) % 16
    return compass[index]


def normalize_unit(unit: str | None) -> str:
    """Anything other than 'fahrenheit' means Celsius."""
    return "fahrenheit" if unit == "fahrenheit" else "celsius"


def temperature_symbol(unit: str | None) -> str:
    return "°F" if normalize_unit(unit) == "fahrenheit" else "°C"


def build_forecast_params(place: PlaceCandidate, unit: str = "celsius") -> dict:
    """Query parameters for a forecast request.

    Raises:
        ValueError: If the place has no numeric coordinates.
    """
    for value in (place.latitude, place.longitude):
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            raise ValueError("Latitude and longitude are required numbers")
    return {
        "latitude": place.latitude,
        "longitude": place.longitude,
        "current": ",".join(CURRENT_VARIABLES),
        "hourly": ",".join(HOURLY_VARIABLES),
        "timezone": place.timezone or "auto",
        "temperature_unit": normalize_unit(unit),
        "wind_speed_unit": "kmh",
    }


def fetch_forecast(
    place: PlaceCandidate,
    unit: str = "celsius",
    timeout: float = DEFAULT_TIMEOUT_SECONDS,
) -> dict:
    """Fetch current conditions and the hourly temperature series for a place.

    Args:
        place: The selected place.
        unit: 'celsius' or 'fahrenheit'.
        timeout: Request timeout in seconds.

    Returns:
        The Open-Meteo response: 'current' (the eight CURRENT_VARIABLES),
        'hourly' ('time' and 'temperature_2m' arrays) and the resolved
        'timezone'.

    Raises:
        ValueError: If the place has no numeric coordinates.
        ProviderError: If the API call fails (status_code carries the status).
        RuntimeError: If the response lacks the 'current' block.
    """
    params = build_forecast_params(place, unit)
    data = get_json(OPEN_METEO_URL, params=params, timeout=timeout, label="Open-Meteo forecast API")

    if not isinstance(data, dict) or "current" not in data:
        raise RuntimeError("Unexpected API response structure: missing 'current' block")
    logger.debug("Forecast for %r: %s", place.name, data["current"])
    return data


def last_24_temperatures(forecast: dict) -> list[float]:
    """The last 24 hourly temperatures of a forecast, skipping gaps."""
    temps = (forecast.get("hourly") or {}).get("temperature_2m") or []
    return [t for t in temps[-24:] if t is not None]
