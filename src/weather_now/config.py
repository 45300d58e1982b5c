# Project: weather-now
# Owner: GreenUnicorn
# Built with: Claude (Anthropic)
"""
config.py — Load and validate the TOML configuration file.

We use tomllib (Python 3.11+ stdlib) so no extra install is needed.
The config path defaults to "config.toml" in the current working directory,
but can be overridden for testing. Every section is optional: values found
in the file are merged over DEFAULT_CONFIG.
"""

import copy
import tomllib
from pathlib import Path


DEFAULT_CONFIG_PATH = Path("config.toml")

DEFAULT_CONFIG: dict = {
    "search": {
        "count": 6,
        "language": "en",
        "debounce_ms": 300,
        "min_query_length": 2,
    },
    "reverse": {
        "user_agent": "weathernow-app/1.0",
        "language": "en",
        "timeout": 10,
        "nearby_count": 10,
        "nearby_display_limit": 5,
        "major_cities": ["Pune", "Mumbai", "Delhi", "Bangalore", "Chennai", "Kolkata"],
    },
    "forecast": {
        "timeout": 10,
    },
    "preferences": {
        "path": ".weather_now/preferences.json",
    },
    "log": {
        "path": "logs/weather_now.log",
        "level": "INFO",
    },
}

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


def load_config(path: Path = DEFAULT_CONFIG_PATH) -> dict:
    """Load a TOML configuration file and merge it over the defaults.

    Args:
        path: Path to the TOML config file.

    Returns:
        Nested dict of configuration values.

    Raises:
        FileNotFoundError: If the config file does not exist.
        ValueError: If a value has the wrong type or is out of range.
    """
    if not path.exists():
        raise FileNotFoundError(
            f"Config file not found: {path}\n"
            "Copy config.toml.example to config.toml to customise settings."
        )

    with open(path, "rb") as f:
        raw = tomllib.load(f)

    config = merge_config(raw)
    _validate(config)
    return config


def merge_config(raw: dict) -> dict:
    """Overlay known sections of `raw` on a copy of DEFAULT_CONFIG."""
    config = copy.deepcopy(DEFAULT_CONFIG)
    for section, defaults in config.items():
        values = raw.get(section)
        if values is None:
            continue
        if not isinstance(values, dict):
            raise ValueError(f"Config section [{section}] must be a table")
        defaults.update(values)
    return config


def _validate(config: dict) -> None:
    """Validate types and ranges of the merged configuration.

    Expected config schema::

        [search]
        count            = <int>    # suggestions per query, > 0
        language         = <str>    # e.g. "en"
        debounce_ms      = <int>    # >= 0
        min_query_length = <int>    # >= 1

        [reverse]
        user_agent           = <str>        # sent to Nominatim, non-empty
        language             = <str>
        timeout              = <number>     # seconds, > 0
        nearby_count         = <int>        # > 0
        nearby_display_limit = <int>        # > 0
        major_cities         = [<str>, ...]

        [forecast]
        timeout = <number>   # seconds, > 0

        [preferences]
        path = <str>         # preferences JSON file

        [log]
        path  = <str>        # relative or absolute path to the log file
        level = <str>        # DEBUG, INFO, WARNING, ERROR or CRITICAL

    Args:
        config: Merged config dict.

    Raises:
        ValueError: If any value is invalid.
    """
    _require_int(config, "search", "count", minimum=1)
    _require_int(config, "search", "debounce_ms", minimum=0)
    _require_int(config, "search", "min_query_length", minimum=1)
    _require_str(config, "search", "language")

    _require_str(config, "reverse", "user_agent")
    _require_str(config, "reverse", "language")
    _require_positive_number(config, "reverse", "timeout")
    _require_int(config, "reverse", "nearby_count", minimum=1)
    _require_int(config, "reverse", "nearby_display_limit", minimum=1)
    cities = config["reverse"]["major_cities"]
    if not isinstance(cities, list) or not all(isinstance(c, str) for c in cities):
        raise ValueError("Config key [reverse].major_cities must be a list of strings")

    _require_positive_number(config, "forecast", "timeout")
    _require_str(config, "preferences", "path")
    _require_str(config, "log", "path")

    level = config["log"]["level"]
    if not isinstance(level, str) or level.upper() not in LOG_LEVELS:
        raise ValueError(f"Config key [log].level must be one of {', '.join(LOG_LEVELS)}")


def _require_int(config: dict, section: str, key: str, minimum: int) -> None:
    value = config[section][key]
    if isinstance(value, bool) or not isinstance(value, int) or value < minimum:
        raise ValueError(f"Config key [{section}].{key} must be an integer >= {minimum}")


def _require_positive_number(config: dict, section: str, key: str) -> None:
    value = config[section][key]
    if isinstance(value, bool) or not isinstance(value, (int, float)) or value <= 0:
        raise ValueError(f"Config key [{section}].{key} must be a positive number")


def _require_str(config: dict, section: str, key: str) -> None:
    value = config[section][key]
    if not isinstance(value, str) or not value.strip():
        raise ValueError(f"Config key [{section}].{key} must be a non-empty string")
