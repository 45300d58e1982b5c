# Project: weather-now
# Owner: GreenUnicorn
# Built with: Claude (Anthropic)
"""
preferences.py — Persist the two user preferences: temperature unit and theme.

Stored as a small JSON file. A missing or damaged file is not an error; the
defaults ('celsius', 'dark') apply.
"""

import json
import logging
from dataclasses import asdict, dataclass, replace
from pathlib import Path

DEFAULT_PREFERENCES_PATH = Path(".weather_now/preferences.json")
UNITS = ("celsius", "fahrenheit")
THEMES = ("dark", "light")

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Preferences:
    unit: str = "celsius"
    theme: str = "dark"


def load_preferences(path: Path = DEFAULT_PREFERENCES_PATH) -> Preferences:
    """Load preferences, falling back to defaults for anything missing or invalid.

    Args:
        path: Path to the preferences JSON file.

    Returns:
        A Preferences instance.
    """
    defaults = Preferences()
    if not path.exists():
        return defaults
    try:
        with open(path, encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, ValueError) as e:
        logger.warning("Ignoring unreadable preferences file %s: %s", path, e)
        return defaults
    if not isinstance(data, dict):
        return defaults

    unit = data.get("unit")
    theme = data.get("theme")
    return Preferences(
        unit=unit if unit in UNITS else defaults.unit,
        theme=theme if theme in THEMES else defaults.theme,
    )


def save_preferences(prefs: Preferences, path: Path = DEFAULT_PREFERENCES_PATH) -> None:
    """Write preferences to disk.

    Raises:
        ValueError: If the unit or theme is not a known value.
    """
    if prefs.unit not in UNITS:
        raise ValueError(f"Unknown unit: {prefs.unit!r} (expected one of {UNITS})")
    if prefs.theme not in THEMES:
        raise ValueError(f"Unknown theme: {prefs.theme!r} (expected one of {THEMES})")

    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, "w", encoding="utf-8") as f:
            json.dump(asdict(prefs), f)
    except OSError as e:
        logger.warning("Could not save preferences to %s: %s", path, e)


def toggle_theme(prefs: Preferences) -> Preferences:
    return replace(prefs, theme="light" if prefs.theme == "dark" else "dark")
