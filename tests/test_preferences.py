# Project: weather-now
# Owner: GreenUnicorn
# Built with: Claude (Anthropic)
"""Tests for preferences.py."""

import json

import pytest

from weather_now.preferences import Preferences, load_preferences, save_preferences, toggle_theme


def test_defaults_when_file_missing(tmp_path):
    prefs = load_preferences(tmp_path / "missing.json")
    assert prefs == Preferences(unit="celsius", theme="dark")


def test_save_and_load(tmp_path):
    path = tmp_path / "nested" / "prefs.json"
    save_preferences(Preferences(unit="fahrenheit", theme="light"), path)
    assert load_preferences(path) == Preferences(unit="fahrenheit", theme="light")


def test_corrupt_file_gives_defaults(tmp_path):
    path = tmp_path / "prefs.json"
    path.write_text("{not json")
    assert load_preferences(path) == Preferences()


def test_invalid_values_ignored(tmp_path):
    path = tmp_path / "prefs.json"
    path.write_text(json.dumps({"unit": "kelvin", "theme": "light"}))
    assert load_preferences(path) == Preferences(unit="celsius", theme="light")


def test_non_object_json_gives_defaults(tmp_path):
    path = tmp_path / "prefs.json"
    path.write_text("[1, 2]")
    assert load_preferences(path) == Preferences()


def test_save_rejects_unknown_unit(tmp_path):
    with pytest.raises(ValueError, match="unit"):
        save_preferences(Preferences(unit="kelvin"), tmp_path / "prefs.json")


def test_toggle_theme():
    prefs = Preferences(unit="fahrenheit", theme="dark")
    toggled = toggle_theme(prefs)
    assert toggled == Preferences(unit="fahrenheit", theme="light")
    assert toggle_theme(toggled).theme == "dark"
    assert prefs.theme == "dark"
