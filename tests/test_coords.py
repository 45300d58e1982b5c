# Project: weather-now
# Owner: GreenUnicorn
# Built with: Claude (Anthropic)
"""
test_coords.py — Unit tests for coordinate parsing.
"""

import pytest

from weather_now.coords import (
    Coordinate,
    format_coordinate_pair,
    parse_coordinates,
    parse_dms_part,
)


# ---------------------------------------------------------------------------
# Coordinate
# ---------------------------------------------------------------------------

def test_coordinate_accepts_bounds():
    c = Coordinate(-90, 180)
    assert c.latitude == -90
    assert c.longitude == 180


@pytest.mark.parametrize("lat,lon", [(90.5, 0), (-91, 0), (0, 180.01), (0, -181)])
def test_coordinate_rejects_out_of_range(lat, lon):
    with pytest.raises(ValueError):
        Coordinate(lat, lon)


def test_coordinate_rejects_nan():
    with pytest.raises(ValueError, match="finite"):
        Coordinate(float("nan"), 0)


def test_coordinate_is_immutable():
    c = Coordinate(1.0, 2.0)
    with pytest.raises(AttributeError):
        c.latitude = 3.0


def test_format_coordinate_pair_four_places():
    assert format_coordinate_pair(18.5246091, 73.8786239) == "18.5246, 73.8786"


# ---------------------------------------------------------------------------
# parse_coordinates — decimal form
# ---------------------------------------------------------------------------

@pytest.mark.parametrize("lat,lon", [
    (18.5246, 73.8786),
    (-33.8688, 151.2093),
    (40.7128, -74.006),
    (0.0, 0.0),
    (-89.5, -179.25),
])
def test_decimal_round_trip(lat, lon):
    result = parse_coordinates(f"{lat}, {lon}")
    assert result.latitude == pytest.approx(lat)
    assert result.longitude == pytest.approx(lon)


def test_decimal_without_space_and_with_padding():
    result = parse_coordinates("  18.52,73.87  ")
    assert result == Coordinate(18.52, 73.87)


def test_decimal_explicit_plus_sign():
    result = parse_coordinates("+12.5, +77")
    assert result == Coordinate(12.5, 77.0)


def test_decimal_out_of_range_returns_none():
    assert parse_coordinates("95.0, 10.0") is None


def test_plain_text_returns_none():
    assert parse_coordinates("Kolhapur") is None


def test_empty_returns_none():
    assert parse_coordinates("") is None
    assert parse_coordinates("   ") is None


def test_too_many_integer_digits_returns_none():
    assert parse_coordinates("1234, 10") is None


# ---------------------------------------------------------------------------
# parse_coordinates — DMS form
# ---------------------------------------------------------------------------

def test_dms_latitude_part():
    assert parse_dms_part("16°11'07.0\"N", is_latitude=True) == pytest.approx(16.18528, abs=1e-4)


def test_dms_longitude_part():
    assert parse_dms_part("74°27'43.8\"E", is_latitude=False) == pytest.approx(74.46217, abs=1e-4)


def test_dms_pair():
    result = parse_coordinates("16°11'07.0\"N 74°27'43.8\"E")
    assert result.latitude == pytest.approx(16 + 11 / 60 + 7.0 / 3600)
    assert result.longitude == pytest.approx(74 + 27 / 60 + 43.8 / 3600)


def test_dms_south_and_west_negate():
    result = parse_coordinates("33°52'07\"S 151°12'33\"W")
    assert result.latitude < 0
    assert result.longitude < 0
    assert result.latitude == pytest.approx(-(33 + 52 / 60 + 7 / 3600))


def test_dms_lowercase_hemisphere():
    assert parse_dms_part("10°30'00\"s", is_latitude=True) == pytest.approx(-10.5)


def test_dms_without_hemisphere_in_range():
    assert parse_dms_part("45 30 00", is_latitude=True) == pytest.approx(45.5)


def test_dms_latitude_over_90_without_hemisphere_rejected():
    assert parse_dms_part("95°00'00\"", is_latitude=True) is None


def test_dms_longitude_over_180_without_hemisphere_rejected():
    assert parse_dms_part("181°00'00\"", is_latitude=False) is None


def test_dms_pair_with_invalid_latitude_returns_none():
    assert parse_coordinates("95°00'00\" 74°27'43.8\"E") is None


def test_dms_garbage_part_returns_none():
    assert parse_dms_part("north", is_latitude=True) is None


def test_three_tokens_not_dms():
    assert parse_coordinates("16 11 07") is None
