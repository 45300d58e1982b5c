# Project: weather-now
# Owner: GreenUnicorn
# Built with: Claude (Anthropic)
"""
test_reverse.py — Unit tests for the reverse resolution engine.

All tests replace get_json with in-memory fakes — no network calls.
"""

import logging

import pytest

from weather_now.models import Source
from weather_now.reverse import (
    COARSE_ZOOM,
    PRECISE_ZOOM,
    ReverseResolver,
    build_reverse_params,
    candidate_from_payload,
)
from weather_now.utils import ProviderError

LAT, LON = 16.1853, 74.4622


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _make_payload(lat=LAT, lon=LON, addresstype="village", **address) -> dict:
    if not address:
        address = {
            "village": "Basardge",
            "taluka": "Gadhinglaj",
            "district": "Kolhapur",
            "state": "Maharashtra",
            "country": "India",
            "country_code": "in",
        }
    return {
        "lat": str(lat),
        "lon": str(lon),
        "addresstype": addresstype,
        "type": addresstype,
        "address": address,
    }


class FakeNominatim:
    """Stand-in for get_json that answers per zoom level."""

    def __init__(self, responses: dict):
        self.responses = responses
        self.calls = []

    def __call__(self, url, params=None, headers=None, timeout=None, label=""):
        self.calls.append({"url": url, "params": params, "headers": headers})
        response = self.responses.get(int(params["zoom"]))
        if isinstance(response, Exception):
            raise response
        if response is None:
            raise ProviderError("Nominatim reverse failed (503)", status_code=503, url=url)
        return response


def _resolver(fake, **kw) -> ReverseResolver:
    return ReverseResolver(fetch_json=fake, **kw)


# ---------------------------------------------------------------------------
# Request parameters
# ---------------------------------------------------------------------------

def test_build_reverse_params():
    params = build_reverse_params(LAT, LON, PRECISE_ZOOM, "en")
    assert params == {
        "format": "jsonv2",
        "lat": str(LAT),
        "lon": str(LON),
        "accept-language": "en",
        "zoom": "20",
        "addressdetails": "1",
    }


@pytest.mark.parametrize("bad", ["16.1", None, float("nan"), True])
def test_build_reverse_params_rejects_non_numeric(bad):
    with pytest.raises(ValueError):
        build_reverse_params(bad, LON, PRECISE_ZOOM)


def test_user_agent_header_sent():
    fake = FakeNominatim({PRECISE_ZOOM: _make_payload(), COARSE_ZOOM: _make_payload()})
    _resolver(fake, user_agent="test-agent/2.0").resolve(LAT, LON)
    assert fake.calls
    assert all(call["headers"] == {"User-Agent": "test-agent/2.0"} for call in fake.calls)


# ---------------------------------------------------------------------------
# candidate_from_payload
# ---------------------------------------------------------------------------

def test_candidate_from_payload_builds_indian_name():
    c = candidate_from_payload(_make_payload(), LAT, LON, Source.REVERSE_PRECISE)
    assert c.name == "Basardge, Gadhinglaj, Kolhapur"
    assert c.admin1 == "Maharashtra"
    assert c.country == "India"
    assert c.timezone == "auto"
    assert c.feature == "village"
    assert c.source is Source.REVERSE_PRECISE


def test_candidate_from_payload_stamps_query_coords():
    payload = _make_payload(lat=16.20, lon=74.50)
    c = candidate_from_payload(payload, 1.5, 2.5, Source.REVERSE_COARSE)
    assert (c.latitude, c.longitude) == (1.5, 2.5)
    assert c.id == "1.5000,2.5000"


# ---------------------------------------------------------------------------
# resolve
# ---------------------------------------------------------------------------

def test_resolve_returns_named_place():
    fake = FakeNominatim({PRECISE_ZOOM: _make_payload(), COARSE_ZOOM: _make_payload()})
    place = _resolver(fake).resolve(LAT, LON)
    assert place.name == "Basardge, Gadhinglaj, Kolhapur"
    assert place.source is Source.REVERSE_PRECISE  # duplicates keep the first tier
    assert {int(c["params"]["zoom"]) for c in fake.calls} == {PRECISE_ZOOM, COARSE_ZOOM}


def test_resolve_all_providers_fail_returns_coordinate_fallback():
    fake = FakeNominatim({})
    place = _resolver(fake).resolve(LAT, LON)
    assert place.name == f"{LAT:.4f}, {LON:.4f}"
    assert place.source is Source.COORDINATE_FALLBACK
    assert place.timezone == "auto"


def test_resolve_unexpected_payload_counts_as_failure():
    fake = FakeNominatim({PRECISE_ZOOM: ["unexpected"], COARSE_ZOOM: {"error": "Unable to geocode"}})
    place = _resolver(fake).resolve(LAT, LON)
    assert place.source is Source.COORDINATE_FALLBACK


def test_resolve_one_tier_failing_is_not_fatal():
    fake = FakeNominatim({COARSE_ZOOM: _make_payload(addresstype="suburb", suburb="Camp", country="India")})
    place = _resolver(fake).resolve(LAT, LON)
    assert place.name == "Camp"
    assert place.source is Source.REVERSE_COARSE


def test_resolve_empty_names_fall_back_to_coordinates():
    empty = _make_payload(country="India", state="Maharashtra")
    fake = FakeNominatim({PRECISE_ZOOM: empty, COARSE_ZOOM: empty})
    place = _resolver(fake).resolve(LAT, LON)
    assert place.name == f"{LAT:.4f}, {LON:.4f}"


def test_resolve_keeps_queried_point():
    precise = _make_payload(lat=18.5290, lon=73.8700, addresstype="suburb",
                            suburb="Koregaon Park", city="Pune", country="India")
    coarse = _make_payload(lat=18.5310, lon=73.8650, addresstype="suburb",
                           suburb="Mundhwa", country="India")
    fake = FakeNominatim({PRECISE_ZOOM: precise, COARSE_ZOOM: coarse})
    place = _resolver(fake).resolve(18.5246, 73.8786)
    assert (place.latitude, place.longitude) == (18.5246, 73.8786)
    assert place.id == "18.5246,73.8786"


def test_resolve_tiers_collapse_to_precise():
    coarse = _make_payload(lat=16.186, lon=74.462, addresstype="hamlet",
                           hamlet="Wadi", country="India", district="Kolhapur")
    fake = FakeNominatim({PRECISE_ZOOM: _make_payload(lat=16.40, lon=74.46), COARSE_ZOOM: coarse})
    place = _resolver(fake).resolve(LAT, LON)
    assert place.name == "Basardge, Gadhinglaj, Kolhapur"
    assert place.source is Source.REVERSE_PRECISE


def test_resolve_network_error_swallowed():
    fake = FakeNominatim({
        PRECISE_ZOOM: ProviderError("Nominatim reverse failed: timed out"),
        COARSE_ZOOM: _make_payload(),
    })
    place = _resolver(fake).resolve(LAT, LON)
    assert place.name.startswith("Basardge")


def test_resolve_rejects_non_numeric_coordinates():
    fake = FakeNominatim({})
    with pytest.raises(ValueError):
        _resolver(fake).resolve("16.18", LON)
    assert fake.calls == []


def test_resolve_logs_through_injected_logger(caplog):
    fake = FakeNominatim({})
    logger = logging.getLogger("test.reverse.injected")
    with caplog.at_level(logging.DEBUG, logger="test.reverse.injected"):
        _resolver(fake, logger=logger).resolve(LAT, LON)
    assert any(r.name == "test.reverse.injected" and r.levelno == logging.WARNING for r in caplog.records)


def test_resolve_uses_module_get_json_by_default(monkeypatch):
    fake = FakeNominatim({PRECISE_ZOOM: _make_payload(), COARSE_ZOOM: _make_payload()})
    monkeypatch.setattr("weather_now.reverse.get_json", fake)
    place = ReverseResolver().resolve(LAT, LON)
    assert place.name == "Basardge, Gadhinglaj, Kolhapur"


# ---------------------------------------------------------------------------
# nearby / resolve_with_nearby
# ---------------------------------------------------------------------------

def test_nearby_uses_single_coarse_query():
    fake = FakeNominatim({COARSE_ZOOM: _make_payload()})
    places = _resolver(fake).nearby(LAT, LON)
    assert [p.label for p in places] == ["Basardge, Gadhinglaj, Kolhapur, Maharashtra, India"]
    assert [int(c["params"]["zoom"]) for c in fake.calls] == [COARSE_ZOOM]


def test_nearby_excludes_selected_label():
    fake = FakeNominatim({COARSE_ZOOM: _make_payload()})
    places = _resolver(fake).nearby(
        LAT, LON, exclude_label="Basardge, Gadhinglaj, Kolhapur, Maharashtra, India"
    )
    assert places == []


def test_nearby_respects_count():
    fake = FakeNominatim({COARSE_ZOOM: _make_payload()})
    assert _resolver(fake).nearby(LAT, LON, count=0) == []
    assert len(_resolver(fake).nearby(LAT, LON, count=1)) == 1


def test_nearby_provider_failure_returns_empty():
    assert _resolver(FakeNominatim({})).nearby(LAT, LON) == []


def test_resolve_with_nearby_excludes_best():
    fake = FakeNominatim({PRECISE_ZOOM: _make_payload(), COARSE_ZOOM: _make_payload()})
    best, alternatives = _resolver(fake).resolve_with_nearby(LAT, LON)
    assert best.name == "Basardge, Gadhinglaj, Kolhapur"
    assert alternatives == []


def test_resolve_with_nearby_returns_distinct_alternative():
    precise = _make_payload(lat=16.1853, lon=74.4622)
    coarse = _make_payload(lat=16.19, lon=74.47, addresstype="suburb", suburb="Nesari", country="India")
    fake = FakeNominatim({PRECISE_ZOOM: precise, COARSE_ZOOM: coarse})
    best, alternatives = _resolver(fake).resolve_with_nearby(LAT, LON, count=5)
    assert best.name == "Basardge, Gadhinglaj, Kolhapur"
    assert [p.name for p in alternatives] == ["Nesari"]
