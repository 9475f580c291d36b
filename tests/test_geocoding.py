import pytest

from beauty_directory.routes import geocoding
from beauty_directory.routes.geocoding import format_location, parse_nominatim_results

BONDI = {
    "lat": "-33.8915",
    "lon": "151.2767",
    "display_name": "Bondi Beach, Waverley Council, New South Wales, 2026, Australia",
    "address": {"suburb": "Bondi Beach", "state": "New South Wales", "postcode": "2026"},
}


@pytest.fixture
def nominatim(monkeypatch):
    calls = []

    def _install(result=None, error=None):
        async def fake_fetch(query, limit):
            calls.append((query, limit))
            if error:
                raise error
            return result

        monkeypatch.setattr(geocoding, "fetch_nominatim", fake_fetch)
        return calls

    return _install


def test_short_query_returns_nothing_without_calling_upstream(client, nominatim):
    calls = nominatim(result=[BONDI])

    res = client.get("/api/geocoding/search", params={"q": " bo "})
    assert res.status_code == 200
    assert res.json() == {"results": []}
    assert calls == []


def test_search_formats_and_dedupes(client, nominatim):
    duplicate = dict(BONDI, display_name="Bondi Beach (again)")
    no_coords = {"display_name": "Somewhere", "address": {"town": "Nowhere", "state": "NSW"}}
    calls = nominatim(result=[BONDI, duplicate, no_coords])

    res = client.get("/api/geocoding/search", params={"q": "bondi", "limit": 50})
    assert res.status_code == 200
    results = res.json()["results"]
    assert len(results) == 1
    assert results[0]["label"] == "Bondi Beach, New South Wales, 2026"
    assert results[0]["displayName"] == BONDI["display_name"]
    assert results[0]["latitude"] == pytest.approx(-33.8915)
    assert calls == [("bondi", 10)]


def test_upstream_failure_degrades_to_empty_results(client, nominatim):
    nominatim(error=RuntimeError("nominatim down"))

    res = client.get("/api/geocoding/search", params={"q": "Surry Hills"})
    assert res.status_code == 200
    assert res.json() == {"results": []}


def test_format_location_falls_back_to_display_name():
    assert format_location({"display_name": "Uluru, NT", "address": {}}) == "Uluru, NT"
    assert format_location({"address": {"city": "Perth", "postcode": "6000"}}) == "Perth, 6000"


def test_parse_skips_bad_coordinates():
    broken = dict(BONDI, lat="not-a-number")
    assert parse_nominatim_results([broken]) == []
