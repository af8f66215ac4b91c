"""
DevCamper API - Geocoder Tests
==============================

What we test:
    ✅ Parsing MapQuest responses into GeocodeResults
    ✅ MapQuestGeocoder request parameters (httpx.MockTransport, no network)
    ✅ Transport errors, HTTP errors, bad JSON, provider status → GeocodingError
    ✅ Missing API key → GeocodingError
"""

import httpx
import pytest

from devcamper.config import Settings
from devcamper.exceptions import GeocodingError
from devcamper.services.geocoder import MapQuestGeocoder, parse_locations

BOSTON_RESPONSE = {
    "info": {"statuscode": 0, "messages": []},
    "results": [
        {
            "providedLocation": {"location": "02118"},
            "locations": [
                {
                    "street": "",
                    "adminArea5": "Boston",
                    "adminArea3": "MA",
                    "adminArea1": "US",
                    "postalCode": "02118",
                    "latLng": {"lat": 42.3406, "lng": -71.0725},
                },
                {"adminArea5": "Nowhere", "latLng": {}},
            ],
        }
    ],
}


def geocoder_with(handler, api_key="test-key") -> MapQuestGeocoder:
    settings = Settings(geocoder_api_key=api_key, geocoder_url="https://geo.test/address")
    client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return MapQuestGeocoder(settings, client=client)


class TestParseLocations:
    def test_parses_location_parts(self):
        """A provider result maps to coordinates and address parts."""
        (result,) = parse_locations(BOSTON_RESPONSE)
        assert result.latitude == 42.3406
        assert result.longitude == -71.0725
        assert result.city == "Boston"
        assert result.state == "MA"
        assert result.zipcode == "02118"
        assert result.country == "US"
        assert result.street is None
        assert result.formatted_address == "Boston, MA 02118, US"

    def test_empty_payload(self):
        """Payloads without locations give no results."""
        assert parse_locations({}) == []
        assert parse_locations({"results": [{"locations": []}]}) == []


class TestMapQuestGeocoder:
    @pytest.mark.asyncio
    async def test_sends_key_and_location(self):
        """The request carries the API key and the address."""
        seen = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200, json=BOSTON_RESPONSE)

        results = await geocoder_with(handler).geocode("02118")

        assert [r.city for r in results] == ["Boston"]
        (request,) = seen
        assert request.url.host == "geo.test"
        assert request.url.params["key"] == "test-key"
        assert request.url.params["location"] == "02118"

    @pytest.mark.asyncio
    async def test_no_match_is_empty(self):
        """No match is an empty list, not an error."""
        geocoder = geocoder_with(
            lambda request: httpx.Response(200, json={"info": {"statuscode": 0}, "results": []})
        )
        assert await geocoder.geocode("99999") == []

    @pytest.mark.asyncio
    async def test_provider_status_error(self):
        """A non-zero provider status raises GeocodingError."""
        geocoder = geocoder_with(
            lambda request: httpx.Response(
                200, json={"info": {"statuscode": 403, "messages": ["bad key"]}, "results": []}
            )
        )
        with pytest.raises(GeocodingError):
            await geocoder.geocode("02118")

    @pytest.mark.asyncio
    async def test_http_error_status(self):
        """An HTTP 500 raises GeocodingError."""
        geocoder = geocoder_with(lambda request: httpx.Response(500, text="boom"))
        with pytest.raises(GeocodingError):
            await geocoder.geocode("02118")

    @pytest.mark.asyncio
    async def test_transport_error(self):
        """A connection failure raises GeocodingError."""
        def handler(request):
            raise httpx.ConnectError("connection refused", request=request)

        with pytest.raises(GeocodingError) as exc_info:
            await geocoder_with(handler).geocode("02118")
        assert exc_info.value.context["error_type"] == "ConnectError"

    @pytest.mark.asyncio
    async def test_invalid_json(self):
        """A body that is not JSON raises GeocodingError."""
        geocoder = geocoder_with(lambda request: httpx.Response(200, text="<html>"))
        with pytest.raises(GeocodingError):
            await geocoder.geocode("02118")

    @pytest.mark.asyncio
    async def test_missing_api_key(self):
        """Without a key no request is sent."""
        def handler(request):
            raise AssertionError("no request may be sent without a key")

        with pytest.raises(GeocodingError, match="not configured"):
            await geocoder_with(handler, api_key="").geocode("02118")
