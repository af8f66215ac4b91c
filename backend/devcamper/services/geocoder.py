"""
DevCamper API - Geocoding Service
=================================

What:  Resolves a free-form address or a postal code to coordinates and
       formatted address parts.
How:   `GeocoderService` is the interface the bootcamp service depends on;
       `MapQuestGeocoder` implements it over the MapQuest geocoding HTTP API
       with httpx. Tests substitute a fake implementation.

Provider response (abridged):
    {"info": {"statuscode": 0},
     "results": [{"locations": [{"latLng": {"lat": 42.35, "lng": -71.06},
                                 "street": "...", "adminArea5": "Boston",
                                 "adminArea3": "MA", "postalCode": "02118",
                                 "adminArea1": "US"}]}]}

A failed call is not retried; it surfaces as GeocodingError.
"""

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

import httpx

from devcamper.config import Settings
from devcamper.exceptions import GeocodingError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class GeocodeResult:
    latitude: float
    longitude: float
    formatted_address: Optional[str] = None
    street: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    zipcode: Optional[str] = None
    country: Optional[str] = None


class GeocoderService(ABC):
    """
    Contract:
        - geocode() returns the provider's matches, best first; an empty
          list means the query did not resolve
        - transport and provider errors are raised as GeocodingError
    """

    @abstractmethod
    async def geocode(self, query: str) -> List[GeocodeResult]:
        ...


def _formatted(location: Dict[str, Any]) -> str:
    parts = [
        location.get("street"),
        location.get("adminArea5"),
        " ".join(p for p in (location.get("adminArea3"), location.get("postalCode")) if p),
        location.get("adminArea1"),
    ]
    return ", ".join(p for p in parts if p)


def parse_locations(payload: Dict[str, Any]) -> List[GeocodeResult]:
    """Flatten a MapQuest response body into GeocodeResults."""
    results: List[GeocodeResult] = []
    for result in payload.get("results") or []:
        for location in result.get("locations") or []:
            lat_lng = location.get("latLng") or {}
            if lat_lng.get("lat") is None or lat_lng.get("lng") is None:
                continue
            results.append(
                GeocodeResult(
                    latitude=float(lat_lng["lat"]),
                    longitude=float(lat_lng["lng"]),
                    formatted_address=_formatted(location) or None,
                    street=location.get("street") or None,
                    city=location.get("adminArea5") or None,
                    state=location.get("adminArea3") or None,
                    zipcode=location.get("postalCode") or None,
                    country=location.get("adminArea1") or None,
                )
            )
    return results


class MapQuestGeocoder(GeocoderService):
    """
    MapQuest geocoding over HTTP.

    Args:
        settings: supplies GEOCODER_URL, GEOCODER_API_KEY, GEOCODER_TIMEOUT
        client:   optional shared httpx.AsyncClient (a short-lived one is
                  opened per call otherwise)
    """

    def __init__(self, settings: Settings, client: Optional[httpx.AsyncClient] = None):
        self.url = settings.geocoder_url
        self.api_key = settings.geocoder_api_key
        self.timeout = settings.geocoder_timeout
        self._client = client

    async def _get(self, params: Dict[str, str]) -> httpx.Response:
        if self._client is not None:
            return await self._client.get(self.url, params=params, timeout=self.timeout)
        async with httpx.AsyncClient(timeout=self.timeout) as client:
            return await client.get(self.url, params=params)

    async def geocode(self, query: str) -> List[GeocodeResult]:
        if not self.api_key:
            raise GeocodingError(
                message="Geocoding service is not configured",
                context={"setting": "GEOCODER_API_KEY"},
            )

        try:
            response = await self._get({"key": self.api_key, "location": query})
            response.raise_for_status()
            payload = response.json()
        except httpx.HTTPError as e:
            logger.error("Geocoding request failed for '%s': %s", query, str(e))
            raise GeocodingError(context={"query": query, "error_type": type(e).__name__})
        except ValueError as e:
            logger.error("Geocoding response was not JSON for '%s': %s", query, str(e))
            raise GeocodingError(context={"query": query, "error_type": "InvalidJSON"})

        status = (payload.get("info") or {}).get("statuscode", 0)
        if status != 0:
            messages = (payload.get("info") or {}).get("messages") or []
            logger.error("Geocoding provider error %s for '%s': %s", status, query, messages)
            raise GeocodingError(context={"query": query, "statuscode": status})

        results = parse_locations(payload)
        logger.debug("Geocoded '%s' → %d result(s)", query, len(results))
        return results
