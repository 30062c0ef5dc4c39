# locations_api/services/geocoding.py
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

import httpx

from ..utils.http import get_json

logger = logging.getLogger(__name__)


class GeocodingError(Exception):
    """Address could not be validated; the message is safe to show to clients."""


@dataclass
class GeocodingResult:
    latitude: float
    longitude: float
    formatted_address: str
    place_id: str
    address_components: List[Dict[str, Any]] = field(default_factory=list)


class GoogleGeocoder:
    """
    Address validation through the Google Geocoding and Place Details APIs.

      geocode(address)       -> /geocode/json?address=...
      place_details(place_id) -> /place/details/json?place_id=...

    Both are single attempts bounded by `timeout` seconds.
    """

    def __init__(
        self,
        api_key: Optional[str],
        base_url: str = "https://maps.googleapis.com/maps/api",
        timeout: float = 10.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.api_key = api_key
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.transport = transport

    async def _request(self, path: str, params: Dict[str, Any]) -> Dict[str, Any]:
        if not self.api_key:
            raise GeocodingError("Google Places API key not configured")
        url = f"{self.base_url}/{path}"
        try:
            return await get_json(
                url,
                params={**params, "key": self.api_key},
                timeout=self.timeout,
                transport=self.transport,
            )
        except httpx.TimeoutException as e:
            logger.warning("Geocoding request timed out: %s", e)
            raise GeocodingError("Address validation timed out") from e
        except (httpx.HTTPError, ValueError) as e:
            logger.warning("Geocoding request failed: %s", e)
            raise GeocodingError("Failed to validate address") from e

    async def geocode(self, address: str) -> GeocodingResult:
        payload = await self._request("geocode/json", {"address": address})
        results = payload.get("results") or []
        if payload.get("status") not in (None, "OK") or not results:
            logger.info("Address not found (status=%s): %r", payload.get("status"), address)
            raise GeocodingError("Address not found or invalid")
        return _to_result(results[0])

    async def place_details(self, place_id: str) -> GeocodingResult:
        payload = await self._request(
            "place/details/json",
            {"place_id": place_id, "fields": "formatted_address,geometry,address_component"},
        )
        place = payload.get("result")
        if payload.get("status") not in (None, "OK") or not place:
            logger.info("Place not found (status=%s): %s", payload.get("status"), place_id)
            raise GeocodingError("Failed to get place details")
        return _to_result({**place, "place_id": place_id})


def _to_result(item: Dict[str, Any]) -> GeocodingResult:
    try:
        loc = item["geometry"]["location"]
        return GeocodingResult(
            latitude=float(loc["lat"]),
            longitude=float(loc["lng"]),
            formatted_address=item.get("formatted_address") or "",
            place_id=item.get("place_id") or "",
            address_components=item.get("address_components") or [],
        )
    except (KeyError, TypeError, ValueError) as e:
        logger.warning("Unexpected geocoding payload: %s", e)
        raise GeocodingError("Failed to validate address") from e
