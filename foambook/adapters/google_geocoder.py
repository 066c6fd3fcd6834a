"""
Google Geocoding API client.
"""

import logging
from typing import Any, Dict

import requests

from ..domain.exceptions import GeocoderUnavailableError, GeocodingError
from ..domain.models import Address, GeoLocation

logger = logging.getLogger(__name__)


class GoogleGeocoder:
    """
    Client for the Google Geocoding API.

    Uses the /geocode/json endpoint and takes the first result's location.
    """

    GEOCODE_ENDPOINT = "https://maps.googleapis.com/maps/api/geocode/json"

    def __init__(self, api_key: str, timeout: float = 10):
        """
        Initialize the geocoder.

        Args:
            api_key: Google Maps API key
            timeout: Request timeout in seconds
        """
        self.api_key = api_key
        self.timeout = timeout

    def geocode(self, address: Address) -> GeoLocation:
        """
        Resolve an address to coordinates.

        Raises:
            GeocodingError: If Google returns no match for the address
            GeocoderUnavailableError: If the API cannot be reached
        """
        if not self.api_key:
            raise GeocoderUnavailableError("Google Maps API key not configured")

        try:
            response = requests.get(
                self.GEOCODE_ENDPOINT,
                params={"address": address.one_line(), "key": self.api_key},
                timeout=self.timeout,
            )
            response.raise_for_status()
            data = response.json()

        except (requests.exceptions.RequestException, ValueError) as e:
            logger.warning("Geocoding request failed: %s", e)
            raise GeocoderUnavailableError(f"Geocoding service unavailable: {e}") from e

        return self._parse_response(data)

    def _parse_response(self, data: Dict[str, Any]) -> GeoLocation:
        """
        Parse the geocode response.

        Response format:
        {
            "status": "OK",
            "results": [
                {"geometry": {"location": {"lat": 42.33, "lng": -83.04}}}
            ]
        }
        """
        status = data.get("status", "UNKNOWN_ERROR")
        results = data.get("results") or []

        if status == "ZERO_RESULTS" or (status == "OK" and not results):
            raise GeocodingError("Address not found")
        if status != "OK":
            raise GeocoderUnavailableError(f"Geocoding failed: {status}")

        try:
            location = results[0]["geometry"]["location"]
            return GeoLocation(lat=float(location["lat"]), lng=float(location["lng"]))
        except (KeyError, TypeError, ValueError) as e:
            raise GeocoderUnavailableError(f"Unexpected geocoding response: {e}") from e
