"""
Mock geocoder for development and tests without a Google Maps API key.
"""

from typing import Dict, Optional

from ..domain.exceptions import GeocodingError
from ..domain.models import Address, GeoLocation

# Known cities around the Detroit metro area, plus one far outside it.
MOCK_LOCATIONS: Dict[str, GeoLocation] = {
    "detroit": GeoLocation(lat=42.3314, lng=-83.0458),
    "dearborn": GeoLocation(lat=42.3223, lng=-83.1763),
    "royal oak": GeoLocation(lat=42.4895, lng=-83.1446),
    "novi": GeoLocation(lat=42.4806, lng=-83.4755),
    "ann arbor": GeoLocation(lat=42.2808, lng=-83.7430),
    "lansing": GeoLocation(lat=42.7325, lng=-84.5555),
    "chicago": GeoLocation(lat=41.8781, lng=-87.6298),
}


class MockGeocoder:
    """
    Resolves addresses by city name from a fixed table.

    Unknown cities behave like an address the real service cannot find.
    """

    def __init__(self, locations: Optional[Dict[str, GeoLocation]] = None):
        self.locations = dict(MOCK_LOCATIONS if locations is None else locations)

    def geocode(self, address: Address) -> GeoLocation:
        location = self.locations.get(address.city.strip().lower())
        if location is None:
            raise GeocodingError("Address not found")
        return location
