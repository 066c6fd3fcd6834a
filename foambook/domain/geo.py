"""
Great-circle distance, service-area membership and US address validation.
"""

import math
import re

from .models import Address, AddressValidationResult, GeoLocation, ServiceAreaResult

EARTH_RADIUS_MILES = 3959
SERVICE_AREA_RADIUS_MILES = 50

US_STATES = frozenset({
    "AL", "AK", "AZ", "AR", "CA", "CO", "CT", "DE", "FL", "GA",
    "HI", "ID", "IL", "IN", "IA", "KS", "KY", "LA", "ME", "MD",
    "MA", "MI", "MN", "MS", "MO", "MT", "NE", "NV", "NH", "NJ",
    "NM", "NY", "NC", "ND", "OH", "OK", "OR", "PA", "RI", "SC",
    "SD", "TN", "TX", "UT", "VT", "VA", "WA", "WV", "WI", "WY",
})

ZIP_PATTERN = re.compile(r"^\d{5}(-\d{4})?$", re.ASCII)


def calculate_distance(origin: GeoLocation, destination: GeoLocation) -> float:
    """
    Haversine distance in miles, rounded half-up to 2 decimal places.

    The formula only uses even functions of the coordinate deltas, so the
    result is symmetric in its arguments and exactly 0 for identical points.
    """
    d_lat = math.radians(destination.lat - origin.lat)
    d_lng = math.radians(destination.lng - origin.lng)

    a = (
        math.sin(d_lat / 2) ** 2
        + math.cos(math.radians(origin.lat))
        * math.cos(math.radians(destination.lat))
        * math.sin(d_lng / 2) ** 2
    )
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))

    return math.floor(EARTH_RADIUS_MILES * c * 100 + 0.5) / 100


def is_within_service_area(
    business: GeoLocation,
    customer: GeoLocation,
    radius_miles: float = SERVICE_AREA_RADIUS_MILES,
) -> ServiceAreaResult:
    """Check whether the customer lies within ``radius_miles`` (inclusive)."""
    distance = calculate_distance(business, customer)
    return ServiceAreaResult(within_area=distance <= radius_miles, distance=distance)


def validate_address(address: Address) -> AddressValidationResult:
    """
    Validate a US postal address.

    Collects every problem instead of stopping at the first one so callers
    can show them all at once. State and zip are checked as given; padded
    values are rejected.
    """
    errors = []

    if not address.street.strip():
        errors.append("Street address is required")
    if not address.city.strip():
        errors.append("City is required")

    if not address.state.strip():
        errors.append("State is required")
    if not address.zip.strip():
        errors.append("Zip code is required")

    if len(address.state) != 2:
        errors.append("State must be 2-letter abbreviation")
    elif address.state.upper() not in US_STATES:
        errors.append("Only US addresses supported")

    if address.zip and not ZIP_PATTERN.fullmatch(address.zip):
        errors.append("Invalid zip code format")

    return AddressValidationResult(is_valid=not errors, errors=errors)
