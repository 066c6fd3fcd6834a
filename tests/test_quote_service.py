"""
Tests for the QuoteService orchestration layer.
"""

import asyncio

import pytest

from foambook.adapters.memory_repository import InMemoryBookingStore
from foambook.adapters.mock_geocoder import MockGeocoder
from foambook.domain.exceptions import (
    GeocodingError,
    NotFoundError,
    ServiceAreaError,
    ValidationError,
)
from foambook.domain.models import GeoLocation
from foambook.services.quote_service import QuoteService

DETROIT = GeoLocation(lat=42.3314, lng=-83.0458)


class RecordingGeocoder(MockGeocoder):
    def __init__(self):
        super().__init__()
        self.calls = []

    def geocode(self, address):
        self.calls.append(address)
        return super().geocode(address)


@pytest.fixture
def geocoder():
    return RecordingGeocoder()


@pytest.fixture
def service(geocoder):
    return QuoteService(
        catalog=InMemoryBookingStore.from_json(),
        geocoder=geocoder,
        business_location=DETROIT,
    )


def _request(city="Novi", package_id="starter_package_id", addon_ids=(), state="MI", **extra):
    body = {
        "packageId": package_id,
        "addonIds": list(addon_ids),
        "address": {"street": "1 Main St", "city": city, "state": state, "zip": "48375"},
        "eventDate": "2030-06-15",
    }
    body.update(extra)
    return body


def test_quote_with_travel_fee(service):
    result = asyncio.run(service.quote(_request(addon_ids=["extra_30min_id"])))

    assert result["packagePrice"] == 29900
    assert result["addonsPrice"] == 9900
    assert result["subtotal"] == 39800
    assert result["travelFee"] == 4900
    assert result["tax"] == 3576
    assert result["total"] == 48276
    assert result["depositAmount"] == 14483
    assert result["balanceAmount"] == 33793
    assert result["serviceArea"] is True
    assert 15 < result["distance"] <= 30
    assert result["address"] == {"lat": 42.4806, "lng": -83.4755}
    assert [item["kind"] for item in result["lineItems"]] == ["package", "addon", "travel", "tax"]


def test_glow_night_quote(service):
    result = asyncio.run(
        service.quote(_request(city="Dearborn", package_id="glow_package_id", isGlowNight=True))
    )

    assert result["eveningSurcharge"] == 8985
    assert result["travelFee"] == 0
    assert result["total"] == 74396
    assert result["lineItems"][1] == {"name": "Evening Surcharge", "priceCents": 8985, "kind": "surcharge"}


def test_glow_night_ignored_for_regular_package(service):
    result = asyncio.run(service.quote(_request(city="Detroit", isGlowNight=True)))

    assert result["eveningSurcharge"] == 0
    assert result["distance"] == 0


def test_far_tier(service):
    result = asyncio.run(service.quote(_request(city="Ann Arbor")))

    assert result["travelFee"] == 9900


@pytest.mark.parametrize("package_id", ["ghost_package", "retired_package_id"])
def test_unknown_or_inactive_package(service, geocoder, package_id):
    with pytest.raises(NotFoundError, match="Package not found") as excinfo:
        asyncio.run(service.quote(_request(package_id=package_id)))

    assert excinfo.value.missing_ids == [package_id]
    assert geocoder.calls == []


def test_missing_addons_are_reported_together(service):
    with pytest.raises(NotFoundError, match="Add-on not found") as excinfo:
        asyncio.run(
            service.quote(_request(addon_ids=["extra_30min_id", "confetti_id", "ghost"]))
        )

    assert excinfo.value.missing_ids == ["confetti_id", "ghost"]


def test_repeated_addon_is_rejected(service, geocoder):
    with pytest.raises(ValidationError, match="Duplicate add-on") as excinfo:
        asyncio.run(
            service.quote(_request(addon_ids=["extra_30min_id", "generator_id", "extra_30min_id"]))
        )

    assert excinfo.value.details == ["extra_30min_id"]
    assert geocoder.calls == []


def test_padded_address_is_rejected(service):
    body = _request()
    body["address"]["state"] = " mi "
    body["address"]["zip"] = " 48375 "

    with pytest.raises(ValidationError, match="Invalid address") as excinfo:
        asyncio.run(service.quote(body))

    assert excinfo.value.details == [
        "State must be 2-letter abbreviation",
        "Invalid zip code format",
    ]


def test_addons_keep_request_order(service):
    result = asyncio.run(service.quote(_request(addon_ids=["generator_id", "extra_30min_id"])))

    assert [item["name"] for item in result["lineItems"][1:3]] == ["Portable Generator", "Extra 30 Minutes"]
    assert result["addonsPrice"] == 18400


def test_invalid_address(service, geocoder):
    with pytest.raises(ValidationError, match="Invalid address") as excinfo:
        asyncio.run(service.quote(_request(city="Toronto", state="ON")))

    assert "Only US addresses supported" in excinfo.value.details
    assert geocoder.calls == []


def test_missing_address_field(service):
    body = _request()
    del body["address"]["city"]

    with pytest.raises(ValidationError, match="City is required"):
        asyncio.run(service.quote(body))


def test_invalid_event_date(service):
    with pytest.raises(ValidationError, match="Invalid event date"):
        asyncio.run(service.quote(_request(eventDate="someday")))


def test_unknown_city_fails_geocoding(service):
    with pytest.raises(GeocodingError, match="Address not found"):
        asyncio.run(service.quote(_request(city="Faketown")))


def test_outside_service_area(service):
    with pytest.raises(ServiceAreaError) as excinfo:
        asyncio.run(service.quote(_request(city="Lansing")))

    assert excinfo.value.distance > 50
    assert excinfo.value.max_distance == 50
    assert excinfo.value.message.startswith("Address is outside service area (")
    assert excinfo.value.message.endswith("miles, maximum 50 miles)")
