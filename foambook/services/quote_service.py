"""
Application service producing price quotes.

Resolves catalog entries, validates and geocodes the event address, enforces
the service area and hands the assembled ``PricingInput`` to the pricing
engine.
"""

from __future__ import annotations

import asyncio
import logging
from collections import Counter
from typing import Any, Dict, List, Mapping, Optional, Protocol, Sequence, Union

import pendulum

from ..domain.exceptions import NotFoundError, ServiceAreaError, ValidationError
from ..domain.geo import SERVICE_AREA_RADIUS_MILES, is_within_service_area, validate_address
from ..domain.models import (
    Addon,
    Address,
    GeoLocation,
    Package,
    PricingInput,
    PricingPolicy,
)
from ..domain.pricing import DEFAULT_POLICY, calculate_pricing
from .schemas import QuoteRequest, location_payload, parse_request, pricing_payload

logger = logging.getLogger(__name__)


class CatalogProtocol(Protocol):
    """Read access to the package and add-on catalog."""

    async def get_package(self, package_id: str) -> Optional[Package]:
        """Return the package or None."""

    async def get_addons(self, addon_ids: Sequence[str]) -> List[Addon]:
        """Return the add-ons found for the given ids."""


class GeocoderProtocol(Protocol):
    """Address to coordinates lookup."""

    def geocode(self, address: Address) -> GeoLocation:
        """Return coordinates or raise GeocodingError."""


class QuoteService:
    """Orchestrates catalog lookups, address checks and pricing."""

    def __init__(
        self,
        catalog: CatalogProtocol,
        geocoder: GeocoderProtocol,
        business_location: GeoLocation,
        policy: PricingPolicy = DEFAULT_POLICY,
        radius_miles: float = SERVICE_AREA_RADIUS_MILES,
    ) -> None:
        self._catalog = catalog
        self._geocoder = geocoder
        self._business_location = business_location
        self._policy = policy
        self._radius_miles = radius_miles

    async def quote(
        self,
        raw_request: Union[str, bytes, Mapping[str, Any], None],
    ) -> Dict[str, Any]:
        """Validate a raw request body and build the quote response."""
        request = parse_request(QuoteRequest, raw_request)
        return await self.quote_for(request)

    async def quote_for(self, request: QuoteRequest) -> Dict[str, Any]:
        self._check_event_date(request.event_date)

        package = await self.resolve_package(request.package_id)
        addons = await self.resolve_addons(request.addon_ids)

        address = request.address.to_address()
        validation = validate_address(address)
        if not validation.is_valid:
            raise ValidationError("Invalid address", details=validation.errors)

        location = await asyncio.to_thread(self._geocoder.geocode, address)

        service_area = is_within_service_area(
            self._business_location, location, self._radius_miles
        )
        if not service_area.within_area:
            raise ServiceAreaError(
                f"Address is outside service area ({service_area.distance:.2f} miles, "
                f"maximum {self._radius_miles:g} miles)",
                distance=service_area.distance,
                max_distance=self._radius_miles,
            )

        pricing = calculate_pricing(
            PricingInput(
                package=package,
                addons=addons,
                distance_miles=service_area.distance,
                is_glow_night=request.is_glow_night,
            ),
            self._policy,
        )
        logger.info(
            "Quoted %s with %d add-on(s) at %.2f miles: %d cents",
            package.id,
            len(addons),
            service_area.distance,
            pricing.total,
        )

        response = pricing_payload(pricing)
        response["distance"] = service_area.distance
        response["serviceArea"] = service_area.within_area
        response["address"] = location_payload(location)
        return response

    async def resolve_package(self, package_id: str) -> Package:
        package = await self._catalog.get_package(package_id)
        if package is None or not package.is_active:
            raise NotFoundError("Package not found", missing_ids=[package_id])
        return package

    async def resolve_addons(self, addon_ids: Sequence[str]) -> List[Addon]:
        """
        Resolve add-ons in request order. Every id must map to an active
        add-on; the missing ones are reported together. An add-on can be
        booked once per party, so repeated ids are rejected.
        """
        if not addon_ids:
            return []

        repeated = [addon_id for addon_id, count in Counter(addon_ids).items() if count > 1]
        if repeated:
            raise ValidationError("Duplicate add-on", details=repeated)

        found = {
            addon.id: addon
            for addon in await self._catalog.get_addons(addon_ids)
            if addon.is_active
        }
        missing = [addon_id for addon_id in addon_ids if addon_id not in found]
        if missing:
            raise NotFoundError("Add-on not found", missing_ids=missing)
        return [found[addon_id] for addon_id in addon_ids]

    @staticmethod
    def _check_event_date(event_date: str) -> None:
        try:
            pendulum.parse(event_date)
        except (ValueError, TypeError) as exc:
            raise ValidationError("Invalid event date") from exc
