"""
Wiring of configuration, adapters, engines and services.
"""

from dataclasses import dataclass
from typing import Callable, Optional

import pendulum
from pendulum import DateTime

from .adapters import GoogleGeocoder, InMemoryBookingStore, MockGeocoder
from .config import AppConfig
from .domain.availability import AvailabilityEngine
from .services import AvailabilityService, GeocoderProtocol, QuoteService


@dataclass
class Services:
    config: AppConfig
    store: InMemoryBookingStore
    engine: AvailabilityEngine
    availability: AvailabilityService
    quotes: QuoteService


def build_geocoder(config: AppConfig) -> GeocoderProtocol:
    geocoding = config.geocoding
    if geocoding.provider == "google":
        return GoogleGeocoder(
            api_key=geocoding.resolve_api_key() or "",
            timeout=geocoding.timeout_seconds,
        )
    return MockGeocoder()


def build_services(
    config: AppConfig,
    store: Optional[InMemoryBookingStore] = None,
    geocoder: Optional[GeocoderProtocol] = None,
    now: Callable[[], DateTime] = pendulum.now,
) -> Services:
    """Assemble the services for one configuration."""
    if store is None:
        store = InMemoryBookingStore.from_json(config.data_file, timezone=config.timezone)

    engine = AvailabilityEngine(business_hours=config.business_hours())
    availability = AvailabilityService(repository=store, engine=engine, now=now)
    quotes = QuoteService(
        catalog=store,
        geocoder=geocoder or build_geocoder(config),
        business_location=config.business_location(),
        policy=config.pricing_policy(),
        radius_miles=config.service_area.radius_miles,
    )
    return Services(
        config=config,
        store=store,
        engine=engine,
        availability=availability,
        quotes=quotes,
    )
