"""
Domain layer - Pure business logic without external dependencies.
"""

from .availability import AvailabilityEngine
from .geo import calculate_distance, is_within_service_area, validate_address
from .models import (
    Addon,
    Address,
    BusinessHours,
    Event,
    GeoLocation,
    MaintenanceBlock,
    Package,
    PricingInput,
    PricingPolicy,
    PricingResult,
    TimeRange,
    TimeSlot,
)
from .pricing import calculate_deposit, calculate_pricing, calculate_tax, calculate_travel_fee

__all__ = [
    "Addon",
    "Address",
    "AvailabilityEngine",
    "BusinessHours",
    "Event",
    "GeoLocation",
    "MaintenanceBlock",
    "Package",
    "PricingInput",
    "PricingPolicy",
    "PricingResult",
    "TimeRange",
    "TimeSlot",
    "calculate_deposit",
    "calculate_distance",
    "calculate_pricing",
    "calculate_tax",
    "calculate_travel_fee",
    "is_within_service_area",
    "validate_address",
]
