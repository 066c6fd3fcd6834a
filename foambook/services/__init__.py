"""
Service layer helpers that orchestrate adapters and domain logic.
"""

from .availability_service import AvailabilityService, BookingRepositoryProtocol
from .quote_service import CatalogProtocol, GeocoderProtocol, QuoteService

__all__ = [
    "AvailabilityService",
    "BookingRepositoryProtocol",
    "CatalogProtocol",
    "GeocoderProtocol",
    "QuoteService",
]
