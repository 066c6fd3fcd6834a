"""
Adapters layer - In-memory storage and geocoding integrations.
"""

from .google_geocoder import GoogleGeocoder
from .memory_repository import InMemoryBookingStore
from .mock_geocoder import MockGeocoder

__all__ = ["GoogleGeocoder", "InMemoryBookingStore", "MockGeocoder"]
