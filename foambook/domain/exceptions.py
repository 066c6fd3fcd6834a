"""
Domain-specific exception hierarchy for the booking engine.

Ordinary unavailability is never an exception; it is reported through
``AvailabilityResult`` and ``TimeSlot.reason``.
"""

from __future__ import annotations

from typing import List, Optional, Sequence


class BookingError(Exception):
    """Base class for all application-level errors."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class ValidationError(BookingError):
    """Raised when a request or address fails validation."""

    def __init__(self, message: str, details: Optional[Sequence[str]] = None) -> None:
        super().__init__(message)
        self.details: List[str] = list(details or [])


class NotFoundError(BookingError):
    """Raised when a package or add-on id does not resolve to an active entry."""

    def __init__(self, message: str, missing_ids: Optional[Sequence[str]] = None) -> None:
        super().__init__(message)
        self.missing_ids: List[str] = list(missing_ids or [])


class ServiceAreaError(BookingError):
    """Raised when a distance lies beyond the service radius."""

    def __init__(
        self,
        message: str,
        distance: Optional[float] = None,
        max_distance: Optional[float] = None,
    ) -> None:
        super().__init__(message)
        self.distance = distance
        self.max_distance = max_distance


class GeocodingError(BookingError):
    """Raised when an address cannot be resolved to coordinates."""


class GeocoderUnavailableError(BookingError):
    """Raised when the geocoding service cannot be reached."""


class RepositoryError(BookingError):
    """Raised when events, blocks or catalog data cannot be loaded."""
