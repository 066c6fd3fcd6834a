"""
Application service answering slot-grid requests.

The service validates the request, fetches the day's events and maintenance
blocks through a repository protocol and delegates the decision to the
domain-level ``AvailabilityEngine``.
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Dict, List, Mapping, Protocol, Union

import pendulum
from pendulum import DateTime

from ..domain.availability import WEEKDAY_NAMES, AvailabilityEngine
from ..domain.exceptions import ValidationError
from ..domain.models import Event, MaintenanceBlock
from .schemas import AvailabilityRequest, parse_request, slot_payload

logger = logging.getLogger(__name__)


class BookingRepositoryProtocol(Protocol):
    """Read access to booked events and maintenance blocks."""

    async def list_events(self, start: DateTime, end: DateTime) -> List[Event]:
        """Return events intersecting [start, end)."""

    async def list_blocks(self, start: DateTime, end: DateTime) -> List[MaintenanceBlock]:
        """Return maintenance blocks intersecting [start, end)."""


class AvailabilityService:
    """
    Orchestrates request validation, repository reads and slot calculation.

    ``now`` is injectable so "no dates in the past" can be tested without
    touching the clock.
    """

    def __init__(
        self,
        repository: BookingRepositoryProtocol,
        engine: AvailabilityEngine,
        now: Callable[[], DateTime] = pendulum.now,
    ) -> None:
        self._repository = repository
        self._engine = engine
        self._now = now

    @property
    def timezone(self) -> str:
        return self._engine.business_hours.timezone

    async def get_slots(
        self,
        raw_request: Union[str, bytes, Mapping[str, Any], None],
    ) -> Dict[str, Any]:
        """Validate a raw request body and build the slot-grid response."""
        request = parse_request(AvailabilityRequest, raw_request)
        return await self.get_slots_for(request)

    async def get_slots_for(self, request: AvailabilityRequest) -> Dict[str, Any]:
        tz = self.timezone
        day_start = pendulum.from_format(request.date, "YYYY-MM-DD", tz=tz).start_of("day")
        day = day_start.date()

        today = self._now().in_timezone(tz).date()
        if day < today:
            raise ValidationError("Cannot book parties in the past")

        response: Dict[str, Any] = {
            "slots": [],
            "timezone": tz,
            "date": day_start.in_timezone("UTC").to_iso8601_string(),
        }

        if self._engine.is_closed(day):
            response["message"] = f"We are closed on {WEEKDAY_NAMES[day.weekday()]}s"
            return response

        events, blocks = await self.fetch_day(day_start)
        if request.addon_ids:
            logger.debug("Availability for %s requested with add-ons %s", request.date, request.addon_ids)

        slots = self._engine.get_available_slots(day, request.duration_min, events, blocks)
        response["slots"] = [slot_payload(slot, tz) for slot in slots]
        return response

    async def fetch_day(self, day_start: DateTime):
        """
        Fetch events and blocks for a local day, widened by the buffer so
        bookings ending just before midnight still count.
        """
        buffer = self._engine.business_hours.buffer_minutes
        window_start = day_start.subtract(minutes=buffer)
        window_end = day_start.add(days=1).add(minutes=buffer)

        events = await self._repository.list_events(window_start, window_end)
        blocks = await self._repository.list_blocks(window_start, window_end)

        logger.debug(
            "Loaded %d events and %d blocks for %s",
            len(events),
            len(blocks),
            day_start.to_date_string(),
        )
        return list(events), list(blocks)
