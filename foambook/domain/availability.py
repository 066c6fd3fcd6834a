"""
Core business logic for deciding which party slots can be booked.

Pure domain logic without any external dependencies (no API calls, no
database, no I/O). Existing events and maintenance blocks are passed in by
the caller as a consistent snapshot.
"""

from datetime import date, datetime
from typing import List, Sequence

import pendulum
from pendulum import DateTime

from .models import (
    AvailabilityResult,
    BusinessHours,
    Event,
    MaintenanceBlock,
    SlotStatus,
    SlotStatusKind,
    TimeRange,
    TimeSlot,
)

WEEKDAY_NAMES = ["Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday"]


def _instant(value: datetime) -> DateTime:
    # Naive datetimes are read as UTC.
    return pendulum.instance(value).in_timezone("UTC")


def _intersects(candidate: TimeRange, start: DateTime, end: DateTime) -> bool:
    # An empty interval occupies no time.
    return start < end and candidate.overlaps(TimeRange(start=start, end=end))


class AvailabilityEngine:
    """
    Classifies candidate slots against business hours, closed weekdays,
    maintenance blocks and buffered existing bookings.

    Decision order (first match wins):
    1. Start hour outside business hours
    2. Closed weekday
    3. Maintenance block intersecting the slot
    4. Existing booking intersecting the slot, or its buffer margin
    5. Available

    Hours and weekdays are judged on local wall-clock time; every interval
    comparison happens on UTC instants.
    """

    def __init__(self, business_hours: BusinessHours):
        self.business_hours = business_hours

    # ------------------------------------------------------------------
    # Public entry points
    # ------------------------------------------------------------------

    def check_availability(
        self,
        day: date,
        start_time: str,
        duration_min: int,
        existing_events: Sequence[Event],
        blocks: Sequence[MaintenanceBlock],
    ) -> AvailabilityResult:
        """
        Decide whether a single slot starting at ``start_time`` ("HH:MM") on
        ``day`` is bookable.
        """
        hour, minute = self._parse_start_time(start_time)
        status = self.classify_slot(
            self._local_day(day), hour, minute, duration_min, existing_events, blocks
        )
        return AvailabilityResult(is_available=status.available, reason=status.reason)

    def get_available_slots(
        self,
        day: date,
        duration_min: int,
        existing_events: Sequence[Event],
        blocks: Sequence[MaintenanceBlock],
    ) -> List[TimeSlot]:
        """
        Build the slot grid for a day.

        One slot per interval from opening time; slots that would run past
        closing are left out entirely. Closed days yield an empty list.
        """
        self._validate_duration(duration_min)
        local_day = self._local_day(day)

        if self.is_closed(local_day):
            return []

        hours = self.business_hours
        opening = hours.start_hour * 60
        closing = hours.end_hour * 60

        slots: List[TimeSlot] = []
        offset = opening
        while offset + duration_min <= closing:
            hour, minute = divmod(offset, 60)
            status = self.classify_slot(
                local_day, hour, minute, duration_min, existing_events, blocks
            )
            slots.append(
                TimeSlot(
                    time=f"{hour:02d}:{minute:02d}",
                    date=self._slot_start(local_day, hour, minute).in_timezone("UTC"),
                    available=status.available,
                    reason=status.reason,
                )
            )
            offset += hours.slot_interval_minutes

        return slots

    def is_time_slot_available(
        self,
        slot: TimeSlot,
        duration_min: int,
        existing_events: Sequence[Event],
        blocks: Sequence[MaintenanceBlock],
    ) -> bool:
        """Yes/no variant of the interval checks for an already-built slot."""
        self._validate_duration(duration_min)
        start = _instant(slot.date)
        candidate = TimeRange(start=start, end=start.add(minutes=duration_min))
        return self.classify_interval(candidate, existing_events, blocks).available

    # ------------------------------------------------------------------
    # Classification
    # ------------------------------------------------------------------

    def classify_slot(
        self,
        local_day: date,
        hour: int,
        minute: int,
        duration_min: int,
        existing_events: Sequence[Event],
        blocks: Sequence[MaintenanceBlock],
    ) -> SlotStatus:
        """Run the full decision order for one candidate start time."""
        self._validate_duration(duration_min)
        hours = self.business_hours

        if hour < hours.start_hour or hour >= hours.end_hour:
            return SlotStatus(
                SlotStatusKind.OUTSIDE_HOURS,
                f"Outside business hours ({hours.start_hour:02d}:00 - {hours.end_hour:02d}:00)",
            )

        if self.is_closed(local_day):
            return SlotStatus(
                SlotStatusKind.CLOSED_DAY,
                f"Closed on {WEEKDAY_NAMES[local_day.weekday()]}s",
            )

        start = self._slot_start(local_day, hour, minute).in_timezone("UTC")
        candidate = TimeRange(start=start, end=start.add(minutes=duration_min))
        return self.classify_interval(candidate, existing_events, blocks)

    def classify_interval(
        self,
        candidate: TimeRange,
        existing_events: Sequence[Event],
        blocks: Sequence[MaintenanceBlock],
    ) -> SlotStatus:
        """
        Check a candidate interval against maintenance blocks, then against
        existing bookings widened by the buffer on both sides.
        """
        for block in blocks:
            start, end = self._bounds(block.start_at, block.end_at)
            if _intersects(candidate, start, end):
                reason = block.reason.strip().lower() or "maintenance"
                return SlotStatus(SlotStatusKind.MAINTENANCE, f"Unavailable due to {reason}")

        buffer = self.business_hours.buffer_minutes
        for event in existing_events:
            start, end = self._bounds(event.start_at, event.end_at)
            if not _intersects(candidate, start.subtract(minutes=buffer), end.add(minutes=buffer)):
                continue
            if _intersects(candidate, start, end):
                return SlotStatus(
                    SlotStatusKind.OVERLAP, "Time slot overlaps with existing booking"
                )
            return SlotStatus(
                SlotStatusKind.BUFFER,
                f"Too close to existing booking (requires {buffer}-minute buffer)",
            )

        return SlotStatus(SlotStatusKind.AVAILABLE)

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def is_closed(self, local_day: date) -> bool:
        return local_day.weekday() in self.business_hours.closed_weekdays

    def _local_day(self, day: date) -> date:
        """Reduce an instant to its calendar day in the business timezone."""
        if isinstance(day, datetime):
            return pendulum.instance(day).in_timezone(self.business_hours.timezone).date()
        return day

    def _slot_start(self, local_day: date, hour: int, minute: int) -> DateTime:
        return pendulum.datetime(
            local_day.year,
            local_day.month,
            local_day.day,
            hour,
            minute,
            tz=self.business_hours.timezone,
        )

    @staticmethod
    def _bounds(start_at: datetime, end_at: datetime):
        # An inverted interval still blocks the span it touches.
        start, end = _instant(start_at), _instant(end_at)
        return (start, end) if start <= end else (end, start)

    @staticmethod
    def _parse_start_time(start_time: str):
        try:
            hour_text, minute_text = start_time.split(":")
            hour, minute = int(hour_text), int(minute_text)
        except (AttributeError, ValueError) as exc:
            raise ValueError(f"Start time must use HH:MM format, got {start_time!r}") from exc
        if not (0 <= hour <= 23 and 0 <= minute <= 59):
            raise ValueError(f"Start time out of range: {start_time!r}")
        return hour, minute

    @staticmethod
    def _validate_duration(duration_min: int) -> None:
        if duration_min <= 0:
            raise ValueError(f"Duration must be positive, got {duration_min}")
