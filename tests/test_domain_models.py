"""
Tests for domain models.
"""

import pendulum
import pytest

from foambook.domain.models import Address, SlotStatus, SlotStatusKind, TimeRange


class TestTimeRange:
    """Tests for TimeRange model."""

    def test_create_valid_time_range(self):
        """Test creating a valid time range."""
        start = pendulum.parse("2024-06-15 09:00", tz="America/Detroit")
        end = pendulum.parse("2024-06-15 18:00", tz="America/Detroit")

        tr = TimeRange(start=start, end=end)

        assert tr.start == start
        assert tr.end == end

    def test_invalid_time_range_raises_error(self):
        """Test that creating an invalid time range raises ValueError."""
        start = pendulum.parse("2024-06-15 18:00", tz="America/Detroit")
        end = pendulum.parse("2024-06-15 09:00", tz="America/Detroit")

        with pytest.raises(ValueError, match="Start time .* must be before end time"):
            TimeRange(start=start, end=end)

    def test_overlaps_is_half_open(self):
        """Touching ranges do not overlap."""
        tr1 = TimeRange(
            start=pendulum.parse("2024-06-15 09:00", tz="America/Detroit"),
            end=pendulum.parse("2024-06-15 12:00", tz="America/Detroit")
        )
        tr2 = TimeRange(
            start=pendulum.parse("2024-06-15 11:00", tz="America/Detroit"),
            end=pendulum.parse("2024-06-15 14:00", tz="America/Detroit")
        )
        tr3 = TimeRange(
            start=pendulum.parse("2024-06-15 14:00", tz="America/Detroit"),
            end=pendulum.parse("2024-06-15 17:00", tz="America/Detroit")
        )

        assert tr1.overlaps(tr2)
        assert tr2.overlaps(tr1)
        assert not tr2.overlaps(tr3)

    def test_overlap_compares_instants_across_timezones(self):
        """The same instant expressed in UTC and local time overlaps."""
        local_range = TimeRange(
            start=pendulum.parse("2024-06-15 14:00", tz="America/Detroit"),
            end=pendulum.parse("2024-06-15 15:00", tz="America/Detroit")
        )
        utc_range = TimeRange(
            start=pendulum.parse("2024-06-15T18:30:00Z"),
            end=pendulum.parse("2024-06-15T19:30:00Z")
        )

        assert local_range.overlaps(utc_range)


class TestSlotStatus:
    def test_available_kind(self):
        status = SlotStatus(SlotStatusKind.AVAILABLE)

        assert status.available
        assert not status.is_conflict
        assert status.reason is None

    def test_conflict_kinds(self):
        assert SlotStatus(SlotStatusKind.OVERLAP, "overlap").is_conflict
        assert SlotStatus(SlotStatusKind.BUFFER, "buffer").is_conflict
        assert not SlotStatus(SlotStatusKind.MAINTENANCE, "maintenance").is_conflict


def test_address_one_line():
    address = Address(street="1 Main St", city="Novi", state="MI", zip="48375")

    assert address.one_line() == "1 Main St, Novi, MI 48375"
