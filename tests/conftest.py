"""
Shared fixtures.
"""

import pendulum
import pytest

from foambook.domain.models import BusinessHours

TZ = "America/Detroit"


def local(value: str):
    """Parse a local Detroit wall-clock string."""
    return pendulum.parse(value, tz=TZ)


@pytest.fixture
def business_hours() -> BusinessHours:
    return BusinessHours(
        start_hour=9,
        end_hour=18,
        closed_weekdays=(6,),
        timezone=TZ,
        slot_interval_minutes=30,
        buffer_minutes=45,
    )
