"""
Domain models for availability, pricing and service-area calculations.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional

from pendulum import DateTime


@dataclass(frozen=True)
class TimeRange:
    """
    Represents an immutable time range with start and end datetime.

    Invariant: start must be before end.
    """
    start: DateTime
    end: DateTime

    def __post_init__(self):
        if self.start >= self.end:
            raise ValueError(f"Start time {self.start} must be before end time {self.end}")

    def overlaps(self, other: "TimeRange") -> bool:
        """Check if this half-open range intersects another."""
        return self.start < other.end and self.end > other.start


@dataclass(frozen=True)
class Event:
    """An existing booking occupying time. Read-only input to the engine."""
    start_at: DateTime
    end_at: DateTime


@dataclass(frozen=True)
class MaintenanceBlock:
    """An externally declared interval during which nothing can be booked."""
    start_at: DateTime
    end_at: DateTime
    reason: str = "maintenance"


@dataclass(frozen=True)
class BusinessHours:
    """
    Opening policy of the business.

    Hours are local wall-clock hours in ``timezone``; weekdays use
    Monday=0 .. Sunday=6.
    """
    start_hour: int = 9
    end_hour: int = 18
    closed_weekdays: tuple = (6,)
    timezone: str = "America/Detroit"
    slot_interval_minutes: int = 30
    buffer_minutes: int = 45


class SlotStatusKind(str, Enum):
    AVAILABLE = "available"
    OUTSIDE_HOURS = "outside_hours"
    CLOSED_DAY = "closed_day"
    MAINTENANCE = "maintenance"
    OVERLAP = "overlap"
    BUFFER = "buffer"


@dataclass(frozen=True)
class SlotStatus:
    """Classification of a candidate slot. Every non-available kind has a reason."""
    kind: SlotStatusKind
    reason: Optional[str] = None

    @property
    def available(self) -> bool:
        return self.kind is SlotStatusKind.AVAILABLE

    @property
    def is_conflict(self) -> bool:
        return self.kind in (SlotStatusKind.OVERLAP, SlotStatusKind.BUFFER)


@dataclass(frozen=True)
class AvailabilityResult:
    is_available: bool
    reason: Optional[str] = None


@dataclass
class TimeSlot:
    """
    A candidate start time on the slot grid.

    ``time`` is the local "HH:MM" label, ``date`` the UTC instant of the start.
    """
    time: str
    date: DateTime
    available: bool = True
    reason: Optional[str] = None


@dataclass(frozen=True)
class Package:
    id: str
    name: str
    base_price_cents: int
    duration_min: int
    max_guests: int
    supports_evening_surcharge: bool = False
    is_active: bool = True


@dataclass(frozen=True)
class Addon:
    id: str
    name: str
    price_cents: int
    is_active: bool = True


@dataclass(frozen=True)
class TravelFeeTier:
    """Fee charged for distances up to and including ``max_miles``."""
    max_miles: float
    fee_cents: int


@dataclass(frozen=True)
class PricingPolicy:
    tax_rate: float = 0.08
    deposit_rate: float = 0.30
    evening_surcharge_rate: float = 0.15
    travel_fee_tiers: tuple = (
        TravelFeeTier(max_miles=15, fee_cents=0),
        TravelFeeTier(max_miles=30, fee_cents=4900),
        TravelFeeTier(max_miles=50, fee_cents=9900),
    )


@dataclass
class PricingInput:
    package: Package
    addons: List[Addon] = field(default_factory=list)
    distance_miles: float = 0.0
    is_glow_night: bool = False


class LineItemKind(str, Enum):
    PACKAGE = "package"
    ADDON = "addon"
    SURCHARGE = "surcharge"
    TRAVEL = "travel"
    TAX = "tax"


@dataclass(frozen=True)
class LineItem:
    name: str
    price_cents: int
    kind: LineItemKind


@dataclass(frozen=True)
class PricingResult:
    """Price breakdown. All amounts are integer cents."""
    package_price: int
    addons_price: int
    subtotal: int
    evening_surcharge: int
    travel_fee: int
    tax: int
    total: int
    deposit_amount: int
    balance_amount: int
    line_items: List[LineItem]


@dataclass(frozen=True)
class GeoLocation:
    lat: float
    lng: float


@dataclass(frozen=True)
class Address:
    street: str
    city: str
    state: str
    zip: str

    def one_line(self) -> str:
        return f"{self.street}, {self.city}, {self.state} {self.zip}"


@dataclass(frozen=True)
class AddressValidationResult:
    is_valid: bool
    errors: List[str] = field(default_factory=list)


@dataclass(frozen=True)
class ServiceAreaResult:
    within_area: bool
    distance: float
