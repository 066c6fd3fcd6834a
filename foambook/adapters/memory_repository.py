"""
In-memory booking repository and catalog seeded from JSON.
"""

import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

import pendulum
from pendulum import DateTime

from ..domain.exceptions import RepositoryError
from ..domain.models import Addon, Event, MaintenanceBlock, Package

logger = logging.getLogger(__name__)

DEFAULT_DATA_FILE = Path(__file__).parent / "mock_booking_data.json"


class InMemoryBookingStore:
    """
    Holds events, maintenance blocks and catalog entries in memory.

    Implements both the booking repository and the catalog protocols used
    by the services. Seed data comes from a JSON file with ``packages``,
    ``addons``, ``events`` and ``blocks`` arrays; instants without an offset
    are read in ``timezone``.
    """

    def __init__(
        self,
        packages: Sequence[Package] = (),
        addons: Sequence[Addon] = (),
        events: Sequence[Event] = (),
        blocks: Sequence[MaintenanceBlock] = (),
    ):
        self.packages: Dict[str, Package] = {package.id: package for package in packages}
        self.addons: Dict[str, Addon] = {addon.id: addon for addon in addons}
        self.events: List[Event] = list(events)
        self.blocks: List[MaintenanceBlock] = list(blocks)

    @classmethod
    def from_json(
        cls,
        data_file: Optional[Path] = None,
        timezone: str = "America/Detroit",
    ) -> "InMemoryBookingStore":
        """
        Load seed data from JSON.

        Raises:
            RepositoryError: If the file is missing or malformed
        """
        data_file = data_file or DEFAULT_DATA_FILE

        try:
            with open(data_file, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as exc:
            raise RepositoryError(f"Could not load booking data from {data_file}: {exc}") from exc

        try:
            store = cls(
                packages=[cls._parse_package(item) for item in data.get("packages", [])],
                addons=[cls._parse_addon(item) for item in data.get("addons", [])],
                events=[
                    Event(
                        start_at=cls._parse_instant(item["start"], timezone),
                        end_at=cls._parse_instant(item["end"], timezone),
                    )
                    for item in data.get("events", [])
                ],
                blocks=[
                    MaintenanceBlock(
                        start_at=cls._parse_instant(item["start"], timezone),
                        end_at=cls._parse_instant(item["end"], timezone),
                        reason=item.get("reason", "maintenance"),
                    )
                    for item in data.get("blocks", [])
                ],
            )
        except (KeyError, TypeError, ValueError) as exc:
            raise RepositoryError(f"Invalid booking data in {data_file}: {exc}") from exc

        logger.debug(
            "Loaded %d packages, %d add-ons, %d events, %d blocks from %s",
            len(store.packages),
            len(store.addons),
            len(store.events),
            len(store.blocks),
            data_file,
        )
        return store

    # Booking repository

    async def list_events(self, start: DateTime, end: DateTime) -> List[Event]:
        return [event for event in self.events if event.start_at < end and event.end_at > start]

    async def list_blocks(self, start: DateTime, end: DateTime) -> List[MaintenanceBlock]:
        return [block for block in self.blocks if block.start_at < end and block.end_at > start]

    # Catalog

    async def get_package(self, package_id: str) -> Optional[Package]:
        return self.packages.get(package_id)

    async def get_addons(self, addon_ids: Sequence[str]) -> List[Addon]:
        return [self.addons[addon_id] for addon_id in dict.fromkeys(addon_ids) if addon_id in self.addons]

    def list_packages(self, include_inactive: bool = False) -> List[Package]:
        return [p for p in self.packages.values() if include_inactive or p.is_active]

    def list_addons(self, include_inactive: bool = False) -> List[Addon]:
        return [a for a in self.addons.values() if include_inactive or a.is_active]

    @staticmethod
    def _parse_instant(value: str, timezone: str) -> DateTime:
        parsed = pendulum.parse(value, tz=timezone)
        if not isinstance(parsed, DateTime):
            raise ValueError(f"Expected a date and time, got {value!r}")
        return parsed

    @staticmethod
    def _parse_package(item: Dict[str, Any]) -> Package:
        return Package(
            id=item["id"],
            name=item["name"],
            base_price_cents=int(item["basePriceCents"]),
            duration_min=int(item["durationMin"]),
            max_guests=int(item["maxGuests"]),
            supports_evening_surcharge=bool(item.get("supportsEveningSurcharge", False)),
            is_active=bool(item.get("isActive", True)),
        )

    @staticmethod
    def _parse_addon(item: Dict[str, Any]) -> Addon:
        return Addon(
            id=item["id"],
            name=item["name"],
            price_cents=int(item["priceCents"]),
            is_active=bool(item.get("isActive", True)),
        )
