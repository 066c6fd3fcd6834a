"""
Request models and JSON payload builders for the availability and quote
boundary.

Request bodies arrive as raw JSON or already-decoded mappings. Parsing turns
every shape problem into a ``ValidationError`` with a single user-facing
message so malformed JSON and missing fields are reported distinctly.
"""

from __future__ import annotations

import json
import re
from typing import Any, Dict, List, Mapping, Type, TypeVar, Union

import pendulum
from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic import ValidationError as PydanticValidationError

from ..domain.exceptions import ValidationError
from ..domain.models import Address, GeoLocation, PricingResult, TimeSlot

DATE_PATTERN = re.compile(r"^\d{4}-\d{2}-\d{2}$", re.ASCII)
MIN_DURATION_MINUTES = 30

FIELD_LABELS = {
    "date": "Date",
    "durationMin": "Duration",
    "packageId": "Package",
    "address": "Address",
    "street": "Street address",
    "city": "City",
    "state": "State",
    "zip": "Zip code",
    "eventDate": "Event date",
}

ModelT = TypeVar("ModelT", bound=BaseModel)


class AvailabilityRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    date: str
    duration_min: int = Field(alias="durationMin")
    addon_ids: List[str] = Field(default_factory=list, alias="addonIds")

    @field_validator("date")
    @classmethod
    def validate_date(cls, value: str) -> str:
        if not DATE_PATTERN.fullmatch(value):
            raise ValueError("Invalid date format (YYYY-MM-DD)")
        try:
            pendulum.from_format(value, "YYYY-MM-DD")
        except ValueError as exc:
            raise ValueError("Invalid date format (YYYY-MM-DD)") from exc
        return value

    @field_validator("duration_min")
    @classmethod
    def validate_duration(cls, value: int) -> int:
        if value < MIN_DURATION_MINUTES:
            raise ValueError(f"Duration must be at least {MIN_DURATION_MINUTES} minutes")
        return value


class AddressPayload(BaseModel):
    street: str
    city: str
    state: str
    zip: str

    def to_address(self) -> Address:
        return Address(street=self.street, city=self.city, state=self.state, zip=self.zip)


class QuoteRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    package_id: str = Field(alias="packageId")
    addon_ids: List[str] = Field(default_factory=list, alias="addonIds")
    address: AddressPayload
    event_date: str = Field(alias="eventDate")
    is_glow_night: bool = Field(default=False, alias="isGlowNight")


def _friendly_message(exc: PydanticValidationError) -> str:
    """Reduce pydantic's error list to the first problem, worded for users."""
    first = exc.errors()[0]
    loc = [str(part) for part in first.get("loc", ())]
    label = FIELD_LABELS.get(loc[-1], loc[-1]) if loc else "Request"

    if first.get("type") == "missing":
        return f"{label} is required"
    if first.get("type") == "value_error":
        return str(first["ctx"]["error"])
    return f"{label}: {first.get('msg', 'Validation error')}"


def parse_request(
    model: Type[ModelT],
    raw: Union[str, bytes, Mapping[str, Any], None],
) -> ModelT:
    """
    Decode and validate a request body.

    Raises:
        ValidationError: "Invalid JSON" for undecodable bodies, otherwise a
            field-specific message with the full pydantic error list as details
    """
    if isinstance(raw, (str, bytes, bytearray)):
        try:
            raw = json.loads(raw)
        except (json.JSONDecodeError, UnicodeDecodeError) as exc:
            raise ValidationError("Invalid JSON") from exc

    if not isinstance(raw, Mapping):
        raise ValidationError("Request body must be a JSON object")

    try:
        return model.model_validate(raw)
    except PydanticValidationError as exc:
        details = [
            f"{'.'.join(str(part) for part in err['loc'])}: {err['msg']}"
            for err in exc.errors()
        ]
        raise ValidationError(_friendly_message(exc), details=details) from exc


def slot_payload(slot: TimeSlot, timezone: str) -> Dict[str, Any]:
    payload: Dict[str, Any] = {
        "time": slot.time,
        "available": slot.available,
        "date": slot.date.in_timezone(timezone).to_iso8601_string(),
    }
    if slot.reason:
        payload["reason"] = slot.reason
    return payload


def pricing_payload(result: PricingResult) -> Dict[str, Any]:
    return {
        "packagePrice": result.package_price,
        "addonsPrice": result.addons_price,
        "subtotal": result.subtotal,
        "eveningSurcharge": result.evening_surcharge,
        "travelFee": result.travel_fee,
        "tax": result.tax,
        "total": result.total,
        "depositAmount": result.deposit_amount,
        "balanceAmount": result.balance_amount,
        "lineItems": [
            {"name": item.name, "priceCents": item.price_cents, "kind": item.kind.value}
            for item in result.line_items
        ],
    }


def location_payload(location: GeoLocation) -> Dict[str, float]:
    return {"lat": location.lat, "lng": location.lng}
