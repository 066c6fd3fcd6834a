"""
Configuration management using Pydantic models loaded from YAML.
"""

import os
from pathlib import Path
from typing import List, Literal, Optional

import pendulum
import yaml
from pydantic import BaseModel, Field, field_validator, model_validator

from .domain.models import BusinessHours, GeoLocation, PricingPolicy, TravelFeeTier


class BusinessConfig(BaseModel):
    """Opening hours and slot grid settings."""
    start_hour: int = 9
    end_hour: int = 18
    slot_interval_minutes: int = 30
    buffer_minutes: int = 45
    closed_days: List[int] = Field(default_factory=lambda: [6])  # Sunday

    @field_validator("start_hour", "end_hour")
    @classmethod
    def validate_hour(cls, v: int) -> int:
        """Validate hour is between 0 and 24."""
        if not 0 <= v <= 24:
            raise ValueError(f"Hour must be between 0 and 24, got {v}")
        return v

    @field_validator("slot_interval_minutes")
    @classmethod
    def validate_interval(cls, value: int) -> int:
        if value <= 0:
            raise ValueError("slot_interval_minutes must be greater than zero")
        return value

    @field_validator("buffer_minutes")
    @classmethod
    def validate_buffer(cls, value: int) -> int:
        if value < 0:
            raise ValueError("buffer_minutes cannot be negative")
        return value

    @field_validator("closed_days")
    @classmethod
    def validate_closed_days(cls, value: List[int]) -> List[int]:
        """Ensure weekdays are in valid range and deduplicated."""
        invalid_days = [day for day in value if day not in range(7)]
        if invalid_days:
            raise ValueError(f"closed_days must be between 0 and 6, got {invalid_days}")
        # Preserve order while removing duplicates
        return list(dict.fromkeys(value))

    @model_validator(mode="after")
    def validate_hours_order(self) -> "BusinessConfig":
        """Ensure the business opens before it closes."""
        if self.end_hour <= self.start_hour:
            raise ValueError("end_hour must be later than start_hour")
        return self


class TravelTierConfig(BaseModel):
    max_miles: float
    fee_cents: int

    @field_validator("fee_cents")
    @classmethod
    def validate_fee(cls, value: int) -> int:
        if value < 0:
            raise ValueError("fee_cents cannot be negative")
        return value


class PricingConfig(BaseModel):
    """Rates and travel tiers used by the pricing engine."""
    tax_rate: float = 0.08
    deposit_rate: float = 0.30
    evening_surcharge_rate: float = 0.15
    travel_fee_tiers: List[TravelTierConfig] = Field(
        default_factory=lambda: [
            TravelTierConfig(max_miles=15, fee_cents=0),
            TravelTierConfig(max_miles=30, fee_cents=4900),
            TravelTierConfig(max_miles=50, fee_cents=9900),
        ]
    )

    @field_validator("tax_rate", "deposit_rate", "evening_surcharge_rate")
    @classmethod
    def validate_rate(cls, value: float) -> float:
        if not 0 <= value <= 1:
            raise ValueError(f"Rates must be between 0 and 1, got {value}")
        return value

    @field_validator("travel_fee_tiers")
    @classmethod
    def validate_tiers(cls, value: List[TravelTierConfig]) -> List[TravelTierConfig]:
        """Tiers are kept sorted; fees must not drop as distance grows."""
        if not value:
            raise ValueError("At least one travel fee tier is required")
        ordered = sorted(value, key=lambda tier: tier.max_miles)
        for previous, current in zip(ordered, ordered[1:]):
            if current.max_miles == previous.max_miles:
                raise ValueError(f"Duplicate travel tier at {current.max_miles} miles")
            if current.fee_cents < previous.fee_cents:
                raise ValueError("Travel fees must not decrease with distance")
        return ordered


class LocationConfig(BaseModel):
    lat: float
    lng: float

    @model_validator(mode="after")
    def validate_coordinates(self) -> "LocationConfig":
        if not -90 <= self.lat <= 90 or not -180 <= self.lng <= 180:
            raise ValueError(f"Invalid coordinates: {self.lat}, {self.lng}")
        return self


class ServiceAreaConfig(BaseModel):
    business_location: LocationConfig = Field(
        default_factory=lambda: LocationConfig(lat=42.3314, lng=-83.0458)
    )
    radius_miles: float = 50


class GeocodingConfig(BaseModel):
    provider: Literal["mock", "google"] = "mock"
    api_key: Optional[str] = None
    timeout_seconds: float = 10

    def resolve_api_key(self) -> Optional[str]:
        """Configured key, falling back to GOOGLE_MAPS_API_KEY."""
        return self.api_key or os.environ.get("GOOGLE_MAPS_API_KEY")


class AppConfig(BaseModel):
    """Application configuration."""
    timezone: str = "America/Detroit"
    business: BusinessConfig = Field(default_factory=BusinessConfig)
    pricing: PricingConfig = Field(default_factory=PricingConfig)
    service_area: ServiceAreaConfig = Field(default_factory=ServiceAreaConfig)
    geocoding: GeocodingConfig = Field(default_factory=GeocodingConfig)
    data_file: Optional[Path] = None

    @field_validator("timezone")
    @classmethod
    def validate_timezone(cls, value: str) -> str:
        try:
            pendulum.timezone(value)
        except (KeyError, ValueError) as exc:
            raise ValueError(f"Unknown timezone: {value}") from exc
        return value

    def business_hours(self) -> BusinessHours:
        business = self.business
        return BusinessHours(
            start_hour=business.start_hour,
            end_hour=business.end_hour,
            closed_weekdays=tuple(business.closed_days),
            timezone=self.timezone,
            slot_interval_minutes=business.slot_interval_minutes,
            buffer_minutes=business.buffer_minutes,
        )

    def pricing_policy(self) -> PricingPolicy:
        pricing = self.pricing
        return PricingPolicy(
            tax_rate=pricing.tax_rate,
            deposit_rate=pricing.deposit_rate,
            evening_surcharge_rate=pricing.evening_surcharge_rate,
            travel_fee_tiers=tuple(
                TravelFeeTier(max_miles=tier.max_miles, fee_cents=tier.fee_cents)
                for tier in pricing.travel_fee_tiers
            ),
        )

    def business_location(self) -> GeoLocation:
        location = self.service_area.business_location
        return GeoLocation(lat=location.lat, lng=location.lng)

    @classmethod
    def load_from_yaml(cls, config_path: Path) -> "AppConfig":
        """
        Load configuration from YAML file.

        Args:
            config_path: Path to the YAML config file

        Returns:
            AppConfig instance

        Raises:
            FileNotFoundError: If config file doesn't exist
            ValueError: If config is invalid
        """
        if not config_path.exists():
            raise FileNotFoundError(
                f"Config file not found: {config_path}\n"
                f"Please create a config.yaml file. See config.example.yaml for reference."
            )

        try:
            with open(config_path, "r", encoding="utf-8") as f:
                data = yaml.safe_load(f) or {}
        except yaml.YAMLError as exc:
            raise ValueError(f"Invalid YAML in {config_path}: {exc}") from exc

        if not isinstance(data, dict):
            raise ValueError("Config file must contain a mapping at the root level.")

        return cls(**data)


def get_default_config_path() -> Path:
    """Get the default configuration file path."""
    # Look for config.yaml in current directory
    config_path = Path.cwd() / "config.yaml"

    if not config_path.exists():
        # Try in the project root (parent of the package)
        project_root = Path(__file__).parent.parent
        config_path = project_root / "config.yaml"

    return config_path


def load_config(config_path: Optional[Path] = None) -> AppConfig:
    """
    Load an explicit config file, or the default one when present.

    Without an explicit path and without a default file the built-in
    defaults are used.
    """
    if config_path is not None:
        return AppConfig.load_from_yaml(config_path)

    default_path = get_default_config_path()
    if default_path.exists():
        return AppConfig.load_from_yaml(default_path)
    return AppConfig()
