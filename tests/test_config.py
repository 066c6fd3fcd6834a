"""
Tests for YAML configuration loading.
"""

import pytest
from pydantic import ValidationError as PydanticValidationError

from foambook.config import AppConfig, BusinessConfig, GeocodingConfig, PricingConfig, load_config


def test_defaults():
    config = AppConfig()

    hours = config.business_hours()
    assert hours.start_hour == 9
    assert hours.end_hour == 18
    assert hours.closed_weekdays == (6,)
    assert hours.buffer_minutes == 45
    assert hours.timezone == "America/Detroit"

    policy = config.pricing_policy()
    assert policy.tax_rate == 0.08
    assert [tier.fee_cents for tier in policy.travel_fee_tiers] == [0, 4900, 9900]

    assert config.business_location().lat == 42.3314


def test_load_from_yaml(tmp_path):
    config_file = tmp_path / "config.yaml"
    config_file.write_text(
        "timezone: America/Chicago\n"
        "business:\n"
        "  start_hour: 10\n"
        "  end_hour: 20\n"
        "  closed_days: [0, 6, 6]\n"
        "pricing:\n"
        "  tax_rate: 0.06\n"
        "geocoding:\n"
        "  provider: google\n"
        "  api_key: abc\n",
        encoding="utf-8",
    )

    config = load_config(config_file)

    assert config.timezone == "America/Chicago"
    assert config.business.closed_days == [0, 6]
    assert config.business_hours().timezone == "America/Chicago"
    assert config.pricing_policy().tax_rate == 0.06
    assert config.geocoding.resolve_api_key() == "abc"


def test_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError, match="Config file not found"):
        load_config(tmp_path / "missing.yaml")


def test_invalid_yaml(tmp_path):
    config_file = tmp_path / "config.yaml"
    config_file.write_text("business: [unclosed\n", encoding="utf-8")

    with pytest.raises(ValueError, match="Invalid YAML"):
        AppConfig.load_from_yaml(config_file)


def test_root_must_be_mapping(tmp_path):
    config_file = tmp_path / "config.yaml"
    config_file.write_text("- a\n- b\n", encoding="utf-8")

    with pytest.raises(ValueError, match="mapping"):
        AppConfig.load_from_yaml(config_file)


def test_empty_file_uses_defaults(tmp_path):
    config_file = tmp_path / "config.yaml"
    config_file.write_text("", encoding="utf-8")

    assert AppConfig.load_from_yaml(config_file) == AppConfig()


def test_without_path_falls_back_to_defaults(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    monkeypatch.setattr("foambook.config.get_default_config_path", lambda: tmp_path / "config.yaml")

    assert load_config() == AppConfig()


@pytest.mark.parametrize(
    "business",
    [
        {"start_hour": 18, "end_hour": 9},
        {"start_hour": 25},
        {"closed_days": [7]},
        {"slot_interval_minutes": 0},
        {"buffer_minutes": -5},
    ],
)
def test_invalid_business_settings(business):
    with pytest.raises(PydanticValidationError):
        BusinessConfig(**business)


def test_unknown_timezone():
    with pytest.raises(PydanticValidationError, match="Unknown timezone"):
        AppConfig(timezone="Mars/Olympus_Mons")


def test_tiers_are_sorted():
    pricing = PricingConfig(
        travel_fee_tiers=[
            {"max_miles": 30, "fee_cents": 4900},
            {"max_miles": 15, "fee_cents": 0},
        ]
    )

    assert [tier.max_miles for tier in pricing.travel_fee_tiers] == [15, 30]


@pytest.mark.parametrize(
    "tiers",
    [
        [],
        [{"max_miles": 15, "fee_cents": 4900}, {"max_miles": 30, "fee_cents": 0}],
        [{"max_miles": 15, "fee_cents": 0}, {"max_miles": 15, "fee_cents": 100}],
    ],
)
def test_invalid_tiers(tiers):
    with pytest.raises(PydanticValidationError):
        PricingConfig(travel_fee_tiers=tiers)


def test_rates_must_be_fractions():
    with pytest.raises(PydanticValidationError):
        PricingConfig(tax_rate=8)


def test_api_key_falls_back_to_environment(monkeypatch):
    monkeypatch.setenv("GOOGLE_MAPS_API_KEY", "from-env")

    assert GeocodingConfig().resolve_api_key() == "from-env"
    assert GeocodingConfig(api_key="explicit").resolve_api_key() == "explicit"


def test_api_key_absent(monkeypatch):
    monkeypatch.delenv("GOOGLE_MAPS_API_KEY", raising=False)

    assert GeocodingConfig().resolve_api_key() is None
