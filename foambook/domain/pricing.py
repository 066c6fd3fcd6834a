"""
Deterministic price breakdown for a package, its add-ons and the travel distance.

All amounts are integer cents. Percentages are applied through ``Decimal`` so
rounding never depends on binary floating point representation.
"""

from decimal import ROUND_CEILING, ROUND_HALF_UP, Decimal
from typing import Sequence

from .exceptions import ServiceAreaError
from .models import (
    LineItem,
    LineItemKind,
    PricingInput,
    PricingPolicy,
    PricingResult,
    TravelFeeTier,
)

DEFAULT_POLICY = PricingPolicy()
DEFAULT_TAX_RATE = DEFAULT_POLICY.tax_rate
DEFAULT_DEPOSIT_RATE = DEFAULT_POLICY.deposit_rate


def _apply_rate(amount_cents: int, rate: float, rounding: str) -> int:
    value = Decimal(amount_cents) * Decimal(str(rate))
    return int(value.quantize(Decimal("1"), rounding=rounding))


def calculate_travel_fee(
    distance_miles: float,
    tiers: Sequence[TravelFeeTier] = DEFAULT_POLICY.travel_fee_tiers,
) -> int:
    """
    Look up the travel fee for a distance.

    Tiers are checked in ascending order of ``max_miles``; a distance past the
    last tier means the service-area check was bypassed and is a hard failure.
    """
    if distance_miles < 0:
        raise ValueError(f"Distance cannot be negative, got {distance_miles}")

    ordered = sorted(tiers, key=lambda tier: tier.max_miles)
    for tier in ordered:
        if distance_miles <= tier.max_miles:
            return tier.fee_cents

    max_miles = ordered[-1].max_miles if ordered else 0
    raise ServiceAreaError(
        f"Distance beyond service area (maximum {max_miles:g} miles)",
        distance=distance_miles,
        max_distance=max_miles,
    )


def calculate_tax(amount_cents: int, tax_rate: float = DEFAULT_TAX_RATE) -> int:
    """Tax on ``amount_cents``, rounded half-up to the nearest cent."""
    return _apply_rate(amount_cents, tax_rate, ROUND_HALF_UP)


def calculate_deposit(total_cents: int, deposit_rate: float = DEFAULT_DEPOSIT_RATE) -> int:
    """Deposit share of ``total_cents``, always rounded up."""
    return _apply_rate(total_cents, deposit_rate, ROUND_CEILING)


def calculate_evening_surcharge(
    package_price: int,
    rate: float = DEFAULT_POLICY.evening_surcharge_rate,
) -> int:
    return _apply_rate(package_price, rate, ROUND_HALF_UP)


def calculate_pricing(
    pricing_input: PricingInput,
    policy: PricingPolicy = DEFAULT_POLICY,
) -> PricingResult:
    """
    Compute the full price breakdown.

    Steps:
    1. Package and add-on prices
    2. Evening surcharge for glow night bookings of eligible packages
    3. Travel fee by distance tier
    4. Tax on subtotal plus travel fee
    5. Deposit and remaining balance

    Line items keep a fixed order: package, add-ons in input order,
    surcharge and travel fee when non-zero, tax last.
    """
    package = pricing_input.package
    addons = list(pricing_input.addons)

    package_price = package.base_price_cents
    addons_price = sum(addon.price_cents for addon in addons)

    evening_surcharge = 0
    if pricing_input.is_glow_night and package.supports_evening_surcharge:
        evening_surcharge = calculate_evening_surcharge(
            package_price, policy.evening_surcharge_rate
        )

    subtotal = package_price + addons_price + evening_surcharge
    travel_fee = calculate_travel_fee(pricing_input.distance_miles, policy.travel_fee_tiers)
    tax = calculate_tax(subtotal + travel_fee, policy.tax_rate)
    total = subtotal + travel_fee + tax
    deposit_amount = calculate_deposit(total, policy.deposit_rate)

    line_items = [LineItem(package.name, package_price, LineItemKind.PACKAGE)]
    line_items.extend(
        LineItem(addon.name, addon.price_cents, LineItemKind.ADDON) for addon in addons
    )
    if evening_surcharge > 0:
        line_items.append(
            LineItem("Evening Surcharge", evening_surcharge, LineItemKind.SURCHARGE)
        )
    if travel_fee > 0:
        line_items.append(LineItem("Travel Fee", travel_fee, LineItemKind.TRAVEL))
    line_items.append(LineItem("Tax", tax, LineItemKind.TAX))

    return PricingResult(
        package_price=package_price,
        addons_price=addons_price,
        subtotal=subtotal,
        evening_surcharge=evening_surcharge,
        travel_fee=travel_fee,
        tax=tax,
        total=total,
        deposit_amount=deposit_amount,
        balance_amount=total - deposit_amount,
        line_items=line_items,
    )
