"""
Conversions between tax-inclusive and tax-exclusive prices.

Used by callers that price products tax-inclusive (shelf prices) and need
the base price or the embedded tax for display or margin checks. Every
result is rounded to 2 places with ROUND_HALF_UP; the calculator itself
does not use these helpers.

    inclusive = exclusive * (1 + rate/100)
    exclusive = inclusive / (1 + rate/100)
    tax       = inclusive - exclusive
"""

from __future__ import annotations

from decimal import Decimal

from gst_kernel.domain.values import HUNDRED, ZERO, as_decimal, quantize, validate_percentage

PRICE_PLACES = 2


def _multiplier(rate: Decimal | str | int) -> Decimal:
    return 1 + validate_percentage(rate) / HUNDRED


def to_inclusive(price: Decimal | str | int, rate: Decimal | str | int) -> Decimal:
    """Exclusive price -> inclusive price."""
    return quantize(as_decimal(price, "price") * _multiplier(rate), PRICE_PLACES)


def to_exclusive(price: Decimal | str | int, rate: Decimal | str | int) -> Decimal:
    """Inclusive price -> exclusive (taxable) price."""
    return quantize(as_decimal(price, "price") / _multiplier(rate), PRICE_PLACES)


def extract_tax(
    inclusive_price: Decimal | str | int,
    rate: Decimal | str | int,
) -> Decimal:
    """
    Tax embedded in an inclusive price.

    Computed as ``inclusive - to_exclusive(inclusive)`` so that the two
    parts always add back to the inclusive price exactly.
    """
    price = quantize(as_decimal(inclusive_price, "inclusive_price"), PRICE_PLACES)
    return price - to_exclusive(price, rate)


def margin_on_inclusive(
    cost_price: Decimal | str | int,
    inclusive_price: Decimal | str | int,
    rate: Decimal | str | int,
) -> Decimal:
    """Profit left after removing tax from an inclusive selling price."""
    cost = as_decimal(cost_price, "cost_price")
    return quantize(to_exclusive(inclusive_price, rate) - cost, PRICE_PLACES)


def suggest_inclusive_price(
    cost_price: Decimal | str | int,
    margin_percentage: Decimal | str | int,
    rate: Decimal | str | int,
) -> Decimal:
    """Inclusive selling price giving ``margin_percentage`` over cost."""
    cost = as_decimal(cost_price, "cost_price")
    margin = as_decimal(margin_percentage, "margin_percentage")
    if margin < ZERO:
        raise ValueError(f"margin_percentage cannot be negative, got {margin}")
    return to_inclusive(cost * (1 + margin / HUNDRED), rate)
