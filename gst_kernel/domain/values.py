"""
Decimal value helpers and the sale line item.

All money in the engine is ``Decimal``; ``float`` is rejected at every entry
point because binary floating point cannot represent paise exactly.

Contract:
    ``as_decimal`` is the single conversion gate for caller-supplied amounts.
    ``quantize`` is the single rounding primitive (ROUND_HALF_UP).
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation

from gst_kernel.exceptions import InvalidRateError

ZERO = Decimal("0")
HUNDRED = Decimal("100")
TWO = Decimal("2")


def as_decimal(value: Decimal | str | int, field: str = "amount") -> Decimal:
    """
    Convert a caller-supplied amount to Decimal.

    Preconditions:
        - ``value`` is a Decimal, an int, or a numeric string.

    Raises:
        TypeError: for float or bool (and any other non-numeric type).
        ValueError: for unparseable strings, NaN or infinity.
    """
    if isinstance(value, bool) or isinstance(value, float):
        raise TypeError(
            f"{field} must be Decimal, int or str, got {type(value).__name__}"
        )
    if isinstance(value, Decimal):
        result = value
    elif isinstance(value, int):
        result = Decimal(value)
    elif isinstance(value, str):
        try:
            result = Decimal(value.strip())
        except InvalidOperation as e:
            raise ValueError(f"Invalid {field}: {value!r}") from e
    else:
        raise TypeError(
            f"{field} must be Decimal, int or str, got {type(value).__name__}"
        )
    if not result.is_finite():
        raise ValueError(f"{field} must be finite, got {value!r}")
    return result


def quantize(value: Decimal, places: int) -> Decimal:
    """Round ``value`` to ``places`` fractional digits, half away from zero."""
    return value.quantize(Decimal(1).scaleb(-places), rounding=ROUND_HALF_UP)


def validate_percentage(value: Decimal | str | int, source: str = "rate") -> Decimal:
    """
    Convert and range-check a tax percentage.

    Raises:
        InvalidRateError: if the percentage is outside [0, 100].
        TypeError: for float input.
    """
    rate = as_decimal(value, source)
    if rate < ZERO or rate > HUNDRED:
        raise InvalidRateError(rate, source)
    return rate


@dataclass(frozen=True)
class LineItem:
    """
    One sale line as supplied by the caller.

    Invariants (checked here, upstream of calculation):
        - quantity >= 1
        - unit_price >= 0
        - rate_override, when given, is a percentage in [0, 100]
    """

    product_ref: str
    description: str
    quantity: int
    unit_price: Decimal
    rate_override: Decimal | None = None

    def __post_init__(self) -> None:
        if isinstance(self.quantity, bool) or not isinstance(self.quantity, int):
            raise TypeError(
                f"quantity must be int, got {type(self.quantity).__name__}"
            )
        if self.quantity < 1:
            raise ValueError(f"quantity must be at least 1, got {self.quantity}")

        object.__setattr__(
            self, "unit_price", as_decimal(self.unit_price, "unit_price")
        )
        if self.unit_price < ZERO:
            raise ValueError(
                f"unit_price cannot be negative, got {self.unit_price}"
            )

        if self.rate_override is not None:
            object.__setattr__(
                self,
                "rate_override",
                validate_percentage(self.rate_override, "rate_override"),
            )

    @property
    def gross_amount(self) -> Decimal:
        """unit_price * quantity, exact."""
        return self.unit_price * self.quantity
