"""
Grand-total round-off.

Only the grand total is rounded; line items and tax components are never
touched. The adjustment is surfaced as its own field so that

    grand_total - gross_total == adjustment

holds exactly, and with rounding enabled -unit/2 < adjustment <= unit/2.
"""

from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal

from gst_kernel.domain.values import ZERO

_WHOLE_UNIT = Decimal("1")


class RoundingPolicy:
    """
    Round a gross total to the nearest ``unit`` (whole rupee by default).

    Half-up: 0.5 rounds away from zero.
    """

    def __init__(self, unit: Decimal = _WHOLE_UNIT):
        if unit <= ZERO:
            raise ValueError(f"Rounding unit must be positive, got {unit}")
        self.unit = unit

    def apply(
        self,
        gross_total: Decimal,
        round_off_enabled: bool,
    ) -> tuple[Decimal, Decimal]:
        """Return ``(adjustment, grand_total)``."""
        if not round_off_enabled:
            return ZERO, gross_total

        rounded = (gross_total / self.unit).quantize(
            _WHOLE_UNIT, rounding=ROUND_HALF_UP
        ) * self.unit
        return rounded - gross_total, rounded
