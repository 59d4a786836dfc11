"""
GST Configuration Schema.

Defines the structure and defaults for engine settings. Actual values are
loaded from shop configuration (YAML or a database row) at runtime:

    config = TaxConfig(
        mode=TaxMode.PARTIAL_TAX,
        tax_included_in_price=True,
        **load_from_database("gst_settings"),
    )

Invariants:
    - ``default_rate`` is a Decimal percentage in [0, 100]; violations
      raise ``InvalidRateError``.
    - Configuration objects are frozen snapshots; a change is a new object.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from enum import Enum
from typing import Any, Self

from gst_kernel.domain.rates import RateCategory, RateInfo
from gst_kernel.domain.values import as_decimal, validate_percentage
from gst_kernel.exceptions import InvalidConfigurationError
from gst_kernel.logging_config import get_logger

logger = get_logger("config.schema")

_MAX_AMOUNT_PLACES = 6


class DisplayPolicy(str, Enum):
    """How much of the tax breakdown the counterparty gets to see."""

    FULL_BREAKDOWN = "full_breakdown"  # CGST/SGST/IGST lines
    IDENTIFIER_ONLY = "identifier_only"  # GSTIN as reference only
    HIDDEN = "hidden"


class TaxMode(str, Enum):
    """Shop-level GST mode."""

    FULL_TAX = "full_tax"  # Tax applied and shown to the customer
    PARTIAL_TAX = "partial_tax"  # Tax applied, hidden from the customer
    REFERENCE_ONLY = "reference_only"  # GSTIN shown as reference
    NO_TAX = "no_tax"  # Tax disabled

    @property
    def requires_identifier(self) -> bool:
        """Whether a valid seller identifier is mandatory in this mode."""
        return self is not TaxMode.NO_TAX

    @property
    def shows_to_counterparty(self) -> bool:
        return _DISPLAY[self][0]

    @property
    def display_policy(self) -> DisplayPolicy:
        return _DISPLAY[self][1]


_DISPLAY: dict[TaxMode, tuple[bool, DisplayPolicy]] = {
    TaxMode.FULL_TAX: (True, DisplayPolicy.FULL_BREAKDOWN),
    TaxMode.PARTIAL_TAX: (False, DisplayPolicy.HIDDEN),
    TaxMode.REFERENCE_ONLY: (True, DisplayPolicy.IDENTIFIER_ONLY),
    TaxMode.NO_TAX: (False, DisplayPolicy.HIDDEN),
}


class MissingIdentifierPolicy(str, Enum):
    """Jurisdiction assumed when seller or buyer identifier is absent."""

    INTRASTATE = "intrastate"
    INTERSTATE = "interstate"


@dataclass(frozen=True)
class TaxConfig:
    """
    Configuration snapshot for one calculation.

    Field defaults represent a GST-registered retail shop with exclusive
    pricing and whole-rupee round-off.
    """

    mode: TaxMode = TaxMode.FULL_TAX
    default_rate: Decimal = Decimal("18")
    default_category: RateCategory = RateCategory.R18
    tax_included_in_price: bool = False
    round_off: bool = True
    allows_tax: bool = True

    # Jurisdiction
    missing_identifier_policy: MissingIdentifierPolicy = MissingIdentifierPolicy.INTRASTATE

    # Precision
    round_tax_at_line: bool = False
    amount_places: int = 2
    rounding_unit: Decimal = Decimal("1")

    def __post_init__(self) -> None:
        try:
            object.__setattr__(self, "mode", TaxMode(self.mode))
            object.__setattr__(
                self, "default_category", RateCategory(self.default_category)
            )
            object.__setattr__(
                self,
                "missing_identifier_policy",
                MissingIdentifierPolicy(self.missing_identifier_policy),
            )
        except ValueError as e:
            raise InvalidConfigurationError("enum", str(e), "unknown value") from e

        object.__setattr__(
            self, "default_rate", validate_percentage(self.default_rate, "default_rate")
        )

        if isinstance(self.amount_places, bool) or not isinstance(self.amount_places, int):
            raise InvalidConfigurationError(
                "amount_places", self.amount_places, "must be an integer"
            )
        if not 0 <= self.amount_places <= _MAX_AMOUNT_PLACES:
            raise InvalidConfigurationError(
                "amount_places",
                self.amount_places,
                f"must be between 0 and {_MAX_AMOUNT_PLACES}",
            )

        unit = as_decimal(self.rounding_unit, "rounding_unit")
        if unit <= 0:
            raise InvalidConfigurationError(
                "rounding_unit", self.rounding_unit, "must be positive"
            )
        object.__setattr__(self, "rounding_unit", unit)

        logger.debug(
            "tax_config_initialized",
            extra={
                "mode": self.mode.value,
                "default_rate": str(self.default_rate),
                "default_category": self.default_category.value,
                "tax_included_in_price": self.tax_included_in_price,
                "round_off": self.round_off,
                "allows_tax": self.allows_tax,
                "missing_identifier_policy": self.missing_identifier_policy.value,
            },
        )

    @property
    def default_rate_info(self) -> RateInfo:
        return RateInfo(category=self.default_category, percentage=self.default_rate)

    def applies_tax(self) -> bool:
        """Shop-level kill switch. A per-invoice mode never re-enables tax."""
        return self.allows_tax and self.mode is not TaxMode.NO_TAX

    @classmethod
    def with_defaults(cls) -> Self:
        """Create config with the standard retail defaults."""
        logger.info("tax_config_created_with_defaults")
        return cls()

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Self:
        """Create config from a dictionary (e.g. parsed YAML or a DB row)."""
        logger.info(
            "tax_config_loading_from_dict",
            extra={"keys": sorted(data.keys())},
        )
        known = set(cls.__dataclass_fields__)
        unknown = sorted(set(data) - known)
        if unknown:
            raise InvalidConfigurationError(
                "keys", unknown, "unknown configuration keys"
            )
        return cls(**data)
