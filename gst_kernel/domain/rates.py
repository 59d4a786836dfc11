"""
Rate vocabulary: categories, resolved rates, catalog rows and rate tables.

Architecture:
    gst_kernel.domain -- pure data, no I/O, no clock.

Invariants:
    - Every percentage is a Decimal in [0, 100]; violations raise
      ``InvalidRateError`` at construction (corrupt configuration fails fast).
    - Category lookups are table-driven. ``RateTable`` is injected as data;
      there are no hard-coded product-category branches.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from enum import Enum
from types import MappingProxyType
from typing import Mapping

from gst_kernel.domain.values import ZERO, validate_percentage
from gst_kernel.logging_config import get_logger

logger = get_logger("domain.rates")


class RateCategory(str, Enum):
    """GST slab a rate belongs to."""

    EXEMPT = "exempt"
    R5 = "gst_5"
    R12 = "gst_12"
    R18 = "gst_18"
    R28 = "gst_28"
    CUSTOM = "custom"

    @property
    def standard_percentage(self) -> Decimal | None:
        """Nominal percentage of the slab; None for CUSTOM."""
        return _STANDARD_PERCENTAGES.get(self)

    @classmethod
    def for_percentage(cls, percentage: Decimal) -> RateCategory:
        """Classify a percentage into its slab (CUSTOM when non-standard)."""
        for category, standard in _STANDARD_PERCENTAGES.items():
            if percentage == standard:
                return category
        return cls.CUSTOM


_STANDARD_PERCENTAGES: dict[RateCategory, Decimal] = {
    RateCategory.EXEMPT: Decimal("0"),
    RateCategory.R5: Decimal("5"),
    RateCategory.R12: Decimal("12"),
    RateCategory.R18: Decimal("18"),
    RateCategory.R28: Decimal("28"),
}


@dataclass(frozen=True)
class RateInfo:
    """
    A resolved tax rate for one line item.

    ``percentage`` is expressed in percent (18 for 18%), not as a fraction.
    ``cess_percentage`` is reserved for commodity cess and defaults to 0.
    """

    category: RateCategory
    percentage: Decimal
    commodity_code: str | None = None
    cess_percentage: Decimal = ZERO

    def __post_init__(self) -> None:
        if not isinstance(self.category, RateCategory):
            object.__setattr__(self, "category", RateCategory(self.category))
        object.__setattr__(
            self, "percentage", validate_percentage(self.percentage, "rate")
        )
        object.__setattr__(
            self,
            "cess_percentage",
            validate_percentage(self.cess_percentage, "cess_rate"),
        )
        if self.commodity_code is not None:
            code = self.commodity_code.strip()
            object.__setattr__(self, "commodity_code", code or None)

    @classmethod
    def exempt(cls) -> RateInfo:
        """The 0% exempt rate."""
        return cls(category=RateCategory.EXEMPT, percentage=Decimal("0"))

    @classmethod
    def of(
        cls,
        percentage: Decimal | str | int,
        commodity_code: str | None = None,
    ) -> RateInfo:
        """Build a rate whose category is derived from its percentage."""
        rate = validate_percentage(percentage, "rate")
        return cls(
            category=RateCategory.for_percentage(rate),
            percentage=rate,
            commodity_code=commodity_code,
        )

    @property
    def is_exempt(self) -> bool:
        return self.category == RateCategory.EXEMPT

    def with_commodity_code(self, commodity_code: str | None) -> RateInfo:
        """Copy of this rate carrying a different commodity code."""
        return RateInfo(
            category=self.category,
            percentage=self.percentage,
            commodity_code=commodity_code,
            cess_percentage=self.cess_percentage,
        )


@dataclass(frozen=True)
class CatalogEntry:
    """
    One product row of a catalog snapshot.

    ``category`` is the product category name used for the rate-table
    lookup (e.g. "mobile"), not a GST slab.
    """

    product_ref: str
    category: str
    rate_override: Decimal | None = None
    commodity_code: str | None = None
    effective_from: date | None = None
    effective_to: date | None = None

    def __post_init__(self) -> None:
        if not self.product_ref or not self.product_ref.strip():
            raise ValueError("product_ref cannot be empty")
        if self.rate_override is not None:
            object.__setattr__(
                self,
                "rate_override",
                validate_percentage(self.rate_override, "rate_override"),
            )
        if (
            self.effective_from is not None
            and self.effective_to is not None
            and self.effective_to < self.effective_from
        ):
            raise ValueError(
                f"effective_to {self.effective_to} precedes "
                f"effective_from {self.effective_from} for {self.product_ref}"
            )

    def is_effective(self, on_date: date | None = None) -> bool:
        """Check if the row applies on ``on_date`` (always, when None)."""
        if on_date is None:
            return True
        if self.effective_from and on_date < self.effective_from:
            return False
        if self.effective_to and on_date > self.effective_to:
            return False
        return True


@dataclass(frozen=True)
class RateTable:
    """
    Product category -> rate mapping, plus commodity code descriptions.

    Category keys are matched case-insensitively after trimming.
    """

    rates: Mapping[str, RateInfo] = field(default_factory=dict)
    descriptions: Mapping[str, str] = field(default_factory=dict)

    def __post_init__(self) -> None:
        normalized: dict[str, RateInfo] = {}
        for name, rate in self.rates.items():
            key = _normalize_category(name)
            if key in normalized:
                raise ValueError(f"Duplicate rate table category: {name!r}")
            normalized[key] = rate
        object.__setattr__(self, "rates", MappingProxyType(normalized))
        object.__setattr__(
            self, "descriptions", MappingProxyType(dict(self.descriptions))
        )
        logger.debug(
            "rate_table_initialized",
            extra={
                "category_count": len(normalized),
                "description_count": len(self.descriptions),
            },
        )

    def lookup(self, category: str | None) -> RateInfo | None:
        if category is None:
            return None
        return self.rates.get(_normalize_category(category))

    def describe(self, commodity_code: str) -> str | None:
        return self.descriptions.get(commodity_code)

    @property
    def categories(self) -> tuple[str, ...]:
        return tuple(sorted(self.rates))


def _normalize_category(name: str) -> str:
    return name.strip().lower()
