"""
Value types produced by the GST engines.

All types are frozen dataclasses holding ``Decimal`` amounts. A
``CalculationResult`` is built once per calculation and never mutated;
``dataclasses.replace`` yields a new value when a caller needs a variant.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from enum import Enum
from typing import Any, Mapping

from gst_config.schema import DisplayPolicy, TaxMode
from gst_kernel.domain.rates import RateInfo
from gst_kernel.domain.values import ZERO


class Jurisdiction(str, Enum):
    """Supply classification driving the CGST/SGST vs IGST split."""

    INTRASTATE = "intrastate"
    INTERSTATE = "interstate"


@dataclass(frozen=True)
class CalculatedLineItem:
    """
    One line item with its resolved rate and tax split.

    For a non-exempt item exactly one of (cgst, sgst) or igst is non-zero.
    """

    product_ref: str
    description: str
    quantity: int
    unit_price: Decimal
    rate: RateInfo
    gross_amount: Decimal
    taxable_amount: Decimal
    cgst: Decimal = ZERO
    sgst: Decimal = ZERO
    igst: Decimal = ZERO
    cess: Decimal = ZERO

    @property
    def tax_amount(self) -> Decimal:
        """GST on this line (cess excluded)."""
        return self.cgst + self.sgst + self.igst

    @property
    def total_amount(self) -> Decimal:
        """Taxable value plus GST and cess."""
        return self.taxable_amount + self.tax_amount + self.cess

    @property
    def commodity_code(self) -> str | None:
        return self.rate.commodity_code


@dataclass(frozen=True)
class RateBreakdown:
    """Sums of all items sharing one rate percentage."""

    rate: Decimal
    taxable_amount: Decimal
    cgst: Decimal
    sgst: Decimal
    igst: Decimal
    cess: Decimal
    total_gst_amount: Decimal
    item_count: int


@dataclass(frozen=True)
class CommodityCodeSummary:
    """
    HSN-wise summary line.

    ``unit_price`` is ``total_amount / quantity`` rounded HALF_UP to 2
    places, and 0 when ``quantity`` is 0. Amount columns are unrounded sums.
    """

    commodity_code: str
    description: str | None
    quantity: int
    unit_price: Decimal
    total_amount: Decimal
    rate: Decimal
    taxable_value: Decimal
    cgst: Decimal
    sgst: Decimal
    igst: Decimal
    cess: Decimal

    @property
    def total_gst(self) -> Decimal:
        return self.cgst + self.sgst + self.igst


@dataclass(frozen=True)
class Totals:
    """Column-wise sums over every calculated item."""

    subtotal: Decimal
    total_cgst: Decimal
    total_sgst: Decimal
    total_igst: Decimal
    total_cess: Decimal
    total_gst: Decimal

    @property
    def gross_total(self) -> Decimal:
        """Amount before round-off."""
        return self.subtotal + self.total_gst + self.total_cess


@dataclass(frozen=True)
class CalculationResult:
    """Complete, immutable outcome of one GST calculation."""

    mode: TaxMode
    jurisdiction: Jurisdiction
    jurisdiction_assumed: bool
    seller_id: str | None
    buyer_id: str | None
    items: tuple[CalculatedLineItem, ...]
    rate_breakdown: tuple[RateBreakdown, ...]
    commodity_summary: tuple[CommodityCodeSummary, ...]
    subtotal: Decimal
    total_cgst: Decimal
    total_sgst: Decimal
    total_igst: Decimal
    total_cess: Decimal
    total_gst: Decimal
    round_off_amount: Decimal
    grand_total: Decimal
    show_to_counterparty: bool
    display_policy: DisplayPolicy

    @property
    def is_interstate(self) -> bool:
        return self.jurisdiction is Jurisdiction.INTERSTATE

    @property
    def gross_total(self) -> Decimal:
        """Amount before round-off."""
        return self.subtotal + self.total_gst + self.total_cess

    @property
    def effective_rate(self) -> Decimal:
        """Overall GST percentage on the subtotal (0 for a zero subtotal)."""
        if self.subtotal == ZERO:
            return ZERO
        return self.total_gst * 100 / self.subtotal


class IssueSeverity(str, Enum):
    ERROR = "error"
    WARNING = "warning"


class IssueCode(str, Enum):
    """Machine-readable validation issue codes."""

    MISSING_SELLER_IDENTIFIER = "MISSING_SELLER_IDENTIFIER"
    INVALID_SELLER_IDENTIFIER = "INVALID_SELLER_IDENTIFIER"
    INVALID_BUYER_IDENTIFIER = "INVALID_BUYER_IDENTIFIER"
    NEGATIVE_AMOUNT = "NEGATIVE_AMOUNT"
    RECONCILIATION_MISMATCH = "RECONCILIATION_MISMATCH"
    ROUNDING_MISMATCH = "ROUNDING_MISMATCH"
    JURISDICTION_CONFLICT = "JURISDICTION_CONFLICT"
    AMBIGUOUS_JURISDICTION = "AMBIGUOUS_JURISDICTION"


@dataclass(frozen=True)
class ValidationIssue:
    """One finding of the reconciliation validator."""

    code: IssueCode
    severity: IssueSeverity
    message: str
    details: Mapping[str, Any] | None = None

    @property
    def is_error(self) -> bool:
        return self.severity is IssueSeverity.ERROR
