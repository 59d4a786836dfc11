"""
GST Engine -- calculate a fully itemized tax breakdown for a sale.

Pure function of its inputs: no I/O, no clock, no shared mutable state.
Identical inputs (including Decimal representations) always produce an
identical ``CalculationResult``.

Control flow:
    JurisdictionResolver (once) -> RateResolver (per item)
    -> LineItemTaxCalculator (per item) -> Aggregator -> RoundingPolicy

Validation is a separate step (``ReconciliationValidator``); calculation
never fails for business-data reasons. Only structurally invalid
configuration raises (``InvalidRateError``, ``CatalogRequiredError``).

Usage:
    from decimal import Decimal
    from gst_config import TaxConfig, load_default_rate_table
    from gst_engines.calculator import GstCalculator
    from gst_kernel.domain import GstinValidator, LineItem

    calculator = GstCalculator(GstinValidator(), load_default_rate_table())
    result = calculator.calculate(
        line_items=[LineItem("SKU-1", "Phone", 2, Decimal("1000"))],
        catalog=[],
        config=TaxConfig(round_off=False),
        seller_id="27AAPFU0939F1ZV",
    )
    print(result.total_cgst)  # 180
    print(result.grand_total)  # 2360
"""

from __future__ import annotations

import time
from collections.abc import Sequence
from decimal import Decimal

from gst_config.schema import TaxConfig, TaxMode
from gst_engines.aggregation import Aggregator
from gst_engines.jurisdiction import JurisdictionResolver
from gst_engines.line_item import LineItemTaxCalculator
from gst_engines.rates import CatalogSnapshot, RateResolver, RateStore
from gst_engines.rounding import RoundingPolicy
from gst_engines.tracer import traced_engine
from gst_engines.types import CalculationResult
from gst_kernel.domain.identifiers import TaxIdentifierValidator, clean_identifier
from gst_kernel.domain.rates import CatalogEntry, RateTable
from gst_kernel.domain.values import LineItem, validate_percentage
from gst_kernel.exceptions import CatalogRequiredError
from gst_kernel.logging_config import get_logger

logger = get_logger("engines.calculator")


class GstCalculator:
    """
    Calculate GST for a transaction.

    Holds only immutable collaborators (identifier validator, rate table,
    component engines); each ``calculate`` call allocates a fresh result.
    """

    def __init__(
        self,
        identifier_validator: TaxIdentifierValidator,
        rate_table: RateTable | None = None,
    ):
        self.identifier_validator = identifier_validator
        self.rate_table = rate_table or RateTable()
        self.rate_resolver = RateResolver()
        self.line_calculator = LineItemTaxCalculator()
        self.aggregator = Aggregator()

    @traced_engine(
        "gst_calculation",
        "1.0",
        fingerprint_fields=(
            "line_items", "config", "seller_id", "buyer_id",
            "override_rate", "mode_override",
        ),
    )
    def calculate(
        self,
        line_items: Sequence[LineItem],
        catalog: RateStore | Sequence[CatalogEntry] | None,
        config: TaxConfig,
        seller_id: str | None = None,
        buyer_id: str | None = None,
        override_rate: Decimal | None = None,
        mode_override: TaxMode | None = None,
    ) -> CalculationResult:
        """
        Calculate GST for ``line_items``.

        Args:
            line_items: Sale lines (validated at construction).
            catalog: A rate store, or catalog rows to wrap in a
                ``CatalogSnapshot`` over this calculator's rate table.
            config: Configuration snapshot.
            seller_id: Seller tax identifier (optional).
            buyer_id: Buyer tax identifier (optional).
            override_rate: Per-transaction rate overriding catalog data.
            mode_override: Per-invoice display mode replacing ``config.mode``.
                Tax is still charged or withheld per ``config``.

        Raises:
            CatalogRequiredError: if ``catalog`` is None.
            InvalidRateError: if ``override_rate`` is outside [0, 100].
        """
        t0 = time.monotonic()
        store = self._rate_store(catalog)
        if override_rate is not None:
            override_rate = validate_percentage(override_rate, "override_rate")
        mode = TaxMode(mode_override) if mode_override is not None else config.mode
        seller = clean_identifier(seller_id)
        buyer = clean_identifier(buyer_id)

        logger.info("gst_calculation_started", extra={
            "item_count": len(line_items),
            "mode": mode.value,
            "tax_included_in_price": config.tax_included_in_price,
            "round_off": config.round_off,
        })

        resolver = JurisdictionResolver(
            self.identifier_validator, config.missing_identifier_policy
        )
        jurisdiction = resolver.resolve(seller, buyer)

        items = tuple(
            self.line_calculator.calculate(
                item,
                self.rate_resolver.resolve(
                    item, store, config, override_rate=override_rate
                ),
                jurisdiction,
                config,
            )
            for item in line_items
        )

        rate_breakdown, commodity_summary, totals = self.aggregator.aggregate(
            items, self.rate_table.descriptions
        )
        round_off_amount, grand_total = RoundingPolicy(config.rounding_unit).apply(
            totals.gross_total, config.round_off
        )

        result = CalculationResult(
            mode=mode,
            jurisdiction=jurisdiction,
            jurisdiction_assumed=JurisdictionResolver.is_assumed(seller, buyer),
            seller_id=seller,
            buyer_id=buyer,
            items=items,
            rate_breakdown=rate_breakdown,
            commodity_summary=commodity_summary,
            subtotal=totals.subtotal,
            total_cgst=totals.total_cgst,
            total_sgst=totals.total_sgst,
            total_igst=totals.total_igst,
            total_cess=totals.total_cess,
            total_gst=totals.total_gst,
            round_off_amount=round_off_amount,
            grand_total=grand_total,
            show_to_counterparty=mode.shows_to_counterparty,
            display_policy=mode.display_policy,
        )

        duration_ms = round((time.monotonic() - t0) * 1000, 2)
        logger.info("gst_calculation_completed", extra={
            "jurisdiction": jurisdiction.value,
            "jurisdiction_assumed": result.jurisdiction_assumed,
            "subtotal": str(result.subtotal),
            "total_gst": str(result.total_gst),
            "round_off_amount": str(result.round_off_amount),
            "grand_total": str(result.grand_total),
            "rate_group_count": len(rate_breakdown),
            "duration_ms": duration_ms,
        })
        return result

    def _rate_store(
        self, catalog: RateStore | Sequence[CatalogEntry] | None
    ) -> RateStore:
        if catalog is None:
            logger.error("gst_calculation_catalog_missing")
            raise CatalogRequiredError()
        if isinstance(catalog, RateStore):
            return catalog
        return CatalogSnapshot(catalog, self.rate_table)
