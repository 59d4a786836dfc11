"""
Aggregation of calculated line items into rate-wise and HSN-wise summaries.

Invariants:
    - Rate breakdown is sorted ascending by percentage; the percentage is
      the unique group key (Decimal equality, so 18 and 18.0 share a group).
    - Commodity summary excludes uncoded items and keeps first-appearance
      order of codes.
    - Totals are straight column sums over all items; total_gst is
      cgst + sgst + igst.
    - Jurisdiction is resolved once per transaction, so a single result
      never mixes CGST/SGST items with IGST items.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from decimal import Decimal

from gst_engines.types import (
    CalculatedLineItem,
    CommodityCodeSummary,
    RateBreakdown,
    Totals,
)
from gst_kernel.domain.values import ZERO, quantize
from gst_kernel.logging_config import get_logger

logger = get_logger("engines.aggregation")

_UNIT_PRICE_PLACES = 2


def _sum(values) -> Decimal:
    return sum(values, ZERO)


class Aggregator:
    """Fold calculated items into breakdowns and totals."""

    def aggregate(
        self,
        items: Sequence[CalculatedLineItem],
        descriptions: Mapping[str, str] | None = None,
    ) -> tuple[tuple[RateBreakdown, ...], tuple[CommodityCodeSummary, ...], Totals]:
        rate_breakdown = self.rate_breakdown(items)
        commodity_summary = self.commodity_summary(items, descriptions)
        totals = self.totals(items)

        logger.debug(
            "aggregation_completed",
            extra={
                "item_count": len(items),
                "rate_group_count": len(rate_breakdown),
                "commodity_group_count": len(commodity_summary),
            },
        )
        return rate_breakdown, commodity_summary, totals

    def rate_breakdown(
        self, items: Sequence[CalculatedLineItem]
    ) -> tuple[RateBreakdown, ...]:
        groups: dict[Decimal, list[CalculatedLineItem]] = {}
        for item in items:
            groups.setdefault(item.rate.percentage, []).append(item)

        breakdown = []
        for rate, group in groups.items():
            cgst = _sum(i.cgst for i in group)
            sgst = _sum(i.sgst for i in group)
            igst = _sum(i.igst for i in group)
            breakdown.append(
                RateBreakdown(
                    rate=rate,
                    taxable_amount=_sum(i.taxable_amount for i in group),
                    cgst=cgst,
                    sgst=sgst,
                    igst=igst,
                    cess=_sum(i.cess for i in group),
                    total_gst_amount=cgst + sgst + igst,
                    item_count=len(group),
                )
            )
        # sorted() is stable; percentages are unique keys anyway
        return tuple(sorted(breakdown, key=lambda b: b.rate))

    def commodity_summary(
        self,
        items: Sequence[CalculatedLineItem],
        descriptions: Mapping[str, str] | None = None,
    ) -> tuple[CommodityCodeSummary, ...]:
        descriptions = descriptions or {}
        groups: dict[str, list[CalculatedLineItem]] = {}
        for item in items:
            code = item.commodity_code
            if code is None:
                continue
            groups.setdefault(code, []).append(item)

        summary = []
        for code, group in groups.items():
            quantity = sum(i.quantity for i in group)
            total_amount = _sum(i.taxable_amount for i in group)
            if quantity == 0:
                unit_price = ZERO
            else:
                unit_price = quantize(total_amount / quantity, _UNIT_PRICE_PLACES)

            summary.append(
                CommodityCodeSummary(
                    commodity_code=code,
                    description=descriptions.get(code),
                    quantity=quantity,
                    unit_price=unit_price,
                    total_amount=total_amount,
                    # Same code is expected to carry one rate; first item wins
                    rate=group[0].rate.percentage,
                    taxable_value=total_amount,
                    cgst=_sum(i.cgst for i in group),
                    sgst=_sum(i.sgst for i in group),
                    igst=_sum(i.igst for i in group),
                    cess=_sum(i.cess for i in group),
                )
            )
        return tuple(summary)

    def totals(self, items: Sequence[CalculatedLineItem]) -> Totals:
        total_cgst = _sum(i.cgst for i in items)
        total_sgst = _sum(i.sgst for i in items)
        total_igst = _sum(i.igst for i in items)
        return Totals(
            subtotal=_sum(i.taxable_amount for i in items),
            total_cgst=total_cgst,
            total_sgst=total_sgst,
            total_igst=total_igst,
            total_cess=_sum(i.cess for i in items),
            total_gst=total_cgst + total_sgst + total_igst,
        )
