"""
Per-line tax computation.

Pure function: never fails, never logs on the hot path, never revalidates
its inputs (``LineItem`` enforces quantity >= 1 and unit_price >= 0 at
construction).

    gross    = unit_price * quantity
    taxable  = gross                                   (exclusive pricing)
             = gross / (1 + rate/100), rounded         (inclusive pricing)
    tax      = taxable * rate / 100                    (exact)
    split    = igst = tax                              (interstate)
             = cgst = sgst = tax / 2                   (intrastate)

Only the inclusive-pricing division is rounded (to ``config.amount_places``,
ROUND_HALF_UP); multiplication and halving are exact in Decimal. With
``config.round_tax_at_line`` the line tax is also rounded before the split.
"""

from __future__ import annotations

from gst_config.schema import TaxConfig
from gst_engines.types import CalculatedLineItem, Jurisdiction
from gst_kernel.domain.rates import RateInfo
from gst_kernel.domain.values import HUNDRED, TWO, ZERO, LineItem, quantize


class LineItemTaxCalculator:
    """Compute the taxable base and GST split for one line item."""

    def calculate(
        self,
        item: LineItem,
        rate: RateInfo,
        jurisdiction: Jurisdiction,
        config: TaxConfig,
    ) -> CalculatedLineItem:
        gross = item.unit_price * item.quantity

        if rate.is_exempt:
            return self._build(item, rate, gross, taxable=gross)

        if config.tax_included_in_price:
            taxable = quantize(
                gross / (1 + rate.percentage / HUNDRED), config.amount_places
            )
        else:
            taxable = gross

        tax = taxable * rate.percentage / HUNDRED
        cess = taxable * rate.cess_percentage / HUNDRED
        if config.round_tax_at_line:
            tax = quantize(tax, config.amount_places)
            cess = quantize(cess, config.amount_places)

        if jurisdiction is Jurisdiction.INTERSTATE:
            return self._build(item, rate, gross, taxable, igst=tax, cess=cess)

        half = tax / TWO
        return self._build(item, rate, gross, taxable, cgst=half, sgst=half, cess=cess)

    @staticmethod
    def _build(
        item: LineItem,
        rate: RateInfo,
        gross,
        taxable,
        cgst=ZERO,
        sgst=ZERO,
        igst=ZERO,
        cess=ZERO,
    ) -> CalculatedLineItem:
        return CalculatedLineItem(
            product_ref=item.product_ref,
            description=item.description,
            quantity=item.quantity,
            unit_price=item.unit_price,
            rate=rate,
            gross_amount=gross,
            taxable_amount=taxable,
            cgst=cgst,
            sgst=sgst,
            igst=igst,
            cess=cess,
        )
