"""
Plain-data conversion of calculation results.

Decimals are written as strings (never floats) and enums as their values,
so ``result_to_json`` is byte-identical for identical results and
``result_from_dict(result_to_dict(r)) == r`` holds.

``invoice_tax_details`` builds the flat summary row that persistence
layers store next to an invoice; the two breakdowns travel as JSON text.
"""

from __future__ import annotations

import json
from collections.abc import Mapping
from datetime import datetime
from decimal import Decimal
from typing import Any

from gst_config.schema import DisplayPolicy, TaxMode
from gst_engines.types import (
    CalculatedLineItem,
    CalculationResult,
    CommodityCodeSummary,
    Jurisdiction,
    RateBreakdown,
)
from gst_kernel.domain.rates import RateCategory, RateInfo

_AMOUNT_FIELDS = (
    "subtotal",
    "total_cgst",
    "total_sgst",
    "total_igst",
    "total_cess",
    "total_gst",
    "round_off_amount",
    "grand_total",
)


def _dec(value: Decimal | None) -> str | None:
    return None if value is None else str(value)


def rate_to_dict(rate: RateInfo) -> dict[str, Any]:
    return {
        "category": rate.category.value,
        "percentage": _dec(rate.percentage),
        "commodity_code": rate.commodity_code,
        "cess_percentage": _dec(rate.cess_percentage),
    }


def item_to_dict(item: CalculatedLineItem) -> dict[str, Any]:
    return {
        "product_ref": item.product_ref,
        "description": item.description,
        "quantity": item.quantity,
        "unit_price": _dec(item.unit_price),
        "rate": rate_to_dict(item.rate),
        "gross_amount": _dec(item.gross_amount),
        "taxable_amount": _dec(item.taxable_amount),
        "cgst": _dec(item.cgst),
        "sgst": _dec(item.sgst),
        "igst": _dec(item.igst),
        "cess": _dec(item.cess),
    }


def breakdown_to_dict(row: RateBreakdown) -> dict[str, Any]:
    return {
        "rate": _dec(row.rate),
        "taxable_amount": _dec(row.taxable_amount),
        "cgst": _dec(row.cgst),
        "sgst": _dec(row.sgst),
        "igst": _dec(row.igst),
        "cess": _dec(row.cess),
        "total_gst_amount": _dec(row.total_gst_amount),
        "item_count": row.item_count,
    }


def summary_to_dict(row: CommodityCodeSummary) -> dict[str, Any]:
    return {
        "commodity_code": row.commodity_code,
        "description": row.description,
        "quantity": row.quantity,
        "unit_price": _dec(row.unit_price),
        "total_amount": _dec(row.total_amount),
        "rate": _dec(row.rate),
        "taxable_value": _dec(row.taxable_value),
        "cgst": _dec(row.cgst),
        "sgst": _dec(row.sgst),
        "igst": _dec(row.igst),
        "cess": _dec(row.cess),
    }


def result_to_dict(result: CalculationResult) -> dict[str, Any]:
    """Convert a result to JSON-safe primitives."""
    data: dict[str, Any] = {
        "mode": result.mode.value,
        "jurisdiction": result.jurisdiction.value,
        "jurisdiction_assumed": result.jurisdiction_assumed,
        "seller_id": result.seller_id,
        "buyer_id": result.buyer_id,
        "items": [item_to_dict(i) for i in result.items],
        "rate_breakdown": [breakdown_to_dict(b) for b in result.rate_breakdown],
        "commodity_summary": [summary_to_dict(s) for s in result.commodity_summary],
    }
    for name in _AMOUNT_FIELDS:
        data[name] = _dec(getattr(result, name))
    data["show_to_counterparty"] = result.show_to_counterparty
    data["display_policy"] = result.display_policy.value
    return data


def result_to_json(result: CalculationResult, indent: int | None = None) -> str:
    """Deterministic JSON text (sorted keys) for a result."""
    return json.dumps(result_to_dict(result), sort_keys=True, indent=indent)


def _rate_from_dict(data: Mapping[str, Any]) -> RateInfo:
    return RateInfo(
        category=RateCategory(data["category"]),
        percentage=Decimal(data["percentage"]),
        commodity_code=data.get("commodity_code"),
        cess_percentage=Decimal(data.get("cess_percentage") or "0"),
    )


def _item_from_dict(data: Mapping[str, Any]) -> CalculatedLineItem:
    return CalculatedLineItem(
        product_ref=data["product_ref"],
        description=data["description"],
        quantity=int(data["quantity"]),
        unit_price=Decimal(data["unit_price"]),
        rate=_rate_from_dict(data["rate"]),
        gross_amount=Decimal(data["gross_amount"]),
        taxable_amount=Decimal(data["taxable_amount"]),
        cgst=Decimal(data["cgst"]),
        sgst=Decimal(data["sgst"]),
        igst=Decimal(data["igst"]),
        cess=Decimal(data["cess"]),
    )


def _breakdown_from_dict(data: Mapping[str, Any]) -> RateBreakdown:
    return RateBreakdown(
        rate=Decimal(data["rate"]),
        taxable_amount=Decimal(data["taxable_amount"]),
        cgst=Decimal(data["cgst"]),
        sgst=Decimal(data["sgst"]),
        igst=Decimal(data["igst"]),
        cess=Decimal(data["cess"]),
        total_gst_amount=Decimal(data["total_gst_amount"]),
        item_count=int(data["item_count"]),
    )


def _summary_from_dict(data: Mapping[str, Any]) -> CommodityCodeSummary:
    return CommodityCodeSummary(
        commodity_code=data["commodity_code"],
        description=data.get("description"),
        quantity=int(data["quantity"]),
        unit_price=Decimal(data["unit_price"]),
        total_amount=Decimal(data["total_amount"]),
        rate=Decimal(data["rate"]),
        taxable_value=Decimal(data["taxable_value"]),
        cgst=Decimal(data["cgst"]),
        sgst=Decimal(data["sgst"]),
        igst=Decimal(data["igst"]),
        cess=Decimal(data["cess"]),
    )


def result_from_dict(data: Mapping[str, Any]) -> CalculationResult:
    """
    Rebuild a result from ``result_to_dict`` output.

    Raises:
        KeyError: if a required field is missing.
        ValueError: for unknown enum values or malformed amounts.
    """
    return CalculationResult(
        mode=TaxMode(data["mode"]),
        jurisdiction=Jurisdiction(data["jurisdiction"]),
        jurisdiction_assumed=bool(data["jurisdiction_assumed"]),
        seller_id=data.get("seller_id"),
        buyer_id=data.get("buyer_id"),
        items=tuple(_item_from_dict(i) for i in data["items"]),
        rate_breakdown=tuple(_breakdown_from_dict(b) for b in data["rate_breakdown"]),
        commodity_summary=tuple(
            _summary_from_dict(s) for s in data["commodity_summary"]
        ),
        show_to_counterparty=bool(data["show_to_counterparty"]),
        display_policy=DisplayPolicy(data["display_policy"]),
        **{name: Decimal(data[name]) for name in _AMOUNT_FIELDS},
    )


def invoice_tax_details(
    transaction_id: str | int,
    result: CalculationResult,
    recorded_at: datetime,
) -> dict[str, Any]:
    """
    Flat per-invoice tax row for persistence.

    ``recorded_at`` is supplied by the caller; the engine never reads the
    clock.
    """
    return {
        "transaction_id": transaction_id,
        "mode": result.mode.value,
        "seller_id": result.seller_id,
        "buyer_id": result.buyer_id,
        "is_interstate": result.is_interstate,
        "taxable_amount": _dec(result.subtotal),
        "cgst_amount": _dec(result.total_cgst),
        "sgst_amount": _dec(result.total_sgst),
        "igst_amount": _dec(result.total_igst),
        "cess_amount": _dec(result.total_cess),
        "total_gst_amount": _dec(result.total_gst),
        "round_off_amount": _dec(result.round_off_amount),
        "rate_breakdown": json.dumps(
            [breakdown_to_dict(b) for b in result.rate_breakdown], sort_keys=True
        ),
        "commodity_summary": json.dumps(
            [summary_to_dict(s) for s in result.commodity_summary], sort_keys=True
        ),
        "recorded_at": recorded_at.isoformat(),
    }
