"""
Module: gst_engines
Responsibility:
    Package entrypoint that re-exports the public symbols of the pure GST
    engines. This is the canonical import surface for ``gst_services``
    and scripts.

Architecture position:
    Engines -- pure calculation layer, zero I/O.
    May only import gst_kernel and gst_config (and sibling engine modules).
    MUST NOT import gst_services.

Invariants enforced:
    - Purity: engines NEVER call ``datetime.now()`` or ``date.today()``.
      Timestamps are passed in by the caller.
    - Decimal-only arithmetic: all monetary amounts use ``Decimal``.
    - Determinism: identical inputs always produce identical outputs.

Audit relevance:
    ``GstCalculator.calculate`` and ``ReconciliationValidator.validate``
    are traced via ``@traced_engine`` (see ``gst_engines.tracer``),
    emitting GST_ENGINE_TRACE log records.

Usage:
    from gst_engines import GstCalculator, ReconciliationValidator
    from gst_engines import result_to_json, to_exclusive
"""

from gst_engines.aggregation import Aggregator
from gst_engines.calculator import GstCalculator
from gst_engines.jurisdiction import JurisdictionResolver
from gst_engines.line_item import LineItemTaxCalculator
from gst_engines.pricing import (
    extract_tax,
    margin_on_inclusive,
    suggest_inclusive_price,
    to_exclusive,
    to_inclusive,
)
from gst_engines.rates import CatalogSnapshot, RateResolver, RateStore
from gst_engines.reconciliation import ReconciliationValidator
from gst_engines.rounding import RoundingPolicy
from gst_engines.serialization import (
    invoice_tax_details,
    result_from_dict,
    result_to_dict,
    result_to_json,
)
from gst_engines.tracer import compute_input_fingerprint, traced_engine
from gst_engines.types import (
    CalculatedLineItem,
    CalculationResult,
    CommodityCodeSummary,
    IssueCode,
    IssueSeverity,
    Jurisdiction,
    RateBreakdown,
    Totals,
    ValidationIssue,
)

__all__ = [
    # Calculation
    "GstCalculator",
    "JurisdictionResolver",
    "RateResolver",
    "RateStore",
    "CatalogSnapshot",
    "LineItemTaxCalculator",
    "Aggregator",
    "RoundingPolicy",
    # Validation
    "ReconciliationValidator",
    "IssueCode",
    "IssueSeverity",
    "ValidationIssue",
    # Result types
    "CalculatedLineItem",
    "CalculationResult",
    "CommodityCodeSummary",
    "Jurisdiction",
    "RateBreakdown",
    "Totals",
    # Pricing
    "to_inclusive",
    "to_exclusive",
    "extract_tax",
    "margin_on_inclusive",
    "suggest_inclusive_price",
    # Serialization
    "result_to_dict",
    "result_to_json",
    "result_from_dict",
    "invoice_tax_details",
    # Tracing
    "traced_engine",
    "compute_input_fingerprint",
]
