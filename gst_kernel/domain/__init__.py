"""
Pure domain layer.

Immutable data objects and helpers with NO dependencies on I/O, clocks or
persistence. Everything here is deterministic.
"""

from gst_kernel.domain.identifiers import (
    STATE_CODES,
    GstinValidator,
    TaxIdentifierValidator,
    clean_identifier,
    gstin_check_character,
)
from gst_kernel.domain.rates import (
    CatalogEntry,
    RateCategory,
    RateInfo,
    RateTable,
)
from gst_kernel.domain.values import (
    HUNDRED,
    ZERO,
    LineItem,
    as_decimal,
    quantize,
    validate_percentage,
)

__all__ = [
    "STATE_CODES",
    "GstinValidator",
    "TaxIdentifierValidator",
    "clean_identifier",
    "gstin_check_character",
    "CatalogEntry",
    "RateCategory",
    "RateInfo",
    "RateTable",
    "HUNDRED",
    "ZERO",
    "LineItem",
    "as_decimal",
    "quantize",
    "validate_percentage",
]
