"""
Pytest fixtures for the GST engine test suite.

Provides:
- Identifier fixtures (same-state and other-state GSTINs)
- The bundled rate table and a calculator wired to it
- A log capture helper bound to the gst_kernel logger hierarchy
"""

import json
import logging
from decimal import Decimal
from io import StringIO

import pytest

from gst_config.loader import load_default_rate_table
from gst_config.schema import TaxConfig
from gst_engines.calculator import GstCalculator
from gst_kernel.domain.identifiers import GstinValidator
from gst_kernel.domain.rates import CatalogEntry
from gst_kernel.domain.values import LineItem
from gst_kernel.logging_config import (
    LogContext,
    StructuredFormatter,
    configure_logging,
    reset_logging,
)

# Maharashtra seller, Maharashtra and Karnataka buyers
SELLER_MH = "27AAPFU0939F1ZV"
BUYER_MH = "27AABCU9603R1ZM"
BUYER_KA = "29AAPFU0939F1ZR"


@pytest.fixture(autouse=True)
def _clean_logging():
    """Reset logging state between tests."""
    reset_logging()
    LogContext.clear()
    yield
    LogContext.clear()
    reset_logging()


class LogCapture:
    """Collects JSON log records emitted under gst_kernel."""

    def __init__(self):
        self.stream = StringIO()
        self.handler = logging.StreamHandler(self.stream)
        self.handler.setFormatter(StructuredFormatter())

    @property
    def records(self) -> list[dict]:
        lines = self.stream.getvalue().strip().split("\n")
        return [json.loads(line) for line in lines if line]

    def messages(self) -> list[str]:
        return [r["message"] for r in self.records]

    def by_message(self, message: str) -> list[dict]:
        return [r for r in self.records if r["message"] == message]


@pytest.fixture
def log_capture() -> LogCapture:
    capture = LogCapture()
    configure_logging(level=logging.DEBUG, handler=capture.handler)
    return capture


@pytest.fixture
def rate_table():
    return load_default_rate_table()


@pytest.fixture
def identifier_validator():
    return GstinValidator()


@pytest.fixture
def calculator(identifier_validator, rate_table):
    return GstCalculator(identifier_validator, rate_table)


@pytest.fixture
def config():
    return TaxConfig(round_off=False)


@pytest.fixture
def phone_catalog():
    return (
        CatalogEntry(product_ref="PHONE-1", category="mobile"),
        CatalogEntry(product_ref="CASE-1", category="case"),
        CatalogEntry(product_ref="CABLE-1", category="cable"),
    )


def make_item(
    product_ref: str = "PHONE-1",
    quantity: int = 1,
    unit_price: str = "1000",
    rate_override: str | None = None,
    description: str = "",
) -> LineItem:
    return LineItem(
        product_ref=product_ref,
        description=description or product_ref,
        quantity=quantity,
        unit_price=Decimal(unit_price),
        rate_override=Decimal(rate_override) if rate_override is not None else None,
    )
