"""
Tests for rate domain values.

Covers:
- RateCategory classification
- RateInfo invariants and helpers
- CatalogEntry effective dating
- RateTable normalization
"""

from datetime import date
from decimal import Decimal

import pytest

from gst_kernel.domain.rates import CatalogEntry, RateCategory, RateInfo, RateTable
from gst_kernel.exceptions import InvalidRateError


class TestRateCategory:

    @pytest.mark.parametrize(
        "percentage,expected",
        [
            ("0", RateCategory.EXEMPT),
            ("5", RateCategory.R5),
            ("12", RateCategory.R12),
            ("18.00", RateCategory.R18),
            ("28", RateCategory.R28),
            ("3", RateCategory.CUSTOM),
        ],
    )
    def test_for_percentage(self, percentage, expected):
        assert RateCategory.for_percentage(Decimal(percentage)) is expected

    def test_standard_percentage(self):
        assert RateCategory.R12.standard_percentage == Decimal("12")
        assert RateCategory.CUSTOM.standard_percentage is None


class TestRateInfo:

    def test_of_derives_category(self):
        rate = RateInfo.of("18", commodity_code="8517")
        assert rate.category is RateCategory.R18
        assert rate.percentage == Decimal("18")
        assert rate.commodity_code == "8517"

    def test_exempt(self):
        rate = RateInfo.exempt()
        assert rate.is_exempt
        assert rate.percentage == Decimal("0")

    def test_category_coerced_from_value(self):
        rate = RateInfo(category="gst_5", percentage=Decimal("5"))
        assert rate.category is RateCategory.R5

    def test_out_of_range_percentage_fails_fast(self):
        with pytest.raises(InvalidRateError):
            RateInfo(category=RateCategory.CUSTOM, percentage=Decimal("101"))

    def test_negative_cess_rejected(self):
        with pytest.raises(InvalidRateError) as exc_info:
            RateInfo(
                category=RateCategory.R28,
                percentage=Decimal("28"),
                cess_percentage=Decimal("-1"),
            )
        assert exc_info.value.source == "cess_rate"

    def test_float_percentage_rejected(self):
        with pytest.raises(TypeError):
            RateInfo.of(18.0)

    def test_blank_commodity_code_is_none(self):
        assert RateInfo.of("5", commodity_code="  ").commodity_code is None

    def test_with_commodity_code_keeps_rate(self):
        rate = RateInfo.of("12", commodity_code="3926")
        moved = rate.with_commodity_code("3919")
        assert moved.percentage == Decimal("12")
        assert moved.commodity_code == "3919"
        assert rate.commodity_code == "3926"


class TestCatalogEntry:

    def test_always_effective_without_dates(self):
        entry = CatalogEntry(product_ref="SKU-1", category="mobile")
        assert entry.is_effective(date(2020, 1, 1))
        assert entry.is_effective(None)

    def test_effective_window_inclusive(self):
        entry = CatalogEntry(
            product_ref="SKU-1",
            category="mobile",
            effective_from=date(2026, 1, 1),
            effective_to=date(2026, 3, 31),
        )
        assert entry.is_effective(date(2026, 1, 1))
        assert entry.is_effective(date(2026, 3, 31))
        assert not entry.is_effective(date(2025, 12, 31))
        assert not entry.is_effective(date(2026, 4, 1))

    def test_inverted_window_rejected(self):
        with pytest.raises(ValueError, match="precedes"):
            CatalogEntry(
                product_ref="SKU-1",
                category="mobile",
                effective_from=date(2026, 2, 1),
                effective_to=date(2026, 1, 1),
            )

    def test_empty_product_ref_rejected(self):
        with pytest.raises(ValueError):
            CatalogEntry(product_ref=" ", category="mobile")

    def test_override_validated(self):
        with pytest.raises(InvalidRateError):
            CatalogEntry(product_ref="SKU-1", category="x", rate_override=Decimal("-5"))


class TestRateTable:

    def setup_method(self):
        self.table = RateTable(
            rates={
                "Mobile": RateInfo.of("18", commodity_code="8517"),
                " case ": RateInfo.of("12", commodity_code="3926"),
            },
            descriptions={"8517": "Mobile Phones"},
        )

    def test_lookup_case_insensitive(self):
        assert self.table.lookup("MOBILE").percentage == Decimal("18")
        assert self.table.lookup("case").commodity_code == "3926"

    def test_unknown_category(self):
        assert self.table.lookup("laptop") is None
        assert self.table.lookup(None) is None

    def test_describe(self):
        assert self.table.describe("8517") == "Mobile Phones"
        assert self.table.describe("3926") is None

    def test_categories_sorted(self):
        assert self.table.categories == ("case", "mobile")

    def test_duplicate_after_normalization_rejected(self):
        with pytest.raises(ValueError, match="Duplicate"):
            RateTable(rates={"mobile": RateInfo.of("18"), "MOBILE": RateInfo.of("12")})

    def test_rates_read_only(self):
        with pytest.raises(TypeError):
            self.table.rates["laptop"] = RateInfo.of("18")
