"""
Tests for rate resolution.

Covers:
- CatalogSnapshot lookup (table rate, row override, unmapped category)
- Effective-date filtering and duplicate rows
- RateResolver precedence and the tax kill switch
"""

from datetime import date
from decimal import Decimal

import pytest

from gst_config.schema import TaxConfig, TaxMode
from gst_engines.rates import CatalogSnapshot, RateResolver, RateStore
from gst_kernel.domain.rates import CatalogEntry, RateCategory, RateInfo
from gst_kernel.exceptions import InvalidConfigurationError, InvalidRateError
from tests.conftest import make_item


class TestCatalogSnapshot:

    def test_table_rate_for_category(self, rate_table):
        snapshot = CatalogSnapshot([CatalogEntry("PHONE-1", "Mobile")], rate_table)
        rate = snapshot.resolve_rate("PHONE-1")
        assert rate.percentage == Decimal("18")
        assert rate.commodity_code == "8517"

    def test_unknown_product(self, rate_table):
        assert CatalogSnapshot([], rate_table).resolve_rate("PHONE-1") is None

    def test_unmapped_category(self, rate_table):
        snapshot = CatalogSnapshot([CatalogEntry("LAPTOP-1", "laptop")], rate_table)
        assert snapshot.resolve_rate("LAPTOP-1") is None

    def test_row_override_keeps_table_code(self, rate_table):
        snapshot = CatalogSnapshot(
            [CatalogEntry("CASE-1", "case", rate_override=Decimal("5"))], rate_table
        )
        rate = snapshot.resolve_rate("CASE-1")
        assert rate.percentage == Decimal("5")
        assert rate.category is RateCategory.R5
        assert rate.commodity_code == "3926"

    def test_row_override_on_unmapped_category(self, rate_table):
        snapshot = CatalogSnapshot(
            [CatalogEntry("X-1", "misc", rate_override=Decimal("3"))], rate_table
        )
        rate = snapshot.resolve_rate("X-1")
        assert rate.category is RateCategory.CUSTOM
        assert rate.commodity_code is None

    def test_row_code_wins_over_table(self, rate_table):
        snapshot = CatalogSnapshot(
            [CatalogEntry("CHG-1", "charger", commodity_code="8504")], rate_table
        )
        assert snapshot.resolve_rate("CHG-1").commodity_code == "8504"

    def test_effective_date_filter(self, rate_table):
        entries = [
            CatalogEntry("CASE-1", "case", rate_override=Decimal("18"),
                         effective_to=date(2026, 3, 31)),
            CatalogEntry("CASE-1", "case", effective_from=date(2026, 4, 1)),
        ]
        before = CatalogSnapshot(entries, rate_table, as_of=date(2026, 3, 1))
        after = CatalogSnapshot(entries, rate_table, as_of=date(2026, 4, 1))
        assert before.resolve_rate("CASE-1").percentage == Decimal("18")
        assert after.resolve_rate("CASE-1").percentage == Decimal("12")

    def test_duplicate_rows_rejected(self, rate_table):
        entries = [CatalogEntry("CASE-1", "case"), CatalogEntry("CASE-1", "cover")]
        with pytest.raises(InvalidConfigurationError, match="duplicate entry") as exc:
            CatalogSnapshot(entries, rate_table)
        assert exc.value.code == "INVALID_CONFIGURATION"
        assert exc.value.field == "catalog"
        assert exc.value.value == "CASE-1"

    def test_entry_and_len(self, rate_table, phone_catalog):
        snapshot = CatalogSnapshot(phone_catalog, rate_table)
        assert len(snapshot) == 3
        assert snapshot.entry("CASE-1").category == "case"
        assert snapshot.entry("NOPE") is None

    def test_is_rate_store(self):
        assert isinstance(CatalogSnapshot([]), RateStore)


class TestRateResolverPrecedence:
    """override -> catalog -> config default, after the kill switch."""

    def setup_method(self):
        self.resolver = RateResolver()
        self.config = TaxConfig()

    @pytest.fixture(autouse=True)
    def _catalog(self, rate_table, phone_catalog):
        self.catalog = CatalogSnapshot(phone_catalog, rate_table)

    def test_catalog_rate(self):
        rate = self.resolver.resolve(make_item("CASE-1"), self.catalog, self.config)
        assert rate.percentage == Decimal("12")

    def test_default_rate_when_uncatalogued(self):
        rate = self.resolver.resolve(make_item("UNKNOWN"), self.catalog, self.config)
        assert rate == self.config.default_rate_info

    def test_transaction_override(self):
        rate = self.resolver.resolve(
            make_item("CASE-1"), self.catalog, self.config, override_rate=Decimal("28")
        )
        assert rate.percentage == Decimal("28")
        assert rate.category is RateCategory.R28
        # classification survives the override
        assert rate.commodity_code == "3926"

    def test_item_override_beats_transaction_override(self):
        item = make_item("PHONE-1", rate_override="5")
        rate = self.resolver.resolve(
            item, self.catalog, self.config, override_rate=Decimal("28")
        )
        assert rate.percentage == Decimal("5")
        assert rate.commodity_code == "8517"

    def test_override_out_of_range(self):
        with pytest.raises(InvalidRateError):
            self.resolver.resolve(
                make_item("CASE-1"), self.catalog, self.config,
                override_rate=Decimal("-2"),
            )

    def test_allows_tax_false_forces_exempt(self):
        rate = self.resolver.resolve(
            make_item("PHONE-1", rate_override="18"),
            self.catalog,
            TaxConfig(allows_tax=False),
            override_rate=Decimal("28"),
        )
        assert rate == RateInfo.exempt()

    def test_no_tax_mode_forces_exempt(self):
        rate = self.resolver.resolve(
            make_item("PHONE-1", rate_override="18"),
            self.catalog,
            TaxConfig(mode=TaxMode.NO_TAX),
            override_rate=Decimal("28"),
        )
        assert rate.is_exempt

    def test_custom_store(self):
        class FixedStore:
            def resolve_rate(self, product_ref):
                return RateInfo.of("5", commodity_code="0000")

        rate = self.resolver.resolve(make_item("ANY"), FixedStore(), self.config)
        assert rate.percentage == Decimal("5")
