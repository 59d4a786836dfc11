"""
Tests for TaxConfig and TaxMode.

Covers:
- Defaults and validation in __post_init__
- Mode display mapping and identifier requirements
- Kill switch (applies_tax)
- from_dict / with_defaults
"""

from decimal import Decimal

import pytest

from gst_config.schema import DisplayPolicy, MissingIdentifierPolicy, TaxConfig, TaxMode
from gst_kernel.domain.rates import RateCategory
from gst_kernel.exceptions import InvalidConfigurationError, InvalidRateError


class TestTaxModeDisplay:
    """Each mode maps to a fixed counterparty display."""

    @pytest.mark.parametrize(
        "mode,shown,policy",
        [
            (TaxMode.FULL_TAX, True, DisplayPolicy.FULL_BREAKDOWN),
            (TaxMode.PARTIAL_TAX, False, DisplayPolicy.HIDDEN),
            (TaxMode.REFERENCE_ONLY, True, DisplayPolicy.IDENTIFIER_ONLY),
            (TaxMode.NO_TAX, False, DisplayPolicy.HIDDEN),
        ],
    )
    def test_display_mapping(self, mode, shown, policy):
        assert mode.shows_to_counterparty is shown
        assert mode.display_policy is policy

    def test_requires_identifier(self):
        assert TaxMode.FULL_TAX.requires_identifier
        assert TaxMode.PARTIAL_TAX.requires_identifier
        assert TaxMode.REFERENCE_ONLY.requires_identifier
        assert not TaxMode.NO_TAX.requires_identifier


class TestTaxConfigDefaults:

    def test_retail_defaults(self):
        config = TaxConfig()
        assert config.mode is TaxMode.FULL_TAX
        assert config.default_rate == Decimal("18")
        assert config.default_category is RateCategory.R18
        assert config.tax_included_in_price is False
        assert config.round_off is True
        assert config.allows_tax is True
        assert config.missing_identifier_policy is MissingIdentifierPolicy.INTRASTATE
        assert config.round_tax_at_line is False
        assert config.amount_places == 2
        assert config.rounding_unit == Decimal("1")

    def test_with_defaults_equals_plain_construction(self):
        assert TaxConfig.with_defaults() == TaxConfig()

    def test_default_rate_info(self):
        rate = TaxConfig(default_rate=Decimal("12"), default_category=RateCategory.R12).default_rate_info
        assert rate.percentage == Decimal("12")
        assert rate.category is RateCategory.R12
        assert rate.commodity_code is None


class TestTaxConfigValidation:

    def test_default_rate_out_of_range(self):
        with pytest.raises(InvalidRateError):
            TaxConfig(default_rate=Decimal("101"))

    def test_string_enums_coerced(self):
        config = TaxConfig(mode="partial_tax", missing_identifier_policy="interstate")
        assert config.mode is TaxMode.PARTIAL_TAX
        assert config.missing_identifier_policy is MissingIdentifierPolicy.INTERSTATE

    def test_unknown_mode(self):
        with pytest.raises(InvalidConfigurationError) as exc_info:
            TaxConfig(mode="half_tax")
        assert exc_info.value.code == "INVALID_CONFIGURATION"

    @pytest.mark.parametrize("places", [-1, 7])
    def test_amount_places_bounds(self, places):
        with pytest.raises(InvalidConfigurationError) as exc_info:
            TaxConfig(amount_places=places)
        assert exc_info.value.field == "amount_places"

    def test_amount_places_must_be_int(self):
        with pytest.raises(InvalidConfigurationError):
            TaxConfig(amount_places=True)

    def test_rounding_unit_positive(self):
        with pytest.raises(InvalidConfigurationError) as exc_info:
            TaxConfig(rounding_unit=Decimal("0"))
        assert exc_info.value.field == "rounding_unit"

    def test_rounding_unit_string_converted(self):
        assert TaxConfig(rounding_unit="0.05").rounding_unit == Decimal("0.05")


class TestKillSwitch:

    def test_applies_tax_by_default(self):
        assert TaxConfig().applies_tax()

    def test_allows_tax_false(self):
        assert not TaxConfig(allows_tax=False).applies_tax()

    def test_no_tax_mode(self):
        assert not TaxConfig(mode=TaxMode.NO_TAX).applies_tax()

    def test_no_tax_mode_with_allows_tax(self):
        assert not TaxConfig(mode=TaxMode.NO_TAX, allows_tax=True).applies_tax()

    @pytest.mark.parametrize(
        "mode", [TaxMode.FULL_TAX, TaxMode.PARTIAL_TAX, TaxMode.REFERENCE_ONLY]
    )
    def test_taxing_modes(self, mode):
        assert TaxConfig(mode=mode).applies_tax()


class TestFromDict:

    def test_partial_dict(self):
        config = TaxConfig.from_dict({"mode": "reference_only", "round_off": False})
        assert config.mode is TaxMode.REFERENCE_ONLY
        assert config.round_off is False
        assert config.default_rate == Decimal("18")

    def test_unknown_keys_rejected(self):
        with pytest.raises(InvalidConfigurationError, match="gst_rate"):
            TaxConfig.from_dict({"gst_rate": "18"})
