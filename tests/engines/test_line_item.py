"""
Tests for LineItemTaxCalculator.

Covers:
- Exclusive and inclusive pricing
- Intrastate CGST/SGST split vs interstate IGST
- Exempt items
- Cess and line-level rounding options
"""

from decimal import Decimal

from gst_config.schema import TaxConfig
from gst_engines.line_item import LineItemTaxCalculator
from gst_engines.types import Jurisdiction
from gst_kernel.domain.rates import RateCategory, RateInfo
from tests.conftest import make_item

R18 = RateInfo.of("18", commodity_code="8517")


class TestExclusivePricing:

    def setup_method(self):
        self.calc = LineItemTaxCalculator()
        self.config = TaxConfig()

    def test_intrastate_split(self):
        line = self.calc.calculate(
            make_item(quantity=2, unit_price="1000"), R18, Jurisdiction.INTRASTATE, self.config
        )
        assert line.gross_amount == Decimal("2000")
        assert line.taxable_amount == Decimal("2000")
        assert line.cgst == Decimal("180")
        assert line.sgst == Decimal("180")
        assert line.igst == Decimal("0")
        assert line.tax_amount == Decimal("360")
        assert line.total_amount == Decimal("2360")

    def test_interstate_igst(self):
        line = self.calc.calculate(
            make_item(quantity=2, unit_price="1000"), R18, Jurisdiction.INTERSTATE, self.config
        )
        assert line.igst == Decimal("360")
        assert line.cgst == Decimal("0")
        assert line.sgst == Decimal("0")

    def test_odd_tax_split_exact(self):
        """Halving is exact; no paise are lost in the split."""
        line = self.calc.calculate(
            make_item(unit_price="0.05"), R18, Jurisdiction.INTRASTATE, self.config
        )
        assert line.cgst + line.sgst == Decimal("0.05") * Decimal("18") / 100
        assert line.cgst == line.sgst

    def test_commodity_code_carried(self):
        line = self.calc.calculate(make_item(), R18, Jurisdiction.INTRASTATE, self.config)
        assert line.commodity_code == "8517"
        assert line.rate is R18


class TestInclusivePricing:

    def setup_method(self):
        self.calc = LineItemTaxCalculator()
        self.config = TaxConfig(tax_included_in_price=True)

    def test_taxable_extracted(self):
        line = self.calc.calculate(
            make_item(unit_price="2360"), R18, Jurisdiction.INTRASTATE, self.config
        )
        assert line.gross_amount == Decimal("2360")
        assert line.taxable_amount == Decimal("2000.00")
        assert line.tax_amount == Decimal("360.00")

    def test_taxable_rounded_half_up(self):
        # 100 / 1.18 = 84.7457... -> 84.75
        line = self.calc.calculate(
            make_item(unit_price="100"), R18, Jurisdiction.INTERSTATE, self.config
        )
        assert line.taxable_amount == Decimal("84.75")
        assert line.igst == Decimal("84.75") * Decimal("18") / 100

    def test_amount_places_respected(self):
        config = TaxConfig(tax_included_in_price=True, amount_places=0)
        line = self.calc.calculate(
            make_item(unit_price="100"), R18, Jurisdiction.INTRASTATE, config
        )
        assert line.taxable_amount == Decimal("85")


class TestExemptAndZero:

    def setup_method(self):
        self.calc = LineItemTaxCalculator()

    def test_exempt_item(self):
        line = self.calc.calculate(
            make_item(quantity=3, unit_price="50"),
            RateInfo.exempt(),
            Jurisdiction.INTRASTATE,
            TaxConfig(tax_included_in_price=True),
        )
        assert line.taxable_amount == Decimal("150")
        assert line.tax_amount == Decimal("0")
        assert line.cess == Decimal("0")

    def test_zero_price(self):
        line = self.calc.calculate(
            make_item(unit_price="0"), R18, Jurisdiction.INTRASTATE, TaxConfig()
        )
        assert line.taxable_amount == Decimal("0")
        assert line.tax_amount == Decimal("0")


class TestCessAndLineRounding:

    def setup_method(self):
        self.calc = LineItemTaxCalculator()

    def test_cess_on_taxable(self):
        rate = RateInfo(
            category=RateCategory.R28,
            percentage=Decimal("28"),
            cess_percentage=Decimal("12"),
        )
        line = self.calc.calculate(
            make_item(unit_price="1000"), rate, Jurisdiction.INTERSTATE, TaxConfig()
        )
        assert line.igst == Decimal("280")
        assert line.cess == Decimal("120")
        assert line.tax_amount == Decimal("280")
        assert line.total_amount == Decimal("1400")

    def test_unrounded_by_default(self):
        line = self.calc.calculate(
            make_item(unit_price="0.99"), R18, Jurisdiction.INTERSTATE, TaxConfig()
        )
        assert line.igst == Decimal("0.1782")

    def test_round_tax_at_line(self):
        line = self.calc.calculate(
            make_item(unit_price="0.99"),
            R18,
            Jurisdiction.INTRASTATE,
            TaxConfig(round_tax_at_line=True),
        )
        assert line.tax_amount == Decimal("0.18")
        assert line.cgst == Decimal("0.09")
