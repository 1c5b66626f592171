"""Unit tests for TaxCalculator.

Tests the annualised bracket withholding and the swappable tax table.
"""

from decimal import Decimal

import pytest
from hypothesis import given, settings, strategies as st

from fieldops_engine.calculators.tax_calculator import TaxCalculator, TaxTable
from fieldops_engine.calculators.types import TaxBracket


class TestProgressiveTaxCalculation:
    """Test progressive tax bracket calculations."""

    def test_single_bracket_calculation(self):
        """Single bracket applies to full income."""
        calc = TaxCalculator()
        brackets = (TaxBracket(Decimal("0"), None, Decimal("0.10")),)

        assert calc._calculate_progressive_tax(Decimal("1000"), brackets) == Decimal("100")

    def test_multiple_bracket_calculation(self):
        """Income of 50,000 spans three resident brackets."""
        calc = TaxCalculator()

        # 0 on 18,200 + 16% of 26,800 + 30% of 5,000
        tax = calc._calculate_progressive_tax(Decimal("50000"), calc.table.brackets)

        assert tax == Decimal("5788")

    def test_income_below_first_bracket(self):
        calc = TaxCalculator()

        assert calc._calculate_progressive_tax(Decimal("18200"), calc.table.brackets) == 0

    def test_top_bracket_unbounded(self):
        calc = TaxCalculator()

        # 4,288 + 27,000 + 20,350 + 45% of 10,000
        tax = calc._calculate_progressive_tax(Decimal("200000"), calc.table.brackets)

        assert tax == Decimal("56138")


class TestWithholding:
    """Test per-period withholding."""

    def test_zero_gross(self):
        assert TaxCalculator().calculate_withholding(Decimal("0")) == Decimal("0.00")

    def test_below_tax_free_threshold(self):
        assert TaxCalculator().calculate_withholding(Decimal("330")) == Decimal("0.00")

    def test_weekly_salary_of_2000(self):
        """104,000 a year: 21,988 tax + 2,080 levy, over 52 weeks."""
        assert TaxCalculator().calculate_withholding(Decimal("2000")) == Decimal("462.85")

    def test_no_levy_at_threshold(self):
        """500 a week is exactly 26,000 a year: 1,248 tax and no levy."""
        assert TaxCalculator().calculate_withholding(Decimal("500")) == Decimal("24.00")

    def test_levy_shades_in_above_threshold(self):
        """A cent over the threshold adds a fraction of a cent of levy."""
        calc = TaxCalculator()

        assert calc.calculate_withholding(Decimal("500.01")) == Decimal("24.00")

    def test_shade_in_band(self):
        """31,200 a year: 2,080 tax + 10% of the 5,200 over the threshold."""
        assert TaxCalculator().calculate_withholding(Decimal("600")) == Decimal("50.00")

    def test_full_levy_past_shade_in(self):
        """36,400 a year: 2,912 tax + 2% levy of 728."""
        assert TaxCalculator().calculate_withholding(Decimal("700")) == Decimal("70.00")

    def test_custom_table(self):
        table = TaxTable.from_dict(
            {
                "name": "flat-10",
                "brackets": [{"min": 0, "max": None, "rate": "0.10"}],
                "levy_rate": 0,
            }
        )

        assert table.name == "flat-10"
        assert table.periods_per_year == 52
        assert TaxCalculator(table).calculate_withholding(Decimal("1000")) == Decimal("100.00")

    def test_fortnightly_table(self):
        table = TaxTable(periods_per_year=26)

        # Same annual income as 2,000 a week
        assert TaxCalculator(table).calculate_withholding(Decimal("4000")) == Decimal("925.69")

    def test_never_withholds_more_than_gross(self):
        table = TaxTable(brackets=(TaxBracket(Decimal("0"), None, Decimal("1.5")),), levy_rate=Decimal("0"))

        assert TaxCalculator(table).calculate_withholding(Decimal("100")) == Decimal("100.00")

    @given(
        a=st.decimals(min_value=0, max_value=20000, places=2),
        b=st.decimals(min_value=0, max_value=20000, places=2),
    )
    @settings(max_examples=200)
    def test_withholding_is_monotonic(self, a, b):
        calc = TaxCalculator()
        low, high = sorted((a, b))

        assert calc.calculate_withholding(low) <= calc.calculate_withholding(high)

    @given(
        a=st.decimals(min_value=0, max_value=20000, places=2),
        b=st.decimals(min_value=0, max_value=20000, places=2),
    )
    @settings(max_examples=200)
    def test_net_pay_never_falls_as_gross_rises(self, a, b):
        calc = TaxCalculator()
        low, high = sorted((a, b))

        assert low - calc.calculate_withholding(low) <= high - calc.calculate_withholding(high)

    @pytest.mark.parametrize("gross", ["100", "750", "1500", "3000", "6000"])
    def test_withholding_below_gross(self, gross):
        gross = Decimal(gross)

        assert TaxCalculator().calculate_withholding(gross) < gross
