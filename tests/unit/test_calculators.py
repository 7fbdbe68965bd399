"""50/30/20 split, freelancer tax comparison, compound growth."""

import pytest

from moneyglow.finance.calculators import (
    estimate_tax,
    flat8_tax,
    future_value,
    graduated_income_tax,
    graduated_total,
    project_compound,
    split_budget,
)


class TestSplitBudget:
    def test_exact_split(self):
        split = split_budget(40_000)
        assert (split.needs, split.wants, split.savings) == pytest.approx((20_000, 12_000, 8_000))

    def test_rounded_to_whole_pesos(self):
        split = split_budget(10_001, rounded=True)
        # 5000.5 / 3000.3 / 2000.2
        assert (split.needs, split.wants, split.savings) == (5001, 3000, 2000)


class TestGraduatedTax:
    @pytest.mark.parametrize(
        ("taxable", "expected"),
        [
            (0, 0),
            (250_000, 0),
            (400_000, 22_500),
            (800_000, 102_500),
            (2_000_000, 402_500),
            (8_000_000, 2_202_500),
            (500_000, 42_500),
        ],
    )
    def test_brackets(self, taxable, expected):
        assert graduated_income_tax(taxable) == pytest.approx(expected)

    def test_osd_and_percentage_tax(self):
        result = graduated_total(1_000_000)
        assert result.taxable_income == pytest.approx(600_000)
        assert result.income_tax == pytest.approx(62_500)
        assert result.percentage_tax == pytest.approx(30_000)
        assert result.total == pytest.approx(92_500)


class TestEstimateTax:
    def test_flat8_below_exemption(self):
        assert flat8_tax(200_000) == 0

    def test_recommends_flat8_when_cheaper(self):
        estimate = estimate_tax(1_000_000)
        assert estimate.flat8 == pytest.approx(60_000)
        assert estimate.flat8_eligible is True
        assert estimate.recommended == "flat8"
        assert estimate.savings == pytest.approx(32_500)

    def test_above_vat_threshold_is_graduated_only(self):
        estimate = estimate_tax(5_000_000)
        assert estimate.flat8_eligible is False
        assert estimate.recommended == "graduated"
        assert estimate.savings == 0


class TestCompound:
    def test_zero_rate_is_plain_deposits(self):
        assert future_value(1_000, 0, 24) == 24_000

    def test_projection(self):
        projection = project_compound(monthly=1_000, years=2, annual_rate=6)
        assert projection.total_deposited == 24_000
        assert projection.future_value == pytest.approx(25_431.96, rel=1e-4)
        assert projection.interest_earned == pytest.approx(projection.future_value - 24_000)
        assert [y.year for y in projection.breakdown] == [1, 2]
        assert projection.breakdown[-1].total == pytest.approx(projection.future_value)
        assert projection.breakdown[0].deposited == 12_000
