"""Tests for India slab tax, surcharge and cess."""

import pytest

from esopcalc.sdk.taxes import (
    load_india_tax_rules,
    listed_cg_surcharge_rate,
    slab_tax,
    surcharge_rate,
    total_tax_from_income,
)


@pytest.fixture
def rules():
    return load_india_tax_rules()


class TestSlabTax:
    """Tests for slab_tax and total_tax_from_income."""

    def test_zero_income(self, rules):
        """Test no tax on zero income."""
        assert total_tax_from_income(0, rules) == 0

    def test_below_first_slab(self, rules):
        """Test income within the 0% slab."""
        assert slab_tax(400_000, rules) == 0

    def test_ten_lakh(self, rules):
        """Test 10L: 5% on 4-8L plus 10% on 8-10L, plus 4% cess."""
        assert slab_tax(1_000_000, rules) == pytest.approx(40_000)
        assert total_tax_from_income(1_000_000, rules) == pytest.approx(41_600)

    def test_sixty_lakh_with_surcharge(self, rules):
        """Test 60L attracts the 10% surcharge before cess."""
        base = 20_000 + 40_000 + 60_000 + 80_000 + 100_000 + 3_600_000 * 0.30
        assert slab_tax(6_000_000, rules) == pytest.approx(base)
        assert total_tax_from_income(6_000_000, rules) == pytest.approx(base * 1.10 * 1.04)

    def test_non_decreasing(self, rules):
        """Test total tax never decreases as income grows."""
        previous = 0.0
        for income in range(0, 30_000_001, 250_000):
            tax = total_tax_from_income(income, rules)
            assert tax >= previous
            previous = tax


class TestSurcharge:
    """Tests for surcharge steps and the listed capital gains cap."""

    @pytest.mark.parametrize("income,expected", [
        (5_000_000, 0.0),
        (5_000_001, 0.10),
        (10_000_000, 0.10),
        (15_000_000, 0.15),
        (25_000_000, 0.25),
    ])
    def test_surcharge_steps(self, rules, income, expected):
        """Test the step that covers the income sets the rate."""
        assert surcharge_rate(income, rules) == expected

    def test_listed_cap(self, rules):
        """Test surcharge on listed gains is capped at 15%."""
        assert listed_cg_surcharge_rate(25_000_000, rules) == 0.15
        assert listed_cg_surcharge_rate(7_000_000, rules) == 0.10
