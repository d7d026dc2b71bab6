"""Tests for grant portfolios, tranches and holding periods."""

from datetime import date

import pytest
from pydantic import ValidationError

from esopcalc.sdk import GrantPortfolio, Tranche, holding_months
from esopcalc.sdk.coerce import parse_date, round_half_up, to_amount


class TestGrantPortfolio:
    """Tests for GrantPortfolio aggregation and editing."""

    def test_from_lots_assigns_ids(self):
        portfolio = GrantPortfolio.from_lots([(100, 10), (50, 20)])
        assert [t.id for t in portfolio.tranches] == [1, 2]
        assert portfolio.total_shares == 150
        assert portfolio.exercise_cost == pytest.approx(2_000)
        assert portfolio.weighted_avg_exercise_price == pytest.approx(2_000 / 150)

    def test_empty_lots_give_one_empty_tranche(self):
        portfolio = GrantPortfolio.from_lots([])
        assert len(portfolio.tranches) == 1
        assert portfolio.total_shares == 0
        assert portfolio.weighted_avg_exercise_price == 0

    def test_duplicate_ids_rejected(self):
        with pytest.raises(ValidationError):
            GrantPortfolio(tranches=(Tranche(id=1), Tranche(id=1)))

    def test_add_returns_new_portfolio(self):
        """Test editing leaves the original untouched."""
        original = GrantPortfolio.from_lots([(100, 10)])
        added = original.add_tranche(share_count=5, exercise_price=1)
        assert len(original.tranches) == 1
        assert [t.id for t in added.tranches] == [1, 2]

    def test_remove(self):
        portfolio = GrantPortfolio.from_lots([(100, 10), (50, 20)])
        assert [t.id for t in portfolio.remove_tranche(1).tranches] == [2]

    def test_last_tranche_not_removed(self):
        portfolio = GrantPortfolio.from_lots([(100, 10)])
        assert portfolio.remove_tranche(1) is portfolio

    def test_remove_unknown_id_is_noop(self):
        portfolio = GrantPortfolio.from_lots([(100, 10), (50, 20)])
        assert portfolio.remove_tranche(99) is portfolio

    def test_update(self):
        portfolio = GrantPortfolio.from_lots([(100, 10), (50, 20)])
        updated = portfolio.update_tranche(2, share_count=75)
        assert updated.tranches[1].share_count == 75
        assert updated.tranches[0] == portfolio.tranches[0]

    def test_negative_and_bad_values_coerce(self):
        tranche = Tranche(id=1, share_count=-10, exercise_price="oops")
        assert tranche.share_count == 0
        assert tranche.exercise_price == 0

    def test_perquisite_ignores_underwater_tranches(self):
        portfolio = GrantPortfolio.from_lots([(100, 10), (100, 30)])
        assert portfolio.perquisite(20) == pytest.approx(1_000)


class TestHoldingMonths:
    """Tests for calendar-month holding periods."""

    def test_days_ignored(self):
        assert holding_months("2025-01-31", "2025-02-01") == 1
        assert holding_months("2025-01-01", "2025-01-31") == 0

    def test_across_years(self):
        assert holding_months(date(2023, 11, 5), date(2025, 2, 1)) == 15

    def test_sale_before_exercise(self):
        assert holding_months("2025-06-01", "2025-01-01") == 0

    def test_missing_dates(self):
        assert holding_months(None, "2025-01-01") == 0
        assert holding_months("garbage", "2025-01-01") == 0


class TestCoerce:
    """Tests for input coercion helpers."""

    @pytest.mark.parametrize("value,expected", [
        ("1,20,000", 120_000),
        (" 5000 ", 5_000),
        ("", 0),
        (None, 0),
        (True, 0),
        ("nan", 0),
        (float("inf"), 0),
        (-3.5, -3.5),
    ])
    def test_to_amount(self, value, expected):
        assert to_amount(value) == expected

    def test_round_half_up(self):
        assert round_half_up(2.5) == 3
        assert round_half_up(3.5) == 4
        assert round_half_up(2.49) == 2

    def test_parse_date(self):
        assert parse_date("2025-03-04") == date(2025, 3, 4)
        assert parse_date("2025-03-04T10:00:00") == date(2025, 3, 4)
        assert parse_date("") is None
        assert parse_date(20250304) is None
