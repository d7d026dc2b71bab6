"""Tests for the MCP tool functions, called directly."""

import asyncio

import pytest

pytest.importorskip("mcp")

from esopcalc.mcp import server  # noqa: E402


def india_args(**overrides):
    args = dict(
        tranches=[{"share_count": 100, "exercise_price": 500}],
        fmv_exercise=800,
        fmv_sale=2800,
        exercise_date="2025-01-15",
        sale_date="2026-02-15",
        other_income=0.0,
        is_listed=True,
        financial_year=None,
        plan_to_exercise=True,
    )
    args.update(overrides)
    return args


def us_args(**overrides):
    args = dict(
        tranches=[{"share_count": 100}],
        exercise_price_inr=1000,
        fmv_exercise_inr=5400,
        fmv_sale_inr=10360,
        fx_rate=87,
        base_salary=100_000,
        bonus=0.0,
        k401=0.0,
        health=0.0,
        other=0.0,
        filing_status="Single",
        reuse_household_profile=False,
        ltcg_rate=10.0,
        include_niit=False,
        exercise_date="2025-01-15",
        sale_date="2026-02-15",
        plan_to_exercise=True,
        tax_year=2025,
    )
    args.update(overrides)
    return args


class TestTools:
    """Tests for india_esop, us_esop and household_income_tax."""

    def test_india_esop(self):
        result = asyncio.run(server.india_esop(**india_args()))
        assert result["capital_gains_tax"] == pytest.approx(9_750)

    def test_us_esop(self):
        result = asyncio.run(server.us_esop(**us_args()))
        assert result["baseline_tax"] == pytest.approx(27_736.63)
        assert result["weighted_avg_exercise_price_usd"] == pytest.approx(1000 / 87)

    def test_us_esop_missing_profile_returns_error(self):
        result = asyncio.run(server.us_esop(**us_args(reuse_household_profile=True)))
        assert "error" in result

    def test_household_income_tax(self):
        result = asyncio.run(server.household_income_tax(
            earners=[{"base_salary": 100_000}],
            filing_status="Single",
            pay_frequency="Monthly",
            tax_year=2025,
        ))
        assert result["total_tax"] == pytest.approx(27_736.63)

    def test_household_bad_status_returns_error(self):
        result = asyncio.run(server.household_income_tax(
            earners=[{"base_salary": 1}],
            filing_status="HOH",
            pay_frequency="Monthly",
            tax_year=2025,
        ))
        assert "error" in result
