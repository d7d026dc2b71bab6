"""End-to-end tests for household → US ESOP → export workflow.

Runs the production code paths together with a synthetic household:
- profile.yaml in an isolated config dir with a settings.json fx_rate
- the `income` command computing household taxes from the profile
- the `us` command reusing that household as its income basis
- CSV export of both results

Only the config directory is synthetic; rules are the bundled tables.
"""

import csv
import json

import pytest
from click.testing import CliRunner

from esopcalc.cli.__main__ import cli
from esopcalc.sdk import (
    GrantPortfolio,
    HouseholdTaxCalculator,
    ReusedIncome,
    UsEsopCalculator,
    build_snapshot,
    load_household_profile,
    load_tax_rules,
)

PROFILE = """\
household:
  filing_status: MFJ
  pay_frequency: Semi-monthly
  earners:
    - label: primary
      base_salary: 180000
      bonus: 20000
      k401: {kind: percent, percent: 10}
      k401_match_percent: 4
      health_semi_monthly: 150
    - label: spouse
      base_salary: 120000
      k401: {kind: fixed, amount: 10000}
"""


@pytest.fixture
def household_config(isolated_config):
    (isolated_config / "profile.yaml").write_text(PROFILE)
    (isolated_config / "settings.json").write_text(json.dumps({"fx_rate": 87.0, "tax_year": 2025}))
    return isolated_config


def read_csv(path):
    with open(path, newline="") as f:
        return list(csv.reader(f))


class TestHouseholdToUsEsop:
    """The household result feeds the US ESOP calculator unchanged."""

    def test_sdk_flow(self, household_config):
        rules = load_tax_rules(2025)
        household = HouseholdTaxCalculator(rules).calculate(load_household_profile())

        assert household.gross_income == pytest.approx(320_000)
        assert household.k401_employee == pytest.approx(30_000)
        assert household.health_annual == pytest.approx(3_600)
        assert household.employer_match_annual == pytest.approx(7_200)
        assert household.periods_per_year == 24

        result = UsEsopCalculator(rules).calculate(
            GrantPortfolio.from_lots([(200, 640)]),
            exercise_price_inr=640,
            fmv_exercise_inr=5040,
            fmv_sale_inr=10000,
            fx_rate=87,
            income=ReusedIncome(result=household),
            include_niit=True,
            exercise_date="2025-12-15",
            sale_date="2027-01-15",
        )

        assert result.baseline_tax == pytest.approx(household.total_tax)
        assert result.filing_status == household.filing_status
        assert result.capital_gains_term == "long_term"
        # Household income is far above the MFJ NIIT threshold
        assert result.niit == pytest.approx(0.038 * result.capital_gain_usd)

        snapshot = build_snapshot("us", {"fx_rate": 87}, result)
        assert snapshot["outputs"]["income_source"] == "income_tax_result"

    def test_cli_flow(self, household_config, tmp_path):
        runner = CliRunner()
        income_csv = tmp_path / "income.csv"
        us_csv = tmp_path / "us.csv"

        income = runner.invoke(cli, ["income", "--from-profile", "--json"])
        assert income.exit_code == 0, income.output
        household = json.loads(income.output)["outputs"]

        us = runner.invoke(cli, [
            "us", "--tranche", "200", "--exercise-price-inr", "640",
            "--fmv-exercise-inr", "5040", "--fmv-sale-inr", "10000",
            "--exercise-date", "2025-12-15", "--sale-date", "2026-06-15",
            "--reuse-income", "--json",
        ])
        assert us.exit_code == 0, us.output
        outputs = json.loads(us.output)["outputs"]
        assert outputs["fx_rate"] == 87.0
        assert outputs["capital_gains_term"] == "short_term"
        assert outputs["baseline_tax"] == pytest.approx(household["total_tax"])

        assert runner.invoke(cli, ["income", "--from-profile", "--csv", str(income_csv)]).exit_code == 0
        assert runner.invoke(cli, [
            "us", "--tranche", "200", "--exercise-price-inr", "640",
            "--fmv-exercise-inr", "5040", "--fmv-sale-inr", "10000",
            "--reuse-income", "--csv", str(us_csv),
        ]).exit_code == 0

        income_rows = read_csv(income_csv)
        us_rows = read_csv(us_csv)
        assert income_rows[0] == us_rows[0] == ["SECTION", "KEY", "VALUE"]
        assert ["Meta", "Calculator", "income"] in income_rows
        assert ["US", "Income Source", "income_tax_result"] in us_rows
        assert {r[0] for r in income_rows[1:]} == {"Meta", "Inputs", "Income"}
