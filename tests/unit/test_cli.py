"""Tests for the esop-calc CLI commands.

Commands run through click's CliRunner against the isolated config dir.
"""

import json

import pytest
from click.testing import CliRunner

from esopcalc.cli.__main__ import cli

INDIA_ARGS = [
    "india",
    "--tranche", "100@500",
    "--fmv-exercise", "800",
    "--fmv-sale", "2800",
    "--exercise-date", "2025-01-15",
    "--sale-date", "2026-02-15",
]

US_ARGS = [
    "us",
    "--tranche", "100",
    "--exercise-price-inr", "1000",
    "--fmv-exercise-inr", "5400",
    "--fmv-sale-inr", "10360",
    "--exercise-date", "2025-01-15",
    "--sale-date", "2026-02-15",
    "--salary", "100000",
]

PROFILE = """\
household:
  filing_status: Single
  pay_frequency: Monthly
  earners:
    - label: primary
      base_salary: 100000
"""


@pytest.fixture
def runner():
    return CliRunner()


def run_json(runner, args):
    result = runner.invoke(cli, args + ["--json"])
    assert result.exit_code == 0, result.output
    return json.loads(result.output)


class TestIndiaCommand:
    """Tests for `esop-calc india`."""

    def test_json_snapshot(self, runner):
        snapshot = run_json(runner, INDIA_ARGS)
        assert snapshot["calculator"] == "india"
        assert snapshot["inputs"]["tranches"] == [{"id": 1, "share_count": 100.0, "exercise_price": 500.0}]
        assert snapshot["outputs"]["capital_gains_tax"] == pytest.approx(9_750)

    def test_fy_from_settings(self, runner, isolated_config):
        (isolated_config / "settings.json").write_text(json.dumps({"financial_year": "2024-25"}))
        snapshot = run_json(runner, INDIA_ARGS)
        assert snapshot["outputs"]["financial_year"] == "2024-25"

    def test_unlisted_flag(self, runner):
        snapshot = run_json(runner, INDIA_ARGS + ["--unlisted"])
        assert snapshot["outputs"]["is_listed"] is False
        assert snapshot["outputs"]["capital_gains_category"] == "unlisted_stcg"

    def test_rich_output(self, runner):
        result = runner.invoke(cli, INDIA_ARGS)
        assert result.exit_code == 0, result.output
        assert "Perquisite" in result.output

    def test_bad_tranche(self, runner):
        result = runner.invoke(cli, ["india", "--tranche", "lots@cheap", "--fmv-exercise", "1", "--fmv-sale", "1"])
        assert result.exit_code == 2
        assert "Invalid tranche" in result.output

    def test_bad_date(self, runner):
        result = runner.invoke(cli, INDIA_ARGS + ["--sale-date", "31/12/2026"])
        assert result.exit_code == 2

    def test_csv_export(self, runner, tmp_path):
        out = tmp_path / "india.csv"
        result = runner.invoke(cli, INDIA_ARGS + ["--csv", str(out)])
        assert result.exit_code == 0, result.output
        lines = out.read_text().splitlines()
        assert lines[0] == "SECTION,KEY,VALUE"
        assert any(line.startswith("India,Capital Gain Tax,") for line in lines)


class TestUsCommand:
    """Tests for `esop-calc us`."""

    def test_json_snapshot(self, runner):
        snapshot = run_json(runner, US_ARGS + ["--fx-rate", "87"])
        outputs = snapshot["outputs"]
        assert outputs["income_source"] == "manual"
        assert outputs["perquisite_usd"] == pytest.approx(4400 / 87 * 100)
        assert outputs["capital_gains_term"] == "long_term"
        assert snapshot["inputs"]["tranches"][0]["exercise_price"] == 1000

    def test_fx_from_settings(self, runner, isolated_config):
        (isolated_config / "settings.json").write_text(json.dumps({"fx_rate": 87.0}))
        snapshot = run_json(runner, US_ARGS)
        assert snapshot["outputs"]["fx_rate"] == 87.0

    def test_missing_fx_rate(self, runner):
        result = runner.invoke(cli, US_ARGS)
        assert result.exit_code != 0
        assert "--fx-rate" in result.output

    def test_bad_filing_status(self, runner):
        result = runner.invoke(cli, US_ARGS + ["--fx-rate", "87", "--filing-status", "HOH"])
        assert result.exit_code == 2

    def test_reuse_income_from_profile(self, runner, isolated_config):
        (isolated_config / "profile.yaml").write_text(PROFILE)
        snapshot = run_json(runner, US_ARGS + ["--fx-rate", "87", "--reuse-income"])
        assert snapshot["outputs"]["income_source"] == "income_tax_result"
        assert snapshot["outputs"]["baseline_tax"] == pytest.approx(27_736.63)

    def test_reuse_income_without_profile(self, runner):
        result = runner.invoke(cli, US_ARGS + ["--fx-rate", "87", "--reuse-income"])
        assert result.exit_code == 1
        assert "No profile found" in result.output


class TestIncomeCommand:
    """Tests for `esop-calc income`."""

    def test_single_salary(self, runner):
        snapshot = run_json(runner, ["income", "--salary", "100000"])
        outputs = snapshot["outputs"]
        assert outputs["filing_status"] == "Single"
        assert outputs["total_tax"] == pytest.approx(27_736.63)
        assert outputs["suggested_ordinary_rate"] == pytest.approx(31.3)

    def test_mfj_with_spouse(self, runner):
        snapshot = run_json(runner, [
            "income", "--salary", "150000", "--k401-pct", "10",
            "--spouse-salary", "50000", "--spouse-k401-amount", "5000",
            "--filing-status", "MFJ", "--pay-frequency", "semi-monthly",
        ])
        outputs = snapshot["outputs"]
        assert outputs["periods_per_year"] == 24
        assert outputs["k401_employee"] == pytest.approx(20_000)
        assert [e["label"] for e in outputs["earners"]] == ["primary", "spouse"]

    def test_both_k401_modes_rejected(self, runner):
        result = runner.invoke(cli, ["income", "--salary", "1", "--k401-pct", "5", "--k401-amount", "100"])
        assert result.exit_code == 2

    def test_bad_pay_frequency(self, runner):
        result = runner.invoke(cli, ["income", "--salary", "1", "--pay-frequency", "weekly"])
        assert result.exit_code == 2

    def test_from_profile(self, runner, isolated_config):
        (isolated_config / "profile.yaml").write_text(PROFILE)
        snapshot = run_json(runner, ["income", "--from-profile"])
        assert snapshot["outputs"]["gross_income"] == pytest.approx(100_000)

    def test_missing_tax_year(self, runner):
        result = runner.invoke(cli, ["income", "--salary", "1", "--tax-year", "1999"])
        assert result.exit_code == 1
        assert "1999.yaml" in result.output

    def test_rich_output(self, runner):
        result = runner.invoke(cli, ["income", "--salary", "100000"])
        assert result.exit_code == 0, result.output
        assert "Federal" in result.output


class TestSettingsCommands:
    """Tests for `esop-calc settings`."""

    def test_set_and_show(self, runner, isolated_config):
        result = runner.invoke(cli, ["settings", "set", "fx_rate", "86.5"])
        assert result.exit_code == 0, result.output
        assert json.loads((isolated_config / "settings.json").read_text()) == {"fx_rate": 86.5}

        result = runner.invoke(cli, ["settings", "show"])
        assert "fx_rate: 86.5" in result.output

    def test_show_empty(self, runner):
        result = runner.invoke(cli, ["settings", "show"])
        assert "No settings configured" in result.output

    def test_unknown_key(self, runner):
        result = runner.invoke(cli, ["settings", "set", "colour", "blue"])
        assert result.exit_code == 2

    def test_bad_value(self, runner):
        result = runner.invoke(cli, ["settings", "set", "tax_year", "soon"])
        assert result.exit_code == 2


class TestRulesCommands:
    """Tests for `esop-calc rules show`."""

    def test_us_rules_json(self, runner):
        result = runner.invoke(cli, ["rules", "show", "--year", "2025", "--json"])
        assert result.exit_code == 0, result.output
        data = json.loads(result.output)
        assert data["source"].endswith("2025.yaml")
        assert data["rules"]["social_security"]["wage_cap"] == 176100

    def test_india_rules(self, runner):
        result = runner.invoke(cli, ["rules", "show", "--india"])
        assert result.exit_code == 0, result.output
        assert "india.yaml" in result.output
        assert "cess_rate" in result.output

    def test_missing_year(self, runner):
        result = runner.invoke(cli, ["rules", "show", "--year", "1999"])
        assert result.exit_code == 1


class TestVersion:
    def test_version(self, runner):
        result = runner.invoke(cli, ["--version"])
        assert result.exit_code == 0
        assert "esop-calc" in result.output
