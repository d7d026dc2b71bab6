"""Tests for tax rules loading, validation and overrides."""

import pytest
from pydantic import ValidationError

from esopcalc.sdk.taxes import (
    FilingStatus,
    get_available_years,
    load_india_tax_rules,
    load_tax_rules,
)
from esopcalc.sdk.taxes.rules import get_bundled_rules_dir
from esopcalc.sdk.taxes.schemas import FilingStatusRules


@pytest.fixture
def override_dir(isolated_config):
    rules_dir = isolated_config / "tax-rules"
    rules_dir.mkdir()
    return rules_dir


def bundled_text(filename: str) -> str:
    return (get_bundled_rules_dir() / filename).read_text()


class TestUsRules:
    """Tests for the bundled US rules."""

    def test_2025_values(self):
        """Test key 2025 parameters load from YAML."""
        rules = load_tax_rules(2025)
        assert rules.year == 2025
        assert rules.federal.single.standard_deduction == 15750
        assert rules.federal.mfj.standard_deduction == 31500
        assert rules.california.single.standard_deduction == 5540
        assert rules.social_security.wage_cap == 176100
        assert rules.social_security.tax_rate == 0.062
        assert rules.medicare.additional_threshold.for_status(FilingStatus.MFJ) == 250000
        assert rules.ca_sdi.wage_cap is None
        assert rules.retirement_401k.employee_elective_limit == 23500
        assert rules.niit.rate == 0.038

    def test_latest_year_by_default(self):
        """Test load_tax_rules() picks the newest available year."""
        assert load_tax_rules().year == max(get_available_years())

    def test_missing_year_raises(self):
        """Test an unknown year raises FileNotFoundError."""
        with pytest.raises(FileNotFoundError):
            load_tax_rules(1999)

    def test_jurisdiction_for_status_accepts_aliases(self):
        """Test bracket lookup by filing status alias."""
        rules = load_tax_rules(2025)
        assert rules.federal.for_status("mfj") is rules.federal.mfj
        assert rules.federal.for_status("Single") is rules.federal.single


class TestBracketValidation:
    """Tests for bracket table invariants."""

    def test_decreasing_bounds_rejected(self):
        """Test bounds must strictly increase."""
        with pytest.raises(ValidationError):
            FilingStatusRules.model_validate({
                "standard_deduction": 0,
                "tax_brackets": [{"up_to": 200, "rate": 0.1}, {"up_to": 100, "rate": 0.2}, {"over": 200, "rate": 0.3}],
            })

    def test_bounded_last_bracket_rejected(self):
        """Test the last bracket must be unbounded."""
        with pytest.raises(ValidationError):
            FilingStatusRules.model_validate({
                "standard_deduction": 0,
                "tax_brackets": [{"up_to": 100, "rate": 0.1}, {"up_to": 200, "rate": 0.2}],
            })

    def test_decreasing_rates_rejected(self):
        """Test rates may not fall in higher brackets."""
        with pytest.raises(ValidationError):
            FilingStatusRules.model_validate({
                "standard_deduction": 0,
                "tax_brackets": [{"up_to": 100, "rate": 0.2}, {"over": 100, "rate": 0.1}],
            })


class TestOverrides:
    """Tests for the config-dir tax-rules override directory."""

    def test_override_file_wins(self, override_dir):
        """Test a same-named file in tax-rules/ replaces the bundled one."""
        text = bundled_text("2025.yaml").replace("wage_cap: 176100", "wage_cap: 180000")
        (override_dir / "2025.yaml").write_text(text)

        assert load_tax_rules(2025).social_security.wage_cap == 180000

    def test_override_adds_year(self, override_dir):
        """Test a new year in tax-rules/ becomes the default."""
        text = bundled_text("2025.yaml").replace("year: 2025", "year: 2030")
        (override_dir / "2030.yaml").write_text(text)

        assert 2030 in get_available_years()
        assert load_tax_rules().year == 2030

    def test_malformed_override_raises(self, override_dir):
        """Test a malformed override raises ValidationError."""
        (override_dir / "2025.yaml").write_text("year: 2025\nfederal: {}\n")
        with pytest.raises(ValidationError):
            load_tax_rules(2025)


class TestIndiaRules:
    """Tests for India rules and financial-year policies."""

    def test_policy_values(self):
        """Test bundled FY policies."""
        rules = load_india_tax_rules()
        label, policy = rules.policy_for("2024-25")
        assert label == "2024-25"
        assert policy.standard_deduction == 50000
        assert policy.listed_stcg_rate == 0.15
        assert not policy.is_new_policy

    def test_unknown_fy_falls_back_to_default(self):
        """Test unknown or missing FY labels use the default FY."""
        rules = load_india_tax_rules()
        assert rules.policy_for("1999-00")[0] == "2025-26"
        assert rules.policy_for(None)[0] == "2025-26"

    def test_fixed_parameters(self):
        """Test cess, cap and holding thresholds."""
        rules = load_india_tax_rules()
        assert rules.cess_rate == 0.04
        assert rules.listed_cg_surcharge_cap == 0.15
        assert rules.unlisted_ltcg_rate == 0.20
        assert rules.holding_period_months.listed == 12
        assert rules.holding_period_months.unlisted == 24


class TestFilingStatus:
    """Tests for FilingStatus parsing."""

    @pytest.mark.parametrize("value", ["Single", "single", " SINGLE "])
    def test_single_aliases(self, value):
        assert FilingStatus.parse(value) is FilingStatus.SINGLE

    @pytest.mark.parametrize("value", ["MFJ", "mfj", "MarriedFilingJointly", "married_filing_jointly"])
    def test_mfj_aliases(self, value):
        assert FilingStatus.parse(value) is FilingStatus.MFJ

    def test_unknown_raises(self):
        with pytest.raises(ValueError):
            FilingStatus.parse("HeadOfHousehold")
