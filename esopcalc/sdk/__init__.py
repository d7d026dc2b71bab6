"""ESOP Calc SDK - India/US ESOP and household income tax calculators."""

from .config import (
    get_config_dir,
    get_settings_path,
    load_settings,
    save_settings,
    get_setting,
    set_setting,
    get_profile_path,
    load_profile,
    load_household_profile,
    ProfileNotFoundError,
)

from .coerce import to_amount, to_non_negative, parse_date, round_half_up

from .taxes import (
    FilingStatus,
    UsTaxRules,
    IndiaTaxRules,
    load_tax_rules,
    load_india_tax_rules,
    progressive_tax,
    marginal_rate,
)

from .grants import Tranche, GrantPortfolio, holding_months

from .schemas import (
    PayFrequency,
    PercentContribution,
    FixedContribution,
    Earner,
    HouseholdIncome,
    ManualIncome,
    ReusedIncome,
    IncomeTaxResult,
    IndiaEsopResult,
    UsEsopResult,
)

from .india_esop import IndiaEsopCalculator, compute_india_esop
from .us_esop import UsEsopCalculator, compute_us_esop
from .household import HouseholdTaxCalculator, compute_household_income_tax

from .export import (
    result_rows,
    rows_to_csv_string,
    write_results_csv,
    build_snapshot,
)

__all__ = [
    # Config
    "get_config_dir",
    "get_settings_path",
    "load_settings",
    "save_settings",
    "get_setting",
    "set_setting",
    "get_profile_path",
    "load_profile",
    "load_household_profile",
    "ProfileNotFoundError",
    # Coercion
    "to_amount",
    "to_non_negative",
    "parse_date",
    "round_half_up",
    # Tax rules
    "FilingStatus",
    "UsTaxRules",
    "IndiaTaxRules",
    "load_tax_rules",
    "load_india_tax_rules",
    "progressive_tax",
    "marginal_rate",
    # Grants
    "Tranche",
    "GrantPortfolio",
    "holding_months",
    # Schemas
    "PayFrequency",
    "PercentContribution",
    "FixedContribution",
    "Earner",
    "HouseholdIncome",
    "ManualIncome",
    "ReusedIncome",
    "IncomeTaxResult",
    "IndiaEsopResult",
    "UsEsopResult",
    # Calculators
    "IndiaEsopCalculator",
    "compute_india_esop",
    "UsEsopCalculator",
    "compute_us_esop",
    "HouseholdTaxCalculator",
    "compute_household_income_tax",
    # Export
    "result_rows",
    "rows_to_csv_string",
    "write_results_csv",
    "build_snapshot",
]
