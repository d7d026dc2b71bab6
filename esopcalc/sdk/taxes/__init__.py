"""taxes - Tax tables and jurisdiction-level tax math.

Scope:
- Tax rules schemas and loading (bundled YAML, config-dir overrides)
- Progressive bracket evaluation and marginal rates
- India slab tax, surcharge and cess
- US payroll taxes (SS, Medicare, Additional Medicare, CA SDI)
- US federal + California income tax for a block of wages

Constraints:
- Pure calculation - no equity or household logic (that's in sdk/)
- Rules are loaded once and passed in; nothing here reads globals

Usage:
    from esopcalc.sdk.taxes import load_tax_rules, progressive_tax

    rules = load_tax_rules(2025)
    tax = progressive_tax(84250, rules.federal.single.tax_brackets)
"""

from .schemas import (
    FilingStatus,
    TaxBracket,
    UsTaxRules,
    IndiaTaxRules,
    IndiaFinancialYearPolicy,
)
from .progressive import progressive_tax, marginal_rate
from .rules import load_tax_rules, load_india_tax_rules, get_available_years
from .india import (
    slab_tax,
    surcharge_rate,
    listed_cg_surcharge_rate,
    cess,
    total_tax_from_income,
)
from .payroll import PayrollTaxes, calc_payroll_taxes
from .us import UsTaxComputation, calc_us_income_taxes

__all__ = [
    # Rules
    "FilingStatus",
    "TaxBracket",
    "UsTaxRules",
    "IndiaTaxRules",
    "IndiaFinancialYearPolicy",
    "load_tax_rules",
    "load_india_tax_rules",
    "get_available_years",
    # Brackets
    "progressive_tax",
    "marginal_rate",
    # India
    "slab_tax",
    "surcharge_rate",
    "listed_cg_surcharge_rate",
    "cess",
    "total_tax_from_income",
    # US
    "PayrollTaxes",
    "calc_payroll_taxes",
    "UsTaxComputation",
    "calc_us_income_taxes",
]
