"""India income tax: slabs, surcharge and health & education cess."""

from .progressive import progressive_tax
from .schemas import IndiaTaxRules


def slab_tax(income: float, rules: IndiaTaxRules) -> float:
    """Base tax from the slab table."""
    return progressive_tax(income, rules.slabs)


def surcharge_rate(total_income: float, rules: IndiaTaxRules) -> float:
    """Surcharge rate for a total income.

    Surcharge is a step function: the first step whose bound covers the
    income sets the rate on the whole base tax.
    """
    for step in rules.surcharge:
        if total_income <= step.upper_bound:
            return step.rate
    return rules.surcharge[-1].rate


def listed_cg_surcharge_rate(total_income: float, rules: IndiaTaxRules) -> float:
    """Surcharge rate on listed-equity gains, capped."""
    return min(surcharge_rate(total_income, rules), rules.listed_cg_surcharge_cap)


def cess(base_plus_surcharge: float, rules: IndiaTaxRules) -> float:
    return base_plus_surcharge * rules.cess_rate


def total_tax_from_income(income: float, rules: IndiaTaxRules) -> float:
    """Slab tax plus surcharge plus cess for a taxable income."""
    if income <= 0:
        return 0.0
    base = slab_tax(income, rules)
    with_surcharge = base + base * surcharge_rate(income, rules)
    return with_surcharge + cess(with_surcharge, rules)
