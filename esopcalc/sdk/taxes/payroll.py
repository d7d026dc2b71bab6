"""Annual payroll taxes: Social Security, Medicare and CA SDI.

Employee 401(k) deferrals remain FICA wages; only Section 125 deductions
(health and other cafeteria-plan amounts) come out of the FICA base.
"""

from pydantic import BaseModel, ConfigDict

from .schemas import FilingStatus, UsTaxRules


class PayrollTaxes(BaseModel):
    """Employee payroll taxes for a year of wages."""
    model_config = ConfigDict(extra="forbid", frozen=True)

    fica_wages: float
    ss_taxable_wages: float
    social_security: float
    medicare: float
    additional_medicare: float
    ca_sdi: float
    total: float


def calc_ss_tax(fica_wages: float, rules: UsTaxRules) -> tuple[float, float]:
    """Social Security on wages up to the wage base.

    Returns:
        Tuple of (ss_taxable_wages, ss_tax)
    """
    ss = rules.social_security
    taxable = min(max(0.0, fica_wages), ss.wage_cap)
    return taxable, taxable * ss.tax_rate


def calc_additional_medicare_tax(
    medicare_wages: float,
    filing_status: FilingStatus,
    rules: UsTaxRules,
) -> float:
    """Additional Medicare Tax on wages above the filing-status threshold."""
    medicare = rules.medicare
    threshold = medicare.additional_threshold.for_status(filing_status)
    return max(0.0, medicare_wages - threshold) * medicare.additional_rate


def calc_ca_sdi(gross: float, rules: UsTaxRules) -> float:
    sdi = rules.ca_sdi
    base = min(gross, sdi.wage_cap) if sdi.wage_cap is not None else gross
    return max(0.0, base) * sdi.tax_rate


def calc_payroll_taxes(
    gross: float,
    fica_pretax: float,
    filing_status: FilingStatus,
    rules: UsTaxRules,
) -> PayrollTaxes:
    """Calculate annual employee payroll taxes.

    Args:
        gross: Annual gross wages
        fica_pretax: Annual Section 125 deductions excluded from FICA wages
        filing_status: Filing status (sets the Additional Medicare threshold)
        rules: Tax rules for the year

    Returns:
        PayrollTaxes with each component and their total
    """
    fica_wages = max(0.0, gross - fica_pretax)
    ss_taxable, ss_tax = calc_ss_tax(fica_wages, rules)
    medicare = fica_wages * rules.medicare.tax_rate
    additional = calc_additional_medicare_tax(fica_wages, filing_status, rules)
    sdi = calc_ca_sdi(gross, rules)

    return PayrollTaxes(
        fica_wages=fica_wages,
        ss_taxable_wages=ss_taxable,
        social_security=ss_tax,
        medicare=medicare,
        additional_medicare=additional,
        ca_sdi=sdi,
        total=ss_tax + medicare + additional + sdi,
    )
