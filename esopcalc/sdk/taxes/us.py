"""Annual US federal + California income tax for a block of wages.

Used by both the household engine and the US ESOP engine, which runs it
twice (with and without the perquisite) and takes the difference.
"""

from dataclasses import dataclass

from .payroll import PayrollTaxes, calc_payroll_taxes
from .progressive import progressive_tax
from .schemas import FilingStatus, UsTaxRules


@dataclass(frozen=True)
class UsTaxComputation:
    """Intermediate figures from one pass over the US tables."""

    gross: float
    pretax: float
    adjusted_income: float
    federal_standard_deduction: float
    federal_taxable: float
    federal_tax: float
    ca_standard_deduction: float
    ca_taxable: float
    ca_tax: float
    payroll: PayrollTaxes

    @property
    def income_tax(self) -> float:
        return self.federal_tax + self.ca_tax

    @property
    def total_tax(self) -> float:
        return self.federal_tax + self.ca_tax + self.payroll.total


def calc_us_income_taxes(
    gross: float,
    k401: float,
    fica_pretax: float,
    filing_status: FilingStatus,
    rules: UsTaxRules,
) -> UsTaxComputation:
    """Compute federal, California and payroll taxes for annual wages.

    Federal and California adjusted income are the same here: gross minus
    401(k) and Section 125 deductions. 401(k) stays in the FICA base.

    Args:
        gross: Annual gross wages
        k401: Annual employee 401(k) deferral
        fica_pretax: Annual Section 125 deductions (health + other)
        filing_status: Single or MFJ
        rules: Tax rules for the year
    """
    filing_status = FilingStatus.parse(filing_status)
    pretax = k401 + fica_pretax
    adjusted = max(0.0, gross - pretax)

    federal = rules.federal.for_status(filing_status)
    california = rules.california.for_status(filing_status)
    federal_taxable = max(0.0, adjusted - federal.standard_deduction)
    ca_taxable = max(0.0, adjusted - california.standard_deduction)

    return UsTaxComputation(
        gross=gross,
        pretax=pretax,
        adjusted_income=adjusted,
        federal_standard_deduction=federal.standard_deduction,
        federal_taxable=federal_taxable,
        federal_tax=progressive_tax(federal_taxable, federal.tax_brackets),
        ca_standard_deduction=california.standard_deduction,
        ca_taxable=ca_taxable,
        ca_tax=progressive_tax(ca_taxable, california.tax_brackets),
        payroll=calc_payroll_taxes(gross, fica_pretax, filing_status, rules),
    )
