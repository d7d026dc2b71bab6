"""US federal + California household income tax calculator.

Taxes the household's combined wages once (federal, California, FICA, SDI),
then derives:
- per-pay-period breakdowns for all wages and for base salary only
- a one-time bonus estimate at marginal rates
- a per-earner allocation of the household taxes by share of gross

Two earners are only combined when filing jointly. A second earner on a
Single return is ignored.
"""

import logging
from typing import Iterable, Optional

from .coerce import round_half_up
from .schemas import (
    BonusEstimate,
    Earner,
    EarnerAllocation,
    FixedContribution,
    HouseholdIncome,
    IncomeTaxResult,
    PeriodAmounts,
    PeriodBreakdown,
)
from .taxes.payroll import calc_additional_medicare_tax, calc_payroll_taxes
from .taxes.progressive import marginal_rate
from .taxes.rules import load_tax_rules
from .taxes.schemas import FilingStatus, UsTaxRules
from .taxes.us import UsTaxComputation, calc_us_income_taxes

logger = logging.getLogger(__name__)

# Marginal federal + CA rate above which the suggestion is clamped (percent)
SUGGESTED_RATE_CEILING = 60.0


def _period_amounts(comp: UsTaxComputation) -> PeriodAmounts:
    payroll = comp.payroll
    return PeriodAmounts(
        gross=comp.gross,
        pretax_deductions=comp.pretax,
        adjusted_income=comp.adjusted_income,
        federal_tax=comp.federal_tax,
        ca_tax=comp.ca_tax,
        social_security=payroll.social_security,
        medicare=payroll.medicare,
        additional_medicare=payroll.additional_medicare,
        ca_sdi=payroll.ca_sdi,
        total_tax=comp.total_tax,
        net=comp.adjusted_income - comp.total_tax,
    )


def _breakdown(comp: UsTaxComputation, periods: int) -> PeriodBreakdown:
    annual = _period_amounts(comp)
    return PeriodBreakdown(
        periods_per_year=periods,
        annual=annual,
        per_period=annual.divided(periods),
    )


def _sum_bonus_estimates(
    estimates: Iterable[BonusEstimate],
    federal_rate: float,
    ca_rate: float,
) -> BonusEstimate:
    fields = [
        "bonus", "federal_tax", "ca_tax", "social_security", "medicare",
        "additional_medicare", "ca_sdi", "total_tax", "net_bonus",
    ]
    totals = dict.fromkeys(fields, 0.0)
    for estimate in estimates:
        for name in fields:
            totals[name] += getattr(estimate, name)
    return BonusEstimate(federal_marginal_rate=federal_rate, ca_marginal_rate=ca_rate, **totals)


class HouseholdTaxCalculator:
    """Stateless household income tax calculator bound to one tax year."""

    def __init__(self, rules: UsTaxRules):
        self.rules = rules

    @property
    def k401_limit(self) -> float:
        return self.rules.retirement_401k.employee_elective_limit

    def employee_401k(self, earner: Earner, base_only: bool = False) -> float:
        """Employee 401(k) deferral for the year, capped at the elective limit.

        Percent elections apply to salary + bonus (or base salary alone when
        base_only is set) and round to whole dollars.
        """
        election = earner.k401
        if isinstance(election, FixedContribution):
            return min(election.amount, self.k401_limit)
        wages = earner.base_salary if base_only else earner.gross
        return min(round_half_up(election.percent / 100 * wages), self.k401_limit)

    def counted_earners(self, household: HouseholdIncome) -> tuple[Earner, ...]:
        earners = household.earners
        if len(earners) > 1 and household.filing_status is not FilingStatus.MFJ:
            logger.warning(
                f"Ignoring earner '{earners[1].label}': a second earner is only "
                f"combined when filing {FilingStatus.MFJ.value}"
            )
            return earners[:1]
        return earners

    def bonus_estimate(
        self,
        earner: Earner,
        filing_status: FilingStatus,
        federal_rate: float,
        ca_rate: float,
    ) -> BonusEstimate:
        """Estimate tax on an earner's bonus paid on top of base salary.

        Income tax uses the household marginal rates (decimals). Social
        Security only applies to wage-base headroom left after base salary,
        and Additional Medicare only to the part above the threshold.
        """
        rules = self.rules
        bonus = earner.bonus
        base_payroll = calc_payroll_taxes(
            earner.base_salary, earner.fica_pretax_annual, filing_status, rules
        )

        ss_headroom = max(0.0, rules.social_security.wage_cap - base_payroll.ss_taxable_wages)
        ss = min(bonus, ss_headroom) * rules.social_security.tax_rate
        medicare = bonus * rules.medicare.tax_rate
        additional = (
            calc_additional_medicare_tax(base_payroll.fica_wages + bonus, filing_status, rules)
            - calc_additional_medicare_tax(base_payroll.fica_wages, filing_status, rules)
        )
        sdi = bonus * rules.ca_sdi.tax_rate
        federal = bonus * federal_rate
        ca = bonus * ca_rate
        total = federal + ca + ss + medicare + additional + sdi

        return BonusEstimate(
            bonus=bonus,
            federal_marginal_rate=federal_rate * 100,
            ca_marginal_rate=ca_rate * 100,
            federal_tax=federal,
            ca_tax=ca,
            social_security=ss,
            medicare=medicare,
            additional_medicare=additional,
            ca_sdi=sdi,
            total_tax=total,
            net_bonus=bonus - total,
        )

    def calculate(self, household: HouseholdIncome) -> IncomeTaxResult:
        """Calculate annual household income tax.

        Args:
            household: Filing status, pay frequency and earners

        Returns:
            IncomeTaxResult
        """
        rules = self.rules
        status = household.filing_status
        periods = household.pay_frequency.periods_per_year
        earners = self.counted_earners(household)

        k401_by_earner = [self.employee_401k(e) for e in earners]
        base_salary = sum(e.base_salary for e in earners)
        bonus = sum(e.bonus for e in earners)
        gross = base_salary + bonus
        k401_total = sum(k401_by_earner)
        health = sum(e.health_semi_monthly * 24 for e in earners)
        other = sum(e.other_semi_monthly * 24 for e in earners)

        comp = calc_us_income_taxes(gross, k401_total, health + other, status, rules)
        logger.debug(
            f"Household {status.value}: gross {gross:,.2f}, "
            f"federal taxable {comp.federal_taxable:,.2f}, total tax {comp.total_tax:,.2f}"
        )

        federal_rate = marginal_rate(comp.federal_taxable, rules.federal.for_status(status).tax_brackets)
        ca_rate = marginal_rate(comp.ca_taxable, rules.california.for_status(status).tax_brackets)
        suggested = min(
            SUGGESTED_RATE_CEILING,
            round_half_up((federal_rate * 100 + ca_rate * 100) * 10) / 10,
        )

        base_comp = calc_us_income_taxes(
            base_salary,
            sum(self.employee_401k(e, base_only=True) for e in earners),
            health + other,
            status,
            rules,
        )

        payroll = comp.payroll
        allocations = []
        for earner, k401 in zip(earners, k401_by_earner):
            share = earner.gross / gross if gross > 0 else 0.0
            allocated = {
                "allocated_federal_tax": comp.federal_tax * share,
                "allocated_ca_tax": comp.ca_tax * share,
                "allocated_social_security": payroll.social_security * share,
                "allocated_medicare": payroll.medicare * share,
                "allocated_additional_medicare": payroll.additional_medicare * share,
                "allocated_ca_sdi": payroll.ca_sdi * share,
            }
            allocated_total = sum(allocated.values())
            pretax = k401 + earner.fica_pretax_annual
            allocations.append(EarnerAllocation(
                label=earner.label,
                base_salary=earner.base_salary,
                bonus=earner.bonus,
                gross=earner.gross,
                k401_employee=k401,
                pretax_deductions=pretax,
                employer_match_annual=earner.k401_match_percent / 100 * earner.base_salary,
                income_share=share,
                allocated_total_tax=allocated_total,
                net_annual=earner.gross - pretax - allocated_total,
                bonus_estimate=self.bonus_estimate(earner, status, federal_rate, ca_rate),
                **allocated,
            ))

        return IncomeTaxResult(
            tax_year=rules.year,
            filing_status=status,
            pay_frequency=household.pay_frequency,
            periods_per_year=periods,
            base_salary=base_salary,
            bonus=bonus,
            gross_income=gross,
            k401_employee=k401_total,
            k401_household_limit=self.k401_limit * len(earners),
            health_annual=health,
            other_annual=other,
            pretax_deductions=comp.pretax,
            adjusted_income=comp.adjusted_income,
            federal_standard_deduction=comp.federal_standard_deduction,
            federal_taxable_income=comp.federal_taxable,
            federal_tax=comp.federal_tax,
            ca_standard_deduction=comp.ca_standard_deduction,
            ca_taxable_income=comp.ca_taxable,
            ca_tax=comp.ca_tax,
            payroll=payroll,
            total_tax=comp.total_tax,
            net_annual=comp.adjusted_income - comp.total_tax,
            effective_tax_rate=(comp.total_tax / gross) * 100 if gross > 0 else 0.0,
            federal_marginal_rate=federal_rate * 100,
            ca_marginal_rate=ca_rate * 100,
            suggested_ordinary_rate=suggested,
            employer_match_annual=sum(a.employer_match_annual for a in allocations),
            breakdown=_breakdown(comp, periods),
            base_only=_breakdown(base_comp, periods),
            bonus_estimate=_sum_bonus_estimates(
                (a.bonus_estimate for a in allocations), federal_rate * 100, ca_rate * 100
            ),
            earners=tuple(allocations),
        )


def compute_household_income_tax(
    incomes: Iterable[Earner],
    filing_status="Single",
    pay_frequency="Monthly",
    rules: Optional[UsTaxRules] = None,
) -> IncomeTaxResult:
    """Calculate household income tax using the latest installed US rules.

    Args:
        incomes: One or two earners
        filing_status: "Single" or "MFJ" (aliases accepted)
        pay_frequency: "Yearly", "Monthly" or "Semi-monthly"
        rules: Optional rules override

    Raises:
        pydantic.ValidationError: On an unknown filing status or pay frequency
    """
    household = HouseholdIncome(
        filing_status=filing_status,
        pay_frequency=pay_frequency,
        earners=tuple(incomes),
    )
    return HouseholdTaxCalculator(rules or load_tax_rules()).calculate(household)
