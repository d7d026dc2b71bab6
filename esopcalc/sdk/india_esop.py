"""India ESOP calculator.

Computes the perquisite tax at exercise (incremental slab method with
surcharge and cess) and the capital gains tax at sale. All amounts are INR.

Listed and unlisted shares follow different capital gains rules:
- listed: flat STCG/LTCG rate, surcharge capped, LTCG exemption applies
- unlisted short term: gain is added to income and taxed at slab rates
- unlisted long term: flat 20% with the full (uncapped) surcharge
"""

import logging
from typing import Any, Optional

from .coerce import to_amount, to_non_negative
from .grants import GrantPortfolio, holding_months
from .schemas import IndiaEsopResult
from .taxes import india
from .taxes.rules import load_india_tax_rules
from .taxes.schemas import IndiaFinancialYearPolicy, IndiaTaxRules

logger = logging.getLogger(__name__)


class IndiaEsopCalculator:
    """Stateless India ESOP calculator bound to one set of tax rules."""

    def __init__(self, rules: IndiaTaxRules):
        self.rules = rules

    def _with_surcharge_and_cess(self, base: float, surcharge_rate: float) -> float:
        with_surcharge = base + base * surcharge_rate
        return with_surcharge + india.cess(with_surcharge, self.rules)

    def _capital_gains_tax(
        self,
        gain: float,
        income_after: float,
        months: int,
        is_listed: bool,
        policy: IndiaFinancialYearPolicy,
    ) -> tuple[str, float, float]:
        """Tax on a positive capital gain.

        Returns:
            Tuple of (category, taxable_gain, tax)
        """
        rules = self.rules
        total_income = income_after + gain

        if is_listed:
            surcharge = india.listed_cg_surcharge_rate(total_income, rules)
            if months <= rules.holding_period_months.listed:
                base = gain * policy.listed_stcg_rate
                return "listed_stcg", gain, self._with_surcharge_and_cess(base, surcharge)

            taxable_gain = max(0.0, gain - policy.ltcg_exemption)
            base = taxable_gain * policy.listed_ltcg_rate
            return "listed_ltcg", taxable_gain, self._with_surcharge_and_cess(base, surcharge)

        if months <= rules.holding_period_months.unlisted:
            tax = max(
                0.0,
                india.total_tax_from_income(total_income, rules)
                - india.total_tax_from_income(income_after, rules),
            )
            return "unlisted_stcg", gain, tax

        base = gain * rules.unlisted_ltcg_rate
        surcharge = india.surcharge_rate(total_income, rules)
        return "unlisted_ltcg", gain, self._with_surcharge_and_cess(base, surcharge)

    def calculate(
        self,
        portfolio: GrantPortfolio,
        fmv_exercise: Any,
        fmv_sale: Any,
        exercise_date: Any = None,
        sale_date: Any = None,
        other_income: Any = 0,
        is_listed: bool = True,
        financial_year: Optional[str] = None,
        plan_to_exercise: bool = True,
    ) -> IndiaEsopResult:
        """Calculate perquisite and capital gains tax for a grant portfolio.

        Args:
            portfolio: Tranches being exercised
            fmv_exercise: FMV per share on the exercise date
            fmv_sale: Expected FMV per share at sale
            exercise_date: Exercise date (date or ISO string)
            sale_date: Sale date (date or ISO string)
            other_income: Other annual taxable income before deductions
            is_listed: Whether the shares are listed on a recognised exchange
            financial_year: FY label such as "2025-26"; unknown labels use the default FY
            plan_to_exercise: When False only the perquisite side is meaningful

        Returns:
            IndiaEsopResult
        """
        rules = self.rules
        fmv_exercise = to_amount(fmv_exercise)
        fmv_sale = to_amount(fmv_sale)
        other = to_non_negative(other_income)

        fy_label, policy = rules.policy_for(financial_year)
        if financial_year is not None and fy_label != str(financial_year).strip():
            logger.debug(f"Unknown financial year {financial_year!r}, using {fy_label}")

        months = holding_months(exercise_date, sale_date)
        total_shares = portfolio.total_shares
        logger.debug(f"FY {fy_label}, holding {months} months, {total_shares} shares")

        perquisite = portfolio.perquisite(fmv_exercise)
        deduction = policy.standard_deduction
        income_before = max(0.0, other - deduction)
        income_after = max(0.0, other + perquisite - deduction)
        perquisite_tax = max(
            0.0,
            india.total_tax_from_income(income_after, rules)
            - india.total_tax_from_income(income_before, rules),
        )

        capital_gain = 0.0
        if plan_to_exercise and total_shares > 0:
            capital_gain = (fmv_sale - fmv_exercise) * total_shares

        category, taxable_gain, capital_gains_tax = "none", 0.0, 0.0
        if plan_to_exercise and capital_gain > 0:
            category, taxable_gain, capital_gains_tax = self._capital_gains_tax(
                capital_gain, income_after, months, is_listed, policy
            )

        exercise_cost = portfolio.exercise_cost
        total_tax = perquisite_tax + capital_gains_tax
        total_cost = exercise_cost + total_tax
        gross_proceeds = fmv_sale * total_shares if plan_to_exercise else 0.0
        net_after_tax = gross_proceeds - total_cost if plan_to_exercise else 0.0
        effective_rate = (total_tax / gross_proceeds) * 100 if plan_to_exercise and gross_proceeds > 0 else 0.0

        return IndiaEsopResult(
            financial_year=fy_label,
            is_new_tax_policy=policy.is_new_policy,
            standard_deduction=deduction,
            is_listed=bool(is_listed),
            plan_to_exercise=bool(plan_to_exercise),
            total_shares=total_shares,
            weighted_avg_exercise_price=portfolio.weighted_avg_exercise_price,
            exercise_cost=exercise_cost,
            holding_months=months,
            perquisite=perquisite,
            income_before_perquisite=income_before,
            income_after_perquisite=income_after,
            perquisite_tax=perquisite_tax,
            surcharge_rate_on_perquisite=india.surcharge_rate(income_after, rules) * 100,
            capital_gain=capital_gain,
            capital_gains_category=category,
            taxable_capital_gain=taxable_gain,
            capital_gains_tax=capital_gains_tax,
            stcg_rate=policy.listed_stcg_rate * 100,
            ltcg_rate=policy.listed_ltcg_rate * 100,
            ltcg_exemption=policy.ltcg_exemption,
            total_tax=total_tax,
            total_cost_to_exercise=total_cost,
            gross_proceeds=gross_proceeds,
            net_after_tax=net_after_tax,
            effective_tax_rate=effective_rate,
        )


def compute_india_esop(
    portfolio: GrantPortfolio,
    fmv_exercise: Any,
    fmv_sale: Any,
    exercise_date: Any = None,
    sale_date: Any = None,
    other_income: Any = 0,
    is_listed: bool = True,
    financial_year: Optional[str] = None,
    plan_to_exercise: bool = True,
    rules: Optional[IndiaTaxRules] = None,
) -> IndiaEsopResult:
    """Calculate India ESOP taxes using the installed India rules."""
    calculator = IndiaEsopCalculator(rules or load_india_tax_rules())
    return calculator.calculate(
        portfolio,
        fmv_exercise=fmv_exercise,
        fmv_sale=fmv_sale,
        exercise_date=exercise_date,
        sale_date=sale_date,
        other_income=other_income,
        is_listed=is_listed,
        financial_year=financial_year,
        plan_to_exercise=plan_to_exercise,
    )
