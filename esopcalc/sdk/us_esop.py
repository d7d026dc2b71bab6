"""US ESOP calculator for INR-denominated grants.

Prices come in INR and are converted to USD with a single FX rate. The
perquisite's tax is the difference between the household's US tax with and
without it; capital gains are taxed as ordinary income when held 12 months
or less and at a flat LTCG rate otherwise, with optional NIIT on top.
"""

import logging
import math
from typing import Any, Optional, Union

from .coerce import to_amount
from .grants import GrantPortfolio, holding_months
from .schemas import (
    IncomeBasis,
    ManualIncome,
    ReusedIncome,
    UsEsopResult,
    resolve_income_basis,
)
from .taxes.progressive import progressive_tax
from .taxes.rules import load_tax_rules
from .taxes.schemas import UsTaxRules
from .taxes.us import UsTaxComputation, calc_us_income_taxes

logger = logging.getLogger(__name__)

LONG_TERM_MONTHS = 12
DEFAULT_LTCG_RATE = 10.0


def inr_to_usd(amount_inr: float, fx_rate: float) -> float:
    """Convert INR to USD; a zero, negative or non-finite rate gives 0."""
    if not math.isfinite(fx_rate) or fx_rate <= 0:
        return 0.0
    return amount_inr / fx_rate


class UsEsopCalculator:
    """Stateless US ESOP calculator bound to one year of US tax rules."""

    def __init__(self, rules: UsTaxRules):
        self.rules = rules

    def _short_term_gain_tax(self, gain: float, with_perq: UsTaxComputation, basis: IncomeBasis) -> float:
        """Ordinary income tax on a gain stacked on the with-perquisite income."""
        federal = self.rules.federal.for_status(basis.filing_status)
        california = self.rules.california.for_status(basis.filing_status)
        federal_delta = progressive_tax(with_perq.federal_taxable + gain, federal.tax_brackets) - with_perq.federal_tax
        ca_delta = progressive_tax(with_perq.ca_taxable + gain, california.tax_brackets) - with_perq.ca_tax
        return federal_delta + ca_delta

    def _niit(self, gain: float, with_perq: UsTaxComputation, basis: IncomeBasis) -> float:
        """Net Investment Income Tax, limited to MAGI above the threshold."""
        niit = self.rules.niit
        magi = with_perq.adjusted_income + gain
        threshold = niit.threshold.for_status(basis.filing_status)
        return niit.rate * max(0.0, min(gain, magi - threshold))

    def calculate(
        self,
        portfolio: GrantPortfolio,
        exercise_price_inr: Any,
        fmv_exercise_inr: Any,
        fmv_sale_inr: Any,
        fx_rate: Any,
        income: Union[ManualIncome, ReusedIncome],
        ltcg_rate: Any = DEFAULT_LTCG_RATE,
        include_niit: bool = False,
        exercise_date: Any = None,
        sale_date: Any = None,
        plan_to_exercise: bool = True,
    ) -> UsEsopResult:
        """Calculate US tax on exercising and selling INR-priced options.

        Args:
            portfolio: Tranches (share counts; tranche prices feed the weighted average)
            exercise_price_inr: Exercise price per share in INR
            fmv_exercise_inr: FMV per share at exercise in INR
            fmv_sale_inr: Expected FMV per share at sale in INR
            fx_rate: INR per USD
            income: ManualIncome or ReusedIncome (from the household calculator)
            ltcg_rate: Long-term capital gains rate as a percent (e.g. 10)
            include_niit: Add Net Investment Income Tax on the gain
            exercise_date: Exercise date (date or ISO string)
            sale_date: Sale date (date or ISO string)
            plan_to_exercise: When False only the perquisite side is meaningful

        Returns:
            UsEsopResult
        """
        fx = to_amount(fx_rate)
        if fx <= 0:
            logger.warning(f"FX rate {fx_rate!r} is not positive; USD conversions will be 0")

        exercise_price_usd = inr_to_usd(to_amount(exercise_price_inr), fx)
        fmv_exercise_usd = inr_to_usd(to_amount(fmv_exercise_inr), fx)
        fmv_sale_usd = inr_to_usd(to_amount(fmv_sale_inr), fx)
        ltcg_percent = to_amount(ltcg_rate)

        basis = resolve_income_basis(income)
        logger.debug(f"Income basis from {basis.source}: gross {basis.gross:,.2f}")

        total_shares = portfolio.total_shares
        months = holding_months(exercise_date, sale_date)
        perquisite_usd = max(0.0, fmv_exercise_usd - exercise_price_usd) * total_shares

        baseline = calc_us_income_taxes(
            basis.gross, basis.k401, basis.fica_pretax, basis.filing_status, self.rules
        )
        # Pre-tax deductions don't apply to the perquisite
        with_perq = calc_us_income_taxes(
            basis.gross + perquisite_usd, basis.k401, basis.fica_pretax, basis.filing_status, self.rules
        )
        marginal_tax = max(0.0, with_perq.total_tax - baseline.total_tax)

        capital_gain = 0.0
        term = "none"
        niit = 0.0
        capital_gains_tax = 0.0
        if plan_to_exercise and total_shares > 0:
            capital_gain = (fmv_sale_usd - fmv_exercise_usd) * total_shares
            if capital_gain > 0:
                if months > LONG_TERM_MONTHS:
                    term = "long_term"
                    capital_gains_tax = capital_gain * (ltcg_percent / 100)
                else:
                    term = "short_term"
                    capital_gains_tax = self._short_term_gain_tax(capital_gain, with_perq, basis)
                if include_niit:
                    niit = self._niit(capital_gain, with_perq, basis)
                    capital_gains_tax += niit

        exercise_cost = exercise_price_usd * total_shares
        total_tax = marginal_tax + capital_gains_tax
        total_cost = exercise_cost + total_tax
        gross_proceeds = fmv_sale_usd * total_shares if plan_to_exercise else 0.0
        net_after_tax = gross_proceeds - total_cost if plan_to_exercise else 0.0
        effective_rate = (total_tax / gross_proceeds) * 100 if plan_to_exercise and gross_proceeds > 0 else 0.0

        weighted_avg_usd = inr_to_usd(portfolio.weighted_avg_exercise_price, fx)

        return UsEsopResult(
            income_source=basis.source,
            filing_status=basis.filing_status,
            fx_rate=fx,
            plan_to_exercise=bool(plan_to_exercise),
            exercise_price_usd=exercise_price_usd,
            fmv_exercise_usd=fmv_exercise_usd,
            fmv_sale_usd=fmv_sale_usd,
            total_shares=total_shares,
            weighted_avg_exercise_price_usd=weighted_avg_usd,
            holding_months=months,
            perquisite_usd=perquisite_usd,
            base_salary=basis.base_salary,
            bonus=basis.bonus,
            base_gross_income=basis.gross,
            total_gross_income=basis.gross + perquisite_usd,
            baseline_tax=baseline.total_tax,
            tax_with_perquisite=with_perq.total_tax,
            marginal_tax_from_perquisite=marginal_tax,
            capital_gain_usd=capital_gain,
            capital_gains_term=term,
            ltcg_rate=ltcg_percent,
            niit=niit,
            capital_gains_tax=capital_gains_tax,
            exercise_cost_usd=exercise_cost,
            total_tax_usd=total_tax,
            total_cost_to_exercise_usd=total_cost,
            gross_proceeds_usd=gross_proceeds,
            net_after_tax_usd=net_after_tax,
            effective_tax_rate=effective_rate,
        )


def compute_us_esop(
    portfolio: GrantPortfolio,
    exercise_price_inr: Any,
    fmv_exercise_inr: Any,
    fmv_sale_inr: Any,
    fx_rate: Any,
    income: Union[ManualIncome, ReusedIncome],
    ltcg_rate: Any = DEFAULT_LTCG_RATE,
    include_niit: bool = False,
    exercise_date: Any = None,
    sale_date: Any = None,
    plan_to_exercise: bool = True,
    rules: Optional[UsTaxRules] = None,
) -> UsEsopResult:
    """Calculate US ESOP taxes using the latest installed US rules."""
    calculator = UsEsopCalculator(rules or load_tax_rules())
    return calculator.calculate(
        portfolio,
        exercise_price_inr=exercise_price_inr,
        fmv_exercise_inr=fmv_exercise_inr,
        fmv_sale_inr=fmv_sale_inr,
        fx_rate=fx_rate,
        income=income,
        ltcg_rate=ltcg_rate,
        include_niit=include_niit,
        exercise_date=exercise_date,
        sale_date=sale_date,
        plan_to_exercise=plan_to_exercise,
    )
