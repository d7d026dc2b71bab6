"""Pydantic schemas for calculator inputs and results.

Inputs coerce bad numbers to 0 instead of failing. Results are frozen and
reject unknown fields; every calculation builds a new result object.

Rates named *_rate in results are percentages (e.g. 22.0) unless noted.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Annotated, Any, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .coerce import to_non_negative
from .taxes.payroll import PayrollTaxes
from .taxes.schemas import FilingStatus


class PayFrequency(str, Enum):
    """How often pay is received; sets the per-period divisor."""

    YEARLY = "Yearly"
    MONTHLY = "Monthly"
    SEMI_MONTHLY = "Semi-monthly"

    @property
    def periods_per_year(self) -> int:
        return {"Yearly": 1, "Monthly": 12, "Semi-monthly": 24}[self.value]

    @classmethod
    def parse(cls, value) -> "PayFrequency":
        """Parse a pay frequency from its value or a common alias.

        Raises:
            ValueError: If the value is not a known pay frequency
        """
        if isinstance(value, cls):
            return value
        normalized = str(value).strip().lower().replace("_", "-").replace(" ", "-")
        aliases = {
            "yearly": cls.YEARLY,
            "annual": cls.YEARLY,
            "annually": cls.YEARLY,
            "monthly": cls.MONTHLY,
            "semi-monthly": cls.SEMI_MONTHLY,
            "semimonthly": cls.SEMI_MONTHLY,
        }
        if normalized not in aliases:
            raise ValueError(
                f"Invalid pay frequency: {value}. Must be Yearly, Monthly or Semi-monthly."
            )
        return aliases[normalized]


def _parse_filing_status(value: Any) -> FilingStatus:
    return FilingStatus.parse(value)


# =============================================================================
# Household inputs
# =============================================================================


class PercentContribution(BaseModel):
    """401(k) deferral as a percent of salary + bonus."""
    model_config = ConfigDict(extra="forbid", frozen=True)

    kind: Literal["percent"] = "percent"
    percent: float = 0.0

    @field_validator("percent", mode="before")
    @classmethod
    def coerce_percent(cls, value: Any) -> float:
        return to_non_negative(value)


class FixedContribution(BaseModel):
    """401(k) deferral as a fixed annual dollar amount."""
    model_config = ConfigDict(extra="forbid", frozen=True)

    kind: Literal["fixed"] = "fixed"
    amount: float = 0.0

    @field_validator("amount", mode="before")
    @classmethod
    def coerce_amount(cls, value: Any) -> float:
        return to_non_negative(value)


K401Election = Annotated[
    Union[PercentContribution, FixedContribution],
    Field(discriminator="kind"),
]


class Earner(BaseModel):
    """One wage earner in the household."""
    model_config = ConfigDict(extra="forbid", frozen=True)

    label: str = "primary"
    base_salary: float = 0.0
    bonus: float = 0.0
    k401: K401Election = Field(default_factory=PercentContribution)
    k401_match_percent: float = Field(default=0.0, description="Employer match, informational")
    health_semi_monthly: float = Field(default=0.0, description="Pre-tax health per half-month")
    other_semi_monthly: float = Field(default=0.0, description="Other Section 125 per half-month")

    @field_validator(
        "base_salary", "bonus", "k401_match_percent",
        "health_semi_monthly", "other_semi_monthly",
        mode="before",
    )
    @classmethod
    def coerce_amount(cls, value: Any) -> float:
        return to_non_negative(value)

    @property
    def gross(self) -> float:
        return self.base_salary + self.bonus

    @property
    def fica_pretax_annual(self) -> float:
        """Health + other Section 125 deductions for the year (24 half-months)."""
        return (self.health_semi_monthly + self.other_semi_monthly) * 24


class HouseholdIncome(BaseModel):
    """Complete input for the household income tax calculator."""
    model_config = ConfigDict(extra="forbid", frozen=True)

    filing_status: FilingStatus = FilingStatus.SINGLE
    pay_frequency: PayFrequency = PayFrequency.MONTHLY
    earners: tuple[Earner, ...] = Field(..., min_length=1, max_length=2)

    @field_validator("filing_status", mode="before")
    @classmethod
    def parse_status(cls, value: Any) -> FilingStatus:
        return _parse_filing_status(value)

    @field_validator("pay_frequency", mode="before")
    @classmethod
    def parse_frequency(cls, value: Any) -> PayFrequency:
        return PayFrequency.parse(value)


# =============================================================================
# Results
# =============================================================================


class PeriodAmounts(BaseModel):
    """Gross-to-net figures for one span of time."""
    model_config = ConfigDict(extra="forbid", frozen=True)

    gross: float
    pretax_deductions: float
    adjusted_income: float
    federal_tax: float
    ca_tax: float
    social_security: float
    medicare: float
    additional_medicare: float
    ca_sdi: float
    total_tax: float
    net: float

    def divided(self, periods: int) -> "PeriodAmounts":
        return PeriodAmounts(**{k: v / periods for k, v in self.model_dump().items()})


class PeriodBreakdown(BaseModel):
    """Annual figures alongside the same figures per pay period."""
    model_config = ConfigDict(extra="forbid", frozen=True)

    periods_per_year: int
    annual: PeriodAmounts
    per_period: PeriodAmounts


class BonusEstimate(BaseModel):
    """One-time bonus taxed at marginal income tax rates plus payroll taxes."""
    model_config = ConfigDict(extra="forbid", frozen=True)

    bonus: float
    federal_marginal_rate: float
    ca_marginal_rate: float
    federal_tax: float
    ca_tax: float
    social_security: float
    medicare: float
    additional_medicare: float
    ca_sdi: float
    total_tax: float
    net_bonus: float


class EarnerAllocation(BaseModel):
    """Household taxes apportioned to one earner by share of gross.

    This is an allocation for display, not a separate computation: the
    household is taxed as a whole and the totals are split by gross share.
    """
    model_config = ConfigDict(extra="forbid", frozen=True)

    label: str
    base_salary: float
    bonus: float
    gross: float
    k401_employee: float
    pretax_deductions: float
    employer_match_annual: float
    income_share: float = Field(..., description="Fraction of household gross, 0..1")
    allocated_federal_tax: float
    allocated_ca_tax: float
    allocated_social_security: float
    allocated_medicare: float
    allocated_additional_medicare: float
    allocated_ca_sdi: float
    allocated_total_tax: float
    net_annual: float
    bonus_estimate: BonusEstimate


class IncomeTaxResult(BaseModel):
    """US federal + California household income tax result."""
    model_config = ConfigDict(extra="forbid", frozen=True)

    tax_year: int
    filing_status: FilingStatus
    pay_frequency: PayFrequency
    periods_per_year: int

    base_salary: float
    bonus: float
    gross_income: float
    k401_employee: float
    k401_household_limit: float
    health_annual: float
    other_annual: float
    pretax_deductions: float
    adjusted_income: float

    federal_standard_deduction: float
    federal_taxable_income: float
    federal_tax: float
    ca_standard_deduction: float
    ca_taxable_income: float
    ca_tax: float
    payroll: PayrollTaxes

    total_tax: float
    net_annual: float
    effective_tax_rate: float
    federal_marginal_rate: float
    ca_marginal_rate: float
    suggested_ordinary_rate: float
    employer_match_annual: float

    breakdown: PeriodBreakdown
    base_only: PeriodBreakdown
    bonus_estimate: BonusEstimate
    earners: tuple[EarnerAllocation, ...]


class IndiaEsopResult(BaseModel):
    """India ESOP perquisite and capital gains tax result (INR)."""
    model_config = ConfigDict(extra="forbid", frozen=True)

    financial_year: str
    is_new_tax_policy: bool
    standard_deduction: float
    is_listed: bool
    plan_to_exercise: bool

    total_shares: float
    weighted_avg_exercise_price: float
    exercise_cost: float
    holding_months: int

    perquisite: float
    income_before_perquisite: float
    income_after_perquisite: float
    perquisite_tax: float
    surcharge_rate_on_perquisite: float

    capital_gain: float
    capital_gains_category: Literal["none", "listed_stcg", "listed_ltcg", "unlisted_stcg", "unlisted_ltcg"]
    taxable_capital_gain: float
    capital_gains_tax: float
    stcg_rate: float
    ltcg_rate: float
    ltcg_exemption: float

    total_tax: float
    total_cost_to_exercise: float
    gross_proceeds: float
    net_after_tax: float
    effective_tax_rate: float


# =============================================================================
# US ESOP inputs and result
# =============================================================================


class ManualIncome(BaseModel):
    """Annual income typed in directly for the US ESOP calculator."""
    model_config = ConfigDict(extra="forbid", frozen=True)

    source: Literal["manual"] = "manual"
    base_salary: float = 0.0
    bonus: float = 0.0
    k401: float = Field(default=0.0, description="Annual employee 401(k)")
    health: float = Field(default=0.0, description="Annual pre-tax health")
    other: float = Field(default=0.0, description="Annual other Section 125")
    filing_status: FilingStatus = FilingStatus.SINGLE

    @field_validator("base_salary", "bonus", "k401", "health", "other", mode="before")
    @classmethod
    def coerce_amount(cls, value: Any) -> float:
        return to_non_negative(value)

    @field_validator("filing_status", mode="before")
    @classmethod
    def parse_status(cls, value: Any) -> FilingStatus:
        return _parse_filing_status(value)


class ReusedIncome(BaseModel):
    """Income taken from a previously computed household result."""
    model_config = ConfigDict(extra="forbid", frozen=True)

    source: Literal["income_tax_result"] = "income_tax_result"
    result: IncomeTaxResult


UsEsopIncome = Annotated[
    Union[ManualIncome, ReusedIncome],
    Field(discriminator="source"),
]


@dataclass(frozen=True)
class IncomeBasis:
    """Annual wage figures the US ESOP calculator works from."""

    source: str
    filing_status: FilingStatus
    base_salary: float
    bonus: float
    k401: float
    health: float
    other: float

    @property
    def gross(self) -> float:
        return self.base_salary + self.bonus

    @property
    def fica_pretax(self) -> float:
        return self.health + self.other


def resolve_income_basis(income: Union[ManualIncome, ReusedIncome]) -> IncomeBasis:
    """Collapse either income variant into one IncomeBasis."""
    if isinstance(income, ReusedIncome):
        result = income.result
        return IncomeBasis(
            source=income.source,
            filing_status=result.filing_status,
            base_salary=result.base_salary,
            bonus=result.bonus,
            k401=result.k401_employee,
            health=result.health_annual,
            other=result.other_annual,
        )
    return IncomeBasis(
        source=income.source,
        filing_status=income.filing_status,
        base_salary=income.base_salary,
        bonus=income.bonus,
        k401=income.k401,
        health=income.health,
        other=income.other,
    )


class UsEsopResult(BaseModel):
    """US ESOP result for INR-denominated grants (USD)."""
    model_config = ConfigDict(extra="forbid", frozen=True)

    income_source: Literal["manual", "income_tax_result"]
    filing_status: FilingStatus
    fx_rate: float
    plan_to_exercise: bool

    exercise_price_usd: float
    fmv_exercise_usd: float
    fmv_sale_usd: float
    total_shares: float
    weighted_avg_exercise_price_usd: float
    holding_months: int

    perquisite_usd: float
    base_salary: float
    bonus: float
    base_gross_income: float
    total_gross_income: float
    baseline_tax: float
    tax_with_perquisite: float
    marginal_tax_from_perquisite: float

    capital_gain_usd: float
    capital_gains_term: Literal["none", "short_term", "long_term"]
    ltcg_rate: float
    niit: float
    capital_gains_tax: float

    exercise_cost_usd: float
    total_tax_usd: float
    total_cost_to_exercise_usd: float
    gross_proceeds_usd: float
    net_after_tax_usd: float
    effective_tax_rate: float


__all__ = [
    "FilingStatus",
    "PayFrequency",
    "PercentContribution",
    "FixedContribution",
    "K401Election",
    "Earner",
    "HouseholdIncome",
    "PayrollTaxes",
    "PeriodAmounts",
    "PeriodBreakdown",
    "BonusEstimate",
    "EarnerAllocation",
    "IncomeTaxResult",
    "IndiaEsopResult",
    "ManualIncome",
    "ReusedIncome",
    "UsEsopIncome",
    "IncomeBasis",
    "resolve_income_basis",
    "UsEsopResult",
]
