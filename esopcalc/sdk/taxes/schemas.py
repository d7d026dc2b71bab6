"""Pydantic schemas for tax rules validation.

These schemas validate the tax_rules/*.yaml files and provide typed access
to tax parameters like the SS wage cap, 401k limits, India slabs and
per-filing-status bracket tables. All rules models are frozen so a loaded
rule set can be shared between calculators.
"""

import math
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


class FilingStatus(str, Enum):
    """US filing status."""

    SINGLE = "Single"
    MFJ = "MarriedFilingJointly"

    @property
    def key(self) -> str:
        """Key used for this status in tax-rules YAML."""
        return "single" if self is FilingStatus.SINGLE else "mfj"

    @classmethod
    def parse(cls, value) -> "FilingStatus":
        """Parse a filing status from its value or a common alias.

        Raises:
            ValueError: If the value is not a known filing status
        """
        if isinstance(value, cls):
            return value
        normalized = str(value).strip().lower().replace("-", "_").replace(" ", "_")
        aliases = {
            "single": cls.SINGLE,
            "mfj": cls.MFJ,
            "marriedfilingjointly": cls.MFJ,
            "married_filing_jointly": cls.MFJ,
        }
        if normalized not in aliases:
            raise ValueError(f"Invalid filing status: {value}. Must be 'Single' or 'MFJ'.")
        return aliases[normalized]


class TaxBracket(BaseModel):
    """Single tax bracket entry."""
    model_config = ConfigDict(extra="forbid", frozen=True)

    up_to: Optional[float] = Field(default=None, description="Upper bound (None if 'over' bracket)")
    over: Optional[float] = Field(default=None, description="Lower bound for top bracket")
    rate: float = Field(..., ge=0, le=1, description="Tax rate as decimal")

    @property
    def upper_bound(self) -> float:
        """Upper bound of the bracket, infinite for the top bracket."""
        return self.up_to if self.up_to is not None else math.inf


def validate_bracket_table(brackets: tuple) -> tuple:
    """Check bracket ordering invariants.

    Bounds must be strictly increasing, the last bracket unbounded and rates
    non-decreasing.

    Raises:
        ValueError: If any invariant is violated
    """
    if not brackets:
        raise ValueError("Bracket table must have at least one bracket")

    previous_bound = -math.inf
    previous_rate = -math.inf
    for index, bracket in enumerate(brackets):
        bound = bracket.upper_bound
        if bound <= previous_bound:
            raise ValueError(f"Bracket {index}: bound {bound} not greater than {previous_bound}")
        if bracket.rate < previous_rate:
            raise ValueError(f"Bracket {index}: rate {bracket.rate} lower than {previous_rate}")
        previous_bound = bound
        previous_rate = bracket.rate

    if not math.isinf(brackets[-1].upper_bound):
        raise ValueError("Last bracket must be unbounded (use 'over')")
    if any(math.isinf(b.upper_bound) for b in brackets[:-1]):
        raise ValueError("Only the last bracket may be unbounded")

    return brackets


class FilingStatusRules(BaseModel):
    """Standard deduction and brackets for one filing status."""
    model_config = ConfigDict(extra="forbid", frozen=True)

    standard_deduction: float = Field(..., ge=0)
    tax_brackets: tuple[TaxBracket, ...]

    @field_validator("tax_brackets")
    @classmethod
    def check_brackets(cls, value: tuple) -> tuple:
        return validate_bracket_table(value)


class JurisdictionRules(BaseModel):
    """Income tax rules for a jurisdiction (federal or California)."""
    model_config = ConfigDict(extra="forbid", frozen=True)

    single: FilingStatusRules
    mfj: FilingStatusRules

    def for_status(self, filing_status: FilingStatus) -> FilingStatusRules:
        return getattr(self, FilingStatus.parse(filing_status).key)


class ByFilingStatus(BaseModel):
    """A dollar threshold that differs by filing status."""
    model_config = ConfigDict(extra="forbid", frozen=True)

    single: float = Field(..., ge=0)
    mfj: float = Field(..., ge=0)

    def for_status(self, filing_status: FilingStatus) -> float:
        return getattr(self, FilingStatus.parse(filing_status).key)


class SocialSecurityRules(BaseModel):
    """Social Security tax rules."""
    model_config = ConfigDict(extra="forbid", frozen=True)

    wage_cap: float = Field(..., gt=0, description="SS wage base (max taxable)")
    tax_rate: float = Field(..., ge=0, le=1, description="SS tax rate (employee portion)")


class MedicareRules(BaseModel):
    """Medicare and Additional Medicare tax rules."""
    model_config = ConfigDict(extra="forbid", frozen=True)

    tax_rate: float = Field(..., ge=0, le=1)
    additional_rate: float = Field(..., ge=0, le=1)
    additional_threshold: ByFilingStatus


class CaSdiRules(BaseModel):
    """California State Disability Insurance rules."""
    model_config = ConfigDict(extra="forbid", frozen=True)

    tax_rate: float = Field(..., ge=0, le=1)
    wage_cap: Optional[float] = Field(default=None, gt=0, description="None means no cap")


class Retirement401kRules(BaseModel):
    """401(k) contribution limits."""
    model_config = ConfigDict(extra="forbid", frozen=True)

    employee_elective_limit: float = Field(..., ge=0, description="Pre-tax + Roth employee limit")
    total_annual_limit: Optional[float] = Field(default=None, ge=0, description="Total including employer match")


class NiitRules(BaseModel):
    """Net Investment Income Tax rules."""
    model_config = ConfigDict(extra="forbid", frozen=True)

    rate: float = Field(..., ge=0, le=1)
    threshold: ByFilingStatus


class UsTaxRules(BaseModel):
    """Complete US federal + California rules for a tax year."""
    model_config = ConfigDict(extra="ignore", frozen=True, populate_by_name=True)

    year: int
    federal: JurisdictionRules
    california: JurisdictionRules
    social_security: SocialSecurityRules
    medicare: MedicareRules
    ca_sdi: CaSdiRules
    retirement_401k: Retirement401kRules = Field(..., alias="401k")
    niit: NiitRules


# =============================================================================
# India
# =============================================================================


class IndiaFinancialYearPolicy(BaseModel):
    """Per financial year deduction and capital gains parameters."""
    model_config = ConfigDict(extra="forbid", frozen=True)

    standard_deduction: float = Field(..., ge=0)
    listed_stcg_rate: float = Field(..., ge=0, le=1)
    listed_ltcg_rate: float = Field(..., ge=0, le=1)
    ltcg_exemption: float = Field(..., ge=0)
    is_new_policy: bool = False


class HoldingPeriodRules(BaseModel):
    """Months an asset must be held to count as long term."""
    model_config = ConfigDict(extra="forbid", frozen=True)

    listed: int = Field(..., ge=0)
    unlisted: int = Field(..., ge=0)


class IndiaTaxRules(BaseModel):
    """India slab, surcharge, cess and financial-year policy rules."""
    model_config = ConfigDict(extra="ignore", frozen=True)

    default_financial_year: str
    slabs: tuple[TaxBracket, ...]
    surcharge: tuple[TaxBracket, ...]
    listed_cg_surcharge_cap: float = Field(..., ge=0, le=1)
    cess_rate: float = Field(..., ge=0, le=1)
    unlisted_ltcg_rate: float = Field(..., ge=0, le=1)
    holding_period_months: HoldingPeriodRules
    financial_years: dict[str, IndiaFinancialYearPolicy]

    @field_validator("slabs", "surcharge")
    @classmethod
    def check_brackets(cls, value: tuple) -> tuple:
        return validate_bracket_table(value)

    @model_validator(mode="after")
    def check_default_year(self) -> "IndiaTaxRules":
        if self.default_financial_year not in self.financial_years:
            raise ValueError(
                f"default_financial_year '{self.default_financial_year}' "
                f"has no entry in financial_years"
            )
        return self

    def policy_for(self, financial_year: Optional[str]) -> tuple[str, IndiaFinancialYearPolicy]:
        """Resolve a financial year label to its policy.

        Unknown or missing labels fall back to the default financial year.

        Returns:
            Tuple of (resolved FY label, policy)
        """
        label = str(financial_year).strip() if financial_year is not None else ""
        if label in self.financial_years:
            return label, self.financial_years[label]
        return self.default_financial_year, self.financial_years[self.default_financial_year]
