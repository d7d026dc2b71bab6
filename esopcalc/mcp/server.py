"""ESOP Calc MCP Server - FastMCP implementation for the tax calculators."""

import json
import logging
from typing import Any

from mcp.server.fastmcp import FastMCP
from pydantic import Field

from esopcalc.sdk import (
    Earner,
    GrantPortfolio,
    HouseholdIncome,
    HouseholdTaxCalculator,
    IndiaEsopCalculator,
    ManualIncome,
    ReusedIncome,
    UsEsopCalculator,
    load_household_profile,
    load_india_tax_rules,
    load_tax_rules,
)
from esopcalc.sdk.taxes.rules import get_available_years

logger = logging.getLogger(__name__)

# Initialize FastMCP server
mcp = FastMCP("esop-calc")

TRANCHES_DESCRIPTION = (
    "Grant tranches as a list of {share_count, exercise_price} objects, "
    "e.g. [{\"share_count\": 100, \"exercise_price\": 640}]"
)


def _portfolio(tranches: list[dict], default_price: float = 0.0) -> GrantPortfolio:
    return GrantPortfolio.model_validate({
        "tranches": [
            {
                "id": i,
                "share_count": t.get("share_count", 0),
                "exercise_price": t.get("exercise_price", default_price),
            }
            for i, t in enumerate(tranches or [{}], start=1)
        ]
    })


# --- Tools ---

@mcp.tool()
async def india_esop(
    tranches: list[dict] = Field(description=TRANCHES_DESCRIPTION),
    fmv_exercise: float = Field(description="FMV per share at exercise (INR)"),
    fmv_sale: float = Field(description="Expected sale price per share (INR)"),
    exercise_date: str | None = Field(default=None, description="Exercise date (YYYY-MM-DD)"),
    sale_date: str | None = Field(default=None, description="Sale date (YYYY-MM-DD)"),
    other_income: float = Field(default=0.0, description="Other annual income (INR)"),
    is_listed: bool = Field(default=True, description="Shares listed on a recognised exchange"),
    financial_year: str | None = Field(default=None, description="Financial year, e.g. '2025-26'"),
    plan_to_exercise: bool = Field(default=True, description="False to compute only the perquisite side"),
) -> dict[str, Any]:
    """India ESOP perquisite tax and capital gains tax. Amounts in INR."""
    try:
        result = IndiaEsopCalculator(load_india_tax_rules()).calculate(
            _portfolio(tranches),
            fmv_exercise=fmv_exercise,
            fmv_sale=fmv_sale,
            exercise_date=exercise_date,
            sale_date=sale_date,
            other_income=other_income,
            is_listed=is_listed,
            financial_year=financial_year,
            plan_to_exercise=plan_to_exercise,
        )
        return result.model_dump(mode="json")
    except Exception as e:
        logger.error(f"Error computing India ESOP: {e}")
        return {"error": str(e)}


@mcp.tool()
async def us_esop(
    tranches: list[dict] = Field(description=TRANCHES_DESCRIPTION + " (INR prices)"),
    exercise_price_inr: float = Field(description="Exercise price per share (INR)"),
    fmv_exercise_inr: float = Field(description="FMV per share at exercise (INR)"),
    fmv_sale_inr: float = Field(description="Expected sale price per share (INR)"),
    fx_rate: float = Field(description="INR per USD, e.g. 87"),
    base_salary: float = Field(default=0.0, description="Annual base salary (manual income)"),
    bonus: float = Field(default=0.0, description="Annual bonus (manual income)"),
    k401: float = Field(default=0.0, description="Annual employee 401(k) (manual income)"),
    health: float = Field(default=0.0, description="Annual pre-tax health (manual income)"),
    other: float = Field(default=0.0, description="Annual other Section 125 (manual income)"),
    filing_status: str = Field(default="Single", description="'Single' or 'MFJ' (manual income)"),
    reuse_household_profile: bool = Field(default=False, description="Take income from profile.yaml's household instead"),
    ltcg_rate: float = Field(default=10.0, description="Long-term capital gains rate in percent"),
    include_niit: bool = Field(default=False, description="Add 3.8% Net Investment Income Tax"),
    exercise_date: str | None = Field(default=None, description="Exercise date (YYYY-MM-DD)"),
    sale_date: str | None = Field(default=None, description="Sale date (YYYY-MM-DD)"),
    plan_to_exercise: bool = Field(default=True, description="False to compute only the perquisite side"),
    tax_year: int | None = Field(default=None, description="US tax rules year (default: latest)"),
) -> dict[str, Any]:
    """US tax on exercising and selling INR-priced options. Amounts in USD."""
    try:
        rules = load_tax_rules(tax_year)
        if reuse_household_profile:
            income = ReusedIncome(result=HouseholdTaxCalculator(rules).calculate(load_household_profile()))
        else:
            income = ManualIncome(
                base_salary=base_salary, bonus=bonus, k401=k401,
                health=health, other=other, filing_status=filing_status,
            )
        result = UsEsopCalculator(rules).calculate(
            _portfolio(tranches, default_price=exercise_price_inr),
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
        return result.model_dump(mode="json")
    except Exception as e:
        logger.error(f"Error computing US ESOP: {e}")
        return {"error": str(e)}


@mcp.tool()
async def household_income_tax(
    earners: list[dict] = Field(description=(
        "One or two earners: {label, base_salary, bonus, k401: {kind: 'percent', percent} | "
        "{kind: 'fixed', amount}, k401_match_percent, health_semi_monthly, other_semi_monthly}"
    )),
    filing_status: str = Field(default="Single", description="'Single' or 'MFJ'"),
    pay_frequency: str = Field(default="Monthly", description="'Yearly', 'Monthly' or 'Semi-monthly'"),
    tax_year: int | None = Field(default=None, description="US tax rules year (default: latest)"),
) -> dict[str, Any]:
    """US federal + California household income tax with per-period breakdown."""
    try:
        household = HouseholdIncome(
            filing_status=filing_status,
            pay_frequency=pay_frequency,
            earners=tuple(Earner.model_validate(e) for e in earners),
        )
        result = HouseholdTaxCalculator(load_tax_rules(tax_year)).calculate(household)
        return result.model_dump(mode="json")
    except Exception as e:
        logger.error(f"Error computing household income tax: {e}")
        return {"error": str(e)}


# --- Resources ---

@mcp.resource("esopcalc://rules/years")
async def list_years_resource() -> str:
    """List US tax years with installed rules."""
    try:
        return json.dumps({"years": get_available_years()}, indent=2)
    except Exception as e:
        return json.dumps({"error": str(e)})


# --- Server Entry Point ---

def run_server():
    """Run the MCP server in stdio mode."""
    mcp.run(transport="stdio")


if __name__ == "__main__":
    run_server()
