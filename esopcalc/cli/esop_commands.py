"""ESOP CLI commands: India and US (INR-priced grants)."""

import click
from pydantic import ValidationError

from esopcalc.sdk import (
    GrantPortfolio,
    HouseholdTaxCalculator,
    IndiaEsopCalculator,
    ManualIncome,
    ProfileNotFoundError,
    ReusedIncome,
    UsEsopCalculator,
    load_household_profile,
)

from .common import (
    emit_result,
    load_india_rules,
    load_us_rules,
    parse_tranches,
    setting_default,
    validate_date,
)
from .renderers.result_renderer import render_india_result, render_us_result

TRANCHE_HELP = "Grant tranche as SHARES@PRICE (repeatable), e.g. --tranche 100@640"


def _tranche_inputs(lots, default_price=0.0) -> list[dict]:
    return [
        {"id": i, "share_count": shares, "exercise_price": default_price if price is None else price}
        for i, (shares, price) in enumerate(lots, start=1)
    ]


@click.command("india")
@click.option("--tranche", "tranches", multiple=True, required=True, callback=parse_tranches, help=TRANCHE_HELP)
@click.option("--fmv-exercise", type=float, required=True, help="FMV per share at exercise (INR).")
@click.option("--fmv-sale", type=float, required=True, help="Expected sale price per share (INR).")
@click.option("--exercise-date", callback=validate_date, help="Exercise date (YYYY-MM-DD).")
@click.option("--sale-date", callback=validate_date, help="Sale date (YYYY-MM-DD).")
@click.option("--other-income", type=float, default=0.0, show_default=True, help="Other annual income (INR).")
@click.option("--listed/--unlisted", default=True, help="Listed on a recognised exchange (default: listed).")
@click.option("--fy", "financial_year", default=setting_default("financial_year"), help="Financial year, e.g. 2025-26.")
@click.option("--no-exercise", is_flag=True, help="Only compute the perquisite side.")
@click.option("--json", "as_json", is_flag=True, help="Output a JSON snapshot.")
@click.option("--csv", "csv_path", type=click.Path(dir_okay=False), help="Also export SECTION,KEY,VALUE rows to this CSV file.")
def india(tranches, fmv_exercise, fmv_sale, exercise_date, sale_date, other_income,
          listed, financial_year, no_exercise, as_json, csv_path):
    """India ESOP: perquisite tax at exercise and capital gains tax at sale.

    \b
    Examples:
      esop-calc india --tranche 100@640 --fmv-exercise 5040 --fmv-sale 10000 \\
          --exercise-date 2025-12-15 --sale-date 2026-12-31
      esop-calc india --tranche 100@500 --tranche 50@800 --fmv-exercise 900 \\
          --fmv-sale 1200 --unlisted --other-income 1800000 --json
    """
    tranche_inputs = _tranche_inputs(tranches)
    portfolio = GrantPortfolio.model_validate({"tranches": tranche_inputs})

    result = IndiaEsopCalculator(load_india_rules()).calculate(
        portfolio,
        fmv_exercise=fmv_exercise,
        fmv_sale=fmv_sale,
        exercise_date=exercise_date,
        sale_date=sale_date,
        other_income=other_income,
        is_listed=listed,
        financial_year=financial_year,
        plan_to_exercise=not no_exercise,
    )

    inputs = {
        "financial_year": result.financial_year,
        "is_listed": listed,
        "plan_to_exercise": not no_exercise,
        "fmv_exercise": fmv_exercise,
        "fmv_sale": fmv_sale,
        "exercise_date": exercise_date,
        "sale_date": sale_date,
        "other_income": other_income,
        "tranches": tranche_inputs,
    }
    emit_result("india", inputs, result, as_json, csv_path, render_india_result)


@click.command("us")
@click.option("--tranche", "tranches", multiple=True, required=True, callback=parse_tranches,
              help=TRANCHE_HELP + " (price in INR; defaults to --exercise-price-inr)")
@click.option("--exercise-price-inr", type=float, required=True, help="Exercise price per share (INR).")
@click.option("--fmv-exercise-inr", type=float, required=True, help="FMV per share at exercise (INR).")
@click.option("--fmv-sale-inr", type=float, required=True, help="Expected sale price per share (INR).")
@click.option("--fx-rate", type=float, default=setting_default("fx_rate"), help="INR per USD (default: fx_rate setting).")
@click.option("--ltcg-rate", type=float, default=10.0, show_default=True, help="Long-term capital gains rate (percent).")
@click.option("--niit", is_flag=True, help="Include 3.8% Net Investment Income Tax on the gain.")
@click.option("--exercise-date", callback=validate_date, help="Exercise date (YYYY-MM-DD).")
@click.option("--sale-date", callback=validate_date, help="Sale date (YYYY-MM-DD).")
@click.option("--no-exercise", is_flag=True, help="Only compute the perquisite side.")
@click.option("--reuse-income", is_flag=True, help="Take income from the profile's household section.")
@click.option("--salary", type=float, default=0.0, help="Annual base salary (manual income).")
@click.option("--bonus", type=float, default=0.0, help="Annual bonus (manual income).")
@click.option("--k401", type=float, default=0.0, help="Annual employee 401(k) (manual income).")
@click.option("--health", type=float, default=0.0, help="Annual pre-tax health (manual income).")
@click.option("--other", type=float, default=0.0, help="Annual other Section 125 (manual income).")
@click.option("--filing-status", default=setting_default("filing_status", "Single"), help="Single or MFJ (manual income).")
@click.option("--tax-year", type=int, default=setting_default("tax_year"), help="US tax rules year (default: latest).")
@click.option("--json", "as_json", is_flag=True, help="Output a JSON snapshot.")
@click.option("--csv", "csv_path", type=click.Path(dir_okay=False), help="Also export SECTION,KEY,VALUE rows to this CSV file.")
def us(tranches, exercise_price_inr, fmv_exercise_inr, fmv_sale_inr, fx_rate, ltcg_rate, niit,
       exercise_date, sale_date, no_exercise, reuse_income, salary, bonus, k401, health, other,
       filing_status, tax_year, as_json, csv_path):
    """US ESOP for INR-priced grants: perquisite and capital gains in USD.

    Income comes either from manual options (--salary, --bonus, ...) or,
    with --reuse-income, from the household described in profile.yaml.

    \b
    Examples:
      esop-calc us --tranche 100 --exercise-price-inr 640 --fmv-exercise-inr 5040 \\
          --fmv-sale-inr 10000 --fx-rate 87 --salary 150000
      esop-calc us --tranche 100 --exercise-price-inr 640 --fmv-exercise-inr 5040 \\
          --fmv-sale-inr 10000 --fx-rate 87 --reuse-income --niit
    """
    if fx_rate is None:
        raise click.UsageError("--fx-rate is required (or set it: esop-calc settings set fx_rate 87)")

    rules = load_us_rules(tax_year)

    if reuse_income:
        try:
            household = load_household_profile()
        except ProfileNotFoundError as e:
            raise click.ClickException(str(e))
        except ValidationError as e:
            raise click.ClickException(f"Invalid household profile: {e}")
        income = ReusedIncome(result=HouseholdTaxCalculator(rules).calculate(household))
    else:
        try:
            income = ManualIncome(
                base_salary=salary, bonus=bonus, k401=k401,
                health=health, other=other, filing_status=filing_status,
            )
        except ValidationError:
            raise click.BadParameter(f"Invalid filing status '{filing_status}'. Use Single or MFJ.",
                                     param_hint="--filing-status")

    tranche_inputs = _tranche_inputs(tranches, default_price=exercise_price_inr)
    portfolio = GrantPortfolio.model_validate({"tranches": tranche_inputs})

    result = UsEsopCalculator(rules).calculate(
        portfolio,
        exercise_price_inr=exercise_price_inr,
        fmv_exercise_inr=fmv_exercise_inr,
        fmv_sale_inr=fmv_sale_inr,
        fx_rate=fx_rate,
        income=income,
        ltcg_rate=ltcg_rate,
        include_niit=niit,
        exercise_date=exercise_date,
        sale_date=sale_date,
        plan_to_exercise=not no_exercise,
    )

    inputs = {
        "exercise_price_inr": exercise_price_inr,
        "fmv_exercise_inr": fmv_exercise_inr,
        "fmv_sale_inr": fmv_sale_inr,
        "fx_rate": fx_rate,
        "ltcg_rate": ltcg_rate,
        "include_niit": niit,
        "exercise_date": exercise_date,
        "sale_date": sale_date,
        "plan_to_exercise": not no_exercise,
        "income_source": income.source,
        "tranches": tranche_inputs,
    }
    if not reuse_income:
        inputs.update({
            "base_salary": salary, "bonus": bonus, "k401": k401,
            "health": health, "other": other, "filing_status": income.filing_status.value,
        })
    emit_result("us", inputs, result, as_json, csv_path, render_us_result)
