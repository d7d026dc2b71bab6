"""Household income tax CLI command."""

import click
from pydantic import ValidationError

from esopcalc.sdk import (
    Earner,
    FixedContribution,
    HouseholdIncome,
    HouseholdTaxCalculator,
    PercentContribution,
    ProfileNotFoundError,
    load_household_profile,
)

from .common import emit_result, load_us_rules, setting_default
from .renderers.result_renderer import render_income_result


def _k401_election(percent, amount, prefix=""):
    if percent is not None and amount is not None:
        raise click.UsageError(f"Use only one of --{prefix}k401-pct and --{prefix}k401-amount")
    if amount is not None:
        return FixedContribution(amount=amount)
    return PercentContribution(percent=percent or 0.0)


@click.command("income")
@click.option("--salary", type=float, default=0.0, help="Annual base salary.")
@click.option("--bonus", type=float, default=0.0, help="Annual bonus.")
@click.option("--k401-pct", type=float, help="401(k) as percent of salary + bonus.")
@click.option("--k401-amount", type=float, help="401(k) as a fixed annual amount.")
@click.option("--match-pct", type=float, default=0.0, help="Employer 401(k) match percent of base salary.")
@click.option("--health", type=float, default=0.0, help="Pre-tax health per semi-monthly period.")
@click.option("--other", type=float, default=0.0, help="Other Section 125 per semi-monthly period.")
@click.option("--spouse-salary", type=float, help="Spouse annual base salary (MFJ only).")
@click.option("--spouse-bonus", type=float, default=0.0, help="Spouse annual bonus.")
@click.option("--spouse-k401-pct", type=float, help="Spouse 401(k) percent.")
@click.option("--spouse-k401-amount", type=float, help="Spouse 401(k) fixed annual amount.")
@click.option("--spouse-match-pct", type=float, default=0.0, help="Spouse employer match percent.")
@click.option("--spouse-health", type=float, default=0.0, help="Spouse pre-tax health per semi-monthly period.")
@click.option("--spouse-other", type=float, default=0.0, help="Spouse other Section 125 per semi-monthly period.")
@click.option("--filing-status", default=setting_default("filing_status", "Single"), help="Single or MFJ.")
@click.option("--pay-frequency", default=setting_default("pay_frequency", "Monthly"),
              help="Yearly, Monthly or Semi-monthly.")
@click.option("--from-profile", is_flag=True, help="Use the household section of profile.yaml.")
@click.option("--tax-year", type=int, default=setting_default("tax_year"), help="US tax rules year (default: latest).")
@click.option("--json", "as_json", is_flag=True, help="Output a JSON snapshot.")
@click.option("--csv", "csv_path", type=click.Path(dir_okay=False), help="Also export SECTION,KEY,VALUE rows to this CSV file.")
def income(salary, bonus, k401_pct, k401_amount, match_pct, health, other,
           spouse_salary, spouse_bonus, spouse_k401_pct, spouse_k401_amount, spouse_match_pct,
           spouse_health, spouse_other, filing_status, pay_frequency, from_profile, tax_year,
           as_json, csv_path):
    """US federal + California household income tax.

    Computes federal and CA income tax, FICA and SDI on combined wages, a
    per-pay-period breakdown and a bonus estimate at marginal rates.

    \b
    Examples:
      esop-calc income --salary 100000
      esop-calc income --salary 180000 --bonus 20000 --k401-pct 10 \\
          --spouse-salary 120000 --filing-status MFJ --pay-frequency Semi-monthly
      esop-calc income --from-profile --json
    """
    if from_profile:
        try:
            household = load_household_profile()
        except ProfileNotFoundError as e:
            raise click.ClickException(str(e))
        except ValidationError as e:
            raise click.ClickException(f"Invalid household profile: {e}")
    else:
        earners = [Earner(
            label="primary",
            base_salary=salary,
            bonus=bonus,
            k401=_k401_election(k401_pct, k401_amount),
            k401_match_percent=match_pct,
            health_semi_monthly=health,
            other_semi_monthly=other,
        )]
        if spouse_salary is not None:
            earners.append(Earner(
                label="spouse",
                base_salary=spouse_salary,
                bonus=spouse_bonus,
                k401=_k401_election(spouse_k401_pct, spouse_k401_amount, prefix="spouse-"),
                k401_match_percent=spouse_match_pct,
                health_semi_monthly=spouse_health,
                other_semi_monthly=spouse_other,
            ))
        try:
            household = HouseholdIncome(
                filing_status=filing_status,
                pay_frequency=pay_frequency,
                earners=tuple(earners),
            )
        except ValidationError as e:
            raise click.BadParameter(
                "; ".join(err["msg"] for err in e.errors()),
                param_hint="--filing-status/--pay-frequency",
            )

    result = HouseholdTaxCalculator(load_us_rules(tax_year)).calculate(household)
    inputs = household.model_dump(mode="json")
    emit_result("income", inputs, result, as_json, csv_path, render_income_result)
