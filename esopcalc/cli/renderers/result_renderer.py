"""Rich renderers for calculator results.

Transforms SDK result models into formatted Rich tables.
"""

from rich import box
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from esopcalc.sdk.schemas import (
    BonusEstimate,
    IncomeTaxResult,
    IndiaEsopResult,
    PeriodBreakdown,
    UsEsopResult,
)

CATEGORY_LABELS = {
    "none": "No taxable gain",
    "listed_stcg": "Listed, short term",
    "listed_ltcg": "Listed, long term",
    "unlisted_stcg": "Unlisted, short term (slab rates)",
    "unlisted_ltcg": "Unlisted, long term",
}


def _fmt(amount: float | None, symbol: str = "$") -> str:
    """Format currency amount."""
    if amount is None:
        return "-"
    sign = "-" if amount < 0 else ""
    return f"{sign}{symbol}{abs(amount):,.2f}"


def _inr(amount: float | None) -> str:
    return _fmt(amount, "₹")


def _pct(rate: float) -> str:
    return f"{rate:.1f}%"


def _summary_table(title: str) -> Table:
    table = Table(title=title, box=box.ROUNDED, show_header=False)
    table.add_column("", style="bold", min_width=30)
    table.add_column("", justify="right", min_width=16)
    return table


def render_india_result(console: Console, result: IndiaEsopResult) -> None:
    """Render an India ESOP result."""
    policy = "new regime" if result.is_new_tax_policy else "old regime"
    console.print(Panel(
        f"FY {result.financial_year} ({policy}), "
        f"{'listed' if result.is_listed else 'unlisted'} shares, "
        f"held {result.holding_months} month(s)",
        title="India ESOP",
        border_style="dim",
    ))

    table = _summary_table("Exercise")
    table.add_row("Total Shares", f"{result.total_shares:,.0f}")
    table.add_row("Weighted Avg Exercise Price", _inr(result.weighted_avg_exercise_price))
    table.add_row("Exercise Cost", _inr(result.exercise_cost))
    table.add_row("Perquisite", _inr(result.perquisite))
    table.add_row("Taxable Income Before", _inr(result.income_before_perquisite), style="dim")
    table.add_row("Taxable Income After", _inr(result.income_after_perquisite), style="dim")
    table.add_row(f"Perquisite Tax (surcharge {_pct(result.surcharge_rate_on_perquisite)})", _inr(result.perquisite_tax))
    console.print(table)

    if not result.plan_to_exercise:
        console.print("[dim]Not planning to exercise: sale figures omitted.[/dim]")
        return

    table = _summary_table("Sale")
    table.add_row("Capital Gain", _inr(result.capital_gain))
    table.add_row("Category", CATEGORY_LABELS[result.capital_gains_category])
    if result.capital_gains_category == "listed_ltcg":
        table.add_row(f"LTCG Exemption ({_pct(result.ltcg_rate)} rate)", _inr(result.ltcg_exemption), style="dim")
    table.add_row("Taxable Gain", _inr(result.taxable_capital_gain), style="dim")
    table.add_row("Capital Gains Tax", _inr(result.capital_gains_tax))
    table.add_row("", "")
    table.add_row("Total Tax", _inr(result.total_tax))
    table.add_row("Total Cost to Exercise", _inr(result.total_cost_to_exercise))
    table.add_row("Gross Proceeds", _inr(result.gross_proceeds))
    table.add_row("[bold green]Net After Tax[/bold green]", f"[bold green]{_inr(result.net_after_tax)}[/bold green]")
    table.add_row("Effective Tax Rate", _pct(result.effective_tax_rate))
    console.print(table)


def render_us_result(console: Console, result: UsEsopResult) -> None:
    """Render a US ESOP result."""
    source = "household calculation" if result.income_source == "income_tax_result" else "manual entry"
    console.print(Panel(
        f"{result.filing_status.value}, FX {result.fx_rate:,.2f} INR/USD, "
        f"income from {source}, held {result.holding_months} month(s)",
        title="US ESOP",
        border_style="dim",
    ))

    table = _summary_table("Exercise")
    table.add_row("Total Shares", f"{result.total_shares:,.0f}")
    table.add_row("Exercise Price", _fmt(result.exercise_price_usd))
    table.add_row("FMV at Exercise", _fmt(result.fmv_exercise_usd))
    table.add_row("Perquisite", _fmt(result.perquisite_usd))
    table.add_row("Tax Without Perquisite", _fmt(result.baseline_tax), style="dim")
    table.add_row("Tax With Perquisite", _fmt(result.tax_with_perquisite), style="dim")
    table.add_row("Marginal Tax from Perquisite", _fmt(result.marginal_tax_from_perquisite))
    table.add_row("Exercise Cost", _fmt(result.exercise_cost_usd))
    console.print(table)

    if not result.plan_to_exercise:
        console.print("[dim]Not planning to exercise: sale figures omitted.[/dim]")
        return

    table = _summary_table("Sale")
    table.add_row("Capital Gain", _fmt(result.capital_gain_usd))
    table.add_row("Term", result.capital_gains_term.replace("_", " "))
    if result.niit:
        table.add_row("NIIT", _fmt(result.niit), style="dim")
    table.add_row("Capital Gains Tax", _fmt(result.capital_gains_tax))
    table.add_row("", "")
    table.add_row("Total Tax", _fmt(result.total_tax_usd))
    table.add_row("Total Cost to Exercise", _fmt(result.total_cost_to_exercise_usd))
    table.add_row("Gross Proceeds", _fmt(result.gross_proceeds_usd))
    table.add_row("[bold green]Net After Tax[/bold green]", f"[bold green]{_fmt(result.net_after_tax_usd)}[/bold green]")
    table.add_row("Effective Tax Rate", _pct(result.effective_tax_rate))
    console.print(table)


def _render_breakdown(console: Console, title: str, breakdown: PeriodBreakdown) -> None:
    annual = breakdown.annual
    per = breakdown.per_period

    table = Table(title=title, box=box.ROUNDED)
    table.add_column("", style="bold", min_width=22)
    table.add_column("Annual", justify="right", min_width=14)
    table.add_column(f"Per Period (/{breakdown.periods_per_year})", justify="right", min_width=14)

    rows = [
        ("Gross", "gross"),
        ("Pre-tax Deductions", "pretax_deductions"),
        ("Federal Tax", "federal_tax"),
        ("CA Tax", "ca_tax"),
        ("Social Security", "social_security"),
        ("Medicare", "medicare"),
        ("Additional Medicare", "additional_medicare"),
        ("CA SDI", "ca_sdi"),
        ("Total Tax", "total_tax"),
    ]
    for label, field in rows:
        table.add_row(label, _fmt(getattr(annual, field)), _fmt(getattr(per, field)))
    table.add_row(
        "[bold green]Net[/bold green]",
        f"[bold green]{_fmt(annual.net)}[/bold green]",
        f"[bold green]{_fmt(per.net)}[/bold green]",
    )
    console.print(table)


def _render_bonus(console: Console, title: str, estimate: BonusEstimate) -> None:
    table = _summary_table(title)
    table.add_row(f"Federal ({_pct(estimate.federal_marginal_rate)} marginal)", _fmt(estimate.federal_tax))
    table.add_row(f"CA ({_pct(estimate.ca_marginal_rate)} marginal)", _fmt(estimate.ca_tax))
    table.add_row("Social Security", _fmt(estimate.social_security))
    table.add_row("Medicare", _fmt(estimate.medicare))
    table.add_row("Additional Medicare", _fmt(estimate.additional_medicare))
    table.add_row("CA SDI", _fmt(estimate.ca_sdi))
    table.add_row("Total Tax on Bonus", _fmt(estimate.total_tax))
    table.add_row("[bold green]Net Bonus[/bold green]", f"[bold green]{_fmt(estimate.net_bonus)}[/bold green]")
    console.print(table)


def render_income_result(console: Console, result: IncomeTaxResult) -> None:
    """Render a household income tax result."""
    console.print(Panel(
        f"{result.filing_status.value}, {result.pay_frequency.value} pay, tax year {result.tax_year}",
        title="Household Income Tax",
        border_style="dim",
    ))

    table = _summary_table("Annual Summary")
    table.add_row("Gross Income", _fmt(result.gross_income))
    table.add_row(
        f"401(k) Employee (limit {_fmt(result.k401_household_limit)})",
        _fmt(result.k401_employee),
    )
    table.add_row("Adjusted Income", _fmt(result.adjusted_income))
    table.add_row("Federal Taxable", _fmt(result.federal_taxable_income), style="dim")
    table.add_row("CA Taxable", _fmt(result.ca_taxable_income), style="dim")
    table.add_row("Total Tax", _fmt(result.total_tax))
    table.add_row("Effective Rate", _pct(result.effective_tax_rate))
    table.add_row("Federal / CA Marginal", f"{_pct(result.federal_marginal_rate)} / {_pct(result.ca_marginal_rate)}")
    table.add_row("Suggested Ordinary Rate", _pct(result.suggested_ordinary_rate))
    if result.employer_match_annual:
        table.add_row("Employer Match (not taxed)", _fmt(result.employer_match_annual))
    table.add_row("[bold green]Net Annual[/bold green]", f"[bold green]{_fmt(result.net_annual)}[/bold green]")
    console.print(table)

    _render_breakdown(console, "All Wages", result.breakdown)
    if result.bonus:
        _render_breakdown(console, "Base Salary Only", result.base_only)
        _render_bonus(console, "Bonus Estimate", result.bonus_estimate)

    if len(result.earners) > 1:
        table = Table(title="Allocation by Earner (share of gross)", box=box.ROUNDED)
        table.add_column("Earner", style="bold")
        table.add_column("Share", justify="right")
        table.add_column("Gross", justify="right")
        table.add_column("Allocated Tax", justify="right")
        table.add_column("Net", justify="right")
        for earner in result.earners:
            table.add_row(
                earner.label,
                _pct(earner.income_share * 100),
                _fmt(earner.gross),
                _fmt(earner.allocated_total_tax),
                _fmt(earner.net_annual),
            )
        console.print(table)
