"""Result export: SECTION,KEY,VALUE CSV rows and JSON snapshots."""

import csv
import io
import json
from datetime import datetime, timezone
from enum import Enum
from pathlib import Path
from typing import Any, Optional

from pydantic import BaseModel

CSV_HEADER = ("SECTION", "KEY", "VALUE")

# (label, attribute path on the result) per calculator
INDIA_ROWS = [
    ("Financial Year", "financial_year"),
    ("Perquisite", "perquisite"),
    ("Perquisite Tax", "perquisite_tax"),
    ("Surcharge Rate on Perquisite (%)", "surcharge_rate_on_perquisite"),
    ("Holding Months", "holding_months"),
    ("Capital Gain", "capital_gain"),
    ("Capital Gain Category", "capital_gains_category"),
    ("Capital Gain Tax", "capital_gains_tax"),
    ("Exercise Cost", "exercise_cost"),
    ("Total Tax", "total_tax"),
    ("Total Cost to Exercise", "total_cost_to_exercise"),
    ("Gross Proceeds", "gross_proceeds"),
    ("Net After Tax", "net_after_tax"),
    ("Effective Tax Rate (%)", "effective_tax_rate"),
]

US_ROWS = [
    ("Income Source", "income_source"),
    ("Perquisite (USD)", "perquisite_usd"),
    ("Base Income", "base_gross_income"),
    ("Total Income with Perquisite", "total_gross_income"),
    ("Tax on Base Income", "baseline_tax"),
    ("Marginal Tax from Perquisite", "marginal_tax_from_perquisite"),
    ("Capital Gain (USD)", "capital_gain_usd"),
    ("Capital Gain Term", "capital_gains_term"),
    ("NIIT", "niit"),
    ("Capital Gain Tax", "capital_gains_tax"),
    ("Exercise Cost (USD)", "exercise_cost_usd"),
    ("Total Tax", "total_tax_usd"),
    ("Total Cost to Exercise (USD)", "total_cost_to_exercise_usd"),
    ("Gross Proceeds (USD)", "gross_proceeds_usd"),
    ("Net After Tax (USD)", "net_after_tax_usd"),
    ("Effective Tax Rate (%)", "effective_tax_rate"),
]

INCOME_ROWS = [
    ("Filing Status", "filing_status"),
    ("Gross Income", "gross_income"),
    ("401(k) Employee", "k401_employee"),
    ("Pre-tax Deductions", "pretax_deductions"),
    ("Adjusted Income", "adjusted_income"),
    ("Federal Taxable Income", "federal_taxable_income"),
    ("Federal Tax", "federal_tax"),
    ("CA Taxable Income", "ca_taxable_income"),
    ("CA Tax", "ca_tax"),
    ("Social Security", "payroll.social_security"),
    ("Medicare", "payroll.medicare"),
    ("Additional Medicare", "payroll.additional_medicare"),
    ("CA SDI", "payroll.ca_sdi"),
    ("Total Tax", "total_tax"),
    ("Net Annual", "net_annual"),
    ("Net Per Period", "breakdown.per_period.net"),
    ("Effective Tax Rate (%)", "effective_tax_rate"),
    ("Suggested Ordinary Rate (%)", "suggested_ordinary_rate"),
    ("Employer Match (Annual)", "employer_match_annual"),
    ("Net Bonus", "bonus_estimate.net_bonus"),
]

CALCULATORS = {
    "india": ("India", INDIA_ROWS),
    "us": ("US", US_ROWS),
    "income": ("Income", INCOME_ROWS),
}


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


def _lookup(result: BaseModel, path: str) -> Any:
    value: Any = result
    for part in path.split("."):
        value = getattr(value, part)
    return value


def _format_value(value: Any) -> Any:
    if isinstance(value, bool):
        return "Yes" if value else "No"
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, (list, tuple, dict)):
        return json.dumps(value, default=str)
    return value


def _check_kind(kind: str) -> None:
    if kind not in CALCULATORS:
        raise ValueError(f"Unknown calculator: {kind}. Must be one of {', '.join(CALCULATORS)}")


def result_rows(
    kind: str,
    inputs: dict,
    result: BaseModel,
    timestamp: Optional[str] = None,
) -> list[tuple]:
    """Flatten a calculation into SECTION,KEY,VALUE rows.

    The first row is the header, followed by Meta rows, one Inputs row per
    input and the calculator's result rows.

    Args:
        kind: "india", "us" or "income"
        inputs: Input values as given to the calculator
        result: The calculator's result
        timestamp: ISO timestamp (defaults to now, UTC)

    Raises:
        ValueError: If kind is unknown
    """
    _check_kind(kind)
    section, row_fields = CALCULATORS[kind]

    rows = [CSV_HEADER]
    rows.append(("Meta", "Timestamp", timestamp or _now_iso()))
    rows.append(("Meta", "Calculator", kind))
    for key, value in inputs.items():
        rows.append(("Inputs", key, _format_value(value)))
    for label, path in row_fields:
        rows.append((section, label, _format_value(_lookup(result, path))))
    return rows


def rows_to_csv_string(rows: list[tuple]) -> str:
    output = io.StringIO()
    writer = csv.writer(output, lineterminator="\n")
    writer.writerows(rows)
    return output.getvalue()


def write_results_csv(rows: list[tuple], output_path: Path) -> Path:
    """Write export rows to a CSV file.

    Returns:
        Path to the written file
    """
    output_path = Path(output_path)
    with open(output_path, "w", newline="") as csvfile:
        writer = csv.writer(csvfile, lineterminator="\n")
        writer.writerows(rows)
    return output_path


def build_snapshot(
    kind: str,
    inputs: dict,
    result: BaseModel,
    timestamp: Optional[str] = None,
) -> dict:
    """Serializable snapshot of a calculation's inputs and outputs."""
    _check_kind(kind)
    return {
        "timestamp": timestamp or _now_iso(),
        "calculator": kind,
        "inputs": json.loads(json.dumps(inputs, default=str)),
        "outputs": result.model_dump(mode="json"),
    }


def default_export_filename(kind: str, timestamp: Optional[str] = None) -> str:
    """File name like india_results_2025-01-31-12-00-00.csv."""
    stamp = (timestamp or _now_iso())[:19].replace(":", "-").replace("T", "-")
    return f"{kind}_results_{stamp}.csv"
