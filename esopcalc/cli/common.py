"""Shared CLI helpers: option parsing, rules loading and result output."""

import json
from pathlib import Path
from typing import Callable, Optional

import click
from pydantic import BaseModel, ValidationError
from rich.console import Console

from esopcalc.sdk import (
    build_snapshot,
    get_setting,
    load_india_tax_rules,
    load_tax_rules,
    parse_date,
    result_rows,
    write_results_csv,
)


def setting_default(key: str, fallback=None) -> Callable:
    """Click default that reads settings.json at invocation time."""
    return lambda: get_setting(key, fallback)


def parse_tranches(ctx, param, values) -> list[tuple[float, Optional[float]]]:
    """Parse repeated --tranche SHARES[@PRICE] values."""
    lots = []
    for value in values:
        shares_text, _, price_text = value.partition("@")
        try:
            shares = float(shares_text.replace(",", ""))
            price = float(price_text.replace(",", "")) if price_text else None
        except ValueError:
            raise click.BadParameter(f"Invalid tranche '{value}'. Use SHARES@PRICE, e.g. 100@640.")
        if shares < 0 or (price is not None and price < 0):
            raise click.BadParameter(f"Tranche '{value}' must not be negative.")
        lots.append((shares, price))
    return lots


def validate_date(ctx, param, value):
    """Check a YYYY-MM-DD option, keeping the original string."""
    if value is None:
        return None
    if parse_date(value) is None:
        raise click.BadParameter(f"Invalid date format '{value}'. Use YYYY-MM-DD.")
    return value


def load_us_rules(tax_year):
    try:
        return load_tax_rules(int(tax_year) if tax_year else None)
    except FileNotFoundError as e:
        raise click.ClickException(str(e))
    except ValidationError as e:
        raise click.ClickException(f"Invalid tax rules: {e}")


def load_india_rules():
    try:
        return load_india_tax_rules()
    except FileNotFoundError as e:
        raise click.ClickException(str(e))
    except ValidationError as e:
        raise click.ClickException(f"Invalid India tax rules: {e}")


def emit_result(
    kind: str,
    inputs: dict,
    result: BaseModel,
    as_json: bool,
    csv_path: Optional[str],
    render: Callable[[Console, BaseModel], None],
) -> None:
    """Write a result as JSON or rich text, plus an optional CSV export.

    The CSV path is reported on stderr so JSON output stays parseable.
    """
    if csv_path:
        path = write_results_csv(result_rows(kind, inputs, result), Path(csv_path))
        click.echo(f"Wrote {path}", err=True)

    if as_json:
        click.echo(json.dumps(build_snapshot(kind, inputs, result), indent=2))
    else:
        render(Console(), result)
