"""Tax rules CLI commands."""

import json

import click
import yaml

from esopcalc.sdk.taxes.rules import (
    INDIA_RULES_FILENAME,
    get_available_years,
    get_override_rules_dir,
    load_raw_rules,
    resolve_rules_file,
)


@click.group("rules")
def rules():
    """Show the tax tables in use.

    Bundled tables can be overridden by placing a file of the same name
    (e.g. 2025.yaml, india.yaml) in <config dir>/tax-rules/.
    """
    pass


@rules.command("show")
@click.option("--year", type=int, help="US tax year (default: latest available).")
@click.option("--india", "show_india", is_flag=True, help="Show India rules instead of US.")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON.")
def rules_show(year, show_india, as_json):
    """Show US (or India) tax rules and where they were loaded from."""
    if show_india:
        filename = INDIA_RULES_FILENAME
    else:
        available = get_available_years()
        if year is None:
            if not available:
                raise click.ClickException("No US tax rules available")
            year = available[0]
        filename = f"{year}.yaml"

    try:
        path = resolve_rules_file(filename)
        data = load_raw_rules(filename)
    except FileNotFoundError as e:
        raise click.ClickException(str(e))

    if as_json:
        click.echo(json.dumps({"source": str(path), "rules": data}, indent=2, default=str))
        return

    click.echo(f"Source: {path}")
    if not show_india:
        click.echo(f"Available years: {', '.join(str(y) for y in get_available_years())}")
    click.echo(f"Override directory: {get_override_rules_dir()}")
    click.echo()
    click.echo(yaml.safe_dump(data, sort_keys=False, default_flow_style=None))
