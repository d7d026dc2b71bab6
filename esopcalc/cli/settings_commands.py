"""Settings CLI commands for ESOP Calc.

Manages settings.json - defaults for CLI options.
"""

import click

from esopcalc.sdk import (
    get_config_dir,
    get_settings_path,
    load_settings,
    set_setting,
)
from esopcalc.sdk.config import KNOWN_SETTINGS


@click.group()
def settings():
    """Manage settings (settings.json).

    \b
    Available settings:
    - tax_year: US tax rules year (e.g. 2025)
    - financial_year: India FY label (e.g. 2025-26)
    - fx_rate: INR per USD (e.g. 87)
    - filing_status: Single or MFJ
    - pay_frequency: Yearly, Monthly or Semi-monthly
    """
    pass


@settings.command("show")
def settings_show():
    """Show current settings and their values."""
    settings_path = get_settings_path()
    current = load_settings()

    click.echo(f"Config directory: {get_config_dir()}")
    click.echo(f"Settings file: {settings_path}")
    click.echo(f"File exists: {settings_path.exists()}")
    click.echo()

    if not current:
        click.echo("No settings configured (using defaults).")
        return

    click.echo("Current settings:")
    for key, value in current.items():
        click.echo(f"  {key}: {value}")


@settings.command("set")
@click.argument("key")
@click.argument("value")
def settings_set(key, value):
    """Set KEY to VALUE in settings.json.

    \b
    Examples:
        esop-calc settings set fx_rate 87
        esop-calc settings set financial_year 2025-26
    """
    if key not in KNOWN_SETTINGS:
        raise click.BadParameter(
            f"Unknown setting '{key}'. Known settings: {', '.join(KNOWN_SETTINGS)}",
            param_hint="KEY",
        )
    try:
        path = set_setting(key, value)
    except ValueError as e:
        raise click.BadParameter(str(e), param_hint="VALUE")

    click.echo(f"Set {key}: {value}")
    click.echo(f"Saved to: {path}")
