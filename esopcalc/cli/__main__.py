"""ESOP Calc CLI - Command-line interface for ESOP and income tax calculators."""

import logging
import os

import click

from esopcalc import __version__

from .esop_commands import india as india_command
from .esop_commands import us as us_command
from .income_commands import income as income_command
from .rules_commands import rules as rules_group
from .settings_commands import settings as settings_group


@click.group()
@click.version_option(version=__version__, prog_name="esop-calc")
def cli():
    """ESOP Calc - India/US ESOP and US/California income tax calculators.

    Configuration is loaded from (in order):

    \b
    1. ESOP_CALC_CONFIG_PATH environment variable
    2. ~/.config/esop-calc/ (XDG default)

    settings.json there supplies option defaults (fx_rate, financial_year,
    ...), profile.yaml describes your household and tax-rules/ overrides
    the bundled tax tables.
    """
    pass


cli.add_command(india_command)
cli.add_command(us_command)
cli.add_command(income_command)
cli.add_command(rules_group)
cli.add_command(settings_group)


def main():
    """Entry point for the CLI."""
    log_level = os.environ.get("LOG_LEVEL", "WARNING").upper()
    logging.basicConfig(
        level=getattr(logging, log_level, logging.WARNING),
        format="%(asctime)s.%(msecs)03d %(levelname)s: %(message)s",
        datefmt="%H:%M:%S",
    )
    cli()


if __name__ == "__main__":
    main()
