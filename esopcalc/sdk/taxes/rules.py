"""Tax rules loading.

Rules ship as YAML inside the package (esopcalc/tax_rules/). A file of the
same name in the config directory's tax-rules/ folder overrides the bundled
copy, so users can update tables without reinstalling.
"""

import logging
from functools import lru_cache
from pathlib import Path
from typing import Optional

import yaml

from .schemas import IndiaTaxRules, UsTaxRules

logger = logging.getLogger(__name__)

INDIA_RULES_FILENAME = "india.yaml"


def get_bundled_rules_dir() -> Path:
    """Get the tax_rules directory shipped with the package."""
    return Path(__file__).parent.parent.parent / "tax_rules"


def get_override_rules_dir() -> Path:
    """Get the user's tax-rules override directory (may not exist)."""
    from ..config import get_config_dir

    return get_config_dir() / "tax-rules"


def _rules_dirs() -> list[Path]:
    return [get_override_rules_dir(), get_bundled_rules_dir()]


def resolve_rules_file(filename: str) -> Path:
    """Find a rules file, preferring the override directory.

    Raises:
        FileNotFoundError: If neither directory has the file
    """
    for rules_dir in _rules_dirs():
        candidate = rules_dir / filename
        if candidate.exists():
            return candidate
    raise FileNotFoundError(
        f"Tax rules file not found: {filename} "
        f"(checked {', '.join(str(d) for d in _rules_dirs())})"
    )


def get_available_years() -> list[int]:
    """Get sorted list of available US tax rule years (descending)."""
    years = set()
    for rules_dir in _rules_dirs():
        if rules_dir.is_dir():
            years.update(int(p.stem) for p in rules_dir.glob("*.yaml") if p.stem.isdigit())
    return sorted(years, reverse=True)


@lru_cache(maxsize=None)
def _load_yaml(path: str, mtime: float) -> dict:
    logger.debug(f"Loading tax rules from {path}")
    with open(path, "r") as f:
        return yaml.safe_load(f) or {}


def _read(path: Path) -> dict:
    return _load_yaml(str(path), path.stat().st_mtime)


def load_tax_rules(year: Optional[int] = None) -> UsTaxRules:
    """Load and validate US rules for a tax year.

    Args:
        year: Tax year; None picks the latest available year

    Raises:
        FileNotFoundError: If no rules file exists for the year
        pydantic.ValidationError: If the file is malformed
    """
    if year is None:
        available = get_available_years()
        if not available:
            raise FileNotFoundError("No US tax rules files available")
        year = available[0]

    path = resolve_rules_file(f"{int(year)}.yaml")
    return UsTaxRules.model_validate(_read(path))


def load_india_tax_rules() -> IndiaTaxRules:
    """Load and validate the India tax rules.

    Raises:
        FileNotFoundError: If india.yaml is missing
        pydantic.ValidationError: If the file is malformed
    """
    path = resolve_rules_file(INDIA_RULES_FILENAME)
    return IndiaTaxRules.model_validate(_read(path))


def load_raw_rules(filename: str) -> dict:
    """Load a rules file without validation (for display)."""
    return dict(_read(resolve_rules_file(filename)))
