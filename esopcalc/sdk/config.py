"""Configuration management for ESOP Calc.

Configuration is split into two files:

1. settings.json - Machine-specific defaults for CLI options
   - tax_year: US tax rules year (e.g., 2025)
   - financial_year: India FY label (e.g., "2025-26")
   - fx_rate: INR per USD
   - filing_status, pay_frequency: household defaults

2. profile.yaml - User's household description
   - household: filing status, pay frequency and earners
   - Used by `esop-calc income --from-profile` and `esop-calc us --reuse-income`

Config directory resolution:
1. ESOP_CALC_CONFIG_PATH environment variable (if set)
2. ~/.config/esop-calc/ (XDG_CONFIG_HOME fallback)

Tax rules placed in <config dir>/tax-rules/ override the bundled tables.
"""

import json
import os
from pathlib import Path
from typing import Any

import yaml


APP_NAME = "esop-calc"
SETTINGS_FILENAME = "settings.json"
PROFILE_FILENAME = "profile.yaml"

# Settings the CLI understands, with the type each value is stored as
KNOWN_SETTINGS = {
    "tax_year": int,
    "financial_year": str,
    "fx_rate": float,
    "filing_status": str,
    "pay_frequency": str,
}


class ProfileNotFoundError(Exception):
    """Raised when no profile is found."""
    pass


def get_config_dir() -> Path:
    """Get the configuration directory path.

    Resolution order:
    1. ESOP_CALC_CONFIG_PATH environment variable
    2. ~/.config/esop-calc/ (XDG_CONFIG_HOME)

    Returns:
        Path to the configuration directory
    """
    env_path = os.environ.get("ESOP_CALC_CONFIG_PATH")
    if env_path:
        return Path(env_path)

    xdg_config_home = os.environ.get("XDG_CONFIG_HOME", Path.home() / ".config")
    return Path(xdg_config_home) / APP_NAME


def get_settings_path() -> Path:
    """Get the path to settings.json (may not exist yet)."""
    return get_config_dir() / SETTINGS_FILENAME


def load_settings() -> dict:
    """Load machine-specific settings from settings.json.

    Returns:
        Settings dictionary (empty dict if file doesn't exist)
    """
    settings_file = get_settings_path()

    if not settings_file.exists():
        return {}

    with open(settings_file, "r") as f:
        return json.load(f)


def save_settings(settings: dict) -> Path:
    """Save machine-specific settings to settings.json.

    Args:
        settings: Settings dictionary to save

    Returns:
        Path to the saved settings file
    """
    config_dir = get_config_dir()
    config_dir.mkdir(parents=True, exist_ok=True)

    settings_file = config_dir / SETTINGS_FILENAME

    with open(settings_file, "w") as f:
        json.dump(settings, f, indent=2)

    return settings_file


def get_setting(key: str, default: Any = None) -> Any:
    """Get a setting value from settings.json.

    Args:
        key: Setting key (e.g., "fx_rate", "tax_year")
        default: Default value if key not found

    Returns:
        Setting value or default
    """
    settings = load_settings()
    return settings.get(key, default)


def set_setting(key: str, value: Any) -> Path:
    """Set a setting value in settings.json.

    Known keys are converted to their stored type first.

    Args:
        key: Setting key
        value: Value to set

    Returns:
        Path to the saved settings file

    Raises:
        ValueError: If the value can't be converted for a known key
    """
    converter = KNOWN_SETTINGS.get(key)
    if converter is not None:
        try:
            value = converter(value)
        except (TypeError, ValueError):
            raise ValueError(f"Invalid value for {key}: {value!r}")

    settings = load_settings()
    settings[key] = value
    return save_settings(settings)


def get_profile_path() -> Path:
    """Get the path to profile.yaml (may not exist)."""
    return get_config_dir() / PROFILE_FILENAME


def load_profile(require_exists: bool = True) -> dict:
    """Load user profile from profile.yaml.

    Args:
        require_exists: If True, raises ProfileNotFoundError if not found

    Returns:
        Profile dictionary (empty dict if not required and not found)

    Raises:
        ProfileNotFoundError: If require_exists=True and no profile found
    """
    profile_path = get_profile_path()

    if not profile_path.exists():
        if require_exists:
            raise ProfileNotFoundError(
                f"No profile found at {profile_path}\n\n"
                f"Create one with a 'household:' section describing your earners."
            )
        return {}

    with open(profile_path, "r") as f:
        return yaml.safe_load(f) or {}


def load_household_profile():
    """Load the profile's household section as a HouseholdIncome.

    Raises:
        ProfileNotFoundError: If the profile or its household section is missing
        pydantic.ValidationError: If the household section is malformed
    """
    from .schemas import HouseholdIncome

    profile = load_profile(require_exists=True)
    household = profile.get("household")
    if not household:
        raise ProfileNotFoundError(
            f"Profile {get_profile_path()} has no 'household' section"
        )
    return HouseholdIncome.model_validate(household)
