"""Shared fixtures: every test runs against an empty, private config dir."""

import pytest


@pytest.fixture(autouse=True)
def isolated_config(tmp_path, monkeypatch):
    """Point ESOP_CALC_CONFIG_PATH at a temp dir so user settings never leak in."""
    config_dir = tmp_path / "config"
    config_dir.mkdir()
    monkeypatch.setenv("ESOP_CALC_CONFIG_PATH", str(config_dir))
    return config_dir
