"""
Pytest configuration and fixtures for Butiki tests.
"""

import pytest


@pytest.fixture(autouse=True)
def isolated_home(tmp_path, monkeypatch):
    """Point HOME at a temp dir and clear Butiki environment overrides."""
    home = tmp_path / "home"
    home.mkdir()
    monkeypatch.setenv("HOME", str(home))
    for var in ("BUTIKI_CONFIG", "BUTIKI_COMMANDS_FILE", "BUTIKI_LOG_LEVEL", "EDITOR"):
        monkeypatch.delenv(var, raising=False)
    return home


@pytest.fixture
def commands_file(isolated_home):
    """Default store location inside the isolated home."""
    return isolated_home / ".butiki_commands.json"
