"""Shared test fixtures."""

from __future__ import annotations

from pathlib import Path

import pytest


@pytest.fixture(autouse=True)
def temp_home(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Point the default data directory at a temporary location."""
    home = tmp_path / "home"
    home.mkdir()
    monkeypatch.setattr("recfs.context.DATA_DIR", home / ".recfs")
    return home
