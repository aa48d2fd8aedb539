# tests/conftest.py
from __future__ import annotations

import pytest


@pytest.fixture(autouse=True)
def isolated_workspace(tmp_path, monkeypatch):
    """Point FIZZBUZZ_HOME at an empty temporary workspace for every test."""
    home = tmp_path / "fizzbuzz_home"
    monkeypatch.setenv("FIZZBUZZ_HOME", str(home))
    return home
