"""Shared pytest fixtures for tally tests."""

from __future__ import annotations

from pathlib import Path

import pytest

from tally.core.config import ERROR_POLICY_VAR, LOG_LEVEL_VAR
from tally.core.expression_lang import Environment


@pytest.fixture
def env() -> Environment:
    """Return a fresh session environment."""
    return Environment()


@pytest.fixture
def clean_config(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Run in an empty directory with no tally settings in the environment."""
    monkeypatch.chdir(tmp_path)
    monkeypatch.delenv(ERROR_POLICY_VAR, raising=False)
    monkeypatch.delenv(LOG_LEVEL_VAR, raising=False)
    return tmp_path
