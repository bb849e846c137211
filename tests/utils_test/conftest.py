"""Fixtures for all utils tests."""

import os
from collections.abc import Generator
from pathlib import Path

import pytest

from fabulator.utils.settings import reset_context


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch: pytest.MonkeyPatch) -> Generator[None]:
    """Remove FABULATOR_ variables and reset the context around each test."""
    for key in list(os.environ):
        if key.startswith("FABULATOR_"):
            monkeypatch.delenv(key, raising=False)
    reset_context()
    yield
    reset_context()


@pytest.fixture
def project(tmp_path: Path) -> Path:
    """Create a project directory with an empty ``.FABulous`` folder."""
    project_dir = tmp_path / "project"
    (project_dir / ".FABulous").mkdir(parents=True)
    return project_dir
