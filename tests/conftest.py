from __future__ import annotations

from pathlib import Path

import pytest

from tests._fixtures.project_builder import ProjectBuilder


@pytest.fixture
def project(tmp_path: Path) -> ProjectBuilder:
    """Provide a package project rooted at the pytest tmp_path."""
    return ProjectBuilder(tmp_path)


@pytest.fixture(autouse=True)
def _isolate_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in (
        "RECIPEGEN_RECIPES_DIR",
        "RECIPEGEN_FETCHER",
        "RECIPEGEN_USER",
        "RECIPEGEN_USE_HTTPS",
    ):
        monkeypatch.delenv(name, raising=False)
