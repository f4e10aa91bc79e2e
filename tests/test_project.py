"""Tests for project root resolution."""

from __future__ import annotations

from pathlib import Path

import pytest

from recipegen.config import ConfigError
from recipegen.project import find_vcs_root, resolve_project_root
from tests._fixtures.doubles import ScriptedPrompter
from tests._fixtures.project_builder import ProjectBuilder


def test_finds_nearest_marker_above_start(project: ProjectBuilder) -> None:
    nested = project.root / "lisp" / "extras"
    nested.mkdir(parents=True)

    assert find_vcs_root(nested) == project.path()
    assert resolve_project_root(nested, interactive=True) == project.path()


def test_git_file_marks_worktree_root(tmp_path: Path) -> None:
    worktree = tmp_path / "worktree"
    worktree.mkdir()
    (worktree / ".git").write_text("gitdir: /elsewhere\n", encoding="utf-8")
    main = worktree / "foo.el"
    main.write_text("", encoding="utf-8")

    assert find_vcs_root(main) == worktree.resolve()


def test_non_interactive_falls_back_to_cwd(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    plain = tmp_path / "plain"
    plain.mkdir()
    monkeypatch.chdir(plain)
    monkeypatch.setattr("recipegen.project.find_vcs_root", lambda start: None)

    assert resolve_project_root(plain, interactive=False) == plain.resolve()


def test_interactive_asks_for_root(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    chosen = tmp_path / "chosen"
    chosen.mkdir()
    monkeypatch.setattr("recipegen.project.find_vcs_root", lambda start: None)
    prompter = ScriptedPrompter(answers=[str(chosen)])

    assert resolve_project_root(tmp_path, interactive=True, prompter=prompter) == chosen.resolve()


def test_interactive_without_answer_is_a_configuration_error(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    monkeypatch.setattr("recipegen.project.find_vcs_root", lambda start: None)

    with pytest.raises(ConfigError):
        resolve_project_root(tmp_path, interactive=True, prompter=ScriptedPrompter())
    with pytest.raises(ConfigError):
        resolve_project_root(tmp_path, interactive=True)
    with pytest.raises(ConfigError):
        resolve_project_root(
            tmp_path, interactive=True, prompter=ScriptedPrompter(answers=[str(tmp_path / "nope")])
        )
