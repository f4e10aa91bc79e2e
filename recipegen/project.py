"""Locating the project root."""

from __future__ import annotations

from pathlib import Path
from typing import Optional

from .config import ConfigError
from .prompts import Accepted, Prompter

VCS_MARKERS = (".git", ".hg", ".svn")


def find_vcs_root(start: Path | str) -> Optional[Path]:
    """Return the nearest directory at or above ``start`` holding a VCS marker."""
    current = Path(start).expanduser().resolve()
    if current.is_file():
        current = current.parent
    for directory in (current, *current.parents):
        if any((directory / marker).exists() for marker in VCS_MARKERS):
            return directory
    return None


def resolve_project_root(
    start: Path | str,
    *,
    interactive: bool,
    prompter: Prompter | None = None,
) -> Path:
    """Find the project root for ``start``.

    Falls back to the current directory when running non-interactively and to
    asking the user otherwise.
    """
    root = find_vcs_root(start)
    if root is not None:
        return root

    if not interactive:
        return Path.cwd().resolve()

    if prompter is not None:
        answer = prompter.ask("Project root", default=str(Path(start).expanduser().resolve()))
        if isinstance(answer, Accepted):
            chosen = Path(answer.value).expanduser().resolve()
            if chosen.is_dir():
                return chosen
            raise ConfigError(f"Project root is not a directory: {chosen}")

    raise ConfigError(f"Could not determine the project root for {start}")


__all__ = ["VCS_MARKERS", "find_vcs_root", "resolve_project_root"]
