"""Emacs Lisp library header inspection."""

from __future__ import annotations

import re
from pathlib import Path

_SUMMARY_RE = re.compile(r"^;;;\s*(?P<file>[^\s]+?)\s+---\s*(?P<summary>.*)$")
_HEADER_RE = re.compile(r"^;+\s*(?P<key>[A-Za-z][A-Za-z-]*)\s*:\s*(?P<value>.*)$")
_SECTION_RE = re.compile(r"^;;;\s*(Commentary|Code)\s*:", re.IGNORECASE)
_METADATA_KEYS = {"version", "package-version", "package-requires"}


def package_name(path: Path | str) -> str:
    """Return the package name a file would provide."""
    return Path(path).stem


def is_main_file(path: Path | str) -> bool:
    """Return True when ``path`` declares itself the main file of a package."""
    target = Path(path)
    try:
        text = target.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError):
        return False
    return declares_package(text, target.name)


def declares_package(text: str, filename: str) -> bool:
    lines = text.splitlines()
    if not lines:
        return False

    summary = _SUMMARY_RE.match(lines[0].strip())
    if summary is None or summary.group("file") != filename:
        return False

    for line in lines[1:]:
        stripped = line.strip()
        if _SECTION_RE.match(stripped):
            break
        header = _HEADER_RE.match(stripped)
        if header and header.group("key").lower() in _METADATA_KEYS:
            return True
    return False


__all__ = ["declares_package", "is_main_file", "package_name"]
