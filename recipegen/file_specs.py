"""File-spec expansion: select a package's files below a project root.

A file spec is an ordered list of entries:

* a glob relative to the root (``*`` stays within a directory, ``**`` recurses);
* ``":defaults"``, which splices in the default spec;
* ``[":exclude", glob, ...]``, which drops matches from the files selected so far;
* ``[target_dir, entry, ...]``, whose entries are expanded in place. The target
  directory only matters when the package is installed.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any, FrozenSet, Optional, Sequence, Set

from .logging import get_logger

DEFAULTS_KEYWORD = ":defaults"
EXCLUDE_KEYWORD = ":exclude"

DEFAULT_FILES_SPEC: tuple = (
    "*.el",
    "lisp/*.el",
    "dir",
    "*.info",
    "*.texi",
    "*.texinfo",
    "doc/dir",
    "doc/*.info",
    "doc/*.texi",
    "doc/*.texinfo",
    "docs/dir",
    "docs/*.info",
    "docs/*.texi",
    "docs/*.texinfo",
    (
        EXCLUDE_KEYWORD,
        ".dir-locals.el",
        "lisp/.dir-locals.el",
        "test.el",
        "tests.el",
        "*-test.el",
        "*-tests.el",
        "*-pkg.el",
        "*-autoloads.el",
        "lisp/test.el",
        "lisp/tests.el",
        "lisp/*-test.el",
        "lisp/*-tests.el",
        "lisp/*-pkg.el",
        "lisp/*-autoloads.el",
    ),
)

_VCS_DIRS = {".git", ".hg", ".svn"}

logger = get_logger("file_specs")


class FileSpecError(ValueError):
    """Raised for file spec entries that cannot be interpreted."""


@dataclass(frozen=True)
class ExpansionResult:
    """Files selected by a spec, or the reason expansion failed."""

    files: FrozenSet[Path]
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None


def expand(
    root: Path | str,
    spec: Sequence[Any],
    *,
    default_spec: Sequence[Any] = DEFAULT_FILES_SPEC,
) -> ExpansionResult:
    """Expand ``spec`` below ``root`` without raising."""
    root_path = Path(root).expanduser().resolve()
    try:
        files = _expand_entries(root_path, spec, default_spec, allow_defaults=True)
    except (FileSpecError, ValueError, OSError) as exc:
        return ExpansionResult(files=frozenset(), error=str(exc))
    return ExpansionResult(files=frozenset(files))


def resolve(
    root: Path | str,
    spec: Sequence[Any],
    *,
    default_spec: Sequence[Any] = DEFAULT_FILES_SPEC,
) -> Set[Path]:
    """Return the absolute paths selected by ``spec``; failures yield an empty set."""
    result = expand(root, spec, default_spec=default_spec)
    if not result.ok:
        logger.debug("Ignoring unusable file spec under %s: %s", root, result.error)
    return set(result.files)


# ----------------------------------------------------------------------
# Helpers


def _expand_entries(
    root: Path,
    entries: Sequence[Any],
    default_spec: Sequence[Any],
    *,
    allow_defaults: bool,
) -> Set[Path]:
    if isinstance(entries, str) or not isinstance(entries, Sequence):
        raise FileSpecError(f"File spec must be a list of entries, got {entries!r}")

    selected: Set[Path] = set()
    for entry in entries:
        if isinstance(entry, str):
            if entry == DEFAULTS_KEYWORD:
                if not allow_defaults:
                    raise FileSpecError(":defaults cannot appear inside the default spec")
                selected |= _expand_entries(root, default_spec, default_spec, allow_defaults=False)
            elif entry.startswith(":"):
                raise FileSpecError(f"Unknown file spec keyword: {entry}")
            else:
                selected |= _glob(root, entry)
            continue

        if not isinstance(entry, Sequence) or not entry:
            raise FileSpecError(f"Unsupported file spec entry: {entry!r}")

        head, rest = entry[0], list(entry[1:])
        if head == EXCLUDE_KEYWORD:
            selected -= _expand_entries(root, rest, default_spec, allow_defaults=allow_defaults)
        elif isinstance(head, str) and not head.startswith(":"):
            selected |= _expand_entries(root, rest, default_spec, allow_defaults=allow_defaults)
        else:
            raise FileSpecError(f"Unsupported file spec entry: {entry!r}")
    return selected


def _glob(root: Path, pattern: str) -> Set[Path]:
    candidate = Path(pattern)
    if not pattern.strip() or candidate.is_absolute() or ".." in candidate.parts:
        raise FileSpecError(f"File spec globs must stay inside the root: {pattern!r}")

    matches: Set[Path] = set()
    for path in root.glob(pattern):
        if not path.is_file():
            continue
        relative = path.relative_to(root)
        if any(part in _VCS_DIRS for part in relative.parts[:-1]):
            continue
        matches.add(path)
    return matches


__all__ = [
    "DEFAULTS_KEYWORD",
    "DEFAULT_FILES_SPEC",
    "EXCLUDE_KEYWORD",
    "ExpansionResult",
    "FileSpecError",
    "expand",
    "resolve",
]
