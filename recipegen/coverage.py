"""Which source files are already claimed by a recipe."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Iterable, Sequence, Set

from .file_specs import DEFAULT_FILES_SPEC, resolve
from .models import RecipeRecord


def record_files(
    root: Path,
    record: RecipeRecord,
    default_spec: Sequence[Any] = DEFAULT_FILES_SPEC,
) -> Set[Path]:
    """Files selected by ``record``'s own spec; an empty or missing spec means the default."""
    spec = record.files or default_spec
    return resolve(root, spec, default_spec=default_spec)


def covered_files(
    root: Path,
    records: Iterable[RecipeRecord],
    default_spec: Sequence[Any] = DEFAULT_FILES_SPEC,
) -> Set[Path]:
    covered: Set[Path] = set()
    for record in records:
        covered |= record_files(root, record, default_spec)
    return covered


def uncovered_files(
    root: Path,
    discovery_spec: Sequence[Any],
    records: Iterable[RecipeRecord],
    default_spec: Sequence[Any] = DEFAULT_FILES_SPEC,
) -> Set[Path]:
    """Files matching ``discovery_spec`` that no recipe in ``records`` claims."""
    candidates = resolve(root, discovery_spec, default_spec=default_spec)
    return candidates - covered_files(root, records, default_spec)


__all__ = ["covered_files", "record_files", "uncovered_files"]
