"""Recipe files kept in the project's cache directory."""

from __future__ import annotations

import shutil
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional, Tuple

from ..logging import get_logger
from ..models import RecipeRecord
from ..recipe_format import RecipeParseError, dumps_recipe, loads_recipe


class StoreWriteError(RuntimeError):
    """Raised when a recipe cannot be written or published."""


@dataclass
class StoreListing:
    """Recipes read from the store plus entries that could not be read."""

    records: List[RecipeRecord] = field(default_factory=list)
    skipped: List[Tuple[str, str]] = field(default_factory=list)


class RecipeStore:
    """One file per recipe under ``<root>/<cache_dir>``, named after the recipe."""

    def __init__(
        self,
        root: Path,
        cache_dir: str = ".recipes",
        recipes_dir: Path | None = None,
    ) -> None:
        self.root = Path(root)
        self.path = self.root / cache_dir
        self.recipes_dir = recipes_dir
        self.logger = get_logger("stores.recipes")

    def load(self) -> StoreListing:
        """Read every recipe; unreadable or malformed entries land in ``skipped``."""
        listing = StoreListing()
        try:
            entries = sorted(self.path.iterdir())
        except OSError:
            return listing

        for entry in entries:
            try:
                text = entry.read_text(encoding="utf-8")
                record = loads_recipe(text)
            except (OSError, UnicodeDecodeError, RecipeParseError) as exc:
                listing.skipped.append((entry.name, str(exc)))
                continue
            listing.records.append(record)
        return listing

    def records(self) -> List[RecipeRecord]:
        listing = self.load()
        for name, reason in listing.skipped:
            self.logger.debug("Skipping recipe entry %s: %s", name, reason)
        return listing.records

    def exists(self, name: str) -> bool:
        return (self.path / name).exists()

    def write(self, record: RecipeRecord) -> bool:
        """Persist ``record`` and publish it.

        An existing entry with the same name is never overwritten; in that case
        nothing is written and False is returned, but the entry is still
        published.
        """
        try:
            self.path.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            raise StoreWriteError(f"Cannot create recipe directory {self.path}: {exc}") from exc

        target = self.path / record.name
        created = False
        if target.exists():
            self.logger.info("Recipe %s already exists; keeping it", record.name)
        else:
            try:
                target.write_text(dumps_recipe(record), encoding="utf-8")
            except OSError as exc:
                raise StoreWriteError(f"Cannot write recipe {target}: {exc}") from exc
            created = True
            self.logger.info("Created recipe %s", target)

        self.publish(record.name)
        return created

    def publish(self, name: str) -> Optional[Path]:
        """Copy recipe ``name`` verbatim into the configured recipes directory."""
        if self.recipes_dir is None:
            return None
        source = self.path / name
        destination = self.recipes_dir / name
        try:
            shutil.copyfile(source, destination)
        except OSError as exc:
            raise StoreWriteError(f"Cannot publish recipe {name} to {self.recipes_dir}: {exc}") from exc
        self.logger.debug("Published %s to %s", name, destination)
        return destination


__all__ = ["RecipeStore", "StoreListing", "StoreWriteError"]
