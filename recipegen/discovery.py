"""Recipe discovery: find packages without recipes and propose new ones."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional, Tuple

from .config import ConfigError, RecipeGenConfig
from .coverage import record_files, uncovered_files
from .fetchers import FetcherCache, FetcherInference
from .git.remote import GitRemote, RemoteRegistrationError
from .headers import is_main_file, package_name
from .logging import get_logger
from .models import RecipeRecord
from .project import resolve_project_root
from .prompts import AutoPrompter, Cancelled, ConsolePrompter, Prompter
from .recipe_format import RecipeParseError, dumps_recipe, loads_recipe
from .stores import RecipeStore, StoreWriteError


@dataclass
class DiscoveryReport:
    """What a discovery run did."""

    root: Path
    created: List[str] = field(default_factory=list)
    existing: List[str] = field(default_factory=list)
    skipped: List[Tuple[Path, str]] = field(default_factory=list)


@dataclass
class StatusReport:
    """Stored recipes and the main files no recipe covers yet."""

    root: Path
    records: List[RecipeRecord]
    skipped_entries: List[Tuple[str, str]]
    uncovered_main_files: List[Path]


class RecipeDiscovery:
    """Coordinates coverage diffing, fetcher inference and recipe persistence."""

    def __init__(
        self,
        config: RecipeGenConfig,
        git: GitRemote | None = None,
        prompter: Prompter | None = None,
    ) -> None:
        self.config = config
        self.git = git or GitRemote()
        if prompter is None:
            prompter = ConsolePrompter() if config.interactive else AutoPrompter()
        self.prompter = prompter
        self.fetchers = FetcherInference(config, git=self.git, prompter=self.prompter)
        self.logger = get_logger("discovery")

    def discover(self, path: Path | str = ".") -> DiscoveryReport:
        """Create recipes for every uncovered main file below the project root."""
        recipes_dir = self._require_recipes_dir()
        root = self._resolve_root(path)
        store = RecipeStore(root, self.config.cache_dir, recipes_dir)
        report = DiscoveryReport(root=root)
        self.logger.info("Discovering packages in %s", root)

        records = store.records()
        known: Dict[str, RecipeRecord] = {record.name: record for record in records}
        remaining = uncovered_files(
            root, self.config.discovery_patterns, records, self.config.default_files
        )
        main_files = sorted(candidate for candidate in remaining if is_main_file(candidate))
        self.logger.debug(
            "%d uncovered files, %d of them main files", len(remaining), len(main_files)
        )

        cache = FetcherCache()
        for main_file in main_files:
            if main_file not in remaining:
                self.logger.debug("%s is covered by a recipe created in this run", main_file)
                continue
            try:
                record = self._propose(root, store, main_file, known, cache, report)
            except (StoreWriteError, RemoteRegistrationError, ValueError) as exc:
                self.logger.error("Skipping %s: %s", _relativize(main_file, root), exc)
                report.skipped.append((main_file, str(exc)))
                continue
            if record is not None:
                known.setdefault(record.name, record)
                remaining -= record_files(root, record, self.config.default_files)
            remaining.discard(main_file)

        self.logger.info(
            "Discovery finished: %d created, %d existing, %d skipped",
            len(report.created),
            len(report.existing),
            len(report.skipped),
        )
        return report

    def status(self, path: Path | str = ".") -> StatusReport:
        """Report stored recipes and uncovered main files without writing anything."""
        root = self._resolve_root(path)
        store = RecipeStore(root, self.config.cache_dir, self.config.recipes_dir)
        listing = store.load()
        remaining = uncovered_files(
            root, self.config.discovery_patterns, listing.records, self.config.default_files
        )
        return StatusReport(
            root=root,
            records=listing.records,
            skipped_entries=listing.skipped,
            uncovered_main_files=sorted(item for item in remaining if is_main_file(item)),
        )

    # ------------------------------------------------------------------
    # Internals

    def _propose(
        self,
        root: Path,
        store: RecipeStore,
        main_file: Path,
        known: Dict[str, RecipeRecord],
        cache: FetcherCache,
        report: DiscoveryReport,
    ) -> Optional[RecipeRecord]:
        name = package_name(main_file)
        relative = _relativize(main_file, root)

        if store.exists(name):
            # The recipe exists but does not cover this file; keep it and republish.
            self.logger.info("Recipe %s already exists; not covering %s", name, relative)
            store.publish(name)
            report.existing.append(name)
            return known.get(name)

        fetcher = self.fetchers.infer(root, cache, package=name)
        if fetcher is None:
            self._skip(report, main_file, root, "no fetcher chosen")
            return None

        proposal = dumps_recipe(RecipeRecord(name=name, fetcher=fetcher))
        outcome = self.prompter.confirm_or_edit(f"New recipe for {relative}:", proposal)
        if isinstance(outcome, Cancelled):
            self._skip(report, main_file, root, "cancelled")
            return None

        try:
            record = loads_recipe(outcome.value)
        except RecipeParseError as exc:
            self._skip(report, main_file, root, f"invalid recipe: {exc}")
            return None

        if store.write(record):
            report.created.append(record.name)
        else:
            report.existing.append(record.name)
        return record

    def _skip(self, report: DiscoveryReport, main_file: Path, root: Path, reason: str) -> None:
        self.logger.warning("Skipping %s: %s", _relativize(main_file, root), reason)
        report.skipped.append((main_file, reason))

    def _require_recipes_dir(self) -> Path:
        recipes_dir = self.config.recipes_dir
        if recipes_dir is None:
            raise ConfigError(
                "No recipes directory configured; set recipes_dir in .recipegen.yml "
                "or RECIPEGEN_RECIPES_DIR"
            )
        path = Path(recipes_dir).expanduser()
        if not path.is_dir():
            raise ConfigError(f"Recipes directory does not exist: {path}")
        return path.resolve()

    def _resolve_root(self, path: Path | str) -> Path:
        return resolve_project_root(
            path, interactive=self.config.interactive, prompter=self.prompter
        )


def _relativize(path: Path, root: Path) -> str:
    try:
        return path.relative_to(root).as_posix()
    except ValueError:
        return str(path)


__all__ = ["DiscoveryReport", "RecipeDiscovery", "StatusReport"]
