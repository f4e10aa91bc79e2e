"""Configuration loading for recipegen (.recipegen.yml and environment)."""

from __future__ import annotations

import os
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Sequence

import yaml

from .file_specs import DEFAULT_FILES_SPEC

CONFIG_FILENAME = ".recipegen.yml"
FETCHER_CHOICES = ("github", "gitlab", "git")

_ENV_RECIPES_DIR = "RECIPEGEN_RECIPES_DIR"
_ENV_FETCHER = "RECIPEGEN_FETCHER"
_ENV_USER = "RECIPEGEN_USER"
_ENV_USE_HTTPS = "RECIPEGEN_USE_HTTPS"


class ConfigError(RuntimeError):
    """Raised when configuration is missing, invalid, or cannot be parsed."""


@dataclass
class RecipeGenConfig:
    """Settings that drive recipe discovery."""

    discovery_patterns: List[str] = field(default_factory=lambda: ["*.el"])
    cache_dir: str = ".recipes"
    recipes_dir: Optional[Path] = None
    fetcher: str = "github"
    user: Optional[str] = None
    use_https: bool = False
    default_files: List[Any] = field(default_factory=lambda: list(DEFAULT_FILES_SPEC))
    interactive: bool = True
    source: Optional[Path] = None

    def with_overrides(self, **overrides: Any) -> "RecipeGenConfig":
        """Return a copy with every non-None override applied."""
        changes = {key: value for key, value in overrides.items() if value is not None}
        if "fetcher" in changes:
            changes["fetcher"] = _validate_fetcher(changes["fetcher"])
        return replace(self, **changes)


def load_config(
    start: Path | str = ".",
    *,
    environ: Mapping[str, str] | None = None,
) -> RecipeGenConfig:
    """Load configuration for the project containing ``start``.

    The nearest ``.recipegen.yml`` in ``start`` or its ancestors is read when
    present; environment variables then override file values.
    """
    config_file = find_config_file(Path(start))
    config = RecipeGenConfig()
    if config_file is not None:
        config = _config_from_mapping(_read_config(config_file), config_file.parent)
        config.source = config_file

    env = os.environ if environ is None else environ
    return _apply_environment(config, env)


def find_config_file(start: Path) -> Optional[Path]:
    current = start.expanduser().resolve()
    if current.is_file():
        current = current.parent
    for directory in (current, *current.parents):
        candidate = directory / CONFIG_FILENAME
        if candidate.is_file():
            return candidate
    return None


def _read_config(path: Path) -> Dict[str, Any]:
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise ConfigError(f"Failed to read {path}: {exc}") from exc
    if not text.strip():
        return {}

    try:
        loaded = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ConfigError(f"Failed to parse {path.name}: {exc}") from exc
    if loaded is None:
        return {}
    if not isinstance(loaded, dict):
        raise ConfigError(f"{path.name} must contain a mapping at the root")
    return loaded


def _config_from_mapping(data: Dict[str, Any], base_dir: Path) -> RecipeGenConfig:
    config = RecipeGenConfig()

    patterns = _as_str_list(data.get("discovery_patterns"))
    if patterns:
        config.discovery_patterns = patterns

    cache_dir = _as_str(data.get("cache_dir"))
    if cache_dir:
        config.cache_dir = cache_dir

    recipes_dir = _as_str(data.get("recipes_dir"))
    if recipes_dir:
        config.recipes_dir = _resolve_dir(recipes_dir, base_dir)

    fetcher = _as_str(data.get("fetcher"))
    if fetcher:
        config.fetcher = _validate_fetcher(fetcher)

    config.user = _as_str(data.get("user")) or None

    use_https = _as_bool(data.get("use_https"))
    if use_https is not None:
        config.use_https = use_https

    default_files = data.get("default_files")
    if default_files is not None:
        if not isinstance(default_files, list):
            raise ConfigError("default_files must be a list")
        config.default_files = default_files

    interactive = _as_bool(data.get("interactive"))
    if interactive is not None:
        config.interactive = interactive

    return config


def _apply_environment(config: RecipeGenConfig, env: Mapping[str, str]) -> RecipeGenConfig:
    recipes_dir = env.get(_ENV_RECIPES_DIR)
    use_https = _as_bool(env.get(_ENV_USE_HTTPS))
    return config.with_overrides(
        recipes_dir=Path(recipes_dir).expanduser() if recipes_dir else None,
        fetcher=env.get(_ENV_FETCHER) or None,
        user=env.get(_ENV_USER) or None,
        use_https=use_https,
    )


def _validate_fetcher(value: str) -> str:
    lowered = value.strip().lower()
    if lowered not in FETCHER_CHOICES:
        choices = ", ".join(FETCHER_CHOICES)
        raise ConfigError(f"Unknown fetcher {value!r}; expected one of {choices}")
    return lowered


def _resolve_dir(value: str, base_dir: Path) -> Path:
    path = Path(value).expanduser()
    if not path.is_absolute():
        path = base_dir / path
    return path


def _as_str(value: Any) -> Optional[str]:
    return str(value) if isinstance(value, (str, int, float)) and not isinstance(value, bool) else None


def _as_bool(value: Any) -> Optional[bool]:
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in {"true", "yes", "1"}:
            return True
        if lowered in {"false", "no", "0"}:
            return False
    return None


def _as_str_list(value: Any) -> List[str]:
    if value is None:
        return []
    if isinstance(value, str):
        return [value]
    if isinstance(value, Sequence):
        return [str(item) for item in value if isinstance(item, (str, int, float))]
    return []


__all__ = [
    "CONFIG_FILENAME",
    "ConfigError",
    "FETCHER_CHOICES",
    "RecipeGenConfig",
    "find_config_file",
    "load_config",
]
