"""Fetcher inference from git remotes.

``url_to_fetcher`` and ``fetcher_to_url`` convert between remote URLs and
fetcher specs. :class:`FetcherInference` picks the fetcher for new recipes,
reading the ``origin`` remote or asking the user when there is none.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Optional, Pattern, Tuple

from .config import FETCHER_CHOICES, RecipeGenConfig
from .git.remote import DEFAULT_REMOTE, GitRemote
from .logging import get_logger
from .models import FetcherSpec, HostedFetcher, UrlFetcher
from .prompts import Accepted, AutoPrompter, Prompter
from .recipe_format import URL_FETCHER

# Matching order matters: the first service whose grammar matches wins.
HOSTING_SERVICES: Dict[str, str] = {
    "github": "github.com",
    "gitlab": "gitlab.com",
}


def _compile_grammars() -> Tuple[Tuple[str, Pattern[str], Pattern[str]], ...]:
    grammars = []
    for service, host in HOSTING_SERVICES.items():
        escaped = re.escape(host)
        grammars.append(
            (
                service,
                re.compile(rf"^git@{escaped}:(?P<repo>.+?)\.git\Z"),
                re.compile(rf"^https://{escaped}/(?P<repo>.+?)\.git\Z"),
            )
        )
    return tuple(grammars)


_GRAMMARS = _compile_grammars()


def url_to_fetcher(url: str) -> FetcherSpec:
    """Map a remote URL to a hosted fetcher, falling back to the raw URL."""
    for service, ssh_pattern, https_pattern in _GRAMMARS:
        for pattern in (ssh_pattern, https_pattern):
            match = pattern.match(url)
            if match:
                return HostedFetcher(service=service, repo=match.group("repo"))
    return UrlFetcher(url=url)


def fetcher_to_url(fetcher: FetcherSpec, *, use_https: bool = False) -> str:
    """Return the remote URL for ``fetcher``; the inverse of :func:`url_to_fetcher`."""
    if isinstance(fetcher, UrlFetcher):
        return fetcher.url
    host = HOSTING_SERVICES.get(fetcher.service)
    if host is None:
        raise ValueError(f"Unknown hosting service: {fetcher.service}")
    if use_https:
        return f"https://{host}/{fetcher.repo}.git"
    return f"git@{host}:{fetcher.repo}.git"


@dataclass
class FetcherCache:
    """Fetcher chosen interactively, remembered for one discovery run."""

    fetcher: Optional[FetcherSpec] = None


class FetcherInference:
    """Determines the fetcher for recipes created in a project."""

    def __init__(
        self,
        config: RecipeGenConfig,
        git: GitRemote | None = None,
        prompter: Prompter | None = None,
    ) -> None:
        self.config = config
        self.git = git or GitRemote()
        self.prompter = prompter or AutoPrompter()
        self.logger = get_logger("fetchers")

    def infer(
        self,
        root: Path,
        cache: FetcherCache,
        *,
        package: str | None = None,
    ) -> Optional[FetcherSpec]:
        """Return the fetcher for ``root``, or None when the user cancels.

        Raises :class:`~recipegen.git.RemoteRegistrationError` when the user
        asks to register the fetcher as a remote and git refuses.
        """
        if cache.fetcher is not None:
            return cache.fetcher

        url = self.git.url(root, DEFAULT_REMOTE)
        if url:
            fetcher = url_to_fetcher(url)
            self.logger.debug("Remote %s (%s) maps to %s", DEFAULT_REMOTE, url, fetcher)
            return fetcher

        fetcher = self._ask_fetcher(package)
        if fetcher is None:
            return None

        remote_url = fetcher_to_url(fetcher, use_https=self.config.use_https)
        if self.prompter.confirm(f"Add {remote_url} as the {DEFAULT_REMOTE} remote?", default=False):
            self.git.add(root, DEFAULT_REMOTE, remote_url)
            return fetcher

        cache.fetcher = fetcher
        return fetcher

    def _ask_fetcher(self, package: str | None) -> Optional[FetcherSpec]:
        kind = self.prompter.ask("Fetcher", default=self.config.fetcher, choices=FETCHER_CHOICES)
        if not isinstance(kind, Accepted):
            return None

        if kind.value == URL_FETCHER:
            answer = self.prompter.ask("Repository URL")
            if not isinstance(answer, Accepted):
                return None
            return UrlFetcher(url=answer.value)

        default_repo = None
        if self.config.user:
            default_repo = f"{self.config.user}/{package}" if package else f"{self.config.user}/"
        answer = self.prompter.ask(f"{kind.value} repository (owner/name)", default=default_repo)
        if not isinstance(answer, Accepted):
            return None
        return HostedFetcher(service=kind.value, repo=answer.value)


__all__ = [
    "FetcherCache",
    "FetcherInference",
    "HOSTING_SERVICES",
    "fetcher_to_url",
    "url_to_fetcher",
]
