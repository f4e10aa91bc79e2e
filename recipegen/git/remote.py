"""Reading and registering git remotes."""

from __future__ import annotations

import subprocess
from pathlib import Path
from typing import Callable, Iterable, Optional

from ..logging import get_logger

DEFAULT_REMOTE = "origin"


class RemoteRegistrationError(RuntimeError):
    """Raised when ``git remote add`` reports a failure."""


class GitRemote:
    """Thin wrapper around the git commands used for fetcher inference."""

    def __init__(self, runner: Callable[..., str] | None = None) -> None:
        self._runner = runner or self._default_runner
        self.logger = get_logger("git.remote")

    def url(self, repo_path: Path | str, name: str = DEFAULT_REMOTE) -> Optional[str]:
        """Return the URL of remote ``name`` from the local git config, if any."""
        repo = Path(repo_path)
        try:
            output = self._run(["git", "config", "--local", "--list"], cwd=repo, capture_output=True)
        except (OSError, subprocess.CalledProcessError) as exc:
            self.logger.debug("Could not list git config in %s: %s", repo, exc)
            return None

        key = f"remote.{name}.url="
        for line in output.splitlines():
            if line.startswith(key):
                value = line[len(key):].strip()
                return value or None
        return None

    def add(self, repo_path: Path | str, name: str, url: str) -> None:
        """Register ``url`` as remote ``name``; a non-zero exit status is an error."""
        repo = Path(repo_path)
        try:
            self._run(["git", "remote", "add", name, url], cwd=repo, capture_output=True)
        except subprocess.CalledProcessError as exc:
            detail = (exc.stderr or exc.output or "").strip()
            message = f"git remote add {name} {url} failed with exit status {exc.returncode}"
            if detail:
                message = f"{message}: {detail}"
            raise RemoteRegistrationError(message) from exc
        except OSError as exc:
            raise RemoteRegistrationError(f"Could not run git: {exc}") from exc
        self.logger.info("Registered remote %s -> %s", name, url)

    # ------------------------------------------------------------------
    # Helpers

    def _run(self, args: Iterable[str], *, cwd: Path, capture_output: bool = False) -> str:
        return self._runner(args, cwd=cwd, capture_output=capture_output)

    @staticmethod
    def _default_runner(
        args: Iterable[str],
        *,
        cwd: Path,
        capture_output: bool = False,
    ) -> str:
        completed = subprocess.run(
            list(args),
            cwd=str(cwd),
            check=True,
            text=True,
            capture_output=capture_output,
        )
        return completed.stdout if capture_output else ""


__all__ = ["DEFAULT_REMOTE", "GitRemote", "RemoteRegistrationError"]
