"""Running shell commands after discovery, e.g. CI builds of the new recipes."""

from __future__ import annotations

import subprocess
from pathlib import Path
from typing import Callable

from .discovery import RecipeDiscovery
from .logging import get_logger, get_sink_logger


class CommandRunner:
    """Runs a shell command and forwards its output to a named log sink."""

    def __init__(self, runner: Callable[..., subprocess.CompletedProcess] | None = None) -> None:
        self._runner = runner or self._default_runner
        self.logger = get_logger("commands")

    def run(self, command: str, *, cwd: Path | str, sink: str) -> int:
        """Run ``command`` in ``cwd`` and return its exit status."""
        sink_logger = get_sink_logger(sink)
        self.logger.info("Running %r in %s (sink: %s)", command, cwd, sink)
        try:
            completed = self._runner(command, cwd=Path(cwd))
        except OSError as exc:
            sink_logger.error("Could not start %r: %s", command, exc)
            return 127

        for line in (completed.stdout or "").splitlines():
            sink_logger.info(line)
        for line in (completed.stderr or "").splitlines():
            sink_logger.warning(line)

        if completed.returncode != 0:
            self.logger.error("%r exited with status %d", command, completed.returncode)
        return completed.returncode

    @staticmethod
    def _default_runner(command: str, *, cwd: Path) -> subprocess.CompletedProcess:
        return subprocess.run(
            command,
            shell=True,
            cwd=str(cwd),
            check=False,
            text=True,
            capture_output=True,
        )


def discover_and_run(
    discovery: RecipeDiscovery,
    command: str,
    *,
    path: Path | str = ".",
    sink: str = "recipegen",
    runner: CommandRunner | None = None,
) -> int:
    """Discover packages below ``path``, then run ``command`` from the project root."""
    report = discovery.discover(path)
    return (runner or CommandRunner()).run(command, cwd=report.root, sink=sink)


__all__ = ["CommandRunner", "discover_and_run"]
