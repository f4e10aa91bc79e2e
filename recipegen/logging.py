"""Logger hierarchy for recipegen.

Components log under ``recipegen.<component>``. Output of shell commands run
after discovery goes to ``recipegen.sink.<name>``, and the console shows those
lines prefixed with the sink name.
"""

from __future__ import annotations

import logging
from pathlib import Path

_LOGGER_NAME = "recipegen"
_SINK_PREFIX = "sink"
_SINK_NAMESPACE = f"{_LOGGER_NAME}.{_SINK_PREFIX}."


def get_logger(name: str | None = None) -> logging.Logger:
    """Return a logger under the recipegen hierarchy."""
    full_name = f"{_LOGGER_NAME}.{name}" if name else _LOGGER_NAME
    return logging.getLogger(full_name)


def get_sink_logger(sink: str) -> logging.Logger:
    """Return the logger that receives output of commands run into ``sink``.

    Blank names map to ``default``; spaces become dashes so the sink stays a
    single logger name segment.
    """
    cleaned = sink.strip().replace(" ", "-") or "default"
    return get_logger(f"{_SINK_PREFIX}.{cleaned}")


class ConsoleFormatter(logging.Formatter):
    """Tags component messages with ``[recipegen]`` and command output with its sink."""

    def format(self, record: logging.LogRecord) -> str:
        message = record.getMessage()
        if record.name.startswith(_SINK_NAMESPACE):
            return f"[{record.name[len(_SINK_NAMESPACE):]}] {message}"
        return f"[{_LOGGER_NAME}] {record.levelname} {message}"


def configure_logging(
    *, verbose: bool = False, log_file: Path | None = None
) -> logging.Logger:
    """Send recipegen and sink output to stderr, and to ``log_file`` when given."""
    level = logging.DEBUG if verbose else logging.INFO
    logger = logging.getLogger(_LOGGER_NAME)
    logger.setLevel(level)
    logger.propagate = False

    # Repeated CLI invocations in one process must not stack handlers.
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    console = logging.StreamHandler()
    console.setLevel(level)
    console.setFormatter(ConsoleFormatter())
    logger.addHandler(console)

    if log_file is not None:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setLevel(level)
        file_handler.setFormatter(
            logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s")
        )
        logger.addHandler(file_handler)

    return logger


__all__ = ["ConsoleFormatter", "configure_logging", "get_logger", "get_sink_logger"]
