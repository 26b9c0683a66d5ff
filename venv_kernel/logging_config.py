from __future__ import annotations

import logging
import os
import sys

LOG_LEVEL_ENV = "VENV_KERNEL_LOG_LEVEL"
_RESET = "\x1b[0m"
_LEVEL_COLORS = {
    logging.DEBUG: "\x1b[36m",
    logging.INFO: "\x1b[32m",
    logging.WARNING: "\x1b[33m",
    logging.ERROR: "\x1b[31m",
}


class _StepFormatter(logging.Formatter):
    """Prefixes each record with its level, colored when stderr is a terminal."""

    def __init__(self, *, use_color: bool) -> None:
        super().__init__(fmt="%(levelname)s: %(message)s")
        self.use_color = use_color

    def formatMessage(self, record: logging.LogRecord) -> str:
        line = super().formatMessage(record)
        color = _LEVEL_COLORS.get(record.levelno) if self.use_color else None
        return f"{color}{line}{_RESET}" if color else line


def _should_use_color() -> bool:
    if os.getenv("NO_COLOR"):
        return False
    return sys.stderr.isatty()


def resolve_level(*, verbose: bool = False) -> int:
    if verbose:
        return logging.DEBUG
    resolved = logging.getLevelName(os.getenv(LOG_LEVEL_ENV, "INFO").upper())
    return resolved if isinstance(resolved, int) else logging.INFO


def configure_logging(*, verbose: bool = False) -> None:
    """Send log records to stderr so stdout carries only the provisioning report.

    Safe to call more than once: later calls only adjust the level of the
    handlers already installed.
    """
    root = logging.getLogger()
    level = resolve_level(verbose=verbose)
    root.setLevel(level)

    if root.handlers:
        for handler in root.handlers:
            handler.setLevel(level)
        return

    handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(level)
    handler.setFormatter(_StepFormatter(use_color=_should_use_color()))
    root.addHandler(handler)
