"""
Logging utilities for uvup.

All loggers live under the ``uvup`` namespace and carry a ``NullHandler``
until :func:`setup_logging` runs, so importing uvup as a library stays
quiet. Diagnostics go to stderr. User-facing output does not belong here,
see :mod:`uvup.utils.console`.

The interactive session paints a rich ``Live`` screen while lookups log
retries in the background. Live swaps ``sys.stderr`` for the duration of
the session, so the default handler writes to whatever ``sys.stderr`` is
at emit time and its lines appear above the screen.
"""

from __future__ import annotations

import os
import sys
import copy
import logging
import threading
from typing import IO, Optional

from uvup.constants import (
    LOG_DATE_FORMAT,
    LOG_DEFAULT_FORMAT,
    LOG_VERBOSE_FORMAT,
)

ROOT_LOGGER_NAME = "uvup"

_logging_configured: bool = False
_lock = threading.Lock()


class ColoredFormatter(logging.Formatter):
    """Formatter that colours the level name when stderr is a terminal."""

    COLORS = {
        "DEBUG": "\033[36m",
        "INFO": "\033[32m",
        "WARNING": "\033[33m",
        "ERROR": "\033[31m",
        "CRITICAL": "\033[35m",
    }
    RESET = "\033[0m"

    def __init__(
        self,
        fmt: str,
        *,
        datefmt: Optional[str] = None,
        use_color: bool = True,
    ) -> None:
        super().__init__(fmt=fmt, datefmt=datefmt)
        self.use_color = use_color

    def format(self, record: logging.LogRecord) -> str:
        color = self.COLORS.get(record.levelname)
        if color and self.use_color and _stderr_supports_color():
            # Other handlers may share the record
            record = copy.copy(record)
            record.levelname = f"{color}{record.levelname}{self.RESET}"
        return super().format(record)


class CurrentStderrHandler(logging.StreamHandler):
    """Stream handler bound to the current ``sys.stderr`` on every record."""

    def __init__(self) -> None:
        super().__init__(sys.stderr)

    def emit(self, record: logging.LogRecord) -> None:
        self.stream = sys.stderr
        super().emit(record)


def _stderr_supports_color() -> bool:
    if os.environ.get("NO_COLOR") or os.environ.get("CI"):
        return False
    try:
        return sys.stderr.isatty()
    except (AttributeError, OSError):
        return False


def setup_logging(
    *,
    level: int = logging.WARNING,
    verbose: Optional[bool] = None,
    stream: Optional[IO[str]] = None,
) -> None:
    """Install the single ``uvup`` handler, replacing any earlier one.

    Args:
        level: Logging level (e.g. ``logging.INFO``).
        verbose: Use the timestamped format. Defaults to ``True`` at DEBUG.
        stream: Fixed output stream. Without one, records follow
            ``sys.stderr`` as it is when they are emitted.
    """
    global _logging_configured

    if verbose is None:
        verbose = level <= logging.DEBUG

    handler: logging.Handler = (
        logging.StreamHandler(stream) if stream is not None else CurrentStderrHandler()
    )
    handler.setLevel(level)
    handler.setFormatter(
        ColoredFormatter(
            LOG_VERBOSE_FORMAT if verbose else LOG_DEFAULT_FORMAT,
            datefmt=LOG_DATE_FORMAT,
            use_color=not os.environ.get("NO_COLOR"),
        )
    )

    with _lock:
        root_logger = logging.getLogger(ROOT_LOGGER_NAME)
        root_logger.handlers.clear()
        root_logger.addHandler(handler)
        root_logger.setLevel(level)
        root_logger.propagate = False
        _logging_configured = True


def _qualified(name: Optional[str]) -> str:
    if not name or name == ROOT_LOGGER_NAME:
        return ROOT_LOGGER_NAME
    if name.startswith(f"{ROOT_LOGGER_NAME}."):
        return name
    return f"{ROOT_LOGGER_NAME}.{name}"


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """Return a logger within the ``uvup`` namespace.

    ``"resolver"``, ``"uvup.resolver"`` and ``__name__`` of a uvup module
    all land in the same hierarchy.
    """
    logger = logging.getLogger(_qualified(name))

    if not logger.handlers and (not logger.parent or not logger.parent.handlers):
        logger.addHandler(logging.NullHandler())

    return logger


def is_logging_configured() -> bool:
    return _logging_configured


def disable_logging() -> None:
    """Silence all uvup logging output."""
    global _logging_configured

    with _lock:
        root_logger = logging.getLogger(ROOT_LOGGER_NAME)
        root_logger.handlers.clear()
        root_logger.addHandler(logging.NullHandler())
        root_logger.setLevel(logging.NOTSET)
        _logging_configured = False
