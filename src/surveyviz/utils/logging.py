"""
Logging utilities for the surveyviz library.

Modules take a logger with ``get_logger(__name__)``. Only entry points such
as the demo app call ``configure_logging`` to get console output.

An application embedding surveyviz keeps its own handlers; surveyviz never
configures the root logger and never writes log files.
"""

from __future__ import annotations

import logging
import os
import sys
from typing import Optional, Union

LOGGER_NAME = "surveyviz"
LEVEL_ENV_VAR = "SURVEYVIZ_LOG_LEVEL"

DEFAULT_FMT = "%(asctime)s [%(levelname)s] %(name)s:%(lineno)d:%(funcName)s: %(message)s"
DEFAULT_DATEFMT = "%Y-%m-%d %H:%M:%S"


def _resolve_level(level: Optional[Union[str, int]]) -> int:
    if level is None:
        level = os.environ.get(LEVEL_ENV_VAR, "INFO")
    if isinstance(level, str):
        return getattr(logging, level.upper(), logging.INFO)
    return int(level)


def _console_handler(logger: logging.Logger) -> Optional[logging.Handler]:
    for h in logger.handlers:
        if isinstance(h, logging.StreamHandler) and h.stream is sys.stderr:
            return h
    return None


def configure_logging(
    level: Optional[Union[str, int]] = None,
    *,
    fmt: Optional[str] = None,
    datefmt: Optional[str] = None,
    force: bool = False,
) -> logging.Logger:
    """Send ``surveyviz`` records to stderr; the root logger is left alone.

    ``level`` falls back to ``$SURVEYVIZ_LOG_LEVEL`` and then INFO; unknown
    names mean INFO. Without ``force`` an existing stderr handler is reused
    and only the level changes. With ``force`` all package handlers are
    replaced.
    """
    resolved = _resolve_level(level)
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(resolved)

    if force:
        for h in logger.handlers[:]:
            h.close()
            logger.removeHandler(h)
    else:
        existing = _console_handler(logger)
        if existing is not None:
            existing.setLevel(resolved)
            return logger

    console = logging.StreamHandler(sys.stderr)
    console.setLevel(resolved)
    console.setFormatter(logging.Formatter(fmt=fmt or DEFAULT_FMT, datefmt=datefmt or DEFAULT_DATEFMT))
    logger.addHandler(console)
    return logger


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """Named logger under the package; ``None`` gives the package logger itself."""
    return logging.getLogger(name or LOGGER_NAME)
