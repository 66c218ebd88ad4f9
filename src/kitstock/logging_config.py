"""Logging setup built on loguru.

Modules obtain a bound logger with ``get_logger(__name__)``; the sink and
level are installed by ``configure_logging()`` (the CLI entry point calls it).
"""

from __future__ import annotations

import sys

from loguru import logger

from kitstock.config import get_config

_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss.SSS}</green> | "
    "<level>{level: <8}</level> | "
    "<cyan>{extra[name]}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - "
    "<level>{message}</level>"
)


def configure_logging(level: str | None = None) -> None:
    """Replace loguru's default sink with a single stderr sink.

    Safe to call more than once; later calls re-apply the level.
    """
    log_level = (level or get_config().log_level).upper()
    logger.remove()
    logger.configure(extra={"name": "kitstock"})
    logger.add(sys.stderr, level=log_level, format=_FORMAT)


def get_logger(name: str | None = None):
    """Return the shared logger bound to *name*."""
    if name:
        return logger.bind(name=name)
    return logger
