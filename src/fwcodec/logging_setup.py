"""Logging configuration for the ``fwcodec`` package.

Library modules only ever call :func:`get_logger`; handlers are attached once
by an entrypoint (the CLI or a host application) through
:func:`configure_logging`. Until then the package root logger carries a
``NullHandler`` so library use stays silent.
"""
from __future__ import annotations

import logging
import os
import sys
from typing import IO

_PKG_LOGGER_NAME = "fwcodec"
_ENV_LEVEL = "FWCODEC_LOG_LEVEL"
_DEFAULT_FORMAT = "%(asctime)s %(name)s %(levelname)s %(message)s"
_CONFIGURED = False

logging.getLogger(_PKG_LOGGER_NAME).addHandler(logging.NullHandler())


def _parse_level(level: int | str | None) -> int:
    if level is None:
        level = os.getenv(_ENV_LEVEL)
    if isinstance(level, int):
        return level
    if isinstance(level, str):
        level = level.strip().upper()
        if level.isdigit():
            return int(level)
        numeric = getattr(logging, level, None)
        if isinstance(numeric, int):
            return numeric
    return logging.INFO


def configure_logging(
    level: int | str | None = None,
    *,
    fmt: str | None = None,
    stream: IO[str] = sys.stderr,
) -> None:
    """Attach a single ``StreamHandler`` to the package root logger.

    :param level: Level as ``int`` or name. ``None`` falls back to the
        ``FWCODEC_LOG_LEVEL`` environment variable, then ``INFO``.
    :param fmt: Optional format string.
    :param stream: Output stream for the handler (defaults to ``sys.stderr``).
    """
    global _CONFIGURED
    if _CONFIGURED:
        return

    logger = logging.getLogger(_PKG_LOGGER_NAME)
    for h in list(logger.handlers):
        if isinstance(h, logging.NullHandler):
            logger.removeHandler(h)

    numeric_level = _parse_level(level)
    handler = logging.StreamHandler(stream)
    handler.setLevel(numeric_level)
    handler.setFormatter(logging.Formatter(fmt or _DEFAULT_FORMAT))
    logger.addHandler(handler)
    logger.setLevel(numeric_level)
    _CONFIGURED = True


def get_logger(name: str | None = None) -> logging.Logger:
    """Return a logger below the ``fwcodec`` namespace."""
    if not name or name == _PKG_LOGGER_NAME:
        return logging.getLogger(_PKG_LOGGER_NAME)
    if not name.startswith(_PKG_LOGGER_NAME + "."):
        name = f"{_PKG_LOGGER_NAME}.{name}"
    return logging.getLogger(name)


def _reset_for_tests() -> None:
    """Drop handlers installed by :func:`configure_logging`."""
    global _CONFIGURED
    logger = logging.getLogger(_PKG_LOGGER_NAME)
    for h in list(logger.handlers):
        logger.removeHandler(h)
    logger.addHandler(logging.NullHandler())
    logger.setLevel(logging.NOTSET)
    _CONFIGURED = False


__all__ = ["configure_logging", "get_logger"]
