"""Logging utilities for localmin.

Every module logs through a child of the ``localmin`` package logger. Only
the package logger owns a handler, so one call to :func:`configure_logging`
redirects and re-levels the whole library. The initial level comes from the
``LOCALMIN_LOG_LEVEL`` environment variable and defaults to WARNING.
"""

from __future__ import annotations

import logging
import os
import sys
from typing import IO, Optional

PACKAGE = "localmin"

_LEVEL_ENV_VAR = "LOCALMIN_LOG_LEVEL"

_FORMAT = "[%(levelname)s] %(name)s: %(message)s"


def _coerce_level(level: int | str) -> int:
    if isinstance(level, str):
        return getattr(logging, level.upper(), logging.WARNING)
    return level


def _package_logger() -> logging.Logger:
    logger = logging.getLogger(PACKAGE)
    if not logger.handlers:
        logger.setLevel(_coerce_level(os.getenv(_LEVEL_ENV_VAR, "WARNING")))
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(logging.Formatter(_FORMAT))
        logger.addHandler(handler)
        # Library output stays out of the application's root handlers.
        logger.propagate = False
    return logger


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """Get the logger for a localmin module.

    Names outside the package are placed under it, so ``"line_search"`` and
    ``"localmin.line_search"`` give the same logger. Module loggers carry no
    handler or level of their own and defer to the package logger.

    Args:
        name: Logger name (typically `__name__`). If None, returns the
            package logger.

    Example:
        >>> from localmin.logging import get_logger
        >>> logger = get_logger(__name__)
        >>> logger.debug("line search from f=%g", 1.0)
    """
    package = _package_logger()
    if name is None or name == PACKAGE:
        return package
    if not name.startswith(PACKAGE + "."):
        name = f"{PACKAGE}.{name}"
    return logging.getLogger(name)


def configure_logging(
    level: int | str = logging.WARNING,
    stream: Optional[IO[str]] = None,
    format_string: Optional[str] = None,
) -> logging.Logger:
    """Set the level and destination of all localmin log output.

    The package handler is replaced, so repeated calls never duplicate
    output. Returns the package logger.

    Example:
        >>> from localmin.logging import configure_logging
        >>> logger = configure_logging("INFO")
    """
    logger = _package_logger()
    logger.setLevel(_coerce_level(level))
    for handler in logger.handlers[:]:
        logger.removeHandler(handler)
    handler = logging.StreamHandler(stream if stream is not None else sys.stderr)
    handler.setFormatter(logging.Formatter(format_string or _FORMAT))
    logger.addHandler(handler)
    return logger


__all__ = ["get_logger", "configure_logging"]
