"""Logging configuration for the ``codecalc`` logger tree.

Library modules only ever call ``logging.getLogger(__name__)``; the CLI
calls :func:`setup_logging` once at start-up to decide where records go.
"""

from __future__ import annotations

import logging
import sys

LOGGER_NAME: str = "codecalc"
LOG_FORMAT: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def setup_logging(level: str | int = "WARNING") -> logging.Logger:
    """Attach a single stderr handler to the ``codecalc`` logger.

    Calling this again replaces the previous handler instead of adding a
    second one, so repeated CLI invocations in one process (tests) do not
    duplicate output.

    Parameters
    ----------
    level:
        Level name (``"DEBUG"``, ``"info"``...) or numeric level.

    Returns
    -------
    logging.Logger
        The configured package logger.

    Raises
    ------
    ValueError
        If *level* is not a known level name.
    """
    if isinstance(level, str):
        resolved = logging.getLevelName(level.strip().upper())
        if not isinstance(resolved, int):
            raise ValueError(f"Unknown log level: {level!r}")
    else:
        resolved = level

    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(resolved)

    # Remove existing handlers to avoid duplicates
    for handler in logger.handlers[:]:
        logger.removeHandler(handler)

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    logger.addHandler(handler)

    logger.debug("Logging initialised at %s", logging.getLevelName(resolved))
    return logger
