"""Logging setup for droid-factory."""

from __future__ import annotations

import logging
import os
import sys

LOGGER_NAME = "droid_factory"
LOG_LEVEL_ENV = "DROID_FACTORY_LOG_LEVEL"

_HANDLER_ATTR = "_droid_factory_handler"


def get_logger(name: str | None = None) -> logging.Logger:
    """Return the package logger, or a child of it for ``name``."""
    if not name or name == LOGGER_NAME:
        return logging.getLogger(LOGGER_NAME)
    if name.startswith(LOGGER_NAME + "."):
        return logging.getLogger(name)
    return logging.getLogger(f"{LOGGER_NAME}.{name}")


def configure_logging(debug: bool = False) -> logging.Logger:
    """Attach a single stderr handler to the package logger.

    Debug mode logs every HTTP call and scan decision with a ``[debug]`` prefix.
    Otherwise the level comes from DROID_FACTORY_LOG_LEVEL (default WARNING).
    """
    logger = logging.getLogger(LOGGER_NAME)
    if debug:
        level = logging.DEBUG
        fmt = "[debug] %(message)s"
    else:
        level_name = os.getenv(LOG_LEVEL_ENV, "WARNING").upper()
        level = getattr(logging, level_name, logging.WARNING)
        fmt = "%(levelname)s: %(message)s"

    for handler in list(logger.handlers):
        if getattr(handler, _HANDLER_ATTR, False):
            logger.removeHandler(handler)

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter(fmt))
    setattr(handler, _HANDLER_ATTR, True)
    logger.addHandler(handler)
    logger.setLevel(level)
    logger.propagate = False
    return logger
