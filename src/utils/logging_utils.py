"""Logging helpers shared by the solver, generator and drivers."""

from __future__ import annotations

import logging
from typing import Optional, Union

LOGGER_NAME = "xgrid"


def configure_logging(level: Union[int, str] = logging.INFO) -> None:
    """Attach a single stream handler to the package logger.

    Search runs are short and numerous, so handlers are installed once on the
    package logger rather than the root logger to keep library use quiet.
    """

    handler = logging.StreamHandler()
    formatter = logging.Formatter(
        fmt="%(asctime)s | %(levelname)-7s | %(name)s | %(message)s",
        datefmt="%H:%M:%S",
    )
    handler.setFormatter(formatter)

    logger = logging.getLogger(LOGGER_NAME)
    logger.handlers.clear()
    logger.addHandler(handler)
    logger.setLevel(level)


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """Return a logger under the package namespace."""

    if not name:
        return logging.getLogger(LOGGER_NAME)
    if name == LOGGER_NAME or name.startswith(LOGGER_NAME + "."):
        return logging.getLogger(name)
    return logging.getLogger(f"{LOGGER_NAME}.{name.rsplit('.', 1)[-1]}")
