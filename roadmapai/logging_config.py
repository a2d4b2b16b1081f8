"""Logging setup for the API process."""

from __future__ import annotations

import logging
from logging import Logger


def configure_logging(level: int | str = logging.INFO, *, name: str = "roadmapai") -> Logger:
    """Attach a single stream handler to the package logger and return it.

    Safe to call more than once; uvicorn reloads import the app module again.
    """

    logger = logging.getLogger(name)
    if not any(isinstance(h, logging.StreamHandler) for h in logger.handlers):
        handler = logging.StreamHandler()
        handler.setFormatter(
            logging.Formatter("%(asctime)s | %(levelname)s | %(name)s | %(message)s")
        )
        logger.addHandler(handler)

    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            level = logging.INFO
    logger.setLevel(level)
    logger.propagate = False
    return logger
