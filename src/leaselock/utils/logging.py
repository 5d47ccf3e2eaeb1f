"""Logging helpers with consistent formatting."""

from __future__ import annotations

import logging
import os
import sys
from typing import Optional

from rich.logging import RichHandler

from .env import get_bool_env


def _level_from_env(default: int) -> int:
    name = os.getenv("LEASELOCK_LOG_LEVEL", "").strip().upper()
    if not name:
        return default
    level = logging.getLevelName(name)
    return level if isinstance(level, int) else default


def get_logger(name: str, level: Optional[int] = None, *, rich: Optional[bool] = None) -> logging.Logger:
    """Configure and return a logger.

    ``LEASELOCK_LOG_LEVEL`` and ``LEASELOCK_RICH_LOGS`` supply the level and
    handler style when the caller does not pass them.
    """
    logger = logging.getLogger(name)
    if logger.handlers:
        return logger

    if level is None:
        level = _level_from_env(logging.INFO)
    if rich is None:
        rich = get_bool_env("LEASELOCK_RICH_LOGS", default=True)
    logger.setLevel(level)

    if rich:
        handler: logging.Handler = RichHandler(
            level=level,
            markup=False,
            rich_tracebacks=True,
            show_time=True,
            show_path=False,
        )
        # RichHandler renders its own time and level columns
        handler.setFormatter(logging.Formatter("%(name)s: %(message)s"))
    else:
        handler = logging.StreamHandler(sys.stdout)
        handler.setLevel(level)
        handler.setFormatter(
            logging.Formatter(
                "%(asctime)s %(name)s %(levelname)s: %(message)s",
                datefmt="%Y-%m-%d %H:%M:%S",
            )
        )

    logger.addHandler(handler)
    logger.propagate = False
    return logger
