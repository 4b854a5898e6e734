"""Loguru sink configuration.

Library code logs through ``from loguru import logger``; only the entry
point decides where records go.
"""

from __future__ import annotations

import sys

from loguru import logger

from rms.infrastructure import config

LOG_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss}</green> | <level>{level: <8}</level> | "
    "<cyan>{name}</cyan> - <level>{message}</level>"
)


def configure_logging(level: str | None = None) -> None:
    logger.remove()  # drop the default stderr handler
    logger.add(sys.stderr, level=level or config.LOG_LEVEL, format=LOG_FORMAT)
    if config.LOG_FILE:
        logger.add(config.LOG_FILE, rotation="1 MB", retention="7 days", level="INFO")
