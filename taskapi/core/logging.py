"""Loguru setup shared by the app, the CLI scripts and the store selector."""

from __future__ import annotations

import sys

from loguru import logger

LOG_FORMAT = "<green>{time:YYYY-MM-DDTHH:mm:ss.SSSZ}</green> | <level>{level: <8}</level> | {message}"


def configure_logging(level: str = "INFO") -> None:
    logger.remove()
    logger.add(sys.stderr, level=level, format=LOG_FORMAT, backtrace=False, diagnose=False)
