"""
Loguru sink configuration shared by every entry point.
"""
from __future__ import annotations

import sys
from pathlib import Path

from loguru import logger

CONSOLE_FORMAT = "<dim>{time:HH:mm:ss}</dim> | <level>{level: <8}</level> | {message}"


def configure_logging(level: str = "WARNING", log_file: Path | None = None) -> None:
    """Replace loguru's default sink with the tutor's console (and optional file) sinks."""
    logger.remove()
    logger.add(sys.stderr, level=level.upper(), format=CONSOLE_FORMAT)

    if log_file is not None:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        logger.add(
            log_file,
            level="DEBUG",
            rotation="1 MB",
            retention=3,
            encoding="utf-8",
        )
