"""loguru sink configuration."""

from __future__ import annotations

import sys

from loguru import logger

from perspective_crop.config import LoggingConfig

_FORMAT = "<green>{time:HH:mm:ss.SSS}</green> | <level>{level: <8}</level> | {name}:{function} - {message}"


def configure_logging(config: LoggingConfig) -> int:
    """Replace existing sinks with one built from ``config``; returns the sink id."""
    logger.remove()
    if config.output == "stdout":
        return logger.add(sys.stdout, level=config.level, format=_FORMAT)
    if config.output == "stderr":
        return logger.add(sys.stderr, level=config.level, format=_FORMAT)
    return logger.add(config.output, level=config.level, format=_FORMAT, encoding="utf-8")


__all__ = ["configure_logging"]
