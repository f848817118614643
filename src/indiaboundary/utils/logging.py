from __future__ import annotations

import logging
from typing import Optional

from indiaboundary.config.models import LoggingSettings


PACKAGE_LOGGER = "indiaboundary"

# One line per validation request buries the load/parse messages at INFO.
QUIET_LOGGERS = ("uvicorn.access",)


def resolve_level(name: str) -> int:
    level = getattr(logging, name.upper(), None)
    if not isinstance(level, int):
        raise ValueError(f"Invalid log level: {name}")
    return level


def configure_logging(settings: LoggingSettings) -> int:
    """
    Set up logging for the API and the CLI scripts; return the resolved level.

    `logging.basicConfig` does nothing once the root logger has handlers (pytest, uvicorn),
    so the package logger level is set explicitly as well.
    """

    level = resolve_level(settings.level)

    handlers: Optional[list[logging.Handler]] = None
    if settings.file is not None:
        settings.file.parent.mkdir(parents=True, exist_ok=True)
        handlers = [logging.FileHandler(settings.file, encoding="utf-8"), logging.StreamHandler()]

    logging.basicConfig(level=level, format=settings.format, handlers=handlers)
    logging.getLogger(PACKAGE_LOGGER).setLevel(level)
    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(max(level, logging.WARNING))
    return level
