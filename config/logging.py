# Path: config/logging.py
# Purpose: Configure application-wide logging.
# Layer: config.
# Details: Applies the configured log level and a single stream handler format.

from __future__ import annotations

import logging

from .settings import AppSettings

LOG_FORMAT = "%(asctime)s %(levelname)s [%(threadName)s] %(name)s: %(message)s"


def configure_logging(settings: AppSettings) -> None:
    """Set up root logging according to ``settings.log_level``."""

    level = logging.getLevelName(settings.log_level.upper())
    if not isinstance(level, int):
        raise ValueError(f"Unknown log level: {settings.log_level}")
    logging.basicConfig(level=level, format=LOG_FORMAT)
    logging.getLogger().setLevel(level)
