# Path: config/__init__.py
# Purpose: Package initializer for configuration module.
# Layer: config.
# Details: Exposes settings models and logging setup for application-wide configuration.

from .logging import configure_logging
from .settings import AppSettings, FetchSettings, HashSettings, ThumbnailSettings

__all__ = ["AppSettings", "FetchSettings", "HashSettings", "ThumbnailSettings", "configure_logging"]
