# Path: config/__init__.py
# Purpose: Package initializer for configuration module.
# Layer: config.
# Details: Exposes settings models and logging setup for application-wide configuration.

from .logging import setup_logging
from .settings import AppSettings, CacheSettings, HeatmapSettings, OcrSettings

__all__ = ["AppSettings", "CacheSettings", "HeatmapSettings", "OcrSettings", "setup_logging"]
