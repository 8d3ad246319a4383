# Path: config/logging.py
# Purpose: Configure process-wide logging for scripts and the API entrypoint.
# Layer: config.
# Details: Library modules only create named loggers; handlers are installed here.

import logging
from typing import Optional, Union

LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def setup_logging(level: Optional[Union[str, int]] = None) -> None:
    """Install a basic stream handler at the requested level (defaults to INFO)."""

    if level is None:
        level = "INFO"
    if isinstance(level, str):
        level = getattr(logging, level.upper(), logging.INFO)
    logging.basicConfig(level=level, format=LOG_FORMAT, datefmt=DATE_FORMAT)
