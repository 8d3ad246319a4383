# Path: core/cache/artifact_cache.py
# Purpose: Persist and retrieve derived artifacts (thumbnails, heatmaps) by content-addressed key.
# Layer: core/cache.
# Details: Lazily builds on a miss and never invalidates; no locking, builders must be deterministic.

from __future__ import annotations

import logging
from pathlib import Path
from typing import Callable, Union

from core.fileio import atomic_write_bytes, ensure_directory
from .hasher import cache_key

logger = logging.getLogger(__name__)


class ArtifactCache:
    """On-disk cache of derived artifacts stored as ``<cache_dir>/<key>.<extension>``.

    A cached file is returned as-is even if the source image changed since it was
    built; entries live until something outside the cache deletes them.
    """

    def __init__(self, cache_dir: Union[str, Path]) -> None:
        self.cache_dir = Path(cache_dir)

    def path_for(self, path: str, purpose: str, extension: str) -> Path:
        """Return where the artifact for ``(path, purpose)`` lives, whether or not it exists."""

        return self.cache_dir / f"{cache_key(path, purpose)}.{extension.lstrip('.')}"

    def contains(self, path: str, purpose: str, extension: str) -> bool:
        return self.path_for(path, purpose, extension).exists()

    def get_or_create(
        self,
        path: str,
        purpose: str,
        builder: Callable[[], bytes],
        extension: str,
    ) -> Path:
        """
        Return the cached artifact path, invoking ``builder`` only on a miss.

        External calls:
        - core/fileio.py::ensure_directory - create the cache directory on first use.
        - core/fileio.py::atomic_write_bytes - persist the built bytes without partial files.
        """

        ensure_directory(self.cache_dir)
        target = self.path_for(path, purpose, extension)
        if target.exists():
            logger.debug("Cache hit for %s (%s): %s", path, purpose, target.name)
            return target

        logger.info("Building %s artifact for %s", purpose, path)
        data = builder()
        return atomic_write_bytes(target, data)
