# Path: core/ocr/provisioner.py
# Purpose: Make sure the named OCR model files exist locally, fetching any that are missing.
# Layer: core/ocr.
# Details: Idempotent; a file already on disk is trusted and never re-validated.

from __future__ import annotations

import hashlib
import logging
from pathlib import Path
from typing import Iterable, List, Mapping, Optional, Union

from core.errors import DownloadError
from core.fileio import atomic_write_bytes, ensure_directory
from .fetchers import Fetcher

logger = logging.getLogger(__name__)


class ModelProvisioner:
    """Resolve model asset names to local files under ``data_dir``.

    ``sources`` maps asset names to the URL each is downloaded from. When
    ``checksums`` holds a SHA-256 digest for an asset the downloaded bytes are
    verified before being written; assets without a digest are stored unverified.
    """

    def __init__(
        self,
        data_dir: Union[str, Path],
        fetcher: Fetcher,
        sources: Mapping[str, str],
        checksums: Optional[Mapping[str, str]] = None,
        extension: str = "onnx",
    ) -> None:
        self.data_dir = Path(data_dir)
        self.fetcher = fetcher
        self.sources = dict(sources)
        self.checksums = dict(checksums or {})
        self.extension = extension.lstrip(".")

    def path_for(self, name: str) -> Path:
        return self.data_dir / f"{name}.{self.extension}"

    def ensure(self, names: Iterable[str]) -> List[Path]:
        """
        Return local paths for ``names``, downloading any that are absent.

        Raises KeyError for unknown asset names, StorageError when the data directory
        cannot be created or written, and DownloadError when a fetch fails.
        """

        names = list(names)
        unknown = [name for name in names if name not in self.sources]
        if unknown:
            raise KeyError(f"Unknown model asset(s): {', '.join(unknown)}")

        ensure_directory(self.data_dir)
        paths: List[Path] = []
        for name in names:
            target = self.path_for(name)
            if not target.exists():
                self._download(name, target)
            paths.append(target)
        return paths

    def _download(self, name: str, target: Path) -> None:
        url = self.sources[name]
        logger.info("Downloading %s model from %s", name, url)
        data = self.fetcher.fetch(url)

        expected = self.checksums.get(name)
        if expected:
            actual = hashlib.sha256(data).hexdigest()
            if actual.lower() != expected.lower():
                raise DownloadError(f"Checksum mismatch for {name}: expected {expected}, got {actual}")

        atomic_write_bytes(target, data)
        logger.info("Stored %s model at %s (%d bytes)", name, target, len(data))
