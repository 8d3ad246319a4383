# Path: core/indexing/scanner.py
# Purpose: Scan folders and collect image file paths with lightweight metadata.
# Layer: core/indexing.
# Details: Provides directory listing (flat or recursive) and name/format filtering of the results.

from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterable, List, Union

from core.models.domain import ImageEntry

logger = logging.getLogger(__name__)

SUPPORTED_EXTENSIONS = {".png", ".jpg", ".jpeg", ".bmp", ".gif", ".webp"}


def is_supported_image(path: Path) -> bool:
    return path.suffix.lower() in SUPPORTED_EXTENSIONS


class ImageScanner:
    """Scan filesystem paths for supported image files."""

    def __init__(self, root: Union[str, Path], recursive: bool = False) -> None:
        self.root = Path(root)
        self.recursive = recursive

    def scan(self) -> List[ImageEntry]:
        """Return the discovered images sorted by path."""

        return [
            ImageEntry(path=str(path), name=path.name)
            for path in sorted(self._iter_image_files())
        ]

    def _iter_image_files(self) -> Iterable[Path]:
        """Yield image files under the root directory."""

        if not self.root.is_dir():
            logger.warning("Skipping scan of %s: not a directory", self.root)
            return

        candidates = self.root.rglob("*") if self.recursive else self.root.iterdir()
        for path in candidates:
            if path.is_file() and is_supported_image(path):
                yield path


def list_images(directory: Union[str, Path], recursive: bool = False) -> List[ImageEntry]:
    """List supported images in ``directory``; only the top level unless ``recursive``."""

    return ImageScanner(directory, recursive=recursive).scan()


def filter_images(entries: Iterable[ImageEntry], query: str = "", fmt: str = "all") -> List[ImageEntry]:
    """
    Keep entries whose name or path contains ``query`` (case-insensitive) and whose
    extension matches ``fmt``. ``"all"`` disables the format filter and ``"jpg"`` also
    matches ``.jpeg`` files.
    """

    needle = query.lower()
    fmt = fmt.lower().lstrip(".")
    suffixes = {f".{fmt}"}
    if fmt == "jpg":
        suffixes.add(".jpeg")

    selected: List[ImageEntry] = []
    for entry in entries:
        name = entry.name.lower()
        if needle and needle not in name and needle not in entry.path.lower():
            continue
        if fmt != "all" and not any(name.endswith(suffix) for suffix in suffixes):
            continue
        selected.append(entry)
    return selected
