# Path: core/imaging/metadata.py
# Purpose: Assemble an ImageRecord (dimensions, format, EXIF, palette, histogram) for a single image.
# Layer: core/imaging.
# Details: EXIF parsing is best effort; every other failure surfaces as DecodeError or StorageError.

from __future__ import annotations

import logging
from pathlib import Path
from typing import Dict, List, Optional, Tuple, Union

from PIL import ExifTags, Image

from core.errors import StorageError
from core.models.domain import HISTOGRAM_BINS, ImageRecord
from .codec import open_image, to_8bit

logger = logging.getLogger(__name__)

EXIF_SUB_IFD = 0x8769


def palette_sample_points(width: int, height: int) -> List[Tuple[int, int]]:
    """Return the ten palette sample coordinates, clamped into the image bounds."""

    points = [
        (10, 10),
        (width // 2, height // 2),
        (width - 10, height - 10),
        (width // 4, height // 4),
        (3 * width // 4, height // 4),
        (width // 4, 3 * height // 4),
        (3 * width // 4, 3 * height // 4),
        (width // 2, height // 4),
        (width // 2, 3 * height // 4),
        (width // 4, height // 2),
    ]
    return [
        (min(max(x, 0), width - 1), min(max(y, 0), height - 1))
        for x, y in points
    ]


def sample_palette(image: Image.Image) -> List[str]:
    """Sample the fixed palette coordinates and format each pixel as ``#rrggbb``."""

    rgb = to_8bit(image).convert("RGB")
    palette = []
    for x, y in palette_sample_points(rgb.width, rgb.height):
        r, g, b = rgb.getpixel((x, y))
        palette.append(f"#{r:02x}{g:02x}{b:02x}")
    return palette


def brightness_histogram(image: Image.Image) -> List[int]:
    """Count pixels per 8-bit luminance value."""

    histogram = to_8bit(image).convert("L").histogram()
    return list(histogram[:HISTOGRAM_BINS])


def read_exif(image: Image.Image) -> Optional[Dict[str, str]]:
    """Return EXIF fields keyed by tag name, or None when absent or unreadable."""

    try:
        exif = image.getexif()
        fields: Dict[str, str] = {}
        for ifd in (exif, exif.get_ifd(EXIF_SUB_IFD)):
            for tag, value in ifd.items():
                if tag == EXIF_SUB_IFD:
                    continue
                name = ExifTags.TAGS.get(tag, f"Tag{tag:#06x}")
                fields[name] = _format_exif_value(value)
    except Exception as exc:  # noqa: BLE001 - EXIF is best effort
        logger.debug("Ignoring unreadable EXIF data: %s", exc)
        return None
    return fields or None


def _format_exif_value(value: object) -> str:
    if isinstance(value, bytes):
        return value.decode("utf-8", errors="replace").rstrip("\x00")
    if isinstance(value, tuple):
        return ", ".join(_format_exif_value(item) for item in value)
    return str(value)


class MetadataExtractor:
    """Build ImageRecords by combining codec data, filesystem stat, and pixel statistics."""

    def extract(self, path: Union[str, Path]) -> ImageRecord:
        """
        Extract metadata for the image at ``path``.

        Raises:
        - core/errors.py::DecodeError - the file is not a decodable image.
        - core/errors.py::StorageError - the file cannot be read or stat'ed.
        """

        source = Path(path)
        image = open_image(source)
        try:
            size_bytes = source.stat().st_size
        except OSError as exc:
            raise StorageError(f"Failed to stat {source}: {exc}") from exc

        return ImageRecord(
            width=image.width,
            height=image.height,
            format=image.format or source.suffix.lstrip(".").upper(),
            color_type=image.mode,
            size_bytes=size_bytes,
            path=str(path),
            name=source.name,
            exif=read_exif(image),
            palette=sample_palette(image),
            histogram=brightness_histogram(image),
        )
