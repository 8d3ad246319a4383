# Path: core/imaging/transforms.py
# Purpose: Apply rotations, flips, and metadata stripping to an image file in place.
# Layer: core/imaging.
# Details: The re-encoded image (JPEG keeps its quantization tables) replaces the source only on success.

from __future__ import annotations

import logging
from pathlib import Path
from typing import Callable, Dict, Union

from PIL import Image

from core.errors import UnknownActionError
from core.fileio import atomic_write_bytes
from .codec import encode_image, open_image, reencode_params

logger = logging.getLogger(__name__)

# Rotations are clockwise; Pillow's ROTATE_* constants are counter-clockwise.
TRANSFORMS: Dict[str, Callable[[Image.Image], Image.Image]] = {
    "rotate90": lambda img: img.transpose(Image.Transpose.ROTATE_270),
    "rotate180": lambda img: img.transpose(Image.Transpose.ROTATE_180),
    "rotate270": lambda img: img.transpose(Image.Transpose.ROTATE_90),
    "flip_h": lambda img: img.transpose(Image.Transpose.FLIP_LEFT_RIGHT),
    "flip_v": lambda img: img.transpose(Image.Transpose.FLIP_TOP_BOTTOM),
    # Re-encoding without passing exif/icc data drops the metadata.
    "strip_meta": lambda img: img.copy(),
}

SUPPORTED_ACTIONS = frozenset(TRANSFORMS)


def transform_image(path: Union[str, Path], action: str) -> None:
    """
    Transform the image at ``path`` and overwrite it.

    Raises UnknownActionError (before touching the file) for unsupported actions;
    DecodeError / StorageError leave the original bytes untouched.
    """

    operation = TRANSFORMS.get(action)
    if operation is None:
        raise UnknownActionError(f"Unknown action: {action}")

    source = Path(path)
    image = open_image(source)
    fmt = image.format or Image.registered_extensions().get(source.suffix.lower(), "PNG")
    transformed = operation(image)
    payload = encode_image(transformed, fmt, **reencode_params(image))
    atomic_write_bytes(source, payload)
    logger.info("Applied %s to %s", action, source)
