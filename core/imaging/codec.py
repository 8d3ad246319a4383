# Path: core/imaging/codec.py
# Purpose: Thin adapter over Pillow for decoding and encoding raster images.
# Layer: core/imaging.
# Details: Normalizes Pillow's failure modes into DecodeError / StorageError.

from __future__ import annotations

from io import BytesIO
from pathlib import Path
from typing import Any, Dict, Union

import numpy as np
from PIL import Image, JpegImagePlugin, UnidentifiedImageError

from core.errors import DecodeError, StorageError

# Single-channel modes holding more than 8 bits per sample.
HIGH_DEPTH_MODES = {"I", "I;16", "I;16B", "I;16L", "I;16N"}


def open_image(path: Union[str, Path]) -> Image.Image:
    """Open and fully decode an image, detaching it from the underlying file handle."""

    try:
        with Image.open(path) as img:
            img.load()
            # load() keeps format on the source object only; copy it over to the detached image.
            decoded = img.copy()
            decoded.format = img.format
            decoded.info = dict(img.info)
            if img.format == "JPEG":
                decoded.quantization = img.quantization
                decoded.info["jpeg_subsampling"] = JpegImagePlugin.get_sampling(img)
            return decoded
    except (FileNotFoundError, PermissionError, IsADirectoryError) as exc:
        raise StorageError(f"Failed to read {path}: {exc}") from exc
    except (UnidentifiedImageError, OSError, SyntaxError, ValueError) as exc:
        raise DecodeError(f"Failed to open image: {exc}") from exc


def to_8bit(image: Image.Image) -> Image.Image:
    """Scale 16-bit single-channel samples down to 8 bits; other modes are returned unchanged.

    Pillow's own ``convert("L")`` clips such samples at 255 instead of scaling them.
    """

    if image.mode not in HIGH_DEPTH_MODES:
        return image
    samples = np.asarray(image).astype(np.int64)
    scaled = np.clip(samples, 0, 0xFFFF) >> 8
    return Image.fromarray(scaled.astype(np.uint8))


def reencode_params(image: Image.Image) -> Dict[str, Any]:
    """Encoder options that keep a decoded JPEG's quantization tables and chroma subsampling."""

    quantization = getattr(image, "quantization", None)
    if image.format != "JPEG" or not quantization:
        return {}
    return {
        "qtables": quantization,
        "subsampling": image.info.get("jpeg_subsampling", -1),
    }


def encode_image(image: Image.Image, format: str, **params: Any) -> bytes:
    """Encode ``image`` into an in-memory buffer of the given Pillow format."""

    if format.upper() in {"JPEG", "JPG"} and image.mode not in {"RGB", "L", "CMYK"}:
        image = image.convert("RGB")
    buffer = BytesIO()
    try:
        image.save(buffer, format=format, **params)
    except (OSError, ValueError, KeyError) as exc:
        raise DecodeError(f"Failed to encode image as {format}: {exc}") from exc
    return buffer.getvalue()
