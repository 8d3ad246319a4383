# Path: core/imaging/heatmap.py
# Purpose: Compute a focus-peaking overlay from the Laplacian edge response of an image.
# Layer: core/imaging.
# Details: Vectorised numpy convolution over interior pixels, thresholded into a translucent green RGBA layer.

from __future__ import annotations

from pathlib import Path
from typing import Optional, Union

import numpy as np
from PIL import Image

from config.settings import HeatmapSettings
from .codec import encode_image, open_image, to_8bit

LAPLACIAN_KERNEL = np.array(
    [
        [0, -1, 0],
        [-1, 4, -1],
        [0, -1, 0],
    ],
    dtype=np.int32,
)

FOCUS_COLOR = (0, 255, 0)


class FocusHeatmap:
    """Stateless focus heatmap engine; safe to share between callers."""

    def __init__(self, settings: Optional[HeatmapSettings] = None) -> None:
        self.settings = settings or HeatmapSettings()

    def bound_size(self, image: Image.Image) -> Image.Image:
        """Downscale images whose sides exceed ``max_dimension``, preserving aspect ratio."""

        limit = self.settings.max_dimension
        if image.width <= limit and image.height <= limit:
            return image
        bounded = image.copy()
        bounded.thumbnail((limit, limit), Image.Resampling.LANCZOS)
        return bounded

    def edge_magnitude(self, gray: np.ndarray) -> np.ndarray:
        """
        Return the clamped edge strength for a 2-D luminance array.

        The one-pixel frame is left at zero; interior pixels hold
        ``min(|laplacian| * gain, 255)``.
        """

        gray = gray.astype(np.int32)
        height, width = gray.shape
        magnitude = np.zeros((height, width), dtype=np.uint8)
        if height < 3 or width < 3:
            return magnitude

        response = np.zeros((height - 2, width - 2), dtype=np.int32)
        for ky in range(3):
            for kx in range(3):
                weight = LAPLACIAN_KERNEL[ky, kx]
                if weight == 0:
                    continue
                response += weight * gray[ky : ky + height - 2, kx : kx + width - 2]

        scaled = np.minimum(np.abs(response) * self.settings.gain, 255)
        magnitude[1:-1, 1:-1] = scaled.astype(np.uint8)
        return magnitude

    def render_overlay(self, magnitude: np.ndarray) -> Image.Image:
        """Turn an edge-magnitude map into an RGBA overlay (green where focused, transparent elsewhere)."""

        height, width = magnitude.shape
        rgba = np.zeros((height, width, 4), dtype=np.uint8)
        focused = magnitude > self.settings.threshold
        rgba[focused, 0] = FOCUS_COLOR[0]
        rgba[focused, 1] = FOCUS_COLOR[1]
        rgba[focused, 2] = FOCUS_COLOR[2]
        rgba[focused, 3] = magnitude[focused]
        return Image.fromarray(rgba)

    def compute_heatmap(self, image: Image.Image) -> Image.Image:
        """Compute the focus overlay; output matches the (possibly downscaled) luminance size."""

        bounded = self.bound_size(to_8bit(image))
        gray = np.asarray(bounded.convert("L"))
        return self.render_overlay(self.edge_magnitude(gray))

    def heatmap_png_bytes(self, path: Union[str, Path]) -> bytes:
        """Decode ``path`` and return its focus overlay encoded as PNG."""

        return encode_image(self.compute_heatmap(open_image(path)), "PNG")
