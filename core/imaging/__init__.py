# Path: core/imaging/__init__.py
# Purpose: Package initializer for pixel-level image operations.
# Layer: core/imaging.
# Details: Exposes the codec adapter, metadata extractor, focus heatmap engine, transforms, and palette export.

from .codec import encode_image, open_image, to_8bit
from .heatmap import FocusHeatmap
from .metadata import MetadataExtractor
from .palette import PALETTE_FORMATS, export_palette
from .transforms import SUPPORTED_ACTIONS, transform_image

__all__ = [
    "encode_image",
    "open_image",
    "to_8bit",
    "FocusHeatmap",
    "MetadataExtractor",
    "PALETTE_FORMATS",
    "export_palette",
    "SUPPORTED_ACTIONS",
    "transform_image",
]
