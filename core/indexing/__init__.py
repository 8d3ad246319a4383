# Path: core/indexing/__init__.py
# Purpose: Package initializer for directory scanning utilities.
# Layer: core/indexing.
# Details: Exposes the image scanner plus listing and filtering helpers.

from .scanner import SUPPORTED_EXTENSIONS, ImageScanner, filter_images, list_images

__all__ = ["SUPPORTED_EXTENSIONS", "ImageScanner", "filter_images", "list_images"]
