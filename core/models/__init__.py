# Path: core/models/__init__.py
# Purpose: Package initializer for domain model definitions.
# Layer: core/models.
# Details: Exposes dataclasses used across metadata, listing, and API layers.

from .domain import HISTOGRAM_BINS, PALETTE_SIZE, ImageEntry, ImageRecord

__all__ = ["HISTOGRAM_BINS", "PALETTE_SIZE", "ImageEntry", "ImageRecord"]
