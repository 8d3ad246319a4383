# Path: core/errors.py
# Purpose: Define the exception taxonomy raised by core operations.
# Layer: core.
# Details: Every boundary operation either returns a value or raises one of these descriptive errors.

from __future__ import annotations


class ScannerError(Exception):
    """Base class for all errors surfaced by the scanner core."""


class DecodeError(ScannerError):
    """The codec could not interpret the file as an image."""


class StorageError(ScannerError, OSError):
    """A filesystem read, write, stat, or directory creation failed."""


class DownloadError(ScannerError):
    """A model asset could not be fetched from its remote source."""


class UnknownActionError(ScannerError, ValueError):
    """A transform was requested with an action outside the supported set."""


class InferenceError(ScannerError):
    """An OCR model could not be loaded or the inference engine could not be built."""


__all__ = [
    "ScannerError",
    "DecodeError",
    "StorageError",
    "DownloadError",
    "UnknownActionError",
    "InferenceError",
]
