# Path: core/ocr/__init__.py
# Purpose: Package initializer for OCR model provisioning and inference.
# Layer: core/ocr.
# Details: Exposes fetchers, the model provisioner, engine types, and the OCR pipeline.

from .engine import LineRegion, OcrEngine, OcrInput, OnnxOcrEngine, TextLine, WordRect, group_into_lines
from .fetchers import CommandFetcher, Fetcher, HttpFetcher
from .pipeline import OcrPipeline
from .provisioner import ModelProvisioner

__all__ = [
    "CommandFetcher",
    "Fetcher",
    "HttpFetcher",
    "LineRegion",
    "ModelProvisioner",
    "OcrEngine",
    "OcrInput",
    "OcrPipeline",
    "OnnxOcrEngine",
    "TextLine",
    "WordRect",
    "group_into_lines",
]
