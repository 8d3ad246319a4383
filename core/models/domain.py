# Path: core/models/domain.py
# Purpose: Define domain models shared across metadata extraction, listing, and API layers.
# Layer: core/models.
# Details: Lightweight dataclasses simplify serialization between API, scripts, and core services.

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

PALETTE_SIZE = 10
HISTOGRAM_BINS = 256


@dataclass(frozen=True)
class ImageRecord:
    """Metadata describing a single image, recomputed on every extraction request."""

    width: int
    height: int
    format: str
    color_type: str
    size_bytes: int
    path: str
    name: str
    exif: Optional[Dict[str, str]] = None
    palette: List[str] = field(default_factory=list)
    histogram: List[int] = field(default_factory=lambda: [0] * HISTOGRAM_BINS)
    ocr_text: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "width": self.width,
            "height": self.height,
            "format": self.format,
            "color_type": self.color_type,
            "size_bytes": self.size_bytes,
            "path": self.path,
            "name": self.name,
            "exif": dict(self.exif) if self.exif is not None else None,
            "palette": list(self.palette),
            "histogram": list(self.histogram),
            "ocr_text": self.ocr_text,
        }


@dataclass(frozen=True)
class ImageEntry:
    """A candidate image discovered by a directory listing."""

    path: str
    name: str

    def to_dict(self) -> Dict[str, str]:
        return {"path": self.path, "name": self.name}
