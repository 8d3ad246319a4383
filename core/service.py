# Path: core/service.py
# Purpose: Expose the boundary operations of the scanner core behind one facade.
# Layer: core.
# Details: Composes metadata extraction, listing, artifact cache, heatmaps, transforms, OCR, and reveal.

from __future__ import annotations

from pathlib import Path
from typing import List, Optional, Union

from PIL import Image

from config.settings import AppSettings
from core.cache.artifact_cache import ArtifactCache
from core.imaging.codec import encode_image, open_image, to_8bit
from core.imaging.heatmap import FocusHeatmap
from core.imaging.metadata import MetadataExtractor
from core.imaging.transforms import transform_image
from core.indexing.scanner import list_images
from core.models.domain import ImageEntry, ImageRecord
from core.ocr.fetchers import Fetcher, HttpFetcher
from core.ocr.pipeline import EngineFactory, ModelLoader, OcrPipeline
from core.ocr.provisioner import ModelProvisioner
from core.shell import open_containing_location

THUMBNAIL_PURPOSE = "thumb"
HEATMAP_PURPOSE = "focus_peak"


class ScannerService:
    """High-level service bridging API/script layers with the imaging, cache, and OCR components.

    The cache and model directories are passed in explicitly; every call runs
    synchronously in the caller's thread.
    """

    def __init__(
        self,
        cache_dir: Union[str, Path],
        data_dir: Union[str, Path],
        settings: Optional[AppSettings] = None,
        fetcher: Optional[Fetcher] = None,
        model_loader: Optional[ModelLoader] = None,
        engine_factory: Optional[EngineFactory] = None,
    ) -> None:
        self.settings = settings or AppSettings()
        self.cache = ArtifactCache(cache_dir)
        self.extractor = MetadataExtractor()
        self.heatmap = FocusHeatmap(self.settings.heatmap)
        ocr_settings = self.settings.ocr
        self.provisioner = ModelProvisioner(
            data_dir,
            fetcher or HttpFetcher(timeout=ocr_settings.download_timeout),
            sources=ocr_settings.model_sources(),
            checksums=ocr_settings.checksums,
            extension=ocr_settings.model_extension,
        )
        self.ocr = OcrPipeline(
            self.provisioner,
            ocr_settings,
            model_loader=model_loader,
            engine_factory=engine_factory,
        )

    @classmethod
    def from_settings(cls, settings: AppSettings, **kwargs) -> "ScannerService":
        return cls(settings.cache.cache_dir, settings.ocr.data_dir, settings=settings, **kwargs)

    def extract_metadata(self, path: str) -> ImageRecord:
        return self.extractor.extract(path)

    def list_images(self, directory: str, recursive: bool = False) -> List[ImageEntry]:
        return list_images(directory, recursive=recursive)

    def get_thumbnail(self, path: str) -> Path:
        """Return the cached JPEG thumbnail (bounded to ``thumbnail_size``) for ``path``."""

        source = _absolute(path)
        return self.cache.get_or_create(source, THUMBNAIL_PURPOSE, lambda: self._thumbnail_bytes(source), "jpg")

    def get_focus_heatmap(self, path: str) -> Path:
        """Return the cached PNG focus overlay for ``path``."""

        source = _absolute(path)
        return self.cache.get_or_create(
            source, HEATMAP_PURPOSE, lambda: self.heatmap.heatmap_png_bytes(source), "png"
        )

    def transform_image(self, path: str, action: str) -> None:
        transform_image(path, action)

    def recognize_text(self, path: str) -> str:
        return self.ocr.recognize_text(path)

    def open_containing_location(self, path: str) -> None:
        open_containing_location(path)

    def _thumbnail_bytes(self, path: str) -> bytes:
        cache_settings = self.settings.cache
        thumb = to_8bit(open_image(path))
        thumb.thumbnail((cache_settings.thumbnail_size, cache_settings.thumbnail_size), Image.Resampling.LANCZOS)
        return encode_image(thumb, "JPEG", quality=cache_settings.thumbnail_quality)


def _absolute(path: str) -> str:
    """Cache keys are derived from the absolute path, independent of the working directory."""

    return str(Path(path).resolve())
