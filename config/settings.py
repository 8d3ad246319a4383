# Path: config/settings.py
# Purpose: Provide typed application configuration models.
# Layer: config.
# Details: Centralizes settings for cache and model directories, heatmap tuning, and OCR provisioning.

import os
from pathlib import Path
from typing import Dict

from pydantic import BaseModel, ConfigDict, Field


class CacheSettings(BaseModel):
    """Settings describing where derived artifacts live and how thumbnails are encoded."""

    cache_dir: Path = Field(default=Path("storage/cache"), description="Directory holding hashed thumbnails and heatmaps.")
    thumbnail_size: int = Field(default=100, description="Bounding box edge for generated thumbnails.")
    thumbnail_quality: int = Field(default=85, description="JPEG quality used for thumbnails.")


class HeatmapSettings(BaseModel):
    """Settings controlling the focus heatmap convolution and overlay rendering."""

    max_dimension: int = Field(default=1000, description="Images larger than this on either side are downscaled first.")
    gain: int = Field(default=5, description="Multiplier applied to the absolute Laplacian response.")
    threshold: int = Field(default=40, description="Edge magnitude above which a pixel is highlighted.")


class OcrSettings(BaseModel):
    """Settings describing OCR model sources and inference parameters."""

    model_config = ConfigDict(protected_namespaces=())

    data_dir: Path = Field(default=Path("storage/models"), description="Directory holding downloaded OCR models.")
    model_base_url: str = Field(
        default="https://ocrs-models.s3.amazonaws.com",
        description="Remote location the OCR models are fetched from.",
    )
    detection_model: str = Field(default="text-detection", description="Asset name of the text detection model.")
    recognition_model: str = Field(default="text-recognition", description="Asset name of the text recognition model.")
    model_extension: str = Field(default="onnx", description="File extension of the stored model files.")
    checksums: Dict[str, str] = Field(
        default_factory=dict,
        description="Optional SHA-256 digests per asset name, verified after download when present.",
    )
    download_timeout: float = Field(default=120.0, description="Socket timeout in seconds for model downloads.")
    detection_threshold: float = Field(default=0.5, description="Probability above which a pixel counts as text.")
    min_word_area: int = Field(default=16, description="Connected components smaller than this are discarded.")
    alphabet: str = Field(
        default=" 0123456789ABCDEFGHIJKLMNOPQRSTUVWXYZabcdefghijklmnopqrstuvwxyz!\"#$%&'()*+,-./:;<=>?@[\\]^_`{|}~",
        description="Characters emitted by the recognition model; class 0 is the CTC blank.",
    )

    def model_sources(self) -> Dict[str, str]:
        """Map each model asset name to the URL it is downloaded from."""

        base = self.model_base_url.rstrip("/")
        return {
            name: f"{base}/{name}.{self.model_extension}"
            for name in (self.detection_model, self.recognition_model)
        }


class AppSettings(BaseModel):
    """Top-level application settings shared across services and interfaces."""

    cache: CacheSettings = Field(default_factory=CacheSettings)
    heatmap: HeatmapSettings = Field(default_factory=HeatmapSettings)
    ocr: OcrSettings = Field(default_factory=OcrSettings)
    log_level: str = Field(default="INFO", description="Verbosity level for application logs.")

    @classmethod
    def from_env(cls) -> "AppSettings":
        """Instantiate settings, applying SCANNER_* environment overrides when present."""

        settings = cls()
        cache_dir = os.getenv("SCANNER_CACHE_DIR")
        if cache_dir:
            settings.cache.cache_dir = Path(cache_dir)
        data_dir = os.getenv("SCANNER_DATA_DIR")
        if data_dir:
            settings.ocr.data_dir = Path(data_dir)
        base_url = os.getenv("SCANNER_MODEL_BASE_URL")
        if base_url:
            settings.ocr.model_base_url = base_url
        log_level = os.getenv("SCANNER_LOG_LEVEL")
        if log_level:
            settings.log_level = log_level
        return settings


__all__ = ["AppSettings", "CacheSettings", "HeatmapSettings", "OcrSettings"]
