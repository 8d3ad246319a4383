# Path: core/ocr/pipeline.py
# Purpose: Run the full OCR flow for one image: provision, load, detect, group, recognise, join.
# Layer: core/ocr.
# Details: Strictly sequential with no caching; per-line recognition misses are dropped silently.

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Callable, Optional, Union

import numpy as np

from config.settings import OcrSettings
from core.errors import InferenceError, StorageError
from core.imaging.codec import open_image, to_8bit
from .engine import OcrEngine, OnnxOcrEngine, load_onnx_model
from .provisioner import ModelProvisioner

logger = logging.getLogger(__name__)

ModelLoader = Callable[[bytes], Any]
EngineFactory = Callable[[Any, Any], OcrEngine]


class OcrPipeline:
    """Recognise text in images using a detection model and a recognition model."""

    def __init__(
        self,
        provisioner: ModelProvisioner,
        settings: Optional[OcrSettings] = None,
        model_loader: Optional[ModelLoader] = None,
        engine_factory: Optional[EngineFactory] = None,
    ) -> None:
        self.provisioner = provisioner
        self.settings = settings or OcrSettings()
        self.model_loader = model_loader or load_onnx_model
        self.engine_factory = engine_factory or self._default_engine

    def recognize_text(self, path: Union[str, Path]) -> str:
        """
        Return the text found in ``path``, one recognised line per output line.

        External calls:
        - core/ocr/provisioner.py::ModelProvisioner.ensure - download models on first use.
        - core/ocr/engine.py::OcrEngine.detect_words / find_text_lines / recognize_text.
        """

        detection_path, recognition_path = self.provisioner.ensure(
            [self.settings.detection_model, self.settings.recognition_model]
        )
        engine = self._build_engine(self._load(detection_path), self._load(recognition_path))

        image = open_image(path)
        rgb = np.asarray(to_8bit(image).convert("RGB"), dtype=np.uint8)
        ocr_input = engine.prepare_input(rgb)

        words = engine.detect_words(ocr_input)
        lines = engine.find_text_lines(ocr_input, words)
        recognised = engine.recognize_text(ocr_input, lines)

        texts = [str(line) for line in recognised if line is not None and str(line)]
        logger.debug("OCR on %s: %d words, %d lines, %d recognised", path, len(words), len(lines), len(texts))
        return "\n".join(texts)

    def _load(self, model_path: Path) -> Any:
        try:
            data = model_path.read_bytes()
        except OSError as exc:
            raise StorageError(f"Failed to read model {model_path}: {exc}") from exc
        try:
            return self.model_loader(data)
        except InferenceError:
            raise
        except Exception as exc:  # noqa: BLE001 - loader implementations raise arbitrary errors
            raise InferenceError(f"Failed to load model {model_path.name}: {exc}") from exc

    def _build_engine(self, detection_model: Any, recognition_model: Any) -> OcrEngine:
        try:
            return self.engine_factory(detection_model, recognition_model)
        except InferenceError:
            raise
        except Exception as exc:  # noqa: BLE001 - engine construction failure
            raise InferenceError(f"Failed to construct OCR engine: {exc}") from exc

    def _default_engine(self, detection_model: Any, recognition_model: Any) -> OcrEngine:
        return OnnxOcrEngine(detection_model, recognition_model, self.settings)
