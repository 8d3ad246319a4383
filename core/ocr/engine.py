# Path: core/ocr/engine.py
# Purpose: Define the OCR engine interface and an ONNX Runtime implementation of it.
# Layer: core/ocr.
# Details: Detection yields word rectangles, grouping builds text lines, recognition CTC-decodes each line.

from __future__ import annotations

import math
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, List, Optional

import cv2
import numpy as np
from PIL import Image

from config.settings import OcrSettings
from core.errors import InferenceError

RECOGNITION_HEIGHT = 64
DETECTION_ALIGNMENT = 32
# Normalised value of a black pixel; images are scaled into [-0.5, 0.5].
BLACK_VALUE = -0.5


@dataclass(frozen=True)
class WordRect:
    """Axis-aligned bounding box of a detected word, in input pixel coordinates."""

    x0: int
    y0: int
    x1: int
    y1: int

    @property
    def width(self) -> int:
        return self.x1 - self.x0

    @property
    def height(self) -> int:
        return self.y1 - self.y0

    @property
    def center_y(self) -> float:
        return (self.y0 + self.y1) / 2


@dataclass
class LineRegion:
    """A group of words sitting on the same text line, ordered left to right."""

    words: List[WordRect] = field(default_factory=list)

    @property
    def bbox(self) -> WordRect:
        return WordRect(
            x0=min(word.x0 for word in self.words),
            y0=min(word.y0 for word in self.words),
            x1=max(word.x1 for word in self.words),
            y1=max(word.y1 for word in self.words),
        )


@dataclass(frozen=True)
class TextLine:
    """Recognised text for a single line region."""

    text: str
    region: LineRegion

    def __str__(self) -> str:
        return self.text


@dataclass
class OcrInput:
    """Greyscale image prepared for the OCR models."""

    grey: np.ndarray  # uint8, HxW
    normalized: np.ndarray  # float32, HxW in [-0.5, 0.5]

    @property
    def width(self) -> int:
        return int(self.grey.shape[1])

    @property
    def height(self) -> int:
        return int(self.grey.shape[0])


def group_into_lines(words: List[WordRect], min_overlap: float = 0.5) -> List[LineRegion]:
    """
    Group word rectangles into lines.

    A word joins the first line whose vertical extent overlaps it by at least
    ``min_overlap`` of the smaller of the two heights. Lines come out top to
    bottom, words within a line left to right.
    """

    lines: List[LineRegion] = []
    for word in sorted(words, key=lambda rect: (rect.center_y, rect.x0)):
        for line in lines:
            box = line.bbox
            overlap = min(box.y1, word.y1) - max(box.y0, word.y0)
            if overlap >= min_overlap * min(box.height, word.height):
                line.words.append(word)
                break
        else:
            lines.append(LineRegion(words=[word]))

    for line in lines:
        line.words.sort(key=lambda rect: rect.x0)
    lines.sort(key=lambda line: (line.bbox.y0, line.bbox.x0))
    return lines


def ctc_greedy_decode(logits: np.ndarray, alphabet: str) -> str:
    """Collapse repeated argmax classes and drop blanks (class 0) from a (T, C) score matrix."""

    best = np.argmax(logits, axis=-1)
    chars: List[str] = []
    previous = 0
    for index in best.tolist():
        if index != previous and index != 0 and index - 1 < len(alphabet):
            chars.append(alphabet[index - 1])
        previous = index
    return "".join(chars)


class OcrEngine(ABC):
    """Interface for two-stage (detect, then recognise) OCR engines."""

    def prepare_input(self, rgb: np.ndarray) -> OcrInput:
        """Validate an interleaved HxWx3 uint8 RGB buffer and convert it to model input."""

        if rgb.ndim != 3 or rgb.shape[2] != 3 or rgb.dtype != np.uint8:
            raise InferenceError(f"Expected an HxWx3 uint8 RGB buffer, got shape {rgb.shape} ({rgb.dtype})")
        grey = np.asarray(Image.fromarray(rgb).convert("L"))
        normalized = grey.astype(np.float32) / 255.0 - 0.5
        return OcrInput(grey=grey, normalized=normalized)

    @abstractmethod
    def detect_words(self, ocr_input: OcrInput) -> List[WordRect]:
        """Return bounding boxes of the words found in the input."""

    def find_text_lines(self, ocr_input: OcrInput, words: List[WordRect]) -> List[LineRegion]:
        """Group detected words into text lines ordered top to bottom."""

        return group_into_lines(words)

    @abstractmethod
    def recognize_text(self, ocr_input: OcrInput, lines: List[LineRegion]) -> List[Optional[TextLine]]:
        """Recognise each line; lines without a usable result are returned as None."""


def load_onnx_model(data: bytes) -> Any:
    """Create an ONNX Runtime session from serialized model bytes."""

    try:
        import onnxruntime as ort
    except ImportError as exc:  # pragma: no cover - runtime dependency
        raise InferenceError("onnxruntime package is required for OCR.") from exc

    try:
        return ort.InferenceSession(data, providers=["CPUExecutionProvider"])
    except Exception as exc:  # noqa: BLE001 - onnxruntime raises its own exception hierarchy
        raise InferenceError(f"Failed to load OCR model: {exc}") from exc


class OnnxOcrEngine(OcrEngine):
    """OCR engine running a text detection and a text recognition model with ONNX Runtime."""

    def __init__(self, detection_model: Any, recognition_model: Any, settings: Optional[OcrSettings] = None) -> None:
        if detection_model is None or recognition_model is None:
            raise InferenceError("Both a detection and a recognition model are required.")
        self.detection_model = detection_model
        self.recognition_model = recognition_model
        self.settings = settings or OcrSettings()
        self._detection_input = detection_model.get_inputs()[0].name
        self._recognition_input = recognition_model.get_inputs()[0].name

    def detect_words(self, ocr_input: OcrInput) -> List[WordRect]:
        height, width = ocr_input.normalized.shape
        if height == 0 or width == 0:
            return []
        padded_h = math.ceil(height / DETECTION_ALIGNMENT) * DETECTION_ALIGNMENT
        padded_w = math.ceil(width / DETECTION_ALIGNMENT) * DETECTION_ALIGNMENT
        batch = np.full((1, 1, padded_h, padded_w), BLACK_VALUE, dtype=np.float32)
        batch[0, 0, :height, :width] = ocr_input.normalized

        try:
            outputs = self.detection_model.run(None, {self._detection_input: batch})
        except Exception as exc:  # noqa: BLE001 - surface as a pipeline failure
            raise InferenceError(f"Text detection failed: {exc}") from exc

        probabilities = np.asarray(outputs[0])[0, 0, :height, :width]
        mask = (probabilities > self.settings.detection_threshold).astype(np.uint8)
        count, _, stats, _ = cv2.connectedComponentsWithStats(mask, connectivity=8)

        words: List[WordRect] = []
        for label in range(1, count):
            x, y, w, h, area = (int(value) for value in stats[label])
            if area < self.settings.min_word_area:
                continue
            words.append(WordRect(x0=x, y0=y, x1=x + w, y1=y + h))
        words.sort(key=lambda rect: (rect.y0, rect.x0))
        return words

    def recognize_text(self, ocr_input: OcrInput, lines: List[LineRegion]) -> List[Optional[TextLine]]:
        grey = Image.fromarray(ocr_input.grey)
        results: List[Optional[TextLine]] = []
        for line in lines:
            box = line.bbox
            if box.width <= 0 or box.height <= 0:
                results.append(None)
                continue

            crop = grey.crop((box.x0, box.y0, box.x1, box.y1))
            target_width = max(1, round(box.width * RECOGNITION_HEIGHT / box.height))
            resized = crop.resize((target_width, RECOGNITION_HEIGHT), Image.Resampling.BILINEAR)
            batch = (np.asarray(resized, dtype=np.float32) / 255.0 - 0.5)[np.newaxis, np.newaxis]

            try:
                outputs = self.recognition_model.run(None, {self._recognition_input: batch})
            except Exception as exc:  # noqa: BLE001 - surface as a pipeline failure
                raise InferenceError(f"Text recognition failed: {exc}") from exc

            text = ctc_greedy_decode(self._sequence_scores(outputs[0]), self.settings.alphabet).strip()
            results.append(TextLine(text=text, region=line) if text else None)
        return results

    @staticmethod
    def _sequence_scores(output: Any) -> np.ndarray:
        """Reduce the recognition output to a (T, C) matrix; the model emits (T, N, C) with N=1."""

        scores = np.asarray(output)
        if scores.ndim == 3:
            scores = scores[:, 0, :] if scores.shape[1] == 1 else scores[0]
        return scores
