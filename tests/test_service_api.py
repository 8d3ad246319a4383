from __future__ import annotations

import os
import tempfile
import unittest
from pathlib import Path
from unittest.mock import patch

from fastapi.testclient import TestClient
from PIL import Image

from api.app import create_app
from config.settings import AppSettings
from core.cache.hasher import cache_key
from core.ocr.engine import OcrEngine
from core.service import HEATMAP_PURPOSE, THUMBNAIL_PURPOSE, ScannerService


class _OfflineFetcher:
    def fetch(self, url: str) -> bytes:
        return b"model"


class _BlankEngine(OcrEngine):
    def detect_words(self, ocr_input):
        return []

    def recognize_text(self, ocr_input, lines):
        return []


class _ServiceTestCase(unittest.TestCase):
    def setUp(self) -> None:
        self._tmp = tempfile.TemporaryDirectory()
        self.root = Path(self._tmp.name).resolve()
        self.service = ScannerService(
            cache_dir=self.root / "cache",
            data_dir=self.root / "models",
            fetcher=_OfflineFetcher(),
            model_loader=lambda data: data,
            engine_factory=lambda det, rec: _BlankEngine(),
        )
        self.photo = self.root / "photo.png"
        image = Image.new("RGB", (300, 150), (30, 60, 90))
        image.paste((250, 250, 250), (100, 50, 200, 100))
        image.save(self.photo)

    def tearDown(self) -> None:
        self._tmp.cleanup()


class TestScannerService(_ServiceTestCase):
    def test_thumbnail_is_cached_jpeg_within_box(self) -> None:
        first = self.service.get_thumbnail(str(self.photo))
        second = self.service.get_thumbnail(str(self.photo))

        self.assertEqual(first, second)
        self.assertEqual(first.name, f"{cache_key(str(self.photo), THUMBNAIL_PURPOSE)}.jpg")
        with Image.open(first) as thumb:
            self.assertEqual(thumb.format, "JPEG")
            self.assertEqual(thumb.size, (100, 50))

    def test_heatmap_is_cached_png_separate_from_thumbnail(self) -> None:
        thumb = self.service.get_thumbnail(str(self.photo))
        heatmap = self.service.get_focus_heatmap(str(self.photo))

        self.assertNotEqual(thumb, heatmap)
        self.assertEqual(heatmap.name, f"{cache_key(str(self.photo), HEATMAP_PURPOSE)}.png")
        with Image.open(heatmap) as overlay:
            self.assertEqual(overlay.mode, "RGBA")
            self.assertEqual(overlay.size, (300, 150))
            # The pasted rectangle's edges register as focused.
            self.assertEqual(overlay.getpixel((100, 75))[:3], (0, 255, 0))

    def test_relative_paths_are_keyed_by_absolute_location(self) -> None:
        for folder, color in (("red", (255, 0, 0)), ("blue", (0, 0, 255))):
            (self.root / folder).mkdir()
            Image.new("RGB", (40, 40), color).save(self.root / folder / "img.png")

        previous = os.getcwd()
        self.addCleanup(os.chdir, previous)
        os.chdir(self.root / "red")
        red_thumb = self.service.get_thumbnail("img.png")
        red_heatmap = self.service.get_focus_heatmap("img.png")
        os.chdir(self.root / "blue")
        blue_thumb = self.service.get_thumbnail("img.png")
        blue_heatmap = self.service.get_focus_heatmap("img.png")

        self.assertNotEqual(red_thumb, blue_thumb)
        self.assertNotEqual(red_heatmap, blue_heatmap)
        with Image.open(blue_thumb) as thumb:
            r, g, b = thumb.convert("RGB").getpixel((20, 20))
        self.assertLess(r, 10)
        self.assertGreater(b, 245)

        # An absolute path to the same file shares the entry built from the relative one.
        self.assertEqual(self.service.get_thumbnail(str(self.root / "blue" / "img.png")), blue_thumb)

    def test_recognize_text_without_text_is_empty(self) -> None:
        self.assertEqual(self.service.recognize_text(str(self.photo)), "")
        self.assertTrue((self.root / "models" / "text-detection.onnx").exists())
        self.assertTrue((self.root / "models" / "text-recognition.onnx").exists())

    def test_from_settings_uses_configured_directories(self) -> None:
        settings = AppSettings()
        settings.cache.cache_dir = self.root / "c"
        settings.ocr.data_dir = self.root / "d"

        service = ScannerService.from_settings(settings, fetcher=_OfflineFetcher())

        self.assertEqual(service.cache.cache_dir, self.root / "c")
        self.assertEqual(service.provisioner.data_dir, self.root / "d")

    def test_settings_from_env(self) -> None:
        env = {
            "SCANNER_CACHE_DIR": str(self.root / "env-cache"),
            "SCANNER_DATA_DIR": str(self.root / "env-models"),
            "SCANNER_MODEL_BASE_URL": "https://mirror.example.test",
            "SCANNER_LOG_LEVEL": "DEBUG",
        }
        with patch.dict(os.environ, env):
            settings = AppSettings.from_env()

        self.assertEqual(settings.cache.cache_dir, self.root / "env-cache")
        self.assertEqual(settings.ocr.data_dir, self.root / "env-models")
        self.assertEqual(settings.log_level, "DEBUG")
        self.assertEqual(
            settings.ocr.model_sources()["text-detection"],
            "https://mirror.example.test/text-detection.onnx",
        )


class TestApi(_ServiceTestCase):
    def setUp(self) -> None:
        super().setUp()
        self.client = TestClient(create_app(self.service))

    def test_health(self) -> None:
        self.assertEqual(self.client.get("/health").json(), {"status": "ok"})

    def test_scan_image(self) -> None:
        response = self.client.post("/scan_image", json={"path": str(self.photo)})

        self.assertEqual(response.status_code, 200)
        payload = response.json()
        self.assertEqual((payload["width"], payload["height"]), (300, 150))
        self.assertEqual(sum(payload["histogram"]), 300 * 150)
        self.assertEqual(len(payload["palette"]), 10)

    def test_scan_missing_image_is_not_found(self) -> None:
        response = self.client.post("/scan_image", json={"path": str(self.root / "missing.png")})

        self.assertEqual(response.status_code, 404)

    def test_scan_undecodable_image_is_unprocessable(self) -> None:
        broken = self.root / "broken.jpg"
        broken.write_bytes(b"garbage")

        response = self.client.post("/scan_image", json={"path": str(broken)})

        self.assertEqual(response.status_code, 422)
        self.assertIn("Failed to open image", response.json()["detail"])

    def test_scan_directory_with_filters(self) -> None:
        (self.root / "other.jpeg").write_bytes(b"")
        (self.root / "notes.txt").write_bytes(b"")

        response = self.client.post("/scan_directory", json={"path": str(self.root), "format": "jpg"})

        self.assertEqual([item["name"] for item in response.json()["images"]], ["other.jpeg"])

    def test_thumbnail_and_heatmap_paths(self) -> None:
        thumb = self.client.post("/thumbnail", json={"path": str(self.photo)}).json()["path"]
        heatmap = self.client.post("/focus_heatmap", json={"path": str(self.photo)}).json()["path"]

        self.assertTrue(thumb.endswith(".jpg"))
        self.assertTrue(heatmap.endswith(".png"))
        self.assertTrue(Path(thumb).exists())
        self.assertTrue(Path(heatmap).exists())

    def test_unknown_transform_is_bad_request(self) -> None:
        before = self.photo.read_bytes()

        response = self.client.post("/transform", json={"path": str(self.photo), "action": "sharpen"})

        self.assertEqual(response.status_code, 400)
        self.assertEqual(self.photo.read_bytes(), before)

    def test_transform_rotates_in_place(self) -> None:
        response = self.client.post("/transform", json={"path": str(self.photo), "action": "rotate90"})

        self.assertEqual(response.json(), {"status": "ok"})
        with Image.open(self.photo) as img:
            self.assertEqual(img.size, (150, 300))

    def test_ocr(self) -> None:
        self.assertEqual(self.client.post("/ocr", json={"path": str(self.photo)}).json(), {"text": ""})

    def test_palette_export(self) -> None:
        response = self.client.post(
            "/palette/export", json={"palette": ["#000000", "#ffffff"], "name": "p", "format": "css"}
        )

        self.assertEqual(response.json()["text"], "--color-1: #000000;\n--color-2: #ffffff;")

    def test_missing_field_is_bad_request(self) -> None:
        self.assertEqual(self.client.post("/thumbnail", json={}).status_code, 400)

    def test_open_folder_delegates_to_service(self) -> None:
        with patch.object(self.service, "open_containing_location") as reveal:
            response = self.client.post("/open_folder", json={"path": str(self.photo)})

        self.assertEqual(response.status_code, 200)
        reveal.assert_called_once_with(str(self.photo))


if __name__ == "__main__":
    unittest.main()
