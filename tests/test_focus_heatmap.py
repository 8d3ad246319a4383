from __future__ import annotations

import io
import tempfile
import unittest
from pathlib import Path

import numpy as np
from PIL import Image

from config.settings import HeatmapSettings
from core.imaging.heatmap import FocusHeatmap


def _noise_image(width: int, height: int, seed: int = 0) -> Image.Image:
    rng = np.random.default_rng(seed)
    return Image.fromarray(rng.integers(0, 256, size=(height, width, 3), dtype=np.uint8))


class TestFocusHeatmap(unittest.TestCase):
    def setUp(self) -> None:
        self.engine = FocusHeatmap()

    def test_output_matches_input_size_and_is_rgba(self) -> None:
        heatmap = self.engine.compute_heatmap(_noise_image(64, 48))

        self.assertEqual(heatmap.mode, "RGBA")
        self.assertEqual(heatmap.size, (64, 48))

    def test_border_pixels_are_transparent(self) -> None:
        heatmap = np.asarray(self.engine.compute_heatmap(_noise_image(40, 30, seed=7)))

        self.assertTrue(np.all(heatmap[0, :, 3] == 0))
        self.assertTrue(np.all(heatmap[-1, :, 3] == 0))
        self.assertTrue(np.all(heatmap[:, 0, 3] == 0))
        self.assertTrue(np.all(heatmap[:, -1, 3] == 0))
        # Noise has plenty of strong edges in the interior.
        self.assertGreater(int(np.count_nonzero(heatmap[1:-1, 1:-1, 3])), 0)

    def test_single_bright_pixel_response(self) -> None:
        gray = np.zeros((5, 5), dtype=np.uint8)
        gray[2, 2] = 10

        magnitude = self.engine.edge_magnitude(gray)

        self.assertEqual(int(magnitude[2, 2]), 200)
        for y, x in [(1, 2), (3, 2), (2, 1), (2, 3)]:
            self.assertEqual(int(magnitude[y, x]), 50)
        self.assertEqual(int(magnitude[1, 1]), 0)

        overlay = np.asarray(self.engine.render_overlay(magnitude))
        self.assertEqual(tuple(overlay[2, 2]), (0, 255, 0, 200))
        self.assertEqual(tuple(overlay[1, 2]), (0, 255, 0, 50))
        self.assertEqual(tuple(overlay[1, 1]), (0, 0, 0, 0))

    def test_sixteen_bit_input_is_scaled_not_clipped(self) -> None:
        samples = np.zeros((5, 5), dtype=np.uint16)
        samples[2, 2] = 10 << 8
        image = Image.fromarray(samples)
        self.assertTrue(image.mode.startswith("I;16"))

        overlay = np.asarray(self.engine.compute_heatmap(image))

        self.assertEqual(tuple(overlay[2, 2]), (0, 255, 0, 200))
        self.assertEqual(tuple(overlay[1, 2]), (0, 255, 0, 50))

    def test_magnitude_is_clamped_to_255(self) -> None:
        gray = np.zeros((3, 3), dtype=np.uint8)
        gray[1, 1] = 255

        magnitude = self.engine.edge_magnitude(gray)

        self.assertEqual(int(magnitude[1, 1]), 255)

    def test_weak_edges_below_threshold_are_transparent(self) -> None:
        gray = np.zeros((5, 5), dtype=np.uint8)
        gray[2, 2] = 2  # 4 * 2 * 5 = 40, not above the threshold

        overlay = np.asarray(self.engine.render_overlay(self.engine.edge_magnitude(gray)))

        self.assertTrue(np.all(overlay == 0))

    def test_flat_image_has_no_highlights(self) -> None:
        heatmap = np.asarray(self.engine.compute_heatmap(Image.new("RGB", (30, 30), (120, 120, 120))))

        self.assertTrue(np.all(heatmap == 0))

    def test_large_images_are_downscaled_preserving_aspect(self) -> None:
        heatmap = self.engine.compute_heatmap(Image.new("RGB", (2000, 500), (0, 0, 0)))

        self.assertEqual(heatmap.size, (1000, 250))

    def test_custom_settings_change_gain_and_threshold(self) -> None:
        engine = FocusHeatmap(HeatmapSettings(max_dimension=10, gain=1, threshold=5))
        gray = np.zeros((5, 5), dtype=np.uint8)
        gray[2, 2] = 10

        magnitude = engine.edge_magnitude(gray)
        overlay = np.asarray(engine.render_overlay(magnitude))

        self.assertEqual(int(magnitude[2, 2]), 40)
        self.assertEqual(int(overlay[1, 2, 3]), 10)
        self.assertEqual(engine.compute_heatmap(Image.new("L", (40, 20))).size, (10, 5))

    def test_degenerate_sizes_do_not_fail(self) -> None:
        for size in [(1, 1), (2, 7), (7, 2)]:
            heatmap = self.engine.compute_heatmap(Image.new("RGB", size, (255, 255, 255)))
            self.assertEqual(heatmap.size, size)
            self.assertTrue(np.all(np.asarray(heatmap) == 0))

    def test_heatmap_png_bytes_round_trips_through_pillow(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "noise.png"
            _noise_image(20, 10).save(path)

            data = self.engine.heatmap_png_bytes(path)

        with Image.open(io.BytesIO(data)) as decoded:
            self.assertEqual(decoded.format, "PNG")
            self.assertEqual(decoded.mode, "RGBA")
            self.assertEqual(decoded.size, (20, 10))


if __name__ == "__main__":
    unittest.main()
