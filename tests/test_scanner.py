from __future__ import annotations

import tempfile
import unittest
from pathlib import Path

from core.indexing.scanner import filter_images, list_images
from core.models.domain import ImageEntry


class TestListImages(unittest.TestCase):
    def setUp(self) -> None:
        self._tmp = tempfile.TemporaryDirectory()
        self.root = Path(self._tmp.name)
        (self.root / "a.JPG").write_bytes(b"")
        (self.root / "b.txt").write_bytes(b"")
        (self.root / "sub").mkdir()
        (self.root / "sub" / "c.png").write_bytes(b"")
        (self.root / "sub" / "deeper").mkdir()
        (self.root / "sub" / "deeper" / "d.WebP").write_bytes(b"")

    def tearDown(self) -> None:
        self._tmp.cleanup()

    def test_non_recursive_lists_top_level_only(self) -> None:
        entries = list_images(str(self.root), recursive=False)

        self.assertEqual([entry.name for entry in entries], ["a.JPG"])
        self.assertEqual(entries[0].path, str(self.root / "a.JPG"))

    def test_recursive_descends_into_subdirectories(self) -> None:
        entries = list_images(self.root, recursive=True)

        self.assertEqual(sorted(entry.name for entry in entries), ["a.JPG", "c.png", "d.WebP"])

    def test_missing_directory_yields_empty_list(self) -> None:
        self.assertEqual(list_images(self.root / "nope", recursive=True), [])

    def test_file_path_is_not_a_directory_to_list(self) -> None:
        self.assertEqual(list_images(self.root / "a.JPG"), [])

    def test_directories_with_image_suffix_are_ignored(self) -> None:
        (self.root / "folder.png").mkdir()

        self.assertEqual([entry.name for entry in list_images(self.root)], ["a.JPG"])


class TestFilterImages(unittest.TestCase):
    def setUp(self) -> None:
        self.entries = [
            ImageEntry(path="/photos/holiday/beach.jpeg", name="beach.jpeg"),
            ImageEntry(path="/photos/holiday/sunset.JPG", name="sunset.JPG"),
            ImageEntry(path="/photos/work/diagram.png", name="diagram.png"),
        ]

    def test_all_with_empty_query_keeps_everything(self) -> None:
        self.assertEqual(filter_images(self.entries), self.entries)

    def test_query_matches_name_or_path_case_insensitively(self) -> None:
        self.assertEqual([e.name for e in filter_images(self.entries, query="HOLIDAY")], ["beach.jpeg", "sunset.JPG"])
        self.assertEqual([e.name for e in filter_images(self.entries, query="diag")], ["diagram.png"])

    def test_jpg_format_also_matches_jpeg(self) -> None:
        self.assertEqual([e.name for e in filter_images(self.entries, fmt="jpg")], ["beach.jpeg", "sunset.JPG"])
        self.assertEqual([e.name for e in filter_images(self.entries, fmt="png")], ["diagram.png"])

    def test_query_and_format_combine(self) -> None:
        self.assertEqual(filter_images(self.entries, query="work", fmt="jpg"), [])


if __name__ == "__main__":
    unittest.main()
