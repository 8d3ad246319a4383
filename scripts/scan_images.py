# Path: scripts/scan_images.py
# Purpose: CLI tool to list a folder's images and extract their metadata.
# Layer: scripts.
# Details: Demonstrates how to wire settings, logging, and the scanner service together.

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path

# Ensure project root is on sys.path when running as a script.
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from tqdm import tqdm

from config import AppSettings, setup_logging
from core.errors import ScannerError
from core.indexing.scanner import filter_images
from core.service import ScannerService

logger = logging.getLogger("scripts.scan_images")


def main() -> None:
    """Scan a folder and print one JSON document per image."""

    parser = argparse.ArgumentParser(description="Extract image metadata for a folder")
    parser.add_argument("folder", type=Path, help="Folder containing images to scan")
    parser.add_argument("--recursive", action="store_true", help="Descend into sub-folders")
    parser.add_argument("--query", type=str, default="", help="Only keep images whose name or path contains this text")
    parser.add_argument("--format", type=str, default="all", help="Only keep images with this extension")
    parser.add_argument("--thumbnails", action="store_true", help="Also build cached thumbnails")
    parser.add_argument("--heatmaps", action="store_true", help="Also build cached focus heatmaps")
    args = parser.parse_args()

    settings = AppSettings.from_env()
    setup_logging(settings.log_level)
    service = ScannerService.from_settings(settings)

    entries = filter_images(service.list_images(str(args.folder), recursive=args.recursive), args.query, args.format)
    for entry in tqdm(entries, desc="Scanning images", unit="img", file=sys.stderr):
        try:
            payload = service.extract_metadata(entry.path).to_dict()
            if args.thumbnails:
                payload["thumbnail"] = str(service.get_thumbnail(entry.path))
            if args.heatmaps:
                payload["focus_heatmap"] = str(service.get_focus_heatmap(entry.path))
        except ScannerError as exc:
            logger.warning("Skipping %s: %s", entry.path, exc)
            continue
        print(json.dumps(payload))


if __name__ == "__main__":
    main()
