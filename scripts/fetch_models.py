# Path: scripts/fetch_models.py
# Purpose: CLI to download the OCR models ahead of the first recognition request.
# Layer: scripts.
# Details: Uses the same provisioner as the OCR pipeline, so already-present models are left alone.

from __future__ import annotations

import argparse
import sys
from pathlib import Path

# Ensure project root is on sys.path when running as a script.
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from config import AppSettings, setup_logging
from core.ocr.fetchers import CommandFetcher, HttpFetcher
from core.ocr.provisioner import ModelProvisioner


def main() -> None:
    """Ensure both OCR models exist in the configured data directory."""

    settings = AppSettings.from_env()
    parser = argparse.ArgumentParser(description="Download OCR models for Scanner Pro")
    parser.add_argument("--data-dir", type=Path, default=settings.ocr.data_dir, help="Directory to store models in")
    parser.add_argument(
        "--command",
        nargs="+",
        default=None,
        help="External download command writing to stdout, with {url} as placeholder (e.g. curl -fsSL {url})",
    )
    args = parser.parse_args()

    setup_logging(settings.log_level)
    fetcher = CommandFetcher(args.command) if args.command else HttpFetcher(timeout=settings.ocr.download_timeout)
    provisioner = ModelProvisioner(
        args.data_dir,
        fetcher,
        sources=settings.ocr.model_sources(),
        checksums=settings.ocr.checksums,
        extension=settings.ocr.model_extension,
    )
    paths = provisioner.ensure([settings.ocr.detection_model, settings.ocr.recognition_model])
    for path in paths:
        print(path)


if __name__ == "__main__":
    main()
