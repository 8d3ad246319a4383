# Path: core/imaging/palette.py
# Purpose: Render a sampled palette into shareable text formats.
# Layer: core/imaging.
# Details: Supports CSS custom properties, JSON, CSV, and a plain one-color-per-line fallback.

from __future__ import annotations

import json
from typing import Sequence

PALETTE_FORMATS = ("css", "json", "csv", "plain")


def export_palette(palette: Sequence[str], name: str, fmt: str = "plain") -> str:
    """Return ``palette`` rendered in ``fmt``; unknown formats fall back to plain text."""

    fmt = fmt.lower()
    if fmt == "css":
        return "\n".join(f"--color-{index}: {color};" for index, color in enumerate(palette, start=1))
    if fmt == "json":
        return json.dumps({"name": name, "colors": list(palette)}, indent=2)
    if fmt == "csv":
        rows = [f"{index},{color}" for index, color in enumerate(palette, start=1)]
        return "\n".join(["Index,Hex", *rows])
    return "\n".join(palette)
