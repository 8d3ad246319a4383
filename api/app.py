# Path: api/app.py
# Purpose: Expose a FastAPI application for the scanner's image commands.
# Layer: api.
# Details: Each endpoint delegates to core/service.py::ScannerService; core errors become JSON error responses.

from __future__ import annotations

from typing import Any, Dict, Optional

from core.errors import DecodeError, ScannerError, UnknownActionError
from core.imaging.palette import export_palette
from core.indexing.scanner import filter_images
from core.service import ScannerService


def error_status(exc: ScannerError) -> int:
    """Map a core error to the HTTP status code reported to clients."""

    if isinstance(exc, UnknownActionError):
        return 400
    if isinstance(exc.__cause__, FileNotFoundError):
        return 404
    if isinstance(exc, DecodeError):
        return 422
    return 500


def create_app(service: Optional[ScannerService] = None):  # type: ignore[override]
    """Create a FastAPI app instance configured with the provided scanner service."""

    from fastapi import FastAPI, HTTPException, Request
    from fastapi.responses import JSONResponse

    app = FastAPI(title="Scanner Pro API", version="0.1.0")

    def require_service() -> ScannerService:
        if service is None:
            raise HTTPException(status_code=500, detail="Scanner service is not configured.")
        return service

    def require_field(payload: Dict[str, Any], key: str) -> Any:
        value = payload.get(key)
        if value is None:
            raise HTTPException(status_code=400, detail=f"Missing required field: {key}")
        return value

    @app.exception_handler(ScannerError)
    def handle_scanner_error(request: Request, exc: ScannerError) -> JSONResponse:
        return JSONResponse(status_code=error_status(exc), content={"detail": str(exc)})

    @app.get("/health")
    def health() -> Dict[str, str]:
        """Return a simple health status payload."""

        return {"status": "ok"}

    @app.post("/scan_image")
    def scan_image(payload: Dict[str, Any]):
        """Extract metadata, palette, and histogram for one image."""

        record = require_service().extract_metadata(str(require_field(payload, "path")))
        return record.to_dict()

    @app.post("/scan_directory")
    def scan_directory(payload: Dict[str, Any]):
        """List images in a directory, optionally filtered by name and format."""

        entries = require_service().list_images(
            str(require_field(payload, "path")), recursive=bool(payload.get("recursive", False))
        )
        query = payload.get("query") or ""
        fmt = payload.get("format") or "all"
        entries = filter_images(entries, query=query, fmt=fmt)
        return {"images": [entry.to_dict() for entry in entries]}

    @app.post("/thumbnail")
    def thumbnail(payload: Dict[str, Any]):
        return {"path": str(require_service().get_thumbnail(str(require_field(payload, "path"))))}

    @app.post("/focus_heatmap")
    def focus_heatmap(payload: Dict[str, Any]):
        return {"path": str(require_service().get_focus_heatmap(str(require_field(payload, "path"))))}

    @app.post("/transform")
    def transform(payload: Dict[str, Any]):
        """Rotate, flip, or strip metadata from an image in place."""

        require_service().transform_image(str(require_field(payload, "path")), str(require_field(payload, "action")))
        return {"status": "ok"}

    @app.post("/ocr")
    def ocr(payload: Dict[str, Any]):
        return {"text": require_service().recognize_text(str(require_field(payload, "path")))}

    @app.post("/open_folder")
    def open_folder(payload: Dict[str, Any]):
        require_service().open_containing_location(str(require_field(payload, "path")))
        return {"status": "ok"}

    @app.post("/palette/export")
    def palette_export(payload: Dict[str, Any]):
        """Render a palette as css, json, csv, or plain text."""

        palette = require_field(payload, "palette")
        text = export_palette(palette, str(payload.get("name", "")), str(payload.get("format", "plain")))
        return {"text": text}

    return app
