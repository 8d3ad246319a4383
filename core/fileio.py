# Path: core/fileio.py
# Purpose: Filesystem helpers shared by the artifact cache, model provisioner, and transforms.
# Layer: core.
# Details: Writes go to a temporary sibling file that is renamed over the target only once complete.

from __future__ import annotations

import os
import stat
import tempfile
from pathlib import Path

from core.errors import StorageError


def ensure_directory(directory: Path) -> Path:
    """Create ``directory`` (and parents) if missing, raising StorageError when denied."""

    try:
        directory.mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        raise StorageError(f"Failed to create directory {directory}: {exc}") from exc
    return directory


def atomic_write_bytes(target: Path, data: bytes) -> Path:
    """Write ``data`` to ``target`` via write-then-rename so readers never see a partial file.

    When ``target`` already exists its permission bits are carried over to the replacement.
    """

    tmp_name = None
    try:
        fd, tmp_name = tempfile.mkstemp(prefix=f".{target.name}.", suffix=".tmp", dir=target.parent)
        with os.fdopen(fd, "wb") as handle:
            handle.write(data)
        if target.exists():
            os.chmod(tmp_name, stat.S_IMODE(target.stat().st_mode))
        os.replace(tmp_name, target)
    except OSError as exc:
        if tmp_name is not None and os.path.exists(tmp_name):
            os.unlink(tmp_name)
        raise StorageError(f"Failed to write {target}: {exc}") from exc
    return target
