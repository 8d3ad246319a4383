# Path: core/shell.py
# Purpose: Reveal a file or folder in the platform's file manager.
# Layer: core.
# Details: Windows selects the item in Explorer; macOS and Linux open the containing directory.

from __future__ import annotations

import subprocess
import sys
from pathlib import Path
from typing import List, Optional, Union

from core.errors import StorageError


def reveal_command(path: Union[str, Path], platform: Optional[str] = None) -> List[str]:
    """Return the argument list that reveals ``path`` on ``platform`` (defaults to the current one)."""

    platform = platform or sys.platform
    target = Path(path)
    if platform.startswith("win"):
        return ["explorer", "/select,", str(target)]

    directory = target.parent if target.is_file() else target
    if platform == "darwin":
        return ["open", str(directory)]
    return ["xdg-open", str(directory)]


def open_containing_location(path: Union[str, Path]) -> None:
    """Spawn the file manager for ``path`` without waiting for it to exit."""

    args = reveal_command(path)
    try:
        subprocess.Popen(args)
    except OSError as exc:
        raise StorageError(f"Failed to open {path} with {args[0]}: {exc}") from exc
