# Path: core/cache/hasher.py
# Purpose: Derive stable cache keys for derived artifacts.
# Layer: core/cache.
# Details: SHA-256 over the source path followed by a purpose tag namespaces artifact kinds in one directory.

from __future__ import annotations

import hashlib


def cache_key(path: str, purpose: str) -> str:
    """Return the hex digest identifying the ``purpose`` artifact of ``path``."""

    hasher = hashlib.sha256()
    hasher.update(path.encode("utf-8"))
    hasher.update(purpose.encode("utf-8"))
    return hasher.hexdigest()
