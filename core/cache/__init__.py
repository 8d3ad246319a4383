# Path: core/cache/__init__.py
# Purpose: Package initializer for the derived-artifact cache.
# Layer: core/cache.
# Details: Exposes the content hasher and the lazy on-disk artifact cache.

from .artifact_cache import ArtifactCache
from .hasher import cache_key

__all__ = ["ArtifactCache", "cache_key"]
