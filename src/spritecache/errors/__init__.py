"""Error handling — exception hierarchy and HTTP error classification."""

from spritecache.errors.exceptions import (
    CacheIOError,
    CatalogError,
    DecodeError,
    EncodeError,
    FetchError,
    SpriteCacheError,
)

__all__ = [
    "SpriteCacheError",
    "CacheIOError",
    "FetchError",
    "DecodeError",
    "EncodeError",
    "CatalogError",
]
