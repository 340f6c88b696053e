"""Custom exception hierarchy for spritecache."""

from __future__ import annotations

from typing import Any


class SpriteCacheError(Exception):
    """Base exception for all spritecache errors."""

    def __init__(self, message: str = "", **kwargs: Any) -> None:
        super().__init__(message)
        self.message = message


class CacheIOError(SpriteCacheError):
    """Disk read, write or delete failure inside the cache directory."""

    def __init__(
        self,
        message: str = "",
        path: str | None = None,
        original: Exception | None = None,
    ) -> None:
        super().__init__(message)
        self.path = path
        self.original = original


class FetchError(SpriteCacheError):
    """Network fetch failure — bad status, timeout, connection error.

    ``transient`` marks failures worth retrying (timeouts, 429, 5xx).
    """

    def __init__(
        self,
        message: str = "",
        url: str | None = None,
        http_status: int | None = None,
        transient: bool = False,
        original: Exception | None = None,
    ) -> None:
        super().__init__(message)
        self.url = url
        self.http_status = http_status
        self.transient = transient
        self.original = original


class DecodeError(SpriteCacheError):
    """Bytes could not be decoded as an image."""

    def __init__(self, message: str = "", original: Exception | None = None) -> None:
        super().__init__(message)
        self.original = original


class EncodeError(SpriteCacheError):
    """An image could not be encoded for the disk tier."""

    def __init__(self, message: str = "", original: Exception | None = None) -> None:
        super().__init__(message)
        self.original = original


class CatalogError(SpriteCacheError):
    """Catalog API request or response parsing failed."""

    def __init__(
        self,
        message: str = "",
        http_status: int | None = None,
        original: Exception | None = None,
    ) -> None:
        super().__init__(message)
        self.http_status = http_status
        self.original = original
