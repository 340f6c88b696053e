"""Image loading — transport, shared fetch registry and per-slot loaders."""

from spritecache.loader.fetcher import ImageFetcher
from spritecache.loader.slot import ImageLoader, LoadState
from spritecache.loader.transport import HttpImageTransport, ImageTransport

__all__ = [
    "HttpImageTransport",
    "ImageFetcher",
    "ImageLoader",
    "ImageTransport",
    "LoadState",
]
