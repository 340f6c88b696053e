"""Top-level entry point: SpriteCache wires cache, transport and loaders."""

from __future__ import annotations

import asyncio
import contextlib
import logging
from collections.abc import Callable
from typing import Any

from PIL import Image

from spritecache.cache.manager import ImageCacheManager
from spritecache.concurrency.pool import ConcurrencyPool, PrefetchResult
from spritecache.config.hierarchy import load_config_hierarchy
from spritecache.config.schema import CacheSettings
from spritecache.errors.exceptions import SpriteCacheError
from spritecache.loader.fetcher import ImageFetcher
from spritecache.loader.slot import ImageLoader
from spritecache.loader.transport import HttpImageTransport, ImageTransport

logger = logging.getLogger(__name__)


class SpriteCache:
    """Process-wide image cache with explicit lifecycle.

    Create one at startup and hand it (or loaders made from it) to every
    component that displays images; close it on shutdown.
    """

    def __init__(
        self,
        settings: CacheSettings | None = None,
        transport: ImageTransport | None = None,
        sweep_on_start: bool = True,
    ) -> None:
        self._settings = settings or CacheSettings()
        s = self._settings
        self._cache = ImageCacheManager(
            cache_dir=s.cache_dir,
            max_memory_bytes=s.max_memory_bytes,
            max_memory_count=s.max_memory_count,
            max_disk_bytes=s.max_disk_bytes,
            max_age_seconds=s.max_age_seconds,
            enabled=not s.cache_disabled,
            sweep_on_start=sweep_on_start,
        )
        self._transport = transport or HttpImageTransport(
            connect_timeout=s.connect_timeout,
            resource_timeout=s.resource_timeout,
            max_attempts=s.max_retries,
        )
        self._fetcher = ImageFetcher(self._cache, self._transport)
        self._sweeper: asyncio.Task[None] | None = None

    @classmethod
    def from_config(cls, **overrides: Any) -> SpriteCache:
        """Build from the merged configuration hierarchy."""
        config = load_config_hierarchy(**overrides)
        return cls(CacheSettings.from_mapping(config))

    @property
    def settings(self) -> CacheSettings:
        return self._settings

    @property
    def cache(self) -> ImageCacheManager:
        return self._cache

    @property
    def fetcher(self) -> ImageFetcher:
        return self._fetcher

    def new_loader(self, on_change: Callable[[ImageLoader], None] | None = None) -> ImageLoader:
        """Create a slot loader sharing this cache's fetch registry."""
        return ImageLoader(self._fetcher, on_change=on_change)

    async def get_image(self, url: str) -> Image.Image | None:
        """Load one image through the cache; None if it cannot be loaded."""
        try:
            return await self._fetcher.load(url)
        except SpriteCacheError as e:
            logger.warning("Failed to load image %s: %s", url, e)
            return None

    async def prefetch(self, urls: list[str], max_workers: int | None = None) -> PrefetchResult:
        """Warm the cache for many URLs concurrently."""
        pool = ConcurrencyPool(max_workers=max_workers or self._settings.max_workers)
        return await pool.process_batch(self._fetcher.load, urls)

    def start_sweeper(self, interval_seconds: float | None = None) -> asyncio.Task[None] | None:
        """Sweep the disk tier periodically on the running loop until close().

        Uses ``sweep_interval_seconds`` from the settings when no interval is
        given; a non-positive interval leaves the sweeper off.
        """
        if self._sweeper is not None:
            return self._sweeper
        interval = (
            interval_seconds if interval_seconds is not None else self._settings.sweep_interval_seconds
        )
        if interval <= 0:
            return None
        self._sweeper = asyncio.get_running_loop().create_task(
            self._cache.run_periodic_sweep(interval)
        )
        return self._sweeper

    async def close(self) -> None:
        if self._sweeper is not None:
            self._sweeper.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await self._sweeper
            self._sweeper = None
        await self._transport.close()
        self._cache.close()
