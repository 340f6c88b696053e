"""Shared single-flight fetch registry — one network fetch per key."""

from __future__ import annotations

import asyncio
import logging

from PIL import Image

from spritecache.cache.manager import ImageCacheManager
from spritecache.loader.transport import ImageTransport
from spritecache.utils.image import decode_image

logger = logging.getLogger(__name__)


class ImageFetcher:
    """Resolves keys through the cache, falling back to the transport.

    Concurrent requests for the same key share one task, so any number of
    slots waiting on a key cause at most one network fetch. The task is
    dropped from the registry once it resolves, successfully or not.
    """

    def __init__(self, cache: ImageCacheManager, transport: ImageTransport) -> None:
        self._cache = cache
        self._transport = transport
        self._in_flight: dict[str, asyncio.Task[Image.Image]] = {}
        self._fetch_count = 0

    @property
    def cache(self) -> ImageCacheManager:
        return self._cache

    @property
    def in_flight(self) -> int:
        return len(self._in_flight)

    @property
    def fetch_count(self) -> int:
        """Number of network fetches started."""
        return self._fetch_count

    def fetch(self, key: str) -> asyncio.Task[Image.Image]:
        """Return the in-flight task for ``key``, starting one if needed.

        Must be called from the event loop that owns the slots.
        """
        task = self._in_flight.get(key)
        if task is not None:
            return task
        task = asyncio.get_running_loop().create_task(self._resolve(key))
        self._in_flight[key] = task
        task.add_done_callback(lambda t, k=key: self._finished(k, t))
        return task

    async def load(self, key: str) -> Image.Image:
        """Await the shared task without letting our cancellation reach it."""
        return await asyncio.shield(self.fetch(key))

    async def _resolve(self, key: str) -> Image.Image:
        image = self._cache.peek_memory(key)
        if image is not None:
            return image
        image = await asyncio.to_thread(self._cache.cached_image, key)
        if image is not None:
            return image

        self._fetch_count += 1
        data = await self._transport.fetch(key)
        image = await asyncio.to_thread(decode_image, data)
        self._cache.cache_image(key, image)
        logger.debug("Fetched and cached %s (%d bytes)", key, len(data))
        return image

    def _finished(self, key: str, task: asyncio.Task[Image.Image]) -> None:
        if self._in_flight.get(key) is task:
            del self._in_flight[key]
        # Retrieve the exception so an unobserved failure is not reported twice
        if not task.cancelled() and task.exception() is not None:
            logger.debug("Load for %s failed: %s", key, task.exception())
