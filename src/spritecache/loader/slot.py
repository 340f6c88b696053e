"""Per-slot image loader with stale-result suppression."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable
from enum import StrEnum

from PIL import Image

from spritecache.errors.exceptions import SpriteCacheError
from spritecache.loader.fetcher import ImageFetcher

logger = logging.getLogger(__name__)


class LoadState(StrEnum):
    IDLE = "idle"
    RESOLVING = "resolving"
    SETTLED = "settled"
    FAILED = "failed"


class ImageLoader:
    """Loads one image at a time into a reusable slot.

    A slot is a placeholder (e.g. a list cell) that may be re-pointed at a
    different key over its lifetime. Each ``request_load`` bumps the slot's
    generation; a pending load only settles if its generation is still the
    current one when it resolves, so a slow superseded fetch can never
    overwrite a newer image. Superseded fetches are not cancelled.

    All methods must be called from the event loop that owns the slot.
    """

    def __init__(
        self,
        fetcher: ImageFetcher,
        on_change: Callable[[ImageLoader], None] | None = None,
    ) -> None:
        self._fetcher = fetcher
        self._on_change = on_change
        self._state = LoadState.IDLE
        self._key: str | None = None
        self._image: Image.Image | None = None
        self._generation = 0
        self._task: asyncio.Task[None] | None = None

    @property
    def state(self) -> LoadState:
        return self._state

    @property
    def key(self) -> str | None:
        return self._key

    @property
    def image(self) -> Image.Image | None:
        return self._image

    @property
    def is_loading(self) -> bool:
        return self._state == LoadState.RESOLVING

    @property
    def generation(self) -> int:
        return self._generation

    def request_load(self, key: str) -> asyncio.Task[None] | None:
        """Point the slot at ``key``.

        No-op when ``key`` is already resolving or settled. Returns the
        pending load task, or None when nothing needs to be awaited.
        """
        if key == self._key and self._state in (LoadState.RESOLVING, LoadState.SETTLED):
            return None
        return self._start(key)

    def force_reload(self, key: str | None = None) -> asyncio.Task[None] | None:
        """Load ``key`` (default: the current key) even if already current."""
        key = key if key is not None else self._key
        if key is None:
            return None
        return self._start(key)

    def reset(self) -> None:
        """Return to IDLE and drop any pending result."""
        self._generation += 1
        self._task = None
        self._key = None
        self._transition(LoadState.IDLE, None)

    async def wait(self) -> None:
        """Wait for the slot's current load, if any."""
        if self._task is not None:
            await asyncio.shield(self._task)

    def _start(self, key: str) -> asyncio.Task[None] | None:
        self._generation += 1
        generation = self._generation
        self._key = key
        self._task = None
        self._transition(LoadState.RESOLVING, None)

        # Check cache first
        cached = self._fetcher.cache.peek_memory(key)
        if cached is not None:
            self._transition(LoadState.SETTLED, cached)
            return None

        shared = self._fetcher.fetch(key)
        task = asyncio.get_running_loop().create_task(self._deliver(key, generation, shared))
        self._task = task
        return task

    async def _deliver(
        self, key: str, generation: int, shared: asyncio.Task[Image.Image]
    ) -> None:
        try:
            image = await asyncio.shield(shared)
        except SpriteCacheError as e:
            logger.warning("Failed to load image %s: %s", key, e)
            if generation == self._generation:
                self._transition(LoadState.FAILED, None)
            return
        except Exception:
            logger.exception("Unexpected error loading image %s", key)
            if generation == self._generation:
                self._transition(LoadState.FAILED, None)
            return

        # Only update if this is still the current request
        if generation != self._generation:
            logger.debug("Discarding stale result for %s", key)
            return
        self._transition(LoadState.SETTLED, image)

    def _transition(self, state: LoadState, image: Image.Image | None) -> None:
        self._state = state
        self._image = image
        if self._on_change is not None:
            try:
                self._on_change(self)
            except Exception:
                logger.exception("on_change callback failed")
