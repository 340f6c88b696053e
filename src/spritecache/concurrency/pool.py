"""Bounded async pool for prefetching images into the cache."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable
from typing import Any

from pydantic import BaseModel, Field

logger = logging.getLogger(__name__)


class PrefetchResult(BaseModel):
    """Outcome of a prefetch batch."""

    loaded: list[str] = Field(default_factory=list)
    failed: list[str] = Field(default_factory=list)

    @property
    def total(self) -> int:
        return len(self.loaded) + len(self.failed)


class ConcurrencyPool:
    """Async dispatcher: runs one coroutine per key, bounded by a semaphore."""

    def __init__(self, max_workers: int = 8) -> None:
        self._max_workers = max_workers

    @property
    def max_workers(self) -> int:
        return self._max_workers

    async def process_batch(
        self,
        load_fn: Callable[[str], Awaitable[Any]],
        keys: list[str],
    ) -> PrefetchResult:
        """Process a batch of keys concurrently.

        Args:
            load_fn: Async callable(key) that raises on failure.
            keys: Keys to load; duplicates are loaded once.

        Returns a PrefetchResult with keys in input order.
        """
        semaphore = asyncio.Semaphore(self._max_workers)
        unique = list(dict.fromkeys(keys))

        async def worker(key: str) -> Any:
            async with semaphore:
                return await load_fn(key)

        results = await asyncio.gather(*(worker(k) for k in unique), return_exceptions=True)

        outcome = PrefetchResult()
        for key, result in zip(unique, results, strict=True):
            if isinstance(result, Exception):
                logger.error("Prefetch of %s failed: %s", key, result)
                outcome.failed.append(key)
            else:
                outcome.loaded.append(key)
        return outcome
