"""L1 in-memory LRU cache bounded by total cost and entry count."""

from __future__ import annotations

import logging
import threading
from collections import OrderedDict

from PIL import Image

from spritecache.config.defaults import DEFAULT_MAX_MEMORY_BYTES, DEFAULT_MAX_MEMORY_COUNT

logger = logging.getLogger(__name__)


class MemoryStore:
    """Thread-safe LRU of decoded images with cost- and count-based eviction."""

    def __init__(
        self,
        max_cost: int = DEFAULT_MAX_MEMORY_BYTES,
        max_count: int = DEFAULT_MAX_MEMORY_COUNT,
    ) -> None:
        self._store: OrderedDict[str, tuple[Image.Image, int]] = OrderedDict()
        self._max_cost = max_cost
        self._max_count = max_count
        self._total_cost = 0
        self._lock = threading.Lock()

    def get(self, key: str) -> Image.Image | None:
        with self._lock:
            item = self._store.get(key)
            if item is None:
                return None
            # Move to end (most recently used)
            self._store.move_to_end(key)
            return item[0]

    def put(self, key: str, image: Image.Image, cost: int) -> None:
        cost = max(0, int(cost))
        with self._lock:
            self._remove(key)
            if cost > self._max_cost:
                logger.debug("Image %s (cost %d) exceeds memory limit, not kept", key, cost)
                return
            self._store[key] = (image, cost)
            self._total_cost += cost
            self._evict()

    def remove(self, key: str) -> None:
        with self._lock:
            self._remove(key)

    def remove_all(self) -> None:
        with self._lock:
            self._store.clear()
            self._total_cost = 0

    @property
    def max_cost(self) -> int:
        return self._max_cost

    @property
    def max_count(self) -> int:
        return self._max_count

    @property
    def total_cost(self) -> int:
        return self._total_cost

    def __len__(self) -> int:
        return len(self._store)

    def __contains__(self, key: object) -> bool:
        with self._lock:
            return key in self._store

    def _remove(self, key: str) -> None:
        item = self._store.pop(key, None)
        if item is not None:
            self._total_cost -= item[1]

    def _evict(self) -> None:
        # Oldest first; the entry just inserted sits at the end
        while self._store and (
            self._total_cost > self._max_cost or len(self._store) > self._max_count
        ):
            key, (_, cost) = self._store.popitem(last=False)
            self._total_cost -= cost
            logger.debug("Evicted %s from memory (cost %d)", key, cost)
