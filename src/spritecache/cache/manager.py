"""Cache manager — orchestrates L1 (memory) and L2 (disk) tiers."""

from __future__ import annotations

import asyncio
import logging
import threading
from concurrent.futures import Future, ThreadPoolExecutor
from pathlib import Path

from PIL import Image

from spritecache.cache.disk import DiskStore
from spritecache.cache.memory import MemoryStore
from spritecache.cache.stats import CacheStats, SizeStats, SweepReport
from spritecache.config import defaults
from spritecache.errors.exceptions import CacheIOError, DecodeError, EncodeError
from spritecache.utils.image import decode_image, encode_png, image_cost

logger = logging.getLogger(__name__)


class ImageCacheManager:
    """Two-tier image cache: L1 in-memory LRU → L2 file-per-key on disk.

    Memory operations are synchronous. Disk writes, clears and sweeps run
    in FIFO order on a single background worker, so work queued later
    always observes the effects of work queued earlier. Nothing raises
    past this class; failures are logged and read as a miss.
    """

    def __init__(
        self,
        cache_dir: Path | None = None,
        max_memory_bytes: int = defaults.DEFAULT_MAX_MEMORY_BYTES,
        max_memory_count: int = defaults.DEFAULT_MAX_MEMORY_COUNT,
        max_disk_bytes: int = defaults.DEFAULT_MAX_DISK_BYTES,
        max_age_seconds: float = defaults.DEFAULT_MAX_AGE_SECONDS,
        enabled: bool = True,
        sweep_on_start: bool = True,
        memory: MemoryStore | None = None,
        disk: DiskStore | None = None,
    ) -> None:
        self._enabled = enabled
        self._max_disk_bytes = max_disk_bytes
        self._l1 = memory or MemoryStore(max_cost=max_memory_bytes, max_count=max_memory_count)
        self._l2 = disk or DiskStore(cache_dir=cache_dir, max_age_seconds=max_age_seconds)
        self._io = ThreadPoolExecutor(max_workers=1, thread_name_prefix="spritecache-io")
        self._stats_lock = threading.Lock()
        self._stats = CacheStats()
        self._closed = False

        if enabled and sweep_on_start:
            self.schedule_sweep()

    @property
    def enabled(self) -> bool:
        return self._enabled

    @property
    def directory(self) -> Path:
        return self._l2.directory

    # ── Lookup ──

    def peek_memory(self, key: str) -> Image.Image | None:
        """Memory-only lookup, safe to call from the owner event loop."""
        if not self._enabled:
            return None
        image = self._l1.get(key)
        if image is not None:
            self._count("memory_hits")
        return image

    def cached_image(self, key: str) -> Image.Image | None:
        """Look up a key. L1 first, then L2 (with promotion).

        The disk read and decode may block; callers on an event loop should
        run this through ``asyncio.to_thread``.
        """
        if not self._enabled:
            self._count("misses")
            return None

        # L1
        image = self._l1.get(key)
        if image is not None:
            self._count("memory_hits")
            return image

        # L2
        data = self._l2.get(key)
        if data is not None:
            try:
                image = decode_image(data)
            except DecodeError as e:
                logger.warning("Corrupt cache file for %s, deleting: %s", key, e)
                self._l2.delete(key)
            else:
                # Promote to L1
                self._l1.put(key, image, image_cost(image))
                self._count("disk_hits")
                return image

        self._count("misses")
        return None

    # ── Store ──

    def cache_image(self, key: str, image: Image.Image) -> Future[bool] | None:
        """Store in L1 now and queue the L2 write.

        Returns the future of the background write, or None when disabled.
        """
        if not self._enabled:
            return None
        self._l1.put(key, image, image_cost(image))
        return self._submit(self._write_to_disk, key, image)

    def _write_to_disk(self, key: str, image: Image.Image) -> bool:
        try:
            data = encode_png(image)
        except EncodeError as e:
            logger.error("Failed to encode image for %s: %s", key, e)
            self._count("write_failures")
            return False
        try:
            self._l2.put(key, data)
        except CacheIOError as e:
            logger.error("Failed to save image for %s: %s", key, e)
            self._count("write_failures")
            return False
        self._count("writes")
        return True

    # ── Clear ──

    def clear_memory(self) -> None:
        self._l1.remove_all()

    async def clear_disk(self) -> None:
        """Remove every disk entry once previously queued writes have landed."""
        future = self._submit(self._l2.clear)
        if future is not None:
            await asyncio.wrap_future(future)

    async def clear_all(self) -> None:
        """Clear memory synchronously, then the disk tier."""
        self.clear_memory()
        await self.clear_disk()
        with self._stats_lock:
            self._stats = CacheStats()

    def clear_all_sync(self) -> None:
        """Blocking variant of clear_all for callers without an event loop."""
        self.clear_memory()
        future = self._submit(self._l2.clear)
        if future is not None:
            future.result()
        with self._stats_lock:
            self._stats = CacheStats()

    # ── Sweep ──

    def sweep_expired(self) -> SweepReport:
        """Delete entries older than max age, then oldest entries over the disk limit."""
        report = SweepReport()
        max_age = self._l2.max_age_seconds
        survivors = []
        for entry in self._l2.list_with_age():
            if entry.age_seconds > max_age:
                if self._l2.remove_path(entry.path):
                    report.expired_removed += 1
                    report.bytes_freed += entry.size_bytes
            else:
                survivors.append(entry)

        total = sum(e.size_bytes for e in survivors)
        if total > self._max_disk_bytes:
            # Oldest first
            for entry in sorted(survivors, key=lambda e: e.age_seconds, reverse=True):
                if total <= self._max_disk_bytes:
                    break
                if self._l2.remove_path(entry.path):
                    report.oversize_removed += 1
                    report.bytes_freed += entry.size_bytes
                    total -= entry.size_bytes

        report.remaining_bytes = total
        logger.info(
            "Cleaned %d expired and %d oversize cache files",
            report.expired_removed,
            report.oversize_removed,
        )
        return report

    def schedule_sweep(self) -> Future[SweepReport] | None:
        """Queue sweep_expired on the background worker."""
        return self._submit(self.sweep_expired)

    async def run_periodic_sweep(self, interval_seconds: float) -> None:
        """Sweep every ``interval_seconds`` until cancelled."""
        while True:
            await asyncio.sleep(interval_seconds)
            future = self.schedule_sweep()
            if future is None:
                return
            await asyncio.wrap_future(future)

    # ── Stats ──

    def size_stats(self) -> SizeStats:
        """Return the configured memory limit and bytes currently on disk."""
        return SizeStats(
            memory_limit_bytes=self._l1.max_cost,
            disk_used_bytes=self._l2.total_bytes(),
        )

    def stats(self) -> CacheStats:
        """Return aggregate cache statistics."""
        with self._stats_lock:
            counters = self._stats.model_copy()
        return counters.model_copy(
            update={
                "memory_entries": len(self._l1),
                "memory_cost_bytes": self._l1.total_cost,
                "memory_limit_bytes": self._l1.max_cost,
                "disk_entries": len(self._l2),
                "disk_used_bytes": self._l2.total_bytes(),
            }
        )

    # ── Lifecycle ──

    def flush(self, timeout: float | None = None) -> None:
        """Block until all queued disk work has completed."""
        future = self._submit(lambda: None)
        if future is not None:
            future.result(timeout=timeout)

    def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        self._io.shutdown(wait=True)

    def _submit(self, fn, *args) -> Future | None:
        if self._closed:
            logger.warning("Cache manager is closed, dropping %s", getattr(fn, "__name__", fn))
            return None
        future = self._io.submit(fn, *args)
        future.add_done_callback(_log_failure)
        return future

    def _count(self, field: str) -> None:
        with self._stats_lock:
            setattr(self._stats, field, getattr(self._stats, field) + 1)


def _log_failure(future: Future) -> None:
    if future.cancelled():
        return
    exc = future.exception()
    if exc is not None:
        logger.error("Background disk operation failed: %s", exc, exc_info=exc)
