"""Concurrency — bounded async pool for prefetching many keys."""

from spritecache.concurrency.pool import ConcurrencyPool, PrefetchResult

__all__ = ["ConcurrencyPool", "PrefetchResult"]
