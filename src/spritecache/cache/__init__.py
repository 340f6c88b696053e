"""Cache subsystem — two-tier (memory + disk) image cache."""

from spritecache.cache.disk import DiskStore
from spritecache.cache.keys import filename_for_key, hash_key
from spritecache.cache.manager import ImageCacheManager
from spritecache.cache.memory import MemoryStore
from spritecache.cache.stats import CacheStats, DiskEntry, SizeStats, SweepReport

__all__ = [
    "CacheStats",
    "DiskEntry",
    "DiskStore",
    "ImageCacheManager",
    "MemoryStore",
    "SizeStats",
    "SweepReport",
    "filename_for_key",
    "hash_key",
]
