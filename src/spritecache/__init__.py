"""spritecache — two-tier image cache with slot-aware loading."""

from spritecache.cache.manager import ImageCacheManager
from spritecache.core import SpriteCache
from spritecache.loader.slot import ImageLoader, LoadState

__version__ = "0.1.0"

__all__ = ["ImageCacheManager", "ImageLoader", "LoadState", "SpriteCache", "__version__"]
