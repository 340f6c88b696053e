"""Configuration — defaults, YAML/env hierarchy and validated settings."""

from spritecache.config.hierarchy import load_config_hierarchy
from spritecache.config.schema import CacheSettings

__all__ = ["CacheSettings", "load_config_hierarchy"]
