"""Package-level default configuration values."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any

# Memory tier
DEFAULT_MAX_MEMORY_BYTES = 100 * 1024 * 1024  # 100 MiB
DEFAULT_MAX_MEMORY_COUNT = 200

# Disk tier
DEFAULT_MAX_DISK_BYTES = 500 * 1024 * 1024  # 500 MiB, advisory
DEFAULT_MAX_AGE_SECONDS = 7 * 24 * 60 * 60  # 7 days
DEFAULT_SWEEP_INTERVAL_SECONDS = 0.0  # 0 disables the periodic sweep
DEFAULT_CACHE_DIR = (
    Path(os.environ.get("XDG_CACHE_HOME") or Path.home() / ".cache") / "spritecache" / "images"
)
DEFAULT_CACHE_DISABLED = False

# Image transport
DEFAULT_CONNECT_TIMEOUT = 30.0
DEFAULT_RESOURCE_TIMEOUT = 60.0
DEFAULT_MAX_RETRIES = 3

# Catalog collaborator
DEFAULT_CATALOG_BASE_URL = "https://pokeapi.co/api/v2"
DEFAULT_SPRITE_URL_TEMPLATE = (
    "https://raw.githubusercontent.com/PokeAPI/sprites/master/sprites/pokemon/{id}.png"
)
DEFAULT_PAGE_LIMIT = 20

# Prefetch concurrency
DEFAULT_MAX_WORKERS = 8

# Log level
DEFAULT_LOG_LEVEL = "WARNING"


def get_defaults() -> dict[str, Any]:
    """Return all defaults as a flat dictionary for merging."""
    return {
        "max_memory_bytes": DEFAULT_MAX_MEMORY_BYTES,
        "max_memory_count": DEFAULT_MAX_MEMORY_COUNT,
        "max_disk_bytes": DEFAULT_MAX_DISK_BYTES,
        "max_age_seconds": DEFAULT_MAX_AGE_SECONDS,
        "sweep_interval_seconds": DEFAULT_SWEEP_INTERVAL_SECONDS,
        "cache_dir": DEFAULT_CACHE_DIR,
        "cache_disabled": DEFAULT_CACHE_DISABLED,
        "connect_timeout": DEFAULT_CONNECT_TIMEOUT,
        "resource_timeout": DEFAULT_RESOURCE_TIMEOUT,
        "max_retries": DEFAULT_MAX_RETRIES,
        "catalog_base_url": DEFAULT_CATALOG_BASE_URL,
        "sprite_url_template": DEFAULT_SPRITE_URL_TEMPLATE,
        "page_limit": DEFAULT_PAGE_LIMIT,
        "max_workers": DEFAULT_MAX_WORKERS,
        "log_level": DEFAULT_LOG_LEVEL,
    }
