"""Pydantic model for resolved cache settings."""

from __future__ import annotations

from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field

from spritecache.config import defaults


class CacheSettings(BaseModel):
    """Validated view of the merged configuration hierarchy."""

    model_config = {"extra": "ignore"}

    max_memory_bytes: int = Field(default=defaults.DEFAULT_MAX_MEMORY_BYTES, gt=0)
    max_memory_count: int = Field(default=defaults.DEFAULT_MAX_MEMORY_COUNT, gt=0)
    max_disk_bytes: int = Field(default=defaults.DEFAULT_MAX_DISK_BYTES, gt=0)
    max_age_seconds: float = Field(default=defaults.DEFAULT_MAX_AGE_SECONDS, gt=0)
    sweep_interval_seconds: float = Field(default=defaults.DEFAULT_SWEEP_INTERVAL_SECONDS, ge=0)
    cache_dir: Path = defaults.DEFAULT_CACHE_DIR
    cache_disabled: bool = defaults.DEFAULT_CACHE_DISABLED
    connect_timeout: float = Field(default=defaults.DEFAULT_CONNECT_TIMEOUT, gt=0)
    resource_timeout: float = Field(default=defaults.DEFAULT_RESOURCE_TIMEOUT, gt=0)
    max_retries: int = Field(default=defaults.DEFAULT_MAX_RETRIES, ge=1)
    catalog_base_url: str = defaults.DEFAULT_CATALOG_BASE_URL
    sprite_url_template: str = defaults.DEFAULT_SPRITE_URL_TEMPLATE
    page_limit: int = Field(default=defaults.DEFAULT_PAGE_LIMIT, gt=0)
    max_workers: int = Field(default=defaults.DEFAULT_MAX_WORKERS, ge=1)
    log_level: str = defaults.DEFAULT_LOG_LEVEL

    @classmethod
    def from_mapping(cls, data: dict[str, Any]) -> CacheSettings:
        return cls(**data)
