"""Tests for package defaults."""

from spritecache.config.defaults import (
    DEFAULT_CACHE_DIR,
    DEFAULT_CACHE_DISABLED,
    DEFAULT_LOG_LEVEL,
    DEFAULT_MAX_AGE_SECONDS,
    DEFAULT_MAX_DISK_BYTES,
    DEFAULT_MAX_MEMORY_BYTES,
    DEFAULT_MAX_MEMORY_COUNT,
    DEFAULT_SWEEP_INTERVAL_SECONDS,
    get_defaults,
)


class TestDefaults:
    def test_memory_limits(self):
        assert DEFAULT_MAX_MEMORY_BYTES == 100 * 1024 * 1024
        assert DEFAULT_MAX_MEMORY_COUNT == 200

    def test_disk_limit(self):
        assert DEFAULT_MAX_DISK_BYTES == 500 * 1024 * 1024

    def test_max_age_is_seven_days(self):
        assert DEFAULT_MAX_AGE_SECONDS == 7 * 24 * 3600

    def test_default_cache_not_disabled(self):
        assert DEFAULT_CACHE_DISABLED is False

    def test_periodic_sweep_off_by_default(self):
        assert DEFAULT_SWEEP_INTERVAL_SECONDS == 0

    def test_cache_dir_under_user_cache_area(self):
        assert DEFAULT_CACHE_DIR.parts[-2:] == ("spritecache", "images")

    def test_default_log_level(self):
        assert DEFAULT_LOG_LEVEL == "WARNING"

    def test_get_defaults_has_all_keys(self):
        d = get_defaults()
        expected_keys = {
            "max_memory_bytes", "max_memory_count", "max_disk_bytes", "max_age_seconds",
            "sweep_interval_seconds",
            "cache_dir", "cache_disabled", "connect_timeout", "resource_timeout",
            "max_retries", "catalog_base_url", "sprite_url_template", "page_limit",
            "max_workers", "log_level",
        }
        assert expected_keys == set(d.keys())
