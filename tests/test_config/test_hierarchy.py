"""Tests for config hierarchy and settings validation."""

from pathlib import Path

import pytest
from pydantic import ValidationError

from spritecache.config.hierarchy import (
    _load_yaml_config,
    env_overrides,
    find_project_config,
    load_config_hierarchy,
)
from spritecache.config.schema import CacheSettings


@pytest.fixture
def isolated(tmp_path, monkeypatch):
    """Run from an empty directory with no global config."""
    monkeypatch.chdir(tmp_path)
    return tmp_path / "missing-global.yaml"


class TestLoadConfigHierarchy:
    def test_returns_defaults(self, isolated):
        config = load_config_hierarchy(global_path=isolated)
        assert config["max_memory_count"] == 200
        assert config["cache_disabled"] is False

    def test_runtime_overrides(self, isolated):
        config = load_config_hierarchy(global_path=isolated, max_workers=3, max_memory_count=10)
        assert config["max_workers"] == 3
        assert config["max_memory_count"] == 10

    def test_none_overrides_ignored(self, isolated):
        config = load_config_hierarchy(global_path=isolated, max_workers=None)
        assert config["max_workers"] == 8  # Default preserved

    def test_global_config(self, isolated):
        isolated.write_text("max_age_seconds: 60\n")
        config = load_config_hierarchy(global_path=isolated)
        assert config["max_age_seconds"] == 60

    def test_project_beats_global(self, isolated, tmp_path):
        isolated.write_text("max_workers: 2\n")
        (tmp_path / "spritecache.yaml").write_text("max_workers: 4\n")
        config = load_config_hierarchy(global_path=isolated)
        assert config["max_workers"] == 4

    def test_env_var_override(self, isolated, monkeypatch):
        monkeypatch.setenv("SPRITECACHE_DIR", "/tmp/sprites")
        config = load_config_hierarchy(global_path=isolated)
        assert config["cache_dir"] == Path("/tmp/sprites")

    def test_runtime_beats_env(self, isolated, monkeypatch):
        monkeypatch.setenv("SPRITECACHE_MAX_WORKERS", "16")
        config = load_config_hierarchy(global_path=isolated, max_workers=2)
        assert config["max_workers"] == 2  # Runtime wins

    def test_env_numeric_coercion(self, isolated, monkeypatch):
        monkeypatch.setenv("SPRITECACHE_MAX_MEMORY_BYTES", "1048576")
        config = load_config_hierarchy(global_path=isolated)
        assert config["max_memory_bytes"] == 1048576
        assert isinstance(config["max_memory_bytes"], int)

    def test_env_bool_coercion(self, isolated, monkeypatch):
        monkeypatch.setenv("SPRITECACHE_DISABLED", "yes")
        config = load_config_hierarchy(global_path=isolated)
        assert config["cache_disabled"] is True


class TestLoadYamlConfig:
    def test_loads_valid_yaml(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text("key: value\n")
        assert _load_yaml_config(path) == {"key": "value"}

    def test_returns_none_for_missing(self, tmp_path):
        assert _load_yaml_config(tmp_path / "nonexistent.yaml") is None

    def test_non_mapping_ignored(self, tmp_path):
        path = tmp_path / "list.yaml"
        path.write_text("- a\n- b\n")
        assert _load_yaml_config(path) is None

    def test_invalid_yaml_ignored(self, tmp_path):
        path = tmp_path / "broken.yaml"
        path.write_text("key: [unclosed\n")
        assert _load_yaml_config(path) is None


class TestEnvOverrides:
    def test_float(self):
        assert env_overrides({"SPRITECACHE_MAX_AGE_SECONDS": "3.5"}) == {"max_age_seconds": 3.5}

    def test_bad_number_kept_as_string(self):
        assert env_overrides({"SPRITECACHE_MAX_WORKERS": "many"}) == {"max_workers": "many"}

    def test_flag_values(self):
        assert env_overrides({"SPRITECACHE_DISABLED": "On"})["cache_disabled"] is True
        assert env_overrides({"SPRITECACHE_DISABLED": "0"})["cache_disabled"] is False

    def test_unrelated_variables_ignored(self):
        assert env_overrides({"HOME": "/root", "SPRITECACHE_UNKNOWN": "1"}) == {}


class TestFindProjectConfig:
    def test_searches_parents(self, tmp_path):
        (tmp_path / "spritecache.yaml").write_text("max_workers: 1\n")
        nested = tmp_path / "a" / "b"
        nested.mkdir(parents=True)
        assert find_project_config(nested) == tmp_path / "spritecache.yaml"

    def test_directory_with_config_name_is_skipped(self, tmp_path):
        (tmp_path / "spritecache.yaml").mkdir()
        assert find_project_config(tmp_path) is None


class TestCacheSettings:
    def test_from_defaults(self, isolated):
        settings = CacheSettings.from_mapping(load_config_hierarchy(global_path=isolated))
        assert settings.max_memory_bytes == 100 * 1024 * 1024
        assert isinstance(settings.cache_dir, Path)

    def test_string_dir_becomes_path(self):
        assert CacheSettings(cache_dir="/tmp/x").cache_dir == Path("/tmp/x")

    def test_rejects_non_positive_limits(self):
        with pytest.raises(ValidationError):
            CacheSettings(max_memory_bytes=0)

    def test_ignores_unknown_keys(self):
        settings = CacheSettings.from_mapping({"unknown": 1, "max_workers": 2})
        assert settings.max_workers == 2
