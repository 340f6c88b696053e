"""Configuration hierarchy for spritecache.

Sources, lowest priority first: package defaults, the user file
``~/.spritecache/config.yaml``, the nearest ``spritecache.yaml`` at or
above the working directory, ``SPRITECACHE_*`` environment variables and
finally keyword overrides passed by the caller.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Callable, Iterator, Mapping
from pathlib import Path
from typing import Any

import yaml

from spritecache.config.defaults import get_defaults

logger = logging.getLogger(__name__)

USER_CONFIG_PATH = Path.home() / ".spritecache" / "config.yaml"
PROJECT_CONFIG_NAME = "spritecache.yaml"


def _parse_flag(raw: str) -> bool:
    return raw.strip().lower() in ("1", "true", "yes", "on")


# env var -> (settings key, parser)
_ENV_VARS: dict[str, tuple[str, Callable[[str], Any]]] = {
    "SPRITECACHE_DIR": ("cache_dir", Path),
    "SPRITECACHE_DISABLED": ("cache_disabled", _parse_flag),
    "SPRITECACHE_MAX_MEMORY_BYTES": ("max_memory_bytes", int),
    "SPRITECACHE_MAX_MEMORY_COUNT": ("max_memory_count", int),
    "SPRITECACHE_MAX_DISK_BYTES": ("max_disk_bytes", int),
    "SPRITECACHE_MAX_AGE_SECONDS": ("max_age_seconds", float),
    "SPRITECACHE_SWEEP_INTERVAL": ("sweep_interval_seconds", float),
    "SPRITECACHE_CONNECT_TIMEOUT": ("connect_timeout", float),
    "SPRITECACHE_RESOURCE_TIMEOUT": ("resource_timeout", float),
    "SPRITECACHE_MAX_RETRIES": ("max_retries", int),
    "SPRITECACHE_CATALOG_URL": ("catalog_base_url", str),
    "SPRITECACHE_MAX_WORKERS": ("max_workers", int),
    "SPRITECACHE_LOG_LEVEL": ("log_level", str),
}


def load_config_hierarchy(
    global_path: Path | None = None,
    **runtime_overrides: Any,
) -> dict[str, Any]:
    """Merge every configuration source into one flat dict.

    ``global_path`` replaces the user config location (mainly for tests).
    Overrides whose value is None are treated as unset.
    """
    merged = get_defaults()
    for source in _file_sources(global_path or USER_CONFIG_PATH):
        merged.update(source)
    merged.update(env_overrides(os.environ))
    merged.update({k: v for k, v in runtime_overrides.items() if v is not None})
    return merged


def _file_sources(user_path: Path) -> Iterator[dict[str, Any]]:
    for path in (user_path, find_project_config()):
        if path is None:
            continue
        data = _load_yaml_config(path)
        if data:
            logger.debug("Loaded config from %s", path)
            yield data


def _load_yaml_config(path: Path) -> dict[str, Any] | None:
    """Read a YAML mapping; None if the file is missing, broken or not a mapping."""
    if not path.is_file():
        return None
    try:
        data = yaml.safe_load(path.read_text())
    except (OSError, yaml.YAMLError) as e:
        logger.warning("Failed to load config %s: %s", path, e)
        return None
    if not isinstance(data, dict):
        logger.warning("Config file %s is not a mapping, ignoring", path)
        return None
    return data


def find_project_config(start: Path | None = None) -> Path | None:
    """Nearest spritecache.yaml in ``start`` (default: cwd) or its parents."""
    here = start or Path.cwd()
    for directory in (here, *here.parents):
        candidate = directory / PROJECT_CONFIG_NAME
        if candidate.is_file():
            return candidate
    return None


def env_overrides(environ: Mapping[str, str]) -> dict[str, Any]:
    """Settings taken from SPRITECACHE_* variables in ``environ``.

    A value that fails to parse is passed through as a string so that
    settings validation reports it.
    """
    found: dict[str, Any] = {}
    for name, (key, parse) in _ENV_VARS.items():
        raw = environ.get(name)
        if raw is None:
            continue
        try:
            found[key] = parse(raw)
        except ValueError:
            logger.warning("Cannot parse %s=%r", name, raw)
            found[key] = raw
    return found
