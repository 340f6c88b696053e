"""L2 disk cache — one file per key inside a dedicated directory."""

from __future__ import annotations

import contextlib
import logging
import os
import tempfile
import time
from collections.abc import Callable
from pathlib import Path

from spritecache.cache.keys import TEMP_SUFFIX, filename_for_key, is_entry_filename
from spritecache.cache.stats import DiskEntry
from spritecache.config.defaults import DEFAULT_CACHE_DIR, DEFAULT_MAX_AGE_SECONDS
from spritecache.errors.exceptions import CacheIOError

logger = logging.getLogger(__name__)


class DiskStore:
    """File-per-key byte store with age expiry and atomic writes.

    A file's age is taken from its modification time, which is set when the
    completed file is moved into place.
    """

    def __init__(
        self,
        cache_dir: Path | None = None,
        max_age_seconds: float = DEFAULT_MAX_AGE_SECONDS,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self._dir = Path(cache_dir) if cache_dir else DEFAULT_CACHE_DIR
        self._max_age = max_age_seconds
        self._clock = clock
        self._ensure_dir()

    @property
    def directory(self) -> Path:
        return self._dir

    @property
    def max_age_seconds(self) -> float:
        return self._max_age

    def path_for(self, key: str) -> Path:
        return self._dir / filename_for_key(key)

    def get(self, key: str) -> bytes | None:
        """Return the stored bytes, or None if absent, expired or unreadable."""
        path = self.path_for(key)
        try:
            mtime = path.stat().st_mtime
        except FileNotFoundError:
            return None
        except OSError as e:
            logger.warning("Cannot stat cache file %s: %s", path, e)
            return None

        if self._clock() - mtime > self._max_age:
            logger.debug("Cache file for %s expired, deleting", key)
            self._unlink(path)
            return None

        try:
            return path.read_bytes()
        except FileNotFoundError:
            # Deleted by a concurrent clear or sweep
            return None
        except OSError as e:
            logger.warning("Failed to read cache file %s: %s", path, e)
            return None

    def put(self, key: str, data: bytes) -> None:
        """Atomically write bytes for a key.

        Raises CacheIOError if the file cannot be written; the previous
        entry for the key, if any, is left untouched.
        """
        path = self.path_for(key)
        tmp_name: str | None = None
        try:
            self._ensure_dir()
            fd, tmp_name = tempfile.mkstemp(dir=self._dir, prefix=".", suffix=TEMP_SUFFIX)
            with os.fdopen(fd, "wb") as f:
                f.write(data)
            os.replace(tmp_name, path)
        except OSError as e:
            if tmp_name is not None:
                with contextlib.suppress(OSError):
                    os.unlink(tmp_name)
            raise CacheIOError(
                f"Failed to write cache file: {e}", path=str(path), original=e
            ) from e

    def contains(self, key: str) -> bool:
        return self.path_for(key).is_file()

    def delete(self, key: str) -> None:
        self._unlink(self.path_for(key))

    def clear(self) -> int:
        """Remove every file in the cache directory. Returns count removed."""
        removed = 0
        for path in self._iter_files(include_temp=True):
            if self._unlink(path):
                removed += 1
        logger.info("Cleared %d files from disk cache", removed)
        return removed

    def list_with_age(self) -> list[DiskEntry]:
        """List entries with their age in seconds and size in bytes."""
        now = self._clock()
        entries: list[DiskEntry] = []
        for path in self._iter_files():
            try:
                st = path.stat()
            except OSError:
                continue
            entries.append(
                DiskEntry(path=path, age_seconds=max(0.0, now - st.st_mtime), size_bytes=st.st_size)
            )
        return entries

    def total_bytes(self) -> int:
        """Sum of entry sizes; files that cannot be stat'ed count as 0."""
        total = 0
        for path in self._iter_files():
            try:
                total += path.stat().st_size
            except OSError:
                continue
        return total

    def remove_path(self, path: Path) -> bool:
        """Delete a listed entry. Used by the sweep."""
        return self._unlink(path)

    def __len__(self) -> int:
        return sum(1 for _ in self._iter_files())

    def _iter_files(self, include_temp: bool = False):
        try:
            children = list(self._dir.iterdir())
        except FileNotFoundError:
            return
        except OSError as e:
            logger.error("Failed to list disk cache %s: %s", self._dir, e)
            return
        for child in children:
            if is_entry_filename(child.name) or (include_temp and child.name.endswith(TEMP_SUFFIX)):
                yield child

    def _unlink(self, path: Path) -> bool:
        try:
            path.unlink()
            return True
        except FileNotFoundError:
            return False
        except OSError as e:
            logger.error("Failed to delete cache file %s: %s", path, e)
            return False

    def _ensure_dir(self) -> None:
        try:
            self._dir.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            logger.error("Cannot create cache directory %s: %s", self._dir, e)
