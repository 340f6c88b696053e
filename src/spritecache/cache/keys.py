"""Cache key to filename derivation — content-addressed, never fails."""

from __future__ import annotations

import hashlib

FILE_SUFFIX = ".png"
TEMP_SUFFIX = ".tmp"


def filename_for_key(key: str) -> str:
    """Derive a filesystem-safe filename from a cache key.

    Identical keys always map to the same name. Any string is accepted,
    including keys longer than the filesystem's name limit.
    """
    return hash_key(key) + FILE_SUFFIX


def hash_key(key: str) -> str:
    """SHA256 hex digest of the UTF-8 encoded key."""
    return hashlib.sha256(key.encode("utf-8", errors="surrogatepass")).hexdigest()


def is_entry_filename(name: str) -> bool:
    """True for names produced by filename_for_key (temp files excluded)."""
    if not name.endswith(FILE_SUFFIX) or name.startswith("."):
        return False
    stem = name[: -len(FILE_SUFFIX)]
    return len(stem) == 64 and all(c in "0123456789abcdef" for c in stem)
