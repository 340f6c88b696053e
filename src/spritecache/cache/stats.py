"""Cache statistics and disk listing models."""

from __future__ import annotations

from pathlib import Path

from pydantic import BaseModel


class DiskEntry(BaseModel):
    """A file in the disk tier, as seen by the sweep."""

    path: Path
    age_seconds: float
    size_bytes: int = 0


class SizeStats(BaseModel):
    """Diagnostic sizes: configured memory limit and bytes used on disk."""

    memory_limit_bytes: int
    disk_used_bytes: int


class SweepReport(BaseModel):
    """Outcome of one disk sweep."""

    expired_removed: int = 0
    oversize_removed: int = 0
    bytes_freed: int = 0
    remaining_bytes: int = 0

    @property
    def removed(self) -> int:
        return self.expired_removed + self.oversize_removed


class CacheStats(BaseModel):
    """Aggregate cache statistics."""

    memory_entries: int = 0
    memory_cost_bytes: int = 0
    memory_limit_bytes: int = 0
    disk_entries: int = 0
    disk_used_bytes: int = 0
    memory_hits: int = 0
    disk_hits: int = 0
    misses: int = 0
    writes: int = 0
    write_failures: int = 0

    @property
    def hits(self) -> int:
        return self.memory_hits + self.disk_hits

    @property
    def hit_rate(self) -> float:
        total = self.hits + self.misses
        return self.hits / total if total > 0 else 0.0
