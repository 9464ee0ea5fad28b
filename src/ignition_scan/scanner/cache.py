"""Time-expiring cache of project scan results."""

from __future__ import annotations

import time
from collections.abc import Callable

from ignition_scan.config.constants import DEFAULT_CACHE_TTL
from ignition_scan.models.project import CacheEntry, CacheStats, ProjectScanResult


class ScanCache:
    """Scan results keyed by project path.

    Entries expire a fixed TTL after they were written; reads do not extend
    them. Hit and miss counters are cumulative and survive ``clear()``.
    """

    def __init__(
        self,
        ttl: float = DEFAULT_CACHE_TTL,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self.ttl = ttl
        self._clock = clock
        self._entries: dict[str, CacheEntry] = {}
        self.hits = 0
        self.misses = 0

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, project_path: object) -> bool:
        return project_path in self._entries

    def get(self, project_path: str) -> ProjectScanResult | None:
        entry = self._entries.get(project_path)
        if entry is None:
            self.misses += 1
            return None
        if self._clock() > entry.expires_at:
            del self._entries[project_path]
            self.misses += 1
            return None
        self.hits += 1
        return entry.result

    def put(self, project_path: str, result: ProjectScanResult) -> None:
        now = self._clock()
        self._entries[project_path] = CacheEntry(
            result=result, last_modified=now, expires_at=now + self.ttl,
        )

    def invalidate(self, project_path: str) -> bool:
        return self._entries.pop(project_path, None) is not None

    def clear(self) -> None:
        self._entries.clear()

    def replace(self, project_path: str, result: ProjectScanResult) -> bool:
        """Swap the result of an existing entry, keeping its expiry."""
        entry = self._entries.get(project_path)
        if entry is None:
            return False
        self._entries[project_path] = entry.model_copy(update={"result": result})
        return True

    def results(self) -> list[ProjectScanResult]:
        """Live cached results. Does not touch the hit/miss counters."""
        now = self._clock()
        return [
            entry.result for entry in self._entries.values()
            if now <= entry.expires_at
        ]

    def stats(self) -> CacheStats:
        total_size = 0
        oldest: tuple[float, str] | None = None
        newest: tuple[float, str] | None = None
        for path, entry in self._entries.items():
            total_size += len(entry.result.model_dump_json().encode())
            if oldest is None or entry.last_modified < oldest[0]:
                oldest = (entry.last_modified, path)
            if newest is None or entry.last_modified > newest[0]:
                newest = (entry.last_modified, path)

        total = self.hits + self.misses
        hit_rate = (self.hits / total) * 100 if total else 0.0
        return CacheStats(
            entries=len(self._entries),
            total_size=total_size,
            hit_rate=round(hit_rate, 2),
            cache_hits=self.hits,
            cache_misses=self.misses,
            oldest_entry=oldest[1] if oldest else None,
            newest_entry=newest[1] if newest else None,
        )
