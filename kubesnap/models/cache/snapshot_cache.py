"""Snapshot cache implementation."""

from __future__ import annotations

import asyncio
import time
from collections.abc import Callable
from dataclasses import dataclass

from kubesnap.constants.limits import SNAPSHOT_CACHE_MAX_ENTRIES
from kubesnap.constants.timeouts import SNAPSHOT_CACHE_TTL
from kubesnap.constants.values import CACHE_KEY_SEPARATOR
from kubesnap.models.snapshot.snapshot import Snapshot


def cache_key(domain: str, scope: str) -> str:
    """Build the ``domain:scope`` cache key."""
    return f"{domain}{CACHE_KEY_SEPARATOR}{scope}"


@dataclass(frozen=True)
class CacheEntry:
    snapshot: Snapshot
    expires_at: float


class SnapshotCache:
    """TTL-based snapshot cache with lazy expiry and bounded size.

    Performance notes:
    - Reads never await, so a lookup and the removal of an expired entry
      happen atomically with respect to other coroutines. There is no
      background sweep: expired entries are dropped when next read, or
      during set() eviction.
    - Write operations (set, clear) acquire the lock to prevent interleaving
      mutations from concurrent coroutines.
    """

    def __init__(
        self,
        ttl_seconds: float = SNAPSHOT_CACHE_TTL,
        max_entries: int | None = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._entries: dict[str, CacheEntry] = {}
        self._lock = asyncio.Lock()
        self._ttl = ttl_seconds
        self._max_entries = max_entries or SNAPSHOT_CACHE_MAX_ENTRIES
        self._clock = clock

    def __len__(self) -> int:
        return len(self._entries)

    def get(self, key: str) -> Snapshot | None:
        """Return the cached snapshot, or None if absent or expired."""
        entry = self._entries.get(key)
        if entry is None:
            return None
        if self._clock() >= entry.expires_at:
            # Only drop the entry we looked at; a newer one may have replaced it.
            if self._entries.get(key) is entry:
                del self._entries[key]
            return None
        return entry.snapshot

    async def set(self, key: str, snapshot: Snapshot) -> None:
        """Store a snapshot, replacing any previous entry for the key."""
        async with self._lock:
            self._entries[key] = CacheEntry(snapshot, self._clock() + self._ttl)
            if len(self._entries) > self._max_entries:
                self._evict_expired_then_oldest()

    def _evict_expired_then_oldest(self) -> None:
        """Evict expired entries first, then the soonest-expiring ones.

        Must be called under lock.
        """
        now = self._clock()
        expired_keys = [k for k, e in self._entries.items() if now >= e.expires_at]
        for k in expired_keys:
            del self._entries[k]

        while len(self._entries) > self._max_entries:
            oldest_key = min(self._entries, key=lambda k: self._entries[k].expires_at)
            del self._entries[oldest_key]

    async def clear(self, key: str | None = None) -> None:
        """Clear cache for specific key or all (thread-safe)."""
        async with self._lock:
            if key:
                self._entries.pop(key, None)
            else:
                self._entries.clear()


__all__ = ["CacheEntry", "SnapshotCache", "cache_key"]
