"""Snapshot cache."""

from kubesnap.models.cache.snapshot_cache import CacheEntry, SnapshotCache, cache_key

__all__ = ["CacheEntry", "SnapshotCache", "cache_key"]
