"""Tests for the snapshot TTL cache."""

from __future__ import annotations

import pytest

from kubesnap.models.cache.snapshot_cache import SnapshotCache, cache_key
from kubesnap.models.snapshot.snapshot import Snapshot


class FakeClock:
    def __init__(self) -> None:
        self.now = 100.0

    def __call__(self) -> float:
        return self.now


def _snap(domain: str = "pods", version: int = 1) -> Snapshot:
    return Snapshot(domain=domain, version=version)


class TestCacheKey:
    def test_joins_domain_and_scope(self) -> None:
        assert cache_key("pods", "namespace:default") == "pods:namespace:default"

    def test_empty_scope(self) -> None:
        assert cache_key("nodes", "") == "nodes:"


class TestSnapshotCache:
    """Tests for SnapshotCache."""

    @pytest.mark.asyncio
    async def test_get_missing_returns_none(self) -> None:
        cache = SnapshotCache()
        assert cache.get("pods:") is None

    @pytest.mark.asyncio
    async def test_set_then_get(self) -> None:
        cache = SnapshotCache()
        snap = _snap()
        await cache.set("pods:", snap)
        assert cache.get("pods:") is snap

    @pytest.mark.asyncio
    async def test_entry_expires_after_ttl(self) -> None:
        clock = FakeClock()
        cache = SnapshotCache(ttl_seconds=5.0, clock=clock)
        await cache.set("pods:", _snap())

        clock.now += 4.9
        assert cache.get("pods:") is not None

        clock.now += 0.1
        assert cache.get("pods:") is None
        assert len(cache) == 0

    @pytest.mark.asyncio
    async def test_set_replaces_entry(self) -> None:
        cache = SnapshotCache()
        await cache.set("pods:", _snap(version=1))
        await cache.set("pods:", _snap(version=2))
        cached = cache.get("pods:")
        assert cached is not None
        assert cached.version == 2
        assert len(cache) == 1

    @pytest.mark.asyncio
    async def test_evicts_expired_before_live(self) -> None:
        clock = FakeClock()
        cache = SnapshotCache(ttl_seconds=5.0, max_entries=2, clock=clock)
        await cache.set("a:", _snap("a"))
        clock.now += 10
        await cache.set("b:", _snap("b"))
        await cache.set("c:", _snap("c"))

        assert cache.get("a:") is None
        assert cache.get("b:") is not None
        assert cache.get("c:") is not None

    @pytest.mark.asyncio
    async def test_evicts_soonest_expiring_when_full(self) -> None:
        clock = FakeClock()
        cache = SnapshotCache(ttl_seconds=5.0, max_entries=2, clock=clock)
        await cache.set("a:", _snap("a"))
        clock.now += 1
        await cache.set("b:", _snap("b"))
        clock.now += 1
        await cache.set("c:", _snap("c"))

        assert len(cache) == 2
        assert cache.get("a:") is None
        assert cache.get("c:") is not None

    @pytest.mark.asyncio
    async def test_clear_single_key(self) -> None:
        cache = SnapshotCache()
        await cache.set("a:", _snap("a"))
        await cache.set("b:", _snap("b"))
        await cache.clear("a:")
        assert cache.get("a:") is None
        assert cache.get("b:") is not None

    @pytest.mark.asyncio
    async def test_clear_all(self) -> None:
        cache = SnapshotCache()
        await cache.set("a:", _snap("a"))
        await cache.set("b:", _snap("b"))
        await cache.clear()
        assert len(cache) == 0
