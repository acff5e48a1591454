"""Tests for request-scoped snapshot context."""

from __future__ import annotations

import asyncio

import pytest

from kubesnap.controllers.snapshot.context import (
    cache_bypass,
    cluster_meta_scope,
    current_cluster_meta,
    has_cache_bypass,
    split_cluster_scope,
)
from kubesnap.models.snapshot.payloads import ClusterMeta


class TestCacheBypass:
    def test_default_off(self) -> None:
        assert has_cache_bypass() is False

    def test_scoped_to_block(self) -> None:
        with cache_bypass():
            assert has_cache_bypass() is True
        assert has_cache_bypass() is False

    @pytest.mark.asyncio
    async def test_inherited_by_created_tasks(self) -> None:
        async def probe() -> bool:
            return has_cache_bypass()

        with cache_bypass():
            task = asyncio.create_task(probe())
        assert await task is True


class TestClusterMeta:
    def test_default_is_empty(self) -> None:
        assert current_cluster_meta() == ClusterMeta()

    def test_scope_sets_meta(self) -> None:
        meta = ClusterMeta(cluster_id="c1", cluster_name="prod")
        with cluster_meta_scope(meta):
            assert current_cluster_meta() is meta
        assert current_cluster_meta().cluster_id == ""


class TestSplitClusterScope:
    def test_plain_scope(self) -> None:
        assert split_cluster_scope(" namespace:default ") == ("", "namespace:default")

    def test_prefixed_scope(self) -> None:
        assert split_cluster_scope("c1|namespace:default") == (
            "c1",
            "namespace:default",
        )

    def test_prefix_only(self) -> None:
        assert split_cluster_scope("c1|") == ("c1", "")
