"""Tests for the catalog stream publisher and HTTP endpoint."""

from __future__ import annotations

import asyncio
import json

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from kubesnap.constants.enums import HealthState
from kubesnap.controllers.catalog.router import create_catalog_stream_router
from kubesnap.controllers.catalog.streaming import CatalogStreamPublisher, encode_event
from kubesnap.models.catalog.catalog import (
    CatalogSummary,
    HealthStatus,
    QueryOptions,
    QueryResult,
    ReadinessUpdate,
    StreamEvent,
)
from kubesnap.models.errors import ScopeValidationError, StreamTransportError
from kubesnap.models.snapshot.payloads import ClusterMeta
from kubesnap.models.state.settings import SnapshotSettings


class StreamingProvider:
    """Catalog double with a controllable readiness subscription."""

    def __init__(
        self,
        count: int,
        ready: bool = False,
        close_immediately: bool = False,
        consecutive_failures: int = 0,
    ):
        self.items = [
            CatalogSummary(kind="Pod", namespace="default", name=f"pod-{i}")
            for i in range(count)
        ]
        self.ready = ready
        self.close_immediately = close_immediately
        self.consecutive_failures = consecutive_failures
        self.queue: asyncio.Queue | None = None
        self.cancelled = 0

    def query(self, opts: QueryOptions) -> QueryResult:
        offset = int(opts.continue_token) if opts.continue_token else 0
        limit = opts.limit if opts.limit > 0 else len(self.items)
        next_offset = offset + limit
        return QueryResult(
            items=self.items[offset:next_offset],
            continue_token=str(next_offset) if next_offset < len(self.items) else "",
            total_items=len(self.items),
        )

    def health(self) -> HealthStatus:
        return HealthStatus(
            status=HealthState.OK, consecutive_failures=self.consecutive_failures
        )

    def caches_ready(self) -> bool:
        return self.ready

    def namespaces(self) -> list[str]:
        return ["default"]

    def first_batch_latency(self) -> float:
        return 0.0

    def subscribe_streaming(self):
        self.queue = asyncio.Queue()
        if self.close_immediately:
            self.queue.put_nowait(None)
        return self.queue, self._cancel

    def _cancel(self) -> None:
        self.cancelled += 1


# =============================================================================
# Publisher
# =============================================================================


class TestCatalogStreamPublisher:
    """Tests for CatalogStreamPublisher.events."""

    def test_bad_scope_fails_before_subscribing(self) -> None:
        provider = StreamingProvider(1)
        with pytest.raises(ScopeValidationError):
            CatalogStreamPublisher(provider, "kind=Pod;x")
        assert provider.queue is None

    @pytest.mark.asyncio
    async def test_reset_event_while_warming(self) -> None:
        provider = StreamingProvider(3)
        events = CatalogStreamPublisher(provider, "limit=2").events()

        first = await events.__anext__()

        assert first.reset is True
        assert first.sequence == 1
        assert len(first.snapshot.items) == 2
        assert first.stats.total_batches == 2
        assert first.snapshot.is_final is False
        assert first.ready is False
        assert first.cache_ready is False
        assert first.snapshot_mode == "partial"
        await events.aclose()
        assert provider.cancelled == 1

    @pytest.mark.asyncio
    async def test_readiness_update_emits_full_event(self) -> None:
        provider = StreamingProvider(3)
        cluster = ClusterMeta(cluster_id="c1", cluster_name="prod")
        events = CatalogStreamPublisher(provider, "", cluster=cluster).events()

        reset = await events.__anext__()
        assert reset.ready is False

        provider.ready = True
        provider.queue.put_nowait(ReadinessUpdate(ready=True))
        update = await events.__anext__()

        assert update.reset is False
        assert update.ready is True
        assert update.cache_ready is True
        assert update.snapshot_mode == "full"
        assert update.sequence == 2
        assert update.snapshot.cluster_id == "c1"
        assert len(update.snapshot.items) == 3

        provider.queue.put_nowait(None)
        with pytest.raises(StopAsyncIteration):
            await events.__anext__()
        assert provider.cancelled == 1

    @pytest.mark.asyncio
    async def test_ready_reset_when_catalog_warm(self) -> None:
        provider = StreamingProvider(2, ready=True, close_immediately=True)
        events = [e async for e in CatalogStreamPublisher(provider, "").events()]

        assert len(events) == 1
        assert events[0].reset is True
        assert events[0].ready is True
        assert provider.cancelled == 1

    @pytest.mark.asyncio
    async def test_unready_signal_keeps_partial(self) -> None:
        provider = StreamingProvider(1)
        events = CatalogStreamPublisher(provider, "").events()
        await events.__anext__()

        provider.queue.put_nowait(ReadinessUpdate(ready=False))
        update = await events.__anext__()

        assert update.ready is False
        assert update.snapshot_mode == "partial"
        await events.aclose()


class TestEncodeEvent:
    def test_frame_format(self) -> None:
        frame = encode_event(StreamEvent(reset=True, sequence=1))
        assert frame.startswith(b"data: ")
        assert frame.endswith(b"\n\n")
        body = json.loads(frame[len(b"data: ") :].decode())
        assert body["reset"] is True
        assert body["cacheReady"] is False
        assert body["sequence"] == 1

    def test_unserializable_event(self) -> None:
        with pytest.raises(StreamTransportError):
            encode_event(StreamEvent(snapshot=object()))


# =============================================================================
# HTTP endpoint
# =============================================================================


def _client(
    provider: StreamingProvider | None, settings: SnapshotSettings | None = None
) -> TestClient:
    app = FastAPI()
    app.include_router(create_catalog_stream_router(lambda: provider, settings=settings))
    return TestClient(app)


class TestCatalogStreamRouter:
    """Tests for the catalog stream endpoint."""

    def test_non_get_rejected(self) -> None:
        response = _client(StreamingProvider(1)).post("/api/v2/catalog/stream")
        assert response.status_code == 405

    def test_missing_provider(self) -> None:
        response = _client(None).get("/api/v2/catalog/stream")
        assert response.status_code == 503

    def test_bad_filter(self) -> None:
        response = _client(StreamingProvider(1)).get("/api/v2/catalog/stream?kind=Pod;x")
        assert response.status_code == 400

    def test_streams_reset_event(self) -> None:
        provider = StreamingProvider(3, ready=True, close_immediately=True)
        response = _client(provider).get("/api/v2/catalog/stream?limit=2")

        assert response.status_code == 200
        assert response.headers["content-type"].startswith("text/event-stream")
        assert response.headers["cache-control"] == "no-cache"

        frames = [f for f in response.text.split("\n\n") if f]
        assert len(frames) == 1
        event = json.loads(frames[0][len("data: ") :])
        assert event["reset"] is True
        assert event["snapshot"]["continue"] == "2"
        assert len(event["snapshot"]["items"]) == 2
        assert provider.cancelled == 1

    def test_failure_threshold_setting_ends_pagination(self) -> None:
        provider = StreamingProvider(
            3, ready=True, close_immediately=True, consecutive_failures=1
        )
        settings = SnapshotSettings(catalog_failure_threshold=0)
        response = _client(provider, settings).get("/api/v2/catalog/stream?limit=2")

        frames = [f for f in response.text.split("\n\n") if f]
        event = json.loads(frames[0][len("data: ") :])
        assert event["snapshot"]["continue"] == ""

        provider = StreamingProvider(
            3, ready=True, close_immediately=True, consecutive_failures=1
        )
        response = _client(provider).get("/api/v2/catalog/stream?limit=2")

        frames = [f for f in response.text.split("\n\n") if f]
        event = json.loads(frames[0][len("data: ") :])
        assert event["snapshot"]["continue"] == "2"
