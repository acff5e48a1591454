"""Push-based catalog stream.

On subscribe the publisher emits a ``reset`` event for the caller's filter,
even if the catalog is still warming, so clients paint immediately. Every
readiness signal afterwards recomputes the same filtered page and emits an
incremental event. Nothing is buffered across disconnects: a reconnect
starts again with a reset event.
"""

from __future__ import annotations

import logging
import time
from collections.abc import AsyncIterator

from pydantic_core import PydanticSerializationError

from kubesnap.constants.enums import SnapshotMode
from kubesnap.constants.limits import CATALOG_FAILURE_THRESHOLD
from kubesnap.controllers.catalog.builder import (
    build_catalog_payload,
    parse_browse_scope,
)
from kubesnap.controllers.catalog.provider import CatalogProvider
from kubesnap.models.catalog.catalog import StreamEvent
from kubesnap.models.errors import StreamTransportError
from kubesnap.models.snapshot.payloads import ClusterMeta
from kubesnap.models.snapshot.snapshot import SnapshotStats

logger = logging.getLogger(__name__)


class CatalogStreamPublisher:
    """Produces stream events for one connection."""

    def __init__(
        self,
        provider: CatalogProvider,
        scope: str,
        failure_threshold: int = CATALOG_FAILURE_THRESHOLD,
        cluster: ClusterMeta | None = None,
    ) -> None:
        # Parse eagerly so a bad filter fails before the stream opens.
        self._opts = parse_browse_scope(scope)
        self._provider = provider
        self._scope = scope
        self._failure_threshold = failure_threshold
        self._cluster = cluster or ClusterMeta()
        self._sequence = 0

    def _build_event(self, reset: bool, signaled_ready: bool) -> StreamEvent:
        result = self._provider.query(self._opts.to_query_options())
        health = self._provider.health()
        caches_ready = self._provider.caches_ready()
        payload, truncated = build_catalog_payload(
            result,
            self._opts,
            health,
            caches_ready,
            False,
            self._failure_threshold,
        )
        payload.cluster_id = self._cluster.cluster_id
        payload.cluster_name = self._cluster.cluster_name

        self._sequence += 1
        mode = SnapshotMode.FULL if payload.is_final and not truncated else SnapshotMode.PARTIAL
        return StreamEvent(
            reset=reset,
            ready=signaled_ready and payload.is_final,
            cache_ready=caches_ready,
            truncated=truncated,
            snapshot_mode=mode.value,
            snapshot=payload,
            stats=SnapshotStats(
                item_count=len(payload.items),
                total_items=result.total_items,
                truncated=truncated,
                batch_index=payload.batch_index,
                batch_size=payload.batch_size,
                total_batches=payload.total_batches,
                is_final_batch=payload.is_final,
            ),
            generated_at=int(time.time() * 1000),
            sequence=self._sequence,
        )

    async def events(self) -> AsyncIterator[StreamEvent]:
        """Yield the reset event, then one event per readiness signal.

        Ends when the subscription closes. The subscription is always
        released, including when the consumer stops iterating or is cancelled.
        """
        queue, cancel = self._provider.subscribe_streaming()
        logger.info("Catalog stream opened for scope %r", self._scope)
        try:
            yield self._build_event(reset=True, signaled_ready=self._provider.caches_ready())
            while True:
                update = await queue.get()
                if update is None:
                    logger.warning("Catalog stream subscription closed")
                    return
                yield self._build_event(reset=False, signaled_ready=update.ready)
        finally:
            cancel()
            logger.info("Catalog stream closed after %d events", self._sequence)


def encode_event(event: StreamEvent) -> bytes:
    """Encode one event as a ``data: <json>`` frame.

    Raises:
        StreamTransportError: If the event cannot be serialized.
    """
    try:
        body = event.model_dump_json(by_alias=True)
    except (PydanticSerializationError, TypeError, ValueError) as e:
        raise StreamTransportError(f"failed to encode stream event: {e}") from e
    return f"data: {body}\n\n".encode()


__all__ = ["CatalogStreamPublisher", "encode_event"]
