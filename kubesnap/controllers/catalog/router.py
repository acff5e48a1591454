"""HTTP endpoint for the catalog stream."""

from __future__ import annotations

import logging
from collections.abc import AsyncIterator

from fastapi import APIRouter, Request, status
from fastapi.responses import PlainTextResponse, StreamingResponse

from kubesnap.constants.values import CATALOG_STREAM_PATH, EVENT_STREAM_MEDIA_TYPE
from kubesnap.controllers.catalog.provider import ProviderGetter
from kubesnap.controllers.catalog.streaming import CatalogStreamPublisher, encode_event
from kubesnap.models.errors import ScopeValidationError, StreamTransportError
from kubesnap.models.snapshot.payloads import ClusterMeta
from kubesnap.models.state.settings import SnapshotSettings

logger = logging.getLogger(__name__)


def create_catalog_stream_router(
    provider_getter: ProviderGetter,
    path: str = CATALOG_STREAM_PATH,
    settings: SnapshotSettings | None = None,
    cluster: ClusterMeta | None = None,
) -> APIRouter:
    """Build a router serving the catalog stream at ``path``.

    The raw query string is the browse filter. Only GET is routed, so other
    methods get 405 from FastAPI.
    """
    failure_threshold = (settings or SnapshotSettings()).catalog_failure_threshold
    router = APIRouter()

    @router.get(path)
    async def catalog_stream(request: Request):
        provider = provider_getter()
        if provider is None:
            return PlainTextResponse(
                "object catalog unavailable",
                status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            )
        try:
            publisher = CatalogStreamPublisher(
                provider, request.url.query, failure_threshold, cluster
            )
        except ScopeValidationError as e:
            return PlainTextResponse(str(e), status_code=status.HTTP_400_BAD_REQUEST)

        async def frames() -> AsyncIterator[bytes]:
            stream = publisher.events()
            try:
                async for event in stream:
                    yield encode_event(event)
            except StreamTransportError:
                logger.exception("Catalog stream terminated")
            finally:
                await stream.aclose()

        return StreamingResponse(
            frames(),
            media_type=EVENT_STREAM_MEDIA_TYPE,
            headers={"Cache-Control": "no-cache", "Connection": "keep-alive"},
        )

    return router


__all__ = ["create_catalog_stream_router"]
