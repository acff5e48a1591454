"""Object catalog provider contract consumed by the catalog domain."""

from __future__ import annotations

import asyncio
from collections.abc import Callable
from typing import Protocol

from kubesnap.models.catalog.catalog import (
    CatalogNamespaceGroup,
    HealthStatus,
    QueryOptions,
    QueryResult,
    ReadinessUpdate,
)

# A closed subscription yields None.
ReadinessQueue = asyncio.Queue["ReadinessUpdate | None"]


class CatalogProvider(Protocol):
    """Read surface of the background object catalog."""

    def query(self, opts: QueryOptions) -> QueryResult: ...

    def health(self) -> HealthStatus: ...

    def caches_ready(self) -> bool: ...

    def namespaces(self) -> list[str]: ...

    def first_batch_latency(self) -> float:
        """Seconds until the first batch was indexed, or 0 if unknown."""
        ...

    def subscribe_streaming(self) -> tuple[ReadinessQueue, Callable[[], None]]:
        """Subscribe to readiness changes; the callable releases the subscription."""
        ...


ProviderGetter = Callable[[], "CatalogProvider | None"]
NamespaceGroupsGetter = Callable[[], "list[CatalogNamespaceGroup]"]

__all__ = [
    "CatalogProvider",
    "NamespaceGroupsGetter",
    "ProviderGetter",
    "ReadinessQueue",
]
