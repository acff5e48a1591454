"""Object catalog models."""

from kubesnap.models.catalog.catalog import (
    BrowseQueryOptions,
    CatalogNamespaceGroup,
    CatalogSnapshot,
    CatalogSummary,
    HealthStatus,
    KindInfo,
    QueryOptions,
    QueryResult,
    ReadinessUpdate,
    StreamEvent,
)

__all__ = [
    "BrowseQueryOptions",
    "CatalogNamespaceGroup",
    "CatalogSnapshot",
    "CatalogSummary",
    "HealthStatus",
    "KindInfo",
    "QueryOptions",
    "QueryResult",
    "ReadinessUpdate",
    "StreamEvent",
]
