"""Object catalog models consumed by the catalog domain and stream."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field

from kubesnap.constants.enums import HealthState
from kubesnap.models.snapshot.payloads import CamelModel, ClusterMeta
from kubesnap.models.snapshot.snapshot import SnapshotStats


class CatalogSummary(CamelModel):
    """Lightweight metadata for one catalogued Kubernetes object."""

    cluster_id: str = ""
    cluster_name: str = ""
    kind: str = ""
    group: str = ""
    version: str = ""
    resource: str = ""
    namespace: str = ""
    name: str = ""
    uid: str = ""
    resource_version: str = ""
    creation_timestamp: str = ""
    scope: str = ""
    labels_digest: str = ""


class KindInfo(CamelModel):
    kind: str
    namespaced: bool = False


class QueryOptions(BaseModel):
    """Filter passed to ``CatalogProvider.query``."""

    kinds: list[str] = Field(default_factory=list)
    namespaces: list[str] = Field(default_factory=list)
    search: str = ""
    limit: int = 0
    continue_token: str = ""


class QueryResult(BaseModel):
    """Outcome of a catalog query."""

    items: list[CatalogSummary] = Field(default_factory=list)
    continue_token: str = ""
    total_items: int = 0
    resource_count: int = 0
    kinds: list[KindInfo] = Field(default_factory=list)
    namespaces: list[str] = Field(default_factory=list)


class HealthStatus(BaseModel):
    """Catalog sync health."""

    status: HealthState = HealthState.UNKNOWN
    consecutive_failures: int = 0
    last_error: str = ""
    stale: bool = False

    def streaming_disabled(self, failure_threshold: int) -> bool:
        """Whether partial pages from this source are unsafe to resume."""
        return (
            self.status in (HealthState.ERROR, HealthState.DEGRADED)
            or self.stale
            or self.consecutive_failures > failure_threshold
        )


class ReadinessUpdate(BaseModel):
    """Readiness signal pushed by a catalog provider subscription."""

    ready: bool = False


class CatalogNamespaceGroup(ClusterMeta):
    """Per-cluster namespace list and current selection."""

    namespaces: list[str] = Field(default_factory=list)
    selected_namespaces: list[str] = Field(default_factory=list)


class CatalogSnapshot(ClusterMeta):
    """Browse payload returned to catalog clients."""

    items: list[CatalogSummary] = Field(default_factory=list)
    continue_token: str = Field(default="", alias="continue")
    total: int = 0
    resource_count: int = 0
    kinds: list[KindInfo] = Field(default_factory=list)
    namespaces: list[str] = Field(default_factory=list)
    namespace_groups: list[CatalogNamespaceGroup] = Field(default_factory=list)
    batch_index: int = 0
    batch_size: int = 0
    total_batches: int = 0
    is_final: bool = False
    first_batch_latency_ms: int = 0


class BrowseQueryOptions(BaseModel):
    """Parsed catalog browse scope."""

    kinds: list[str] = Field(default_factory=list)
    namespaces: list[str] = Field(default_factory=list)
    search: str = ""
    limit: int = 0
    continue_token: str = ""

    def to_query_options(self) -> QueryOptions:
        return QueryOptions(
            kinds=list(self.kinds),
            namespaces=list(self.namespaces),
            search=self.search,
            limit=self.limit,
            continue_token=self.continue_token,
        )


class StreamEvent(CamelModel):
    """One push event on the catalog stream."""

    reset: bool = False
    ready: bool = False
    cache_ready: bool = False
    truncated: bool = False
    snapshot_mode: str = ""
    snapshot: Any = None
    stats: SnapshotStats = Field(default_factory=SnapshotStats)
    generated_at: int = 0
    sequence: int = 0


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
