"""Deterministic combination of per-cluster snapshots.

Each mergeable domain maps to a typed strategy. List domains concatenate
rows in input order; the cluster overview sums counters and re-formats
resource totals. Merges are all-or-nothing: any payload of the wrong type
fails the whole call.
"""

from __future__ import annotations

import logging
import time
from abc import ABC, abstractmethod
from collections.abc import Mapping, Sequence
from typing import Any

from pydantic_core import PydanticSerializationError

from kubesnap.constants.enums import SnapshotDomain
from kubesnap.constants.values import MIXED_CLUSTER_TYPE, MULTIPLE_CLUSTER_VERSIONS
from kubesnap.models.errors import MergeError
from kubesnap.models.snapshot.payloads import (
    ClusterConfigSnapshot,
    ClusterCRDSnapshot,
    ClusterCustomSnapshot,
    ClusterEventsSnapshot,
    ClusterOverviewPayload,
    ClusterOverviewSnapshot,
    ClusterRBACSnapshot,
    ClusterStorageSnapshot,
    ListPayload,
    MetricsInfo,
    NamespaceAutoscalingSnapshot,
    NamespaceConfigSnapshot,
    NamespaceCustomSnapshot,
    NamespaceEventsSnapshot,
    NamespaceHelmSnapshot,
    NamespaceNetworkSnapshot,
    NamespaceQuotasSnapshot,
    NamespaceRBACSnapshot,
    NamespaceSnapshot,
    NamespaceStorageSnapshot,
    NamespaceWorkloadsSnapshot,
    NodeSnapshot,
    PodSnapshot,
)
from kubesnap.models.snapshot.snapshot import Snapshot, SnapshotStats
from kubesnap.utils.checksum import checksum_payload
from kubesnap.utils.resource_parser import (
    format_cpu_millicores,
    format_memory_bytes,
    parse_cpu_millicores,
    parse_memory_bytes,
)

logger = logging.getLogger(__name__)

_OVERVIEW_COUNTERS = (
    "total_nodes",
    "fargate_nodes",
    "regular_nodes",
    "ec2_nodes",
    "total_pods",
    "total_containers",
    "total_init_containers",
    "running_pods",
    "pending_pods",
    "failed_pods",
    "restarted_pods",
    "total_namespaces",
)
_OVERVIEW_CPU_FIELDS = ("cpu_usage", "cpu_requests", "cpu_limits", "cpu_allocatable")
_OVERVIEW_MEMORY_FIELDS = (
    "memory_usage",
    "memory_requests",
    "memory_limits",
    "memory_allocatable",
)


# ============================================================================
# Shared helpers
# ============================================================================

def merge_list_stats(stats: Sequence[SnapshotStats], item_count: int) -> SnapshotStats:
    """Combine list stats: item count, positive totals, truncation, warnings."""
    warnings: list[str] = []
    for stat in stats:
        warnings.extend(stat.warnings)
    return SnapshotStats(
        item_count=item_count,
        total_items=sum(stat.total_items for stat in stats if stat.total_items > 0),
        truncated=any(stat.truncated for stat in stats),
        warnings=warnings,
    )


def merge_metrics(entries: Sequence[MetricsInfo]) -> MetricsInfo:
    """Freshest timestamp, OR'd staleness, first error, summed counts."""
    merged = MetricsInfo()
    for entry in entries:
        merged.collected_at = max(merged.collected_at, entry.collected_at)
        merged.stale = merged.stale or entry.stale
        if not merged.last_error and entry.last_error:
            merged.last_error = entry.last_error
        merged.consecutive_failures = max(
            merged.consecutive_failures, entry.consecutive_failures
        )
        merged.success_count += entry.success_count
        merged.failure_count += entry.failure_count
    return merged


def merge_label(values: Sequence[str], mixed: str) -> str:
    """Return the single shared non-empty value, "" if none, else ``mixed``."""
    distinct = {value.strip() for value in values if value.strip()}
    if not distinct:
        return ""
    if len(distinct) == 1:
        return next(iter(distinct))
    return mixed


def _collect_by_cluster(
    target: dict[str, Any], existing: Mapping[str, Any], cluster_id: str, value: Any
) -> None:
    if existing:
        for key, info in existing.items():
            if key.strip():
                target[key] = info
    elif cluster_id.strip():
        target[cluster_id.strip()] = value


# ============================================================================
# Strategies
# ============================================================================

class MergeStrategy(ABC):
    """Merges same-domain snapshots whose payloads are ``payload_type``."""

    payload_type: type[Any]

    def payloads(self, domain: str, snapshots: Sequence[Snapshot]) -> list[Any]:
        payloads = []
        for snap in snapshots:
            if not isinstance(snap.payload, self.payload_type):
                raise MergeError(f"{domain} payload mismatch")
            payloads.append(snap.payload)
        return payloads

    def merge(self, domain: str, scope: str, snapshots: Sequence[Snapshot]) -> Snapshot:
        payload, stats = self.merge_payloads(domain, snapshots)
        return build_merged_snapshot(domain, scope, payload, stats, snapshots)

    @abstractmethod
    def merge_payloads(
        self, domain: str, snapshots: Sequence[Snapshot]
    ) -> tuple[Any, SnapshotStats]:
        ...


class ListMergeStrategy(MergeStrategy):
    """Concatenates rows of a list payload, preserving input order."""

    def __init__(self, payload_type: type[ListPayload]) -> None:
        self.payload_type = payload_type

    def merge_payloads(
        self, domain: str, snapshots: Sequence[Snapshot]
    ) -> tuple[Any, SnapshotStats]:
        payloads = self.payloads(domain, snapshots)
        rows = [row for payload in payloads for row in payload.rows()]
        merged = self.payload_type(**{self.payload_type.items_field: rows})
        self.merge_extras(merged, payloads)
        stats = merge_list_stats([snap.stats for snap in snapshots], len(rows))
        return merged, stats

    def merge_extras(self, merged: Any, payloads: Sequence[Any]) -> None:
        """Hook for payload fields beyond the row list."""


class PodMergeStrategy(ListMergeStrategy):
    def __init__(self) -> None:
        super().__init__(PodSnapshot)

    def merge_extras(self, merged: Any, payloads: Sequence[Any]) -> None:
        merged.metrics = merge_metrics([payload.metrics for payload in payloads])


class NodeMergeStrategy(ListMergeStrategy):
    def __init__(self) -> None:
        super().__init__(NodeSnapshot)

    def merge_extras(self, merged: Any, payloads: Sequence[Any]) -> None:
        by_cluster: dict[str, MetricsInfo] = {}
        for payload in payloads:
            _collect_by_cluster(
                by_cluster, payload.metrics_by_cluster, payload.cluster_id, payload.metrics
            )
        merged.metrics = merge_metrics([payload.metrics for payload in payloads])
        merged.metrics_by_cluster = by_cluster


class ClusterOverviewMergeStrategy(MergeStrategy):
    """Sums overview counters and resource totals across clusters."""

    payload_type = ClusterOverviewSnapshot

    def merge_payloads(
        self, domain: str, snapshots: Sequence[Snapshot]
    ) -> tuple[Any, SnapshotStats]:
        payloads: list[ClusterOverviewSnapshot] = self.payloads(domain, snapshots)
        overview_by_cluster: dict[str, ClusterOverviewPayload] = {}
        metrics_by_cluster: dict[str, MetricsInfo] = {}
        for payload in payloads:
            _collect_by_cluster(
                overview_by_cluster,
                payload.overview_by_cluster,
                payload.cluster_id,
                payload.overview,
            )
            _collect_by_cluster(
                metrics_by_cluster,
                payload.metrics_by_cluster,
                payload.cluster_id,
                payload.metrics,
            )

        overview = merge_overview([payload.overview for payload in payloads])
        merged = ClusterOverviewSnapshot(
            overview=overview,
            metrics=merge_metrics([payload.metrics for payload in payloads]),
            overview_by_cluster=overview_by_cluster,
            metrics_by_cluster=metrics_by_cluster,
        )
        return merged, SnapshotStats(item_count=overview.total_nodes)


def merge_overview(overviews: Sequence[ClusterOverviewPayload]) -> ClusterOverviewPayload:
    """Aggregate overview counters, resources and labels."""
    values: dict[str, Any] = {}
    for name in _OVERVIEW_COUNTERS:
        values[name] = sum(getattr(overview, name) for overview in overviews)
    for name in _OVERVIEW_CPU_FIELDS:
        total = sum(parse_cpu_millicores(getattr(overview, name)) for overview in overviews)
        values[name] = format_cpu_millicores(total)
    for name in _OVERVIEW_MEMORY_FIELDS:
        total = sum(parse_memory_bytes(getattr(overview, name)) for overview in overviews)
        values[name] = format_memory_bytes(total)
    values["cluster_type"] = merge_label(
        [overview.cluster_type for overview in overviews], MIXED_CLUSTER_TYPE
    )
    values["cluster_version"] = merge_label(
        [overview.cluster_version for overview in overviews], MULTIPLE_CLUSTER_VERSIONS
    )
    return ClusterOverviewPayload(**values)


def build_merged_snapshot(
    domain: str,
    scope: str,
    payload: Any,
    stats: SnapshotStats,
    snapshots: Sequence[Snapshot],
) -> Snapshot:
    """Stamp version, sequence, timestamp and checksum on a merged payload."""
    checksum = ""
    if payload is not None:
        try:
            checksum = checksum_payload(payload)
        except (PydanticSerializationError, TypeError, ValueError) as e:
            raise MergeError(f"failed to checksum merged {domain} payload: {e}") from e
    return Snapshot(
        domain=domain,
        scope=scope,
        version=max((snap.version for snap in snapshots), default=0),
        sequence=max((snap.sequence for snap in snapshots), default=0),
        generated_at=int(time.time() * 1000),
        checksum=checksum,
        payload=payload,
        stats=stats,
    )


# ============================================================================
# Registry
# ============================================================================

def default_merge_strategies() -> dict[SnapshotDomain, MergeStrategy]:
    return {
        SnapshotDomain.NAMESPACES: ListMergeStrategy(NamespaceSnapshot),
        SnapshotDomain.NAMESPACE_WORKLOADS: ListMergeStrategy(NamespaceWorkloadsSnapshot),
        SnapshotDomain.NAMESPACE_CONFIG: ListMergeStrategy(NamespaceConfigSnapshot),
        SnapshotDomain.NAMESPACE_NETWORK: ListMergeStrategy(NamespaceNetworkSnapshot),
        SnapshotDomain.NAMESPACE_STORAGE: ListMergeStrategy(NamespaceStorageSnapshot),
        SnapshotDomain.NAMESPACE_AUTOSCALING: ListMergeStrategy(NamespaceAutoscalingSnapshot),
        SnapshotDomain.NAMESPACE_QUOTAS: ListMergeStrategy(NamespaceQuotasSnapshot),
        SnapshotDomain.NAMESPACE_RBAC: ListMergeStrategy(NamespaceRBACSnapshot),
        SnapshotDomain.NAMESPACE_CUSTOM: ListMergeStrategy(NamespaceCustomSnapshot),
        SnapshotDomain.NAMESPACE_HELM: ListMergeStrategy(NamespaceHelmSnapshot),
        SnapshotDomain.NAMESPACE_EVENTS: ListMergeStrategy(NamespaceEventsSnapshot),
        SnapshotDomain.PODS: PodMergeStrategy(),
        SnapshotDomain.NODES: NodeMergeStrategy(),
        SnapshotDomain.CLUSTER_OVERVIEW: ClusterOverviewMergeStrategy(),
        SnapshotDomain.CLUSTER_RBAC: ListMergeStrategy(ClusterRBACSnapshot),
        SnapshotDomain.CLUSTER_STORAGE: ListMergeStrategy(ClusterStorageSnapshot),
        SnapshotDomain.CLUSTER_CONFIG: ListMergeStrategy(ClusterConfigSnapshot),
        SnapshotDomain.CLUSTER_CRDS: ListMergeStrategy(ClusterCRDSnapshot),
        SnapshotDomain.CLUSTER_CUSTOM: ListMergeStrategy(ClusterCustomSnapshot),
        SnapshotDomain.CLUSTER_EVENTS: ListMergeStrategy(ClusterEventsSnapshot),
    }


# Domains served per cluster only.
UNMERGEABLE_DOMAINS: frozenset[SnapshotDomain] = frozenset(
    {SnapshotDomain.OBJECT_EVENTS, SnapshotDomain.CATALOG, SnapshotDomain.CATALOG_DIFF}
)


class MultiClusterMerger:
    """Dispatches merges to the strategy registered for each domain."""

    def __init__(
        self, strategies: Mapping[SnapshotDomain, MergeStrategy] | None = None
    ) -> None:
        self._strategies = dict(
            strategies if strategies is not None else default_merge_strategies()
        )

    def supports(self, domain: str) -> bool:
        return SnapshotDomain.from_name(domain) in self._strategies

    def merge(self, domain: str, scope: str, snapshots: Sequence[Snapshot]) -> Snapshot:
        """Merge same-domain snapshots from several clusters.

        Raises:
            MergeError: On empty input, an unsupported domain, or a payload of
                the wrong type.
        """
        domain = str(domain)
        if not snapshots:
            raise MergeError(f"no snapshots to merge for {domain}")
        if len(snapshots) == 1:
            return snapshots[0]

        key = SnapshotDomain.from_name(domain)
        strategy = self._strategies.get(key) if key is not None else None
        if strategy is None:
            raise MergeError(f"merge not supported for domain {domain}")
        merged = strategy.merge(domain, scope, snapshots)
        logger.debug("Merged %d %s snapshots", len(snapshots), domain)
        return merged


_default_merger = MultiClusterMerger()


def merge_snapshots(domain: str, scope: str, snapshots: Sequence[Snapshot]) -> Snapshot:
    return _default_merger.merge(domain, scope, snapshots)


__all__ = [
    "UNMERGEABLE_DOMAINS",
    "ClusterOverviewMergeStrategy",
    "ListMergeStrategy",
    "MergeStrategy",
    "MultiClusterMerger",
    "NodeMergeStrategy",
    "PodMergeStrategy",
    "build_merged_snapshot",
    "default_merge_strategies",
    "merge_label",
    "merge_list_stats",
    "merge_metrics",
    "merge_overview",
    "merge_snapshots",
]
