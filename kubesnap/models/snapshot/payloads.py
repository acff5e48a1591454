"""Typed payload models for mergeable snapshot domains.

Row contents are defined by each domain builder, so rows are plain dicts.
Every payload records the cluster it was built for and serializes with
camelCase aliases.
"""

from __future__ import annotations

from typing import Any, ClassVar

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

Row = dict[str, Any]


class CamelModel(BaseModel):
    """Base model that serializes field names as camelCase."""

    model_config = ConfigDict(populate_by_name=True, alias_generator=to_camel)


class ClusterMeta(CamelModel):
    """Identity of the cluster a payload or row came from."""

    cluster_id: str = ""
    cluster_name: str = ""


class ClusterPayload(ClusterMeta):
    """Base for payloads built against a single cluster."""


class ListPayload(ClusterPayload):
    """Payload whose rows live in one list field named by ``items_field``."""

    items_field: ClassVar[str] = "items"

    def rows(self) -> list[Row]:
        return list(getattr(self, self.items_field))


class MetricsInfo(CamelModel):
    """Metrics poller freshness for one cluster."""

    collected_at: int = 0
    stale: bool = False
    last_error: str = ""
    consecutive_failures: int = 0
    success_count: int = 0
    failure_count: int = 0


# ============================================================================
# Namespace-scoped list payloads
# ============================================================================

class NamespaceSnapshot(ListPayload):
    items_field: ClassVar[str] = "namespaces"
    namespaces: list[Row] = Field(default_factory=list)


class NamespaceWorkloadsSnapshot(ListPayload):
    items_field: ClassVar[str] = "workloads"
    workloads: list[Row] = Field(default_factory=list)


class _ResourceListPayload(ListPayload):
    items_field: ClassVar[str] = "resources"
    resources: list[Row] = Field(default_factory=list)


class NamespaceConfigSnapshot(_ResourceListPayload):
    pass


class NamespaceNetworkSnapshot(_ResourceListPayload):
    pass


class NamespaceStorageSnapshot(_ResourceListPayload):
    pass


class NamespaceAutoscalingSnapshot(_ResourceListPayload):
    pass


class NamespaceQuotasSnapshot(_ResourceListPayload):
    pass


class NamespaceRBACSnapshot(_ResourceListPayload):
    pass


class NamespaceCustomSnapshot(_ResourceListPayload):
    pass


class NamespaceHelmSnapshot(ListPayload):
    items_field: ClassVar[str] = "releases"
    releases: list[Row] = Field(default_factory=list)


class NamespaceEventsSnapshot(ListPayload):
    items_field: ClassVar[str] = "events"
    events: list[Row] = Field(default_factory=list)


# ============================================================================
# Pods and nodes
# ============================================================================

class PodSnapshot(ListPayload):
    items_field: ClassVar[str] = "pods"
    pods: list[Row] = Field(default_factory=list)
    metrics: MetricsInfo = Field(default_factory=MetricsInfo)


class NodeSnapshot(ListPayload):
    items_field: ClassVar[str] = "nodes"
    nodes: list[Row] = Field(default_factory=list)
    metrics: MetricsInfo = Field(default_factory=MetricsInfo)
    metrics_by_cluster: dict[str, MetricsInfo] = Field(default_factory=dict)


# ============================================================================
# Cluster-scoped payloads
# ============================================================================

class ClusterOverviewPayload(CamelModel):
    """Overview card data for one cluster or an aggregate of several."""

    cluster_type: str = ""
    cluster_version: str = ""
    cpu_usage: str = ""
    cpu_requests: str = ""
    cpu_limits: str = ""
    cpu_allocatable: str = ""
    memory_usage: str = ""
    memory_requests: str = ""
    memory_limits: str = ""
    memory_allocatable: str = ""
    total_nodes: int = 0
    fargate_nodes: int = 0
    regular_nodes: int = 0
    ec2_nodes: int = Field(default=0, alias="ec2Nodes")
    total_pods: int = 0
    total_containers: int = 0
    total_init_containers: int = 0
    running_pods: int = 0
    pending_pods: int = 0
    failed_pods: int = 0
    restarted_pods: int = 0
    total_namespaces: int = 0


class ClusterOverviewSnapshot(ClusterPayload):
    overview: ClusterOverviewPayload = Field(default_factory=ClusterOverviewPayload)
    metrics: MetricsInfo = Field(default_factory=MetricsInfo)
    overview_by_cluster: dict[str, ClusterOverviewPayload] = Field(default_factory=dict)
    metrics_by_cluster: dict[str, MetricsInfo] = Field(default_factory=dict)


class ClusterRBACSnapshot(_ResourceListPayload):
    pass


class ClusterConfigSnapshot(_ResourceListPayload):
    pass


class ClusterCustomSnapshot(_ResourceListPayload):
    pass


class ClusterStorageSnapshot(ListPayload):
    items_field: ClassVar[str] = "volumes"
    volumes: list[Row] = Field(default_factory=list)


class ClusterCRDSnapshot(ListPayload):
    items_field: ClassVar[str] = "definitions"
    definitions: list[Row] = Field(default_factory=list)


class ClusterEventsSnapshot(ListPayload):
    items_field: ClassVar[str] = "events"
    events: list[Row] = Field(default_factory=list)


__all__ = [
    "ClusterCRDSnapshot",
    "ClusterConfigSnapshot",
    "ClusterCustomSnapshot",
    "ClusterEventsSnapshot",
    "ClusterMeta",
    "ClusterOverviewPayload",
    "ClusterOverviewSnapshot",
    "ClusterPayload",
    "ClusterRBACSnapshot",
    "ClusterStorageSnapshot",
    "ListPayload",
    "MetricsInfo",
    "NamespaceAutoscalingSnapshot",
    "NamespaceConfigSnapshot",
    "NamespaceCustomSnapshot",
    "NamespaceEventsSnapshot",
    "NamespaceHelmSnapshot",
    "NamespaceNetworkSnapshot",
    "NamespaceQuotasSnapshot",
    "NamespaceRBACSnapshot",
    "NamespaceSnapshot",
    "NamespaceStorageSnapshot",
    "NamespaceWorkloadsSnapshot",
    "NodeSnapshot",
    "PodSnapshot",
    "Row",
]
