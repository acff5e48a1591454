"""All enum definitions for the snapshot core.

This module consolidates all enumerations used throughout the package.
"""

from enum import Enum

# =============================================================================
# Domain Enums
# =============================================================================

class SnapshotDomain(str, Enum):
    """Registered snapshot domain names."""

    NAMESPACES = "namespaces"
    NAMESPACE_WORKLOADS = "namespace-workloads"
    NAMESPACE_CONFIG = "namespace-config"
    NAMESPACE_NETWORK = "namespace-network"
    NAMESPACE_STORAGE = "namespace-storage"
    NAMESPACE_AUTOSCALING = "namespace-autoscaling"
    NAMESPACE_QUOTAS = "namespace-quotas"
    NAMESPACE_RBAC = "namespace-rbac"
    NAMESPACE_CUSTOM = "namespace-custom"
    NAMESPACE_HELM = "namespace-helm"
    NAMESPACE_EVENTS = "namespace-events"
    PODS = "pods"
    NODES = "nodes"
    CLUSTER_OVERVIEW = "cluster-overview"
    CLUSTER_RBAC = "cluster-rbac"
    CLUSTER_STORAGE = "cluster-storage"
    CLUSTER_CONFIG = "cluster-config"
    CLUSTER_CRDS = "cluster-crds"
    CLUSTER_CUSTOM = "cluster-custom"
    CLUSTER_EVENTS = "cluster-events"
    OBJECT_EVENTS = "object-events"
    CATALOG = "catalog"
    CATALOG_DIFF = "catalog-diff"

    def __str__(self) -> str:
        return self.value

    @classmethod
    def from_name(cls, name: "str | SnapshotDomain") -> "SnapshotDomain | None":
        """Resolve a domain name, returning None for unknown names."""
        if isinstance(name, cls):
            return name
        try:
            return cls(name)
        except ValueError:
            return None


# =============================================================================
# Workload Tracking Enums
# =============================================================================

class WorkloadKind(str, Enum):
    """Workload kinds watched by the namespace tracker."""

    DEPLOYMENT = "Deployment"
    STATEFULSET = "StatefulSet"
    DAEMONSET = "DaemonSet"
    JOB = "Job"
    CRONJOB = "CronJob"
    POD = "Pod"


class WorkloadPresence(Enum):
    """Tri-state answer for "does this namespace have workloads"."""

    PRESENT = "present"
    ABSENT = "absent"
    UNKNOWN = "unknown"


# =============================================================================
# Permission Enums
# =============================================================================

class PermissionCheckMode(Enum):
    """How a domain's requirements combine."""

    ALL = "all"
    ANY = "any"


# =============================================================================
# Catalog Enums
# =============================================================================

class HealthState(str, Enum):
    """Catalog provider health values."""

    UNKNOWN = "unknown"
    OK = "ok"
    DEGRADED = "degraded"
    ERROR = "error"


class SnapshotMode(str, Enum):
    """Whether a streamed page is the complete view."""

    FULL = "full"
    PARTIAL = "partial"


# =============================================================================
# Manual Refresh Enums
# =============================================================================

class JobState(str, Enum):
    """Manual refresh job states."""

    QUEUED = "queued"
    RUNNING = "running"
    SUCCEEDED = "succeeded"
    FAILED = "failed"
    CANCELLED = "cancelled"


__all__ = [
    "HealthState",
    "JobState",
    "PermissionCheckMode",
    "SnapshotDomain",
    "SnapshotMode",
    "WorkloadKind",
    "WorkloadPresence",
]
