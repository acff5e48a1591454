"""Snapshot envelope and payload models."""

from kubesnap.models.snapshot.payloads import (
    ClusterMeta,
    ClusterOverviewPayload,
    ClusterOverviewSnapshot,
    ListPayload,
    MetricsInfo,
    NodeSnapshot,
    PodSnapshot,
)
from kubesnap.models.snapshot.snapshot import Snapshot, SnapshotStats

__all__ = [
    "ClusterMeta",
    "ClusterOverviewPayload",
    "ClusterOverviewSnapshot",
    "ListPayload",
    "MetricsInfo",
    "NodeSnapshot",
    "PodSnapshot",
    "Snapshot",
    "SnapshotStats",
]
