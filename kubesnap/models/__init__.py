"""Data models for the snapshot core."""

from kubesnap.models.errors import (
    DomainNotRegisteredError,
    MergeError,
    PermissionDeniedError,
    ScopeValidationError,
    SnapshotError,
    StreamTransportError,
    UpstreamError,
    is_permission_denied,
)
from kubesnap.models.snapshot import Snapshot, SnapshotStats
from kubesnap.models.state import ManualRefreshJob, SnapshotSettings

__all__ = [
    "DomainNotRegisteredError",
    "ManualRefreshJob",
    "MergeError",
    "PermissionDeniedError",
    "ScopeValidationError",
    "Snapshot",
    "SnapshotError",
    "SnapshotSettings",
    "SnapshotStats",
    "StreamTransportError",
    "UpstreamError",
    "is_permission_denied",
]
