"""Namespace workload presence tracking."""

from kubesnap.controllers.tracker.namespace_tracker import (
    DeletedFinalStateUnknown,
    Informer,
    NamespaceWorkloadTracker,
    extract_namespace_and_key,
)

__all__ = [
    "DeletedFinalStateUnknown",
    "Informer",
    "NamespaceWorkloadTracker",
    "extract_namespace_and_key",
]
