"""Controllers module for kubesnap.

This module provides the snapshot build service, the namespace workload
tracker, the catalog domain and stream, and the multi-cluster merger.
"""

from __future__ import annotations

# Base classes
from kubesnap.controllers.base import DomainBuilder

# Catalog domain
from kubesnap.controllers.catalog import (
    CatalogBuilder,
    CatalogStreamPublisher,
    create_catalog_stream_router,
    register_catalog_domains,
)

# Multi-cluster merge
from kubesnap.controllers.merge import MultiClusterMerger, merge_snapshots

# Snapshot service
from kubesnap.controllers.snapshot import (
    DomainConfig,
    DomainRegistry,
    SnapshotBuildService,
    TelemetryRecorder,
    cache_bypass,
    register_permission_denied_domain,
)

# Workload tracking
from kubesnap.controllers.tracker import NamespaceWorkloadTracker

__all__ = [
    # Catalog
    "CatalogBuilder",
    "CatalogStreamPublisher",
    # Base
    "DomainBuilder",
    # Snapshot service
    "DomainConfig",
    "DomainRegistry",
    # Merge
    "MultiClusterMerger",
    # Tracker
    "NamespaceWorkloadTracker",
    "SnapshotBuildService",
    "TelemetryRecorder",
    "cache_bypass",
    "create_catalog_stream_router",
    "merge_snapshots",
    "register_catalog_domains",
    "register_permission_denied_domain",
]
