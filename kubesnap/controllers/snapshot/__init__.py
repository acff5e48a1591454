"""Snapshot build service and its collaborators."""

from kubesnap.controllers.snapshot.context import (
    cache_bypass,
    cluster_meta_scope,
    current_cluster_meta,
    current_fanout_limit,
    fanout_limit_scope,
    has_cache_bypass,
    split_cluster_scope,
)
from kubesnap.controllers.snapshot.fanout import collect_with_warnings, run_limited
from kubesnap.controllers.snapshot.permissions import (
    Decision,
    PermissionCheck,
    PermissionChecker,
    PermissionRequirement,
    check_domain_permission,
    default_permission_checks,
    runtime_preflight_requirements,
)
from kubesnap.controllers.snapshot.registry import (
    DomainConfig,
    DomainRegistry,
    register_permission_denied_domain,
)
from kubesnap.controllers.snapshot.service import SnapshotBuildService
from kubesnap.controllers.snapshot.telemetry import SnapshotStatus, TelemetryRecorder

__all__ = [
    "Decision",
    "DomainConfig",
    "DomainRegistry",
    "PermissionCheck",
    "PermissionChecker",
    "PermissionRequirement",
    "SnapshotBuildService",
    "SnapshotStatus",
    "TelemetryRecorder",
    "cache_bypass",
    "check_domain_permission",
    "cluster_meta_scope",
    "collect_with_warnings",
    "current_cluster_meta",
    "current_fanout_limit",
    "default_permission_checks",
    "fanout_limit_scope",
    "has_cache_bypass",
    "register_permission_denied_domain",
    "run_limited",
    "split_cluster_scope",
]
