"""Constants module for kubesnap.

Centralized constants organized by domain:
- enums.py: All Enum class definitions
- values.py: Scalar constants (strings with Final)
- timeouts.py: Timeout and interval values (seconds)
- limits.py: Limit values (max/min/thresholds)
- defaults.py: Default values for settings
"""

from kubesnap.constants.defaults import (
    BUILD_TIMEOUT_SECONDS_DEFAULT,
    CACHE_MAX_ENTRIES_DEFAULT,
    CACHE_TTL_SECONDS_DEFAULT,
)
from kubesnap.constants.enums import (
    HealthState,
    JobState,
    PermissionCheckMode,
    SnapshotDomain,
    SnapshotMode,
    WorkloadKind,
    WorkloadPresence,
)
from kubesnap.constants.limits import (
    CATALOG_FAILURE_THRESHOLD,
    MAX_WORKERS,
    SNAPSHOT_CACHE_MAX_ENTRIES,
)
from kubesnap.constants.timeouts import (
    INFORMER_SYNC_POLL_INTERVAL,
    SNAPSHOT_BUILD_TIMEOUT,
    SNAPSHOT_CACHE_TTL,
)
from kubesnap.constants.values import (
    CATALOG_STREAM_PATH,
    MIXED_CLUSTER_TYPE,
    MULTIPLE_CLUSTER_VERSIONS,
)

__all__ = [
    # Defaults
    "BUILD_TIMEOUT_SECONDS_DEFAULT",
    "CACHE_MAX_ENTRIES_DEFAULT",
    "CACHE_TTL_SECONDS_DEFAULT",
    # Limits
    "CATALOG_FAILURE_THRESHOLD",
    "CATALOG_STREAM_PATH",
    # Timeouts
    "INFORMER_SYNC_POLL_INTERVAL",
    "MAX_WORKERS",
    # Merge sentinels
    "MIXED_CLUSTER_TYPE",
    "MULTIPLE_CLUSTER_VERSIONS",
    "SNAPSHOT_BUILD_TIMEOUT",
    "SNAPSHOT_CACHE_MAX_ENTRIES",
    "SNAPSHOT_CACHE_TTL",
    # Enums
    "HealthState",
    "JobState",
    "PermissionCheckMode",
    "SnapshotDomain",
    "SnapshotMode",
    "WorkloadKind",
    "WorkloadPresence",
]
