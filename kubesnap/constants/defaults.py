"""Default values for settings.

All default values used in the SnapshotSettings model and validation fallback values.
"""

from typing import Final

from kubesnap.constants.limits import (
    CATALOG_FAILURE_THRESHOLD,
    MANUAL_REFRESH_MAX_ATTEMPTS,
    MAX_WORKERS,
    SNAPSHOT_CACHE_MAX_ENTRIES,
)
from kubesnap.constants.timeouts import (
    INFORMER_SYNC_POLL_INTERVAL,
    MANUAL_REFRESH_RETRY_DELAY,
    SNAPSHOT_BUILD_TIMEOUT,
    SNAPSHOT_CACHE_TTL,
)

# ============================================================================
# Service defaults
# ============================================================================

CACHE_TTL_SECONDS_DEFAULT: Final = SNAPSHOT_CACHE_TTL
CACHE_MAX_ENTRIES_DEFAULT: Final = SNAPSHOT_CACHE_MAX_ENTRIES
BUILD_TIMEOUT_SECONDS_DEFAULT: Final = SNAPSHOT_BUILD_TIMEOUT
FANOUT_WORKERS_DEFAULT: Final = MAX_WORKERS

# ============================================================================
# Tracker / streaming defaults
# ============================================================================

SYNC_POLL_INTERVAL_SECONDS_DEFAULT: Final = INFORMER_SYNC_POLL_INTERVAL
CATALOG_FAILURE_THRESHOLD_DEFAULT: Final = CATALOG_FAILURE_THRESHOLD

# ============================================================================
# Manual refresh defaults
# ============================================================================

MANUAL_REFRESH_ATTEMPTS_DEFAULT: Final = MANUAL_REFRESH_MAX_ATTEMPTS
MANUAL_REFRESH_RETRY_DELAY_DEFAULT: Final = MANUAL_REFRESH_RETRY_DELAY

__all__ = [
    "BUILD_TIMEOUT_SECONDS_DEFAULT",
    "CACHE_MAX_ENTRIES_DEFAULT",
    "CACHE_TTL_SECONDS_DEFAULT",
    "CATALOG_FAILURE_THRESHOLD_DEFAULT",
    "FANOUT_WORKERS_DEFAULT",
    "MANUAL_REFRESH_ATTEMPTS_DEFAULT",
    "MANUAL_REFRESH_RETRY_DELAY_DEFAULT",
    "SYNC_POLL_INTERVAL_SECONDS_DEFAULT",
]
