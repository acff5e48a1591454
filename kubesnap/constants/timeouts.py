"""Timeout constants for the snapshot core.

All timeout and interval values for builds, informer sync polling and
manual refresh retries (seconds, as float).
"""

from typing import Final

# ============================================================================
# Snapshot build timeouts
# ============================================================================

SNAPSHOT_CACHE_TTL: Final = 5.0
SNAPSHOT_BUILD_TIMEOUT: Final = 30.0

# ============================================================================
# Informer sync / manual refresh
# ============================================================================

INFORMER_SYNC_POLL_INTERVAL: Final = 0.05
MANUAL_REFRESH_RETRY_DELAY: Final = 1.0

__all__ = [
    "INFORMER_SYNC_POLL_INTERVAL",
    "MANUAL_REFRESH_RETRY_DELAY",
    "SNAPSHOT_BUILD_TIMEOUT",
    "SNAPSHOT_CACHE_TTL",
]
