"""Limit and threshold constants for the snapshot core.

All limit values, thresholds, and validation ranges.
"""

from typing import Final

# ============================================================================
# Cache limits
# ============================================================================

SNAPSHOT_CACHE_MAX_ENTRIES: Final = 512

# ============================================================================
# Fan-out limits
# ============================================================================

MAX_WORKERS: Final = 8
FANOUT_WORKERS_MIN: Final = 1
FANOUT_WORKERS_MAX: Final = 64

# ============================================================================
# Catalog streaming
# ============================================================================

# More consecutive catalog sync failures than this disables pagination.
CATALOG_FAILURE_THRESHOLD: Final = 3

# ============================================================================
# Manual refresh
# ============================================================================

MANUAL_REFRESH_MAX_ATTEMPTS: Final = 3

__all__ = [
    "CATALOG_FAILURE_THRESHOLD",
    "FANOUT_WORKERS_MAX",
    "FANOUT_WORKERS_MIN",
    "MANUAL_REFRESH_MAX_ATTEMPTS",
    "MAX_WORKERS",
    "SNAPSHOT_CACHE_MAX_ENTRIES",
]
