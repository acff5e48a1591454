"""Scalar constants for the snapshot core.

All application-level constants with proper type hints using Final.
"""

from typing import Final

# ============================================================================
# Cache keys
# ============================================================================

CACHE_KEY_SEPARATOR: Final = ":"
BYPASS_FLIGHT_SUFFIX: Final = "|bypass"
CLUSTER_SCOPE_DELIMITER: Final = "|"

# ============================================================================
# Merge sentinels
# ============================================================================

MIXED_CLUSTER_TYPE: Final = "Mixed"
MULTIPLE_CLUSTER_VERSIONS: Final = "Multiple"

# ============================================================================
# Permissions
# ============================================================================

VERB_LIST: Final = "list"
CORE_GROUP_LABEL: Final = "core"

# ============================================================================
# Catalog streaming
# ============================================================================

CATALOG_STREAM_PATH: Final = "/api/v2/catalog/stream"
EVENT_STREAM_MEDIA_TYPE: Final = "text/event-stream"

# ============================================================================
# Telemetry
# ============================================================================

STATUS_SUCCESS: Final = "success"
STATUS_ERROR: Final = "error"
CATALOG_FALLBACK_TOKEN: Final = "catalog fallback"
HYDRATION_TOKEN: Final = "hydration"

__all__ = [
    "BYPASS_FLIGHT_SUFFIX",
    "CACHE_KEY_SEPARATOR",
    "CATALOG_FALLBACK_TOKEN",
    "CATALOG_STREAM_PATH",
    "CLUSTER_SCOPE_DELIMITER",
    "CORE_GROUP_LABEL",
    "EVENT_STREAM_MEDIA_TYPE",
    "HYDRATION_TOKEN",
    "MIXED_CLUSTER_TYPE",
    "MULTIPLE_CLUSTER_VERSIONS",
    "STATUS_ERROR",
    "STATUS_SUCCESS",
    "VERB_LIST",
]
