"""Settings and job state models."""

from kubesnap.models.state.manual_refresh import ManualRefreshJob
from kubesnap.models.state.settings import (
    ConfigError,
    ConfigLoadError,
    ConfigManager,
    SnapshotSettings,
)

__all__ = [
    "ConfigError",
    "ConfigLoadError",
    "ConfigManager",
    "ManualRefreshJob",
    "SnapshotSettings",
]
