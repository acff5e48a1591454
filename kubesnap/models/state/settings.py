"""Snapshot service settings models."""

from __future__ import annotations

import logging
from pathlib import Path

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from kubesnap.constants.defaults import (
    BUILD_TIMEOUT_SECONDS_DEFAULT,
    CACHE_MAX_ENTRIES_DEFAULT,
    CACHE_TTL_SECONDS_DEFAULT,
    CATALOG_FAILURE_THRESHOLD_DEFAULT,
    FANOUT_WORKERS_DEFAULT,
    MANUAL_REFRESH_ATTEMPTS_DEFAULT,
    MANUAL_REFRESH_RETRY_DELAY_DEFAULT,
    SYNC_POLL_INTERVAL_SECONDS_DEFAULT,
)
from kubesnap.constants.limits import FANOUT_WORKERS_MAX, FANOUT_WORKERS_MIN

logger = logging.getLogger(__name__)


class SnapshotSettings(BaseModel):
    """Snapshot service settings model with validation."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    # Cache
    cache_ttl_seconds: float = Field(default=CACHE_TTL_SECONDS_DEFAULT, gt=0)
    cache_max_entries: int = Field(default=CACHE_MAX_ENTRIES_DEFAULT, ge=1)

    # Builds
    build_timeout_seconds: float = Field(default=BUILD_TIMEOUT_SECONDS_DEFAULT, gt=0)
    fanout_workers: int = Field(
        default=FANOUT_WORKERS_DEFAULT, ge=FANOUT_WORKERS_MIN, le=FANOUT_WORKERS_MAX
    )

    # Tracker / catalog stream
    sync_poll_interval_seconds: float = Field(
        default=SYNC_POLL_INTERVAL_SECONDS_DEFAULT, gt=0
    )
    catalog_failure_threshold: int = Field(
        default=CATALOG_FAILURE_THRESHOLD_DEFAULT, ge=0
    )

    # Manual refresh
    manual_refresh_attempts: int = Field(default=MANUAL_REFRESH_ATTEMPTS_DEFAULT, ge=1)
    manual_refresh_retry_delay_seconds: float = Field(
        default=MANUAL_REFRESH_RETRY_DELAY_DEFAULT, ge=0
    )


class ConfigError(Exception):
    """Base exception for configuration errors."""


class ConfigLoadError(ConfigError):
    """Raised when settings fail to load."""


class ConfigManager:
    """Loads SnapshotSettings from a YAML file."""

    def __init__(self, path: str | Path | None = None) -> None:
        self.path = Path(path) if path is not None else None

    def load(self, path: str | Path | None = None) -> SnapshotSettings:
        """Load settings, falling back to defaults when no file exists.

        Raises:
            ConfigLoadError: If the file cannot be read, parsed or validated.
        """
        target = Path(path) if path is not None else self.path
        if target is None or not target.exists():
            logger.debug("No settings file at %s, using defaults", target)
            return SnapshotSettings()

        try:
            raw = yaml.safe_load(target.read_text(encoding="utf-8"))
        except (OSError, yaml.YAMLError) as e:
            raise ConfigLoadError(f"Failed to read settings from {target}: {e}") from e

        if raw is None:
            return SnapshotSettings()
        if not isinstance(raw, dict):
            raise ConfigLoadError(f"Settings file {target} must contain a mapping")

        try:
            settings = SnapshotSettings.model_validate(raw)
        except ValidationError as e:
            raise ConfigLoadError(f"Invalid settings in {target}: {e}") from e

        logger.info("Loaded snapshot settings from %s", target)
        return settings


__all__ = ["ConfigError", "ConfigLoadError", "ConfigManager", "SnapshotSettings"]
