"""Tests for snapshot settings loading."""

from __future__ import annotations

from pathlib import Path

import pytest
from pydantic import ValidationError

from kubesnap.models.state.settings import ConfigLoadError, ConfigManager, SnapshotSettings


class TestSnapshotSettings:
    def test_defaults(self) -> None:
        settings = SnapshotSettings()
        assert settings.cache_ttl_seconds == 5.0
        assert settings.build_timeout_seconds == 30.0
        assert settings.fanout_workers == 8
        assert settings.catalog_failure_threshold == 3
        assert settings.manual_refresh_attempts == 3

    def test_rejects_non_positive_ttl(self) -> None:
        with pytest.raises(ValidationError):
            SnapshotSettings(cache_ttl_seconds=0)

    def test_rejects_fanout_out_of_range(self) -> None:
        with pytest.raises(ValidationError):
            SnapshotSettings(fanout_workers=0)
        with pytest.raises(ValidationError):
            SnapshotSettings(fanout_workers=65)


class TestConfigManager:
    """Tests for ConfigManager.load."""

    def test_missing_file_returns_defaults(self, tmp_path: Path) -> None:
        settings = ConfigManager(tmp_path / "absent.yaml").load()
        assert settings == SnapshotSettings()

    def test_no_path_returns_defaults(self) -> None:
        assert ConfigManager().load() == SnapshotSettings()

    def test_empty_file_returns_defaults(self, tmp_path: Path) -> None:
        path = tmp_path / "settings.yaml"
        path.write_text("", encoding="utf-8")
        assert ConfigManager(path).load() == SnapshotSettings()

    def test_loads_overrides(self, tmp_path: Path) -> None:
        path = tmp_path / "settings.yaml"
        path.write_text(
            "cache_ttl_seconds: 2.5\nfanout_workers: 4\nunknown_key: 1\n",
            encoding="utf-8",
        )
        settings = ConfigManager().load(path)
        assert settings.cache_ttl_seconds == 2.5
        assert settings.fanout_workers == 4
        assert settings.build_timeout_seconds == 30.0

    def test_loads_component_knobs(self, tmp_path: Path) -> None:
        path = tmp_path / "settings.yaml"
        path.write_text(
            "fanout_workers: 2\n"
            "sync_poll_interval_seconds: 9\n"
            "catalog_failure_threshold: 0\n",
            encoding="utf-8",
        )
        settings = ConfigManager(path).load()
        assert settings.fanout_workers == 2
        assert settings.sync_poll_interval_seconds == 9.0
        assert settings.catalog_failure_threshold == 0

    def test_non_mapping_raises(self, tmp_path: Path) -> None:
        path = tmp_path / "settings.yaml"
        path.write_text("- a\n- b\n", encoding="utf-8")
        with pytest.raises(ConfigLoadError, match="mapping"):
            ConfigManager(path).load()

    def test_invalid_yaml_raises(self, tmp_path: Path) -> None:
        path = tmp_path / "settings.yaml"
        path.write_text("a: [unclosed\n", encoding="utf-8")
        with pytest.raises(ConfigLoadError):
            ConfigManager(path).load()

    def test_invalid_value_raises(self, tmp_path: Path) -> None:
        path = tmp_path / "settings.yaml"
        path.write_text("cache_max_entries: 0\n", encoding="utf-8")
        with pytest.raises(ConfigLoadError, match="Invalid settings"):
            ConfigManager(path).load()
