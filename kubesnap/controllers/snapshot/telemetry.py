"""Per-domain snapshot build telemetry."""

from __future__ import annotations

import threading
import time
from collections.abc import Sequence

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from kubesnap.constants.values import (
    CATALOG_FALLBACK_TOKEN,
    HYDRATION_TOKEN,
    STATUS_ERROR,
    STATUS_SUCCESS,
)


class SnapshotStatus(BaseModel):
    """Latest build outcome and running totals for one domain."""

    model_config = ConfigDict(populate_by_name=True, alias_generator=to_camel)

    domain: str
    scope: str = ""
    cluster_id: str = ""
    cluster_name: str = ""
    last_status: str = ""
    last_error: str = ""
    last_warning: str = ""
    warnings: list[str] = Field(default_factory=list)
    last_duration_ms: int = 0
    last_updated: int = 0
    success_count: int = 0
    failure_count: int = 0
    total_duration_ms: int = 0
    average_duration_ms: int = 0
    truncated: bool = False
    total_items: int = 0
    last_batch_index: int = 0
    last_batch_size: int = 0
    total_batches: int = 0
    is_final_batch: bool = False
    time_to_first_batch_ms: int = 0
    fallback_count: int = 0
    hydration_count: int = 0


class TelemetryRecorder:
    """Thread-safe recorder of snapshot build outcomes."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._snapshots: dict[str, SnapshotStatus] = {}

    def record_snapshot(
        self,
        domain: str,
        scope: str,
        duration_ms: int,
        error: BaseException | None = None,
        *,
        cluster_id: str = "",
        cluster_name: str = "",
        truncated: bool = False,
        total_items: int = 0,
        warnings: Sequence[str] | None = None,
        batch_index: int = 0,
        total_batches: int = 0,
        batch_size: int = 0,
        is_final: bool = True,
        time_to_first_batch_ms: int = 0,
    ) -> None:
        if not domain:
            return

        with self._lock:
            entry = self._snapshots.get(domain)
            if entry is None:
                entry = SnapshotStatus(domain=domain)
                self._snapshots[domain] = entry

            entry.scope = scope
            entry.cluster_id = cluster_id
            entry.cluster_name = cluster_name
            entry.last_duration_ms = duration_ms
            entry.last_updated = int(time.time() * 1000)
            entry.truncated = truncated
            entry.total_items = total_items
            entry.last_batch_index = batch_index
            entry.total_batches = total_batches
            entry.last_batch_size = batch_size
            entry.is_final_batch = is_final
            if batch_index == 0 and time_to_first_batch_ms > 0:
                entry.time_to_first_batch_ms = time_to_first_batch_ms

            kept = [w for w in (warnings or ()) if w]
            entry.warnings = kept
            entry.last_warning = "; ".join(kept)
            lowered = [w.lower() for w in kept]
            if any(CATALOG_FALLBACK_TOKEN in w for w in lowered):
                entry.fallback_count += 1
            if any(HYDRATION_TOKEN in w for w in lowered):
                entry.hydration_count += 1

            if error is not None:
                entry.last_status = STATUS_ERROR
                entry.last_error = str(error)
                entry.failure_count += 1
            else:
                entry.last_status = STATUS_SUCCESS
                entry.last_error = ""
                entry.success_count += 1

            entry.total_duration_ms += entry.last_duration_ms
            calls = entry.success_count + entry.failure_count
            if calls:
                entry.average_duration_ms = entry.total_duration_ms // calls

    def status(self, domain: str) -> SnapshotStatus | None:
        with self._lock:
            entry = self._snapshots.get(domain)
            return entry.model_copy(deep=True) if entry is not None else None

    def summary(self) -> list[SnapshotStatus]:
        """Return copies of every domain status, sorted by domain."""
        with self._lock:
            return [
                self._snapshots[name].model_copy(deep=True)
                for name in sorted(self._snapshots)
            ]


__all__ = ["SnapshotStatus", "TelemetryRecorder"]
