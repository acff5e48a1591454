"""Snapshot envelope models."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class SnapshotStats(BaseModel):
    """Build and pagination metadata attached to a snapshot."""

    model_config = ConfigDict(
        populate_by_name=True, alias_generator=to_camel, frozen=True
    )

    item_count: int = 0
    total_items: int = 0
    truncated: bool = False
    batch_index: int = 0
    batch_size: int = 0
    total_batches: int = 0
    is_final_batch: bool = False
    warnings: list[str] = Field(default_factory=list)
    build_duration_ms: int = 0
    build_started_at_unix: int = 0
    time_to_first_row_ms: int = 0

    @property
    def cacheable(self) -> bool:
        """Whether a snapshot with these stats may be stored in the cache."""
        if self.truncated:
            return False
        return self.total_batches == 0 or self.is_final_batch


class Snapshot(BaseModel):
    """Versioned, checksummed unit of domain data.

    Snapshots are frozen: the service and merger produce new instances with
    ``model_copy(update=...)`` instead of mutating a published one.
    """

    model_config = ConfigDict(
        populate_by_name=True,
        alias_generator=to_camel,
        frozen=True,
        arbitrary_types_allowed=True,
    )

    domain: str
    scope: str = ""
    version: int = 0
    sequence: int = 0
    generated_at: int = 0
    checksum: str = ""
    payload: Any = None
    stats: SnapshotStats = Field(default_factory=SnapshotStats)

    @property
    def cacheable(self) -> bool:
        return self.stats.cacheable


__all__ = ["Snapshot", "SnapshotStats"]
