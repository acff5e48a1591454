"""Tests for snapshot envelope models and errors."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from kubesnap.constants.enums import JobState
from kubesnap.models.errors import (
    DomainNotRegisteredError,
    PermissionDeniedError,
    UpstreamError,
    is_permission_denied,
)
from kubesnap.models.snapshot.payloads import NamespaceSnapshot
from kubesnap.models.snapshot.snapshot import Snapshot, SnapshotStats
from kubesnap.models.state.manual_refresh import ManualRefreshJob

# =============================================================================
# Snapshot / SnapshotStats
# =============================================================================


class TestSnapshotStats:
    """Tests for the cacheable rule."""

    def test_unpaginated_is_cacheable(self) -> None:
        assert SnapshotStats().cacheable is True

    def test_truncated_is_not_cacheable(self) -> None:
        assert SnapshotStats(truncated=True).cacheable is False

    def test_non_final_batch_is_not_cacheable(self) -> None:
        assert SnapshotStats(total_batches=3, batch_index=0).cacheable is False

    def test_final_batch_is_cacheable(self) -> None:
        stats = SnapshotStats(total_batches=3, batch_index=2, is_final_batch=True)
        assert stats.cacheable is True

    def test_camel_case_dump(self) -> None:
        dumped = SnapshotStats(item_count=2, time_to_first_row_ms=7).model_dump(
            by_alias=True
        )
        assert dumped["itemCount"] == 2
        assert dumped["timeToFirstRowMs"] == 7
        assert dumped["isFinalBatch"] is False


class TestSnapshot:
    def test_frozen(self) -> None:
        snap = Snapshot(domain="pods")
        with pytest.raises(ValidationError):
            snap.version = 2  # type: ignore[misc]

    def test_model_copy_produces_new_instance(self) -> None:
        snap = Snapshot(domain="pods", version=1)
        updated = snap.model_copy(update={"sequence": 5})
        assert snap.sequence == 0
        assert updated.sequence == 5

    def test_cacheable_delegates_to_stats(self) -> None:
        snap = Snapshot(domain="pods", stats=SnapshotStats(truncated=True))
        assert snap.cacheable is False

    def test_payload_rows(self) -> None:
        payload = NamespaceSnapshot(namespaces=[{"name": "a"}, {"name": "b"}])
        assert payload.rows() == [{"name": "a"}, {"name": "b"}]


# =============================================================================
# ManualRefreshJob
# =============================================================================


class TestManualRefreshJob:
    def test_defaults_to_queued(self) -> None:
        job = ManualRefreshJob(id="job-1", domain="pods")
        assert job.state == JobState.QUEUED

    def test_job_id_alias(self) -> None:
        job = ManualRefreshJob(id="job-1", domain="pods")
        dumped = job.model_dump(by_alias=True)
        assert dumped["jobId"] == "job-1"
        assert dumped["latestVersion"] == 0


# =============================================================================
# Errors
# =============================================================================


class TestErrors:
    def test_permission_denied_message(self) -> None:
        err = PermissionDeniedError("nodes", "core/nodes")
        assert str(err) == "permission denied for domain nodes (core/nodes)"
        assert err.domain == "nodes"

    def test_domain_not_registered_is_upstream(self) -> None:
        assert isinstance(DomainNotRegisteredError("x"), UpstreamError)

    def test_is_permission_denied_direct(self) -> None:
        assert is_permission_denied(PermissionDeniedError("pods", "core/pods"))
        assert not is_permission_denied(UpstreamError("boom"))
        assert not is_permission_denied(None)

    def test_is_permission_denied_through_cause(self) -> None:
        try:
            try:
                raise PermissionDeniedError("pods", "core/pods")
            except PermissionDeniedError as inner:
                raise UpstreamError("wrapped") from inner
        except UpstreamError as outer:
            assert is_permission_denied(outer)
