"""Snapshot build service: permission gate, TTL cache and singleflight.

Every snapshot request flows through ``SnapshotBuildService.build``:

1. the domain's static RBAC requirements are evaluated;
2. unless the caller is inside ``cache_bypass()``, a fresh cached snapshot is
   returned;
3. concurrent requests for the same key join one in-flight build task
   (bypass requests use their own key, so they never wait on, or satisfy,
   normal requests);
4. the leader re-checks the cache, runs the domain builder under the build
   deadline, stamps sequence/checksum/timing, records telemetry and caches
   complete results.
"""

from __future__ import annotations

import asyncio
import copy
import itertools
import logging
import time
import uuid
from collections.abc import Awaitable, Callable
from functools import partial
from typing import Any, TypeVar

from pydantic import BaseModel
from pydantic_core import PydanticSerializationError

from kubesnap.constants.enums import JobState, SnapshotDomain
from kubesnap.constants.values import BYPASS_FLIGHT_SUFFIX
from kubesnap.controllers.snapshot.context import (
    cache_bypass,
    cluster_meta_scope,
    fanout_limit_scope,
    has_cache_bypass,
)
from kubesnap.controllers.snapshot.permissions import (
    PermissionCheck,
    PermissionChecker,
    default_permission_checks,
)
from kubesnap.controllers.snapshot.registry import DomainRegistry
from kubesnap.controllers.snapshot.telemetry import TelemetryRecorder
from kubesnap.models.cache.snapshot_cache import SnapshotCache, cache_key
from kubesnap.models.errors import PermissionDeniedError, UpstreamError
from kubesnap.models.snapshot.payloads import ClusterMeta
from kubesnap.models.snapshot.snapshot import Snapshot
from kubesnap.models.state.manual_refresh import ManualRefreshJob
from kubesnap.models.state.settings import SnapshotSettings
from kubesnap.utils.checksum import checksum_payload

logger = logging.getLogger(__name__)

T = TypeVar("T")


def _now_ms() -> int:
    return int(time.time() * 1000)


def _copy_payload(payload: Any) -> Any:
    if isinstance(payload, BaseModel):
        return payload.model_copy(deep=True)
    return copy.deepcopy(payload)


class SnapshotBuildService:
    """Builds snapshots through registered domain builders.

    Each instance owns its cache, in-flight table and sequence counter, so
    several services (one per cluster) can run side by side.
    """

    def __init__(
        self,
        registry: DomainRegistry,
        *,
        telemetry: TelemetryRecorder | None = None,
        cluster: ClusterMeta | None = None,
        checker: PermissionChecker | None = None,
        permission_checks: dict[SnapshotDomain, PermissionCheck] | None = None,
        settings: SnapshotSettings | None = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._registry = registry
        self._telemetry = telemetry
        self._cluster = cluster or ClusterMeta()
        self._settings = settings or SnapshotSettings()
        self._checker = checker
        if checker is None:
            self._checks: dict[SnapshotDomain, PermissionCheck] = {}
        elif permission_checks is None:
            self._checks = default_permission_checks()
        else:
            self._checks = dict(permission_checks)
        self._cache = SnapshotCache(
            ttl_seconds=self._settings.cache_ttl_seconds,
            max_entries=self._settings.cache_max_entries,
            clock=clock,
        )
        self._inflight: dict[str, asyncio.Task[Snapshot]] = {}
        self._sequence = itertools.count(1)
        logger.info(
            "Snapshot service created for cluster %s (permission checks: %s)",
            self._cluster.cluster_id or "<default>",
            "on" if self._checks else "off",
        )

    @property
    def cluster(self) -> ClusterMeta:
        return self._cluster

    @property
    def cache(self) -> SnapshotCache:
        return self._cache

    @property
    def settings(self) -> SnapshotSettings:
        return self._settings

    # ------------------------------------------------------------------
    # Build
    # ------------------------------------------------------------------

    async def build(self, domain: str, scope: str) -> Snapshot:
        """Return a snapshot for the requested domain and scope.

        Raises:
            PermissionDeniedError: If RBAC denies the domain.
            UpstreamError: If the builder fails, times out or is missing.
        """
        domain = str(domain)
        with cluster_meta_scope(self._cluster), fanout_limit_scope(
            self._settings.fanout_workers
        ):
            await self._ensure_permissions(domain, scope)

            key = cache_key(domain, scope)
            bypass = has_cache_bypass()
            if not bypass:
                cached = self._cache.get(key)
                if cached is not None:
                    logger.debug("Snapshot cache hit for %s", key)
                    return self._detach(cached)

            flight_key = f"{key}{BYPASS_FLIGHT_SUFFIX}" if bypass else key
            existing = self._inflight.get(flight_key)
            if existing is not None:
                logger.debug("Joining in-flight build for %s", flight_key)
                return self._detach(await asyncio.shield(existing))

            task = asyncio.create_task(self._build_once(domain, scope, key, bypass))
            self._inflight[flight_key] = task
            task.add_done_callback(partial(self._finish_flight, flight_key))
            return self._detach(await asyncio.shield(task))

    @staticmethod
    def _detach(snap: Snapshot) -> Snapshot:
        """Give the caller its own payload so the published one stays intact."""
        return snap.model_copy(update={"payload": _copy_payload(snap.payload)})

    def _finish_flight(self, flight_key: str, task: asyncio.Task[Snapshot]) -> None:
        if self._inflight.get(flight_key) is task:
            self._inflight.pop(flight_key, None)
        # Mark the outcome as retrieved; every waiter may have been cancelled.
        if not task.cancelled():
            task.exception()

    async def _build_once(
        self, domain: str, scope: str, key: str, bypass: bool
    ) -> Snapshot:
        if not bypass:
            cached = self._cache.get(key)
            if cached is not None:
                return cached

        logger.debug("Building snapshot %s (bypass=%s)", key, bypass)
        started_at_ms = _now_ms()
        start = time.perf_counter()
        try:
            snap = await asyncio.wait_for(
                self._registry.build(domain, scope),
                timeout=self._settings.build_timeout_seconds,
            )
            if snap is None:
                raise UpstreamError(f"builder for {domain} returned no snapshot")
        except asyncio.TimeoutError as e:
            error = UpstreamError(
                f"snapshot build for {domain} timed out after "
                f"{self._settings.build_timeout_seconds}s"
            )
            self._record_failure(domain, scope, self._elapsed_ms(start), error)
            raise error from e
        except Exception as e:
            self._record_failure(domain, scope, self._elapsed_ms(start), e)
            raise

        stamped = self._stamp(snap, self._elapsed_ms(start), started_at_ms)
        stats = stamped.stats
        self._record(
            domain,
            scope,
            stats.build_duration_ms,
            None,
            truncated=stats.truncated,
            total_items=stats.total_items,
            warnings=stats.warnings,
            batch_index=stats.batch_index,
            total_batches=stats.total_batches,
            batch_size=stats.batch_size,
            is_final=stats.is_final_batch,
            time_to_first_batch_ms=stats.time_to_first_row_ms,
        )
        if stamped.cacheable:
            await self._cache.set(key, stamped)
        else:
            logger.debug("Not caching partial snapshot %s", key)
        return stamped

    def _stamp(self, snap: Snapshot, duration_ms: int, started_at_ms: int) -> Snapshot:
        stats_update = {
            "build_duration_ms": duration_ms,
            "build_started_at_unix": started_at_ms,
        }
        if snap.stats.time_to_first_row_ms == 0:
            stats_update["time_to_first_row_ms"] = duration_ms

        checksum = snap.checksum
        if snap.payload is not None:
            try:
                checksum = checksum_payload(snap.payload)
            except (PydanticSerializationError, TypeError, ValueError) as e:
                logger.warning("Could not checksum %s payload: %s", snap.domain, e)

        return snap.model_copy(
            update={
                "generated_at": _now_ms(),
                "sequence": next(self._sequence),
                "checksum": checksum,
                "payload": _copy_payload(snap.payload),
                "stats": snap.stats.model_copy(update=stats_update),
            }
        )

    @staticmethod
    def _elapsed_ms(start: float) -> int:
        return int((time.perf_counter() - start) * 1000)

    # ------------------------------------------------------------------
    # Permissions
    # ------------------------------------------------------------------

    async def _ensure_permissions(self, domain: str, scope: str) -> None:
        if self._checker is None or not self._checks:
            return
        # Placeholders raise their own denial; checking again would only
        # cost an extra access review.
        if self._registry.is_permission_denied_domain(domain):
            return
        check = self._checks.get(SnapshotDomain.from_name(domain))
        if check is None:
            return

        start = time.perf_counter()
        try:
            allowed = await check.allows(self._checker)
        except Exception as e:
            self._record_failure(domain, scope, self._elapsed_ms(start), e)
            raise
        if allowed:
            return

        denied = PermissionDeniedError(domain, check.resource)
        logger.warning("Permission denied for %s (%s)", domain, check.resource)
        self._record_failure(domain, scope, self._elapsed_ms(start), denied)
        raise denied

    # ------------------------------------------------------------------
    # Telemetry
    # ------------------------------------------------------------------

    def _record_failure(
        self, domain: str, scope: str, duration_ms: int, error: BaseException
    ) -> None:
        self._record(
            domain,
            scope,
            duration_ms,
            error,
            is_final=True,
            time_to_first_batch_ms=duration_ms,
        )

    def _record(
        self,
        domain: str,
        scope: str,
        duration_ms: int,
        error: BaseException | None,
        **fields: object,
    ) -> None:
        if self._telemetry is None:
            return
        self._telemetry.record_snapshot(
            domain,
            scope,
            duration_ms,
            error,
            cluster_id=self._cluster.cluster_id,
            cluster_name=self._cluster.cluster_name,
            **fields,  # type: ignore[arg-type]
        )

    # ------------------------------------------------------------------
    # Manual refresh
    # ------------------------------------------------------------------

    async def manual_refresh(
        self, domain: str, scope: str, reason: str = ""
    ) -> ManualRefreshJob:
        """Run the domain's refresh hook, then rebuild bypassing the cache.

        Both stages are retried with exponential backoff. The returned job is
        ``succeeded`` or ``failed``; cancellation marks it ``cancelled`` and
        propagates.
        """
        job = ManualRefreshJob(
            id=uuid.uuid4().hex,
            domain=str(domain),
            scope=scope,
            reason=reason,
            queued_at=_now_ms(),
        )
        job.state = JobState.RUNNING
        job.started_at = _now_ms()
        logger.info("Manual refresh %s started for %s", job.id, job.domain)

        try:
            with fanout_limit_scope(self._settings.fanout_workers):
                await asyncio.wait_for(
                    self._run_manual_job(job),
                    timeout=self._settings.build_timeout_seconds,
                )
        except asyncio.TimeoutError:
            job.state = JobState.FAILED
            if not job.error:
                job.error = "manual refresh timed out"
        except asyncio.CancelledError:
            job.state = JobState.CANCELLED
            job.finished_at = _now_ms()
            raise

        job.finished_at = _now_ms()
        logger.info("Manual refresh %s finished: %s", job.id, job.state.value)
        return job

    async def _run_manual_job(self, job: ManualRefreshJob) -> None:
        try:
            result = await self._retry(
                lambda: self._registry.manual_refresh(job.domain, job.scope)
            )
        except Exception as e:
            job.state = JobState.FAILED
            job.error = str(e)
            return

        try:
            with cache_bypass():
                snapshot = await self._retry(lambda: self.build(job.domain, job.scope))
        except Exception as e:
            job.state = JobState.FAILED
            job.error = str(e)
            return

        job.state = JobState.SUCCEEDED
        job.latest_version = snapshot.version
        if result is not None and result.latest_version > 0:
            job.latest_version = result.latest_version

    async def _retry(self, fn: Callable[[], Awaitable[T]]) -> T:
        attempts = max(1, self._settings.manual_refresh_attempts)
        delay = self._settings.manual_refresh_retry_delay_seconds or 1.0
        cap = self._settings.build_timeout_seconds
        for attempt in range(1, attempts + 1):
            try:
                return await fn()
            except Exception as e:
                if attempt == attempts:
                    raise
                logger.warning(
                    "Manual refresh attempt %d/%d failed: %s", attempt, attempts, e
                )
            await asyncio.sleep(delay)
            delay = min(delay * 2, cap)
        raise UpstreamError("manual operation retries exhausted")


__all__ = ["SnapshotBuildService"]
