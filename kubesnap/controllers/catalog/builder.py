"""Catalog browse domain builder."""

from __future__ import annotations

import logging
import math
import re
import time
from urllib.parse import parse_qs

from kubesnap.constants.enums import SnapshotDomain
from kubesnap.constants.limits import CATALOG_FAILURE_THRESHOLD
from kubesnap.controllers.base.domain_builder import DomainBuilder
from kubesnap.controllers.catalog.provider import (
    CatalogProvider,
    NamespaceGroupsGetter,
    ProviderGetter,
)
from kubesnap.controllers.snapshot.context import (
    current_cluster_meta,
    split_cluster_scope,
)
from kubesnap.controllers.snapshot.registry import DomainConfig, DomainRegistry
from kubesnap.models.catalog.catalog import (
    BrowseQueryOptions,
    CatalogNamespaceGroup,
    CatalogSnapshot,
    HealthStatus,
    QueryResult,
)
from kubesnap.models.errors import ScopeValidationError, UpstreamError
from kubesnap.models.snapshot.payloads import ClusterMeta
from kubesnap.models.snapshot.snapshot import Snapshot, SnapshotStats
from kubesnap.models.state.settings import SnapshotSettings

logger = logging.getLogger(__name__)

_BAD_ESCAPE = re.compile(r"%(?![0-9A-Fa-f]{2})")


def parse_browse_scope(scope: str) -> BrowseQueryOptions:
    """Parse a browse scope such as ``"c1|kind=Pod&namespace=a&limit=50"``.

    Raises:
        ScopeValidationError: On malformed percent escapes or ``;`` separators.
    """
    _, trimmed = split_cluster_scope(scope)
    if not trimmed:
        return BrowseQueryOptions()
    if ";" in trimmed:
        raise ScopeValidationError(f"invalid semicolon separator in scope {trimmed!r}")
    if _BAD_ESCAPE.search(trimmed):
        raise ScopeValidationError(f"invalid percent escape in scope {trimmed!r}")

    values = parse_qs(trimmed, keep_blank_values=True)

    def first(name: str) -> str:
        return values.get(name, [""])[0]

    limit = 0
    raw_limit = first("limit")
    if raw_limit:
        try:
            limit = int(raw_limit)
        except ValueError:
            logger.debug("Ignoring non-integer browse limit %r", raw_limit)

    return BrowseQueryOptions(
        kinds=values.get("kind", []),
        namespaces=values.get("namespace", []),
        search=first("search"),
        limit=limit,
        continue_token=first("continue"),
    )


def build_catalog_payload(
    result: QueryResult,
    opts: BrowseQueryOptions,
    health: HealthStatus,
    caches_ready: bool,
    force_final: bool,
    failure_threshold: int = CATALOG_FAILURE_THRESHOLD,
) -> tuple[CatalogSnapshot, bool]:
    """Build one catalog page and report whether it is truncated.

    Finality precedence: an unhealthy source always finalizes the page and
    drops the continue token; ``force_final`` finalizes; otherwise the page is
    never final while background caches are still warming.
    """
    start_offset = 0
    if opts.continue_token:
        try:
            parsed = int(opts.continue_token)
        except ValueError:
            parsed = -1
        if parsed >= 0:
            start_offset = parsed

    effective_limit = opts.limit if opts.limit > 0 else len(result.items)
    if effective_limit <= 0:
        effective_limit = 1

    batch_index = start_offset // effective_limit
    total_batches = math.ceil(result.total_items / effective_limit) if result.total_items > 0 else 0
    continue_token = result.continue_token
    is_final = continue_token == "" or result.total_items == 0

    if health.streaming_disabled(failure_threshold):
        is_final = True
        continue_token = ""
        if total_batches == 0:
            total_batches = batch_index + 1

    if force_final:
        is_final = True
        if total_batches == 0:
            total_batches = 1
    elif not caches_ready:
        is_final = False

    payload = CatalogSnapshot(
        items=list(result.items),
        continue_token=continue_token,
        total=result.total_items,
        resource_count=result.resource_count,
        kinds=list(result.kinds),
        namespaces=list(result.namespaces),
        batch_index=batch_index,
        batch_size=len(result.items),
        total_batches=total_batches,
        is_final=is_final,
    )
    truncated = continue_token != "" or (payload.total > 0 and len(payload.items) < payload.total)
    return payload, truncated


def normalize_selected_namespaces(namespaces: list[str]) -> list[str]:
    seen: set[str] = set()
    normalized: list[str] = []
    for namespace in namespaces:
        value = namespace.strip()
        if not value or value in seen:
            continue
        seen.add(value)
        normalized.append(value)
    return normalized


def build_catalog_namespace_groups(
    provider: CatalogProvider | None,
    meta: ClusterMeta,
    groups_getter: NamespaceGroupsGetter | None,
    selected: list[str],
) -> list[CatalogNamespaceGroup]:
    groups: list[CatalogNamespaceGroup] = list(groups_getter()) if groups_getter else []
    if not groups and provider is not None:
        namespaces = provider.namespaces()
        if namespaces:
            groups = [
                CatalogNamespaceGroup(
                    cluster_id=meta.cluster_id,
                    cluster_name=meta.cluster_name,
                    namespaces=list(namespaces),
                )
            ]
    if not groups:
        return []

    groups = [group.model_copy(deep=True) for group in groups]
    chosen = normalize_selected_namespaces(selected)
    if chosen:
        for group in groups:
            if not group.selected_namespaces:
                group.selected_namespaces = list(chosen)
    return groups


class CatalogBuilder(DomainBuilder):
    """Serves browse pages straight from the object catalog."""

    def __init__(
        self,
        provider_getter: ProviderGetter,
        domain: str = SnapshotDomain.CATALOG.value,
        namespace_groups: NamespaceGroupsGetter | None = None,
        failure_threshold: int = CATALOG_FAILURE_THRESHOLD,
    ) -> None:
        self.domain = domain
        self._provider_getter = provider_getter
        self._namespace_groups = namespace_groups
        self._failure_threshold = failure_threshold

    async def build_snapshot(self, scope: str) -> Snapshot:
        opts = parse_browse_scope(scope)

        provider = self._provider_getter()
        if provider is None:
            raise UpstreamError("object catalog service unavailable")

        result = provider.query(opts.to_query_options())
        health = provider.health()
        caches_ready = provider.caches_ready()

        meta = current_cluster_meta()
        payload, truncated = build_catalog_payload(
            result, opts, health, caches_ready, caches_ready, self._failure_threshold
        )
        payload.cluster_id = meta.cluster_id
        payload.cluster_name = meta.cluster_name
        payload.namespace_groups = build_catalog_namespace_groups(
            provider, meta, self._namespace_groups, opts.namespaces
        )
        if caches_ready and payload.total > 0:
            # Warm caches still honour pagination for limited scopes.
            if payload.continue_token == "":
                payload.is_final = True
                if payload.total_batches == 0:
                    payload.total_batches = 1
            else:
                payload.is_final = False
            payload.batch_size = len(payload.items)

        latency = provider.first_batch_latency()
        if latency > 0:
            payload.first_batch_latency_ms = int(latency * 1000)

        return Snapshot(
            domain=self.domain,
            scope=scope,
            version=time.time_ns(),
            payload=payload,
            stats=SnapshotStats(
                item_count=len(payload.items),
                total_items=result.total_items,
                truncated=truncated,
                batch_index=payload.batch_index,
                batch_size=payload.batch_size,
                total_batches=payload.total_batches,
                is_final_batch=payload.is_final,
                time_to_first_row_ms=payload.first_batch_latency_ms,
            ),
        )


def register_catalog_domains(
    registry: DomainRegistry,
    provider_getter: ProviderGetter,
    namespace_groups: NamespaceGroupsGetter | None = None,
    settings: SnapshotSettings | None = None,
) -> None:
    """Register the browse domain and the one used by the diff viewer."""
    failure_threshold = (settings or SnapshotSettings()).catalog_failure_threshold
    for domain in (SnapshotDomain.CATALOG, SnapshotDomain.CATALOG_DIFF):
        builder = CatalogBuilder(
            provider_getter, domain.value, namespace_groups, failure_threshold
        )
        registry.register(DomainConfig(name=domain.value, build_snapshot=builder))


__all__ = [
    "CatalogBuilder",
    "build_catalog_namespace_groups",
    "build_catalog_payload",
    "normalize_selected_namespaces",
    "parse_browse_scope",
    "register_catalog_domains",
]
