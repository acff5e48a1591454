"""Request-scoped values carried through ``contextvars``.

``asyncio.create_task`` copies the current context, so values set by a
caller are visible to the singleflight leader and the domain builder it runs.
"""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager
from contextvars import ContextVar

from kubesnap.constants.limits import MAX_WORKERS
from kubesnap.constants.values import CLUSTER_SCOPE_DELIMITER
from kubesnap.models.snapshot.payloads import ClusterMeta

_cache_bypass: ContextVar[bool] = ContextVar("kubesnap_cache_bypass", default=False)
_cluster_meta: ContextVar[ClusterMeta | None] = ContextVar(
    "kubesnap_cluster_meta", default=None
)
_fanout_limit: ContextVar[int] = ContextVar("kubesnap_fanout_limit", default=MAX_WORKERS)


@contextmanager
def cache_bypass() -> Iterator[None]:
    """Mark builds inside the block as cache-bypassing."""
    token = _cache_bypass.set(True)
    try:
        yield
    finally:
        _cache_bypass.reset(token)


def has_cache_bypass() -> bool:
    return _cache_bypass.get()


@contextmanager
def cluster_meta_scope(meta: ClusterMeta) -> Iterator[None]:
    """Expose the cluster identity to builders running inside the block."""
    token = _cluster_meta.set(meta)
    try:
        yield
    finally:
        _cluster_meta.reset(token)


def current_cluster_meta() -> ClusterMeta:
    """Return the cluster identity of the current build, or an empty one."""
    meta = _cluster_meta.get()
    return meta if meta is not None else ClusterMeta()


@contextmanager
def fanout_limit_scope(limit: int) -> Iterator[None]:
    """Bound concurrent upstream calls made by builders inside the block."""
    token = _fanout_limit.set(limit)
    try:
        yield
    finally:
        _fanout_limit.reset(token)


def current_fanout_limit() -> int:
    return _fanout_limit.get()


def split_cluster_scope(scope: str) -> tuple[str, str]:
    """Split ``"<clusterId>|<scope>"`` into its parts.

    Scopes without a cluster prefix return an empty cluster id.
    """
    trimmed = scope.strip()
    if CLUSTER_SCOPE_DELIMITER not in trimmed:
        return "", trimmed
    cluster_id, _, rest = trimmed.partition(CLUSTER_SCOPE_DELIMITER)
    return cluster_id.strip(), rest.strip()


__all__ = [
    "cache_bypass",
    "cluster_meta_scope",
    "current_cluster_meta",
    "current_fanout_limit",
    "fanout_limit_scope",
    "has_cache_bypass",
    "split_cluster_scope",
]
