"""Incremental per-namespace workload presence tracking.

Answering "does namespace X have workloads" by listing six resource kinds per
namespace is expensive. The tracker instead keeps live per-kind key sets fed
by informer events. When events may have been missed (a delete for a key it
never saw, or a tombstone for an unseen namespace) the namespace degrades to
UNKNOWN so callers fall back to an authoritative listing.
"""

from __future__ import annotations

import asyncio
import logging
import threading
import time
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from typing import Any, Protocol

from kubesnap.constants.enums import WorkloadKind, WorkloadPresence
from kubesnap.constants.timeouts import INFORMER_SYNC_POLL_INTERVAL
from kubesnap.models.state.settings import SnapshotSettings

logger = logging.getLogger(__name__)


class Informer(Protocol):
    """Minimal shared-informer surface the tracker needs."""

    def add_event_handler(
        self,
        on_add: Callable[[Any], None],
        on_update: Callable[[Any, Any], None],
        on_delete: Callable[[Any], None],
    ) -> None: ...

    def has_synced(self) -> bool: ...


@dataclass(frozen=True)
class DeletedFinalStateUnknown:
    """Tombstone delivered when a delete was observed only through a relist."""

    key: str
    obj: Any = None


@dataclass
class _NamespaceState:
    objects: dict[WorkloadKind, set[str]] = field(default_factory=dict)
    total: int = 0
    unknown: bool = False

    def add(self, kind: WorkloadKind, key: str) -> bool:
        keys = self.objects.setdefault(kind, set())
        if key in keys:
            return False
        keys.add(key)
        self.total += 1
        return True

    def remove(self, kind: WorkloadKind, key: str) -> bool:
        keys = self.objects.get(kind)
        if not keys or key not in keys:
            return False
        keys.discard(key)
        if not keys:
            del self.objects[kind]
        if self.total > 0:
            self.total -= 1
        return True

    def should_retain(self) -> bool:
        return self.unknown or self.total > 0


def _metadata_field(obj: Any, name: str) -> str:
    if isinstance(obj, Mapping):
        meta = obj.get("metadata")
        value = meta.get(name) if isinstance(meta, Mapping) else obj.get(name)
    else:
        meta = getattr(obj, "metadata", None)
        value = getattr(meta, name, None) if meta is not None else getattr(obj, name, None)
    return value if isinstance(value, str) else ""


def extract_namespace_and_key(obj: Any) -> tuple[str, str] | None:
    """Return ``(namespace, "namespace/name")`` for an object or tombstone."""
    if obj is None:
        return None
    if isinstance(obj, DeletedFinalStateUnknown):
        return extract_namespace_and_key(obj.obj)
    namespace = _metadata_field(obj, "namespace")
    name = _metadata_field(obj, "name")
    if not namespace or not name:
        return None
    return namespace, f"{namespace}/{name}"


class NamespaceWorkloadTracker:
    """Tracks which namespaces currently hold workloads.

    Event handlers may run on watch threads; a single lock guards the
    namespace map.
    """

    def __init__(
        self,
        informers: Mapping[WorkloadKind, Informer] | None = None,
        poll_interval: float = INFORMER_SYNC_POLL_INTERVAL,
    ) -> None:
        self._lock = threading.Lock()
        self._namespaces: dict[str, _NamespaceState] = {}
        self._sync_fns: list[Callable[[], bool]] = []
        self._poll_interval = poll_interval
        self._synced = informers is None
        for kind, informer in (informers or {}).items():
            self._register_informer(informer, WorkloadKind(kind))
        logger.info(
            "Namespace workload tracker created (%d informers)", len(self._sync_fns)
        )

    @classmethod
    def from_settings(
        cls,
        settings: SnapshotSettings,
        informers: Mapping[WorkloadKind, Informer] | None = None,
    ) -> NamespaceWorkloadTracker:
        return cls(informers, poll_interval=settings.sync_poll_interval_seconds)

    def _register_informer(self, informer: Informer | None, kind: WorkloadKind) -> None:
        if informer is None:
            return
        self._sync_fns.append(informer.has_synced)
        informer.add_event_handler(
            lambda obj: self.handle_add(obj, kind),
            lambda _old, new: self.handle_add(new, kind),
            lambda obj: self.handle_delete(obj, kind),
        )

    # ------------------------------------------------------------------
    # Sync
    # ------------------------------------------------------------------

    @property
    def synced(self) -> bool:
        return self._synced

    def _all_synced(self) -> bool:
        return all(fn() for fn in self._sync_fns)

    async def wait_for_sync(self, timeout: float | None = None) -> bool:
        """Wait until every informer reports synced.

        Returns False if ``timeout`` elapses first. Once True, the result is
        remembered and later calls return immediately.
        """
        if self._synced:
            return True
        deadline = None if timeout is None else time.monotonic() + timeout
        while not self._all_synced():
            if deadline is not None and time.monotonic() >= deadline:
                return False
            await asyncio.sleep(self._poll_interval)
        self._synced = True
        logger.debug("Namespace workload tracker synced")
        return True

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def has_workloads(self, namespace: str) -> tuple[bool, bool]:
        """Return ``(has_workloads, known)`` for a namespace.

        ``known`` is False before the initial sync and while the namespace is
        marked unknown. Namespaces never seen are confidently empty.
        """
        if not namespace:
            return False, True
        if not self._synced:
            return False, False
        with self._lock:
            state = self._namespaces.get(namespace)
            if state is None:
                return False, True
            return state.total > 0, not state.unknown

    def presence(self, namespace: str) -> WorkloadPresence:
        has, known = self.has_workloads(namespace)
        if not known:
            return WorkloadPresence.UNKNOWN
        return WorkloadPresence.PRESENT if has else WorkloadPresence.ABSENT

    def mark_unknown(self, namespace: str) -> None:
        """Force ``known=False`` for a namespace until a new add arrives."""
        if not namespace:
            return
        with self._lock:
            self._ensure_namespace_locked(namespace).unknown = True

    # ------------------------------------------------------------------
    # Event handlers
    # ------------------------------------------------------------------

    def handle_add(self, obj: Any, kind: WorkloadKind) -> None:
        extracted = extract_namespace_and_key(obj)
        if extracted is None:
            return
        namespace, key = extracted
        with self._lock:
            state = self._ensure_namespace_locked(namespace)
            if state.add(kind, key):
                state.unknown = False

    def handle_delete(self, obj: Any, kind: WorkloadKind) -> None:
        extracted = extract_namespace_and_key(obj)
        if extracted is None:
            return
        namespace, key = extracted
        with self._lock:
            state = self._namespaces.get(namespace)
            if state is None:
                # No record of prior state, so the add was missed.
                self._namespaces[namespace] = _NamespaceState(unknown=True)
                return
            if not state.remove(kind, key):
                state.unknown = True
            elif not state.should_retain():
                del self._namespaces[namespace]

    def _ensure_namespace_locked(self, namespace: str) -> _NamespaceState:
        state = self._namespaces.get(namespace)
        if state is None:
            state = _NamespaceState()
            self._namespaces[namespace] = state
        return state

    def tracked_namespaces(self) -> list[str]:
        with self._lock:
            return sorted(self._namespaces)


__all__ = [
    "DeletedFinalStateUnknown",
    "Informer",
    "NamespaceWorkloadTracker",
    "extract_namespace_and_key",
]
