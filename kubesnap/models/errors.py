"""Error types raised by the snapshot core."""

from __future__ import annotations


class SnapshotError(Exception):
    """Base exception for snapshot errors."""


class ScopeValidationError(SnapshotError):
    """Raised when a scope or filter string is malformed or missing."""


class PermissionDeniedError(SnapshotError):
    """Raised when RBAC denies access to a domain."""

    def __init__(self, domain: str, resource: str) -> None:
        self.domain = domain
        self.resource = resource
        super().__init__(f"permission denied for domain {domain} ({resource})")


class UpstreamError(SnapshotError):
    """Raised when a collaborator (builder, list, query) fails."""


class DomainNotRegisteredError(UpstreamError):
    """Raised when no builder is registered for a domain."""

    def __init__(self, domain: str) -> None:
        self.domain = domain
        super().__init__(f"snapshot domain {domain!r} not registered")


class MergeError(SnapshotError):
    """Raised when per-cluster snapshots cannot be combined."""


class StreamTransportError(SnapshotError):
    """Raised when a stream frame cannot be encoded or written."""


def is_permission_denied(err: BaseException | None) -> bool:
    """Return True if err, or anything it was raised from, is a permission denial."""
    seen: set[int] = set()
    while err is not None and id(err) not in seen:
        if isinstance(err, PermissionDeniedError):
            return True
        seen.add(id(err))
        err = err.__cause__ or err.__context__
    return False


__all__ = [
    "DomainNotRegisteredError",
    "MergeError",
    "PermissionDeniedError",
    "ScopeValidationError",
    "SnapshotError",
    "StreamTransportError",
    "UpstreamError",
    "is_permission_denied",
]
