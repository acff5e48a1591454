"""Base class for class-based snapshot domain builders."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from kubesnap.models.snapshot.snapshot import Snapshot


class DomainBuilder(ABC):
    """Base domain builder.

    A builder is registered once per domain name and must be safe to call
    concurrently for distinct scopes. Given fixed cluster state, repeated
    calls for the same scope return equivalent payloads.
    """

    domain: str = ""

    @abstractmethod
    async def build_snapshot(self, scope: str) -> Snapshot:
        """Build an unstamped snapshot for the scope.

        Returns:
            Snapshot carrying domain, scope, version, payload and stats. The
            service assigns sequence, checksum and timing fields.
        """
        ...

    async def __call__(self, scope: str) -> Snapshot:
        return await self.build_snapshot(scope)
