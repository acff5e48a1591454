"""Registry of snapshot domain builders."""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from kubesnap.models.errors import DomainNotRegisteredError, PermissionDeniedError
from kubesnap.models.snapshot.snapshot import Snapshot
from kubesnap.models.state.manual_refresh import ManualRefreshJob

logger = logging.getLogger(__name__)

BuildFunc = Callable[[str], Awaitable[Snapshot]]
ManualRefreshFunc = Callable[[str], Awaitable["ManualRefreshJob | None"]]


@dataclass(frozen=True)
class DomainConfig:
    """Registration record for one domain."""

    name: str
    build_snapshot: BuildFunc
    manual_refresh: ManualRefreshFunc | None = None
    permission_denied: bool = False


class DomainRegistry:
    """Maps domain names to their builders."""

    def __init__(self) -> None:
        self._domains: dict[str, DomainConfig] = {}

    def register(self, config: DomainConfig) -> None:
        """Register a domain.

        Raises:
            ValueError: If the name is empty, already registered, or the
                config has no builder.
        """
        name = str(config.name)
        if not name.strip():
            raise ValueError("domain name is required")
        if config.build_snapshot is None:
            raise ValueError(f"domain {name!r} requires a snapshot builder")
        if name in self._domains:
            raise ValueError(f"domain {name!r} already registered")
        self._domains[name] = config
        logger.debug("Registered snapshot domain %s", name)

    def get(self, name: str) -> DomainConfig | None:
        return self._domains.get(str(name))

    def list(self) -> list[DomainConfig]:
        return [self._domains[name] for name in sorted(self._domains)]

    def names(self) -> list[str]:
        return sorted(self._domains)

    def is_permission_denied_domain(self, name: str) -> bool:
        config = self._domains.get(str(name))
        return config is not None and config.permission_denied

    async def build(self, domain: str, scope: str) -> Snapshot:
        """Invoke the builder registered for the domain."""
        config = self._domains.get(str(domain))
        if config is None:
            raise DomainNotRegisteredError(str(domain))
        return await config.build_snapshot(scope)

    async def manual_refresh(self, domain: str, scope: str) -> ManualRefreshJob | None:
        """Run the domain's manual refresh hook, if it has one."""
        config = self._domains.get(str(domain))
        if config is None:
            raise DomainNotRegisteredError(str(domain))
        if config.manual_refresh is None:
            return None
        return await config.manual_refresh(scope)


def register_permission_denied_domain(
    registry: DomainRegistry, name: str, resource: str
) -> None:
    """Register a placeholder domain whose builds always fail with a denial.

    Used when startup preflight shows the identity cannot read the domain at
    all, so clients get a typed error instead of an unknown-domain error.
    """

    async def _denied(scope: str) -> Snapshot:
        raise PermissionDeniedError(str(name), resource)

    registry.register(
        DomainConfig(name=str(name), build_snapshot=_denied, permission_denied=True)
    )
    logger.info("Registered permission-denied placeholder for domain %s", name)


__all__ = [
    "BuildFunc",
    "DomainConfig",
    "DomainRegistry",
    "ManualRefreshFunc",
    "register_permission_denied_domain",
]
