"""Per-domain RBAC requirements evaluated before each snapshot build.

Checking on every request keeps cached snapshots from outliving RBAC changes.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass
from typing import Protocol

from kubesnap.constants.enums import PermissionCheckMode, SnapshotDomain
from kubesnap.constants.values import CORE_GROUP_LABEL, VERB_LIST

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Decision:
    allowed: bool
    reason: str = ""


class PermissionChecker(Protocol):
    """Answers SelfSubjectAccessReview-style questions."""

    async def can(self, group: str, resource: str, verb: str) -> Decision: ...


@dataclass(frozen=True)
class PermissionRequirement:
    group: str
    resource: str
    verb: str = VERB_LIST

    @property
    def label(self) -> str:
        group = self.group.strip() or CORE_GROUP_LABEL
        return f"{group}/{self.resource}"


@dataclass(frozen=True)
class PermissionCheck:
    """Static requirement set for one domain."""

    requirements: tuple[PermissionRequirement, ...]
    mode: PermissionCheckMode
    resource: str

    async def allows(self, checker: PermissionChecker | None) -> bool:
        """Evaluate the requirements against the checker.

        ALL mode needs every requirement granted; ANY mode needs at least
        one. Checker errors propagate.
        """
        if checker is None or not self.requirements:
            return True
        if self.mode is PermissionCheckMode.ANY:
            for req in self.requirements:
                decision = await checker.can(req.group, req.resource, req.verb)
                if decision.allowed:
                    return True
            return False
        for req in self.requirements:
            decision = await checker.can(req.group, req.resource, req.verb)
            if not decision.allowed:
                return False
        return True


def list_permission(group: str, resource: str) -> PermissionRequirement:
    return PermissionRequirement(group=group, resource=resource, verb=VERB_LIST)


def permission_resource_list(reqs: Iterable[PermissionRequirement]) -> str:
    """Comma-join ``group/resource`` labels, rendering the core group as "core"."""
    return ",".join(req.label for req in reqs if req.resource)


def require_all(*reqs: PermissionRequirement) -> PermissionCheck:
    return PermissionCheck(
        requirements=tuple(reqs),
        mode=PermissionCheckMode.ALL,
        resource=permission_resource_list(reqs),
    )


def require_any(label: str, *reqs: PermissionRequirement) -> PermissionCheck:
    resource = label.strip() or permission_resource_list(reqs)
    return PermissionCheck(
        requirements=tuple(reqs),
        mode=PermissionCheckMode.ANY,
        resource=resource,
    )


def default_permission_checks() -> dict[SnapshotDomain, PermissionCheck]:
    """Map snapshot domains to the list permissions gating them.

    Multi-resource domains use ANY so a partial RBAC grant still renders the
    resources the identity can see; builders skip the ones it cannot.
    """
    return {
        SnapshotDomain.NAMESPACES: require_all(list_permission("", "namespaces")),
        SnapshotDomain.NAMESPACE_WORKLOADS: require_any(
            "workload resources",
            list_permission("", "pods"),
            list_permission("apps", "deployments"),
            list_permission("apps", "statefulsets"),
            list_permission("apps", "daemonsets"),
            list_permission("batch", "jobs"),
            list_permission("batch", "cronjobs"),
        ),
        SnapshotDomain.NAMESPACE_CONFIG: require_any(
            "core/configmaps,secrets",
            list_permission("", "configmaps"),
            list_permission("", "secrets"),
        ),
        SnapshotDomain.NAMESPACE_NETWORK: require_any(
            "network resources",
            list_permission("", "services"),
            list_permission("discovery.k8s.io", "endpointslices"),
            list_permission("networking.k8s.io", "ingresses"),
            list_permission("networking.k8s.io", "networkpolicies"),
        ),
        SnapshotDomain.NAMESPACE_STORAGE: require_all(
            list_permission("", "persistentvolumeclaims"),
        ),
        SnapshotDomain.NAMESPACE_AUTOSCALING: require_all(
            list_permission("autoscaling", "horizontalpodautoscalers"),
        ),
        SnapshotDomain.NAMESPACE_QUOTAS: require_any(
            "quota resources",
            list_permission("", "resourcequotas"),
            list_permission("", "limitranges"),
            list_permission("policy", "poddisruptionbudgets"),
        ),
        SnapshotDomain.NAMESPACE_RBAC: require_any(
            "rbac.authorization.k8s.io/roles,rolebindings,serviceaccounts",
            list_permission("rbac.authorization.k8s.io", "roles"),
            list_permission("rbac.authorization.k8s.io", "rolebindings"),
            list_permission("", "serviceaccounts"),
        ),
        SnapshotDomain.NAMESPACE_CUSTOM: require_all(
            list_permission("apiextensions.k8s.io", "customresourcedefinitions"),
        ),
        SnapshotDomain.NAMESPACE_HELM: require_all(list_permission("", "secrets")),
        SnapshotDomain.NAMESPACE_EVENTS: require_all(list_permission("", "events")),
        SnapshotDomain.PODS: require_all(list_permission("", "pods")),
        SnapshotDomain.NODES: require_all(list_permission("", "nodes")),
        SnapshotDomain.CLUSTER_OVERVIEW: require_any(
            "cluster overview resources",
            list_permission("", "nodes"),
            list_permission("", "namespaces"),
        ),
        SnapshotDomain.CLUSTER_RBAC: require_any(
            "rbac.authorization.k8s.io",
            list_permission("rbac.authorization.k8s.io", "clusterroles"),
            list_permission("rbac.authorization.k8s.io", "clusterrolebindings"),
        ),
        SnapshotDomain.CLUSTER_STORAGE: require_all(
            list_permission("", "persistentvolumes"),
        ),
        SnapshotDomain.CLUSTER_CONFIG: require_any(
            "cluster configuration resources",
            list_permission("storage.k8s.io", "storageclasses"),
            list_permission("networking.k8s.io", "ingressclasses"),
            list_permission(
                "admissionregistration.k8s.io", "validatingwebhookconfigurations"
            ),
            list_permission(
                "admissionregistration.k8s.io", "mutatingwebhookconfigurations"
            ),
        ),
        SnapshotDomain.CLUSTER_CRDS: require_all(
            list_permission("apiextensions.k8s.io", "customresourcedefinitions"),
        ),
        SnapshotDomain.CLUSTER_CUSTOM: require_all(
            list_permission("apiextensions.k8s.io", "customresourcedefinitions"),
        ),
        SnapshotDomain.CLUSTER_EVENTS: require_all(list_permission("", "events")),
        SnapshotDomain.OBJECT_EVENTS: require_all(list_permission("", "events")),
    }


async def check_domain_permission(
    domain: str, checker: PermissionChecker | None
) -> tuple[bool, str]:
    """Check one domain's requirements outside of a build.

    Returns:
        ``(True, "")`` when allowed or when the domain has no requirements,
        otherwise ``(False, <resource label>)``. Checker errors propagate.
    """
    check = default_permission_checks().get(SnapshotDomain.from_name(domain))
    if check is None:
        return True, ""
    if await check.allows(checker):
        return True, ""
    return False, check.resource


def runtime_preflight_requirements() -> list[PermissionRequirement]:
    """Return every distinct requirement in the table, for startup cache priming."""
    seen: set[PermissionRequirement] = set()
    reqs: list[PermissionRequirement] = []
    for check in default_permission_checks().values():
        for req in check.requirements:
            if req in seen:
                continue
            seen.add(req)
            reqs.append(req)
    return reqs


__all__ = [
    "Decision",
    "PermissionCheck",
    "PermissionChecker",
    "PermissionRequirement",
    "check_domain_permission",
    "default_permission_checks",
    "list_permission",
    "permission_resource_list",
    "require_all",
    "require_any",
    "runtime_preflight_requirements",
]
