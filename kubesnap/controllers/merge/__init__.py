"""Multi-cluster snapshot merging."""

from kubesnap.controllers.merge.merger import (
    UNMERGEABLE_DOMAINS,
    MergeStrategy,
    MultiClusterMerger,
    default_merge_strategies,
    merge_snapshots,
)

__all__ = [
    "UNMERGEABLE_DOMAINS",
    "MergeStrategy",
    "MultiClusterMerger",
    "default_merge_strategies",
    "merge_snapshots",
]
