"""Cluster client implementations."""

from scavjob_manager.reconciler.cluster.base import ClusterApiError, ClusterClient
from scavjob_manager.reconciler.cluster.memory import ClusterCall, InMemoryClusterClient

__all__ = [
    "ClusterApiError",
    "ClusterCall",
    "ClusterClient",
    "InMemoryClusterClient",
]
