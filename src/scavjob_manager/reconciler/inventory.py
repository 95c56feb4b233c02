"""Actual-state read of managed ScavengerJobs."""

from __future__ import annotations

from scavjob_manager.reconciler.cluster.base import ClusterApiError, ClusterClient
from scavjob_manager.reconciler.errors import ClusterQueryError
from scavjob_manager.reconciler.models import JobResource


def list_active_jobs(client: ClusterClient, namespace: str, prefix: str) -> list[JobResource]:
    """List jobs in ``namespace`` whose name carries the managed ``prefix``."""

    try:
        items = client.list_jobs(namespace)
    except ClusterApiError as error:
        raise ClusterQueryError(f"Error listing jobs in {namespace!r}: {error}") from error

    resources = (JobResource.from_object(item) for item in items)
    return [resource for resource in resources if resource.name.startswith(prefix)]
