"""Idempotent lifecycle operations on a single ScavengerJob."""

from __future__ import annotations

import logging
from typing import Any

from scavjob_manager.reconciler.cluster.base import ClusterApiError, ClusterClient
from scavjob_manager.reconciler.errors import ClusterDeleteError, ClusterQueryError
from scavjob_manager.reconciler.manifest import build_manifest
from scavjob_manager.reconciler.models import CreateOutcome, JobDescriptor

logger = logging.getLogger(__name__)


class JobOperations:
    """Exists/create/delete for jobs addressed by exact name."""

    def __init__(self, *, client: ClusterClient, job_template: str) -> None:
        self.client = client
        self.job_template = job_template

    def get(self, name: str, namespace: str) -> dict[str, Any] | None:
        """Return the job object named ``name`` or None.

        Raises:
            ClusterQueryError: if the list call fails.
        """

        try:
            items = self.client.list_jobs(namespace, name=name)
        except ClusterApiError as error:
            raise ClusterQueryError(f"Error listing job {name!r}: {error}") from error
        for item in items:
            if (item.get("metadata") or {}).get("name") == name:
                return item
        return None

    def exists(self, descriptor: JobDescriptor) -> bool:
        return self.get(descriptor.name, descriptor.namespace) is not None

    def ensure(self, descriptor: JobDescriptor) -> CreateOutcome:
        """Create the job unless it already exists and report which path ran.

        A rejected create is logged and reported as ``REJECTED``; the caller
        retries on the next poll.
        """

        body = build_manifest(self.job_template, descriptor)
        if self.exists(descriptor):
            logger.info("Job will not be created since it already exists: %s", descriptor.name)
            return CreateOutcome.EXISTING

        try:
            self.client.create_job(descriptor.namespace, body)
        except ClusterApiError as error:
            logger.warning("Not creating job with workdir %s: %s", descriptor.data_dir, error)
            return CreateOutcome.REJECTED

        logger.info("Created job %s with workdir: %s", descriptor.name, descriptor.data_dir)
        return CreateOutcome.CREATED

    def create(self, descriptor: JobDescriptor) -> bool:
        """Return True when the job exists afterwards, False when it was rejected."""

        return self.ensure(descriptor) is not CreateOutcome.REJECTED

    def delete(self, descriptor: JobDescriptor) -> bool:
        return self.delete_by_name(descriptor.name, descriptor.namespace)

    def delete_by_name(self, name: str, namespace: str) -> bool:
        """Delete the job if present. Returns whether a delete was issued.

        Raises:
            ClusterDeleteError: if the cluster refuses to delete an existing job.
        """

        if self.get(name, namespace) is None:
            return False

        logger.info("Deleting job: %s", name)
        try:
            self.client.delete_job(namespace, name)
        except ClusterApiError as error:
            raise ClusterDeleteError(f"Error deleting job {name!r}: {error}") from error
        return True
