"""Diff desired jobs against the cluster and apply the difference."""

from __future__ import annotations

import logging
from collections.abc import Iterable

from scavjob_manager.config import Settings
from scavjob_manager.reconciler.cluster.base import ClusterClient
from scavjob_manager.reconciler.inventory import list_active_jobs
from scavjob_manager.reconciler.jobs import JobOperations
from scavjob_manager.reconciler.models import (
    CreateOutcome,
    JobDescriptor,
    JobResource,
    ReconcilePlan,
    ReconcileSummary,
)
from scavjob_manager.reconciler.scanner import scan_data_dir

logger = logging.getLogger(__name__)


def plan_startup(desired: list[JobDescriptor], actual: Iterable[JobResource]) -> ReconcilePlan:
    """Full diff against live cluster state.

    Finished jobs are deleted, pending ones created (create is idempotent),
    and managed objects with no data dir at all become orphans. The
    ``create``/``delete`` lists keep scan order; the startup pass applies
    them interleaved, one directory at a time.
    """

    plan = ReconcilePlan()
    desired_names = {job.name for job in desired}
    for job in desired:
        if job.finished:
            plan.delete.append(job.name)
        else:
            plan.create.append(job)
    plan.orphans = [
        resource.name for resource in actual if resource.name not in desired_names
    ]
    return plan


def plan_cycle(desired: list[JobDescriptor], known_active: frozenset[str]) -> ReconcilePlan:
    """Diff against the names the previous cycle left running."""

    plan = ReconcilePlan()
    desired_names = {job.name for job in desired}
    for job in desired:
        known = job.name in known_active
        if job.finished and known:
            plan.delete.append(job.name)
        elif job.finished:
            plan.skipped.append(job.name)
        elif known:
            plan.carry.append(job.name)
        else:
            plan.create.append(job)
    plan.orphans = sorted(known_active - desired_names)
    return plan


class Reconciler:
    """Drives ScavengerJobs toward the state of the data directory.

    ``known_active`` holds the names this process started (or confirmed)
    that are still desired. It lives only in memory and is replaced at the
    end of each cycle.
    """

    def __init__(
        self,
        *,
        client: ClusterClient,
        settings: Settings,
        operations: JobOperations | None = None,
    ) -> None:
        self.client = client
        self.settings = settings
        self.operations = operations or JobOperations(
            client=client,
            job_template=settings.job_template,
        )
        self.known_active: frozenset[str] = frozenset()

    def scan(self) -> list[JobDescriptor]:
        return scan_data_dir(
            self.settings.data_dir,
            prefix=self.settings.job_name_prefix,
            namespace=self.settings.namespace,
        )

    def list_active(self) -> list[JobResource]:
        return list_active_jobs(
            self.client,
            self.settings.namespace,
            self.settings.job_name_prefix,
        )

    def reconcile_startup(self) -> ReconcileSummary:
        """One full pass against live cluster state, run before polling.

        Each descriptor is handled in scan order (finished ones deleted,
        pending ones created) before orphans are removed, so a fatal error
        leaves every earlier directory already reconciled.
        """

        desired = self.scan()
        plan = plan_startup(desired, self.list_active())
        summary = ReconcileSummary(
            desired=len(desired),
            finished=sum(1 for job in desired if job.finished),
        )
        namespace = self.settings.namespace

        for job in desired:
            if job.finished:
                if self.operations.delete_by_name(job.name, namespace):
                    summary.deleted += 1
            else:
                summary.record_create(self.operations.ensure(job))
        for name in plan.orphans:
            logger.info("Deleting orphaned job: %s", name)
            if self.operations.delete_by_name(name, namespace):
                summary.orphans += 1

        logger.info("Startup reconciliation: %s", summary.render())
        return summary

    def reconcile_cycle(self) -> ReconcileSummary:
        """Steady-state pass that trusts ``known_active`` for pending jobs."""

        desired = self.scan()
        plan = plan_cycle(desired, self.known_active)
        summary = ReconcileSummary(
            desired=len(desired),
            finished=sum(1 for job in desired if job.finished),
            carried=len(plan.carry),
        )
        namespace = self.settings.namespace
        to_delete = set(plan.delete)
        to_create = {job.name for job in plan.create}
        next_active: set[str] = set(plan.carry)

        for job in desired:
            if job.name in to_delete:
                logger.info("Deleting finished job with workdir: %s", job.data_dir)
                if self.operations.delete_by_name(job.name, namespace):
                    summary.deleted += 1
            elif job.name in to_create:
                outcome = self.operations.ensure(job)
                summary.record_create(outcome)
                if outcome is not CreateOutcome.REJECTED:
                    next_active.add(job.name)
        for name in plan.orphans:
            logger.info("Deleting job with id: %s", name)
            if self.operations.delete_by_name(name, namespace):
                summary.orphans += 1

        self.known_active = frozenset(next_active)
        logger.info("Reconcile cycle: %s", summary.render())
        return summary
