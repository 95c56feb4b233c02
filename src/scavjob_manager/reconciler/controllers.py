"""Controllers for reconciler CLI commands."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path

from scavjob_manager.config import Settings, load_settings
from scavjob_manager.reconciler.cluster.base import ClusterClient
from scavjob_manager.reconciler.cluster.kube_client import KubernetesClusterClient
from scavjob_manager.reconciler.engine import Reconciler, plan_startup
from scavjob_manager.reconciler.loop import ReconcileLoop
from scavjob_manager.reconciler.scanner import scan_data_dir


@dataclass(slots=True)
class ReconcileRunCommand:
    """CLI input for the controller run."""

    config_path: Path
    once: bool = False
    max_cycles: int | None = None


@dataclass(slots=True)
class ReconcileScanCommand:
    """CLI input for desired-state listing."""

    config_path: Path


@dataclass(slots=True)
class ReconcilePlanCommand:
    """CLI input for a read-only startup diff."""

    config_path: Path


def _default_client_factory(settings: Settings) -> ClusterClient:
    return KubernetesClusterClient.from_config(context=settings.kube_context)


class ReconcilerCliController:
    """Wires settings, cluster client and reconciler for each command."""

    def __init__(
        self,
        client_factory: Callable[[Settings], ClusterClient] = _default_client_factory,
    ) -> None:
        self.client_factory = client_factory

    def run(self, command: ReconcileRunCommand) -> list[str]:
        settings = load_settings(command.config_path)
        reconciler = Reconciler(client=self.client_factory(settings), settings=settings)

        if command.once:
            summary = reconciler.reconcile_startup()
            return [f"Startup reconciliation: {summary.render()}"]

        loop = ReconcileLoop(
            reconciler=reconciler,
            interval_seconds=settings.refresh_interval,
        )
        result = loop.run(max_cycles=command.max_cycles)
        return [
            "Controller stopped: "
            f"cycles={result.cycles} created={result.created} "
            f"create_failed={result.create_failed} deleted={result.deleted} "
            f"orphans={result.orphans} signal={result.stop_signal or 'none'}",
        ]

    def scan(self, command: ReconcileScanCommand) -> list[str]:
        """Show the desired state derived from the data directory."""

        settings = load_settings(command.config_path)
        jobs = scan_data_dir(
            settings.data_dir,
            prefix=settings.job_name_prefix,
            namespace=settings.namespace,
        )
        if not jobs:
            return [f"No job dirs in {settings.data_dir}"]
        lines = [f"Job dirs in {settings.data_dir}: {len(jobs)}"]
        lines.extend(
            f"{job.name}  {'finished' if job.finished else 'pending'}  {job.data_dir}"
            for job in jobs
        )
        return lines

    def plan(self, command: ReconcilePlanCommand) -> list[str]:
        """Show what startup reconciliation would change, without changing it."""

        settings = load_settings(command.config_path)
        reconciler = Reconciler(client=self.client_factory(settings), settings=settings)
        desired = reconciler.scan()
        actual = reconciler.list_active()
        plan = plan_startup(desired, actual)
        actual_names = {resource.name for resource in actual}

        lines = [
            f"Desired: {len(desired)} Active in {settings.namespace}: {len(actual)}",
        ]
        lines.extend(
            f"create {job.name}  {job.data_dir}"
            for job in plan.create
            if job.name not in actual_names
        )
        lines.extend(f"delete {name}  finished" for name in plan.delete if name in actual_names)
        lines.extend(f"delete {name}  orphaned" for name in plan.orphans)
        if len(lines) == 1:
            lines.append("Nothing to do.")
        return lines
