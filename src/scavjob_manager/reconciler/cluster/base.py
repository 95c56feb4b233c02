"""Cluster client interface used by the reconciler."""

from __future__ import annotations

from typing import Any, Protocol


class ClusterApiError(RuntimeError):
    """Cluster call failure with the HTTP status when one is known."""

    def __init__(self, message: str, *, status: int | None = None) -> None:
        super().__init__(message)
        self.status = status


class ClusterClient(Protocol):
    """List/create/delete of ScavengerJob objects in one namespace."""

    def list_jobs(self, namespace: str, *, name: str | None = None) -> list[dict[str, Any]]:
        """Return job objects in ``namespace``, optionally only the one named ``name``."""

    def create_job(self, namespace: str, body: dict[str, Any]) -> dict[str, Any]:
        """Submit a fully specified job object."""

    def delete_job(self, namespace: str, name: str) -> None:
        """Delete the job object named ``name``."""
