"""In-process cluster client that keeps objects in a dict.

Used as the cluster double in tests; also handy for exercising the
reconciler against a directory without a cluster.
"""

from __future__ import annotations

import copy
from collections.abc import Iterable
from dataclasses import dataclass
from typing import Any

from scavjob_manager.reconciler.cluster.base import ClusterApiError


@dataclass(frozen=True, slots=True)
class ClusterCall:
    """One recorded client call."""

    operation: str
    namespace: str
    name: str | None


class InMemoryClusterClient:
    """Dict-backed ScavengerJob store with call log and injected failures."""

    def __init__(self, objects: Iterable[dict[str, Any]] = ()) -> None:
        self._objects: dict[tuple[str, str], dict[str, Any]] = {}
        self.calls: list[ClusterCall] = []
        self.fail_list = False
        self.fail_delete = False
        self.reject_create: set[str] = set()
        for body in objects:
            self._store(body)

    def add(self, namespace: str, name: str, **metadata: Any) -> None:
        self._store(
            {
                "apiVersion": "core.cerit.cz/v1",
                "kind": "ScavengerJob",
                "metadata": {"name": name, "namespace": namespace, **metadata},
            },
        )

    def names(self, namespace: str) -> set[str]:
        return {name for ns, name in self._objects if ns == namespace}

    def mutating_calls(self) -> list[ClusterCall]:
        return [call for call in self.calls if call.operation != "list"]

    def list_jobs(self, namespace: str, *, name: str | None = None) -> list[dict[str, Any]]:
        self.calls.append(ClusterCall("list", namespace, name))
        if self.fail_list:
            raise ClusterApiError("list rejected", status=500)
        return [
            copy.deepcopy(body)
            for (ns, obj_name), body in sorted(self._objects.items())
            if ns == namespace and (name is None or obj_name == name)
        ]

    def create_job(self, namespace: str, body: dict[str, Any]) -> dict[str, Any]:
        name = body["metadata"]["name"]
        self.calls.append(ClusterCall("create", namespace, name))
        if name in self.reject_create:
            raise ClusterApiError(f"exceeded quota creating {name}", status=403)
        body_namespace = body["metadata"].get("namespace")
        if body_namespace and body_namespace != namespace:
            raise ClusterApiError(
                f"the namespace of the provided object ({body_namespace}) does not match "
                f"the namespace sent on the request ({namespace})",
                status=400,
            )
        if (namespace, name) in self._objects:
            raise ClusterApiError(f"{name} already exists", status=409)
        stored = copy.deepcopy(body)
        stored["metadata"]["namespace"] = namespace
        self._objects[(namespace, name)] = stored
        return copy.deepcopy(stored)

    def delete_job(self, namespace: str, name: str) -> None:
        self.calls.append(ClusterCall("delete", namespace, name))
        if self.fail_delete:
            raise ClusterApiError(f"delete of {name} rejected", status=500)
        if self._objects.pop((namespace, name), None) is None:
            raise ClusterApiError(f"{name} not found", status=404)

    def _store(self, body: dict[str, Any]) -> None:
        metadata = body["metadata"]
        self._objects[(metadata["namespace"], metadata["name"])] = copy.deepcopy(body)
