"""Kubernetes-backed cluster client for ScavengerJob custom objects."""

from __future__ import annotations

import logging
from typing import Any

import urllib3
from kubernetes import client, config
from kubernetes.client.exceptions import ApiException
from kubernetes.config import ConfigException

from scavjob_manager.reconciler.cluster.base import ClusterApiError
from scavjob_manager.reconciler.errors import ClusterConfigError
from scavjob_manager.reconciler.models import (
    SCAVENGER_JOB_GROUP,
    SCAVENGER_JOB_PLURAL,
    SCAVENGER_JOB_VERSION,
)

logger = logging.getLogger(__name__)


def load_cluster_config(context: str | None = None) -> None:
    """Load in-cluster credentials, falling back to the local kubeconfig."""

    if context is None:
        try:
            config.load_incluster_config()
        except ConfigException:
            logger.debug("Not running in a cluster, trying kubeconfig")
        else:
            return
    try:
        config.load_kube_config(context=context)
    except (ConfigException, OSError) as error:
        raise ClusterConfigError(f"Cannot load cluster configuration: {error}") from error


class KubernetesClusterClient:
    """ScavengerJob list/create/delete through ``CustomObjectsApi``."""

    def __init__(self, api: client.CustomObjectsApi | None = None) -> None:
        self.api = api if api is not None else client.CustomObjectsApi()

    @classmethod
    def from_config(cls, context: str | None = None) -> KubernetesClusterClient:
        load_cluster_config(context)
        return cls()

    def list_jobs(self, namespace: str, *, name: str | None = None) -> list[dict[str, Any]]:
        kwargs: dict[str, Any] = {}
        if name is not None:
            kwargs["field_selector"] = f"metadata.name={name}"
        response = self._call(
            "list",
            lambda: self.api.list_namespaced_custom_object(
                SCAVENGER_JOB_GROUP,
                SCAVENGER_JOB_VERSION,
                namespace,
                SCAVENGER_JOB_PLURAL,
                **kwargs,
            ),
        )
        return list(response.get("items") or [])

    def create_job(self, namespace: str, body: dict[str, Any]) -> dict[str, Any]:
        return self._call(
            "create",
            lambda: self.api.create_namespaced_custom_object(
                SCAVENGER_JOB_GROUP,
                SCAVENGER_JOB_VERSION,
                namespace,
                SCAVENGER_JOB_PLURAL,
                body,
            ),
        )

    def delete_job(self, namespace: str, name: str) -> None:
        self._call(
            "delete",
            lambda: self.api.delete_namespaced_custom_object(
                SCAVENGER_JOB_GROUP,
                SCAVENGER_JOB_VERSION,
                namespace,
                SCAVENGER_JOB_PLURAL,
                name,
            ),
        )

    def _call(self, operation: str, request):
        try:
            return request()
        except ApiException as error:
            raise ClusterApiError(
                f"ScavengerJob {operation} failed: {error.status} {error.reason}",
                status=error.status,
            ) from error
        except urllib3.exceptions.HTTPError as error:
            raise ClusterApiError(f"ScavengerJob {operation} failed: {error}") from error
