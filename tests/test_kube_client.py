from __future__ import annotations

import allure
import pytest
import urllib3
from kubernetes.client.exceptions import ApiException
from kubernetes.config import ConfigException

from scavjob_manager.reconciler.cluster import ClusterApiError, kube_client
from scavjob_manager.reconciler.cluster.kube_client import (
    KubernetesClusterClient,
    load_cluster_config,
)
from scavjob_manager.reconciler.errors import ClusterConfigError

pytestmark = [
    allure.epic("Actual State"),
    allure.feature("Kubernetes Client"),
]


class FakeCustomObjectsApi:
    def __init__(self) -> None:
        self.calls: list[tuple] = []
        self.error: Exception | None = None

    def list_namespaced_custom_object(self, group, version, namespace, plural, **kwargs):
        self.calls.append(("list", group, version, namespace, plural, kwargs))
        if self.error is not None:
            raise self.error
        return {"items": [{"metadata": {"name": "scavjob-a"}}]}

    def create_namespaced_custom_object(self, group, version, namespace, plural, body):
        self.calls.append(("create", group, version, namespace, plural, body))
        if self.error is not None:
            raise self.error
        return body

    def delete_namespaced_custom_object(self, group, version, namespace, plural, name):
        self.calls.append(("delete", group, version, namespace, plural, name))
        if self.error is not None:
            raise self.error
        return {}


def test_list_uses_scavenger_job_gvk_and_name_selector() -> None:
    api = FakeCustomObjectsApi()
    client = KubernetesClusterClient(api=api)

    items = client.list_jobs("scavengers", name="scavjob-a")

    assert items == [{"metadata": {"name": "scavjob-a"}}]
    assert api.calls == [
        (
            "list",
            "core.cerit.cz",
            "v1",
            "scavengers",
            "scavengerjobs",
            {"field_selector": "metadata.name=scavjob-a"},
        ),
    ]


def test_list_without_name_has_no_selector() -> None:
    api = FakeCustomObjectsApi()

    KubernetesClusterClient(api=api).list_jobs("scavengers")

    assert api.calls[0][-1] == {}


def test_create_and_delete_target_namespace() -> None:
    api = FakeCustomObjectsApi()
    client = KubernetesClusterClient(api=api)
    body = {"metadata": {"name": "scavjob-a"}}

    client.create_job("scavengers", body)
    client.delete_job("scavengers", "scavjob-a")

    assert api.calls[0] == ("create", "core.cerit.cz", "v1", "scavengers", "scavengerjobs", body)
    assert api.calls[1] == (
        "delete",
        "core.cerit.cz",
        "v1",
        "scavengers",
        "scavengerjobs",
        "scavjob-a",
    )


def test_api_exception_becomes_cluster_error() -> None:
    api = FakeCustomObjectsApi()
    api.error = ApiException(status=403, reason="Forbidden")

    with pytest.raises(ClusterApiError, match="create failed: 403 Forbidden") as excinfo:
        KubernetesClusterClient(api=api).create_job("scavengers", {"metadata": {"name": "x"}})
    assert excinfo.value.status == 403


def test_transport_error_becomes_cluster_error() -> None:
    api = FakeCustomObjectsApi()
    api.error = urllib3.exceptions.ProtocolError("connection reset")

    with pytest.raises(ClusterApiError, match="list failed"):
        KubernetesClusterClient(api=api).list_jobs("scavengers")


def test_load_config_falls_back_to_kubeconfig(monkeypatch) -> None:
    calls: list[str | None] = []

    def _incluster() -> None:
        raise ConfigException("not in cluster")

    monkeypatch.setattr(kube_client.config, "load_incluster_config", _incluster)
    monkeypatch.setattr(
        kube_client.config,
        "load_kube_config",
        lambda context=None: calls.append(context),
    )

    load_cluster_config()

    assert calls == [None]


def test_load_config_with_context_skips_incluster(monkeypatch) -> None:
    calls: list[str | None] = []

    def _incluster() -> None:
        raise AssertionError("in-cluster config must not be tried")

    monkeypatch.setattr(kube_client.config, "load_incluster_config", _incluster)
    monkeypatch.setattr(
        kube_client.config,
        "load_kube_config",
        lambda context=None: calls.append(context),
    )

    load_cluster_config("lab")

    assert calls == ["lab"]


def test_missing_credentials_are_fatal(monkeypatch) -> None:
    def _fail(*_args, **_kwargs) -> None:
        raise ConfigException("no config")

    monkeypatch.setattr(kube_client.config, "load_incluster_config", _fail)
    monkeypatch.setattr(kube_client.config, "load_kube_config", _fail)

    with pytest.raises(ClusterConfigError, match="Cannot load cluster configuration"):
        load_cluster_config()
