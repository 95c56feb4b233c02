from __future__ import annotations

import allure
import pytest
from support import JOB_TEMPLATE

from scavjob_manager.reconciler.errors import ManifestError
from scavjob_manager.reconciler.manifest import build_manifest, load_manifest, render_manifest
from scavjob_manager.reconciler.models import JobDescriptor

pytestmark = [
    allure.epic("Job Lifecycle"),
    allure.feature("Manifest Rendering"),
]

DESCRIPTOR = JobDescriptor(
    name="scavjob-abc",
    identity="abc",
    data_dir="alpha",
    finished=False,
    namespace="scavengers",
)


def test_build_manifest_resolves_descriptor_fields() -> None:
    body = build_manifest(JOB_TEMPLATE, DESCRIPTOR)

    assert body["apiVersion"] == "core.cerit.cz/v1"
    assert body["kind"] == "ScavengerJob"
    assert body["metadata"]["name"] == "scavjob-abc"
    assert body["metadata"]["namespace"] == "scavengers"
    assert body["metadata"]["labels"] == {"job-identity": "abc"}
    assert body["spec"] == {"workdir": "alpha"}


def test_build_manifest_rejects_name_other_than_job_name() -> None:
    template = (
        "apiVersion: core.cerit.cz/v1\n"
        "kind: ScavengerJob\n"
        "metadata: {{name: 'job-{data_dir}'}}\n"
    )

    with pytest.raises(ManifestError, match=r"metadata\.name to 'scavjob-abc', got 'job-alpha'"):
        build_manifest(template, DESCRIPTOR)


def test_build_manifest_rejects_foreign_namespace() -> None:
    template = (
        "apiVersion: core.cerit.cz/v1\n"
        "kind: ScavengerJob\n"
        "metadata: {{name: '{name}', namespace: other}}\n"
    )

    with pytest.raises(ManifestError, match="sets metadata.namespace to 'other'"):
        build_manifest(template, DESCRIPTOR)


def test_build_manifest_accepts_matching_namespace() -> None:
    template = (
        "apiVersion: core.cerit.cz/v1\n"
        "kind: ScavengerJob\n"
        "metadata: {{name: '{name}', namespace: '{namespace}'}}\n"
    )
    body = build_manifest(template, DESCRIPTOR)

    assert body["metadata"] == {"name": "scavjob-abc", "namespace": "scavengers"}


def test_render_rejects_unknown_placeholder() -> None:
    with pytest.raises(ManifestError, match="Unsupported job template placeholder"):
        render_manifest("name: {job_id}", DESCRIPTOR)


def test_render_rejects_malformed_template() -> None:
    with pytest.raises(ManifestError, match="Malformed job template"):
        render_manifest("name: {name", DESCRIPTOR)


def test_load_rejects_invalid_yaml() -> None:
    with pytest.raises(ManifestError, match="not valid YAML"):
        load_manifest("metadata: [unclosed")


def test_load_rejects_non_mapping() -> None:
    with pytest.raises(ManifestError, match="must be a mapping"):
        load_manifest("- just\n- a list\n")


def test_load_requires_kind_and_name() -> None:
    with pytest.raises(ManifestError, match="missing keys: kind"):
        load_manifest("apiVersion: v1\nmetadata:\n  name: x\n")
    with pytest.raises(ManifestError, match=r"metadata\.name"):
        load_manifest("apiVersion: v1\nkind: ScavengerJob\nmetadata:\n  labels: {}\n")
