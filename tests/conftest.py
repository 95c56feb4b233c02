"""Shared test fixtures."""

from __future__ import annotations

from pathlib import Path

import pytest
from support import JOB_TEMPLATE, NAMESPACE, PREFIX

from scavjob_manager.config import Settings
from scavjob_manager.reconciler.cluster import InMemoryClusterClient
from scavjob_manager.reconciler.engine import Reconciler


@pytest.fixture()
def data_dir(tmp_path: Path) -> Path:
    path = tmp_path / "jobs"
    path.mkdir()
    return path


@pytest.fixture()
def settings(data_dir: Path) -> Settings:
    return Settings(
        namespace=NAMESPACE,
        job_template=JOB_TEMPLATE,
        job_name_prefix=PREFIX,
        data_dir=data_dir,
        refresh_interval=5,
    )


@pytest.fixture()
def cluster() -> InMemoryClusterClient:
    return InMemoryClusterClient()


@pytest.fixture()
def reconciler(cluster: InMemoryClusterClient, settings: Settings) -> Reconciler:
    return Reconciler(client=cluster, settings=settings)
