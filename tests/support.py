"""Constants and helpers shared by test modules."""

from __future__ import annotations

from pathlib import Path

NAMESPACE = "scavengers"
PREFIX = "scavjob"
JOB_TEMPLATE = """\
apiVersion: core.cerit.cz/v1
kind: ScavengerJob
metadata:
  name: {name}
  labels:
    job-identity: "{identity}"
spec:
  workdir: {data_dir}
"""


def make_job_dir(data_dir: Path, name: str, *, finished: bool = False) -> Path:
    path = data_dir / name
    path.mkdir(exist_ok=True)
    if finished:
        (path / "finished").touch()
    return path
