"""Desired-state scan of the job data directory."""

from __future__ import annotations

import logging
import os
from pathlib import Path

from scavjob_manager.reconciler.errors import DataDirError
from scavjob_manager.reconciler.identity import job_identity, job_name
from scavjob_manager.reconciler.models import FINISHED_MARKER, JobDescriptor

logger = logging.getLogger(__name__)


def list_job_dirs(data_dir: Path) -> list[str]:
    """Return names of visible subdirectories of ``data_dir``, sorted.

    Raises:
        DataDirError: if ``data_dir`` cannot be listed.
    """

    try:
        with os.scandir(data_dir) as entries:
            names = [
                entry.name
                for entry in entries
                if not entry.name.startswith(".") and entry.is_dir()
            ]
    except OSError as error:
        raise DataDirError(f"Cannot list data dir {str(data_dir)!r}: {error}") from error
    return sorted(names)


def has_finished_marker(job_dir: Path) -> bool:
    """Whether the job dir holds the marker; a marker that cannot be stat'd is absent."""

    try:
        os.stat(job_dir / FINISHED_MARKER)
    except OSError:
        return False
    return True


def scan_data_dir(data_dir: Path, *, prefix: str, namespace: str) -> list[JobDescriptor]:
    """Build one descriptor per visible subdirectory of ``data_dir``."""

    jobs: list[JobDescriptor] = []
    for dir_name in list_job_dirs(data_dir):
        identity = job_identity(dir_name)
        jobs.append(
            JobDescriptor(
                name=job_name(prefix, dir_name),
                identity=identity,
                data_dir=dir_name,
                finished=has_finished_marker(data_dir / dir_name),
                namespace=namespace,
            ),
        )
    logger.debug("Scanned %s: %d job dirs", data_dir, len(jobs))
    return jobs
