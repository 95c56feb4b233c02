"""Stable job identity derived from a data directory name."""

from __future__ import annotations

import hashlib


def job_identity(dir_name: str) -> str:
    """Return the hex MD5 digest of a directory name."""

    return hashlib.md5(dir_name.encode("utf-8", "surrogatepass")).hexdigest()  # noqa: S324


def job_name(prefix: str, dir_name: str) -> str:
    """Cluster object name for the job backed by ``dir_name``."""

    return f"{prefix}-{job_identity(dir_name)}"
