"""Domain models for desired jobs, listed cluster objects and pass results."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any

SCAVENGER_JOB_GROUP = "core.cerit.cz"
SCAVENGER_JOB_VERSION = "v1"
SCAVENGER_JOB_KIND = "ScavengerJob"
SCAVENGER_JOB_PLURAL = "scavengerjobs"
SCAVENGER_JOB_API_VERSION = f"{SCAVENGER_JOB_GROUP}/{SCAVENGER_JOB_VERSION}"

FINISHED_MARKER = "finished"


class CreateOutcome(str, Enum):
    """Result of an idempotent job create."""

    CREATED = "created"
    EXISTING = "existing"
    REJECTED = "rejected"


@dataclass(frozen=True, slots=True)
class JobDescriptor:
    """One desired job as derived from a data directory at scan time."""

    name: str
    identity: str
    data_dir: str
    finished: bool
    namespace: str

    def template_values(self) -> dict[str, object]:
        return {
            "name": self.name,
            "identity": self.identity,
            "data_dir": self.data_dir,
            "finished": self.finished,
            "namespace": self.namespace,
        }


@dataclass(frozen=True, slots=True)
class JobResource:
    """Read-only view of a ScavengerJob object returned by the cluster."""

    name: str
    namespace: str
    body: dict[str, Any] = field(default_factory=dict, compare=False, repr=False)

    @classmethod
    def from_object(cls, body: dict[str, Any]) -> JobResource:
        metadata = body.get("metadata") or {}
        return cls(
            name=str(metadata.get("name", "")),
            namespace=str(metadata.get("namespace", "")),
            body=body,
        )


@dataclass(slots=True)
class ReconcilePlan:
    """Cluster actions one pass intends to take, in processing order."""

    create: list[JobDescriptor] = field(default_factory=list)
    delete: list[str] = field(default_factory=list)
    carry: list[str] = field(default_factory=list)
    orphans: list[str] = field(default_factory=list)
    skipped: list[str] = field(default_factory=list)


@dataclass(slots=True)
class ReconcileSummary:
    """Aggregate counters for one reconciliation pass."""

    desired: int = 0
    finished: int = 0
    created: int = 0
    create_failed: int = 0
    confirmed: int = 0
    deleted: int = 0
    carried: int = 0
    orphans: int = 0

    def record_create(self, outcome: CreateOutcome) -> None:
        if outcome is CreateOutcome.CREATED:
            self.created += 1
        elif outcome is CreateOutcome.EXISTING:
            self.confirmed += 1
        else:
            self.create_failed += 1

    def render(self) -> str:
        return (
            f"desired={self.desired} finished={self.finished} created={self.created} "
            f"create_failed={self.create_failed} confirmed={self.confirmed} "
            f"deleted={self.deleted} carried={self.carried} orphans={self.orphans}"
        )
