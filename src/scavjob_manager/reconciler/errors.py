"""Fatal error hierarchy for the reconciler.

Every exception here means the controller can no longer reason about the
cluster safely. Components raise them; only the CLI entry point catches
``ReconcilerError`` and terminates the process. A rejected create is the one
routine failure and is reported through a ``False`` return instead.
"""

from __future__ import annotations


class ReconcilerError(RuntimeError):
    """Base class for process-terminating reconciler errors."""


class ConfigError(ReconcilerError):
    """Configuration file is missing, unparsable, or invalid."""


class DataDirError(ReconcilerError):
    """Job data directory cannot be listed."""


class ManifestError(ReconcilerError):
    """Job template failed to render or did not yield a valid object."""


class ClusterConfigError(ReconcilerError):
    """No usable cluster credentials could be loaded."""


class ClusterQueryError(ReconcilerError):
    """Listing ScavengerJobs failed."""


class ClusterDeleteError(ReconcilerError):
    """Deleting an existing ScavengerJob failed."""
