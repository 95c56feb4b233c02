"""Render the configured job template into a ScavengerJob object.

Templates use ``str.format`` placeholders resolved against the job
descriptor: ``{name}``, ``{identity}``, ``{data_dir}``, ``{namespace}`` and
``{finished}``. Literal braces in the manifest are written as ``{{``/``}}``.
"""

from __future__ import annotations

from typing import Any

import yaml

from scavjob_manager.reconciler.errors import ManifestError
from scavjob_manager.reconciler.models import JobDescriptor

_REQUIRED_KEYS = ("apiVersion", "kind", "metadata")


def render_manifest(template: str, descriptor: JobDescriptor) -> str:
    """Resolve template placeholders for one job."""

    try:
        return template.format(**descriptor.template_values())
    except KeyError as error:
        raise ManifestError(f"Unsupported job template placeholder: {error}") from error
    except (IndexError, ValueError, AttributeError) as error:
        raise ManifestError(f"Malformed job template: {error}") from error


def load_manifest(rendered: str) -> dict[str, Any]:
    """Parse a rendered manifest into a generic object body."""

    try:
        body = yaml.safe_load(rendered)
    except yaml.YAMLError as error:
        raise ManifestError(f"Rendered job manifest is not valid YAML: {error}") from error

    if not isinstance(body, dict):
        raise ManifestError("Rendered job manifest must be a mapping.")
    missing = [key for key in _REQUIRED_KEYS if key not in body]
    if missing:
        raise ManifestError(f"Rendered job manifest is missing keys: {', '.join(missing)}")
    metadata = body["metadata"]
    if not isinstance(metadata, dict) or not metadata.get("name"):
        raise ManifestError("Rendered job manifest must set metadata.name.")
    return body


def build_manifest(template: str, descriptor: JobDescriptor) -> dict[str, Any]:
    """Render and parse the manifest, defaulting its namespace to the job's.

    The job is found again by ``descriptor.name`` in ``descriptor.namespace``,
    so a manifest that names another object or namespace is rejected.
    """

    body = load_manifest(render_manifest(template, descriptor))
    metadata = body["metadata"]
    if metadata["name"] != descriptor.name:
        raise ManifestError(
            f"Job template must set metadata.name to {descriptor.name!r}, "
            f"got {metadata['name']!r}; use the {{name}} placeholder.",
        )
    namespace = metadata.setdefault("namespace", descriptor.namespace)
    if namespace != descriptor.namespace:
        raise ManifestError(
            f"Job template sets metadata.namespace to {namespace!r}, "
            f"but jobs are managed in {descriptor.namespace!r}.",
        )
    return body
