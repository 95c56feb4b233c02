"""Runtime configuration loaded from the controller's YAML file."""

from __future__ import annotations

import os
import re
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Any

import yaml

from scavjob_manager.reconciler.errors import ConfigError

_PREFIX_PATTERN = re.compile(r"^[a-z0-9]([-a-z0-9]*[a-z0-9])?$")
# Object names are capped at 253 chars; prefix + "-" + 32 hex chars must fit.
_MAX_PREFIX_LENGTH = 253 - 33


@dataclass(frozen=True, slots=True)
class Settings:
    """Controller settings, keyed in the file by their original names."""

    namespace: str
    job_template: str
    job_name_prefix: str
    data_dir: Path
    refresh_interval: int
    kube_context: str | None = None

    @classmethod
    def from_file(cls, path: Path) -> Settings:
        """Read the YAML config at ``path`` and apply environment overrides."""

        try:
            raw = path.read_text("utf-8")
        except OSError as error:
            raise ConfigError(f"Error reading the config file {str(path)!r}: {error}") from error
        try:
            document = yaml.safe_load(raw)
        except yaml.YAMLError as error:
            raise ConfigError(f"Error parsing the config file {str(path)!r}: {error}") from error
        if not isinstance(document, dict):
            raise ConfigError(f"Config file {str(path)!r} must contain a mapping.")
        return cls.from_mapping(document).with_env_overrides()

    @classmethod
    def from_mapping(cls, document: dict[str, Any]) -> Settings:
        kube_context = document.get("KubeContext")
        if not document.get("DataDir"):
            raise ConfigError("DataDir must be set.")
        return cls(
            namespace=str(document.get("Namespace") or ""),
            job_template=str(document.get("JobTemplate") or ""),
            job_name_prefix=str(document.get("JobNamePrefix") or ""),
            data_dir=Path(str(document["DataDir"])),
            refresh_interval=_parse_int("RefreshInterval", document.get("RefreshInterval", 0)),
            kube_context=str(kube_context) if kube_context else None,
        )

    def with_env_overrides(self) -> Settings:
        """Return a copy with ``SCAVJOB_MANAGER_*`` environment values applied."""

        overrides: dict[str, Any] = {}
        if namespace := os.getenv("SCAVJOB_MANAGER_NAMESPACE", "").strip():
            overrides["namespace"] = namespace
        if data_dir := os.getenv("SCAVJOB_MANAGER_DATA_DIR", "").strip():
            overrides["data_dir"] = Path(data_dir)
        if interval := os.getenv("SCAVJOB_MANAGER_REFRESH_INTERVAL", "").strip():
            overrides["refresh_interval"] = _parse_int(
                "SCAVJOB_MANAGER_REFRESH_INTERVAL",
                interval,
            )
        if kube_context := os.getenv("SCAVJOB_MANAGER_KUBE_CONTEXT", "").strip():
            overrides["kube_context"] = kube_context
        return replace(self, **overrides) if overrides else self

    def validate(self) -> None:
        """Raise ConfigError if a setting cannot drive the controller."""

        if not self.namespace:
            raise ConfigError("Namespace must be set.")
        if not self.job_template.strip():
            raise ConfigError("JobTemplate must be set.")
        if not self.job_name_prefix:
            raise ConfigError("JobNamePrefix must be set.")
        if len(self.job_name_prefix) > _MAX_PREFIX_LENGTH or not _PREFIX_PATTERN.match(
            self.job_name_prefix,
        ):
            raise ConfigError(
                "JobNamePrefix must be lowercase alphanumerics and '-', "
                f"got {self.job_name_prefix!r}.",
            )
        if self.refresh_interval <= 0:
            raise ConfigError("RefreshInterval must be > 0.")


def load_settings(path: Path) -> Settings:
    settings = Settings.from_file(path)
    settings.validate()
    return settings


def _parse_int(name: str, value: object) -> int:
    if isinstance(value, bool):
        raise ConfigError(f"Invalid integer value for {name}: {value!r}")
    try:
        return int(value)  # type: ignore[arg-type]
    except (TypeError, ValueError) as error:
        raise ConfigError(f"Invalid integer value for {name}: {value!r}") from error
