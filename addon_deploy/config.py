"""Configuration objects for addon-deploy.

All inputs are read once at startup, either from the environment of the
GitHub Action step or from equivalent command line flags.
"""

from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from .exceptions import ConfigurationError

__all__ = [
    "AddonInputs",
    "ENV_VARS",
    "DEFAULT_RCTL_PROJECT",
]

DEFAULT_RCTL_PROJECT = "defaultproject"

# Maps environment variables to AddonInputs fields
ENV_VARS = {
    "SPEC_FILE": "spec_file",
    "ARTIFACT_PATH": "artifact_path",
    "NAME": "name",
    "PROJECT": "project",
    "NAMESPACE": "namespace",
    "VERSION": "version",
    "RAFAY_API_KEY": "api_key",
    "RAFAY_API_SECRET": "api_secret",
    "RCTL_PROJECT": "rctl_project",
}


def _optional(value: Any) -> str | None:
    """Treat empty strings the same as unset values."""
    if value is None or value == "":
        return None
    return str(value)


@dataclass(kw_only=True, frozen=True)
class AddonInputs:
    """Invocation inputs for building and publishing an addon."""

    spec_file: Path | None = None
    """Path to an existing addon spec document."""

    artifact_path: Path | None = None
    """Path to a chart directory, chart archive, or YAML file/directory."""

    name: str | None = None
    """Override for metadata.name."""

    project: str | None = None
    """Override for metadata.project."""

    namespace: str | None = None
    """Override for spec.namespace."""

    version: str | None = None
    """Override for spec.version."""

    api_key: str = ""
    """Key for the deployment API."""

    api_secret: str | None = None
    """Secret for the deployment API, the api key is used when unset."""

    rctl_project: str = DEFAULT_RCTL_PROJECT
    """Project rctl is run against."""

    @classmethod
    def from_dict(cls, values: Mapping[str, Any]) -> "AddonInputs":
        """Build inputs from field names, treating empty values as unset."""
        spec_file = _optional(values.get("spec_file"))
        artifact_path = _optional(values.get("artifact_path"))
        return cls(
            spec_file=Path(spec_file) if spec_file else None,
            artifact_path=Path(artifact_path) if artifact_path else None,
            name=_optional(values.get("name")),
            project=_optional(values.get("project")),
            namespace=_optional(values.get("namespace")),
            version=_optional(values.get("version")),
            api_key=values.get("api_key") or "",
            api_secret=_optional(values.get("api_secret")),
            rctl_project=values.get("rctl_project") or DEFAULT_RCTL_PROJECT,
        )

    @classmethod
    def from_env(cls, environ: Mapping[str, str]) -> "AddonInputs":
        """Build inputs from the environment variables of the action."""
        return cls.from_dict(
            {field: environ.get(var) for var, field in ENV_VARS.items()}
        )

    def validate(self) -> None:
        """Check that exactly one of the spec file or artifact path is set."""
        if self.spec_file is None and self.artifact_path is None:
            raise ConfigurationError(
                "One of $SPEC_FILE or $ARTIFACT_PATH needs to be set"
            )
        if self.spec_file is not None and self.artifact_path is not None:
            raise ConfigurationError(
                "Both $SPEC_FILE and $ARTIFACT_PATH can not be set at the same time"
            )

    @property
    def overrides(self) -> dict[str, str]:
        """Spec document fields to overwrite, keyed by dotted path."""
        fields = {
            "metadata.name": self.name,
            "metadata.project": self.project,
            "spec.namespace": self.namespace,
            "spec.version": self.version,
        }
        return {path: value for path, value in fields.items() if value}
