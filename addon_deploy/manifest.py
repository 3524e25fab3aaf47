"""Representation of an addon spec document.

An addon spec is a `infra.k8smgmt.io/v3` `Addon` object that describes where
the artifact for the addon lives, either a helm chart or a set of plain yaml
manifests. The document is kept as a raw mapping so that fields this library
does not know about survive a read/modify/write cycle, while the artifact
block is decoded into typed objects for inspection.

```python
from addon_deploy.manifest import read_spec, write_spec

spec = await read_spec(Path("addon.yaml"))
if not spec.artifact.is_remote:
    print(f"Chart reference: {spec.artifact.chart_ref}")
spec.set("spec.version", "v1.2.3")
await write_spec(spec)
```
"""

from dataclasses import dataclass, field
import logging
from pathlib import Path
from typing import Any

import aiofiles
from mashumaro import DataClassDictMixin, field_options
from mashumaro.config import BaseConfig
import yaml

from .exceptions import ConfigurationError

__all__ = [
    "read_spec",
    "write_spec",
    "AddonSpec",
    "Artifact",
    "ArtifactSource",
    "NamedPath",
]

_LOGGER = logging.getLogger(__name__)


ADDON_API_VERSION = "infra.k8smgmt.io/v3"
ADDON_KIND = "Addon"
ARTIFACT_TYPE_HELM = "Helm"
ARTIFACT_TYPE_YAML = "Yaml"
FILE_SCHEME = "file://"

CHART_PATH_KEY = "spec.artifact.artifact.chartPath.name"
PATHS_KEY = "spec.artifact.artifact.paths"


def strip_file_scheme(ref: str) -> str:
    """Return a local reference without the file:// prefix."""
    if ref.startswith(FILE_SCHEME):
        return ref[len(FILE_SCHEME) :]
    return ref


def file_ref(name: str) -> str:
    """Return a file:// reference for a name relative to the spec file."""
    return f"{FILE_SCHEME}{name}"


@dataclass
class BaseManifest(DataClassDictMixin):
    """Base class for all typed views of the spec document."""

    class Config(BaseConfig):
        omit_none = True
        serialize_by_alias = True


@dataclass
class NamedPath(BaseManifest):
    """A reference to a local or remote file."""

    name: str
    """The reference, typically with a file:// prefix."""


@dataclass
class ArtifactSource(BaseManifest):
    """Location of the addon artifact content."""

    chart_path: NamedPath | None = field(
        default=None, metadata=field_options(alias="chartPath")
    )
    """Reference to a chart directory or chart archive."""

    paths: list[NamedPath] | None = None
    """Ordered references to yaml files or directories."""

    repository: str | None = None
    """Name of a remote repository that holds the artifact."""


@dataclass
class Artifact(BaseManifest):
    """The spec.artifact block of an addon."""

    type: str | None = None
    """The artifact type e.g. Helm or Yaml."""

    artifact: ArtifactSource = field(default_factory=ArtifactSource)
    """Where the content of the artifact lives."""

    @classmethod
    def parse_doc(cls, doc: Any) -> "Artifact":
        """Parse the artifact block from a raw spec.artifact value."""
        if doc is None:
            return cls()
        if not isinstance(doc, dict):
            raise ConfigurationError(
                f"Invalid spec.artifact, expected a mapping: {doc}"
            )
        try:
            return cls.from_dict(doc)
        except (ValueError, LookupError) as err:
            raise ConfigurationError(f"Invalid spec.artifact: {err}") from err

    @property
    def is_remote(self) -> bool:
        """Return true if the artifact is fetched from a remote repository."""
        return bool(self.artifact.repository)

    @property
    def chart_ref(self) -> str | None:
        """Return the local chart reference without its file:// prefix."""
        if not self.artifact.chart_path or not self.artifact.chart_path.name:
            return None
        return strip_file_scheme(self.artifact.chart_path.name)

    @property
    def path_refs(self) -> list[str]:
        """Return the local yaml references without their file:// prefix."""
        return [
            strip_file_scheme(path.name)
            for path in self.artifact.paths or []
            if path.name
        ]


@dataclass
class AddonSpec:
    """A spec document loaded from, and written back to, a file on disk."""

    path: Path
    """Location of the spec file."""

    doc: dict[str, Any]
    """The raw contents of the spec document."""

    @property
    def base_dir(self) -> Path:
        """Directory that local artifact references are relative to."""
        return self.path.parent

    def get(self, key: str, default: Any = None) -> Any:
        """Return the value at a dotted path, or the default if missing."""
        node: Any = self.doc
        for part in key.split("."):
            if not isinstance(node, dict) or part not in node:
                return default
            node = node[part]
        return node

    def set(self, key: str, value: Any) -> None:
        """Set the value at a dotted path, creating mappings along the way."""
        parts = key.split(".")
        node = self.doc
        for part in parts[:-1]:
            child = node.get(part)
            if not isinstance(child, dict):
                child = {}
                node[part] = child
            node = child
        node[parts[-1]] = value

    @property
    def artifact(self) -> Artifact:
        """Return a typed view of the current artifact block."""
        return Artifact.parse_doc(self.get("spec.artifact"))

    def resolve(self, ref: str) -> Path:
        """Resolve a local artifact reference relative to the spec file."""
        return self.base_dir / strip_file_scheme(ref)

    def set_chart_path(self, name: str) -> None:
        """Point the chart reference at a file next to the spec file."""
        self.set(CHART_PATH_KEY, file_ref(name))

    def set_paths(self, names: list[str]) -> None:
        """Replace the yaml references with files next to the spec file."""
        self.set(PATHS_KEY, [{"name": file_ref(name)} for name in names])

    def yaml(self) -> str:
        """Return the serialized spec document."""
        return yaml.dump(self.doc, sort_keys=False)


def parse_spec(path: Path, content: str) -> AddonSpec:
    """Parse the contents of a spec file."""
    try:
        doc = yaml.safe_load(content)
    except yaml.YAMLError as err:
        raise ConfigurationError(f"Unable to parse spec file {path}: {err}") from err
    if doc is None:
        doc = {}
    if not isinstance(doc, dict):
        raise ConfigurationError(
            f"Invalid spec file {path}, expected a mapping but got {type(doc).__name__}"
        )
    return AddonSpec(path=path, doc=doc)


async def read_spec(path: Path) -> AddonSpec:
    """Return the contents of a spec file on disk."""
    async with aiofiles.open(str(path)) as spec_file:
        content = await spec_file.read()
    return parse_spec(path, content)


async def write_spec(spec: AddonSpec) -> None:
    """Write the spec document back to its file."""
    _LOGGER.debug("Writing spec file %s", spec.path)
    async with aiofiles.open(str(spec.path), mode="w") as spec_file:
        await spec_file.write(spec.yaml())
