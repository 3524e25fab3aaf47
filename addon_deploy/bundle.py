"""Library for merging plain yaml manifests into a single bundle.

The rctl client only accepts a single yaml file per addon, so every file
referenced by the spec is concatenated into one document. Each source is
preceded by a document separator and a comment naming where it came from.
"""

import logging
import os
from pathlib import Path

import aiofiles
from aiofiles.ospath import isdir, isfile

from .exceptions import ConfigurationError, NotFoundError

__all__ = [
    "YamlBundle",
]

_LOGGER = logging.getLogger(__name__)

YAML_SUFFIXES = (".yaml", ".yml")


def find_yaml_files(root: Path) -> list[str]:
    """Return the yaml files under a directory as sorted relative paths."""
    found = []
    for dirpath, _, files in os.walk(str(root)):
        for file in files:
            if not file.lower().endswith(YAML_SUFFIXES):
                continue
            rel_path = (Path(dirpath) / file).relative_to(root)
            found.append(rel_path.as_posix())
    return sorted(found)


def _source_label(path: Path) -> str:
    """Label a source by its path relative to the spec file."""
    if path.is_absolute():
        return path.as_posix()
    return f"./{path.as_posix()}"


class YamlBundle:
    """Accumulates yaml sources into one combined document."""

    def __init__(self) -> None:
        """Initialize YamlBundle."""
        self._parts: list[str] = []
        self._sources: list[str] = []

    @property
    def sources(self) -> list[str]:
        """The source labels in the order they were added."""
        return list(self._sources)

    async def add_file(self, path: Path, source: str) -> None:
        """Append the contents of a single file."""
        _LOGGER.info("  + %s", path)
        async with aiofiles.open(str(path), encoding="utf-8") as yaml_file:
            try:
                content = await yaml_file.read()
            except UnicodeDecodeError as err:
                raise ConfigurationError(
                    f"Artifact file from spec is not valid utf-8: {path}: {err}"
                ) from err
        if content and not content.endswith("\n"):
            content += "\n"
        self._parts.append(f"---\n## Source: {source}\n{content}")
        self._sources.append(source)

    async def add_directory(self, path: Path, ref: str) -> None:
        """Append every yaml file found under the directory."""
        for rel_path in find_yaml_files(path):
            await self.add_file(path / rel_path, _source_label(Path(ref) / rel_path))

    async def add(self, base_dir: Path, ref: str) -> None:
        """Append a file or directory reference relative to base_dir."""
        path = base_dir / ref
        if await isfile(path):
            await self.add_file(path, _source_label(Path(ref)))
        elif await isdir(path):
            await self.add_directory(path, ref)
        else:
            raise NotFoundError(f"Artifact file from spec does not exist: {path}")

    def content(self) -> str:
        """Return the combined document."""
        return "".join(self._parts)

    async def write(self, path: Path) -> None:
        """Write the combined document to disk."""
        async with aiofiles.open(str(path), mode="w") as bundle_file:
            await bundle_file.write(self.content())
