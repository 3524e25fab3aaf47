"""Library for running `helm package` to produce a chart archive.

A local chart directory is packaged into a single archive before the addon
is uploaded, since the deployment API only accepts a chart archive:
```python
from addon_deploy.helm import Helm

helm = Helm()
archive = await helm.package(Path("charts/podinfo"), Path("/tmp/out"))
print(f"Packaged chart {archive.name}")
```
"""

import logging
from pathlib import Path

from aiofiles.os import makedirs

from . import command
from .exceptions import HelmException

__all__ = [
    "Helm",
]

_LOGGER = logging.getLogger(__name__)


HELM_BIN = "helm"
CHART_DESCRIPTOR = "Chart.yaml"
CHART_ARCHIVE_SUFFIX = ".tgz"


def is_chart(path: Path) -> bool:
    """Return true if the path looks like a chart directory or chart archive."""
    return (path / CHART_DESCRIPTOR).is_file() or path.name.endswith(
        CHART_ARCHIVE_SUFFIX
    )


class Helm:
    """Runs helm commands against local charts."""

    def __init__(self, helm_bin: str = HELM_BIN) -> None:
        """Initialize Helm."""
        self._helm_bin = helm_bin

    async def package(self, chart_dir: Path, destination: Path) -> Path:
        """Package the chart directory and return the path of the archive.

        Chart dependencies are updated as part of packaging. The destination
        directory must not contain any other chart archives.
        """
        await makedirs(destination, exist_ok=True)
        args = [
            self._helm_bin,
            "package",
            "--dependency-update",
            "--destination",
            str(destination),
            str(chart_dir),
        ]
        out = await command.run(command.Command(args, exc=HelmException))
        command.log_indent(_LOGGER, out)
        archives = sorted(destination.glob(f"*{CHART_ARCHIVE_SUFFIX}"))
        if len(archives) != 1:
            raise HelmException(
                f"Expected one chart archive in {destination} after packaging "
                f"{chart_dir} but found {len(archives)}"
            )
        return archives[0]
