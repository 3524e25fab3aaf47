"""Library for building an addon spec and publishing it.

The pipeline runs these steps in order, and any failure ends the run:
  - Validate that exactly one of a spec file or artifact path is given
  - Generate a spec file from the artifact path, if needed
  - Package a local chart directory and merge local yaml files
  - Override spec fields from the inputs
  - Publish the spec with rctl

All intermediate files are written to a workspace directory owned by the run:
```python
from addon_deploy import addon
from addon_deploy.config import AddonInputs

inputs = AddonInputs.from_env(os.environ)
with addon.workspace() as tmp_dir:
    await addon.deploy(inputs, tmp_dir)
```
"""

from collections.abc import Generator
from contextlib import contextmanager
import logging
from pathlib import Path
import shutil
import tempfile

from aiofiles.ospath import exists, isdir, isfile

from . import command
from .bundle import YamlBundle
from .config import AddonInputs
from .exceptions import ConfigurationError, NotFoundError
from .helm import Helm, is_chart
from .manifest import (
    ADDON_API_VERSION,
    ADDON_KIND,
    ARTIFACT_TYPE_HELM,
    ARTIFACT_TYPE_YAML,
    AddonSpec,
    file_ref,
    read_spec,
    write_spec,
)
from .rctl import Rctl

__all__ = [
    "workspace",
    "synthesize_spec",
    "resolve_spec",
    "normalize",
    "override_fields",
    "prepare",
    "deploy",
]

_LOGGER = logging.getLogger(__name__)


GENERATED_SPEC_NAME = "generated-addon"
CHART_ARCHIVE_NAME = "helm-chart.tgz"
COMBINED_YAML_NAME = "combined.yaml"


@contextmanager
def workspace() -> Generator[Path]:
    """Context manager for the scratch directory of a single run."""
    with tempfile.TemporaryDirectory(prefix="addon.") as tmp_dir:
        yield Path(tmp_dir)


async def synthesize_spec(artifact_path: Path) -> AddonSpec:
    """Generate a spec file that references the artifact path.

    Directory artifacts get the spec file inside the directory, file
    artifacts get it in their parent directory.
    """
    if not await exists(artifact_path):
        raise NotFoundError(f"Artifact path does not exist: {artifact_path}")

    if await isfile(artifact_path):
        spec_path = artifact_path.parent / GENERATED_SPEC_NAME
        ref = file_ref(artifact_path.name)
    else:
        spec_path = artifact_path / GENERATED_SPEC_NAME
        ref = file_ref("./")

    spec = AddonSpec(
        path=spec_path,
        doc={"apiVersion": ADDON_API_VERSION, "kind": ADDON_KIND},
    )
    if is_chart(artifact_path):
        spec.set("spec.artifact.type", ARTIFACT_TYPE_HELM)
        spec.set("spec.artifact.artifact.chartPath.name", ref)
    else:
        spec.set("spec.artifact.type", ARTIFACT_TYPE_YAML)
        spec.set("spec.artifact.artifact.paths", [{"name": ref}])
    await write_spec(spec)
    return spec


async def load_spec(spec_file: Path) -> AddonSpec:
    """Read an existing spec file."""
    if not await isfile(spec_file):
        raise NotFoundError(f"Specified spec file does not exist: {spec_file}")
    return await read_spec(spec_file)


async def resolve_spec(inputs: AddonInputs) -> AddonSpec:
    """Return the spec named by the inputs, generating it from an artifact."""
    inputs.validate()
    if inputs.spec_file is not None:
        return await load_spec(inputs.spec_file)
    if inputs.artifact_path is None:
        raise ConfigurationError(
            "One of $SPEC_FILE or $ARTIFACT_PATH needs to be set"
        )
    _LOGGER.info("Generating addon spec from input variables ...")
    return await synthesize_spec(inputs.artifact_path)


async def package_chart(spec: AddonSpec, tmp_dir: Path, helm: Helm) -> None:
    """Package a local chart directory and point the spec at the archive."""
    if not (chart_ref := spec.artifact.chart_ref):
        return
    chart_dir = spec.resolve(chart_ref)
    if not await isdir(chart_dir):
        return
    _LOGGER.info("Packaging helm chart into tgz archive ...")
    archive = await helm.package(chart_dir, tmp_dir / "chart")

    _LOGGER.info("Updating spec file to use packaged chart ...")
    shutil.copyfile(archive, spec.base_dir / CHART_ARCHIVE_NAME)
    spec.set_chart_path(CHART_ARCHIVE_NAME)


async def merge_yaml(spec: AddonSpec, tmp_dir: Path) -> None:
    """Merge all local yaml references and point the spec at the bundle."""
    if not (refs := spec.artifact.path_refs):
        return
    _LOGGER.info("Merging all specified yaml manifests into one file ...")
    bundle = YamlBundle()
    for ref in refs:
        await bundle.add(spec.base_dir, ref)
    combined = tmp_dir / COMBINED_YAML_NAME
    await bundle.write(combined)

    _LOGGER.info("Updating spec file to use merged yaml bundle ...")
    shutil.copyfile(combined, spec.base_dir / COMBINED_YAML_NAME)
    spec.set_paths([COMBINED_YAML_NAME])


async def normalize(spec: AddonSpec, tmp_dir: Path, helm: Helm | None = None) -> None:
    """Rewrite local artifacts into the single-file form the api accepts.

    Artifacts from a remote repository are left untouched.
    """
    if spec.artifact.is_remote:
        _LOGGER.debug("Artifact is from a remote repository, skipping packaging")
        return
    await package_chart(spec, tmp_dir, helm or Helm())
    await merge_yaml(spec, tmp_dir)


def override_fields(spec: AddonSpec, inputs: AddonInputs) -> None:
    """Overwrite spec fields with any values set in the inputs."""
    _LOGGER.info("Updating spec fields from input ...")
    for key, value in inputs.overrides.items():
        command.log_indent(_LOGGER, f'.{key} = "{value}"')
        spec.set(key, value)


async def prepare(
    inputs: AddonInputs, tmp_dir: Path, helm: Helm | None = None
) -> AddonSpec:
    """Build the final spec file from the inputs without publishing it."""
    spec = await resolve_spec(inputs)

    await normalize(spec, tmp_dir, helm)
    override_fields(spec, inputs)
    await write_spec(spec)
    return spec


async def deploy(
    inputs: AddonInputs,
    tmp_dir: Path,
    helm: Helm | None = None,
    rctl: Rctl | None = None,
) -> AddonSpec:
    """Build the final spec file and publish it with rctl."""
    spec = await prepare(inputs, tmp_dir, helm)
    if rctl is None:
        rctl = Rctl(
            inputs.api_key,
            api_secret=inputs.api_secret,
            project=inputs.rctl_project,
        )
    _LOGGER.info("Deploying addon ...")
    await rctl.create_addon_version(spec.path)
    _LOGGER.info("all done.")
    return spec
