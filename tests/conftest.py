"""Fixtures for addon-deploy tests.

External tools are replaced with small shell scripts that record how they
were called next to themselves, e.g. `helm.args` and `rctl.env`.
"""

from pathlib import Path

import pytest

FAKE_HELM = """#!/bin/sh
echo "$@" > "$0.args"
dest=""
chart=""
while [ $# -gt 0 ]; do
  case "$1" in
    --destination) dest="$2"; shift 2 ;;
    --*) shift ;;
    *) chart="$1"; shift ;;
  esac
done
if [ ! -f "$chart/Chart.yaml" ]; then
  echo "Error: Chart.yaml file is missing" >&2
  exit 1
fi
name=$(basename "$chart")
echo "archive of $name" > "$dest/$name-0.1.0.tgz"
echo "Successfully packaged chart and saved it to: $dest/$name-0.1.0.tgz"
"""

FAKE_RCTL = """#!/bin/sh
echo "$@" > "$0.args"
env | grep '^RCTL_' | LC_ALL=C sort > "$0.env"
echo "addon version created"
"""

FAILING_RCTL = """#!/bin/sh
echo "Error: unauthorized" >&2
exit 3
"""

SLOW_RCTL = """#!/bin/sh
echo "started" > "$0.started"
exec sleep 30
"""


def write_script(path: Path, content: str) -> Path:
    """Write an executable script."""
    path.write_text(content)
    path.chmod(0o755)
    return path


@pytest.fixture(name="bin_dir")
def bin_dir_fixture(tmp_path: Path) -> Path:
    """Directory holding fake tool binaries."""
    bin_dir = tmp_path / "bin"
    bin_dir.mkdir()
    return bin_dir


@pytest.fixture(name="fake_helm")
def fake_helm_fixture(bin_dir: Path) -> Path:
    """A fake helm binary that writes a chart archive."""
    return write_script(bin_dir / "helm", FAKE_HELM)


@pytest.fixture(name="fake_rctl")
def fake_rctl_fixture(bin_dir: Path) -> Path:
    """A fake rctl binary that records its arguments and environment."""
    return write_script(bin_dir / "rctl", FAKE_RCTL)


@pytest.fixture(name="failing_rctl")
def failing_rctl_fixture(bin_dir: Path) -> Path:
    """A fake rctl binary that always fails."""
    return write_script(bin_dir / "rctl-failing", FAILING_RCTL)


@pytest.fixture(name="workspace")
def workspace_fixture(tmp_path: Path) -> Path:
    """Scratch directory for a single run."""
    workspace = tmp_path / "workspace"
    workspace.mkdir()
    return workspace


@pytest.fixture(name="repo_dir")
def repo_dir_fixture(tmp_path: Path) -> Path:
    """Directory standing in for the checked out repository."""
    repo_dir = tmp_path / "repo"
    repo_dir.mkdir()
    return repo_dir


@pytest.fixture(name="chart_dir")
def chart_dir_fixture(repo_dir: Path) -> Path:
    """A minimal local helm chart."""
    chart_dir = repo_dir / "podinfo"
    (chart_dir / "templates").mkdir(parents=True)
    (chart_dir / "Chart.yaml").write_text(
        "apiVersion: v2\nname: podinfo\nversion: 0.1.0\n"
    )
    (chart_dir / "templates" / "service.yaml").write_text(
        "apiVersion: v1\nkind: Service\nmetadata:\n  name: podinfo\n"
    )
    return chart_dir


@pytest.fixture(name="slow_rctl")
def slow_rctl_fixture(bin_dir: Path) -> Path:
    """A fake rctl binary that signals it started and then blocks."""
    return write_script(bin_dir / "rctl-slow", SLOW_RCTL)
