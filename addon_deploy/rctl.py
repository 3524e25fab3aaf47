"""Library for publishing addons with the `rctl` command line tool."""

import logging
from pathlib import Path

from . import command
from .config import DEFAULT_RCTL_PROJECT
from .exceptions import RctlException

__all__ = [
    "Rctl",
]

_LOGGER = logging.getLogger(__name__)


RCTL_BIN = "rctl"


class Rctl:
    """Runs authenticated rctl commands."""

    def __init__(
        self,
        api_key: str,
        api_secret: str | None = None,
        project: str = DEFAULT_RCTL_PROJECT,
        rctl_bin: str = RCTL_BIN,
    ) -> None:
        """Initialize Rctl.

        The deployment API accepts the api key in both the key and secret
        slots, so the key is used for both unless a secret is given.
        """
        if not api_key:
            _LOGGER.warning("No api key was provided for rctl")
        self._env = {
            "RCTL_PROJECT": project,
            "RCTL_API_KEY": api_key,
            "RCTL_API_SECRET": api_secret or api_key,
        }
        self._rctl_bin = rctl_bin

    async def create_addon_version(self, spec_file: Path) -> str:
        """Upload the addon described by the spec file, returning rctl output."""
        args = [
            self._rctl_bin,
            "create",
            "addon",
            "version",
            "--v3",
            "-f",
            str(spec_file),
        ]
        cmd = command.Command(args, exc=RctlException, env=self._env)
        out = await command.run(cmd)
        command.log_indent(_LOGGER, out)
        return out
