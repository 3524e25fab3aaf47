"""Test helpers for addon-deploy tools."""

import sys

from addon_deploy.command import Command, run

ADDON_DEPLOY_CMD = [sys.executable, "-m", "addon_deploy"]

# Clear inputs that may be set in the environment running the tests
EMPTY_INPUTS = {
    "SPEC_FILE": "",
    "ARTIFACT_PATH": "",
    "NAME": "",
    "PROJECT": "",
    "NAMESPACE": "",
    "VERSION": "",
    "RAFAY_API_KEY": "",
    "RAFAY_API_SECRET": "",
    "RCTL_PROJECT": "",
}


async def run_command(
    args: list[str],
    env: dict[str, str] | None = None,
    retcodes: list[int] | None = None,
) -> str:
    cmd = Command(
        ADDON_DEPLOY_CMD + args,
        env={**EMPTY_INPUTS, **(env or {})},
        retcodes=retcodes,
    )
    return await run(cmd)
