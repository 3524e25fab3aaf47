"""Library for flags common to the addon commands."""

from argparse import ArgumentParser
import os
from typing import Any

from addon_deploy.config import AddonInputs, ENV_VARS
from addon_deploy.helm import HELM_BIN
from addon_deploy.rctl import RCTL_BIN

# Flag name and help text for each AddonInputs field
INPUT_FLAGS = {
    "spec_file": "Path to an existing addon spec file",
    "artifact_path": "Chart or yaml manifests to generate a spec for",
    "name": "If present, overrides metadata.name of the spec",
    "project": "If present, overrides metadata.project of the spec",
    "namespace": "If present, overrides spec.namespace of the spec",
    "version": "If present, overrides spec.version of the spec",
}
PUBLISH_FLAGS = {
    "api_key": "Key for the deployment api",
    "api_secret": "Secret for the deployment api, defaults to the key",
    "rctl_project": "The project rctl is run against",
}

_ENV_VAR_FOR_FIELD = {field: var for var, field in ENV_VARS.items()}


def _add_env_flags(args: ArgumentParser, flags: dict[str, str]) -> None:
    """Add a string flag per field, defaulting to its environment variable.

    Values are kept as strings so that empty flags and empty environment
    variables are both treated as unset by AddonInputs.
    """
    env_inputs = AddonInputs.from_env(os.environ)
    for field, help_text in flags.items():
        default = getattr(env_inputs, field)
        args.add_argument(
            f"--{field.replace('_', '-')}",
            type=str,
            default=str(default) if default is not None else None,
            help=f"{help_text} (${_ENV_VAR_FOR_FIELD[field]})",
        )


def add_input_flags(args: ArgumentParser) -> None:
    """Add the spec and override flags, defaulting to the action environment."""
    _add_env_flags(args, INPUT_FLAGS)
    args.add_argument(
        "--helm-bin",
        type=str,
        default=HELM_BIN,
        help="The helm binary used for packaging charts",
    )


def add_publish_flags(args: ArgumentParser) -> None:
    """Add the flags used to authenticate with the deployment api."""
    _add_env_flags(args, PUBLISH_FLAGS)
    args.add_argument(
        "--rctl-bin",
        type=str,
        default=RCTL_BIN,
        help="The rctl binary used for publishing",
    )


def build_inputs(**kwargs: Any) -> AddonInputs:
    """Create an AddonInputs object based on flags."""
    return AddonInputs.from_dict(kwargs)
