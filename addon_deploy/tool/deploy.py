"""Addon-deploy deploy action."""

from argparse import ArgumentParser, _SubParsersAction as SubParsersAction
import logging
import pathlib
from typing import Any, cast

from addon_deploy import addon
from addon_deploy.helm import Helm
from addon_deploy.rctl import Rctl

from . import inputs

_LOGGER = logging.getLogger(__name__)


class DeployAction:
    """Addon-deploy deploy action."""

    @classmethod
    def register(
        cls, subparsers: SubParsersAction  # type: ignore[type-arg]
    ) -> ArgumentParser:
        """Register the subparser commands."""
        args = cast(
            ArgumentParser,
            subparsers.add_parser(
                "deploy",
                help="Build an addon spec and publish it with rctl",
                description="""Builds the addon spec from a spec file or an
                    artifact path, packaging local charts and merging local yaml
                    files, then creates a new addon version with rctl.""",
            ),
        )
        inputs.add_input_flags(args)
        inputs.add_publish_flags(args)
        args.set_defaults(cls=cls)
        return args

    async def run(
        self,
        workspace: pathlib.Path,
        helm_bin: str,
        rctl_bin: str,
        **kwargs: Any,
    ) -> None:
        """Async Action implementation."""
        addon_inputs = inputs.build_inputs(**kwargs)
        rctl = Rctl(
            addon_inputs.api_key,
            api_secret=addon_inputs.api_secret,
            project=addon_inputs.rctl_project,
            rctl_bin=rctl_bin,
        )
        await addon.deploy(addon_inputs, workspace, helm=Helm(helm_bin), rctl=rctl)
