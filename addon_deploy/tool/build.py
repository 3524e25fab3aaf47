"""Addon-deploy build action."""

from argparse import ArgumentParser, _SubParsersAction as SubParsersAction
import logging
import pathlib
from typing import Any, cast

from addon_deploy import addon
from addon_deploy.helm import Helm

from . import inputs

_LOGGER = logging.getLogger(__name__)


class BuildAction:
    """Addon-deploy build action."""

    @classmethod
    def register(
        cls, subparsers: SubParsersAction  # type: ignore[type-arg]
    ) -> ArgumentParser:
        """Register the subparser commands."""
        args = cast(
            ArgumentParser,
            subparsers.add_parser(
                "build",
                help="Build an addon spec without publishing it",
                description="""Runs every step of deploy except publishing and
                    writes the final addon spec, which is useful for checking
                    what would be uploaded.""",
            ),
        )
        args.add_argument(
            "--output-file",
            type=str,
            default="/dev/stdout",
            help="Output file for the final addon spec",
        )
        inputs.add_input_flags(args)
        args.set_defaults(cls=cls)
        return args

    async def run(
        self,
        workspace: pathlib.Path,
        helm_bin: str,
        output_file: str,
        **kwargs: Any,
    ) -> None:
        """Async Action implementation."""
        addon_inputs = inputs.build_inputs(**kwargs)
        spec = await addon.prepare(addon_inputs, workspace, helm=Helm(helm_bin))
        _LOGGER.info("Addon spec written to %s", spec.path)
        with open(output_file, "w") as file:
            file.write(spec.yaml())
