"""Command line tool for building and publishing addons from a CI step."""

import argparse
import asyncio
import logging
import signal
import sys
from types import FrameType

from addon_deploy import addon, command
from addon_deploy.exceptions import AddonException
from . import build, deploy

_LOGGER = logging.getLogger(__name__)

LOG_FORMAT = "[%(asctime)s]: %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%dT%H:%M:%S%z"

# Exit status of a process terminated by SIGTERM
SIGTERM_EXIT = 143


def _make_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Command line utility for publishing addons with rctl.",
    )
    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        default="INFO",
    )

    subparsers = parser.add_subparsers(dest="command", help="Command", required=True)

    deploy.DeployAction.register(subparsers)
    build.BuildAction.register(subparsers)
    return parser


def _handle_sigterm(signum: int, frame: FrameType | None) -> None:
    """Unwind the stack so the workspace is removed on termination."""
    raise SystemExit(SIGTERM_EXIT)


def main() -> None:
    """Addon-deploy command line tool main entry point."""
    parser = _make_parser()
    args = parser.parse_args()

    logging.basicConfig(
        stream=sys.stdout,
        level=args.log_level,
        format=LOG_FORMAT,
        datefmt=LOG_DATE_FORMAT,
    )
    signal.signal(signal.SIGTERM, _handle_sigterm)

    action = args.cls()
    try:
        with addon.workspace() as workspace:
            asyncio.run(action.run(workspace=workspace, **vars(args)))
    except AddonException as err:
        # Tool output follows the first line of the message
        summary, _, details = str(err).partition("\n")
        _LOGGER.error("%s", summary, exc_info=args.log_level == "DEBUG")
        command.log_indent(_LOGGER, details, level=logging.ERROR)
        sys.exit(1)


if __name__ == "__main__":
    main()
