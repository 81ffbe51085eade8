"""
Command-line interface for solution build events.

This module embeds the orchestrator in a standalone process with an
in-process host, so command documents can be created, edited and
exercised outside an IDE (for example from a build script).
"""

import argparse
import asyncio
import logging
import sys
import tomllib
from pathlib import Path
from typing import List, Optional

from ..config import get_config, set_config_path
from ..events.host import InProcessBuildHost
from ..models.config import EventKind, HookSettings
from ..orchestration import Orchestrator
from ..system.commands import check_shell_available
from ..validation import SolutionEventsError, handle_cli_error

LOG_FORMAT = "%(asctime)s [%(levelname)-5.5s] %(name)s:%(filename)s:%(lineno)d\t %(message)s"

logger = logging.getLogger(__name__)

EVENT_CHOICES = {
    "pre-build": EventKind.PRE_BUILD,
    "post-build": EventKind.POST_BUILD,
    "configuration-changed": EventKind.CONFIGURATION_CHANGED,
}


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="solution-events",
        description="Run configured shell commands on solution build events.",
    )
    parser.add_argument(
        "--settings",
        type=Path,
        help="Path to the hooks settings TOML file (overrides SOLUTION_EVENTS_CONFIG).",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Enable debug logging.",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    edit_parser = subparsers.add_parser(
        "edit",
        help="Create the solution's command document if needed and open it.",
    )
    edit_parser.add_argument("solution", type=Path, help="Path to the solution file.")

    fire_parser = subparsers.add_parser(
        "fire",
        help="Simulate a lifecycle event and run its configured commands.",
    )
    fire_parser.add_argument("solution", type=Path, help="Path to the solution file.")
    fire_parser.add_argument("event", choices=sorted(EVENT_CHOICES), help="Event to fire.")
    fire_parser.add_argument(
        "--configuration",
        default="Debug",
        help="New active configuration name for configuration-changed (default: Debug).",
    )
    return parser


def setup_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format=LOG_FORMAT,
        datefmt="%Y-%m-%d %H:%M:%S",
        stream=sys.stdout,
    )


def load_settings(settings_path: Optional[Path]) -> HookSettings:
    if settings_path is not None:
        set_config_path(settings_path)
    try:
        return get_config()
    except (SolutionEventsError, tomllib.TOMLDecodeError, OSError) as e:
        handle_cli_error(
            error=e,
            context="settings loading",
            exit_code=1,
            include_traceback=False,
            logger=logger,
        )


def run_edit(solution: Path, settings: HookSettings) -> Path:
    host = InProcessBuildHost(solution_path=solution.resolve())
    orchestrator = Orchestrator.from_settings(host, settings)
    path = orchestrator.on_manual_invoke()
    logger.info(f"Command document: {path}")
    return path


async def run_fire(
    solution: Path, kind: EventKind, configuration: str, settings: HookSettings
) -> None:
    """Start an orchestrator, raise one host notification and wait for it."""
    host = InProcessBuildHost(solution_path=solution.resolve())
    orchestrator = Orchestrator.from_settings(host, settings)
    await orchestrator.start()
    try:
        if kind is EventKind.PRE_BUILD:
            host.begin_build()
        elif kind is EventKind.POST_BUILD:
            host.finish_build()
        else:
            host.change_configuration(configuration)
        await orchestrator.drain()
    finally:
        await orchestrator.stop()
        orchestrator.sink.close()


def main_cli(argv: Optional[List[str]] = None) -> None:
    """
    Main command-line interface.

    Command failures inside a fired event are reported through the sink and
    never change the exit code; settings and document errors exit with 1.
    """
    args = build_parser().parse_args(argv)
    setup_logging(args.verbose)
    settings = load_settings(args.settings)

    if args.command == "edit":
        try:
            run_edit(args.solution, settings)
        except SolutionEventsError as e:
            handle_cli_error(
                error=e,
                context="opening command document",
                exit_code=1,
                logger=logger,
            )
        return

    if not check_shell_available(settings.shell):
        logger.warning(f"Command interpreter '{settings.shell}' was not found on PATH")

    asyncio.run(
        run_fire(args.solution, EVENT_CHOICES[args.event], args.configuration, settings)
    )


if __name__ == "__main__":
    main_cli()
