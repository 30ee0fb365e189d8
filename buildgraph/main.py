"""Main CLI entry point for buildgraph.

Provides commands: configure, locate, order, clean
"""

import argparse
import logging
import sys
from typing import Optional

from rich.console import Console
from rich.logging import RichHandler

from buildgraph.cli.clean import clean_command
from buildgraph.cli.configure import configure_command
from buildgraph.cli.locate import locate_command
from buildgraph.cli.order import order_command

logger = logging.getLogger("buildgraph.cli")


def setup_logging(verbose: bool = False, console: Optional[Console] = None) -> None:
    """Setup logging configuration with Rich integration.

    Args:
        verbose: Enable verbose logging.
        console: Rich Console instance for coordinated output (optional).
    """
    if verbose:
        level = logging.DEBUG
    else:
        level = logging.INFO

    handler = RichHandler(
        console=console or Console(stderr=True),
        show_time=True,
        show_path=False,
        markup=False,
        rich_tracebacks=True,
        tracebacks_show_locals=verbose,
        log_time_format="[%H:%M:%S]",
    )

    logging.basicConfig(
        level=level,
        format="[%(name)s] %(message)s",
        handlers=[handler],
    )


def _add_project_dir(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--project-dir",
        help=(
            "Directory containing the root project. Defaults to the folder of "
            "the configuration file, or the current directory for inline config."
        ),
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Buildgraph - Multi-module build configuration propagator",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Enable verbose logging",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    configure_parser = subparsers.add_parser(
        "configure",
        help="Resolve the project graph and export it as JSON",
    )
    configure_parser.add_argument(
        "config",
        help="Project tree description: TOML/JSON file or inline TOML/JSON string",
    )
    configure_parser.add_argument(
        "-o",
        "--output",
        required=True,
        help="Output graph file (JSON)",
    )
    _add_project_dir(configure_parser)
    configure_parser.add_argument(
        "--materialize",
        action="store_true",
        help="Create the planned output directories after a successful build",
    )

    locate_parser = subparsers.add_parser(
        "locate",
        help="Resolve the external tool SDK location",
    )
    _add_project_dir(locate_parser)
    locate_parser.add_argument(
        "--properties-file",
        help="Properties file relative to the project directory (default: local.properties)",
    )
    locate_parser.add_argument(
        "--key",
        help="Properties key naming the SDK path (default: flutter.sdk)",
    )
    locate_parser.add_argument(
        "--env-var",
        help="Environment variable used as fallback (default: FLUTTER_SDK)",
    )

    order_parser = subparsers.add_parser(
        "order",
        help="Show evaluation order and resolved settings per project",
    )
    order_parser.add_argument("config", help="Project tree description")
    _add_project_dir(order_parser)

    clean_parser = subparsers.add_parser(
        "clean",
        help="Delete the root output directory",
    )
    clean_parser.add_argument("config", help="Project tree description")
    _add_project_dir(clean_parser)

    return parser


def main() -> int:
    """Main CLI entry point.

    Returns:
        int: Exit code.
    """
    parser = build_parser()
    args = parser.parse_args()

    setup_logging(args.verbose)

    if args.command == "configure":
        return configure_command(args)
    elif args.command == "locate":
        return locate_command(args)
    elif args.command == "order":
        return order_command(args)
    elif args.command == "clean":
        return clean_command(args)
    else:
        parser.print_help()
        return 1


if __name__ == "__main__":
    sys.exit(main())
