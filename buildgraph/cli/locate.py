"""Locate command: report where the external tool SDK is resolved from."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

from rich.console import Console

from buildgraph.cli.configure import COMMAND_ERRORS
from buildgraph.graph import ExternalToolLocator
from buildgraph.graph.locator import (
    DEFAULT_ENV_VAR,
    DEFAULT_PROPERTIES_FILE,
    DEFAULT_SDK_KEY,
)

logger = logging.getLogger("buildgraph.cli.locate")


def locate_command(args, console: Optional[Console] = None) -> int:
    """Execute locate command.

    Args:
        args: Parsed command-line arguments containing project_dir,
            properties_file, key and env_var.
        console: Console for the result line (defaults to stdout).

    Returns:
        int: Exit code (0 when a location was resolved).
    """
    console = console or Console()
    project_dir = Path(getattr(args, "project_dir", None) or ".").expanduser().absolute()
    properties_file = getattr(args, "properties_file", None) or DEFAULT_PROPERTIES_FILE

    locator = ExternalToolLocator(
        project_dir / properties_file,
        env_var=getattr(args, "env_var", None) or DEFAULT_ENV_VAR,
        key=getattr(args, "key", None) or DEFAULT_SDK_KEY,
    )
    try:
        location = locator.resolve()
    except COMMAND_ERRORS as err:
        logger.error("Locate failed: %s", err)
        return 1

    console.print(
        f"{location.path} [dim]({location.provenance.value}: {location.source})[/dim]"
    )
    console.print(f"plugin build: {location.plugin_build_path}", highlight=False)
    return 0
