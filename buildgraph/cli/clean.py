"""Clean command: delete the root output directory of a project tree."""

from __future__ import annotations

import logging

from buildgraph.cli.configure import COMMAND_ERRORS, project_dir_from_args
from buildgraph.config import load_graph_build_config
from buildgraph.graph import clean_layout, resolve_build_root

logger = logging.getLogger("buildgraph.cli.clean")


def clean_command(args) -> int:
    """Execute clean command.

    Only the build directory is needed, so the tool SDK is not resolved.

    Returns:
        int: Exit code (0 for success, non-zero for failure).
    """
    try:
        config = load_graph_build_config(getattr(args, "config", None))
        build_root = resolve_build_root(
            project_dir_from_args(args), config.project.build_dir
        )
        clean_layout(build_root)
        return 0
    except COMMAND_ERRORS as err:
        logger.error("Clean failed: %s", err)
        return 1
