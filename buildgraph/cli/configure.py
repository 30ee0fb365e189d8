"""Configure command: build the project graph and export it as JSON."""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Optional

from pydantic import ValidationError

from buildgraph.config import load_graph_build_config
from buildgraph.export.json import export_json
from buildgraph.graph import (
    GraphConfigurationError,
    ProjectGraph,
    materialize_layout,
)

logger = logging.getLogger("buildgraph.cli.configure")

# Failures a command reports as exit code 1 instead of a traceback.
COMMAND_ERRORS = (GraphConfigurationError, ValidationError, ValueError, OSError)


def project_dir_from_args(args) -> Path:
    """Return the project directory: --project-dir, else the config's folder."""
    project_dir_arg = getattr(args, "project_dir", None)
    if project_dir_arg:
        return Path(project_dir_arg).expanduser().absolute()
    config_arg = getattr(args, "config", None)
    if config_arg and os.path.isfile(config_arg):
        return Path(config_arg).expanduser().absolute().parent
    return Path.cwd()


def build_graph_from_args(args) -> ProjectGraph:
    """Load the tree description named by ``args.config`` and build the graph."""
    config = load_graph_build_config(getattr(args, "config", None))
    project_dir = project_dir_from_args(args)
    logger.info("Project directory: %s", project_dir)
    return ProjectGraph.build(config, project_dir)


def configure_command(args) -> int:
    """Execute configure command.

    Args:
        args: Parsed command-line arguments containing:
            - config: Project tree description (path or inline TOML/JSON)
            - output: Output JSON file
            - project_dir: Project directory (optional)
            - materialize: Create the planned output directories (optional)

    Returns:
        int: Exit code (0 for success, non-zero for failure).
    """
    logger.info("=== Buildgraph Configure ===")

    output_path: Optional[Path] = Path(args.output) if getattr(args, "output", None) else None

    try:
        graph = build_graph_from_args(args)

        if getattr(args, "materialize", False):
            materialize_layout(graph.output_plan)

        if output_path is not None:
            export_json(graph, output_path)
            logger.info("Configuration exported: %s", output_path)
        return 0

    except COMMAND_ERRORS as err:
        logger.error("Configure failed: %s", err)
        return 1
