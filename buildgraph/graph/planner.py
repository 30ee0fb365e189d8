"""Output directory planning for the root project and its subprojects."""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Dict, Sequence, Union

from buildgraph.graph.errors import DuplicateOutputDirectory, GraphConfigurationError
from buildgraph.graph.models import ProjectNode

logger = logging.getLogger("buildgraph.graph.planner")

DEFAULT_BUILD_DIR = "../build"


def resolve_build_root(project_dir: Union[str, Path], build_dir: str) -> Path:
    """Resolve the configured build directory against the project directory.

    ``../build`` places all outputs in a ``build`` directory next to the
    project directory. Symlinks are not resolved.

    Raises:
        GraphConfigurationError: If the build root is the project directory
            or one of its ancestors; cleaning it would delete the sources.
    """
    project_root = Path(os.path.normpath(Path(project_dir).absolute()))
    candidate = Path(build_dir).expanduser()
    if not candidate.is_absolute():
        candidate = project_root / candidate
    build_root = Path(os.path.normpath(candidate))
    if build_root == project_root or build_root in project_root.parents:
        raise GraphConfigurationError(
            f"Build directory {build_dir!r} resolves to {build_root}, which "
            f"contains the project directory {project_root}"
        )
    return build_root


def plan(
    root: ProjectNode,
    children: Sequence[ProjectNode],
    new_root: Path,
) -> Dict[str, Path]:
    """Compute the redirected output directory of every supplied node.

    The root is assigned ``new_root`` and each child ``new_root/<name>``.
    Nothing is created on disk; materialisation happens only after the
    whole plan succeeded.

    Args:
        root: Root project node.
        children: Subproject nodes.
        new_root: Root output directory.

    Returns:
        Dict mapping node path to its output directory.

    Raises:
        DuplicateOutputDirectory: If two nodes would share a directory.
    """
    owners: Dict[Path, str] = {}
    result: Dict[str, Path] = {}

    for node in [root, *children]:
        target = new_root if node.is_root else Path(os.path.normpath(new_root / node.name))
        existing = owners.get(target)
        if existing is not None or node.path in result:
            raise DuplicateOutputDirectory(
                str(target), [existing or node.path, node.path]
            )
        owners[target] = node.path
        result[node.path] = target

    logger.debug("Planned %d output directories under %s", len(result), new_root)
    return result
