"""Filesystem side of the output layout: create planned directories, clean."""

import logging
import shutil
from pathlib import Path
from typing import List, Mapping

logger = logging.getLogger("buildgraph.graph.layout")


def materialize_layout(output_plan: Mapping[str, Path]) -> List[Path]:
    """Create every directory of a complete output plan.

    Must only be called with a plan that was computed successfully in full.

    Returns:
        The directories that did not exist before.
    """
    created: List[Path] = []
    for node_path, directory in sorted(output_plan.items(), key=lambda item: str(item[1])):
        if not directory.exists():
            created.append(directory)
        directory.mkdir(parents=True, exist_ok=True)
        logger.debug("Output directory for %s: %s", node_path, directory)
    logger.info("Materialized %d output directories (%d new)", len(output_plan), len(created))
    return created


def clean_layout(root_output_dir: Path) -> bool:
    """Delete the root output directory and everything below it.

    Returns:
        True if something was removed.
    """
    if not root_output_dir.exists():
        logger.info("Nothing to clean at %s", root_output_dir)
        return False
    if not root_output_dir.is_dir():
        raise NotADirectoryError(f"Output path is not a directory: {root_output_dir}")
    shutil.rmtree(root_output_dir)
    logger.info("Removed output directory %s", root_output_dir)
    return True
