"""JSON export for resolved project graphs."""

import json
import logging
from pathlib import Path

from buildgraph.graph.project_graph import ProjectGraph

logger = logging.getLogger("buildgraph.export.json")


def export_json(graph: ProjectGraph, output_path: Path) -> None:
    """Export graph to JSON format.

    Args:
        graph: Resolved project graph to export.
        output_path: Output file path.
    """
    logger.info("Exporting graph to JSON: %s", output_path)

    output_path.parent.mkdir(parents=True, exist_ok=True)

    data = graph.to_dict()

    with open(output_path, "w", encoding="utf-8") as f:
        json.dump(data, f, indent=2, ensure_ascii=False)

    logger.info("JSON export completed: %d nodes, %d edges",
                len(data["nodes"]), len(data["edges"]))
