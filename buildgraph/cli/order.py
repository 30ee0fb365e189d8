"""Order command: show evaluation order and resolved settings per project.

Fails when ordering constraints contain a cycle, so CI pipelines can
enforce a consistent project tree.
"""

from __future__ import annotations

import logging
from typing import Optional

from rich.console import Console
from rich.table import Table

from buildgraph.cli.configure import COMMAND_ERRORS, build_graph_from_args
from buildgraph.graph import EvaluationCycle, ProjectGraph

logger = logging.getLogger("buildgraph.cli.order")


def _render_table(graph: ProjectGraph) -> Table:
    table = Table(title=f"Project graph: {graph.name}")
    table.add_column("#", justify="right")
    table.add_column("Project")
    table.add_column("Role")
    table.add_column("Namespace")
    table.add_column("SDK (compile/min/target)")
    table.add_column("JVM")
    table.add_column("Output directory")

    for index, path in enumerate(graph.evaluation_order, start=1):
        node = graph.nodes[path]
        bounds = node.sdk_bounds
        sdk = "/".join("-" if v is None else str(v) for v in (bounds.compile, bounds.min, bounds.target))
        table.add_row(
            str(index),
            node.path,
            node.role.value,
            node.namespace or "-",
            sdk,
            node.jvm_target or "-",
            str(node.output_dir),
        )
    return table


def order_command(args, console: Optional[Console] = None) -> int:
    """Execute order command.

    Args:
        args: Parsed command-line arguments (config, project_dir).
        console: Console used for the table (defaults to stdout).

    Returns:
        int: Exit code (0 for success, non-zero for failure).
    """
    console = console or Console()
    try:
        graph = build_graph_from_args(args)
    except EvaluationCycle as err:
        logger.error("Ordering constraints unsatisfiable: %s", " -> ".join(err.cycle))
        return 1
    except COMMAND_ERRORS as err:
        logger.error("Order failed: %s", err)
        return 1

    console.print(_render_table(graph))
    for generation, batch in enumerate(graph.parallel_batches(), start=1):
        logger.debug("Batch %d: %s", generation, ", ".join(batch))
    return 0
