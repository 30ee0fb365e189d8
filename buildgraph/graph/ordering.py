"""Evaluation ordering constraints between project nodes.

Library defaults may need to observe what the application module already
claimed (namespace, group), so every non-application subproject is
evaluated after the application. Modules may also declare explicit
evaluate-after dependencies. The full edge set is checked for cycles once
per graph build.
"""

from __future__ import annotations

import logging
from typing import Dict, Iterable, List, Set

import networkx as nx
from networkx.exception import NetworkXNoCycle

from buildgraph.graph.errors import EvaluationCycle, GraphConfigurationError
from buildgraph.graph.models import EvaluationEdge, NodeRole, ProjectNode

logger = logging.getLogger("buildgraph.graph.ordering")

_ROLE_RANK = {NodeRole.ROOT: 0, NodeRole.APPLICATION: 1, NodeRole.LIBRARY: 2}


def _edge_graph(nodes: Iterable[ProjectNode], edges: Iterable[EvaluationEdge]) -> nx.DiGraph:
    """Build a DiGraph with edges pointing from dependency to dependent."""
    graph = nx.DiGraph()
    for node in nodes:
        graph.add_node(node.path, role=node.role)
    for edge in edges:
        graph.add_edge(edge.dependency, edge.dependent)
    return graph


def check_acyclic(graph: nx.DiGraph) -> None:
    """Raise EvaluationCycle if the ordering graph contains a cycle."""
    try:
        cycle = nx.find_cycle(graph)
    except NetworkXNoCycle:
        return
    # find_cycle walks dependency -> dependent; report in dependent order.
    members = [source for source, _target in cycle]
    raise EvaluationCycle(list(reversed(members)))


def constrain(nodes: Iterable[ProjectNode]) -> Set[EvaluationEdge]:
    """Compute the evaluate-after edges for a set of project nodes.

    Args:
        nodes: All nodes of the graph.

    Returns:
        Set of EvaluationEdge (dependent, dependency).

    Raises:
        EvaluationCycle: On a self-dependency or a cycle in the edge set.
        GraphConfigurationError: If a declared dependency names an unknown node.
    """
    node_list = list(nodes)
    known = {node.path for node in node_list}
    applications = [n.path for n in node_list if n.role is NodeRole.APPLICATION]
    if not applications:
        logger.debug("No application project; only explicit ordering applies")

    edges: Set[EvaluationEdge] = set()
    for node in node_list:
        if node.role is NodeRole.LIBRARY:
            for app in applications:
                edges.add(EvaluationEdge(dependent=node.path, dependency=app))

        for dependency in node.depends_on:
            if dependency == node.path:
                raise EvaluationCycle([node.path], detail="self-dependency")
            if dependency not in known:
                raise GraphConfigurationError(
                    f"Project {node.path} depends on unknown project {dependency}"
                )
            edges.add(EvaluationEdge(dependent=node.path, dependency=dependency))

    check_acyclic(_edge_graph(node_list, edges))
    logger.debug("Constrained %d nodes with %d edges", len(node_list), len(edges))
    return edges


def evaluation_order(
    nodes: Iterable[ProjectNode], edges: Iterable[EvaluationEdge]
) -> List[str]:
    """Return node paths with every dependency before its dependents.

    Edges are expected to come from :func:`constrain`, which already
    checked them; a cycle is only diagnosed here if sorting fails.

    Ties are broken by role (root, application, library) and then path so
    the order is stable across runs.
    """
    node_list = list(nodes)
    roles: Dict[str, NodeRole] = {node.path: node.role for node in node_list}
    graph = _edge_graph(node_list, edges)
    try:
        return list(
            nx.lexicographical_topological_sort(
                graph, key=lambda path: (_ROLE_RANK[roles[path]], path)
            )
        )
    except nx.NetworkXUnfeasible:
        check_acyclic(graph)
        raise


def evaluation_batches(
    nodes: Iterable[ProjectNode], edges: Iterable[EvaluationEdge]
) -> List[List[str]]:
    """Group node paths into generations that may be processed concurrently.

    Every dependency of a node lives in an earlier generation.
    """
    graph = _edge_graph(nodes, edges)
    try:
        return [sorted(generation) for generation in nx.topological_generations(graph)]
    except nx.NetworkXUnfeasible:
        check_acyclic(graph)
        raise
