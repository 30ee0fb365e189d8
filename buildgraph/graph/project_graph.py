"""Aggregate project graph composing lookup, planning, ordering and defaults.

Build sequence (single-threaded, synchronous):

1. Resolve the external tool location (the only I/O).
2. Construct the root node and one node per declared module.
3. Plan output directories.
4. Compute and validate evaluation edges.
5. Propagate defaults node by node, dependencies first.

Any fatal error aborts the build; no partially built graph is returned.
"""

from __future__ import annotations

import logging
from dataclasses import replace
from pathlib import Path
from types import MappingProxyType
from typing import TYPE_CHECKING, Any, Dict, FrozenSet, List, Mapping, Optional, Tuple, Union

from buildgraph.graph import ordering, planner
from buildgraph.graph.locator import ExternalToolLocator
from buildgraph.graph.models import (
    ROOT_PATH,
    EvaluationEdge,
    NodeRole,
    ProjectNode,
    SdkBounds,
    ToolLocation,
    child_path,
)
from buildgraph.graph.propagation import PropagationRule, default_rules, propagate

if TYPE_CHECKING:
    from buildgraph.config.schema import GraphBuildConfig, ModuleConfig

logger = logging.getLogger("buildgraph.graph.project_graph")


def _module_node(module: "ModuleConfig") -> ProjectNode:
    return ProjectNode(
        path=child_path(module.name),
        name=module.name,
        role=module.role,
        group=module.group,
        namespace=module.namespace,
        sdk_bounds=SdkBounds(
            compile=module.compile_sdk, min=module.min_sdk, target=module.target_sdk
        ),
        jvm_target=module.jvm_target,
        depends_on=tuple(child_path(dep.lstrip(":")) for dep in module.depends_on),
        build_types=MappingProxyType(
            {name: MappingProxyType(dict(settings)) for name, settings in module.build_types.items()}
        ),
    )


class ProjectGraph:
    """Fully resolved, read-only project configuration graph.

    Instances are produced by :meth:`build`; the constructor only wires
    already validated parts together.
    """

    def __init__(
        self,
        name: str,
        nodes: Mapping[str, ProjectNode],
        edges: FrozenSet[EvaluationEdge],
        order: Tuple[str, ...],
        tool_location: ToolLocation,
        repositories: Tuple[str, ...] = (),
    ) -> None:
        self.name = name
        self._nodes = MappingProxyType(dict(nodes))
        self._edges = edges
        self._order = order
        self.tool_location = tool_location
        self.repositories = repositories

    @classmethod
    def build(
        cls,
        config: "GraphBuildConfig",
        project_dir: Union[str, Path],
        environ: Optional[Mapping[str, str]] = None,
        rules: Optional[List[PropagationRule]] = None,
    ) -> "ProjectGraph":
        """Build the graph for a project tree description.

        Args:
            config: Validated project tree description.
            project_dir: Directory containing the root project.
            environ: Environment used for the tool lookup (default: os.environ).
            rules: Propagation rule table (default: built from config.defaults).

        Raises:
            ConfigurationMissing: Tool location unresolvable.
            DuplicateOutputDirectory: Two projects share an output directory.
            EvaluationCycle: Ordering constraints are unsatisfiable.
        """
        project_dir = Path(project_dir).absolute()

        locator = ExternalToolLocator(
            project_dir / config.tool.properties_file,
            env_var=config.tool.env_var,
            key=config.tool.key,
            plugin_subpath=config.tool.plugin_subpath,
            environ=environ,
        )
        tool_location = locator.resolve()

        root = ProjectNode(path=ROOT_PATH, name=config.project.name, role=NodeRole.ROOT)
        children = [_module_node(module) for module in config.modules]

        output_plan = planner.plan(
            root,
            children,
            planner.resolve_build_root(project_dir, config.project.build_dir),
        )
        nodes: Dict[str, ProjectNode] = {
            node.path: replace(node, output_dir=output_plan[node.path])
            for node in [root, *children]
        }

        edges = ordering.constrain(nodes.values())
        order = ordering.evaluation_order(nodes.values(), edges)

        table = default_rules(config.defaults) if rules is None else rules
        for path in order:
            nodes[path] = propagate(nodes[path], table)

        logger.info(
            "Built project graph %s: %d projects, %d ordering edges",
            config.project.name,
            len(nodes),
            len(edges),
        )
        return cls(
            name=config.project.name,
            nodes={path: nodes[path] for path in order},
            edges=frozenset(edges),
            order=tuple(order),
            tool_location=tool_location,
            repositories=tuple(config.project.repositories),
        )

    @property
    def nodes(self) -> Mapping[str, ProjectNode]:
        return self._nodes

    @property
    def edges(self) -> FrozenSet[EvaluationEdge]:
        return self._edges

    @property
    def evaluation_order(self) -> Tuple[str, ...]:
        return self._order

    @property
    def root(self) -> ProjectNode:
        return self._nodes[ROOT_PATH]

    @property
    def output_plan(self) -> Dict[str, Path]:
        return {path: node.output_dir for path, node in self._nodes.items()}

    def node(self, path: str) -> ProjectNode:
        """Return a node by path; a bare name is accepted for subprojects."""
        if path in self._nodes:
            return self._nodes[path]
        return self._nodes[child_path(path)]

    def parallel_batches(self) -> List[List[str]]:
        """Generations of projects a downstream executor may run concurrently."""
        return ordering.evaluation_batches(self._nodes.values(), self._edges)

    def to_dict(self) -> Dict[str, Any]:
        """Graph output handed to the build-execution collaborator."""
        return {
            "project": self.name,
            "repositories": list(self.repositories),
            "tool_location": self.tool_location.to_dict(),
            "nodes": [node.to_dict() for node in self._nodes.values()],
            "edges": [edge.to_dict() for edge in sorted(self._edges)],
            "evaluation_order": list(self._order),
        }
