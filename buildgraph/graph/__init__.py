"""Public graph API surface."""

from buildgraph.graph.errors import (
    ConfigurationMissing,
    DuplicateOutputDirectory,
    EvaluationCycle,
    GraphConfigurationError,
)
from buildgraph.graph.layout import clean_layout, materialize_layout
from buildgraph.graph.locator import ExternalToolLocator, resolve_tool_location
from buildgraph.graph.models import (
    EvaluationEdge,
    NodeField,
    NodeRole,
    ProjectNode,
    Provenance,
    SdkBounds,
    ToolLocation,
)
from buildgraph.graph.ordering import constrain, evaluation_order
from buildgraph.graph.planner import plan, resolve_build_root
from buildgraph.graph.project_graph import ProjectGraph
from buildgraph.graph.propagation import PropagationRule, default_rules, propagate

__all__ = [
    "ConfigurationMissing",
    "DuplicateOutputDirectory",
    "EvaluationCycle",
    "EvaluationEdge",
    "ExternalToolLocator",
    "GraphConfigurationError",
    "NodeField",
    "NodeRole",
    "ProjectGraph",
    "ProjectNode",
    "PropagationRule",
    "Provenance",
    "SdkBounds",
    "ToolLocation",
    "clean_layout",
    "constrain",
    "default_rules",
    "evaluation_order",
    "materialize_layout",
    "plan",
    "propagate",
    "resolve_build_root",
    "resolve_tool_location",
]
