"""Configuration schema and loading for buildgraph."""

from .loader import ConfigSource, load_graph_build_config
from .schema import (
    DefaultsConfig,
    GraphBuildConfig,
    ModuleConfig,
    ProjectConfig,
    ToolConfig,
)

__all__ = [
    "ConfigSource",
    "DefaultsConfig",
    "GraphBuildConfig",
    "ModuleConfig",
    "ProjectConfig",
    "ToolConfig",
    "load_graph_build_config",
]
