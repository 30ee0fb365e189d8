"""Core data model for the project configuration graph."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Tuple

ROOT_PATH = ":"
DEFAULT_PLUGIN_SUBPATH = "packages/flutter_tools/gradle"


class NodeRole(str, Enum):
    """Role a project plays in the build."""

    ROOT = "root"
    APPLICATION = "application"
    LIBRARY = "library"


class Provenance(str, Enum):
    """Where a tool location was read from."""

    FILE_CONFIG = "file_config"
    ENVIRONMENT = "environment"


class NodeField(str, Enum):
    """Node fields that propagation rules are allowed to default."""

    COMPILE_SDK = "compile_sdk"
    MIN_SDK = "min_sdk"
    TARGET_SDK = "target_sdk"
    NAMESPACE = "namespace"
    JVM_TARGET = "jvm_target"


def child_path(name: str) -> str:
    """Return the path-qualified identity of a direct child of the root."""
    return f"{ROOT_PATH}{name}"


@dataclass(frozen=True)
class SdkBounds:
    """Platform SDK levels for a module; unset levels are None."""

    compile: Optional[int] = None
    min: Optional[int] = None
    target: Optional[int] = None

    def to_dict(self) -> Dict[str, Optional[int]]:
        return {"compile": self.compile, "min": self.min, "target": self.target}


@dataclass(frozen=True)
class ProjectNode:
    """A single project in the build tree.

    Attributes:
        path: Unique path-qualified name (":" for the root, ":app" for a child).
        name: Simple project name, used for the output directory.
        role: Root, application or library.
        group: Optional owner identifier, e.g. a reverse-domain group.
        namespace: Optional namespace; empty string is treated as unset.
        sdk_bounds: Compile/min/target SDK levels.
        jvm_target: JVM bytecode target for compiled sources.
        output_dir: Redirected output directory, unset until planned.
        depends_on: Paths of projects this one must be evaluated after.
        build_types: Opaque per-build-type settings (signing, minification),
            passed through unchanged.
    """

    path: str
    name: str
    role: NodeRole
    group: Optional[str] = None
    namespace: Optional[str] = None
    sdk_bounds: SdkBounds = field(default_factory=SdkBounds)
    jvm_target: Optional[str] = None
    output_dir: Optional[Path] = None
    depends_on: Tuple[str, ...] = ()
    build_types: Mapping[str, Mapping[str, Any]] = field(default_factory=dict)

    # Nodes carry a mapping field, so hash and compare by identity path only.
    def __hash__(self) -> int:
        return hash(self.path)

    @property
    def is_root(self) -> bool:
        return self.role is NodeRole.ROOT

    def get_field(self, node_field: NodeField) -> Any:
        """Return the current value of a propagatable field."""
        if node_field is NodeField.COMPILE_SDK:
            return self.sdk_bounds.compile
        if node_field is NodeField.MIN_SDK:
            return self.sdk_bounds.min
        if node_field is NodeField.TARGET_SDK:
            return self.sdk_bounds.target
        if node_field is NodeField.NAMESPACE:
            return self.namespace
        return self.jvm_target

    def is_unset(self, node_field: NodeField) -> bool:
        value = self.get_field(node_field)
        return value is None or value == ""

    def to_dict(self) -> Dict[str, Any]:
        return {
            "path": self.path,
            "name": self.name,
            "role": self.role.value,
            "group": self.group,
            "namespace": self.namespace,
            "sdk_bounds": self.sdk_bounds.to_dict(),
            "jvm_target": self.jvm_target,
            "output_dir": str(self.output_dir) if self.output_dir else None,
            "depends_on": list(self.depends_on),
            "build_types": {k: dict(v) for k, v in self.build_types.items()},
        }


@dataclass(frozen=True, order=True)
class EvaluationEdge:
    """Ordering constraint: ``dependent`` is evaluated after ``dependency``."""

    dependent: str
    dependency: str

    def to_dict(self) -> Dict[str, str]:
        return {"dependent": self.dependent, "dependency": self.dependency}


@dataclass(frozen=True)
class ToolLocation:
    """Resolved location of the external build-tool plugin bundle.

    Attributes:
        path: Absolute path to the tool SDK.
        provenance: Source kind the path was read from.
        source: Properties file path or environment variable name.
        plugin_subpath: Location of the included plugin build inside the SDK.
    """

    path: Path
    provenance: Provenance
    source: str
    plugin_subpath: str = DEFAULT_PLUGIN_SUBPATH

    @property
    def plugin_build_path(self) -> Path:
        return self.path / self.plugin_subpath

    def to_dict(self) -> Dict[str, str]:
        return {
            "path": str(self.path),
            "provenance": self.provenance.value,
            "source": self.source,
            "plugin_build_path": str(self.plugin_build_path),
        }
