"""Configuration schema definitions using Pydantic for validation.

A project tree description is validated here before any graph is built,
so malformed input is reported with a clear message instead of surfacing
as a half-built graph.
"""

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field, field_validator, model_validator

from buildgraph.graph.locator import (
    DEFAULT_ENV_VAR,
    DEFAULT_PROPERTIES_FILE,
    DEFAULT_SDK_KEY,
)
from buildgraph.graph.models import DEFAULT_PLUGIN_SUBPATH, NodeRole
from buildgraph.graph.planner import DEFAULT_BUILD_DIR


class ProjectConfig(BaseModel):
    """Root project settings.

    Attributes:
        name: Root project name.
        build_dir: Output directory, relative to the project directory.
        repositories: Artifact repositories shared by all projects.
    """

    name: str = "root"
    build_dir: str = DEFAULT_BUILD_DIR
    repositories: List[str] = Field(
        default_factory=lambda: ["google", "mavenCentral"]
    )


class ToolConfig(BaseModel):
    """Where to look up the external build-tool SDK.

    Attributes:
        properties_file: Properties file, relative to the project directory.
        key: Key naming the SDK path inside the properties file.
        env_var: Environment variable consulted when the file has no entry.
        plugin_subpath: Plugin build location inside the SDK.
    """

    properties_file: str = DEFAULT_PROPERTIES_FILE
    key: str = DEFAULT_SDK_KEY
    env_var: str = DEFAULT_ENV_VAR
    plugin_subpath: str = DEFAULT_PLUGIN_SUBPATH

    @field_validator("key", "env_var")
    @classmethod
    def validate_not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("must not be blank")
        return v.strip()


class DefaultsConfig(BaseModel):
    """Graph-wide defaults propagated to subprojects.

    Attributes:
        compile_sdk: Default compile SDK level for libraries.
        min_sdk: Default minimum SDK level for libraries.
        target_sdk: Default target SDK level for libraries.
        jvm_target: Default JVM bytecode target for all subprojects.
        namespace_by_group: Library group -> namespace defaults.
    """

    compile_sdk: Optional[int] = Field(default=36, ge=1)
    min_sdk: Optional[int] = Field(default=24, ge=1)
    target_sdk: Optional[int] = Field(default=35, ge=1)
    jvm_target: Optional[str] = "17"
    namespace_by_group: Dict[str, str] = Field(default_factory=dict)

    @model_validator(mode="after")
    def validate_sdk_order(self) -> "DefaultsConfig":
        if (
            self.min_sdk is not None
            and self.compile_sdk is not None
            and self.min_sdk > self.compile_sdk
        ):
            raise ValueError(
                f"min_sdk ({self.min_sdk}) must not exceed compile_sdk ({self.compile_sdk})"
            )
        return self


class ModuleConfig(BaseModel):
    """A subproject declaration.

    Attributes:
        name: Subproject name (also its output directory name).
        role: ``application`` or ``library``.
        group: Optional owner identifier.
        namespace: Explicit namespace, if declared.
        compile_sdk: Explicit compile SDK level.
        min_sdk: Explicit minimum SDK level.
        target_sdk: Explicit target SDK level.
        jvm_target: Explicit JVM target.
        depends_on: Names of subprojects this one is evaluated after.
        build_types: Opaque per-build-type settings.
    """

    name: str
    role: NodeRole = NodeRole.LIBRARY
    group: Optional[str] = None
    namespace: Optional[str] = None
    compile_sdk: Optional[int] = Field(default=None, ge=1)
    min_sdk: Optional[int] = Field(default=None, ge=1)
    target_sdk: Optional[int] = Field(default=None, ge=1)
    jvm_target: Optional[str] = None
    depends_on: List[str] = Field(default_factory=list)
    build_types: Dict[str, Dict[str, Any]] = Field(default_factory=dict)

    model_config = {"extra": "allow"}

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        name = v.strip().lstrip(":")
        if not name or "/" in name or "\\" in name or name in {".", ".."}:
            raise ValueError(f"Invalid module name '{v}'")
        return name

    @field_validator("role")
    @classmethod
    def validate_role(cls, v: NodeRole) -> NodeRole:
        if v is NodeRole.ROOT:
            raise ValueError("Modules cannot declare the root role")
        return v


class GraphBuildConfig(BaseModel):
    """Top-level project tree description.

    Attributes:
        project: Root project settings.
        tool: Tool SDK lookup settings.
        defaults: Graph-wide defaults.
        modules: Subproject declarations.
    """

    project: ProjectConfig = Field(default_factory=ProjectConfig)
    tool: ToolConfig = Field(default_factory=ToolConfig)
    defaults: DefaultsConfig = Field(default_factory=DefaultsConfig)
    modules: List[ModuleConfig] = Field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "GraphBuildConfig":
        """Create configuration from dictionary.

        Raises:
            ValidationError: If configuration is invalid.
        """
        return cls.model_validate(data)
