"""Fatal configuration errors raised while building a project graph.

None of these errors are recovered locally. They propagate to the caller
that started the graph build, which must discard the attempt and re-run it
after fixing the configuration source.
"""

from typing import List, Optional, Sequence


class GraphConfigurationError(Exception):
    """Base class for project graph configuration errors."""
    pass


class ConfigurationMissing(GraphConfigurationError):
    """The external tool location could not be resolved from any source.

    Attributes:
        config_file: Properties file that was consulted.
        key: Key that was looked up in the properties file.
        env_var: Environment variable consulted as fallback.
    """

    def __init__(self, config_file: str, key: str, env_var: str) -> None:
        self.config_file = config_file
        self.key = key
        self.env_var = env_var
        super().__init__(
            f"Tool SDK location not configured: set '{key}=<path>' in "
            f"{config_file} or set the environment variable {env_var}"
        )


class DuplicateOutputDirectory(GraphConfigurationError):
    """Two project nodes were planned into the same output directory.

    Attributes:
        path: The colliding output directory.
        nodes: Paths of the nodes that collide.
    """

    def __init__(self, path: str, nodes: Sequence[str]) -> None:
        self.path = path
        self.nodes: List[str] = list(nodes)
        super().__init__(
            f"Output directory {path} assigned to more than one project: "
            f"{', '.join(self.nodes)}"
        )


class EvaluationCycle(GraphConfigurationError):
    """Evaluation ordering constraints cannot be satisfied.

    Attributes:
        cycle: Node paths forming the cycle, in edge order.
    """

    def __init__(self, cycle: Sequence[str], detail: Optional[str] = None) -> None:
        self.cycle: List[str] = list(cycle)
        loop = self.cycle + self.cycle[:1]
        message = f"Evaluation cycle detected: {' -> '.join(loop)}"
        if detail:
            message = f"{message} ({detail})"
        super().__init__(message)
