"""Layered lookup of the external build-tool SDK location.

The tool SDK hosts the plugin build that must be included before any
project definition can be loaded, so this resolution runs first. Lookup
order:

1. ``<key>=<path>`` line in the project-local properties file.
2. The named environment variable.
3. Otherwise fail with :class:`ConfigurationMissing`.

A path is never guessed: a wrong tool location breaks things far from
the real cause.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Mapping, Optional, Union

from buildgraph.graph.errors import ConfigurationMissing
from buildgraph.graph.models import DEFAULT_PLUGIN_SUBPATH, Provenance, ToolLocation

logger = logging.getLogger("buildgraph.graph.locator")

DEFAULT_PROPERTIES_FILE = "local.properties"
DEFAULT_SDK_KEY = "flutter.sdk"
DEFAULT_ENV_VAR = "FLUTTER_SDK"


def read_property(config_file: Path, key: str) -> Optional[str]:
    """Return the value of ``key`` from a ``key=value`` properties file.

    Properties files are ISO-8859-1, so any byte sequence decodes and
    non-ASCII text on unrelated lines cannot abort the lookup.
    Only lines whose stripped text starts with ``<key>=`` are considered;
    everything else (comments, other keys, malformed lines) is ignored.
    The first matching line wins. Empty values count as absent.

    Args:
        config_file: Properties file to scan.
        key: Property key to look up.

    Returns:
        The stripped value, or None when the file or key is absent.
    """
    if not config_file.is_file():
        logger.debug("Properties file not found: %s", config_file)
        return None

    prefix = f"{key}="
    with open(config_file, "r", encoding="latin-1") as f:
        for line in f:
            stripped = line.strip()
            if stripped.startswith(prefix):
                value = stripped.split("=", 1)[1].strip()
                return value or None
    return None


class ExternalToolLocator:
    """Resolve and cache the tool SDK location for one graph build.

    Resolution is a pure read. The first successful result is cached and
    returned on every later call.
    """

    def __init__(
        self,
        config_file: Union[str, Path],
        env_var: str = DEFAULT_ENV_VAR,
        key: str = DEFAULT_SDK_KEY,
        plugin_subpath: str = DEFAULT_PLUGIN_SUBPATH,
        environ: Optional[Mapping[str, str]] = None,
    ) -> None:
        self.config_file = Path(config_file)
        self.env_var = env_var
        self.key = key
        self.plugin_subpath = plugin_subpath
        self._environ = environ
        self._location: Optional[ToolLocation] = None

    def resolve(self) -> ToolLocation:
        """Resolve the tool location, using the cached value when present.

        Raises:
            ConfigurationMissing: If neither the file nor the environment
                supplies a location.
        """
        if self._location is not None:
            return self._location

        from_file = read_property(self.config_file, self.key)
        if from_file is not None:
            path = Path(from_file).expanduser()
            if not path.is_absolute():
                path = self.config_file.parent / path
            location = ToolLocation(
                path=Path(os.path.normpath(path.absolute())),
                provenance=Provenance.FILE_CONFIG,
                source=str(self.config_file),
                plugin_subpath=self.plugin_subpath,
            )
        else:
            environ = os.environ if self._environ is None else self._environ
            from_env = (environ.get(self.env_var) or "").strip()
            if not from_env:
                raise ConfigurationMissing(
                    str(self.config_file), self.key, self.env_var
                )
            location = ToolLocation(
                path=Path(os.path.normpath(Path(from_env).expanduser().absolute())),
                provenance=Provenance.ENVIRONMENT,
                source=self.env_var,
                plugin_subpath=self.plugin_subpath,
            )

        logger.info(
            "Resolved tool SDK %s (from %s: %s)",
            location.path,
            location.provenance.value,
            location.source,
        )
        self._location = location
        return location


def resolve_tool_location(
    config_file: Union[str, Path],
    env_var: str = DEFAULT_ENV_VAR,
    key: str = DEFAULT_SDK_KEY,
    environ: Optional[Mapping[str, str]] = None,
) -> ToolLocation:
    """One-shot convenience wrapper around :class:`ExternalToolLocator`."""
    return ExternalToolLocator(
        config_file, env_var=env_var, key=key, environ=environ
    ).resolve()
