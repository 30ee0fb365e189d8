"""Helpers for loading a project tree description from TOML/JSON sources.

`load_graph_build_config` accepts:

* None -> default GraphBuildConfig (root project only)
* dict -> GraphBuildConfig.from_dict
* Path / path-like string -> load .toml/.json from filesystem
* Inline JSON/TOML strings
"""

from __future__ import annotations

import json
import logging
import os
import sys
from pathlib import Path
from typing import Any, Dict, Optional, Union

from buildgraph.config.schema import GraphBuildConfig

if sys.version_info >= (3, 11):
    import tomllib
else:
    import tomli as tomllib

logger = logging.getLogger("buildgraph.config.loader")

ConfigSource = Union[str, Path, Dict[str, Any], None]


def _detect_format(text: str) -> str:
    stripped = text.lstrip()
    return "json" if stripped.startswith(("{", "[")) else "toml"


def load_graph_build_config(source: ConfigSource) -> GraphBuildConfig:
    """Load GraphBuildConfig from various configuration sources.

    Args:
        source: One of:
            * None: returns a default GraphBuildConfig
            * dict: treated as already-parsed configuration mapping
            * str/Path: either a filesystem path to a .toml/.json file,
              or an inline TOML/JSON string (auto-detected)

    Returns:
        GraphBuildConfig instance.

    Raises:
        ValueError: If the document is not a mapping or cannot be parsed.
        ValidationError: If the document does not match the schema.
    """
    if source is None:
        logger.debug("No config source provided; using default GraphBuildConfig")
        return GraphBuildConfig()

    if isinstance(source, dict):
        logger.debug("Loading GraphBuildConfig from provided dict")
        return GraphBuildConfig.from_dict(source)

    if isinstance(source, (str, Path)):
        path = Path(source)
        text: Optional[str] = None
        fmt: Optional[str] = None

        if isinstance(source, Path) or os.path.isfile(source):
            text = path.read_text(encoding="utf-8")
            suffix = path.suffix.lower()
            if suffix in {".toml", ".tml"}:
                fmt = "toml"
            elif suffix == ".json":
                fmt = "json"
            else:
                fmt = _detect_format(text)
            logger.info("Loading configuration from file: %s (fmt=%s)", path, fmt)
        else:
            text = str(source)
            fmt = _detect_format(text)
            logger.info("Loading configuration from inline %s string", fmt)

        try:
            data = json.loads(text) if fmt == "json" else tomllib.loads(text)
        except (json.JSONDecodeError, tomllib.TOMLDecodeError) as e:
            raise ValueError(f"Invalid {fmt.upper()} configuration: {e}") from e

        if not isinstance(data, dict):
            raise ValueError("Top-level configuration must be a mapping/dict")

        return GraphBuildConfig.from_dict(data)

    raise TypeError(f"Unsupported config source type: {type(source)!r}")


__all__ = ["ConfigSource", "load_graph_build_config"]
