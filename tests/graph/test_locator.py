"""Tests for the layered tool SDK lookup."""

from pathlib import Path

import pytest

from buildgraph.graph import (
    ConfigurationMissing,
    ExternalToolLocator,
    Provenance,
    resolve_tool_location,
)


def test_properties_file_wins(tmp_path: Path) -> None:
    """A key in the properties file resolves with FileConfig provenance."""
    props = tmp_path / "local.properties"
    props.write_text("sdk.path=/opt/sdk\n", encoding="utf-8")

    location = resolve_tool_location(props, env_var="TOOL_SDK", key="sdk.path", environ={})

    assert location.path == Path("/opt/sdk")
    assert location.provenance is Provenance.FILE_CONFIG
    assert location.source == str(props)


def test_properties_file_preferred_over_environment(tmp_path: Path) -> None:
    props = tmp_path / "local.properties"
    props.write_text("sdk.path=/opt/sdk\n", encoding="utf-8")

    location = resolve_tool_location(
        props, env_var="TOOL_SDK", key="sdk.path", environ={"TOOL_SDK": "/usr/sdk"}
    )

    assert location.path == Path("/opt/sdk")
    assert location.provenance is Provenance.FILE_CONFIG


def test_environment_fallback_without_file(tmp_path: Path) -> None:
    """Missing file falls back to the environment variable."""
    location = resolve_tool_location(
        tmp_path / "local.properties",
        env_var="TOOL_SDK",
        key="sdk.path",
        environ={"TOOL_SDK": "/usr/sdk"},
    )

    assert location.path == Path("/usr/sdk")
    assert location.provenance is Provenance.ENVIRONMENT
    assert location.source == "TOOL_SDK"


def test_environment_fallback_when_key_absent(tmp_path: Path) -> None:
    props = tmp_path / "local.properties"
    props.write_text("sdk.dir=/android\nflutter.buildMode=debug\n", encoding="utf-8")

    location = resolve_tool_location(
        props, env_var="TOOL_SDK", key="sdk.path", environ={"TOOL_SDK": "/usr/sdk"}
    )

    assert location.provenance is Provenance.ENVIRONMENT


def test_os_environment_is_used_by_default(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("TOOL_SDK", "/usr/sdk")

    location = resolve_tool_location(tmp_path / "missing.properties", env_var="TOOL_SDK")

    assert location.path == Path("/usr/sdk")


def test_missing_everywhere_raises(tmp_path: Path) -> None:
    """Neither source configured is a hard failure naming both."""
    with pytest.raises(ConfigurationMissing) as excinfo:
        resolve_tool_location(
            tmp_path / "local.properties", env_var="TOOL_SDK", key="sdk.path", environ={}
        )

    message = str(excinfo.value)
    assert "sdk.path" in message
    assert "TOOL_SDK" in message
    assert excinfo.value.env_var == "TOOL_SDK"


def test_malformed_lines_and_empty_values_are_ignored(tmp_path: Path) -> None:
    props = tmp_path / "local.properties"
    props.write_text(
        "# comment\nnot a property\nsdk.path=\n  sdk.path = /ignored\n",
        encoding="utf-8",
    )

    with pytest.raises(ConfigurationMissing):
        resolve_tool_location(props, env_var="TOOL_SDK", key="sdk.path", environ={"TOOL_SDK": ""})


def test_value_is_trimmed_and_first_match_wins(tmp_path: Path) -> None:
    props = tmp_path / "local.properties"
    props.write_text(
        "  flutter.sdk=  /opt/flutter  \nflutter.sdk=/other\n", encoding="utf-8"
    )

    location = resolve_tool_location(props, environ={})

    assert location.path == Path("/opt/flutter")
    assert location.plugin_build_path == Path("/opt/flutter/packages/flutter_tools/gradle")


def test_relative_file_value_resolves_against_file_directory(tmp_path: Path) -> None:
    props = tmp_path / "local.properties"
    props.write_text("flutter.sdk=../flutter\n", encoding="utf-8")

    location = resolve_tool_location(props, environ={})

    assert location.path == (tmp_path.parent / "flutter").absolute()


def test_resolution_is_cached(tmp_path: Path) -> None:
    """Re-resolving returns the same object even if sources change."""
    props = tmp_path / "local.properties"
    props.write_text("flutter.sdk=/opt/flutter\n", encoding="utf-8")
    locator = ExternalToolLocator(props, environ={})

    first = locator.resolve()
    props.write_text("flutter.sdk=/elsewhere\n", encoding="utf-8")
    second = locator.resolve()

    assert first is second
    assert props.read_text(encoding="utf-8") == "flutter.sdk=/elsewhere\n"


def test_non_utf8_bytes_on_other_lines_are_tolerated(tmp_path: Path) -> None:
    """Properties files are ISO-8859-1; foreign bytes must not abort the lookup."""
    props = tmp_path / "local.properties"
    props.write_bytes(b"sdk.dir=C:\\Users\\J\xfcrgen\nflutter.sdk=/opt/flutter\n")

    location = resolve_tool_location(props, environ={})

    assert location.path == Path("/opt/flutter")
    assert location.provenance is Provenance.FILE_CONFIG
