"""Tests for buildgraph CLI entrypoints."""

from __future__ import annotations

import io
import json
import sys
from pathlib import Path
from types import SimpleNamespace

import pytest
from rich.console import Console

import buildgraph.main as main
from buildgraph.cli.clean import clean_command
from buildgraph.cli.configure import configure_command
from buildgraph.cli.locate import locate_command
from buildgraph.cli.order import order_command
from buildgraph.graph import locator as locator_module

CONFIG = """
[project]
name = "demo"

[[modules]]
name = "app"
role = "application"

[[modules]]
name = "lib"
"""


@pytest.fixture
def project(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    monkeypatch.delenv("FLUTTER_SDK", raising=False)
    android = tmp_path / "android"
    android.mkdir()
    (android / "local.properties").write_text("flutter.sdk=/opt/flutter\n", encoding="utf-8")
    (android / "buildgraph.toml").write_text(CONFIG, encoding="utf-8")
    return android


def _console() -> Console:
    return Console(file=io.StringIO(), width=200)


def test_main_dispatches_configure_command(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    """Verify that `main` parses args and dispatches configure_command."""

    monkeypatch.setattr(main, "setup_logging", lambda *a, **k: None)

    captured: dict[str, object] = {}

    def fake_configure_command(args) -> int:
        captured["args"] = args
        return 0

    monkeypatch.setattr(main, "configure_command", fake_configure_command)

    argv = [
        "buildgraph",
        "configure",
        str(tmp_path / "buildgraph.toml"),
        "-o",
        str(tmp_path / "graph.json"),
        "--materialize",
    ]
    monkeypatch.setattr(sys, "argv", argv)

    exit_code = main.main()

    assert exit_code == 0
    parsed = captured["args"]
    assert parsed.config == str(tmp_path / "buildgraph.toml")
    assert parsed.output == str(tmp_path / "graph.json")
    assert parsed.materialize is True


def test_main_requires_command(
    monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> None:
    """Ensure missing subcommands make the CLI print help and fail."""

    monkeypatch.setattr(main, "setup_logging", lambda *a, **k: None)
    monkeypatch.setattr(sys, "argv", ["buildgraph"])

    exit_code = main.main()

    assert exit_code == 1
    assert "Buildgraph" in capsys.readouterr().out


def test_configure_writes_graph_and_materializes(project: Path, tmp_path: Path) -> None:
    output = tmp_path / "graph.json"
    args = SimpleNamespace(
        config=str(project / "buildgraph.toml"),
        output=str(output),
        project_dir=None,
        materialize=True,
    )

    assert configure_command(args) == 0

    data = json.loads(output.read_text(encoding="utf-8"))
    assert data["evaluation_order"] == [":", ":app", ":lib"]
    assert (tmp_path / "build" / "lib").is_dir()


def test_configure_fails_without_tool_location(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """Nothing is written when the tool SDK cannot be located."""
    monkeypatch.delenv("FLUTTER_SDK", raising=False)
    output = tmp_path / "graph.json"
    args = SimpleNamespace(
        config=CONFIG, output=str(output), project_dir=str(tmp_path), materialize=True
    )

    assert configure_command(args) == 1
    assert not output.exists()
    assert not (tmp_path.parent / "build" / "app").exists()


def test_locate_reports_source(project: Path) -> None:
    console = _console()
    args = SimpleNamespace(project_dir=str(project), properties_file=None, key=None, env_var=None)

    assert locate_command(args, console=console) == 0
    assert "/opt/flutter" in console.file.getvalue()


def test_locate_fails_when_unconfigured(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("TOOL_SDK", raising=False)
    args = SimpleNamespace(
        project_dir=str(tmp_path), properties_file=None, key="sdk.path", env_var="TOOL_SDK"
    )

    assert locate_command(args, console=_console()) == 1


def test_order_prints_table(project: Path) -> None:
    console = _console()
    args = SimpleNamespace(config=str(project / "buildgraph.toml"), project_dir=None)

    assert order_command(args, console=console) == 0
    rendered = console.file.getvalue()
    assert ":app" in rendered
    assert "36/24/35" in rendered


def test_order_fails_on_cycle(project: Path) -> None:
    config = '{"modules": [{"name": "lib", "depends_on": ["lib"]}]}'
    args = SimpleNamespace(config=config, project_dir=str(project))

    assert order_command(args, console=_console()) == 1


def test_clean_removes_build_root(project: Path, tmp_path: Path) -> None:
    build_root = tmp_path / "build"
    (build_root / "app").mkdir(parents=True)
    args = SimpleNamespace(config=str(project / "buildgraph.toml"), project_dir=None)

    assert clean_command(args) == 0
    assert not build_root.exists()


def test_locate_tolerates_latin1_properties(tmp_path: Path) -> None:
    (tmp_path / "local.properties").write_bytes(b"sdk.dir=J\xfcrgen\nflutter.sdk=/opt/flutter\n")
    console = _console()
    args = SimpleNamespace(project_dir=str(tmp_path), properties_file=None, key=None, env_var=None)

    assert locate_command(args, console=console) == 0
    assert "/opt/flutter" in console.file.getvalue()


def test_locate_fails_cleanly_on_unreadable_file(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    """An OSError while reading the properties file is reported as exit code 1."""

    def unreadable(config_file, key):
        raise PermissionError(13, "Permission denied", str(config_file))

    monkeypatch.setattr(locator_module, "read_property", unreadable)
    args = SimpleNamespace(project_dir=str(tmp_path), properties_file=None, key=None, env_var=None)

    assert locate_command(args, console=_console()) == 1


@pytest.mark.parametrize("build_dir", [".", "", ".."])
def test_clean_refuses_build_root_containing_project(project: Path, build_dir: str) -> None:
    config = project / "buildgraph.toml"
    config.write_text(f'[project]\nbuild_dir = "{build_dir}"\n', encoding="utf-8")
    args = SimpleNamespace(config=str(config), project_dir=None)

    assert clean_command(args) == 1
    assert config.exists()
    assert (project / "local.properties").exists()
