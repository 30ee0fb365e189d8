"""Tests for output directory planning and layout materialisation."""

from pathlib import Path

import pytest

from buildgraph.graph import (
    DuplicateOutputDirectory,
    GraphConfigurationError,
    NodeRole,
    ProjectNode,
    clean_layout,
    materialize_layout,
    plan,
    resolve_build_root,
)


def _root() -> ProjectNode:
    return ProjectNode(path=":", name="root", role=NodeRole.ROOT)


def _child(name: str, role: NodeRole = NodeRole.LIBRARY) -> ProjectNode:
    return ProjectNode(path=f":{name}", name=name, role=role)


def test_plan_assigns_root_and_children(tmp_path: Path) -> None:
    new_root = tmp_path / "build"
    children = [_child("app", NodeRole.APPLICATION), _child("isar_flutter_libs")]

    result = plan(_root(), children, new_root)

    assert result == {
        ":": new_root,
        ":app": new_root / "app",
        ":isar_flutter_libs": new_root / "isar_flutter_libs",
    }
    assert len(set(result.values())) == len(result)


def test_plan_rejects_duplicate_names(tmp_path: Path) -> None:
    """Siblings sharing a name collide before anything is created."""
    new_root = tmp_path / "build"

    with pytest.raises(DuplicateOutputDirectory) as excinfo:
        plan(_root(), [_child("core"), _child("core")], new_root)

    assert excinfo.value.path == str(new_root / "core")
    assert excinfo.value.nodes == [":core", ":core"]
    assert not new_root.exists()


def test_plan_is_pure(tmp_path: Path) -> None:
    plan(_root(), [_child("app")], tmp_path / "build")

    assert not (tmp_path / "build").exists()


def test_resolve_build_root_relative_to_project(tmp_path: Path) -> None:
    project_dir = tmp_path / "android"

    assert resolve_build_root(project_dir, "../build") == tmp_path / "build"
    assert resolve_build_root(project_dir, "/var/out") == Path("/var/out")


def test_materialize_and_clean(tmp_path: Path) -> None:
    new_root = tmp_path / "build"
    output_plan = plan(_root(), [_child("app"), _child("lib")], new_root)

    created = materialize_layout(output_plan)

    assert set(created) == set(output_plan.values())
    assert (new_root / "app").is_dir()
    assert materialize_layout(output_plan) == []

    assert clean_layout(new_root) is True
    assert not new_root.exists()
    assert clean_layout(new_root) is False


@pytest.mark.parametrize("build_dir", [".", "", "..", "../.."])
def test_build_root_containing_project_is_rejected(tmp_path: Path, build_dir: str) -> None:
    """A build root at or above the project directory would swallow the sources."""
    project_dir = tmp_path / "repo" / "android"

    with pytest.raises(GraphConfigurationError, match="contains the project directory"):
        resolve_build_root(project_dir, build_dir)


def test_build_root_inside_project_is_allowed(tmp_path: Path) -> None:
    assert resolve_build_root(tmp_path, "build") == tmp_path / "build"
