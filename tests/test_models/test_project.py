from __future__ import annotations

from pathlib import Path
from typing import Optional

import pytest

from uvup.models import DependencySpecifier, ProjectRecord


def _dep(
    name: str, current: str = "1.0.0", latest: Optional[str] = None
) -> DependencySpecifier:
    spec = DependencySpecifier(
        name=name,
        original_constraint=f"{name}>={current}",
        current_version=current,
        explicit_constraint=True,
    )
    if latest is not None:
        spec.latest_version = latest
        spec.resolving = False
    return spec


@pytest.fixture
def project() -> ProjectRecord:
    return ProjectRecord(
        name="api",
        file_path=Path("/work/api/pyproject.toml"),
        dependencies=[
            _dep("fastapi", "0.100.0", "0.110.0"),
            _dep("pydantic", "2.5.0", "2.5.0"),
            _dep("requests", "2.28.0"),
            DependencySpecifier(
                name="local",
                original_constraint="local @ file:///tmp/local",
                is_registry=False,
            ),
        ],
    )


@pytest.mark.unit
class TestProjectRecord:
    """Tests for ProjectRecord aggregate properties."""

    def test_key_is_manifest_path(self, project: ProjectRecord) -> None:
        """Test the identity key is the manifest path."""
        assert project.key == str(Path("/work/api/pyproject.toml"))

    def test_empty_project_is_truthy(self) -> None:
        """Test a project without dependencies still counts as a record."""
        empty = ProjectRecord(name="empty", file_path=Path("pyproject.toml"))

        assert empty
        assert empty.dependencies == []
        assert empty.updates_available == 0
        assert empty.is_resolving is False

    def test_updates_available(self, project: ProjectRecord) -> None:
        """Test only dependencies with a newer version are counted."""
        assert project.updates_available == 1

    def test_is_resolving(self, project: ProjectRecord) -> None:
        """Test any unresolved registry dependency keeps the project resolving."""
        assert project.is_resolving is True

        project.dependencies[2].resolving = False
        assert project.is_resolving is False

    def test_registry_dependencies(self, project: ProjectRecord) -> None:
        """Test non-registry entries are excluded from lookups."""
        names = [dep.name for dep in project.registry_dependencies()]

        assert names == ["fastapi", "pydantic", "requests"]

    def test_selected_keeps_declaration_order(self, project: ProjectRecord) -> None:
        """Test selected dependencies come back in declaration order."""
        project.dependencies[2].selected = True
        project.dependencies[0].selected = True

        assert [dep.name for dep in project.selected] == ["fastapi", "requests"]

    def test_selected_updates_excludes_current(self, project: ProjectRecord) -> None:
        """Test selected but up-to-date dependencies are not updates."""
        for dep in project.dependencies:
            dep.selected = True

        assert [dep.name for dep in project.selected_updates] == ["fastapi"]
