"""
Project data model for uvup.

A :class:`ProjectRecord` groups the dependency specifiers declared by one
``pyproject.toml``. The manifest path doubles as the key under which
asynchronous resolution results are merged back.
"""

from __future__ import annotations

from pathlib import Path
from dataclasses import dataclass, field
from typing import List

from uvup.models.specifier import DependencySpecifier


@dataclass
class ProjectRecord:
    """
    One discovered manifest and its dependencies.

    Attributes:
        name: ``[project].name``, or the manifest path when undeclared.
        file_path: Location of the ``pyproject.toml``.
        dependencies: Specifiers in declaration order.
    """

    name: str
    file_path: Path
    dependencies: List[DependencySpecifier] = field(default_factory=list)

    @property
    def key(self) -> str:
        """Stable identity of the project within a session."""
        return str(self.file_path)

    @property
    def updates_available(self) -> int:
        return sum(1 for dep in self.dependencies if dep.has_update)

    @property
    def is_resolving(self) -> bool:
        return any(dep.resolving for dep in self.dependencies)

    @property
    def selected(self) -> List[DependencySpecifier]:
        """Dependencies the operator marked, in declaration order."""
        return [dep for dep in self.dependencies if dep.selected]

    @property
    def selected_updates(self) -> List[DependencySpecifier]:
        """Marked dependencies that also have a newer version."""
        return [dep for dep in self.dependencies if dep.selected and dep.has_update]

    def registry_dependencies(self) -> List[DependencySpecifier]:
        """Dependencies eligible for a registry lookup."""
        return [dep for dep in self.dependencies if dep.is_registry]
