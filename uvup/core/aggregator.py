"""Project discovery and aggregation.

Turns ``pyproject.toml`` files into :class:`ProjectRecord` objects. Only the
``[project]`` table is consulted: its ``name`` and its ordered
``dependencies`` list. Each declaration goes through
:func:`~uvup.core.parser.parse_specifier`, keeping declaration order.

A manifest that cannot be read or decoded is skipped and reported in
:attr:`DiscoveryResult.skipped`; it never stops the scan.

Typical usage::

    result = discover_projects(Path("."))
    for project in result.projects:
        print(project.name, len(project.dependencies))
    for path, reason in result.skipped:
        print(f"skipped {path}: {reason}")
"""

from __future__ import annotations

import tomli as tomllib
from pathlib import Path
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Mapping, Optional, Tuple

from uvup.core.parser import parse_specifier
from uvup.models import DependencySpecifier, ProjectRecord
from uvup.exceptions import FileOperationError, ManifestError
from uvup.utils.logger import get_logger
from uvup.utils.filesystem import find_manifest_files, safe_read_file
from uvup.constants import DEFAULT_EXCLUDE_DIRS

logger = get_logger("aggregator")


@dataclass
class DiscoveryResult:
    """Projects found under a root plus the manifests that were skipped."""

    projects: List[ProjectRecord] = field(default_factory=list)
    skipped: List[Tuple[Path, str]] = field(default_factory=list)


def build_project(
    file_path: Path,
    document: Mapping[str, Any],
    *,
    root: Optional[Path] = None,
) -> ProjectRecord:
    """Build a project record from a decoded manifest.

    Args:
        file_path: Manifest location.
        document: Decoded TOML document.
        root: Scan root, used to derive a display name when the manifest
            does not declare one.

    Returns:
        A :class:`ProjectRecord`; a manifest without dependencies yields an
        empty dependency list.
    """
    project_table = document.get("project")
    if not isinstance(project_table, Mapping):
        project_table = {}

    name = project_table.get("name")
    if not isinstance(name, str) or not name.strip():
        name = _display_path(file_path, root)

    dependencies: List[DependencySpecifier] = []
    declared = project_table.get("dependencies") or []

    if not isinstance(declared, list):
        logger.debug("Ignoring non-list dependencies in %s", file_path)
        declared = []

    for entry in declared:
        if not isinstance(entry, str):
            logger.debug("Ignoring non-string dependency %r in %s", entry, file_path)
            continue
        dependencies.append(parse_specifier(entry))

    return ProjectRecord(name=name, file_path=file_path, dependencies=dependencies)


def load_manifest(path: Path) -> Dict[str, Any]:
    """Read and decode a manifest.

    Raises:
        ManifestError: File unreadable or not valid TOML.
    """
    try:
        text = safe_read_file(path)
    except FileOperationError as exc:
        raise ManifestError(exc.message, file_path=str(path)) from exc

    try:
        return tomllib.loads(text)
    except tomllib.TOMLDecodeError as exc:
        raise ManifestError(f"Invalid TOML: {exc}", file_path=str(path)) from exc


def load_project(path: Path, *, root: Optional[Path] = None) -> ProjectRecord:
    """Read one manifest into a :class:`ProjectRecord`.

    Raises:
        ManifestError: File unreadable, not valid TOML, or without a
            ``[project]`` table.
    """
    document = load_manifest(path)

    if not isinstance(document.get("project"), dict):
        raise ManifestError("no [project] table", file_path=str(path))

    return build_project(path, document, root=root)


def discover_projects(
    root: Path,
    *,
    exclude: Iterable[str] = DEFAULT_EXCLUDE_DIRS,
) -> DiscoveryResult:
    """Find and load every project below ``root`` in discovery order."""
    root = root.resolve()
    result = DiscoveryResult()

    for path in find_manifest_files(root, exclude=exclude):
        try:
            project = load_project(path, root=root)
        except ManifestError as exc:
            logger.info("Skipping %s: %s", path, exc.message)
            result.skipped.append((path, exc.message))
            continue

        logger.debug(
            "Loaded %s with %d dependencies", project.name, len(project.dependencies)
        )
        result.projects.append(project)

    return result


def _display_path(file_path: Path, root: Optional[Path]) -> str:
    if root is not None:
        try:
            return str(file_path.relative_to(root))
        except ValueError:
            pass
    return str(file_path)
