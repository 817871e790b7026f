"""Check command implementation for uvup.

Reports every discovered project and its dependencies next to the latest
published versions without prompting or writing anything.

The command reuses the interactive pipeline without the key loop:

1. **discover_projects** parses each ``pyproject.toml`` below ROOT.
2. **ResolutionCoordinator** resolves latest versions, one project at a
   time, with a single shared :class:`PyPIResolver` cache.
3. Results are rendered as Rich tables or as a JSON document.

Typical usage::

    # Only show dependencies with a newer release
    $ uvup check --outdated-only

    # Machine-readable JSON output
    $ uvup check ./services --format json > report.json
"""

from __future__ import annotations

import sys
import json
import click
import asyncio
from pathlib import Path
from typing import Any, Dict, List, Optional

from rich.markup import escape

from uvup.exceptions import UvUpError
from uvup.models import DependencySpecifier, ProjectRecord
from uvup.context import pass_context, UvUpContext
from uvup.core import PyPIResolver, ResolutionCoordinator, discover_projects
from uvup.utils import (
    HTTPClient,
    get_logger,
    print_error,
    print_success,
    print_table,
    print_warning,
    colorize_update_type,
)

logger = get_logger("commands.check")


@click.command()
@click.argument(
    "root",
    type=click.Path(exists=True, file_okay=False, path_type=Path),
    default=".",
)
@click.option(
    "--outdated-only",
    is_flag=True,
    help="Show only dependencies with available updates.",
)
@click.option(
    "--format",
    "-f",
    type=click.Choice(["table", "json"], case_sensitive=False),
    default="table",
    help="Output format.",
)
@click.option(
    "--timeout",
    type=click.IntRange(min=1),
    default=None,
    help="PyPI request timeout in seconds.",
)
@pass_context
def check(
    ctx: UvUpContext,
    root: Path,
    outdated_only: bool,
    format: str,
    timeout: Optional[int],
) -> None:
    """Report available updates for every pyproject.toml below ROOT.

    Nothing is written. Dependencies that are not registry packages
    (URLs, paths, multi-clause constraints) are listed as ``unmanaged``.
    """
    config = ctx.config
    as_json = format.lower() == "json"

    discovery = discover_projects(root, exclude=config.exclude)
    if not as_json:
        for path, reason in discovery.skipped:
            print_warning(f"Skipped {path}: {reason}")

    if not discovery.projects:
        if as_json:
            click.echo(json.dumps([], indent=2))
        else:
            print_error(f"No pyproject.toml files found in {root}", prefix="[X]")
        sys.exit(0)

    logger.info("Checking %d project(s) under %s", len(discovery.projects), root)
    try:
        asyncio.run(
            _resolve(
                discovery.projects,
                timeout=timeout or config.timeout,
                max_retries=config.max_retries,
            )
        )
    except UvUpError as exc:
        print_error(str(exc))
        sys.exit(1)

    if as_json:
        _display_json(discovery.projects, outdated_only)
    else:
        _display_tables(discovery.projects, outdated_only)

    sys.exit(0)


async def _resolve(
    projects: List[ProjectRecord],
    *,
    timeout: int,
    max_retries: int,
) -> None:
    async with HTTPClient(timeout=timeout, max_retries=max_retries) as http:
        coordinator = ResolutionCoordinator(PyPIResolver(http))
        await coordinator.resolve_all(projects)


# ---------------------------------------------------------------------------
# Display renderers
# ---------------------------------------------------------------------------


def _visible(project: ProjectRecord, outdated_only: bool) -> List[DependencySpecifier]:
    if outdated_only:
        return [dep for dep in project.dependencies if dep.has_update]
    return list(project.dependencies)


def _latest_label(dep: DependencySpecifier) -> str:
    if not dep.is_registry:
        return "[dim]-[/dim]"
    if dep.latest_version is None:
        return "[red]not found[/red]"
    return escape(dep.latest_version)


def _create_table_row(dep: DependencySpecifier) -> Dict[str, str]:
    """Build a Rich-formatted table row for one dependency."""
    if dep.has_update:
        status = "[yellow]⬆ OUTDATED[/yellow]"
        change = colorize_update_type(dep.change_type)
    elif not dep.is_registry:
        status = "[dim]- SKIPPED[/dim]"
        change = "[dim]-[/dim]"
    elif dep.latest_version is None:
        status = "[red]✗ ERROR[/red]"
        change = "[dim]-[/dim]"
    else:
        status = "[green]✓ OK[/green]"
        change = "[dim]-[/dim]"

    return {
        "Status": status,
        "Package": escape(dep.name),
        "Declared": escape(dep.display_version()),
        "Latest": _latest_label(dep),
        "Change": change,
    }


def _display_tables(projects: List[ProjectRecord], outdated_only: bool) -> None:
    column_styles: Dict[str, Dict[str, Any]] = {
        "Status": {"justify": "center", "no_wrap": True},
        "Package": {"style": "bold cyan", "no_wrap": True},
        "Declared": {"justify": "center", "style": "dim"},
        "Latest": {"justify": "center", "style": "bold green"},
        "Change": {"justify": "center"},
    }

    total_updates = 0
    for project in projects:
        rows = [_create_table_row(dep) for dep in _visible(project, outdated_only)]
        total_updates += project.updates_available
        if not rows:
            continue
        print_table(
            rows,
            title=escape(f"{project.name} ({project.file_path})"),
            column_styles=column_styles,
        )

    if total_updates:
        print_warning(f"\n{total_updates} dependencies have updates available")
    else:
        print_success("\nAll dependencies are up to date!")


def _dependency_to_json(dep: DependencySpecifier) -> Dict[str, Any]:
    return {
        "name": dep.name,
        "declared": dep.original_constraint,
        "operator": dep.operator if dep.explicit_constraint else None,
        "current_version": dep.current_version if dep.explicit_constraint else None,
        "latest_version": dep.latest_version,
        "change_type": dep.change_type if dep.has_update else None,
        "has_update": dep.has_update,
        "registry": dep.is_registry,
    }


def _display_json(projects: List[ProjectRecord], outdated_only: bool) -> None:
    """Print one JSON document covering every project.

    Example::

        [
          {
            "name": "api",
            "path": "services/api/pyproject.toml",
            "dependencies": [
              {"name": "fastapi", "declared": "fastapi>=0.100.0", ...}
            ]
          }
        ]
    """
    data = [
        {
            "name": project.name,
            "path": str(project.file_path),
            "dependencies": [
                _dependency_to_json(dep) for dep in _visible(project, outdated_only)
            ],
        }
        for project in projects
    ]
    click.echo(json.dumps(data, indent=2))
