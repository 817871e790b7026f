"""Interactive update command for uvup.

Scans a directory tree for ``pyproject.toml`` files and opens an
interactive session:

1. **Discovery** builds a :class:`ProjectRecord` per manifest; broken
   manifests are reported and skipped.
2. **ResolutionCoordinator** looks up latest versions in the background,
   one project at a time, repainting as each answer lands.
3. **SelectionStateMachine** turns key presses into cursor moves,
   selections and mode changes.
4. On confirmation the **rewriter** produces the new manifest text, which
   is written atomically (optionally after a backup).

Typical usage::

    # Pick updates interactively in the current tree
    $ uvup update

    # Show what would be written without touching the file
    $ uvup update ./services --dry-run
"""

from __future__ import annotations

import sys
import asyncio
from pathlib import Path
from typing import List, Optional, Set, Tuple

import click
from rich.live import Live
from rich.markup import escape

from uvup.models import ProjectRecord
from uvup.exceptions import FileOperationError, UvUpError
from uvup.context import pass_context, UvUpContext
from uvup.core import (
    Action,
    PyPIResolver,
    ResolutionCoordinator,
    RewriteResult,
    SelectionStateMachine,
    discover_projects,
    rewrite_manifest,
)
from uvup.utils import (
    HTTPClient,
    get_logger,
    get_raw_console,
    print_error,
    print_success,
    print_table,
    print_warning,
    colorize_update_type,
    render_screen,
    safe_read_file,
    safe_write_file,
)
from uvup.utils.terminal import read_event

logger = get_logger("commands.update")


@click.command()
@click.argument(
    "root",
    type=click.Path(exists=True, file_okay=False, path_type=Path),
    default=".",
)
@click.option(
    "--backup/--no-backup",
    default=None,
    help="Create a timestamped backup before writing.",
)
@click.option(
    "--dry-run",
    is_flag=True,
    help="Show the planned changes without writing them.",
)
@click.option(
    "--timeout",
    type=click.IntRange(min=1),
    default=None,
    help="PyPI request timeout in seconds.",
)
@pass_context
def update(
    ctx: UvUpContext,
    root: Path,
    backup: Optional[bool],
    dry_run: bool,
    timeout: Optional[int],
) -> None:
    """Interactively bump dependency constraints to their latest versions.

    Selected declarations are rewritten in place; extras, markers and
    quoting are preserved. ``==`` and ``~=`` keep their operator, every
    other constraint becomes ``~=latest``.
    """
    config = ctx.config
    make_backup = config.backup if backup is None else backup

    discovery = discover_projects(root, exclude=config.exclude)
    for path, reason in discovery.skipped:
        print_warning(f"Skipped {path}: {reason}")

    if not discovery.projects:
        print_error(f"No pyproject.toml files found in {root}", prefix="[X]")
        get_raw_console().print(
            "Make sure you're in a directory containing Python projects",
            style="dim",
        )
        sys.exit(0)

    machine = SelectionStateMachine(discovery.projects)

    try:
        action = asyncio.run(
            _run_session(
                machine,
                timeout=timeout or config.timeout,
                max_retries=config.max_retries,
            )
        )
    except UvUpError as exc:
        print_error(str(exc))
        sys.exit(1)

    if action is not Action.APPLY or machine.current_project is None:
        logger.info("Session ended without changes")
        sys.exit(0)

    sys.exit(_apply(machine.current_project, backup=make_backup, dry_run=dry_run))


# ---------------------------------------------------------------------------
# Interactive session
# ---------------------------------------------------------------------------


async def _run_session(
    machine: SelectionStateMachine,
    *,
    timeout: int,
    max_retries: int,
) -> Action:
    """Run the key loop while lookups complete in the background.

    Returns:
        The terminal action, :attr:`Action.APPLY` or :attr:`Action.QUIT`.
    """
    console = get_raw_console()

    async with HTTPClient(timeout=timeout, max_retries=max_retries) as http:
        with Live(
            render_screen(machine),
            console=console,
            auto_refresh=False,
            transient=True,
        ) as live:

            def repaint(*_: object) -> None:
                live.update(render_screen(machine), refresh=True)

            coordinator = ResolutionCoordinator(PyPIResolver(http), on_update=repaint)
            background = asyncio.create_task(coordinator.resolve_all(machine.projects))
            refreshes: Set["asyncio.Task[None]"] = set()

            try:
                while True:
                    event = await asyncio.to_thread(read_event)
                    if event is None:
                        continue

                    action = machine.handle(event)

                    if action is Action.REFRESH and machine.current_project:
                        task = asyncio.create_task(
                            coordinator.refresh_project(machine.current_project)
                        )
                        refreshes.add(task)
                        task.add_done_callback(refreshes.discard)

                    repaint()

                    if action in (Action.APPLY, Action.QUIT):
                        return action
            finally:
                pending = [background, *refreshes]
                for task in pending:
                    task.cancel()
                await asyncio.gather(*pending, return_exceptions=True)


# ---------------------------------------------------------------------------
# Applying the selection
# ---------------------------------------------------------------------------


def _apply(project: ProjectRecord, *, backup: bool, dry_run: bool) -> int:
    """Rewrite the project's manifest with its selected updates.

    Returns:
        Process exit code: ``0`` on success or when there is nothing to
        write, ``1`` when the manifest cannot be read or written.
    """
    if not project.selected_updates:
        print_warning(f"No updates selected for {project.name}")
        return 0

    try:
        text = safe_read_file(project.file_path)
    except FileOperationError as exc:
        print_error(f"Failed to update dependencies: {exc}")
        return 1

    result = rewrite_manifest(text, project.dependencies)
    if not result.changed:
        print_warning(f"Nothing to change in {project.file_path}")
        return 0

    _display_update_plan(project, result, dry_run)

    if dry_run:
        print_warning("Dry run mode - no changes applied")
        return 0

    try:
        backup_path = safe_write_file(project.file_path, result.text, create_backup=backup)
    except FileOperationError as exc:
        print_error(f"Failed to update dependencies: {exc}")
        logger.debug("Write failure details: %s", exc.details, exc_info=True)
        return 1

    if backup_path is not None:
        logger.info("Created backup: %s", backup_path)

    print_success(f"Updated {len(result.changes)} dependencies in {project.name}")
    console = get_raw_console()
    for name, old, new in _summary(project, result):
        console.print(f"  • {name}: {old} → {new}", markup=False)

    return 0


def _summary(
    project: ProjectRecord,
    result: RewriteResult,
) -> List[Tuple[str, str, str]]:
    """``(name, declared, latest)`` for every rewritten dependency."""
    changed = {change.old for change in result.changes}
    return [
        (dep.name, dep.display_version(), dep.latest_version or "")
        for dep in project.selected_updates
        if dep.original_constraint in changed
    ]


def _display_update_plan(
    project: ProjectRecord,
    result: RewriteResult,
    dry_run: bool,
) -> None:
    """Show the declarations about to be rewritten."""
    label = "Update Plan (Dry Run)" if dry_run else "Update Plan"
    title = f"{label} - {escape(project.name)}"
    changed = {change.old: change.new for change in result.changes}

    data = []
    for dep in project.selected_updates:
        if dep.original_constraint not in changed:
            continue
        data.append(
            {
                "Package": escape(dep.name),
                "Current": escape(dep.original_constraint),
                "New": f"[bold green]{escape(changed[dep.original_constraint])}[/bold green]",
                "Change": colorize_update_type(dep.change_type),
            }
        )

    column_styles = {
        "Package": {"style": "bold cyan", "no_wrap": True},
        "Current": {"style": "dim"},
        "Change": {"justify": "center"},
    }

    print_table(data, title=title, column_styles=column_styles)
