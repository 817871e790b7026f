"""
Console output utilities for uvup using Rich.

This module holds every user-facing output helper: status messages,
tables, and the screens of the interactive session. For diagnostic or
debug output, use :mod:`uvup.utils.logger`.

The ``render_*`` functions only build Rich renderables from state; they
never read input or change the state they are given.
"""

from __future__ import annotations

import os
import sys
import threading
from typing import TYPE_CHECKING, Any, Dict, List, Optional

from rich.console import Console, Group, RenderableType
from rich.table import Table
from rich.text import Text
from rich.theme import Theme

from uvup.utils.version_utils import MAJOR, MINOR, PATCH

if TYPE_CHECKING:
    from uvup.core.state import SelectionStateMachine
    from uvup.models import DependencySpecifier, ProjectRecord

# ---------------------------------------------------------------------------
# Theme configuration
# ---------------------------------------------------------------------------

UVUP_THEME = Theme(
    {
        "success": "bold green",
        "error": "bold red",
        "warning": "bold yellow",
        "info": "bold cyan",
        "dim": "dim",
        "highlight": "bold magenta",
        "cursor": "bold blue",
        "title": "bold green",
        "hint": "grey50",
    }
)

CHANGE_STYLES = {
    MAJOR: "red",
    MINOR: "yellow",
    PATCH: "green",
}

# ---------------------------------------------------------------------------
# Console lifecycle management
# ---------------------------------------------------------------------------

_console: Optional[Console] = None
_console_lock = threading.Lock()


def _should_use_color() -> bool:
    """Return True if colored output should be enabled."""
    if os.environ.get("NO_COLOR"):
        return False
    try:
        return sys.stdout.isatty()
    except (AttributeError, OSError):
        return False


def _get_console() -> Console:
    """Return a singleton Rich Console instance."""
    global _console

    if _console is None:
        with _console_lock:
            if _console is None:
                use_color = _should_use_color()
                _console = Console(
                    theme=UVUP_THEME,
                    no_color=not use_color,
                    highlight=False,
                )
    return _console


def reconfigure_console() -> None:
    """Reset the global console instance.

    Useful if environment variables (e.g. NO_COLOR) change at runtime.
    """
    global _console
    with _console_lock:
        _console = None


def get_raw_console() -> Console:
    """Return the underlying Rich Console instance."""
    return _get_console()


# ---------------------------------------------------------------------------
# Status message helpers
# ---------------------------------------------------------------------------


def print_success(message: str, *, prefix: str = "[OK]") -> None:
    """Print a success message."""
    _get_console().print(f"{prefix} {message}", style="success", markup=False)


def print_error(message: str, *, prefix: str = "[ERROR]") -> None:
    """Print an error message."""
    _get_console().print(f"{prefix} {message}", style="error", markup=False)


def print_warning(message: str, *, prefix: str = "[WARNING]") -> None:
    """Print a warning message."""
    _get_console().print(f"{prefix} {message}", style="warning", markup=False)


# ---------------------------------------------------------------------------
# Structured output
# ---------------------------------------------------------------------------


def print_table(
    data: List[Dict[str, Any]],
    *,
    headers: Optional[List[str]] = None,
    title: Optional[str] = None,
    column_styles: Optional[Dict[str, Dict[str, Any]]] = None,
) -> None:
    """Render structured data as a Rich table.

    Args:
        data: List of row dictionaries. Values may contain Rich markup.
        headers: Column order. Defaults to keys of the first row.
        title: Optional table title.
        column_styles: Per-column style configuration.
    """
    if not data:
        return

    if headers is None:
        headers = list(data[0].keys())

    table = Table(title=title, show_header=True, header_style="bold")

    column_styles = column_styles or {}
    for header in headers:
        config = column_styles.get(header, {})
        table.add_column(
            header,
            style=config.get("style"),
            justify=config.get("justify", "default"),
            no_wrap=config.get("no_wrap", False),
        )

    for row in data:
        values = [str(row.get(h, "")) for h in headers]
        table.add_row(*values)

    _get_console().print(table)


def colorize_update_type(update_type: str) -> str:
    """Return a Rich-markup colored change magnitude label."""
    color = CHANGE_STYLES.get(update_type.lower())
    return f"[{color}]{update_type}[/{color}]" if color else update_type


# ---------------------------------------------------------------------------
# Interactive session screens
# ---------------------------------------------------------------------------


def _pointer(active: bool) -> Text:
    return Text("▶ " if active else "  ", style="cursor" if active else "")


def _project_status(project: "ProjectRecord") -> Text:
    if project.is_resolving:
        return Text(" - checking...", style="hint")
    count = project.updates_available
    if count:
        plural = "update" if count == 1 else "updates"
        return Text(f" - {count} {plural} available", style="green")
    return Text(" - up to date", style="hint")


def _dependency_status(dependency: "DependencySpecifier") -> Text:
    if not dependency.is_registry:
        return Text(" (not a registry package, skipped)", style="hint")
    if dependency.resolving:
        return Text(" (checking...)", style="hint")
    if dependency.latest_version is None:
        return Text(" (not found)", style="red")

    status = Text(f" ({dependency.display_version()}", style="hint")
    if dependency.has_update:
        style = "red" if dependency.change_type == MAJOR else "green"
        status.append(f" → {dependency.latest_version}", style=style)
        status.append(")", style="hint")
    else:
        status.append(" ✓)", style="hint")
    return status


def render_projects(machine: "SelectionStateMachine") -> RenderableType:
    """Project list screen."""
    lines: List[RenderableType] = [
        Text("UV-UP - Python Dependency Updater", style="title"),
        Text("Select a project to update:", style="hint"),
        Text(""),
    ]

    for index, project in enumerate(machine.projects):
        active = index == machine.project_index
        line = Text("  ")
        line.append_text(_pointer(active))
        line.append(project.name, style="cursor" if active else "")
        line.append(f" ({len(project.dependencies)} dependencies")
        line.append_text(_project_status(project))
        line.append(")")
        lines.append(line)

    lines.append(Text(""))
    lines.append(
        Text("↑↓ navigate · Enter select · r refresh · q quit", style="hint")
    )
    return Group(*lines)


def render_dependencies(machine: "SelectionStateMachine") -> RenderableType:
    """Dependency list screen of the current project."""
    project = machine.current_project
    if project is None:
        return Text("")

    lines: List[RenderableType] = [
        Text(project.name, style="title"),
        Text("Select dependencies to update:", style="hint"),
        Text(""),
    ]

    if not project.dependencies:
        lines.append(Text("  No dependencies declared.", style="hint"))

    for index, dependency in enumerate(project.dependencies):
        active = index == machine.dependency_index
        line = Text("  ")
        line.append_text(_pointer(active))
        line.append("✓ " if dependency.selected else "☐ ")
        line.append(dependency.name, style="cursor" if active else "")
        line.append_text(_dependency_status(dependency))
        lines.append(line)

    lines.append(Text(""))
    lines.append(
        Text(
            "↑↓ navigate · Space select · Enter continue · ← back · r refresh · q quit",
            style="hint",
        )
    )
    return Group(*lines)


def render_confirm(machine: "SelectionStateMachine") -> RenderableType:
    """Confirmation screen listing the selected dependencies."""
    project = machine.current_project
    if project is None:
        return Text("")

    selected = project.selected
    lines: List[RenderableType] = [
        Text("Confirm Updates", style="warning"),
        Text(f"About to update {len(selected)} dependencies in {project.name}:"),
        Text(""),
    ]

    for dependency in selected:
        style = "red" if dependency.change_type == MAJOR else "cyan"
        latest = dependency.latest_version or "unknown"
        if not dependency.has_update:
            style = "hint"
            latest = f"{latest} (no change)"
        lines.append(
            Text(
                f"  • {dependency.name}: {dependency.display_version()} → {latest}",
                style=style,
            )
        )

    lines.append(Text(""))
    lines.append(Text("Continue? (y/n)", style="hint"))
    return Group(*lines)


def render_screen(machine: "SelectionStateMachine") -> RenderableType:
    """Render whichever screen matches the machine's mode."""
    from uvup.core.state import Mode

    if machine.mode is Mode.DEPENDENCY_SELECT:
        return render_dependencies(machine)
    if machine.mode is Mode.CONFIRM:
        return render_confirm(machine)
    return render_projects(machine)
