from __future__ import annotations

from pathlib import Path
from typing import List

import pytest

from uvup.core.coordinator import apply_resolution
from uvup.core.parser import parse_specifier
from uvup.core.state import Action, Event, Mode, SelectionStateMachine
from uvup.models import ProjectRecord


def _project(name: str, *declarations: str) -> ProjectRecord:
    return ProjectRecord(
        name=name,
        file_path=Path(f"/work/{name}/pyproject.toml"),
        dependencies=[parse_specifier(d) for d in declarations],
    )


@pytest.fixture
def projects() -> List[ProjectRecord]:
    return [
        _project("api", "fastapi>=0.100.0", "pydantic==2.5.0", "requests"),
        _project("worker", "celery>=5.0"),
        _project("empty"),
    ]


@pytest.fixture
def machine(projects: List[ProjectRecord]) -> SelectionStateMachine:
    return SelectionStateMachine(projects)


def _feed(machine: SelectionStateMachine, *events: Event) -> Action:
    action = Action.NONE
    for event in events:
        action = machine.handle(event)
    return action


@pytest.mark.unit
class TestInitialState:
    """Tests for a freshly created machine."""

    def test_starts_in_project_select(self, machine: SelectionStateMachine) -> None:
        assert machine.mode is Mode.PROJECT_SELECT
        assert machine.project_index == 0
        assert machine.dependency_index == 0
        assert machine.finished is False
        assert machine.current_project is not None
        assert machine.current_project.name == "api"

    def test_no_projects(self) -> None:
        """Test an empty session never crashes on navigation."""
        machine = SelectionStateMachine([])

        assert machine.current_project is None
        assert machine.current_dependency is None
        assert _feed(machine, Event.DOWN, Event.CONFIRM, Event.REFRESH) is Action.NONE
        assert machine.mode is Mode.PROJECT_SELECT


@pytest.mark.unit
class TestNavigation:
    """Tests for cursor movement and clamping."""

    def test_project_cursor_clamps(self, machine: SelectionStateMachine) -> None:
        _feed(machine, Event.UP)
        assert machine.project_index == 0

        _feed(machine, Event.DOWN, Event.DOWN, Event.DOWN, Event.DOWN)
        assert machine.project_index == 2

    def test_dependency_cursor_clamps(self, machine: SelectionStateMachine) -> None:
        _feed(machine, Event.CONFIRM)

        _feed(machine, Event.UP)
        assert machine.dependency_index == 0

        _feed(machine, *[Event.DOWN] * 10)
        assert machine.dependency_index == 2
        assert machine.current_dependency.name == "requests"

    def test_opening_project_resets_dependency_cursor(
        self, machine: SelectionStateMachine
    ) -> None:
        _feed(machine, Event.CONFIRM, Event.DOWN, Event.DOWN, Event.BACK)
        _feed(machine, Event.DOWN, Event.CONFIRM)

        assert machine.current_project.name == "worker"
        assert machine.dependency_index == 0

    def test_cursor_clamped_when_list_shrinks(
        self, machine: SelectionStateMachine
    ) -> None:
        _feed(machine, Event.CONFIRM, Event.DOWN, Event.DOWN)
        machine.current_project.dependencies.pop()

        assert machine.dependency_index == 1
        assert machine.current_dependency.name == "pydantic"

    def test_empty_project_has_no_dependency(
        self, machine: SelectionStateMachine
    ) -> None:
        _feed(machine, Event.DOWN, Event.DOWN, Event.CONFIRM)

        assert machine.mode is Mode.DEPENDENCY_SELECT
        assert machine.current_dependency is None
        assert _feed(machine, Event.TOGGLE, Event.DOWN) is Action.NONE


@pytest.mark.unit
class TestModeTransitions:
    """Tests for the mode transition table."""

    def test_full_accept_flow(self, machine: SelectionStateMachine) -> None:
        """Test confirm, toggle, confirm, accept ends with APPLY."""
        assert _feed(machine, Event.CONFIRM) is Action.NONE
        assert machine.mode is Mode.DEPENDENCY_SELECT

        _feed(machine, Event.TOGGLE, Event.DOWN, Event.DOWN, Event.TOGGLE)
        _feed(machine, Event.CONFIRM)
        assert machine.mode is Mode.CONFIRM

        assert machine.handle(Event.ACCEPT) is Action.APPLY
        assert machine.finished is True
        assert [d.name for d in machine.current_project.selected] == [
            "fastapi",
            "requests",
        ]

    def test_toggle_twice_unselects(self, machine: SelectionStateMachine) -> None:
        _feed(machine, Event.CONFIRM, Event.TOGGLE, Event.TOGGLE)

        assert machine.current_dependency.selected is False

    @pytest.mark.parametrize("event", [Event.REJECT, Event.BACK])
    def test_reject_returns_to_dependencies(
        self, machine: SelectionStateMachine, event: Event
    ) -> None:
        """Test leaving the confirmation keeps the selection."""
        _feed(machine, Event.CONFIRM, Event.TOGGLE, Event.CONFIRM)

        assert machine.handle(event) is Action.NONE
        assert machine.mode is Mode.DEPENDENCY_SELECT
        assert machine.current_dependency.selected is True

    def test_back_from_dependencies(self, machine: SelectionStateMachine) -> None:
        _feed(machine, Event.CONFIRM, Event.BACK)

        assert machine.mode is Mode.PROJECT_SELECT

    @pytest.mark.parametrize(
        "mode_events",
        [[], [Event.CONFIRM], [Event.CONFIRM, Event.CONFIRM]],
        ids=["projects", "dependencies", "confirm"],
    )
    def test_quit_from_any_mode(
        self, machine: SelectionStateMachine, mode_events: List[Event]
    ) -> None:
        _feed(machine, *mode_events)

        assert machine.handle(Event.QUIT) is Action.QUIT
        assert machine.finished is True

    def test_finished_machine_ignores_events(
        self, machine: SelectionStateMachine
    ) -> None:
        _feed(machine, Event.QUIT)

        assert machine.handle(Event.CONFIRM) is Action.NONE
        assert machine.mode is Mode.PROJECT_SELECT

    @pytest.mark.parametrize(
        "mode_events,event",
        [
            ([], Event.TOGGLE),
            ([], Event.ACCEPT),
            ([], Event.BACK),
            ([Event.CONFIRM], Event.ACCEPT),
            ([Event.CONFIRM, Event.CONFIRM], Event.UP),
            ([Event.CONFIRM, Event.CONFIRM], Event.TOGGLE),
        ],
    )
    def test_unbound_events_do_nothing(
        self,
        machine: SelectionStateMachine,
        mode_events: List[Event],
        event: Event,
    ) -> None:
        _feed(machine, *mode_events)
        mode = machine.mode

        assert machine.handle(event) is Action.NONE
        assert machine.mode is mode
        assert machine.finished is False


@pytest.mark.unit
class TestRefresh:
    """Tests for the refresh event."""

    @pytest.mark.parametrize("mode_events", [[], [Event.CONFIRM]])
    def test_refresh_resets_current_project(
        self, machine: SelectionStateMachine, mode_events: List[Event]
    ) -> None:
        project = machine.current_project
        for dep in project.dependencies:
            apply_resolution(dep, "9.9.9")
        _feed(machine, *mode_events)

        assert machine.handle(Event.REFRESH) is Action.REFRESH
        assert all(dep.resolving for dep in project.dependencies)
        assert all(dep.latest_version is None for dep in project.dependencies)

    def test_refresh_not_bound_in_confirm(
        self, machine: SelectionStateMachine
    ) -> None:
        _feed(machine, Event.CONFIRM, Event.CONFIRM)

        assert machine.handle(Event.REFRESH) is Action.NONE
