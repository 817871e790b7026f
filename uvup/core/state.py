"""Interactive selection state machine.

The session moves between three modes::

    PROJECT_SELECT --confirm--> DEPENDENCY_SELECT --confirm--> CONFIRM
          ^                          |    ^                      |
          +----------back------------+    +----reject / back-----+

``accept`` in CONFIRM ends the session with :attr:`Action.APPLY`; ``quit``
ends it from any mode with :attr:`Action.QUIT`. ``refresh`` re-queues the
current project's lookups and returns :attr:`Action.REFRESH` so the caller
can schedule them.

Every transition is synchronous and touches no terminal, so the machine
can be driven directly from tests. Cursors are clamped to the current
collection length on each transition and each read.
"""

from __future__ import annotations

from enum import Enum
from typing import Callable, Dict, Iterable, List, Optional, Tuple

from uvup.core.coordinator import reset_project
from uvup.models import DependencySpecifier, ProjectRecord
from uvup.utils.logger import get_logger

logger = get_logger("state")


class Mode(str, Enum):
    PROJECT_SELECT = "project"
    DEPENDENCY_SELECT = "dependencies"
    CONFIRM = "confirm"


class Event(str, Enum):
    UP = "up"
    DOWN = "down"
    TOGGLE = "toggle"
    CONFIRM = "confirm"
    BACK = "back"
    ACCEPT = "accept"
    REJECT = "reject"
    QUIT = "quit"
    REFRESH = "refresh"


class Action(str, Enum):
    """What the caller has to do after a transition."""

    NONE = "none"
    APPLY = "apply"
    QUIT = "quit"
    REFRESH = "refresh"


def _clamp(index: int, length: int) -> int:
    if length <= 0:
        return 0
    return max(0, min(index, length - 1))


class SelectionStateMachine:
    """Cursor, mode and selection state of an interactive session.

    Projects are stored in discovery order and indexed by manifest path
    so asynchronous results can find their record.

    Args:
        projects: Discovered projects, in display order.
    """

    def __init__(self, projects: Iterable[ProjectRecord]) -> None:
        self.projects: List[ProjectRecord] = list(projects)

        self.mode: Mode = Mode.PROJECT_SELECT
        self.finished: bool = False
        self._project_index = 0
        self._dependency_index = 0

        self._transitions: Dict[Tuple[Mode, Event], Callable[[], Action]] = {
            (Mode.PROJECT_SELECT, Event.UP): lambda: self._move_project(-1),
            (Mode.PROJECT_SELECT, Event.DOWN): lambda: self._move_project(1),
            (Mode.PROJECT_SELECT, Event.CONFIRM): self._open_project,
            (Mode.PROJECT_SELECT, Event.REFRESH): self._refresh,
            (Mode.DEPENDENCY_SELECT, Event.UP): lambda: self._move_dependency(-1),
            (Mode.DEPENDENCY_SELECT, Event.DOWN): lambda: self._move_dependency(1),
            (Mode.DEPENDENCY_SELECT, Event.TOGGLE): self._toggle,
            (Mode.DEPENDENCY_SELECT, Event.CONFIRM): lambda: self._enter(Mode.CONFIRM),
            (Mode.DEPENDENCY_SELECT, Event.BACK): lambda: self._enter(
                Mode.PROJECT_SELECT
            ),
            (Mode.DEPENDENCY_SELECT, Event.REFRESH): self._refresh,
            (Mode.CONFIRM, Event.ACCEPT): self._accept,
            (Mode.CONFIRM, Event.REJECT): lambda: self._enter(Mode.DEPENDENCY_SELECT),
            (Mode.CONFIRM, Event.BACK): lambda: self._enter(Mode.DEPENDENCY_SELECT),
        }

    # ------------------------------------------------------------------
    # Cursors
    # ------------------------------------------------------------------

    @property
    def project_index(self) -> int:
        return _clamp(self._project_index, len(self.projects))

    @property
    def dependency_index(self) -> int:
        project = self.current_project
        length = len(project.dependencies) if project else 0
        return _clamp(self._dependency_index, length)

    @property
    def current_project(self) -> Optional[ProjectRecord]:
        if not self.projects:
            return None
        return self.projects[self.project_index]

    @property
    def current_dependency(self) -> Optional[DependencySpecifier]:
        project = self.current_project
        if project is None or not project.dependencies:
            return None
        return project.dependencies[self.dependency_index]

    # ------------------------------------------------------------------
    # Event handling
    # ------------------------------------------------------------------

    def handle(self, event: Event) -> Action:
        """Apply one input event and report what the caller must do."""
        if self.finished:
            return Action.NONE

        if event is Event.QUIT:
            self.finished = True
            logger.debug("Session quit from %s", self.mode.value)
            return Action.QUIT

        transition = self._transitions.get((self.mode, event))
        if transition is None:
            return Action.NONE

        action = transition()
        self._project_index = self.project_index
        self._dependency_index = self.dependency_index
        return action

    def _enter(self, mode: Mode) -> Action:
        logger.debug("Mode %s -> %s", self.mode.value, mode.value)
        self.mode = mode
        return Action.NONE

    def _move_project(self, step: int) -> Action:
        self._project_index = _clamp(self.project_index + step, len(self.projects))
        return Action.NONE

    def _move_dependency(self, step: int) -> Action:
        project = self.current_project
        length = len(project.dependencies) if project else 0
        self._dependency_index = _clamp(self.dependency_index + step, length)
        return Action.NONE

    def _open_project(self) -> Action:
        if self.current_project is None:
            return Action.NONE
        self._dependency_index = 0
        return self._enter(Mode.DEPENDENCY_SELECT)

    def _toggle(self) -> Action:
        dependency = self.current_dependency
        if dependency is not None:
            dependency.selected = not dependency.selected
        return Action.NONE

    def _accept(self) -> Action:
        self.finished = True
        return Action.APPLY

    def _refresh(self) -> Action:
        project = self.current_project
        if project is None:
            return Action.NONE
        reset_project(project)
        return Action.REFRESH
