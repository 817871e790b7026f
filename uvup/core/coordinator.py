"""Resolution coordinator.

Fills in ``latest_version`` for every dependency of every project while
the interactive session is already running.

Ordering policy:

- projects strictly in discovery order, one at a time;
- inside a project, all lookups run concurrently and the next project
  starts only once every lookup of the current one has settled.

Each settled lookup is applied to its own specifier immediately and the
``on_update`` callback fires, so a screen can show partial progress.
Applying a result only writes that specifier's ``latest_version`` and
``resolving`` fields, which makes it idempotent and order-independent.
"""

from __future__ import annotations

import asyncio
from typing import Callable, Iterable, List, Optional

from uvup.core.resolver import PyPIResolver
from uvup.models import DependencySpecifier, ProjectRecord
from uvup.utils.logger import get_logger

logger = get_logger("coordinator")

UpdateCallback = Callable[[ProjectRecord, Optional[DependencySpecifier]], None]


def apply_resolution(dependency: DependencySpecifier, latest: Optional[str]) -> None:
    """Record a settled lookup on its specifier."""
    dependency.latest_version = latest
    dependency.resolving = False


def reset_project(project: ProjectRecord) -> None:
    """Mark a project's registry dependencies as unresolved again."""
    for dependency in project.registry_dependencies():
        dependency.latest_version = None
        dependency.resolving = True


class ResolutionCoordinator:
    """Drives :class:`PyPIResolver` across discovered projects.

    Args:
        resolver: Latest-version lookup.
        on_update: Called after each individual result is applied.
    """

    def __init__(
        self,
        resolver: PyPIResolver,
        *,
        on_update: Optional[UpdateCallback] = None,
    ) -> None:
        self.resolver = resolver
        self.on_update = on_update

    async def resolve_all(self, projects: Iterable[ProjectRecord]) -> None:
        """Resolve every project, one project at a time."""
        for project in list(projects):
            await self.resolve_project(project)

    async def resolve_project(self, project: ProjectRecord) -> None:
        """Resolve all registry dependencies of one project concurrently."""
        pending: List[DependencySpecifier] = project.registry_dependencies()
        if not pending:
            return

        logger.debug("Resolving %d dependencies of %s", len(pending), project.name)
        await asyncio.gather(*(self._resolve_one(project, dep) for dep in pending))

    async def refresh_project(self, project: ProjectRecord) -> None:
        """Re-run resolution for one project, bypassing cached answers."""
        reset_project(project)
        self.resolver.forget(dep.name for dep in project.registry_dependencies())
        self._notify(project, None)
        await self.resolve_project(project)

    async def _resolve_one(
        self,
        project: ProjectRecord,
        dependency: DependencySpecifier,
    ) -> None:
        latest = await self.resolver.resolve(dependency.name)
        apply_resolution(dependency, latest)

        if latest is None:
            logger.info("%s: not found on PyPI", dependency.name)
        self._notify(project, dependency)

    def _notify(
        self,
        project: ProjectRecord,
        dependency: Optional[DependencySpecifier],
    ) -> None:
        if self.on_update is None:
            return
        try:
            self.on_update(project, dependency)
        except Exception:  # noqa: BLE001
            logger.exception("Update callback failed")
