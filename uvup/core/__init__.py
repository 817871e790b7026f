"""
Core functionality exports for uvup.

    from uvup.core import parse_specifier, PyPIResolver, SelectionStateMachine
"""

from __future__ import annotations

from uvup.core.parser import parse_specifier
from uvup.core.resolver import PyPIResolver
from uvup.core.aggregator import (
    DiscoveryResult,
    build_project,
    discover_projects,
    load_project,
)
from uvup.core.coordinator import ResolutionCoordinator, apply_resolution
from uvup.core.state import Action, Event, Mode, SelectionStateMachine
from uvup.core.rewriter import Change, RewriteResult, rewrite_manifest

__all__ = [
    "parse_specifier",
    "PyPIResolver",
    "DiscoveryResult",
    "build_project",
    "discover_projects",
    "load_project",
    "ResolutionCoordinator",
    "apply_resolution",
    "Action",
    "Event",
    "Mode",
    "SelectionStateMachine",
    "Change",
    "RewriteResult",
    "rewrite_manifest",
]
