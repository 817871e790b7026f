"""
Unified data model exports for uvup.

Example:
    >>> from uvup.models import DependencySpecifier, ProjectRecord
"""

from __future__ import annotations

from uvup.models.project import ProjectRecord
from uvup.models.specifier import DependencySpecifier

__all__ = [
    "DependencySpecifier",
    "ProjectRecord",
]
