"""
Dependency specifier data model for uvup.

A :class:`DependencySpecifier` is one entry of a manifest's
``[project].dependencies`` list, split into the parts uvup needs to
compare and rewrite it. The untouched declaration is kept in
``original_constraint``; it is the only key used to find the entry again
in the manifest text.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from packaging.utils import canonicalize_name

from uvup.constants import DEFAULT_OPERATOR, UNCONSTRAINED_VERSION
from uvup.utils.version_utils import NONE, classify, compare


@dataclass
class DependencySpecifier:
    """
    A parsed dependency declaration plus its resolution and selection state.

    Attributes:
        name: Package name as written, whitespace trimmed.
        original_constraint: The full declaration, byte-for-byte.
        extras: Raw bracketed extras (``"[socks]"``) or ``""``.
        operator: Constraint operator, ``">="`` when none was written.
        current_version: Declared version, ``"0.0.0"`` when none was written.
        marker: Raw text after the first ``;``, or ``None``.
        latest_version: Latest published version once resolved.
        resolving: ``True`` until the registry lookup settles.
        selected: Whether the operator picked this entry for an update.
        is_registry: ``False`` for URLs, local paths, VCS references and
            constraint shapes uvup does not rewrite.
        explicit_constraint: Whether operator and version were written.
    """

    name: str
    original_constraint: str
    extras: str = ""
    operator: str = DEFAULT_OPERATOR
    current_version: str = UNCONSTRAINED_VERSION
    marker: Optional[str] = None
    latest_version: Optional[str] = None
    resolving: bool = True
    selected: bool = False
    is_registry: bool = True
    explicit_constraint: bool = False

    def __post_init__(self) -> None:
        if not self.is_registry:
            self.resolving = False
            self.latest_version = None

    @property
    def canonical_name(self) -> str:
        """PEP 503 normalised name used as the identity key."""
        return canonicalize_name(self.name)

    @property
    def not_found(self) -> bool:
        """Resolution finished without a usable version."""
        return self.is_registry and not self.resolving and self.latest_version is None

    @property
    def has_update(self) -> bool:
        """Whether the latest version is strictly newer than the declared one."""
        if not self.is_registry or not self.latest_version:
            return False
        return compare(self.current_version, self.latest_version) < 0

    @property
    def change_type(self) -> str:
        """Change magnitude between declared and latest version."""
        if not self.latest_version:
            return NONE
        return classify(self.current_version, self.latest_version)

    def display_version(self) -> str:
        """Short human label for the declared constraint."""
        if not self.is_registry:
            return "unmanaged"
        if not self.explicit_constraint:
            return "any"
        return f"{self.operator}{self.current_version}"

    def __str__(self) -> str:
        return self.original_constraint
