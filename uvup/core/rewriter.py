"""Text-preserving manifest rewriter.

Only selected dependencies with a newer version are rewritten. Each one is
found by its exact original declaration inside its TOML quotes and
replaced with::

    name + extras + operator + latest_version [+ ";" + marker]

``==`` and ``~=`` are kept; any other operator, or none, becomes the
compatible-release operator ``~=``. A latest version with a single release
component cannot take ``~=`` and gets ``>=`` instead.

Everything else in the file, including declarations that were not
selected, is returned byte-for-byte. The substitution is one regex pass,
so a freshly written declaration is never matched again by another
entry.

Example::

    result = rewrite_manifest(text, project.dependencies)
    if result.changed:
        safe_write_file(project.file_path, result.text)
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Callable, Dict, Iterable, List, Set, Tuple

from uvup.models import DependencySpecifier
from uvup.utils.logger import get_logger
from uvup.utils.version_utils import release_length
from uvup.constants import (
    COMPATIBLE_RELEASE_OPERATOR,
    PRESERVED_OPERATORS,
)

logger = get_logger("rewriter")


@dataclass(frozen=True)
class Change:
    """One rewritten declaration."""

    name: str
    old: str
    new: str


@dataclass
class RewriteResult:
    """New manifest text plus the declarations that were replaced."""

    text: str
    changes: List[Change] = field(default_factory=list)

    @property
    def changed(self) -> bool:
        return bool(self.changes)


def _encode_basic(value: str) -> str:
    """Encode ``value`` as the body of a TOML basic (double-quoted) string."""
    return value.replace("\\", "\\\\").replace('"', '\\"')


def _encode_literal(value: str) -> str:
    return value


# (quote character, body encoder); literal strings cannot contain a quote
_QUOTINGS: Tuple[Tuple[str, Callable[[str], str]], ...] = (
    ('"', _encode_basic),
    ("'", _encode_literal),
)


def choose_operator(original_operator: str, latest_version: str) -> str:
    """Pick the operator written in front of the new version.

    Examples:
        >>> choose_operator("==", "1.1.0")
        '=='
        >>> choose_operator(">=", "1.1.0")
        '~='
        >>> choose_operator(">=", "7")
        '>='
    """
    if original_operator in PRESERVED_OPERATORS:
        return original_operator
    if release_length(latest_version) < 2:
        return ">="
    return COMPATIBLE_RELEASE_OPERATOR


def build_replacement(dependency: DependencySpecifier) -> str:
    """Compose the updated declaration for ``dependency``.

    Raises:
        ValueError: The dependency has no resolved latest version.
    """
    if dependency.latest_version is None:
        raise ValueError(f"No latest version resolved for {dependency.name}")

    operator = choose_operator(dependency.operator, dependency.latest_version)
    replacement = (
        f"{dependency.name}{dependency.extras}{operator}{dependency.latest_version}"
    )
    if dependency.marker is not None:
        replacement += f";{dependency.marker}"
    return replacement


def rewrite_manifest(
    text: str,
    dependencies: Iterable[DependencySpecifier],
) -> RewriteResult:
    """Rewrite the selected, updatable declarations inside ``text``.

    Args:
        text: Current manifest text.
        dependencies: Candidates; only ``selected`` entries with
            ``has_update`` are touched.

    Returns:
        A :class:`RewriteResult`. With nothing to do, ``text`` is returned
        unchanged and ``changed`` is ``False``.
    """
    quoted: Dict[str, str] = {}
    originals: Dict[str, str] = {}
    qualifying: List[Tuple[DependencySpecifier, str]] = []

    for dependency in dependencies:
        if not (dependency.selected and dependency.has_update):
            continue

        replacement = build_replacement(dependency)
        qualifying.append((dependency, replacement))

        for quote, encode in _QUOTINGS:
            if encode is _encode_literal and quote in dependency.original_constraint:
                continue
            key = f"{quote}{encode(dependency.original_constraint)}{quote}"
            if key not in quoted:
                quoted[key] = f"{quote}{encode(replacement)}{quote}"
                originals[key] = dependency.original_constraint

    if not quoted:
        return RewriteResult(text=text)

    pattern = re.compile(
        "|".join(re.escape(key) for key in sorted(quoted, key=len, reverse=True))
    )
    matched: Set[str] = set()

    def _substitute(match: "re.Match[str]") -> str:
        matched.add(originals[match.group(0)])
        return quoted[match.group(0)]

    new_text = pattern.sub(_substitute, text)

    changes: List[Change] = []
    for dependency, replacement in qualifying:
        if dependency.original_constraint not in matched:
            logger.warning(
                "Declaration %r not found in manifest text",
                dependency.original_constraint,
            )
            continue
        changes.append(
            Change(
                name=dependency.name,
                old=dependency.original_constraint,
                new=replacement,
            )
        )

    return RewriteResult(text=new_text, changes=changes)
