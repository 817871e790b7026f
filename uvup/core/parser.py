"""Dependency declaration parser.

Splits one ``[project].dependencies`` entry into the parts uvup compares
and rewrites::

    requests[socks]>=2.31.0; python_version >= "3.8"
    └─name─┘└extras┘└op┘└ver─┘ └──────── marker ────────┘

The grammar is deliberately narrow. Anything outside it is kept as a
non-registry specifier that is displayed but never resolved or rewritten:

- direct references (``pkg @ https://...``, ``git+ssh://...``)
- local paths (``./libs/pkg``, ``../pkg``)
- multi-clause ranges (``>=1.0,<2``), wildcards (``==1.*``) and
  arbitrary equality (``===``)

:func:`parse_specifier` never raises.

Typical usage::

    from uvup.core.parser import parse_specifier

    spec = parse_specifier("fastapi>=0.104.1")
    spec.name, spec.operator, spec.current_version
    # ('fastapi', '>=', '0.104.1')
"""

from __future__ import annotations

import re
from typing import Optional, Tuple

from uvup.models.specifier import DependencySpecifier
from uvup.utils.logger import get_logger
from uvup.constants import (
    DEFAULT_OPERATOR,
    VERSION_OPERATORS,
    UNCONSTRAINED_VERSION,
)

logger = get_logger("parser")

# name, optional [extras], optional constraint starting with an operator
_DECLARATION = re.compile(
    r"^(?P<name>[^\[<>=~!]*)(?P<extras>\[[^\[\]]*\])?(?P<constraint>[<>=~!].*)?$",
    re.DOTALL,
)
_CONSTRAINT = re.compile(r"^(?P<operator>[<>=~!]+)(?P<version>.*)$", re.DOTALL)

# PEP 508 distribution name
_NAME = re.compile(r"^[A-Za-z0-9](?:[A-Za-z0-9._-]*[A-Za-z0-9])?$")
_VERSION = re.compile(r"^[A-Za-z0-9][A-Za-z0-9._+!-]*$")

_DIRECT_REFERENCE_TOKENS = ("://", "@")


def parse_specifier(raw: str) -> DependencySpecifier:
    """Parse one dependency declaration.

    Args:
        raw: The declaration as decoded from the manifest (no quotes).

    Returns:
        A :class:`DependencySpecifier`. Declarations without a constraint
        get ``operator=">="`` and ``current_version="0.0.0"``; declarations
        outside the supported grammar come back with ``is_registry=False``.
    """
    requirement, marker = _split_marker(raw)

    if any(token in requirement for token in _DIRECT_REFERENCE_TOKENS):
        return _unmanaged(raw, requirement, marker, "direct reference")

    match = _DECLARATION.match(requirement)
    if match is None:
        return _unmanaged(raw, requirement, marker, "unsupported syntax")

    name = match.group("name").strip()
    if not _NAME.match(name):
        return _unmanaged(raw, requirement, marker, "not a package name")

    extras = match.group("extras") or ""
    constraint = match.group("constraint")

    if constraint is None:
        return DependencySpecifier(
            name=name,
            original_constraint=raw,
            extras=extras,
            operator=DEFAULT_OPERATOR,
            current_version=UNCONSTRAINED_VERSION,
            marker=marker,
        )

    parsed = _split_constraint(constraint)
    if parsed is None:
        return _unmanaged(raw, name, marker, "complex constraint")

    operator, version = parsed
    return DependencySpecifier(
        name=name,
        original_constraint=raw,
        extras=extras,
        operator=operator,
        current_version=version,
        marker=marker,
        explicit_constraint=True,
    )


def _split_marker(raw: str) -> Tuple[str, Optional[str]]:
    """Split on the first ``;`` into requirement and verbatim marker."""
    requirement, sep, marker = raw.partition(";")
    return requirement, (marker if sep else None)


def _split_constraint(constraint: str) -> Optional[Tuple[str, str]]:
    """Return ``(operator, version)`` for a single-clause constraint."""
    match = _CONSTRAINT.match(constraint)
    if match is None:
        return None

    operator = match.group("operator")
    version = match.group("version").strip()

    if operator not in VERSION_OPERATORS:
        return None
    if not _VERSION.match(version):
        return None

    return operator, version


def _unmanaged(
    raw: str,
    requirement: str,
    marker: Optional[str],
    reason: str,
) -> DependencySpecifier:
    """Build a specifier that is displayed but never updated."""
    name = re.split(r"[\s@\[<>=~!;]", requirement.strip(), maxsplit=1)[0]
    logger.debug("Leaving %r untouched: %s", raw, reason)

    return DependencySpecifier(
        name=name or raw.strip(),
        original_constraint=raw,
        marker=marker,
        is_registry=False,
    )
