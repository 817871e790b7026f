"""
Version comparison utilities for uvup.

Ordering follows PEP 440 precedence via :mod:`packaging`. The change
magnitude reported by :func:`classify` is intentionally coarser than that
ordering: it only looks at the major and minor release components and
does not special-case pre-releases (``1.2.0rc1 -> 1.2.0`` is a ``patch``).

Neither function raises on malformed input. Unparseable versions fall
back to string inequality for ordering and to ``"minor"`` for the
classification.
"""

from __future__ import annotations

import re
from typing import Tuple

from packaging.version import InvalidVersion, Version

#: Change magnitudes, largest first.
MAJOR = "major"
MINOR = "minor"
PATCH = "patch"
NONE = "none"

_LEADING_OPERATORS = re.compile(r"^[\s<>=!~]+")


def clean_version(value: str) -> str:
    """Strip leading operator characters and surrounding whitespace.

    Examples:
        >>> clean_version(">=1.2.0")
        '1.2.0'
        >>> clean_version(" ~= 2.5 ")
        '2.5'
    """
    return _LEADING_OPERATORS.sub("", value).strip()


def compare(current: str, latest: str) -> int:
    """Order ``current`` against ``latest``.

    Args:
        current: Declared version, possibly still carrying its operator.
        latest: Version published on the registry.

    Returns:
        ``-1`` if ``latest`` is newer, ``0`` if equal, ``1`` if older.
        When either side cannot be parsed, ``0`` for identical strings and
        ``-1`` otherwise.

    Examples:
        >>> compare("1.2.3", "1.3.0")
        -1
        >>> compare(">=2.0", "2.0.0")
        0
    """
    cleaned = clean_version(current)
    latest = latest.strip()

    try:
        current_parsed = Version(cleaned)
        latest_parsed = Version(latest)
    except InvalidVersion:
        return 0 if cleaned == latest else -1

    if current_parsed < latest_parsed:
        return -1
    if current_parsed > latest_parsed:
        return 1
    return 0


def classify(current: str, latest: str) -> str:
    """Classify the change from ``current`` to ``latest``.

    Rules, first match wins:

    1. latest major > current major -> ``"major"``
    2. latest minor > current minor -> ``"minor"``
    3. latest strictly newer -> ``"patch"``
    4. otherwise -> ``"none"``

    Examples:
        >>> classify("1.2.3", "2.0.0")
        'major'
        >>> classify("1.2.3", "1.3.0")
        'minor'
        >>> classify("1.2.3", "1.2.9")
        'patch'
        >>> classify("1.2.3", "1.2.3")
        'none'
    """
    cleaned = clean_version(current)

    try:
        current_parsed = Version(cleaned)
        latest_parsed = Version(latest.strip())
    except InvalidVersion:
        return MINOR

    current_major, current_minor = _major_minor(current_parsed)
    latest_major, latest_minor = _major_minor(latest_parsed)

    if latest_major > current_major:
        return MAJOR
    if latest_minor > current_minor:
        return MINOR
    if latest_parsed > current_parsed:
        return PATCH
    return NONE


def _major_minor(version: Version) -> Tuple[int, int]:
    """Return ``(major, minor)``, treating missing components as ``0``."""
    release = version.release
    major = release[0] if len(release) > 0 else 0
    minor = release[1] if len(release) > 1 else 0
    return major, minor


def release_length(value: str) -> int:
    """Return the number of release components of ``value``.

    Unparseable versions count the dot-separated parts instead.

    Examples:
        >>> release_length("2.6.1")
        3
        >>> release_length("7")
        1
    """
    try:
        return len(Version(value.strip()).release)
    except InvalidVersion:
        return len(value.strip().split("."))
