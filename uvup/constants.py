"""
Centralized constants for uvup.

This module defines immutable configuration values used across uvup,
including network settings, manifest discovery rules, specifier grammar
and logging formats. All values are intended to be treated as read-only.
"""

from typing import Final, FrozenSet, Sequence

# ---------------------------------------------------------------------------
# Project metadata
# ---------------------------------------------------------------------------

#: HTTP User-Agent template used for outbound requests.
USER_AGENT_TEMPLATE: Final[str] = "uvup/{version}"

# ---------------------------------------------------------------------------
# PyPI endpoints
# ---------------------------------------------------------------------------

#: Base URL for the PyPI JSON API.
PYPI_JSON_API: Final[str] = "https://pypi.org/pypi/{package}/json"

# ---------------------------------------------------------------------------
# HTTP configuration
# ---------------------------------------------------------------------------

#: Default network timeout in seconds.
DEFAULT_TIMEOUT: Final[int] = 30

#: Maximum number of retries for failed HTTP requests.
DEFAULT_MAX_RETRIES: Final[int] = 2

# ---------------------------------------------------------------------------
# Manifest discovery
# ---------------------------------------------------------------------------

#: File name of the manifests uvup operates on.
MANIFEST_FILE_NAME: Final[str] = "pyproject.toml"

#: Directory names never descended into during discovery.
DEFAULT_EXCLUDE_DIRS: Final[Sequence[str]] = (
    ".venv",
    "venv",
    ".git",
    "node_modules",
    ".tox",
    ".nox",
    "build",
    "dist",
    "__pycache__",
)

#: Whether a timestamped backup is written before a manifest is rewritten.
DEFAULT_BACKUP: Final[bool] = False

# ---------------------------------------------------------------------------
# Dependency specifier grammar
# ---------------------------------------------------------------------------

#: Operators a plain version constraint may use.
VERSION_OPERATORS: Final[FrozenSet[str]] = frozenset(
    {"==", "~=", ">=", ">", "<=", "<", "!="}
)

#: Operator assumed when a declaration has no constraint.
DEFAULT_OPERATOR: Final[str] = ">="

#: Version assumed when a declaration has no constraint.
UNCONSTRAINED_VERSION: Final[str] = "0.0.0"

#: Operators kept verbatim when a constraint is bumped.
PRESERVED_OPERATORS: Final[FrozenSet[str]] = frozenset({"==", "~="})

#: Operator written for every other bumped constraint.
COMPATIBLE_RELEASE_OPERATOR: Final[str] = "~="

# ---------------------------------------------------------------------------
# Security constraints
# ---------------------------------------------------------------------------

#: Maximum allowed file size (in bytes) when reading manifests.
MAX_FILE_SIZE: Final[int] = 10 * 1024 * 1024  # 10 MB

# ---------------------------------------------------------------------------
# Logging configuration
# ---------------------------------------------------------------------------

#: Timestamp format for verbose logging.
LOG_DATE_FORMAT: Final[str] = "%Y-%m-%d %H:%M:%S"

#: Default log format (non-verbose).
LOG_DEFAULT_FORMAT: Final[str] = "%(levelname)s: %(message)s"

#: Verbose log format including timestamp and logger name.
LOG_VERBOSE_FORMAT: Final[str] = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
