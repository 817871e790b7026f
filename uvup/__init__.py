"""
uvup: interactive dependency updater for pyproject.toml projects.

uvup scans a directory tree for ``pyproject.toml`` manifests, looks up the
latest release of every declared dependency on PyPI, and lets you pick which
constraints to bump. Only the version (and, where needed, the operator) of a
declaration is rewritten; quoting, extras and environment markers are kept
exactly as written.

Run ``uvup`` in a workspace, or ``uvup check`` for a non-interactive report.
"""

from __future__ import annotations

from uvup.__version__ import __version__

# ---------------------------------------------------------------------------
# Package Metadata
# ---------------------------------------------------------------------------

__author__ = "uvup Contributors"
__license__ = "MIT"
__description__ = "Interactive latest-version bumps for pyproject.toml dependencies."

# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

__all__ = [
    "__version__",
]
