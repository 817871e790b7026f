"""Latest-version lookups against the PyPI JSON API.

:class:`PyPIResolver` answers one question per package: what is the
latest version PyPI reports in ``info.version``? Every failure (blank
name, network error, non-success status, malformed payload) collapses to
``None``, which callers read as "not found".

Results are cached per normalised name so a package declared by several
projects costs one request. :meth:`PyPIResolver.forget` drops entries
before a manual refresh.

Typical usage::

    async with HTTPClient() as client:
        resolver = PyPIResolver(client)
        await resolver.resolve("requests")   # e.g. "2.31.0"
        await resolver.resolve("no-such-pkg-xyz")   # None
"""

from __future__ import annotations

import asyncio
from typing import Any, Dict, Iterable, Optional

from packaging.utils import canonicalize_name

from uvup.exceptions import UvUpError
from uvup.utils.http import HTTPClient
from uvup.utils.logger import get_logger
from uvup.constants import PYPI_JSON_API

logger = get_logger("resolver")

__all__ = ["PyPIResolver"]


class PyPIResolver:
    """Async-safe latest-version resolver with a per-process cache.

    A lock per package name keeps concurrent lookups of the same package
    down to a single request.

    Args:
        http_client: Shared :class:`HTTPClient` (owns the connection pool).
        api_url: URL template with a ``{package}`` placeholder.
    """

    def __init__(
        self,
        http_client: HTTPClient,
        *,
        api_url: str = PYPI_JSON_API,
    ) -> None:
        self.http_client = http_client
        self.api_url = api_url

        self._cache: Dict[str, Optional[str]] = {}
        self._locks: Dict[str, asyncio.Lock] = {}

    async def resolve(self, name: str) -> Optional[str]:
        """Return the latest published version of ``name`` or ``None``.

        Never raises.
        """
        if not name or not name.strip():
            return None

        normalized = canonicalize_name(name.strip())

        # Fast path, no lock needed
        if normalized in self._cache:
            return self._cache[normalized]

        lock = self._locks.setdefault(normalized, asyncio.Lock())
        async with lock:
            # Another coroutine may have populated while we waited
            if normalized in self._cache:
                return self._cache[normalized]

            latest = await self._fetch_latest(name.strip())
            self._cache[normalized] = latest
            return latest

    def forget(self, names: Iterable[str]) -> None:
        """Drop cached answers so the next :meth:`resolve` refetches."""
        for name in names:
            self._cache.pop(canonicalize_name(name.strip()), None)

    async def _fetch_latest(self, name: str) -> Optional[str]:
        url = self.api_url.format(package=name)

        try:
            data = await self.http_client.get_json(url)
        except UvUpError as exc:
            logger.debug("Lookup failed for %s: %s", name, exc)
            return None
        except Exception as exc:  # noqa: BLE001
            logger.debug("Unexpected error looking up %s: %s", name, exc)
            return None

        return _extract_version(name, data)


def _extract_version(name: str, data: Dict[str, Any]) -> Optional[str]:
    """Pull ``info.version`` out of a PyPI JSON document."""
    info = data.get("info")
    if not isinstance(info, dict):
        logger.debug("No 'info' table in PyPI response for %s", name)
        return None

    version = info.get("version")
    if not isinstance(version, str) or not version.strip():
        logger.debug("No version in PyPI response for %s", name)
        return None

    return version.strip()
