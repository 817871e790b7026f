"""
HTTP client utilities for uvup.

:class:`HTTPClient` wraps :class:`httpx.AsyncClient` for registry lookups:

- at most ``max_concurrency`` requests in flight;
- timeouts, transport errors and 5xx responses are retried with
  exponential backoff, ``max_retries`` times;
- 429 responses wait for ``Retry-After`` and do not consume a retry;
- 404 raises :class:`PyPIError`, any other 4xx raises
  :class:`NetworkError` immediately.
"""

from __future__ import annotations

import httpx
import random
import asyncio
from typing import Any, Dict, Optional, cast

from uvup.utils.logger import get_logger
from uvup.__version__ import __version__
from uvup.exceptions import NetworkError, PyPIError
from uvup.constants import (
    DEFAULT_TIMEOUT,
    DEFAULT_MAX_RETRIES,
    USER_AGENT_TEMPLATE,
)

logger = get_logger("http")

MAX_RATE_LIMIT_WAITS = 5


class HTTPClient:
    """Asynchronous HTTP client with retries and concurrency control.

    Args:
        timeout: Request timeout in seconds.
        max_retries: Retry attempts after the first request.
        user_agent: Custom User-Agent header value.
        max_concurrency: Maximum number of requests in flight.
        transport: Optional httpx transport, mainly for tests.

    Example:
        >>> async with HTTPClient() as client:
        ...     data = await client.get_json("https://pypi.org/pypi/requests/json")
    """

    def __init__(
        self,
        *,
        timeout: float = DEFAULT_TIMEOUT,
        max_retries: int = DEFAULT_MAX_RETRIES,
        user_agent: Optional[str] = None,
        max_concurrency: int = 10,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self.timeout = timeout
        self.max_retries = max_retries
        self.user_agent = user_agent or USER_AGENT_TEMPLATE.format(version=__version__)
        self.max_concurrency = max_concurrency

        self._transport = transport
        self._client: Optional[httpx.AsyncClient] = None
        self._semaphore = asyncio.Semaphore(max_concurrency)

    async def __aenter__(self) -> "HTTPClient":
        await self._ensure_client()
        return self

    async def __aexit__(self, exc_type: Any, exc: Any, tb: Any) -> None:
        await self.close()

    async def _ensure_client(self) -> None:
        if self._client is not None:
            return

        options: Dict[str, Any] = {
            "timeout": httpx.Timeout(self.timeout),
            "follow_redirects": True,
            "headers": {"User-Agent": self.user_agent},
        }
        # HTTP/2 needs a real network transport
        if self._transport is None:
            options["http2"] = True
        else:
            options["transport"] = self._transport

        self._client = httpx.AsyncClient(**options)

    async def close(self) -> None:
        """Close the underlying HTTP client."""
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    async def _send(self, method: str, url: str, **kwargs: Any) -> httpx.Response:
        """Send one logical request, retrying transient failures."""
        await self._ensure_client()
        assert self._client is not None

        attempts = self.max_retries + 1
        attempt = 0
        rate_limited = 0
        failure: Optional[Exception] = None

        while attempt < attempts:
            try:
                async with self._semaphore:
                    response = await self._client.request(method, url, **kwargs)
            except httpx.TransportError as exc:
                failure = exc
                kind = (
                    "Request timeout"
                    if isinstance(exc, httpx.TimeoutException)
                    else "Network error"
                )
                logger.warning("%s (%d/%d): %s", kind, attempt + 1, attempts, url)
            else:
                if response.status_code == 429:
                    rate_limited += 1
                    await self._wait_out_rate_limit(response, url, rate_limited)
                    continue

                if response.status_code < 500:
                    return _checked(response, url)

                failure = NetworkError(
                    f"HTTP {response.status_code} error for {url}",
                    url=url,
                    status_code=response.status_code,
                )
                logger.warning(
                    "HTTP %d (%d/%d): %s",
                    response.status_code,
                    attempt + 1,
                    attempts,
                    url,
                )

            attempt += 1
            if attempt < attempts:
                delay = _backoff(attempt)
                logger.debug("Retrying %s in %.2fs", url, delay)
                await asyncio.sleep(delay)

        raise NetworkError(
            f"Request failed after {attempts} attempts: {url}",
            url=url,
        ) from failure

    async def _wait_out_rate_limit(
        self,
        response: httpx.Response,
        url: str,
        count: int,
    ) -> None:
        if count > MAX_RATE_LIMIT_WAITS:
            raise NetworkError(
                f"Rate limit exceeded after {MAX_RATE_LIMIT_WAITS} retries",
                url=url,
                status_code=429,
            )

        wait = _retry_after(response)
        logger.warning(
            "Rate limited by %s, waiting %ds (%d/%d)",
            response.url.host,
            wait,
            count,
            MAX_RATE_LIMIT_WAITS,
        )
        await asyncio.sleep(wait)

    async def get(self, url: str, **kwargs: Any) -> httpx.Response:
        """GET ``url`` with the retry policy applied."""
        return await self._send("GET", url, **kwargs)

    async def get_json(self, url: str, **kwargs: Any) -> Dict[str, Any]:
        """GET ``url`` and decode a JSON object body.

        Raises:
            NetworkError: Request failed, or the body is not a JSON object.
            PyPIError: The URL does not exist (404).
        """
        response = await self.get(url, **kwargs)

        try:
            data = response.json()
        except ValueError as exc:
            raise NetworkError(
                f"Invalid JSON response from {url}",
                url=url,
                response_body=response.text,
            ) from exc

        if not isinstance(data, dict):
            raise NetworkError(
                f"Expected JSON object from {url}",
                url=url,
                response_body=response.text,
            )

        return cast(Dict[str, Any], data)


def _checked(response: httpx.Response, url: str) -> httpx.Response:
    """Return a successful response or raise for a client error."""
    status = response.status_code
    if status == 404:
        raise PyPIError(f"Resource not found: {url}", url=url, status_code=404)
    if status >= 400:
        raise NetworkError(
            f"HTTP {status} error for {url}",
            url=url,
            status_code=status,
            response_body=response.text,
        )
    return response


def _backoff(attempt: int) -> float:
    """Exponential delay before retry number ``attempt`` (1-based), with jitter."""
    return 2 ** (attempt - 1) + random.uniform(0.0, 0.3)


def _retry_after(response: httpx.Response) -> int:
    """Seconds to wait as advertised by ``Retry-After`` (default 1)."""
    try:
        return max(0, int(response.headers.get("Retry-After", "1")))
    except ValueError:
        return 1
