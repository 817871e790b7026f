from __future__ import annotations

import asyncio
from typing import Any, Dict
from unittest.mock import AsyncMock, MagicMock

import pytest

from uvup.core.resolver import PyPIResolver
from uvup.exceptions import NetworkError, PyPIError


def _payload(version: Any) -> Dict[str, Any]:
    return {"info": {"name": "pkg", "version": version}, "releases": {}}


@pytest.fixture
def http_client() -> MagicMock:
    client = MagicMock()
    client.get_json = AsyncMock(return_value=_payload("2.31.0"))
    return client


@pytest.mark.unit
class TestResolve:
    """Tests for PyPIResolver.resolve."""

    @pytest.mark.asyncio
    async def test_returns_info_version(self, http_client: MagicMock) -> None:
        """Test the latest version comes from info.version."""
        resolver = PyPIResolver(http_client)

        assert await resolver.resolve("requests") == "2.31.0"
        http_client.get_json.assert_awaited_once_with(
            "https://pypi.org/pypi/requests/json"
        )

    @pytest.mark.asyncio
    async def test_custom_api_url(self, http_client: MagicMock) -> None:
        resolver = PyPIResolver(http_client, api_url="http://mirror/{package}/json")

        await resolver.resolve("requests")

        http_client.get_json.assert_awaited_once_with("http://mirror/requests/json")

    @pytest.mark.asyncio
    @pytest.mark.parametrize("name", ["", "   "])
    async def test_blank_name_returns_none(
        self, http_client: MagicMock, name: str
    ) -> None:
        """Test blank names return None without any request."""
        resolver = PyPIResolver(http_client)

        assert await resolver.resolve(name) is None
        http_client.get_json.assert_not_awaited()

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "error",
        [
            PyPIError("Resource not found", status_code=404),
            NetworkError("Request failed after 3 attempts"),
            RuntimeError("boom"),
        ],
        ids=["not-found", "network", "unexpected"],
    )
    async def test_failures_return_none(
        self, http_client: MagicMock, error: Exception
    ) -> None:
        """Test every lookup failure collapses to None."""
        http_client.get_json.side_effect = error
        resolver = PyPIResolver(http_client)

        assert await resolver.resolve("requests") is None

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "payload",
        [{}, {"info": None}, _payload(None), _payload(""), _payload(3)],
        ids=["empty", "info-null", "version-null", "version-empty", "version-int"],
    )
    async def test_malformed_payload_returns_none(
        self, http_client: MagicMock, payload: Dict[str, Any]
    ) -> None:
        http_client.get_json.return_value = payload
        resolver = PyPIResolver(http_client)

        assert await resolver.resolve("requests") is None

    @pytest.mark.asyncio
    async def test_cancellation_propagates(self, http_client: MagicMock) -> None:
        """Test cancellation is not mistaken for a failed lookup."""
        http_client.get_json.side_effect = asyncio.CancelledError()
        resolver = PyPIResolver(http_client)

        with pytest.raises(asyncio.CancelledError):
            await resolver.resolve("requests")


@pytest.mark.unit
class TestResolverCache:
    """Tests for per-name caching."""

    @pytest.mark.asyncio
    async def test_same_package_fetched_once(self, http_client: MagicMock) -> None:
        """Test spellings that normalise to the same name share one request."""
        resolver = PyPIResolver(http_client)

        await resolver.resolve("Django_Rest_Framework")
        await resolver.resolve("django-rest-framework")

        assert http_client.get_json.await_count == 1

    @pytest.mark.asyncio
    async def test_concurrent_lookups_share_request(
        self, http_client: MagicMock
    ) -> None:
        """Test concurrent lookups of one package issue a single request."""

        async def slow(url: str) -> Dict[str, Any]:
            await asyncio.sleep(0.01)
            return _payload("1.0.0")

        http_client.get_json.side_effect = slow
        resolver = PyPIResolver(http_client)

        results = await asyncio.gather(*(resolver.resolve("pkg") for _ in range(5)))

        assert results == ["1.0.0"] * 5
        assert http_client.get_json.await_count == 1

    @pytest.mark.asyncio
    async def test_failures_are_cached(self, http_client: MagicMock) -> None:
        """Test a not-found answer is remembered too."""
        http_client.get_json.side_effect = PyPIError("Resource not found")
        resolver = PyPIResolver(http_client)

        await resolver.resolve("ghost")
        await resolver.resolve("ghost")

        assert http_client.get_json.await_count == 1

    @pytest.mark.asyncio
    async def test_forget_forces_refetch(self, http_client: MagicMock) -> None:
        """Test forget() drops the cached answer."""
        resolver = PyPIResolver(http_client)
        assert await resolver.resolve("requests") == "2.31.0"

        http_client.get_json.return_value = _payload("2.32.0")
        resolver.forget(["Requests"])

        assert await resolver.resolve("requests") == "2.32.0"
        assert http_client.get_json.await_count == 2

    @pytest.mark.asyncio
    async def test_forget_unknown_name_is_noop(self, http_client: MagicMock) -> None:
        resolver = PyPIResolver(http_client)
        await resolver.resolve("requests")

        resolver.forget(["never-seen"])
        await resolver.resolve("requests")

        assert http_client.get_json.await_count == 1
