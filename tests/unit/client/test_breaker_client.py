"""Tests for BreakerClient using httpx.MockTransport."""

from __future__ import annotations

import json

import httpx
import pytest

from tiered_breaker.client import BreakerClient, BreakerUnavailable, ClientError, ServerError


def _client(handler) -> BreakerClient:
    return BreakerClient(base_url="http://test", transport=httpx.MockTransport(handler))


class TestSend:
    """Tests for BreakerClient.send()."""

    async def test_posts_error_flag(self) -> None:
        captured = {}

        def handler(request: httpx.Request) -> httpx.Response:
            captured["path"] = request.url.path
            captured["body"] = json.loads(request.content)
            return httpx.Response(
                200, json={"status": 200, "tier": 1, "message": "Full Capacity", "breaker": None}
            )

        async with _client(handler) as client:
            outcome = await client.send(error=True)

        assert captured == {"path": "/requests", "body": {"error": True}}
        assert outcome["message"] == "Full Capacity"

    @pytest.mark.parametrize("status", [500, 503])
    async def test_breaker_outcomes_are_returned(self, status: int) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(
                status, json={"status": status, "tier": 3, "message": "m", "breaker": None}
            )

        async with _client(handler) as client:
            outcome = await client.send()

        assert outcome["status"] == status

    async def test_storage_failure_raises_breaker_unavailable(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(500, json={"detail": "Storage unavailable"})

        async with _client(handler) as client:
            with pytest.raises(BreakerUnavailable) as exc_info:
                await client.send()

        assert exc_info.value.status_code == 500
        assert exc_info.value.message == "Storage unavailable"

    async def test_non_json_5xx_raises_server_error(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(502, text="bad gateway")

        async with _client(handler) as client:
            with pytest.raises(ServerError, match="bad gateway") as exc_info:
                await client.send()

        assert not isinstance(exc_info.value, BreakerUnavailable)


class TestAdminCalls:
    """Tests for state, reset, events and health."""

    async def test_state(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            assert request.method == "GET"
            assert request.url.path == "/breaker"
            return httpx.Response(200, json={"tier": 2})

        async with _client(handler) as client:
            assert await client.state() == {"tier": 2}

    async def test_reset(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            assert (request.method, request.url.path) == ("POST", "/breaker/reset")
            return httpx.Response(200, json={"changed": True})

        async with _client(handler) as client:
            assert (await client.reset())["changed"] is True

    async def test_events_passes_limit(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            assert request.url.params["limit"] == "5"
            return httpx.Response(200, json={"events": [], "total": 0})

        async with _client(handler) as client:
            assert (await client.events(limit=5))["total"] == 0

    async def test_health_unavailable_raises_breaker_unavailable(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(503, json={"status": "unavailable", "detail": "down"})

        async with _client(handler) as client:
            with pytest.raises(BreakerUnavailable) as exc_info:
                await client.health()

        assert exc_info.value.status_code == 503

    async def test_unknown_path_raises_plain_client_error(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(404, json={"detail": "Not Found"})

        async with _client(handler) as client:
            with pytest.raises(ClientError) as exc_info:
                await client.state()

        assert exc_info.value.status_code == 404
        assert exc_info.value.message == "Not Found"
        assert not isinstance(exc_info.value, ServerError)

    async def test_422_raises_client_error(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(422, json={"detail": "bad limit"})

        async with _client(handler) as client:
            with pytest.raises(ClientError) as exc_info:
                await client.events(limit=0)

        assert exc_info.value.status_code == 422
        assert not isinstance(exc_info.value, ServerError)
