"""Tests for the client's HTTP wrapper."""
import asyncio
import json

import httpx
import pytest

from client.api import RelayAPI
from client.config import ClientConfig
from client.errors import APIError


pytestmark = pytest.mark.asyncio


def make_api(handler, **config) -> RelayAPI:
    transport = httpx.MockTransport(handler)
    client = httpx.AsyncClient(transport=transport, base_url="http://relay.test")
    return RelayAPI(ClientConfig(**config), client=client)


class TestSendChat:
    """Tests for RelayAPI.send_chat."""

    async def test_success(self):
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["path"] = request.url.path
            seen["body"] = json.loads(request.content)
            return httpx.Response(
                200,
                json={"reply": "Hello", "sources": ["db"], "sessionId": "s1", "timestamp": "2024-01-01T00:00:00Z"},
            )

        response = await make_api(handler).send_chat("hi", "s1")

        assert seen == {"path": "/api/chat", "body": {"message": "hi", "sessionId": "s1"}}
        assert response.reply == "Hello"
        assert response.sources == ["db"]

    async def test_error_envelope_is_raised(self):
        def handler(request):
            return httpx.Response(429, json={"error": "Rate limit exceeded.", "code": "rate_limit"})

        with pytest.raises(APIError) as exc_info:
            await make_api(handler).send_chat("hi", "s1")

        assert exc_info.value.status == 429
        assert exc_info.value.code == "rate_limit"
        assert exc_info.value.message == "Rate limit exceeded."

    async def test_unparseable_error_body_falls_back_to_status(self):
        def handler(request):
            return httpx.Response(502, text="<html>Bad Gateway</html>")

        with pytest.raises(APIError) as exc_info:
            await make_api(handler).send_chat("hi", "s1")

        assert exc_info.value.status == 502
        assert exc_info.value.message == "HTTP 502"
        assert exc_info.value.code is None

    async def test_malformed_success_body(self):
        def handler(request):
            return httpx.Response(200, json={"unexpected": True})

        with pytest.raises(APIError) as exc_info:
            await make_api(handler).send_chat("hi", "s1")

        assert exc_info.value.code == "server_error"

    async def test_timeout_is_distinct_from_network(self):
        async def handler(request):
            await asyncio.sleep(1)
            return httpx.Response(200, json={"reply": "late", "sessionId": "s1"})

        with pytest.raises(APIError) as exc_info:
            await make_api(handler, request_timeout=0.05).send_chat("hi", "s1")

        assert exc_info.value.status == 408
        assert exc_info.value.code == "timeout"

    async def test_connection_failure_is_network(self):
        def handler(request):
            raise httpx.ConnectError("connection refused", request=request)

        with pytest.raises(APIError) as exc_info:
            await make_api(handler).send_chat("hi", "s1")

        assert exc_info.value.status == 0
        assert exc_info.value.code == "network"


class TestCheckHealth:
    """Tests for RelayAPI.check_health."""

    async def test_healthy(self):
        api = make_api(lambda request: httpx.Response(200, json={"status": "healthy"}))

        assert await api.check_health() is True

    async def test_error_status(self):
        api = make_api(lambda request: httpx.Response(503))

        assert await api.check_health() is False

    async def test_unreachable(self):
        def handler(request):
            raise httpx.ConnectError("down", request=request)

        assert await make_api(handler).check_health() is False

    async def test_unexpected_client_failure_reads_offline(self):
        def handler(request):
            raise httpx.InvalidURL("bad relay url")

        assert await make_api(handler).check_health() is False

    async def test_slow_health_check_times_out(self):
        async def handler(request):
            await asyncio.sleep(1)
            return httpx.Response(200)

        assert await make_api(handler, health_timeout=0.05).check_health() is False
