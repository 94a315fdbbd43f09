from __future__ import annotations

import asyncio
import logging
from typing import Any, Dict, Optional

import httpx
from pydantic import ValidationError

from client.config import ClientConfig
from client.errors import NETWORK_MESSAGE, TIMEOUT_MESSAGE, APIError
from wire.models import ChatResponse
from wire.taxonomy import ErrorCode


logger = logging.getLogger("carrier_chat.client")


class RelayAPI:
    """Async HTTP wrapper around the relay's chat and health endpoints.

    Each chat call runs under its own deadline; when it expires the request
    task is cancelled, so a late response can never reach the caller.
    """

    def __init__(self, config: ClientConfig, client: Optional[httpx.AsyncClient] = None) -> None:
        self.config = config
        self._owns_client = client is None
        # Deadlines are enforced per call below, not by httpx.
        self._client = client or httpx.AsyncClient(base_url=config.api_base_url, timeout=None)

    async def send_chat(self, message: str, session_id: str) -> ChatResponse:
        try:
            return await asyncio.wait_for(
                self._post_chat(message, session_id),
                timeout=self.config.request_timeout,
            )
        except asyncio.TimeoutError:
            raise APIError(408, TIMEOUT_MESSAGE, ErrorCode.TIMEOUT.value) from None

    async def _post_chat(self, message: str, session_id: str) -> ChatResponse:
        try:
            response = await self._client.post(
                "/api/chat",
                json={"message": message, "sessionId": session_id},
            )
        except httpx.TimeoutException as exc:
            raise APIError(408, TIMEOUT_MESSAGE, ErrorCode.TIMEOUT.value) from exc
        except httpx.HTTPError as exc:
            raise APIError(0, NETWORK_MESSAGE, ErrorCode.NETWORK.value) from exc

        if response.is_error:
            data = _json_object(response)
            raise APIError(
                response.status_code,
                data.get("error") or f"HTTP {response.status_code}",
                data.get("code"),
            )

        try:
            return ChatResponse.model_validate(response.json())
        except (ValueError, ValidationError) as exc:
            raise APIError(
                response.status_code,
                "Received an invalid response from the server.",
                ErrorCode.SERVER_ERROR.value,
            ) from exc

    async def check_health(self) -> bool:
        try:
            response = await asyncio.wait_for(
                self._client.get("/api/health"),
                timeout=self.config.health_timeout,
            )
        except Exception as exc:
            # Any failure to reach the relay (bad URL, transport, deadline) reads as offline.
            logger.warning("Backend health check failed: %r", exc)
            return False
        return response.is_success

    async def close(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    async def __aenter__(self) -> "RelayAPI":
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        await self.close()


def _json_object(response: httpx.Response) -> Dict[str, Any]:
    try:
        data = response.json()
    except ValueError:
        return {}
    return data if isinstance(data, dict) else {}
