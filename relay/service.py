from __future__ import annotations

import logging
from typing import Any, Optional

from config.settings import GenerationParams
from relay.backends import ChatBackend
from relay.errors import RelayError, map_downstream_error
from relay.prompt import SYSTEM_PROMPT
from wire.models import ChatRequest, ChatResponse, utc_now
from wire.taxonomy import ErrorCode


logger = logging.getLogger("carrier_chat.relay")

ANONYMOUS_SESSION = "anonymous"
MESSAGE_REQUIRED = "Message is required and must be a non-empty string"
NOT_CONFIGURED_MESSAGE = "Model API is not configured. Please check your API key."


def preview(text: str, limit: int = 100) -> str:
    return text[:limit] + ("..." if len(text) > limit else "")


def validate_message(message: Any, max_length: int) -> str:
    """Return the trimmed message or raise a validation RelayError."""
    if not isinstance(message, str) or not message.strip():
        raise RelayError(ErrorCode.VALIDATION, MESSAGE_REQUIRED)
    trimmed = message.strip()
    if len(trimmed) > max_length:
        raise RelayError(
            ErrorCode.VALIDATION,
            f"Message too long. Please limit to {max_length} characters.",
        )
    return trimmed


class RelayService:
    """Validates chat requests and forwards them to the downstream model.

    Stateless across requests: the session id is echoed back but never used
    to look anything up.
    """

    def __init__(
        self,
        backend: Optional[ChatBackend],
        *,
        max_message_length: int = 4000,
        system_prompt: Optional[str] = None,
        params: Optional[GenerationParams] = None,
    ) -> None:
        self.backend = backend
        self.max_message_length = max_message_length
        self.system_prompt = system_prompt or SYSTEM_PROMPT
        self.params = params or GenerationParams()

    @property
    def configured(self) -> bool:
        return self.backend is not None

    async def chat(self, request: ChatRequest) -> ChatResponse:
        message = validate_message(request.message, self.max_message_length)

        if self.backend is None:
            raise RelayError(ErrorCode.SERVER_ERROR, NOT_CONFIGURED_MESSAGE)

        session_id = request.sessionId or ANONYMOUS_SESSION
        logger.info("[%s] User: %s", session_id, preview(message))

        try:
            reply = await self.backend.generate(self.system_prompt, message, self.params)
        except Exception as exc:
            error = map_downstream_error(exc)
            if error.code is ErrorCode.SERVER_ERROR:
                logger.exception("[%s] Downstream call failed", session_id)
            else:
                logger.warning("[%s] Downstream call failed: %s", session_id, error.code.value)
            raise error from exc

        logger.info("[%s] Assistant: %s", session_id, preview(reply))
        return ChatResponse(reply=reply, sources=[], sessionId=session_id, timestamp=utc_now())

    async def close(self) -> None:
        if self.backend is not None:
            await self.backend.close()
