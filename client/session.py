from __future__ import annotations

import asyncio
import contextlib
import logging
from typing import Optional, Protocol, Sequence

from client.config import ClientConfig
from client.errors import APIError, describe_error
from client.state import ChatMessage, ClientState, ComposerStatus, Role, composer_status
from client.view import ChatView
from wire.models import ChatResponse


logger = logging.getLogger("carrier_chat.client")

CLEAR_PROMPT = "Are you sure you want to clear the conversation?"


class ChatAPI(Protocol):
    async def send_chat(self, message: str, session_id: str) -> ChatResponse:
        ...


class ChatSession:
    """Conversation state machine for one client.

    idle -> composing -> sending -> (success | retryable error | fatal error) -> idle

    Only one send is in flight at a time; a submit while sending is ignored.
    Retryable failures schedule a resend prompt on `retry_task`, bounded by
    `config.retry_attempts` until a send succeeds or the transcript is cleared.
    """

    def __init__(
        self,
        api: ChatAPI,
        view: ChatView,
        config: Optional[ClientConfig] = None,
        state: Optional[ClientState] = None,
    ) -> None:
        self.api = api
        self.view = view
        self.config = config or ClientConfig()
        self.state = state or ClientState()
        self.retry_task: Optional[asyncio.Task] = None

    def composer(self) -> ComposerStatus:
        return composer_status(self.state.draft, self.config.max_message_length, self.state.is_loading)

    def on_input(self, text: str) -> ComposerStatus:
        self.state.draft = text
        status = self.composer()
        self.view.render_composer(status)
        return status

    def _append(self, role: Role, content: str, sources: Sequence[str] = ()) -> ChatMessage:
        message = ChatMessage(role=role, content=content, sources=tuple(sources))
        self.state.transcript.append(message)
        self.view.render_message(message)
        return message

    async def submit(self) -> Optional[ChatMessage]:
        """Send the current draft. Returns the reply or error message appended, or None if nothing was sent."""
        if not self.composer().can_send:
            return None
        message = self.state.draft.strip()

        self.state.is_loading = True
        self._append("user", message)
        self.on_input("")
        self.view.show_typing()
        self.view.hide_error()

        try:
            response = await self.api.send_chat(message, self.state.session_id)
        except Exception as error:
            self.view.hide_typing()
            return self._handle_error(error, message)
        finally:
            self.state.is_loading = False
            self.on_input(self.state.draft)

        self.view.hide_typing()
        self.state.retry_count = 0
        return self._append("assistant", response.reply, response.sources)

    async def send(self, text: str) -> Optional[ChatMessage]:
        self.on_input(text)
        return await self.submit()

    def _handle_error(self, error: BaseException, original: str) -> ChatMessage:
        if not isinstance(error, APIError):
            logger.exception("Unexpected error while sending", exc_info=error)
        outcome = describe_error(error)

        if outcome.marks_offline:
            self.state.connection_online = False
            self.view.set_connection(False)

        entry = self._append("error", outcome.message)
        self.view.show_error(outcome.message)

        if outcome.retryable and self.state.retry_count < self.config.retry_attempts:
            self.state.retry_count += 1
            self.retry_task = asyncio.create_task(self._offer_retry(original, self.state.retry_count))
        return entry

    async def _offer_retry(self, original: str, attempt: int) -> None:
        await asyncio.sleep(self.config.retry_delay)
        prompt = f"Retry attempt {attempt}/{self.config.retry_attempts}. Try sending the message again?"
        if await self.view.confirm(prompt):
            await self.send(original)

    async def wait_for_retries(self) -> None:
        """Wait until no resend prompt (or the resend it triggers) is pending."""
        while self.retry_task is not None and not self.retry_task.done():
            await self.retry_task

    async def cancel_retry(self) -> None:
        """Drop a pending resend prompt so it cannot fire after the conversation moved on."""
        task, self.retry_task = self.retry_task, None
        if task is None or task.done():
            return
        task.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await task

    async def clear(self) -> bool:
        if not self.state.transcript:
            return False
        if not await self.view.confirm(CLEAR_PROMPT):
            return False
        await self.cancel_retry()
        self.state.transcript.clear()
        self.state.retry_count = 0
        self.view.clear_transcript()
        self.view.hide_error()
        return True
