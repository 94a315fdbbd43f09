"""Pytest configuration and shared fixtures."""
import os
from typing import Any, Callable, List, Optional, Sequence, Union

# Keep the import-time app deterministic regardless of the developer's .env.
os.environ["APP_ENV"] = "test"
os.environ["LLM_PROVIDER"] = "openai"
os.environ["OPENAI_API_KEY"] = ""
os.environ.setdefault("LOG_LEVEL", "WARNING")

import pytest
from fastapi.testclient import TestClient

from app.main import create_app
from client.state import ChatMessage, ComposerStatus
from client.view import ChatView
from config.settings import GenerationParams, Settings
from relay.backends import ChatBackend
from relay.service import RelayService
from wire.models import ChatResponse


class FakeBackend(ChatBackend):
    """Downstream stand-in that returns a fixed reply or raises."""

    def __init__(self, reply: str = "Jazz offers 10GB for Rs. 500 in Karachi.", error: Optional[BaseException] = None):
        self.model = "fake-model"
        self.reply = reply
        self.error = error
        self.calls: List[tuple] = []
        self.closed = False

    async def generate(self, system_prompt: str, user_message: str, params: GenerationParams) -> str:
        self.calls.append((system_prompt, user_message, params))
        if self.error is not None:
            raise self.error
        return self.reply

    async def close(self) -> None:
        self.closed = True


def make_settings(**overrides: Any) -> Settings:
    settings = Settings()
    for key, value in overrides.items():
        setattr(settings, key, value)
    return settings


def make_client(backend: Optional[ChatBackend], max_message_length: int = 4000, **overrides: Any) -> TestClient:
    settings = make_settings(max_message_length=max_message_length, **overrides)
    relay = RelayService(backend, max_message_length=max_message_length, system_prompt="You are a test agent.")
    return TestClient(create_app(settings, relay), raise_server_exceptions=False)


@pytest.fixture
def fake_backend():
    return FakeBackend()


@pytest.fixture
def make_test_client() -> Callable[..., TestClient]:
    return make_client


class RecordingView(ChatView):
    """ChatView that records every call and answers prompts from a script."""

    def __init__(self, answers: Sequence[bool] = ()):
        self.answers = list(answers)
        self.events: List[tuple] = []
        self.messages: List[ChatMessage] = []
        self.prompts: List[str] = []
        self.errors: List[str] = []
        self.connection: Optional[bool] = None
        self.typing = False
        self.error_visible = False
        self.composer: Optional[ComposerStatus] = None

    def render_message(self, message: ChatMessage) -> None:
        self.events.append(("message", message.role))
        self.messages.append(message)

    def clear_transcript(self) -> None:
        self.events.append(("clear",))
        self.messages = []

    def show_typing(self) -> None:
        self.events.append(("typing", True))
        self.typing = True

    def hide_typing(self) -> None:
        self.events.append(("typing", False))
        self.typing = False

    def show_error(self, message: str) -> None:
        self.errors.append(message)
        self.error_visible = True

    def hide_error(self) -> None:
        self.error_visible = False

    def set_connection(self, online: bool) -> None:
        self.connection = online

    def render_composer(self, status: ComposerStatus) -> None:
        self.composer = status

    async def confirm(self, prompt: str) -> bool:
        self.prompts.append(prompt)
        return self.answers.pop(0) if self.answers else True


class ScriptedAPI:
    """Chat/health API stand-in driven by a list of replies and exceptions."""

    def __init__(self, script: Sequence[Union[str, BaseException]] = (), healthy: Union[bool, Sequence[bool]] = True):
        self.script = list(script)
        self.sent: List[tuple] = []
        self.health = [healthy] if isinstance(healthy, bool) else list(healthy)
        self.health_checks = 0

    async def send_chat(self, message: str, session_id: str) -> ChatResponse:
        self.sent.append((message, session_id))
        item = self.script.pop(0) if self.script else "ok"
        if isinstance(item, BaseException):
            raise item
        return ChatResponse(reply=item, sources=[], sessionId=session_id)

    async def check_health(self) -> bool:
        self.health_checks += 1
        if len(self.health) > 1:
            return self.health.pop(0)
        return self.health[0]


@pytest.fixture
def recording_view():
    return RecordingView()
