from __future__ import annotations

import random
import string
import time
from dataclasses import dataclass, field
from datetime import datetime
from typing import Iterator, List, Literal, Optional, Sequence, Tuple

from pydantic import BaseModel, ConfigDict, Field

from wire.models import utc_now


Role = Literal["user", "assistant", "error"]

_BASE36 = string.digits + string.ascii_lowercase


def new_session_id(now_ms: Optional[int] = None) -> str:
    """Time-based id with a random base36 suffix, e.g. session_1700000000000_k3j9a0zq1."""
    if now_ms is None:
        now_ms = int(time.time() * 1000)
    suffix = "".join(random.choices(_BASE36, k=9))
    return f"session_{now_ms}_{suffix}"


class ChatMessage(BaseModel):
    model_config = ConfigDict(frozen=True)

    role: Role
    content: str
    timestamp: datetime = Field(default_factory=utc_now)
    sources: Tuple[str, ...] = ()


class Transcript:
    """Append-only list of messages; the only removal is clearing everything."""

    def __init__(self, messages: Sequence[ChatMessage] = ()) -> None:
        self._messages: List[ChatMessage] = list(messages)

    def append(self, message: ChatMessage) -> None:
        self._messages.append(message)

    def clear(self) -> None:
        self._messages = []

    @property
    def messages(self) -> Tuple[ChatMessage, ...]:
        return tuple(self._messages)

    def __len__(self) -> int:
        return len(self._messages)

    def __iter__(self) -> Iterator[ChatMessage]:
        return iter(self._messages)

    def __bool__(self) -> bool:
        return bool(self._messages)


CounterLevel = Literal["normal", "warning", "danger"]


@dataclass(frozen=True)
class ComposerStatus:
    length: int
    max_length: int
    level: CounterLevel
    can_send: bool

    @property
    def counter(self) -> str:
        return f"{self.length}/{self.max_length}"


def composer_status(text: str, max_length: int, is_loading: bool) -> ComposerStatus:
    length = len(text)
    level: CounterLevel = "normal"
    if length > max_length * 0.95:
        level = "danger"
    elif length > max_length * 0.8:
        level = "warning"
    can_send = bool(text.strip()) and length <= max_length and not is_loading
    return ComposerStatus(length=length, max_length=max_length, level=level, can_send=can_send)


@dataclass
class ClientState:
    """Everything one chat session owns. Nothing here is module-level."""

    session_id: str = field(default_factory=new_session_id)
    transcript: Transcript = field(default_factory=Transcript)
    draft: str = ""
    is_loading: bool = False
    retry_count: int = 0
    connection_online: bool = False
