from __future__ import annotations

from abc import ABC, abstractmethod

from client.state import ChatMessage, ComposerStatus


class ChatView(ABC):
    """Rendering surface driven by ChatSession and ConnectionMonitor.

    The session owns all state; a view only reflects it. `confirm` is the one
    suspension point: it waits for the user to accept or decline a prompt.
    """

    @abstractmethod
    def render_message(self, message: ChatMessage) -> None:
        ...

    @abstractmethod
    def clear_transcript(self) -> None:
        ...

    @abstractmethod
    def show_typing(self) -> None:
        ...

    @abstractmethod
    def hide_typing(self) -> None:
        ...

    @abstractmethod
    def show_error(self, message: str) -> None:
        ...

    @abstractmethod
    def hide_error(self) -> None:
        ...

    @abstractmethod
    def set_connection(self, online: bool) -> None:
        ...

    def render_composer(self, status: ComposerStatus) -> None:
        return None

    @abstractmethod
    async def confirm(self, prompt: str) -> bool:
        ...
