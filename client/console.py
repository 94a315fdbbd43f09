"""Terminal rendering of a chat session using rich."""

from __future__ import annotations

import asyncio
from typing import Optional

from rich.console import Console
from rich.panel import Panel
from rich.prompt import Confirm
from rich.status import Status
from rich.text import Text

from client.state import ChatMessage, ComposerStatus
from client.view import ChatView


ROLE_STYLES = {
    "user": ("You", "bold cyan"),
    "assistant": ("Assistant", "bold green"),
    "error": ("Error", "bold red"),
}

WELCOME = (
    "[bold]Welcome to the Carrier Reference Agent[/bold]\n"
    "Ask about carrier offers, pricing, and telecom database queries.\n"
    "[dim]Commands: /clear, /health, /quit[/dim]"
)


class ConsoleView(ChatView):
    def __init__(self, console: Optional[Console] = None) -> None:
        self.console = console or Console()
        self._typing: Optional[Status] = None
        self._online: Optional[bool] = None
        self.error_visible = False

    def show_welcome(self) -> None:
        self.console.print(Panel(WELCOME, border_style="blue"))

    def render_message(self, message: ChatMessage) -> None:
        label, style = ROLE_STYLES[message.role]
        stamp = message.timestamp.astimezone().strftime("%H:%M")
        self.console.print(f"[{style}]{label}[/{style}] [dim]{stamp}[/dim]")
        self.console.print(message.content, markup=False)
        if message.sources:
            self.console.print(f"[dim]Sources: {', '.join(message.sources)}[/dim]")

    def clear_transcript(self) -> None:
        self.console.clear()
        self.show_welcome()

    def show_typing(self) -> None:
        if self._typing is None:
            self._typing = self.console.status("Assistant is typing...")
            self._typing.start()

    def hide_typing(self) -> None:
        if self._typing is not None:
            self._typing.stop()
            self._typing = None

    def show_error(self, message: str) -> None:
        self.error_visible = True
        self.console.print(Panel(Text(message), title="Error", border_style="red"))

    def hide_error(self) -> None:
        self.error_visible = False

    def set_connection(self, online: bool) -> None:
        if online == self._online:
            return
        self._online = online
        if online:
            self.console.print("[green]● Connected[/green]")
        else:
            self.console.print("[red]● Disconnected[/red]")

    def render_composer(self, status: ComposerStatus) -> None:
        if status.level == "danger":
            self.console.print(f"[red]{status.counter}[/red]")
        elif status.level == "warning":
            self.console.print(f"[yellow]{status.counter}[/yellow]")

    async def confirm(self, prompt: str) -> bool:
        return await asyncio.to_thread(Confirm.ask, prompt, console=self.console)
