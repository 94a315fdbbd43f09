"""Interactive chat client using Typer."""

from __future__ import annotations

import asyncio
import logging

import typer
from dotenv import load_dotenv
from rich.console import Console

from client.api import RelayAPI
from client.config import ClientConfig
from client.console import ConsoleView
from client.monitor import ConnectionMonitor
from client.session import ChatSession


load_dotenv()

app = typer.Typer(
    name="carrier-chat",
    help="Terminal chat client for the carrier reference relay",
    add_completion=False,
)

console = Console()


async def run_chat(config: ClientConfig) -> None:
    view = ConsoleView(console)
    async with RelayAPI(config) as api:
        session = ChatSession(api, view, config)
        monitor = ConnectionMonitor(api, view, config, session.state)
        view.show_welcome()
        monitor.start()
        try:
            while True:
                text = await asyncio.to_thread(console.input, "[bold cyan]You[/bold cyan] > ")
                command = text.strip().lower()
                if command in ("/quit", "/exit"):
                    break
                if command == "/clear":
                    await session.clear()
                    continue
                if command == "/health":
                    await monitor.check()
                    continue

                status = session.on_input(text)
                if not status.can_send:
                    if text.strip():
                        view.show_error(
                            f"Message too long ({status.counter}). Please shorten your message."
                        )
                    continue
                await session.submit()
                await session.wait_for_retries()
        except (EOFError, KeyboardInterrupt):
            console.print()
        finally:
            await monitor.stop()


@app.command()
def chat(
    api_url: str = typer.Option(
        "http://localhost:5000",
        "--api-url",
        "-u",
        envvar="CHAT_API_URL",
        help="Base URL of the relay server",
    ),
    timeout: float = typer.Option(30.0, "--timeout", help="Seconds before a chat request times out"),
    retries: int = typer.Option(3, "--retries", help="Maximum resend prompts for retryable errors"),
    log_level: str = typer.Option("WARNING", "--log-level", help="Client log level"),
):
    """Start an interactive chat session against the relay."""
    logging.basicConfig(level=log_level.upper(), format="[%(asctime)s] %(levelname)s - %(message)s")
    config = ClientConfig(api_base_url=api_url, request_timeout=timeout, retry_attempts=retries)
    asyncio.run(run_chat(config))
