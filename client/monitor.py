from __future__ import annotations

import asyncio
import contextlib
import logging
from typing import Optional, Protocol

from client.config import ClientConfig
from client.errors import OFFLINE_MESSAGE
from client.state import ClientState
from client.view import ChatView


logger = logging.getLogger("carrier_chat.client")


class HealthAPI(Protocol):
    async def check_health(self) -> bool:
        ...


class ConnectionMonitor:
    """Keeps the connection indicator in sync with the relay's health endpoint.

    Runs independently of ChatSession: it only touches
    `state.connection_online` and the view's connection indicator.

    `on_visibility_change`, `on_online` and `on_offline` are hooks for front
    ends that observe window visibility or network connectivity events; the
    terminal client has no such events and only polls or checks on `/health`.
    """

    def __init__(
        self,
        api: HealthAPI,
        view: ChatView,
        config: Optional[ClientConfig] = None,
        state: Optional[ClientState] = None,
    ) -> None:
        self.api = api
        self.view = view
        self.config = config or ClientConfig()
        self.state = state or ClientState()
        self._task: Optional[asyncio.Task] = None

    async def check(self) -> bool:
        online = await self.api.check_health()
        self.state.connection_online = online
        self.view.set_connection(online)
        return online

    async def _poll(self) -> None:
        while True:
            await self.check()
            await asyncio.sleep(self.config.health_interval)

    def start(self) -> None:
        if self._task is None or self._task.done():
            self._task = asyncio.create_task(self._poll())

    async def stop(self) -> None:
        if self._task is None:
            return
        self._task.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await self._task
        self._task = None

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    async def on_visibility_change(self, visible: bool) -> None:
        if visible:
            await self.check()

    async def on_online(self) -> None:
        await self.check()

    def on_offline(self) -> None:
        logger.info("Network went offline")
        self.state.connection_online = False
        self.view.set_connection(False)
        self.view.show_error(OFFLINE_MESSAGE)
