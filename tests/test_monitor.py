"""Tests for connection-health polling."""
import asyncio

import httpx
import pytest

from client.api import RelayAPI
from client.config import ClientConfig
from client.errors import OFFLINE_MESSAGE
from client.monitor import ConnectionMonitor
from client.session import ChatSession
from conftest import RecordingView, ScriptedAPI


pytestmark = pytest.mark.asyncio


def make_monitor(healthy=True, interval=30.0):
    api = ScriptedAPI(healthy=healthy)
    view = RecordingView()
    monitor = ConnectionMonitor(api, view, ClientConfig(health_interval=interval))
    return monitor, api, view


async def test_check_updates_indicator():
    monitor, _, view = make_monitor(healthy=[True, False])

    assert await monitor.check() is True
    assert view.connection is True
    assert monitor.state.connection_online is True

    assert await monitor.check() is False
    assert view.connection is False
    assert monitor.state.connection_online is False


async def test_start_checks_immediately_and_polls():
    monitor, api, view = make_monitor(interval=0.01)

    monitor.start()
    await asyncio.sleep(0.05)
    await monitor.stop()

    assert api.health_checks >= 2
    assert view.connection is True
    assert monitor.running is False


async def test_start_is_idempotent():
    monitor, _, _ = make_monitor()

    monitor.start()
    task = monitor._task
    monitor.start()

    assert monitor._task is task
    await monitor.stop()


async def test_visibility_regained_triggers_check():
    monitor, api, _ = make_monitor()

    await monitor.on_visibility_change(False)
    assert api.health_checks == 0

    await monitor.on_visibility_change(True)
    assert api.health_checks == 1


async def test_online_event_triggers_check():
    monitor, api, view = make_monitor()

    await monitor.on_online()

    assert api.health_checks == 1
    assert view.connection is True


async def test_offline_event_marks_down_without_polling():
    monitor, api, view = make_monitor()
    monitor.state.connection_online = True

    monitor.on_offline()

    assert api.health_checks == 0
    assert view.connection is False
    assert view.errors == [OFFLINE_MESSAGE]
    assert monitor.state.connection_online is False


async def test_polling_runs_alongside_a_pending_send():
    gate = asyncio.Event()

    class SlowAPI(ScriptedAPI):
        async def send_chat(self, message, session_id):
            await gate.wait()
            return await super().send_chat(message, session_id)

    api = SlowAPI(["reply"])
    view = RecordingView()
    session = ChatSession(api, view, ClientConfig(retry_delay=0))
    monitor = ConnectionMonitor(api, view, session.config, session.state)

    sending = asyncio.create_task(session.send("hi"))
    await asyncio.sleep(0)
    assert await monitor.check() is True
    gate.set()
    await sending

    assert session.state.connection_online is True
    assert [m.role for m in session.state.transcript] == ["user", "assistant"]


async def test_polling_survives_unexpected_health_failures():
    calls = []

    def handler(request):
        calls.append(request.url.path)
        raise httpx.InvalidURL("bad relay url")

    client = httpx.AsyncClient(transport=httpx.MockTransport(handler), base_url="http://relay.test")
    config = ClientConfig(health_interval=0.01)
    api = RelayAPI(config, client=client)
    view = RecordingView()
    monitor = ConnectionMonitor(api, view, config)

    monitor.start()
    await asyncio.sleep(0.05)
    assert monitor.running is True
    await monitor.stop()

    assert len(calls) >= 2
    assert view.connection is False
