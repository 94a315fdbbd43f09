from client.api import RelayAPI
from client.config import ClientConfig
from client.errors import APIError, ErrorOutcome, describe_error
from client.monitor import ConnectionMonitor
from client.session import ChatSession
from client.state import ChatMessage, ClientState, ComposerStatus, Transcript, new_session_id
from client.view import ChatView

__all__ = [
    "RelayAPI",
    "ClientConfig",
    "APIError",
    "ErrorOutcome",
    "describe_error",
    "ConnectionMonitor",
    "ChatSession",
    "ChatMessage",
    "ClientState",
    "ComposerStatus",
    "Transcript",
    "new_session_id",
    "ChatView",
]
