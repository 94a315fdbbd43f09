from relay.backends import ChatBackend, GeminiBackend, OpenAIBackend, build_backend
from relay.errors import RelayError, map_downstream_error
from relay.service import RelayService, validate_message

__all__ = [
    "ChatBackend",
    "GeminiBackend",
    "OpenAIBackend",
    "build_backend",
    "RelayError",
    "map_downstream_error",
    "RelayService",
    "validate_message",
]
