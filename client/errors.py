from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, assert_never

from wire.taxonomy import ERROR_POLICIES, ErrorCode


GENERIC_MESSAGE = "Sorry, something went wrong. Please try again."
TIMEOUT_MESSAGE = "Request timed out. Please try again."
NETWORK_MESSAGE = "Cannot connect to server. Please check if the backend is running."
OFFLINE_MESSAGE = "You are offline. Please check your internet connection."


class APIError(Exception):
    """A failed relay call, as observed by the client."""

    def __init__(self, status: int, message: str, code: Optional[str] = None) -> None:
        super().__init__(message)
        self.status = status
        self.message = message
        self.code = code

    def __repr__(self) -> str:
        return f"APIError(status={self.status!r}, message={self.message!r}, code={self.code!r})"


@dataclass(frozen=True)
class ErrorOutcome:
    message: str
    retryable: bool
    marks_offline: bool = False


def describe_error(error: BaseException) -> ErrorOutcome:
    """Decide what the user sees for a failed send and whether to offer a resend."""
    if not isinstance(error, APIError):
        return ErrorOutcome(GENERIC_MESSAGE, retryable=True)

    code = ErrorCode.parse(error.code)
    if code is None:
        # Unknown or missing code: trust the server's message, retry only 5xx.
        return ErrorOutcome(error.message or GENERIC_MESSAGE, retryable=error.status >= 500)

    retryable = ERROR_POLICIES[code].retryable
    match code:
        case ErrorCode.TIMEOUT:
            return ErrorOutcome(TIMEOUT_MESSAGE, retryable)
        case ErrorCode.NETWORK:
            return ErrorOutcome(NETWORK_MESSAGE, retryable, marks_offline=True)
        case ErrorCode.QUOTA_EXCEEDED:
            return ErrorOutcome("API quota exceeded. Please add credits to your model provider account.", retryable)
        case ErrorCode.INVALID_KEY:
            return ErrorOutcome("Authentication error. Please check the API configuration.", retryable)
        case ErrorCode.RATE_LIMIT:
            return ErrorOutcome("Rate limit exceeded. Please wait a moment and try again.", retryable)
        case ErrorCode.CONTEXT_LENGTH:
            return ErrorOutcome("Message too long for the model. Please shorten your message.", retryable)
        case ErrorCode.VALIDATION | ErrorCode.SERVER_ERROR:
            return ErrorOutcome(error.message or GENERIC_MESSAGE, retryable)
        case _:
            assert_never(code)
