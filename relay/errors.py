from __future__ import annotations

from typing import Any, Dict, Iterator, Optional

from wire.models import ErrorEnvelope
from wire.taxonomy import ErrorCode, status_for


class RelayError(Exception):
    """Typed failure returned to chat clients as an ErrorEnvelope.

    `message` is safe to show to users. `details` carries raw diagnostic text
    and is only rendered outside production.
    """

    def __init__(
        self,
        code: ErrorCode,
        message: str,
        *,
        status_code: Optional[int] = None,
        details: Optional[str] = None,
    ) -> None:
        super().__init__(message)
        self.code = code
        self.message = message
        self.status_code = status_code if status_code is not None else status_for(code)
        self.details = details

    def to_envelope(self, *, include_details: bool = False) -> ErrorEnvelope:
        return ErrorEnvelope(
            error=self.message,
            code=self.code,
            details=self.details if include_details else None,
        )


# Vendor error codes (OpenAI `code`, Google RPC status / reason) -> taxonomy.
DOWNSTREAM_CODES: Dict[str, ErrorCode] = {
    "insufficient_quota": ErrorCode.QUOTA_EXCEEDED,
    "invalid_api_key": ErrorCode.INVALID_KEY,
    "rate_limit_exceeded": ErrorCode.RATE_LIMIT,
    "context_length_exceeded": ErrorCode.CONTEXT_LENGTH,
    "RESOURCE_EXHAUSTED": ErrorCode.RATE_LIMIT,
    "UNAUTHENTICATED": ErrorCode.INVALID_KEY,
    "PERMISSION_DENIED": ErrorCode.INVALID_KEY,
    "API_KEY_INVALID": ErrorCode.INVALID_KEY,
}

MESSAGES: Dict[ErrorCode, str] = {
    ErrorCode.QUOTA_EXCEEDED: "API quota exceeded. Please add credits to your model provider account.",
    ErrorCode.INVALID_KEY: "Invalid model API key. Please check your configuration.",
    ErrorCode.RATE_LIMIT: "Rate limit exceeded. Please try again in a moment.",
    ErrorCode.CONTEXT_LENGTH: "Message too long for the model. Please shorten your message.",
    ErrorCode.SERVER_ERROR: "An unexpected error occurred. Please try again.",
}


def _candidate_codes(exc: BaseException) -> Iterator[str]:
    seen = set()
    current: Optional[BaseException] = exc
    while current is not None and id(current) not in seen:
        seen.add(id(current))
        for attr in ("code", "reason", "status"):
            value: Any = getattr(current, attr, None)
            if isinstance(value, str):
                yield value
        grpc_status = getattr(current, "grpc_status_code", None)
        name = getattr(grpc_status, "name", None)
        if isinstance(name, str):
            yield name
        current = current.__cause__ or current.__context__


def downstream_code(exc: BaseException) -> Optional[ErrorCode]:
    for candidate in _candidate_codes(exc):
        mapped = DOWNSTREAM_CODES.get(candidate)
        if mapped is not None:
            return mapped
    return None


def map_downstream_error(exc: BaseException) -> RelayError:
    """Re-express a downstream API failure in the client-facing taxonomy."""
    code = downstream_code(exc)
    if code is None:
        return RelayError(
            ErrorCode.SERVER_ERROR,
            MESSAGES[ErrorCode.SERVER_ERROR],
            details=str(exc) or exc.__class__.__name__,
        )
    return RelayError(code, MESSAGES[code])
