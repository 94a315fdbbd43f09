from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Dict, Optional


class ErrorCode(str, Enum):
    """Closed set of error classes surfaced to chat clients."""

    VALIDATION = "validation"
    QUOTA_EXCEEDED = "quota_exceeded"
    INVALID_KEY = "invalid_key"
    RATE_LIMIT = "rate_limit"
    CONTEXT_LENGTH = "context_length"
    TIMEOUT = "timeout"
    NETWORK = "network"
    SERVER_ERROR = "server_error"

    @classmethod
    def parse(cls, value: Optional[str]) -> Optional["ErrorCode"]:
        if value is None:
            return None
        try:
            return cls(value)
        except ValueError:
            return None


@dataclass(frozen=True)
class ErrorPolicy:
    # None for classes that never cross the wire (client-observed only).
    status: Optional[int]
    retryable: bool


ERROR_POLICIES: Dict[ErrorCode, ErrorPolicy] = {
    ErrorCode.VALIDATION: ErrorPolicy(status=400, retryable=False),
    ErrorCode.QUOTA_EXCEEDED: ErrorPolicy(status=429, retryable=False),
    ErrorCode.INVALID_KEY: ErrorPolicy(status=401, retryable=False),
    ErrorCode.RATE_LIMIT: ErrorPolicy(status=429, retryable=True),
    ErrorCode.CONTEXT_LENGTH: ErrorPolicy(status=400, retryable=False),
    ErrorCode.TIMEOUT: ErrorPolicy(status=408, retryable=True),
    ErrorCode.NETWORK: ErrorPolicy(status=None, retryable=True),
    ErrorCode.SERVER_ERROR: ErrorPolicy(status=500, retryable=True),
}


def status_for(code: ErrorCode) -> int:
    status = ERROR_POLICIES[code].status
    if status is None:
        raise ValueError(f"Error code {code.value!r} has no HTTP status")
    return status
