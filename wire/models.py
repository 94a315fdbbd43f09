from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field

from wire.taxonomy import ErrorCode


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class ChatRequest(BaseModel):
    # `message` is left untyped so the relay can answer malformed input with
    # its own validation error instead of a framework 422.
    message: Any = Field(default=None, description="User message to relay")
    sessionId: Optional[str] = Field(default=None, description="Opaque client correlation token")


class ChatResponse(BaseModel):
    reply: str
    sources: List[str] = Field(default_factory=list)
    sessionId: str
    timestamp: datetime = Field(default_factory=utc_now)


class ErrorEnvelope(BaseModel):
    model_config = ConfigDict(use_enum_values=True)

    error: str
    code: Optional[ErrorCode] = None
    details: Optional[str] = None

    def to_body(self) -> Dict[str, Any]:
        return self.model_dump(mode="json", exclude_none=True)


class HealthStatus(BaseModel):
    status: str = "healthy"
    timestamp: datetime = Field(default_factory=utc_now)
    uptime: float
    environment: str
    configured: bool
    version: str
