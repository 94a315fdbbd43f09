from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class ClientConfig(BaseModel):
    """Tunables for one chat client session. Durations are in seconds."""

    model_config = ConfigDict(frozen=True)

    api_base_url: str = Field(default="http://localhost:5000")
    max_message_length: int = Field(default=4000, ge=1)
    retry_attempts: int = Field(default=3, ge=0)
    retry_delay: float = Field(default=2.0, ge=0)
    request_timeout: float = Field(default=30.0, gt=0)
    health_interval: float = Field(default=30.0, gt=0)
    health_timeout: float = Field(default=5.0, gt=0)
