from wire.models import ChatRequest, ChatResponse, ErrorEnvelope, HealthStatus
from wire.taxonomy import ERROR_POLICIES, ErrorCode, ErrorPolicy, status_for

__all__ = [
    "ChatRequest",
    "ChatResponse",
    "ErrorEnvelope",
    "HealthStatus",
    "ERROR_POLICIES",
    "ErrorCode",
    "ErrorPolicy",
    "status_for",
]
