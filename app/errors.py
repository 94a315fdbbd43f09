from __future__ import annotations

import logging
from typing import Any, Dict, List

from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.requests import Request
from starlette.responses import JSONResponse, Response

from relay.errors import RelayError
from relay.service import MESSAGE_REQUIRED
from wire.models import ErrorEnvelope, utc_now
from wire.taxonomy import ErrorCode


logger = logging.getLogger("carrier_chat.app")

AVAILABLE_ENDPOINTS: List[str] = [
    "GET /",
    "GET /api/health",
    "POST /api/chat",
]

INVALID_BODY_MESSAGE = "Invalid request body. Expected a JSON object with a 'message' string."

# An absent body or a JSON non-object is treated like an empty object.
MISSING_BODY_TYPES = {"missing", "model_attributes_type", "dict_type"}


def _is_missing_body(error: Dict[str, Any]) -> bool:
    return tuple(error.get("loc", ())) == ("body",) and error.get("type") in MISSING_BODY_TYPES


def register_exception_handlers(app: FastAPI, *, include_details: bool) -> None:
    """Register handlers so every failure leaves the server as a JSON envelope.

    `include_details` controls whether raw diagnostic text is echoed back;
    it must be False for production deployments.
    """

    @app.exception_handler(RelayError)
    async def _relay_error_handler(request: Request, exc: RelayError) -> Response:
        envelope = exc.to_envelope(include_details=include_details)
        return JSONResponse(status_code=exc.status_code, content=envelope.to_body())

    @app.exception_handler(RequestValidationError)
    async def _validation_error_handler(request: Request, exc: RequestValidationError) -> Response:
        errors = exc.errors()
        logger.info("Rejected malformed body on %s %s: %s", request.method, request.url.path, errors)
        message = INVALID_BODY_MESSAGE
        if errors and all(_is_missing_body(error) for error in errors):
            message = MESSAGE_REQUIRED
        envelope = ErrorEnvelope(error=message, code=ErrorCode.VALIDATION)
        return JSONResponse(status_code=400, content=envelope.to_body())

    @app.exception_handler(StarletteHTTPException)
    async def _http_exception_handler(request: Request, exc: StarletteHTTPException) -> Response:
        # Wrong-method requests are reported like unknown routes.
        if exc.status_code in (404, 405):
            return JSONResponse(
                status_code=404,
                content={
                    "error": "Endpoint not found",
                    "path": request.url.path,
                    "method": request.method,
                    "available_endpoints": AVAILABLE_ENDPOINTS,
                },
            )
        return JSONResponse(
            status_code=exc.status_code,
            content={"error": str(exc.detail)},
            headers=dict(exc.headers or {}),
        )

    @app.exception_handler(Exception)
    async def _unhandled_exception_handler(request: Request, exc: Exception) -> Response:
        logger.exception("Unhandled error on %s %s", request.method, request.url.path)
        payload: Dict[str, Any] = {
            "error": "Internal server error",
            "code": ErrorCode.SERVER_ERROR.value,
            "timestamp": utc_now().isoformat(),
        }
        if include_details:
            payload["details"] = str(exc)
        return JSONResponse(status_code=500, content=payload)
