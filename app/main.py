from __future__ import annotations

import logging
import time
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator, Dict, Optional

from fastapi import Depends, FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware

from app.errors import register_exception_handlers
from config.settings import Settings, get_settings
from relay.backends import build_backend
from relay.service import RelayService
from wire.models import ChatRequest, ChatResponse, HealthStatus


logger = logging.getLogger("carrier_chat.app")


def configure_logging(level: str) -> None:
    logging.basicConfig(level=level, format="[%(asctime)s] %(levelname)s - %(message)s")


def build_relay_service(settings: Settings) -> RelayService:
    return RelayService(
        build_backend(settings),
        max_message_length=settings.max_message_length,
        system_prompt=settings.load_system_prompt(),
        params=settings.generation,
    )


def get_app_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_relay_service(request: Request) -> RelayService:
    return request.app.state.relay


def create_app(settings: Optional[Settings] = None, relay: Optional[RelayService] = None) -> FastAPI:
    settings = settings or get_settings()
    relay = relay or build_relay_service(settings)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        logger.info(
            "Relay starting: env=%s provider=%s model=%s key_set=%s",
            settings.app_env,
            settings.llm_provider,
            settings.model,
            settings.configured,
        )
        yield
        await relay.close()
        logger.info("Relay stopped")

    app = FastAPI(title="Carrier Chat Relay", version=settings.version, lifespan=lifespan)
    app.state.settings = settings
    app.state.relay = relay
    app.state.started_at = time.monotonic()

    if settings.cors_origins:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=settings.cors_origins,
            allow_credentials=True,
            allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
            allow_headers=["Content-Type", "Authorization"],
        )

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        started = time.perf_counter()
        response = await call_next(request)
        elapsed_ms = (time.perf_counter() - started) * 1000
        logger.info("%s %s -> %s (%.1fms)", request.method, request.url.path, response.status_code, elapsed_ms)
        return response

    register_exception_handlers(app, include_details=settings.is_development)

    @app.get("/")
    def root(settings: Settings = Depends(get_app_settings)) -> Dict[str, Any]:
        return {
            "message": "Carrier Reference Agent Backend",
            "status": "Running",
            "version": settings.version,
            "environment": settings.app_env,
            "endpoints": {
                "health": "/api/health",
                "chat": "/api/chat (POST)",
            },
        }

    @app.get("/api/health", response_model=HealthStatus)
    def health(request: Request, settings: Settings = Depends(get_app_settings)) -> HealthStatus:
        return HealthStatus(
            uptime=round(time.monotonic() - request.app.state.started_at, 3),
            environment=settings.app_env,
            configured=get_relay_service(request).configured,
            version=settings.version,
        )

    @app.post("/api/chat", response_model=ChatResponse)
    async def chat(req: ChatRequest, relay: RelayService = Depends(get_relay_service)) -> ChatResponse:
        return await relay.chat(req)

    return app


configure_logging(get_settings().log_level)
app = create_app()
