from __future__ import annotations

import logging

import uvicorn

from config.settings import get_settings


logger = logging.getLogger("carrier_chat.app")


def main() -> None:
    settings = get_settings()
    from app.main import app

    logger.info("Server running on http://localhost:%s", settings.port)
    logger.info("Health check: http://localhost:%s/api/health", settings.port)
    logger.info("Model API key: %s", "configured" if settings.configured else "missing")
    logger.info("Environment: %s", settings.app_env)

    # uvicorn logs bind failures (e.g. port already in use) and exits with status 1.
    uvicorn.run(app, host=settings.host, port=settings.port, log_level=settings.log_level.lower())


if __name__ == "__main__":
    main()
