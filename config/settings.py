from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
from typing import List, Optional

from dotenv import load_dotenv


load_dotenv()

DEV_ENVIRONMENTS = {"dev", "development", "local"}

DEFAULT_DEV_ORIGINS = [
    "http://localhost:3001",
    "http://localhost:3000",
    "http://127.0.0.1:3001",
    "http://127.0.0.1:3000",
]


def _split_csv(value: Optional[str]) -> List[str]:
    if not value:
        return []
    return [item.strip() for item in value.split(",") if item.strip()]


@dataclass(frozen=True)
class GenerationParams:
    """Fixed sampling parameters sent with every downstream request."""

    max_tokens: int = 1500
    temperature: float = 0.7
    top_p: float = 0.9
    frequency_penalty: float = 0.1
    presence_penalty: float = 0.1


class Settings:
    """Application settings loaded from environment variables.

    Keep all credentials and config centralized here. Values are read once
    when the object is built and treated as read-only afterwards.
    """

    def __init__(self) -> None:
        self.app_env: str = os.getenv("APP_ENV", "development")
        self.host: str = os.getenv("HOST", "0.0.0.0")
        self.port: int = int(os.getenv("PORT", "5000"))
        self.version: str = os.getenv("APP_VERSION", "1.0.0")
        self.log_level: str = os.getenv("LOG_LEVEL", "INFO").upper()

        self.llm_provider: str = os.getenv("LLM_PROVIDER", "openai").lower()
        self.openai_api_key: Optional[str] = os.getenv("OPENAI_API_KEY") or None
        self.openai_model: str = os.getenv("OPENAI_MODEL", "gpt-4o-mini")
        self.google_api_key: Optional[str] = os.getenv("GOOGLE_API_KEY") or None
        self.gemini_model: str = os.getenv("GEMINI_MODEL", "gemini-2.0-flash")

        self.max_message_length: int = int(os.getenv("MAX_MESSAGE_LENGTH", "4000"))
        self.generation = GenerationParams(
            max_tokens=int(os.getenv("MODEL_MAX_TOKENS", "1500")),
            temperature=float(os.getenv("MODEL_TEMPERATURE", "0.7")),
            top_p=float(os.getenv("MODEL_TOP_P", "0.9")),
            frequency_penalty=float(os.getenv("MODEL_FREQUENCY_PENALTY", "0.1")),
            presence_penalty=float(os.getenv("MODEL_PRESENCE_PENALTY", "0.1")),
        )
        self.system_prompt_file: Optional[str] = os.getenv("SYSTEM_PROMPT_FILE") or None

        origins = _split_csv(os.getenv("CORS_ORIGINS"))
        if not origins and self.is_development:
            origins = list(DEFAULT_DEV_ORIGINS)
        self.cors_origins: List[str] = origins

    @property
    def is_development(self) -> bool:
        return self.app_env.lower() in DEV_ENVIRONMENTS

    @property
    def api_key(self) -> Optional[str]:
        if self.llm_provider == "gemini":
            return self.google_api_key
        return self.openai_api_key

    @property
    def model(self) -> str:
        if self.llm_provider == "gemini":
            return self.gemini_model
        return self.openai_model

    @property
    def configured(self) -> bool:
        return bool(self.api_key)

    def load_system_prompt(self) -> Optional[str]:
        """Return the system instruction override from SYSTEM_PROMPT_FILE, if set."""
        if not self.system_prompt_file:
            return None
        return Path(self.system_prompt_file).read_text(encoding="utf-8").strip()


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()
