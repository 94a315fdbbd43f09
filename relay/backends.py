from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import Any, List, Optional

from langchain_core.messages import BaseMessage, HumanMessage, SystemMessage
from langchain_google_genai import ChatGoogleGenerativeAI
from openai import AsyncOpenAI

from config.settings import GenerationParams, Settings


logger = logging.getLogger("carrier_chat.relay")


class ChatBackend(ABC):
    """A downstream text-generation endpoint.

    Implementations take one system instruction and one user message and
    return the generated text. Vendor exceptions are allowed to propagate;
    the relay maps them into the client-facing taxonomy.
    """

    model: str

    @abstractmethod
    async def generate(self, system_prompt: str, user_message: str, params: GenerationParams) -> str:
        ...

    async def close(self) -> None:
        return None


class OpenAIBackend(ChatBackend):
    def __init__(self, api_key: str, model: str = "gpt-4o-mini", **client_kwargs: Any) -> None:
        self.model = model
        self._client = AsyncOpenAI(api_key=api_key, **client_kwargs)

    async def generate(self, system_prompt: str, user_message: str, params: GenerationParams) -> str:
        completion = await self._client.chat.completions.create(
            model=self.model,
            messages=[
                {"role": "system", "content": system_prompt},
                {"role": "user", "content": user_message},
            ],
            max_tokens=params.max_tokens,
            temperature=params.temperature,
            top_p=params.top_p,
            frequency_penalty=params.frequency_penalty,
            presence_penalty=params.presence_penalty,
        )
        return completion.choices[0].message.content or ""

    async def close(self) -> None:
        await self._client.close()


def to_lc_messages(system_prompt: str, user_message: str) -> List[BaseMessage]:
    return [SystemMessage(content=system_prompt), HumanMessage(content=user_message)]


def _message_text(content: Any) -> str:
    if isinstance(content, str):
        return content
    # Multi-part content comes back as a list of strings / {"text": ...} blocks.
    parts: List[str] = []
    for part in content or []:
        if isinstance(part, str):
            parts.append(part)
        elif isinstance(part, dict) and isinstance(part.get("text"), str):
            parts.append(part["text"])
    return "".join(parts)


class GeminiBackend(ChatBackend):
    def __init__(self, api_key: str, model: str = "gemini-2.0-flash") -> None:
        self.model = model
        self._api_key = api_key

    def _build_llm(self, params: GenerationParams) -> ChatGoogleGenerativeAI:
        # Gemini has no frequency/presence penalty knobs; those params are ignored.
        return ChatGoogleGenerativeAI(
            model=self.model,
            google_api_key=self._api_key,
            temperature=params.temperature,
            top_p=params.top_p,
            max_output_tokens=params.max_tokens,
        )

    async def generate(self, system_prompt: str, user_message: str, params: GenerationParams) -> str:
        llm = self._build_llm(params)
        result = await llm.ainvoke(to_lc_messages(system_prompt, user_message))
        return _message_text(result.content)


def build_backend(settings: Settings) -> Optional[ChatBackend]:
    """Create the configured backend, or None when no credential is present."""
    if not settings.api_key:
        logger.warning(
            "No API key configured for provider %s; chat requests will be rejected",
            settings.llm_provider,
        )
        return None

    if settings.llm_provider == "openai":
        return OpenAIBackend(api_key=settings.api_key, model=settings.model)
    if settings.llm_provider == "gemini":
        return GeminiBackend(api_key=settings.api_key, model=settings.model)

    raise ValueError(
        f"Unsupported LLM_PROVIDER: {settings.llm_provider}. Supported providers: 'openai', 'gemini'"
    )
