"""OpenAI and OpenAI-compatible API provider.

Handles OpenAI-specific request shaping internally:
- Reasoning model detection (o1/o3/gpt-5) -> max_completion_tokens
- Temperature suppression for reasoning models
"""

import logging
from typing import Any, Dict, List, Optional

from openai import AsyncOpenAI

from metalpulse.core.llm.providers.base import LLMProvider
from metalpulse.core.llm.types import (
    ChatRequest,
    ChatResponse,
    Message,
    TokenUsage,
)

logger = logging.getLogger(__name__)

# Model prefixes that are reasoning models (no temperature, use max_completion_tokens)
_REASONING_PREFIXES = ("o1-", "o1", "o3-", "o3", "gpt-5")


class OpenAIProvider(LLMProvider):
    """Provider for OpenAI API and OpenAI-compatible endpoints."""

    def __init__(self, api_key: str, base_url: Optional[str] = None):
        self._api_key = api_key
        self._base_url = base_url
        self._client: Optional[AsyncOpenAI] = None

    @property
    def provider_name(self) -> str:
        return "openai"

    def _get_client(self) -> AsyncOpenAI:
        if self._client is None:
            self._client = AsyncOpenAI(
                api_key=self._api_key,
                base_url=self._base_url,
            )
        return self._client

    def _convert_messages(self, messages: List[Message]) -> List[Dict[str, Any]]:
        return [{"role": msg.role.value, "content": msg.content} for msg in messages]

    def _build_api_kwargs(self, request: ChatRequest) -> Dict[str, Any]:
        """Build kwargs for client.chat.completions.create()."""
        kwargs: Dict[str, Any] = {
            "model": request.model,
            "messages": self._convert_messages(request.messages),
        }

        is_reasoning = any(m in request.model.lower() for m in _REASONING_PREFIXES)

        if request.max_tokens is not None:
            if is_reasoning:
                kwargs["max_completion_tokens"] = request.max_tokens
            else:
                kwargs["max_tokens"] = request.max_tokens

        # Reasoning models reject temperature
        if request.temperature is not None and not is_reasoning:
            kwargs["temperature"] = request.temperature

        kwargs["timeout"] = request.timeout
        kwargs.update(request.extra)
        return kwargs

    async def chat(self, request: ChatRequest) -> ChatResponse:
        """Non-streaming chat completion."""
        client = self._get_client()
        kwargs = self._build_api_kwargs(request)

        try:
            response = await client.chat.completions.create(**kwargs)
        except Exception as e:
            logger.error(
                "OpenAI request failed: model=%s, base_url=%s, error=%s",
                request.model, self._base_url or "default", e,
            )
            raise

        choice = response.choices[0] if response.choices else None
        usage = None
        if response.usage is not None:
            usage = TokenUsage(
                prompt_tokens=response.usage.prompt_tokens,
                completion_tokens=response.usage.completion_tokens,
                total_tokens=response.usage.total_tokens,
            )

        return ChatResponse(
            content=choice.message.content if choice else None,
            finish_reason=choice.finish_reason if choice else None,
            model=response.model,
            usage=usage,
        )

    async def close(self) -> None:
        if self._client:
            try:
                await self._client.close()
            except Exception as e:
                logger.warning("Error closing OpenAI client: %s", e)
            finally:
                self._client = None
