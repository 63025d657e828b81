"""LLM Gateway, the single entry point for all LLM API calls.

Both the relevance filter and the post generator call this instead of
creating OpenAI clients directly. The provider is built lazily on first use,
so a missing key only fails the operation that needs it.
"""

import logging
import time
from typing import Optional

from metalpulse.config import settings
from metalpulse.core.llm.providers.base import LLMProvider
from metalpulse.core.llm.types import ChatRequest, ChatResponse

logger = logging.getLogger(__name__)


class LLMGateway:
    """Gateway owning one cached provider instance."""

    def __init__(self, provider: Optional[LLMProvider] = None) -> None:
        self._provider = provider

    def _get_provider(self) -> LLMProvider:
        if self._provider is None:
            (api_key,) = settings.require("OPENAI_API_KEY")
            from metalpulse.core.llm.providers.openai_provider import OpenAIProvider

            logger.info(
                "Creating OpenAI provider (base_url=%s)",
                settings.OPENAI_API_BASE or "default",
            )
            self._provider = OpenAIProvider(
                api_key=api_key, base_url=settings.OPENAI_API_BASE or None,
            )
        return self._provider

    async def chat(self, request: ChatRequest, *, purpose: str = "") -> ChatResponse:
        """Non-streaming chat completion through the configured provider."""
        provider = self._get_provider()
        start_time = time.monotonic()
        response = await provider.chat(request)
        elapsed = time.monotonic() - start_time

        if response.usage:
            logger.info(
                "LLM call completed: purpose=%s, model=%s, prompt_tokens=%d, "
                "completion_tokens=%d, elapsed=%.2fs",
                purpose or "-", request.model, response.usage.prompt_tokens,
                response.usage.completion_tokens, elapsed,
            )
        else:
            logger.info(
                "LLM call completed: purpose=%s, model=%s, elapsed=%.2fs",
                purpose or "-", request.model, elapsed,
            )
        return response

    async def close(self) -> None:
        """Graceful shutdown: close the cached provider."""
        if self._provider is not None:
            await self._provider.close()
            self._provider = None


_gateway: Optional[LLMGateway] = None


def get_llm_gateway() -> LLMGateway:
    """Get the singleton LLMGateway instance."""
    global _gateway
    if _gateway is None:
        _gateway = LLMGateway()
    return _gateway


async def close_llm_gateway() -> None:
    """Close and discard the singleton (application shutdown)."""
    global _gateway
    if _gateway is not None:
        await _gateway.close()
        _gateway = None
