"""Abstract base class for LLM providers.

Each provider translates gateway types to its native API format.
"""

from abc import ABC, abstractmethod

from metalpulse.core.llm.types import ChatRequest, ChatResponse


class LLMProvider(ABC):
    """Abstract base for LLM API providers."""

    @property
    @abstractmethod
    def provider_name(self) -> str:
        """Unique provider identifier, e.g. 'openai'."""
        ...

    @abstractmethod
    async def chat(self, request: ChatRequest) -> ChatResponse:
        """Non-streaming chat completion."""
        ...

    async def close(self) -> None:
        """Clean up resources (close HTTP clients)."""
        pass
