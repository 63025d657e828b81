"""LLM Gateway: unified internal API for all LLM interactions.

Usage:
    from metalpulse.core.llm import get_llm_gateway, ChatRequest, Message, Role

    gateway = get_llm_gateway()
    response = await gateway.chat(ChatRequest(
        model="gpt-5.2",
        messages=[Message(role=Role.USER, content="Hello")],
    ))
"""

from metalpulse.core.llm.gateway import LLMGateway, close_llm_gateway, get_llm_gateway
from metalpulse.core.llm.types import (
    ChatRequest,
    ChatResponse,
    Message,
    Role,
    TokenUsage,
)

__all__ = [
    # Gateway
    "LLMGateway",
    "get_llm_gateway",
    "close_llm_gateway",
    # Types
    "ChatRequest",
    "ChatResponse",
    "Message",
    "Role",
    "TokenUsage",
]
