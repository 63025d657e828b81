"""Provider-agnostic types for the LLM gateway.

All LLM consumers use these types instead of provider-specific ones.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional


class Role(str, Enum):
    """Message role."""
    SYSTEM = "system"
    USER = "user"
    ASSISTANT = "assistant"


@dataclass
class Message:
    """Provider-agnostic chat message."""
    role: Role
    content: str


@dataclass
class TokenUsage:
    """Token usage statistics."""
    prompt_tokens: int = 0
    completion_tokens: int = 0
    total_tokens: int = 0


@dataclass
class ChatRequest:
    """Provider-agnostic chat completion request.

    Reasoning-model quirks (max_completion_tokens, no temperature) are
    handled inside the provider.
    """
    messages: List[Message]
    model: str
    temperature: Optional[float] = None
    max_tokens: Optional[int] = None
    timeout: int = 120
    extra: Dict[str, Any] = field(default_factory=dict)


@dataclass
class ChatResponse:
    """Provider-agnostic chat completion response."""
    content: Optional[str] = None
    finish_reason: Optional[str] = None  # "stop", "length"
    model: Optional[str] = None
    usage: Optional[TokenUsage] = None
