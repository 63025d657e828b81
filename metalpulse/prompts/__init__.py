"""Prompt templates for the two LLM calls.

Structure:
    prompts/
    ├── __init__.py              # This file - main exports
    ├── news_filter_prompt.py    # Precious-metals relevance (YES/NO/NULL)
    └── post_prompt.py           # News-grounded and price-only post prompts
"""

from metalpulse.prompts.news_filter_prompt import NEWS_FILTER_PROMPT
from metalpulse.prompts.post_prompt import (
    MAX_POST_LENGTH,
    NEWS_POST_PROMPT,
    NO_EXTREMA_RULE,
    PRICE_POST_PROMPT,
)

__all__ = [
    "NEWS_FILTER_PROMPT",
    "MAX_POST_LENGTH",
    "NEWS_POST_PROMPT",
    "NO_EXTREMA_RULE",
    "PRICE_POST_PROMPT",
]
