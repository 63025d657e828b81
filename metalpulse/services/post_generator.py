"""Post text generation from an accepted article and/or the price snapshot."""

import json
import logging
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from metalpulse.config import settings
from metalpulse.core.exceptions import BotError, EmptyGeneration, GenerationError
from metalpulse.core.llm import ChatRequest, LLMGateway, Message, Role, get_llm_gateway
from metalpulse.prompts.post_prompt import (
    BOT_IDENTITY,
    ELLIPSIS,
    MAX_POST_LENGTH,
    NEWS_POST_PROMPT,
    NEWS_PRICE_USAGE_AVAILABLE,
    NEWS_PRICE_USAGE_MISSING,
    NO_EXTREMA_RULE,
    PRICE_BLOCK,
    PRICE_POST_PROMPT,
    PRICE_USAGE_AVAILABLE,
    PRICE_USAGE_MISSING,
    TRUNCATED_POST_LENGTH,
)
from metalpulse.schemas.metal_prices import PriceSnapshot
from metalpulse.schemas.settings import BotSettings
from metalpulse.services.news_service import NewsArticle

logger = logging.getLogger(__name__)


class PostSource(str, Enum):
    """Which inputs a post was generated from."""

    NEWS_WITH_PRICES = "news_with_prices"
    NEWS_ONLY = "news_only"
    PRICES_ONLY = "prices_only"
    PRICES_UNAVAILABLE = "prices_unavailable"


@dataclass(frozen=True)
class GeneratedPost:
    """Post text, at most MAX_POST_LENGTH characters."""

    text: str
    source: PostSource


def format_price(value: Optional[float]) -> str:
    """Format a per-ounce price as $1,234.56, or N/A."""
    if value is None:
        return "N/A"
    return f"${value:,.2f}"


def format_timestamp(value: Optional[str]) -> str:
    if not value:
        return "N/A"
    try:
        parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        return value
    try:
        parsed = parsed.astimezone(ZoneInfo(settings.POST_TIMEZONE))
    except ZoneInfoNotFoundError:
        logger.warning("Unknown POST_TIMEZONE %s, keeping original offset", settings.POST_TIMEZONE)
    return parsed.strftime("%m/%d/%Y, %I:%M:%S %p %Z").strip()


def format_price_block(prices: Optional[PriceSnapshot]) -> str:
    """Render the price section; every field falls back to N/A."""
    if prices is None:
        prices = PriceSnapshot.default()
    return PRICE_BLOCK.format(
        gold=format_price(prices.prices.XAU),
        silver=format_price(prices.prices.XAG),
        last_updated=format_timestamp(prices.last_updated),
    )


def has_price_data(prices: Optional[PriceSnapshot]) -> bool:
    return prices is not None and prices.prices.has_any()


@dataclass(frozen=True)
class PostPlan:
    """How a post is prompted for one combination of available inputs."""

    source: PostSource
    template: str
    price_usage: str


# (has_article, has_prices) -> plan. Missing prices still render as N/A in
# the price block.
POST_SOURCE_TABLE = {
    (True, True): PostPlan(
        PostSource.NEWS_WITH_PRICES, NEWS_POST_PROMPT, NEWS_PRICE_USAGE_AVAILABLE
    ),
    (True, False): PostPlan(
        PostSource.NEWS_ONLY, NEWS_POST_PROMPT, NEWS_PRICE_USAGE_MISSING
    ),
    (False, True): PostPlan(
        PostSource.PRICES_ONLY, PRICE_POST_PROMPT, PRICE_USAGE_AVAILABLE
    ),
    (False, False): PostPlan(
        PostSource.PRICES_UNAVAILABLE, PRICE_POST_PROMPT, PRICE_USAGE_MISSING
    ),
}


def plan_post(article: Optional[NewsArticle], prices: Optional[PriceSnapshot]) -> PostPlan:
    return POST_SOURCE_TABLE[(article is not None, has_price_data(prices))]


def classify_source(article: Optional[NewsArticle], prices: Optional[PriceSnapshot]) -> PostSource:
    return plan_post(article, prices).source


def build_post_prompt(
    article: Optional[NewsArticle],
    prices: Optional[PriceSnapshot],
    bot_settings: BotSettings,
) -> str:
    """Fill the template chosen by POST_SOURCE_TABLE for the available inputs."""
    plan = plan_post(article, prices)
    personality_instruction = (
        f"Personality: {bot_settings.personality}" if bot_settings.personality else ""
    )
    news_content = (
        json.dumps(article.to_prompt_dict(), indent=2, ensure_ascii=False)
        if article is not None
        else ""
    )
    # str.format ignores unused keywords, so the price-only template can
    # receive news_content too
    return plan.template.format(
        identity=BOT_IDENTITY,
        tone_instruction=f"Write in a {bot_settings.tone.value} tone.",
        personality_instruction=personality_instruction,
        no_extrema_rule=NO_EXTREMA_RULE,
        price_block=format_price_block(prices),
        price_usage=plan.price_usage,
        news_content=news_content,
    )


def enforce_length(raw: Optional[str]) -> str:
    """
    Bound generated text to MAX_POST_LENGTH.

    Over-long raw output keeps its first TRUNCATED_POST_LENGTH characters
    verbatim plus an ellipsis; anything else is stripped.

    Raises:
        EmptyGeneration: If nothing is left after trimming
    """
    raw = raw or ""
    if len(raw) > MAX_POST_LENGTH:
        text = raw[:TRUNCATED_POST_LENGTH] + ELLIPSIS
    else:
        text = raw.strip()
    if not text.strip():
        raise EmptyGeneration("Generated post text is empty")
    return text


class PostGenerator:
    """Composes one post with the generative model."""

    def __init__(
        self,
        gateway: Optional[LLMGateway] = None,
        model: Optional[str] = None,
    ) -> None:
        self._gateway = gateway
        self.model = model

    async def compose(
        self,
        article: Optional[NewsArticle],
        prices: Optional[PriceSnapshot],
        bot_settings: BotSettings,
    ) -> GeneratedPost:
        """
        Generate post text.

        Raises:
            EmptyGeneration: If the model returned nothing usable
            GenerationError: If the model call failed (ConfigError passes
                through unchanged)
        """
        prompt = build_post_prompt(article, prices, bot_settings)
        use_model = self.model or settings.OPENAI_MODEL
        gateway = self._gateway or get_llm_gateway()

        try:
            response = await gateway.chat(
                ChatRequest(
                    model=use_model,
                    messages=[Message(role=Role.USER, content=prompt)],
                ),
                purpose="post_generation",
            )
        except BotError:
            raise
        except Exception as e:
            logger.error("Post generation failed: %s", e)
            raise GenerationError(f"Failed to generate post text: {e}") from e

        text = enforce_length(response.content)
        source = classify_source(article, prices)
        logger.info("Generated %d-char post from %s", len(text), source.value)
        return GeneratedPost(text=text, source=source)


_post_generator: Optional[PostGenerator] = None


def get_post_generator() -> PostGenerator:
    """Get the singleton PostGenerator instance."""
    global _post_generator
    if _post_generator is None:
        _post_generator = PostGenerator()
    return _post_generator
