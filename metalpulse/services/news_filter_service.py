"""News filter service using an LLM to judge precious-metals relevance."""

import logging
from enum import Enum
from typing import Optional

from metalpulse.config import settings
from metalpulse.core.llm import ChatRequest, LLMGateway, Message, Role, get_llm_gateway
from metalpulse.prompts.news_filter_prompt import (
    ARTICLE_CONTENT_MAX_CHARS,
    NEWS_FILTER_PROMPT,
    NOT_RELEVANT_TOKEN,
    RELEVANT_TOKEN,
    UNDETERMINED_TOKEN,
)
from metalpulse.services.news_service import NewsArticle

logger = logging.getLogger(__name__)


class RelevanceVerdict(str, Enum):
    """Classifier outcome.

    UNDETERMINED covers ambiguous replies and classifier failures; it gates
    acceptance like NOT_RELEVANT but is reported separately.
    """

    RELEVANT = "relevant"
    NOT_RELEVANT = "not_relevant"
    UNDETERMINED = "undetermined"


def parse_verdict(text: Optional[str]) -> RelevanceVerdict:
    """Map the model's one-word reply to a verdict."""
    token = (text or "").strip().strip("\"'.!").upper()
    if token == RELEVANT_TOKEN:
        return RelevanceVerdict.RELEVANT
    if token == NOT_RELEVANT_TOKEN:
        return RelevanceVerdict.NOT_RELEVANT
    return RelevanceVerdict.UNDETERMINED


def build_filter_prompt(article: NewsArticle) -> str:
    content = article.content[:ARTICLE_CONTENT_MAX_CHARS] if article.content else "N/A"
    return NEWS_FILTER_PROMPT.format(
        title=article.title,
        description=article.description or "N/A",
        content=content,
        keywords=", ".join(article.keywords) or "N/A",
        relevant_token=RELEVANT_TOKEN,
        not_relevant_token=NOT_RELEVANT_TOKEN,
        undetermined_token=UNDETERMINED_TOKEN,
    )


class NewsFilterService:
    """
    Classifies articles one LLM call at a time.

    classify() never raises: any failure, including a missing API key,
    degrades to UNDETERMINED.
    """

    def __init__(
        self,
        gateway: Optional[LLMGateway] = None,
        model: Optional[str] = None,
    ) -> None:
        self._gateway = gateway
        self.model = model

    async def classify(self, article: NewsArticle) -> RelevanceVerdict:
        use_model = self.model or settings.filter_model
        gateway = self._gateway or get_llm_gateway()

        try:
            response = await gateway.chat(
                ChatRequest(
                    model=use_model,
                    messages=[Message(role=Role.USER, content=build_filter_prompt(article))],
                    temperature=0.0,
                ),
                purpose="news_filter",
            )
        except Exception as e:
            logger.error("Error analyzing article relevance: %s", e)
            return RelevanceVerdict.UNDETERMINED

        verdict = parse_verdict(response.content)
        if verdict == RelevanceVerdict.UNDETERMINED:
            logger.warning(
                "Undetermined relevance reply %r for article: %s",
                (response.content or "")[:20], article.title[:50],
            )
        else:
            logger.debug("Relevance %s - %s", verdict.value, article.title[:50])
        return verdict


_filter_service: Optional[NewsFilterService] = None


def get_news_filter_service() -> NewsFilterService:
    """Get the singleton NewsFilterService instance."""
    global _filter_service
    if _filter_service is None:
        _filter_service = NewsFilterService()
    return _filter_service
